from fastapi.responses import JSONResponse, Response

from inventory_export.errors import InventoryExportError

CSV_MEDIA_TYPE = "text/csv"


def csv_file_name(prefix: str, steam_id: str) -> str:
    return f"{prefix}_{steam_id}.csv"


def csv_response(content: str, file_name: str) -> Response:
    return Response(
        content=content,
        status_code=200,
        media_type=CSV_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{file_name}"'},
    )


def message_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message})


def error_response(error: InventoryExportError) -> JSONResponse:
    return message_response(error.status_code, error.message)
