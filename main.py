from __future__ import annotations

import logging
from typing import Optional

from fastapi import Body, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from inventory_export.config import AppConfig, get_config
from inventory_export.errors import InventoryExportError
from inventory_export.http import build_session
from inventory_export.pipeline import export_inventory
from inventory_export.responses import csv_response, error_response, message_response

# -------------------------
# App
# -------------------------
logging.basicConfig(
    level=get_config().log_level,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)
logger = logging.getLogger("inventory_export.api")

app = FastAPI(title="CS2 Inventory Export", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def on_request_validation_error(request: Request, exc: RequestValidationError):
    logger.info("Rejected request body on %s: %s", request.url.path, exc.errors())
    return message_response(400, "Profile URL is required.")


# -------------------------
# Routes
# -------------------------
@app.get("/")
def read_root():
    return {"message": "Welcome to the CS2 Inventory Export API. POST a profile URL to /api/get-inventory."}


@app.get("/health")
def health():
    return {"ok": True}


@app.post("/api/get-inventory")
def get_inventory(
    profile_url: Optional[str] = Body(None, embed=True, alias="profileUrl"),
    config: AppConfig = Depends(get_config),
):
    try:
        with build_session(config) as session:
            result = export_inventory(profile_url, config, session)
    except InventoryExportError as e:
        logger.warning("Export failed for %r: %s (%s)", profile_url, e.message, type(e).__name__)
        return error_response(e)
    except Exception:
        logger.exception("Unexpected error exporting %r", profile_url)
        return message_response(500, "An internal server error occurred.")
    return csv_response(result.content, result.file_name)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=get_config().port)
