import csv
import io
from typing import Any, Mapping, Sequence


def _field_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def encode_csv(rows: Sequence[Mapping[str, Any]]) -> str:
    """
    Render rows as CSV text.

    The header comes from the first row's keys, unquoted. Every data field is
    double-quoted with embedded quotes doubled. Absent and None values render
    as empty fields. Lines are joined with "\\n" and there is no trailing
    newline; no rows gives "".
    """
    if not rows:
        return ""
    headers = list(rows[0].keys())

    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n")
    for row in rows:
        writer.writerow([_field_text(row.get(h)) for h in headers])

    body = buf.getvalue()
    if body.endswith("\n"):
        body = body[:-1]
    return ",".join(headers) + "\n" + body
