# app/responses.py

from datetime import datetime, timezone
from typing import Any
from fastapi.responses import JSONResponse


def utc_now_iso() -> str:
    """Current UTC time as ISO8601 with a 'Z' suffix."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def envelope(data: Any, status_code: int = 200) -> JSONResponse:
    """Wrap a successful API payload as {"data", "statusCode", "timestamp"}."""
    return JSONResponse(
        status_code=status_code,
        content={"data": data, "statusCode": status_code, "timestamp": utc_now_iso()},
    )
