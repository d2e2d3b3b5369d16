# app/routers/health.py

import time
import psutil
from fastapi import APIRouter
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app.config import APP_ENV, PORT
from app.database import engine
from app.responses import utc_now_iso
from app.services.cache_factory import get_cache_service

router = APIRouter(prefix="/health", tags=["health"])

_started_at = time.monotonic()


def _memory_usage() -> dict:
    """Current resident and virtual memory of this process, in bytes."""
    info = psutil.Process().memory_info()
    return {"rss": info.rss, "vms": info.vms}


@router.get("/ping")
def ping():
    return {"message": "pong", "timestamp": utc_now_iso()}


@router.get("")
def health_check():
    """
    Liveness plus dependency status. Never fails: a database error is
    reported in-band so the endpoint stays usable for liveness checks.
    """
    cache = get_cache_service()
    body = {
        "status": "ok",
        "timestamp": utc_now_iso(),
        "uptime": round(time.monotonic() - _started_at, 3),
        "environment": APP_ENV,
        "port": PORT,
        "cache": {"backend": cache.backend_name, "state": cache.state},
        "memory": _memory_usage(),
    }
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        body["db"] = "connected"
    except SQLAlchemyError as e:
        body["status"] = "error"
        body["db"] = str(e)
    return body
