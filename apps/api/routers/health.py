"""
Health check endpoints. All of them are public.
"""

import logging
from pathlib import Path
from typing import Dict

from fastapi import APIRouter
from fastapi.responses import JSONResponse
import redis.asyncio as redis
from redis.exceptions import RedisError
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from config import settings, validate_security_settings
from database import engine

router = APIRouter()
logger = logging.getLogger(__name__)


async def _database_status() -> str:
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as exc:
        logger.warning("Database health check failed: %s", exc)
        return f"down: {exc}"
    return "up"


async def _redis_status() -> str:
    try:
        client = redis.from_url(settings.REDIS_URL)
        try:
            await client.ping()
        finally:
            await client.aclose()
    except (RedisError, OSError) as exc:
        return f"down: {exc}"
    return "up"


def _upload_dir_status() -> str:
    root = Path(settings.UPLOAD_DIR).expanduser()
    if not root.exists():
        return "missing (created on first upload)"
    return "up" if root.is_dir() else "down: not a directory"


@router.get("/health")
async def health_check():
    """
    Health check endpoint.
    The database is the only hard dependency; Redis backs rate limiting and
    falls back to in-process counters, so it never degrades the status.
    """
    checks: Dict[str, str] = {
        "api": "up",
        "database": await _database_status(),
        "redis": await _redis_status(),
        "uploads": _upload_dir_status(),
        "homework_reminders": "enabled" if settings.HOMEWORK_REMINDER_ENABLED else "disabled",
    }
    status = "healthy" if checks["database"] == "up" else "degraded"
    return {"status": status, **checks}


@router.get("/health/ready")
async def readiness_check():
    """Ready once secrets are configured and the database answers."""
    try:
        validate_security_settings()
    except ValueError as exc:
        return JSONResponse(status_code=503, content={"ready": False, "reason": str(exc)})

    database = await _database_status()
    if database != "up":
        return JSONResponse(status_code=503, content={"ready": False, "reason": f"database {database}"})
    return {"ready": True}


@router.get("/health/live")
async def liveness_check():
    return {"alive": True}
