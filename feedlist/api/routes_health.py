"""Health check endpoints for the Feed List Organizer API."""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from redis.asyncio import Redis
from redis.exceptions import RedisError
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from feedlist.api.dependencies import get_redis
from feedlist.db.session import get_session

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/healthz")
async def health_check():
    """Liveness probe; the process is up."""
    return {"ok": True}


@router.get("/readyz")
async def readiness_check(
    db: AsyncSession = Depends(get_session),
    redis: Redis = Depends(get_redis),
):
    """
    Readiness check against the feed database and the preference store.

    Returns:
        200 with {"ok": true, "database": true, "redis": true} when both answer,
        503 with the failing backend marked false otherwise
    """
    checks = {"database": True, "redis": True}

    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.warning("Readiness: database unavailable", exc_info=True)
        checks["database"] = False

    try:
        await redis.ping()
    except RedisError:
        logger.warning("Readiness: redis unavailable", exc_info=True)
        checks["redis"] = False

    ok = all(checks.values())
    return JSONResponse(status_code=200 if ok else 503, content={"ok": ok, **checks})
