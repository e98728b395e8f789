"""Liveness, readiness and version probes."""

from fastapi import APIRouter
from redis.exceptions import RedisError
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from magilearn import database
from magilearn.config import get_settings
from magilearn.redis_client import get_redis, is_redis_initialized

router = APIRouter()


@router.get("/health")
async def health() -> dict[str, str]:
    """Liveness probe — returns 200 if the process is alive."""
    return {"status": "healthy"}


@router.get("/ready")
async def readiness() -> dict[str, object]:
    """Readiness probe.

    Checks only the dependencies this deployment uses: the database for the
    database backend, Redis when rate limiting is configured.
    """
    settings = get_settings()
    checks: dict[str, object] = {"storage": settings.storage_backend}

    if settings.storage_backend == "database":
        if not database.is_initialized():
            checks["database"] = "error: not initialized"
        else:
            try:
                async with database.get_engine().connect() as conn:
                    await conn.execute(text("SELECT 1"))
                checks["database"] = "ok"
            except SQLAlchemyError as exc:
                checks["database"] = f"error: {exc}"

    if is_redis_initialized():
        try:
            await get_redis().ping()
            checks["redis"] = "ok"
        except RedisError as exc:
            checks["redis"] = f"error: {exc}"

    all_ok = all(v == "ok" for k, v in checks.items() if k != "storage")
    return {"status": "ready" if all_ok else "degraded", "checks": checks}


@router.get("/version")
async def version() -> dict[str, str]:
    """Return API version and environment."""
    settings = get_settings()
    return {
        "version": settings.app_version,
        "environment": settings.environment,
    }
