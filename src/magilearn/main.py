"""FastAPI application factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from magilearn.ai.router import router as ai_router
from magilearn.auth.router import router as auth_router
from magilearn.config import get_settings
from magilearn.database import close_db, create_tables, init_db, session_scope
from magilearn.dependencies import get_memory_storage
from magilearn.errors import StorageUnavailable
from magilearn.games.router import router as games_router
from magilearn.health.router import router as health_router
from magilearn.middleware import setup_middleware
from magilearn.redis_client import close_redis, init_redis
from magilearn.storage import SqlStorage
from magilearn.storage.seed import seed_demo_user
from magilearn.users.router import router as users_router

logger = logging.getLogger(__name__)


async def _seed(user_id: str) -> None:
    """Create the placeholder learner in whichever backend is configured."""
    settings = get_settings()
    if settings.storage_backend == "memory":
        await seed_demo_user(get_memory_storage(), user_id)
        return
    try:
        async with session_scope() as session:
            await seed_demo_user(SqlStorage(session), user_id)
    except StorageUnavailable:
        logger.warning("Demo user seeding failed (tables may not exist yet)", exc_info=True)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup and shutdown lifecycle."""
    settings = get_settings()
    if settings.storage_backend == "database":
        await init_db(settings.database_url)
        if settings.database_create_tables:
            await create_tables()
    await init_redis(settings.redis_url)

    if settings.seed_demo_user:
        await _seed(settings.default_user_id)

    yield

    await close_db()
    await close_redis()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="MagiLearn API",
        description="Backend API for MagiLearn — daily spins, mini-games and adaptive learning for kids",
        version=settings.app_version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    setup_middleware(app, settings)
    app.include_router(health_router, tags=["Health"])
    app.include_router(auth_router)
    app.include_router(users_router)
    app.include_router(games_router)
    app.include_router(ai_router)

    return app


app = create_app()
