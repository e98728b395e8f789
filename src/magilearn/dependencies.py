"""Shared FastAPI dependencies: storage selection and service wiring."""

from collections.abc import AsyncGenerator
from functools import lru_cache

from fastapi import Depends

from magilearn.ai.service import RecommendationService
from magilearn.config import get_settings
from magilearn.database import session_scope
from magilearn.progression.service import ProgressionService
from magilearn.storage import MemoryStorage, SqlStorage, Storage
from magilearn.users.survey import SurveyService

_memory_storage: MemoryStorage | None = None


def get_memory_storage() -> MemoryStorage:
    """Process-wide memory backend, created on first use."""
    global _memory_storage  # noqa: PLW0603
    if _memory_storage is None:
        _memory_storage = MemoryStorage()
    return _memory_storage


def reset_memory_storage() -> None:
    """Drop the memory backend (tests)."""
    global _memory_storage  # noqa: PLW0603
    _memory_storage = None


async def get_storage() -> AsyncGenerator[Storage, None]:
    """Yield the configured storage backend for one request."""
    if get_settings().storage_backend == "memory":
        yield get_memory_storage()
        return
    async with session_scope() as session:
        yield SqlStorage(session)


def get_progression_service(storage: Storage = Depends(get_storage)) -> ProgressionService:
    return ProgressionService(storage)


def get_survey_service(storage: Storage = Depends(get_storage)) -> SurveyService:
    return SurveyService(storage)


@lru_cache
def get_recommendation_service() -> RecommendationService:
    """Cached recommender built from settings."""
    return RecommendationService.from_settings(get_settings())
