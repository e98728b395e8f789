"""AI router — learning profile, recommendations and difficulty advice."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends

from magilearn.ai.schemas import (
    AnalyzeProgressResponse,
    DifficultyAdvice,
    DifficultyRequest,
    RecommendationsResponse,
)
from magilearn.ai.service import RecommendationService
from magilearn.auth.dependencies import get_current_user_id
from magilearn.dependencies import get_recommendation_service, get_storage
from magilearn.errors import ProgressNotFound, UserNotFound
from magilearn.storage.base import Storage
from magilearn.storage.entities import Progress, User

logger = structlog.get_logger()

router = APIRouter(prefix="/api/ai", tags=["AI"])


async def _load_learner(storage: Storage, user_id: str) -> tuple[User, Progress]:
    user = await storage.get_user(user_id)
    if user is None:
        raise UserNotFound
    progress = await storage.get_progress(user_id)
    if progress is None:
        raise ProgressNotFound
    return user, progress


@router.get("/recommendations", response_model=RecommendationsResponse)
async def get_recommendations(
    user_id: str = Depends(get_current_user_id),
    storage: Storage = Depends(get_storage),
    recommender: RecommendationService = Depends(get_recommendation_service),
) -> RecommendationsResponse:
    """Three activity ideas for today."""
    user, progress = await _load_learner(storage, user_id)
    items = await recommender.get_personalized_recommendations(user, progress)
    return RecommendationsResponse(recommendations=items)


@router.post("/analyze-progress", response_model=AnalyzeProgressResponse)
async def analyze_progress(
    user_id: str = Depends(get_current_user_id),
    storage: Storage = Depends(get_storage),
    recommender: RecommendationService = Depends(get_recommendation_service),
) -> AnalyzeProgressResponse:
    """Re-analyze the learner and cache the profile on the user record."""
    user, progress = await _load_learner(storage, user_id)
    game_stats = await storage.list_game_stats(user_id)
    profile = await recommender.generate_learning_profile(user, progress, game_stats)

    await storage.update_user(user_id, ai_learning_profile=profile.model_dump(mode="json"))
    await storage.commit()
    logger.info("learning_profile_updated", user_id=user_id, adaptive_difficulty=profile.adaptive_difficulty)
    return AnalyzeProgressResponse(profile=profile)


@router.post("/games/{game_id}/difficulty", response_model=DifficultyAdvice)
async def adapt_difficulty(
    game_id: str,
    body: DifficultyRequest,
    recommender: RecommendationService = Depends(get_recommendation_service),
) -> DifficultyAdvice:
    return await recommender.adapt_game_difficulty(game_id, body.score, body.time_spent, body.mistakes)
