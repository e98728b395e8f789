"""Learner router — all /api/user/* endpoints."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any

from fastapi import APIRouter, Body, Depends

from magilearn.auth.dependencies import get_current_user_id
from magilearn.dependencies import get_progression_service, get_storage, get_survey_service
from magilearn.errors import UserNotFound
from magilearn.progression.schemas import ContinueLearningResponse, ProgressSnapshot, SpinResult
from magilearn.progression.service import ProgressionService
from magilearn.storage.base import Storage
from magilearn.storage.entities import Achievement, DailySpinAllowance, Progress, UnlockedGame
from magilearn.users.schemas import UserResponse
from magilearn.users.survey import SurveyService

router = APIRouter(prefix="/api/user", tags=["User"])


def _today() -> date:
    """Spin allowances are keyed by the UTC calendar date."""
    return datetime.now(timezone.utc).date()


# ---------------------------------------------------------------------------
# Profile
# ---------------------------------------------------------------------------


@router.get("/current", response_model=UserResponse)
async def get_current_user(
    user_id: str = Depends(get_current_user_id),
    storage: Storage = Depends(get_storage),
) -> UserResponse:
    user = await storage.get_user(user_id)
    if user is None:
        raise UserNotFound
    return UserResponse.model_validate(user)


@router.post("/survey", response_model=UserResponse)
async def submit_survey(
    payload: dict[str, Any] = Body(...),
    user_id: str = Depends(get_current_user_id),
    survey: SurveyService = Depends(get_survey_service),
) -> UserResponse:
    """Store the onboarding survey. Invalid answers are a 400 with field errors."""
    user = await survey.submit(user_id, payload)
    return UserResponse.model_validate(user)


# ---------------------------------------------------------------------------
# Progress
# ---------------------------------------------------------------------------


@router.get("/progress", response_model=Progress)
async def get_progress(
    user_id: str = Depends(get_current_user_id),
    progression: ProgressionService = Depends(get_progression_service),
) -> Progress:
    return await progression.get_progress(user_id)


@router.post("/continue-learning", response_model=ContinueLearningResponse)
async def continue_learning(
    user_id: str = Depends(get_current_user_id),
    progression: ProgressionService = Depends(get_progression_service),
) -> ContinueLearningResponse:
    return await progression.continue_learning(user_id)


@router.get("/snapshot", response_model=ProgressSnapshot)
async def get_snapshot(
    user_id: str = Depends(get_current_user_id),
    progression: ProgressionService = Depends(get_progression_service),
) -> ProgressSnapshot:
    """Progress, today's spins, unlocked games and achievements in one read."""
    return await progression.get_snapshot(user_id, _today())


# ---------------------------------------------------------------------------
# Daily spins
# ---------------------------------------------------------------------------


@router.get("/spins", response_model=DailySpinAllowance)
async def get_spins(
    user_id: str = Depends(get_current_user_id),
    progression: ProgressionService = Depends(get_progression_service),
) -> DailySpinAllowance:
    return await progression.get_or_create_daily_spins(user_id, _today())


@router.post("/spin", response_model=SpinResult)
async def spin(
    user_id: str = Depends(get_current_user_id),
    progression: ProgressionService = Depends(get_progression_service),
) -> SpinResult:
    return await progression.consume_spin(user_id, _today())


# ---------------------------------------------------------------------------
# Unlocks
# ---------------------------------------------------------------------------


@router.get("/games", response_model=list[UnlockedGame])
async def get_unlocked_games(
    user_id: str = Depends(get_current_user_id),
    progression: ProgressionService = Depends(get_progression_service),
) -> list[UnlockedGame]:
    return await progression.get_unlocked_games(user_id)


@router.get("/achievements", response_model=list[Achievement])
async def get_achievements(
    user_id: str = Depends(get_current_user_id),
    progression: ProgressionService = Depends(get_progression_service),
) -> list[Achievement]:
    return await progression.get_achievements(user_id)
