"""Pydantic schemas for progression results and API responses."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel

from magilearn.storage.entities import (
    Achievement,
    DailySpinAllowance,
    Progress,
    UnlockedGame,
)


class SpinReward(BaseModel):
    type: Literal["game", "xp"]
    game_id: str | None = None
    xp: int


class SpinResult(BaseModel):
    spins: DailySpinAllowance
    reward: SpinReward


class ProgressSnapshot(BaseModel):
    progress: Progress | None
    spins: DailySpinAllowance
    unlocked_games: list[UnlockedGame]
    achievements: list[Achievement]


class ContinueLearningResponse(BaseModel):
    progress: Progress
    message: str


