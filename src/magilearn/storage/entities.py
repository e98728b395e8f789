"""Entity records returned by every storage backend.

Both backends hand out these pydantic models so services never see ORM rows
or raw dicts. ``from_attributes`` lets the SQL backend validate ORM objects
directly.
"""

from __future__ import annotations

from datetime import date as date_type
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

DAILY_SPIN_CAP = 3

SKILL_FIELDS: tuple[str, ...] = (
    "math_skills",
    "english_skills",
    "science_skills",
    "coding_skills",
    "art_skills",
    "language_skills",
    "problem_solving",
    "memory_skills",
)


def spins_remaining_for(spins_used: int) -> int:
    """Remaining spins for a given used count, never negative."""
    return max(0, DAILY_SPIN_CAP - spins_used)


class Entity(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class User(Entity):
    id: str
    username: str
    password_hash: str
    email: str | None = None
    name: str | None = None
    age: int | None = None
    class_label: str | None = None
    special_need: str | None = None
    learning_style: str | None = None
    interests: list[str] = Field(default_factory=list)
    subjects: list[str] = Field(default_factory=list)
    current_mood: str | None = None
    accessibility_needs: list[str] = Field(default_factory=list)
    ai_learning_profile: dict[str, Any] | None = None
    created_at: datetime | None = None


class Progress(Entity):
    id: str
    user_id: str
    total_xp: int = 0
    math_skills: int = 0
    english_skills: int = 0
    science_skills: int = 0
    coding_skills: int = 0
    art_skills: int = 0
    language_skills: int = 0
    problem_solving: int = 0
    memory_skills: int = 0
    learning_streak: int = 0
    last_active_date: datetime | None = None

    def skills(self) -> dict[str, int]:
        """Skill percentages keyed by field name."""
        return {name: getattr(self, name) for name in SKILL_FIELDS}


class DailySpinAllowance(Entity):
    id: str | None = None
    user_id: str
    date: date_type
    spins_used: int = 0
    spins_remaining: int = DAILY_SPIN_CAP


class UnlockedGame(Entity):
    id: str
    user_id: str
    game_id: str
    unlocked_at: datetime


class Achievement(Entity):
    id: str
    user_id: str
    achievement_id: str
    title: str
    description: str
    earned_at: datetime


class GameStats(Entity):
    id: str
    user_id: str
    game_id: str
    times_played: int = 0
    best_score: int = 0
    total_xp_earned: int = 0
    last_played: datetime | None = None
