"""ORM models for the relational storage backend.

One table per entity kind, all foreign-keyed to ``users.id``.
"""

from __future__ import annotations

import uuid
from datetime import date as date_type
from datetime import datetime
from typing import Any

from sqlalchemy import (
    JSON,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from magilearn.db.base import Base

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)
JSONType = JSON().with_variant(JSONB(), "postgresql")


def _uuid() -> str:
    return str(uuid.uuid4())


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


class User(Base):
    """Maps to the 'users' table."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_uuid)
    username: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(256), nullable=False)
    email: Mapped[str | None] = mapped_column(String(320), unique=True, nullable=True)

    # --- Learning profile (survey) ---
    name: Mapped[str | None] = mapped_column(String(128), nullable=True)
    age: Mapped[int | None] = mapped_column(Integer, nullable=True)
    class_label: Mapped[str | None] = mapped_column(String(64), nullable=True)
    special_need: Mapped[str | None] = mapped_column(String(32), nullable=True)
    learning_style: Mapped[str | None] = mapped_column(String(32), nullable=True)
    interests: Mapped[list[str]] = mapped_column(JSONType, default=list)
    subjects: Mapped[list[str]] = mapped_column(JSONType, default=list)
    current_mood: Mapped[str | None] = mapped_column(Text, nullable=True)
    accessibility_needs: Mapped[list[str]] = mapped_column(JSONType, default=list)
    ai_learning_profile: Mapped[dict[str, Any] | None] = mapped_column(JSONType, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )


# ---------------------------------------------------------------------------
# Progress
# ---------------------------------------------------------------------------


class UserProgress(Base):
    """Experience points and skill percentages, one row per user."""

    __tablename__ = "user_progress"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_uuid)
    user_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    total_xp: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    math_skills: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    english_skills: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    science_skills: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    coding_skills: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    art_skills: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    language_skills: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    problem_solving: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    memory_skills: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    learning_streak: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    last_active_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)


# ---------------------------------------------------------------------------
# Daily spins
# ---------------------------------------------------------------------------


class DailySpins(Base):
    """Spin allowance for one user on one calendar date."""

    __tablename__ = "daily_spins"
    __table_args__ = (UniqueConstraint("user_id", "date", name="daily_spins_user_id_date_key"),)

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_uuid)
    user_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    date: Mapped[date_type] = mapped_column(Date, nullable=False)
    spins_used: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    spins_remaining: Mapped[int] = mapped_column(Integer, default=3, nullable=False)


# ---------------------------------------------------------------------------
# Unlocked games & achievements
# ---------------------------------------------------------------------------


class UnlockedGame(Base):
    """A game made available to a user. Uniqueness is checked by the service."""

    __tablename__ = "unlocked_games"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_uuid)
    user_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    game_id: Mapped[str] = mapped_column(String(64), nullable=False)
    unlocked_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class Achievement(Base):
    """An achievement earned by a user."""

    __tablename__ = "achievements"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_uuid)
    user_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    achievement_id: Mapped[str] = mapped_column(String(64), nullable=False)
    title: Mapped[str] = mapped_column(String(128), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    earned_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


# ---------------------------------------------------------------------------
# Game stats
# ---------------------------------------------------------------------------


class GameStats(Base):
    """Per-game play statistics for a user."""

    __tablename__ = "game_stats"
    __table_args__ = (UniqueConstraint("user_id", "game_id", name="game_stats_user_id_game_id_key"),)

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_uuid)
    user_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    game_id: Mapped[str] = mapped_column(String(64), nullable=False)
    times_played: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    best_score: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    total_xp_earned: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    last_played: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
