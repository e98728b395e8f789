"""Relational storage over one SQLAlchemy ``AsyncSession``.

Writes are flushed into the session's transaction; they become durable on
``commit()`` and are discarded by ``rollback()``.
"""

from __future__ import annotations

import functools
from collections.abc import Awaitable, Callable
from datetime import date, datetime, timezone
from typing import TYPE_CHECKING, Any, ParamSpec, TypeVar

import structlog
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from magilearn.db import models
from magilearn.errors import StorageUnavailable
from magilearn.storage.base import Storage
from magilearn.storage.entities import (
    Achievement,
    DailySpinAllowance,
    GameStats,
    Progress,
    UnlockedGame,
    User,
    spins_remaining_for,
)

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()

P = ParamSpec("P")
T = TypeVar("T")


def _storage_errors(fn: Callable[P, Awaitable[T]]) -> Callable[P, Awaitable[T]]:
    """Translate SQLAlchemy faults into StorageUnavailable."""

    @functools.wraps(fn)
    async def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
        try:
            return await fn(*args, **kwargs)
        except SQLAlchemyError as e:
            logger.error("storage_error", operation=fn.__name__, error=str(e))
            raise StorageUnavailable from e

    return wrapper


class SqlStorage(Storage):
    """Database backend bound to a single request-scoped session."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    # --- Users ---

    async def _user_row(self, user_id: str) -> models.User | None:
        result = await self.session.execute(select(models.User).where(models.User.id == user_id))
        return result.scalar_one_or_none()

    @_storage_errors
    async def get_user(self, user_id: str) -> User | None:
        row = await self._user_row(user_id)
        return User.model_validate(row) if row else None

    @_storage_errors
    async def get_user_by_username(self, username: str) -> User | None:
        result = await self.session.execute(select(models.User).where(models.User.username == username))
        row = result.scalar_one_or_none()
        return User.model_validate(row) if row else None

    @_storage_errors
    async def get_user_by_email(self, email: str) -> User | None:
        result = await self.session.execute(
            select(models.User).where(func.lower(models.User.email) == email.lower())
        )
        row = result.scalar_one_or_none()
        return User.model_validate(row) if row else None

    @_storage_errors
    async def create_user(
        self,
        username: str,
        password_hash: str,
        user_id: str | None = None,
        **profile: Any,
    ) -> User:
        row = models.User(
            username=username,
            password_hash=password_hash,
            created_at=datetime.now(timezone.utc),
            interests=profile.pop("interests", None) or [],
            subjects=profile.pop("subjects", None) or [],
            accessibility_needs=profile.pop("accessibility_needs", None) or [],
            **profile,
        )
        if user_id is not None:
            row.id = user_id
        self.session.add(row)
        await self.session.flush()
        return User.model_validate(row)

    @_storage_errors
    async def update_user(self, user_id: str, **fields: Any) -> User | None:
        row = await self._user_row(user_id)
        if row is None:
            return None
        for key, value in fields.items():
            setattr(row, key, value)
        await self.session.flush()
        return User.model_validate(row)

    # --- Progress ---

    async def _progress_row(self, user_id: str) -> models.UserProgress | None:
        result = await self.session.execute(
            select(models.UserProgress).where(models.UserProgress.user_id == user_id)
        )
        return result.scalar_one_or_none()

    @_storage_errors
    async def get_progress(self, user_id: str) -> Progress | None:
        row = await self._progress_row(user_id)
        return Progress.model_validate(row) if row else None

    @_storage_errors
    async def update_progress(self, user_id: str, **fields: Any) -> Progress:
        row = await self._progress_row(user_id)
        if row is None:
            defaults = Progress(id="", user_id=user_id).model_dump(exclude={"id", "user_id"})
            row = models.UserProgress(user_id=user_id, **defaults)
            self.session.add(row)
        for key, value in fields.items():
            setattr(row, key, value)
        await self.session.flush()
        return Progress.model_validate(row)

    # --- Daily spins ---

    async def _daily_spins_row(self, user_id: str, day: date, lock: bool = False) -> models.DailySpins | None:
        stmt = select(models.DailySpins).where(
            models.DailySpins.user_id == user_id,
            models.DailySpins.date == day,
        )
        if lock:
            stmt = stmt.with_for_update()
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    @_storage_errors
    async def get_daily_spins(
        self, user_id: str, day: date, *, lock: bool = False
    ) -> DailySpinAllowance | None:
        row = await self._daily_spins_row(user_id, day, lock=lock)
        return DailySpinAllowance.model_validate(row) if row else None

    @_storage_errors
    async def update_daily_spins(self, user_id: str, day: date, spins_used: int) -> DailySpinAllowance:
        row = await self._daily_spins_row(user_id, day)
        if row is None:
            row = models.DailySpins(user_id=user_id, date=day)
            self.session.add(row)
        row.spins_used = spins_used
        row.spins_remaining = spins_remaining_for(spins_used)
        await self.session.flush()
        return DailySpinAllowance.model_validate(row)

    # --- Unlocked games ---

    @_storage_errors
    async def get_unlocked_games(self, user_id: str) -> list[UnlockedGame]:
        result = await self.session.execute(
            select(models.UnlockedGame)
            .where(models.UnlockedGame.user_id == user_id)
            .order_by(models.UnlockedGame.unlocked_at)
        )
        return [UnlockedGame.model_validate(row) for row in result.scalars()]

    @_storage_errors
    async def unlock_game(self, user_id: str, game_id: str) -> UnlockedGame:
        row = models.UnlockedGame(
            user_id=user_id,
            game_id=game_id,
            unlocked_at=datetime.now(timezone.utc),
        )
        self.session.add(row)
        await self.session.flush()
        return UnlockedGame.model_validate(row)

    # --- Achievements ---

    @_storage_errors
    async def get_achievements(self, user_id: str) -> list[Achievement]:
        result = await self.session.execute(
            select(models.Achievement)
            .where(models.Achievement.user_id == user_id)
            .order_by(models.Achievement.earned_at)
        )
        return [Achievement.model_validate(row) for row in result.scalars()]

    @_storage_errors
    async def add_achievement(
        self, user_id: str, achievement_id: str, title: str, description: str
    ) -> Achievement:
        row = models.Achievement(
            user_id=user_id,
            achievement_id=achievement_id,
            title=title,
            description=description,
            earned_at=datetime.now(timezone.utc),
        )
        self.session.add(row)
        await self.session.flush()
        return Achievement.model_validate(row)

    # --- Game stats ---

    async def _game_stats_row(self, user_id: str, game_id: str) -> models.GameStats | None:
        result = await self.session.execute(
            select(models.GameStats).where(
                models.GameStats.user_id == user_id,
                models.GameStats.game_id == game_id,
            )
        )
        return result.scalar_one_or_none()

    @_storage_errors
    async def get_game_stats(self, user_id: str, game_id: str) -> GameStats | None:
        row = await self._game_stats_row(user_id, game_id)
        return GameStats.model_validate(row) if row else None

    @_storage_errors
    async def list_game_stats(self, user_id: str) -> list[GameStats]:
        result = await self.session.execute(
            select(models.GameStats).where(models.GameStats.user_id == user_id)
        )
        return [GameStats.model_validate(row) for row in result.scalars()]

    @_storage_errors
    async def update_game_stats(self, user_id: str, game_id: str, **fields: Any) -> GameStats:
        row = await self._game_stats_row(user_id, game_id)
        if row is None:
            row = models.GameStats(
                user_id=user_id,
                game_id=game_id,
                times_played=0,
                best_score=0,
                total_xp_earned=0,
            )
            self.session.add(row)
        for key, value in fields.items():
            setattr(row, key, value)
        row.last_played = datetime.now(timezone.utc)
        await self.session.flush()
        return GameStats.model_validate(row)

    # --- Unit of work ---

    @_storage_errors
    async def commit(self) -> None:
        await self.session.commit()

    @_storage_errors
    async def rollback(self) -> None:
        await self.session.rollback()
