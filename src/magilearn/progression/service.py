"""Progression business logic: daily spins, unlocks, XP and skill percentages.

Every mutating operation runs under the user's lock and inside one unit of
work: it commits when the operation returns and rolls back when it raises.
Whether a rollback actually undoes earlier writes depends on the backend
(the database backend does, the memory backend does not).
"""

from __future__ import annotations

import random
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import date, datetime, timezone

import structlog

from magilearn.errors import NoSpinsRemaining, ProgressNotFound, ValidationFailed
from magilearn.games.catalog import LOCKABLE_GAMES, skill_field_for
from magilearn.progression.locks import UserLocks, user_locks
from magilearn.progression.rules import (
    CONTINUE_LEARNING_MESSAGE,
    CONTINUE_LEARNING_SKILL_BOOST,
    CONTINUE_LEARNING_XP,
    GAME_SKILL_BOOST,
    SPIN_XP_REWARD,
    bump_skill,
)
from magilearn.progression.schemas import (
    ContinueLearningResponse,
    ProgressSnapshot,
    SpinResult,
    SpinReward,
)
from magilearn.storage.base import Storage
from magilearn.storage.entities import (
    Achievement,
    DailySpinAllowance,
    GameStats,
    Progress,
    UnlockedGame,
    spins_remaining_for,
)

logger = structlog.get_logger()


class ProgressionService:
    """Reward and progress accounting for one storage backend."""

    def __init__(
        self,
        storage: Storage,
        rng: random.Random | None = None,
        locks: UserLocks | None = None,
    ) -> None:
        self.storage = storage
        self.rng = rng or random.Random()
        self.locks = locks or user_locks

    @asynccontextmanager
    async def _unit_of_work(self, user_id: str) -> AsyncIterator[None]:
        async with self.locks.get(user_id):
            try:
                yield
            except Exception:
                await self.storage.rollback()
                raise
            await self.storage.commit()

    # ------------------------------------------------------------------
    # Daily spins
    # ------------------------------------------------------------------

    async def get_or_create_daily_spins(self, user_id: str, today: date) -> DailySpinAllowance:
        """Return today's allowance, creating a zero-used one if absent."""
        async with self._unit_of_work(user_id):
            allowance = await self.storage.get_daily_spins(user_id, today)
            if allowance is None:
                allowance = await self.storage.update_daily_spins(user_id, today, spins_used=0)
        return allowance

    async def consume_spin(self, user_id: str, today: date) -> SpinResult:
        """Use one of today's spins.

        Grants 50 XP and, while any lockable game is still locked for the
        user, unlocks one of them picked uniformly at random.

        Raises:
            NoSpinsRemaining: today's cap is used up; nothing is written.
        """
        async with self._unit_of_work(user_id):
            allowance = await self.storage.get_daily_spins(user_id, today, lock=True)
            spins_used = allowance.spins_used if allowance else 0
            if spins_remaining_for(spins_used) <= 0:
                raise NoSpinsRemaining

            spins = await self.storage.update_daily_spins(user_id, today, spins_used=spins_used + 1)

            unlocked = {g.game_id for g in await self.storage.get_unlocked_games(user_id)}
            candidates = [g for g in LOCKABLE_GAMES if g not in unlocked]
            game_id = self.rng.choice(candidates) if candidates else None
            if game_id is not None:
                await self.storage.unlock_game(user_id, game_id)

            progress = await self.storage.get_progress(user_id)
            total_xp = (progress.total_xp if progress else 0) + SPIN_XP_REWARD
            await self.storage.update_progress(user_id, total_xp=total_xp)

        if game_id is not None:
            reward = SpinReward(type="game", game_id=game_id, xp=SPIN_XP_REWARD)
        else:
            reward = SpinReward(type="xp", xp=SPIN_XP_REWARD)

        logger.info(
            "spin_consumed",
            user_id=user_id,
            date=today.isoformat(),
            spins_remaining=spins.spins_remaining,
            reward=reward.type,
            game_id=game_id,
        )
        return SpinResult(spins=spins, reward=reward)

    # ------------------------------------------------------------------
    # Games
    # ------------------------------------------------------------------

    async def record_game_result(
        self,
        user_id: str,
        game_id: str,
        score: int,
        xp_earned: int,
    ) -> GameStats:
        """Record one finished game session.

        Updates the per-game stats (play count, best score, XP earned), adds
        the XP to the learner's total and bumps the one skill the game
        trains, if any.
        """
        errors = []
        if score < 0:
            errors.append({"field": "score", "message": "must be greater than or equal to 0"})
        if xp_earned < 0:
            errors.append({"field": "xp_earned", "message": "must be greater than or equal to 0"})
        if errors:
            raise ValidationFailed("Invalid game result", errors=errors)

        async with self._unit_of_work(user_id):
            current = await self.storage.get_game_stats(user_id, game_id)
            stats = await self.storage.update_game_stats(
                user_id,
                game_id,
                times_played=(current.times_played if current else 0) + 1,
                best_score=max(current.best_score if current else 0, score),
                total_xp_earned=(current.total_xp_earned if current else 0) + xp_earned,
            )

            progress = await self.storage.get_progress(user_id)
            updates: dict[str, int] = {"total_xp": (progress.total_xp if progress else 0) + xp_earned}
            skill = skill_field_for(game_id)
            if skill is not None:
                updates[skill] = bump_skill(getattr(progress, skill) if progress else 0, GAME_SKILL_BOOST)
            await self.storage.update_progress(user_id, **updates)

        logger.info(
            "game_result_recorded",
            user_id=user_id,
            game_id=game_id,
            score=score,
            xp_earned=xp_earned,
            skill=skill,
        )
        return stats

    async def unlock_game(self, user_id: str, game_id: str) -> tuple[UnlockedGame, bool]:
        """Unlock a game for a user. Returns (game, created); re-unlocking is a no-op."""
        async with self._unit_of_work(user_id):
            for existing in await self.storage.get_unlocked_games(user_id):
                if existing.game_id == game_id:
                    return existing, False
            unlocked = await self.storage.unlock_game(user_id, game_id)
        logger.info("game_unlocked", user_id=user_id, game_id=game_id)
        return unlocked, True

    # ------------------------------------------------------------------
    # Progress
    # ------------------------------------------------------------------

    async def get_progress(self, user_id: str) -> Progress:
        progress = await self.storage.get_progress(user_id)
        if progress is None:
            raise ProgressNotFound
        return progress

    async def continue_learning(self, user_id: str) -> ContinueLearningResponse:
        """Session touch: +25 XP, +5 on every skill, last-active set to now."""
        async with self._unit_of_work(user_id):
            progress = await self.storage.get_progress(user_id)
            if progress is None:
                raise ProgressNotFound
            updates: dict[str, object] = {
                name: bump_skill(value, CONTINUE_LEARNING_SKILL_BOOST)
                for name, value in progress.skills().items()
            }
            updated = await self.storage.update_progress(
                user_id,
                total_xp=progress.total_xp + CONTINUE_LEARNING_XP,
                last_active_date=datetime.now(timezone.utc),
                **updates,
            )

        logger.info("continue_learning", user_id=user_id, total_xp=updated.total_xp)
        return ContinueLearningResponse(progress=updated, message=CONTINUE_LEARNING_MESSAGE)

    async def get_snapshot(self, user_id: str, today: date) -> ProgressSnapshot:
        """Read-only view of progress, today's spins, unlocked games and achievements."""
        spins = await self.storage.get_daily_spins(user_id, today)
        if spins is None:
            # Not persisted: reading must not create today's row
            spins = DailySpinAllowance(user_id=user_id, date=today)
        return ProgressSnapshot(
            progress=await self.storage.get_progress(user_id),
            spins=spins,
            unlocked_games=await self.storage.get_unlocked_games(user_id),
            achievements=await self.storage.get_achievements(user_id),
        )

    # ------------------------------------------------------------------
    # Achievements
    # ------------------------------------------------------------------

    async def get_unlocked_games(self, user_id: str) -> list[UnlockedGame]:
        return await self.storage.get_unlocked_games(user_id)

    async def get_achievements(self, user_id: str) -> list[Achievement]:
        return await self.storage.get_achievements(user_id)

    async def award_achievement(
        self,
        user_id: str,
        achievement_id: str,
        title: str,
        description: str,
    ) -> tuple[Achievement, bool]:
        """Award an achievement once per user. Returns (achievement, created)."""
        async with self._unit_of_work(user_id):
            for existing in await self.storage.get_achievements(user_id):
                if existing.achievement_id == achievement_id:
                    return existing, False
            achievement = await self.storage.add_achievement(user_id, achievement_id, title, description)
        logger.info("achievement_awarded", user_id=user_id, achievement_id=achievement_id)
        return achievement, True
