"""Dict-backed storage for demos and tests.

Writes apply immediately; ``commit`` and ``rollback`` are no-ops, so a
multi-write operation that fails half-way stays half-applied.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime, timezone
from typing import Any

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


def _new_id() -> str:
    return str(uuid.uuid4())


class MemoryStorage(Storage):
    """Process-local storage keyed by user id."""

    def __init__(self) -> None:
        self._users: dict[str, User] = {}
        self._progress: dict[str, Progress] = {}
        self._daily_spins: dict[tuple[str, date], DailySpinAllowance] = {}
        self._unlocked_games: dict[str, list[UnlockedGame]] = {}
        self._achievements: dict[str, list[Achievement]] = {}
        self._game_stats: dict[tuple[str, str], GameStats] = {}

    # --- Users ---

    async def get_user(self, user_id: str) -> User | None:
        return self._users.get(user_id)

    async def get_user_by_username(self, username: str) -> User | None:
        return next((u for u in self._users.values() if u.username == username), None)

    async def get_user_by_email(self, email: str) -> User | None:
        email = email.lower()
        return next((u for u in self._users.values() if u.email and u.email.lower() == email), None)

    async def create_user(
        self,
        username: str,
        password_hash: str,
        user_id: str | None = None,
        **profile: Any,
    ) -> User:
        user = User(
            id=user_id or _new_id(),
            username=username,
            password_hash=password_hash,
            created_at=datetime.now(timezone.utc),
            **profile,
        )
        self._users[user.id] = user
        return user

    async def update_user(self, user_id: str, **fields: Any) -> User | None:
        user = self._users.get(user_id)
        if user is None:
            return None
        updated = user.model_copy(update=fields)
        self._users[user_id] = updated
        return updated

    # --- Progress ---

    async def get_progress(self, user_id: str) -> Progress | None:
        return self._progress.get(user_id)

    async def update_progress(self, user_id: str, **fields: Any) -> Progress:
        existing = self._progress.get(user_id) or Progress(id=_new_id(), user_id=user_id)
        updated = existing.model_copy(update=fields)
        self._progress[user_id] = updated
        return updated

    # --- Daily spins ---

    async def get_daily_spins(
        self, user_id: str, day: date, *, lock: bool = False
    ) -> DailySpinAllowance | None:
        return self._daily_spins.get((user_id, day))

    async def update_daily_spins(self, user_id: str, day: date, spins_used: int) -> DailySpinAllowance:
        existing = self._daily_spins.get((user_id, day))
        allowance = DailySpinAllowance(
            id=existing.id if existing else _new_id(),
            user_id=user_id,
            date=day,
            spins_used=spins_used,
            spins_remaining=spins_remaining_for(spins_used),
        )
        self._daily_spins[(user_id, day)] = allowance
        return allowance

    # --- Unlocked games ---

    async def get_unlocked_games(self, user_id: str) -> list[UnlockedGame]:
        return list(self._unlocked_games.get(user_id, []))

    async def unlock_game(self, user_id: str, game_id: str) -> UnlockedGame:
        unlocked = UnlockedGame(
            id=_new_id(),
            user_id=user_id,
            game_id=game_id,
            unlocked_at=datetime.now(timezone.utc),
        )
        self._unlocked_games.setdefault(user_id, []).append(unlocked)
        return unlocked

    # --- Achievements ---

    async def get_achievements(self, user_id: str) -> list[Achievement]:
        return list(self._achievements.get(user_id, []))

    async def add_achievement(
        self, user_id: str, achievement_id: str, title: str, description: str
    ) -> Achievement:
        achievement = Achievement(
            id=_new_id(),
            user_id=user_id,
            achievement_id=achievement_id,
            title=title,
            description=description,
            earned_at=datetime.now(timezone.utc),
        )
        self._achievements.setdefault(user_id, []).append(achievement)
        return achievement

    # --- Game stats ---

    async def get_game_stats(self, user_id: str, game_id: str) -> GameStats | None:
        return self._game_stats.get((user_id, game_id))

    async def list_game_stats(self, user_id: str) -> list[GameStats]:
        return [s for (uid, _), s in self._game_stats.items() if uid == user_id]

    async def update_game_stats(self, user_id: str, game_id: str, **fields: Any) -> GameStats:
        existing = self._game_stats.get((user_id, game_id)) or GameStats(
            id=_new_id(), user_id=user_id, game_id=game_id
        )
        updated = existing.model_copy(update={**fields, "last_played": datetime.now(timezone.utc)})
        self._game_stats[(user_id, game_id)] = updated
        return updated

    # --- Unit of work ---

    async def commit(self) -> None:
        return None

    async def rollback(self) -> None:
        return None
