"""Storage interface shared by the memory and database backends."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from typing import Any

from magilearn.storage.entities import (
    Achievement,
    DailySpinAllowance,
    GameStats,
    Progress,
    UnlockedGame,
    User,
)


class Storage(ABC):
    """Persistence adapter for the six entity kinds.

    Lookups return ``None`` when the entity is absent. Updates merge: supplied
    fields replace stored ones, everything else keeps its prior value, and a
    missing record starts from the entity defaults. Backend faults surface as
    ``StorageUnavailable``.
    """

    # --- Users ---

    @abstractmethod
    async def get_user(self, user_id: str) -> User | None: ...

    @abstractmethod
    async def get_user_by_username(self, username: str) -> User | None: ...

    @abstractmethod
    async def get_user_by_email(self, email: str) -> User | None:
        """Look up a user by email, case-insensitively."""

    @abstractmethod
    async def create_user(
        self,
        username: str,
        password_hash: str,
        user_id: str | None = None,
        **profile: Any,
    ) -> User: ...

    @abstractmethod
    async def update_user(self, user_id: str, **fields: Any) -> User | None:
        """Merge fields into an existing user. Returns None if the user is missing."""

    # --- Progress ---

    @abstractmethod
    async def get_progress(self, user_id: str) -> Progress | None: ...

    @abstractmethod
    async def update_progress(self, user_id: str, **fields: Any) -> Progress: ...

    # --- Daily spins ---

    @abstractmethod
    async def get_daily_spins(
        self, user_id: str, day: date, *, lock: bool = False
    ) -> DailySpinAllowance | None:
        """Fetch the allowance for (user, day). ``lock`` asks for a row lock where supported."""

    @abstractmethod
    async def update_daily_spins(self, user_id: str, day: date, spins_used: int) -> DailySpinAllowance:
        """Upsert the allowance for (user, day), recomputing spins_remaining."""

    # --- Unlocked games ---

    @abstractmethod
    async def get_unlocked_games(self, user_id: str) -> list[UnlockedGame]: ...

    @abstractmethod
    async def unlock_game(self, user_id: str, game_id: str) -> UnlockedGame: ...

    # --- Achievements ---

    @abstractmethod
    async def get_achievements(self, user_id: str) -> list[Achievement]: ...

    @abstractmethod
    async def add_achievement(
        self, user_id: str, achievement_id: str, title: str, description: str
    ) -> Achievement: ...

    # --- Game stats ---

    @abstractmethod
    async def get_game_stats(self, user_id: str, game_id: str) -> GameStats | None: ...

    @abstractmethod
    async def list_game_stats(self, user_id: str) -> list[GameStats]: ...

    @abstractmethod
    async def update_game_stats(self, user_id: str, game_id: str, **fields: Any) -> GameStats:
        """Upsert stats for (user, game). Always stamps last_played."""

    # --- Unit of work ---

    @abstractmethod
    async def commit(self) -> None: ...

    @abstractmethod
    async def rollback(self) -> None: ...
