"""Per-user asyncio locks serialising read-modify-write operations."""

from __future__ import annotations

import asyncio
import weakref


class UserLocks:
    """Hands out one lock per user id.

    Locks are held weakly: a user's lock disappears once no coroutine holds
    or waits on it. Only serialises work inside a single process.
    """

    def __init__(self) -> None:
        self._locks: weakref.WeakValueDictionary[str, asyncio.Lock] = weakref.WeakValueDictionary()

    def get(self, user_id: str) -> asyncio.Lock:
        lock = self._locks.get(user_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[user_id] = lock
        return lock


user_locks = UserLocks()
