"""Persistence adapter: one interface, two interchangeable backends."""

from magilearn.storage.base import Storage
from magilearn.storage.memory import MemoryStorage
from magilearn.storage.sql import SqlStorage

__all__ = ["MemoryStorage", "SqlStorage", "Storage"]
