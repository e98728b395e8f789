"""Pydantic schemas for the game catalog and game-result endpoints."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel

from magilearn.storage.entities import GameStats


class GameCatalogEntry(BaseModel):
    id: str
    title: str
    description: str
    xp: int
    category: str
    difficulty: Literal["easy", "medium", "hard"]
    skill: str | None = None
    lockable: bool = False


class GameCatalogResponse(BaseModel):
    games: list[GameCatalogEntry]


class GamePlayRequest(BaseModel):
    score: int = 0
    xp_earned: int = 0


class GamePlayResponse(BaseModel):
    stats: GameStats
    game: GameCatalogEntry | None = None
