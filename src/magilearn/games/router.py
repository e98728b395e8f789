"""Games router — catalog and game results under /api/games."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from magilearn.auth.dependencies import get_current_user_id
from magilearn.dependencies import get_progression_service
from magilearn.games.catalog import GAME_CATALOG, LOCKABLE_GAMES, get_game
from magilearn.games.schemas import (
    GameCatalogEntry,
    GameCatalogResponse,
    GamePlayRequest,
    GamePlayResponse,
)
from magilearn.progression.service import ProgressionService

router = APIRouter(prefix="/api/games", tags=["Games"])


def _catalog_entry(game: dict) -> GameCatalogEntry:
    return GameCatalogEntry(**game, lockable=game["id"] in LOCKABLE_GAMES)


@router.get("", response_model=GameCatalogResponse)
async def list_games() -> GameCatalogResponse:
    """Static catalog, flagged with which games the daily spin can unlock."""
    return GameCatalogResponse(games=[_catalog_entry(game) for game in GAME_CATALOG])


@router.post("/{game_id}/play", response_model=GamePlayResponse)
async def play_game(
    game_id: str,
    body: GamePlayRequest,
    user_id: str = Depends(get_current_user_id),
    progression: ProgressionService = Depends(get_progression_service),
) -> GamePlayResponse:
    """Record a finished session: stats, XP and the game's skill.

    Ids outside the catalog are still recorded; ``game`` is then null.
    """
    stats = await progression.record_game_result(user_id, game_id, body.score, body.xp_earned)
    game = get_game(game_id)
    return GamePlayResponse(stats=stats, game=_catalog_entry(game) if game else None)
