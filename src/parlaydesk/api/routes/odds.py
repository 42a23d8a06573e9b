"""Odds board endpoints backed by The Odds API."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter

from parlaydesk.api.deps import OddsClientDep
from parlaydesk.data.odds_client import sport_key, supported_sports

router = APIRouter(prefix="/api/odds", tags=["odds"])


@router.get("/sports")
async def list_sports() -> dict[str, list[dict[str, str]]]:
    return {
        "sports": [
            {"key": sport, "providerKey": sport_key(sport), "title": sport.upper()}
            for sport in supported_sports()
        ]
    }


@router.get("/{sport}")
async def sport_odds(sport: str, odds: OddsClientDep) -> dict[str, Any]:
    board = await odds.fetch_odds(sport)
    return board.model_dump(mode="json", by_alias=True)


@router.get("/{sport}/events/{event_id}/props")
async def player_props(sport: str, event_id: str, odds: OddsClientDep) -> dict[str, Any]:
    board = await odds.fetch_player_props(sport, event_id)
    return board.model_dump(mode="json", by_alias=True)


@router.get("/{sport}/{game_id}")
async def game_odds(sport: str, game_id: str, odds: OddsClientDep) -> dict[str, Any]:
    return await odds.fetch_game_odds(sport, game_id)
