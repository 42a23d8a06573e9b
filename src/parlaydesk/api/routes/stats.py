"""Team and player statistics endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Query

from parlaydesk.api.deps import StatsClientDep

router = APIRouter(prefix="/api/stats", tags=["stats"])


# Registered ahead of the generic team route so "roster" is not taken as a team id.
@router.get("/nhl/roster/{team_abbr}")
def nhl_roster(team_abbr: str, stats: StatsClientDep) -> dict[str, Any]:
    return stats.nhl_roster(team_abbr.upper())


@router.get("/{sport}/teams")
def teams(sport: str, stats: StatsClientDep) -> dict[str, Any]:
    return stats.teams(sport)


@router.get("/{sport}/team/{team_id}")
def team(sport: str, team_id: str, stats: StatsClientDep) -> dict[str, Any]:
    return stats.team_stats(sport, team_id)


@router.get("/{sport}/players")
def players(sport: str, stats: StatsClientDep, search: str = Query(default="")) -> dict[str, Any]:
    return stats.search_players(sport, search)


@router.get("/{sport}/player/{player_id}")
def player(sport: str, player_id: int, stats: StatsClientDep) -> dict[str, Any]:
    return stats.player_stats(sport, player_id)
