"""Thin clients for the BALLDONTLIE (NBA) and NHL web statistics APIs."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, Optional

import httpx
from tenacity import RetryCallState, retry, retry_if_exception, stop_after_attempt, wait_fixed

from parlaydesk.config import get_settings
from parlaydesk.data.reference import NBA_TEAMS
from parlaydesk.errors import GatewayUnavailable, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

SUPPORTED_SPORTS = ("nba", "nhl")


def _retry_log(retry_state: RetryCallState) -> None:
    attempt = retry_state.attempt_number
    exception = retry_state.outcome.exception() if retry_state.outcome else None
    logger.warning("Stats API retry attempt %s due to %s", attempt, exception)


def _is_transient(exc: BaseException) -> bool:
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code >= 500
    return isinstance(exc, httpx.TransportError)


def nba_season(today: date | None = None) -> int:
    """NBA seasons are labelled by the year they start in October."""

    today = today or date.today()
    return today.year if today.month >= 10 else today.year - 1


def nhl_season(today: date | None = None) -> str:
    start = nba_season(today)
    return f"{start}{start + 1}"


def _check_sport(sport: str) -> str:
    sport = sport.lower()
    if sport not in SUPPORTED_SPORTS:
        raise ValidationError(f"Invalid sport. Supported: {', '.join(SUPPORTED_SPORTS)}")
    return sport


class StatsClient:
    """Team and player statistics for the supported leagues."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        balldontlie_base_url: Optional[str] = None,
        nhl_base_url: Optional[str] = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        settings = get_settings()
        self.api_key = settings.balldontlie_api_key if api_key is None else api_key
        self.balldontlie_base_url = (balldontlie_base_url or settings.balldontlie_base_url).rstrip("/")
        self.nhl_base_url = (nhl_base_url or settings.nhl_api_base).rstrip("/")
        headers = {"Authorization": self.api_key} if self.api_key else {}
        self._client = httpx.Client(timeout=settings.http_timeout, headers=headers, transport=transport)

    def __enter__(self) -> "StatsClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_fixed(1),
        retry=retry_if_exception(_is_transient),
        after=_retry_log,
        reraise=True,
    )
    def _fetch(self, url: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        response = self._client.get(url, params=params)
        response.raise_for_status()
        return response.json()

    def _request(self, url: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        try:
            return self._fetch(url, params)
        except httpx.HTTPError as exc:
            logger.error("Stats API request to %s failed: %s", url, exc)
            raise GatewayUnavailable(f"Stats provider error: {exc}") from exc

    # NBA (BALLDONTLIE)

    def nba_teams(self) -> Dict[str, Any]:
        return {"teams": list(NBA_TEAMS)}

    def nba_team(self, team_id: int) -> Dict[str, Any]:
        team = next((t for t in NBA_TEAMS if t["id"] == team_id), None)
        if team is None:
            raise NotFoundError("Team not found")
        return {
            "team": team,
            "stats": {
                "message": "Team statistics require game-by-game aggregation",
                "note": "Use player stats for detailed analysis",
            },
        }

    def search_nba_players(self, query: str) -> Dict[str, Any]:
        payload = self._request(f"{self.balldontlie_base_url}/players", {"search": query})
        return {
            "players": [
                {
                    "id": p["id"],
                    "firstName": p.get("first_name"),
                    "lastName": p.get("last_name"),
                    "position": p.get("position"),
                    "team": (p.get("team") or {}).get("full_name") or "Unknown",
                }
                for p in payload.get("data", [])
            ]
        }

    def nba_season_averages(self, player_id: int, season: int | None = None) -> Dict[str, Any]:
        season = season or nba_season()
        payload = self._request(
            f"{self.balldontlie_base_url}/season_averages",
            {"season": season, "player_ids[]": player_id},
        )
        data = payload.get("data") or []
        return {"playerId": player_id, "season": season, "stats": data[0] if data else None}

    # NHL (api-web.nhle.com)

    def nhl_teams(self) -> Dict[str, Any]:
        payload = self._request(f"{self.nhl_base_url}/standings/now")
        return {
            "teams": [
                {
                    "id": team["teamAbbrev"]["default"],
                    "name": team["teamName"]["default"],
                    "abbreviation": team["teamAbbrev"]["default"],
                    "conference": team.get("conferenceName"),
                    "division": team.get("divisionName"),
                    "wins": team.get("wins"),
                    "losses": team.get("losses"),
                    "otLosses": team.get("otLosses"),
                    "points": team.get("points"),
                    "gamesPlayed": team.get("gamesPlayed"),
                    "goalFor": team.get("goalFor"),
                    "goalAgainst": team.get("goalAgainst"),
                    "streakCode": team.get("streakCode"),
                    "streakCount": team.get("streakCount"),
                }
                for team in payload.get("standings", [])
            ]
        }

    def nhl_team_stats(self, team_abbr: str) -> Dict[str, Any]:
        payload = self._request(f"{self.nhl_base_url}/club-stats/{team_abbr}/now")
        return {
            "teamAbbr": team_abbr,
            "skaters": (payload.get("skaters") or [])[:10],
            "goalies": payload.get("goalies") or [],
        }

    def nhl_roster(self, team_abbr: str) -> Dict[str, Any]:
        payload = self._request(f"{self.nhl_base_url}/roster/{team_abbr}/current")
        return {
            "teamAbbr": team_abbr,
            "forwards": payload.get("forwards") or [],
            "defensemen": payload.get("defensemen") or [],
            "goalies": payload.get("goalies") or [],
        }

    def nhl_player_game_log(self, player_id: int, season: str | None = None) -> Dict[str, Any]:
        season = season or nhl_season()
        # game type 2 is the regular season
        payload = self._request(f"{self.nhl_base_url}/player/{player_id}/game-log/{season}/2")
        return {"playerId": player_id, "season": season, "gameLog": (payload.get("gameLog") or [])[:10]}

    # Sport-generic entry points used by the API

    def teams(self, sport: str) -> Dict[str, Any]:
        return self.nba_teams() if _check_sport(sport) == "nba" else self.nhl_teams()

    def team_stats(self, sport: str, team_id: str) -> Dict[str, Any]:
        if _check_sport(sport) == "nba":
            if not team_id.isdigit():
                raise NotFoundError("Team not found")
            return self.nba_team(int(team_id))
        return self.nhl_team_stats(team_id.upper())

    def search_players(self, sport: str, query: str) -> Dict[str, Any]:
        if len(query.strip()) < 2:
            raise ValidationError("Search query must be at least 2 characters")
        if _check_sport(sport) == "nba":
            return self.search_nba_players(query)
        return {"players": [], "note": "NHL player search not available"}

    def player_stats(self, sport: str, player_id: int) -> Dict[str, Any]:
        if _check_sport(sport) == "nba":
            return self.nba_season_averages(player_id)
        return self.nhl_player_game_log(player_id)
