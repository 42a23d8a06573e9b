"""Async client for The Odds API (v4)."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from datetime import datetime, timedelta, timezone
from typing import Any

import httpx

from parlaydesk.config import get_settings
from parlaydesk.data.schemas import Bookmaker, Game, Market, OddsBoard, Outcome, PlayerProp, PlayerPropBoard
from parlaydesk.errors import GatewayUnavailable, RateLimitError, ValidationError

logger = logging.getLogger(__name__)

SPORT_KEYS = {
    "nba": "basketball_nba",
    "nhl": "icehockey_nhl",
}
GAME_MARKETS = "h2h,spreads,totals"
PROP_MARKETS = {
    "nba": "player_points,player_rebounds,player_assists,player_threes",
    "nhl": "player_points,player_goals,player_assists,player_shots_on_goal",
}
DEFAULT_RETRY_AFTER = 60


def supported_sports() -> list[str]:
    return list(SPORT_KEYS)


def sport_key(sport: str) -> str:
    key = SPORT_KEYS.get(sport.lower())
    if not key:
        raise ValidationError(f"Invalid sport. Supported: {', '.join(supported_sports())}")
    return key


def _retry_after(headers: httpx.Headers) -> int:
    try:
        return int(headers.get("Retry-After", ""))
    except ValueError:
        return DEFAULT_RETRY_AFTER


class OddsApiClient:
    """Fetches games, markets and player props; serves mock data without an API key."""

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        bookmaker: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        settings = get_settings()
        self.api_key = settings.odds_api_key if api_key is None else api_key
        self.base_url = (base_url or settings.odds_api_base).rstrip("/")
        self.bookmaker = bookmaker or settings.odds_bookmaker
        self.timeout = timeout or settings.http_timeout
        self._transport = transport

    @property
    def uses_mock_data(self) -> bool:
        return not self.api_key

    async def _get(self, path: str, params: dict[str, Any]) -> Any:
        query = {
            "apiKey": self.api_key,
            "regions": "us",
            "bookmakers": self.bookmaker,
            "oddsFormat": "american",
            **params,
        }
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                res = await client.get(f"{self.base_url}{path}", params=query)
        except httpx.HTTPError as exc:
            raise GatewayUnavailable(f"Odds API request failed: {exc}") from exc

        logger.info(
            "Odds API %s -> %s (requests remaining: %s)",
            path,
            res.status_code,
            res.headers.get("x-requests-remaining"),
        )
        if res.status_code in (401, 429):
            raise RateLimitError(retry_after=_retry_after(res.headers))
        if res.is_error:
            raise GatewayUnavailable(f"Odds API error: {res.status_code}")
        return res.json()

    async def fetch_odds(self, sport: str) -> OddsBoard:
        """Return upcoming games with moneyline, spread and totals markets."""

        key = sport_key(sport)
        if self.uses_mock_data:
            return mock_odds(sport)
        data = await self._get(f"/sports/{key}/odds/", {"markets": GAME_MARKETS})
        return OddsBoard(
            sport=sport.upper(),
            games=[Game.from_provider(game, sport) for game in data],
            last_updated=datetime.now(timezone.utc),
        )

    async def fetch_player_props(self, sport: str, event_id: str) -> PlayerPropBoard:
        key = sport_key(sport)
        if self.uses_mock_data:
            return mock_player_props(sport, event_id)
        data = await self._get(
            f"/sports/{key}/events/{event_id}/odds",
            {"markets": PROP_MARKETS[sport.lower()]},
        )
        props = [
            PlayerProp(
                player=outcome.get("description") or outcome["name"],
                market=market["key"],
                type=outcome["name"],
                point=outcome.get("point"),
                price=int(outcome["price"]),
            )
            for book in data.get("bookmakers", [])
            if book.get("key") == self.bookmaker
            for market in book.get("markets", [])
            for outcome in market.get("outcomes", [])
        ]
        return PlayerPropBoard(event_id=data.get("id", event_id), sport=sport.upper(), props=props)

    async def fetch_game_odds(self, sport: str, game_id: str) -> dict[str, Any]:
        key = sport_key(sport)
        if self.uses_mock_data:
            return {
                "id": game_id,
                "sport": sport.upper(),
                "message": "Mock data - configure ODDS_API_KEY for real data",
                "isMockData": True,
            }
        return await self._get(f"/sports/{key}/events/{game_id}/odds", {"markets": GAME_MARKETS})

    async def fetch_candidate_games(self, sports: Iterable[str] = ("nba", "nhl")) -> list[Game]:
        """Fetch several sports concurrently; a failed sport contributes no games."""

        sports = list(sports)
        results = await asyncio.gather(
            *(self.fetch_odds(sport) for sport in sports),
            return_exceptions=True,
        )
        games: list[Game] = []
        for sport, result in zip(sports, results):
            if isinstance(result, BaseException):
                logger.warning("Odds fetch for %s failed, continuing without it: %s", sport, result)
                continue
            games.extend(result.games)
        return games


def _mock_game(
    game_id: str,
    sport: str,
    home: tuple[str, int],
    away: tuple[str, int],
    spread: float,
    total: float,
) -> Game:
    (home_team, home_price), (away_team, away_price) = home, away
    return Game(
        id=game_id,
        sport=sport,
        home_team=home_team,
        away_team=away_team,
        start_time=datetime.now(timezone.utc) + timedelta(days=1),
        bookmakers=[
            Bookmaker(
                name="draftkings",
                markets=[
                    Market(
                        type="h2h",
                        outcomes=[
                            Outcome(name=home_team, price=home_price),
                            Outcome(name=away_team, price=away_price),
                        ],
                    ),
                    Market(
                        type="spreads",
                        outcomes=[
                            Outcome(name=home_team, price=-110, point=spread),
                            Outcome(name=away_team, price=-110, point=-spread),
                        ],
                    ),
                    Market(
                        type="totals",
                        outcomes=[
                            Outcome(name="Over", price=-110, point=total),
                            Outcome(name="Under", price=-110, point=total),
                        ],
                    ),
                ],
            )
        ],
    )


def mock_odds(sport: str) -> OddsBoard:
    games = {
        "nba": [
            _mock_game("mock-nba-1", "NBA", ("Los Angeles Lakers", 120), ("Boston Celtics", -140), 3.5, 224.5),
        ],
        "nhl": [
            _mock_game("mock-nhl-1", "NHL", ("Toronto Maple Leafs", -145), ("Montreal Canadiens", 125), -1.5, 6.5),
        ],
    }
    return OddsBoard(
        sport=sport.upper(),
        games=games.get(sport.lower(), []),
        last_updated=datetime.now(timezone.utc),
        is_mock_data=True,
    )


def mock_player_props(sport: str, event_id: str) -> PlayerPropBoard:
    if sport.lower() == "nba":
        rows = [
            ("LeBron James", "player_points", "Over", 25.5, -115),
            ("LeBron James", "player_points", "Under", 25.5, -105),
            ("LeBron James", "player_assists", "Over", 7.5, -110),
            ("LeBron James", "player_assists", "Under", 7.5, -110),
            ("Anthony Davis", "player_rebounds", "Over", 11.5, -120),
            ("Anthony Davis", "player_rebounds", "Under", 11.5, 100),
        ]
    else:
        rows = [
            ("Auston Matthews", "player_goals", "Over", 0.5, -130),
            ("Auston Matthews", "player_goals", "Under", 0.5, 110),
            ("Connor McDavid", "player_points", "Over", 1.5, -115),
            ("Connor McDavid", "player_points", "Under", 1.5, -105),
        ]
    return PlayerPropBoard(
        event_id=event_id,
        sport=sport.upper(),
        props=[
            PlayerProp(player=player, market=market, type=side, point=point, price=price)
            for player, market, side, point, price in rows
        ],
        is_mock_data=True,
    )
