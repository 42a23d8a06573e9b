"""Dataclasses for leg, parlay and suggestion modeling."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from parlaydesk.parlays.odds import round_money

MONEYLINE = "moneyline"
SPREAD = "spread"
TOTALS = "totals"
PROPS = "props"

BET_TYPES = (MONEYLINE, SPREAD, TOTALS, PROPS)
POINT_MARKETS = frozenset({SPREAD, TOTALS})
RISK_LEVELS = ("low", "medium", "high")

_MARKET_ALIASES = {
    "h2h": MONEYLINE,
    "ml": MONEYLINE,
    "moneyline": MONEYLINE,
    "spreads": SPREAD,
    "spread": SPREAD,
    "totals": TOTALS,
    "total": TOTALS,
}


def normalize_market_type(value: str) -> str | None:
    """Map provider and client spellings onto the market enumeration.

    Player props keep their sub-type (``player_points``); unknown keys give None.
    """

    key = value.strip().lower()
    if key in _MARKET_ALIASES:
        return _MARKET_ALIASES[key]
    if key.startswith("player_") and len(key) > len("player_"):
        return key
    return None


@dataclass(frozen=True)
class Leg:
    selection: str
    market_type: str
    price: int
    point: float | None = None
    game_id: str | None = None
    sport: str | None = None
    home_team: str | None = None
    away_team: str | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "selection": self.selection,
            "type": self.market_type,
            "price": self.price,
            "point": self.point,
            "gameId": self.game_id,
        }
        if self.sport:
            payload["sport"] = self.sport
        if self.home_team:
            payload["homeTeam"] = self.home_team
        if self.away_team:
            payload["awayTeam"] = self.away_team
        return payload

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Leg:
        point = data.get("point")
        return cls(
            selection=data.get("selection") or data.get("team") or "",
            market_type=data.get("type") or data.get("market_type") or MONEYLINE,
            price=int(data["price"]),
            point=float(point) if point is not None else None,
            game_id=data.get("gameId") or data.get("game_id"),
            sport=data.get("sport"),
            home_team=data.get("homeTeam"),
            away_team=data.get("awayTeam"),
        )


@dataclass(frozen=True)
class ParlayPricing:
    combined_multiplier: float
    american_display: str
    payout: float
    profit: float

    @property
    def estimated_odds(self) -> float:
        return round_money(self.combined_multiplier)


@dataclass(frozen=True)
class Suggestion:
    id: str
    name: str
    description: str
    risk_level: str
    legs: tuple[Leg, ...]
    estimated_odds: float
    american_odds: str
    reasoning: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "riskLevel": self.risk_level,
            "legs": [leg.to_dict() for leg in self.legs],
            "estimatedOdds": self.estimated_odds,
            "americanOdds": self.american_odds,
            "reasoning": self.reasoning,
        }


@dataclass(frozen=True)
class TeamFocus:
    team: str
    risk: str = "normal"
    always_include: bool = False


@dataclass
class Preferences:
    favorite_teams: list[str] = field(default_factory=list)
    bet_types: list[str] = field(default_factory=lambda: [MONEYLINE, SPREAD, TOTALS])
    risk_tolerance: str = "moderate"
    bankroll: float = 0.0
    team_focus: list[TeamFocus] = field(default_factory=list)
    avoid_teams: list[str] = field(default_factory=list)

    @property
    def props_enabled(self) -> bool:
        return PROPS in self.bet_types
