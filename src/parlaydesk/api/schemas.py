"""Pydantic schemas for the ParlayDesk API."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import AliasChoices, Field, field_validator

from parlaydesk.data.schemas import CamelModel
from parlaydesk.parlays.types import BET_TYPES, Leg, Preferences, TeamFocus, normalize_market_type


class LegIn(CamelModel):
    selection: str = Field(min_length=1, validation_alias=AliasChoices("selection", "team"))
    market_type: str = Field(validation_alias=AliasChoices("type", "marketType", "market_type"))
    price: int
    point: float | None = None
    game_id: str | None = Field(default=None, validation_alias=AliasChoices("gameId", "game_id"))
    sport: str | None = None
    home_team: str | None = Field(default=None, validation_alias=AliasChoices("homeTeam", "home_team"))
    away_team: str | None = Field(default=None, validation_alias=AliasChoices("awayTeam", "away_team"))

    @field_validator("price", mode="before")
    @classmethod
    def _reject_bool_price(cls, value: Any) -> Any:
        if isinstance(value, bool):
            raise ValueError("price must be an integer")
        return value

    @field_validator("market_type")
    @classmethod
    def _known_market(cls, value: str) -> str:
        market = normalize_market_type(value)
        if market is None:
            raise ValueError(f"unknown market type {value!r}")
        return market

    @field_validator("game_id", mode="before")
    @classmethod
    def _game_id_as_str(cls, value: Any) -> Any:
        return str(value) if isinstance(value, int) else value

    def to_leg(self) -> Leg:
        return Leg(
            selection=self.selection,
            market_type=self.market_type,
            price=self.price,
            point=self.point,
            game_id=self.game_id,
            sport=self.sport,
            home_team=self.home_team,
            away_team=self.away_team,
        )


class CreateParlayRequest(CamelModel):
    name: str | None = None
    legs: list[LegIn] = Field(default_factory=list)
    stake: float | None = None


class UpdateParlayRequest(CamelModel):
    name: str | None = None
    legs: list[LegIn] | None = None
    stake: float | None = None
    status: Literal["saved", "won", "lost"] | None = None


class PriceRequest(CamelModel):
    legs: list[LegIn] = Field(default_factory=list)
    stake: float | None = None


class PricingResponse(CamelModel):
    leg_count: int
    decimal_odds: float
    american_odds: str
    stake: float
    payout: float
    profit: float


class CreateParlayResponse(CamelModel):
    id: int
    message: str = "Parlay saved"
    estimated_odds: float
    american_odds: str
    estimated_payout: float


class ParlayResponse(CamelModel):
    id: int
    name: str
    legs: list[dict[str, Any]]
    estimated_odds: float
    american_odds: str
    estimated_payout: float
    stake: float
    status: str
    created_at: datetime
    updated_at: datetime


class AnalyzeRequest(CamelModel):
    legs: list[LegIn] = Field(default_factory=list)


class Credentials(CamelModel):
    email: str = ""
    password: str = ""


class TeamFocusIn(CamelModel):
    team: str = Field(min_length=1)
    risk: Literal["conservative", "normal", "aggressive", "yolo"] = "normal"
    always_include: bool = False

    def to_focus(self) -> TeamFocus:
        return TeamFocus(team=self.team, risk=self.risk, always_include=self.always_include)


class PreferencesPayload(CamelModel):
    favorite_teams: list[str] = Field(default_factory=list)
    bet_types: list[str] = Field(default_factory=lambda: ["moneyline", "spread", "totals"])
    risk_tolerance: Literal["conservative", "moderate", "aggressive"] = "moderate"
    bankroll: float = Field(default=0.0, ge=0.0)
    team_focus: list[TeamFocusIn] = Field(default_factory=list)
    avoid_teams: list[str] = Field(default_factory=list)

    @field_validator("bet_types")
    @classmethod
    def _known_bet_types(cls, value: list[str]) -> list[str]:
        unknown = [bt for bt in value if bt not in BET_TYPES]
        if unknown:
            raise ValueError(f"unknown bet types: {', '.join(unknown)}")
        return list(dict.fromkeys(value))

    @classmethod
    def from_model(cls, row: Any) -> PreferencesPayload:
        return cls(
            favorite_teams=row.favorite_teams or [],
            bet_types=row.bet_types or [],
            risk_tolerance=row.risk_tolerance,
            bankroll=row.bankroll,
            team_focus=[TeamFocusIn.model_validate(item) for item in row.team_focus or []],
            avoid_teams=row.avoid_teams or [],
        )

    def to_preferences(self) -> Preferences:
        return Preferences(
            favorite_teams=list(self.favorite_teams),
            bet_types=list(self.bet_types),
            risk_tolerance=self.risk_tolerance,
            bankroll=self.bankroll,
            team_focus=[item.to_focus() for item in self.team_focus],
            avoid_teams=list(self.avoid_teams),
        )


class UserResponse(CamelModel):
    id: int
    email: str
    created_at: datetime | None = None
    preferences: PreferencesPayload | None = None
