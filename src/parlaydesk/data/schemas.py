"""Pydantic schemas for odds-provider data consumed by the core."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Outcome(CamelModel):
    name: str
    price: int
    point: float | None = None
    description: str | None = None


class Market(CamelModel):
    type: str
    outcomes: list[Outcome] = Field(default_factory=list)


class Bookmaker(CamelModel):
    name: str
    markets: list[Market] = Field(default_factory=list)


class Game(CamelModel):
    id: str
    sport: str
    home_team: str
    away_team: str
    start_time: datetime
    bookmakers: list[Bookmaker] = Field(default_factory=list)

    @classmethod
    def from_provider(cls, payload: dict[str, Any], sport: str) -> Game:
        """Build a game from a The Odds API event payload."""

        return cls(
            id=payload["id"],
            sport=sport.upper(),
            home_team=payload["home_team"],
            away_team=payload["away_team"],
            start_time=payload["commence_time"],
            bookmakers=[
                Bookmaker(
                    name=book["key"],
                    markets=[
                        Market(
                            type=market["key"],
                            outcomes=[
                                Outcome(
                                    name=outcome["name"],
                                    price=int(outcome["price"]),
                                    point=outcome.get("point"),
                                )
                                for outcome in market.get("outcomes", [])
                            ],
                        )
                        for market in book.get("markets", [])
                    ],
                )
                for book in payload.get("bookmakers", [])
            ],
        )


class OddsBoard(CamelModel):
    sport: str
    games: list[Game]
    last_updated: datetime
    is_mock_data: bool = False


class PlayerProp(CamelModel):
    player: str
    market: str
    type: str = Field(description="Over or Under")
    point: float | None = None
    price: int


class PlayerPropBoard(CamelModel):
    event_id: str
    sport: str
    props: list[PlayerProp]
    is_mock_data: bool = False
