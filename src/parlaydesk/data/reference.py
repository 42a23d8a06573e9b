"""Static reference data: league team lists and built-in suggestion sets."""

from __future__ import annotations

from dataclasses import dataclass

from parlaydesk.parlays.types import MONEYLINE, SPREAD, TOTALS, Leg

NBA_TEAMS: tuple[dict[str, str | int], ...] = (
    {"id": 1, "name": "Atlanta Hawks", "abbreviation": "ATL", "conference": "East"},
    {"id": 2, "name": "Boston Celtics", "abbreviation": "BOS", "conference": "East"},
    {"id": 3, "name": "Brooklyn Nets", "abbreviation": "BKN", "conference": "East"},
    {"id": 4, "name": "Charlotte Hornets", "abbreviation": "CHA", "conference": "East"},
    {"id": 5, "name": "Chicago Bulls", "abbreviation": "CHI", "conference": "East"},
    {"id": 6, "name": "Cleveland Cavaliers", "abbreviation": "CLE", "conference": "East"},
    {"id": 7, "name": "Dallas Mavericks", "abbreviation": "DAL", "conference": "West"},
    {"id": 8, "name": "Denver Nuggets", "abbreviation": "DEN", "conference": "West"},
    {"id": 9, "name": "Detroit Pistons", "abbreviation": "DET", "conference": "East"},
    {"id": 10, "name": "Golden State Warriors", "abbreviation": "GSW", "conference": "West"},
    {"id": 11, "name": "Houston Rockets", "abbreviation": "HOU", "conference": "West"},
    {"id": 12, "name": "Indiana Pacers", "abbreviation": "IND", "conference": "East"},
    {"id": 13, "name": "LA Clippers", "abbreviation": "LAC", "conference": "West"},
    {"id": 14, "name": "Los Angeles Lakers", "abbreviation": "LAL", "conference": "West"},
    {"id": 15, "name": "Memphis Grizzlies", "abbreviation": "MEM", "conference": "West"},
    {"id": 16, "name": "Miami Heat", "abbreviation": "MIA", "conference": "East"},
    {"id": 17, "name": "Milwaukee Bucks", "abbreviation": "MIL", "conference": "East"},
    {"id": 18, "name": "Minnesota Timberwolves", "abbreviation": "MIN", "conference": "West"},
    {"id": 19, "name": "New Orleans Pelicans", "abbreviation": "NOP", "conference": "West"},
    {"id": 20, "name": "New York Knicks", "abbreviation": "NYK", "conference": "East"},
    {"id": 21, "name": "Oklahoma City Thunder", "abbreviation": "OKC", "conference": "West"},
    {"id": 22, "name": "Orlando Magic", "abbreviation": "ORL", "conference": "East"},
    {"id": 23, "name": "Philadelphia 76ers", "abbreviation": "PHI", "conference": "East"},
    {"id": 24, "name": "Phoenix Suns", "abbreviation": "PHX", "conference": "West"},
    {"id": 25, "name": "Portland Trail Blazers", "abbreviation": "POR", "conference": "West"},
    {"id": 26, "name": "Sacramento Kings", "abbreviation": "SAC", "conference": "West"},
    {"id": 27, "name": "San Antonio Spurs", "abbreviation": "SAS", "conference": "West"},
    {"id": 28, "name": "Toronto Raptors", "abbreviation": "TOR", "conference": "East"},
    {"id": 29, "name": "Utah Jazz", "abbreviation": "UTA", "conference": "West"},
    {"id": 30, "name": "Washington Wizards", "abbreviation": "WAS", "conference": "East"},
)


@dataclass(frozen=True)
class SuggestionTemplate:
    name: str
    description: str
    risk_level: str
    legs: tuple[Leg, ...]


DEFAULT_SUGGESTIONS: tuple[SuggestionTemplate, ...] = (
    SuggestionTemplate(
        name="Conservative Pick",
        description="Lower risk combination with favorites",
        risk_level="low",
        legs=(
            Leg(selection="Example Team A", market_type=MONEYLINE, price=-150),
            Leg(selection="Example Team B", market_type=SPREAD, price=-110, point=-3.5),
        ),
    ),
    SuggestionTemplate(
        name="Balanced Pick",
        description="Mix of favorites and slight underdogs",
        risk_level="medium",
        legs=(
            Leg(selection="Example Team C", market_type=MONEYLINE, price=-120),
            Leg(selection="Over", market_type=TOTALS, price=-110, point=45.5, home_team="Example Team D"),
            Leg(selection="Example Team E", market_type=MONEYLINE, price=105),
        ),
    ),
    SuggestionTemplate(
        name="Value Play",
        description="Higher risk, higher potential reward",
        risk_level="high",
        legs=(
            Leg(selection="Example Team F", market_type=MONEYLINE, price=130),
            Leg(selection="Example Team G", market_type=MONEYLINE, price=145),
            Leg(selection="Example Team H", market_type=SPREAD, price=-105, point=6.5),
        ),
    ),
)

NO_GAMES_REASONING = (
    "No NBA or NHL games are available right now. These placeholder picks show the "
    "shape of a {risk} risk parlay; check back when games are scheduled."
)
AI_UNAVAILABLE_REASONING = (
    "AI analysis is unavailable at the moment. This {risk} risk template follows general "
    "principles: fewer legs and favorites lower variance, underdogs raise the payout."
)

DISCLAIMER_SUGGESTIONS = "These are AI-generated suggestions for RESEARCH ONLY. Not financial advice."
DISCLAIMER_ANALYSIS = "This analysis is for RESEARCH ONLY. Not financial or betting advice."
