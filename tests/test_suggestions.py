"""Suggestion extraction, reconciliation and fallback tests."""

from __future__ import annotations

from parlaydesk.agents import suggestions as sg
from parlaydesk.data.odds_client import mock_odds, mock_player_props
from parlaydesk.data.schemas import PlayerProp
from parlaydesk.parlays.types import MONEYLINE, PROPS, SPREAD, TOTALS, Leg, Preferences, TeamFocus

FENCED_RESPONSE = """Sure! Here are today's picks:
```json
[
  {
    "name": "Lakers Long Shot",
    "description": "Home dog plus the total",
    "riskLevel": "high",
    "legs": [
      {"team": "Los Angeles Lakers", "type": "h2h", "price": +750, "gameId": "mock-nba-1"},
      {"team": "Over", "type": "totals", "price": -110, "point": 224.5, "gameId": "mock-nba-1"}
    ],
    "reasoning": "The Lakers are live at home."
  }
]
```
Good luck!"""


class FakeGateway:
    def __init__(self, text: str = "", available: bool = True, error: Exception | None = None) -> None:
        self.text = text
        self.available = available
        self.error = error
        self.prompts: list[str] = []

    def is_available(self) -> bool:
        return self.available

    def complete(self, prompt: str, max_tokens: int) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.text


def _games():
    return mock_odds("nba").games + mock_odds("nhl").games


def test_extract_fenced_response_with_plus_prices() -> None:
    result = sg.extract_suggestions(FENCED_RESPONSE)
    assert isinstance(result, sg.Extracted)
    assert result.items[0]["legs"][0]["price"] == 750


def test_extract_unfenced_array_inside_prose() -> None:
    result = sg.extract_suggestions('Picks: [{"name": "A", "legs": []}] enjoy')
    assert isinstance(result, sg.Extracted)
    assert result.items == [{"name": "A", "legs": []}]


def test_extract_failures_are_values() -> None:
    assert isinstance(sg.extract_suggestions("no picks today"), sg.Failed)
    assert isinstance(sg.extract_suggestions("[{'name': 'single quotes'}]"), sg.Failed)
    assert isinstance(sg.extract_suggestions("]["), sg.Failed)


def test_generate_from_fenced_output() -> None:
    gateway = FakeGateway(FENCED_RESPONSE)
    results = sg.SuggestionReconciler(gateway).generate(None, _games())

    assert len(results) == 1
    suggestion = results[0]
    assert suggestion.id == "sug-1"
    assert suggestion.risk_level == "high"
    first, second = suggestion.legs
    assert first.price == 750
    assert first.market_type == MONEYLINE
    assert first.sport == "NBA"
    assert first.home_team == "Los Angeles Lakers"
    assert second.market_type == TOTALS
    assert second.point == 224.5
    assert suggestion.estimated_odds == 16.23
    assert suggestion.american_odds == "+1523"
    assert len(gateway.prompts) == 1


def test_reconcile_fills_defaults_and_skips_junk() -> None:
    items = [
        "not an object",
        {"name": "No legs", "legs": []},
        {"name": "Legs not a list", "legs": "x"},
        {
            "riskLevel": "extreme",
            "legs": [
                {"team": "Boston Celtics", "type": "parlay", "price": "abc"},
                {"selection": "Toronto Maple Leafs", "type": "spreads", "price": 0, "point": "-1.5"},
            ],
        },
        {"name": "Second", "riskLevel": "LOW", "legs": [{"team": "X", "price": "+120"}]},
    ]
    results = sg.reconcile(items)

    assert [s.id for s in results] == ["sug-1", "sug-2"]
    first = results[0]
    assert first.name == sg.DEFAULT_NAME
    assert first.description == sg.DEFAULT_DESCRIPTION
    assert first.risk_level == "medium"
    assert first.reasoning == sg.DEFAULT_REASONING
    assert [leg.price for leg in first.legs] == [-110, -110]
    assert first.legs[0].market_type == MONEYLINE
    assert first.legs[1].market_type == SPREAD
    assert first.legs[1].point == -1.5
    assert results[1].risk_level == "low"
    assert results[1].legs[0].price == 120


def test_unknown_game_leaves_leg_unenriched() -> None:
    results = sg.reconcile([{"legs": [{"team": "A", "price": -110, "gameId": 42}]}], _games())
    leg = results[0].legs[0]
    assert leg.game_id == "42"
    assert leg.sport is None


def test_no_games_returns_fallback_without_dispatch() -> None:
    gateway = FakeGateway(FENCED_RESPONSE)
    results = sg.SuggestionReconciler(gateway).generate(Preferences(), [])

    assert not gateway.prompts
    assert [s.risk_level for s in results] == ["low", "medium", "high"]
    assert all("No NBA or NHL games" in (s.reasoning or "") for s in results)


def test_failing_gateway_falls_back() -> None:
    gateway = FakeGateway(error=RuntimeError("boom"))
    results = sg.SuggestionReconciler(gateway).generate(None, _games())

    assert len(gateway.prompts) == 1
    assert [s.id for s in results] == ["sug-1", "sug-2", "sug-3"]
    assert "AI analysis is unavailable" in (results[0].reasoning or "")


def test_unavailable_gateway_and_bad_output_fall_back() -> None:
    idle = FakeGateway(FENCED_RESPONSE, available=False)
    assert len(sg.SuggestionReconciler(idle).generate(None, _games())) == 3
    assert not idle.prompts

    garbled = FakeGateway("I cannot help with that.")
    assert len(sg.SuggestionReconciler(garbled).generate(None, _games())) == 3

    empty = FakeGateway('[{"name": "nothing", "legs": []}]')
    assert len(sg.SuggestionReconciler(empty).generate(None, _games())) == 3


def test_fallback_odds_are_computed() -> None:
    conservative = sg.fallback_suggestions()[0]
    assert conservative.name == "Conservative Pick"
    assert conservative.estimated_odds == 3.18
    assert conservative.american_odds == "+218"
    assert "low risk" in (conservative.reasoning or "")


def test_prompt_reflects_preferences() -> None:
    prefs = Preferences(
        favorite_teams=["Boston Celtics"],
        bet_types=[MONEYLINE, PROPS],
        risk_tolerance="aggressive",
        team_focus=[
            TeamFocus("Boston Celtics", risk="yolo", always_include=True),
            TeamFocus("Toronto Maple Leafs"),
        ],
        avoid_teams=["Montreal Canadiens"],
    )
    props = mock_player_props("nba", "mock-nba-1").props
    prompt = sg.build_suggestions_prompt(prefs, _games(), props)

    assert "[gameId: mock-nba-1]" in prompt
    assert "Risk tolerance: aggressive" in prompt
    assert "MUST INCLUDE Boston Celtics" in prompt
    assert "Lean toward Toronto Maple Leafs" in prompt
    assert "NEVER include these teams: Montreal Canadiens" in prompt
    assert "PLAYER PROPS" in prompt
    assert "LeBron James" in prompt


def test_prompt_omits_props_unless_enabled() -> None:
    props = mock_player_props("nba", "mock-nba-1").props
    prompt = sg.build_suggestions_prompt(Preferences(), _games(), props)
    assert "PLAYER PROPS" not in prompt


def test_prompt_caps_game_count() -> None:
    base = mock_odds("nba").games[0]
    games = [base.model_copy(update={"id": f"g-{idx}"}) for idx in range(15)]
    prompt = sg.build_suggestions_prompt(None, games)
    assert "Game 12 " in prompt
    assert "Game 13 " not in prompt


def test_group_props_caps_players_and_rows() -> None:
    props = [
        PlayerProp(player=f"Player {p}", market="player_points", type="Over", point=float(n), price=-110)
        for p in range(6)
        for n in range(6)
    ]
    grouped = sg.group_props(props)
    assert list(grouped) == ["Player 0", "Player 1", "Player 2", "Player 3"]
    assert all(len(rows) == 4 for rows in grouped.values())


def _legs(count: int) -> list[Leg]:
    return [Leg(selection=f"Team {idx}", market_type=MONEYLINE, price=-110) for idx in range(count)]


def test_analysis_fallback_risk_tiers() -> None:
    reconciler = sg.SuggestionReconciler(FakeGateway(available=False))
    assert "**Risk Assessment**: Moderate" in reconciler.analyze(_legs(2))
    assert "**Risk Assessment**: High" in reconciler.analyze(_legs(4))
    assert "**Risk Assessment**: Very High" in reconciler.analyze(_legs(6))


def test_analysis_uses_gateway_text() -> None:
    gateway = FakeGateway("Looks risky.")
    assert sg.SuggestionReconciler(gateway).analyze(_legs(3)) == "Looks risky."
    assert "implied probability" in gateway.prompts[0]

    assert "Parlay Analysis" in sg.SuggestionReconciler(FakeGateway("")).analyze(_legs(3))
    failing = FakeGateway(error=RuntimeError("down"))
    assert "Parlay Analysis" in sg.SuggestionReconciler(failing).analyze(_legs(3))


def _single_suggestion(*prices: str) -> str:
    legs = ", ".join(
        f'{{"team": "Team {idx}", "type": "moneyline", "price": {price}}}' for idx, price in enumerate(prices)
    )
    return f'[{{"name": "Wild", "riskLevel": "high", "legs": [{legs}]}}]'


def test_oversized_int_price_defaults() -> None:
    results = sg.SuggestionReconciler(FakeGateway(_single_suggestion("1" + "0" * 400, "-110"))).generate(None, _games())
    assert len(results) == 1
    assert [leg.price for leg in results[0].legs] == [-110, -110]


def test_degenerate_favorite_price_defaults() -> None:
    results = sg.SuggestionReconciler(FakeGateway(_single_suggestion("-1e20", "-1e20"))).generate(None, _games())
    assert len(results) == 1
    assert [leg.price for leg in results[0].legs] == [-110, -110]
    assert results[0].american_odds == "+264"


def test_overflowing_combined_odds_falls_back() -> None:
    results = sg.SuggestionReconciler(FakeGateway(_single_suggestion("1e308", "1e308", "1e308"))).generate(
        None, _games()
    )
    assert [s.name for s in results] == ["Conservative Pick", "Balanced Pick", "Value Play"]


def test_extract_skips_prose_fence() -> None:
    text = "```text\nHere is my thinking.\n```\n\n```json\n[{\"name\": \"A\", \"legs\": []}]\n```"
    result = sg.extract_suggestions(text)
    assert isinstance(result, sg.Extracted)
    assert result.items == [{"name": "A", "legs": []}]
