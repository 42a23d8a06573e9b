"""AI parlay suggestions and analysis with deterministic fallbacks.

The generative model is asked for a strict JSON contract but its output is
treated as untrusted text: it is extracted, repaired, parsed and then rebuilt
field by field into :class:`Suggestion` objects. Combined odds are always
recomputed from the legs. Any failure along the way (no gateway, provider
error, unparseable or empty output) lands on the built-in suggestion set, so
``generate`` never raises.
"""

from __future__ import annotations

import json
import logging
import math
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Protocol

from parlaydesk.data.reference import (
    AI_UNAVAILABLE_REASONING,
    DEFAULT_SUGGESTIONS,
    NO_GAMES_REASONING,
    SuggestionTemplate,
)
from parlaydesk.data.schemas import Game, PlayerProp
from parlaydesk.parlays.engine import combine_odds
from parlaydesk.parlays.odds import (
    format_american,
    format_price,
    implied_probability,
    is_valid_price,
    round_money,
)
from parlaydesk.parlays.types import (
    MONEYLINE,
    PROPS,
    RISK_LEVELS,
    Leg,
    Preferences,
    Suggestion,
    normalize_market_type,
)

logger = logging.getLogger(__name__)

DEFAULT_PRICE = -110
MAX_PROMPT_GAMES = 12
MAX_PROP_PLAYERS = 4
MAX_PROPS_PER_PLAYER = 4

DEFAULT_NAME = "AI Suggestion"
DEFAULT_DESCRIPTION = "AI-generated parlay based on today's board"
DEFAULT_RISK = "medium"
DEFAULT_REASONING = "Analysis based on current odds and trends."

_FENCE_RE = re.compile(r"```[A-Za-z]*\s*(.*?)```", re.DOTALL)
_SIGNED_NUMBER_RE = re.compile(r":(\s*)\+(\d)")
_NUMBER_RE = re.compile(r"[-+]?\d+(?:\.\d+)?")


class TextGateway(Protocol):
    def is_available(self) -> bool: ...

    def complete(self, prompt: str, max_tokens: int) -> str: ...


@dataclass(frozen=True)
class Extracted:
    items: list[Any]


@dataclass(frozen=True)
class Failed:
    reason: str


ExtractionResult = Extracted | Failed


def extract_suggestions(text: str) -> ExtractionResult:
    """Pull the JSON suggestion array out of a model response."""

    cleaned = text.strip()
    # prefer the first fenced block that can hold the array; prose fences are skipped
    for fenced in _FENCE_RE.finditer(cleaned):
        if "[" in fenced.group(1):
            cleaned = fenced.group(1).strip()
            break

    start, end = cleaned.find("["), cleaned.rfind("]")
    if start == -1 or end <= start:
        return Failed("no JSON array in response")
    # JSON has no unary plus; models like to write "price": +750
    candidate = _SIGNED_NUMBER_RE.sub(r":\1\2", cleaned[start : end + 1])
    try:
        parsed = json.loads(candidate)
    except json.JSONDecodeError as exc:
        return Failed(f"invalid JSON: {exc.msg}")
    if not isinstance(parsed, list):
        return Failed("response JSON is not an array")
    return Extracted(parsed)


def _coerce_price(value: Any) -> int:
    if isinstance(value, bool):
        return DEFAULT_PRICE
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return DEFAULT_PRICE
    if not isinstance(value, (int, float)):
        return DEFAULT_PRICE
    try:
        price = int(round(value))
    except (OverflowError, ValueError):
        return DEFAULT_PRICE
    return price if is_valid_price(price) else DEFAULT_PRICE


def _coerce_point(value: Any) -> float | None:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else None
    if isinstance(value, str):
        match = _NUMBER_RE.search(value)
        return float(match.group()) if match else None
    return None


def _text(value: Any, default: str) -> str:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return default


def _reconcile_leg(raw: Mapping[str, Any], games: Mapping[str, Game]) -> Leg:
    market = normalize_market_type(str(raw.get("type") or "")) or MONEYLINE
    game_id = raw.get("gameId", raw.get("game_id"))
    game_id = str(game_id) if game_id not in (None, "") else None
    game = games.get(game_id) if game_id else None
    return Leg(
        selection=_text(raw.get("team") or raw.get("selection") or raw.get("player"), "Unknown selection"),
        market_type=market,
        price=_coerce_price(raw.get("price")),
        point=_coerce_point(raw.get("point")),
        game_id=game_id,
        sport=game.sport if game else None,
        home_team=game.home_team if game else None,
        away_team=game.away_team if game else None,
    )


def reconcile(items: Sequence[Any], games: Sequence[Game] = ()) -> list[Suggestion]:
    """Rebuild parsed model output into suggestions, dropping unusable entries."""

    by_id = {game.id: game for game in games}
    suggestions: list[Suggestion] = []
    for item in items:
        if not isinstance(item, Mapping):
            continue
        raw_legs = item.get("legs")
        if not isinstance(raw_legs, list):
            continue
        legs = tuple(_reconcile_leg(raw, by_id) for raw in raw_legs if isinstance(raw, Mapping))
        if not legs:
            continue
        combined = combine_odds(legs)
        if not math.isfinite(combined * 100) or combined <= 1:
            logger.warning("Dropping AI suggestion with out-of-range combined odds: %s", combined)
            continue
        risk = str(item.get("riskLevel") or "").strip().lower()
        suggestions.append(
            Suggestion(
                id=f"sug-{len(suggestions) + 1}",
                name=_text(item.get("name"), DEFAULT_NAME),
                description=_text(item.get("description"), DEFAULT_DESCRIPTION),
                risk_level=risk if risk in RISK_LEVELS else DEFAULT_RISK,
                legs=legs,
                estimated_odds=round_money(combined),
                american_odds=format_american(combined),
                reasoning=_text(item.get("reasoning"), DEFAULT_REASONING),
            )
        )
    return suggestions


def fallback_suggestions(
    templates: Sequence[SuggestionTemplate] = DEFAULT_SUGGESTIONS,
    reasoning: str = AI_UNAVAILABLE_REASONING,
) -> list[Suggestion]:
    suggestions = []
    for idx, template in enumerate(templates, start=1):
        combined = combine_odds(template.legs)
        suggestions.append(
            Suggestion(
                id=f"sug-{idx}",
                name=template.name,
                description=template.description,
                risk_level=template.risk_level,
                legs=template.legs,
                estimated_odds=round_money(combined),
                american_odds=format_american(combined),
                reasoning=reasoning.format(risk=template.risk_level),
            )
        )
    return suggestions


def _describe_outcome(market_type: str, name: str, price: int, point: float | None) -> str:
    if point is None:
        return f"{name} {format_price(price)}"
    if market_type == "totals":
        return f"{name} {point:g} ({format_price(price)})"
    return f"{name} {point:+g} ({format_price(price)})"


def _describe_game(idx: int, game: Game) -> str:
    lines = [
        f"Game {idx} [gameId: {game.id}] {game.sport}: {game.away_team} @ {game.home_team} "
        f"({game.start_time.isoformat()})"
    ]
    if game.bookmakers:
        for market in game.bookmakers[0].markets:
            label = normalize_market_type(market.type) or market.type
            outcomes = ", ".join(
                _describe_outcome(label, o.name, o.price, o.point) for o in market.outcomes
            )
            lines.append(f"  {label}: {outcomes}")
    return "\n".join(lines)


def group_props(
    props: Sequence[PlayerProp],
    max_players: int = MAX_PROP_PLAYERS,
    max_per_player: int = MAX_PROPS_PER_PLAYER,
) -> dict[str, list[PlayerProp]]:
    grouped: dict[str, list[PlayerProp]] = {}
    for prop in props:
        if prop.player not in grouped:
            if len(grouped) >= max_players:
                continue
            grouped[prop.player] = []
        if len(grouped[prop.player]) < max_per_player:
            grouped[prop.player].append(prop)
    return grouped


def build_suggestions_prompt(
    preferences: Preferences | None,
    games: Sequence[Game],
    player_props: Sequence[PlayerProp] | None = None,
    max_games: int = MAX_PROMPT_GAMES,
    max_players: int = MAX_PROP_PLAYERS,
    max_per_player: int = MAX_PROPS_PER_PLAYER,
) -> str:
    prefs = preferences or Preferences()
    sections = [
        "You are helping with sports betting RESEARCH. Build 3 parlay suggestions "
        "using ONLY the games and prices listed below.",
        "",
        "AVAILABLE GAMES:",
        *(_describe_game(idx, game) for idx, game in enumerate(games[:max_games], start=1)),
    ]

    if player_props and PROPS in prefs.bet_types:
        sections += ["", "PLAYER PROPS (by player):"]
        for player, rows in group_props(player_props, max_players, max_per_player).items():
            lines = ", ".join(
                f"{row.market} {row.type} {row.point:g} ({format_price(row.price)})"
                if row.point is not None
                else f"{row.market} {row.type} ({format_price(row.price)})"
                for row in rows
            )
            sections.append(f"  {player}: {lines}")

    sections += ["", "USER PREFERENCES:"]
    if prefs.favorite_teams:
        sections.append(f"Favorite teams: {', '.join(prefs.favorite_teams)}")
    sections.append(f"Risk tolerance: {prefs.risk_tolerance}")
    if prefs.bet_types:
        sections.append(f"Allowed bet types: {', '.join(prefs.bet_types)}")
    for focus in prefs.team_focus:
        if focus.always_include:
            sections.append(
                f"MUST INCLUDE {focus.team} in every suggestion when they are playing "
                f"(risk appetite: {focus.risk})."
            )
        else:
            sections.append(f"Lean toward {focus.team} (risk appetite: {focus.risk}).")
    if prefs.avoid_teams:
        sections.append(f"NEVER include these teams: {', '.join(prefs.avoid_teams)}")

    sections += [
        "",
        "Respond with ONLY a JSON array of exactly 3 objects, no other text:",
        '1. "Conservative" - 2 legs, riskLevel "low"',
        '2. "Balanced" - 3 legs, riskLevel "medium"',
        '3. "Value" - 3-4 legs, riskLevel "high"',
        "Each object has: name (string), description (one line), riskLevel (low|medium|high), "
        "legs (array of {team, type: moneyline|spread|totals|player_*, price (integer), "
        "point (number or null), gameId}), reasoning (2-3 sentences).",
        "Use prices exactly as listed. This is research only, not betting advice.",
    ]
    return "\n".join(sections)


def _risk_tier(leg_count: int) -> str:
    if leg_count <= 3:
        return "Moderate"
    if leg_count <= 5:
        return "High"
    return "Very High"


def default_analysis(legs: Sequence[Any]) -> str:
    return "\n".join(
        [
            "**Parlay Analysis**",
            "",
            f"This {len(legs)}-leg parlay combines multiple bets that all must win for a payout.",
            "",
            f"**Risk Assessment**: {_risk_tier(len(legs))}",
            "",
            "**Key Considerations**:",
            "- Each additional leg significantly reduces win probability",
            "- Consider the correlation between picks",
            "- Check for any scheduling conflicts or injury reports",
            "",
            "**Reminder**: This is for research purposes only. "
            "Past performance does not guarantee future results.",
        ]
    )


def build_analysis_prompt(legs: Sequence[Leg]) -> str:
    described = []
    for idx, leg in enumerate(legs, start=1):
        line = f"{idx}. {leg.selection} ({leg.market_type}"
        if leg.point is not None:
            line += f" {leg.point:g}"
        line += f") @ {format_price(leg.price)}"
        if leg.price:
            line += f", implied probability {implied_probability(leg.price):.1%}"
        if leg.home_team and leg.away_team:
            line += f" [{leg.away_team} @ {leg.home_team}]"
        described.append(line)
    return (
        "Analyze this sports parlay for research purposes. Be concise.\n\n"
        "Legs:\n" + "\n".join(described) + "\n\n"
        "Provide:\n"
        "1. Brief risk assessment\n"
        "2. Key factors to consider\n"
        "3. Potential concerns\n\n"
        "End with a reminder this is for research only, not betting advice."
    )


class SuggestionReconciler:
    """Turns preferences and candidate games into suggestions via the text gateway."""

    def __init__(
        self,
        gateway: TextGateway,
        fallback: Sequence[SuggestionTemplate] = DEFAULT_SUGGESTIONS,
        max_tokens: int = 1000,
        analysis_max_tokens: int = 500,
        max_games: int = MAX_PROMPT_GAMES,
        max_prop_players: int = MAX_PROP_PLAYERS,
        max_props_per_player: int = MAX_PROPS_PER_PLAYER,
    ) -> None:
        self.gateway = gateway
        self.fallback = tuple(fallback)
        self.max_tokens = max_tokens
        self.analysis_max_tokens = analysis_max_tokens
        self.max_games = max_games
        self.max_prop_players = max_prop_players
        self.max_props_per_player = max_props_per_player

    def generate(
        self,
        preferences: Preferences | None,
        games: Sequence[Game],
        player_props: Sequence[PlayerProp] | None = None,
    ) -> list[Suggestion]:
        if not games:
            logger.info("No candidate games; returning built-in suggestions")
            return fallback_suggestions(self.fallback, NO_GAMES_REASONING)
        if not self.gateway.is_available():
            return fallback_suggestions(self.fallback)

        prompt = build_suggestions_prompt(
            preferences,
            games,
            player_props,
            self.max_games,
            self.max_prop_players,
            self.max_props_per_player,
        )
        try:
            text = self.gateway.complete(prompt, self.max_tokens)
        except Exception as exc:
            logger.warning("AI suggestion request failed: %s", exc)
            return fallback_suggestions(self.fallback)

        result = extract_suggestions(text)
        if isinstance(result, Failed):
            logger.warning("Could not extract AI suggestions: %s", result.reason)
            return fallback_suggestions(self.fallback)

        suggestions = reconcile(result.items, games)
        if not suggestions:
            logger.warning("AI response held no usable suggestions")
            return fallback_suggestions(self.fallback)
        return suggestions

    def analyze(self, legs: Sequence[Leg]) -> str:
        """Free-text risk analysis for a user's leg set; templated when AI is unavailable."""

        if not self.gateway.is_available():
            return default_analysis(legs)
        try:
            text = self.gateway.complete(build_analysis_prompt(legs), self.analysis_max_tokens)
        except Exception as exc:
            logger.warning("AI analysis request failed: %s", exc)
            return default_analysis(legs)
        return text or default_analysis(legs)
