"""AI suggestion and parlay analysis endpoints."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter
from fastapi.concurrency import run_in_threadpool
from sqlalchemy import select

from parlaydesk.api.deps import OddsClientDep, OptionalUserDep, ReconcilerDep, SessionDep, UserDep
from parlaydesk.api.schemas import AnalyzeRequest, PreferencesPayload
from parlaydesk.data.odds_client import OddsApiClient
from parlaydesk.data.reference import DISCLAIMER_ANALYSIS, DISCLAIMER_SUGGESTIONS
from parlaydesk.data.schemas import Game, PlayerProp
from parlaydesk.db.models import SuggestionHistory
from parlaydesk.errors import ValidationError
from parlaydesk.parlays.engine import MIN_LEGS

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/suggestions", tags=["suggestions"])


async def _props_for_first_games(odds: OddsApiClient, games: list[Game]) -> list[PlayerProp]:
    """Props for the first listed game of each sport; failures are skipped."""

    first_by_sport: dict[str, Game] = {}
    for game in games:
        first_by_sport.setdefault(game.sport.lower(), game)
    results = await asyncio.gather(
        *(odds.fetch_player_props(sport, game.id) for sport, game in first_by_sport.items()),
        return_exceptions=True,
    )
    props: list[PlayerProp] = []
    for sport, result in zip(first_by_sport, results):
        if isinstance(result, BaseException):
            logger.warning("Player props for %s unavailable: %s", sport, result)
            continue
        props.extend(result.props)
    return props


@router.get("/daily")
async def daily(user: OptionalUserDep, reconciler: ReconcilerDep, odds: OddsClientDep) -> dict[str, Any]:
    preferences = None
    if user is not None and user.preferences is not None:
        preferences = PreferencesPayload.from_model(user.preferences).to_preferences()

    games = await odds.fetch_candidate_games()
    props: list[PlayerProp] = []
    if games and preferences is not None and preferences.props_enabled and reconciler.gateway.is_available():
        props = await _props_for_first_games(odds, games)

    suggestions = await run_in_threadpool(reconciler.generate, preferences, games, props)
    return {
        "suggestions": [suggestion.to_dict() for suggestion in suggestions],
        "generatedAt": datetime.now(timezone.utc).isoformat(),
        "disclaimer": DISCLAIMER_SUGGESTIONS,
    }


@router.post("/analyze")
async def analyze(
    payload: AnalyzeRequest,
    user: OptionalUserDep,
    reconciler: ReconcilerDep,
    session: SessionDep,
) -> dict[str, Any]:
    if len(payload.legs) < MIN_LEGS:
        raise ValidationError(f"At least {MIN_LEGS} legs required for analysis")
    legs = [item.to_leg() for item in payload.legs]

    analysis = await run_in_threadpool(reconciler.analyze, legs)
    if user is not None:
        session.add(
            SuggestionHistory(user_id=user.id, legs=[leg.to_dict() for leg in legs], analysis=analysis)
        )
        session.commit()
    return {"analysis": analysis, "disclaimer": DISCLAIMER_ANALYSIS}


@router.get("/history")
def history(user: UserDep, session: SessionDep) -> dict[str, Any]:
    stmt = (
        select(SuggestionHistory)
        .where(SuggestionHistory.user_id == user.id)
        .order_by(SuggestionHistory.created_at.desc(), SuggestionHistory.id.desc())
        .limit(20)
    )
    return {
        "history": [
            {
                "id": row.id,
                "legs": row.legs,
                "analysis": row.analysis,
                "createdAt": row.created_at.isoformat(),
            }
            for row in session.scalars(stmt)
        ]
    }
