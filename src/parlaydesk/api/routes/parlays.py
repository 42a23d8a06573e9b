"""Saved parlay endpoints."""

from __future__ import annotations

import logging
from datetime import date

from fastapi import APIRouter, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from parlaydesk.api.deps import OptionalUserDep, SessionDep, SettingsDep, UserDep
from parlaydesk.api.schemas import (
    CreateParlayRequest,
    CreateParlayResponse,
    LegIn,
    ParlayResponse,
    PriceRequest,
    PricingResponse,
    UpdateParlayRequest,
)
from parlaydesk.db.models import Parlay as ParlayModel
from parlaydesk.db.models import User
from parlaydesk.errors import NotFoundError
from parlaydesk.parlays.engine import price_parlay, validate_legs
from parlaydesk.parlays.types import Leg, ParlayPricing

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/parlays", tags=["parlays"])


def _to_legs(items: list[LegIn]) -> list[Leg]:
    return [item.to_leg() for item in items]


def _price(legs: list[Leg], stake: float) -> ParlayPricing:
    validate_legs(legs)
    return price_parlay(legs, stake)


def _default_name(today: date | None = None) -> str:
    today = today or date.today()
    return f"Parlay {today.strftime('%b')} {today.day}, {today.year}"


def _owned_parlay(session: Session, user: User, parlay_id: int) -> ParlayModel:
    parlay = session.scalars(
        select(ParlayModel).where(ParlayModel.id == parlay_id, ParlayModel.user_id == user.id)
    ).first()
    if parlay is None:
        raise NotFoundError("Parlay not found")
    return parlay


def _parlay_to_response(parlay: ParlayModel) -> ParlayResponse:
    return ParlayResponse(
        id=parlay.id,
        name=parlay.name,
        legs=parlay.legs,
        estimated_odds=parlay.estimated_odds,
        american_odds=parlay.american_odds,
        estimated_payout=parlay.estimated_payout,
        stake=parlay.stake,
        status=parlay.status,
        created_at=parlay.created_at,
        updated_at=parlay.updated_at,
    )


@router.get("", response_model=dict[str, list[ParlayResponse]])
def list_parlays(user: UserDep, session: SessionDep) -> dict[str, list[ParlayResponse]]:
    stmt = (
        select(ParlayModel)
        .where(ParlayModel.user_id == user.id)
        .order_by(ParlayModel.created_at.desc(), ParlayModel.id.desc())
    )
    return {"parlays": [_parlay_to_response(row) for row in session.scalars(stmt)]}


@router.post("", response_model=CreateParlayResponse, status_code=status.HTTP_201_CREATED)
def create_parlay(
    payload: CreateParlayRequest,
    user: UserDep,
    session: SessionDep,
    settings: SettingsDep,
) -> CreateParlayResponse:
    legs = _to_legs(payload.legs)
    stake = payload.stake if payload.stake is not None else settings.default_stake
    pricing = _price(legs, stake)

    parlay = ParlayModel(
        user_id=user.id,
        name=payload.name or _default_name(),
        legs=[leg.to_dict() for leg in legs],
        estimated_odds=pricing.estimated_odds,
        american_odds=pricing.american_display,
        estimated_payout=pricing.payout,
        stake=stake,
        status="saved",
    )
    session.add(parlay)
    session.commit()
    logger.info("User %s saved parlay %s (%s legs)", user.id, parlay.id, len(legs))
    return CreateParlayResponse(
        id=parlay.id,
        estimated_odds=pricing.estimated_odds,
        american_odds=pricing.american_display,
        estimated_payout=pricing.payout,
    )


@router.post("/price", response_model=PricingResponse)
def price(payload: PriceRequest, _: OptionalUserDep, settings: SettingsDep) -> PricingResponse:
    legs = _to_legs(payload.legs)
    stake = payload.stake if payload.stake is not None else settings.default_stake
    pricing = _price(legs, stake)
    return PricingResponse(
        leg_count=len(legs),
        decimal_odds=pricing.estimated_odds,
        american_odds=pricing.american_display,
        stake=stake,
        payout=pricing.payout,
        profit=pricing.profit,
    )


@router.get("/{parlay_id}", response_model=ParlayResponse)
def get_parlay(parlay_id: int, user: UserDep, session: SessionDep) -> ParlayResponse:
    return _parlay_to_response(_owned_parlay(session, user, parlay_id))


@router.put("/{parlay_id}")
def update_parlay(
    parlay_id: int,
    payload: UpdateParlayRequest,
    user: UserDep,
    session: SessionDep,
) -> dict[str, object]:
    parlay = _owned_parlay(session, user, parlay_id)
    legs = _to_legs(payload.legs) if payload.legs is not None else [Leg.from_dict(raw) for raw in parlay.legs]
    stake = payload.stake if payload.stake is not None else parlay.stake
    pricing = _price(legs, stake)

    parlay.name = payload.name or parlay.name
    parlay.legs = [leg.to_dict() for leg in legs]
    parlay.stake = stake
    parlay.estimated_odds = pricing.estimated_odds
    parlay.american_odds = pricing.american_display
    parlay.estimated_payout = pricing.payout
    parlay.status = payload.status or parlay.status
    session.commit()
    return {
        "message": "Parlay updated",
        "estimatedOdds": pricing.estimated_odds,
        "americanOdds": pricing.american_display,
        "estimatedPayout": pricing.payout,
    }


@router.delete("/{parlay_id}")
def delete_parlay(parlay_id: int, user: UserDep, session: SessionDep) -> dict[str, str]:
    session.delete(_owned_parlay(session, user, parlay_id))
    session.commit()
    return {"message": "Parlay deleted"}
