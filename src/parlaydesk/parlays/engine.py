"""Parlay pricing logic."""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from numbers import Real

from parlaydesk.errors import ValidationError
from parlaydesk.parlays.odds import american_to_decimal, format_american, is_valid_price, round_money
from parlaydesk.parlays.types import MONEYLINE, POINT_MARKETS, Leg, ParlayPricing

MIN_LEGS = 2
MAX_LEGS = 12


def combine_odds(legs: Iterable[Leg]) -> float:
    """Multiply leg multipliers into the combined parlay multiplier.

    Factors are multiplied in sorted order so any permutation of the same legs
    yields a bit-identical float.
    """

    return math.prod(sorted(american_to_decimal(leg.price) for leg in legs))


def validate_stake(stake: object) -> float:
    if isinstance(stake, bool) or not isinstance(stake, Real):
        raise ValidationError(f"Stake must be a number, got {stake!r}")
    value = float(stake)
    if not math.isfinite(value):
        raise ValidationError("Stake must be a finite number")
    if value < 0:
        raise ValidationError(f"Stake cannot be negative, got {value}")
    return value


def validate_leg_count(count: int) -> None:
    if count < MIN_LEGS:
        raise ValidationError(f"Parlay must have at least {MIN_LEGS} legs, got {count}")
    if count > MAX_LEGS:
        raise ValidationError(f"Parlay cannot have more than {MAX_LEGS} legs, got {count}")


def _check_price(idx: int, leg: Leg) -> None:
    if not is_valid_price(leg.price):
        raise ValidationError(f"Leg {idx} has an invalid or out-of-range price")


def validate_legs(legs: Sequence[Leg]) -> None:
    """Reject leg sets that cannot be saved as a parlay."""

    validate_leg_count(len(legs))
    for idx, leg in enumerate(legs, start=1):
        _check_price(idx, leg)
        if not leg.selection:
            raise ValidationError(f"Leg {idx} is missing a selection")
        if leg.market_type in POINT_MARKETS and leg.point is None:
            raise ValidationError(f"Leg {idx} ({leg.market_type}) requires a point value")
        if leg.market_type == MONEYLINE and leg.point is not None:
            raise ValidationError(f"Leg {idx} (moneyline) cannot carry a point value")


def price_parlay(legs: Sequence[Leg], stake: float) -> ParlayPricing:
    """Price a validated leg set for the given stake."""

    validate_leg_count(len(legs))
    for idx, leg in enumerate(legs, start=1):
        _check_price(idx, leg)
    amount = validate_stake(stake)

    combined = combine_odds(legs)
    if not (math.isfinite(combined * 100) and math.isfinite(amount * combined)):
        raise ValidationError("Combined odds are out of range")
    payout = round_money(amount * combined)
    return ParlayPricing(
        combined_multiplier=combined,
        american_display=format_american(combined),
        payout=payout,
        profit=round_money(payout - amount),
    )
