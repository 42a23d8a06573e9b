"""Parlay engine tests."""

from __future__ import annotations

import itertools
import math

import pytest

from parlaydesk.errors import ValidationError
from parlaydesk.parlays import engine
from parlaydesk.parlays.types import MONEYLINE, SPREAD, TOTALS, Leg


def _leg(price: int, market_type: str = MONEYLINE, point: float | None = None, name: str = "Team") -> Leg:
    return Leg(selection=name, market_type=market_type, price=price, point=point)


def test_combined_multiplier_is_permutation_invariant() -> None:
    legs = [_leg(-110), _leg(150), _leg(-200), _leg(320), _leg(-135)]
    expected = engine.combine_odds(legs)
    for perm in itertools.permutations(legs):
        assert engine.combine_odds(perm) == expected


def test_price_two_leg_parlay() -> None:
    pricing = engine.price_parlay([_leg(-150), _leg(130)], 10)
    assert pricing.combined_multiplier == pytest.approx(3.8333333, rel=1e-6)
    assert pricing.estimated_odds == 3.83
    assert pricing.payout == 38.33
    assert pricing.profit == 28.33
    assert pricing.american_display == "+283"


def test_price_standard_juice() -> None:
    pricing = engine.price_parlay([_leg(-110), _leg(-110)], 10)
    assert pricing.estimated_odds == 3.64
    assert pricing.payout == 36.45
    assert pricing.american_display == "+264"


@pytest.mark.parametrize("count", [1, 13])
def test_leg_count_bounds_rejected(count: int) -> None:
    with pytest.raises(ValidationError):
        engine.price_parlay([_leg(-110)] * count, 10)


@pytest.mark.parametrize("count", [2, 12])
def test_leg_count_bounds_accepted(count: int) -> None:
    pricing = engine.price_parlay([_leg(-110)] * count, 10)
    assert pricing.payout > 10


def test_zero_stake_allowed() -> None:
    pricing = engine.price_parlay([_leg(-110), _leg(120)], 0)
    assert pricing.payout == 0
    assert pricing.profit == 0


@pytest.mark.parametrize("stake", [-1, math.nan, math.inf, True, "10"])
def test_bad_stake_rejected(stake: object) -> None:
    with pytest.raises(ValidationError):
        engine.price_parlay([_leg(-110), _leg(120)], stake)  # type: ignore[arg-type]


def test_zero_price_rejected() -> None:
    with pytest.raises(ValidationError, match="Leg 2"):
        engine.price_parlay([_leg(-110), _leg(0)], 10)


def test_validate_legs_point_rules() -> None:
    engine.validate_legs([_leg(-110, SPREAD, -3.5), _leg(-110, TOTALS, 220.5, "Over")])
    with pytest.raises(ValidationError, match="requires a point"):
        engine.validate_legs([_leg(-110, SPREAD), _leg(120)])
    with pytest.raises(ValidationError, match="moneyline"):
        engine.validate_legs([_leg(-110, MONEYLINE, 1.5), _leg(120)])
    with pytest.raises(ValidationError, match="selection"):
        engine.validate_legs([_leg(-110, name=""), _leg(120)])


def test_prop_legs_price_like_any_other() -> None:
    legs = [_leg(-115, "player_points", 25.5, "LeBron James Over"), _leg(-110)]
    engine.validate_legs(legs)
    assert engine.price_parlay(legs, 10).payout == pytest.approx(35.69, abs=0.01)


@pytest.mark.parametrize("price", [-(10**20), 10**400, True])
def test_out_of_range_price_rejected(price: int) -> None:
    with pytest.raises(ValidationError, match="Leg 1"):
        engine.price_parlay([_leg(price), _leg(-110)], 10)


def test_overflowing_combined_odds_rejected() -> None:
    with pytest.raises(ValidationError, match="out of range"):
        engine.price_parlay([_leg(10**306)] * 3, 10)
