"""American price <-> decimal multiplier conversions."""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal


def round_half_up(value: float, places: int = 2) -> float:
    """Round half away from zero on the shortest decimal repr of ``value``.

    ``round()`` is banker's rounding on the binary value, so ``round(2.675, 2)``
    gives 2.67. Going through ``repr`` keeps amounts like 2.675 and 1.005 on the
    side a person reading them would expect.
    """

    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def round_money(value: float) -> float:
    return round_half_up(value, 2)


def american_to_decimal(price: int) -> float:
    """Convert an American price into the payout multiplier for one unit staked."""

    if price == 0:
        raise ValueError("American price cannot be zero")
    return 1 + (price / 100) if price > 0 else 1 + (100 / abs(price))


def is_valid_price(price: int) -> bool:
    """True when ``price`` maps to a finite multiplier strictly above 1."""

    if isinstance(price, bool) or not isinstance(price, int) or price == 0:
        return False
    try:
        multiplier = american_to_decimal(price)
    except OverflowError:
        return False
    return math.isfinite(multiplier) and multiplier > 1


def decimal_to_american(multiplier: float) -> int:
    if multiplier <= 1:
        raise ValueError(f"Multiplier must be greater than 1, got {multiplier!r}")
    if multiplier >= 2:
        return int(round_half_up((multiplier - 1) * 100, 0))
    return int(round_half_up(-100 / (multiplier - 1), 0))


def format_american(multiplier: float) -> str:
    """Display a combined multiplier as an American price, e.g. ``+283``."""

    american = decimal_to_american(multiplier)
    return f"+{american}" if multiplier >= 2 else str(american)


def format_price(price: int) -> str:
    return f"{price:+d}"


def implied_probability(price: int) -> float:
    """Convert an American price into implied probability."""

    if price == 0:
        raise ValueError("American price cannot be zero")
    if price > 0:
        return 100 / (price + 100)
    return -price / (-price + 100)
