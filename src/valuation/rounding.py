from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round like a till does: halves go up, not to the nearest even digit."""
    quantum = Decimal(1).scaleb(-ndigits)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def round_currency(value: float) -> int:
    return int(round_half_up(value))


def as_percentage(factor: float) -> float:
    return round_half_up(factor * 100, 1)
