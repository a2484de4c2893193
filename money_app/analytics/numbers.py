from __future__ import annotations

from typing import Any

from .errors import DivisionGuardViolation


def to_amount(value: Any) -> float:
    """Coerce a stored amount (Decimal, str, number) to ``float``; absent amounts count as zero."""
    if value is None or value == "":
        return 0.0
    return float(value)


def checked_divide(numerator: float, denominator: float) -> float:
    if denominator == 0:
        raise DivisionGuardViolation(f"cannot divide {numerator} by zero")
    return numerator / denominator


def percent_of(part: float, whole: float) -> float:
    """``part`` as a percentage of ``whole``; 0 when ``whole`` is not positive."""
    if whole <= 0:
        return 0.0
    # multiply first so exact inputs stay exact (850000 of 1000000 -> 85.0)
    return checked_divide(part * 100, whole)


def round_money(value: float) -> float:
    return round(float(value), 2)


def round_pct(value: float) -> float:
    return round(float(value), 2)
