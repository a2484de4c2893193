from __future__ import annotations

import doctest
import math
from decimal import Decimal

import pytest

from money_app.analytics import change
from money_app.analytics.change import change_pct
from money_app.analytics.errors import DivisionGuardViolation
from money_app.analytics.numbers import checked_divide, percent_of, to_amount


@pytest.mark.parametrize(
    "current,previous,expected",
    [
        (500_000, 400_000, 25.0),
        (300_000, 400_000, -25.0),
        (0, 0, 0.0),
        (100, 0, 100.0),
        (-50, 0, -100.0),
        (0, 100, -100.0),
        (-50, -100, 50.0),
    ],
)
def test_change_pct(current, previous, expected):
    assert change_pct(current, previous) == expected


def test_change_pct_is_always_finite():
    for current, previous in [(1e12, 0), (-1e12, 0), (0, 0), (1, 1e-9)]:
        assert math.isfinite(change_pct(current, previous))


def test_docstring_examples():
    assert doctest.testmod(change).failed == 0


def test_checked_divide_guards_zero():
    with pytest.raises(DivisionGuardViolation):
        checked_divide(1, 0)
    assert checked_divide(3, 4) == 0.75


def test_percent_of_and_to_amount():
    assert percent_of(5, 0) == 0
    assert percent_of(1, 3) == pytest.approx(33.333, rel=1e-3)
    assert to_amount(None) == 0.0
    assert to_amount("12.5") == 12.5
    assert to_amount(Decimal("1500.2500")) == 1500.25
    assert to_amount("") == 0.0
