from __future__ import annotations

from datetime import date, timedelta

import pytest

from money_app.analytics.errors import InvalidBounds, InvalidPeriod
from money_app.analytics.periods import (
    PeriodBounds,
    PeriodKind,
    add_period,
    iter_days,
    month_bounds,
    previous,
    resolve,
)


def test_monthly_leap_february():
    bounds = resolve(PeriodKind.MONTHLY, date(2024, 2, 15))
    assert bounds == PeriodBounds(date(2024, 2, 1), date(2024, 2, 29))


def test_monthly_common_february():
    assert resolve("monthly", date(2023, 2, 10)).end == date(2023, 2, 28)


@pytest.mark.parametrize("ref", [date(2024, 5, 13), date(2024, 5, 15), date(2024, 5, 19)])
def test_weekly_starts_on_monday(ref):
    bounds = resolve(PeriodKind.WEEKLY, ref)
    assert bounds.start == date(2024, 5, 13)
    assert bounds.start.weekday() == 0
    assert bounds.end == date(2024, 5, 19)
    assert bounds.days == 7


def test_yearly_and_daily():
    assert resolve("yearly", date(2024, 7, 4)) == PeriodBounds(date(2024, 1, 1), date(2024, 12, 31))
    assert resolve("daily", date(2024, 7, 4)) == PeriodBounds(date(2024, 7, 4), date(2024, 7, 4))


def test_parse_is_case_and_space_tolerant():
    assert PeriodKind.parse(" Monthly ") is PeriodKind.MONTHLY


@pytest.mark.parametrize("value", ["fortnightly", "", "MONTH", None, 3])
def test_unknown_period_is_rejected(value):
    with pytest.raises(InvalidPeriod):
        resolve(value, date(2024, 1, 1))


def test_invalid_period_is_value_error():
    with pytest.raises(ValueError):
        PeriodKind.parse("quarterly")


def test_bounds_reject_end_before_start():
    with pytest.raises(InvalidBounds):
        PeriodBounds(date(2024, 1, 2), date(2024, 1, 1))


def test_single_day_bounds_are_valid():
    bounds = PeriodBounds(date(2024, 1, 1), date(2024, 1, 1))
    assert bounds.days == 1
    assert bounds.contains(date(2024, 1, 1))
    assert not bounds.contains(date(2024, 1, 2))


def test_previous_month_from_january_31():
    current = resolve(PeriodKind.MONTHLY, date(2024, 1, 31))
    assert previous(current, PeriodKind.MONTHLY) == PeriodBounds(date(2023, 12, 1), date(2023, 12, 31))


def test_previous_month_honours_month_length():
    current = resolve(PeriodKind.MONTHLY, date(2024, 3, 31))
    assert previous(current, "monthly") == PeriodBounds(date(2024, 2, 1), date(2024, 2, 29))


def test_previous_of_leap_year_is_common_year():
    prev = previous(resolve("yearly", date(2024, 6, 1)), "yearly")
    assert prev == PeriodBounds(date(2023, 1, 1), date(2023, 12, 31))
    assert prev.days == 365


def test_previous_week_and_day():
    week = resolve("weekly", date(2024, 5, 15))
    assert previous(week, "weekly") == PeriodBounds(date(2024, 5, 6), date(2024, 5, 12))
    day = resolve("daily", date(2024, 3, 1))
    assert previous(day, "daily") == PeriodBounds(date(2024, 2, 29), date(2024, 2, 29))


def test_add_period_clamps_month_end():
    assert add_period(date(2024, 1, 31), "monthly") == date(2024, 2, 29)
    assert add_period(date(2024, 1, 31), "monthly", 2) == date(2024, 3, 31)
    assert add_period(date(2024, 2, 29), "yearly") == date(2025, 2, 28)
    assert add_period(date(2024, 12, 15), "monthly") == date(2025, 1, 15)


def test_add_period_days_and_weeks():
    assert add_period(date(2024, 2, 28), "daily") == date(2024, 2, 29)
    assert add_period(date(2024, 2, 28), "weekly", 2) == date(2024, 3, 13)


def test_iter_days_covers_bounds():
    bounds = month_bounds(2024, 2)
    days = list(iter_days(bounds))
    assert len(days) == bounds.days == 29
    assert days[0] == date(2024, 2, 1)
    assert days[-1] == date(2024, 2, 29)
    assert all(b - a == timedelta(days=1) for a, b in zip(days, days[1:]))
