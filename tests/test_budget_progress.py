from __future__ import annotations

from decimal import Decimal

import pytest

from money_app.analytics.budgeting import (
    DASHBOARD_ALERT_THRESHOLD,
    BudgetStatus,
    classify,
    progress,
)


def test_warning_when_over_eighty_percent():
    result = progress(1_000_000, 850_000)
    assert result.spent == 850_000
    assert result.remaining == 150_000
    assert result.percentage == 85.0
    assert classify(result.percentage) is BudgetStatus.WARNING
    assert result.percentage < DASHBOARD_ALERT_THRESHOLD


def test_over_budget_is_not_clamped():
    result = progress(1_000_000, 1_200_000)
    assert result.remaining == 0
    assert result.percentage == 120.0
    assert classify(result.percentage) is BudgetStatus.OVER_BUDGET


def test_zero_budget_reports_zero_percent():
    result = progress(0, 5_000)
    assert result.percentage == 0
    assert result.remaining == 0
    assert classify(result.percentage) is BudgetStatus.OK


def test_missing_sum_counts_as_zero():
    result = progress(500, None)
    assert (result.spent, result.remaining, result.percentage) == (0, 500, 0)


def test_decimal_inputs():
    assert progress(Decimal("1000000"), Decimal("850000")).percentage == 85.0


@pytest.mark.parametrize(
    "percentage,status",
    [
        (0, BudgetStatus.OK),
        (80, BudgetStatus.OK),
        (80.01, BudgetStatus.WARNING),
        (100, BudgetStatus.WARNING),
        (100.01, BudgetStatus.OVER_BUDGET),
    ],
)
def test_classify_boundaries(percentage, status):
    assert classify(percentage) is status


def test_classify_custom_thresholds():
    assert classify(60, warning_threshold=50, over_threshold=90) is BudgetStatus.WARNING
    assert classify(95, warning_threshold=50, over_threshold=90) is BudgetStatus.OVER_BUDGET
