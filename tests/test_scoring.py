from __future__ import annotations

from datetime import date, timedelta

from money_app.analytics.aggregation import EntryType, LedgerEntry
from money_app.analytics.scoring import (
    ScoreTip,
    consistency_score,
    financial_score,
    savings_score,
    spending_score,
)

TODAY = date(2024, 3, 20)


def test_financial_score_mixed_month():
    entries = [
        LedgerEntry(10_000_000, EntryType.INCOME, date(2024, 3, 1)),
        LedgerEntry(4_000_000, EntryType.EXPENSE, date(2024, 3, 2)),
        LedgerEntry(1_000_000, EntryType.EXPENSE, date(2024, 3, 3), is_essential=False),
        LedgerEntry(5_000_000, EntryType.EXPENSE, date(2024, 3, 4), is_transfer=True),
        LedgerEntry(300_000, EntryType.EXPENSE, date(2024, 2, 25)),
    ]
    score = financial_score(entries, TODAY)
    assert score.consistency_score == 25
    assert score.savings_score == 100
    assert score.spending_score == 80
    assert score.score == 71
    assert score.total_income == 10_000_000
    assert score.total_expense == 5_000_000
    assert score.essential_expense == 4_000_000
    assert score.non_essential_expense == 1_000_000
    assert score.tips == [ScoreTip.CONSISTENCY_LOW]


def test_excellent_score():
    entries = [
        LedgerEntry(1000, EntryType.INCOME, date(2024, 3, 1) + timedelta(days=i))
        for i in range(20)
    ]
    score = financial_score(entries, TODAY)
    assert (score.consistency_score, score.savings_score, score.spending_score) == (100, 100, 100)
    assert score.score == 100
    assert score.tips == [ScoreTip.EXCELLENT]


def test_empty_history():
    score = financial_score([], TODAY)
    assert score.consistency_score == 0
    assert score.savings_score == 0
    assert score.spending_score == 100
    assert score.score == 30
    assert ScoreTip.CONSISTENCY_LOW in score.tips
    assert ScoreTip.SAVINGS_LOW in score.tips


def test_sub_scores():
    assert savings_score(0, 100) == 0
    assert savings_score(100, 150) == 0
    assert savings_score(1000, 900) == 50
    assert spending_score(0, 0) == 100
    assert spending_score(1000, 1000) == 0


def test_consistency_is_capped():
    entries = [
        LedgerEntry(1, EntryType.EXPENSE, TODAY - timedelta(days=i))
        for i in range(25)
    ]
    assert consistency_score(entries, TODAY) == 100
    # same day logged twice counts once
    assert consistency_score(entries[:1] * 3, TODAY) == 5
