from __future__ import annotations

from datetime import date, timedelta

from money_app.analytics.aggregation import EntryType, LedgerEntry
from money_app.analytics.gamification import (
    NO_JAJAN_WEEK,
    ROOKIE_RECORDER,
    SAVER,
    STREAK_MASTER,
    SULTAN,
    ActivitySnapshot,
    LevelState,
    StreakState,
    apply_xp,
    earned_badges,
    next_level_xp,
    update_streak,
)
from money_app.models import today_local

TODAY = date(2024, 3, 20)


def test_level_up_carries_surplus():
    assert next_level_xp(1) == 100
    assert apply_xp(LevelState(level=1, xp=80), 50) == LevelState(level=2, xp=30)


def test_multiple_level_ups_in_one_award():
    assert apply_xp(LevelState(level=1, xp=0), 350) == LevelState(level=3, xp=50)


def test_streak_progression():
    s = update_streak(StreakState(0, 0, None), date(2024, 3, 1))
    assert (s.current, s.longest) == (1, 1)
    s = update_streak(s, date(2024, 3, 2))
    assert (s.current, s.longest) == (2, 2)
    same_day = update_streak(s, date(2024, 3, 2))
    assert same_day == s
    s = update_streak(s, date(2024, 3, 5))
    assert (s.current, s.longest, s.last_date) == (1, 2, date(2024, 3, 5))


def test_backdated_entry_leaves_streak_alone():
    s = StreakState(current=3, longest=5, last_date=date(2024, 3, 10))
    assert update_streak(s, date(2024, 3, 1)) == s


def test_all_badges():
    snapshot = ActivitySnapshot(
        transaction_count=10,
        longest_streak=7,
        level=10,
        month_income=1000,
        month_expense=800,
    )
    entries = [LedgerEntry(50, EntryType.EXPENSE, TODAY)]
    assert earned_badges(snapshot, entries, TODAY) == {
        ROOKIE_RECORDER,
        STREAK_MASTER,
        SULTAN,
        SAVER,
        NO_JAJAN_WEEK,
    }


def test_no_jajan_week_needs_activity_and_no_wants():
    snapshot = ActivitySnapshot(0, 0, 1, 0, 0)
    wants = [LedgerEntry(50, EntryType.EXPENSE, TODAY - timedelta(days=3), is_essential=False)]
    assert NO_JAJAN_WEEK not in earned_badges(snapshot, wants, TODAY)
    stale = [LedgerEntry(50, EntryType.EXPENSE, TODAY - timedelta(days=8))]
    assert NO_JAJAN_WEEK not in earned_badges(snapshot, stale, TODAY)
    transfer = [LedgerEntry(50, EntryType.EXPENSE, TODAY, is_essential=False, is_transfer=True)]
    assert NO_JAJAN_WEEK in earned_badges(snapshot, transfer, TODAY)


def test_saver_needs_twenty_percent():
    below = ActivitySnapshot(0, 0, 1, month_income=1000, month_expense=801)
    assert SAVER not in earned_badges(below, [], TODAY)


def test_status_endpoint_after_transactions(client, wallet, categories):
    today = today_local()
    for offset in (1, 0):
        res = client.post(
            "/api/transactions",
            json={
                "wallet_id": wallet["id"],
                "category_id": categories["Makanan"]["id"],
                "type": "expense",
                "amount": 10000,
                "occurred_at": (today - timedelta(days=offset)).isoformat(),
            },
        )
        assert res.status_code == 201

    data = client.get("/api/gamification/status").json()
    # two awards of 50 XP at level 1 make exactly one level-up
    assert data["level"] == 2
    assert data["xp"] == 0
    assert data["next_level_xp"] == 200
    assert data["current_streak"] == 2
    assert data["longest_streak"] == 2
    assert NO_JAJAN_WEEK in {b["name"] for b in data["badges"]}
