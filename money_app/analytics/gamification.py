from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterable

from .aggregation import EntryType, LedgerEntry, filter_entries
from .periods import PeriodBounds

XP_PER_LEVEL = 100

ROOKIE_RECORDER = "Rookie Recorder"
STREAK_MASTER = "Streak Master"
NO_JAJAN_WEEK = "No Jajan Week"
SULTAN = "Sultan"
SAVER = "Saver"

BADGE_CATALOG: tuple[dict[str, str], ...] = (
    {"name": ROOKIE_RECORDER, "description": "Log your first 10 transactions", "icon": "📝", "criteria": "10 transactions"},
    {"name": STREAK_MASTER, "description": "Maintain a 7-day streak", "icon": "🔥", "criteria": "7 day streak"},
    {"name": NO_JAJAN_WEEK, "description": "No \"Wants\" expenses for 7 days", "icon": "🛡️", "criteria": "0 wants for 7 days"},
    {"name": SULTAN, "description": "Reach Level 10", "icon": "👑", "criteria": "Level 10"},
    {"name": SAVER, "description": "Save 20% of income in a month", "icon": "💰", "criteria": "20% savings rate"},
)


def next_level_xp(level: int) -> int:
    return level * XP_PER_LEVEL


@dataclass(frozen=True)
class LevelState:
    level: int
    xp: int


def apply_xp(state: LevelState, amount: int) -> LevelState:
    """Add XP, levelling up as many times as the total allows."""
    level = state.level
    xp = state.xp + amount
    while xp >= next_level_xp(level):
        xp -= next_level_xp(level)
        level += 1
    return LevelState(level=level, xp=xp)


@dataclass(frozen=True)
class StreakState:
    current: int
    longest: int
    last_date: date | None


def _as_date(value: date | datetime) -> date:
    return value.date() if isinstance(value, datetime) else value


def update_streak(state: StreakState, transaction_date: date | datetime) -> StreakState:
    """Fold one logged transaction into the daily streak.

    Same day: unchanged. Next day: extended. Later: reset to 1. Backdated
    entries leave the streak alone.
    """
    day = _as_date(transaction_date)
    if state.last_date is None:
        return StreakState(current=1, longest=max(1, state.longest), last_date=day)

    gap = (day - state.last_date).days
    if gap < 0:
        return state
    if gap == 0:
        return StreakState(current=max(1, state.current), longest=max(1, state.longest), last_date=day)
    current = state.current + 1 if gap == 1 else 1
    return StreakState(current=current, longest=max(state.longest, current), last_date=day)


@dataclass(frozen=True)
class ActivitySnapshot:
    transaction_count: int
    longest_streak: int
    level: int
    month_income: float
    month_expense: float


def earned_badges(snapshot: ActivitySnapshot, entries: Iterable[LedgerEntry], today: date) -> set[str]:
    """Names of every badge the snapshot qualifies for."""
    earned: set[str] = set()
    if snapshot.transaction_count >= 10:
        earned.add(ROOKIE_RECORDER)
    if snapshot.longest_streak >= 7:
        earned.add(STREAK_MASTER)
    if snapshot.level >= 10:
        earned.add(SULTAN)
    if snapshot.month_income > 0:
        if (snapshot.month_income - snapshot.month_expense) * 100 >= 20 * snapshot.month_income:
            earned.add(SAVER)

    week = filter_entries(entries, PeriodBounds(today - timedelta(days=6), today))
    if week and not any(
        entry.type == EntryType.EXPENSE and not entry.is_essential and not entry.is_transfer
        for entry in week
    ):
        earned.add(NO_JAJAN_WEEK)
    return earned
