from __future__ import annotations

from .numbers import checked_divide

# Reported when the previous period had no activity at all: a capped
# "new activity" signal rather than an infinite change.
NEW_ACTIVITY_CHANGE = 100.0


def change_pct(current: float, previous: float) -> float:
    """Signed percentage change from ``previous`` to ``current``.

    >>> change_pct(500000, 400000)
    25.0
    >>> change_pct(0, 0)
    0.0
    >>> change_pct(100, 0)
    100.0
    """
    if previous == 0:
        if current > 0:
            return NEW_ACTIVITY_CHANGE
        if current < 0:
            return -NEW_ACTIVITY_CHANGE
        return 0.0
    return checked_divide((current - previous) * 100, abs(previous))
