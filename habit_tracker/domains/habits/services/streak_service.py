"""Streak calculation over completion dates.

A streak is the number of consecutive calendar days, scanning backward from
``today``, on which the habit has at least one completion. The most recent
completion may be today or yesterday; anything older means the streak is
already broken. Several completions on one day count once.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Iterable, List, Optional, Union

DateLike = Union[date, datetime]


def _as_date(value: DateLike) -> date:
    # datetime is a subclass of date, check it first
    if isinstance(value, datetime):
        return value.date()
    return value


def distinct_days(values: Iterable[DateLike]) -> List[date]:
    """Unique calendar days, most recent first."""
    return sorted({_as_date(value) for value in values}, reverse=True)


def calculate_streak(values: Iterable[DateLike], today: Optional[date] = None) -> int:
    days = distinct_days(values)
    if not days:
        return 0

    cursor = today or date.today()
    streak = 0
    for day in days:
        gap = (cursor - day).days
        if gap > 1:
            break
        streak += 1
        cursor = day
    return streak


def calculate_longest_streak(values: Iterable[DateLike]) -> int:
    days = distinct_days(values)
    if not days:
        return 0
    best = current = 1
    for newer, older in zip(days, days[1:]):
        if (newer - older).days == 1:
            current += 1
            best = max(best, current)
        else:
            current = 1
    return best


__all__ = ["calculate_longest_streak", "calculate_streak", "distinct_days"]
