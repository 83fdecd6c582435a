"""Per-day completion counts for the calendar heatmap."""

from __future__ import annotations

from collections import Counter
from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional, Tuple


def heatmap_window(days: int, today: Optional[date] = None) -> Tuple[date, date]:
    end = today or date.today()
    return end - timedelta(days=max(days, 1) - 1), end


def build_heatmap(
    completions: Iterable[datetime],
    *,
    days: int = 90,
    today: Optional[date] = None,
) -> List[dict]:
    """Bucket completion timestamps into ``{"date", "count"}`` rows, oldest first.

    Only days inside the window that have at least one completion are returned;
    the renderer treats missing days as empty.
    """
    start, end = heatmap_window(days, today)
    counts = Counter(
        ts.date() for ts in completions if start <= ts.date() <= end
    )
    return [{"date": day, "count": counts[day]} for day in sorted(counts)]


__all__ = ["build_heatmap", "heatmap_window"]
