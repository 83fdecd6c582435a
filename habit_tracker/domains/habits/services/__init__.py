"""Habit services: CRUD, completions, streak enrichment and heatmaps."""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Callable, List, Optional, Tuple

from habit_tracker.core.errors import NotFoundError
from habit_tracker.domains.habits.models.habit_models import Habit, HabitEntry
from habit_tracker.domains.habits.repositories.habit_repository import HabitRepository
from habit_tracker.domains.habits.schemas.habit_schemas import HabitCreate, HabitPatch, to_naive_utc
from habit_tracker.domains.habits.services.heatmap_service import build_heatmap, heatmap_window
from habit_tracker.domains.habits.services.streak_service import (
    calculate_longest_streak,
    calculate_streak,
)

logger = logging.getLogger(__name__)


class HabitService:
    def __init__(
        self,
        repository: Optional[HabitRepository] = None,
        *,
        clock: Callable[[], datetime] = datetime.utcnow,
        entry_window_days: int = 30,
    ):
        self.repository = repository or HabitRepository()
        self._clock = clock
        self.entry_window_days = entry_window_days

    def today(self) -> date:
        return self._clock().date()

    # ---- reads ----

    def list_habits(self, category: Optional[str] = None) -> List[dict]:
        today = self.today()
        return [self._enrich(habit, today) for habit in self.repository.list_habits(category)]

    def list_categories(self) -> List[str]:
        return self.repository.list_categories()

    def get_habit(self, habit_id: int) -> dict:
        habit = self._require(habit_id)
        return self._enrich(habit, self.today())

    def heatmap(self, habit_id: int, days: int = 90) -> dict:
        self._require(habit_id)
        today = self.today()
        start, end = heatmap_window(days, today)
        values = build_heatmap(self.repository.entry_dates(habit_id), days=days, today=today)
        return {"habit_id": habit_id, "start_date": start, "end_date": end, "values": values}

    def streaks(self, habit_id: int, today: Optional[date] = None) -> Tuple[int, int]:
        """(current, longest). Streaks are advisory, so any failure degrades to zero."""
        try:
            completions = self.repository.entry_dates(habit_id)
            return (
                calculate_streak(completions, today or self.today()),
                calculate_longest_streak(completions),
            )
        except Exception as exc:
            logger.warning("streak calculation failed for habit %s: %s", habit_id, exc)
            return 0, 0

    # ---- writes ----

    def create_habit(self, data: HabitCreate) -> int:
        return self.repository.create_habit(data.model_dump())

    def replace_habit(self, habit_id: int, data: HabitCreate) -> None:
        if not self.repository.update_habit(habit_id, data.model_dump()):
            raise NotFoundError(f"Habit {habit_id} not found")

    def patch_habit(self, habit_id: int, data: HabitPatch) -> None:
        if not self.repository.patch_habit(habit_id, data.changes()):
            raise NotFoundError(f"Habit {habit_id} not found")

    def delete_habit(self, habit_id: int) -> None:
        if not self.repository.delete_habit(habit_id):
            raise NotFoundError(f"Habit {habit_id} not found")

    def complete_habit(self, habit_id: int, completed_at: Optional[datetime] = None) -> HabitEntry:
        self._require(habit_id)
        stamp = to_naive_utc(completed_at) if completed_at else self._clock()
        return self.repository.add_entry(habit_id, stamp)

    # ---- helpers ----

    def _require(self, habit_id: int) -> Habit:
        habit = self.repository.get_habit(habit_id)
        if habit is None:
            raise NotFoundError(f"Habit {habit_id} not found")
        return habit

    def _enrich(self, habit: Habit, today: date) -> dict:
        entries = self.repository.list_entries(habit.id, self.entry_window_days, today=today)
        current, longest = self.streaks(habit.id, today)
        return {
            "habit": habit,
            "entries": entries,
            "current_streak": current,
            "longest_streak": longest,
        }


__all__ = ["HabitService", "to_naive_utc"]
