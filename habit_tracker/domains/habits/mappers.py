"""ORM -> DTO mappers for the habits domain."""

from __future__ import annotations

from habit_tracker.domains.habits.models.habit_models import Habit, HabitEntry
from habit_tracker.domains.habits.schemas.habit_schemas import (
    HabitEntryResponse,
    HabitResponse,
    HeatmapResponse,
    HeatmapValue,
)


def map_entry_response(entry: HabitEntry) -> HabitEntryResponse:
    return HabitEntryResponse(id=entry.id, habit_id=entry.habit_id, completed_at=entry.completed_at)


def map_habit_response(item: dict) -> HabitResponse:
    habit: Habit = item["habit"]
    return HabitResponse(
        id=habit.id,
        name=habit.name,
        description=habit.description,
        frequency=habit.frequency,
        target_days=habit.target_day_list,
        priority=habit.priority,
        category=habit.category,
        created_at=habit.created_at,
        entries=[map_entry_response(e) for e in item.get("entries", [])],
        current_streak=item.get("current_streak", 0),
        longest_streak=item.get("longest_streak", 0),
    )


def map_heatmap_response(payload: dict) -> HeatmapResponse:
    return HeatmapResponse(
        habit_id=payload["habit_id"],
        start_date=payload["start_date"],
        end_date=payload["end_date"],
        values=[HeatmapValue(**row) for row in payload["values"]],
    )
