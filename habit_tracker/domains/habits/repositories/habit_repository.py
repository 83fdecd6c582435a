"""Persistence gateway for habits and their completion entries."""

from __future__ import annotations

import json
import logging
from datetime import date, datetime, time, timedelta
from typing import Iterable, List, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from habit_tracker.core.errors import NotFoundError, StorageError
from habit_tracker.domains.habits.models.habit_models import Habit, HabitEntry
from habit_tracker.extensions import db

logger = logging.getLogger(__name__)

MUTABLE_FIELDS = (
    "name",
    "description",
    "frequency",
    "target_days",
    "priority",
    "category",
)


def _to_column_values(fields: dict, keys: Iterable[str]) -> dict:
    values = {}
    for key in keys:
        val = fields.get(key)
        if key == "target_days":
            val = json.dumps(list(val or []))
        values[key] = val
    return values


class HabitRepository:
    """Thin gateway over the session. Every failure surfaces as StorageError with an operation message."""

    def __init__(self, session=None):
        self._session = session or db.session

    def _fail(self, message: str, exc: Exception) -> StorageError:
        logger.exception("%s: %s", message, exc)
        try:
            self._session.rollback()
        except SQLAlchemyError:
            logger.warning("rollback failed after: %s", message)
        return StorageError(message)

    # ---- habits ----

    def list_habits(self, category: Optional[str] = None) -> List[Habit]:
        stmt = select(Habit).order_by(Habit.priority.desc(), Habit.created_at.desc(), Habit.id.desc())
        if category is not None:
            stmt = stmt.where(Habit.category == category)
        try:
            return list(self._session.scalars(stmt))
        except SQLAlchemyError as exc:
            raise self._fail("Failed to fetch habits", exc) from exc

    def list_categories(self) -> List[str]:
        stmt = (
            select(Habit.category)
            .where(Habit.category.is_not(None), Habit.category != "")
            .distinct()
            .order_by(Habit.category)
        )
        try:
            return list(self._session.scalars(stmt))
        except SQLAlchemyError as exc:
            raise self._fail("Failed to fetch habit categories", exc) from exc

    def get_habit(self, habit_id: int) -> Optional[Habit]:
        """Return the habit or None; absence is not an error."""
        try:
            return self._session.get(Habit, habit_id)
        except SQLAlchemyError as exc:
            raise self._fail(f"Failed to fetch habit with id {habit_id}", exc) from exc

    def create_habit(self, fields: dict) -> int:
        habit = Habit(**_to_column_values(fields, MUTABLE_FIELDS))
        try:
            self._session.add(habit)
            self._session.commit()
        except SQLAlchemyError as exc:
            raise self._fail("Failed to create habit", exc) from exc
        logger.info("created habit %s (%s)", habit.id, habit.name)
        return habit.id

    def update_habit(self, habit_id: int, fields: dict) -> bool:
        """Overwrite every mutable column. Callers must supply all fields."""
        return self._write_columns(habit_id, _to_column_values(fields, MUTABLE_FIELDS))

    def patch_habit(self, habit_id: int, fields: dict) -> bool:
        keys = [key for key in MUTABLE_FIELDS if key in fields]
        if not keys:
            return self.get_habit(habit_id) is not None
        return self._write_columns(habit_id, _to_column_values(fields, keys))

    def _write_columns(self, habit_id: int, values: dict) -> bool:
        stmt = update(Habit).where(Habit.id == habit_id).values(**values)
        try:
            result = self._session.execute(stmt)
            self._session.commit()
        except SQLAlchemyError as exc:
            raise self._fail(f"Failed to update habit with id {habit_id}", exc) from exc
        return result.rowcount > 0

    def delete_habit(self, habit_id: int) -> bool:
        """Delete entries then the habit in one transaction."""
        try:
            self._session.execute(delete(HabitEntry).where(HabitEntry.habit_id == habit_id))
            result = self._session.execute(delete(Habit).where(Habit.id == habit_id))
            self._session.commit()
        except SQLAlchemyError as exc:
            raise self._fail(f"Failed to delete habit with id {habit_id}", exc) from exc
        self._session.expire_all()
        deleted = result.rowcount > 0
        if deleted:
            logger.info("deleted habit %s", habit_id)
        return deleted

    # ---- entries ----

    def list_entries(
        self,
        habit_id: int,
        window_days: int = 30,
        *,
        today: Optional[date] = None,
    ) -> List[HabitEntry]:
        """Entries completed on or after midnight ``window_days`` before today, newest first."""
        start_day = (today or datetime.utcnow().date()) - timedelta(days=window_days)
        cutoff = datetime.combine(start_day, time.min)
        stmt = (
            select(HabitEntry)
            .where(HabitEntry.habit_id == habit_id, HabitEntry.completed_at >= cutoff)
            .order_by(HabitEntry.completed_at.desc(), HabitEntry.id.desc())
        )
        try:
            return list(self._session.scalars(stmt))
        except SQLAlchemyError as exc:
            raise self._fail(f"Failed to fetch entries for habit {habit_id}", exc) from exc

    def entry_dates(self, habit_id: int) -> List[datetime]:
        """Completion timestamps of every entry for the habit, newest first."""
        stmt = (
            select(HabitEntry.completed_at)
            .where(HabitEntry.habit_id == habit_id)
            .order_by(HabitEntry.completed_at.desc())
        )
        try:
            return list(self._session.scalars(stmt))
        except SQLAlchemyError as exc:
            raise self._fail(f"Failed to fetch completion dates for habit {habit_id}", exc) from exc

    def get_entry(self, entry_id: int) -> Optional[HabitEntry]:
        try:
            return self._session.get(HabitEntry, entry_id)
        except SQLAlchemyError as exc:
            raise self._fail(f"Failed to fetch entry with id {entry_id}", exc) from exc

    def add_entry(self, habit_id: int, completed_at: Optional[datetime] = None) -> HabitEntry:
        """Append a completion. A missing habit is rejected by the foreign key."""
        entry = HabitEntry(habit_id=habit_id, completed_at=completed_at or datetime.utcnow())
        try:
            self._session.add(entry)
            self._session.commit()
        except IntegrityError as exc:
            self._session.rollback()
            logger.warning("rejected entry for missing habit %s", habit_id)
            raise NotFoundError(f"Habit {habit_id} not found") from exc
        except SQLAlchemyError as exc:
            raise self._fail(f"Failed to add entry for habit {habit_id}", exc) from exc
        return entry


__all__ = ["HabitRepository", "MUTABLE_FIELDS"]
