"""Habit and completion-entry models."""

from __future__ import annotations

import json
from datetime import datetime

from sqlalchemy.orm import Mapped, mapped_column

from habit_tracker.extensions import db


class Habit(db.Model):
    __tablename__ = "habits"
    __table_args__ = (
        db.Index("ix_habits_priority_created", "priority", "created_at"),
        db.Index("ix_habits_category", "category"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(db.String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(db.String(500))
    frequency: Mapped[str] = mapped_column(db.String(16), nullable=False)
    # JSON-encoded list of weekday names, e.g. '["monday", "wednesday"]'
    target_days: Mapped[str | None] = mapped_column(db.Text)
    priority: Mapped[int] = mapped_column(nullable=False, default=1)
    category: Mapped[str | None] = mapped_column(db.String(50))
    created_at: Mapped[datetime] = mapped_column(nullable=False, default=datetime.utcnow)

    @property
    def target_day_list(self) -> list[str]:
        if not self.target_days:
            return []
        try:
            days = json.loads(self.target_days)
        except ValueError:
            return []
        return [str(day) for day in days] if isinstance(days, list) else []

    def __repr__(self) -> str:
        return f"<Habit {self.id} {self.name!r}>"


class HabitEntry(db.Model):
    __tablename__ = "habit_entries"
    __table_args__ = (
        db.Index("ix_habit_entries_habit_completed", "habit_id", "completed_at"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    habit_id: Mapped[int] = mapped_column(
        db.ForeignKey("habits.id", ondelete="CASCADE"),
        nullable=False,
    )
    completed_at: Mapped[datetime] = mapped_column(nullable=False, default=datetime.utcnow)
