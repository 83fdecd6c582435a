"""Habit DTOs and schemas."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

Frequency = Literal["daily", "weekly", "custom"]

WEEKDAYS = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)


def to_naive_utc(value: datetime) -> datetime:
    """Storage holds naive UTC timestamps."""
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def _normalize_days(value):
    if value is None:
        return value
    if not isinstance(value, list):
        raise ValueError("target_days must be a list of weekday names")
    days: List[str] = []
    for raw in value:
        if not isinstance(raw, str):
            raise ValueError("target_days entries must be strings")
        day = raw.strip().lower()
        if day not in WEEKDAYS:
            raise ValueError(f"unknown weekday: {raw}")
        if day not in days:
            days.append(day)
    return days


class HabitCreate(BaseModel):
    """Full habit payload. PUT uses the same shape: every field is rewritten."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    frequency: Frequency
    target_days: List[str]
    priority: int = Field(ge=1, le=3, strict=True)
    category: str = Field(default="", max_length=50)

    @field_validator("target_days", mode="before")
    @classmethod
    def normalize_target_days(cls, value):
        return _normalize_days(value)


class HabitPatch(BaseModel):
    """Partial update. Unset fields are untouched; null clears optional fields."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    frequency: Optional[Frequency] = None
    target_days: Optional[List[str]] = None
    priority: Optional[int] = Field(default=None, ge=1, le=3, strict=True)
    category: Optional[str] = Field(default=None, max_length=50)

    @field_validator("target_days", mode="before")
    @classmethod
    def normalize_target_days(cls, value):
        return _normalize_days(value)

    @model_validator(mode="after")
    def check_required_not_null(self):
        for key in ("name", "frequency", "target_days", "priority"):
            if key in self.model_fields_set and getattr(self, key) is None:
                raise ValueError(f"{key} cannot be null")
        return self

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class HabitComplete(BaseModel):
    completed_at: Optional[datetime] = None

    @field_validator("completed_at")
    @classmethod
    def normalize_completed_at(cls, value):
        if value is None:
            return value
        try:
            return to_naive_utc(value)
        except OverflowError:
            raise ValueError("completed_at is outside the supported date range") from None


class HabitEntryResponse(BaseModel):
    id: int
    habit_id: int
    completed_at: datetime


class HabitResponse(BaseModel):
    id: int
    name: str
    description: Optional[str]
    frequency: str
    target_days: List[str]
    priority: int
    category: Optional[str]
    created_at: datetime
    entries: List[HabitEntryResponse] = []
    current_streak: int = 0
    longest_streak: int = 0


class HeatmapValue(BaseModel):
    date: date
    count: int


class HeatmapResponse(BaseModel):
    habit_id: int
    start_date: date
    end_date: date
    values: List[HeatmapValue]
