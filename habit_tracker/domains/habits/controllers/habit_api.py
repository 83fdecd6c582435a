"""Habits JSON API controllers (thin, schema-validated)."""

from __future__ import annotations

from typing import Type, TypeVar

from flask import Blueprint, current_app, jsonify, request
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from habit_tracker.core.errors import ValidationError
from habit_tracker.domains.habits.mappers import (
    map_entry_response,
    map_habit_response,
    map_heatmap_response,
)
from habit_tracker.domains.habits.schemas.habit_schemas import (
    HabitComplete,
    HabitCreate,
    HabitPatch,
)
from habit_tracker.domains.habits.services import HabitService

habit_api_bp = Blueprint("habit_api", __name__)

M = TypeVar("M", bound=BaseModel)

MAX_HEATMAP_DAYS = 366


def _service() -> HabitService:
    return HabitService(entry_window_days=current_app.config.get("HABIT_ENTRY_WINDOW_DAYS", 30))


def _parse(schema: Type[M], *, optional_body: bool = False) -> M:
    payload = request.get_json(silent=True)
    if payload is None and optional_body and not request.get_data():
        payload = {}
    if not isinstance(payload, dict):
        raise ValidationError("Invalid request", {"_schema": ["Request body must be a JSON object"]})
    try:
        return schema.model_validate(payload)
    except PydanticValidationError as exc:
        raise ValidationError.from_pydantic(exc) from exc


@habit_api_bp.get("")
def list_habits():
    category = request.args.get("category")
    habits = _service().list_habits(category=category)
    return jsonify([map_habit_response(item).model_dump(mode="json") for item in habits])


@habit_api_bp.get("/categories")
def list_categories():
    return jsonify(_service().list_categories())


@habit_api_bp.get("/<int:habit_id>")
def habit_detail(habit_id: int):
    detail = _service().get_habit(habit_id)
    return jsonify(map_habit_response(detail).model_dump(mode="json"))


@habit_api_bp.get("/<int:habit_id>/heatmap")
def habit_heatmap(habit_id: int):
    raw = request.args.get("days")
    try:
        days = int(raw) if raw is not None else current_app.config.get("HABIT_HEATMAP_DAYS", 90)
    except ValueError:
        days = 0
    if not 1 <= days <= MAX_HEATMAP_DAYS:
        raise ValidationError("Invalid request", {"days": [f"must be between 1 and {MAX_HEATMAP_DAYS}"]})
    payload = _service().heatmap(habit_id, days=days)
    return jsonify(map_heatmap_response(payload).model_dump(mode="json"))


@habit_api_bp.post("")
def create_habit():
    data = _parse(HabitCreate)
    habit_id = _service().create_habit(data)
    return jsonify({"id": habit_id}), 201


@habit_api_bp.put("/<int:habit_id>")
def replace_habit(habit_id: int):
    data = _parse(HabitCreate)
    _service().replace_habit(habit_id, data)
    return jsonify({"success": True})


@habit_api_bp.patch("/<int:habit_id>")
def patch_habit(habit_id: int):
    data = _parse(HabitPatch)
    _service().patch_habit(habit_id, data)
    return jsonify({"success": True})


@habit_api_bp.delete("/<int:habit_id>")
def delete_habit(habit_id: int):
    _service().delete_habit(habit_id)
    return jsonify({"success": True})


@habit_api_bp.post("/<int:habit_id>/complete")
def complete_habit(habit_id: int):
    data = _parse(HabitComplete, optional_body=True)
    entry = _service().complete_habit(habit_id, data.completed_at)
    return jsonify({"success": True, "entry": map_entry_response(entry).model_dump(mode="json")})
