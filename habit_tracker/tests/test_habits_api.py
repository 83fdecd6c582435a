"""Habits API tests.

Covers the REST surface:
- GET /api/habits, /api/habits/categories, /api/habits/<id>, /api/habits/<id>/heatmap
- POST /api/habits, PUT/PATCH/DELETE /api/habits/<id>
- POST /api/habits/<id>/complete
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest

pytestmark = pytest.mark.integration

from habit_tracker.core.errors import StorageError
from habit_tracker.domains.habits.models.habit_models import HabitEntry
from habit_tracker.extensions import db


def _payload(**overrides):
    body = {
        "name": "Meditate",
        "description": "Ten quiet minutes",
        "frequency": "custom",
        "target_days": ["monday", "wednesday"],
        "priority": 2,
        "category": "mind",
    }
    body.update(overrides)
    return body


def _create(client, **overrides) -> int:
    resp = client.post("/api/habits", json=_payload(**overrides))
    assert resp.status_code == 201
    return resp.get_json()["id"]


# ==================== List ====================


def test_list_habits_empty(client):
    resp = client.get("/api/habits")
    assert resp.status_code == 200
    assert resp.get_json() == []


def test_list_habits_enriched_with_entries_and_streak(client):
    habit_id = _create(client)
    client.post(f"/api/habits/{habit_id}/complete", json={})

    resp = client.get("/api/habits")
    assert resp.status_code == 200
    habits = resp.get_json()
    assert len(habits) == 1
    habit = habits[0]
    assert habit["id"] == habit_id
    assert habit["current_streak"] == 1
    assert habit["longest_streak"] == 1
    assert len(habit["entries"]) == 1
    assert habit["entries"][0]["habit_id"] == habit_id


def test_list_habits_ordered_by_priority(client):
    _create(client, name="low", priority=1)
    _create(client, name="high", priority=3)
    _create(client, name="mid", priority=2)
    names = [h["name"] for h in client.get("/api/habits").get_json()]
    assert names == ["high", "mid", "low"]


def test_list_habits_category_filter_and_categories(client):
    _create(client, name="a", category="work")
    _create(client, name="b", category="health")

    resp = client.get("/api/habits?category=health")
    assert [h["name"] for h in resp.get_json()] == ["b"]

    resp = client.get("/api/habits/categories")
    assert resp.get_json() == ["health", "work"]


def test_list_habits_storage_failure_is_500(client):
    with patch(
        "habit_tracker.domains.habits.repositories.habit_repository.HabitRepository.list_habits",
        side_effect=StorageError("Failed to fetch habits"),
    ):
        resp = client.get("/api/habits")
    assert resp.status_code == 500
    assert resp.get_json() == {"error": "storage_error", "message": "Failed to fetch habits"}


# ==================== Create / Detail ====================


def test_create_then_fetch_round_trip(client):
    habit_id = _create(client)
    resp = client.get(f"/api/habits/{habit_id}")
    assert resp.status_code == 200
    habit = resp.get_json()
    for key, value in _payload().items():
        assert habit[key] == value
    assert habit["created_at"]
    assert habit["entries"] == []
    assert habit["current_streak"] == 0


def test_create_normalizes_weekday_names(client):
    habit_id = _create(client, target_days=[" Monday", "monday", "FRIDAY"])
    habit = client.get(f"/api/habits/{habit_id}").get_json()
    assert habit["target_days"] == ["monday", "friday"]


@pytest.mark.parametrize(
    "overrides, field",
    [
        ({"name": ""}, "name"),
        ({"name": "x" * 101}, "name"),
        ({"description": "x" * 501}, "description"),
        ({"frequency": "hourly"}, "frequency"),
        ({"target_days": "monday"}, "target_days"),
        ({"target_days": ["funday"]}, "target_days"),
        ({"priority": 0}, "priority"),
        ({"priority": 4}, "priority"),
        ({"priority": True}, "priority"),
        ({"priority": "2"}, "priority"),
        ({"category": "c" * 51}, "category"),
    ],
)
def test_create_validation_errors_are_per_field(client, overrides, field):
    resp = client.post("/api/habits", json=_payload(**overrides))
    assert resp.status_code == 400
    body = resp.get_json()
    assert body["error"] == "validation_error"
    assert field in body["details"]
    assert body["details"][field]


def test_create_missing_required_fields(client):
    resp = client.post("/api/habits", json={"description": "no name"})
    assert resp.status_code == 400
    details = resp.get_json()["details"]
    for field in ("name", "frequency", "target_days", "priority"):
        assert field in details


def test_create_rejects_non_object_body(client):
    resp = client.post("/api/habits", data="not json", content_type="application/json")
    assert resp.status_code == 400
    assert resp.get_json()["details"] == {"_schema": ["Request body must be a JSON object"]}


def test_detail_not_found(client):
    resp = client.get("/api/habits/99999")
    assert resp.status_code == 404
    assert resp.get_json()["error"] == "not_found"


def test_detail_requires_integer_id(client):
    resp = client.get("/api/habits/abc")
    assert resp.status_code == 404


# ==================== Update ====================


def test_put_replaces_all_fields(client):
    habit_id = _create(client)
    new = _payload(name="Meditate longer", description=None, frequency="weekly", target_days=[], priority=3, category="")
    resp = client.put(f"/api/habits/{habit_id}", json=new)
    assert resp.status_code == 200
    assert resp.get_json() == {"success": True}

    habit = client.get(f"/api/habits/{habit_id}").get_json()
    for key, value in new.items():
        assert habit[key] == value


def test_put_requires_full_payload(client):
    habit_id = _create(client)
    resp = client.put(f"/api/habits/{habit_id}", json={"name": "only name"})
    assert resp.status_code == 400


def test_put_missing_habit(client):
    resp = client.put("/api/habits/99999", json=_payload())
    assert resp.status_code == 404


def test_patch_updates_only_given_fields(client):
    habit_id = _create(client)
    resp = client.patch(f"/api/habits/{habit_id}", json={"priority": 3, "description": None})
    assert resp.status_code == 200

    habit = client.get(f"/api/habits/{habit_id}").get_json()
    assert habit["priority"] == 3
    assert habit["description"] is None
    assert habit["name"] == "Meditate"
    assert habit["target_days"] == ["monday", "wednesday"]


def test_patch_rejects_null_for_required_field(client):
    habit_id = _create(client)
    resp = client.patch(f"/api/habits/{habit_id}", json={"name": None})
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "validation_error"


def test_patch_rejects_boolean_priority(client):
    habit_id = _create(client)
    resp = client.patch(f"/api/habits/{habit_id}", json={"priority": True})
    assert resp.status_code == 400
    assert "priority" in resp.get_json()["details"]
    assert client.get(f"/api/habits/{habit_id}").get_json()["priority"] == 2


def test_patch_missing_habit(client):
    resp = client.patch("/api/habits/99999", json={"priority": 1})
    assert resp.status_code == 404


# ==================== Delete ====================


def test_delete_cascades_entries(app, client):
    habit_id = _create(client)
    client.post(f"/api/habits/{habit_id}/complete", json={})
    client.post(f"/api/habits/{habit_id}/complete", json={})

    resp = client.delete(f"/api/habits/{habit_id}")
    assert resp.status_code == 200
    assert resp.get_json() == {"success": True}

    assert client.get(f"/api/habits/{habit_id}").status_code == 404
    assert HabitEntry.query.filter_by(habit_id=habit_id).count() == 0


def test_delete_missing_habit(client):
    assert client.delete("/api/habits/99999").status_code == 404


# ==================== Complete ====================


def test_complete_defaults_to_now(client):
    habit_id = _create(client)
    before = datetime.utcnow() - timedelta(seconds=5)
    resp = client.post(f"/api/habits/{habit_id}/complete")
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["success"] is True
    completed = datetime.fromisoformat(body["entry"]["completed_at"])
    assert completed >= before


def test_complete_with_explicit_utc_timestamp(client):
    habit_id = _create(client)
    resp = client.post(
        f"/api/habits/{habit_id}/complete",
        json={"completed_at": "2026-10-15T22:15:00.000Z"},
    )
    assert resp.status_code == 200
    assert resp.get_json()["entry"]["completed_at"] == "2026-10-15T22:15:00"


def test_complete_rejects_bad_timestamp(client):
    habit_id = _create(client)
    resp = client.post(f"/api/habits/{habit_id}/complete", json={"completed_at": "yesterday-ish"})
    assert resp.status_code == 400
    assert "completed_at" in resp.get_json()["details"]


def test_complete_rejects_timestamp_outside_utc_range(client):
    habit_id = _create(client)
    resp = client.post(
        f"/api/habits/{habit_id}/complete",
        json={"completed_at": "0001-01-01T00:00:00+01:00"},
    )
    assert resp.status_code == 400
    body = resp.get_json()
    assert body["error"] == "validation_error"
    assert body["details"]["completed_at"]
    assert db.session.query(HabitEntry).count() == 0


def test_complete_missing_habit(client):
    resp = client.post("/api/habits/99999/complete", json={})
    assert resp.status_code == 404
    assert db.session.query(HabitEntry).count() == 0


def test_two_consecutive_days_yield_streak_two(client):
    habit_id = _create(client, frequency="custom", target_days=["monday", "wednesday"])
    now = datetime.now(timezone.utc)
    client.post(
        f"/api/habits/{habit_id}/complete",
        json={"completed_at": (now - timedelta(days=1)).isoformat()},
    )
    client.post(f"/api/habits/{habit_id}/complete", json={"completed_at": now.isoformat()})

    habit = client.get(f"/api/habits/{habit_id}").get_json()
    assert habit["current_streak"] == 2


# ==================== Heatmap ====================


def test_heatmap_counts_per_day(client):
    habit_id = _create(client)
    now = datetime.now(timezone.utc)
    for _ in range(2):
        client.post(f"/api/habits/{habit_id}/complete", json={"completed_at": now.isoformat()})

    resp = client.get(f"/api/habits/{habit_id}/heatmap?days=30")
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["habit_id"] == habit_id
    assert body["values"] == [{"date": now.date().isoformat(), "count": 2}]


@pytest.mark.parametrize("days", ["0", "367", "abc"])
def test_heatmap_rejects_bad_days(client, days):
    habit_id = _create(client)
    resp = client.get(f"/api/habits/{habit_id}/heatmap?days={days}")
    assert resp.status_code == 400
    assert "days" in resp.get_json()["details"]


def test_heatmap_missing_habit(client):
    assert client.get("/api/habits/99999/heatmap").status_code == 404


# ==================== Misc ====================


def test_health(client):
    assert client.get("/health").get_json() == {"ok": True}
