"""CLI commands."""

import pytest

from habit_tracker.domains.habits.models.habit_models import Habit, HabitEntry
from habit_tracker.domains.habits.services import HabitService

pytestmark = pytest.mark.integration


def test_init_db(runner):
    result = runner.invoke(args=["init-db"])
    assert result.exit_code == 0
    assert "Initialized" in result.output


def test_seed_demo_is_idempotent(runner):
    result = runner.invoke(args=["seed-demo"])
    assert result.exit_code == 0
    assert "Seeded 3 demo habit(s)." in result.output
    assert Habit.query.count() == 3
    entries = HabitEntry.query.count()

    result = runner.invoke(args=["seed-demo"])
    assert "Seeded 0 demo habit(s)." in result.output
    assert Habit.query.count() == 3
    assert HabitEntry.query.count() == entries


def test_seeded_streaks(runner):
    runner.invoke(args=["seed-demo"])
    by_name = {item["habit"].name: item for item in HabitService().list_habits()}
    assert by_name["Read"]["current_streak"] == 9
    assert by_name["Morning run"]["habit"].target_day_list == ["monday", "wednesday", "friday"]
