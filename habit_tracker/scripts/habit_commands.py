"""CLI commands for managing the habit database.

Usage:
    flask --app habit_tracker.wsgi init-db      # Create tables if missing
    flask --app habit_tracker.wsgi seed-demo    # Insert demo habits with completions
"""

from __future__ import annotations

from datetime import datetime, timedelta

import click
from flask.cli import with_appcontext

from habit_tracker.extensions import db

DEMO_HABITS = [
    {
        "name": "Morning run",
        "description": "5km before breakfast",
        "frequency": "custom",
        "target_days": ["monday", "wednesday", "friday"],
        "priority": 3,
        "category": "health",
        "streak_days": 4,
    },
    {
        "name": "Read",
        "description": "30 minutes of reading",
        "frequency": "daily",
        "target_days": [],
        "priority": 2,
        "category": "learning",
        "streak_days": 9,
    },
    {
        "name": "Weekly review",
        "description": None,
        "frequency": "weekly",
        "target_days": [],
        "priority": 1,
        "category": "planning",
        "streak_days": 1,
    },
]


@click.command("init-db")
@with_appcontext
def init_db_command():
    """Create the habits tables."""
    db.create_all()
    click.echo("Initialized the habit database.")


@click.command("seed-demo")
@with_appcontext
def seed_demo_command():
    """Insert demo habits, skipping any that already exist by name."""
    from habit_tracker.domains.habits.models.habit_models import Habit
    from habit_tracker.domains.habits.repositories.habit_repository import HabitRepository

    db.create_all()
    repo = HabitRepository()
    now = datetime.utcnow()
    created = 0
    for spec in DEMO_HABITS:
        if Habit.query.filter_by(name=spec["name"]).first():
            continue
        fields = {key: val for key, val in spec.items() if key != "streak_days"}
        habit_id = repo.create_habit(fields)
        for offset in range(spec["streak_days"]):
            repo.add_entry(habit_id, now - timedelta(days=offset))
        created += 1
    click.echo(f"Seeded {created} demo habit(s).")


def register_commands(app):
    """Register CLI commands with the app."""
    app.cli.add_command(init_db_command)
    app.cli.add_command(seed_demo_command)
