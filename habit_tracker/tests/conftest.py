import pytest

from habit_tracker import create_app
from habit_tracker.domains.habits.repositories.habit_repository import HabitRepository
from habit_tracker.extensions import db


# ==================== Pytest Markers ====================
def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (no external dependencies)")
    config.addinivalue_line("markers", "integration: Integration tests (database, API)")


@pytest.fixture()
def app(tmp_path):
    """Per-test app bound to a throwaway sqlite file."""
    app = create_app(
        "testing",
        {"SQLALCHEMY_DATABASE_URI": f"sqlite:///{tmp_path / 'habits-test.db'}"},
    )
    ctx = app.app_context()
    ctx.push()
    db.create_all()
    try:
        yield app
    finally:
        db.session.remove()
        db.drop_all()
        db.engine.dispose()
        ctx.pop()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def runner(app):
    return app.test_cli_runner()


@pytest.fixture()
def repo(app):
    return HabitRepository()


@pytest.fixture()
def habit_fields():
    return {
        "name": "Stretch",
        "description": "Ten minutes of mobility work",
        "frequency": "custom",
        "target_days": ["monday", "wednesday"],
        "priority": 2,
        "category": "health",
    }
