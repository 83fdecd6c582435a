import pytest

from habit_tracker import create_app

pytestmark = pytest.mark.integration


@pytest.fixture()
def limited_client(tmp_path):
    app = create_app(
        "testing",
        {
            "SQLALCHEMY_DATABASE_URI": f"sqlite:///{tmp_path / 'limits.db'}",
            "RATELIMIT_ENABLED": True,
            "RATELIMIT_DEFAULT": "2 per minute",
            "RATELIMIT_STORAGE_URI": "memory://",
        },
    )
    return app.test_client()


def test_configured_default_limit_is_enforced(limited_client):
    statuses = [limited_client.get("/health").status_code for _ in range(3)]
    assert statuses == [200, 200, 429]


def test_limit_is_reloaded_for_each_app(limited_client, tmp_path):
    limited_client.get("/health")
    relaxed = create_app(
        "testing",
        {
            "SQLALCHEMY_DATABASE_URI": f"sqlite:///{tmp_path / 'relaxed.db'}",
            "RATELIMIT_ENABLED": True,
            "RATELIMIT_DEFAULT": "5 per minute",
            "RATELIMIT_STORAGE_URI": "memory://",
        },
    ).test_client()
    statuses = [relaxed.get("/health").status_code for _ in range(6)]
    assert statuses == [200] * 5 + [429]
