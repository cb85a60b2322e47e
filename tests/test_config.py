"""Settings derived from the environment."""

from liftlog.core.config import Settings


def test_defaults_to_local_sqlite():
    settings = Settings(_env_file=None)
    assert settings.is_sqlite
    assert settings.sync_database_url == "sqlite:///./liftlog.db"
    assert settings.exercise_search_case_sensitive is False


def test_postgres_url_has_sync_form(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "postgresql+asyncpg://lift:log@db/liftlog")
    settings = Settings(_env_file=None)
    assert not settings.is_sqlite
    assert settings.sync_database_url == "postgresql://lift:log@db/liftlog"


def test_recent_limit_from_env(monkeypatch):
    monkeypatch.setenv("RECENT_WORKOUTS_LIMIT", "10")
    assert Settings(_env_file=None).recent_workouts_limit == 10
