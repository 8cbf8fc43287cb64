# tests/test_config.py
from cloudpool.config import Settings


def test_defaults(monkeypatch):
    monkeypatch.delenv("CLOUDPOOL_DATABASE_URL", raising=False)
    monkeypatch.delenv("CLOUDPOOL_LOG_JSON", raising=False)
    settings = Settings(_env_file=None)

    assert settings.database_url == "sqlite:///cloudpool_metadata.db"
    assert settings.is_sqlite is True
    assert settings.log_json is None


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("CLOUDPOOL_DATABASE_URL", "postgresql+psycopg://cloud@db/cloudpool")
    monkeypatch.setenv("CLOUDPOOL_LOG_JSON", "true")

    settings = Settings(_env_file=None)

    assert settings.is_sqlite is False
    assert settings.log_json is True
