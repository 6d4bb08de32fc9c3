"""Tests for configuration loading."""

from jobgate.config import load_config
from jobgate.db import get_database, normalize_database_url


def test_load_config_from_env(tmp_path, monkeypatch):
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        """
database:
  url: sqlite:///coord.db
query:
  default_length: 20
  validate_status: false
verifier:
  strict_names: true
"""
    )
    monkeypatch.setenv("JOBGATE_CONFIG", str(config_path))
    monkeypatch.delenv("JOBGATE_DATABASE_URL", raising=False)
    monkeypatch.delenv("DATABASE_URL", raising=False)

    config = load_config()
    assert config.database.url == "sqlite:///coord.db"
    assert config.query.default_length == 20
    assert config.query.max_length is None
    assert config.query.validate_status is False
    assert config.verifier.strict_names is True


def test_missing_config_file_uses_defaults(tmp_path, monkeypatch):
    monkeypatch.delenv("JOBGATE_DATABASE_URL", raising=False)
    monkeypatch.delenv("DATABASE_URL", raising=False)

    config = load_config(str(tmp_path / "absent.yaml"))
    assert config.database.url is None
    assert config.query.default_length == 50
    assert config.verifier.strict_names is False


def test_database_url_env_overrides_file(tmp_path, monkeypatch):
    config_path = tmp_path / "config.yaml"
    config_path.write_text("database:\n  url: sqlite:///from-file.db\n")
    monkeypatch.setenv("JOBGATE_DATABASE_URL", f"sqlite:///{tmp_path / 'env.db'}")

    config = load_config(str(config_path))
    assert config.database.url == f"sqlite:///{tmp_path / 'env.db'}"


def test_get_database_uses_config(tmp_path, monkeypatch):
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        f"database:\n  url: sqlite:///{tmp_path / 'coord.db'}\nquery:\n  default_length: 7\n"
    )
    monkeypatch.setenv("JOBGATE_CONFIG", str(config_path))
    monkeypatch.delenv("JOBGATE_DATABASE_URL", raising=False)
    monkeypatch.delenv("DATABASE_URL", raising=False)

    db = get_database()
    assert db.engine.url.drivername == "sqlite+aiosqlite"
    assert db.query_config.default_length == 7


def test_normalize_database_url():
    assert normalize_database_url("sqlite:///a.db") == "sqlite+aiosqlite:///a.db"
    assert (
        normalize_database_url("postgres://u:p@host/db")
        == "postgresql+asyncpg://u:p@host/db"
    )
    assert (
        normalize_database_url("postgresql://u:p@host/db")
        == "postgresql+asyncpg://u:p@host/db"
    )
    assert (
        normalize_database_url("sqlite+aiosqlite:///a.db") == "sqlite+aiosqlite:///a.db"
    )
