from __future__ import annotations

import importlib
import os

import pytest

from app import config


@pytest.fixture
def reload_config(monkeypatch: pytest.MonkeyPatch):
    """Reload app.config under a patched env, restoring the original afterwards."""

    original_uri = os.environ["MONGODB_URI"]
    yield monkeypatch
    monkeypatch.setenv("MONGODB_URI", original_uri)
    monkeypatch.delenv("DB_NAME", raising=False)
    monkeypatch.delenv("MONGO_SERVER_SELECTION_TIMEOUT_MS", raising=False)
    importlib.reload(config)


def test_missing_mongodb_uri_is_fatal(reload_config: pytest.MonkeyPatch) -> None:
    reload_config.delenv("MONGODB_URI")

    with pytest.raises(RuntimeError, match="MONGODB_URI") as exc_info:
        importlib.reload(config)

    assert type(exc_info.value).__name__ == "ConfigError"


def test_blank_mongodb_uri_is_fatal(reload_config: pytest.MonkeyPatch) -> None:
    reload_config.setenv("MONGODB_URI", "   ")

    with pytest.raises(RuntimeError, match="MONGODB_URI"):
        importlib.reload(config)


def test_db_name_comes_from_uri_path(reload_config: pytest.MonkeyPatch) -> None:
    reload_config.setenv("MONGODB_URI", "mongodb+srv://user:pw@cluster.example.net/tickets?retryWrites=true")
    reload_config.delenv("DB_NAME", raising=False)

    importlib.reload(config)

    assert config.DB_NAME == "tickets"


def test_db_name_env_overrides_uri(reload_config: pytest.MonkeyPatch) -> None:
    reload_config.setenv("MONGODB_URI", "mongodb://localhost:27017/tickets")
    reload_config.setenv("DB_NAME", "bookings_eu")

    importlib.reload(config)

    assert config.DB_NAME == "bookings_eu"


def test_db_name_falls_back_to_default(reload_config: pytest.MonkeyPatch) -> None:
    reload_config.setenv("MONGODB_URI", "mongodb://localhost:27017")
    reload_config.delenv("DB_NAME", raising=False)

    importlib.reload(config)

    assert config.DB_NAME == "event_bookings"


def test_server_selection_timeout_must_be_integer(reload_config: pytest.MonkeyPatch) -> None:
    reload_config.setenv("MONGO_SERVER_SELECTION_TIMEOUT_MS", "soon")

    with pytest.raises(RuntimeError, match="MONGO_SERVER_SELECTION_TIMEOUT_MS"):
        importlib.reload(config)
