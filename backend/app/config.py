from __future__ import annotations

"""Application configuration.

All values come from the process environment. ``server.py`` loads a local
``.env`` (when present) before any ``app`` module is imported, so a missing
``MONGODB_URI`` surfaces here as a startup failure rather than on the first
request.
"""

import os
from urllib.parse import urlparse


class ConfigError(RuntimeError):
    """Raised at import time when required configuration is absent."""


def _require_env(name: str, hint: str) -> str:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        raise ConfigError(hint)
    return raw.strip()


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from exc


def _db_name_from_uri(uri: str) -> str:
    path = urlparse(uri).path.lstrip("/")
    return path.split("/")[0] if path else ""


# Application constants
APP_NAME = "Event Bookings API"
APP_VERSION = "0.1.0"
SERVICE_NAME = "event-bookings"
CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "*").split(",")

MONGODB_URI: str = _require_env(
    "MONGODB_URI",
    "Please define the MONGODB_URI environment variable inside .env",
)
DB_NAME: str = os.environ.get("DB_NAME") or _db_name_from_uri(MONGODB_URI) or "event_bookings"

# Operations fail after this long instead of waiting on an unreachable server.
MONGO_SERVER_SELECTION_TIMEOUT_MS: int = _env_int("MONGO_SERVER_SELECTION_TIMEOUT_MS", 5000)

LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "INFO").upper()
