"""Shared test configuration and fixtures for backend tests.

Key principles:
- MONGODB_URI is set before any app import; app.config refuses to load without it.
- Single Motor/Mongo client per test session; each test gets its own
  database, dropped on teardown.
- httpx.AsyncClient(transport=ASGITransport(app=app)) used for all HTTP tests.
- AnyIO is the single async runner via pytest-anyio (@pytest.mark.anyio).
"""

from typing import Any, AsyncGenerator, Dict

import os
import sys
from pathlib import Path
import uuid

MONGO_URL = os.environ.get("MONGO_URL", "mongodb://localhost:27017")
os.environ.setdefault("MONGODB_URI", MONGO_URL)

import pytest
import httpx
from bson import ObjectId
from httpx import ASGITransport
from motor.motor_asyncio import AsyncIOMotorClient
from pymongo.errors import PyMongoError

# Ensure backend root is on sys.path so that `server` module is importable
ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from server import app  # noqa: E402
from app.db import get_db  # noqa: E402
from app.utils import now_utc  # noqa: E402


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    """Force pytest-anyio to use asyncio event loop."""

    return "asyncio"


@pytest.fixture(scope="session")
async def motor_client() -> AsyncGenerator[AsyncIOMotorClient, None]:
    """Session-scoped Motor client for all tests.

    This avoids creating/closing clients per test and keeps a single
    event loop / IO stack for Mongo.
    """

    client = AsyncIOMotorClient(MONGO_URL, serverSelectionTimeoutMS=3000)
    try:
        await client.admin.command("ping")
    except PyMongoError as exc:
        client.close()
        pytest.skip(f"MongoDB not reachable at {MONGO_URL}: {exc}")

    try:
        yield client
    finally:
        client.close()


@pytest.fixture(scope="function")
async def test_db(motor_client: AsyncIOMotorClient) -> AsyncGenerator[Any, None]:
    """Function-scoped isolated database for each test.

    Each test gets its own temporary database, dropped on teardown.
    """

    db_name = f"event_bookings_test_{uuid.uuid4().hex}"
    db = motor_client[db_name]
    try:
        yield db
    finally:
        await motor_client.drop_database(db_name)


@pytest.fixture(scope="function")
async def existing_event(test_db: Any) -> Dict[str, Any]:
    now = now_utc()
    event = {"_id": ObjectId(), "title": "PyCon Meetup", "slug": "pycon-meetup", "createdAt": now, "updatedAt": now}
    await test_db.events.insert_one(event)
    return event


@pytest.fixture(scope="function")
async def app_with_overrides(test_db: Any) -> AsyncGenerator[Any, None]:
    """FastAPI app instance whose get_db dependency points to test_db."""

    async def override_get_db():
        yield test_db

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield app
    finally:
        app.dependency_overrides.clear()


@pytest.fixture(scope="function")
async def async_client(app_with_overrides: Any) -> AsyncGenerator[httpx.AsyncClient, None]:
    transport = ASGITransport(app=app_with_overrides)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
