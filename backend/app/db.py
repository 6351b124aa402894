from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Any, Callable, Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import ConnectionFailure

from app import config

logger = logging.getLogger(__name__)

ClientFactory = Callable[..., Any]


class MongoConnectionManager:
    """Owns the process-wide Motor client and the database handle built on it.

    At most one connection attempt is in flight at a time. Every caller that
    arrives while it runs awaits the same attempt and sees the same result.
    A failed attempt is not cached, so the next call starts over.
    """

    def __init__(
        self,
        url: str,
        db_name: str,
        *,
        client_factory: ClientFactory = AsyncIOMotorClient,
        server_selection_timeout_ms: int = 5000,
    ) -> None:
        self._url = url
        self._db_name = db_name
        self._client_factory = client_factory
        self._server_selection_timeout_ms = server_selection_timeout_ms

        self._client: Optional[Any] = None
        self._db: Optional[AsyncIOMotorDatabase] = None
        self._pending: Optional[asyncio.Task] = None

    @property
    def is_connected(self) -> bool:
        return self._db is not None

    async def get_connection(self) -> AsyncIOMotorDatabase:
        if self._db is not None:
            return self._db

        # No await between the check and the assignment, so concurrent
        # callers on the loop can never start a second attempt.
        if self._pending is None:
            self._pending = asyncio.ensure_future(self._connect())

        # Shielded: a cancelled caller must not cancel the shared attempt.
        return await asyncio.shield(self._pending)

    async def _connect(self) -> AsyncIOMotorDatabase:
        client = self._client_factory(
            self._url,
            serverSelectionTimeoutMS=self._server_selection_timeout_ms,
        )
        try:
            # Motor connects lazily; ping so that an unreachable server fails
            # here instead of on the first query.
            await client.admin.command("ping")
        except asyncio.CancelledError:
            self._forget_attempt()
            client.close()
            logger.warning("MongoDB connection attempt abandoned: manager closed")
            # Waiters did not cancel anything themselves; give them a driver error.
            raise ConnectionFailure("MongoDB connection closed while connecting") from None
        except Exception as exc:
            self._forget_attempt()
            client.close()
            logger.warning("MongoDB connection attempt failed: %s", exc)
            raise

        self._client = client
        self._db = client[self._db_name]
        self._forget_attempt()
        logger.info("Connected to MongoDB database %s", self._db_name)
        return self._db

    def _forget_attempt(self) -> None:
        # A newer attempt may already have replaced this one after close().
        if self._pending is asyncio.current_task():
            self._pending = None

    async def close(self) -> None:
        pending, self._pending = self._pending, None
        if pending is not None and not pending.done():
            pending.cancel()
            # The attempt closes its own client; its error belongs to its waiters.
            with contextlib.suppress(asyncio.CancelledError, ConnectionFailure):
                await pending

        if self._client is not None:
            self._client.close()
            logger.info("MongoDB connection closed")

        self._client = None
        self._db = None


_manager: Optional[MongoConnectionManager] = None


def get_connection_manager() -> MongoConnectionManager:
    """Return the process-wide manager, building it from config on first use."""

    global _manager

    if _manager is None:
        _manager = MongoConnectionManager(
            config.MONGODB_URI,
            config.DB_NAME,
            server_selection_timeout_ms=config.MONGO_SERVER_SELECTION_TIMEOUT_MS,
        )
    return _manager


async def connect_mongo() -> None:
    await get_connection_manager().get_connection()


async def close_mongo() -> None:
    if _manager is not None:
        await _manager.close()


async def get_db() -> AsyncIOMotorDatabase:
    return await get_connection_manager().get_connection()
