from __future__ import annotations

"""Indexes for the bookings collection."""

from pymongo import ASCENDING
from pymongo.errors import OperationFailure
import logging

logger = logging.getLogger(__name__)

# (keys, options) pairs; names are pinned so reruns stay idempotent.
BOOKING_INDEXES = [
    # "bookings for event" lookups
    ([("eventId", ASCENDING)], {"name": "eventId_1"}),
    # Duplicate-booking lookups (same event + email). Not unique.
    ([("eventId", ASCENDING), ("email", ASCENDING)], {"name": "eventId_1_email_1"}),
]


async def ensure_booking_indexes(db) -> list[str]:
    """Ensure indexes for the bookings collection and return their names."""

    async def _safe_create(collection, *args, **kwargs):
        try:
            return await collection.create_index(*args, **kwargs)
        except OperationFailure as e:
            msg = str(e).lower()
            if (
                "indexoptionsconflict" in msg
                or "indexkeyspecsconflict" in msg
                or "already exists" in msg
            ):
                logger.warning(
                    "[booking_indexes] Keeping legacy index for %s (name=%s): %s",
                    collection.name,
                    kwargs.get("name"),
                    msg,
                )
                return kwargs.get("name")
            raise

    names = []
    for keys, options in BOOKING_INDEXES:
        names.append(await _safe_create(db.bookings, keys, **options))
    return names
