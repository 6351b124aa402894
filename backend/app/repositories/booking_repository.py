from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from app.domain.booking_rules import (
    EventLookup,
    EventNotFoundError,
    EventReferenceError,
    changed_fields,
    ensure_event_exists,
    normalize_email,
    validate_booking_fields,
)
from app.repositories.base_repository import get_collection, parse_object_id
from app.repositories.event_repository import EventRepository
from app.utils import now_utc

logger = logging.getLogger(__name__)

BOOKINGS_COLLECTION = "bookings"


class BookingRepository:
    """Persistence for bookings, guarded by field and event-reference checks.

    Writes go through ``validate_booking_fields`` and, whenever ``eventId`` is
    new or changed, ``ensure_event_exists``. A failed check leaves the
    collection untouched.
    """

    def __init__(self, db: AsyncIOMotorDatabase, events: Optional[EventLookup] = None) -> None:
        self._db = db
        self._col = get_collection(db, BOOKINGS_COLLECTION)
        self._events: EventLookup = events if events is not None else EventRepository(db)

    async def _check_event(self, event_id: Any) -> None:
        try:
            await ensure_event_exists(self._events, event_id)
        except (EventNotFoundError, EventReferenceError) as exc:
            logger.warning("Booking rejected for event %s: %s", event_id, exc.message)
            raise

    async def create(self, payload: Mapping[str, Any]) -> Dict[str, Any]:
        clean = validate_booking_fields(payload)
        await self._check_event(clean["eventId"])

        now = now_utc()
        doc: Dict[str, Any] = {
            "eventId": clean["eventId"],
            "email": clean["email"],
            "createdAt": now,
            "updatedAt": now,
        }
        res = await self._col.insert_one(doc)
        logger.info("Booking %s created for event %s", res.inserted_id, clean["eventId"])
        # Read back so callers see what the driver stores (millisecond, naive UTC).
        return await self._col.find_one({"_id": res.inserted_id})

    async def update(self, booking_id: str, changes: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
        """Apply ``changes`` to an existing booking and return the stored result.

        Returns None if the booking does not exist.
        """

        before = await self.get_by_id(booking_id)
        if not before:
            return None

        merged = {"eventId": before.get("eventId"), "email": before.get("email")}
        merged.update({k: v for k, v in changes.items() if k in ("eventId", "email")})
        clean = validate_booking_fields(merged)

        modified = changed_fields(before, clean, ["eventId", "email"])
        if not modified:
            return before
        if "eventId" in modified:
            await self._check_event(clean["eventId"])

        updates: Dict[str, Any] = {f: clean[f] for f in modified}
        updates["updatedAt"] = now_utc()
        await self._col.update_one({"_id": before["_id"]}, {"$set": updates})

        return await self.get_by_id(booking_id)

    async def get_by_id(self, booking_id: Any) -> Optional[Dict[str, Any]]:
        oid = parse_object_id(booking_id)
        if oid is None:
            return None
        return await self._col.find_one({"_id": oid})

    async def list_by_event(self, event_id: Any, *, limit: int = 50) -> List[Dict[str, Any]]:
        oid = parse_object_id(event_id)
        if oid is None:
            return []
        cursor = self._col.find({"eventId": oid}).sort("createdAt", -1).limit(limit)
        return await cursor.to_list(limit)

    async def find_by_event_and_email(self, event_id: Any, email: str) -> Optional[Dict[str, Any]]:
        """Return an existing booking for the same event and email, if any."""

        oid = parse_object_id(event_id)
        if oid is None:
            return None
        return await self._col.find_one({"eventId": oid, "email": normalize_email(email)})
