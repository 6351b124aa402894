from __future__ import annotations

from typing import Any, Dict, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from app.repositories.base_repository import get_collection, parse_object_id


class EventRepository:
    """Read access to the ``events`` collection.

    Events are owned by another module; bookings only need to know whether
    one exists.
    """

    def __init__(self, db: AsyncIOMotorDatabase) -> None:
        self._col = get_collection(db, "events")

    async def find_by_id(self, event_id: Any) -> Optional[Dict[str, Any]]:
        oid = parse_object_id(event_id)
        if oid is None:
            return None
        return await self._col.find_one({"_id": oid})
