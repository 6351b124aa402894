"""Create the bookings indexes without starting the API.

Usage (from backend/): MONGODB_URI=... python -m scripts.ensure_booking_indexes
"""

import asyncio
import logging

from app.db import close_mongo, get_db
from app.indexes.booking_indexes import ensure_booking_indexes

logger = logging.getLogger("ensure_booking_indexes")


async def main() -> None:
    db = await get_db()
    try:
        names = await ensure_booking_indexes(db)
        logger.info("Booking indexes in place: %s", ", ".join(names))
    finally:
        await close_mongo()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    asyncio.run(main())
