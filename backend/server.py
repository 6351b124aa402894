from __future__ import annotations

import os
import logging
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

ROOT_DIR = Path(__file__).parent

# Load .env only if exists (development fallback). Must run before any app
# import: app.config refuses to load without MONGODB_URI.
env_path = ROOT_DIR / ".env"
if env_path.exists():
    load_dotenv(env_path)

from fastapi import FastAPI  # noqa: E402
from starlette.middleware.cors import CORSMiddleware  # noqa: E402

from app import config  # noqa: E402
from app.db import close_mongo, connect_mongo, get_db  # noqa: E402
from app.exception_handlers import register_exception_handlers  # noqa: E402
from app.indexes.booking_indexes import ensure_booking_indexes  # noqa: E402
from app.middleware.correlation_id import CorrelationIdMiddleware  # noqa: E402
from app.routers.bookings import events_router as event_bookings_router  # noqa: E402
from app.routers.bookings import router as bookings_router  # noqa: E402

logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(config.SERVICE_NAME)

app = FastAPI(title=config.APP_NAME, version=config.APP_VERSION)

app.add_middleware(CorrelationIdMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_credentials=True,
    allow_origins=config.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Routers (/api prefix is on each router)
app.include_router(bookings_router)
app.include_router(event_bookings_router)


@app.get("/api/health")
async def health() -> dict[str, Any]:
    """Main health check with database ping"""
    ok = False
    try:
        db = await get_db()
        await db.command("ping")
        ok = True
    except Exception as exc:
        logger.warning("Health check failed: %s", exc)
    return {"ok": ok, "service": config.SERVICE_NAME}


@app.on_event("startup")
async def _startup() -> None:
    await connect_mongo()
    db = await get_db()
    await ensure_booking_indexes(db)
    logger.info("Startup complete (pid=%s)", os.getpid())


@app.on_event("shutdown")
async def _shutdown() -> None:
    await close_mongo()
    logger.info("Shutdown complete")
