from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends, Query, status

from app.db import get_db
from app.errors import AppError
from app.repositories.booking_repository import BookingRepository
from app.schemas.bookings import (
    BookingCreateRequest,
    BookingListResponse,
    BookingResponse,
    BookingUpdateRequest,
)
from app.utils import serialize_doc

router = APIRouter(prefix="/api/bookings", tags=["bookings"])
events_router = APIRouter(prefix="/api/events", tags=["bookings"])


def _to_response(doc: Dict[str, Any]) -> BookingResponse:
    return BookingResponse(**serialize_doc(doc))


def _booking_not_found(booking_id: str) -> AppError:
    return AppError(status_code=404, code="booking_not_found", message="Booking not found", details={"booking_id": booking_id})


@router.post("", status_code=status.HTTP_201_CREATED, response_model=BookingResponse)
async def create_booking(payload: BookingCreateRequest, db=Depends(get_db)) -> BookingResponse:
    repo = BookingRepository(db)
    doc = await repo.create(payload.model_dump())
    return _to_response(doc)


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking(booking_id: str, db=Depends(get_db)) -> BookingResponse:
    doc = await BookingRepository(db).get_by_id(booking_id)
    if not doc:
        raise _booking_not_found(booking_id)
    return _to_response(doc)


@router.patch("/{booking_id}", response_model=BookingResponse)
async def update_booking(booking_id: str, payload: BookingUpdateRequest, db=Depends(get_db)) -> BookingResponse:
    changes = payload.model_dump(exclude_unset=True)
    doc = await BookingRepository(db).update(booking_id, changes)
    if not doc:
        raise _booking_not_found(booking_id)
    return _to_response(doc)


@events_router.get("/{event_id}/bookings", response_model=BookingListResponse)
async def list_event_bookings(
    event_id: str,
    limit: int = Query(50, ge=1, le=500),
    db=Depends(get_db),
) -> BookingListResponse:
    docs = await BookingRepository(db).list_by_event(event_id, limit=limit)
    return BookingListResponse(items=[_to_response(d) for d in docs])
