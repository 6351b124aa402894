from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class BookingCreateRequest(BaseModel):
    """Create payload.

    Both fields are optional at the schema level; presence and format are
    checked by the booking rules so that the error messages stay the same
    whether a booking comes in over HTTP or from a script.
    """

    eventId: Optional[str] = None
    email: Optional[str] = None


class BookingUpdateRequest(BaseModel):
    eventId: Optional[str] = None
    email: Optional[str] = None


class BookingResponse(BaseModel):
    id: str
    eventId: str
    email: str
    createdAt: str
    updatedAt: str


class BookingListResponse(BaseModel):
    items: List[BookingResponse] = Field(default_factory=list)
