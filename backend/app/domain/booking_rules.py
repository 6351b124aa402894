from __future__ import annotations

import re
from typing import Any, Dict, List, Mapping, Optional, Protocol

from bson import ObjectId
from bson.errors import InvalidId

from app.errors import AppError


EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

EVENT_ID_REQUIRED = "Event ID is required"
EVENT_ID_INVALID = "Invalid event ID"
EMAIL_REQUIRED = "Email is required"
EMAIL_INVALID = "Please provide a valid email address"
EVENT_NOT_FOUND = "Event not found. Cannot create booking for non-existent event."
EVENT_REFERENCE_FAILED = "Failed to validate event reference"


class EventLookup(Protocol):
    """Lookup-by-id capability the booking rules need from the events module."""

    async def find_by_id(self, event_id: ObjectId) -> Optional[Dict[str, Any]]:
        ...


class BookingValidationError(AppError):
    """A booking field is missing or malformed. ``errors`` maps field -> message."""

    def __init__(self, errors: Dict[str, str]) -> None:
        super().__init__(
            status_code=422,
            code="booking_validation_error",
            message="; ".join(errors.values()),
            details={"errors": dict(errors)},
        )
        self.errors = dict(errors)


class EventNotFoundError(AppError):
    def __init__(self, event_id: Any) -> None:
        super().__init__(
            status_code=404,
            code="event_not_found",
            message=EVENT_NOT_FOUND,
            details={"eventId": str(event_id)},
        )
        self.event_id = event_id


class EventReferenceError(AppError):
    """The event lookup itself failed; the reference could not be checked."""

    def __init__(self, event_id: Any) -> None:
        super().__init__(
            status_code=502,
            code="event_reference_error",
            message=EVENT_REFERENCE_FAILED,
            details={"eventId": str(event_id)},
            retryable=True,
        )
        self.event_id = event_id


def normalize_email(value: str) -> str:
    return value.strip().lower()


def coerce_event_id(value: Any) -> ObjectId:
    """Cast a 24-hex string (or ObjectId) to ObjectId, raising InvalidId otherwise."""

    if isinstance(value, ObjectId):
        return value
    if not isinstance(value, str):
        raise InvalidId(f"{value!r} is not a valid ObjectId")
    return ObjectId(value.strip())


def validate_booking_fields(payload: Mapping[str, Any]) -> Dict[str, Any]:
    """Validate and normalize the ``eventId`` / ``email`` pair of a booking.

    Returns a new dict holding the cleaned values. Every field problem is
    collected before raising, so callers see all of them at once.
    """

    errors: Dict[str, str] = {}
    clean: Dict[str, Any] = {}

    raw_event_id = payload.get("eventId")
    if raw_event_id is None or (isinstance(raw_event_id, str) and not raw_event_id.strip()):
        errors["eventId"] = EVENT_ID_REQUIRED
    else:
        try:
            clean["eventId"] = coerce_event_id(raw_event_id)
        except (InvalidId, TypeError):
            errors["eventId"] = EVENT_ID_INVALID

    raw_email = payload.get("email")
    if raw_email is None:
        errors["email"] = EMAIL_REQUIRED
    elif not isinstance(raw_email, str):
        errors["email"] = EMAIL_INVALID
    else:
        email = normalize_email(raw_email)
        if not email:
            errors["email"] = EMAIL_REQUIRED
        elif not EMAIL_PATTERN.match(email):
            errors["email"] = EMAIL_INVALID
        else:
            clean["email"] = email

    if errors:
        raise BookingValidationError(errors)
    return clean


async def ensure_event_exists(events: EventLookup, event_id: ObjectId) -> None:
    """Reject the booking unless ``event_id`` resolves to an existing event.

    Raises EventNotFoundError when the lookup finds nothing and
    EventReferenceError when the lookup itself fails.
    """

    try:
        event = await events.find_by_id(event_id)
    except Exception as exc:
        raise EventReferenceError(event_id) from exc

    if not event:
        raise EventNotFoundError(event_id)


def changed_fields(before: Mapping[str, Any], after: Mapping[str, Any], fields: List[str]) -> List[str]:
    return [f for f in fields if before.get(f) != after.get(f)]
