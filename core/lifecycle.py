"""Status enums and allowed transitions for requests, quotes and bookings.

All status changes go through :func:`transition`, so the set of legal
moves lives in one place instead of being re-checked in every handler.
"""
import enum
from typing import Dict, List, Set

from fastapi import HTTPException, status


def enum_values(enum_cls) -> List[str]:
    """Store enum values (``"in_progress"``) rather than member names in the DB."""
    return [member.value for member in enum_cls]


class UserRole(str, enum.Enum):
    CLIENT = "client"
    MECHANIC = "mechanic"


class RequestStatus(str, enum.Enum):
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class QuoteStatus(str, enum.Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class BookingStatus(str, enum.Enum):
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


REQUEST_TRANSITIONS: Dict[RequestStatus, Set[RequestStatus]] = {
    RequestStatus.OPEN: {RequestStatus.IN_PROGRESS, RequestStatus.CANCELLED},
    RequestStatus.IN_PROGRESS: {RequestStatus.OPEN, RequestStatus.COMPLETED},
    RequestStatus.COMPLETED: set(),
    RequestStatus.CANCELLED: set(),
}

QUOTE_TRANSITIONS: Dict[QuoteStatus, Set[QuoteStatus]] = {
    QuoteStatus.PENDING: {QuoteStatus.ACCEPTED, QuoteStatus.REJECTED},
    QuoteStatus.ACCEPTED: set(),
    QuoteStatus.REJECTED: set(),
}

BOOKING_TRANSITIONS: Dict[BookingStatus, Set[BookingStatus]] = {
    BookingStatus.SCHEDULED: {
        BookingStatus.IN_PROGRESS,
        BookingStatus.COMPLETED,
        BookingStatus.CANCELLED,
    },
    BookingStatus.IN_PROGRESS: {BookingStatus.COMPLETED, BookingStatus.CANCELLED},
    BookingStatus.COMPLETED: set(),
    BookingStatus.CANCELLED: set(),
}

_TABLES = {
    RequestStatus: REQUEST_TRANSITIONS,
    QuoteStatus: QUOTE_TRANSITIONS,
    BookingStatus: BOOKING_TRANSITIONS,
}


def can_transition(current, target) -> bool:
    table = _TABLES[type(target)]
    return target in table[type(target)(current)]


def transition(entity, target, label: str) -> None:
    """Move ``entity.status`` to ``target`` or raise a 400.

    ``label`` names the entity in the error message, e.g. ``"booking"``.
    """
    current = type(target)(entity.status)
    if not can_transition(current, target):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Cannot change {label} status from '{current.value}' to '{target.value}'"
        )
    entity.status = target
