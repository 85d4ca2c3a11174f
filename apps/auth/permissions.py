"""Who may do what to which resource.

Every ownership or role decision the resource services make goes through
:func:`authorize`, which looks up ``(resource type, action)`` in
``POLICIES`` and raises a 403 when the caller does not qualify.
"""
from typing import Callable, Dict, Tuple

from fastapi import HTTPException, status

from apps.auth.models import UserModel
from core.lifecycle import RequestStatus, UserRole

Rule = Callable[[UserModel, object], bool]


def is_client(user: UserModel) -> bool:
    return user.role == UserRole.CLIENT


def is_mechanic(user: UserModel) -> bool:
    return user.role == UserRole.MECHANIC


def mechanic_id_of(user: UserModel):
    """Mechanic profile id of ``user``, or ``None`` for clients."""
    if is_mechanic(user) and user.mechanic_profile is not None:
        return user.mechanic_profile.id
    return None


def _vehicle_owner(user, vehicle) -> bool:
    return vehicle.user_id == user.id


def _request_owner(user, request) -> bool:
    return is_client(user) and request.user_id == user.id


def _any_mechanic(user, resource) -> bool:
    return is_mechanic(user)


def _open_to_mechanics(user, request) -> bool:
    return is_mechanic(user) and request.status == RequestStatus.OPEN


def _quoted_request(user, request) -> bool:
    mechanic_id = mechanic_id_of(user)
    return mechanic_id is not None and any(q.mechanic_id == mechanic_id for q in request.quotes)


def _quote_request_owner(user, quote) -> bool:
    return is_client(user) and quote.request.user_id == user.id


def _quote_author(user, quote) -> bool:
    return is_mechanic(user) and quote.mechanic_id == mechanic_id_of(user)


def _booking_client(user, booking) -> bool:
    return is_client(user) and booking.client_id == user.id


def _booking_mechanic(user, booking) -> bool:
    return is_mechanic(user) and booking.mechanic_user_id == user.id


def _reviewer(user, review) -> bool:
    return review.reviewer_id == user.id


def either(*rules: Rule) -> Rule:
    return lambda user, resource: any(rule(user, resource) for rule in rules)


POLICIES: Dict[Tuple[str, str], Tuple[Rule, str]] = {
    ("Vehicle", "view"): (_vehicle_owner, "Not authorized to access this vehicle"),
    ("Vehicle", "update"): (_vehicle_owner, "Not authorized to update this vehicle"),
    ("Vehicle", "delete"): (_vehicle_owner, "Not authorized to delete this vehicle"),

    # Mechanics see open requests, and later only the ones they quoted
    ("ServiceRequest", "view"): (
        either(_request_owner, _open_to_mechanics, _quoted_request),
        "Not authorized to view this request",
    ),
    ("ServiceRequest", "update"): (_request_owner, "Not authorized to update this request"),
    ("ServiceRequest", "delete"): (_request_owner, "Not authorized to delete this request"),
    ("ServiceRequest", "quote"): (_any_mechanic, "Only mechanics can quote requests"),
    ("ServiceRequest", "cancel"): (_quoted_request, "Only a mechanic who quoted this request can cancel it"),

    ("Quote", "view"): (either(_quote_request_owner, _quote_author), "Not authorized to view this quote"),
    ("Quote", "update"): (_quote_author, "Not authorized to update this quote"),
    ("Quote", "respond"): (_quote_request_owner, "Only the request owner can accept or reject a quote"),
    ("Quote", "delete"): (_quote_author, "Not authorized to delete this quote"),
    ("Quote", "book"): (_quote_request_owner, "Not authorized to book this quote"),

    ("Booking", "view"): (either(_booking_client, _booking_mechanic), "Not authorized to view this booking"),
    ("Booking", "update"): (either(_booking_client, _booking_mechanic), "Not authorized to update this booking"),
    ("Booking", "start"): (_booking_mechanic, "Only the mechanic can start a booking"),
    ("Booking", "complete"): (_booking_mechanic, "Only mechanics can mark bookings as completed"),
    ("Booking", "cancel"): (_booking_client, "Only clients can cancel bookings"),
    ("Booking", "delete"): (_booking_client, "Not authorized to delete this booking"),
    ("Booking", "review"): (_booking_client, "Not authorized to review this booking"),

    ("Review", "update"): (_reviewer, "Not authorized to update this review"),
    ("Review", "delete"): (_reviewer, "Not authorized to delete this review"),
}


def is_allowed(user: UserModel, resource, action: str) -> bool:
    rule, _ = POLICIES[(type(resource).__name__, action)]
    return rule(user, resource)


def authorize(user: UserModel, resource, action: str) -> None:
    rule, message = POLICIES[(type(resource).__name__, action)]
    if not rule(user, resource):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=message)
