from types import SimpleNamespace

import pytest
from fastapi import HTTPException

from core.lifecycle import (
    BookingStatus,
    QuoteStatus,
    RequestStatus,
    can_transition,
    transition,
)


@pytest.mark.parametrize(
    "current, target, allowed",
    [
        (RequestStatus.OPEN, RequestStatus.IN_PROGRESS, True),
        (RequestStatus.OPEN, RequestStatus.CANCELLED, True),
        (RequestStatus.OPEN, RequestStatus.COMPLETED, False),
        (RequestStatus.IN_PROGRESS, RequestStatus.COMPLETED, True),
        (RequestStatus.IN_PROGRESS, RequestStatus.OPEN, True),
        (RequestStatus.IN_PROGRESS, RequestStatus.CANCELLED, False),
        (RequestStatus.COMPLETED, RequestStatus.OPEN, False),
        (RequestStatus.CANCELLED, RequestStatus.OPEN, False),
        (QuoteStatus.PENDING, QuoteStatus.ACCEPTED, True),
        (QuoteStatus.PENDING, QuoteStatus.REJECTED, True),
        (QuoteStatus.ACCEPTED, QuoteStatus.REJECTED, False),
        (QuoteStatus.REJECTED, QuoteStatus.PENDING, False),
        (BookingStatus.SCHEDULED, BookingStatus.IN_PROGRESS, True),
        (BookingStatus.SCHEDULED, BookingStatus.COMPLETED, True),
        (BookingStatus.IN_PROGRESS, BookingStatus.SCHEDULED, False),
        (BookingStatus.COMPLETED, BookingStatus.CANCELLED, False),
        (BookingStatus.CANCELLED, BookingStatus.SCHEDULED, False),
    ],
)
def test_can_transition(current, target, allowed):
    assert can_transition(current, target) is allowed


def test_transition_sets_status():
    booking = SimpleNamespace(status=BookingStatus.SCHEDULED)
    transition(booking, BookingStatus.COMPLETED, "booking")
    assert booking.status == BookingStatus.COMPLETED


def test_transition_accepts_raw_values():
    request = SimpleNamespace(status="open")
    transition(request, RequestStatus.IN_PROGRESS, "request")
    assert request.status == RequestStatus.IN_PROGRESS


def test_illegal_transition_raises_and_keeps_status():
    quote = SimpleNamespace(status=QuoteStatus.REJECTED)
    with pytest.raises(HTTPException) as exc:
        transition(quote, QuoteStatus.ACCEPTED, "quote")
    assert exc.value.status_code == 400
    assert exc.value.detail == "Cannot change quote status from 'rejected' to 'accepted'"
    assert quote.status == QuoteStatus.REJECTED
