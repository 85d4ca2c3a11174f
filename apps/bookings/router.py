from fastapi import APIRouter, Depends, status, Query

from apps.bookings.schemas import BookingCreate, BookingUpdate, BookingStatusUpdate, BookingResponse, BookingListResponse
from apps.bookings.services import BookingService, get_booking_service
from apps.auth.permissions import authorize
from apps.auth.services import get_current_user, get_current_client
from apps.auth.models import UserModel
from core.lifecycle import BookingStatus

router = APIRouter()

# ============ STATIC ROUTES FIRST (before /{booking_id}) ============

@router.get("/", response_model=BookingListResponse, summary="List my bookings")
def list_bookings(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    service: BookingService = Depends(get_booking_service),
    current_user: UserModel = Depends(get_current_user)
):
    bookings, total = service.get_bookings(current_user, skip=skip, limit=limit)
    return BookingListResponse(items=bookings, total=total)

@router.get("/my-bookings", response_model=BookingListResponse, summary="List my bookings")
def list_my_bookings(
    service: BookingService = Depends(get_booking_service),
    current_user: UserModel = Depends(get_current_user)
):
    bookings, total = service.get_bookings(current_user)
    return BookingListResponse(items=bookings, total=total)

@router.post("/", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
def create_booking(
    data: BookingCreate,
    service: BookingService = Depends(get_booking_service),
    client: UserModel = Depends(get_current_client)
):
    """
    Book an accepted quote.
    - The quote's service request must still be open
    - Each quote can be booked once
    """
    return service.booking_to_response(service.create_booking(data, client))

# ============ DYNAMIC ROUTES ============

@router.get("/{booking_id}", response_model=BookingResponse)
def get_booking(
    booking_id: int,
    service: BookingService = Depends(get_booking_service),
    current_user: UserModel = Depends(get_current_user)
):
    booking = service.get_booking_or_404(booking_id)
    authorize(current_user, booking, "view")
    return service.booking_to_response(booking)

@router.put("/{booking_id}", response_model=BookingResponse)
def update_booking(
    booking_id: int,
    update: BookingUpdate,
    service: BookingService = Depends(get_booking_service),
    current_user: UserModel = Depends(get_current_user)
):
    """
    Reschedule, add notes or change status.
    - Only the mechanic can start or complete a booking
    - Only the client can cancel it
    """
    return service.booking_to_response(service.update_booking(booking_id, update, current_user))

@router.put("/{booking_id}/status", response_model=BookingResponse)
def update_booking_status(
    booking_id: int,
    status_update: BookingStatusUpdate,
    service: BookingService = Depends(get_booking_service),
    current_user: UserModel = Depends(get_current_user)
):
    booking = service.change_status(booking_id, status_update.status, current_user)
    return service.booking_to_response(booking)

@router.post("/{booking_id}/complete", response_model=BookingResponse)
def complete_booking(
    booking_id: int,
    service: BookingService = Depends(get_booking_service),
    current_user: UserModel = Depends(get_current_user)
):
    booking = service.change_status(booking_id, BookingStatus.COMPLETED, current_user)
    return service.booking_to_response(booking)

@router.delete("/{booking_id}")
def delete_booking(
    booking_id: int,
    service: BookingService = Depends(get_booking_service),
    client: UserModel = Depends(get_current_client)
):
    """Remove a scheduled, unreviewed booking and reopen its request"""
    return service.delete_booking(booking_id, client)
