from sqlalchemy.orm import Session
from typing import Dict, List, Optional, Tuple
from fastapi import HTTPException, status, Depends
from datetime import datetime
import logging

from apps.bookings.models import Booking
from apps.bookings.schemas import BookingCreate, BookingUpdate
from apps.quotes.models import Quote
from apps.requests.models import ServiceRequest
from apps.auth.models import UserModel
from apps.auth.permissions import authorize, is_client, mechanic_id_of
from core.database import get_db, commit_or_conflict
from core.lifecycle import BookingStatus, QuoteStatus, RequestStatus, transition

logger = logging.getLogger(__name__)

ALREADY_BOOKED = "This quote already has a booking"

# Status a caller asks for -> policy action that must allow it
STATUS_ACTIONS = {
    BookingStatus.IN_PROGRESS: "start",
    BookingStatus.COMPLETED: "complete",
    BookingStatus.CANCELLED: "cancel",
}


class BookingService:
    def __init__(self, db: Session):
        self.db = db

    def get_booking(self, booking_id: int) -> Optional[Booking]:
        return self.db.query(Booking).filter(Booking.id == booking_id).first()

    def get_booking_or_404(self, booking_id: int) -> Booking:
        booking = self.get_booking(booking_id)
        if not booking:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Booking not found")
        return booking

    def get_bookings(self, user: UserModel, skip: int = 0, limit: int = 100) -> Tuple[List[Dict], int]:
        query = self.db.query(Booking).join(Quote, Booking.quote_id == Quote.id)

        if is_client(user):
            query = query.join(ServiceRequest, Quote.request_id == ServiceRequest.id).filter(
                ServiceRequest.user_id == user.id
            )
        else:
            query = query.filter(Quote.mechanic_id == mechanic_id_of(user))

        query = query.order_by(Booking.scheduled_date.desc(), Booking.id.desc())
        total = query.count()
        bookings = [self.booking_to_response(b) for b in query.offset(skip).limit(limit).all()]
        return bookings, total

    def create_booking(self, data: BookingCreate, client: UserModel) -> Booking:
        """Book an accepted quote; the request moves to in_progress"""
        quote = self.db.query(Quote).filter(Quote.id == data.quote_id).first()
        if not quote:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Quote not found")
        authorize(client, quote, "book")

        if quote.status != QuoteStatus.ACCEPTED:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Can only book accepted quotes")
        if quote.request.status != RequestStatus.OPEN:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Service request is not open")
        if quote.booking is not None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=ALREADY_BOOKED)

        db_booking = Booking(
            quote_id=quote.id,
            scheduled_date=data.scheduled_date,
            notes=data.notes,
            status=BookingStatus.SCHEDULED
        )
        self.db.add(db_booking)
        transition(quote.request, RequestStatus.IN_PROGRESS, "request")

        commit_or_conflict(self.db, ALREADY_BOOKED)
        self.db.refresh(db_booking)

        logger.info(f"Created booking {db_booking.id} for quote {quote.id}, request {quote.request_id} -> in_progress")
        return db_booking

    def update_booking(self, booking_id: int, update: BookingUpdate, user: UserModel) -> Booking:
        db_booking = self.get_booking_or_404(booking_id)
        authorize(user, db_booking, "update")

        update_data = update.model_dump(exclude_unset=True, exclude_none=True)
        new_status = update_data.pop("status", None)

        if not update_data and new_status is None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No updates provided")

        if update_data:
            if db_booking.status in (BookingStatus.COMPLETED, BookingStatus.CANCELLED):
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="Cannot modify a completed or cancelled booking"
                )
            for field, value in update_data.items():
                setattr(db_booking, field, value)

        if new_status is not None and new_status != db_booking.status:
            self.apply_status(db_booking, new_status, user)

        self.db.commit()
        self.db.refresh(db_booking)
        logger.info(f"Updated booking {booking_id}")
        return db_booking

    def change_status(self, booking_id: int, new_status: BookingStatus, user: UserModel) -> Booking:
        db_booking = self.get_booking_or_404(booking_id)
        authorize(user, db_booking, "update")

        self.apply_status(db_booking, new_status, user)

        self.db.commit()
        self.db.refresh(db_booking)
        return db_booking

    def apply_status(self, booking: Booking, new_status: BookingStatus, user: UserModel) -> None:
        """Move the booking and carry the change over to its service request.

        Completion closes the request; cancellation reopens it for other quotes.
        """
        action = STATUS_ACTIONS.get(new_status)
        if action:
            authorize(user, booking, action)
        transition(booking, new_status, "booking")

        request = booking.request
        if new_status == BookingStatus.COMPLETED:
            booking.completed_at = datetime.utcnow()
            transition(request, RequestStatus.COMPLETED, "request")
        elif new_status == BookingStatus.CANCELLED:
            transition(request, RequestStatus.OPEN, "request")

        logger.info(f"Booking {booking.id} -> {new_status.value}, request {request.id} -> {request.status.value}")

    def delete_booking(self, booking_id: int, client: UserModel) -> dict:
        db_booking = self.get_booking_or_404(booking_id)
        authorize(client, db_booking, "delete")

        if db_booking.status != BookingStatus.SCHEDULED:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Can only delete scheduled bookings")
        if db_booking.review is not None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cannot delete booking with associated reviews"
            )

        request = db_booking.request
        self.db.delete(db_booking)
        transition(request, RequestStatus.OPEN, "request")
        self.db.commit()

        logger.info(f"Deleted booking {booking_id}, request {request.id} reopened")
        return {"message": "Booking deleted successfully"}

    def booking_to_response(self, booking: Booking) -> Dict:
        """Convert Booking model to response dictionary"""
        quote = booking.quote
        request = quote.request
        vehicle = request.vehicle
        mechanic = quote.mechanic
        return {
            "id": booking.id,
            "quote_id": booking.quote_id,
            "request_id": request.id,
            "scheduled_date": booking.scheduled_date,
            "notes": booking.notes,
            "status": booking.status,
            "completed_at": booking.completed_at,
            "cost": quote.cost,
            "time_required": quote.time_required,
            "parts_needed": quote.parts_needed,
            "service_type": request.service_type,
            "description": request.description,
            "location": request.location,
            "urgency": request.urgency,
            "request_status": request.status,
            "make": vehicle.make,
            "model": vehicle.model,
            "year": vehicle.year,
            "license_plate": vehicle.license_plate,
            "mechanic_id": mechanic.id,
            "mechanic_name": mechanic.user.name,
            "mechanic_phone": mechanic.user.phone,
            "client_id": request.user_id,
            "client_name": request.owner.name,
            "client_phone": request.owner.phone,
            "has_review": booking.review is not None,
            "created_at": booking.created_at,
            "updated_at": booking.updated_at,
        }


# Dependency injection
def get_booking_service(db: Session = Depends(get_db)) -> BookingService:
    return BookingService(db)
