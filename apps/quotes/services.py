from sqlalchemy.orm import Session
from typing import Dict, List, Optional, Tuple
from fastapi import HTTPException, status, Depends
import logging

from apps.quotes.models import Quote
from apps.quotes.schemas import QuoteCreate, QuoteUpdate
from apps.requests.models import ServiceRequest
from apps.auth.models import UserModel
from apps.auth.permissions import authorize, is_client, mechanic_id_of
from core.database import get_db, commit_or_conflict
from core.lifecycle import QuoteStatus, RequestStatus, transition

logger = logging.getLogger(__name__)

ALREADY_QUOTED = "You have already quoted this request"


class QuoteService:
    def __init__(self, db: Session):
        self.db = db

    def get_quote(self, quote_id: int) -> Optional[Quote]:
        return self.db.query(Quote).filter(Quote.id == quote_id).first()

    def get_quote_or_404(self, quote_id: int) -> Quote:
        quote = self.get_quote(quote_id)
        if not quote:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Quote not found")
        return quote

    def get_quotes(
        self,
        user: UserModel,
        request_id: Optional[int] = None,
        skip: int = 0,
        limit: int = 100
    ) -> Tuple[List[Dict], int]:
        """Clients see quotes on their requests, mechanics see the quotes they wrote"""
        query = self.db.query(Quote)

        if is_client(user):
            query = query.join(ServiceRequest, Quote.request_id == ServiceRequest.id).filter(
                ServiceRequest.user_id == user.id
            )
        else:
            query = query.filter(Quote.mechanic_id == mechanic_id_of(user))

        if request_id is not None:
            query = query.filter(Quote.request_id == request_id)

        query = query.order_by(Quote.created_at.desc(), Quote.id.desc())
        total = query.count()
        quotes = [self.quote_to_response(q) for q in query.offset(skip).limit(limit).all()]
        return quotes, total

    def get_quotes_for_request(self, request_id: int, user: UserModel) -> Tuple[List[Dict], int]:
        request = self.db.query(ServiceRequest).filter(ServiceRequest.id == request_id).first()
        if not request:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Service request not found")
        authorize(user, request, "view")
        return self.get_quotes(user, request_id=request_id)

    def create_quote(self, data: QuoteCreate, user: UserModel) -> Quote:
        mechanic_id = mechanic_id_of(user)
        if mechanic_id is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Mechanic profile not found")

        request = self.db.query(ServiceRequest).filter(ServiceRequest.id == data.request_id).first()
        if not request:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Service request not found")
        authorize(user, request, "quote")

        if request.status != RequestStatus.OPEN:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Service request is not open for quotes"
            )

        existing = self.db.query(Quote).filter(
            Quote.request_id == data.request_id,
            Quote.mechanic_id == mechanic_id
        ).first()
        if existing:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=ALREADY_QUOTED)

        db_quote = Quote(**data.model_dump(), mechanic_id=mechanic_id, status=QuoteStatus.PENDING)
        self.db.add(db_quote)
        commit_or_conflict(self.db, ALREADY_QUOTED)
        self.db.refresh(db_quote)

        logger.info(f"Created quote {db_quote.id} for request {request.id} by mechanic {mechanic_id}")
        return db_quote

    def update_quote(self, quote_id: int, update: QuoteUpdate, user: UserModel) -> Quote:
        """Mechanics edit the offer, clients answer it; both only while pending"""
        db_quote = self.get_quote_or_404(quote_id)

        update_data = update.model_dump(exclude_unset=True, exclude_none=True)
        new_status = update_data.pop("status", None)

        if is_client(user):
            authorize(user, db_quote, "respond")
            if update_data:
                raise HTTPException(
                    status_code=status.HTTP_403_FORBIDDEN,
                    detail="Only the mechanic can edit quote details"
                )
            if new_status is None:
                raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No updates provided")
            return self.respond(quote_id, new_status, user)

        authorize(user, db_quote, "update")
        if new_status is not None and new_status != db_quote.status:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Mechanics cannot change quote status"
            )
        if db_quote.status != QuoteStatus.PENDING:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cannot update a quote that is not pending"
            )
        if not update_data:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No updates provided")

        for field, value in update_data.items():
            setattr(db_quote, field, value)

        self.db.commit()
        self.db.refresh(db_quote)
        logger.info(f"Updated quote {quote_id}")
        return db_quote

    def respond(self, quote_id: int, new_status: QuoteStatus, user: UserModel) -> Quote:
        """Accept or reject a pending quote; the decision is final"""
        db_quote = self.get_quote_or_404(quote_id)
        authorize(user, db_quote, "respond")

        transition(db_quote, new_status, "quote")

        self.db.commit()
        self.db.refresh(db_quote)
        logger.info(f"Quote {quote_id} {new_status.value} by {user.email}")
        return db_quote

    def delete_quote(self, quote_id: int, user: UserModel) -> dict:
        db_quote = self.get_quote_or_404(quote_id)
        authorize(user, db_quote, "delete")

        if db_quote.status != QuoteStatus.PENDING:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cannot delete a quote that is not pending"
            )
        if db_quote.booking is not None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cannot delete quote with associated bookings"
            )

        self.db.delete(db_quote)
        self.db.commit()
        logger.info(f"Deleted quote {quote_id}")
        return {"message": "Quote deleted successfully"}

    def quote_to_response(self, quote: Quote) -> Dict:
        """Convert Quote model to response dictionary"""
        request = quote.request
        vehicle = request.vehicle
        mechanic = quote.mechanic
        return {
            "id": quote.id,
            "request_id": quote.request_id,
            "mechanic_id": quote.mechanic_id,
            "cost": quote.cost,
            "time_required": quote.time_required,
            "parts_needed": quote.parts_needed,
            "availability": quote.availability,
            "status": quote.status,
            "service_type": request.service_type,
            "description": request.description,
            "location": request.location,
            "urgency": request.urgency,
            "request_status": request.status,
            "make": vehicle.make,
            "model": vehicle.model,
            "year": vehicle.year,
            "license_plate": vehicle.license_plate,
            "mechanic_name": mechanic.user.name,
            "mechanic_phone": mechanic.user.phone,
            "certification": mechanic.certification,
            "specialization": mechanic.specialization,
            "service_area": mechanic.service_area,
            "rate": mechanic.rate,
            "mechanic_rating": mechanic.rating,
            "client_name": request.owner.name,
            "client_phone": request.owner.phone,
            "has_booking": quote.booking is not None,
            "created_at": quote.created_at,
            "updated_at": quote.updated_at,
        }


# Dependency injection
def get_quote_service(db: Session = Depends(get_db)) -> QuoteService:
    return QuoteService(db)
