from sqlalchemy.orm import Session
from sqlalchemy import func, case
from typing import Dict, Optional
from fastapi import HTTPException, status, Depends
import math
import logging

from apps.reviews.models import Review
from apps.reviews.schemas import ReviewCreate, ReviewUpdate
from apps.bookings.models import Booking
from apps.quotes.models import Quote
from apps.requests.models import ServiceRequest
from apps.mechanics.models import Mechanic
from apps.auth.models import UserModel
from apps.auth.permissions import authorize
from core.database import get_db, conflict_guard
from core.lifecycle import BookingStatus

logger = logging.getLogger(__name__)

ALREADY_REVIEWED = "This booking already has a review"


class ReviewService:
    def __init__(self, db: Session):
        self.db = db

    def get_review(self, review_id: int) -> Optional[Review]:
        return self.db.query(Review).filter(Review.id == review_id).first()

    def get_review_or_404(self, review_id: int) -> Review:
        review = self.get_review(review_id)
        if not review:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Review not found")
        return review

    def _mechanic_reviews(self, mechanic_id: int):
        """Reviews reach a mechanic through booking -> quote"""
        return (
            self.db.query(Review)
            .join(Booking, Review.booking_id == Booking.id)
            .join(Quote, Booking.quote_id == Quote.id)
            .filter(Quote.mechanic_id == mechanic_id)
        )

    def recompute_mechanic_rating(self, mechanic_id: int) -> Optional[float]:
        """Store the mean of all of the mechanic's ratings on the profile.

        Pending review changes must be flushed before calling this.
        """
        average = self._mechanic_reviews(mechanic_id).with_entities(func.avg(Review.rating)).scalar()
        mechanic = self.db.query(Mechanic).filter(Mechanic.id == mechanic_id).first()
        mechanic.rating = float(average) if average is not None else None
        logger.info(f"Mechanic {mechanic_id} rating is now {mechanic.rating}")
        return mechanic.rating

    def create_review(self, data: ReviewCreate, client: UserModel) -> Review:
        booking = self.db.query(Booking).filter(Booking.id == data.booking_id).first()
        if not booking:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Booking not found")
        authorize(client, booking, "review")

        if booking.status != BookingStatus.COMPLETED:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Can only review completed bookings")
        if booking.review is not None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=ALREADY_REVIEWED)

        db_review = Review(
            booking_id=booking.id,
            reviewer_id=client.id,
            rating=data.rating,
            comment=data.comment
        )
        mechanic_id = booking.quote.mechanic_id
        with conflict_guard(self.db, ALREADY_REVIEWED):
            self.db.add(db_review)
            self.db.flush()
            self.recompute_mechanic_rating(mechanic_id)
            self.db.commit()
        self.db.refresh(db_review)

        logger.info(f"Review {db_review.id} ({data.rating}/5) submitted for booking {booking.id}")
        return db_review

    def update_review(self, review_id: int, update: ReviewUpdate, client: UserModel) -> Review:
        db_review = self.get_review_or_404(review_id)
        authorize(client, db_review, "update")

        update_data = update.model_dump(exclude_unset=True, exclude_none=True)
        if not update_data:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No updates provided")

        for field, value in update_data.items():
            setattr(db_review, field, value)

        self.db.flush()
        self.recompute_mechanic_rating(db_review.booking.quote.mechanic_id)
        self.db.commit()
        self.db.refresh(db_review)
        logger.info(f"Updated review {review_id}")
        return db_review

    def delete_review(self, review_id: int, client: UserModel) -> dict:
        db_review = self.get_review_or_404(review_id)
        authorize(client, db_review, "delete")

        mechanic_id = db_review.booking.quote.mechanic_id
        self.db.delete(db_review)
        self.db.flush()
        self.recompute_mechanic_rating(mechanic_id)
        self.db.commit()

        logger.info(f"Deleted review {review_id}")
        return {"message": "Review deleted successfully"}

    def get_mechanic_stats(self, mechanic_id: int) -> Dict:
        def stars(n):
            return func.coalesce(func.sum(case((Review.rating == n, 1), else_=0)), 0)

        row = self._mechanic_reviews(mechanic_id).with_entities(
            func.count(Review.id),
            func.avg(Review.rating),
            stars(5), stars(4), stars(3), stars(2), stars(1),
        ).one()
        return {
            "total_reviews": row[0],
            "average_rating": float(row[1]) if row[1] is not None else None,
            "five_star": row[2],
            "four_star": row[3],
            "three_star": row[4],
            "two_star": row[5],
            "one_star": row[6],
        }

    def get_mechanic_reviews(self, mechanic_id: int, page: int = 1, limit: int = 10, sort: str = "newest") -> Dict:
        mechanic = self.db.query(Mechanic).filter(Mechanic.id == mechanic_id).first()
        if not mechanic:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Mechanic not found")

        stats = self.get_mechanic_stats(mechanic_id)
        query = self._mechanic_reviews(mechanic_id)
        if sort == "oldest":
            query = query.order_by(Review.created_at.asc(), Review.id.asc())
        else:
            query = query.order_by(Review.created_at.desc(), Review.id.desc())

        reviews = query.offset((page - 1) * limit).limit(limit).all()
        return {
            "stats": stats,
            "reviews": [self.review_to_response(r) for r in reviews],
            "pagination": self._pagination(page, limit, stats["total_reviews"]),
        }

    def get_my_reviews(self, client: UserModel, page: int = 1, limit: int = 10) -> Dict:
        query = (
            self.db.query(Review)
            .join(Booking, Review.booking_id == Booking.id)
            .join(Quote, Booking.quote_id == Quote.id)
            .join(ServiceRequest, Quote.request_id == ServiceRequest.id)
            .filter(ServiceRequest.user_id == client.id)
        )
        total = query.count()
        reviews = (
            query.order_by(Review.created_at.desc(), Review.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return {
            "reviews": [self.review_to_response(r) for r in reviews],
            "pagination": self._pagination(page, limit, total),
        }

    def _pagination(self, page: int, limit: int, total: int) -> Dict:
        return {"page": page, "limit": limit, "total": total, "pages": math.ceil(total / limit)}

    def review_to_response(self, review: Review) -> Dict:
        """Convert Review model to response dictionary"""
        booking = review.booking
        quote = booking.quote
        request = quote.request
        vehicle = request.vehicle
        return {
            "id": review.id,
            "booking_id": review.booking_id,
            "reviewer_id": review.reviewer_id,
            "rating": review.rating,
            "comment": review.comment,
            "mechanic_id": quote.mechanic_id,
            "mechanic_name": quote.mechanic.user.name,
            "client_name": request.owner.name,
            "service_type": request.service_type,
            "description": request.description,
            "make": vehicle.make,
            "model": vehicle.model,
            "year": vehicle.year,
            "scheduled_date": booking.scheduled_date,
            "completed_at": booking.completed_at,
            "created_at": review.created_at,
            "updated_at": review.updated_at,
        }


# Dependency injection
def get_review_service(db: Session = Depends(get_db)) -> ReviewService:
    return ReviewService(db)
