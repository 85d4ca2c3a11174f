from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime


class ReviewCreate(BaseModel):
    booking_id: int
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = None

class ReviewUpdate(BaseModel):
    rating: Optional[int] = Field(None, ge=1, le=5)
    comment: Optional[str] = None

class ReviewResponse(BaseModel):
    id: int
    booking_id: int
    reviewer_id: int
    rating: int
    comment: Optional[str]

    mechanic_id: int
    mechanic_name: str
    client_name: str
    service_type: str
    description: Optional[str]
    make: str
    model: str
    year: int
    scheduled_date: str
    completed_at: Optional[datetime]

    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

class ReviewStats(BaseModel):
    total_reviews: int
    average_rating: Optional[float]
    five_star: int
    four_star: int
    three_star: int
    two_star: int
    one_star: int

class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int

class MechanicReviewsResponse(BaseModel):
    stats: ReviewStats
    reviews: List[ReviewResponse]
    pagination: Pagination

class ReviewListResponse(BaseModel):
    reviews: List[ReviewResponse]
    pagination: Pagination
