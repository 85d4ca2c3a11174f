from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime

from core.lifecycle import QuoteStatus, RequestStatus


class QuoteBase(BaseModel):
    cost: float = Field(..., gt=0)
    time_required: str = Field(..., min_length=1, max_length=100)
    parts_needed: Optional[str] = None
    availability: str = Field(..., min_length=1, max_length=255)

class QuoteCreate(QuoteBase):
    request_id: int

class QuoteUpdate(BaseModel):
    cost: Optional[float] = Field(None, gt=0)
    time_required: Optional[str] = Field(None, min_length=1, max_length=100)
    parts_needed: Optional[str] = None
    availability: Optional[str] = Field(None, min_length=1, max_length=255)
    status: Optional[QuoteStatus] = None

class QuoteResponse(QuoteBase):
    id: int
    request_id: int
    mechanic_id: int
    status: QuoteStatus

    # Parent request and vehicle
    service_type: str
    description: Optional[str]
    location: Optional[str]
    urgency: Optional[str]
    request_status: RequestStatus
    make: str
    model: str
    year: int
    license_plate: Optional[str]

    # Counterparty details
    mechanic_name: str
    mechanic_phone: Optional[str]
    certification: Optional[str]
    specialization: Optional[str]
    service_area: Optional[str]
    rate: Optional[float]
    mechanic_rating: Optional[float]
    client_name: str
    client_phone: Optional[str]

    has_booking: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

class QuoteListResponse(BaseModel):
    items: List[QuoteResponse]
    total: int
