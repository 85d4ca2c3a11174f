from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime

from core.lifecycle import BookingStatus, RequestStatus


class BookingCreate(BaseModel):
    quote_id: int
    scheduled_date: str = Field(..., min_length=1, max_length=50)
    notes: Optional[str] = None

class BookingUpdate(BaseModel):
    scheduled_date: Optional[str] = Field(None, min_length=1, max_length=50)
    notes: Optional[str] = None
    status: Optional[BookingStatus] = None

class BookingStatusUpdate(BaseModel):
    status: BookingStatus

class BookingResponse(BaseModel):
    id: int
    quote_id: int
    request_id: int
    scheduled_date: str
    notes: Optional[str]
    status: BookingStatus
    completed_at: Optional[datetime]

    cost: float
    time_required: Optional[str]
    parts_needed: Optional[str]

    service_type: str
    description: Optional[str]
    location: Optional[str]
    urgency: Optional[str]
    request_status: RequestStatus
    make: str
    model: str
    year: int
    license_plate: Optional[str]

    mechanic_id: int
    mechanic_name: str
    mechanic_phone: Optional[str]
    client_id: int
    client_name: str
    client_phone: Optional[str]

    has_review: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

class BookingListResponse(BaseModel):
    items: List[BookingResponse]
    total: int
