from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime

from core.lifecycle import RequestStatus


class ServiceRequestBase(BaseModel):
    service_type: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1)
    location: str = Field(..., min_length=1, max_length=255)
    urgency: str = Field(..., min_length=1, max_length=50)
    preferred_date: str = Field(..., min_length=1, max_length=50)
    photo: Optional[str] = None

class ServiceRequestCreate(ServiceRequestBase):
    vehicle_id: int

class ServiceRequestUpdate(BaseModel):
    service_type: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, min_length=1)
    location: Optional[str] = Field(None, min_length=1, max_length=255)
    urgency: Optional[str] = Field(None, min_length=1, max_length=50)
    preferred_date: Optional[str] = Field(None, min_length=1, max_length=50)
    photo: Optional[str] = None
    status: Optional[RequestStatus] = None

class ServiceRequestStatusUpdate(BaseModel):
    status: RequestStatus

class ServiceRequestResponse(ServiceRequestBase):
    id: int
    user_id: int
    vehicle_id: int
    status: RequestStatus
    make: str
    model: str
    year: int
    license_plate: Optional[str]
    quote_count: int
    has_quoted: Optional[bool] = None
    client_name: Optional[str] = None
    client_phone: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

class ServiceRequestListResponse(BaseModel):
    items: List[ServiceRequestResponse]
    total: int
