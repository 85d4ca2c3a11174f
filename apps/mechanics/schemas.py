from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime


class MechanicUpdate(BaseModel):
    certification: Optional[str] = Field(None, max_length=255)
    specialization: Optional[str] = Field(None, max_length=255)
    service_area: Optional[str] = Field(None, max_length=255)
    rate: Optional[float] = Field(None, ge=0)


class AvailabilityUpdate(BaseModel):
    availability: str = Field(..., min_length=1)


class MechanicResponse(BaseModel):
    id: int
    user_id: int
    name: str
    email: str
    phone: Optional[str]
    certification: Optional[str]
    specialization: Optional[str]
    service_area: Optional[str]
    rate: Optional[float]
    verified: bool
    availability: Optional[str]
    rating: Optional[float]
    created_at: datetime

    class Config:
        from_attributes = True


class MechanicListResponse(BaseModel):
    items: List[MechanicResponse]
    total: int
