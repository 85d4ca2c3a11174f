from core.database import Base
from core.lifecycle import RequestStatus, enum_values
from sqlalchemy import Column, Integer, String, DateTime, Text, ForeignKey, Enum as SQLEnum
from sqlalchemy.orm import relationship
from datetime import datetime


class ServiceRequest(Base):
    __tablename__ = "service_requests"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id", ondelete="CASCADE"), index=True, nullable=False)

    service_type = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    location = Column(String(255), nullable=True)
    urgency = Column(String(50), nullable=True)
    preferred_date = Column(String(50), nullable=True)
    photo = Column(String(500), nullable=True)  # opaque reference, uploads live elsewhere

    status = Column(
        SQLEnum(RequestStatus, values_callable=enum_values),
        default=RequestStatus.OPEN,
        nullable=False
    )

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    owner = relationship("UserModel", back_populates="service_requests")
    vehicle = relationship("Vehicle", back_populates="service_requests")
    quotes = relationship("Quote", back_populates="request", cascade="all, delete", passive_deletes=True)
