from core.database import Base
from core.lifecycle import QuoteStatus, enum_values
from sqlalchemy import (
    Column, Integer, String, Float, DateTime, Text, ForeignKey, UniqueConstraint, Enum as SQLEnum
)
from sqlalchemy.orm import relationship
from datetime import datetime


class Quote(Base):
    __tablename__ = "quotes"
    # One quote per mechanic per request
    __table_args__ = (
        UniqueConstraint("request_id", "mechanic_id", name="uq_quotes_request_mechanic"),
    )

    id = Column(Integer, primary_key=True, index=True)
    request_id = Column(Integer, ForeignKey("service_requests.id", ondelete="CASCADE"), index=True, nullable=False)
    mechanic_id = Column(Integer, ForeignKey("mechanics.id", ondelete="CASCADE"), index=True, nullable=False)

    cost = Column(Float, nullable=False)
    time_required = Column(String(100), nullable=True)
    parts_needed = Column(Text, nullable=True)
    availability = Column(String(255), nullable=True)

    status = Column(
        SQLEnum(QuoteStatus, values_callable=enum_values),
        default=QuoteStatus.PENDING,
        nullable=False
    )

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    request = relationship("ServiceRequest", back_populates="quotes")
    mechanic = relationship("Mechanic", back_populates="quotes")
    booking = relationship(
        "Booking", back_populates="quote", uselist=False, cascade="all, delete", passive_deletes=True
    )
