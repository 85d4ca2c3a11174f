from core.database import Base
from core.lifecycle import BookingStatus, enum_values
from sqlalchemy import Column, Integer, String, DateTime, Text, ForeignKey, Enum as SQLEnum
from sqlalchemy.orm import relationship
from datetime import datetime


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    # One booking per quote
    quote_id = Column(Integer, ForeignKey("quotes.id", ondelete="CASCADE"), unique=True, index=True, nullable=False)

    scheduled_date = Column(String(50), nullable=False)
    notes = Column(Text, nullable=True)

    status = Column(
        SQLEnum(BookingStatus, values_callable=enum_values),
        default=BookingStatus.SCHEDULED,
        nullable=False
    )
    completed_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    quote = relationship("Quote", back_populates="booking")
    review = relationship(
        "Review", back_populates="booking", uselist=False, cascade="all, delete", passive_deletes=True
    )

    # Client and mechanic are always resolved through the quote
    @property
    def request(self):
        return self.quote.request

    @property
    def client_id(self) -> int:
        return self.quote.request.user_id

    @property
    def mechanic_user_id(self) -> int:
        return self.quote.mechanic.user_id
