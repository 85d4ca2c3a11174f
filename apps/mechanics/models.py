from core.database import Base
from sqlalchemy import Column, Integer, String, Float, DateTime, Text, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime


class Mechanic(Base):
    __tablename__ = "mechanics"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, index=True, nullable=False)

    certification = Column(String(255), nullable=True)
    specialization = Column(String(255), nullable=True)
    service_area = Column(String(255), nullable=True)
    rate = Column(Float, nullable=True)  # hourly rate
    verified = Column(Boolean, default=False)
    availability = Column(Text, nullable=True)

    # Average of all review ratings, recomputed whenever a review changes
    rating = Column(Float, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("UserModel", back_populates="mechanic_profile")
    quotes = relationship("Quote", back_populates="mechanic", cascade="all, delete", passive_deletes=True)
