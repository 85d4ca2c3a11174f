from core.database import Base
from core.lifecycle import UserRole, enum_values
from sqlalchemy import Column, Integer, String, DateTime, Enum as SQLEnum
from sqlalchemy.orm import relationship
from datetime import datetime


class UserModel(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    role = Column(SQLEnum(UserRole, values_callable=enum_values), nullable=False)
    phone = Column(String(20), nullable=True)
    avatar = Column(String(500), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Unloaded children are removed by the database (ON DELETE CASCADE)
    mechanic_profile = relationship(
        "Mechanic", back_populates="user", uselist=False,
        cascade="all, delete", passive_deletes=True
    )
    vehicles = relationship(
        "Vehicle", back_populates="owner", cascade="all, delete", passive_deletes=True
    )
    service_requests = relationship(
        "ServiceRequest", back_populates="owner", cascade="all, delete", passive_deletes=True
    )
