from sqlalchemy.orm import Session
from apps.auth.models import UserModel
from apps.auth.schemas import UserCreate, UserUpdate, PasswordChange
from apps.mechanics.models import Mechanic
from apps.quotes.models import Quote
from apps.bookings.models import Booking
from apps.reviews.models import Review
from apps.reviews.services import ReviewService
from core.config import settings
from core.database import get_db, commit_or_conflict
from core.lifecycle import BookingStatus, RequestStatus, UserRole, transition
from fastapi import Depends, HTTPException, status
from passlib.context import CryptContext
from jose import JWTError, jwt
from fastapi.security import OAuth2PasswordBearer
from datetime import datetime, timedelta
import logging

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/token")


def get_password_hash(password):
    return pwd_context.hash(password)

def verify_password(plain_password, hashed_password):
    return pwd_context.verify(plain_password, hashed_password)

def get_user_by_email(db: Session, email: str):
    return db.query(UserModel).filter(UserModel.email == email).first()

def create_user(db: Session, user: UserCreate):
    if get_user_by_email(db, user.email):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email already registered")
    db_user = UserModel(
        name=user.name,
        email=user.email,
        hashed_password=get_password_hash(user.password),
        role=user.role,
        phone=user.phone,
    )
    db.add(db_user)
    # Every mechanic account owns exactly one profile; quotes hang off it
    if user.role == UserRole.MECHANIC:
        db_user.mechanic_profile = Mechanic()
    commit_or_conflict(db, "Email already registered")
    db.refresh(db_user)
    logger.info(f"Registered {db_user.role.value} account {db_user.email}")
    return db_user

def authenticate_user(db: Session, email: str, password: str):
    user = get_user_by_email(db, email)
    if user and verify_password(password, user.hashed_password):
        return user
    return None

def create_access_token(data: dict, expires_delta: timedelta = None):
    to_encode = data.copy()
    expire = datetime.utcnow() + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
    return encoded_jwt

def token_for(user: UserModel) -> str:
    return create_access_token(data={"sub": user.email, "role": user.role.value})

def get_current_user(token: str = Depends(oauth2_scheme), db: Session = Depends(get_db)):
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid or expired token",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        email: str = payload.get("sub")
        if email is None:
            raise credentials_exception
    except JWTError:
        raise credentials_exception
    user = get_user_by_email(db, email)
    if user is None:
        raise credentials_exception
    return user


def get_current_client(current_user: UserModel = Depends(get_current_user)):
    if current_user.role != UserRole.CLIENT:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Client privileges required")
    return current_user

def get_current_mechanic(current_user: UserModel = Depends(get_current_user)):
    if current_user.role != UserRole.MECHANIC:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Mechanic privileges required")
    return current_user

# Profile Management Functions
def update_profile(db: Session, user: UserModel, user_update: UserUpdate):
    update_data = user_update.model_dump(exclude_unset=True, exclude_none=True)
    if not update_data:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No updates provided")

    for field, value in update_data.items():
        setattr(user, field, value)

    db.commit()
    db.refresh(user)
    logger.info(f"Updated profile of {user.email}")
    return user

def change_password(db: Session, user: UserModel, data: PasswordChange):
    if not verify_password(data.current_password, user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Current password is incorrect"
        )
    user.hashed_password = get_password_hash(data.new_password)
    db.commit()
    logger.info(f"Password changed for {user.email}")
    return {"message": "Password updated successfully"}

def _reopen_active_bookings(db: Session, mechanic: Mechanic):
    """Requests booked with a departing mechanic go back to open"""
    active = (
        db.query(Booking)
        .join(Quote, Booking.quote_id == Quote.id)
        .filter(
            Quote.mechanic_id == mechanic.id,
            Booking.status.in_([BookingStatus.SCHEDULED, BookingStatus.IN_PROGRESS])
        )
        .all()
    )
    for booking in active:
        transition(booking.request, RequestStatus.OPEN, "request")
        logger.info(f"Booking {booking.id} dropped with its mechanic, request {booking.request.id} reopened")

def _reviewed_mechanic_ids(db: Session, user: UserModel):
    rows = (
        db.query(Quote.mechanic_id)
        .join(Booking, Booking.quote_id == Quote.id)
        .join(Review, Review.booking_id == Booking.id)
        .filter(Review.reviewer_id == user.id)
        .distinct()
        .all()
    )
    return [row[0] for row in rows]

def delete_user(db: Session, user: UserModel):
    """Remove the account; the database cascades its vehicles, requests,
    quotes, bookings and reviews. Ratings touched by those reviews are
    recomputed in the same transaction.
    """
    email = user.email
    if user.role == UserRole.MECHANIC and user.mechanic_profile is not None:
        _reopen_active_bookings(db, user.mechanic_profile)
    mechanic_ids = _reviewed_mechanic_ids(db, user)

    db.delete(user)
    db.flush()
    reviews = ReviewService(db)
    for mechanic_id in mechanic_ids:
        reviews.recompute_mechanic_rating(mechanic_id)
    db.commit()
    logger.info(f"Deleted account {email}")
    return {"message": "Account deleted successfully"}
