from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session
from apps.auth.schemas import UserBase, UserCreate, UserLogin, UserUpdate, PasswordChange, Token, AuthResponse
from apps.auth.models import UserModel
from apps.auth.services import (
    get_db, create_user, authenticate_user, token_for, get_current_user,
    update_profile, change_password, delete_user
)

router = APIRouter()


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(user: UserCreate, db: Session = Depends(get_db)):
    db_user = create_user(db, user)
    return {
        "message": "User registered successfully",
        "access_token": token_for(db_user),
        "token_type": "bearer",
        "user": db_user,
    }

@router.post("/login", response_model=AuthResponse)
def login(credentials: UserLogin, db: Session = Depends(get_db)):
    user = authenticate_user(db, email=credentials.email, password=credentials.password)
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    return {
        "message": "Login successful",
        "access_token": token_for(user),
        "token_type": "bearer",
        "user": user,
    }

# OAuth2 form flow used by the interactive API docs
@router.post("/token", response_model=Token)
def login_for_access_token(form_data: OAuth2PasswordRequestForm = Depends(), db: Session = Depends(get_db)):
    user = authenticate_user(db, email=form_data.username, password=form_data.password)
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Incorrect email or password")
    return {"access_token": token_for(user), "token_type": "bearer"}

@router.get("/profile", response_model=UserBase)
def read_profile(current_user: UserModel = Depends(get_current_user)):
    """
    Returns the current authenticated user's details.
    """
    return current_user

@router.put("/profile", response_model=UserBase)
def update_my_profile(
    user_update: UserUpdate,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_user)
):
    return update_profile(db, current_user, user_update)

@router.delete("/profile", summary="Delete own account")
def delete_my_account(db: Session = Depends(get_db), current_user: UserModel = Depends(get_current_user)):
    """
    Removes the account together with its vehicles, requests, quotes,
    bookings and reviews.
    """
    return delete_user(db, current_user)

@router.put("/change-password")
def change_my_password(
    data: PasswordChange,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_user)
):
    return change_password(db, current_user, data)
