"""Registration and login endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database import get_db
from schemas import UserAuthRequest, UserLoginResponse, UserRegisterResponse
from services.user_service import UserService

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/signup", response_model=UserRegisterResponse, status_code=201)
def signup(data: UserAuthRequest, db: Session = Depends(get_db)):
    """Register a new user."""
    user = UserService.register(db, data.email, data.password)
    return UserRegisterResponse(id=user.id, email=user.email)


@router.post("/login", response_model=UserLoginResponse)
def login(data: UserAuthRequest, db: Session = Depends(get_db)):
    """Exchange credentials for a bearer token."""
    user = UserService.authenticate(db, data.email, data.password)
    return UserLoginResponse(token=UserService.create_access_token(user))
