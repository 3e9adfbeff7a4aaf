"""
Authentication API endpoints.

Provides:
- User registration (always role USER)
- Login (JWT token generation, 7-day expiry)
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from datetime import datetime, timezone
import logging

from core.database import get_db
from core.exceptions import BadRequestError, UnauthorizedError
from core.security import create_access_token, hash_password, verify_password
from schemas import AuthResponse, LoginRequest, SignupRequest, UserResponse
from services import storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def signup(data: SignupRequest, db: Session = Depends(get_db)):
    """
    Register a new user account.

    Issues a token immediately so the client can continue to onboarding
    without a second login call.
    """
    if storage.get_user_by_email(db, data.email):
        raise BadRequestError("Email already in use")

    user = storage.create_user(db, {
        "email": data.email,
        "password": hash_password(data.password),
        "name": data.name,
        "role": "USER",
    })
    logger.info(f"User registered: {user.id}")

    return {"user": UserResponse.model_validate(user), "token": create_access_token(user)}


@router.post("/login", response_model=AuthResponse)
def login(credentials: LoginRequest, db: Session = Depends(get_db)):
    """Authenticate with email and password and return a JWT token."""
    user = storage.get_user_by_email(db, credentials.email)
    if not user or not verify_password(credentials.password, user.password):
        raise UnauthorizedError("Invalid email or password")

    # Separate write from token issuance; not atomic with it
    user = storage.update_user(db, user.id, {"last_login": datetime.now(timezone.utc)}) or user

    return {"user": UserResponse.model_validate(user), "token": create_access_token(user)}
