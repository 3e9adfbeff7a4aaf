"""
Current-user profile and stats endpoints.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from core.auth import require_auth
from core.database import get_db
from core.exceptions import NotFoundError
from core.security import TokenClaims
from schemas import UpdateProfileRequest, UserResponse, UserStats
from services import storage

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("/me", response_model=UserResponse)
def get_me(
    current_user: TokenClaims = Depends(require_auth),
    db: Session = Depends(get_db),
):
    user = storage.get_user_by_id(db, current_user.id)
    if not user:
        raise NotFoundError("User not found")
    return user


@router.put("/me", response_model=UserResponse)
def update_me(
    data: UpdateProfileRequest,
    current_user: TokenClaims = Depends(require_auth),
    db: Session = Depends(get_db),
):
    """Update profile fields. Fields omitted from the body are left unchanged."""
    user = storage.update_user(db, current_user.id, data.model_dump(exclude_unset=True))
    if not user:
        raise NotFoundError("User not found")
    return user


@router.get("/stats", response_model=UserStats)
def get_stats(
    current_user: TokenClaims = Depends(require_auth),
    db: Session = Depends(get_db),
):
    return storage.get_user_stats(db, current_user.id)
