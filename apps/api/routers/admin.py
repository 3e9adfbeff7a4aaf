"""
Admin API Router

Site-wide counts and the user directory. ADMIN role only.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List
import logging

from core.auth import require_admin
from core.database import get_db
from core.security import TokenClaims
from schemas import AdminStats, UserResponse
from services import storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["admin"])


@router.get("/stats", response_model=AdminStats)
def admin_stats(
    admin: TokenClaims = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return storage.get_admin_stats(db)


@router.get("/users", response_model=List[UserResponse])
def admin_users(
    admin: TokenClaims = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """All users, newest first, with password hashes stripped."""
    return storage.get_all_users(db)
