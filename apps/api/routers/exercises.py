"""
Exercise library endpoints.

Reading is public; writing requires the ADMIN role.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List, Optional
from uuid import UUID
import logging

from core.auth import optional_auth, require_admin
from core.database import get_db
from core.exceptions import NotFoundError
from core.security import TokenClaims
from schemas import ExerciseCreate, ExerciseResponse, ExerciseUpdate
from services import storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/exercises", tags=["exercises"])


@router.get("", response_model=List[ExerciseResponse])
def list_exercises(
    current_user: Optional[TokenClaims] = Depends(optional_auth),
    db: Session = Depends(get_db),
):
    """All exercises ordered by name."""
    logger.debug(f"Exercise library requested by {current_user.id if current_user else 'anonymous'}")
    return storage.get_exercises(db)


@router.get("/{exercise_id}", response_model=ExerciseResponse)
def get_exercise(exercise_id: UUID, db: Session = Depends(get_db)):
    exercise = storage.get_exercise_by_id(db, exercise_id)
    if not exercise:
        raise NotFoundError("Exercise not found")
    return exercise


@router.post("", response_model=ExerciseResponse, status_code=status.HTTP_201_CREATED)
def create_exercise(
    data: ExerciseCreate,
    admin: TokenClaims = Depends(require_admin),
    db: Session = Depends(get_db),
):
    exercise = storage.create_exercise(db, data.model_dump())
    logger.info(f"Exercise {exercise.id} created by admin {admin.id}")
    return exercise


@router.put("/{exercise_id}", response_model=ExerciseResponse)
def update_exercise(
    exercise_id: UUID,
    data: ExerciseUpdate,
    admin: TokenClaims = Depends(require_admin),
    db: Session = Depends(get_db),
):
    exercise = storage.update_exercise(db, exercise_id, data.model_dump(exclude_unset=True))
    if not exercise:
        raise NotFoundError("Exercise not found")
    return exercise


@router.delete("/{exercise_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_exercise(
    exercise_id: UUID,
    admin: TokenClaims = Depends(require_admin),
    db: Session = Depends(get_db),
):
    storage.delete_exercise(db, exercise_id)
    return None
