"""
Workout session logging endpoints.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from datetime import datetime, timezone
from typing import List

from core.auth import ensure_owner_or_admin, require_auth
from core.database import get_db
from core.exceptions import NotFoundError
from core.security import TokenClaims
from schemas import WorkoutCreate, WorkoutResponse
from services import storage

router = APIRouter(prefix="/api/workouts", tags=["workouts"])

RECENT_WORKOUTS_LIMIT = 10


@router.get("/recent", response_model=List[WorkoutResponse])
def recent_workouts(
    current_user: TokenClaims = Depends(require_auth),
    db: Session = Depends(get_db),
):
    return storage.get_recent_workouts(db, current_user.id, RECENT_WORKOUTS_LIMIT)


@router.get("", response_model=List[WorkoutResponse])
def list_workouts(
    current_user: TokenClaims = Depends(require_auth),
    db: Session = Depends(get_db),
):
    return storage.get_workouts_by_user_id(db, current_user.id)


@router.post("", response_model=WorkoutResponse, status_code=status.HTTP_201_CREATED)
def create_workout(
    data: WorkoutCreate,
    current_user: TokenClaims = Depends(require_auth),
    db: Session = Depends(get_db),
):
    """Log a session dated now. `completed` defaults to true."""
    if data.plan_id is not None:
        plan = storage.get_plan_by_id(db, data.plan_id)
        if not plan:
            raise NotFoundError("Plan not found")
        ensure_owner_or_admin(plan.user_id, current_user)

    return storage.create_workout(db, {
        "user_id": current_user.id,
        "plan_id": data.plan_id,
        "date": datetime.now(timezone.utc),
        "duration": data.duration,
        "exercises": data.exercises,
        "calories_burned": data.calories_burned,
        "notes": data.notes,
        "completed": data.completed,
    })
