"""
Persistence adapter.

One function per entity per operation. Each write commits on its own, so
multi-step flows (e.g. "update last login, then issue a token") are
independent writes with no shared transaction.

Update functions take a partial dict of column values; keys that are not
columns of the model are ignored. Lookups and updates return None when the
row does not exist.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from models import AiJob, Exercise, Plan, Progress, Upload, User, WorkoutSession

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _insert(db: Session, obj):
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


def _apply(db: Session, obj, data: Dict[str, Any], touch: bool = True):
    columns = obj.__table__.columns.keys()
    for key, value in data.items():
        if key in columns and key != "id":
            setattr(obj, key, value)
    if touch and "updated_at" in columns:
        obj.updated_at = _utcnow()
    db.commit()
    db.refresh(obj)
    return obj


def _count(db: Session, column, *criteria) -> int:
    query = db.query(func.count(column))
    if criteria:
        query = query.filter(*criteria)
    return int(query.scalar() or 0)


def current_week_bounds(now: Optional[datetime] = None):
    """Monday 00:00 UTC of the current week, and the following Monday."""
    now = now or _utcnow()
    start = (now - timedelta(days=now.weekday())).replace(hour=0, minute=0, second=0, microsecond=0)
    return start, start + timedelta(days=7)


# Users

def get_user_by_id(db: Session, user_id: UUID) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email).first()


def create_user(db: Session, data: Dict[str, Any]) -> User:
    return _insert(db, User(**data))


def update_user(db: Session, user_id: UUID, data: Dict[str, Any]) -> Optional[User]:
    user = get_user_by_id(db, user_id)
    if user is None:
        return None
    return _apply(db, user, data)


def get_all_users(db: Session) -> List[User]:
    return db.query(User).order_by(User.created_at.desc()).all()


def delete_user(db: Session, user_id: UUID) -> None:
    """Delete a user. Owned rows go with it through ON DELETE CASCADE."""
    db.query(User).filter(User.id == user_id).delete(synchronize_session=False)
    db.commit()


# Exercises

def get_exercises(db: Session) -> List[Exercise]:
    return db.query(Exercise).order_by(Exercise.name).all()


def get_exercise_by_id(db: Session, exercise_id: UUID) -> Optional[Exercise]:
    return db.query(Exercise).filter(Exercise.id == exercise_id).first()


def create_exercise(db: Session, data: Dict[str, Any]) -> Exercise:
    return _insert(db, Exercise(**data))


def update_exercise(db: Session, exercise_id: UUID, data: Dict[str, Any]) -> Optional[Exercise]:
    exercise = get_exercise_by_id(db, exercise_id)
    if exercise is None:
        return None
    return _apply(db, exercise, data)


def delete_exercise(db: Session, exercise_id: UUID) -> None:
    db.query(Exercise).filter(Exercise.id == exercise_id).delete(synchronize_session=False)
    db.commit()


# Plans

def get_plans_by_user_id(db: Session, user_id: UUID) -> List[Plan]:
    return (
        db.query(Plan)
        .filter(Plan.user_id == user_id)
        .order_by(Plan.created_at.desc())
        .all()
    )


def get_plan_by_id(db: Session, plan_id: UUID) -> Optional[Plan]:
    return db.query(Plan).filter(Plan.id == plan_id).first()


def get_active_plan_by_user_id(db: Session, user_id: UUID) -> Optional[Plan]:
    return (
        db.query(Plan)
        .filter(Plan.user_id == user_id, Plan.status == "ACTIVE")
        .order_by(Plan.created_at.desc())
        .first()
    )


def create_plan(db: Session, data: Dict[str, Any]) -> Plan:
    return _insert(db, Plan(**data))


def update_plan(db: Session, plan_id: UUID, data: Dict[str, Any]) -> Optional[Plan]:
    plan = get_plan_by_id(db, plan_id)
    if plan is None:
        return None
    return _apply(db, plan, data)


def delete_plan(db: Session, plan_id: UUID) -> None:
    db.query(Plan).filter(Plan.id == plan_id).delete(synchronize_session=False)
    db.commit()


# Workouts

def get_workouts_by_user_id(db: Session, user_id: UUID) -> List[WorkoutSession]:
    return (
        db.query(WorkoutSession)
        .filter(WorkoutSession.user_id == user_id)
        .order_by(WorkoutSession.date.desc())
        .all()
    )


def get_recent_workouts(db: Session, user_id: UUID, limit: int) -> List[WorkoutSession]:
    return (
        db.query(WorkoutSession)
        .filter(WorkoutSession.user_id == user_id)
        .order_by(WorkoutSession.date.desc())
        .limit(limit)
        .all()
    )


def create_workout(db: Session, data: Dict[str, Any]) -> WorkoutSession:
    return _insert(db, WorkoutSession(**data))


def get_workouts_this_week(db: Session, user_id: UUID) -> int:
    week_start, week_end = current_week_bounds()
    return _count(
        db,
        WorkoutSession.id,
        WorkoutSession.user_id == user_id,
        WorkoutSession.date >= week_start,
        WorkoutSession.date < week_end,
    )


# Progress

def get_progress_by_user_id(db: Session, user_id: UUID) -> List[Progress]:
    return (
        db.query(Progress)
        .filter(Progress.user_id == user_id)
        .order_by(Progress.date.desc())
        .all()
    )


def create_progress(db: Session, data: Dict[str, Any]) -> Progress:
    return _insert(db, Progress(**data))


def get_progress_chart(db: Session, user_id: UUID, days: int) -> List[Dict[str, Any]]:
    """Weight series for the last `days` days, oldest first. Entries without a weight are skipped."""
    start_date = _utcnow() - timedelta(days=days)
    rows = (
        db.query(Progress.date, Progress.weight_kg)
        .filter(Progress.user_id == user_id, Progress.date >= start_date)
        .order_by(Progress.date.asc())
        .all()
    )
    return [
        {"date": row.date.isoformat(), "weight": row.weight_kg}
        for row in rows
        if row.weight_kg is not None
    ]


# Uploads

def create_upload(db: Session, data: Dict[str, Any]) -> Upload:
    return _insert(db, Upload(**data))


def get_uploads_by_user_id(db: Session, user_id: UUID) -> List[Upload]:
    return (
        db.query(Upload)
        .filter(Upload.user_id == user_id)
        .order_by(Upload.created_at.desc())
        .all()
    )


# AI jobs

def create_ai_job(db: Session, data: Dict[str, Any]) -> AiJob:
    return _insert(db, AiJob(**data))


def update_ai_job(db: Session, job_id: UUID, data: Dict[str, Any]) -> Optional[AiJob]:
    job = db.query(AiJob).filter(AiJob.id == job_id).first()
    if job is None:
        return None
    return _apply(db, job, data, touch=False)


def get_ai_job_by_id(db: Session, job_id: UUID) -> Optional[AiJob]:
    return db.query(AiJob).filter(AiJob.id == job_id).first()


# Stats

def get_user_stats(db: Session, user_id: UUID) -> Dict[str, int]:
    total = _count(db, WorkoutSession.id, WorkoutSession.user_id == user_id)
    this_week = get_workouts_this_week(db, user_id)
    calories = (
        db.query(func.coalesce(func.sum(WorkoutSession.calories_burned), 0))
        .filter(WorkoutSession.user_id == user_id)
        .scalar()
    )
    return {
        "total_workouts": total,
        "this_week": this_week,
        # TODO: compute consecutive-day streak from workout_sessions.date
        "streak": 0,
        "calories_burned": int(calories or 0),
    }


def get_admin_stats(db: Session) -> Dict[str, Any]:
    return {
        "total_users": _count(db, User.id),
        "total_plans": _count(db, Plan.id),
        "total_workouts": _count(db, WorkoutSession.id),
        "average_workouts_per_week": 0,
    }
