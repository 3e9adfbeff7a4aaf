"""
Body Progress API Endpoints

Weight, body fat and tape measurements over time, plus the weight series
used by the progress chart.
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from datetime import datetime, timezone
from typing import List

from core.auth import require_auth
from core.database import get_db
from core.security import TokenClaims
from schemas import ProgressChartPoint, ProgressCreate, ProgressResponse
from services import storage

router = APIRouter(prefix="/api/progress", tags=["progress"])

DEFAULT_CHART_DAYS = 30
MAX_CHART_DAYS = 36500  # ~100 years; larger windows overflow datetime arithmetic


@router.get("", response_model=List[ProgressResponse])
def list_progress(
    current_user: TokenClaims = Depends(require_auth),
    db: Session = Depends(get_db),
):
    return storage.get_progress_by_user_id(db, current_user.id)


@router.get("/chart", response_model=List[ProgressChartPoint])
def progress_chart(
    days: int = Query(default=DEFAULT_CHART_DAYS, ge=1, le=MAX_CHART_DAYS),
    current_user: TokenClaims = Depends(require_auth),
    db: Session = Depends(get_db),
):
    """Weight entries from the last `days` days, oldest first."""
    return storage.get_progress_chart(db, current_user.id, days)


@router.post("", response_model=ProgressResponse, status_code=status.HTTP_201_CREATED)
def create_progress(
    data: ProgressCreate,
    current_user: TokenClaims = Depends(require_auth),
    db: Session = Depends(get_db),
):
    measurements = data.measurements.model_dump(exclude_none=True) if data.measurements else None
    return storage.create_progress(db, {
        "user_id": current_user.id,
        "date": datetime.now(timezone.utc),
        "weight_kg": data.weight_kg,
        "body_fat_pct": data.body_fat_pct,
        "measurements": measurements,
        "photo_url": data.photo_url,
        "notes": data.notes,
    })
