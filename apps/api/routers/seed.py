"""
Seed endpoint for the exercise library. Idempotent: does nothing once the
library has any exercises.
"""
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from core.database import get_db
from schemas import SeedResponse
from services.exercise_catalog import seed_exercises

router = APIRouter(prefix="/api/seed", tags=["seed"])


@router.post("/exercises", response_model=SeedResponse)
def seed_exercise_library(db: Session = Depends(get_db)):
    created, count = seed_exercises(db)
    if not created:
        return {"message": "Exercises already seeded", "count": count}
    return JSONResponse(
        status_code=201,
        content={"message": "Exercises seeded successfully", "count": count},
    )
