"""
Workout Plan API Endpoints

Plans are owned by a user; reads and writes of a single plan require the
caller to be the owner or an admin.

Generation runs synchronously inside the request. `generatedByAI` records
whether an OpenAI key was configured, not which path produced the plan: a
plan generated while the key is set is flagged even if the AI call failed
and the template fallback ran.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List
from uuid import UUID
import logging

from core.auth import ensure_owner_or_admin, require_auth
from core.database import get_db
from core.exceptions import NotFoundError
from core.security import TokenClaims
from schemas import GeneratePlanRequest, PlanResponse, PlanUpdate
from services import storage
from services.plan_generation import (
    PLAN_DISCLAIMER,
    UserProfileContext,
    generate_plan,
    is_ai_configured,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/plans", tags=["plans"])


def _get_owned_plan(db: Session, plan_id: UUID, current_user: TokenClaims):
    plan = storage.get_plan_by_id(db, plan_id)
    if not plan:
        raise NotFoundError("Plan not found")
    ensure_owner_or_admin(plan.user_id, current_user)
    return plan


@router.get("", response_model=List[PlanResponse])
def list_plans(
    current_user: TokenClaims = Depends(require_auth),
    db: Session = Depends(get_db),
):
    """The caller's plans, newest first."""
    return storage.get_plans_by_user_id(db, current_user.id)


@router.get("/active", response_model=PlanResponse)
def get_active_plan(
    current_user: TokenClaims = Depends(require_auth),
    db: Session = Depends(get_db),
):
    plan = storage.get_active_plan_by_user_id(db, current_user.id)
    if not plan:
        raise NotFoundError("No active plan")
    return plan


@router.post("/generate", response_model=PlanResponse, status_code=status.HTTP_201_CREATED)
def generate(
    params: GeneratePlanRequest,
    current_user: TokenClaims = Depends(require_auth),
    db: Session = Depends(get_db),
):
    """
    Generate and store a plan.

    Uses the OpenAI path when a key is configured and silently falls back
    to the template generator otherwise or on failure.
    """
    user = storage.get_user_by_id(db, current_user.id)
    profile = UserProfileContext(
        fitness_level=user.fitness_level if user else None,
        injuries=user.injuries if user else None,
    )

    generated = generate_plan(params, profile)

    plan = storage.create_plan(db, {
        "user_id": current_user.id,
        "title": generated.title,
        "description": generated.description,
        "goal": params.goal,
        "level": params.level,
        "frequency_per_week": params.frequency_per_week,
        "duration_weeks": params.duration_weeks,
        "data": generated.data,
        "generated_by_ai": is_ai_configured(),
        "status": "ACTIVE",
        "disclaimer": PLAN_DISCLAIMER,
    })
    logger.info(
        f"Plan {plan.id} generated for user {current_user.id}",
        extra={"extra_fields": {"generated_by_ai": plan.generated_by_ai, "weeks": params.duration_weeks}},
    )
    return plan


@router.get("/{plan_id}", response_model=PlanResponse)
def get_plan(
    plan_id: UUID,
    current_user: TokenClaims = Depends(require_auth),
    db: Session = Depends(get_db),
):
    return _get_owned_plan(db, plan_id, current_user)


@router.put("/{plan_id}", response_model=PlanResponse)
def update_plan(
    plan_id: UUID,
    data: PlanUpdate,
    current_user: TokenClaims = Depends(require_auth),
    db: Session = Depends(get_db),
):
    _get_owned_plan(db, plan_id, current_user)
    return storage.update_plan(db, plan_id, data.model_dump(exclude_unset=True))


@router.delete("/{plan_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_plan(
    plan_id: UUID,
    current_user: TokenClaims = Depends(require_auth),
    db: Session = Depends(get_db),
):
    _get_owned_plan(db, plan_id, current_user)
    storage.delete_plan(db, plan_id)
    return None
