from pydantic import BaseModel, ConfigDict, EmailStr, Field, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel
from datetime import datetime
from uuid import UUID
from typing import Any, Dict, List, Literal, Optional


Level = Literal["BEGINNER", "INTERMEDIATE", "ADVANCED"]
Role = Literal["USER", "COACH", "ADMIN"]
Equipment = Literal["BODYWEIGHT", "DUMBBELL", "BARBELL", "MACHINE", "KETTLEBELL", "BAND", "CABLE", "NONE"]
PlanStatus = Literal["CREATING", "ACTIVE", "PAUSED", "COMPLETED"]


class APIModel(BaseModel):
    """camelCase on the wire, snake_case in Python. Both spellings are accepted on input."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def reject_null(value: Any, info: ValidationInfo) -> Any:
    """Partial updates may omit a field, but may not null a required column."""
    if value is None:
        raise ValueError(f"{to_camel(info.field_name)} cannot be null")
    return value


# ---------------------------------------------------------------------------
# Auth / users
# ---------------------------------------------------------------------------

class SignupRequest(APIModel):
    email: EmailStr
    password: str
    name: str

    @field_validator("password")
    @classmethod
    def password_length(cls, v: str) -> str:
        if len(v) < 8:
            raise ValueError("Password must be at least 8 characters")
        return v

    @field_validator("name")
    @classmethod
    def name_length(cls, v: str) -> str:
        if len(v) < 2:
            raise ValueError("Name must be at least 2 characters")
        return v


class LoginRequest(APIModel):
    email: EmailStr
    password: str

    @field_validator("password")
    @classmethod
    def password_present(cls, v: str) -> str:
        if not v:
            raise ValueError("Password is required")
        return v


class UpdateProfileRequest(APIModel):
    """Schema for updating the caller's profile. Only provided fields change."""
    name: Optional[str] = Field(default=None, min_length=2)
    height_cm: Optional[int] = Field(default=None, gt=0)
    weight_kg: Optional[float] = Field(default=None, gt=0)
    bio: Optional[str] = None
    goal: Optional[str] = None
    fitness_level: Optional[Level] = None
    available_equipment: Optional[List[str]] = None
    injuries: Optional[str] = None

    _required = field_validator("name", mode="before")(reject_null)


class UserResponse(APIModel):
    """User payload. The password hash is never part of it."""
    id: UUID
    email: str
    name: str
    role: Role
    height_cm: Optional[int] = None
    weight_kg: Optional[float] = None
    bio: Optional[str] = None
    goal: Optional[str] = None
    fitness_level: Optional[Level] = None
    available_equipment: Optional[List[str]] = None
    injuries: Optional[str] = None
    is_verified: bool = False
    last_login: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class AuthResponse(APIModel):
    user: UserResponse
    token: str


class UserStats(APIModel):
    total_workouts: int
    this_week: int
    streak: int
    calories_burned: int


class AdminStats(APIModel):
    total_users: int
    total_plans: int
    total_workouts: int
    average_workouts_per_week: float


# ---------------------------------------------------------------------------
# Exercises
# ---------------------------------------------------------------------------

class ExerciseCreate(APIModel):
    name: str = Field(min_length=1)
    description: str = Field(min_length=1)
    instructions: Optional[str] = None
    primary_muscle: str = Field(min_length=1)
    secondary_muscles: Optional[List[str]] = None
    equipment: Equipment = "BODYWEIGHT"
    video_url: Optional[str] = None
    image_url: Optional[str] = None
    difficulty: Optional[Level] = None


class ExerciseUpdate(APIModel):
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = Field(default=None, min_length=1)
    instructions: Optional[str] = None
    primary_muscle: Optional[str] = Field(default=None, min_length=1)
    secondary_muscles: Optional[List[str]] = None
    equipment: Optional[Equipment] = None
    video_url: Optional[str] = None
    image_url: Optional[str] = None
    difficulty: Optional[Level] = None

    _required = field_validator("name", "description", "primary_muscle", "equipment", mode="before")(reject_null)


class ExerciseResponse(APIModel):
    id: UUID
    name: str
    description: str
    instructions: Optional[str] = None
    primary_muscle: str
    secondary_muscles: Optional[List[str]] = None
    equipment: Equipment
    video_url: Optional[str] = None
    image_url: Optional[str] = None
    difficulty: Optional[Level] = None
    created_at: datetime
    updated_at: datetime


class SeedResponse(BaseModel):
    message: str
    count: int


# ---------------------------------------------------------------------------
# Plans
# ---------------------------------------------------------------------------

class GeneratePlanRequest(APIModel):
    goal: str
    level: Level
    frequency_per_week: int = Field(ge=1, le=7)
    duration_weeks: int = Field(ge=1, le=52)
    equipment: Optional[List[str]] = None
    time_per_day: Optional[int] = Field(default=None, ge=15, le=180)
    injuries: Optional[str] = None

    @field_validator("goal")
    @classmethod
    def goal_required(cls, v: str) -> str:
        if not v:
            raise ValueError("Goal is required")
        return v


class PlanUpdate(APIModel):
    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    goal: Optional[str] = Field(default=None, min_length=1)
    level: Optional[Level] = None
    frequency_per_week: Optional[int] = Field(default=None, ge=1, le=7)
    duration_weeks: Optional[int] = Field(default=None, ge=1, le=52)
    data: Optional[Dict[str, Any]] = None
    status: Optional[PlanStatus] = None

    _required = field_validator(
        "title", "goal", "level", "frequency_per_week", "duration_weeks", "status", mode="before"
    )(reject_null)


class PlanResponse(APIModel):
    id: UUID
    user_id: UUID
    title: str
    description: Optional[str] = None
    goal: str
    level: Level
    frequency_per_week: int
    duration_weeks: int
    data: Optional[Dict[str, Any]] = None
    generated_by_ai: bool = Field(alias="generatedByAI")
    status: PlanStatus
    disclaimer: Optional[str] = None
    created_at: datetime
    updated_at: datetime


# ---------------------------------------------------------------------------
# Workouts
# ---------------------------------------------------------------------------

class WorkoutCreate(APIModel):
    plan_id: Optional[UUID] = None
    duration: Optional[int] = Field(default=None, ge=0)
    exercises: Optional[List[Dict[str, Any]]] = None
    calories_burned: Optional[int] = Field(default=None, ge=0)
    notes: Optional[str] = None
    completed: bool = True


class WorkoutResponse(APIModel):
    id: UUID
    user_id: UUID
    plan_id: Optional[UUID] = None
    date: datetime
    duration: Optional[int] = None
    exercises: Optional[List[Dict[str, Any]]] = None
    calories_burned: Optional[int] = None
    notes: Optional[str] = None
    completed: bool
    created_at: datetime


# ---------------------------------------------------------------------------
# Progress
# ---------------------------------------------------------------------------

class ProgressMeasurements(APIModel):
    """Body measurements in centimeters."""
    chest: Optional[float] = None
    waist: Optional[float] = None
    hips: Optional[float] = None
    thighs: Optional[float] = None
    arms: Optional[float] = None
    shoulders: Optional[float] = None


class ProgressCreate(APIModel):
    weight_kg: Optional[float] = Field(default=None, gt=0)
    body_fat_pct: Optional[float] = Field(default=None, ge=0, le=100)
    measurements: Optional[ProgressMeasurements] = None
    photo_url: Optional[str] = None
    notes: Optional[str] = None


class ProgressResponse(APIModel):
    id: UUID
    user_id: UUID
    date: datetime
    weight_kg: Optional[float] = None
    body_fat_pct: Optional[float] = None
    measurements: Optional[Dict[str, Any]] = None
    photo_url: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime


class ProgressChartPoint(BaseModel):
    date: str
    weight: float
