from sqlalchemy import Column, Integer, Boolean, Float, DateTime, Enum, ForeignKey, Text, Uuid, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.sql import func
from core.database import Base
import uuid
from datetime import datetime, timezone


# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)
JSONType = JSON().with_variant(JSONB(), "postgresql")

USER_ROLES = ("USER", "COACH", "ADMIN")
EQUIPMENT_TYPES = ("BODYWEIGHT", "DUMBBELL", "BARBELL", "MACHINE", "KETTLEBELL", "BAND", "CABLE", "NONE")
LEVELS = ("BEGINNER", "INTERMEDIATE", "ADVANCED")
PLAN_STATUSES = ("CREATING", "ACTIVE", "PAUSED", "COMPLETED")
UPLOAD_TYPES = ("IMAGE", "VIDEO", "OTHER")

UserRoleEnum = Enum(*USER_ROLES, name="user_role")
EquipmentEnum = Enum(*EQUIPMENT_TYPES, name="equipment")
LevelEnum = Enum(*LEVELS, name="level")
PlanStatusEnum = Enum(*PLAN_STATUSES, name="plan_status")
UploadTypeEnum = Enum(*UPLOAD_TYPES, name="upload_type")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email = Column(Text, unique=True, nullable=False, index=True)
    password = Column(Text, nullable=False)  # bcrypt hash, never serialized
    name = Column(Text, nullable=False)
    role = Column(UserRoleEnum, nullable=False, default="USER")

    # Profile
    height_cm = Column(Integer, nullable=True)
    weight_kg = Column(Float, nullable=True)
    bio = Column(Text, nullable=True)
    goal = Column(Text, nullable=True)
    fitness_level = Column(LevelEnum, nullable=True)
    available_equipment = Column(JSONType, nullable=True)  # list of equipment names
    injuries = Column(Text, nullable=True)

    is_verified = Column(Boolean, nullable=False, default=False)
    last_login = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)

    # Rows are removed by the ON DELETE CASCADE foreign keys, not by the ORM
    plans = relationship("Plan", back_populates="user", passive_deletes=True)
    workout_sessions = relationship("WorkoutSession", back_populates="user", passive_deletes=True)
    progress_entries = relationship("Progress", back_populates="user", passive_deletes=True)
    uploads = relationship("Upload", back_populates="user", passive_deletes=True)
    ai_jobs = relationship("AiJob", back_populates="user", passive_deletes=True)


class Exercise(Base):
    """Exercise library entry. Plans reference exercises loosely by name."""
    __tablename__ = "exercises"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(Text, nullable=False)
    description = Column(Text, nullable=False)
    instructions = Column(Text, nullable=True)
    primary_muscle = Column(Text, nullable=False)
    secondary_muscles = Column(JSONType, nullable=True)
    equipment = Column(EquipmentEnum, nullable=False, default="BODYWEIGHT")
    video_url = Column(Text, nullable=True)
    image_url = Column(Text, nullable=True)
    difficulty = Column(LevelEnum, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)


class Plan(Base):
    """
    A multi-week workout schedule.

    `data` holds {"weeks": [{"weekNumber", "days": [{"dayNumber", "name",
    "restDay", "exercises": [...]}]}]} exactly as generated; AI output is
    stored without structural validation.
    """
    __tablename__ = "plans"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    goal = Column(Text, nullable=False)
    level = Column(LevelEnum, nullable=False)
    frequency_per_week = Column(Integer, nullable=False)
    duration_weeks = Column(Integer, nullable=False)
    data = Column(JSONType, nullable=True)
    generated_by_ai = Column(Boolean, nullable=False, default=False)
    # Several ACTIVE plans per user are allowed; "active plan" means the newest one
    status = Column(PlanStatusEnum, nullable=False, default="ACTIVE")
    disclaimer = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)

    user = relationship("User", back_populates="plans")
    workout_sessions = relationship("WorkoutSession", back_populates="plan", passive_deletes=True)
    ai_jobs = relationship("AiJob", back_populates="plan", passive_deletes=True)


class WorkoutSession(Base):
    __tablename__ = "workout_sessions"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    plan_id = Column(Uuid(as_uuid=True), ForeignKey("plans.id", ondelete="SET NULL"), nullable=True)
    date = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False, index=True)
    duration = Column(Integer, nullable=True)  # minutes
    exercises = Column(JSONType, nullable=True)  # [{name, sets: [{setNumber, targetReps, ...}], notes}]
    calories_burned = Column(Integer, nullable=True)
    notes = Column(Text, nullable=True)
    completed = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)

    user = relationship("User", back_populates="workout_sessions")
    plan = relationship("Plan", back_populates="workout_sessions")


class Progress(Base):
    __tablename__ = "progress"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False, index=True)
    weight_kg = Column(Float, nullable=True)
    body_fat_pct = Column(Float, nullable=True)
    measurements = Column(JSONType, nullable=True)  # chest, waist, hips, thighs, arms, shoulders (cm)
    photo_url = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)

    user = relationship("User", back_populates="progress_entries")


class Upload(Base):
    __tablename__ = "uploads"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    filename = Column(Text, nullable=False)
    original_name = Column(Text, nullable=False)
    url = Column(Text, nullable=False)
    type = Column(UploadTypeEnum, nullable=False, default="IMAGE")
    size = Column(Integer, nullable=True)  # bytes
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)

    user = relationship("User", back_populates="uploads")


class AiJob(Base):
    """
    Tracking row for asynchronous plan generation.

    Plan generation currently runs inside the request, so nothing creates
    these rows in the HTTP flow.
    """
    __tablename__ = "ai_jobs"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    plan_id = Column(Uuid(as_uuid=True), ForeignKey("plans.id", ondelete="CASCADE"), nullable=True)
    status = Column(Text, nullable=False, default="pending")
    progress = Column(Integer, nullable=False, default=0)
    error = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)
    completed_at = Column(DateTime(timezone=True), nullable=True)

    user = relationship("User", back_populates="ai_jobs")
    plan = relationship("Plan", back_populates="ai_jobs")
