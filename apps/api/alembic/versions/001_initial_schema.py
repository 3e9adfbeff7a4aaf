"""initial schema

Revision ID: 001
Revises:
Create Date: 2024-06-01 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


user_role = postgresql.ENUM('USER', 'COACH', 'ADMIN', name='user_role', create_type=False)
equipment = postgresql.ENUM(
    'BODYWEIGHT', 'DUMBBELL', 'BARBELL', 'MACHINE', 'KETTLEBELL', 'BAND', 'CABLE', 'NONE',
    name='equipment', create_type=False,
)
level = postgresql.ENUM('BEGINNER', 'INTERMEDIATE', 'ADVANCED', name='level', create_type=False)
plan_status = postgresql.ENUM('CREATING', 'ACTIVE', 'PAUSED', 'COMPLETED', name='plan_status', create_type=False)
upload_type = postgresql.ENUM('IMAGE', 'VIDEO', 'OTHER', name='upload_type', create_type=False)

ENUMS = (user_role, equipment, level, plan_status, upload_type)


def _id():
    return sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()'))


def _created_at():
    return sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False)


def _updated_at():
    return sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False)


def _owner():
    return sa.Column(
        'user_id', postgresql.UUID(as_uuid=True),
        sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False,
    )


def upgrade() -> None:
    bind = op.get_bind()
    for enum_type in ENUMS:
        enum_type.create(bind, checkfirst=True)

    op.create_table(
        'users',
        _id(),
        sa.Column('email', sa.Text(), nullable=False),
        sa.Column('password', sa.Text(), nullable=False),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('role', user_role, server_default='USER', nullable=False),
        sa.Column('height_cm', sa.Integer(), nullable=True),
        sa.Column('weight_kg', sa.Float(), nullable=True),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('goal', sa.Text(), nullable=True),
        sa.Column('fitness_level', level, nullable=True),
        sa.Column('available_equipment', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column('injuries', sa.Text(), nullable=True),
        sa.Column('is_verified', sa.Boolean(), server_default=sa.text('false'), nullable=False),
        sa.Column('last_login', sa.DateTime(timezone=True), nullable=True),
        _created_at(),
        _updated_at(),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'exercises',
        _id(),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('instructions', sa.Text(), nullable=True),
        sa.Column('primary_muscle', sa.Text(), nullable=False),
        sa.Column('secondary_muscles', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column('equipment', equipment, server_default='BODYWEIGHT', nullable=False),
        sa.Column('video_url', sa.Text(), nullable=True),
        sa.Column('image_url', sa.Text(), nullable=True),
        sa.Column('difficulty', level, nullable=True),
        _created_at(),
        _updated_at(),
    )

    op.create_table(
        'plans',
        _id(),
        _owner(),
        sa.Column('title', sa.Text(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('goal', sa.Text(), nullable=False),
        sa.Column('level', level, nullable=False),
        sa.Column('frequency_per_week', sa.Integer(), nullable=False),
        sa.Column('duration_weeks', sa.Integer(), nullable=False),
        sa.Column('data', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column('generated_by_ai', sa.Boolean(), server_default=sa.text('false'), nullable=False),
        sa.Column('status', plan_status, server_default='ACTIVE', nullable=False),
        sa.Column('disclaimer', sa.Text(), nullable=True),
        _created_at(),
        _updated_at(),
    )
    op.create_index('ix_plans_user_id', 'plans', ['user_id'])

    op.create_table(
        'workout_sessions',
        _id(),
        _owner(),
        sa.Column(
            'plan_id', postgresql.UUID(as_uuid=True),
            sa.ForeignKey('plans.id', ondelete='SET NULL'), nullable=True,
        ),
        sa.Column('date', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('duration', sa.Integer(), nullable=True),
        sa.Column('exercises', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column('calories_burned', sa.Integer(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('completed', sa.Boolean(), server_default=sa.text('false'), nullable=False),
        _created_at(),
    )
    op.create_index('ix_workout_sessions_user_id', 'workout_sessions', ['user_id'])
    op.create_index('ix_workout_sessions_date', 'workout_sessions', ['date'])

    op.create_table(
        'progress',
        _id(),
        _owner(),
        sa.Column('date', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('weight_kg', sa.Float(), nullable=True),
        sa.Column('body_fat_pct', sa.Float(), nullable=True),
        sa.Column('measurements', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column('photo_url', sa.Text(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        _created_at(),
    )
    op.create_index('ix_progress_user_id', 'progress', ['user_id'])
    op.create_index('ix_progress_date', 'progress', ['date'])

    op.create_table(
        'uploads',
        _id(),
        _owner(),
        sa.Column('filename', sa.Text(), nullable=False),
        sa.Column('original_name', sa.Text(), nullable=False),
        sa.Column('url', sa.Text(), nullable=False),
        sa.Column('type', upload_type, server_default='IMAGE', nullable=False),
        sa.Column('size', sa.Integer(), nullable=True),
        _created_at(),
    )
    op.create_index('ix_uploads_user_id', 'uploads', ['user_id'])

    op.create_table(
        'ai_jobs',
        _id(),
        _owner(),
        sa.Column(
            'plan_id', postgresql.UUID(as_uuid=True),
            sa.ForeignKey('plans.id', ondelete='CASCADE'), nullable=True,
        ),
        sa.Column('status', sa.Text(), server_default='pending', nullable=False),  # pending|running|completed|failed
        sa.Column('progress', sa.Integer(), server_default='0', nullable=False),
        sa.Column('error', sa.Text(), nullable=True),
        _created_at(),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_ai_jobs_user_id', 'ai_jobs', ['user_id'])


def downgrade() -> None:
    op.drop_index('ix_ai_jobs_user_id', table_name='ai_jobs')
    op.drop_table('ai_jobs')
    op.drop_index('ix_uploads_user_id', table_name='uploads')
    op.drop_table('uploads')
    op.drop_index('ix_progress_date', table_name='progress')
    op.drop_index('ix_progress_user_id', table_name='progress')
    op.drop_table('progress')
    op.drop_index('ix_workout_sessions_date', table_name='workout_sessions')
    op.drop_index('ix_workout_sessions_user_id', table_name='workout_sessions')
    op.drop_table('workout_sessions')
    op.drop_index('ix_plans_user_id', table_name='plans')
    op.drop_table('plans')
    op.drop_table('exercises')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')

    bind = op.get_bind()
    for enum_type in reversed(ENUMS):
        enum_type.drop(bind, checkfirst=True)
