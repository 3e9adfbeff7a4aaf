"""
Tests for the persistence adapter in services/storage.py.
"""
from datetime import datetime, timedelta, timezone
from uuid import uuid4

from conftest import make_user
from models import AiJob, Plan, Progress, Upload, WorkoutSession
from services import storage


def _plan(db_session, user, **overrides):
    data = {
        "user_id": user.id,
        "title": "Base Plan",
        "goal": "strength",
        "level": "BEGINNER",
        "frequency_per_week": 3,
        "duration_weeks": 4,
        "data": {"weeks": []},
    }
    data.update(overrides)
    return storage.create_plan(db_session, data)


class TestUsers:

    def test_lookup_by_email_and_id(self, db_session, test_user):
        assert storage.get_user_by_email(db_session, test_user.email).id == test_user.id
        assert storage.get_user_by_id(db_session, test_user.id).email == test_user.email
        assert storage.get_user_by_email(db_session, "missing@example.com") is None

    def test_defaults(self, db_session, test_user):
        assert test_user.role == "USER"
        assert test_user.is_verified is False
        assert test_user.created_at is not None

    def test_update_ignores_unknown_keys_and_id(self, db_session, test_user):
        original_id = test_user.id
        updated = storage.update_user(db_session, test_user.id, {
            "bio": "Runner",
            "not_a_column": "x",
            "id": None,
        })

        assert updated.bio == "Runner"
        assert updated.id == original_id

    def test_update_missing_user(self, db_session):
        assert storage.update_user(db_session, uuid4(), {"bio": "x"}) is None

    def test_all_users_newest_first(self, db_session):
        first = make_user(db_session)
        second = make_user(db_session)
        storage.update_user(db_session, first.id, {"created_at": datetime.now(timezone.utc) - timedelta(days=1)})

        users = storage.get_all_users(db_session)

        assert [u.id for u in users] == [second.id, first.id]

    def test_delete_cascades_to_owned_rows(self, db_session, test_user, other_user):
        plan = _plan(db_session, test_user)
        storage.create_workout(db_session, {"user_id": test_user.id, "plan_id": plan.id, "completed": True})
        storage.create_progress(db_session, {"user_id": test_user.id, "weight_kg": 80.0})
        storage.create_upload(db_session, {
            "user_id": test_user.id,
            "filename": "a.jpg",
            "original_name": "me.jpg",
            "url": "/uploads/a.jpg",
        })
        storage.create_ai_job(db_session, {"user_id": test_user.id, "plan_id": plan.id})
        _plan(db_session, other_user)
        user_id, other_user_id = test_user.id, other_user.id

        storage.delete_user(db_session, user_id)
        db_session.expire_all()

        assert storage.get_user_by_id(db_session, user_id) is None
        for model in (Plan, WorkoutSession, Progress, Upload, AiJob):
            assert db_session.query(model).filter(model.user_id == user_id).count() == 0
        assert db_session.query(Plan).filter(Plan.user_id == other_user_id).count() == 1


class TestPlans:

    def test_active_plan_is_newest_active(self, db_session, test_user):
        older = _plan(db_session, test_user, created_at=datetime.now(timezone.utc) - timedelta(days=2))
        _plan(db_session, test_user, status="PAUSED")
        newer = _plan(db_session, test_user, created_at=datetime.now(timezone.utc) - timedelta(days=1))

        active = storage.get_active_plan_by_user_id(db_session, test_user.id)

        assert active.id == newer.id
        assert active.id != older.id

    def test_update_touches_updated_at(self, db_session, test_user):
        plan = _plan(db_session, test_user)
        before = plan.updated_at

        updated = storage.update_plan(db_session, plan.id, {"title": "New"})

        assert updated.title == "New"
        assert updated.updated_at >= before

    def test_delete_plan_cascades_jobs_and_nulls_workouts(self, db_session, test_user):
        plan = _plan(db_session, test_user)
        workout = storage.create_workout(db_session, {"user_id": test_user.id, "plan_id": plan.id})
        job = storage.create_ai_job(db_session, {"user_id": test_user.id, "plan_id": plan.id})
        plan_id, workout_id, job_id = plan.id, workout.id, job.id

        storage.delete_plan(db_session, plan_id)
        db_session.expire_all()

        assert storage.get_plan_by_id(db_session, plan_id) is None
        assert storage.get_ai_job_by_id(db_session, job_id) is None
        assert db_session.get(WorkoutSession, workout_id).plan_id is None


class TestStats:

    def test_user_stats(self, db_session, test_user, other_user):
        now = datetime.now(timezone.utc)
        week_start, _ = storage.current_week_bounds(now)
        storage.create_workout(db_session, {"user_id": test_user.id, "date": now, "calories_burned": 300})
        storage.create_workout(db_session, {
            "user_id": test_user.id,
            "date": week_start - timedelta(days=3),
            "calories_burned": 200,
        })
        storage.create_workout(db_session, {"user_id": test_user.id, "date": now})
        storage.create_workout(db_session, {"user_id": other_user.id, "date": now, "calories_burned": 999})

        stats = storage.get_user_stats(db_session, test_user.id)

        assert stats == {
            "total_workouts": 3,
            "this_week": 2,
            "streak": 0,
            "calories_burned": 500,
        }

    def test_week_starts_monday(self):
        wednesday = datetime(2024, 5, 15, 18, 30, tzinfo=timezone.utc)

        start, end = storage.current_week_bounds(wednesday)

        assert start == datetime(2024, 5, 13, tzinfo=timezone.utc)
        assert end == datetime(2024, 5, 20, tzinfo=timezone.utc)

    def test_admin_stats(self, db_session, test_user, other_user):
        _plan(db_session, test_user)
        storage.create_workout(db_session, {"user_id": test_user.id})
        storage.create_workout(db_session, {"user_id": other_user.id})

        assert storage.get_admin_stats(db_session) == {
            "total_users": 2,
            "total_plans": 1,
            "total_workouts": 2,
            "average_workouts_per_week": 0,
        }


class TestProgressChart:

    def test_window_order_and_missing_weight(self, db_session, test_user):
        now = datetime.now(timezone.utc)
        storage.create_progress(db_session, {"user_id": test_user.id, "date": now - timedelta(days=40), "weight_kg": 90.0})
        storage.create_progress(db_session, {"user_id": test_user.id, "date": now - timedelta(days=10), "weight_kg": 85.0})
        storage.create_progress(db_session, {"user_id": test_user.id, "date": now - timedelta(days=5), "body_fat_pct": 20.0})
        storage.create_progress(db_session, {"user_id": test_user.id, "date": now - timedelta(days=1), "weight_kg": 84.0})

        chart = storage.get_progress_chart(db_session, test_user.id, 30)

        assert [point["weight"] for point in chart] == [85.0, 84.0]
        assert all(isinstance(point["date"], str) for point in chart)

    def test_wider_window(self, db_session, test_user):
        now = datetime.now(timezone.utc)
        storage.create_progress(db_session, {"user_id": test_user.id, "date": now - timedelta(days=40), "weight_kg": 90.0})

        assert storage.get_progress_chart(db_session, test_user.id, 30) == []
        assert len(storage.get_progress_chart(db_session, test_user.id, 60)) == 1


class TestUploadsAndJobs:

    def test_uploads_listed_per_user(self, db_session, test_user):
        storage.create_upload(db_session, {
            "user_id": test_user.id,
            "filename": "b.mp4",
            "original_name": "squat.mp4",
            "url": "/uploads/b.mp4",
            "type": "VIDEO",
            "size": 2048,
        })

        uploads = storage.get_uploads_by_user_id(db_session, test_user.id)

        assert len(uploads) == 1
        assert uploads[0].type == "VIDEO"

    def test_ai_job_lifecycle(self, db_session, test_user):
        job = storage.create_ai_job(db_session, {"user_id": test_user.id})
        assert job.status == "pending"
        assert job.progress == 0

        finished_at = datetime.now(timezone.utc)
        updated = storage.update_ai_job(db_session, job.id, {
            "status": "completed",
            "progress": 100,
            "completed_at": finished_at,
        })

        assert updated.status == "completed"
        assert updated.progress == 100
        assert storage.get_ai_job_by_id(db_session, job.id).completed_at is not None
