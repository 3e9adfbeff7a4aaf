"""
Tests for the plan generation service: the deterministic template, the
OpenAI path against a mocked client, and fallback on AI failure.
"""
import json
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from core.config import settings
from schemas import GeneratePlanRequest
from services import plan_generation
from services.plan_generation import (
    FALLBACK_EXERCISES,
    PlanGenerationError,
    UserProfileContext,
    build_plan_prompt,
    generate_ai_plan,
    generate_fallback_plan,
    generate_plan,
)


def _params(**overrides):
    data = {
        "goal": "weight_loss",
        "level": "BEGINNER",
        "frequency_per_week": 3,
        "duration_weeks": 4,
    }
    data.update(overrides)
    return GeneratePlanRequest(**data)


def _mock_client(content=None, error=None):
    client = MagicMock()
    if error is not None:
        client.chat.completions.create.side_effect = error
    else:
        message = SimpleNamespace(content=content)
        client.chat.completions.create.return_value = SimpleNamespace(
            choices=[SimpleNamespace(message=message)]
        )
    return client


AI_PLAN = {
    "title": "Lean Out",
    "description": "Four weeks of conditioning",
    "weeks": [
        {
            "weekNumber": 1,
            "days": [
                {
                    "dayNumber": 1,
                    "name": "Intervals",
                    "restDay": False,
                    "exercises": [{"name": "Burpees", "sets": 4, "reps": "12", "rest": 60}],
                }
            ],
        }
    ],
}


class TestFallbackPlan:

    def test_shape(self):
        plan = generate_fallback_plan(_params())

        weeks = plan.data["weeks"]
        assert len(weeks) == 4
        for week_index, week in enumerate(weeks, start=1):
            assert week["weekNumber"] == week_index
            assert [d["dayNumber"] for d in week["days"]] == [1, 2, 3, 4, 5, 6, 7]
            active = [d for d in week["days"] if not d["restDay"]]
            assert len(active) == 3

    def test_training_days_come_first_and_alternate(self):
        days = generate_fallback_plan(_params()).data["weeks"][0]["days"]

        assert [d["name"] for d in days] == [
            "Full Body Workout A",
            "Full Body Workout B",
            "Full Body Workout A",
            "Rest Day",
            "Rest Day",
            "Rest Day",
            "Rest Day",
        ]
        assert all(d["exercises"] == [] for d in days[3:])

    def test_exercise_count_alternates_by_week(self):
        weeks = generate_fallback_plan(_params()).data["weeks"]

        assert len(weeks[0]["days"][0]["exercises"]) == 5
        assert len(weeks[1]["days"][0]["exercises"]) == 4
        assert len(weeks[2]["days"][0]["exercises"]) == 5
        assert [e["name"] for e in weeks[1]["days"][0]["exercises"]] == [
            "Push-ups", "Squats", "Plank", "Lunges",
        ]

    def test_exercises_are_copies(self):
        plan = generate_fallback_plan(_params())
        plan.data["weeks"][0]["days"][0]["exercises"][0]["sets"] = 99

        assert FALLBACK_EXERCISES[0]["sets"] == 3

    def test_title_and_description(self):
        plan = generate_fallback_plan(_params())

        assert plan.title == "Fat Burn 4-Week Plan"
        assert plan.description == (
            "A beginner 4-week program focusing on weight loss. Train 3 days per week."
        )

    def test_unknown_goal_title(self):
        plan = generate_fallback_plan(_params(goal="climb_everest", level="ADVANCED", duration_weeks=2))

        assert plan.title == "Fitness 2-Week Plan"
        assert "focusing on climb everest" in plan.description
        assert plan.description.startswith("A advanced 2-week program")

    def test_only_first_underscore_in_goal_replaced(self):
        plan = generate_fallback_plan(_params(goal="upper_body_power"))
        assert "focusing on upper body_power." in plan.description

    @pytest.mark.parametrize("frequency", [1, 7])
    def test_frequency_bounds(self, frequency):
        week = generate_fallback_plan(_params(frequency_per_week=frequency, duration_weeks=1)).data["weeks"][0]
        assert sum(1 for d in week["days"] if not d["restDay"]) == frequency


class TestPrompt:

    def test_contains_request_fields(self):
        prompt = build_plan_prompt(_params(
            equipment=["DUMBBELL", "BAND"],
            time_per_day=30,
            injuries="bad shoulder",
        ))

        assert "Create a detailed 4-week workout plan" in prompt
        assert "Goal: weight_loss" in prompt
        assert "Fitness Level: BEGINNER" in prompt
        assert "Workouts per Week: 3" in prompt
        assert "Time per Workout: 30 minutes" in prompt
        assert "Available Equipment: DUMBBELL, BAND" in prompt
        assert "Injuries/Limitations to avoid: bad shoulder" in prompt

    def test_defaults(self):
        prompt = build_plan_prompt(_params())

        assert "Time per Workout: 45 minutes" in prompt
        assert "Available Equipment: Bodyweight only" in prompt
        assert "Injuries/Limitations" not in prompt

    def test_profile_context(self):
        prompt = build_plan_prompt(
            _params(),
            UserProfileContext(fitness_level="ADVANCED", injuries="tendonitis"),
        )

        assert "Additional limitations: tendonitis" in prompt
        assert "Profile fitness level: ADVANCED" in prompt

    def test_matching_profile_level_not_repeated(self):
        prompt = build_plan_prompt(_params(), UserProfileContext(fitness_level="BEGINNER"))
        assert "Profile fitness level" not in prompt


class TestAIPlan:

    def test_parses_model_output(self):
        client = _mock_client(json.dumps(AI_PLAN))

        plan = generate_ai_plan(_params(), client=client)

        assert plan.title == "Lean Out"
        assert plan.description == "Four weeks of conditioning"
        assert plan.data == {"weeks": AI_PLAN["weeks"]}

        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == settings.OPENAI_MODEL
        assert kwargs["response_format"] == {"type": "json_object"}
        assert kwargs["max_tokens"] == settings.OPENAI_MAX_TOKENS
        assert kwargs["messages"][0]["role"] == "system"
        assert "Goal: weight_loss" in kwargs["messages"][1]["content"]

    def test_defaults_missing_title_and_description(self):
        client = _mock_client(json.dumps({"weeks": []}))

        plan = generate_ai_plan(_params(), client=client)

        assert plan.title == "weight_loss Plan"
        assert plan.description == "A 4-week beginner weight_loss program"
        assert plan.data == {"weeks": []}

    def test_missing_weeks_becomes_empty_list(self):
        plan = generate_ai_plan(_params(), client=_mock_client(json.dumps({"title": "X"})))
        assert plan.data == {"weeks": []}

    def test_no_client_raises(self):
        with pytest.raises(PlanGenerationError):
            generate_ai_plan(_params())

    def test_non_json_raises(self):
        with pytest.raises(PlanGenerationError):
            generate_ai_plan(_params(), client=_mock_client("here is your plan!"))

    def test_empty_content_raises(self):
        with pytest.raises(PlanGenerationError):
            generate_ai_plan(_params(), client=_mock_client(""))

    def test_json_array_raises(self):
        with pytest.raises(PlanGenerationError):
            generate_ai_plan(_params(), client=_mock_client("[1, 2, 3]"))

    def test_api_error_raises(self):
        with pytest.raises(PlanGenerationError):
            generate_ai_plan(_params(), client=_mock_client(error=RuntimeError("rate limited")))


class TestGeneratePlan:

    def test_without_key_uses_template(self):
        plan = generate_plan(_params())
        assert plan.title == "Fat Burn 4-Week Plan"

    def test_with_key_uses_model(self, monkeypatch):
        monkeypatch.setattr(settings, "OPENAI_API_KEY", "sk-test")
        monkeypatch.setattr(plan_generation, "_openai_client", _mock_client(json.dumps(AI_PLAN)))

        plan = generate_plan(_params())

        assert plan.title == "Lean Out"

    def test_ai_failure_falls_back(self, monkeypatch):
        monkeypatch.setattr(settings, "OPENAI_API_KEY", "sk-test")
        monkeypatch.setattr(
            plan_generation, "_openai_client", _mock_client(error=RuntimeError("boom"))
        )

        plan = generate_plan(_params())

        assert plan.title == "Fat Burn 4-Week Plan"
        assert len(plan.data["weeks"]) == 4

    def test_bad_json_falls_back(self, monkeypatch):
        monkeypatch.setattr(settings, "OPENAI_API_KEY", "sk-test")
        monkeypatch.setattr(plan_generation, "_openai_client", _mock_client("{not json"))

        plan = generate_plan(_params(duration_weeks=2))

        assert plan.title == "Fat Burn 2-Week Plan"

    def test_client_is_created_once(self, monkeypatch):
        monkeypatch.setattr(settings, "OPENAI_API_KEY", "sk-test")
        created = []

        def fake_openai(**kwargs):
            created.append(kwargs)
            return MagicMock()

        monkeypatch.setattr(plan_generation, "OpenAI", fake_openai)

        first = plan_generation.get_openai_client()
        second = plan_generation.get_openai_client()

        assert first is second
        assert created == [{"api_key": "sk-test"}]
