"""
Workout Plan Generation Service

Two paths produce the same {"title", "description", "data": {"weeks": [...]}}
shape:

1. AI path: one natural-language prompt sent to the OpenAI chat completions
   API in JSON mode. The parsed object is trusted; only title and
   description are defaulted. Nested weeks/days/exercises are stored as-is.
2. Fallback path: a deterministic weekly template built from six bodyweight
   exercises.

Any failure on the AI path (no client, API error, empty or non-JSON
response) is logged and replaced by the fallback. There are no retries.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from openai import OpenAI

from core.config import settings
from schemas import GeneratePlanRequest

logger = logging.getLogger(__name__)


PLAN_DISCLAIMER = (
    "This plan is algorithmically generated and not medical advice. "
    "Consult a healthcare professional before starting any new exercise program."
)

SYSTEM_PROMPT = "You are a professional fitness coach. Respond only with valid JSON."

DEFAULT_MINUTES_PER_DAY = 45

FALLBACK_EXERCISES: List[Dict[str, Any]] = [
    {"name": "Push-ups", "sets": 3, "reps": "10-12", "rest": 60, "notes": "Keep core engaged"},
    {"name": "Squats", "sets": 3, "reps": "12-15", "rest": 60, "notes": "Keep back straight"},
    {"name": "Plank", "sets": 3, "reps": "30-60 sec", "rest": 45, "notes": "Hold position"},
    {"name": "Lunges", "sets": 3, "reps": "10 each leg", "rest": 60, "notes": "Step forward"},
    {"name": "Mountain Climbers", "sets": 3, "reps": "20", "rest": 45, "notes": "Fast pace"},
    {"name": "Burpees", "sets": 3, "reps": "8-10", "rest": 90, "notes": "Full extension"},
]

GOAL_NAMES = {
    "weight_loss": "Fat Burn",
    "muscle_gain": "Muscle Builder",
    "strength": "Strength Training",
    "endurance": "Endurance",
    "flexibility": "Flexibility",
    "general_fitness": "General Fitness",
}

DAYS_PER_WEEK = 7


class PlanGenerationError(Exception):
    """The AI path could not produce a plan."""


@dataclass
class UserProfileContext:
    """Stored profile data added to the prompt as supplementary context."""
    fitness_level: Optional[str] = None
    injuries: Optional[str] = None


@dataclass
class GeneratedPlan:
    title: str
    description: str
    data: Dict[str, Any] = field(default_factory=lambda: {"weeks": []})


_openai_client: Optional[OpenAI] = None


def is_ai_configured() -> bool:
    """True when an OpenAI API key is configured."""
    return bool(settings.OPENAI_API_KEY)


def get_openai_client() -> Optional[OpenAI]:
    """Process-wide client, created on first use. None without an API key."""
    global _openai_client
    if not is_ai_configured():
        return None
    if _openai_client is None:
        _openai_client = OpenAI(api_key=settings.OPENAI_API_KEY)
    return _openai_client


def build_plan_prompt(params: GeneratePlanRequest, profile: Optional[UserProfileContext] = None) -> str:
    minutes = params.time_per_day or DEFAULT_MINUTES_PER_DAY
    equipment = ", ".join(params.equipment) if params.equipment else "Bodyweight only"
    injuries_line = f"Injuries/Limitations to avoid: {params.injuries}" if params.injuries else ""
    profile_line = ""
    if profile and profile.injuries:
        profile_line = f"Additional limitations: {profile.injuries}"
    if profile and profile.fitness_level and profile.fitness_level != params.level:
        profile_line += f"\nProfile fitness level: {profile.fitness_level}"

    return f"""You are a professional fitness coach. Create a detailed {params.duration_weeks}-week workout plan with the following requirements:

Goal: {params.goal}
Fitness Level: {params.level}
Workouts per Week: {params.frequency_per_week}
Time per Workout: {minutes} minutes
Available Equipment: {equipment}
{injuries_line}
{profile_line}

Create a structured workout plan with the following JSON format:
{{
  "title": "Plan title",
  "description": "Brief description of the plan",
  "weeks": [
    {{
      "weekNumber": 1,
      "days": [
        {{
          "dayNumber": 1,
          "name": "Upper Body Strength",
          "restDay": false,
          "exercises": [
            {{
              "name": "Push-ups",
              "sets": 3,
              "reps": "10-12",
              "rest": 60,
              "notes": "Keep core tight"
            }}
          ]
        }}
      ]
    }}
  ]
}}

Include rest days appropriately. Ensure progressive overload across weeks. Return ONLY valid JSON, no other text."""


def generate_ai_plan(
    params: GeneratePlanRequest,
    profile: Optional[UserProfileContext] = None,
    client: Optional[OpenAI] = None,
) -> GeneratedPlan:
    """
    Ask the model for a plan.

    Raises:
        PlanGenerationError: no client configured, the request failed, or
        the response was empty or not a JSON object.
    """
    client = client or get_openai_client()
    if client is None:
        raise PlanGenerationError("OpenAI API key not configured")

    prompt = build_plan_prompt(params, profile)

    try:
        completion = client.chat.completions.create(
            model=settings.OPENAI_MODEL,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            response_format={"type": "json_object"},
            max_tokens=settings.OPENAI_MAX_TOKENS,
        )
        content = completion.choices[0].message.content if completion.choices else None
    except Exception as e:
        raise PlanGenerationError(f"OpenAI request failed: {e}") from e

    if not content:
        raise PlanGenerationError("No content in OpenAI response")

    try:
        parsed = json.loads(content)
    except json.JSONDecodeError as e:
        raise PlanGenerationError(f"OpenAI response is not valid JSON: {e}") from e

    if not isinstance(parsed, dict):
        raise PlanGenerationError("OpenAI response JSON is not an object")

    return GeneratedPlan(
        title=parsed.get("title") or f"{params.goal} Plan",
        description=parsed.get("description")
        or f"A {params.duration_weeks}-week {params.level.lower()} {params.goal} program",
        data={"weeks": parsed.get("weeks") or []},
    )


def generate_fallback_plan(params: GeneratePlanRequest) -> GeneratedPlan:
    """
    Deterministic template plan.

    Days 1..frequency of every week are training days alternating between
    "Full Body Workout A" and "B"; the rest are rest days. Odd weeks get
    five exercises, even weeks four.
    """
    weeks = []
    for week_number in range(1, params.duration_weeks + 1):
        exercise_count = min(4 + (week_number % 2), len(FALLBACK_EXERCISES))
        days = []
        for day_number in range(1, DAYS_PER_WEEK + 1):
            if day_number <= params.frequency_per_week:
                days.append({
                    "dayNumber": day_number,
                    "name": "Full Body Workout A" if day_number % 2 == 1 else "Full Body Workout B",
                    "exercises": [dict(e) for e in FALLBACK_EXERCISES[:exercise_count]],
                    "restDay": False,
                })
            else:
                days.append({
                    "dayNumber": day_number,
                    "name": "Rest Day",
                    "exercises": [],
                    "restDay": True,
                })
        weeks.append({"weekNumber": week_number, "days": days})

    goal_name = GOAL_NAMES.get(params.goal, "Fitness")
    return GeneratedPlan(
        title=f"{goal_name} {params.duration_weeks}-Week Plan",
        description=(
            f"A {params.level.lower()} {params.duration_weeks}-week program focusing on "
            f"{params.goal.replace('_', ' ', 1)}. Train {params.frequency_per_week} days per week."
        ),
        data={"weeks": weeks},
    )


def generate_plan(
    params: GeneratePlanRequest,
    profile: Optional[UserProfileContext] = None,
) -> GeneratedPlan:
    """AI plan when a key is configured, template plan otherwise or on failure."""
    client = get_openai_client()
    if client is None:
        return generate_fallback_plan(params)

    try:
        return generate_ai_plan(params, profile, client=client)
    except PlanGenerationError as e:
        logger.error(
            f"OpenAI generation failed, using fallback: {e}",
            extra={"extra_fields": {"goal": params.goal, "duration_weeks": params.duration_weeks}},
        )
        return generate_fallback_plan(params)
