"""
Starter exercise library.

Seeded once into an empty `exercises` table, either through
POST /api/seed/exercises or scripts/seed_exercises.py.
"""
import logging
from typing import Any, Dict, List, Tuple

from sqlalchemy.orm import Session

from services import storage

logger = logging.getLogger(__name__)


def _exercise(name, description, instructions, primary, secondary, equipment, difficulty) -> Dict[str, Any]:
    return {
        "name": name,
        "description": description,
        "instructions": instructions,
        "primary_muscle": primary,
        "secondary_muscles": secondary,
        "equipment": equipment,
        "difficulty": difficulty,
    }


SEED_EXERCISES: List[Dict[str, Any]] = [
    _exercise(
        "Push-ups",
        "Classic upper body exercise targeting chest, shoulders, and triceps",
        "Start in plank position with hands shoulder-width apart. Lower your body until chest nearly touches the floor. Push back up to starting position.",
        "Chest", ["Shoulders", "Triceps"], "BODYWEIGHT", "BEGINNER",
    ),
    _exercise(
        "Squats",
        "Fundamental lower body exercise for legs and glutes",
        "Stand with feet shoulder-width apart. Bend knees and lower hips as if sitting in a chair. Keep chest up and knees over toes. Return to standing.",
        "Legs", ["Glutes", "Core"], "BODYWEIGHT", "BEGINNER",
    ),
    _exercise(
        "Plank",
        "Core stabilization exercise for abs and back",
        "Start in push-up position on forearms. Keep body in straight line from head to heels. Hold position maintaining tight core.",
        "Core", ["Shoulders", "Back"], "BODYWEIGHT", "BEGINNER",
    ),
    _exercise(
        "Lunges",
        "Single-leg exercise for legs and balance",
        "Step forward with one leg. Lower hips until both knees are bent at 90 degrees. Push back to starting position. Alternate legs.",
        "Legs", ["Glutes", "Core"], "BODYWEIGHT", "BEGINNER",
    ),
    _exercise(
        "Burpees",
        "Full-body explosive exercise for cardio and strength",
        "Start standing. Drop to push-up position. Perform push-up. Jump feet to hands. Jump up with arms overhead.",
        "Legs", ["Chest", "Core"], "BODYWEIGHT", "INTERMEDIATE",
    ),
    _exercise(
        "Mountain Climbers",
        "Dynamic core and cardio exercise",
        "Start in plank position. Drive one knee toward chest. Quickly switch legs in running motion. Keep hips level.",
        "Core", ["Shoulders", "Legs"], "BODYWEIGHT", "BEGINNER",
    ),
    _exercise(
        "Dumbbell Bench Press",
        "Chest building exercise with dumbbells",
        "Lie on bench holding dumbbells at chest level. Press weights up until arms are extended. Lower with control.",
        "Chest", ["Shoulders", "Triceps"], "DUMBBELL", "INTERMEDIATE",
    ),
    _exercise(
        "Dumbbell Rows",
        "Back exercise for lats and upper back",
        "Hinge at hips with dumbbell in one hand. Pull dumbbell to hip, squeezing back. Lower with control.",
        "Back", ["Biceps", "Core"], "DUMBBELL", "BEGINNER",
    ),
    _exercise(
        "Dumbbell Shoulder Press",
        "Overhead pressing for shoulder development",
        "Hold dumbbells at shoulder height. Press overhead until arms are extended. Lower with control.",
        "Shoulders", ["Triceps", "Core"], "DUMBBELL", "BEGINNER",
    ),
    _exercise(
        "Goblet Squat",
        "Squat variation with dumbbell for added resistance",
        "Hold dumbbell at chest level. Squat down keeping chest up. Drive through heels to stand.",
        "Legs", ["Glutes", "Core"], "DUMBBELL", "BEGINNER",
    ),
    _exercise(
        "Barbell Squat",
        "Compound leg exercise with barbell",
        "Position barbell on upper back. Squat down until thighs are parallel. Drive through heels to stand.",
        "Legs", ["Glutes", "Back", "Core"], "BARBELL", "INTERMEDIATE",
    ),
    _exercise(
        "Barbell Deadlift",
        "Full posterior chain exercise",
        "Stand with barbell over mid-foot. Hinge at hips to grip bar. Drive through floor to stand up straight.",
        "Back", ["Legs", "Glutes", "Core"], "BARBELL", "INTERMEDIATE",
    ),
    _exercise(
        "Pull-ups",
        "Upper body pulling exercise for back and biceps",
        "Hang from bar with overhand grip. Pull body up until chin clears bar. Lower with control.",
        "Back", ["Biceps", "Shoulders"], "BODYWEIGHT", "INTERMEDIATE",
    ),
    _exercise(
        "Dips",
        "Triceps and chest exercise on parallel bars",
        "Support yourself on parallel bars. Lower body by bending elbows. Press back up to starting position.",
        "Triceps", ["Chest", "Shoulders"], "BODYWEIGHT", "INTERMEDIATE",
    ),
    _exercise(
        "Bicycle Crunches",
        "Rotational core exercise for abs and obliques",
        "Lie on back with hands behind head. Bring opposite elbow to knee while extending other leg. Alternate sides.",
        "Core", ["Legs"], "BODYWEIGHT", "BEGINNER",
    ),
]


def seed_exercises(db: Session) -> Tuple[bool, int]:
    """
    Insert the starter library if the table is empty.

    Returns (created, count): whether anything was inserted and how many
    exercises the library now holds (or already held).
    """
    existing = storage.get_exercises(db)
    if existing:
        return False, len(existing)

    for data in SEED_EXERCISES:
        storage.create_exercise(db, dict(data))

    logger.info(f"Seeded {len(SEED_EXERCISES)} exercises")
    return True, len(SEED_EXERCISES)
