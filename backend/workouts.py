from __future__ import annotations

import logging
from typing import Iterable

from backend.models import ExercisePrescription, WorkoutTemplate

logger = logging.getLogger(__name__)

DEFAULT_FOCUS = "full body"
DEFAULT_DIFFICULTY = "intermediate"

# Rule-based templates keyed by workout focus.  Each item is a dict with
#   {'name': <exercise name>, 'sets': <int>, 'reps': <int>,
#    'weight': <optional lbs>, 'notes': <optional text>}
WORKOUT_FOCUS_TEMPLATES: dict[str, list[dict]] = {
    "upper body": [
        {"name": "Bench Press", "sets": 4, "reps": 8, "weight": 135},
        {"name": "Pull-ups", "sets": 3, "reps": 10},
        {"name": "Shoulder Press", "sets": 3, "reps": 10, "weight": 95},
        {"name": "Bicep Curls", "sets": 3, "reps": 12, "weight": 30},
        {"name": "Tricep Dips", "sets": 3, "reps": 12},
    ],
    "lower body": [
        {"name": "Squats", "sets": 4, "reps": 10, "weight": 185},
        {"name": "Deadlifts", "sets": 3, "reps": 8, "weight": 225},
        {"name": "Leg Press", "sets": 3, "reps": 12, "weight": 270},
        {"name": "Lunges", "sets": 3, "reps": 12, "weight": 45},
        {"name": "Calf Raises", "sets": 3, "reps": 15, "weight": 90},
    ],
    "cardio": [
        {"name": "Running", "sets": 1, "reps": 30, "notes": "30 minutes at moderate pace"},
        {"name": "Jump Rope", "sets": 5, "reps": 60, "notes": "60 seconds per set"},
        {"name": "Burpees", "sets": 3, "reps": 15},
        {"name": "Mountain Climbers", "sets": 3, "reps": 20, "notes": "20 per side"},
    ],
    "full body": [
        {"name": "Deadlifts", "sets": 4, "reps": 8, "weight": 225},
        {"name": "Bench Press", "sets": 3, "reps": 10, "weight": 135},
        {"name": "Squats", "sets": 3, "reps": 12, "weight": 185},
        {"name": "Pull-ups", "sets": 3, "reps": 10},
        {"name": "Overhead Press", "sets": 3, "reps": 10, "weight": 95},
        {"name": "Plank", "sets": 3, "reps": 1, "notes": "Hold for 60 seconds"},
    ],
}


def find_workout_for_day(
    templates: Iterable[WorkoutTemplate], day: str
) -> WorkoutTemplate | None:
    """Return the template planned for ``day`` or ``None`` if nothing is planned."""

    wanted = day.strip().lower()
    for template in templates:
        if template.day and template.day.strip().lower() == wanted:
            return template
    return None


def _adjust_for_difficulty(item: dict, difficulty: str) -> dict:
    adjusted = dict(item)
    weight = adjusted.get("weight")
    if difficulty == "beginner":
        adjusted["sets"] = max(2, adjusted["sets"] - 1)
        adjusted["reps"] = max(8, adjusted["reps"] - 2)
        if weight:
            adjusted["weight"] = max(45, weight * 0.6)
    elif difficulty == "advanced":
        adjusted["sets"] = adjusted["sets"] + 1
        adjusted["reps"] = adjusted["reps"] + 2
        if weight:
            adjusted["weight"] = weight * 1.3
    return adjusted


def generate_workout(
    day: str | None = None,
    focus: str | None = None,
    difficulty: str | None = None,
) -> WorkoutTemplate:
    """Build a workout for ``focus`` scaled to ``difficulty``.

    Unknown focus values fall back to a full body workout.  The name is the
    capitalised focus followed by ``Workout`` and, when given, the day.
    """

    focus = focus or DEFAULT_FOCUS
    difficulty = difficulty or DEFAULT_DIFFICULTY
    items = WORKOUT_FOCUS_TEMPLATES.get(focus)
    if items is None:
        logger.debug("Unknown workout focus %r, using %r", focus, DEFAULT_FOCUS)
        items = WORKOUT_FOCUS_TEMPLATES[DEFAULT_FOCUS]

    exercises = tuple(
        ExercisePrescription.from_dict(_adjust_for_difficulty(item, difficulty))
        for item in items
    )
    name = f"{focus[:1].upper()}{focus[1:]} Workout"
    if day:
        name = f"{name} - {day}"
    return WorkoutTemplate(name=name, day=day, exercises=exercises)
