"""Public entry point re-exporting the backend API."""

from __future__ import annotations

from backend import (
    DEFAULT_EXERCISE_DATA_PATH,
    DEFAULT_REST_DURATION,
    MAX_RPE,
    MIN_RPE,
)
from backend.exercise_grouping import (
    VARIATION_KEYWORDS,
    get_base_exercise_name,
    get_variation_names,
    group_exercises,
    has_variations,
    variation_badge,
)
from backend.exercises import (
    find_exercise,
    get_exercise_stats,
    load_exercises,
    search_exercise_groups,
    search_exercises,
)
from backend.models import (
    CompletedSet,
    ExerciseGroup,
    ExercisePrescription,
    ExerciseRecord,
    ExerciseSession,
    RestTimerState,
    SessionSummary,
    WorkoutSessionState,
    WorkoutTemplate,
)
from backend.session_controller import SessionController
from backend.workout_session import (
    ActionKind,
    PrimaryAction,
    SessionStatus,
    dispatch,
    finish,
    primary_action,
    start_session,
)
from backend.workouts import find_workout_for_day, generate_workout

__all__ = [
    "DEFAULT_EXERCISE_DATA_PATH",
    "DEFAULT_REST_DURATION",
    "MAX_RPE",
    "MIN_RPE",
    "VARIATION_KEYWORDS",
    "get_base_exercise_name",
    "get_variation_names",
    "group_exercises",
    "has_variations",
    "variation_badge",
    "find_exercise",
    "get_exercise_stats",
    "load_exercises",
    "search_exercise_groups",
    "search_exercises",
    "CompletedSet",
    "ExerciseGroup",
    "ExercisePrescription",
    "ExerciseRecord",
    "ExerciseSession",
    "RestTimerState",
    "SessionSummary",
    "WorkoutSessionState",
    "WorkoutTemplate",
    "SessionController",
    "ActionKind",
    "PrimaryAction",
    "SessionStatus",
    "dispatch",
    "finish",
    "primary_action",
    "start_session",
    "find_workout_for_day",
    "generate_workout",
]
