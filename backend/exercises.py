"""Exercise catalogue helpers.

The catalogue is a static JSON file whose category IDs have already been
resolved to display names.  It is read once at startup and searched in
memory; search results are handed to :mod:`backend.exercise_grouping`.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterable, Sequence

import backend
from backend import DEFAULT_EXERCISE_DATA_PATH
from backend.exercise_grouping import group_exercises
from backend.models import ExerciseGroup, ExerciseRecord

logger = logging.getLogger(__name__)


def load_exercises(data_path: Path = DEFAULT_EXERCISE_DATA_PATH) -> list[ExerciseRecord]:
    """Load the catalogue from ``data_path`` into :data:`backend.EXERCISE_CATALOGUE`.

    A missing or malformed file is logged and results in an empty catalogue.
    """

    try:
        with Path(data_path).open("r", encoding="utf-8") as fh:
            raw = json.load(fh)
        exercises = [ExerciseRecord.from_dict(item) for item in raw]
    except FileNotFoundError:
        logger.exception("Exercise data file not found: %s", data_path)
        exercises = []
    except (json.JSONDecodeError, KeyError, TypeError, ValueError):
        logger.exception("Exercise data file is invalid: %s", data_path)
        exercises = []
    else:
        logger.info("Loaded %d exercises from %s", len(exercises), data_path)

    backend.EXERCISE_CATALOGUE = exercises
    return exercises


def _searchable_text(exercise: ExerciseRecord) -> str:
    return " ".join(
        [
            exercise.name,
            *exercise.aliases,
            exercise.description or "",
            exercise.primary_muscle_group,
            *exercise.sub_muscles,
            *exercise.secondary_muscle_groups,
        ]
    ).lower()


def search_exercises(
    exercises: Iterable[ExerciseRecord],
    query: str | None = None,
    *,
    muscle_groups: Sequence[str] | None = None,
    sub_muscles: Sequence[str] | None = None,
    equipment: Sequence[str] | None = None,
    movement_patterns: Sequence[str] | None = None,
) -> list[ExerciseRecord]:
    """Return the exercises matching every given filter.

    ``query`` is matched case-insensitively against the name, aliases,
    description and muscle fields.  ``muscle_groups`` restricts the primary
    muscle group; the other filters match when the exercise has any of the
    listed values.  Empty filters are ignored and input order is kept.
    """

    results = list(exercises)

    if query and query.strip():
        needle = query.strip().lower()
        results = [ex for ex in results if needle in _searchable_text(ex)]

    if muscle_groups:
        results = [ex for ex in results if ex.primary_muscle_group in muscle_groups]

    if sub_muscles:
        results = [
            ex for ex in results if any(m in ex.sub_muscles for m in sub_muscles)
        ]

    if equipment:
        results = [ex for ex in results if any(e in ex.equipment for e in equipment)]

    if movement_patterns:
        results = [
            ex
            for ex in results
            if any(p in ex.movement_patterns for p in movement_patterns)
        ]

    return results


def search_exercise_groups(
    exercises: Iterable[ExerciseRecord], query: str | None = None, **filters
) -> list[ExerciseGroup]:
    """Search ``exercises`` and group the matches for display."""

    return group_exercises(search_exercises(exercises, query, **filters))


def find_exercise(
    exercises: Iterable[ExerciseRecord], exercise_id: str
) -> ExerciseRecord | None:
    for exercise in exercises:
        if exercise.id == exercise_id:
            return exercise
    return None


def get_exercise_stats(exercises: Iterable[ExerciseRecord]) -> dict:
    """Return counts of exercises per muscle group, equipment and pattern."""

    stats = {
        "total": 0,
        "by_muscle_group": {},
        "by_equipment": {},
        "by_movement_pattern": {},
    }
    for exercise in exercises:
        stats["total"] += 1
        by_muscle = stats["by_muscle_group"]
        by_muscle[exercise.primary_muscle_group] = (
            by_muscle.get(exercise.primary_muscle_group, 0) + 1
        )
        for item in exercise.equipment:
            stats["by_equipment"][item] = stats["by_equipment"].get(item, 0) + 1
        for pattern in exercise.movement_patterns:
            stats["by_movement_pattern"][pattern] = (
                stats["by_movement_pattern"].get(pattern, 0) + 1
            )
    return stats
