"""Collapse near-duplicate exercises into families for the search results.

``Barbell Bench Press`` and ``Paused Bench Press`` both reduce to the base
name ``Bench Press`` once the variation keywords are stripped, so they are
shown as one card with the other names listed as variations.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Iterable

from backend import MIN_BASE_NAME_LENGTH
from backend.models import ExerciseGroup, ExerciseRecord

# Terms describing how an exercise is performed rather than what it is:
# tempo, angle, grip/stance, laterality, contraction type, position, equipment.
VARIATION_KEYWORDS = [
    "paused", "pause",
    "tempo", "slow", "fast",
    "incline", "decline", "flat",
    "wide", "narrow", "close",
    "single", "one", "unilateral",
    "double", "two", "bilateral",
    "alternating", "alt",
    "concentric", "eccentric",
    "isometric", "iso",
    "explosive", "plyometric",
    "reverse", "negative",
    "45-degree", "45 degree", "45°",
    "90-degree", "90 degree", "90°",
    "seated", "standing", "lying",
    "dumbbell", "barbell", "cable", "machine",
]

# Keyword boundaries are checked against word characters on either side so
# that keywords ending in a symbol (``45°``) still match.
_KEYWORD_PATTERNS = [
    re.compile(rf"(?<!\w){re.escape(keyword)}(?!\w)", re.IGNORECASE)
    for keyword in VARIATION_KEYWORDS
]
_WHITESPACE = re.compile(r"\s+")


@lru_cache(maxsize=4096)
def get_base_exercise_name(exercise_name: str) -> str:
    """Return the family name of ``exercise_name``.

    Variation keywords are removed, whitespace is collapsed and each word is
    capitalised.  When nothing meaningful is left (fewer than
    :data:`~backend.MIN_BASE_NAME_LENGTH` characters) the original name is
    returned untouched.
    """

    base = exercise_name.lower()
    for pattern in _KEYWORD_PATTERNS:
        base = pattern.sub("", base)
    base = _WHITESPACE.sub(" ", base).strip()

    if len(base) < MIN_BASE_NAME_LENGTH:
        return exercise_name

    return " ".join(word[:1].upper() + word[1:] for word in base.split(" "))


def _sort_key(group: ExerciseGroup) -> tuple[str, str]:
    return group.base_name.casefold(), group.base_name


def group_exercises(exercises: Iterable[ExerciseRecord]) -> list[ExerciseGroup]:
    """Group ``exercises`` by base name, sorted by base name.

    The primary exercise of each group is the one with the shortest name;
    on ties the first one encountered wins.
    """

    buckets: dict[str, list[ExerciseRecord]] = {}
    for exercise in exercises:
        buckets.setdefault(get_base_exercise_name(exercise.name), []).append(exercise)

    groups = []
    for base_name, members in buckets.items():
        primary = members[0]
        for candidate in members[1:]:
            if len(candidate.name) < len(primary.name):
                primary = candidate
        groups.append(
            ExerciseGroup(
                base_name=base_name,
                exercises=tuple(members),
                primary_exercise=primary,
            )
        )

    groups.sort(key=_sort_key)
    return groups


def has_variations(group: ExerciseGroup) -> bool:
    return len(group.exercises) > 1


def get_variation_names(group: ExerciseGroup) -> list[str]:
    """Return the distinct names of the non-primary exercises in ``group``.

    Exercises are skipped when they are the primary exercise or merely share
    its name.  Names are compared trimmed and case-insensitively and the first
    spelling seen is kept, so the result can be shorter than
    ``len(group.exercises) - 1``.
    """

    if len(group.exercises) <= 1:
        return []

    primary = group.primary_exercise
    primary_name = primary.name.strip().lower()
    seen: set[str] = set()
    names: list[str] = []
    for exercise in group.exercises:
        if exercise.id == primary.id:
            continue
        normalized = exercise.name.strip().lower()
        if normalized == primary_name or normalized in seen:
            continue
        seen.add(normalized)
        names.append(exercise.name)
    return names


def variation_badge(group: ExerciseGroup) -> str:
    """Return the ``"N variant(s)"`` label for ``group`` or ``""``."""

    count = len(get_variation_names(group))
    if not count:
        return ""
    return f"{count} variant" if count == 1 else f"{count} variants"
