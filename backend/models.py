"""Records shared by the grouping and session engines.

Exercise records and workout templates are immutable inputs supplied by the
catalogue and storage layers.  The per-set and per-exercise session records
are mutable but are only ever changed on a private copy inside the session
reducer, see :mod:`backend.workout_session`.

``from_dict`` accepts the camelCase keys used by the catalogue JSON and the
workout API as well as their snake_case spelling.  ``to_dict`` always emits
camelCase so payloads round-trip with the storage collaborator.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from backend import DEFAULT_REST_DURATION, MAX_RPE, MIN_RPE


def _pick(data: dict, camel: str, snake: str, default: Any = None) -> Any:
    if camel in data:
        return data[camel]
    return data.get(snake, default)


def _strings(values) -> tuple[str, ...]:
    if not values:
        return ()
    if isinstance(values, str):
        return (values,)
    return tuple(str(v) for v in values)


def _check_weight(weight) -> None:
    if weight is not None and weight < 0:
        raise ValueError(f"Weight must be >= 0, got {weight}")


def _check_rpe(rpe) -> None:
    if rpe is not None and not (
        isinstance(rpe, int)
        and not isinstance(rpe, bool)
        and MIN_RPE <= rpe <= MAX_RPE
    ):
        raise ValueError(f"RPE must be an integer in [{MIN_RPE}, {MAX_RPE}], got {rpe!r}")


@dataclass(frozen=True)
class ExerciseRecord:
    """One catalogue exercise with its categories already resolved to names."""

    id: str
    name: str
    primary_muscle_group: str = ""
    sub_muscles: tuple[str, ...] = ()
    secondary_muscle_groups: tuple[str, ...] = ()
    equipment: tuple[str, ...] = ()
    movement_patterns: tuple[str, ...] = ()
    aliases: tuple[str, ...] = ()
    description: Optional[str] = None
    difficulty: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("Exercise record requires an id")

    @classmethod
    def from_dict(cls, data: dict) -> "ExerciseRecord":
        return cls(
            id=str(data["id"]),
            name=data.get("name") or "",
            primary_muscle_group=_pick(data, "primaryMuscleGroup", "primary_muscle_group", ""),
            sub_muscles=_strings(_pick(data, "subMuscles", "sub_muscles")),
            secondary_muscle_groups=_strings(
                _pick(data, "secondaryMuscleGroups", "secondary_muscle_groups")
            ),
            equipment=_strings(data.get("equipment")),
            movement_patterns=_strings(_pick(data, "movementPatterns", "movement_patterns")),
            aliases=_strings(data.get("aliases")),
            description=data.get("description"),
            difficulty=data.get("difficulty"),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "aliases": list(self.aliases),
            "description": self.description,
            "primaryMuscleGroup": self.primary_muscle_group,
            "subMuscles": list(self.sub_muscles),
            "secondaryMuscleGroups": list(self.secondary_muscle_groups),
            "equipment": list(self.equipment),
            "movementPatterns": list(self.movement_patterns),
            "difficulty": self.difficulty,
        }


@dataclass(frozen=True)
class ExerciseGroup:
    """Exercises sharing a base name, displayed as a single card."""

    base_name: str
    exercises: tuple[ExerciseRecord, ...]
    primary_exercise: ExerciseRecord


@dataclass(frozen=True)
class ExercisePrescription:
    """Planned sets, reps and weight for one exercise of a workout."""

    name: str
    sets: int
    reps: int
    weight: Optional[float] = None
    notes: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Prescription requires an exercise name")
        if self.sets < 1:
            raise ValueError(f"Sets must be >= 1, got {self.sets}")
        if self.reps < 1:
            raise ValueError(f"Reps must be >= 1, got {self.reps}")
        _check_weight(self.weight)

    @classmethod
    def from_dict(cls, data: dict) -> "ExercisePrescription":
        return cls(
            name=data["name"],
            sets=int(data["sets"]),
            reps=int(data["reps"]),
            weight=data.get("weight"),
            notes=data.get("notes"),
        )

    def to_dict(self) -> dict:
        out = {"name": self.name, "sets": self.sets, "reps": self.reps}
        if self.weight is not None:
            out["weight"] = self.weight
        if self.notes:
            out["notes"] = self.notes
        return out


@dataclass(frozen=True)
class WorkoutTemplate:
    """A planned workout: a name, an optional day and ordered prescriptions."""

    name: str
    exercises: tuple[ExercisePrescription, ...] = ()
    day: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.exercises:
            raise ValueError(f"Workout '{self.name}' has no exercises")

    @classmethod
    def from_dict(cls, data: dict) -> "WorkoutTemplate":
        return cls(
            name=data["name"],
            day=data.get("day"),
            exercises=tuple(
                ExercisePrescription.from_dict(ex) for ex in data.get("exercises", [])
            ),
        )

    def to_dict(self) -> dict:
        out = {
            "name": self.name,
            "exercises": [ex.to_dict() for ex in self.exercises],
        }
        if self.day:
            out["day"] = self.day
        return out


@dataclass
class CompletedSet:
    """A single logged set.  ``set_number`` is always position + 1."""

    set_number: int
    reps: int
    weight: Optional[float] = None
    rpe: Optional[int] = None
    completed: bool = False
    notes: Optional[str] = None

    def __post_init__(self) -> None:
        if self.reps < 1:
            raise ValueError(f"Reps must be >= 1, got {self.reps}")
        _check_weight(self.weight)
        _check_rpe(self.rpe)

    def to_dict(self) -> dict:
        return {
            "setNumber": self.set_number,
            "reps": self.reps,
            "weight": self.weight,
            "rpe": self.rpe,
            "completed": self.completed,
            "notes": self.notes,
        }


@dataclass
class ExerciseSession:
    """Live log for one prescription of the workout."""

    exercise_index: int
    exercise: ExercisePrescription
    completed_sets: list[CompletedSet] = field(default_factory=list)
    notes: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "exerciseIndex": self.exercise_index,
            "exercise": self.exercise.to_dict(),
            "completedSets": [s.to_dict() for s in self.completed_sets],
            "notes": self.notes,
        }


@dataclass(frozen=True)
class RestTimerState:
    active: bool = False
    seconds: int = 0
    paused: bool = False


@dataclass
class WorkoutSessionState:
    """Root of a live workout.

    ``rest_duration`` and ``carry_forward`` are fixed for the lifetime of the
    session and come from the user's settings when not given explicitly.
    """

    workout: WorkoutTemplate
    exercise_sessions: list[ExerciseSession]
    start_time: float
    current_exercise_index: int = 0
    rest_timer: RestTimerState = field(default_factory=RestTimerState)
    rest_duration: int = DEFAULT_REST_DURATION
    carry_forward: bool = True
    overall_notes: Optional[str] = None

    def __post_init__(self) -> None:
        if len(self.exercise_sessions) != len(self.workout.exercises):
            raise ValueError("Exercise sessions must match the workout's exercises")


@dataclass(frozen=True)
class SessionSummary:
    """Final figures of a finished session, ready to be stored."""

    workout: WorkoutTemplate
    exercise_sessions: tuple[ExerciseSession, ...]
    start_time: float
    end_time: float
    total_time: int
    total_sets: int
    total_volume: float
    overall_notes: Optional[str] = None
    per_exercise_notes: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Return a JSON-serialisable representation of the summary."""

        return {
            "workout": self.workout.to_dict(),
            "exerciseSessions": [s.to_dict() for s in self.exercise_sessions],
            "startTime": self.start_time,
            "endTime": self.end_time,
            "totalTime": self.total_time,
            "totalSets": self.total_sets,
            "totalVolume": self.total_volume,
            "overallNotes": self.overall_notes,
            "perExerciseNotes": {str(k): v for k, v in self.per_exercise_notes.items()},
        }
