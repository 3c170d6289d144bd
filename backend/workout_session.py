"""Live workout session engine.

A session is a :class:`~backend.models.WorkoutSessionState` value.  Every
operation below is a reducer: it takes the current state and returns the next
one without touching its argument.  Operations that are not allowed in the
current state (removing the only set, advancing past the last exercise,
an out-of-range RPE) are silent no-ops and return the very same object, so
``new is old`` tells the caller nothing changed.

Derived values such as the primary action or the progress are never stored;
they are recomputed from the state on demand.
"""

from __future__ import annotations

import copy
import logging
import time
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from backend import DEFAULT_REST_DURATION, MAX_RPE, MIN_RPE
from backend import rest_timer
from backend.models import (
    CompletedSet,
    ExerciseSession,
    SessionSummary,
    WorkoutSessionState,
    WorkoutTemplate,
)

logger = logging.getLogger(__name__)

EDITABLE_SET_FIELDS = ("reps", "weight", "rpe")


class SessionStatus(Enum):
    IN_PROGRESS = "in_progress"
    ALL_SETS_COMPLETE = "all_sets_complete"
    FINISHED = "finished"


class ActionKind(Enum):
    COMPLETE_SET = "complete_set"
    NEXT_EXERCISE = "next_exercise"
    FINISH_WORKOUT = "finish_workout"


@dataclass(frozen=True)
class PrimaryAction:
    """What the main button of the session screen does right now."""

    kind: ActionKind
    label: str
    exercise_index: int
    set_index: Optional[int] = None


# ----------------------------------------------------------------------
# Helpers
# ----------------------------------------------------------------------


def _copy(state: WorkoutSessionState) -> WorkoutSessionState:
    # The template is immutable and shared between all states of a session.
    return copy.deepcopy(state, {id(state.workout): state.workout})


def _exercise(state: WorkoutSessionState, exercise_index: int) -> ExerciseSession:
    if exercise_index < 0 or exercise_index >= len(state.exercise_sessions):
        raise IndexError("Invalid exercise index")
    return state.exercise_sessions[exercise_index]


def _set(
    state: WorkoutSessionState, exercise_index: int, set_index: int
) -> CompletedSet:
    sets = _exercise(state, exercise_index).completed_sets
    if set_index < 0 or set_index >= len(sets):
        raise IndexError("Invalid set index")
    return sets[set_index]


def _renumber(sets: list[CompletedSet]) -> None:
    for position, completed_set in enumerate(sets, 1):
        completed_set.set_number = position


# ----------------------------------------------------------------------
# Lifecycle
# ----------------------------------------------------------------------


def start_session(
    workout: WorkoutTemplate,
    *,
    rest_duration: int = DEFAULT_REST_DURATION,
    carry_forward: bool = True,
) -> WorkoutSessionState:
    """Create the initial state for performing ``workout``.

    Each prescription gets its planned number of sets, pre-filled with the
    planned reps and weight.
    """

    sessions = []
    for idx, prescription in enumerate(workout.exercises):
        sets = [
            CompletedSet(
                set_number=set_idx + 1,
                reps=prescription.reps,
                weight=prescription.weight,
            )
            for set_idx in range(prescription.sets)
        ]
        sessions.append(
            ExerciseSession(exercise_index=idx, exercise=prescription, completed_sets=sets)
        )

    logger.info(
        "Starting session for %r with %d exercises", workout.name, len(sessions)
    )
    return WorkoutSessionState(
        workout=workout,
        exercise_sessions=sessions,
        start_time=time.time(),
        rest_duration=rest_duration,
        carry_forward=carry_forward,
    )


def finish(
    state: WorkoutSessionState, overall_notes: Optional[str] = None
) -> SessionSummary:
    """Compute the summary handed to storage once the workout is over.

    ``overall_notes`` replaces any notes already held in the state.
    """

    end_time = time.time()
    notes = overall_notes if overall_notes is not None else state.overall_notes
    summary = SessionSummary(
        workout=state.workout,
        exercise_sessions=tuple(copy.deepcopy(state.exercise_sessions)),
        start_time=state.start_time,
        end_time=end_time,
        total_time=int(end_time - state.start_time),
        total_sets=completed_set_count(state),
        total_volume=total_volume(state),
        overall_notes=notes,
        per_exercise_notes={
            ex.exercise_index: ex.notes for ex in state.exercise_sessions if ex.notes
        },
    )
    logger.info(
        "Finished %r: %d sets, volume %s, %ss",
        state.workout.name,
        summary.total_sets,
        summary.total_volume,
        summary.total_time,
    )
    return summary


# ----------------------------------------------------------------------
# Set operations
# ----------------------------------------------------------------------


def toggle_set(
    state: WorkoutSessionState, exercise_index: int, set_index: int
) -> WorkoutSessionState:
    """Mark a set complete, or reopen it if it already was.

    Completing a set copies its reps and weight into the following set when
    that set is still open, then (re)starts the rest timer.  Reopening a set
    has no side effects.
    """

    _set(state, exercise_index, set_index)
    new = _copy(state)
    sets = new.exercise_sessions[exercise_index].completed_sets
    target = sets[set_index]
    target.completed = not target.completed
    if not target.completed:
        return new

    if new.carry_forward and set_index < len(sets) - 1:
        following = sets[set_index + 1]
        if not following.completed:
            following.reps = target.reps
            following.weight = target.weight
    new.rest_timer = rest_timer.start_rest(new.rest_timer, new.rest_duration)
    return new


def update_set(
    state: WorkoutSessionState,
    exercise_index: int,
    set_index: int,
    field: str,
    value,
) -> WorkoutSessionState:
    """Replace one numeric field of a set.

    Reps must be an integer and are clamped to at least 1; weight is clamped
    to at least 0 (``None`` means bodyweight).  RPE must be an integer in
    [1, 10] or ``None``.  Values of the wrong kind are ignored.
    """

    if field not in EDITABLE_SET_FIELDS:
        raise KeyError(f"Unknown set field '{field}'")
    _set(state, exercise_index, set_index)

    if field == "reps":
        if isinstance(value, bool) or not isinstance(value, int):
            logger.debug("Ignoring non-integer reps %r", value)
            return state
        value = max(1, value)
    elif field == "weight":
        value = None if value is None else max(0, value)
    elif value is not None and (
        isinstance(value, bool)
        or not isinstance(value, int)
        or not MIN_RPE <= value <= MAX_RPE
    ):
        logger.debug("Ignoring out of range RPE %r", value)
        return state

    new = _copy(state)
    setattr(new.exercise_sessions[exercise_index].completed_sets[set_index], field, value)
    return new


def add_set(state: WorkoutSessionState, exercise_index: int) -> WorkoutSessionState:
    """Append an open set using the last set's reps and weight."""

    _exercise(state, exercise_index)
    new = _copy(state)
    ex = new.exercise_sessions[exercise_index]
    if ex.completed_sets:
        reps, weight = ex.completed_sets[-1].reps, ex.completed_sets[-1].weight
    else:
        reps, weight = ex.exercise.reps, ex.exercise.weight
    ex.completed_sets.append(
        CompletedSet(set_number=len(ex.completed_sets) + 1, reps=reps, weight=weight)
    )
    return new


def last_set_completed(state: WorkoutSessionState, exercise_index: int) -> bool:
    """Return ``True`` if removing the last set would discard logged data."""

    sets = _exercise(state, exercise_index).completed_sets
    return bool(sets) and sets[-1].completed


def remove_set(state: WorkoutSessionState, exercise_index: int) -> WorkoutSessionState:
    """Drop the last set.  An exercise always keeps at least one set.

    Callers should confirm with the user first when :func:`last_set_completed`
    is true.
    """

    if len(_exercise(state, exercise_index).completed_sets) <= 1:
        logger.debug("Not removing the only set of exercise %d", exercise_index)
        return state
    new = _copy(state)
    sets = new.exercise_sessions[exercise_index].completed_sets
    sets.pop()
    _renumber(sets)
    return new


def apply_to_remaining_sets(
    state: WorkoutSessionState, exercise_index: int, set_index: int
) -> WorkoutSessionState:
    """Copy a set's reps and weight to the later sets of the same exercise.

    Sets that are already completed keep their logged values; use
    :func:`count_completed_after` to tell the user how many were skipped.
    """

    source = _set(state, exercise_index, set_index)
    new = _copy(state)
    for later in new.exercise_sessions[exercise_index].completed_sets[set_index + 1:]:
        if later.completed:
            continue
        later.reps = source.reps
        later.weight = source.weight
    return new


def count_completed_after(
    state: WorkoutSessionState, exercise_index: int, set_index: int
) -> int:
    _set(state, exercise_index, set_index)
    sets = state.exercise_sessions[exercise_index].completed_sets
    return sum(1 for s in sets[set_index + 1:] if s.completed)


# ----------------------------------------------------------------------
# Notes
# ----------------------------------------------------------------------


def set_set_notes(
    state: WorkoutSessionState, exercise_index: int, set_index: int, text: str
) -> WorkoutSessionState:
    _set(state, exercise_index, set_index)
    new = _copy(state)
    new.exercise_sessions[exercise_index].completed_sets[set_index].notes = text or None
    return new


def set_exercise_notes(
    state: WorkoutSessionState, exercise_index: int, text: str
) -> WorkoutSessionState:
    _exercise(state, exercise_index)
    new = _copy(state)
    new.exercise_sessions[exercise_index].notes = text or None
    return new


def set_overall_notes(state: WorkoutSessionState, text: str) -> WorkoutSessionState:
    return replace(state, overall_notes=text or None)


# ----------------------------------------------------------------------
# Navigation
# ----------------------------------------------------------------------


def has_next_exercise(state: WorkoutSessionState) -> bool:
    return state.current_exercise_index < len(state.exercise_sessions) - 1


def advance_exercise(state: WorkoutSessionState) -> WorkoutSessionState:
    """Move to the next exercise.  On the last exercise, finish instead."""

    if not has_next_exercise(state):
        logger.debug("No exercise after index %d", state.current_exercise_index)
        return state
    return replace(state, current_exercise_index=state.current_exercise_index + 1)


# ----------------------------------------------------------------------
# Rest timer
# ----------------------------------------------------------------------


def start_rest_timer(
    state: WorkoutSessionState, seconds: Optional[int] = None
) -> WorkoutSessionState:
    seconds = state.rest_duration if seconds is None else seconds
    return replace(state, rest_timer=rest_timer.start_rest(state.rest_timer, seconds))


def pause_rest_timer(state: WorkoutSessionState) -> WorkoutSessionState:
    timer = rest_timer.pause_rest(state.rest_timer)
    return state if timer is state.rest_timer else replace(state, rest_timer=timer)


def resume_rest_timer(state: WorkoutSessionState) -> WorkoutSessionState:
    timer = rest_timer.resume_rest(state.rest_timer)
    return state if timer is state.rest_timer else replace(state, rest_timer=timer)


def skip_rest_timer(state: WorkoutSessionState) -> WorkoutSessionState:
    timer = rest_timer.skip_rest(state.rest_timer)
    return state if timer is state.rest_timer else replace(state, rest_timer=timer)


def add_rest_time(state: WorkoutSessionState, delta: int) -> WorkoutSessionState:
    timer = rest_timer.add_rest_time(state.rest_timer, delta)
    return state if timer is state.rest_timer else replace(state, rest_timer=timer)


def tick_rest_timer(state: WorkoutSessionState) -> tuple[WorkoutSessionState, bool]:
    """Advance the rest timer one second; the flag is ``True`` when rest ends."""

    timer, finished = rest_timer.tick_rest(state.rest_timer)
    if timer is state.rest_timer:
        return state, False
    return replace(state, rest_timer=timer), finished


# ----------------------------------------------------------------------
# Derived state
# ----------------------------------------------------------------------


def current_exercise(state: WorkoutSessionState) -> ExerciseSession:
    return _exercise(state, state.current_exercise_index)


def first_incomplete_set_index(exercise: ExerciseSession) -> Optional[int]:
    for idx, completed_set in enumerate(exercise.completed_sets):
        if not completed_set.completed:
            return idx
    return None


def completed_set_count(state: WorkoutSessionState) -> int:
    return sum(
        1
        for ex in state.exercise_sessions
        for completed_set in ex.completed_sets
        if completed_set.completed
    )


def total_set_count(state: WorkoutSessionState) -> int:
    return sum(len(ex.completed_sets) for ex in state.exercise_sessions)


def session_status(state: WorkoutSessionState) -> SessionStatus:
    if completed_set_count(state) == total_set_count(state):
        return SessionStatus.ALL_SETS_COMPLETE
    return SessionStatus.IN_PROGRESS


def progress_fraction(state: WorkoutSessionState) -> float:
    total = total_set_count(state)
    if not total:
        return 0.0
    return completed_set_count(state) / total


def set_volume(completed_set: CompletedSet) -> float:
    """Return reps x weight for a completed weighted set, otherwise 0.

    Bodyweight sets (no weight or a weight of 0) never count towards volume.
    """

    if not completed_set.completed or not completed_set.weight:
        return 0
    return completed_set.reps * completed_set.weight


def total_volume(state: WorkoutSessionState) -> float:
    return sum(
        set_volume(completed_set)
        for ex in state.exercise_sessions
        for completed_set in ex.completed_sets
    )


def set_label(exercise: ExerciseSession, set_index: int) -> str:
    return f"Set {set_index + 1} of {len(exercise.completed_sets)}"


def exercise_progress_label(state: WorkoutSessionState) -> str:
    return (
        f"Exercise {state.current_exercise_index + 1} of "
        f"{len(state.exercise_sessions)}"
    )


def primary_action(
    state: WorkoutSessionState, focused_set_index: Optional[int] = None
) -> PrimaryAction:
    """Return the main action for the current exercise.

    The set considered is ``focused_set_index`` when given, else the first
    open set.  An open set is to be completed; otherwise the action moves on
    to the next exercise or, on the last one, finishes the workout.
    """

    ex_idx = state.current_exercise_index
    exercise = current_exercise(state)
    if focused_set_index is not None:
        _set(state, ex_idx, focused_set_index)
        set_idx = focused_set_index
    else:
        set_idx = first_incomplete_set_index(exercise)

    if set_idx is not None and not exercise.completed_sets[set_idx].completed:
        return PrimaryAction(
            ActionKind.COMPLETE_SET,
            f"Complete {set_label(exercise, set_idx)}",
            ex_idx,
            set_idx,
        )
    if has_next_exercise(state):
        upcoming = state.exercise_sessions[ex_idx + 1].exercise
        return PrimaryAction(
            ActionKind.NEXT_EXERCISE, f"Start {upcoming.name}", ex_idx + 1
        )
    return PrimaryAction(ActionKind.FINISH_WORKOUT, "Finish Workout", ex_idx)


def elapsed_seconds(state: WorkoutSessionState) -> int:
    """Wall-clock seconds since the session started."""
    return max(0, int(time.time() - state.start_time))


def format_elapsed(seconds: int) -> str:
    m, s = divmod(max(0, int(seconds)), 60)
    return f"{m:02d}:{s:02d}"


def updated_template(state: WorkoutSessionState) -> WorkoutTemplate:
    """Return the workout with each exercise's last logged reps and weight.

    Exercises without a completed set keep their original prescription.
    """

    prescriptions = []
    for ex in state.exercise_sessions:
        done = [s for s in ex.completed_sets if s.completed]
        if done:
            prescriptions.append(
                replace(ex.exercise, reps=done[-1].reps, weight=done[-1].weight)
            )
        else:
            prescriptions.append(ex.exercise)
    return replace(state.workout, exercises=tuple(prescriptions))


# ----------------------------------------------------------------------
# Reducer entry point
# ----------------------------------------------------------------------

ACTIONS = {
    "toggle_set": toggle_set,
    "update_set": update_set,
    "add_set": add_set,
    "remove_set": remove_set,
    "apply_to_remaining_sets": apply_to_remaining_sets,
    "advance_exercise": advance_exercise,
    "set_set_notes": set_set_notes,
    "set_exercise_notes": set_exercise_notes,
    "set_overall_notes": set_overall_notes,
    "start_rest": start_rest_timer,
    "pause_rest": pause_rest_timer,
    "resume_rest": resume_rest_timer,
    "skip_rest": skip_rest_timer,
    "add_rest_time": add_rest_time,
}


def dispatch(state: WorkoutSessionState, action: dict) -> WorkoutSessionState:
    """Apply ``action`` (``{"type": <name>, **params}``) to ``state``."""

    params = dict(action)
    action_type = params.pop("type", None)
    handler = ACTIONS.get(action_type)
    if handler is None:
        raise ValueError(f"Unknown session action '{action_type}'")
    return handler(state, **params)
