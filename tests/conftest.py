import os
from pathlib import Path
import sys

import pytest

# Keep Kivy from parsing pytest's command line and from writing log files
os.environ.setdefault("KIVY_NO_ARGS", "1")
os.environ.setdefault("KIVY_NO_FILELOG", "1")
os.environ.setdefault("KIVY_NO_CONSOLELOG", "1")

sys.path.append(str(Path(__file__).resolve().parents[1]))

from backend import settings  # noqa: E402
from backend.models import (  # noqa: E402
    ExercisePrescription,
    ExerciseRecord,
    WorkoutTemplate,
)


class FakeEvent:
    def __init__(self, callback, interval):
        self.callback = callback
        self.interval = interval
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class FakeClock:
    """Stand-in for ``kivy.clock.Clock`` advanced explicitly by tests."""

    def __init__(self):
        self.events: list[FakeEvent] = []

    def schedule_interval(self, callback, interval):
        event = FakeEvent(callback, interval)
        self.events.append(event)
        return event

    @property
    def active_events(self) -> list[FakeEvent]:
        return [e for e in self.events if not e.cancelled]

    def advance(self, seconds: int = 1) -> None:
        for _ in range(seconds):
            for event in list(self.events):
                if not event.cancelled:
                    event.callback(1.0)


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path: Path, monkeypatch):
    """Point the settings file at a temporary location for every test."""
    monkeypatch.setattr(settings, "SETTINGS_PATH", tmp_path / "settings.json")
    monkeypatch.setattr(settings, "_settings_cache", None)
    return tmp_path / "settings.json"


@pytest.fixture
def push_day() -> WorkoutTemplate:
    """Two exercises with three sets each; push-ups are bodyweight."""
    return WorkoutTemplate(
        name="Push Day",
        day="Monday",
        exercises=(
            ExercisePrescription("Bench Press", sets=3, reps=10, weight=100),
            ExercisePrescription("Push-up", sets=3, reps=12),
        ),
    )


@pytest.fixture
def sample_exercises() -> list[ExerciseRecord]:
    return [
        ExerciseRecord(
            id="1",
            name="Paused Barbell Bench Press",
            primary_muscle_group="Chest",
            sub_muscles=("Mid Chest",),
            equipment=("Barbell", "Bench"),
            movement_patterns=("Horizontal Push",),
        ),
        ExerciseRecord(
            id="2",
            name="Incline Dumbbell Bench Press",
            primary_muscle_group="Chest",
            sub_muscles=("Upper Chest",),
            secondary_muscle_groups=("Shoulders",),
            equipment=("Dumbbell", "Bench"),
            movement_patterns=("Horizontal Push",),
        ),
        ExerciseRecord(
            id="3",
            name="Back Squat",
            aliases=("Squat",),
            primary_muscle_group="Legs",
            sub_muscles=("Quadriceps", "Glutes"),
            equipment=("Barbell",),
            movement_patterns=("Squat",),
        ),
        ExerciseRecord(
            id="4",
            name="Pull-up",
            description="Hang from a bar and pull the chin over it.",
            primary_muscle_group="Back",
            sub_muscles=("Lats",),
            secondary_muscle_groups=("Biceps",),
            equipment=("Pull-up Bar",),
            movement_patterns=("Vertical Pull",),
        ),
        ExerciseRecord(
            id="5",
            name="Wide Pull-up",
            primary_muscle_group="Back",
            sub_muscles=("Lats",),
            equipment=("Pull-up Bar",),
            movement_patterns=("Vertical Pull",),
        ),
    ]
