import pytest

from backend.exercise_grouping import (
    get_base_exercise_name,
    get_variation_names,
    group_exercises,
    has_variations,
    variation_badge,
)
from backend.exercises import load_exercises
from backend.models import ExerciseGroup, ExerciseRecord


@pytest.mark.parametrize(
    "name, expected",
    [
        ("Paused Barbell Bench Press", "Bench Press"),
        ("Incline Dumbbell Bench Press", "Bench Press"),
        ("PAUSED SQUAT", "Squat"),
        ("Single Arm Dumbbell Row", "Arm Row"),
        ("Seated   Cable   Row", "Row"),
        ("45° Incline Press", "Press"),
        ("Pull-up", "Pull-up"),
    ],
)
def test_base_name_strips_variation_keywords(name, expected):
    assert get_base_exercise_name(name) == expected


def test_base_name_falls_back_when_only_keywords_remain():
    assert get_base_exercise_name("Incline") == "Incline"
    assert get_base_exercise_name("Seated Machine") == "Seated Machine"
    assert get_base_exercise_name("") == ""


def test_base_name_keywords_match_whole_words_only():
    # "alt" and "one" must not be stripped from inside other words
    assert get_base_exercise_name("Halter Lift") == "Halter Lift"
    assert get_base_exercise_name("Stone Carry") == "Stone Carry"


def test_base_name_is_idempotent():
    for name in ["Paused Barbell Bench Press", "Tempo Back Squat", "Incline"]:
        once = get_base_exercise_name(name)
        assert get_base_exercise_name(once) == once


def test_group_collapses_variations(sample_exercises):
    groups = group_exercises(sample_exercises[:2])
    assert len(groups) == 1
    group = groups[0]
    assert group.base_name == "Bench Press"
    assert [ex.id for ex in group.exercises] == ["1", "2"]
    # "Paused Barbell Bench Press" is two characters shorter
    assert group.primary_exercise.id == "1"


def test_group_primary_tie_keeps_first():
    c = ExerciseRecord(id="c", name="Cable Curl")
    d = ExerciseRecord(id="d", name="Alt Curl")
    e = ExerciseRecord(id="e", name="Iso Curl")
    group = group_exercises([c, d, e])[0]
    assert group.base_name == "Curl"
    assert group.primary_exercise.id == "d"


def test_groups_sorted_by_base_name():
    records = [
        ExerciseRecord(id="1", name="Squat"),
        ExerciseRecord(id="2", name="Bench Press"),
        ExerciseRecord(id="3", name="Deadlift"),
        ExerciseRecord(id="4", name="Paused Deadlift"),
    ]
    groups = group_exercises(records)
    assert [g.base_name for g in groups] == ["Bench Press", "Deadlift", "Squat"]


def test_group_empty_input():
    assert group_exercises([]) == []


def test_grouping_is_deterministic(sample_exercises):
    assert group_exercises(sample_exercises) == group_exercises(sample_exercises)


def test_group_invariants_hold_for_bundled_catalogue():
    exercises = load_exercises()
    assert exercises
    groups = group_exercises(exercises)
    assert sum(len(g.exercises) for g in groups) == len(exercises)
    for group in groups:
        assert group.primary_exercise in group.exercises
        for exercise in group.exercises:
            assert get_base_exercise_name(exercise.name) == group.base_name


def test_variation_names_exclude_primary_and_dedupe():
    primary = ExerciseRecord(id="1", name="Pull-up")
    group = ExerciseGroup(
        base_name="Pull-up",
        exercises=(
            primary,
            ExerciseRecord(id="2", name="Wide Pull-up"),
            ExerciseRecord(id="3", name=" wide pull-up "),
            ExerciseRecord(id="4", name="pull-up"),
        ),
        primary_exercise=primary,
    )
    assert has_variations(group)
    assert get_variation_names(group) == ["Wide Pull-up"]
    assert variation_badge(group) == "1 variant"


def test_variation_names_same_named_records_count_once():
    primary = ExerciseRecord(id="1", name="Chin")
    group = ExerciseGroup(
        base_name="Pull-up",
        exercises=(
            primary,
            ExerciseRecord(id="2", name="Pull-up"),
            ExerciseRecord(id="3", name="Pull-up"),
            ExerciseRecord(id="4", name="Neutral Pull-up"),
        ),
        primary_exercise=primary,
    )
    assert get_variation_names(group) == ["Pull-up", "Neutral Pull-up"]
    assert variation_badge(group) == "2 variants"


def test_single_exercise_group_has_no_variations():
    record = ExerciseRecord(id="1", name="Plank")
    group = group_exercises([record])[0]
    assert not has_variations(group)
    assert get_variation_names(group) == []
    assert variation_badge(group) == ""
