import argparse
import logging

from backend import DEFAULT_EXERCISE_DATA_PATH
from backend.exercise_grouping import get_variation_names, variation_badge
from backend.exercises import load_exercises, search_exercise_groups


def main(argv=None):
    parser = argparse.ArgumentParser(description="Print grouped exercise search results")
    parser.add_argument("query", nargs="?", default=None, help="text to search for")
    parser.add_argument("--data", default=str(DEFAULT_EXERCISE_DATA_PATH), help="exercise JSON file")
    parser.add_argument("--muscle", action="append", default=[], help="primary muscle group")
    parser.add_argument("--equipment", action="append", default=[], help="equipment filter")
    parser.add_argument("--pattern", action="append", default=[], help="movement pattern filter")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    exercises = load_exercises(args.data)
    groups = search_exercise_groups(
        exercises,
        args.query,
        muscle_groups=args.muscle,
        equipment=args.equipment,
        movement_patterns=args.pattern,
    )

    for group in groups:
        badge = variation_badge(group)
        header = f"\n=== {group.base_name} ==="
        if badge:
            header += f" ({badge})"
        print(header)
        print(f"  Primary: {group.primary_exercise.name}")
        for name in get_variation_names(group):
            print(f"    - {name}")

    print(f"\n{len(groups)} groups from {sum(len(g.exercises) for g in groups)} exercises")


if __name__ == "__main__":
    main()
