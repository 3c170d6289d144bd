"""Shared constants and globals for backend modules."""

from __future__ import annotations

import os
from pathlib import Path

# Default rest period started after a set is completed, in seconds
DEFAULT_REST_DURATION = 90

# Bounds for the optional Rate of Perceived Exertion logged per set
MIN_RPE = 1
MAX_RPE = 10

# Base names shorter than this fall back to the original exercise name
MIN_BASE_NAME_LENGTH = 3

# Path to the bundled exercise catalogue (already display-name resolved)
DEFAULT_EXERCISE_DATA_PATH = Path(
    os.environ.get(
        "EXERCISE_DATA_PATH",
        Path(__file__).resolve().parent.parent / "data" / "exercises.json",
    )
)

# In-memory cache of the exercise catalogue loaded at startup
EXERCISE_CATALOGUE: list = []

__all__ = [
    "DEFAULT_REST_DURATION",
    "MIN_RPE",
    "MAX_RPE",
    "MIN_BASE_NAME_LENGTH",
    "DEFAULT_EXERCISE_DATA_PATH",
    "EXERCISE_CATALOGUE",
]
