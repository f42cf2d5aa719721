from __future__ import annotations

from backend import (
    DEFAULT_REST_DURATION,
    DEFAULT_SETS_PER_EXERCISE,
    TICK_INTERVAL,
)
from backend.exercise import Exercise, SetSpec, Workout, WorkoutExercise
from backend.formatting import format_time
from backend.grouping import ExerciseGroup, normalize_and_group, normalize_exercise
from backend.progression import reduce
from backend.session_state import SessionState
from backend.workout_session import WorkoutSession

# Entry points the app screens import from one place
__all__ = [
    "DEFAULT_REST_DURATION",
    "DEFAULT_SETS_PER_EXERCISE",
    "TICK_INTERVAL",
    "Exercise",
    "ExerciseGroup",
    "SessionState",
    "SetSpec",
    "Workout",
    "WorkoutExercise",
    "WorkoutSession",
    "format_time",
    "normalize_and_group",
    "normalize_exercise",
    "reduce",
]
