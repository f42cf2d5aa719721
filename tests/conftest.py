import os
import sys
from pathlib import Path

import pytest

# Keep Kivy from parsing pytest's command line and writing log files
os.environ.setdefault("KIVY_NO_ARGS", "1")
os.environ.setdefault("KIVY_NO_FILELOG", "1")
os.environ.setdefault("KIVY_NO_CONSOLELOG", "1")

sys.path.append(str(Path(__file__).resolve().parents[1]))

from backend import settings


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Point the settings module at a throwaway file."""
    monkeypatch.setattr(settings, "SETTINGS_PATH", tmp_path / "settings.json")
    settings.clear_cache()
    yield tmp_path / "settings.json"
    settings.clear_cache()


@pytest.fixture
def legacy_exercises() -> list[dict]:
    """Exercises as stored by the old workout editor."""
    return [
        {"id": "1", "name": "Barbell Squat", "type": "strength", "sets": 2, "reps": 10, "restTime": 90},
        {"id": "2", "name": "Bench Press", "type": "strength", "sets": 2, "reps": 12, "restTime": 60,
         "groupType": "group", "groupId": "superset1"},
        {"id": "3", "name": "Pull-ups", "type": "strength", "sets": 2, "reps": 8, "restTime": 60,
         "groupType": "group", "groupId": "superset1"},
        {"id": "4", "name": "Deadlift", "type": "strength", "sets": 1, "reps": 8, "restTime": 120},
    ]


@pytest.fixture
def sample_workout(legacy_exercises) -> dict:
    return {"id": "w1", "name": "Full Body Workout", "exercises": legacy_exercises}


def _single(exercise_id: str, sets: int = 1, rest: int = 30, reps: int = 10) -> dict:
    return {
        "id": exercise_id,
        "name": exercise_id.title(),
        "type": "strength",
        "workoutConfig": {
            "type": "single",
            "sets": [{"reps": reps, "restTime": rest} for _ in range(sets)],
        },
    }


def _member(exercise_id: str, group_id: str, sets: int = 1, rest: int = 30, reps: int = 10) -> dict:
    data = _single(exercise_id, sets=sets, rest=rest, reps=reps)
    data["workoutConfig"]["type"] = "group"
    data["workoutConfig"]["groupId"] = group_id
    return data


@pytest.fixture
def single():
    """Factory for canonical single exercises with identical sets."""
    return _single


@pytest.fixture
def member():
    """Factory for canonical superset members."""
    return _member
