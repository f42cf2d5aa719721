"""Text helpers for presenting a workout session."""

from __future__ import annotations

from backend.exercise import SetSpec
from backend.grouping import ExerciseGroup

# Icon names keyed by exercise kind
EXERCISE_ICONS = {
    "cardio": "run",
    "strength": "dumbbell",
    "flexibility": "yoga",
    "balance": "human-handsup",
}
DEFAULT_ICON = "arm-flex"

FINISH_LABEL = "Finish Workout"


def format_time(seconds: int) -> str:
    """Return ``seconds`` as ``MM:SS``; minutes keep counting past an hour."""

    seconds = max(0, int(seconds))
    minutes, secs = divmod(seconds, 60)
    return f"{minutes:02d}:{secs:02d}"


def format_duration(seconds: int) -> str:
    m, s = divmod(max(0, int(seconds)), 60)
    return f"{m}m {s}s"


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'s' if count != 1 else ''}"


def format_sets_and_reps(sets: int, reps: int) -> str:
    return f"{_plural(sets, 'set')} of {_plural(reps, 'rep')}"


def format_exercise_name(name: str) -> str:
    return name[:1].upper() + name[1:].lower()


def exercise_icon(kind: str | None) -> str:
    return EXERCISE_ICONS.get((kind or "").lower(), DEFAULT_ICON)


def describe_set(spec: SetSpec) -> str:
    """Return e.g. ``"10 reps @ 50 kg"`` or ``"45s"`` for ``spec``."""

    measurement = spec.measurement
    if measurement is None:
        text = "open set"
    else:
        name, value = measurement
        if name == "reps":
            text = _plural(int(value), "rep")
        elif name == "time":
            text = f"{int(value)}s"
        else:
            text = f"{value:g} m"
    if spec.weight is not None:
        text += f" @ {spec.weight:g} kg"
    return text


def describe_group(group: ExerciseGroup | None) -> str:
    """Label for the group coming up after a rest."""

    if group is None:
        return FINISH_LABEL
    if group.is_superset and len(group.exercises) > 1:
        return f"Superset with {len(group.exercises)} exercises"
    return group.exercises[0].name
