"""Exercise records consumed and produced by the session engine.

Two shapes exist side by side.  :class:`Exercise` mirrors what the workout
store hands over: scalar ``sets``/``reps``/``rest`` fields from older
workouts and, for newer ones, a raw ``workoutConfig`` mapping.  The
normaliser in :mod:`backend.grouping` turns every record into a
:class:`WorkoutExercise` whose :class:`WorkoutConfig` always carries at least
one :class:`SetSpec`, so the progression engine never has to check which
shape it was given.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Mapping

from backend import DEFAULT_REST_DURATION

# ``workoutConfig.type`` values
SINGLE = "single"
GROUP = "group"


def first_value(data: Mapping[str, Any], *keys: str) -> Any:
    """Return the first value in ``data`` under ``keys`` that is not ``None``."""

    for key in keys:
        value = data.get(key)
        if value is not None:
            return value
    return None


def to_int(value: Any, default: int | None = None) -> int | None:
    """Coerce ``value`` to a non-negative ``int`` or return ``default``."""

    if value is None or isinstance(value, bool):
        return default
    try:
        number = int(float(value))
    except (TypeError, ValueError, OverflowError):
        return default
    if number < 0:
        return default
    return number


def to_float(value: Any, default: float | None = None) -> float | None:
    """Coerce ``value`` to a non-negative ``float`` or return ``default``."""

    if value is None or isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return default
    if number < 0 or not math.isfinite(number):
        return default
    return number


def to_text(value: Any) -> str | None:
    """Return ``value`` as a stripped string, ``None`` when empty."""

    if value is None:
        return None
    text = str(value).strip()
    return text or None


@dataclass(frozen=True)
class SetSpec:
    """Target for a single set.

    Exactly one of ``reps``, ``time_seconds`` or ``distance`` is meant to be
    the primary measurement; ``weight`` is an optional load.
    """

    rest_time_seconds: int = DEFAULT_REST_DURATION
    reps: int | None = None
    time_seconds: int | None = None
    distance: float | None = None
    weight: float | None = None

    @property
    def measurement(self) -> tuple[str, float] | None:
        """Return ``(name, value)`` of the primary measurement, if any."""

        if self.reps is not None:
            return "reps", self.reps
        if self.time_seconds is not None:
            return "time", self.time_seconds
        if self.distance is not None:
            return "distance", self.distance
        return None

    @classmethod
    def from_dict(
        cls,
        data: Mapping[str, Any],
        *,
        default_reps: int | None = None,
        default_rest: int = DEFAULT_REST_DURATION,
    ) -> "SetSpec":
        """Build a set from a loose mapping using camelCase or snake_case keys."""

        rest = to_int(
            first_value(data, "rest_time_seconds", "restTimeSeconds", "restTime", "rest"),
            default_rest,
        )
        reps = to_int(data.get("reps"))
        time_seconds = to_int(first_value(data, "time_seconds", "timeSeconds", "time"))
        distance = to_float(data.get("distance"))
        if reps is None and time_seconds is None and distance is None:
            reps = default_reps
        return cls(
            rest_time_seconds=rest,
            reps=reps,
            time_seconds=time_seconds,
            distance=distance,
            weight=to_float(data.get("weight")),
        )

    def to_dict(self) -> dict:
        data: dict[str, Any] = {"rest_time_seconds": self.rest_time_seconds}
        for name in ("reps", "time_seconds", "distance", "weight"):
            value = getattr(self, name)
            if value is not None:
                data[name] = value
        return data


@dataclass
class Exercise:
    """Exercise as stored in a workout, possibly in the legacy shape."""

    id: str
    name: str = ""
    kind: str = ""
    sets: int | None = None
    reps: int | None = None
    rest_time_seconds: int | None = None
    group_id: str | None = None
    group_type: str | None = None
    workout_config: Mapping[str, Any] | None = None
    description: str = ""
    equipment: str = ""
    difficulty: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], index: int = 0) -> "Exercise":
        """Return an :class:`Exercise` read from ``data``.

        Missing identifiers fall back to ``exercise-<index>`` so every record
        can still be tracked by the session.
        """

        config = first_value(data, "workout_config", "workoutConfig")
        if not isinstance(config, Mapping):
            config = None
        return cls(
            id=to_text(first_value(data, "id", "exerciseId", "exercise_id"))
            or f"exercise-{index}",
            name=to_text(data.get("name")) or "",
            kind=(to_text(first_value(data, "kind", "type")) or "").lower(),
            sets=to_int(data.get("sets")),
            reps=to_int(data.get("reps")),
            rest_time_seconds=to_int(
                first_value(data, "rest_time_seconds", "restTimeSeconds", "restTime", "rest")
            ),
            group_id=to_text(first_value(data, "group_id", "groupId")),
            group_type=(to_text(first_value(data, "group_type", "groupType")) or "").lower()
            or None,
            workout_config=config,
            description=to_text(data.get("description")) or "",
            equipment=to_text(data.get("equipment")) or "",
            difficulty=(to_text(data.get("difficulty")) or "").lower(),
        )


@dataclass
class WorkoutConfig:
    """Canonical set configuration of a :class:`WorkoutExercise`."""

    kind: str
    sets: tuple[SetSpec, ...]
    group_id: str | None = None
    position_in_group: int | None = None
    is_last_in_group: bool | None = None
    # Siblings of a superset member, including the member itself
    group_exercises: tuple["WorkoutExercise", ...] = field(
        default=(), repr=False, compare=False
    )


@dataclass
class WorkoutExercise:
    """Normalised exercise ready to be driven by the progression engine."""

    id: str
    name: str
    kind: str
    workout_config: WorkoutConfig
    description: str = ""
    equipment: str = ""
    difficulty: str = ""

    @property
    def sets(self) -> tuple[SetSpec, ...]:
        return self.workout_config.sets

    @property
    def total_sets(self) -> int:
        return len(self.workout_config.sets)

    @property
    def group_id(self) -> str | None:
        return self.workout_config.group_id

    @property
    def is_group_member(self) -> bool:
        return self.workout_config.kind == GROUP and bool(self.workout_config.group_id)

    @property
    def is_last_in_group(self) -> bool:
        return bool(self.workout_config.is_last_in_group)

    def rest_after_set(self, set_index: int) -> int:
        """Return the configured rest following the set at ``set_index``."""

        sets = self.workout_config.sets
        if not sets:
            return DEFAULT_REST_DURATION
        set_index = min(max(set_index, 0), len(sets) - 1)
        return sets[set_index].rest_time_seconds

    def to_dict(self) -> dict:
        config = self.workout_config
        return {
            "id": self.id,
            "name": self.name,
            "kind": self.kind,
            "workout_config": {
                "kind": config.kind,
                "group_id": config.group_id,
                "sets": [s.to_dict() for s in config.sets],
                "position_in_group": config.position_in_group,
                "is_last_in_group": config.is_last_in_group,
            },
        }


@dataclass
class Workout:
    """Workout handed to a session when the user opens it."""

    id: str
    name: str
    exercises: list[Exercise] = field(default_factory=list)
    description: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Workout":
        raw = data.get("exercises") or []
        exercises = [
            item if isinstance(item, Exercise) else Exercise.from_dict(item, idx)
            for idx, item in enumerate(raw)
            if isinstance(item, (Exercise, Mapping))
        ]
        return cls(
            id=to_text(data.get("id")) or "",
            name=to_text(data.get("name")) or "",
            exercises=exercises,
            description=to_text(data.get("description")) or "",
        )
