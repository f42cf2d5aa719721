"""Normalisation and superset grouping of workout exercises.

Workouts reach the engine from older and newer versions of the workout
editor.  Older records only carry scalar ``sets``/``reps``/``restTime``
fields and a ``groupType``/``groupId`` pair; newer ones carry a
``workoutConfig`` with one entry per set.  :func:`normalize_and_group` accepts
either shape (or a mix of both) and never raises: missing or malformed fields
fall back to defaults.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Iterable, Mapping

from backend import DEFAULT_REST_DURATION, DEFAULT_SETS_PER_EXERCISE
from backend.exercise import (
    GROUP,
    SINGLE,
    Exercise,
    SetSpec,
    WorkoutConfig,
    WorkoutExercise,
    first_value,
    to_int,
    to_text,
)

# ``ExerciseGroup.kind`` values
SUPERSET = "superset"

_GROUP_ALIASES = {GROUP, SUPERSET, "triset", "circuit"}


@dataclass(frozen=True)
class ExerciseGroup:
    """A single exercise or a superset performed back-to-back."""

    kind: str
    exercises: tuple[WorkoutExercise, ...]

    @property
    def is_superset(self) -> bool:
        return self.kind == SUPERSET

    @property
    def exercise_ids(self) -> list[str]:
        return [ex.id for ex in self.exercises]

    def __len__(self) -> int:
        return len(self.exercises)

    def to_dict(self) -> dict:
        return {
            "kind": self.kind,
            "exercises": [ex.to_dict() for ex in self.exercises],
        }


def _config_kind(value: Any) -> str | None:
    text = to_text(value)
    if text is None:
        return None
    return GROUP if text.lower() in _GROUP_ALIASES else SINGLE


def _legacy_sets(exercise: Exercise, rest: int) -> tuple[SetSpec, ...]:
    """Repeat the legacy scalar fields ``exercise.sets`` times."""

    count = exercise.sets or 0
    if count <= 0:
        logging.debug(
            "Exercise %s has no set count, using %d default set(s)",
            exercise.id,
            DEFAULT_SETS_PER_EXERCISE,
        )
        count = DEFAULT_SETS_PER_EXERCISE
    return tuple(
        SetSpec(rest_time_seconds=rest, reps=exercise.reps) for _ in range(count)
    )


def normalize_exercise(
    exercise: Exercise | Mapping[str, Any],
    *,
    default_rest_seconds: int = DEFAULT_REST_DURATION,
    index: int = 0,
) -> WorkoutExercise:
    """Return the canonical form of ``exercise``.

    ``index`` is the position of the record in its workout and is only used
    to name exercises that arrive without an identifier.
    """

    if not isinstance(exercise, Exercise):
        exercise = Exercise.from_dict(exercise, index)

    config = exercise.workout_config or {}
    rest = (
        exercise.rest_time_seconds
        if exercise.rest_time_seconds is not None
        else to_int(default_rest_seconds, DEFAULT_REST_DURATION)
    )

    kind = (
        _config_kind(first_value(config, "kind", "type"))
        or _config_kind(exercise.group_type)
        or SINGLE
    )
    group_id = to_text(first_value(config, "group_id", "groupId")) or exercise.group_id

    raw_sets = config.get("sets")
    sets: tuple[SetSpec, ...] = ()
    if isinstance(raw_sets, (list, tuple)):
        sets = tuple(
            SetSpec.from_dict(item, default_reps=exercise.reps, default_rest=rest)
            for item in raw_sets
            if isinstance(item, Mapping)
        )
    if not sets:
        sets = _legacy_sets(exercise, rest)

    if kind == GROUP and not group_id:
        logging.debug("Exercise %s is grouped without a group id", exercise.id)
        kind = SINGLE
    if kind == SINGLE:
        group_id = None

    return WorkoutExercise(
        id=exercise.id,
        name=exercise.name,
        kind=exercise.kind,
        workout_config=WorkoutConfig(kind=kind, sets=sets, group_id=group_id),
        description=exercise.description,
        equipment=exercise.equipment,
        difficulty=exercise.difficulty,
    )


def _unique_id(exercise_id: str, taken: set[str]) -> str:
    if exercise_id not in taken:
        return exercise_id
    suffix = 2
    while f"{exercise_id}#{suffix}" in taken:
        suffix += 1
    return f"{exercise_id}#{suffix}"


def normalize_and_group(
    exercises: Iterable[Exercise | Mapping[str, Any]] | None,
    *,
    default_rest_seconds: int = DEFAULT_REST_DURATION,
) -> list[ExerciseGroup]:
    """Normalise ``exercises`` and partition them into :class:`ExerciseGroup` items.

    Every input exercise ends up in exactly one group.  Singles keep their
    position; a superset is emitted where its first member appears and
    contains all members in the order they were listed.
    """

    normalized: list[WorkoutExercise] = []
    taken: set[str] = set()
    for index, item in enumerate(exercises or []):
        if not isinstance(item, (Exercise, Mapping)):
            logging.debug("Ignoring exercise entry of type %s", type(item).__name__)
            continue
        workout_exercise = normalize_exercise(
            item, default_rest_seconds=default_rest_seconds, index=index
        )
        unique = _unique_id(workout_exercise.id, taken)
        if unique != workout_exercise.id:
            logging.debug("Duplicate exercise id %s renamed to %s", workout_exercise.id, unique)
            workout_exercise = replace(workout_exercise, id=unique)
        taken.add(unique)
        normalized.append(workout_exercise)

    members: dict[str, list[WorkoutExercise]] = {}
    for ex in normalized:
        if ex.is_group_member:
            members.setdefault(ex.group_id, []).append(ex)

    for group_members in members.values():
        siblings = tuple(group_members)
        last = len(siblings) - 1
        for position, ex in enumerate(siblings):
            ex.workout_config.position_in_group = position
            ex.workout_config.is_last_in_group = position == last
            ex.workout_config.group_exercises = siblings
        if len(siblings) < 2:
            logging.debug("Superset %s has a single member", siblings[0].group_id)

    groups: list[ExerciseGroup] = []
    emitted: set[str] = set()
    for ex in normalized:
        if not ex.is_group_member:
            groups.append(ExerciseGroup(SINGLE, (ex,)))
        elif ex.group_id not in emitted:
            emitted.add(ex.group_id)
            groups.append(ExerciseGroup(SUPERSET, tuple(members[ex.group_id])))
    return groups
