"""State of an active workout session.

A :class:`SessionState` is only ever changed by the progression engine in
:mod:`backend.progression`; everything else receives copies.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Iterable

from backend.exercise import WorkoutExercise
from backend.grouping import ExerciseGroup

# Session phases
ACTIVE = "active"
RESTING = "resting"
COMPLETE = "complete"


@dataclass
class SetAdjustments:
    """Reps and rest actually performed, one slot per completed set.

    Both lists always have the same length.  ``None`` marks a set for which
    the configured value was used.
    """

    reps: list[int | None] = field(default_factory=list)
    rest_seconds: list[int | None] = field(default_factory=list)

    def record(
        self,
        set_index: int,
        reps: int | None = None,
        rest_seconds: int | None = None,
    ) -> None:
        while len(self.reps) <= set_index:
            self.reps.append(None)
            self.rest_seconds.append(None)
        if reps is not None:
            self.reps[set_index] = reps
        if rest_seconds is not None:
            self.rest_seconds[set_index] = rest_seconds

    def copy(self) -> "SetAdjustments":
        return SetAdjustments(list(self.reps), list(self.rest_seconds))


@dataclass
class SessionState:
    groups: tuple[ExerciseGroup, ...] = ()
    current_group_index: int = 0
    active_exercise_index: int = 0
    completed_sets: dict[str, int] = field(default_factory=dict)
    adjustments: dict[str, SetAdjustments] = field(default_factory=dict)
    is_resting: bool = False
    rest_remaining_seconds: int = 0
    # Generation of the current rest period; bumped whenever one starts or ends
    rest_epoch: int = 0
    elapsed_seconds: int = 0
    is_complete: bool = False

    @classmethod
    def start(cls, groups: Iterable[ExerciseGroup]) -> "SessionState":
        """Return the initial state for ``groups``.

        A workout without exercises has nothing to do and starts complete.
        """

        groups = tuple(groups)
        completed = {ex.id: 0 for group in groups for ex in group.exercises}
        return cls(groups=groups, completed_sets=completed, is_complete=not groups)

    def copy(self) -> "SessionState":
        return replace(
            self,
            completed_sets=dict(self.completed_sets),
            adjustments={k: v.copy() for k, v in self.adjustments.items()},
        )

    # ------------------------------------------------------------------
    # Position
    # ------------------------------------------------------------------

    @property
    def phase(self) -> str:
        if self.is_complete:
            return COMPLETE
        if self.is_resting:
            return RESTING
        return ACTIVE

    @property
    def current_group(self) -> ExerciseGroup | None:
        if 0 <= self.current_group_index < len(self.groups):
            return self.groups[self.current_group_index]
        return None

    @property
    def active_exercise(self) -> WorkoutExercise | None:
        """Return the exercise whose next set can be completed."""

        group = self.current_group
        if group is None:
            return None
        if 0 <= self.active_exercise_index < len(group.exercises):
            return group.exercises[self.active_exercise_index]
        return None

    @property
    def is_last_group(self) -> bool:
        return self.current_group_index >= len(self.groups) - 1

    @property
    def next_group(self) -> ExerciseGroup | None:
        index = self.current_group_index + 1
        if index < len(self.groups):
            return self.groups[index]
        return None

    def find_exercise(self, exercise_id: str) -> WorkoutExercise | None:
        for group in self.groups:
            for ex in group.exercises:
                if ex.id == exercise_id:
                    return ex
        return None

    # ------------------------------------------------------------------
    # Completion
    # ------------------------------------------------------------------

    def sets_done(self, exercise: WorkoutExercise) -> int:
        return self.completed_sets.get(exercise.id, 0)

    def is_exercise_done(self, exercise: WorkoutExercise) -> bool:
        return self.sets_done(exercise) >= exercise.total_sets

    def is_group_done(self, group: ExerciseGroup | None) -> bool:
        if group is None:
            return True
        return all(self.is_exercise_done(ex) for ex in group.exercises)

    def first_incomplete_index(self, group: ExerciseGroup | None) -> int:
        """Index of the first member of ``group`` with sets left, else ``0``."""

        if group is None:
            return 0
        for idx, ex in enumerate(group.exercises):
            if not self.is_exercise_done(ex):
                return idx
        return 0

    def next_incomplete_after(self, group: ExerciseGroup, index: int) -> int | None:
        """Index of the next member after ``index`` with sets left."""

        for idx in range(index + 1, len(group.exercises)):
            if not self.is_exercise_done(group.exercises[idx]):
                return idx
        return None

    @property
    def total_sets(self) -> int:
        return sum(ex.total_sets for group in self.groups for ex in group.exercises)

    @property
    def total_completed_sets(self) -> int:
        return sum(self.completed_sets.values())

    @property
    def progress(self) -> float:
        """Fraction of all sets completed, between ``0.0`` and ``1.0``."""

        total = self.total_sets
        if not total:
            return 1.0 if self.is_complete else 0.0
        return self.total_completed_sets / total

    def to_dict(self) -> dict:
        """Return a JSON-serialisable view of the state."""

        return {
            "phase": self.phase,
            "groups": [group.to_dict() for group in self.groups],
            "current_group_index": self.current_group_index,
            "active_exercise_index": self.active_exercise_index,
            "completed_sets": dict(self.completed_sets),
            "adjustments": {
                k: {"reps": list(v.reps), "rest_seconds": list(v.rest_seconds)}
                for k, v in self.adjustments.items()
            },
            "is_resting": self.is_resting,
            "rest_remaining_seconds": self.rest_remaining_seconds,
            "rest_epoch": self.rest_epoch,
            "elapsed_seconds": self.elapsed_seconds,
            "is_complete": self.is_complete,
        }
