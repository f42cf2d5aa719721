import logging
from collections import deque
from typing import Any, Callable, Mapping

from backend import settings
from backend.exercise import Workout, WorkoutExercise
from backend.formatting import describe_group, describe_set, format_duration
from backend.grouping import normalize_and_group
from backend.progression import (
    EVENT_TYPES,
    AdjustRest,
    CompleteSet,
    FinishWorkout,
    NavigateNext,
    NavigatePrevious,
    RestTick,
    SkipRest,
    Tick,
    reduce,
)
from backend.session_state import SessionState


class WorkoutSession:
    """In-memory representation of a workout session.

    The session owns the only :class:`SessionState` for a workout.  Every
    user action and every clock tick goes through :meth:`dispatch`, which
    applies events strictly one after another: an event raised from inside
    an observer callback is queued and sees the state left by the event that
    triggered the callback.

    Observers registered with :meth:`bind` are called as
    ``callback(session, state)`` after each transition that changed
    something; ``state`` is a copy and may be kept freely.
    """

    def __init__(
        self,
        workout: Workout | Mapping[str, Any],
        *,
        rest_before_finish: bool | None = None,
        default_rest_seconds: int | None = None,
    ):
        """Prepare a session for ``workout``.

        Options left as ``None`` are read from :mod:`backend.settings`.
        """

        if not isinstance(workout, Workout):
            workout = Workout.from_dict(workout)
        self.workout = workout

        if rest_before_finish is None or default_rest_seconds is None:
            options = settings.session_options()
            if rest_before_finish is None:
                rest_before_finish = options["rest_before_finish"]
            if default_rest_seconds is None:
                default_rest_seconds = options["default_rest_seconds"]
        self.rest_before_finish = bool(rest_before_finish)
        self.default_rest_seconds = default_rest_seconds

        self.groups = normalize_and_group(
            workout.exercises, default_rest_seconds=default_rest_seconds
        )
        self._state = SessionState.start(self.groups)
        self._queue: deque = deque()
        self._dispatching = False
        self._listeners: list[Callable[["WorkoutSession", SessionState], None]] = []

        logging.info(
            "Started workout '%s' with %d exercise group(s)",
            workout.name,
            len(self.groups),
        )

    # ------------------------------------------------------------------
    # State access
    # ------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        """Return a copy of the current state."""
        return self._state.copy()

    def snapshot(self) -> dict:
        return self._state.to_dict()

    @property
    def is_complete(self) -> bool:
        return self._state.is_complete

    @property
    def is_resting(self) -> bool:
        return self._state.is_resting

    @property
    def current_group_index(self) -> int:
        return self._state.current_group_index

    @property
    def active_exercise_index(self) -> int:
        return self._state.active_exercise_index

    @property
    def rest_remaining_seconds(self) -> int:
        return self._state.rest_remaining_seconds

    @property
    def rest_epoch(self) -> int:
        return self._state.rest_epoch

    @property
    def elapsed_seconds(self) -> int:
        return self._state.elapsed_seconds

    @property
    def current_exercise(self) -> WorkoutExercise | None:
        if self._state.is_complete:
            return None
        return self._state.active_exercise

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def bind(self, callback: Callable[["WorkoutSession", SessionState], None]) -> None:
        if callback not in self._listeners:
            self._listeners.append(callback)

    def unbind(self, callback: Callable[["WorkoutSession", SessionState], None]) -> None:
        if callback in self._listeners:
            self._listeners.remove(callback)

    def dispatch(self, event) -> SessionState:
        """Apply ``event`` and return a copy of the resulting state.

        When called while another event is being processed the event is
        queued and the returned state is the one current at queueing time.
        If an observer raises, the error propagates and any events still
        queued are discarded.
        """

        if not isinstance(event, EVENT_TYPES):
            raise TypeError(f"Unknown session event: {event!r}")
        self._queue.append(event)
        if self._dispatching:
            return self._state.copy()

        self._dispatching = True
        try:
            while self._queue:
                self._apply(self._queue.popleft())
        finally:
            # events left behind by a failing observer are dropped
            self._queue.clear()
            self._dispatching = False
        return self._state.copy()

    def _apply(self, event) -> None:
        previous = self._state
        state = reduce(previous, event, rest_before_finish=self.rest_before_finish)
        if state is previous:
            return
        self._state = state
        if state.is_complete and not previous.is_complete:
            logging.info(
                "Workout '%s' complete after %ds, %d/%d sets done",
                self.workout.name,
                state.elapsed_seconds,
                state.total_completed_sets,
                state.total_sets,
            )
        for callback in list(self._listeners):
            callback(self, state.copy())

    def complete_set(
        self,
        exercise_id: str,
        actual_reps: int | None = None,
        actual_rest_seconds: int | None = None,
    ) -> SessionState:
        return self.dispatch(CompleteSet(exercise_id, actual_reps, actual_rest_seconds))

    def rest_tick(self, epoch: int | None = None) -> SessionState:
        return self.dispatch(RestTick(epoch))

    def skip_rest(self) -> SessionState:
        return self.dispatch(SkipRest())

    def adjust_rest(self, seconds: int) -> SessionState:
        """Lengthen (or with a negative value shorten) the current rest."""
        return self.dispatch(AdjustRest(seconds))

    def navigate_next(self) -> SessionState:
        return self.dispatch(NavigateNext())

    def navigate_previous(self) -> SessionState:
        return self.dispatch(NavigatePrevious())

    def finish_workout(self) -> SessionState:
        return self.dispatch(FinishWorkout())

    def tick(self) -> SessionState:
        return self.dispatch(Tick())

    # ------------------------------------------------------------------
    # Display helpers
    # ------------------------------------------------------------------

    def current_exercise_display(self) -> str:
        """Return e.g. ``"Bench Press set 2 of 3"`` for the set up next."""

        ex = self.current_exercise
        if ex is None:
            return ""
        done = min(self._state.sets_done(ex) + 1, ex.total_sets)
        return f"{ex.name} set {done} of {ex.total_sets}"

    def next_up_label(self) -> str:
        """Describe what follows the current rest period."""

        state = self._state
        if state.is_complete:
            return ""
        group = state.current_group
        if not state.is_group_done(group):
            return group.exercises[state.first_incomplete_index(group)].name
        return describe_group(state.next_group)

    def progress_label(self) -> str:
        if not self.groups:
            return "0/0"
        index = min(self._state.current_group_index + 1, len(self.groups))
        return f"{index}/{len(self.groups)}"

    def summary(self) -> str:
        """Return a formatted text summary of the session."""

        state = self._state
        lines = [f"Workout: {self.workout.name}"]
        lines.append(f"Duration: {format_duration(state.elapsed_seconds)}")
        lines.append(f"Sets: {state.total_completed_sets} of {state.total_sets}")
        for group in state.groups:
            for ex in group.exercises:
                lines.append(f"\n{ex.name}")
                adjustments = state.adjustments.get(ex.id)
                for idx in range(state.sets_done(ex)):
                    spec = ex.sets[idx]
                    text = describe_set(spec)
                    rest = spec.rest_time_seconds
                    if adjustments and idx < len(adjustments.reps):
                        if adjustments.reps[idx] is not None:
                            text = f"{adjustments.reps[idx]} reps"
                        if adjustments.rest_seconds[idx] is not None:
                            rest = adjustments.rest_seconds[idx]
                    lines.append(f"  Set {idx + 1}: {text}, rest {rest}s")
        return "\n".join(lines)
