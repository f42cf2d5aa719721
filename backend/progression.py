"""Transitions of an active workout session.

:func:`reduce` takes the current :class:`SessionState` and one event and
returns the next state.  The input state is never modified.  Events that do
not apply to the current phase (completing a set while resting, skipping a
rest that is not running, anything after the workout finished) leave the
state untouched and the very same object is returned, so callers can detect
a no-op with ``new is old``.

Rest rules:

* a set of a single exercise is always followed by a rest;
* within a superset the next member follows without rest, the rest comes
  after the last member of the round;
* when the rest runs out (or is skipped) the session either stays on the
  group, pointing at the first member with sets left, or moves to the next
  group once every member is done;
* finishing the final group completes the workout straight away unless
  ``rest_before_finish`` is set, in which case the last rest is taken first.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Union

from backend import timers
from backend.exercise import to_int
from backend.session_state import SessionState, SetAdjustments


@dataclass(frozen=True)
class CompleteSet:
    exercise_id: str
    actual_reps: int | None = None
    actual_rest_seconds: int | None = None


@dataclass(frozen=True)
class RestTick:
    """One second of rest has passed.

    ``epoch`` ties the tick to the rest period it was scheduled for; a tick
    from an earlier period is ignored.  ``None`` applies to whatever rest is
    running.
    """

    epoch: int | None = None


@dataclass(frozen=True)
class SkipRest:
    pass


@dataclass(frozen=True)
class AdjustRest:
    seconds: int


@dataclass(frozen=True)
class NavigateNext:
    pass


@dataclass(frozen=True)
class NavigatePrevious:
    pass


@dataclass(frozen=True)
class FinishWorkout:
    pass


@dataclass(frozen=True)
class Tick:
    """One second on the session clock: elapsed time first, then rest."""


Event = Union[
    CompleteSet,
    RestTick,
    SkipRest,
    AdjustRest,
    NavigateNext,
    NavigatePrevious,
    FinishWorkout,
    Tick,
]


# ----------------------------------------------------------------------
# Shared resolutions
# ----------------------------------------------------------------------


def _complete(state: SessionState) -> None:
    timers.cancel_rest(state)
    state.is_complete = True


def _resolve_rest(state: SessionState) -> None:
    """Leave the rest period and pick what comes next."""

    timers.cancel_rest(state)
    group = state.current_group
    if not state.is_group_done(group):
        state.active_exercise_index = state.first_incomplete_index(group)
        return
    if state.is_last_group:
        _complete(state)
        return
    state.current_group_index += 1
    state.active_exercise_index = state.first_incomplete_index(state.current_group)


def _start_rest(state: SessionState, seconds: int) -> None:
    if seconds <= 0:
        _resolve_rest(state)
    else:
        timers.arm_rest(state, seconds)


# ----------------------------------------------------------------------
# Event handlers.  Each one works on a private copy and returns ``False``
# when the event does not apply.
# ----------------------------------------------------------------------


def _complete_set(state: SessionState, event: CompleteSet, rest_before_finish: bool) -> bool:
    if state.is_resting:
        logging.debug("Ignoring set completion for %s while resting", event.exercise_id)
        return False
    exercise = state.active_exercise
    if exercise is None or exercise.id != event.exercise_id:
        logging.debug("Exercise %s is not up next", event.exercise_id)
        return False
    if state.is_exercise_done(exercise):
        logging.debug("All sets of %s are already done", exercise.id)
        return False

    set_index = state.sets_done(exercise)
    state.completed_sets[exercise.id] = set_index + 1
    actual_reps = to_int(event.actual_reps)
    actual_rest = to_int(event.actual_rest_seconds)
    if actual_reps is not None or actual_rest is not None:
        state.adjustments.setdefault(exercise.id, SetAdjustments()).record(
            set_index, actual_reps, actual_rest
        )

    group = state.current_group
    group_done = state.is_group_done(group)

    if group.is_superset and not exercise.is_last_in_group and not group_done:
        following = state.next_incomplete_after(group, state.active_exercise_index)
        if following is not None:
            state.active_exercise_index = following
            return True

    if group_done and state.is_last_group and not rest_before_finish:
        _complete(state)
        return True

    rest = actual_rest if actual_rest is not None else exercise.rest_after_set(set_index)
    _start_rest(state, rest)
    return True


def _rest_tick(state: SessionState, event: RestTick, rest_before_finish: bool) -> bool:
    if not state.is_resting:
        return False
    if timers.is_stale(state, event.epoch):
        logging.debug("Dropping tick for finished rest period %s", event.epoch)
        return False
    if timers.advance_rest(state):
        _resolve_rest(state)
    return True


def _skip_rest(state: SessionState, event: SkipRest, rest_before_finish: bool) -> bool:
    if not state.is_resting:
        logging.debug("Nothing to skip, session is not resting")
        return False
    _resolve_rest(state)
    return True


def _adjust_rest(state: SessionState, event: AdjustRest, rest_before_finish: bool) -> bool:
    try:
        seconds = int(event.seconds)
    except (TypeError, ValueError, OverflowError):
        return False
    if not state.is_resting or not seconds:
        return False
    state.rest_remaining_seconds = max(0, state.rest_remaining_seconds + seconds)
    if state.rest_remaining_seconds == 0:
        _resolve_rest(state)
    return True


def _navigate_next(state: SessionState, event: NavigateNext, rest_before_finish: bool) -> bool:
    if state.is_resting:
        return False
    group = state.current_group
    if group.is_superset and state.active_exercise_index < len(group.exercises) - 1:
        state.active_exercise_index += 1
        return True
    if state.is_last_group:
        return False
    state.current_group_index += 1
    state.active_exercise_index = 0
    return True


def _navigate_previous(
    state: SessionState, event: NavigatePrevious, rest_before_finish: bool
) -> bool:
    if state.is_resting:
        return False
    if state.active_exercise_index > 0:
        state.active_exercise_index -= 1
        return True
    if state.current_group_index == 0:
        return False
    state.current_group_index -= 1
    state.active_exercise_index = len(state.current_group.exercises) - 1
    return True


def _finish_workout(state: SessionState, event: FinishWorkout, rest_before_finish: bool) -> bool:
    _complete(state)
    return True


def _tick(state: SessionState, event: Tick, rest_before_finish: bool) -> bool:
    timers.advance_elapsed(state)
    if timers.advance_rest(state):
        _resolve_rest(state)
    return True


_HANDLERS: dict[type, Callable[[SessionState, Event, bool], bool]] = {
    CompleteSet: _complete_set,
    RestTick: _rest_tick,
    SkipRest: _skip_rest,
    AdjustRest: _adjust_rest,
    NavigateNext: _navigate_next,
    NavigatePrevious: _navigate_previous,
    FinishWorkout: _finish_workout,
    Tick: _tick,
}

EVENT_TYPES = tuple(_HANDLERS)


def reduce(
    state: SessionState, event: Event, *, rest_before_finish: bool = False
) -> SessionState:
    """Return the state that follows ``state`` after ``event``."""

    handler = _HANDLERS.get(type(event))
    if handler is None:
        raise TypeError(f"Unknown session event: {event!r}")
    if state.is_complete:
        logging.debug("Workout already complete, ignoring %s", type(event).__name__)
        return state
    new_state = state.copy()
    if not handler(new_state, event, rest_before_finish):
        return state
    return new_state
