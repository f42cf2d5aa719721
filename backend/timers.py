"""Elapsed and rest clocks of a workout session.

Both clocks live inside :class:`~backend.session_state.SessionState` and are
advanced one second at a time by the progression engine.  They never read the
wall clock; whoever owns the session feeds ticks (see ``ui/session_clock.py``).
"""

from __future__ import annotations

from backend.session_state import SessionState


def advance_elapsed(state: SessionState) -> None:
    """Count one second of workout time unless the session is over."""

    if not state.is_complete:
        state.elapsed_seconds += 1


def arm_rest(state: SessionState, seconds: int) -> None:
    """Start a new rest period of ``seconds``.

    The remaining time is always replaced, never added to, and the rest epoch
    moves on so that ticks meant for an earlier rest are recognised as stale.
    """

    state.is_resting = True
    state.rest_remaining_seconds = max(0, int(seconds))
    state.rest_epoch += 1


def cancel_rest(state: SessionState) -> None:
    """Stop the rest clock; a no-op when not resting."""

    if not state.is_resting:
        return
    state.is_resting = False
    state.rest_remaining_seconds = 0
    state.rest_epoch += 1


def advance_rest(state: SessionState, seconds: int = 1) -> bool:
    """Count down the rest clock and return ``True`` once it hits zero."""

    if not state.is_resting:
        return False
    state.rest_remaining_seconds = max(0, state.rest_remaining_seconds - seconds)
    return state.rest_remaining_seconds == 0


def is_stale(state: SessionState, epoch: int | None) -> bool:
    """Return ``True`` if ``epoch`` belongs to a rest period that has ended."""

    return epoch is not None and epoch != state.rest_epoch
