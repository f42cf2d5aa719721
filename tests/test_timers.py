from backend import timers
from backend.session_state import SessionState


def test_elapsed_stops_when_complete():
    state = SessionState()
    timers.advance_elapsed(state)
    timers.advance_elapsed(state)
    assert state.elapsed_seconds == 2
    state.is_complete = True
    timers.advance_elapsed(state)
    assert state.elapsed_seconds == 2


def test_arm_replaces_remaining_time():
    state = SessionState()
    timers.arm_rest(state, 30)
    assert state.is_resting
    assert state.rest_remaining_seconds == 30
    assert state.rest_epoch == 1
    timers.advance_rest(state)
    timers.arm_rest(state, 10)
    assert state.rest_remaining_seconds == 10
    assert state.rest_epoch == 2


def test_advance_rest_reports_expiry():
    state = SessionState()
    assert not timers.advance_rest(state)
    timers.arm_rest(state, 2)
    assert not timers.advance_rest(state)
    assert timers.advance_rest(state)
    assert state.rest_remaining_seconds == 0


def test_cancel_rest_bumps_epoch_once():
    state = SessionState()
    timers.arm_rest(state, 5)
    timers.cancel_rest(state)
    assert not state.is_resting
    assert state.rest_epoch == 2
    timers.cancel_rest(state)
    assert state.rest_epoch == 2


def test_is_stale():
    state = SessionState(rest_epoch=4)
    assert not timers.is_stale(state, None)
    assert not timers.is_stale(state, 4)
    assert timers.is_stale(state, 3)
