"""Feed one-second ticks from the Kivy clock into a workout session."""

from __future__ import annotations

import logging

from kivy.clock import Clock

from backend import TICK_INTERVAL


class SessionClock:
    """Tick ``session`` every ``interval`` seconds until it completes.

    Kivy reports the real time between callbacks, which drifts around the
    requested interval.  The clock accumulates that time and dispatches one
    tick per full interval, so a late frame is caught up instead of lost.
    """

    def __init__(self, session, interval: float = TICK_INTERVAL):
        self.session = session
        self.interval = interval
        self._event = None
        self._pending = 0.0

    @property
    def running(self) -> bool:
        return self._event is not None

    def start(self) -> None:
        """Start ticking; restarting cancels the previous schedule first."""
        self.stop()
        if self.session.is_complete:
            return
        self._pending = 0.0
        self._event = Clock.schedule_interval(self._on_tick, self.interval)

    def stop(self) -> None:
        if self._event is not None:
            self._event.cancel()
            self._event = None

    def _on_tick(self, dt):
        self._pending += dt
        while self._pending >= self.interval and not self.session.is_complete:
            self._pending -= self.interval
            self.session.tick()
        if self.session.is_complete:
            logging.info("Session clock stopped")
            self.stop()
            return False
