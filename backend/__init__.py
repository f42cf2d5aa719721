"""Shared constants for backend modules."""

from __future__ import annotations

# Default values used throughout the engine
DEFAULT_SETS_PER_EXERCISE = 1
DEFAULT_REST_DURATION = 60

# Seconds between two ticks of the session clock
TICK_INTERVAL = 1.0

__all__ = [
    "DEFAULT_SETS_PER_EXERCISE",
    "DEFAULT_REST_DURATION",
    "TICK_INTERVAL",
]
