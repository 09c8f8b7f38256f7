"""
Utilities package for the Fairplay rotation engine.

This package contains utility functions and constants used throughout the application.
"""
from .time_utils import fmt_mmss, now_ts
from .constants import (
    APP_TITLE, TOTAL_ROLE_POINTS, DEFAULT_PERIOD_COUNT, PERIOD_OPTIONS,
    DURATION_OPTIONS, DEFAULT_PERIOD_DURATION_MINUTES, INITIAL_ROSTER, DEFAULT_HOST, DEFAULT_PORT
)

__all__ = [
    "fmt_mmss", "now_ts", "APP_TITLE", "TOTAL_ROLE_POINTS",
    "DEFAULT_PERIOD_COUNT", "PERIOD_OPTIONS", "DURATION_OPTIONS", "DEFAULT_PERIOD_DURATION_MINUTES",
    "INITIAL_ROSTER", "DEFAULT_HOST", "DEFAULT_PORT"
]
