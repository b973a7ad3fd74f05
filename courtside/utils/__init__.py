"""
Utilities package for the Courtside rotation application.

This package contains utility functions and constants used throughout the application.
"""
from .time_utils import fmt_mmss, now_ts, elapsed_ms
from .constants import (
    APP_TITLE, DEFAULT_ROUND_LENGTH_SECONDS, DEFAULT_WARN_SECONDS,
    DEFAULT_MAX_COURTS, PLAYERS_PER_COURT, BATCH_CHUNK_SIZE
)

__all__ = [
    "fmt_mmss", "now_ts", "elapsed_ms", "APP_TITLE", "DEFAULT_ROUND_LENGTH_SECONDS",
    "DEFAULT_WARN_SECONDS", "DEFAULT_MAX_COURTS", "PLAYERS_PER_COURT", "BATCH_CHUNK_SIZE"
]
