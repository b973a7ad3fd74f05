"""
Utility functions for the Courtside rotation application.

This module contains common time helpers used throughout the application.
"""
import time


def fmt_mmss(seconds: int) -> str:
    """
    Format seconds as MM:SS string.

    Args:
        seconds: Number of seconds to format

    Returns:
        Formatted time string in MM:SS format

    Example:
        >>> fmt_mmss(720)
        '12:00'
        >>> fmt_mmss(65)
        '01:05'
    """
    seconds = max(0, int(seconds))
    m = seconds // 60
    s = seconds % 60
    return f"{m:02d}:{s:02d}"


def now_ts() -> float:
    """Current timestamp in epoch seconds."""
    return time.time()


def elapsed_ms(start: float) -> int:
    """Milliseconds elapsed since ``start`` (a ``time.perf_counter`` value)."""
    return int(round((time.perf_counter() - start) * 1000))
