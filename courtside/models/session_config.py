"""
Session configuration for the Courtside rotation application.

This module contains the options a coordinator can change for a session:
round length, warning lead time, court count and grouping mode.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from ..utils.constants import (
    DEFAULT_ROUND_LENGTH_SECONDS, MIN_ROUND_LENGTH_SECONDS, MAX_ROUND_LENGTH_SECONDS,
    DEFAULT_WARN_SECONDS, MIN_WARN_SECONDS, MAX_WARN_SECONDS,
    DEFAULT_MAX_COURTS, MIN_COURTS, MAX_COURTS,
    DEFAULT_WINDOW_SIZE, MAX_WINDOW_SIZE,
)


class GroupingMode(Enum):
    """How the group former decides which players share a court."""
    WINDOW = "window"
    BAND = "band"

    @classmethod
    def parse(cls, value: Any) -> "GroupingMode":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown grouping mode: {value!r}") from None


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


@dataclass
class SessionConfig:
    """
    Options for one session.

    Values given to the constructor are trusted; ``from_dict`` clamps
    user-supplied values to their supported bounds.

    Attributes:
        round_length_seconds: Countdown length of each round
        warn_seconds: Lead time before round end for the warning tone
        max_courts: Upper bound on courts in use
        grouping_mode: Window or Band grouping
        window_size: Starting tolerance for Window grouping
        rng_seed: Seed for tie-breaking randomness (None = name order)
        clear_presence_on_end: Whether ending the session checks everyone out
    """
    round_length_seconds: int = DEFAULT_ROUND_LENGTH_SECONDS
    warn_seconds: int = DEFAULT_WARN_SECONDS
    max_courts: int = DEFAULT_MAX_COURTS
    grouping_mode: GroupingMode = GroupingMode.BAND
    window_size: int = DEFAULT_WINDOW_SIZE
    rng_seed: Optional[int] = None
    clear_presence_on_end: bool = True

    def __post_init__(self) -> None:
        self.grouping_mode = GroupingMode.parse(self.grouping_mode)
        if self.round_length_seconds <= 0:
            raise ValueError("Round length must be positive")
        if self.warn_seconds < 0:
            raise ValueError("Warning lead time cannot be negative")
        if self.max_courts < MIN_COURTS:
            raise ValueError("At least one court is required")

    def courts_for(self, present_count: int) -> int:
        """Courts usable with ``present_count`` players, capped by ``max_courts``."""
        return max(MIN_COURTS, min(self.max_courts, present_count // 4))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "round_length_seconds": self.round_length_seconds,
            "warn_seconds": self.warn_seconds,
            "max_courts": self.max_courts,
            "grouping_mode": self.grouping_mode.value,
            "window_size": self.window_size,
            "rng_seed": self.rng_seed,
            "clear_presence_on_end": self.clear_presence_on_end,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], base: Optional["SessionConfig"] = None) -> "SessionConfig":
        """
        Build a config from user input, clamping values to their bounds.

        Args:
            data: Partial settings; missing keys keep the ``base`` value
            base: Config supplying defaults (a fresh default config if omitted)

        Raises:
            ValueError: If a value is not numeric or the mode is unknown
        """
        base = base or cls()
        seed = data.get("rng_seed", base.rng_seed)
        return cls(
            round_length_seconds=_clamp(
                int(data.get("round_length_seconds", base.round_length_seconds)),
                MIN_ROUND_LENGTH_SECONDS, MAX_ROUND_LENGTH_SECONDS,
            ),
            warn_seconds=_clamp(
                int(data.get("warn_seconds", base.warn_seconds)),
                MIN_WARN_SECONDS, MAX_WARN_SECONDS,
            ),
            max_courts=_clamp(int(data.get("max_courts", base.max_courts)), MIN_COURTS, MAX_COURTS),
            grouping_mode=GroupingMode.parse(data.get("grouping_mode", base.grouping_mode)),
            window_size=_clamp(int(data.get("window_size", base.window_size)), 1, MAX_WINDOW_SIZE),
            rng_seed=int(seed) if seed is not None else None,
            clear_presence_on_end=bool(data.get("clear_presence_on_end", base.clear_presence_on_end)),
        )
