"""Audible cues for the round timer."""

import logging
from typing import List, Protocol, Tuple

logger = logging.getLogger(__name__)


class ToneEmitter(Protocol):
    """Anything that can play a tone; no return value is expected."""

    def emit(self, frequency_hz: int, duration_ms: int) -> None:
        ...


class NullToneEmitter:
    """Discards tones."""

    def emit(self, frequency_hz: int, duration_ms: int) -> None:
        pass


class LoggingToneEmitter:
    """Logs tones and keeps the last few; the orchestrator status reports them to API clients."""

    def __init__(self, keep: int = 10):
        self.keep = keep
        self.recent: List[Tuple[int, int]] = []

    def emit(self, frequency_hz: int, duration_ms: int) -> None:
        logger.info("Tone %d Hz for %d ms", frequency_hz, duration_ms)
        self.recent.append((frequency_hz, duration_ms))
        del self.recent[:-self.keep]
