"""Round countdown and the background ticker that drives it."""

import threading
from enum import Enum
from typing import Callable, Dict, Optional

from ..utils import fmt_mmss
from ..utils.constants import TICK_INTERVAL_SECONDS


class TimerEvent(Enum):
    """What a single tick produced."""
    NONE = "none"
    WARNING = "warning"
    EXPIRED = "expired"


class RoundTimer:
    """Countdown for one round, advanced one second per :meth:`tick`."""

    def __init__(self, round_length_seconds: int, warn_seconds: int):
        self.round_length_seconds = round_length_seconds
        self.warn_seconds = warn_seconds
        self.remaining_seconds = round_length_seconds
        self.running = False
        self._warned = False

    # ------------------------------------------------------------------
    # Configuration helpers
    # ------------------------------------------------------------------
    def configure(
        self,
        *,
        round_length_seconds: Optional[int] = None,
        warn_seconds: Optional[int] = None,
    ) -> None:
        """Change lengths; they take effect at the next :meth:`reset`."""
        if round_length_seconds is not None:
            if round_length_seconds <= 0:
                raise ValueError("Round length must be positive")
            self.round_length_seconds = int(round_length_seconds)
        if warn_seconds is not None:
            if warn_seconds < 0:
                raise ValueError("Warning lead time cannot be negative")
            self.warn_seconds = int(warn_seconds)

    # ------------------------------------------------------------------
    # Core timer controls
    # ------------------------------------------------------------------
    def reset(self) -> None:
        """Stop and rewind to a full round."""
        self.remaining_seconds = self.round_length_seconds
        self.running = False
        self._warned = False

    def start(self) -> None:
        if self.remaining_seconds > 0:
            self.running = True

    def pause(self) -> None:
        self.running = False

    def resume(self) -> None:
        self.start()

    def tick(self) -> TimerEvent:
        """
        Count down one second.

        Returns:
            WARNING once when the warning threshold is reached, EXPIRED when
            the countdown hits zero (the timer stops), otherwise NONE
        """
        if not self.running or self.remaining_seconds <= 0:
            return TimerEvent.NONE

        self.remaining_seconds -= 1
        if self.remaining_seconds == 0:
            self.running = False
            return TimerEvent.EXPIRED
        if not self._warned and self.remaining_seconds == self.warn_seconds:
            self._warned = True
            return TimerEvent.WARNING
        return TimerEvent.NONE

    # ------------------------------------------------------------------
    # Query helpers
    # ------------------------------------------------------------------
    @property
    def elapsed_seconds(self) -> int:
        return self.round_length_seconds - self.remaining_seconds

    def get_timer_configuration(self) -> Dict[str, object]:
        return {
            "round_length_seconds": self.round_length_seconds,
            "warn_seconds": self.warn_seconds,
            "remaining_seconds": self.remaining_seconds,
            "remaining_display": fmt_mmss(self.remaining_seconds),
            "elapsed_seconds": self.elapsed_seconds,
            "running": self.running,
        }


class TickerThread(threading.Thread):
    """
    Calls ``callback(token)`` once per interval until cancelled.

    The token lets the receiver ignore ticks from a ticker it has already
    replaced.
    """

    def __init__(
        self,
        callback: Callable[[int], object],
        token: int,
        interval: float = TICK_INTERVAL_SECONDS,
    ):
        super().__init__(name=f"round-ticker-{token}", daemon=True)
        self.callback = callback
        self.token = token
        self.interval = interval
        self._stop_event = threading.Event()

    def run(self) -> None:
        while not self._stop_event.wait(self.interval):
            self.callback(self.token)

    def cancel(self) -> None:
        self._stop_event.set()

    @property
    def cancelled(self) -> bool:
        return self._stop_event.is_set()
