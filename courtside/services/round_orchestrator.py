"""
Round orchestration for the Courtside rotation application.

The orchestrator owns the round counter, the countdown and the session's
memory. On every round boundary it runs selection, grouping and team
balancing in that order, records the result and hands the stat updates to
the background writer.
"""
import logging
import random
import threading
import time
from concurrent.futures import Future
from enum import Enum
from typing import Any, Dict, List, Optional

from ..models import Player, Round, RoundMeta, SessionConfig, SessionState
from ..errors import RosterStoreError
from ..utils import elapsed_ms
from ..utils.constants import WARNING_TONE, ROUND_END_TONE
from .fairness_selector import FairnessSelector
from .group_former import GroupFormer
from .persistence_service import BatchWriteReport, PersistenceService
from .roster_store import RosterStore, UpdateRecord
from .round_timer import RoundTimer, TickerThread, TimerEvent
from .team_balancer import TeamBalancer
from .tone_emitter import NullToneEmitter, ToneEmitter

logger = logging.getLogger(__name__)

CANNOT_GENERATE_ROUND = "Cannot generate round: at least 4 present players are needed"


class OrchestratorState(Enum):
    IDLE = "idle"
    ROUND_ACTIVE = "round_active"
    PAUSED = "paused"


class RoundOrchestrator:
    """
    State machine driving a rotation session.

    ``idle`` -> ``round_active`` (start) <-> ``paused`` (pause/resume);
    ``end`` returns to ``idle`` from anywhere. A countdown reaching zero, or
    ``manual_next``, completes the round and starts the next one. Every event
    holds the same lock, so a tick can never interleave with round generation.
    """

    def __init__(
        self,
        store: RosterStore,
        config: Optional[SessionConfig] = None,
        persistence: Optional[PersistenceService] = None,
        tone_emitter: Optional[ToneEmitter] = None,
        selector: Optional[FairnessSelector] = None,
        group_former: Optional[GroupFormer] = None,
        balancer: Optional[TeamBalancer] = None,
        rng: Optional[random.Random] = None,
        auto_tick: bool = False,
    ):
        self.store = store
        self.config = config or SessionConfig()
        self.persistence = persistence or PersistenceService(store)
        self.tones = tone_emitter or NullToneEmitter()
        self.selector = selector or FairnessSelector()
        self.group_former = group_former or GroupFormer(window_size=self.config.window_size)
        self.balancer = balancer or TeamBalancer()
        self.timer = RoundTimer(self.config.round_length_seconds, self.config.warn_seconds)
        self.auto_tick = auto_tick

        self.state = OrchestratorState.IDLE
        self.last_error: Optional[str] = None
        self.last_write: Optional[BatchWriteReport] = None

        self._rng = rng
        self._roster: List[Player] = []
        self._pending: List[Future] = []
        self._lock = threading.RLock()
        self._token = 0
        self._ticker: Optional[TickerThread] = None
        self.session = self._new_session()

    # ------------------------------------------------------------------
    # Configuration helpers
    # ------------------------------------------------------------------
    def configure(self, config: SessionConfig) -> None:
        """
        Replace the session options.

        Timer lengths apply from the next round; the grouping mode applies
        to the next round generated.
        """
        with self._lock:
            self.config = config
            self.timer.configure(
                round_length_seconds=config.round_length_seconds,
                warn_seconds=config.warn_seconds,
            )
            self.group_former.window_size = config.window_size
            self.session.grouping_mode = config.grouping_mode
            if config.rng_seed is not None and self._rng is None:
                self.session.rng = random.Random(config.rng_seed)
            if self.state is OrchestratorState.IDLE:
                self.timer.reset()

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------
    def start(self) -> bool:
        """Begin a new session with round 1; False (and idle) if it cannot be built."""
        with self._lock:
            self._cancel_ticker()
            self.session = self._new_session()
            self.timer.reset()
            self.state = OrchestratorState.IDLE

            first = self._build_round(1)
            if first is None:
                return False

            self._apply_round(first)
            self.state = OrchestratorState.ROUND_ACTIVE
            self.timer.start()
            self._start_ticker()
            return True

    def pause(self) -> bool:
        with self._lock:
            if self.state is not OrchestratorState.ROUND_ACTIVE:
                return False
            self._cancel_ticker()
            self.timer.pause()
            self.state = OrchestratorState.PAUSED
            return True

    def resume(self) -> bool:
        with self._lock:
            if self.state is not OrchestratorState.PAUSED:
                return False
            self.timer.resume()
            self.state = OrchestratorState.ROUND_ACTIVE
            self._start_ticker()
            return True

    def end(self) -> bool:
        """Stop the session, clear rounds and, if configured, check everyone out."""
        with self._lock:
            self._cancel_ticker()
            had_session = self.session.round_number > 0
            if had_session and self.config.clear_presence_on_end and self._roster:
                self._submit([
                    UpdateRecord(p.id, {"is_present": False, "last_played_round": 0})
                    for p in self._roster
                ])
            self.session = self._new_session()
            self.timer.reset()
            self.state = OrchestratorState.IDLE
            self.last_error = None
            if had_session:
                logger.info("Session ended")
            return had_session

    def manual_next(self, expected_round: Optional[int] = None) -> bool:
        """
        Complete the current round now.

        Args:
            expected_round: Round the caller is looking at; if the session has
                already moved past it, nothing happens

        Returns:
            True if a new round was generated
        """
        with self._lock:
            if self.state is OrchestratorState.IDLE:
                return False
            target = self.session.round_number if expected_round is None else expected_round
            return self._complete_round(target)

    def tick(self, token: Optional[int] = None) -> TimerEvent:
        """Advance the countdown by one second."""
        with self._lock:
            if token is not None and token != self._token:
                return TimerEvent.NONE
            if self.state is not OrchestratorState.ROUND_ACTIVE:
                return TimerEvent.NONE

            event = self.timer.tick()
            if event is TimerEvent.WARNING:
                self.tones.emit(*WARNING_TONE)
            elif event is TimerEvent.EXPIRED:
                self.tones.emit(*ROUND_END_TONE)
                if not self._complete_round(self.session.round_number, announce=False):
                    # Keep the current matches on court and try again next expiry
                    self.timer.reset()
                    self.timer.start()
            return event

    # ------------------------------------------------------------------
    # Query helpers
    # ------------------------------------------------------------------
    @property
    def current_round(self) -> Optional[Round]:
        return self.session.current_round

    @property
    def round_number(self) -> int:
        return self.session.round_number

    def status(self) -> Dict[str, Any]:
        with self._lock:
            current = self.current_round
            return {
                "state": self.state.value,
                "round_number": self.session.round_number,
                "grouping_mode": self.session.grouping_mode.value,
                "timer": self.timer.get_timer_configuration(),
                "round": current.to_dict() if current else None,
                "last_error": self.last_error,
                "last_write": self.last_write.to_dict() if self.last_write else None,
                "config": self.config.to_dict(),
                "recent_tones": [list(tone) for tone in getattr(self.tones, "recent", ())],
            }

    def known_roster(self) -> List[Player]:
        """Last roster snapshot with this session's stats applied."""
        with self._lock:
            return self.session.overlay(self._roster)

    def reset_player_stats(self) -> None:
        """Forget in-memory bench/last-played stats after an admin reset."""
        with self._lock:
            self.session.reset_player_stats()

    def wait_for_writes(self, timeout: Optional[float] = None) -> List[BatchWriteReport]:
        """Block until queued roster writes finish; returns their reports."""
        with self._lock:
            pending, self._pending = self._pending, []
        return [future.result(timeout=timeout) for future in pending]

    def shutdown(self) -> None:
        with self._lock:
            self._cancel_ticker()
        self.persistence.shutdown(wait=True)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _new_session(self) -> SessionState:
        rng = self._rng
        if rng is None and self.config.rng_seed is not None:
            rng = random.Random(self.config.rng_seed)
        return SessionState(grouping_mode=self.config.grouping_mode, rng=rng)

    def _refresh_roster(self) -> List[Player]:
        """Present players from the store, with this session's stats on top."""
        try:
            self._roster = self.store.list()
        except RosterStoreError as e:
            logger.error("Could not refresh roster, using last known players: %s", e)
        return [p for p in self.session.overlay(self._roster) if p.is_present]

    def _build_round(self, number: int) -> Optional[Round]:
        started = time.perf_counter()
        present = self._refresh_roster()
        courts = self.config.courts_for(len(present))

        selection = self.selector.select(
            present, number, self.session.last_benched_ids, courts, rng=self.session.rng
        )
        if not selection.playing:
            self.last_error = CANNOT_GENERATE_ROUND
            logger.warning("%s (%d present)", CANNOT_GENERATE_ROUND, len(present))
            return None

        outcome = self.group_former.form_groups(selection.playing, self.session.grouping_mode, courts)
        matches = tuple(
            self.balancer.balance(foursome).on_court(court)
            for court, foursome in enumerate(outcome.foursomes, start=1)
        )
        on_court = {pid for match in matches for pid in match.player_ids}
        benched = list(selection.benched) + [p for p in selection.playing if p.id not in on_court]

        return Round(
            number=number,
            matches=matches,
            benched=tuple(benched),
            meta=RoundMeta(
                tolerance=outcome.tolerance,
                fallback=outcome.fallback,
                build_ms=elapsed_ms(started),
            ),
        )

    def _complete_round(self, expected_round: int, announce: bool = True) -> bool:
        """Generate the next round; ``announce`` plays the round-end tone when it starts."""
        if expected_round != self.session.round_number:
            logger.debug("Ignoring completion for stale round %s", expected_round)
            return False

        next_round = self._build_round(self.session.round_number + 1)
        if next_round is None:
            return False

        if announce:
            self.tones.emit(*ROUND_END_TONE)
        self._apply_round(next_round)
        self.timer.reset()
        self.state = OrchestratorState.ROUND_ACTIVE
        self.timer.start()
        self._start_ticker()
        return True

    def _apply_round(self, new_round: Round) -> None:
        self.session.record_round(new_round)
        self.last_error = None
        self._submit(self._stat_updates(new_round))
        logger.info(
            "Round %d: %d court(s), %d benched%s",
            new_round.number, len(new_round.matches), len(new_round.benched),
            " (fallback grouping)" if new_round.meta.fallback else "",
        )

    @staticmethod
    def _stat_updates(new_round: Round) -> List[UpdateRecord]:
        updates = [
            UpdateRecord(p.id, {"bench_count": p.bench_count + 1}) for p in new_round.benched
        ]
        updates.extend(
            UpdateRecord(p.id, {"last_played_round": new_round.number})
            for match in new_round.matches
            for p in match.players
        )
        return updates

    def _submit(self, updates: List[UpdateRecord]) -> None:
        if not updates:
            return
        self._pending = [f for f in self._pending if not f.done()]
        future = self.persistence.submit(updates)
        future.add_done_callback(self._on_write_done)
        self._pending.append(future)

    def _on_write_done(self, future: Future) -> None:
        try:
            report = future.result()
        except Exception:
            logger.exception("Background roster write crashed")
            return
        self.last_write = report
        if not report.ok:
            logger.warning("Roster write incomplete: %s", report.failure)

    def _start_ticker(self) -> None:
        if not self.auto_tick:
            return
        self._cancel_ticker()
        self._token += 1
        self._ticker = TickerThread(self.tick, self._token)
        self._ticker.start()

    def _cancel_ticker(self) -> None:
        self._token += 1
        if self._ticker is not None:
            self._ticker.cancel()
            self._ticker = None
