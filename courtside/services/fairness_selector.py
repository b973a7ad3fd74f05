"""Fairness-first selection of who plays and who sits out a round."""

import logging
import random
from typing import Callable, Dict, Iterable, List, NamedTuple, Optional, Set, Tuple

from ..models import Player
from ..utils.constants import PLAYERS_PER_COURT

logger = logging.getLogger(__name__)


class Selection(NamedTuple):
    """Result of a selection: ``playing`` and ``benched`` partition the present players."""
    playing: List[Player]
    benched: List[Player]


def dedupe_players(players: Iterable[Player]) -> List[Player]:
    """Drop repeated ids, keeping the first occurrence."""
    seen: Set[str] = set()
    unique = []
    for player in players:
        if player.id in seen:
            continue
        seen.add(player.id)
        unique.append(player)
    return unique


def players_needed(present_count: int, courts_count: int) -> int:
    """Number of players that can be put on court this round."""
    if present_count < PLAYERS_PER_COURT:
        return 0
    full = present_count - present_count % PLAYERS_PER_COURT
    return min(full, max(1, courts_count) * PLAYERS_PER_COURT)


class FairnessSelector:
    """
    Chooses the subset of present players who play this round.

    Priority to play, highest first: more times benched, longer since last
    played, then a tie-break (a seeded random draw when an RNG is supplied,
    otherwise name order). Nobody is benched while a player with a lower
    bench count is playing, unless the bench quota cannot be filled otherwise.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng

    def select(
        self,
        present: Iterable[Player],
        round_number: int,
        last_benched_ids: Optional[Set[str]] = None,
        courts_count: int = 1,
        rng: Optional[random.Random] = None,
    ) -> Selection:
        """
        Split present players into playing and benched for ``round_number``.

        Args:
            present: Players checked in (duplicates by id are ignored)
            round_number: Round being generated (used for logging only)
            last_benched_ids: Ids benched in the previous round
            courts_count: Courts available this round
            rng: Overrides the selector's own random source for this call

        Returns:
            Selection with ``playing`` empty when fewer than 4 are present
        """
        unique = dedupe_players(present)
        last_benched = set(last_benched_ids or ())
        need = players_needed(len(unique), courts_count)
        if need == 0:
            logger.debug("Round %s: only %d present, nobody can play", round_number, len(unique))
            return Selection([], unique)

        ranked = self._rank(unique, rng or self.rng)
        quota = len(unique) - need
        bench_ids = self._choose_bench(ranked, quota)
        bench_ids = self._avoid_consecutive_bench(ranked, bench_ids, last_benched)

        playing = [p for p in unique if p.id not in bench_ids]
        benched = [p for p in unique if p.id in bench_ids]
        logger.debug(
            "Round %s: %d playing, %d benched (%s)",
            round_number, len(playing), len(benched), ", ".join(p.name for p in benched),
        )
        return Selection(playing, benched)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _rank(players: List[Player], rng: Optional[random.Random]) -> List[Player]:
        """Order players by priority to play, best first."""
        tiebreak: Callable[[Player], Tuple]
        if rng is not None:
            draws: Dict[str, float] = {p.id: rng.random() for p in players}
            tiebreak = lambda p: (draws[p.id], p.id)
        else:
            tiebreak = lambda p: (p.sort_name(), p.id)
        return sorted(players, key=lambda p: (-p.bench_count, p.last_played_round, tiebreak(p)))

    @staticmethod
    def _choose_bench(ranked: List[Player], quota: int) -> Set[str]:
        if quota <= 0:
            return set()

        lowest_first = list(reversed(ranked))
        min_bench = min(p.bench_count for p in ranked)
        bench = [p for p in lowest_first if p.bench_count == min_bench][:quota]

        if len(bench) < quota:
            # Not enough players at the minimum; take the next-lowest priorities
            chosen = {p.id for p in bench}
            extra = [p for p in lowest_first if p.id not in chosen]
            bench.extend(extra[: quota - len(bench)])

        return {p.id for p in bench}

    @staticmethod
    def _avoid_consecutive_bench(
        ranked: List[Player], bench_ids: Set[str], last_benched: Set[str]
    ) -> Set[str]:
        """Swap repeat benchers with equal-count players who played last round."""
        if not bench_ids or not last_benched:
            return bench_ids

        bench_ids = set(bench_ids)
        for player in ranked:
            if player.id not in bench_ids or player.id not in last_benched:
                continue
            for candidate in reversed(ranked):
                if (
                    candidate.id not in bench_ids
                    and candidate.id not in last_benched
                    and candidate.bench_count == player.bench_count
                ):
                    bench_ids.discard(player.id)
                    bench_ids.add(candidate.id)
                    break
        return bench_ids
