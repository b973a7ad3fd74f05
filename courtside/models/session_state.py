"""
SessionState model for the Courtside rotation application.

This module contains the SessionState dataclass which holds everything the
orchestrator remembers between rounds of one session: the round counter,
last round's bench, teammate/opponent memory and in-memory player stats.
"""
import random
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Set, Tuple

from .match import Round
from .player import Player
from .session_config import GroupingMode
from ..utils.constants import HISTORY_WINDOW_ROUNDS


PairKey = Tuple[str, str]


def pair_key(a: str, b: str) -> PairKey:
    """Unordered pair of player ids as a hashable key."""
    return (a, b) if a <= b else (b, a)


@dataclass
class SessionState:
    """
    Represents the in-memory state of one rotation session.

    Attributes:
        round_number: Current round (0 before the first round)
        last_benched_ids: Ids benched in the most recent round
        teammate_history: Pair -> recent round numbers the two were partners
        opponent_history: Pair -> recent round numbers the two faced each other
        grouping_mode: Active grouping mode
        bench_counts: Player id -> bench count applied this session
        last_played: Player id -> last round played this session
        rounds: Rounds generated this session, oldest first
        history_window: Number of most recent rounds kept in pair history
        rng: Random source for selection tie-breaks
    """
    round_number: int = 0
    last_benched_ids: Set[str] = field(default_factory=set)
    teammate_history: Dict[PairKey, List[int]] = field(default_factory=dict)
    opponent_history: Dict[PairKey, List[int]] = field(default_factory=dict)
    grouping_mode: GroupingMode = GroupingMode.BAND
    bench_counts: Dict[str, int] = field(default_factory=dict)
    last_played: Dict[str, int] = field(default_factory=dict)
    rounds: List[Round] = field(default_factory=list)
    history_window: int = HISTORY_WINDOW_ROUNDS
    rng: Optional[random.Random] = None

    @property
    def current_round(self) -> Optional[Round]:
        return self.rounds[-1] if self.rounds else None

    def overlay(self, players: Iterable[Player]) -> List[Player]:
        """
        Apply this session's stats on top of a roster snapshot.

        The roster store is written in the background, so a fresh snapshot
        can lag behind what this session has already decided.
        """
        merged = []
        for player in players:
            if player.id in self.bench_counts or player.id in self.last_played:
                player = player.with_stats(
                    bench_count=self.bench_counts.get(player.id, player.bench_count),
                    last_played_round=self.last_played.get(player.id, player.last_played_round),
                )
            merged.append(player)
        return merged

    def record_round(self, new_round: Round) -> None:
        """Advance the session to ``new_round`` and update all memory."""
        self.round_number = new_round.number
        self.last_benched_ids = set(new_round.benched_ids)
        self.rounds.append(new_round)

        for player in new_round.benched:
            self.bench_counts[player.id] = player.bench_count + 1
            self.last_played.setdefault(player.id, player.last_played_round)

        for match in new_round.matches:
            for player in match.players:
                self.last_played[player.id] = new_round.number
                self.bench_counts.setdefault(player.id, player.bench_count)
            for team in (match.team1, match.team2):
                key = pair_key(team[0].id, team[1].id)
                self.teammate_history.setdefault(key, []).append(new_round.number)
            for a in match.team1:
                for b in match.team2:
                    self.opponent_history.setdefault(pair_key(a.id, b.id), []).append(new_round.number)

        self.trim_history()

    def trim_history(self) -> None:
        """Drop pair history older than ``history_window`` rounds."""
        oldest = self.round_number - self.history_window + 1
        for history in (self.teammate_history, self.opponent_history):
            for key in list(history):
                recent = [r for r in history[key] if r >= oldest]
                if recent:
                    history[key] = recent
                else:
                    del history[key]

    def times_teamed(self, a: str, b: str) -> int:
        return len(self.teammate_history.get(pair_key(a, b), []))

    def times_opposed(self, a: str, b: str) -> int:
        return len(self.opponent_history.get(pair_key(a, b), []))

    def reset_player_stats(self) -> None:
        """Forget in-memory bench/last-played overlays (after an admin reset)."""
        self.bench_counts.clear()
        self.last_played.clear()

    def to_json(self) -> dict:
        """
        Convert SessionState to JSON-serializable dictionary.

        Returns:
            Dictionary representation suitable for JSON serialization
        """
        return {
            "round_number": self.round_number,
            "last_benched_ids": sorted(self.last_benched_ids),
            "grouping_mode": self.grouping_mode.value,
            "teammate_history": [
                {"pair": list(k), "rounds": list(v)} for k, v in sorted(self.teammate_history.items())
            ],
            "opponent_history": [
                {"pair": list(k), "rounds": list(v)} for k, v in sorted(self.opponent_history.items())
            ],
            "bench_counts": dict(self.bench_counts),
            "last_played": dict(self.last_played),
            "history_window": self.history_window,
        }
