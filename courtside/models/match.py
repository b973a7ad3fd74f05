"""Dataclasses describing the matches and rounds produced by the scheduler."""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Tuple

from .player import Player


Team = Tuple[Player, Player]


@dataclass(frozen=True)
class Match:
    """
    One court's 2v2 match.

    Attributes:
        court: 1-based court index (0 until the orchestrator assigns it)
        team1: First pair of players
        team2: Second pair of players
        team1_avg: Average skill of team1
        team2_avg: Average skill of team2
        score: Balancer penalty for this split (lower is better)
    """
    court: int
    team1: Team
    team2: Team
    team1_avg: float
    team2_avg: float
    score: float = 0.0

    @property
    def diff(self) -> float:
        return abs(self.team1_avg - self.team2_avg)

    @property
    def players(self) -> List[Player]:
        return [*self.team1, *self.team2]

    @property
    def player_ids(self) -> List[str]:
        return [p.id for p in self.players]

    def on_court(self, court: int) -> "Match":
        return replace(self, court=court)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "court": self.court,
            "team1": [p.to_dict() for p in self.team1],
            "team2": [p.to_dict() for p in self.team2],
            "team1_avg": self.team1_avg,
            "team2_avg": self.team2_avg,
            "diff": self.diff,
            "score": self.score,
        }


@dataclass(frozen=True)
class RoundMeta:
    """Build diagnostics recorded alongside a round."""
    tolerance: int = 0
    fallback: bool = False
    build_ms: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {"tolerance": self.tolerance, "fallback": self.fallback, "build_ms": self.build_ms}


@dataclass(frozen=True)
class Round:
    """
    A generated round: one match per court plus the players sitting out.

    Rounds are never mutated; the next round replaces the previous one.
    """
    number: int
    matches: Tuple[Match, ...]
    benched: Tuple[Player, ...] = ()
    meta: RoundMeta = field(default_factory=RoundMeta)

    @property
    def playing_ids(self) -> List[str]:
        return [pid for match in self.matches for pid in match.player_ids]

    @property
    def benched_ids(self) -> List[str]:
        return [p.id for p in self.benched]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "number": self.number,
            "matches": [m.to_dict() for m in self.matches],
            "benched": [p.to_dict() for p in self.benched],
            "meta": self.meta.to_dict(),
        }
