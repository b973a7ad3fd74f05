"""Dataclasses representing session fairness reports."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass
class PlayerFairnessSummary:
    """Aggregated play/bench information for a single player."""

    id: str
    name: str
    skill_level: int
    played: int
    benched: int
    unique_teammates: int
    unique_opponents: int
    worst_bench_streak: int


@dataclass
class RoundDiagnostics:
    """Per-round build diagnostics."""

    number: int
    build_ms: int
    courts_used: int
    average_diff: float
    tolerance: int
    fallback: bool


@dataclass
class SessionReport:
    """Snapshot of play distribution for the current session."""

    generated_ts: float
    rounds_played: int
    present_count: int
    players: List[PlayerFairnessSummary] = field(default_factory=list)
    rounds: List[RoundDiagnostics] = field(default_factory=list)
    mean_played: float = 0.0
    sd_played: float = 0.0
    spread: int = 0
    fairness_ratio: float = 0.0
    average_build_ms: Optional[float] = None
    played_counts: Dict[str, int] = field(default_factory=dict)
