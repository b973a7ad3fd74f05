"""
Player model for the Courtside rotation application.

This module contains the Player dataclass which mirrors one row of the
external roster store: identity, skill rating, presence and the play/bench
history the fairness selector reads.
"""
from dataclasses import dataclass, replace
from typing import Any, Dict

from ..utils.constants import MIN_SKILL_LEVEL, MAX_SKILL_LEVEL, DEFAULT_SKILL_LEVEL


# Columns written back to the roster store after a round
STAT_FIELDS = ("bench_count", "last_played_round")


@dataclass
class Player:
    """
    Represents a club player as seen by the rotation scheduler.

    Attributes:
        id: Opaque unique identifier assigned by the roster store
        name: Display name
        skill_level: Skill rating (1-10)
        is_present: Whether the player has checked in for tonight's session
        bench_count: Times benched this session
        last_played_round: Round number of the last appearance (0 = never)
    """
    id: str
    name: str
    skill_level: int = DEFAULT_SKILL_LEVEL
    is_present: bool = False
    bench_count: int = 0
    last_played_round: int = 0

    def __post_init__(self) -> None:
        self.id = str(self.id)
        self.skill_level = int(self.skill_level)
        if not MIN_SKILL_LEVEL <= self.skill_level <= MAX_SKILL_LEVEL:
            raise ValueError(
                f"Skill level must be between {MIN_SKILL_LEVEL} and {MAX_SKILL_LEVEL}"
            )
        self.bench_count = max(0, int(self.bench_count or 0))
        self.last_played_round = max(0, int(self.last_played_round or 0))

    def with_stats(self, **fields: Any) -> "Player":
        """Return a copy with the given fields replaced."""
        return replace(self, **fields)

    def sort_name(self) -> str:
        return self.name.lower()

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert player to dictionary for JSON serialization.

        Returns:
            Dictionary keyed by roster-store column names
        """
        return {
            "id": self.id,
            "name": self.name,
            "skill_level": self.skill_level,
            "is_present": self.is_present,
            "bench_count": self.bench_count,
            "last_played_round": self.last_played_round,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Player":
        """
        Create player from a roster-store row.

        Args:
            data: Dictionary representation of player

        Returns:
            Player instance

        Raises:
            KeyError: If ``id`` or ``name`` is missing
            ValueError: If the skill level is out of range
        """
        return cls(
            id=data["id"],
            name=data["name"],
            skill_level=data.get("skill_level", DEFAULT_SKILL_LEVEL),
            is_present=bool(data.get("is_present", False)),
            bench_count=data.get("bench_count") or 0,
            last_played_round=data.get("last_played_round") or 0,
        )
