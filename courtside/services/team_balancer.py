"""Splitting a foursome into two balanced doubles teams."""

from typing import List, Sequence, Tuple

from ..models import Match, Player
from ..utils.constants import (
    HOMOGENEOUS_SPREAD_LIMIT, HOMOGENEOUS_DIFF_THRESHOLD, HOMOGENEOUS_PENALTY, PLAYERS_PER_COURT
)

# The three distinct ways to split four players into two pairs
SPLITS: List[Tuple[Tuple[int, int], Tuple[int, int]]] = [
    ((0, 1), (2, 3)),
    ((0, 2), (1, 3)),
    ((0, 3), (1, 2)),
]


def team_average(team: Sequence[Player]) -> float:
    return sum(p.skill_level for p in team) / len(team)


def team_spread(team: Sequence[Player]) -> int:
    levels = [p.skill_level for p in team]
    return max(levels) - min(levels)


def split_penalty(team_a: Sequence[Player], team_b: Sequence[Player]) -> float:
    """
    Score a split; lower is better.

    The base score is the gap between team averages. Two internally tight
    teams with a gap of a full point or more ("both high vs both low") get an
    extra point so a mixed split with a smaller gap wins.
    """
    diff = abs(team_average(team_a) - team_average(team_b))
    penalty = diff
    if (
        team_spread(team_a) <= HOMOGENEOUS_SPREAD_LIMIT
        and team_spread(team_b) <= HOMOGENEOUS_SPREAD_LIMIT
        and diff >= HOMOGENEOUS_DIFF_THRESHOLD
    ):
        penalty += HOMOGENEOUS_PENALTY
    return penalty


class TeamBalancer:
    """Picks the lowest-penalty 2v2 split of a foursome."""

    def balance(self, foursome: Sequence[Player]) -> Match:
        """
        Split ``foursome`` into two teams.

        The players are put in (skill, id) order first so the result does not
        depend on the order they were passed in. Ties keep the first split.

        Args:
            foursome: Exactly four distinct players

        Returns:
            Match with court 0; the orchestrator assigns the court

        Raises:
            ValueError: If the group is not four distinct players
        """
        if len(foursome) != PLAYERS_PER_COURT or len({p.id for p in foursome}) != PLAYERS_PER_COURT:
            raise ValueError("Team balancing needs exactly four distinct players")

        players = sorted(foursome, key=lambda p: (p.skill_level, p.id))
        best = None
        best_score = float("inf")
        for (a1, a2), (b1, b2) in SPLITS:
            team_a = (players[a1], players[a2])
            team_b = (players[b1], players[b2])
            score = split_penalty(team_a, team_b)
            if score < best_score:
                best, best_score = (team_a, team_b), score

        team1, team2 = best
        return Match(
            court=0,
            team1=team1,
            team2=team2,
            team1_avg=team_average(team1),
            team2_avg=team_average(team2),
            score=best_score,
        )
