"""Grouping of selected players into skill-compatible foursomes."""

import logging
from typing import Iterable, List, NamedTuple, Optional, Sequence

from ..models import GroupingMode, Player
from ..utils.constants import (
    DEFAULT_WINDOW_SIZE, MAX_WINDOW_SIZE, MAX_BAND_WINDOW, PLAYERS_PER_COURT
)
from .fairness_selector import dedupe_players
from .skill_bands import SkillBandIndex

logger = logging.getLogger(__name__)


Foursome = List[Player]


class GroupingOutcome(NamedTuple):
    """Foursomes plus the tolerance that produced them."""
    foursomes: List[Foursome]
    tolerance: int
    fallback: bool


class GroupFormer:
    """
    Partitions playing players into foursomes of comparable skill.

    Both modes run the same greedy pass over an immutable, skill-sorted
    snapshot: each unused player seeds a group and pulls in the nearest
    unused players whose key is within the tolerance of the seed's key.
    Window mode keys on the raw rating, Band mode on the rating's band. A pass
    that cannot fill every court is thrown away and retried with a wider
    tolerance; past the ceiling the sorted list is simply cut into fours.
    """

    def __init__(
        self,
        window_size: int = DEFAULT_WINDOW_SIZE,
        max_window: int = MAX_WINDOW_SIZE,
        max_band_window: int = MAX_BAND_WINDOW,
    ):
        self.window_size = window_size
        self.max_window = max_window
        self.max_band_window = max_band_window

    def group(self, playing: Iterable[Player], mode: GroupingMode, courts_count: int) -> List[Foursome]:
        """Return at most ``courts_count`` foursomes of distinct players."""
        return self.form_groups(playing, mode, courts_count).foursomes

    def form_groups(
        self, playing: Iterable[Player], mode: GroupingMode, courts_count: int
    ) -> GroupingOutcome:
        """
        Group players and report which tolerance was needed.

        Args:
            playing: Players chosen to play (duplicates by id are ignored)
            mode: Window or Band grouping
            courts_count: Maximum number of foursomes to produce

        Returns:
            GroupingOutcome; ``fallback`` is True when contiguous chunking was used
        """
        mode = GroupingMode.parse(mode)
        ordered = sorted(dedupe_players(playing), key=lambda p: (p.skill_level, p.id))
        target = min(max(0, courts_count), len(ordered) // PLAYERS_PER_COURT)
        if target == 0:
            return GroupingOutcome([], 0, False)

        if mode is GroupingMode.BAND:
            keys = [SkillBandIndex.band_of(p.skill_level) for p in ordered]
            start, ceiling = 0, self.max_band_window
        else:
            keys = [p.skill_level for p in ordered]
            start, ceiling = min(self.window_size, self.max_window), self.max_window

        for tolerance in range(start, ceiling + 1):
            groups = self._greedy_pass(keys, tolerance, target)
            if groups is not None:
                logger.debug("Formed %d %s groups at tolerance %d", target, mode.value, tolerance)
                return GroupingOutcome(
                    [[ordered[i] for i in group] for group in groups], tolerance, False
                )

        logger.info(
            "No %s grouping filled %d courts up to tolerance %d; chunking by skill",
            mode.value, target, ceiling,
        )
        chunks = [
            ordered[i:i + PLAYERS_PER_COURT]
            for i in range(0, target * PLAYERS_PER_COURT, PLAYERS_PER_COURT)
        ]
        return GroupingOutcome(chunks, ceiling, True)

    @staticmethod
    def _greedy_pass(keys: Sequence[int], tolerance: int, target: int) -> Optional[List[List[int]]]:
        """One seed-by-seed pass; None when fewer than ``target`` groups form."""
        used = set()
        groups: List[List[int]] = []

        for seed in range(len(keys)):
            if len(groups) == target:
                break
            if seed in used:
                continue

            group = [seed]
            nearby = sorted(
                (j for j in range(len(keys)) if j != seed and j not in used),
                key=lambda j: (abs(j - seed), j),
            )
            for j in nearby:
                if abs(keys[j] - keys[seed]) > tolerance:
                    continue
                group.append(j)
                if len(group) == PLAYERS_PER_COURT:
                    break

            if len(group) == PLAYERS_PER_COURT:
                used.update(group)
                groups.append(sorted(group))

        return groups if len(groups) == target else None
