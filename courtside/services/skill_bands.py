"""Coarse skill bands used by Band-mode grouping."""

from typing import List, Tuple

from ..utils.constants import BAND_WIDTH, MIN_SKILL_LEVEL, MAX_SKILL_LEVEL


class SkillBandIndex:
    """Maps a 1-10 skill rating to a band of width 2: [1,2], [3,4], ... [9,10]."""

    BANDS: List[Tuple[int, int]] = [
        (low, low + BAND_WIDTH - 1)
        for low in range(MIN_SKILL_LEVEL, MAX_SKILL_LEVEL + 1, BAND_WIDTH)
    ]

    @staticmethod
    def band_of(skill_level: int) -> int:
        """Return the 0-based band index for ``skill_level``."""
        level = max(MIN_SKILL_LEVEL, min(MAX_SKILL_LEVEL, int(skill_level)))
        return (level - MIN_SKILL_LEVEL) // BAND_WIDTH
