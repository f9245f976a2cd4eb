"""Level bands derived from a student's all-time high talent."""

from __future__ import annotations

from bisect import bisect_right
from typing import NamedTuple, Optional


class LevelBand(NamedTuple):
    level: int
    threshold: int
    name: str
    color_band: str


class LevelInfo(NamedTuple):
    level: int
    name: str
    color_band: str
    lower: int
    upper: Optional[int]


# Ordered by threshold; the last band is open-ended.
LEVEL_TABLE: tuple[LevelBand, ...] = (
    LevelBand(1, 0, "Seed", "from-gray-400 to-gray-500"),
    LevelBand(2, 1000, "Sprout", "from-lime-400 to-green-500"),
    LevelBand(3, 2000, "Sapling", "from-green-400 to-emerald-500"),
    LevelBand(4, 3000, "Blossom", "from-pink-400 to-rose-500"),
    LevelBand(5, 4000, "Fruit", "from-orange-400 to-amber-500"),
    LevelBand(6, 5000, "Tree", "from-teal-400 to-cyan-500"),
    LevelBand(7, 6000, "Grove", "from-sky-400 to-blue-500"),
    LevelBand(8, 7000, "Forest", "from-indigo-400 to-violet-500"),
    LevelBand(9, 8000, "Summit", "from-purple-500 to-fuchsia-500"),
    LevelBand(10, 9000, "Level Up Master", "from-yellow-400 to-red-500"),
)

_THRESHOLDS = [band.threshold for band in LEVEL_TABLE]
MAX_LEVEL = LEVEL_TABLE[-1].level


def _band_index(max_talent: int) -> int:
    return bisect_right(_THRESHOLDS, max(max_talent, 0)) - 1


def level_for(max_talent: int) -> LevelInfo:
    """Return the level band containing ``max_talent``.

    Values past the last threshold clamp to the top level. Negative input is
    treated as zero so the function never fails.
    """

    index = _band_index(max_talent)
    band = LEVEL_TABLE[index]
    upper = LEVEL_TABLE[index + 1].threshold if index + 1 < len(LEVEL_TABLE) else None
    return LevelInfo(band.level, band.name, band.color_band, band.threshold, upper)


def band_span(max_talent: int) -> int:
    """Width of the band containing ``max_talent``.

    The open top band reuses the width of the last closed band.
    """

    info = level_for(max_talent)
    if info.upper is not None:
        return info.upper - info.lower
    return LEVEL_TABLE[-1].threshold - LEVEL_TABLE[-2].threshold


def progress(max_talent: int) -> float:
    """Fraction of the way through the current band, in ``[0, 1)``."""

    info = level_for(max_talent)
    span = band_span(max_talent)
    return ((max(max_talent, 0) - info.lower) % span) / span


def progress_percent(max_talent: int) -> int:
    return round(progress(max_talent) * 100)
