"""Byte frequency ranking."""

from __future__ import annotations

from typing import List, Optional, Tuple

from .histogram import Histogram


RankEntry = Tuple[int, int]


def rank_frequencies(histogram: Histogram, count: Optional[int] = None) -> List[RankEntry]:
    """Return ``(byte, count)`` pairs ordered from most to least frequent.

    Equal counts keep ascending byte order. ``count`` keeps only the top
    entries; asking for more than exist returns every byte present.
    """

    if count is not None and count < 0:
        raise ValueError(f"count must not be negative, got {count}")
    if any(len(key) != 1 for key in histogram):
        raise ValueError("frequency ranking needs a single-byte histogram")

    entries = sorted((key[0], freq) for key, freq in histogram.items())
    # sort() is stable, so ties stay in byte order.
    entries.sort(key=lambda entry: entry[1], reverse=True)
    if count is not None:
        return entries[:count]
    return entries
