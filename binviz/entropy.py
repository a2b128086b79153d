"""Shannon entropy of a histogram."""

from __future__ import annotations

import math

from .histogram import Histogram, total_count


def entropy(histogram: Histogram) -> float:
    """Return the Shannon entropy in bits per n-gram.

    Only counts are used, so the same function serves every n-gram order.
    An empty histogram has zero entropy.
    """

    total = total_count(histogram)
    if total == 0:
        return 0.0

    value = 0.0
    for count in histogram.values():
        p = count / total
        value -= p * math.log2(p)
    # A single key gives -1.0 * log2(1.0) == -0.0.
    return abs(value)


def relative_entropy(value: float, n: int) -> float:
    """Scale bits per n-gram to the 0..1 range of an ``n``-byte alphabet."""

    if n < 1:
        raise ValueError(f"n-gram length must be at least 1, got {n}")
    return value / (8.0 * n)
