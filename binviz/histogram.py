"""Sliding-window n-gram counting.

A histogram maps every distinct run of ``n`` consecutive bytes to the number
of times it occurs in a buffer. Windows advance one byte at a time, so a
buffer of length ``L`` yields ``L - n + 1`` windows, or none when ``L < n``.

Small orders are counted without building a ``bytes`` object per window:
each window is packed into a single ``uint64`` code (first byte most
significant) and the codes are counted with ``numpy.unique``. Because the
packing is big-endian, sorting the codes sorts the keys lexicographically.
"""

from __future__ import annotations

import logging
from collections import Counter
from pathlib import Path
from typing import Dict

import numpy as np


logger = logging.getLogger(__name__)

Histogram = Dict[bytes, int]

# Eight bytes fill a uint64 code exactly.
PACKED_MAX_ORDER = 8


def load_bytes(path: Path) -> bytes:
    """Return the full contents of ``path``; ``OSError`` if it can't be read."""

    with Path(path).open("rb") as handle:
        data = handle.read()
    logger.debug("read %d bytes from %s", len(data), path)
    return data


def window_count(length: int, n: int) -> int:
    """Number of sliding windows of width ``n`` over ``length`` bytes."""

    return max(0, length - n + 1)


def _packed_counts(data: bytes, n: int) -> Histogram:
    windows = window_count(len(data), n)
    raw = np.frombuffer(data, dtype=np.uint8).astype(np.uint64)
    codes = np.zeros(windows, dtype=np.uint64)
    shift = np.uint64(8)
    for offset in range(n):
        codes <<= shift
        codes |= raw[offset : offset + windows]

    keys, counts = np.unique(codes, return_counts=True)
    return {
        int(code).to_bytes(n, "big"): int(count)
        for code, count in zip(keys.tolist(), counts.tolist())
    }


def _sliced_counts(data: bytes, n: int) -> Histogram:
    counts: Counter = Counter(
        data[start : start + n] for start in range(window_count(len(data), n))
    )
    return dict(sorted(counts.items()))


def build_histogram(data: bytes, n: int) -> Histogram:
    """Count every contiguous ``n``-byte window of ``data``.

    The result is a fresh dict whose keys are ``bytes`` of length ``n`` in
    ascending order. Buffers shorter than ``n`` produce an empty histogram.
    """

    if n < 1:
        raise ValueError(f"n-gram length must be at least 1, got {n}")

    data = bytes(data)
    if len(data) < n:
        return {}
    if n <= PACKED_MAX_ORDER:
        return _packed_counts(data, n)
    return _sliced_counts(data, n)


def total_count(histogram: Histogram) -> int:
    """Sum of all counts in the histogram."""

    return sum(histogram.values())
