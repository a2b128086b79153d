"""Byte-pair and byte-triple co-occurrence rasters.

Every observed n-gram ``(x, y[, z])`` lights the pixel at column ``x`` and
row ``y`` of a 256x256 plane, so arrays are indexed ``pixels[y, x]``.
Brightness is the n-gram count divided by the mean count of the observed
n-grams, so an average pair sits at full brightness and anything more
frequent saturates. Rare pairs stay visible instead of being drowned out by a
few very common ones (long runs of zero bytes, for example).

Pairs produce a single 16-bit grayscale channel. Triples produce RGB: one
channel carries the third byte, one carries the frequency, and one is held
at a constant so an observed pair never renders black.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple, Union

import numpy as np

from .histogram import Histogram, total_count


logger = logging.getLogger(__name__)

SIDE = 256
MAX_CHANNEL = int(np.iinfo(np.uint16).max)
SCALES = ("average", "linear", "sqrt", "log")


@dataclass(frozen=True)
class TriplePalette:
    """Channel assignment for byte-triple rasters (0=red, 1=green, 2=blue)."""

    third: int = 0
    frequency: int = 1
    presence: int = 2
    presence_level: int = MAX_CHANNEL // 4

    def __post_init__(self) -> None:
        if sorted((self.third, self.frequency, self.presence)) != [0, 1, 2]:
            raise ValueError("palette channels must be a permutation of 0, 1, 2")
        if not 0 < self.presence_level <= MAX_CHANNEL:
            raise ValueError(
                f"presence level must be in 1..{MAX_CHANNEL}, got {self.presence_level}"
            )


@dataclass(frozen=True, eq=False)
class Raster:
    """A rendered plane plus the counts it was normalized against."""

    pixels: np.ndarray
    total: int
    average: float

    @property
    def channels(self) -> int:
        return 1 if self.pixels.ndim == 2 else self.pixels.shape[2]

    def pixel(self, x: int, y: int) -> Union[int, Tuple[int, ...]]:
        value = self.pixels[y, x]
        if self.channels == 1:
            return int(value)
        return tuple(int(channel) for channel in value)


def intensity(counts: np.ndarray, average: float, scale: str, gamma: float) -> np.ndarray:
    """Map counts to 16-bit channel levels using the requested curve.

    ``average`` divides counts directly and clips anything above the mean.
    The other curves normalize against the peak count, as a plain heatmap
    would, and keep the faintest observed pair at level 1.
    """

    if counts.size == 0:
        return np.zeros(0, dtype=np.uint16)

    if scale == "average":
        ratio = counts / average
    else:
        peak = float(counts.max())
        if scale == "log":
            ratio = np.log1p(counts) / np.log1p(peak)
        elif scale == "sqrt":
            ratio = np.sqrt(counts / peak)
        elif scale == "linear":
            ratio = counts / peak
        else:
            raise ValueError(f"unknown scale {scale!r}; expected one of {SCALES}")

    ratio = np.clip(ratio, 0.0, 1.0)
    if gamma > 0 and gamma != 1:
        ratio = ratio ** gamma

    levels = np.rint(ratio * MAX_CHANNEL)
    if scale != "average":
        levels = np.maximum(levels, 1)
    return levels.astype(np.uint16)


def _gray_pixels(coords: np.ndarray, levels: np.ndarray, palette: TriplePalette) -> np.ndarray:
    pixels = np.zeros((SIDE, SIDE), dtype=np.uint16)
    pixels[coords[:, 1], coords[:, 0]] = levels
    return pixels


def _highest_third(coords: np.ndarray) -> np.ndarray:
    """Index of the triple with the highest third byte for every distinct (x, y)."""

    ordered = np.lexsort((coords[:, 2], coords[:, 1], coords[:, 0]))
    pairs = coords[ordered, 0].astype(np.int64) * SIDE + coords[ordered, 1]
    # Reversed, the first occurrence of each pair is its highest third byte.
    _, first = np.unique(pairs[::-1], return_index=True)
    return ordered[len(ordered) - 1 - first]


def _colour_pixels(coords: np.ndarray, levels: np.ndarray, palette: TriplePalette) -> np.ndarray:
    pixels = np.zeros((SIDE, SIDE, 3), dtype=np.uint16)
    winners = _highest_third(coords)
    coords, levels = coords[winners], levels[winners]
    xs, ys = coords[:, 0], coords[:, 1]
    third = np.rint(coords[:, 2].astype(np.float64) / 255 * MAX_CHANNEL).astype(np.uint16)
    pixels[ys, xs, palette.third] = third
    pixels[ys, xs, palette.frequency] = levels
    pixels[ys, xs, palette.presence] = palette.presence_level
    return pixels


ChannelStrategy = Callable[[np.ndarray, np.ndarray, TriplePalette], np.ndarray]

CHANNEL_STRATEGIES: Dict[int, ChannelStrategy] = {
    2: _gray_pixels,
    3: _colour_pixels,
}


def _key_order(histogram: Histogram) -> Optional[int]:
    orders = {len(key) for key in histogram}
    if len(orders) > 1:
        raise ValueError("histogram mixes keys of different lengths")
    return orders.pop() if orders else None


def rasterize(
    histogram: Histogram,
    order: Optional[int] = None,
    scale: str = "average",
    gamma: float = 1.0,
    palette: Optional[TriplePalette] = None,
) -> Raster:
    """Render a pair (order 2) or triple (order 3) histogram.

    ``order`` defaults to the key length; it only matters for an empty
    histogram, which renders black with ``total`` and ``average`` of zero.
    """

    if scale not in SCALES:
        raise ValueError(f"unknown scale {scale!r}; expected one of {SCALES}")

    observed = _key_order(histogram)
    if order is None:
        order = observed or 2
    elif observed is not None and observed != order:
        raise ValueError(f"expected {order}-byte keys, got {observed}-byte keys")

    strategy = CHANNEL_STRATEGIES.get(order)
    if strategy is None:
        raise ValueError(f"only 2- and 3-byte histograms can be rasterized, got {order}")
    palette = palette or TriplePalette()

    distinct = len(histogram)
    total = total_count(histogram)
    average = total / distinct if distinct else 0.0

    coords = np.frombuffer(b"".join(histogram), dtype=np.uint8).reshape(-1, order)
    counts = np.fromiter(histogram.values(), dtype=np.float64, count=distinct)
    levels = intensity(counts, average, scale, gamma)
    pixels = strategy(coords, levels, palette)

    logger.debug(
        "rasterized %d distinct %d-grams (total=%d, average=%.4f)", distinct, order, total, average
    )
    return Raster(pixels=pixels, total=total, average=average)


def rasterize_pairs(histogram: Histogram, scale: str = "average", gamma: float = 1.0) -> Raster:
    """Grayscale raster of a byte-pair histogram."""

    return rasterize(histogram, order=2, scale=scale, gamma=gamma)


def rasterize_triples(
    histogram: Histogram,
    scale: str = "average",
    gamma: float = 1.0,
    palette: Optional[TriplePalette] = None,
) -> Raster:
    """RGB raster of a byte-triple histogram."""

    return rasterize(histogram, order=3, scale=scale, gamma=gamma, palette=palette)
