"""Byte n-gram statistics and co-occurrence images for binary files."""

from .entropy import entropy, relative_entropy
from .frequency import rank_frequencies
from .histogram import Histogram, build_histogram, load_bytes
from .raster import Raster, TriplePalette, rasterize, rasterize_pairs, rasterize_triples

__all__ = [
    "Histogram",
    "Raster",
    "TriplePalette",
    "build_histogram",
    "entropy",
    "load_bytes",
    "rank_frequencies",
    "rasterize",
    "rasterize_pairs",
    "rasterize_triples",
    "relative_entropy",
]

__version__ = "0.3.0"
