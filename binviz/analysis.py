"""Per-file analysis and the batch ("full") runner.

``analyze`` turns one in-memory buffer into entropy figures, a byte ranking
and a raster. ``full_analysis`` repeats that for many files and writes each
file's reports and image into its own folder under the output root. A file
that can't be read or written is logged and skipped; the rest still run.
"""

from __future__ import annotations

import concurrent.futures
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Sequence

from .entropy import entropy, relative_entropy
from .frequency import RankEntry, rank_frequencies
from .histogram import build_histogram, load_bytes
from .imaging import save_raster
from .raster import SCALES, Raster, TriplePalette, rasterize
from .report import entropy_table, frequency_table
from .timing import timed


logger = logging.getLogger(__name__)

ENTROPY_REPORT = "entropy.txt"
FREQUENCY_REPORT = "most_frequent.txt"
IMAGE_NAME = "image.png"


@dataclass(frozen=True)
class AnalysisConfig:
    """Options for one analysis run, passed explicitly to every call."""

    output_root: Path = Path("output")
    max_order: int = 2
    trigraph: bool = False
    scale: str = "average"
    gamma: float = 1.0
    palette: TriplePalette = field(default_factory=TriplePalette)
    jobs: int = 1

    def __post_init__(self) -> None:
        if self.max_order < 1:
            raise ValueError(f"max_order must be at least 1, got {self.max_order}")
        if self.jobs < 1:
            raise ValueError(f"jobs must be at least 1, got {self.jobs}")
        if self.scale not in SCALES:
            raise ValueError(f"unknown scale {self.scale!r}; expected one of {SCALES}")

    @property
    def raster_order(self) -> int:
        return 3 if self.trigraph else 2

    @property
    def orders(self) -> range:
        """N-gram orders to count: always 1 and 2, more when asked for."""

        return range(1, max(self.max_order, self.raster_order) + 1)


@dataclass(frozen=True, eq=False)
class FileAnalysis:
    size: int
    entropies: Dict[int, float]
    ranking: List[RankEntry]
    raster: Raster

    def relative_entropy(self, order: int) -> float:
        return relative_entropy(self.entropies[order], order)


@dataclass
class BatchResult:
    """Folders written and files skipped by ``full_analysis``."""

    written: Dict[Path, Path] = field(default_factory=dict)
    failures: Dict[Path, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failures


def analyze(data: bytes, config: AnalysisConfig) -> FileAnalysis:
    """Compute every statistic for one buffer."""

    histograms = {}
    entropies = {}
    for order in config.orders:
        with timed(f"calculating histogram of dimension `{order}`", logger):
            histograms[order] = build_histogram(data, order)
        entropies[order] = entropy(histograms[order])

    ranking = rank_frequencies(histograms[1])
    with timed("generating image", logger):
        raster = rasterize(
            histograms[config.raster_order],
            order=config.raster_order,
            scale=config.scale,
            gamma=config.gamma,
            palette=config.palette,
        )
    return FileAnalysis(size=len(data), entropies=entropies, ranking=ranking, raster=raster)


def analyze_file(path: Path, config: AnalysisConfig) -> FileAnalysis:
    return analyze(load_bytes(path), config)


def output_dirs(paths: Sequence[Path], root: Path) -> List[Path]:
    """One folder per input, named after the file stem.

    Repeated stems get ``-2``, ``-3``... in input order so no two inputs
    share a folder.
    """

    seen: Dict[str, int] = {}
    folders = []
    for path in paths:
        stem = Path(path).stem or Path(path).name
        seen[stem] = seen.get(stem, 0) + 1
        name = stem if seen[stem] == 1 else f"{stem}-{seen[stem]}"
        folders.append(Path(root) / name)
    return folders


def write_artifacts(analysis: FileAnalysis, folder: Path) -> None:
    """Write both reports and the image into ``folder``, replacing old ones."""

    folder.mkdir(parents=True, exist_ok=True)
    (folder / ENTROPY_REPORT).write_text(
        entropy_table(sorted(analysis.entropies.items())) + "\n", encoding="utf-8"
    )
    (folder / FREQUENCY_REPORT).write_text(
        frequency_table(analysis.ranking, analysis.size) + "\n", encoding="utf-8"
    )
    save_raster(analysis.raster, folder / IMAGE_NAME)


def process_file(path: Path, folder: Path, config: AnalysisConfig) -> Path:
    """Analyze ``path`` and write its artifacts; runs in worker processes too."""

    write_artifacts(analyze_file(path, config), folder)
    return folder


def full_analysis(paths: Sequence[Path], config: AnalysisConfig) -> BatchResult:
    """Analyze every file independently, skipping the ones that fail."""

    result = BatchResult()
    folders = output_dirs(paths, config.output_root)

    if config.jobs > 1 and len(paths) > 1:
        with concurrent.futures.ProcessPoolExecutor(max_workers=config.jobs) as executor:
            futures = [
                executor.submit(process_file, path, folder, config)
                for path, folder in zip(paths, folders)
            ]
            for path, future in zip(paths, futures):
                _collect(result, path, future.result)
    else:
        for path, folder in zip(paths, folders):
            _collect(result, path, lambda: process_file(path, folder, config))

    if result.failures:
        logger.warning(
            "%d of %d file(s) could not be analyzed", len(result.failures), len(paths)
        )
    return result


def _collect(result: BatchResult, path: Path, run) -> None:
    try:
        folder = run()
    except OSError as exc:
        logger.error("skipping '%s': %s", path, exc)
        result.failures[Path(path)] = str(exc)
        return
    result.written[Path(path)] = folder
    logger.info("Analysis for '%s' is complete.", path)
