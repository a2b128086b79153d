"""Command line entry point: ``binviz {entropy,frequency,visualize,full}``."""

from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path
from typing import List, Optional

from .analysis import AnalysisConfig, full_analysis
from .entropy import entropy
from .frequency import rank_frequencies
from .histogram import build_histogram, load_bytes
from .imaging import save_raster
from .raster import SCALES, rasterize
from .report import entropy_table, frequency_table
from .timing import timed


logger = logging.getLogger(__name__)


def positive_int(text: str) -> int:
    value = int(text)
    if value < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {text}")
    return value


def non_negative_int(text: str) -> int:
    value = int(text)
    if value < 0:
        raise argparse.ArgumentTypeError(f"expected a non-negative integer, got {text}")
    return value


LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def log_level(text: str) -> str:
    level = text.upper()
    if level not in LOG_LEVELS:
        raise argparse.ArgumentTypeError(
            f"unknown log level {text!r}; expected one of {', '.join(LOG_LEVELS)}"
        )
    return level


def add_image_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-t",
        "--trigraph",
        action="store_true",
        help="Colour the plane by the byte that follows each pair (byte triples)",
    )
    parser.add_argument(
        "--scale",
        choices=SCALES,
        default="average",
        help=(
            "Brightness curve. 'average' (default) puts the mean pair count at full "
            "brightness; 'linear', 'sqrt' and 'log' scale against the most frequent pair."
        ),
    )
    parser.add_argument(
        "--gamma",
        type=float,
        default=1.0,
        help="Gamma correction applied after the curve; values < 1 brighten rare pairs",
    )


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="binviz",
        description=(
            "Reveal the statistical structure of binary files: n-gram entropy, "
            "byte frequencies and a 256x256 byte-pair image."
        ),
    )
    parser.add_argument(
        "--log-level",
        type=log_level,
        default=os.environ.get("BINVIZ_LOG", "INFO"),
        help="Logging level for progress messages on stderr (default: $BINVIZ_LOG or INFO)",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    ent = commands.add_parser(
        "entropy", help="Entropy of the file for n-grams of length 1..COUNT, in bits per n bytes"
    )
    ent.add_argument("-f", "--file", type=Path, required=True)
    ent.add_argument("-c", "--count", type=positive_int, default=2)

    fre = commands.add_parser("frequency", help="Bytes sorted by how often they occur")
    fre.add_argument("-f", "--file", type=Path, required=True)
    fre.add_argument("-n", "--top", type=non_negative_int, help="Only show the TOP most frequent")

    vis = commands.add_parser(
        "visualize",
        help=(
            "Plot byte pairs as x/y coordinates; brighter pixels occur more often. "
            "Distinct file formats produce recognizable patterns."
        ),
    )
    vis.add_argument("-f", "--file", type=Path, required=True)
    vis.add_argument(
        "-o",
        "--output",
        type=Path,
        help="Destination image (.png, .ppm or .pgm; default: output.png, output.ppm with -t)",
    )
    add_image_options(vis)

    full = commands.add_parser(
        "full", help="Run every analysis on each file and collect results in one folder per file"
    )
    full.add_argument("-f", "--files", type=Path, nargs="+", required=True)
    full.add_argument(
        "-o", "--output", type=Path, default=Path("output"), help="Root folder (default: output)"
    )
    full.add_argument(
        "-j", "--jobs", type=positive_int, default=1, help="Files analyzed in parallel"
    )
    full.add_argument(
        "--max-order", type=positive_int, default=2, help="Highest n-gram order in entropy.txt"
    )
    add_image_options(full)

    return parser.parse_args(argv)


def read_input(path: Path) -> bytes:
    try:
        return load_bytes(path)
    except OSError as exc:
        raise SystemExit(f"Couldn't read {path}: {exc}") from exc


def run_entropy(args: argparse.Namespace) -> None:
    data = read_input(args.file)
    rows = []
    for order in range(1, args.count + 1):
        with timed(f"calculating histogram of dimension `{order}`", logger):
            histogram = build_histogram(data, order)
        rows.append((order, entropy(histogram)))
    print(entropy_table(rows))


def run_frequency(args: argparse.Namespace) -> None:
    data = read_input(args.file)
    with timed("calculating histogram", logger):
        histogram = build_histogram(data, 1)
    print(frequency_table(rank_frequencies(histogram, args.top), len(data)))


def run_visualize(args: argparse.Namespace) -> None:
    data = read_input(args.file)
    order = 3 if args.trigraph else 2
    output = args.output or Path("output.ppm" if args.trigraph else "output.png")

    with timed("calculating histogram", logger):
        histogram = build_histogram(data, order)
    with timed("generating image", logger):
        raster = rasterize(histogram, order=order, scale=args.scale, gamma=args.gamma)
    with timed(f"saving image to `{output}`", logger):
        try:
            save_raster(raster, output)
        except (OSError, ValueError) as exc:
            raise SystemExit(f"Couldn't save image: {exc}") from exc

    logger.info("`%d` byte %s visualized.", raster.total, "triples" if order == 3 else "pairs")
    logger.info("full brightness means `%.4f` occurrences at that location.", raster.average)


def run_full(args: argparse.Namespace) -> None:
    config = AnalysisConfig(
        output_root=args.output,
        max_order=args.max_order,
        trigraph=args.trigraph,
        scale=args.scale,
        gamma=args.gamma,
        jobs=args.jobs,
    )
    result = full_analysis(args.files, config)
    if not result.ok:
        raise SystemExit(1)


COMMANDS = {
    "entropy": run_entropy,
    "frequency": run_frequency,
    "visualize": run_visualize,
    "full": run_full,
}


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level, format="[%(levelname)s] %(message)s")
    with timed(f"executing {args.command} subcommand", logger):
        COMMANDS[args.command](args)


if __name__ == "__main__":
    main()
