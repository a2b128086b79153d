"""Plain-text tables for entropy and frequency results."""

from __future__ import annotations

from typing import Iterable, List, Sequence, Tuple

from .entropy import relative_entropy
from .frequency import RankEntry


def markdown_table(headers: Sequence[str], rows: Iterable[Sequence[str]]) -> str:
    """Render ``rows`` as a pipe-delimited table with a dashed header rule."""

    body: List[Sequence[str]] = [list(row) for row in rows]
    widths = [len(header) for header in headers]
    for row in body:
        for index, cell in enumerate(row):
            widths[index] = max(widths[index], len(cell))

    def line(cells: Sequence[str]) -> str:
        padded = (cell.ljust(width) for cell, width in zip(cells, widths))
        return "| " + " | ".join(padded) + " |"

    rule = "|" + "|".join("-" * (width + 2) for width in widths) + "|"
    return "\n".join([line(headers), rule] + [line(row) for row in body])


def entropy_table(rows: Iterable[Tuple[int, float]]) -> str:
    """Table of ``(order, bits per n-gram)`` pairs with relative entropy."""

    return markdown_table(
        ["Dimension", "Entropy", "Relative Entropy"],
        (
            [
                str(order),
                f"{value:.5f} (bits per {order} byte(s))",
                f"{relative_entropy(value, order):.5f}",
            ]
            for order, value in rows
        ),
    )


def frequency_table(ranking: Sequence[RankEntry], total: int) -> str:
    """Table of ranked bytes with their share of ``total``."""

    rows = []
    for rank, (byte, count) in enumerate(ranking):
        share = count / total if total else 0.0
        rows.append([str(rank), str(byte), hex(byte), repr(chr(byte)), f"{share:.5f}"])
    return markdown_table(["Rank", "Byte", "Hex", "Text", "Relative Frequency"], rows)
