#!/usr/bin/env python3
"""Benchmark packed-code counting against per-window slicing."""

import os
import time

from binviz.histogram import _packed_counts, _sliced_counts


def main():
    sizes = [
        (1_000_000, "1 MB"),
        (10_000_000, "10 MB"),
    ]

    print("=" * 80)
    print("N-GRAM HISTOGRAM BENCHMARK")
    print("=" * 80)

    for size, label in sizes:
        print(f"\nGenerating random buffer: {label} ({size:,} bytes)...")
        data = os.urandom(size)

        for n in (1, 2, 3):
            start = time.perf_counter()
            packed = _packed_counts(data, n)
            time_packed = time.perf_counter() - start

            start = time.perf_counter()
            sliced = _sliced_counts(data, n)
            time_sliced = time.perf_counter() - start

            assert packed == sliced
            print()
            print(f"n={n}: {len(packed):,} distinct keys")
            print(f"{'Method':<20} {'Time':>12} {'Speedup':>10}")
            print("-" * 80)
            print(f"{'sliced':<20} {time_sliced:>10.2f}s {'1.00x':>10}")
            print(f"{'packed':<20} {time_packed:>10.2f}s {time_sliced/time_packed:>10.2f}x")

    print()


if __name__ == "__main__":
    main()
