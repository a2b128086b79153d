import pytest

from binviz.frequency import rank_frequencies
from binviz.histogram import build_histogram


def test_descending_counts() -> None:
    histogram = build_histogram(b"abbccc", 1)

    assert rank_frequencies(histogram) == [(0x63, 3), (0x62, 2), (0x61, 1)]


def test_ties_resolve_by_ascending_byte() -> None:
    histogram = build_histogram(b"BBBAAAz", 1)

    assert rank_frequencies(histogram) == [(0x41, 3), (0x42, 3), (0x7A, 1)]


def test_ranking_is_repeatable() -> None:
    histogram = build_histogram(bytes(range(10)) * 2 + b"\x03", 1)

    assert rank_frequencies(histogram) == rank_frequencies(histogram)


def test_single_repeated_byte() -> None:
    assert rank_frequencies(build_histogram(bytes([7] * 5), 1)) == [(7, 5)]


def test_top_k() -> None:
    histogram = build_histogram(b"abbccc", 1)

    assert rank_frequencies(histogram, 1) == [(0x63, 3)]
    assert rank_frequencies(histogram, 0) == []


def test_top_k_larger_than_distinct_bytes() -> None:
    histogram = build_histogram(b"abbccc", 1)

    assert rank_frequencies(histogram, 200) == rank_frequencies(histogram)
    assert len(rank_frequencies(histogram, 200)) == 3


def test_empty_histogram() -> None:
    assert rank_frequencies({}) == []


def test_rejects_negative_count() -> None:
    with pytest.raises(ValueError):
        rank_frequencies({b"a": 1}, -1)


def test_rejects_pair_histogram() -> None:
    with pytest.raises(ValueError):
        rank_frequencies(build_histogram(b"abc", 2))
