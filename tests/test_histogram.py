from pathlib import Path

import pytest

from binviz.histogram import _sliced_counts, build_histogram, load_bytes, total_count


def test_counts_expected_pairs() -> None:
    histogram = build_histogram(bytes([0, 1, 2, 3, 2]), 2)

    assert histogram == {
        b"\x00\x01": 1,
        b"\x01\x02": 1,
        b"\x02\x03": 1,
        b"\x03\x02": 1,
    }


def test_repeated_pattern_scenario() -> None:
    data = bytes([0, 0, 1, 1, 2, 2])

    assert build_histogram(data, 1) == {b"\x00": 2, b"\x01": 2, b"\x02": 2}
    assert build_histogram(data, 2) == {
        b"\x00\x00": 1,
        b"\x00\x01": 1,
        b"\x01\x01": 1,
        b"\x01\x02": 1,
        b"\x02\x02": 1,
    }


def test_single_repeated_byte() -> None:
    assert build_histogram(bytes([7] * 5), 1) == {b"\x07": 5}


@pytest.mark.parametrize("n", [1, 2, 3, 4, 9])
def test_total_matches_window_count(n: int) -> None:
    data = bytes(range(256)) * 3 + b"\xff\x00" * 17

    assert total_count(build_histogram(data, n)) == len(data) - n + 1


@pytest.mark.parametrize("data, n", [(b"", 1), (b"", 2), (b"\x01", 2), (b"\x01\x02", 3)])
def test_short_buffer_gives_empty_histogram(data: bytes, n: int) -> None:
    assert build_histogram(data, n) == {}


def test_keys_are_sorted_lexicographically() -> None:
    histogram = build_histogram(b"\xff\x10\x00\x10\xff\x00", 2)

    assert list(histogram) == sorted(histogram)


@pytest.mark.parametrize("n", [1, 2, 3, 5, 8])
def test_packed_and_sliced_counts_agree(n: int) -> None:
    data = bytes((i * 37 + i // 5) % 256 for i in range(2000))

    assert build_histogram(data, n) == _sliced_counts(data, n)


def test_long_windows_fall_back_to_slices() -> None:
    data = b"abcdefghijabcdefghij"
    histogram = build_histogram(data, 10)

    assert histogram[b"abcdefghij"] == 2
    assert total_count(histogram) == 11


def test_accepts_bytearray_and_leaves_it_alone() -> None:
    data = bytearray(b"\x01\x01\x02")
    histogram = build_histogram(data, 2)

    assert histogram == {b"\x01\x01": 1, b"\x01\x02": 1}
    assert data == bytearray(b"\x01\x01\x02")


def test_rejects_zero_length_windows() -> None:
    with pytest.raises(ValueError):
        build_histogram(b"abc", 0)


def test_load_bytes(tmp_path: Path) -> None:
    target = tmp_path / "sample.bin"
    target.write_bytes(b"\x00\x01\x02")

    assert load_bytes(target) == b"\x00\x01\x02"


def test_load_bytes_missing_file(tmp_path: Path) -> None:
    with pytest.raises(OSError):
        load_bytes(tmp_path / "missing.bin")
