from pathlib import Path

import cv2
import numpy as np
import pytest
from PIL import Image

from binviz.histogram import build_histogram
from binviz.imaging import save_raster
from binviz.raster import rasterize_pairs, rasterize_triples


def test_png_keeps_sixteen_bit_grayscale(tmp_path: Path) -> None:
    raster = rasterize_pairs({b"\x00\x00": 3, b"\x01\x01": 1})
    target = save_raster(raster, tmp_path / "nested" / "image.png")

    with Image.open(target) as image:
        assert image.size == (256, 256)
        assert image.getpixel((0, 0)) == 65535
        assert image.getpixel((1, 1)) == 32768
        assert image.getpixel((2, 2)) == 0


def test_png_colour_keeps_sixteen_bits(tmp_path: Path) -> None:
    raster = rasterize_triples(build_histogram(b"\x01\x02\x03", 3))
    target = save_raster(raster, tmp_path / "image.png")

    image = cv2.imread(str(target), cv2.IMREAD_UNCHANGED)
    assert image.dtype == np.uint16
    assert image.shape == (256, 256, 3)
    # OpenCV reads channels back as BGR.
    assert tuple(int(v) for v in image[2, 1, ::-1]) == raster.pixel(1, 2) == (771, 65535, 16383)
    assert not image[0, 0].any()


def test_ppm_is_lossless(tmp_path: Path) -> None:
    raster = rasterize_triples(build_histogram(b"\x01\x02\x03", 3))
    target = save_raster(raster, tmp_path / "image.ppm")

    payload = target.read_bytes()
    header = b"P6\n256 256\n65535\n"
    assert payload.startswith(header)
    body = payload[len(header):]
    assert len(body) == 256 * 256 * 3 * 2

    offset = (2 * 256 + 1) * 3 * 2
    channels = [
        int.from_bytes(body[offset + 2 * i : offset + 2 * i + 2], "big") for i in range(3)
    ]
    assert channels == [771, 65535, 16383]


def test_pgm_for_grayscale(tmp_path: Path) -> None:
    target = save_raster(rasterize_pairs({}), tmp_path / "image.pgm")

    payload = target.read_bytes()
    assert payload.startswith(b"P5\n256 256\n65535\n")
    assert payload.count(b"\x00") == 256 * 256 * 2


def test_rejects_unknown_suffix(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        save_raster(rasterize_pairs({}), tmp_path / "image.gif")
