"""Write rasters to disk as PNG or binary Netpbm images."""

from __future__ import annotations

import logging
from pathlib import Path

import cv2
import numpy as np
from PIL import Image

from .raster import SIDE, Raster


logger = logging.getLogger(__name__)

NETPBM_SUFFIXES = {".ppm", ".pgm"}


def write_netpbm(raster: Raster, output: Path) -> None:
    """Write a binary PGM (grayscale) or PPM (colour) with 16 bits per channel."""

    magic = "P5" if raster.channels == 1 else "P6"
    header = f"{magic}\n{SIDE} {SIDE}\n65535\n".encode("ascii")
    with output.open("wb") as handle:
        handle.write(header)
        # Netpbm stores 16-bit samples most significant byte first.
        handle.write(raster.pixels.astype(">u2").tobytes())


def write_png(raster: Raster, output: Path) -> None:
    """Write a 16-bit PNG.

    Pillow handles grayscale but has no 48-bit RGB mode, so colour rasters go
    through OpenCV, which expects channels in BGR order.
    """

    if raster.channels == 1:
        Image.fromarray(raster.pixels).save(output, format="PNG")
        return

    bgr = np.ascontiguousarray(raster.pixels[:, :, ::-1])
    if not cv2.imwrite(str(output), bgr):
        raise OSError(f"couldn't write {output}")


def save_raster(raster: Raster, output: Path) -> Path:
    """Persist ``raster`` to ``output``, choosing the format by suffix."""

    output = Path(output)
    suffix = output.suffix.lower()
    if suffix != ".png" and suffix not in NETPBM_SUFFIXES:
        raise ValueError(f"unsupported image format {output.suffix!r}; use .png, .ppm or .pgm")

    output.parent.mkdir(parents=True, exist_ok=True)
    if suffix == ".png":
        write_png(raster, output)
    else:
        write_netpbm(raster, output)
    logger.debug("wrote %s", output)
    return output
