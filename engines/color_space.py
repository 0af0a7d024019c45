"""Color space conversion and chroma subsampling."""

from typing import Tuple

import numpy as np

from models.codec_config import normalize_subsampling
from models.pixel_buffer import PixelBuffer


def bgr_to_ycrcb(bgr: PixelBuffer) -> PixelBuffer:
    """BGR to YCrCb (channel order Y, Cr, Cb)."""
    B, G, R = bgr.plane(0), bgr.plane(1), bgr.plane(2)
    Y = 0.299 * R + 0.587 * G + 0.114 * B
    Cr = (R - Y) * 0.713 + 128.0
    Cb = (B - Y) * 0.564 + 128.0
    return PixelBuffer.from_array(np.stack([Y, Cr, Cb], axis=-1))


def ycrcb_to_bgr(ycrcb: PixelBuffer) -> PixelBuffer:
    """YCrCb to BGR, clamped to [0, 255]."""
    Y, Cr, Cb = ycrcb.plane(0), ycrcb.plane(1), ycrcb.plane(2)
    R = Y + 1.402 * (Cr - 128.0)
    G = Y - 0.344136 * (Cb - 128.0) - 0.714136 * (Cr - 128.0)
    B = Y + 1.772 * (Cb - 128.0)
    bgr = np.stack([B, G, R], axis=-1)
    return PixelBuffer.from_array(np.clip(bgr, 0, 255))


def subsampling_factors(mode) -> Tuple[int, int]:
    """Horizontal and vertical chroma decimation for a mode."""
    mode = normalize_subsampling(mode)
    if mode == '4:2:0':
        return 2, 2
    if mode == '4:2:2':
        return 2, 1
    return 1, 1


def downsample_chroma(plane: PixelBuffer, mode) -> PixelBuffer:
    """
    Box-average a single-channel plane down by the mode's factors.

    Output size uses ceiling division; cells on an odd edge average only
    the source pixels that exist.
    """
    sx, sy = subsampling_factors(mode)
    src = plane.plane(0)
    if sx == 1 and sy == 1:
        return PixelBuffer.from_array(src)

    h, w = src.shape
    new_w = (w + sx - 1) // sx
    new_h = (h + sy - 1) // sy

    padded = np.zeros((new_h * sy, new_w * sx), dtype=np.float64)
    counts = np.zeros_like(padded)
    padded[:h, :w] = src
    counts[:h, :w] = 1.0

    sums = padded.reshape(new_h, sy, new_w, sx).sum(axis=(1, 3))
    n = counts.reshape(new_h, sy, new_w, sx).sum(axis=(1, 3))
    return PixelBuffer.from_array(sums / n)


def upsample_chroma(plane: PixelBuffer, width: int, height: int, mode) -> PixelBuffer:
    """Nearest-neighbour replication back to width x height."""
    sx, sy = subsampling_factors(mode)
    src = plane.plane(0)
    h, w = src.shape
    rows = np.minimum(np.arange(height) // sy, h - 1)
    cols = np.minimum(np.arange(width) // sx, w - 1)
    return PixelBuffer.from_array(src[np.ix_(rows, cols)])
