"""Orthonormal Haar wavelet transforms: fixed 8x8 and whole-image."""

from typing import List, Optional, Tuple

import numpy as np

from engines.block_processor import pad_to_multiple
from models.errors import InvalidDimensions
from utils.constants import BLOCK_SIZE, MAX_DWT_LEVELS

INV_SQRT2 = 1.0 / np.sqrt(2.0)

Geometry = List[Tuple[int, int]]


def haar_forward_1d(data: np.ndarray, axis: int = -1) -> np.ndarray:
    """
    One Haar step along axis (even length).

    Averages land in the first half, details in the second:
    avg[k] = (x[2k] + x[2k+1]) / sqrt(2), det[k] = (x[2k] - x[2k+1]) / sqrt(2).
    """
    data = np.asarray(data, dtype=np.float64)
    even = np.take(data, np.arange(0, data.shape[axis], 2), axis=axis)
    odd = np.take(data, np.arange(1, data.shape[axis], 2), axis=axis)
    return np.concatenate([(even + odd) * INV_SQRT2, (even - odd) * INV_SQRT2], axis=axis)


def haar_inverse_1d(data: np.ndarray, axis: int = -1) -> np.ndarray:
    """Undo haar_forward_1d along axis."""
    data = np.moveaxis(np.asarray(data, dtype=np.float64), axis, 0)
    half = data.shape[0] // 2
    avg, det = data[:half], data[half:2 * half]
    out = np.empty_like(data)
    out[0::2] = (avg + det) * INV_SQRT2
    out[1::2] = (avg - det) * INV_SQRT2
    return np.moveaxis(out, 0, axis)


def _forward_level(coeffs: np.ndarray, w: int, h: int) -> None:
    # rows then columns on the top-left h x w region
    sub = haar_forward_1d(coeffs[:h, :w], axis=1)
    coeffs[:h, :w] = haar_forward_1d(sub, axis=0)


def _inverse_level(coeffs: np.ndarray, w: int, h: int) -> None:
    # columns then rows, mirroring _forward_level
    sub = haar_inverse_1d(coeffs[:h, :w], axis=0)
    coeffs[:h, :w] = haar_inverse_1d(sub, axis=1)


def dwt8x8(block: np.ndarray) -> np.ndarray:
    """3-level 2D Haar DWT of an 8x8 block; [0][0] holds 8x the block mean."""
    block = np.asarray(block, dtype=np.float64)
    if block.shape != (BLOCK_SIZE, BLOCK_SIZE):
        raise InvalidDimensions(f"Expected an 8x8 block, got shape {block.shape}")
    coeffs = block.copy()
    size = BLOCK_SIZE
    while size >= 2:
        _forward_level(coeffs, size, size)
        size //= 2
    return coeffs


def idwt8x8(coeffs: np.ndarray) -> np.ndarray:
    """Exact inverse of dwt8x8."""
    coeffs = np.asarray(coeffs, dtype=np.float64)
    if coeffs.shape != (BLOCK_SIZE, BLOCK_SIZE):
        raise InvalidDimensions(f"Expected an 8x8 block, got shape {coeffs.shape}")
    out = coeffs.copy()
    size = 2
    while size <= BLOCK_SIZE:
        _inverse_level(out, size, size)
        size *= 2
    return out


def dwt_levels(width: int, height: int) -> int:
    """Decomposition depth: floor(log2(min(W, H))), capped at 6."""
    levels = 0
    w, h = width, height
    while w >= 2 and h >= 2:
        levels += 1
        w >>= 1
        h >>= 1
    return min(levels, MAX_DWT_LEVELS)


def level_geometry(width: int, height: int, levels: int) -> Geometry:
    """
    Even (w, h) extent transformed at each forward level, finest first.

    Forward transform, inverse transform and subband step lookup must all
    walk this same list. Stops early once a side drops below 2.
    """
    geometry = []
    w, h = width, height
    for _ in range(levels):
        if w < 2 or h < 2:
            break
        wt, ht = w & ~1, h & ~1
        geometry.append((wt, ht))
        w, h = wt // 2, ht // 2
    return geometry


def dwt_image(plane: np.ndarray, levels: int, geometry: Optional[Geometry] = None) -> np.ndarray:
    """Multi-level 2D Haar DWT of a whole plane; returns a new array."""
    coeffs = np.array(plane, dtype=np.float64, copy=True)
    if geometry is None:
        geometry = level_geometry(coeffs.shape[1], coeffs.shape[0], levels)
    for (w, h) in geometry:
        _forward_level(coeffs, w, h)
    return coeffs


def idwt_image(coeffs: np.ndarray, levels: int, geometry: Optional[Geometry] = None) -> np.ndarray:
    """Inverse of dwt_image, coarsest level first."""
    out = np.array(coeffs, dtype=np.float64, copy=True)
    if geometry is None:
        geometry = level_geometry(out.shape[1], out.shape[0], levels)
    for (w, h) in reversed(geometry):
        _inverse_level(out, w, h)
    return out


def pad_for_dwt(plane: np.ndarray, levels: int) -> Tuple[np.ndarray, Tuple[int, int]]:
    """Edge-replicate up to a multiple of 2**levels on both axes."""
    return pad_to_multiple(plane, 1 << levels)


def haar_basis(u: int, v: int) -> np.ndarray:
    """Pixel-domain pattern of the 8x8 Haar coefficient at row u, col v."""
    impulse = np.zeros((BLOCK_SIZE, BLOCK_SIZE), dtype=np.float64)
    impulse[u, v] = 1.0
    return idwt8x8(impulse)


def haar_frequency_label(row: int, col: int) -> str:
    if row == 0 and col == 0:
        return 'DC'
    if row <= 1 and col <= 1:
        return 'Low'
    if row <= 3 and col <= 3:
        return 'Mid'
    return 'High'
