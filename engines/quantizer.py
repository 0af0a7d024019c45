"""Quantization operations."""

from typing import Sequence, Tuple

import numpy as np

from utils.constants import BASE_LUMA, BASE_CHROMA


def round_half_away(values):
    """Round to nearest integer, halves away from zero (C-style round)."""
    values = np.asarray(values, dtype=np.float64)
    return np.sign(values) * np.floor(np.abs(values) + 0.5)


def quality_scale(quality: float) -> float:
    """JPEG quality scaling factor, already divided by 100."""
    if quality < 50:
        scale = 5000.0 / quality
    else:
        scale = 200.0 - 2.0 * quality
    return scale / 100.0


def scale_quant_matrix(base_matrix: np.ndarray, quality: float) -> np.ndarray:
    """Scale a base table by quality; every step is at least 1."""
    Q = np.maximum(1.0, round_half_away(base_matrix * quality_scale(quality)))
    Q.setflags(write=False)
    return Q


def generate_tables(quality: float) -> Tuple[np.ndarray, np.ndarray]:
    """Read-only (luma, chroma) 8x8 tables for a quality in [1, 100]."""
    return scale_quant_matrix(BASE_LUMA, quality), scale_quant_matrix(BASE_CHROMA, quality)


def quantize(coeffs: np.ndarray, step) -> np.ndarray:
    """Quantization indices round(coeffs / step)."""
    return round_half_away(np.asarray(coeffs, dtype=np.float64) / step)


def dequantize(quantized: np.ndarray, step) -> np.ndarray:
    return np.asarray(quantized, dtype=np.float64) * step


def dwt_base_step(quality: float) -> float:
    """Step of the finest DWT detail band."""
    return 32.0 * quality_scale(quality)


def dwt_quant_step(x: int, y: int, geometry: Sequence[Tuple[int, int]], base_step: float) -> float:
    """
    Step for coefficient (x, y) of a plane transformed with `geometry`.

    The coefficient belongs to the innermost level whose transformed
    extent contains it but whose LL quadrant does not. Level L detail
    gets base_step / 2**L; the final LL band gets base_step / 2**levels.
    """
    levels = len(geometry)
    for lev in range(levels - 1, -1, -1):
        w, h = geometry[lev]
        in_block = x < w and y < h
        in_ll = x < w // 2 and y < h // 2
        if in_block and not in_ll:
            return max(1.0, base_step / (1 << lev))
    return max(1.0, base_step / (1 << levels))


def dwt_step_map(width: int, height: int, geometry: Sequence[Tuple[int, int]], base_step: float) -> np.ndarray:
    """
    Vectorised dwt_quant_step over a whole height x width plane.

    Coefficients outside the first level's extent (an odd trailing row
    or column) fall back to the LL step, as in the scalar lookup.
    """
    levels = len(geometry)
    steps = np.full((height, width), max(1.0, base_step / (1 << levels)), dtype=np.float64)
    # detail bands of different levels are disjoint
    for lev in range(levels - 1, -1, -1):
        w, h = geometry[lev]
        band = np.zeros((height, width), dtype=bool)
        band[:h, :w] = True
        band[:h // 2, :w // 2] = False
        steps[band] = max(1.0, base_step / (1 << lev))
    return steps
