"""DCT/IDCT operations with level shift."""

import numpy as np
from scipy.fft import dctn, idctn

from models.errors import InvalidDimensions
from utils.constants import BLOCK_SIZE


def _check_block(block: np.ndarray) -> np.ndarray:
    block = np.asarray(block, dtype=np.float64)
    if block.shape != (BLOCK_SIZE, BLOCK_SIZE):
        raise InvalidDimensions(f"Expected an 8x8 block, got shape {block.shape}")
    return block


def dct2(block: np.ndarray) -> np.ndarray:
    """
    2D DCT-II with orthonormal normalization.

    For an 8x8 block this is F(u,v) = 1/4 C(u) C(v) sum f(x,y)
    cos((2x+1)u pi/16) cos((2y+1)v pi/16), with C(0) = 1/sqrt(2).
    """
    return dctn(_check_block(block), type=2, norm='ortho')


def idct2(coeffs: np.ndarray) -> np.ndarray:
    """2D inverse DCT (Type-III)."""
    return idctn(_check_block(coeffs), type=2, norm='ortho')


def encode_block(block: np.ndarray) -> np.ndarray:
    """Level shift (-128) then DCT."""
    shifted = _check_block(block) - 128.0
    return dct2(shifted)


def decode_block(coeffs: np.ndarray) -> np.ndarray:
    """IDCT then reverse level shift (+128). Not clipped."""
    return idct2(coeffs) + 128.0


def dct_basis(u: int, v: int) -> np.ndarray:
    """
    Pixel-domain DCT basis pattern, indexed [y][x].

    u is the horizontal frequency, v the vertical one.
    """
    n = np.arange(BLOCK_SIZE)
    cu = 1.0 / np.sqrt(2.0) if u == 0 else 1.0
    cv = 1.0 / np.sqrt(2.0) if v == 0 else 1.0
    col = np.cos((2 * n + 1) * u * np.pi / (2 * BLOCK_SIZE))
    row = np.cos((2 * n + 1) * v * np.pi / (2 * BLOCK_SIZE))
    return (cu * cv / 4.0) * np.outer(row, col)


def dct_frequency_label(row: int, col: int) -> str:
    if row == 0 and col == 0:
        return 'DC'
    level = row + col
    if level <= 2:
        return 'Low'
    if level <= 5:
        return 'Mid'
    return 'High'
