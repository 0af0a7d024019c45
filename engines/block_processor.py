"""Block processing: edge padding, full-block tiling, copy-through merge."""

from typing import Callable, Iterator, Optional, Tuple

import numpy as np

from utils.constants import BLOCK_SIZE


def pad_to_multiple(channel: np.ndarray, multiple: int) -> Tuple[np.ndarray, Tuple[int, int]]:
    """Pad channel to a multiple of `multiple` by replicating edge pixels."""
    h, w = channel.shape
    pad_h = (multiple - h % multiple) % multiple
    pad_w = (multiple - w % multiple) % multiple
    if pad_h > 0 or pad_w > 0:
        padded = np.pad(channel, ((0, pad_h), (0, pad_w)), mode='edge')
    else:
        padded = channel.copy()
    return padded, (h, w)


def crop(channel: np.ndarray, shape: Tuple[int, int]) -> np.ndarray:
    h, w = shape
    return channel[:h, :w].copy()


def full_block_origins(shape: Tuple[int, int], block_size: int = BLOCK_SIZE) -> Iterator[Tuple[int, int]]:
    """(row, col) of every complete block; partial edge blocks are skipped."""
    h, w = shape
    for i in range(0, h - block_size + 1, block_size):
        for j in range(0, w - block_size + 1, block_size):
            yield i, j


def extract_block(channel: np.ndarray, bx: int, by: int, block_size: int = BLOCK_SIZE) -> Optional[np.ndarray]:
    """Copy of block column bx, row by, or None if it is not complete."""
    h, w = channel.shape
    i, j = by * block_size, bx * block_size
    if bx < 0 or by < 0 or i + block_size > h or j + block_size > w:
        return None
    return channel[i:i+block_size, j:j+block_size].copy()


def map_full_blocks(
    channel: np.ndarray,
    func: Callable[[np.ndarray], np.ndarray],
    block_size: int = BLOCK_SIZE
) -> np.ndarray:
    """
    Apply func to every complete block.

    Rows and columns that do not form a complete block are copied through
    unchanged.
    """
    result = np.array(channel, dtype=np.float64, copy=True)
    for (i, j) in full_block_origins(channel.shape, block_size):
        block = channel[i:i+block_size, j:j+block_size].astype(np.float64)
        result[i:i+block_size, j:j+block_size] = func(block)
    return result
