"""Pick interesting 8x8 blocks (edges, texture, flat areas) for inspection."""

from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from models.pixel_buffer import PixelBuffer
from utils.constants import BLOCK_SIZE

CATEGORIES = ('edge', 'texture', 'smooth')


@dataclass
class SuggestedBlock:
    x: int
    y: int
    category: str
    score: float


def _luma(bgr: np.ndarray) -> np.ndarray:
    return 0.299 * bgr[:, :, 2] + 0.587 * bgr[:, :, 1] + 0.114 * bgr[:, :, 0]


def score_block(lum: np.ndarray, bx: int, by: int,
                original: Optional[np.ndarray] = None, reconstructed: Optional[np.ndarray] = None) -> dict:
    """Edge, texture, smoothness and reconstruction-error scores of one block."""
    y0, x0 = by * BLOCK_SIZE, bx * BLOCK_SIZE
    block = lum[y0:y0+BLOCK_SIZE, x0:x0+BLOCK_SIZE]

    inner = block[:-1, :-1]
    edge = np.sum(np.abs(block[:-1, 1:] - inner) + np.abs(block[1:, :-1] - inner))
    variance = block.var()

    error = 0.0
    if reconstructed is not None:
        diff = (original[y0:y0+BLOCK_SIZE, x0:x0+BLOCK_SIZE]
                - reconstructed[y0:y0+BLOCK_SIZE, x0:x0+BLOCK_SIZE])
        error = float(np.mean(diff * diff))

    return {
        'edge': float(edge),
        'texture': float(variance),
        'smooth': float(1.0 / (1.0 + variance)),
        'error': error,
    }


def suggest_blocks(
    original_bgr: PixelBuffer,
    reconstructed_bgr: Optional[PixelBuffer] = None,
    top_n: int = 2,
    max_candidates: int = 200
) -> List[SuggestedBlock]:
    """
    Top blocks per category, each block suggested at most once.

    Only complete blocks are considered; on large images every
    (total // max_candidates)-th block is sampled.
    """
    blocks_x = original_bgr.width // BLOCK_SIZE
    blocks_y = original_bgr.height // BLOCK_SIZE
    total = blocks_x * blocks_y
    if total == 0:
        return []

    orig = original_bgr.array
    recon = reconstructed_bgr.array if reconstructed_bgr is not None else None
    lum = _luma(orig)

    step = max(1, total // max_candidates)
    candidates = []
    for idx in range(0, total, step):
        bx, by = idx % blocks_x, idx // blocks_x
        candidates.append((bx, by, score_block(lum, bx, by, orig, recon)))

    results = []
    seen = set()
    for category in CATEGORIES:
        ranked = sorted(candidates, key=lambda c: c[2][category], reverse=True)
        count = 0
        for bx, by, scores in ranked:
            if count >= top_n:
                break
            if (bx, by) in seen:
                continue
            seen.add((bx, by))
            results.append(SuggestedBlock(bx, by, category, scores[category]))
            count += 1
    return results
