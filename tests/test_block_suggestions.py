"""Tests for suggested inspection blocks."""

import numpy as np

from models.pixel_buffer import PixelBuffer
from utils.block_suggestions import suggest_blocks, score_block


def _bgr(gray):
    return PixelBuffer.from_array(np.repeat(gray[:, :, np.newaxis], 3, axis=2))


def _mixed_image():
    """32x16 image: flat block, hard edge block, noisy block and a mild ramp."""
    gray = np.full((16, 32), 100.0)
    gray[0:8, 8:16] = 20.0
    gray[0:8, 12:16] = 230.0
    gray[0:8, 16:24] = np.random.default_rng(1).uniform(0, 255, (8, 8))
    gray[8:16, 0:8] = np.arange(8.0)[None, :] * 2 + 100.0
    return _bgr(gray)


def test_score_block_flat_is_smooth():
    lum = np.full((8, 8), 50.0)
    scores = score_block(lum, 0, 0)
    assert scores['edge'] == 0.0
    assert scores['texture'] == 0.0
    assert scores['smooth'] == 1.0
    assert scores['error'] == 0.0


def test_score_block_error_uses_reconstruction():
    original = np.zeros((8, 8, 3))
    reconstructed = np.full((8, 8, 3), 2.0)
    scores = score_block(np.zeros((8, 8)), 0, 0, original, reconstructed)
    assert scores['error'] == 4.0


def test_edge_block_suggested_first():
    gray = np.full((16, 32), 100.0)
    gray[0:8, 12:16] = 230.0
    suggestions = suggest_blocks(_bgr(gray), top_n=1)
    by_category = {s.category: (s.x, s.y) for s in suggestions}
    assert by_category['edge'] == (1, 0)
    assert by_category['texture'] != (1, 0)
    assert by_category['smooth'] != (1, 0)
    assert [s.category for s in suggestions] == ['edge', 'texture', 'smooth']


def test_suggestions_never_repeat_a_block():
    suggestions = suggest_blocks(_mixed_image(), top_n=3)
    coords = [(s.x, s.y) for s in suggestions]
    assert len(coords) == len(set(coords))
    assert len(suggestions) == 8  # only eight blocks available


def test_image_smaller_than_a_block_has_no_suggestions():
    assert suggest_blocks(_bgr(np.zeros((5, 30)))) == []


def test_candidates_are_sampled_on_large_images():
    suggestions = suggest_blocks(_bgr(np.zeros((64, 64))), top_n=100, max_candidates=16)
    coords = {(s.x, s.y) for s in suggestions}
    # 64 blocks sampled every 4th -> 16 candidates
    assert len(coords) == 16
    assert all((y * 8 + x) % 4 == 0 for x, y in coords)
