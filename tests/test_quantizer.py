"""Tests for quantization tables and DWT subband steps."""

import numpy as np
import pytest

from engines.quantizer import (
    round_half_away, quality_scale, generate_tables, quantize, dequantize,
    dwt_base_step, dwt_quant_step, dwt_step_map
)
from engines.wavelet import level_geometry
from utils.constants import BASE_LUMA, BASE_CHROMA


def test_quality_50_reproduces_base_tables():
    luma, chroma = generate_tables(50)
    assert np.array_equal(luma, BASE_LUMA)
    assert np.array_equal(chroma, BASE_CHROMA)


def test_quality_100_floors_at_one():
    luma, chroma = generate_tables(100)
    assert np.all(luma == 1.0)
    assert np.all(chroma == 1.0)


def test_tables_rounding_half_away_from_zero():
    # q=75 -> scale 0.5; base 13 -> 6.5 -> 7, base 11 -> 5.5 -> 6
    luma, _ = generate_tables(75)
    assert luma[2, 1] == 7.0
    assert luma[0, 1] == 6.0


def test_tables_monotonic_in_quality():
    previous_luma, previous_chroma = generate_tables(1)
    for q in range(2, 101):
        luma, chroma = generate_tables(q)
        assert np.all(luma <= previous_luma)
        assert np.all(chroma <= previous_chroma)
        assert np.all(luma >= 1.0) and np.all(chroma >= 1.0)
        previous_luma, previous_chroma = luma, chroma


def test_lowest_quality_dominates_highest():
    low_luma, low_chroma = generate_tables(1)
    high_luma, high_chroma = generate_tables(100)
    assert np.all(low_luma >= high_luma)
    assert np.all(low_chroma >= high_chroma)


def test_tables_are_read_only():
    luma, _ = generate_tables(50)
    with pytest.raises(ValueError):
        luma[0, 0] = 3.0


def test_quality_scale():
    assert quality_scale(50) == 1.0
    assert quality_scale(10) == 5.0
    assert quality_scale(90) == pytest.approx(0.2)


def test_quantize_dequantize():
    coeffs = np.array([[-25.0, 12.4, 7.5, -7.5]])
    step = np.array([[10.0, 4.0, 5.0, 5.0]])
    indices = quantize(coeffs, step)
    assert np.array_equal(indices, [[-3.0, 3.0, 2.0, -2.0]])
    assert np.array_equal(dequantize(indices, step), [[-30.0, 12.0, 10.0, -10.0]])


def test_round_half_away():
    assert np.array_equal(round_half_away([0.5, 1.5, 2.5, -0.5, -2.5]), [1, 2, 3, -1, -3])


def test_dwt_steps_by_band():
    geometry = level_geometry(8, 8, 3)
    base = dwt_base_step(50)
    assert base == 32.0
    assert dwt_quant_step(7, 7, geometry, base) == 32.0   # level 0 HH
    assert dwt_quant_step(4, 0, geometry, base) == 32.0   # level 0 HL
    assert dwt_quant_step(3, 2, geometry, base) == 16.0   # level 1
    assert dwt_quant_step(1, 1, geometry, base) == 8.0    # level 2
    assert dwt_quant_step(0, 0, geometry, base) == 4.0    # LL


def test_dwt_steps_floor_at_one():
    geometry = level_geometry(64, 64, 6)
    base = dwt_base_step(100)
    assert dwt_quant_step(0, 0, geometry, base) == 1.0
    assert dwt_quant_step(63, 63, geometry, base) == 1.0


def test_step_map_matches_scalar_lookup():
    for width, height in [(8, 8), (17, 19), (32, 12)]:
        geometry = level_geometry(width, height, 3)
        base = dwt_base_step(20)
        steps = dwt_step_map(width, height, geometry, base)
        for y in range(height):
            for x in range(width):
                assert steps[y, x] == dwt_quant_step(x, y, geometry, base)
