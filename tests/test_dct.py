"""Tests for DCT/IDCT operations."""

import numpy as np
import pytest

from engines.dct_engine import dct2, idct2, encode_block, decode_block, dct_basis, dct_frequency_label
from models.errors import InvalidDimensions


def test_dct_idct_invertibility():
    """DCT/IDCT should be perfectly invertible."""
    block = np.random.default_rng(1).random((8, 8)) * 255
    recovered = idct2(dct2(block - 128.0)) + 128.0
    assert np.allclose(block, recovered, atol=1e-9)


def test_encode_decode_block_invertibility():
    """encode/decode should recover original without quantization."""
    block = np.random.default_rng(2).random((8, 8)) * 255
    recovered = decode_block(encode_block(block))
    assert np.allclose(block, recovered, atol=1e-9)


def test_decode_block_does_not_clip():
    coeffs = np.zeros((8, 8))
    coeffs[0, 0] = 8 * 200.0  # DC of a block at 128 + 200
    assert np.allclose(decode_block(coeffs), 328.0)


def test_matches_direct_formula():
    """Orthonormal DCT-II equals the 1/4 C(u) C(v) double-sum definition."""
    block = np.random.default_rng(3).random((8, 8)) * 255 - 128
    n = np.arange(8)
    c = np.where(n == 0, 1 / np.sqrt(2), 1.0)
    cos = np.cos((2 * n[None, :] + 1) * n[:, None] * np.pi / 16)  # [u][x]
    expected = 0.25 * np.outer(c, c) * (cos @ block @ cos.T)
    assert np.allclose(dct2(block), expected, atol=1e-9)


def test_energy_preservation():
    """Parseval's theorem: sum(block^2) == sum(dct^2) for ortho norm."""
    shifted = np.random.default_rng(4).random((8, 8)) * 255 - 128.0
    dct_block = dct2(shifted)
    assert np.isclose(np.sum(shifted ** 2), np.sum(dct_block ** 2), rtol=1e-10)


def test_constant_block_dct():
    """Constant block should have only DC coefficient."""
    dct_block = dct2(np.full((8, 8), 10.0))
    assert np.isclose(dct_block[0, 0], 80.0)
    assert np.allclose(dct_block.ravel()[1:], 0, atol=1e-10)


def test_rejects_non_8x8_blocks():
    with pytest.raises(InvalidDimensions):
        dct2(np.zeros((16, 16)))


def test_basis_is_inverse_of_impulse():
    """Basis (u, v) is the IDCT of a unit impulse at row v, col u."""
    for u, v in [(0, 0), (1, 0), (0, 3), (5, 7)]:
        impulse = np.zeros((8, 8))
        impulse[v, u] = 1.0
        assert np.allclose(dct_basis(u, v), idct2(impulse), atol=1e-12)


def test_dc_basis_is_flat():
    assert np.allclose(dct_basis(0, 0), 1.0 / 8.0)


def test_frequency_labels():
    assert dct_frequency_label(0, 0) == 'DC'
    assert dct_frequency_label(1, 1) == 'Low'
    assert dct_frequency_label(2, 3) == 'Mid'
    assert dct_frequency_label(7, 7) == 'High'
