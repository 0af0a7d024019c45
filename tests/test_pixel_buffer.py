"""Tests for the PixelBuffer container."""

import numpy as np
import pytest

from models.errors import InvalidDimensions, IndexOutOfRange
from models.pixel_buffer import PixelBuffer


def test_construction_zero_fills():
    buf = PixelBuffer(4, 3, 2)
    assert buf.shape == (4, 3, 2)
    assert buf.size == 4 * 3 * 2
    assert np.all(buf.data == 0.0)
    assert buf.data.dtype == np.float64


@pytest.mark.parametrize('dims', [(0, 4, 3), (4, -1, 3), (4, 4, 0)])
def test_invalid_dimensions(dims):
    with pytest.raises(InvalidDimensions):
        PixelBuffer(*dims)


def test_flat_layout_is_row_major_interleaved():
    buf = PixelBuffer(3, 2, 3)
    buf.set_value(2, 1, 1, 7.0)
    assert buf.data[(1 * 3 + 2) * 3 + 1] == 7.0
    assert buf.value(2, 1, 1) == 7.0


@pytest.mark.parametrize('coords', [(3, 0, 0), (0, 2, 0), (0, 0, 3), (-1, 0, 0)])
def test_out_of_range_access(coords):
    buf = PixelBuffer(3, 2, 3)
    with pytest.raises(IndexOutOfRange):
        buf.value(*coords)
    with pytest.raises(IndexError):
        buf.set_value(*coords, 1.0)


def test_from_array_copies():
    arr = np.arange(12.0).reshape(3, 4)
    buf = PixelBuffer.from_array(arr)
    assert buf.shape == (4, 3, 1)
    arr[0, 0] = 99.0
    assert buf.value(0, 0) == 0.0


def test_split_and_merge():
    buf = PixelBuffer.from_array(np.random.default_rng(0).random((5, 6, 3)))
    planes = buf.split()
    assert [p.channels for p in planes] == [1, 1, 1]
    merged = PixelBuffer.merge(planes)
    assert np.array_equal(merged.array, buf.array)
    with pytest.raises(InvalidDimensions):
        PixelBuffer.merge([PixelBuffer(2, 2, 1), PixelBuffer(3, 2, 1)])


def test_channel_is_independent_copy():
    buf = PixelBuffer(2, 2, 3)
    ch = buf.channel(1)
    ch.set_value(0, 0, 0, 5.0)
    assert buf.value(0, 0, 1) == 0.0


def test_cv_adapters_saturate():
    img = np.array([[[0, 128, 255]]], dtype=np.uint8)
    buf = PixelBuffer.from_cv_image(img)
    assert buf.value(0, 0, 2) == 255.0
    buf.set_value(0, 0, 0, -20.0)
    buf.set_value(0, 0, 2, 300.0)
    out = buf.to_cv_image()
    assert out.dtype == np.uint8
    assert out.tolist() == [[[0, 128, 255]]]
    gray = PixelBuffer.from_array(np.full((2, 2), 12.4)).to_cv_image()
    assert gray.shape == (2, 2)
    assert np.all(gray == 12)


def test_cv_adapter_rejects_float_images():
    with pytest.raises(InvalidDimensions):
        PixelBuffer.from_cv_image(np.zeros((2, 2, 3), dtype=np.float32))
