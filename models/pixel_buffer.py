"""Dense multi-channel float64 image container."""

from typing import Sequence

import numpy as np

from .errors import InvalidDimensions, IndexOutOfRange


class PixelBuffer:
    """
    Row-major interleaved image of float64 samples.

    Sample (x, y, c) lives at flat index (y * width + x) * channels + c,
    which is also the layout of the (height, width, channels) ``array`` view.
    """

    __slots__ = ('_width', '_height', '_channels', '_array')

    def __init__(self, width: int, height: int, channels: int):
        if width <= 0 or height <= 0 or channels <= 0:
            raise InvalidDimensions(
                f"Invalid image dimensions: {width}x{height}x{channels}"
            )
        self._width = int(width)
        self._height = int(height)
        self._channels = int(channels)
        self._array = np.zeros((self._height, self._width, self._channels), dtype=np.float64)

    @classmethod
    def from_array(cls, array: np.ndarray) -> 'PixelBuffer':
        """Copy a (H, W) or (H, W, C) array into a new buffer."""
        arr = np.asarray(array, dtype=np.float64)
        if arr.ndim == 2:
            arr = arr[:, :, np.newaxis]
        if arr.ndim != 3:
            raise InvalidDimensions(f"Expected a 2D or 3D array, got shape {arr.shape}")
        h, w, c = arr.shape
        buf = cls(w, h, c)
        buf._array[...] = arr
        return buf

    @classmethod
    def from_cv_image(cls, image: np.ndarray) -> 'PixelBuffer':
        """Adapt an OpenCV uint8 image (gray or BGR) to a buffer."""
        if image is None or image.size == 0 or image.dtype != np.uint8:
            raise InvalidDimensions("Expected a non-empty uint8 image")
        if image.ndim == 3 and image.shape[2] not in (1, 3):
            raise InvalidDimensions(f"Expected 1 or 3 channels, got {image.shape[2]}")
        return cls.from_array(image)

    @classmethod
    def merge(cls, planes: Sequence['PixelBuffer']) -> 'PixelBuffer':
        """Stack single-channel planes of equal size into one buffer."""
        first = planes[0]
        for plane in planes:
            if plane.width != first.width or plane.height != first.height:
                raise InvalidDimensions("Cannot merge planes of different sizes")
        return cls.from_array(np.concatenate([p.array for p in planes], axis=2))

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def channels(self) -> int:
        return self._channels

    @property
    def size(self) -> int:
        return self._array.size

    @property
    def shape(self) -> tuple:
        return (self._width, self._height, self._channels)

    @property
    def array(self) -> np.ndarray:
        """(height, width, channels) view of the samples."""
        return self._array

    @property
    def data(self) -> np.ndarray:
        """Flat row-major interleaved view of the samples."""
        return self._array.reshape(-1)

    def _check(self, x: int, y: int, c: int) -> None:
        if not (0 <= x < self._width and 0 <= y < self._height and 0 <= c < self._channels):
            raise IndexOutOfRange(
                f"Pixel ({x}, {y}, {c}) outside {self._width}x{self._height}x{self._channels} image"
            )

    def value(self, x: int, y: int, c: int = 0) -> float:
        self._check(x, y, c)
        return float(self._array[y, x, c])

    def set_value(self, x: int, y: int, c: int, value: float) -> None:
        self._check(x, y, c)
        self._array[y, x, c] = value

    def plane(self, c: int) -> np.ndarray:
        """2D (height, width) view of one channel."""
        if not 0 <= c < self._channels:
            raise IndexOutOfRange(f"Channel {c} outside {self._channels}-channel image")
        return self._array[:, :, c]

    def channel(self, c: int) -> 'PixelBuffer':
        """New single-channel buffer holding a copy of channel c."""
        return PixelBuffer.from_array(self.plane(c))

    def split(self) -> list:
        return [self.channel(c) for c in range(self._channels)]

    def copy(self) -> 'PixelBuffer':
        return PixelBuffer.from_array(self._array)

    def same_shape(self, other: 'PixelBuffer') -> bool:
        return self.shape == other.shape

    def to_cv_image(self) -> np.ndarray:
        """Saturate to a uint8 (H, W) or (H, W, C) array."""
        out = np.clip(np.rint(self._array), 0, 255).astype(np.uint8)
        if self._channels == 1:
            return out[:, :, 0]
        return out

    def __repr__(self) -> str:
        return f"PixelBuffer({self._width}x{self._height}x{self._channels})"
