"""Data models for codec buffers, configuration and results."""

from .errors import CodecError, InvalidDimensions, IndexOutOfRange, DimensionMismatch
from .pixel_buffer import PixelBuffer
from .codec_config import CodecConfig
from .codec_metrics import CodecMetrics
from .block_debug import BlockDebugData

__all__ = [
    'CodecError',
    'InvalidDimensions',
    'IndexOutOfRange',
    'DimensionMismatch',
    'PixelBuffer',
    'CodecConfig',
    'CodecMetrics',
    'BlockDebugData',
]
