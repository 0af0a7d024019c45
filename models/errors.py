"""Codec error types."""


class CodecError(Exception):
    """Base class for codec core errors."""


class InvalidDimensions(CodecError, ValueError):
    """Non-positive buffer size or wrongly shaped block."""


class IndexOutOfRange(CodecError, IndexError):
    """Pixel or block coordinate outside a buffer."""


class DimensionMismatch(CodecError, ValueError):
    """Two buffers that must match in size do not."""
