"""Snapshot of one 8x8 block through transform and quantization."""

from dataclasses import dataclass, fields

import numpy as np

from .errors import InvalidDimensions


@dataclass
class BlockDebugData:
    """
    Five 8x8 grids for a single block, indexed [row][col].

    Grids are copied and frozen on construction so callers get a
    read-only snapshot rather than a view into codec state.
    """

    original: np.ndarray
    coefficients: np.ndarray
    quant_table: np.ndarray
    quantized: np.ndarray
    reconstructed: np.ndarray

    def __post_init__(self):
        for f in fields(self):
            grid = np.array(getattr(self, f.name), dtype=np.float64)
            if grid.shape != (8, 8):
                raise InvalidDimensions(f"{f.name} must be 8x8, got {grid.shape}")
            grid.setflags(write=False)
            setattr(self, f.name, grid)

    def flat(self) -> dict:
        """Grids as flat 64-element tuples in row-major order."""
        return {f.name: tuple(getattr(self, f.name).ravel().tolist()) for f in fields(self)}
