"""Size estimation for quantized coefficients (no real entropy coder)."""

import math
from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from utils.constants import ZIGZAG_ORDER


def estimate_bits(values: np.ndarray) -> float:
    """
    Order-of-magnitude code length of a set of coded values.

    0.5 bits for each value with |v| < 0.5 (part of a zero run), otherwise
    log2|v| + 3 (magnitude, sign and overhead). Not an exact code length.
    """
    mags = np.abs(np.asarray(values, dtype=np.float64)).ravel()
    small = mags < 0.5
    total = 0.5 * np.count_nonzero(small)
    if not small.all():
        total += float(np.sum(np.log2(mags[~small]) + 3.0))
    return float(total)


@dataclass
class EntropySymbol:
    """One simulated JPEG run/size symbol of a block."""

    kind: str
    zigzag_index: int
    base_bits: int
    mag_bits: int
    run: Optional[int] = None
    size: Optional[int] = None
    amplitude: Optional[int] = None

    @property
    def total_bits(self) -> int:
        return self.base_bits + self.mag_bits


def _category(value: int) -> int:
    return int(math.floor(math.log2(abs(value)))) + 1


def block_symbols(quantized: np.ndarray) -> List[EntropySymbol]:
    """
    Zig-zag run/size breakdown of one quantized 8x8 block.

    Visualisation only: the costs mimic typical JPEG Huffman code lengths
    and are never added to the pipeline's bit estimate.
    """
    flat = np.asarray(quantized, dtype=np.float64).ravel()
    symbols = []

    dc = int(round(flat[0]))
    if dc != 0:
        size = _category(dc)
        symbols.append(EntropySymbol('DC', 0, 3, size, size=size, amplitude=dc))
    else:
        symbols.append(EntropySymbol('DC', 0, 2, 0, size=0, amplitude=0))

    run = 0
    for i in range(1, 64):
        ac = int(round(flat[ZIGZAG_ORDER[i]]))
        if ac == 0:
            run += 1
            continue
        while run > 15:
            symbols.append(EntropySymbol('ZRL', i - run, 11, 0, run=15))
            run -= 16
        size = _category(ac)
        base_bits = 5 if (run < 4 and size < 4) else 9
        symbols.append(EntropySymbol('AC', i, base_bits, size, run=run, size=size, amplitude=ac))
        run = 0

    if run > 0:
        symbols.append(EntropySymbol('EOB', 63, 4, 0))
    return symbols


def estimate_block_bits(quantized: np.ndarray) -> int:
    return sum(s.total_bits for s in block_symbols(quantized))
