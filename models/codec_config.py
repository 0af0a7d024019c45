"""Codec run parameters."""

from dataclasses import dataclass
from typing import Literal, Union

SUBSAMPLING_MODES = ('4:4:4', '4:2:2', '4:2:0')
TRANSFORMS = ('dct', 'dwt')

_MODE_CODES = {444: '4:4:4', 422: '4:2:2', 420: '4:2:0'}


def normalize_subsampling(mode: Union[str, int]) -> str:
    """Accept '4:2:0' style strings or the integer codes 444/422/420."""
    if isinstance(mode, int) and not isinstance(mode, bool):
        if mode not in _MODE_CODES:
            raise ValueError(f"Unknown subsampling mode: {mode}")
        return _MODE_CODES[mode]
    if mode not in SUBSAMPLING_MODES:
        raise ValueError(f"Unknown subsampling mode: {mode}")
    return mode


@dataclass(frozen=True)
class CodecConfig:
    """Immutable per-run codec parameters."""

    quality: float = 50
    chroma_subsampling: Literal['4:4:4', '4:2:2', '4:2:0'] = '4:4:4'
    transform: Literal['dct', 'dwt'] = 'dct'
    quantization_enabled: bool = True

    def __post_init__(self):
        if not (1 <= self.quality <= 100):
            raise ValueError(f"Quality must be 1-100, got {self.quality}")
        object.__setattr__(self, 'chroma_subsampling', normalize_subsampling(self.chroma_subsampling))
        if self.transform not in TRANSFORMS:
            raise ValueError(f"Transform must be 'dct' or 'dwt', got {self.transform!r}")

    @property
    def subsampled(self) -> bool:
        return self.chroma_subsampling != '4:4:4'
