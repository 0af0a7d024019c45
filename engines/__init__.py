"""DSP engines - pure computation, no I/O."""

from .color_space import (
    bgr_to_ycrcb, ycrcb_to_bgr, downsample_chroma, upsample_chroma, subsampling_factors
)
from .block_processor import pad_to_multiple, map_full_blocks, extract_block
from .dct_engine import dct2, idct2, encode_block, decode_block, dct_basis
from .wavelet import (
    dwt8x8, idwt8x8, dwt_levels, level_geometry, dwt_image, idwt_image, haar_basis
)
from .quantizer import generate_tables, quantize, dequantize, dwt_quant_step, dwt_step_map
from .entropy import estimate_bits, block_symbols
from .pipeline import CodecPipeline, compress_reconstruct

__all__ = [
    'bgr_to_ycrcb',
    'ycrcb_to_bgr',
    'downsample_chroma',
    'upsample_chroma',
    'subsampling_factors',
    'pad_to_multiple',
    'map_full_blocks',
    'extract_block',
    'dct2',
    'idct2',
    'encode_block',
    'decode_block',
    'dct_basis',
    'dwt8x8',
    'idwt8x8',
    'dwt_levels',
    'level_geometry',
    'dwt_image',
    'idwt_image',
    'haar_basis',
    'generate_tables',
    'quantize',
    'dequantize',
    'dwt_quant_step',
    'dwt_step_map',
    'estimate_bits',
    'block_symbols',
    'CodecPipeline',
    'compress_reconstruct',
]
