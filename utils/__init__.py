"""Shared utilities."""

from .constants import BASE_LUMA, BASE_CHROMA, ZIGZAG_ORDER
from .metrics import (
    psnr, ssim, artifact_map, edge_distortion_map, blocking_map, compute_metrics
)
from .block_suggestions import SuggestedBlock, suggest_blocks
from .test_images import generate_colored_checkerboard, generate_thin_stripes, generate_gradient

__all__ = [
    'BASE_LUMA',
    'BASE_CHROMA',
    'ZIGZAG_ORDER',
    'psnr',
    'ssim',
    'artifact_map',
    'edge_distortion_map',
    'blocking_map',
    'compute_metrics',
    'SuggestedBlock',
    'suggest_blocks',
    'generate_colored_checkerboard',
    'generate_thin_stripes',
    'generate_gradient',
]
