"""Quality metrics of one codec run."""

from dataclasses import dataclass
from typing import Optional

from .pixel_buffer import PixelBuffer


@dataclass
class CodecMetrics:
    """Per-channel PSNR/SSIM and the BGR artifact heatmap."""

    psnr_y: float = 0.0
    psnr_cr: float = 0.0
    psnr_cb: float = 0.0

    ssim_y: float = 0.0
    ssim_cr: float = 0.0
    ssim_cb: float = 0.0

    artifact_map: Optional[PixelBuffer] = None
