"""Main compression/reconstruction pipeline."""

import logging
from dataclasses import replace
from typing import Optional, Tuple

import numpy as np

from models.block_debug import BlockDebugData
from models.codec_config import CodecConfig
from models.codec_metrics import CodecMetrics
from models.errors import IndexOutOfRange, InvalidDimensions
from models.pixel_buffer import PixelBuffer
from engines.color_space import (
    bgr_to_ycrcb, ycrcb_to_bgr, downsample_chroma, upsample_chroma, subsampling_factors
)
from engines.block_processor import map_full_blocks, extract_block, full_block_origins, crop
from engines.dct_engine import encode_block, decode_block
from engines.wavelet import (
    dwt8x8, idwt8x8, dwt_levels, level_geometry, dwt_image, idwt_image, pad_for_dwt
)
from engines.quantizer import (
    generate_tables, quantize, dequantize, dwt_base_step, dwt_step_map
)
from engines.entropy import estimate_bits
from utils.constants import BLOCK_SIZE, DWT_HEADER_BITS
from utils.metrics import compute_metrics

logger = logging.getLogger(__name__)

CHANNEL_NAMES = ('Y', 'Cr', 'Cb')


class CodecPipeline:
    """
    One codec session: configuration, quantization tables and the
    run-scoped bit estimate.

    Not safe to share between threads; use one instance per concurrent run.
    """

    def __init__(self, config: Optional[CodecConfig] = None):
        self.config = config or CodecConfig()
        self.luma_table, self.chroma_table = generate_tables(self.config.quality)
        self.bit_estimate = 0.0

    def configure(self, quality: float, chroma_subsampling, transform: str,
                  quantization_enabled: Optional[bool] = None) -> CodecConfig:
        """Swap in a new config; tables are rebuilt only if quality changed."""
        if quantization_enabled is None:
            quantization_enabled = self.config.quantization_enabled
        config = replace(
            self.config,
            quality=quality,
            chroma_subsampling=chroma_subsampling,
            transform=transform,
            quantization_enabled=quantization_enabled,
        )
        if config.quality != self.config.quality:
            self.luma_table, self.chroma_table = generate_tables(config.quality)
        self.config = config
        return config

    # === PLANE PATHS ===

    def _process_dct_plane(self, plane: np.ndarray, table: np.ndarray) -> np.ndarray:
        bits = 0.0

        def run_block(block: np.ndarray) -> np.ndarray:
            nonlocal bits
            coeffs = encode_block(block)
            if self.config.quantization_enabled:
                indices = quantize(coeffs, table)
                bits += estimate_bits(indices)
                coeffs = dequantize(indices, table)
            else:
                bits += estimate_bits(coeffs)
            return decode_block(coeffs)

        reconstructed = map_full_blocks(plane, run_block)
        self.bit_estimate += bits
        return reconstructed

    def _process_dwt_plane(self, plane: np.ndarray) -> np.ndarray:
        h, w = plane.shape
        levels = dwt_levels(w, h)
        padded, orig_shape = pad_for_dwt(plane - 128.0, levels)
        ph, pw = padded.shape
        geometry = level_geometry(pw, ph, levels)

        coeffs = dwt_image(padded, levels, geometry)
        if self.config.quantization_enabled:
            steps = dwt_step_map(pw, ph, geometry, dwt_base_step(self.config.quality))
            indices = quantize(coeffs, steps)
            self.bit_estimate += estimate_bits(indices)
            coeffs = dequantize(indices, steps)
        else:
            self.bit_estimate += estimate_bits(coeffs)
        self.bit_estimate += DWT_HEADER_BITS

        return crop(idwt_image(coeffs, levels, geometry), orig_shape) + 128.0

    def process_plane(self, plane: PixelBuffer, is_chroma: bool = False) -> PixelBuffer:
        """Transform, quantize and reconstruct one single-channel plane."""
        data = plane.plane(0)
        if self.config.transform == 'dwt':
            out = self._process_dwt_plane(data)
        else:
            table = self.chroma_table if is_chroma else self.luma_table
            out = self._process_dct_plane(data, table)
        return PixelBuffer.from_array(out)

    # === FULL IMAGE ===

    def process(self, bgr: PixelBuffer) -> Tuple[PixelBuffer, CodecMetrics]:
        """Run the codec on a 3-channel BGR buffer."""
        if bgr.channels != 3:
            raise InvalidDimensions(f"Expected a 3-channel BGR image, got {bgr.channels} channels")
        config = self.config
        self.bit_estimate = 0.0
        width, height = bgr.width, bgr.height

        # === ENCODING ===
        planes = bgr_to_ycrcb(bgr).split()
        if config.subsampled:
            planes[1] = downsample_chroma(planes[1], config.chroma_subsampling)
            planes[2] = downsample_chroma(planes[2], config.chroma_subsampling)

        # === TRANSFORM / QUANTIZE / RECONSTRUCT ===
        reconstructed = [
            self.process_plane(plane, is_chroma=(idx != 0))
            for idx, plane in enumerate(planes)
        ]

        # === DECODING ===
        if config.subsampled:
            reconstructed[1] = upsample_chroma(reconstructed[1], width, height, config.chroma_subsampling)
            reconstructed[2] = upsample_chroma(reconstructed[2], width, height, config.chroma_subsampling)
        output = ycrcb_to_bgr(PixelBuffer.merge(reconstructed))

        # === METRICS ===
        metrics = compute_metrics(bgr, output)
        logger.debug(
            "Processed %dx%d %s %s q=%s: psnr_y=%.2f dB, ~%.0f bits",
            width, height, config.transform, config.chroma_subsampling,
            config.quality, metrics.psnr_y, self.bit_estimate,
        )
        return output, metrics

    # === INSPECTION ===

    def inspect_block(self, plane: PixelBuffer, bx: int, by: int, is_chroma: bool) -> BlockDebugData:
        """
        Trace block (bx, by) of a single-channel plane through the codec.

        Side-effect free: the bit estimate is not touched.
        """
        if plane.channels != 1:
            raise InvalidDimensions(f"inspect_block expects a single-channel plane, got {plane.channels}")
        block = extract_block(plane.plane(0), bx, by)
        if block is None:
            raise IndexOutOfRange(
                f"Block ({bx}, {by}) outside {plane.width}x{plane.height} plane"
            )

        if self.config.transform == 'dwt':
            coeffs = dwt8x8(block - 128.0)
            table = dwt_step_map(
                BLOCK_SIZE, BLOCK_SIZE,
                level_geometry(BLOCK_SIZE, BLOCK_SIZE, dwt_levels(BLOCK_SIZE, BLOCK_SIZE)),
                dwt_base_step(self.config.quality),
            )

            def inverse(c):
                return idwt8x8(c) + 128.0
        else:
            coeffs = encode_block(block)
            table = self.chroma_table if is_chroma else self.luma_table
            inverse = decode_block

        if self.config.quantization_enabled:
            indices = quantize(coeffs, table)
            recon = inverse(dequantize(indices, table))
        else:
            indices = coeffs
            recon = inverse(coeffs)

        return BlockDebugData(
            original=block,
            coefficients=coeffs,
            quant_table=table,
            quantized=indices,
            reconstructed=recon,
        )

    def inspect_image_block(self, bgr: PixelBuffer, bx: int, by: int, channel: int) -> BlockDebugData:
        """
        inspect_block for a full BGR image and a channel index (0=Y, 1=Cr, 2=Cb).

        Block coordinates are given in full-resolution block units and are
        mapped onto the subsampled chroma plane.
        """
        if not 0 <= channel < 3:
            raise IndexOutOfRange(f"Channel {channel} is not one of {CHANNEL_NAMES}")
        plane = bgr_to_ycrcb(bgr).channel(channel)
        is_chroma = channel != 0
        if is_chroma and self.config.subsampled:
            plane = downsample_chroma(plane, self.config.chroma_subsampling)
            sx, sy = subsampling_factors(self.config.chroma_subsampling)
            bx, by = bx // sx, by // sy
        return self.inspect_block(plane, bx, by, is_chroma)

    # === STATISTICS ===

    def coefficient_histogram(self, bgr: PixelBuffer, num_bins: int,
                              max_value: float) -> Tuple[np.ndarray, np.ndarray]:
        """
        Normalised |AC coefficient| histograms of the Y plane, (dct, dwt).

        Bins split [0, max_value) evenly; the last bin also collects every
        magnitude at or above max_value. Coefficients are unquantized; the
        DWT side is edge-padded the same way the codec pads before transforming.
        """
        if num_bins <= 0 or max_value <= 0:
            raise ValueError("num_bins and max_value must be positive")
        y = bgr_to_ycrcb(bgr).plane(0)

        dct_mags = []
        for (i, j) in full_block_origins(y.shape):
            coeffs = encode_block(y[i:i+BLOCK_SIZE, j:j+BLOCK_SIZE])
            dct_mags.append(np.abs(coeffs).ravel()[1:])
        dct_mags = np.concatenate(dct_mags) if dct_mags else np.array([])

        levels = dwt_levels(y.shape[1], y.shape[0])
        padded, _ = pad_for_dwt(y - 128.0, levels)
        h, w = padded.shape
        geometry = level_geometry(w, h, levels)
        dwt_coeffs = dwt_image(padded, levels, geometry)
        dwt_mags = np.abs(dwt_coeffs).ravel()
        if levels > 0:
            ll_w, ll_h = geometry[-1][0] // 2, geometry[-1][1] // 2
            ll = np.zeros((h, w), dtype=bool)
            ll[:ll_h, :ll_w] = True
            dwt_mags = np.abs(dwt_coeffs[~ll])

        return _normalised_histogram(dct_mags, num_bins, max_value), \
            _normalised_histogram(dwt_mags, num_bins, max_value)


def _normalised_histogram(values: np.ndarray, num_bins: int, max_value: float) -> np.ndarray:
    if values.size == 0:
        return np.zeros(num_bins, dtype=np.float64)
    clipped = np.minimum(values, np.nextafter(max_value, 0))
    hist, _ = np.histogram(clipped, bins=num_bins, range=(0.0, max_value))
    return hist.astype(np.float64) / values.size


def compress_reconstruct(image_bgr: PixelBuffer, config: CodecConfig) -> Tuple[PixelBuffer, CodecMetrics, float]:
    """Run one codec pass; returns (reconstructed, metrics, bit_estimate)."""
    pipeline = CodecPipeline(config)
    reconstructed, metrics = pipeline.process(image_bgr)
    return reconstructed, metrics, pipeline.bit_estimate
