"""Metrics: PSNR, SSIM and pixel-level diagnostic maps."""

import math

import cv2
import numpy as np
from skimage.metrics import mean_squared_error

from models.codec_metrics import CodecMetrics
from models.errors import DimensionMismatch, InvalidDimensions
from models.pixel_buffer import PixelBuffer
from utils.constants import BLOCK_SIZE, SSIM_C1, SSIM_C2

SSIM_WINDOW = 8
SSIM_STRIDE = 4


def psnr(a: PixelBuffer, b: PixelBuffer) -> float:
    """
    Peak signal-to-noise ratio in dB for 8-bit range samples.

    Returns 0.0 when the buffers differ in size or channel count (a
    sentinel, not an exception, unlike artifact_map) and 100.0 for
    effectively identical buffers.
    """
    if not a.same_shape(b):
        return 0.0
    mse = mean_squared_error(a.array, b.array)
    if mse <= 1e-10:
        return 100.0
    return 10.0 * math.log10((255.0 * 255.0) / mse)


def _window_sum(integral: np.ndarray, y0, y1, x0, x1) -> np.ndarray:
    return integral[y1, x1] - integral[y0, x1] - integral[y1, x0] + integral[y0, x0]


def ssim(a: PixelBuffer, b: PixelBuffer) -> float:
    """
    Mean SSIM over uniform windows centred on every 4th pixel.

    Each window spans offsets -4..+4 around its centre, clipped to the
    image, so border windows average fewer pixels. Single channel only;
    returns 0.0 on size mismatch like psnr.
    """
    if not a.same_shape(b):
        return 0.0
    if a.channels != 1:
        raise InvalidDimensions(f"SSIM expects single-channel buffers, got {a.channels}")

    x = np.ascontiguousarray(a.plane(0))
    y = np.ascontiguousarray(b.plane(0))
    h, w = x.shape
    half = SSIM_WINDOW // 2

    ix = cv2.integral(x, sdepth=cv2.CV_64F)
    iy = cv2.integral(y, sdepth=cv2.CV_64F)
    ixx = cv2.integral(x * x, sdepth=cv2.CV_64F)
    iyy = cv2.integral(y * y, sdepth=cv2.CV_64F)
    ixy = cv2.integral(x * y, sdepth=cv2.CV_64F)

    cy = np.arange(0, h, SSIM_STRIDE)
    cx = np.arange(0, w, SSIM_STRIDE)
    y0 = np.maximum(cy - half, 0)[:, None]
    y1 = np.minimum(cy + half + 1, h)[:, None]
    x0 = np.maximum(cx - half, 0)[None, :]
    x1 = np.minimum(cx + half + 1, w)[None, :]
    count = (y1 - y0) * (x1 - x0)

    ux = _window_sum(ix, y0, y1, x0, x1) / count
    uy = _window_sum(iy, y0, y1, x0, x1) / count
    sigx2 = _window_sum(ixx, y0, y1, x0, x1) / count - ux * ux
    sigy2 = _window_sum(iyy, y0, y1, x0, x1) / count - uy * uy
    sigxy = _window_sum(ixy, y0, y1, x0, x1) / count - ux * uy

    num = (2 * ux * uy + SSIM_C1) * (2 * sigxy + SSIM_C2)
    den = (ux * ux + uy * uy + SSIM_C1) * (sigx2 + sigy2 + SSIM_C2)
    return float(np.mean(num / den))


def artifact_map(original: PixelBuffer, reconstructed: PixelBuffer, gain: float = 5.0) -> PixelBuffer:
    """Absolute difference heatmap, min(255, |a - b| * gain)."""
    if not original.same_shape(reconstructed):
        raise DimensionMismatch(
            f"Image size mismatch: {original.shape} vs {reconstructed.shape}"
        )
    diff = np.abs(original.array - reconstructed.array) * gain
    return PixelBuffer.from_array(np.minimum(255.0, diff))


def _gradient_magnitude(plane: np.ndarray) -> np.ndarray:
    kx = np.array([[-1.0, 0.0, 1.0]])
    gx = cv2.filter2D(plane, cv2.CV_64F, kx, borderType=cv2.BORDER_REPLICATE)
    gy = cv2.filter2D(plane, cv2.CV_64F, kx.T, borderType=cv2.BORDER_REPLICATE)
    return np.sqrt(gx * gx + gy * gy)


def edge_distortion_map(original: PixelBuffer, reconstructed: PixelBuffer) -> PixelBuffer:
    """
    Loss or gain of edge strength on channel 0.

    Central-difference gradient magnitude on interior pixels of both
    images, min(255, |grad_a - grad_b| * 4); the 1-pixel border stays 0.
    """
    if original.width != reconstructed.width or original.height != reconstructed.height:
        raise DimensionMismatch(
            f"Image size mismatch: {original.shape} vs {reconstructed.shape}"
        )
    h, w = original.height, original.width
    out = np.zeros((h, w), dtype=np.float64)
    if h >= 3 and w >= 3:
        ga = _gradient_magnitude(np.ascontiguousarray(original.plane(0)))
        gb = _gradient_magnitude(np.ascontiguousarray(reconstructed.plane(0)))
        diff = np.abs(ga - gb) * 4.0
        out[1:-1, 1:-1] = np.minimum(255.0, diff[1:-1, 1:-1])
    return PixelBuffer.from_array(out)


def blocking_map(reconstructed: PixelBuffer) -> PixelBuffer:
    """
    Discontinuity across 8x8 block boundaries on channel 0.

    Pixels in a column or row that starts a block (index % 8 == 0, index
    > 0) score the absolute step from their left or upper neighbour; the
    score is scaled by 8 and clamped to 255. Everywhere else is 0.
    """
    p = reconstructed.plane(0)
    h, w = p.shape
    score = np.zeros((h, w), dtype=np.float64)
    cols = np.arange(BLOCK_SIZE, w, BLOCK_SIZE)
    rows = np.arange(BLOCK_SIZE, h, BLOCK_SIZE)
    score[:, cols] += np.abs(p[:, cols] - p[:, cols - 1])
    score[rows, :] += np.abs(p[rows, :] - p[rows - 1, :])
    return PixelBuffer.from_array(np.minimum(255.0, score * 8.0))


def compute_metrics(original_bgr: PixelBuffer, reconstructed_bgr: PixelBuffer,
                    gain: float = 5.0) -> CodecMetrics:
    """Per-channel YCrCb PSNR/SSIM plus the BGR artifact map."""
    from engines.color_space import bgr_to_ycrcb

    orig = bgr_to_ycrcb(original_bgr).split()
    recon = bgr_to_ycrcb(reconstructed_bgr).split()

    return CodecMetrics(
        psnr_y=psnr(orig[0], recon[0]),
        psnr_cr=psnr(orig[1], recon[1]),
        psnr_cb=psnr(orig[2], recon[2]),
        ssim_y=ssim(orig[0], recon[0]),
        ssim_cr=ssim(orig[1], recon[1]),
        ssim_cb=ssim(orig[2], recon[2]),
        artifact_map=artifact_map(original_bgr, reconstructed_bgr, gain),
    )
