"""
Gaussian blur (weighted convolution).

Each output channel is the kernel-weighted sum of the zero-padded
neighborhood. Because the kernel is normalized over the full window,
pixels near the border lose the weight of their missing neighbors and come
out darker.
"""

from __future__ import annotations

import logging
from concurrent.futures import Executor

import numpy as np

from config import DEFAULT_KERNEL_SIZE, DEFAULT_SIGMA, MAX_16BIT
from imaging.buffer import PixelBuffer
from imaging.execution import map_row_bands, validate_band_rows
from imaging.neighborhood import kernel_offsets, offset_slab, zero_pad

from .common import assemble_rgba64, rgb_channels
from .kernel import gaussian_kernel

logger = logging.getLogger(__name__)


def gaussian_blur(
    src: PixelBuffer,
    sigma: float = DEFAULT_SIGMA,
    kernel_size: int = DEFAULT_KERNEL_SIZE,
    executor: Executor | None = None,
    band_rows: int | None = None,
) -> PixelBuffer:
    """Blur an image with a normalized Gaussian kernel.

    Pure function: returns a new RGBA64 buffer with the same bounds; alpha is
    fully opaque. Weighted sums are accumulated in row-major kernel order and
    truncated to 16-bit integers.

    Args:
        src: Input image (any PixelFormat).
        sigma: Standard deviation of the kernel in pixels.
        kernel_size: Odd side length of the kernel.
        executor: Optional executor for row-band parallelism.
        band_rows: Rows per band when splitting the work.

    Raises:
        KernelConfigError: If sigma, kernel_size or band_rows is invalid.
    """
    kernel = gaussian_kernel(sigma, kernel_size)
    validate_band_rows(band_rows)

    c = kernel_size // 2
    width = src.width
    padded = zero_pad(rgb_channels(src).astype(np.float64), c)
    offsets = list(kernel_offsets(kernel_size))

    def compute_band(y0: int, y1: int) -> np.ndarray:
        acc = np.zeros((y1 - y0, width, 3), dtype=np.float64)
        for dy, dx in offsets:
            acc += kernel[dy + c, dx + c] * offset_slab(padded, c, dy, dx, y0, y1, width)
        return np.clip(acc, 0, MAX_16BIT).astype(np.uint16)

    logger.debug(
        "Gaussian blur %sx%s image (sigma=%s, kernel_size=%s)",
        src.width,
        src.height,
        sigma,
        kernel_size,
    )
    rgb = map_row_bands(src.height, compute_band, executor, band_rows)
    return assemble_rgba64(rgb, src.origin)
