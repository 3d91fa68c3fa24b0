"""
Median blur (order-statistic filter).

Per channel, the k*k zero-padded neighborhood samples are ranked and the
sample at rank (k*k) // 2 is kept. There is no averaging between ranks.
"""

from __future__ import annotations

import logging
from concurrent.futures import Executor

import numpy as np

from config import DEFAULT_KERNEL_SIZE, MEDIAN_BAND_SAMPLES
from imaging.buffer import PixelBuffer
from imaging.execution import map_row_bands, validate_band_rows
from imaging.neighborhood import sliding_windows, validate_kernel_size, zero_pad

from .common import assemble_rgba64, rgb_channels

logger = logging.getLogger(__name__)


def median_rank(kernel_size: int) -> int:
    """Index of the kept sample in the ascending neighborhood order."""
    return kernel_size * kernel_size // 2


def median_band_rows(width: int, kernel_size: int) -> int:
    """Default band height keeping one band's gathered windows under budget.

    Each output row gathers ``width * 3 * k * k`` samples, so without banding
    a large image would materialize k*k copies of itself.
    """
    per_row = width * 3 * kernel_size * kernel_size
    return max(1, MEDIAN_BAND_SAMPLES // per_row)


def median_blur(
    src: PixelBuffer,
    kernel_size: int = DEFAULT_KERNEL_SIZE,
    executor: Executor | None = None,
    band_rows: int | None = None,
) -> PixelBuffer:
    """Replace each channel sample by the median of its neighborhood.

    Zero padding counts as real samples, so on a bright image the corners
    (where more than half of a 3x3 window is outside) go to zero.

    Args:
        src: Input image (any PixelFormat).
        kernel_size: Odd side length of the neighborhood.
        executor: Optional executor for row-band parallelism.
        band_rows: Rows per band when splitting the work. None picks a
                   height that bounds the memory gathered per band.

    Returns:
        New RGBA64 buffer with the same bounds, fully opaque.

    Raises:
        KernelConfigError: If kernel_size or band_rows is invalid.
    """
    kernel_size = validate_kernel_size(kernel_size)
    validate_band_rows(band_rows)

    c = kernel_size // 2
    area = kernel_size * kernel_size
    rank = median_rank(kernel_size)
    width = src.width
    windows = sliding_windows(zero_pad(rgb_channels(src), c), kernel_size)

    if band_rows is None:
        band_rows = median_band_rows(width, kernel_size)

    def compute_band(y0: int, y1: int) -> np.ndarray:
        samples = windows[y0:y1].copy().reshape(y1 - y0, width, 3, area)
        samples.partition(rank, axis=-1)
        # detach the kept rank from the band-sized window copy
        return samples[..., rank].copy()

    logger.debug(
        "Median blur %sx%s image (kernel_size=%s, rank=%s, band_rows=%s)",
        src.width,
        src.height,
        kernel_size,
        rank,
        band_rows,
    )
    rgb = map_row_bands(src.height, compute_band, executor, band_rows)
    return assemble_rgba64(rgb, src.origin)
