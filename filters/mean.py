"""Mean (box) blur: unweighted neighborhood average with truncating division."""

from __future__ import annotations

import logging
from concurrent.futures import Executor

import numpy as np

from config import DEFAULT_KERNEL_SIZE
from imaging.buffer import PixelBuffer
from imaging.execution import map_row_bands, validate_band_rows
from imaging.neighborhood import kernel_offsets, offset_slab, validate_kernel_size, zero_pad

from .common import assemble_rgba64, rgb_channels

logger = logging.getLogger(__name__)


def mean_blur(
    src: PixelBuffer,
    kernel_size: int = DEFAULT_KERNEL_SIZE,
    executor: Executor | None = None,
    band_rows: int | None = None,
) -> PixelBuffer:
    """Replace each channel sample by the integer mean of its neighborhood.

    The sum over all k*k window positions (out-of-bounds ones contribute 0)
    is floor-divided by k*k, so border pixels are darkened.

    Returns:
        New RGBA64 buffer with the same bounds, fully opaque.

    Raises:
        KernelConfigError: If kernel_size or band_rows is invalid.
    """
    kernel_size = validate_kernel_size(kernel_size)
    validate_band_rows(band_rows)

    c = kernel_size // 2
    area = kernel_size * kernel_size
    width = src.width
    padded = zero_pad(rgb_channels(src).astype(np.int64), c)
    offsets = list(kernel_offsets(kernel_size))

    def compute_band(y0: int, y1: int) -> np.ndarray:
        acc = np.zeros((y1 - y0, width, 3), dtype=np.int64)
        for dy, dx in offsets:
            acc += offset_slab(padded, c, dy, dx, y0, y1, width)
        return (acc // area).astype(np.uint16)

    logger.debug("Mean blur %sx%s image (kernel_size=%s)", src.width, src.height, kernel_size)
    rgb = map_row_bands(src.height, compute_band, executor, band_rows)
    return assemble_rgba64(rgb, src.origin)
