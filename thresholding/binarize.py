"""Fixed-threshold binarization."""

from __future__ import annotations

import numpy as np

from config import BLACK, DEFAULT_THRESHOLD, MAX_8BIT, WHITE
from imaging.buffer import PixelBuffer, PixelFormat
from imaging.color import to_gray8
from imaging.errors import KernelConfigError


def validate_threshold(threshold: int) -> int:
    """Check that threshold is an integer in [0, 255].

    Raises:
        KernelConfigError: If threshold is not a valid 8-bit cut point.
    """
    if isinstance(threshold, bool) or not isinstance(threshold, (int, np.integer)):
        raise KernelConfigError(f"threshold must be int, got {type(threshold).__name__}")
    if not 0 <= threshold <= MAX_8BIT:
        raise KernelConfigError(f"threshold must be in [0, {MAX_8BIT}], got {threshold}")
    return int(threshold)


def binarize(src: PixelBuffer, threshold: int = DEFAULT_THRESHOLD) -> PixelBuffer:
    """Map every pixel to BLACK if its 8-bit gray value is below threshold, else WHITE.

    Non-GRAY8 inputs are converted with ``to_gray8`` first.

    Args:
        src: Input image.
        threshold: Cut point in [0, 255]. 0 yields an all-white image.

    Returns:
        New GRAY8 buffer containing only BLACK and WHITE.

    Raises:
        KernelConfigError: If threshold is out of range.
    """
    threshold = validate_threshold(threshold)
    gray = src if src.format is PixelFormat.GRAY8 else to_gray8(src)
    out = np.where(gray.data < threshold, BLACK, WHITE).astype(np.uint8)
    return PixelBuffer.wrap(PixelFormat.GRAY8, out, src.origin)
