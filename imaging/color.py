"""
Color space conversion.

All conversions read pixels through the 16-bit RGBA contract of PixelBuffer
and return a new, frozen buffer with the same bounds.
"""

from __future__ import annotations

import numpy as np

from config import GRAY8_DIVISOR, LUMA_WEIGHTS, MAX_8BIT, MAX_16BIT

from .buffer import PixelBuffer, PixelFormat


def luma(src: PixelBuffer) -> np.ndarray:
    """BT.709 luma of every pixel at 16-bit scale, as float64."""
    rgba = src.as_rgba64()
    wr, wg, wb = LUMA_WEIGHTS
    r = rgba[:, :, 0].astype(np.float64)
    g = rgba[:, :, 1].astype(np.float64)
    b = rgba[:, :, 2].astype(np.float64)
    return wr * r + wg * g + wb * b


def to_gray16(src: PixelBuffer) -> PixelBuffer:
    """Convert to 16-bit grayscale (luma truncated to an integer)."""
    v = np.clip(luma(src), 0, MAX_16BIT).astype(np.uint16)
    return PixelBuffer.wrap(PixelFormat.GRAY16, v, src.origin)


def to_gray8(src: PixelBuffer) -> PixelBuffer:
    """Convert to 8-bit grayscale.

    The 16-bit luma is divided by 255 and truncated, saturating at 255.
    An 8-bit grayscale source is returned as an unchanged copy.
    """
    if src.format is PixelFormat.GRAY8:
        return PixelBuffer.wrap(PixelFormat.GRAY8, src.data.copy(), src.origin)
    v = np.clip(luma(src) / GRAY8_DIVISOR, 0, MAX_8BIT).astype(np.uint8)
    return PixelBuffer.wrap(PixelFormat.GRAY8, v, src.origin)


def to_gray(src: PixelBuffer, depth: int = 8) -> PixelBuffer:
    """Convert to grayscale at the requested precision (8 or 16 bits)."""
    if depth == 8:
        return to_gray8(src)
    if depth == 16:
        return to_gray16(src)
    raise ValueError(f"Grayscale depth must be 8 or 16, got {depth}")


def to_bgr(src: PixelBuffer) -> PixelBuffer:
    """Swap the red and blue channels; the output is fully opaque."""
    rgba = src.as_rgba64()
    out = np.empty_like(rgba)
    out[:, :, 0] = rgba[:, :, 2]
    out[:, :, 1] = rgba[:, :, 1]
    out[:, :, 2] = rgba[:, :, 0]
    out[:, :, 3] = MAX_16BIT
    return PixelBuffer.wrap(PixelFormat.RGBA64, out, src.origin)
