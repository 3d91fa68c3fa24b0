"""Input preparation and output assembly shared by the spatial filters."""

from __future__ import annotations

import numpy as np

from config import MAX_16BIT
from imaging.buffer import PixelBuffer, PixelFormat


def rgb_channels(src: PixelBuffer) -> np.ndarray:
    """The R, G, B samples of ``src`` at 16-bit scale, shape (H, W, 3)."""
    return src.as_rgba64()[:, :, :3]


def assemble_rgba64(rgb: np.ndarray, origin: tuple[int, int]) -> PixelBuffer:
    """Wrap filtered (H, W, 3) uint16 samples as an opaque RGBA64 buffer."""
    out = np.empty(rgb.shape[:2] + (4,), dtype=np.uint16)
    out[:, :, :3] = rgb
    out[:, :, 3] = MAX_16BIT
    return PixelBuffer.wrap(PixelFormat.RGBA64, out, origin)
