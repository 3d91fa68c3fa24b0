"""
Pixel buffers and the primitives every operation is built on.

Key components:
- buffer: PixelBuffer, the shared in-memory image (GRAY8, GRAY16, RGBA64)
- neighborhood: zero-padded kernel-window traversal
- execution: optional row-band execution strategy for the filters
- color: RGB to grayscale and RGB to BGR conversion
- errors: KernelConfigError and EmptyImageError
"""

from .buffer import Bounds, PixelBuffer, PixelFormat
from .color import luma, to_bgr, to_gray, to_gray8, to_gray16
from .errors import EmptyImageError, KernelConfigError
from .execution import map_row_bands, row_bands, validate_band_rows
from .neighborhood import (
    ZERO_SAMPLE,
    kernel_offsets,
    kernel_radius,
    neighborhood_samples,
    offset_slab,
    sliding_windows,
    validate_kernel_size,
    zero_pad,
)

__all__ = [
    # Buffer
    "Bounds",
    "PixelBuffer",
    "PixelFormat",
    # Errors
    "EmptyImageError",
    "KernelConfigError",
    # Color conversion
    "luma",
    "to_bgr",
    "to_gray",
    "to_gray8",
    "to_gray16",
    # Neighborhood traversal
    "ZERO_SAMPLE",
    "kernel_offsets",
    "kernel_radius",
    "neighborhood_samples",
    "offset_slab",
    "sliding_windows",
    "validate_kernel_size",
    "zero_pad",
    # Execution strategy
    "map_row_bands",
    "row_bands",
    "validate_band_rows",
]
