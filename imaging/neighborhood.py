"""
Kernel-window traversal shared by the spatial filters.

For an output pixel (x, y) and kernel radius c = kernel_size // 2, the
neighborhood is every (x + dx, y + dy) with dx, dy in [-c, c], visited in
row-major order. Samples that fall outside the image read as zero (zero
padding). This is the border policy, not an error: it darkens filter output
near the edges.

Two forms are provided:
- ``neighborhood_samples()`` walks one output pixel's window sample by sample.
- ``zero_pad()`` / ``offset_slab()`` / ``sliding_windows()`` express the same
  windows over whole rows at once, which is what the filters use.
"""

from __future__ import annotations

from typing import Iterator

import numpy as np

from config import MAX_KERNEL_SIZE

from .buffer import PixelBuffer
from .errors import KernelConfigError

ZERO_SAMPLE = (0, 0, 0, 0)


def validate_kernel_size(kernel_size: int) -> int:
    """Check that kernel_size is a positive, odd integer within limits.

    Raises:
        KernelConfigError: If the size cannot be centered on a pixel.
    """
    if isinstance(kernel_size, bool) or not isinstance(kernel_size, (int, np.integer)):
        raise KernelConfigError(
            f"kernel_size must be int, got {type(kernel_size).__name__}"
        )
    if kernel_size <= 0:
        raise KernelConfigError(f"kernel_size must be positive, got {kernel_size}")
    if kernel_size % 2 == 0:
        raise KernelConfigError(f"kernel_size must be odd, got {kernel_size}")
    if kernel_size > MAX_KERNEL_SIZE:
        raise KernelConfigError(
            f"kernel_size={kernel_size} exceeds the maximum of {MAX_KERNEL_SIZE}"
        )
    return int(kernel_size)


def kernel_radius(kernel_size: int) -> int:
    """Distance from the kernel center to its edge."""
    return validate_kernel_size(kernel_size) // 2


def kernel_offsets(kernel_size: int) -> Iterator[tuple[int, int]]:
    """Yield (dy, dx) for every kernel cell in row-major order."""
    c = kernel_radius(kernel_size)
    for dy in range(-c, c + 1):
        for dx in range(-c, c + 1):
            yield dy, dx


def neighborhood_samples(
    buffer: PixelBuffer,
    x: int,
    y: int,
    kernel_size: int,
) -> Iterator[tuple[int, int, int, int]]:
    """Yield the 16-bit RGBA samples of the window centered on (x, y).

    Out-of-bounds positions yield ``ZERO_SAMPLE``.

    Raises:
        IndexError: If (x, y) itself is outside the buffer.
        KernelConfigError: If kernel_size is invalid.
    """
    bounds = buffer.bounds
    if not bounds.contains(x, y):
        raise IndexError(f"Pixel ({x}, {y}) outside bounds {bounds}")
    for dy, dx in kernel_offsets(kernel_size):
        sx, sy = x + dx, y + dy
        if bounds.contains(sx, sy):
            yield buffer.rgba64(sx, sy)
        else:
            yield ZERO_SAMPLE


def zero_pad(array: np.ndarray, radius: int) -> np.ndarray:
    """Surround the two spatial axes of ``array`` with ``radius`` zeros."""
    pad_width = [(radius, radius), (radius, radius)] + [(0, 0)] * (array.ndim - 2)
    return np.pad(array, pad_width, mode="constant", constant_values=0)


def offset_slab(
    padded: np.ndarray,
    radius: int,
    dy: int,
    dx: int,
    y0: int,
    y1: int,
    width: int,
) -> np.ndarray:
    """Samples at offset (dy, dx) for output rows [y0, y1) of a padded array.

    Element [j, i] is the (zero-padded) input sample at (i + dx, y0 + j + dy).
    """
    top = radius + dy + y0
    left = radius + dx
    return padded[top:top + (y1 - y0), left:left + width]


def sliding_windows(padded: np.ndarray, kernel_size: int) -> np.ndarray:
    """Read-only view of every kernel window over a padded array.

    For a padded (H + 2c, W + 2c, C) array the result has shape
    (H, W, C, k, k); the last two axes are (dy, dx) in row-major order.
    """
    return np.lib.stride_tricks.sliding_window_view(
        padded, (kernel_size, kernel_size), axis=(0, 1)
    )
