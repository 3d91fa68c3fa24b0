"""Gaussian weight kernel construction."""

from __future__ import annotations

import logging
import math

import numpy as np

from imaging.errors import KernelConfigError
from imaging.neighborhood import kernel_radius

logger = logging.getLogger(__name__)


def validate_sigma(sigma: float) -> float:
    """Check that sigma is a finite, positive number.

    Raises:
        KernelConfigError: If sigma would make the kernel undefined.
    """
    if isinstance(sigma, bool) or not isinstance(sigma, (int, float, np.integer, np.floating)):
        raise KernelConfigError(f"sigma must be a number, got {type(sigma).__name__}")
    if not math.isfinite(sigma) or sigma <= 0:
        raise KernelConfigError(f"sigma must be positive and finite, got {sigma}")
    return float(sigma)


def gaussian_kernel(sigma: float, kernel_size: int) -> np.ndarray:
    """Build a normalized 2D Gaussian kernel.

    ``K[dy][dx] = 1 / (2 pi sigma^2) * exp(-(dx^2 + dy^2) / (2 sigma^2))`` for
    dx, dy in [-c, c], then divided by its sum so the truncated kernel still
    weighs to exactly one.

    Args:
        sigma: Standard deviation in pixels.
        kernel_size: Odd side length of the kernel.

    Returns:
        (kernel_size, kernel_size) float64 array indexed [dy + c, dx + c].

    Raises:
        KernelConfigError: If sigma or kernel_size is invalid.

    Examples:
        >>> k = gaussian_kernel(1.0, 3)
        >>> k.shape
        (3, 3)
        >>> bool(abs(k.sum() - 1.0) < 1e-9)
        True
    """
    sigma = validate_sigma(sigma)
    c = kernel_radius(kernel_size)

    offsets = np.arange(-c, c + 1, dtype=np.float64)
    dy, dx = np.meshgrid(offsets, offsets, indexing="ij")
    two_sigma_sq = 2 * sigma * sigma
    weights = (1.0 / (math.pi * two_sigma_sq)) * np.exp(-(dx * dx + dy * dy) / two_sigma_sq)

    total = weights.sum()
    kernel = weights / total
    logger.debug(
        "Built %sx%s Gaussian kernel (sigma=%s, center weight=%.6f)",
        kernel_size,
        kernel_size,
        sigma,
        kernel[c, c],
    )
    return kernel
