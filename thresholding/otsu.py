"""
Otsu's method: pick the threshold that best separates two intensity classes.

For every candidate split t in [0, 254] the pixels are partitioned into
class0 (value <= t) and class1 (value > t) and scored with the between-class
variance

    sigma(t) = n0 * n1 / (n0 + n1)^2 * (M0 - M1)^2

where n0, n1 are the class sizes and M0, M1 the class means. A split that
leaves either class empty has no defined mean; it scores -inf and can never
be selected. The best split is the first maximum of an ascending scan.

``binarize`` turns pixels below its threshold black, so the cut point that
reproduces the best split is ``split + 1``: class0 becomes black and class1
white.
"""

from __future__ import annotations

import logging

import numpy as np

from config import HISTOGRAM_BINS
from imaging.buffer import PixelBuffer
from imaging.color import to_gray8

from .binarize import binarize

logger = logging.getLogger(__name__)


def histogram(src: PixelBuffer) -> np.ndarray:
    """Pixel counts of each 8-bit gray level (256 bins, int64)."""
    gray = to_gray8(src)
    return np.bincount(gray.data.ravel(), minlength=HISTOGRAM_BINS).astype(np.int64)


def between_class_variance(hist: np.ndarray) -> np.ndarray:
    """Score every candidate split of a 256-bin histogram.

    Args:
        hist: Pixel count per gray level, length 256.

    Returns:
        float64 array of length 255; entry t is sigma(t), or -inf when the
        split at t leaves a class empty.

    Raises:
        ValueError: If hist does not have 256 bins.
    """
    hist = np.asarray(hist, dtype=np.int64)
    if hist.shape != (HISTOGRAM_BINS,):
        raise ValueError(f"Histogram must have {HISTOGRAM_BINS} bins, got shape {hist.shape}")

    levels = np.arange(HISTOGRAM_BINS, dtype=np.int64)
    n0 = np.cumsum(hist)[:-1]
    s0 = np.cumsum(hist * levels)[:-1]
    n1 = hist.sum() - n0
    s1 = (hist * levels).sum() - s0

    sigma = np.full(HISTOGRAM_BINS - 1, -np.inf, dtype=np.float64)
    valid = (n0 > 0) & (n1 > 0)
    if not valid.any():
        return sigma

    c0, c1 = n0[valid], n1[valid]
    m0 = s0[valid] / c0
    m1 = s1[valid] / c1
    weight = (c0 * c1).astype(np.float64) / ((c0 + c1).astype(np.float64) ** 2)
    sigma[valid] = weight * (m0 - m1) ** 2
    return sigma


def otsu_split(src: PixelBuffer) -> int | None:
    """Return the split t maximizing the between-class variance.

    Ties go to the smallest t. Returns None when no split leaves both classes
    non-empty (a single-valued image).
    """
    sigma = between_class_variance(histogram(src))
    if not np.isfinite(sigma).any():
        return None
    return int(np.argmax(sigma))


def otsu_threshold(src: PixelBuffer) -> int:
    """Return the binarization cut point chosen by Otsu's method.

    Pixels below the returned value belong to the darker class. For a
    single-valued image there is nothing to separate and 0 is returned,
    which binarizes everything to white.

    Examples:
        >>> import numpy as np
        >>> from imaging import PixelBuffer
        >>> img = np.array([[10, 10], [200, 200]], dtype=np.uint8)
        >>> otsu_threshold(PixelBuffer.from_array(img))
        11
    """
    split = otsu_split(src)
    if split is None:
        logger.debug("Otsu: single-valued image, no split available")
        return 0
    logger.debug("Otsu: best split t=%s, cut point %s", split, split + 1)
    return split + 1


def otsu_binarize_with_threshold(src: PixelBuffer) -> tuple[PixelBuffer, int]:
    """Binarize at the Otsu threshold and also return the threshold used."""
    gray = to_gray8(src)
    threshold = otsu_threshold(gray)
    return binarize(gray, threshold), threshold


def otsu_binarize(src: PixelBuffer) -> PixelBuffer:
    """Convert to 8-bit gray, find the Otsu threshold and binarize at it."""
    binary, _ = otsu_binarize_with_threshold(src)
    return binary
