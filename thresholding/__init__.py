"""
Binarization.

- binarize: fixed threshold, output only BLACK (0) and WHITE (255)
- otsu: data-dependent threshold maximizing between-class variance
"""

from .binarize import binarize, validate_threshold
from .otsu import (
    between_class_variance,
    histogram,
    otsu_binarize,
    otsu_binarize_with_threshold,
    otsu_split,
    otsu_threshold,
)

__all__ = [
    "binarize",
    "validate_threshold",
    "between_class_variance",
    "histogram",
    "otsu_binarize",
    "otsu_binarize_with_threshold",
    "otsu_split",
    "otsu_threshold",
]
