"""
Spatial filters.

All three filters share the same contract: a PixelBuffer goes in, a new
opaque RGBA64 PixelBuffer with identical bounds comes out. Neighborhoods are
zero-padded at the borders and the kernel size must be odd.

- gaussian: normalized Gaussian convolution
- median: order-statistic (median) filter
- mean: box filter with truncating division
"""

from .gaussian import gaussian_blur
from .kernel import gaussian_kernel, validate_sigma
from .mean import mean_blur
from .median import median_band_rows, median_blur, median_rank

__all__ = [
    "gaussian_blur",
    "gaussian_kernel",
    "validate_sigma",
    "median_blur",
    "median_band_rows",
    "median_rank",
    "mean_blur",
]
