"""Central configuration for pixel-level image processing.

All tunable defaults are defined here with descriptive names. The core
packages take every value as an explicit argument; these constants only
supply the defaults used by the processing pipeline and the CLI.
"""

# =============================================================================
# PIXEL PRECISION
# =============================================================================

# Largest sample value at 8-bit and 16-bit precision
MAX_8BIT = 255
MAX_16BIT = 65535

# Scale from an 8-bit sample to the 16-bit working precision (0xFF -> 0xFFFF)
SCALE_8_TO_16 = 257

# Divisor used when rescaling 16-bit luma to 8-bit grayscale
GRAY8_DIVISOR = 255.0

# =============================================================================
# COLOR CONVERSION
# =============================================================================

# ITU-R BT.709 luma weights (R, G, B)
LUMA_WEIGHTS = (0.2126, 0.7152, 0.0722)

# Output precision of the grayscale conversion when none is requested
DEFAULT_GRAY_DEPTH = 8

# =============================================================================
# THRESHOLDING
# =============================================================================

# Sentinel values of a binarized image
BLACK = 0
WHITE = 255

# Fixed threshold used when none is given (pixels below it become BLACK)
DEFAULT_THRESHOLD = 128

# Number of histogram bins scanned by Otsu's method (8-bit input)
HISTOGRAM_BINS = 256

# =============================================================================
# SPATIAL FILTERS
# =============================================================================

# Side length of the square neighborhood (must be odd)
DEFAULT_KERNEL_SIZE = 3

# Upper bound on the kernel side
MAX_KERNEL_SIZE = 99

# Standard deviation of the Gaussian kernel, in pixels
DEFAULT_SIGMA = 1.0

# Tolerance for the normalized Gaussian kernel summing to one
KERNEL_SUM_TOLERANCE = 1e-9

# Window samples the median filter gathers per band when no band height is
# given (4M uint16 samples, about 8 MB per copy)
MEDIAN_BAND_SAMPLES = 1 << 22

# =============================================================================
# OUTPUT
# =============================================================================

# Bit depth written by the CLI when saving images
DEFAULT_OUTPUT_DEPTH = 8

# File suffixes that can store 16 bits per channel
SIXTEEN_BIT_SUFFIXES = (".png", ".tif", ".tiff")
