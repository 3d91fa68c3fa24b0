"""Exceptions raised by the image processing core.

Both subclass ValueError so callers that already guard against bad arguments
with ``except ValueError`` keep working.
"""


class KernelConfigError(ValueError):
    """Invalid operation parameters (kernel size, sigma, threshold, band size).

    Raised before any pixel is read.
    """


class EmptyImageError(ValueError):
    """The input image has zero area."""
