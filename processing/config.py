"""
Configuration for the processing pipeline.

A pipeline run is parameterized through ProcessConfig so that the same
conversion and filter settings can be reproduced from the CLI, tests or
scripts.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from config import (
    DEFAULT_KERNEL_SIZE,
    DEFAULT_SIGMA,
    DEFAULT_THRESHOLD,
)
from filters import validate_sigma
from imaging import PixelBuffer, validate_band_rows, validate_kernel_size
from thresholding import validate_threshold

COLOR_MODES = ("gray8", "gray16", "bgr")
FILTER_OPERATIONS = ("gaussian", "median", "mean")
THRESHOLD_OPERATIONS = ("binarize", "otsu")
OPERATIONS = FILTER_OPERATIONS + THRESHOLD_OPERATIONS


@dataclass(frozen=True)
class ProcessConfig:
    """Configuration for one conversion-then-operation run.

    Attributes:
        color: Optional color conversion applied first: "gray8", "gray16" or
               "bgr". None keeps the input layout.
        operation: At most one filter or threshold operation: "gaussian",
                   "median", "mean", "binarize" or "otsu". None skips it.
        kernel_size: Odd neighborhood side for the spatial filters.
        sigma: Gaussian standard deviation in pixels.
        threshold: Fixed cut point for "binarize".
        band_rows: Rows per band for the spatial filters (None: one band).
    """

    color: Optional[str] = None
    operation: Optional[str] = None
    kernel_size: int = DEFAULT_KERNEL_SIZE
    sigma: float = DEFAULT_SIGMA
    threshold: int = DEFAULT_THRESHOLD
    band_rows: Optional[int] = None

    def validate(self) -> None:
        """Validate configuration parameters.

        Only the parameters used by the selected operation are checked.

        Raises:
            ValueError: If color or operation is unknown.
            KernelConfigError: If a parameter of the selected operation is invalid.
        """
        if self.color is not None and self.color not in COLOR_MODES:
            raise ValueError(
                f"color must be one of {', '.join(COLOR_MODES)} or None, got {self.color!r}"
            )

        if self.operation is not None and self.operation not in OPERATIONS:
            raise ValueError(
                f"operation must be one of {', '.join(OPERATIONS)} or None, "
                f"got {self.operation!r}"
            )

        if self.operation in FILTER_OPERATIONS:
            validate_kernel_size(self.kernel_size)
            validate_band_rows(self.band_rows)

        if self.operation == "gaussian":
            validate_sigma(self.sigma)

        if self.operation == "binarize":
            validate_threshold(self.threshold)


@dataclass
class ProcessResult:
    """Result of the processing pipeline.

    Attributes:
        original: The input buffer, untouched.
        processed: Output of the last step (the original if no step ran).
        config: The configuration used.
        artifact_paths: Dict mapping step names to saved file paths (if artifact saving enabled).
        metadata: Aggregated metadata from all steps.
    """

    original: PixelBuffer
    processed: PixelBuffer
    config: ProcessConfig
    artifact_paths: dict[str, str] = field(default_factory=dict)
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def threshold(self) -> int | None:
        """Threshold used by a binarize or otsu step, if one ran."""
        return self.metadata.get("threshold")

    @property
    def dimensions(self) -> tuple[int, int]:
        """(width, height) of the processed image."""
        return self.processed.width, self.processed.height
