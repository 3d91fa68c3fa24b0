"""
Processing pipeline: an optional color conversion followed by at most one
filter or threshold operation.

This module provides two APIs:
1. run_pipeline() - Function API that builds and runs a pipeline from a ProcessConfig
2. Pipeline class - Class-based API for composable step sequences

The run_pipeline() function internally uses the Pipeline class.
"""

from concurrent.futures import Executor

from imaging import PixelBuffer

from .config import ProcessConfig, ProcessResult
from .steps import (
    BGRStep,
    BinarizeStep,
    GaussianStep,
    GrayscaleStep,
    MeanStep,
    MedianStep,
    OtsuStep,
    Pipeline,
    ProcessStep,
)


def _validate_input(buffer: PixelBuffer) -> None:
    """Validate the input image.

    Raises:
        TypeError: If buffer is not a PixelBuffer.
    """
    if not isinstance(buffer, PixelBuffer):
        raise TypeError(f"Expected PixelBuffer, got {type(buffer).__name__}")


def build_operation_step(
    config: ProcessConfig,
    executor: Executor | None = None,
) -> ProcessStep | None:
    """Create the step for ``config.operation`` (None if no operation)."""
    if config.operation == "gaussian":
        return GaussianStep(
            sigma=config.sigma,
            kernel_size=config.kernel_size,
            band_rows=config.band_rows,
            executor=executor,
        )
    if config.operation == "median":
        return MedianStep(
            kernel_size=config.kernel_size,
            band_rows=config.band_rows,
            executor=executor,
        )
    if config.operation == "mean":
        return MeanStep(
            kernel_size=config.kernel_size,
            band_rows=config.band_rows,
            executor=executor,
        )
    if config.operation == "binarize":
        return BinarizeStep(threshold=config.threshold)
    if config.operation == "otsu":
        return OtsuStep()
    return None


def build_pipeline(config: ProcessConfig, executor: Executor | None = None) -> Pipeline:
    """Build a Pipeline from a ProcessConfig.

    1. Color conversion (if configured)
    2. The filter or threshold operation (if configured)
    """
    steps: list[ProcessStep] = []

    if config.color == "gray8":
        steps.append(GrayscaleStep(depth=8))
    elif config.color == "gray16":
        steps.append(GrayscaleStep(depth=16))
    elif config.color == "bgr":
        steps.append(BGRStep())

    operation = build_operation_step(config, executor)
    if operation is not None:
        steps.append(operation)

    return Pipeline(steps=steps)


def run_pipeline(
    buffer: PixelBuffer,
    config: ProcessConfig | None = None,
    artifact_dir: str | None = None,
    executor: Executor | None = None,
) -> ProcessResult:
    """Run the configured conversion and operation on an image.

    Args:
        buffer: Input image.
        config: Processing configuration. If None, uses default settings
                (no conversion, no operation).
        artifact_dir: Optional directory to save intermediate images.
        executor: Optional executor for row-band execution of the filters.

    Returns:
        ProcessResult containing the original and processed images.

    Raises:
        ValueError: If configuration is invalid.
        TypeError: If buffer is not a PixelBuffer.

    Examples:
        >>> import numpy as np
        >>> from imaging import PixelBuffer
        >>> img = PixelBuffer.from_array(np.zeros((4, 6, 3), dtype=np.uint8))
        >>> result = run_pipeline(img, ProcessConfig(operation="mean"))
        >>> result.dimensions
        (6, 4)
    """
    if config is None:
        config = ProcessConfig()

    config.validate()
    _validate_input(buffer)

    pipeline = build_pipeline(config, executor)
    pipeline_result = pipeline.run(buffer, artifact_dir=artifact_dir)

    return ProcessResult(
        original=buffer,
        processed=pipeline_result.final,
        config=config,
        artifact_paths=pipeline_result.artifact_paths,
        metadata=pipeline_result.all_metadata,
    )
