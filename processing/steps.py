"""
Processing step classes with a common interface.

Each step wraps one core operation behind the ProcessStep interface. Steps
are pure: they take a PixelBuffer and return a new one without touching the
input.

Usage:
    from processing.steps import GrayscaleStep, MedianStep, Pipeline

    pipeline = Pipeline(steps=[
        MedianStep(kernel_size=5),
        GrayscaleStep(depth=8),
    ])
    result = pipeline.run(buffer)
"""

import logging
from abc import ABC, abstractmethod
from concurrent.futures import Executor
from dataclasses import dataclass, field
from typing import Any

from config import DEFAULT_GRAY_DEPTH, DEFAULT_KERNEL_SIZE, DEFAULT_SIGMA, DEFAULT_THRESHOLD
from filters import gaussian_blur, mean_blur, median_blur
from image_io import save_image
from imaging import PixelBuffer, to_bgr, to_gray
from thresholding import binarize, otsu_binarize_with_threshold

logger = logging.getLogger(__name__)


class ProcessStep(ABC):
    """Base class for processing steps.

    Steps can optionally produce metadata (like the Otsu threshold) that is
    reported alongside the output image.
    """

    @abstractmethod
    def apply(self, buffer: PixelBuffer) -> PixelBuffer:
        """Apply this step to an image.

        Must be pure: never mutates the input buffer.
        """
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name for logging and artifact file names."""
        pass

    def get_metadata(self) -> dict[str, Any]:
        """Return any metadata produced by the last ``apply``. Empty by default."""
        return {}


@dataclass(frozen=True)
class GrayscaleStep(ProcessStep):
    """Convert to 8-bit or 16-bit grayscale."""

    depth: int = DEFAULT_GRAY_DEPTH

    def apply(self, buffer: PixelBuffer) -> PixelBuffer:
        return to_gray(buffer, self.depth)

    @property
    def name(self) -> str:
        return f"grayscale({self.depth})"


@dataclass(frozen=True)
class BGRStep(ProcessStep):
    """Swap the red and blue channels."""

    def apply(self, buffer: PixelBuffer) -> PixelBuffer:
        return to_bgr(buffer)

    @property
    def name(self) -> str:
        return "bgr"


@dataclass(frozen=True)
class GaussianStep(ProcessStep):
    """Gaussian blur.

    Attributes:
        sigma: Standard deviation in pixels.
        kernel_size: Odd kernel side.
        band_rows: Rows per band for row-band execution.
        executor: Optional executor the bands are dispatched to.
    """

    sigma: float = DEFAULT_SIGMA
    kernel_size: int = DEFAULT_KERNEL_SIZE
    band_rows: int | None = None
    executor: Executor | None = field(default=None, repr=False, compare=False)

    def apply(self, buffer: PixelBuffer) -> PixelBuffer:
        return gaussian_blur(
            buffer,
            sigma=self.sigma,
            kernel_size=self.kernel_size,
            executor=self.executor,
            band_rows=self.band_rows,
        )

    @property
    def name(self) -> str:
        return f"gaussian(sigma={self.sigma}, k={self.kernel_size})"


@dataclass(frozen=True)
class MedianStep(ProcessStep):
    """Median blur over an odd square neighborhood."""

    kernel_size: int = DEFAULT_KERNEL_SIZE
    band_rows: int | None = None
    executor: Executor | None = field(default=None, repr=False, compare=False)

    def apply(self, buffer: PixelBuffer) -> PixelBuffer:
        return median_blur(
            buffer,
            kernel_size=self.kernel_size,
            executor=self.executor,
            band_rows=self.band_rows,
        )

    @property
    def name(self) -> str:
        return f"median(k={self.kernel_size})"


@dataclass(frozen=True)
class MeanStep(ProcessStep):
    """Box (mean) blur over an odd square neighborhood."""

    kernel_size: int = DEFAULT_KERNEL_SIZE
    band_rows: int | None = None
    executor: Executor | None = field(default=None, repr=False, compare=False)

    def apply(self, buffer: PixelBuffer) -> PixelBuffer:
        return mean_blur(
            buffer,
            kernel_size=self.kernel_size,
            executor=self.executor,
            band_rows=self.band_rows,
        )

    @property
    def name(self) -> str:
        return f"mean(k={self.kernel_size})"


@dataclass(frozen=True)
class BinarizeStep(ProcessStep):
    """Binarize at a fixed threshold."""

    threshold: int = DEFAULT_THRESHOLD

    def apply(self, buffer: PixelBuffer) -> PixelBuffer:
        return binarize(buffer, self.threshold)

    @property
    def name(self) -> str:
        return f"binarize({self.threshold})"

    def get_metadata(self) -> dict[str, Any]:
        return {"threshold": self.threshold}


@dataclass(frozen=True)
class OtsuStep(ProcessStep):
    """Binarize at the threshold found by Otsu's method.

    The chosen threshold is exposed through ``get_metadata()``.
    """

    _threshold: int | None = field(default=None, init=False, repr=False)

    def apply(self, buffer: PixelBuffer) -> PixelBuffer:
        binary, threshold = otsu_binarize_with_threshold(buffer)
        object.__setattr__(self, "_threshold", threshold)
        return binary

    @property
    def name(self) -> str:
        return "otsu"

    def get_metadata(self) -> dict[str, Any]:
        if self._threshold is None:
            return {}
        return {"threshold": self._threshold}


@dataclass
class StepResult:
    """Result of applying a single processing step.

    Attributes:
        name: Name of the step that produced this result.
        image: Output buffer from the step.
        metadata: Any metadata produced by the step (e.g., threshold).
        artifact_path: Path where the image was saved (if artifact saving enabled).
    """

    name: str
    image: PixelBuffer
    metadata: dict[str, Any] = field(default_factory=dict)
    artifact_path: str | None = None


@dataclass
class PipelineStepResults:
    """Results from running a processing pipeline.

    Attributes:
        original: The input buffer.
        steps: StepResult for each step in order.
        original_artifact_path: Path where the input was saved (if artifact saving enabled).
    """

    original: PixelBuffer
    steps: list[StepResult] = field(default_factory=list)
    original_artifact_path: str | None = None

    @property
    def final(self) -> PixelBuffer:
        """Get the final processed image."""
        if not self.steps:
            return self.original
        return self.steps[-1].image

    def get_intermediate(self, step_name: str) -> PixelBuffer | None:
        """Get an intermediate image by full step name (e.g. "median(k=3)")."""
        for step in self.steps:
            if step.name == step_name:
                return step.image
        return None

    def get_metadata(self, key: str) -> Any | None:
        """Get a metadata value from the first step that reports it."""
        for step in self.steps:
            if key in step.metadata:
                return step.metadata[key]
        return None

    @property
    def threshold(self) -> int | None:
        """Convenience property for the threshold of a binarize/otsu step."""
        return self.get_metadata("threshold")

    @property
    def all_metadata(self) -> dict[str, Any]:
        """Metadata from all steps merged into one dict; later steps win."""
        result = {}
        for step in self.steps:
            result.update(step.metadata)
        return result

    @property
    def artifact_paths(self) -> dict[str, str]:
        """Saved artifact paths keyed by short step name ("original", "median", ...)."""
        paths = {}
        if self.original_artifact_path:
            paths["original"] = self.original_artifact_path
        for step in self.steps:
            if step.artifact_path:
                paths[step.name.split("(")[0]] = step.artifact_path
        return paths


@dataclass
class Pipeline:
    """A sequence of processing steps.

    The pipeline runs each step in order, passing the output of one step as
    the input to the next. All intermediate results are preserved.
    """

    steps: list[ProcessStep]

    def run(
        self,
        buffer: PixelBuffer,
        artifact_dir: str | None = None,
    ) -> PipelineStepResults:
        """Run the pipeline on an image.

        Args:
            buffer: Input image.
            artifact_dir: Optional directory to save the input and every
                          step's output as PNG files.

        Returns:
            PipelineStepResults containing all intermediate images and metadata.
        """
        result = PipelineStepResults(original=buffer)
        current = buffer

        if artifact_dir:
            original_path = f"{artifact_dir}/original.png"
            save_image(buffer, original_path)
            result.original_artifact_path = original_path

        for step in self.steps:
            output = step.apply(current)
            metadata = step.get_metadata()
            logger.debug("Applied %s -> %s", step.name, output.format.value)

            artifact_path = None
            if artifact_dir:
                step_key = step.name.split("(")[0]
                artifact_path = f"{artifact_dir}/{step_key}.png"
                save_image(output, artifact_path)

            result.steps.append(
                StepResult(
                    name=step.name,
                    image=output,
                    metadata=metadata,
                    artifact_path=artifact_path,
                )
            )
            current = output

        return result

    def __len__(self) -> int:
        return len(self.steps)

    def __iter__(self):
        return iter(self.steps)
