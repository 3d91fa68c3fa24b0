"""
Composable processing on top of the core operations.

Key components:
- config: ProcessConfig dataclass for parameterizing a run
- pipeline: run_pipeline() applies an optional color conversion and one operation
- steps: Class-based steps with a common ProcessStep interface

Two APIs are available:
1. Function-based: run_pipeline(buffer, config) -> ProcessResult
2. Class-based: Pipeline(steps=[...]).run(buffer) -> PipelineStepResults
"""

from .config import (
    COLOR_MODES,
    OPERATIONS,
    ProcessConfig,
    ProcessResult,
)
from .pipeline import build_pipeline, run_pipeline
from .steps import (
    BGRStep,
    BinarizeStep,
    GaussianStep,
    GrayscaleStep,
    MeanStep,
    MedianStep,
    OtsuStep,
    Pipeline,
    PipelineStepResults,
    ProcessStep,
    StepResult,
)

__all__ = [
    # Config and results
    "COLOR_MODES",
    "OPERATIONS",
    "ProcessConfig",
    "ProcessResult",
    # Function API
    "run_pipeline",
    "build_pipeline",
    # Class-based API
    "ProcessStep",
    "GrayscaleStep",
    "BGRStep",
    "GaussianStep",
    "MedianStep",
    "MeanStep",
    "BinarizeStep",
    "OtsuStep",
    "Pipeline",
    "PipelineStepResults",
    "StepResult",
]
