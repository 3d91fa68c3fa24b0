"""
Unit tests for the processing module: behavioral tests only.

Covers: config validation, step purity and metadata, pipeline composition,
artifact saving and end-to-end run_pipeline behavior.
"""

from concurrent.futures import ThreadPoolExecutor

import numpy as np
import pytest

from imaging import KernelConfigError, PixelBuffer, PixelFormat
from processing import (
    BGRStep,
    BinarizeStep,
    GaussianStep,
    GrayscaleStep,
    MeanStep,
    MedianStep,
    OtsuStep,
    Pipeline,
    ProcessConfig,
    ProcessResult,
    build_pipeline,
    run_pipeline,
)


def rgb_image(rng=None, shape=(8, 10)):
    if rng is None:
        return PixelBuffer.from_array(np.full(shape + (3,), 128, dtype=np.uint8))
    return PixelBuffer.from_array(rng.integers(0, 256, shape + (3,), dtype=np.uint8))


def bimodal_image():
    arr = np.full((4, 6), 10, dtype=np.uint8)
    arr[2:] = 200
    return PixelBuffer.from_array(arr)


class TestProcessConfig:
    def test_defaults_are_valid(self):
        ProcessConfig().validate()

    def test_unknown_color_raises(self):
        with pytest.raises(ValueError, match="color must be one of"):
            ProcessConfig(color="hsv").validate()

    def test_unknown_operation_raises(self):
        with pytest.raises(ValueError, match="operation must be one of"):
            ProcessConfig(operation="sharpen").validate()

    def test_even_kernel_size_raises_for_filters(self):
        with pytest.raises(KernelConfigError, match="odd"):
            ProcessConfig(operation="median", kernel_size=4).validate()

    def test_kernel_size_ignored_without_filter(self):
        ProcessConfig(operation="otsu", kernel_size=4).validate()

    def test_bad_sigma_raises_for_gaussian(self):
        with pytest.raises(KernelConfigError, match="sigma"):
            ProcessConfig(operation="gaussian", sigma=-1.0).validate()

    def test_bad_threshold_raises_for_binarize(self):
        with pytest.raises(KernelConfigError, match="threshold"):
            ProcessConfig(operation="binarize", threshold=300).validate()

    def test_bad_band_rows_raises(self):
        with pytest.raises(KernelConfigError, match="band_rows"):
            ProcessConfig(operation="mean", band_rows=0).validate()

    def test_frozen(self):
        config = ProcessConfig()
        with pytest.raises(AttributeError):
            config.kernel_size = 5


class TestProcessResult:
    def test_threshold_and_dimensions(self):
        img = rgb_image()
        result = ProcessResult(
            original=img,
            processed=img,
            config=ProcessConfig(),
            metadata={"threshold": 42},
        )
        assert result.threshold == 42
        assert result.dimensions == (10, 8)

    def test_threshold_absent(self):
        img = rgb_image()
        result = ProcessResult(original=img, processed=img, config=ProcessConfig())
        assert result.threshold is None
        assert result.artifact_paths == {}


class TestSteps:
    @pytest.mark.parametrize(
        "step,expected_format",
        [
            (GrayscaleStep(depth=8), PixelFormat.GRAY8),
            (GrayscaleStep(depth=16), PixelFormat.GRAY16),
            (BGRStep(), PixelFormat.RGBA64),
            (GaussianStep(), PixelFormat.RGBA64),
            (MedianStep(), PixelFormat.RGBA64),
            (MeanStep(), PixelFormat.RGBA64),
            (BinarizeStep(), PixelFormat.GRAY8),
            (OtsuStep(), PixelFormat.GRAY8),
        ],
    )
    def test_output_format_and_purity(self, step, expected_format, rng):
        img = rgb_image(rng)
        before = img.data.copy()
        out = step.apply(img)
        assert out.format is expected_format
        assert out.bounds == img.bounds
        assert np.array_equal(img.data, before)

    def test_names(self):
        assert GrayscaleStep(depth=16).name == "grayscale(16)"
        assert BGRStep().name == "bgr"
        assert GaussianStep(sigma=1.5, kernel_size=5).name == "gaussian(sigma=1.5, k=5)"
        assert MedianStep(kernel_size=7).name == "median(k=7)"
        assert MeanStep().name == "mean(k=3)"
        assert BinarizeStep(threshold=90).name == "binarize(90)"
        assert OtsuStep().name == "otsu"

    def test_otsu_step_records_threshold(self):
        step = OtsuStep()
        assert step.get_metadata() == {}
        step.apply(bimodal_image())
        assert step.get_metadata() == {"threshold": 11}

    def test_binarize_step_metadata(self):
        assert BinarizeStep(threshold=77).get_metadata() == {"threshold": 77}

    def test_filter_steps_without_metadata(self):
        assert MedianStep().get_metadata() == {}

    def test_filter_step_uses_executor(self, rng):
        img = rgb_image(rng, shape=(12, 5))
        with ThreadPoolExecutor(max_workers=2) as pool:
            parallel = MeanStep(band_rows=3, executor=pool).apply(img)
        assert np.array_equal(parallel.data, MeanStep().apply(img).data)


class TestPipeline:
    def test_empty_pipeline_returns_original(self):
        img = rgb_image()
        result = Pipeline(steps=[]).run(img)
        assert result.final is img
        assert result.threshold is None

    def test_steps_run_in_order(self, rng):
        img = rgb_image(rng)
        pipeline = Pipeline(steps=[MedianStep(kernel_size=3), GrayscaleStep(depth=8)])
        result = pipeline.run(img)
        assert len(pipeline) == 2
        assert [s.name for s in result.steps] == ["median(k=3)", "grayscale(8)"]
        assert result.final.format is PixelFormat.GRAY8
        median = result.get_intermediate("median(k=3)")
        assert median.format is PixelFormat.RGBA64
        assert result.get_intermediate("mean(k=3)") is None

    def test_metadata_collected(self):
        result = Pipeline(steps=[GrayscaleStep(), OtsuStep()]).run(bimodal_image())
        assert result.threshold == 11
        assert result.all_metadata == {"threshold": 11}

    def test_artifacts_saved(self, tmp_path):
        pipeline = Pipeline(steps=[GrayscaleStep(), BinarizeStep(threshold=100)])
        result = pipeline.run(rgb_image(), artifact_dir=str(tmp_path / "artifacts"))
        paths = result.artifact_paths
        assert set(paths) == {"original", "grayscale", "binarize"}
        for path in paths.values():
            assert (tmp_path / "artifacts").joinpath(path.rsplit("/", 1)[1]).is_file()

    def test_iteration(self):
        steps = [BGRStep(), MeanStep()]
        assert list(Pipeline(steps=steps)) == steps


class TestBuildPipeline:
    def test_default_config_has_no_steps(self):
        assert len(build_pipeline(ProcessConfig())) == 0

    def test_color_then_operation(self):
        pipeline = build_pipeline(ProcessConfig(color="gray16", operation="gaussian", sigma=2.0))
        assert [s.name for s in pipeline] == ["grayscale(16)", "gaussian(sigma=2.0, k=3)"]

    @pytest.mark.parametrize(
        "operation,step_type",
        [
            ("gaussian", GaussianStep),
            ("median", MedianStep),
            ("mean", MeanStep),
            ("binarize", BinarizeStep),
            ("otsu", OtsuStep),
        ],
    )
    def test_operation_step_types(self, operation, step_type):
        pipeline = build_pipeline(ProcessConfig(operation=operation))
        assert isinstance(pipeline.steps[-1], step_type)

    def test_bgr_color(self):
        assert isinstance(build_pipeline(ProcessConfig(color="bgr")).steps[0], BGRStep)


class TestRunPipeline:
    def test_default_config_returns_input(self):
        img = rgb_image()
        result = run_pipeline(img)
        assert result.processed is img
        assert result.original is img
        assert result.dimensions == (10, 8)

    def test_gray_conversion(self):
        result = run_pipeline(rgb_image(), ProcessConfig(color="gray8"))
        assert result.processed.format is PixelFormat.GRAY8
        assert np.all(result.processed.data == 129)

    def test_otsu_reports_threshold(self):
        result = run_pipeline(bimodal_image(), ProcessConfig(operation="otsu"))
        assert result.threshold == 11
        assert set(np.unique(result.processed.data).tolist()) == {0, 255}

    def test_filter_with_executor(self, rng):
        img = rgb_image(rng, shape=(16, 9))
        config = ProcessConfig(operation="gaussian", sigma=1.2, kernel_size=5, band_rows=4)
        with ThreadPoolExecutor(max_workers=3) as pool:
            parallel = run_pipeline(img, config, executor=pool)
        serial = run_pipeline(img, ProcessConfig(operation="gaussian", sigma=1.2, kernel_size=5))
        assert np.array_equal(parallel.processed.data, serial.processed.data)

    def test_artifact_paths_in_result(self, tmp_path):
        result = run_pipeline(
            rgb_image(),
            ProcessConfig(color="bgr", operation="median"),
            artifact_dir=str(tmp_path),
        )
        assert set(result.artifact_paths) == {"original", "bgr", "median"}
        assert (tmp_path / "median.png").is_file()

    def test_invalid_config_raises(self):
        with pytest.raises(ValueError):
            run_pipeline(rgb_image(), ProcessConfig(operation="mean", kernel_size=2))

    def test_invalid_input_raises(self):
        with pytest.raises(TypeError, match="Expected PixelBuffer"):
            run_pipeline(np.zeros((4, 4, 3), dtype=np.uint8))
