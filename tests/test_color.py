"""Tests for grayscale and BGR conversion."""

import numpy as np
import pytest

from imaging import PixelBuffer, PixelFormat, luma, to_bgr, to_gray, to_gray8, to_gray16


def rgb_image(color, shape=(4, 5)):
    arr = np.zeros(shape + (3,), dtype=np.uint8)
    arr[:, :] = color
    return PixelBuffer.from_array(arr)


class TestToGray8:
    def test_white_image_produces_white_gray(self):
        gray = to_gray8(rgb_image((255, 255, 255)))
        assert gray.format is PixelFormat.GRAY8
        assert np.all(gray.data == 255)

    def test_black_image_produces_black_gray(self):
        gray = to_gray8(rgb_image((0, 0, 0)))
        assert np.all(gray.data == 0)

    def test_bt709_weights(self):
        # 0.2126 * 65535 / 255 = 54.6...
        assert to_gray8(rgb_image((255, 0, 0))).at(0, 0) == 54
        # 0.7152 * 65535 / 255 = 183.8...
        assert to_gray8(rgb_image((0, 255, 0))).at(0, 0) == 183
        # 0.0722 * 65535 / 255 = 18.5...
        assert to_gray8(rgb_image((0, 0, 255))).at(0, 0) == 18

    def test_16bit_luma_is_divided_by_255(self):
        # 128 * 257 / 255 = 129.0...
        assert to_gray8(rgb_image((128, 128, 128))).at(0, 0) == 129

    def test_gray8_source_is_unchanged(self):
        arr = np.arange(256, dtype=np.uint8).reshape(16, 16)
        src = PixelBuffer.from_array(arr)
        gray = to_gray8(src)
        assert np.array_equal(gray.data, arr)
        assert gray is not src

    def test_pure_function_no_mutation(self):
        src = rgb_image((10, 20, 30))
        before = src.data.copy()
        _ = to_gray8(src)
        assert np.array_equal(src.data, before)


class TestToGray16:
    def test_red_luma_truncated(self):
        gray = to_gray16(rgb_image((255, 0, 0)))
        assert gray.format is PixelFormat.GRAY16
        # 0.2126 * 65535 = 13932.7...
        assert gray.at(0, 0) == 13932

    def test_white_saturates_near_max(self):
        gray = to_gray16(rgb_image((255, 255, 255)))
        assert gray.data.min() >= 65534

    def test_luma_matches_weights(self):
        value = luma(rgb_image((0, 255, 0)))[0, 0]
        assert value == pytest.approx(0.7152 * 65535)


class TestToGray:
    def test_dispatches_on_depth(self):
        src = rgb_image((50, 60, 70))
        assert to_gray(src, 8).format is PixelFormat.GRAY8
        assert to_gray(src, 16).format is PixelFormat.GRAY16

    def test_unknown_depth_raises(self):
        with pytest.raises(ValueError, match="8 or 16"):
            to_gray(rgb_image((0, 0, 0)), 12)


class TestToBGR:
    def test_swaps_red_and_blue(self):
        out = to_bgr(rgb_image((255, 0, 10)))
        assert out.format is PixelFormat.RGBA64
        assert out.at(0, 0) == (2570, 0, 65535, 65535)

    def test_output_is_opaque(self):
        arr = np.zeros((2, 2, 4), dtype=np.uint8)
        out = to_bgr(PixelBuffer.from_array(arr))
        assert np.all(out.data[:, :, 3] == 65535)

    def test_gray_source_stays_neutral(self):
        src = PixelBuffer.from_array(np.full((2, 2), 9, dtype=np.uint8))
        assert to_bgr(src).at(1, 1) == (2313, 2313, 2313, 65535)


class TestBoundsPreserved:
    @pytest.mark.parametrize("convert", [to_gray8, to_gray16, to_bgr])
    def test_origin_and_size(self, convert):
        src = PixelBuffer.from_array(np.zeros((3, 7, 3), dtype=np.uint8), origin=(4, -2))
        out = convert(src)
        assert out.bounds == src.bounds
        assert out.is_frozen
