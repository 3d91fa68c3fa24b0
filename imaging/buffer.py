"""
Pixel buffer shared by every operation in the toolkit.

A PixelBuffer is a rectangular grid of samples backed by a numpy array, with
an origin offset so that coordinate windows need not start at (0, 0). The set
of sample layouts is closed and fixed at construction:

- GRAY8:  one uint8 sample per pixel, array shape (H, W)
- GRAY16: one uint16 sample per pixel, array shape (H, W)
- RGBA64: four uint16 samples (R, G, B, A) per pixel, array shape (H, W, 4)

Every layout answers the same read contract, ``rgba64(x, y)`` /
``as_rgba64()``, which widens gray samples to 16-bit RGBA. Operations never
mutate their input: they allocate a fresh output and freeze it before
returning.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

import numpy as np

from config import MAX_16BIT, SCALE_8_TO_16

from .errors import EmptyImageError


class PixelFormat(str, Enum):
    """Sample layout of a PixelBuffer."""

    GRAY8 = "gray8"
    GRAY16 = "gray16"
    RGBA64 = "rgba64"

    @property
    def dtype(self) -> np.dtype:
        if self is PixelFormat.GRAY8:
            return np.dtype(np.uint8)
        return np.dtype(np.uint16)

    @property
    def channels(self) -> int:
        return 4 if self is PixelFormat.RGBA64 else 1

    @property
    def is_gray(self) -> bool:
        return self is not PixelFormat.RGBA64


@dataclass(frozen=True)
class Bounds:
    """Half-open rectangle [min_x, max_x) x [min_y, max_y)."""

    min_x: int
    min_y: int
    max_x: int
    max_y: int

    @property
    def width(self) -> int:
        return self.max_x - self.min_x

    @property
    def height(self) -> int:
        return self.max_y - self.min_y

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def contains(self, x: int, y: int) -> bool:
        return self.min_x <= x < self.max_x and self.min_y <= y < self.max_y


@dataclass(frozen=True, eq=False)
class PixelBuffer:
    """A width x height grid of pixels in one of the PixelFormat layouts.

    Attributes:
        format: Sample layout of ``data``.
        data: Backing array, row-major: ``data[y - min_y, x - min_x]``.
        origin: Coordinates (min_x, min_y) of the top-left pixel.
    """

    format: PixelFormat
    data: np.ndarray = field(repr=False)
    origin: tuple[int, int] = (0, 0)

    def __post_init__(self) -> None:
        fmt = PixelFormat(self.format)
        object.__setattr__(self, "format", fmt)

        if not isinstance(self.data, np.ndarray):
            raise TypeError(f"Expected numpy.ndarray, got {type(self.data).__name__}")
        if self.data.dtype != fmt.dtype:
            raise ValueError(
                f"{fmt.value} buffer requires dtype {fmt.dtype}, got {self.data.dtype}"
            )
        expected_ndim = 3 if fmt is PixelFormat.RGBA64 else 2
        if self.data.ndim != expected_ndim or (
            fmt is PixelFormat.RGBA64 and self.data.shape[2] != 4
        ):
            raise ValueError(
                f"{fmt.value} buffer requires shape "
                f"{'(H, W, 4)' if expected_ndim == 3 else '(H, W)'}, got {self.data.shape}"
            )
        if self.data.shape[0] == 0 or self.data.shape[1] == 0:
            raise EmptyImageError(
                f"Image must have positive width and height, got shape {self.data.shape}"
            )

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def blank(cls, fmt: PixelFormat, bounds: Bounds) -> PixelBuffer:
        """Allocate a zero-filled, writable buffer covering ``bounds``.

        Fill it with ``set()`` and call ``freeze()`` when done.
        """
        fmt = PixelFormat(fmt)
        if bounds.is_empty:
            raise EmptyImageError(f"Cannot allocate an image with empty bounds {bounds}")
        shape: tuple[int, ...] = (bounds.height, bounds.width)
        if fmt is PixelFormat.RGBA64:
            shape = shape + (4,)
        return cls(fmt, np.zeros(shape, dtype=fmt.dtype), (bounds.min_x, bounds.min_y))

    @classmethod
    def wrap(
        cls,
        fmt: PixelFormat,
        data: np.ndarray,
        origin: tuple[int, int] = (0, 0),
    ) -> PixelBuffer:
        """Take ownership of a freshly computed array and freeze it (no copy)."""
        return cls(fmt, data, origin).freeze()

    @classmethod
    def from_array(cls, arr: np.ndarray, origin: tuple[int, int] = (0, 0)) -> PixelBuffer:
        """Build a frozen buffer from a decoded image array.

        Accepted inputs:
            - (H, W) or (H, W, 1) uint8  -> GRAY8
            - (H, W) or (H, W, 1) uint16 -> GRAY16
            - (H, W, 3) or (H, W, 4) uint8/uint16 in RGB(A) order -> RGBA64.
              8-bit samples are scaled by 257; a missing alpha is opaque.

        The input array is copied, never referenced.

        Raises:
            TypeError: If arr is not a numpy array.
            EmptyImageError: If arr has zero area.
            ValueError: If the shape or dtype is unsupported.
        """
        if not isinstance(arr, np.ndarray):
            raise TypeError(f"Expected numpy.ndarray, got {type(arr).__name__}")

        if arr.ndim < 2 or arr.ndim > 3:
            raise ValueError(
                f"Image must be 2D or 3D array, got {arr.ndim}D array with shape {arr.shape}"
            )

        if arr.size == 0:
            raise EmptyImageError("Image array is empty")

        if arr.dtype not in (np.uint8, np.uint16):
            raise ValueError(f"Unsupported dtype {arr.dtype}: expected uint8 or uint16")

        if arr.ndim == 3 and arr.shape[2] == 1:
            arr = arr[:, :, 0]

        if arr.ndim == 2:
            fmt = PixelFormat.GRAY8 if arr.dtype == np.uint8 else PixelFormat.GRAY16
            return cls.wrap(fmt, arr.copy(), origin)

        channels = arr.shape[2]
        if channels not in (3, 4):
            raise ValueError(
                f"Unsupported number of channels: {channels}. "
                "Expected 1, 3 (RGB), or 4 (RGBA)."
            )

        wide = arr.astype(np.uint16)
        if arr.dtype == np.uint8:
            wide *= SCALE_8_TO_16

        rgba = np.empty(arr.shape[:2] + (4,), dtype=np.uint16)
        rgba[:, :, :channels] = wide
        if channels == 3:
            rgba[:, :, 3] = MAX_16BIT
        return cls.wrap(PixelFormat.RGBA64, rgba, origin)

    def freeze(self) -> PixelBuffer:
        """Make the backing array read-only and return self."""
        self.data.flags.writeable = False
        return self

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------

    @property
    def width(self) -> int:
        return int(self.data.shape[1])

    @property
    def height(self) -> int:
        return int(self.data.shape[0])

    @property
    def bounds(self) -> Bounds:
        min_x, min_y = self.origin
        return Bounds(min_x, min_y, min_x + self.width, min_y + self.height)

    @property
    def is_frozen(self) -> bool:
        return not self.data.flags.writeable

    def _index(self, x: int, y: int) -> tuple[int, int]:
        if not self.bounds.contains(x, y):
            raise IndexError(f"Pixel ({x}, {y}) outside bounds {self.bounds}")
        return y - self.origin[1], x - self.origin[0]

    # ------------------------------------------------------------------
    # Per-pixel access
    # ------------------------------------------------------------------

    def at(self, x: int, y: int) -> int | tuple[int, ...]:
        """Return the native sample(s) at (x, y)."""
        row, col = self._index(x, y)
        value = self.data[row, col]
        if self.format.is_gray:
            return int(value)
        return tuple(int(v) for v in value)

    def rgba64(self, x: int, y: int) -> tuple[int, int, int, int]:
        """Return the pixel at (x, y) as 16-bit (r, g, b, a)."""
        row, col = self._index(x, y)
        if self.format is PixelFormat.RGBA64:
            r, g, b, a = (int(v) for v in self.data[row, col])
            return r, g, b, a
        v = int(self.data[row, col])
        if self.format is PixelFormat.GRAY8:
            v *= SCALE_8_TO_16
        return v, v, v, MAX_16BIT

    def set(self, x: int, y: int, value: int | tuple[int, ...]) -> None:
        """Write the native sample(s) at (x, y).

        Raises:
            IndexError: If (x, y) is outside the bounds.
            ValueError: If the buffer has been frozen.
        """
        row, col = self._index(x, y)
        if self.is_frozen:
            raise ValueError("Cannot write to a frozen PixelBuffer")
        self.data[row, col] = value

    # ------------------------------------------------------------------
    # Whole-buffer views
    # ------------------------------------------------------------------

    def as_rgba64(self) -> np.ndarray:
        """Return the whole image as an (H, W, 4) uint16 array.

        For RGBA64 buffers this is the (read-only) backing array itself;
        gray layouts are widened into a new array.
        """
        if self.format is PixelFormat.RGBA64:
            return self.data
        gray = self.data.astype(np.uint16)
        if self.format is PixelFormat.GRAY8:
            gray *= SCALE_8_TO_16
        rgba = np.empty(gray.shape + (4,), dtype=np.uint16)
        rgba[:, :, 0] = gray
        rgba[:, :, 1] = gray
        rgba[:, :, 2] = gray
        rgba[:, :, 3] = MAX_16BIT
        return rgba

    def to_array(self, depth: int | None = None) -> np.ndarray:
        """Return a writable copy of the samples.

        Args:
            depth: None keeps the native precision. 8 narrows 16-bit samples
                   with ``>> 8``; 16 widens 8-bit samples by 257.

        Raises:
            ValueError: If depth is not None, 8 or 16.
        """
        if depth is None:
            return self.data.copy()
        if depth == 8:
            if self.data.dtype == np.uint8:
                return self.data.copy()
            return (self.data >> 8).astype(np.uint8)
        if depth == 16:
            if self.data.dtype == np.uint16:
                return self.data.copy()
            return self.data.astype(np.uint16) * SCALE_8_TO_16
        raise ValueError(f"depth must be None, 8 or 16, got {depth}")
