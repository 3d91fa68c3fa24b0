"""Image file decoding and encoding (OpenCV) to and from PixelBuffer."""

from __future__ import annotations

import logging
from pathlib import Path

import cv2
import numpy as np

from config import DEFAULT_OUTPUT_DEPTH, SIXTEEN_BIT_SUFFIXES
from imaging import PixelBuffer

logger = logging.getLogger(__name__)


def decode_image(image_data: bytes) -> PixelBuffer:
    """Decode encoded image bytes (PNG, JPEG, ...) into a PixelBuffer.

    Bit depth and alpha are preserved; OpenCV's BGR(A) channel order is
    converted to RGB(A).

    Raises:
        ValueError: If the bytes cannot be decoded as an image.
    """
    arr = cv2.imdecode(np.frombuffer(image_data, np.uint8), cv2.IMREAD_UNCHANGED)
    if arr is None:
        raise ValueError("Could not decode image data")

    if arr.ndim == 3 and arr.shape[2] == 3:
        arr = cv2.cvtColor(arr, cv2.COLOR_BGR2RGB)
    elif arr.ndim == 3 and arr.shape[2] == 4:
        arr = cv2.cvtColor(arr, cv2.COLOR_BGRA2RGBA)
    return PixelBuffer.from_array(arr)


def load_image(path: str | Path) -> PixelBuffer:
    """Read and decode an image file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file is not a decodable image.
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Image not found: {path}")
    buffer = decode_image(path.read_bytes())
    logger.debug(
        "Loaded %s (%sx%s, %s)", path, buffer.width, buffer.height, buffer.format.value
    )
    return buffer


def encode_array(buffer: PixelBuffer, depth: int = DEFAULT_OUTPUT_DEPTH) -> np.ndarray:
    """Samples of ``buffer`` ready for cv2.imwrite (gray, or BGR without alpha)."""
    arr = buffer.to_array(depth)
    if arr.ndim == 3:
        arr = cv2.cvtColor(np.ascontiguousarray(arr[:, :, :3]), cv2.COLOR_RGB2BGR)
    return arr


def save_image(
    buffer: PixelBuffer,
    path: str | Path,
    depth: int = DEFAULT_OUTPUT_DEPTH,
) -> Path:
    """Encode ``buffer`` to ``path``, creating parent directories.

    Args:
        buffer: Image to save. The alpha channel is not written.
        path: Destination; the suffix selects the format.
        depth: 8 or 16 bits per sample. 16 requires PNG or TIFF.

    Returns:
        The path written.

    Raises:
        ValueError: If depth is unsupported for the format, or encoding fails.
    """
    path = Path(path)
    if depth not in (8, 16):
        raise ValueError(f"depth must be 8 or 16, got {depth}")
    if depth == 16 and path.suffix.lower() not in SIXTEEN_BIT_SUFFIXES:
        raise ValueError(
            f"16-bit output requires one of {', '.join(SIXTEEN_BIT_SUFFIXES)}, got {path.suffix!r}"
        )

    path.parent.mkdir(parents=True, exist_ok=True)
    try:
        written = cv2.imwrite(str(path), encode_array(buffer, depth))
    except cv2.error as exc:
        raise ValueError(f"Could not encode image to {path}: {exc}") from exc
    if not written:
        raise ValueError(f"Could not encode image to {path}")
    logger.debug("Saved %s (%s-bit)", path, depth)
    return path
