"""
Row-band execution strategy for the spatial filters.

Every filter output row depends only on the immutable (padded) input, so the
output can be computed in independent bands of rows. By default a filter runs
as a single band on the calling thread. A caller that wants throughput can
pass a ``concurrent.futures.Executor`` (a ThreadPoolExecutor works well since
numpy releases the GIL in the inner loops); results are identical either way.
This module never creates an executor itself.
"""

from __future__ import annotations

import logging
from concurrent.futures import Executor
from typing import Callable

import numpy as np

from .errors import KernelConfigError

logger = logging.getLogger(__name__)

BandFunc = Callable[[int, int], np.ndarray]


def validate_band_rows(band_rows: int | None) -> int | None:
    """Check an optional band height.

    Raises:
        KernelConfigError: If band_rows is given and not a positive integer.
    """
    if band_rows is None:
        return None
    if isinstance(band_rows, bool) or not isinstance(band_rows, (int, np.integer)):
        raise KernelConfigError(f"band_rows must be int, got {type(band_rows).__name__}")
    if band_rows <= 0:
        raise KernelConfigError(f"band_rows must be positive, got {band_rows}")
    return int(band_rows)


def row_bands(height: int, band_rows: int | None = None) -> list[tuple[int, int]]:
    """Split [0, height) into consecutive half-open row ranges."""
    step = validate_band_rows(band_rows) or height
    return [(y0, min(y0 + step, height)) for y0 in range(0, height, step)]


def map_row_bands(
    height: int,
    compute_band: BandFunc,
    executor: Executor | None = None,
    band_rows: int | None = None,
) -> np.ndarray:
    """Compute every band and stack the results in row order.

    Args:
        height: Number of output rows.
        compute_band: Called as ``compute_band(y0, y1)``; must return the
                      output rows [y0, y1) stacked on axis 0.
        executor: Optional executor; bands are dispatched with ``executor.map``.
        band_rows: Rows per band. None computes everything as one band.

    Returns:
        The full output array, rows [0, height).
    """
    bands = row_bands(height, band_rows)
    logger.debug(
        "Computing %s rows in %s band(s)%s",
        height,
        len(bands),
        "" if executor is None else f" via {type(executor).__name__}",
    )

    starts = [y0 for y0, _ in bands]
    stops = [y1 for _, y1 in bands]
    if executor is None:
        results = [compute_band(y0, y1) for y0, y1 in bands]
    else:
        results = list(executor.map(compute_band, starts, stops))

    if len(results) == 1:
        return results[0]
    return np.concatenate(results, axis=0)
