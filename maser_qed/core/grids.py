"""Uniform time grids and index-based snapshot scheduling."""

import logging
import warnings
from typing import Dict

import numpy as np

from ..exceptions import InvalidParameterError, GridMismatchWarning

logger = logging.getLogger(__name__)


def check_increasing(times, name: str = "times") -> np.ndarray:
    times = np.asarray(times, dtype=np.float64)
    if times.ndim != 1 or times.size == 0:
        raise InvalidParameterError(f"{name} must be a non-empty 1-D sequence")
    if not np.all(np.isfinite(times)):
        raise InvalidParameterError(f"{name} must be finite")
    if np.any(np.diff(times) <= 0):
        raise InvalidParameterError(f"{name} must be strictly increasing")
    return times


def uniform_grid(t_max: float, step: float, rtol: float = 1e-9) -> np.ndarray:
    """Grid 0, step, 2*step, ... up to and including t_max.

    When ``t_max`` is not a whole number of steps the grid stops at the last
    point below it. Points are built as ``i * step`` so no error accumulates
    along the grid.
    """
    if step <= 0:
        raise InvalidParameterError(f"Time step must be positive, got {step}")
    if t_max < 0:
        raise InvalidParameterError(f"t_max must be non-negative, got {t_max}")
    n_steps = int(np.floor(t_max / step + rtol))
    return np.arange(n_steps + 1, dtype=np.float64) * step


def snapshot_schedule(fine_times, coarse_times, tol: float = 1e-9) -> Dict[int, int]:
    """Map fine-grid step indices to the coarse snapshot slot they fill.

    Each coarse slot takes the first fine index within ``tol``. Slots without
    a match stay unscheduled and raise a ``GridMismatchWarning``.
    """
    fine_times = check_increasing(fine_times, "fine_times")
    coarse_times = check_increasing(coarse_times, "coarse_times")

    schedule = {}
    for slot, t in enumerate(coarse_times):
        matches = np.flatnonzero(np.abs(fine_times - t) <= tol)
        matches = [idx for idx in matches if idx not in schedule]
        if not matches:
            logger.warning("Coarse time t=%g (slot %d) is not on the fine grid", t, slot)
            warnings.warn(
                f"Snapshot slot {slot} at t={t:g} has no matching fine-grid time; "
                "it will stay empty",
                GridMismatchWarning,
                stacklevel=2,
            )
            continue
        schedule[int(matches[0])] = slot
    return schedule
