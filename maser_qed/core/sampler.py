"""Expectation-value sampling and density-matrix snapshots during integration."""

import logging
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from ..exceptions import InvalidParameterError
from .grids import check_increasing, snapshot_schedule
from .operators import MaserOperators, dag

logger = logging.getLogger(__name__)

Observable = Tuple[str, np.ndarray]


def default_observables(ops: MaserOperators) -> List[Observable]:
    """Level populations, photon number and <a^dag a^dag a a>."""
    a = ops.a
    return [
        ("population1", ops.P1),
        ("population2", ops.P2),
        ("population3", ops.P3),
        ("photon_number", dag(a) @ a),
        ("photon_number_squared_term", dag(a) @ dag(a) @ a @ a),
    ]


def expect(op: np.ndarray, rho: np.ndarray) -> complex:
    """Tr(op rho)."""
    return complex(np.einsum('ij,ji->', op, rho))


class Sampler:
    """Callback handed to the integrator, one call per fine-grid time.

    Every call returns the registered expectation values. Calls whose step
    index is scheduled for a coarse slot also store a copy of rho in that
    slot. A slot is filled at most once. Calls must arrive at the fine-grid
    times, in order; anything else raises ``InvalidParameterError``.
    """

    def __init__(self, observables: Sequence[Observable], fine_times,
                 coarse_times, tol: float = 1e-9):
        names = [name for name, _ in observables]
        if len(set(names)) != len(names):
            raise InvalidParameterError(f"Duplicate observable names in {names}")
        self.observables = list(observables)
        self.fine_times = check_increasing(fine_times, "fine_times")
        self.coarse_times = check_increasing(coarse_times, "coarse_times")
        self.tol = tol
        self._schedule = snapshot_schedule(self.fine_times, self.coarse_times, tol)
        self.reset()

    def reset(self) -> None:
        """Clear snapshot storage and restart the step counter."""
        self._step = 0
        self.snapshot_times = np.full(len(self.coarse_times), np.nan)
        self.snapshots: List[Optional[np.ndarray]] = [None] * len(self.coarse_times)

    @property
    def missing_slots(self) -> List[int]:
        return [k for k, rho in enumerate(self.snapshots) if rho is None]

    def __call__(self, t: float, rho: np.ndarray) -> Dict[str, complex]:
        if self._step >= len(self.fine_times):
            raise InvalidParameterError(
                f"Sampler called at t={t:g} after the last fine-grid time "
                f"{self.fine_times[-1]:g}"
            )
        expected = self.fine_times[self._step]
        if abs(t - expected) > self.tol:
            raise InvalidParameterError(
                f"Sampler called at t={t:g} for step {self._step}, "
                f"expected fine-grid time {expected:g}"
            )
        record = {name: expect(op, rho) for name, op in self.observables}

        slot = self._schedule.get(self._step)
        if slot is not None and self.snapshots[slot] is None:
            self.snapshot_times[slot] = t
            self.snapshots[slot] = np.array(rho, copy=True)
            logger.debug("Stored snapshot %d at t=%g", slot, t)
        self._step += 1
        return record
