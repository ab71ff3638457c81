"""Lindblad master-equation integrator.

The density matrix is evolved under

    drho/dt = -i[H, rho] + sum_k (J_k rho J_k^dag - 1/2 {J_k^dag J_k, rho})

with a scipy ``OdeSolver`` driven one step at a time. The complex matrix is
handed to the solver as a flat float64 view, so every scipy method works.
"""

import logging
from typing import Any, Callable, List, Sequence, Tuple

import numpy as np
from scipy.integrate import RK23, RK45, DOP853, Radau, BDF, LSODA

from ..exceptions import InvalidParameterError, IntegrationError
from .grids import check_increasing
from .operators import dag

logger = logging.getLogger(__name__)

SOLVERS = {
    'RK23': RK23,
    'RK45': RK45,
    'DOP853': DOP853,
    'Radau': Radau,
    'BDF': BDF,
    'LSODA': LSODA,
}

Callback = Callable[[float, np.ndarray], Any]


def _is_hermitian(op: np.ndarray, atol: float) -> bool:
    return np.allclose(op, dag(op), atol=atol, rtol=0)


class LindbladIntegrator:
    """Integrates a time-independent Lindblad master equation.

    Args:
        hamiltonian: Hermitian system Hamiltonian.
        jump_ops: Weighted jump operators J_k (rates already folded in).
        method: Name of a scipy ODE solver, see ``SOLVERS``.
        rtol, atol: Solver tolerances.
        trace_tol: Allowed drift of Tr(rho) from 1 at an output time before
            the sampled state is renormalized.
    """

    def __init__(self, hamiltonian: np.ndarray, jump_ops: Sequence[np.ndarray],
                 method: str = "RK45", rtol: float = 1e-8, atol: float = 1e-10,
                 trace_tol: float = 1e-8):
        H = np.asarray(hamiltonian, dtype=np.complex128)
        if H.ndim != 2 or H.shape[0] != H.shape[1]:
            raise InvalidParameterError(f"Hamiltonian of shape {H.shape} is not square")
        if not np.all(np.isfinite(H)):
            raise InvalidParameterError("Hamiltonian has non-finite entries")
        if not _is_hermitian(H, atol=1e-12 * max(1.0, np.abs(H).max())):
            raise InvalidParameterError("Hamiltonian is not Hermitian")
        jumps = [np.asarray(J, dtype=np.complex128) for J in jump_ops]
        for k, J in enumerate(jumps):
            if J.shape != H.shape:
                raise InvalidParameterError(
                    f"Jump operator {k} has shape {J.shape}, expected {H.shape}"
                )
            if not np.all(np.isfinite(J)):
                raise InvalidParameterError(f"Jump operator {k} has non-finite entries")
        if method not in SOLVERS:
            raise InvalidParameterError(
                f"Unknown method {method!r}, choose from {sorted(SOLVERS)}"
            )

        self.hamiltonian = H
        self.jump_ops = jumps
        self.method = method
        self.rtol = rtol
        self.atol = atol
        self.trace_tol = trace_tol

        self._shape = H.shape
        self._jumps_dag = [dag(J) for J in jumps]
        decay = sum((Jd @ J for J, Jd in zip(jumps, self._jumps_dag)),
                    np.zeros_like(H))
        self._h_eff = H - 0.5j * decay
        self._h_eff_dag = dag(self._h_eff)

    @property
    def dim(self) -> int:
        return self._shape[0]

    def rhs(self, t: float, y: np.ndarray) -> np.ndarray:
        """Right-hand side on the flat float64 view of rho."""
        rho = np.ascontiguousarray(y).view(np.complex128).reshape(self._shape)
        drho = -1j * (self._h_eff @ rho - rho @ self._h_eff_dag)
        for J, Jd in zip(self.jump_ops, self._jumps_dag):
            drho += J @ rho @ Jd
        return drho.reshape(-1).view(np.float64)

    def _check_state(self, rho0: np.ndarray) -> np.ndarray:
        rho0 = np.asarray(rho0, dtype=np.complex128)
        if rho0.shape != self._shape:
            raise InvalidParameterError(
                f"Initial state has shape {rho0.shape}, expected {self._shape}"
            )
        if not _is_hermitian(rho0, atol=1e-10):
            raise InvalidParameterError("Initial state is not Hermitian")
        if abs(np.trace(rho0) - 1) > 1e-10:
            raise InvalidParameterError(
                f"Initial state has trace {np.trace(rho0).real:.12g}, expected 1"
            )
        return rho0

    def _as_state(self, y: np.ndarray, t: float) -> np.ndarray:
        rho = np.ascontiguousarray(y).view(np.complex128).reshape(self._shape).copy()
        trace = np.trace(rho)
        if abs(trace - 1) > self.trace_tol:
            logger.warning("Trace drifted to %.12g at t=%g, renormalizing",
                           trace.real, t)
            rho /= trace.real
        return rho

    def integrate(self, rho0: np.ndarray, times,
                  callback: Callback) -> List[Tuple[float, Any]]:
        """Evolve ``rho0`` and call ``callback(t, rho)`` at every output time.

        Returns:
            List of ``(t, callback(t, rho(t)))`` in time order.

        Raises:
            InvalidParameterError: Bad initial state or time grid.
            IntegrationError: Solver failure or non-finite state.
        """
        rho0 = self._check_state(rho0)
        times = check_increasing(times)

        y0 = np.ascontiguousarray(rho0).reshape(-1).view(np.float64).copy()
        records = [(float(times[0]), callback(float(times[0]), self._as_state(y0, times[0])))]
        if len(times) == 1:
            return records

        logger.debug("Integrating dim=%d with %s from t=%g to t=%g (%d outputs)",
                     self.dim, self.method, times[0], times[-1], len(times))
        solver = SOLVERS[self.method](self.rhs, times[0], y0, times[-1],
                                      rtol=self.rtol, atol=self.atol)
        n_steps = 0
        i = 1
        while i < len(times):
            t_old = solver.t
            message = solver.step()
            n_steps += 1
            if solver.status == 'failed':
                raise IntegrationError(f"Solver failed: {message}", last_time=t_old)
            if not np.all(np.isfinite(solver.y)):
                raise IntegrationError("State became non-finite", last_time=t_old)

            interpolant = None
            while i < len(times) and times[i] <= solver.t:
                t = float(times[i])
                if t == solver.t:
                    y = solver.y
                else:
                    if interpolant is None:
                        interpolant = solver.dense_output()
                    y = interpolant(t)
                records.append((t, callback(t, self._as_state(y, t))))
                i += 1

            if solver.status == 'finished' and i < len(times):
                raise IntegrationError(
                    "Solver finished before reaching all output times",
                    last_time=solver.t,
                )

        logger.debug("Integration finished after %d solver steps", n_steps)
        return records
