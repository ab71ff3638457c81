"""Post-processing of recorded expectation values and density matrices."""

from math import sqrt

import numpy as np
import qutip

from ..exceptions import InvalidParameterError
from ..core.operators import ATOM_DIM


def second_order_coherence(aadag_aa, n):
    """g2(0) = <a^dag a^dag a a> / <a^dag a>^2.

    Works element-wise on arrays. Points with <a^dag a> == 0 are undefined
    and come back as NaN.
    """
    num = np.real(np.asarray(aadag_aa))
    den = np.real(np.asarray(n)) ** 2
    with np.errstate(divide='ignore', invalid='ignore'):
        g2 = np.where(den > 0, num / np.where(den > 0, den, 1.0), np.nan)
    return g2 if g2.ndim else float(g2)


def _as_qobj(rho: np.ndarray, nph: int) -> qutip.Qobj:
    n_cav = nph + 1
    rho = np.asarray(rho, dtype=np.complex128)
    if rho.shape != (ATOM_DIM * n_cav, ATOM_DIM * n_cav):
        raise InvalidParameterError(
            f"Density matrix of shape {rho.shape} does not match nph={nph}"
        )
    return qutip.Qobj(rho, dims=[[ATOM_DIM, n_cav], [ATOM_DIM, n_cav]])


def ptrace_cavity(rho: np.ndarray, nph: int) -> np.ndarray:
    """Reduced cavity state, tracing out the atom."""
    return _as_qobj(rho, nph).ptrace(1).full()


def ptrace_atom(rho: np.ndarray, nph: int) -> np.ndarray:
    """Reduced atomic state, tracing out the cavity."""
    return _as_qobj(rho, nph).ptrace(0).full()


def photon_distribution(rho: np.ndarray, nph: int) -> np.ndarray:
    """Probabilities P(n), n = 0..nph, of the cavity field."""
    return np.real(np.diag(ptrace_cavity(rho, nph)))


def mean_photon_number(rho: np.ndarray, nph: int) -> float:
    p = photon_distribution(rho, nph)
    return float(np.dot(np.arange(nph + 1), p))


def qfunc(rho_cavity: np.ndarray, xvec, yvec, g: float = sqrt(2)) -> np.ndarray:
    r"""Husimi Q function of a single-mode state.

    Q(x, y) = <alpha|rho|alpha> / pi with alpha = g/2 (x + i y), evaluated by
    ``qutip.qfunc``. The result has shape ``(len(yvec), len(xvec))``.
    """
    rho_cavity = np.asarray(rho_cavity, dtype=np.complex128)
    if rho_cavity.ndim != 2 or rho_cavity.shape[0] != rho_cavity.shape[1]:
        raise InvalidParameterError("rho_cavity must be a square matrix")
    xvec = np.asarray(xvec, dtype=np.float64)
    yvec = np.asarray(yvec, dtype=np.float64)
    if xvec.ndim != 1 or yvec.ndim != 1:
        raise InvalidParameterError("xvec and yvec must be 1D")
    return np.real(qutip.qfunc(qutip.Qobj(rho_cavity), xvec, yvec, g=g))
