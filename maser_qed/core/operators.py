"""Operator construction for the atom (x) cavity Hilbert space.

The atom is a fixed three-level system with basis |1>, |2>, |3>. The cavity
is a single mode truncated to the Fock states |0> ... |nph>. Composite
operators are ordered atom first, cavity second.
"""

import logging
from dataclasses import dataclass
from functools import reduce
from typing import Sequence

import numpy as np

from ..exceptions import InvalidParameterError
from ..models import MaserParameters

logger = logging.getLogger(__name__)

ATOM_DIM = 3


def _check_nph(nph) -> int:
    if isinstance(nph, bool) or int(nph) != nph or nph < 0:
        raise InvalidParameterError(f"nph must be a non-negative integer, got {nph!r}")
    return int(nph)


def basis(dim: int, n: int) -> np.ndarray:
    """Column vector |n> of a ``dim``-dimensional space (0-based)."""
    if not 0 <= n < dim:
        raise InvalidParameterError(f"basis index {n} outside dimension {dim}")
    vec = np.zeros((dim, 1), dtype=np.complex128)
    vec[n, 0] = 1.0
    return vec


def projector(dim: int, i: int, j: int) -> np.ndarray:
    """Outer product |i><j| (0-based indices)."""
    return basis(dim, i) @ basis(dim, j).conj().T


def identity(dim: int) -> np.ndarray:
    return np.eye(dim, dtype=np.complex128)


def destroy(n: int) -> np.ndarray:
    """Annihilation operator on an ``n``-dimensional Fock space.

    Matrix elements <k-1|a|k> = sqrt(k).
    """
    if n < 1:
        raise InvalidParameterError("Fock space dimension must be at least 1")
    return np.diag(np.sqrt(np.arange(1, n, dtype=np.float64)), k=1).astype(np.complex128)


def dag(op: np.ndarray) -> np.ndarray:
    return op.conj().T


def tensor(*ops: np.ndarray) -> np.ndarray:
    """Kronecker product of square operators, in the order given."""
    if not ops:
        raise InvalidParameterError("tensor requires at least one operator")
    for op in ops:
        if op.ndim != 2 or op.shape[0] != op.shape[1]:
            raise InvalidParameterError(f"Operator of shape {op.shape} is not square")
    return reduce(np.kron, ops)


def commutator(A: np.ndarray, B: np.ndarray) -> np.ndarray:
    return A @ B - B @ A


@dataclass(frozen=True)
class MaserOperators:
    """Fixed system operators on the composite space.

    Attributes:
        nph: Photon-number truncation.
        P1, P2, P3: Atomic projectors |i><i| (x) 1.
        s13: Hot-bath transition |1><3| (x) 1.
        s23: Cold-bath transition |2><3| (x) 1.
        s12: Lasing transition |1><2| (x) 1.
        a: Cavity lowering operator 1 (x) a.
    """
    nph: int
    P1: np.ndarray
    P2: np.ndarray
    P3: np.ndarray
    s13: np.ndarray
    s23: np.ndarray
    s12: np.ndarray
    a: np.ndarray

    @property
    def cavity_dim(self) -> int:
        return self.nph + 1

    @property
    def dim(self) -> int:
        return ATOM_DIM * (self.nph + 1)

    @property
    def projectors(self) -> Sequence[np.ndarray]:
        return (self.P1, self.P2, self.P3)

    @property
    def number(self) -> np.ndarray:
        """Photon number a^dag a."""
        return dag(self.a) @ self.a


def build_operators(nph: int) -> MaserOperators:
    """Build every fixed operator for a cavity truncated at ``nph`` photons."""
    nph = _check_nph(nph)
    n_cav = nph + 1
    id_atom = identity(ATOM_DIM)
    id_cav = identity(n_cav)

    def atomic(i, j):
        return tensor(projector(ATOM_DIM, i - 1, j - 1), id_cav)

    ops = MaserOperators(
        nph=nph,
        P1=atomic(1, 1),
        P2=atomic(2, 2),
        P3=atomic(3, 3),
        s13=atomic(1, 3),
        s23=atomic(2, 3),
        s12=atomic(1, 2),
        a=tensor(id_atom, destroy(n_cav)),
    )
    logger.debug("Built operators on %d-dimensional space (nph=%d)", ops.dim, nph)
    return ops


def maser_hamiltonian(ops: MaserOperators, params: MaserParameters) -> np.ndarray:
    """Three-level maser Hamiltonian.

    H = w1 P1 + w2 P2 + w3 P3 + w_f a^dag a + g (a^dag s12 + s12^dag a)
    """
    a, s12 = ops.a, ops.s12
    if a.shape != s12.shape:
        raise InvalidParameterError(
            f"Dimension mismatch between cavity {a.shape} and atom {s12.shape} operators"
        )
    H = (params.omega1 * ops.P1
         + params.omega2 * ops.P2
         + params.omega3 * ops.P3
         + params.cavity_frequency * ops.number
         + params.g * (dag(a) @ s12 + dag(s12) @ a))
    return H


def initial_state(nph: int, level: int = 1, photons: int = 0) -> np.ndarray:
    """Density matrix |level><level| (x) |photons><photons|, trace 1."""
    nph = _check_nph(nph)
    if level not in (1, 2, 3):
        raise InvalidParameterError(f"Atomic level must be 1, 2 or 3, got {level}")
    psi = np.kron(basis(ATOM_DIM, level - 1), basis(nph + 1, photons))
    rho = psi @ dag(psi)
    return rho / np.trace(rho).real
