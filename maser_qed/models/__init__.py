"""Core data models for three-level maser simulations."""

from dataclasses import dataclass, field, fields
from typing import Optional, List, Dict, Any, Iterator
import numpy as np

from ..exceptions import InvalidParameterError


@dataclass(frozen=True)
class MaserParameters:
    """Physical parameters of the maser (hbar = k_B = 1)."""
    omega1: float = 0.0
    omega2: float = 30.0
    omega3: float = 150.0
    g: float = 5.0
    kappa: float = 0.1
    gamma_h: float = 40.0
    gamma_c: float = 40.0
    T_h: float = 100.0
    T_c: float = 20.0
    T_env: float = 0.0
    omega_f: Optional[float] = None  # defaults to omega2 - omega1

    def __post_init__(self):
        for name in ('kappa', 'gamma_h', 'gamma_c'):
            if getattr(self, name) < 0:
                raise InvalidParameterError(f"{name} must be non-negative")
        for name in ('T_h', 'T_c', 'T_env'):
            if getattr(self, name) < 0:
                raise InvalidParameterError(f"Temperature {name} must be non-negative")
        if not self.omega1 < self.omega2 < self.omega3:
            raise InvalidParameterError(
                "Level energies must satisfy omega1 < omega2 < omega3"
            )
        if self.cavity_frequency <= 0:
            raise InvalidParameterError("Cavity frequency omega_f must be positive")

    @property
    def omega_h(self) -> float:
        """Hot-bath transition frequency (1 <-> 3)."""
        return self.omega3 - self.omega1

    @property
    def omega_c(self) -> float:
        """Cold-bath transition frequency (2 <-> 3)."""
        return self.omega3 - self.omega2

    @property
    def cavity_frequency(self) -> float:
        if self.omega_f is None:
            return self.omega2 - self.omega1
        return self.omega_f


@dataclass(frozen=True)
class SimulationSettings:
    """Truncation, time grids and solver settings for one run."""
    nph: int = 10
    t_max: float = 50.0
    dt: float = 0.1
    dt_rho: float = 10.0
    method: str = "RK45"
    rtol: float = 1e-8
    atol: float = 1e-10
    trace_tol: float = 1e-8
    grid_tol: float = 1e-9
    atom_level: int = 1
    initial_photons: int = 0

    def __post_init__(self):
        if isinstance(self.nph, bool) or int(self.nph) != self.nph or self.nph < 0:
            raise InvalidParameterError("nph must be a non-negative integer")
        if self.t_max < 0:
            raise InvalidParameterError("t_max must be non-negative")
        if self.dt <= 0 or self.dt_rho <= 0:
            raise InvalidParameterError("Time steps dt and dt_rho must be positive")
        if self.atom_level not in (1, 2, 3):
            raise InvalidParameterError("atom_level must be 1, 2 or 3")
        if not 0 <= self.initial_photons <= self.nph:
            raise InvalidParameterError(
                f"initial_photons must lie in [0, nph={self.nph}]"
            )


@dataclass(frozen=True)
class DissipationRates:
    """The six Lindblad rates, in jump-operator order.

    R1/R2: hot bath emission/absorption on 1 <-> 3,
    R3/R4: cold bath emission/absorption on 2 <-> 3,
    R5/R6: cavity emission/absorption into the environment.
    """
    R1: float
    R2: float
    R3: float
    R4: float
    R5: float
    R6: float

    def __iter__(self) -> Iterator[float]:
        return (getattr(self, f.name) for f in fields(self))

    def as_dict(self) -> Dict[str, float]:
        return {f.name: float(getattr(self, f.name)) for f in fields(self)}


def _complex_to_json(value):
    if isinstance(value, np.ndarray) and np.iscomplexobj(value):
        return {"real": value.real.tolist(), "imag": value.imag.tolist()}
    if isinstance(value, np.ndarray):
        return value.tolist()
    return value


@dataclass
class SimulationResult:
    """Container for a finished run.

    ``expect`` maps observable names to complex time series on ``times``.
    ``snapshots`` holds density matrices for the coarse grid; slots that were
    never filled carry ``None`` and a ``NaN`` time.
    """
    times: np.ndarray
    expect: Dict[str, np.ndarray]
    snapshot_times: np.ndarray
    snapshots: List[Optional[np.ndarray]]
    parameters: Dict[str, Any] = field(default_factory=dict)
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def missing_snapshots(self) -> List[int]:
        return [k for k, rho in enumerate(self.snapshots) if rho is None]

    @property
    def steady_state(self) -> Optional[np.ndarray]:
        """Last filled snapshot, taken as the steady state of the run."""
        for rho in reversed(self.snapshots):
            if rho is not None:
                return rho
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to a serializable dictionary (without snapshots)."""
        return {
            "parameters": self.parameters,
            "times": self.times.tolist(),
            "expect": {k: _complex_to_json(v) for k, v in self.expect.items()},
            "snapshot_times": [None if np.isnan(t) else float(t)
                               for t in self.snapshot_times],
            "metadata": self.metadata
        }
