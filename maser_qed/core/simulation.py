"""Three-level maser simulation: operators, rates, integration and sampling."""

import logging
from dataclasses import asdict
from typing import Any, Dict, List, Optional

import numpy as np

from ..config import ConfigManager
from ..models import MaserParameters, SimulationSettings, DissipationRates, SimulationResult
from .grids import uniform_grid
from .integrator import LindbladIntegrator
from .operators import MaserOperators, build_operators, maser_hamiltonian, initial_state
from .rates import dissipation_rates, jump_operators
from .sampler import Sampler, Observable, default_observables

logger = logging.getLogger(__name__)


class MaserSimulation:
    """Main class for running a three-level maser master-equation simulation."""

    def __init__(self, params: MaserParameters,
                 settings: Optional[SimulationSettings] = None):
        self.params = params
        self.settings = settings if settings is not None else SimulationSettings()
        self._operators = None

    @property
    def operators(self) -> MaserOperators:
        if self._operators is None:
            self._operators = build_operators(self.settings.nph)
        return self._operators

    def rates(self) -> DissipationRates:
        return dissipation_rates(self.params)

    def hamiltonian(self) -> np.ndarray:
        return maser_hamiltonian(self.operators, self.params)

    def jump_operators(self) -> List[np.ndarray]:
        return jump_operators(self.operators, self.rates())

    def initial_state(self) -> np.ndarray:
        return initial_state(self.settings.nph,
                             level=self.settings.atom_level,
                             photons=self.settings.initial_photons)

    def observables(self) -> List[Observable]:
        return default_observables(self.operators)

    def time_grids(self):
        """Fine grid for expectation values and coarse grid for snapshots."""
        s = self.settings
        return uniform_grid(s.t_max, s.dt), uniform_grid(s.t_max, s.dt_rho)

    def run(self, observables: Optional[List[Observable]] = None) -> SimulationResult:
        """Integrate the master equation and collect records and snapshots."""
        s = self.settings
        fine_times, coarse_times = self.time_grids()
        rates = self.rates()
        logger.info("Running maser simulation: nph=%d, t_max=%g, dt=%g, dt_rho=%g",
                    s.nph, s.t_max, s.dt, s.dt_rho)
        logger.debug("Rates: %s", rates.as_dict())

        integrator = LindbladIntegrator(
            self.hamiltonian(),
            jump_operators(self.operators, rates),
            method=s.method, rtol=s.rtol, atol=s.atol, trace_tol=s.trace_tol,
        )
        sampler = Sampler(observables if observables is not None else self.observables(),
                          fine_times, coarse_times, tol=s.grid_tol)
        records = integrator.integrate(self.initial_state(), fine_times, sampler)

        names = [name for name, _ in sampler.observables]
        expect = {
            name: np.array([record[name] for _, record in records], dtype=np.complex128)
            for name in names
        }
        result = SimulationResult(
            times=np.array([t for t, _ in records]),
            expect=expect,
            snapshot_times=sampler.snapshot_times,
            snapshots=sampler.snapshots,
            parameters={
                'maser': asdict(self.params),
                'simulation': asdict(s),
            },
            metadata={
                'rates': rates.as_dict(),
                'dim': self.operators.dim,
                'missing_snapshots': sampler.missing_slots,
            },
        )
        if result.missing_snapshots:
            logger.warning("Snapshot slots %s were not filled", result.missing_snapshots)
        return result


def run_simulation(config: Dict[str, Any]) -> SimulationResult:
    """Build a simulation from a configuration dictionary and run it."""
    params = ConfigManager.from_dict(config)
    return MaserSimulation(params['maser'], params['simulation']).run()
