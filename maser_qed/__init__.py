"""Three-level maser simulation package.

This package integrates the Lindblad master equation of a three-level maser
(one atom and one cavity mode) driven by a hot and a cold thermal bath, and
provides tools to analyse the resulting photon statistics.
"""

__version__ = "0.1.0"

from .exceptions import (
    MaserError,
    InvalidParameterError,
    IntegrationError,
    GridMismatchWarning
)

from .models import (
    MaserParameters,
    SimulationSettings,
    DissipationRates,
    SimulationResult
)

from .core.operators import build_operators, maser_hamiltonian, initial_state
from .core.rates import thermal_occupation, dissipation_rates, jump_operators
from .core.integrator import LindbladIntegrator
from .core.sampler import Sampler, default_observables
from .core.simulation import MaserSimulation, run_simulation
from .config import ConfigManager, get_default_config
from .analysis import (
    second_order_coherence,
    ptrace_cavity,
    ptrace_atom,
    photon_distribution,
    qfunc
)
from .visualization.plotting import (
    plot_populations,
    plot_photon_number,
    plot_second_order_coherence,
    plot_photon_distribution,
    plot_qfunction
)

__all__ = [
    'MaserError',
    'InvalidParameterError',
    'IntegrationError',
    'GridMismatchWarning',
    'MaserParameters',
    'SimulationSettings',
    'DissipationRates',
    'SimulationResult',
    'build_operators',
    'maser_hamiltonian',
    'initial_state',
    'thermal_occupation',
    'dissipation_rates',
    'jump_operators',
    'LindbladIntegrator',
    'Sampler',
    'default_observables',
    'MaserSimulation',
    'run_simulation',
    'ConfigManager',
    'get_default_config',
    'second_order_coherence',
    'ptrace_cavity',
    'ptrace_atom',
    'photon_distribution',
    'qfunc',
    'plot_populations',
    'plot_photon_number',
    'plot_second_order_coherence',
    'plot_photon_distribution',
    'plot_qfunction'
]
