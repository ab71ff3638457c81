"""Thermal occupations and Lindblad rates for the three baths."""

import logging
from typing import List

import numpy as np

from ..exceptions import InvalidParameterError
from ..models import MaserParameters, DissipationRates
from .operators import MaserOperators, dag

logger = logging.getLogger(__name__)


def thermal_occupation(omega: float, T: float) -> float:
    """Bose-Einstein occupation 1/(exp(omega/T) - 1), hbar = k_B = 1.

    ``T == 0`` is the zero-temperature limit and returns exactly 0.
    """
    if T < 0:
        raise InvalidParameterError(f"Temperature must be non-negative, got {T}")
    if T == 0:
        return 0.0
    if omega <= 0:
        raise InvalidParameterError(
            f"Transition frequency must be positive at finite temperature, got {omega}"
        )
    with np.errstate(over='ignore'):
        return float(1.0 / np.expm1(omega / T))


def dissipation_rates(params: MaserParameters) -> DissipationRates:
    """Compute R1..R6 for the hot bath, cold bath and cavity environment."""
    n_h = thermal_occupation(params.omega_h, params.T_h)
    n_c = thermal_occupation(params.omega_c, params.T_c)
    n_env = thermal_occupation(params.cavity_frequency, params.T_env)
    logger.debug("Thermal occupations: n_h=%.6g n_c=%.6g n_env=%.6g", n_h, n_c, n_env)

    rates = DissipationRates(
        R1=params.gamma_h * (n_h + 1),
        R2=params.gamma_h * n_h,
        R3=params.gamma_c * (n_c + 1),
        R4=params.gamma_c * n_c,
        R5=2 * params.kappa * (n_env + 1),
        R6=2 * params.kappa * n_env,
    )
    return rates


def jump_operators(ops: MaserOperators, rates: DissipationRates) -> List[np.ndarray]:
    """Weighted jump operators, in the same order as the rates."""
    bare = [ops.s13, dag(ops.s13), ops.s23, dag(ops.s23), ops.a, dag(ops.a)]
    return [np.sqrt(rate) * op for rate, op in zip(rates, bare)]
