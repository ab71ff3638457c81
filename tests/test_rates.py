import warnings

import numpy as np
import pytest

from maser_qed.core.operators import build_operators, dag
from maser_qed.core.rates import thermal_occupation, dissipation_rates, jump_operators
from maser_qed.exceptions import InvalidParameterError
from maser_qed.models import MaserParameters


class TestThermalOccupation:
    def test_zero_temperature_is_exactly_zero(self):
        n = thermal_occupation(30.0, 0.0)
        assert n == 0.0
        assert not np.isnan(n)

    @pytest.mark.parametrize("T", [1.0, 0.1, 1e-3, 1e-6])
    def test_vanishes_as_temperature_drops(self, T):
        assert 0.0 <= thermal_occupation(30.0, T) < 1e-12

    def test_no_overflow_warning(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            assert thermal_occupation(1e6, 1e-6) == 0.0

    @pytest.mark.parametrize("omega, T", [(150.0, 100.0), (120.0, 20.0), (1.0, 10.0)])
    def test_bose_einstein(self, omega, T):
        assert thermal_occupation(omega, T) == pytest.approx(1 / (np.exp(omega / T) - 1))

    def test_high_temperature_limit(self):
        assert thermal_occupation(1.0, 1e4) == pytest.approx(1e4, rel=1e-3)

    def test_negative_temperature(self):
        with pytest.raises(InvalidParameterError):
            thermal_occupation(1.0, -1.0)

    def test_non_positive_frequency(self):
        with pytest.raises(InvalidParameterError):
            thermal_occupation(0.0, 1.0)


class TestDissipationRates:
    def test_reference_rates(self):
        params = MaserParameters()
        rates = dissipation_rates(params)
        n_h = 1 / np.expm1(150 / 100)
        n_c = 1 / np.expm1(120 / 20)
        assert rates.R1 == pytest.approx(40 * (n_h + 1))
        assert rates.R2 == pytest.approx(40 * n_h)
        assert rates.R3 == pytest.approx(40 * (n_c + 1))
        assert rates.R4 == pytest.approx(40 * n_c)
        assert rates.R5 == pytest.approx(0.2)
        assert rates.R6 == 0.0

    def test_detailed_balance(self):
        params = MaserParameters(T_env=15.0)
        rates = dissipation_rates(params)
        assert rates.R1 - rates.R2 == pytest.approx(params.gamma_h)
        assert rates.R3 - rates.R4 == pytest.approx(params.gamma_c)
        assert rates.R5 - rates.R6 == pytest.approx(2 * params.kappa)
        assert rates.R2 / rates.R1 == pytest.approx(np.exp(-params.omega_h / params.T_h))

    def test_all_non_negative(self):
        rates = dissipation_rates(MaserParameters(T_h=1e3, T_c=1e3, T_env=1e3))
        assert all(r >= 0 for r in rates)
        assert len(list(rates)) == 6


class TestJumpOperators:
    def test_order_and_weights(self):
        ops = build_operators(2)
        rates = dissipation_rates(MaserParameters(T_env=10.0))
        jumps = jump_operators(ops, rates)
        expected = [
            np.sqrt(rates.R1) * ops.s13,
            np.sqrt(rates.R2) * dag(ops.s13),
            np.sqrt(rates.R3) * ops.s23,
            np.sqrt(rates.R4) * dag(ops.s23),
            np.sqrt(rates.R5) * ops.a,
            np.sqrt(rates.R6) * dag(ops.a),
        ]
        assert len(jumps) == 6
        for J, E in zip(jumps, expected):
            np.testing.assert_allclose(J, E)
