import numpy as np
import pytest

from maser_qed.analysis import second_order_coherence, ptrace_cavity
from maser_qed.config import get_default_config
from maser_qed.core.operators import dag
from maser_qed.core.simulation import MaserSimulation, run_simulation
from maser_qed.exceptions import GridMismatchWarning
from maser_qed.models import MaserParameters, SimulationSettings


@pytest.fixture(scope="module")
def reference_result():
    # Reference parameters with a smaller cavity truncation to keep the run short
    settings = SimulationSettings(nph=5, t_max=50.0, dt=0.1, dt_rho=10.0)
    simulation = MaserSimulation(MaserParameters(), settings)
    return simulation, simulation.run()


class TestReferenceRun:
    def test_grids(self, reference_result):
        _, result = reference_result
        assert len(result.times) == 501
        np.testing.assert_allclose(result.snapshot_times, [0, 10, 20, 30, 40, 50])
        assert result.missing_snapshots == []

    def test_first_snapshot_is_initial_state(self, reference_result):
        simulation, result = reference_result
        np.testing.assert_array_equal(result.snapshots[0], simulation.initial_state())

    def test_trace_and_hermiticity(self, reference_result):
        _, result = reference_result
        for rho in result.snapshots:
            assert abs(np.trace(rho) - 1) < 1e-6
            np.testing.assert_allclose(rho, dag(rho), atol=1e-6)
        total = sum(result.expect[f"population{k}"] for k in (1, 2, 3))
        np.testing.assert_allclose(total, 1.0, atol=1e-6)

    def test_population_ordering(self, reference_result):
        _, result = reference_result
        p1, p2, p3 = (np.real(result.expect[f"population{k}"]) for k in (1, 2, 3))
        assert 0 < p3[-1] < 0.2
        assert p1[-1] + p2[-1] > 0.8
        # level 3 has settled by the end of the run
        assert abs(p3[-1] - p3[-51]) < 1e-2

    def test_cavity_gain(self, reference_result):
        _, result = reference_result
        n = np.real(result.expect["photon_number"])
        assert n[0] == pytest.approx(0.0)
        assert n[-1] > n[0]

    def test_g2_undefined_for_empty_cavity(self, reference_result):
        _, result = reference_result
        g2 = second_order_coherence(result.expect["photon_number_squared_term"],
                                    result.expect["photon_number"])
        assert np.isnan(g2[0])
        assert np.isfinite(g2[-1])

    def test_steady_state_matches_expectations(self, reference_result):
        _, result = reference_result
        rho_ss = result.steady_state
        rho_cav = ptrace_cavity(rho_ss, 5)
        n_ss = np.real(np.trace(np.diag(np.arange(6)) @ rho_cav))
        assert n_ss == pytest.approx(result.expect["photon_number"][-1].real, abs=1e-8)

    def test_metadata(self, reference_result):
        _, result = reference_result
        assert result.metadata["dim"] == 18
        assert result.metadata["rates"]["R5"] == pytest.approx(0.2)
        assert result.parameters["simulation"]["nph"] == 5


class TestRunVariants:
    def test_independent_runs(self):
        settings = SimulationSettings(nph=2, t_max=1.0, dt=0.1, dt_rho=0.5)
        simulation = MaserSimulation(MaserParameters(), settings)
        first = simulation.run()
        second = simulation.run()
        np.testing.assert_allclose(first.expect["population3"],
                                   second.expect["population3"])
        assert first.snapshots[1] is not second.snapshots[1]

    def test_custom_observables(self):
        settings = SimulationSettings(nph=2, t_max=1.0, dt=0.5, dt_rho=1.0)
        simulation = MaserSimulation(MaserParameters(), settings)
        result = simulation.run(observables=[("excited", simulation.operators.P3)])
        assert list(result.expect) == ["excited"]
        assert result.expect["excited"][0] == 0

    def test_run_simulation_from_config(self):
        config = get_default_config()
        config["simulation"].update(nph=2, t_max=1.0, dt=0.1, dt_rho=0.5)
        result = run_simulation(config)
        assert len(result.times) == 11
        assert len(result.snapshots) == 3

    def test_to_dict_is_json_serializable(self):
        import json
        settings = SimulationSettings(nph=1, t_max=0.2, dt=0.1, dt_rho=0.2)
        result = MaserSimulation(MaserParameters(), settings).run()
        data = json.loads(json.dumps(result.to_dict()))
        assert data["expect"]["population1"]["real"][0] == pytest.approx(1.0)
        assert data["snapshot_times"] == [0.0, 0.2]

    def test_range_style_grid(self):
        settings = SimulationSettings(nph=1, t_max=1.0, dt=0.1, dt_rho=0.3)
        result = MaserSimulation(MaserParameters(), settings).run()
        assert len(result.times) == 11
        np.testing.assert_allclose(result.snapshot_times, [0.0, 0.3, 0.6, 0.9])
        assert result.missing_snapshots == []

    def test_coarse_times_off_the_fine_grid(self):
        settings = SimulationSettings(nph=1, t_max=3.0, dt=0.3, dt_rho=1.0)
        with pytest.warns(GridMismatchWarning):
            result = MaserSimulation(MaserParameters(), settings).run()
        assert result.missing_snapshots == [1, 2]
        assert result.metadata["missing_snapshots"] == [1, 2]
        assert result.snapshots[1] is None
        assert np.isnan(result.snapshot_times[2])
        np.testing.assert_allclose(result.snapshot_times[[0, 3]], [0.0, 3.0])
