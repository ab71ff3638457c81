import dataclasses

import pytest

from maser_qed.config import ConfigManager, get_default_config
from maser_qed.exceptions import InvalidParameterError
from maser_qed.models import MaserParameters, SimulationSettings


class TestConfigManager:
    def test_default_config(self):
        params = ConfigManager.from_dict(get_default_config())
        maser, settings = params['maser'], params['simulation']
        assert maser == MaserParameters()
        assert settings.nph == 10
        assert (settings.t_max, settings.dt, settings.dt_rho) == (50.0, 0.1, 10.0)
        assert maser.T_env == 0.0

    def test_round_trip(self, tmp_path):
        path = tmp_path / "config.json"
        config = get_default_config()
        config["maser"]["g"] = 2.5
        ConfigManager.save_config(config, str(path))
        params = ConfigManager.from_dict(ConfigManager.load_config(str(path)))
        assert params['maser'].g == 2.5
        assert ConfigManager.to_dict(params)["simulation"]["nph"] == 10

    def test_missing_section(self):
        config = get_default_config()
        del config["simulation"]
        with pytest.raises(InvalidParameterError, match="simulation"):
            ConfigManager.from_dict(config)

    def test_unknown_key(self):
        config = get_default_config()
        config["maser"]["Tenv"] = 0.0
        with pytest.raises(InvalidParameterError, match="Tenv"):
            ConfigManager.validate_config(config)


class TestMaserParameters:
    def test_derived_frequencies(self):
        params = MaserParameters()
        assert params.omega_h == 150.0
        assert params.omega_c == 120.0
        assert params.cavity_frequency == 30.0
        assert MaserParameters(omega_f=28.0).cavity_frequency == 28.0

    @pytest.mark.parametrize("kwargs", [
        {"kappa": -0.1},
        {"gamma_h": -1.0},
        {"gamma_c": -1.0},
        {"T_h": -1.0},
        {"T_env": -0.5},
        {"omega2": 200.0},
        {"omega_f": 0.0},
    ])
    def test_invalid(self, kwargs):
        with pytest.raises(InvalidParameterError):
            MaserParameters(**kwargs)

    def test_immutable(self):
        params = MaserParameters()
        with pytest.raises(dataclasses.FrozenInstanceError):
            params.g = 1.0


class TestSimulationSettings:
    @pytest.mark.parametrize("kwargs", [
        {"nph": -1},
        {"nph": 1.5},
        {"dt": 0.0},
        {"dt_rho": -1.0},
        {"t_max": -1.0},
        {"atom_level": 4},
        {"nph": 2, "initial_photons": 3},
    ])
    def test_invalid(self, kwargs):
        with pytest.raises(InvalidParameterError):
            SimulationSettings(**kwargs)
