"""Configuration management for maser simulations."""

from typing import Dict, Any
import json
from dataclasses import asdict, fields

from ..exceptions import InvalidParameterError
from ..models import MaserParameters, SimulationSettings


class ConfigManager:
    """Manages simulation configuration and parameters."""

    required_sections = ('maser', 'simulation')

    @staticmethod
    def load_config(filepath: str) -> Dict[str, Any]:
        """Load configuration from a JSON file."""
        with open(filepath, 'r') as f:
            return json.load(f)

    @staticmethod
    def save_config(config: Dict[str, Any], filepath: str) -> None:
        """Save configuration to a JSON file."""
        with open(filepath, 'w') as f:
            json.dump(config, f, indent=2)

    @classmethod
    def validate_config(cls, config: Dict[str, Any]) -> bool:
        """Validate configuration dictionary."""
        for section in cls.required_sections:
            if section not in config:
                raise InvalidParameterError(f"Missing required section: {section}")
        for section, model in (('maser', MaserParameters),
                               ('simulation', SimulationSettings)):
            known = {f.name for f in fields(model)}
            unknown = set(config[section]) - known
            if unknown:
                raise InvalidParameterError(
                    f"Unknown keys in section '{section}': {sorted(unknown)}"
                )
        return True

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> Dict[str, Any]:
        """Create parameter objects from configuration dictionary."""
        cls.validate_config(config_dict)
        return {
            'maser': MaserParameters(**config_dict['maser']),
            'simulation': SimulationSettings(**config_dict['simulation'])
        }

    @classmethod
    def to_dict(cls, params: Dict[str, Any]) -> Dict[str, Any]:
        """Convert parameter objects back to dictionary."""
        return {
            'maser': asdict(params['maser']),
            'simulation': asdict(params['simulation'])
        }


# Default configuration
def get_default_config() -> Dict[str, Any]:
    """Get the reference maser parameters."""
    return {
        "maser": {
            "omega1": 0.0,
            "omega2": 30.0,
            "omega3": 150.0,
            "g": 5.0,
            "kappa": 0.1,
            "gamma_h": 40.0,
            "gamma_c": 40.0,
            "T_h": 100.0,
            "T_c": 20.0,
            "T_env": 0.0
        },
        "simulation": {
            "nph": 10,
            "t_max": 50.0,
            "dt": 0.1,
            "dt_rho": 10.0,
            "method": "RK45",
            "rtol": 1e-8,
            "atol": 1e-10
        }
    }
