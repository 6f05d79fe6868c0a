"""
Configuration loading and validation utilities.
"""

from pathlib import Path
from typing import Any, Dict, Union

import yaml

REQUIRED_SECTIONS = ["paths", "model", "sweep", "intervals", "logging"]


class Config:
    """
    Configuration container with dot-notation access to nested dictionaries.

    Allows accessing config values via attribute notation:
        config.sweep.num_nodes instead of config['sweep']['num_nodes']

    Args:
        config_dict: Dictionary containing configuration parameters
    """

    def __init__(self, config_dict: Dict[str, Any]):
        self._config = config_dict
        self._convert_nested(config_dict)

    def _convert_nested(self, data: Any) -> None:
        """Recursively convert nested dictionaries to Config objects."""
        for key, value in data.items():
            if isinstance(value, dict):
                setattr(self, key, Config(value))
            else:
                setattr(self, key, value)

    def __getitem__(self, key: str) -> Any:
        return self._config[key]

    def __contains__(self, key: str) -> bool:
        return key in self._config

    def get(self, key: str, default: Any = None) -> Any:
        """Get value with default fallback."""
        return self._config.get(key, default)

    def to_dict(self) -> Dict[str, Any]:
        """Convert back to nested dictionary."""
        return self._config.copy()

    def __repr__(self) -> str:
        return f"Config({self._config})"


def load_config(config_path: Union[str, Path]) -> Config:
    """
    Load YAML configuration file and return as Config object.

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Config object with hierarchical access to parameters

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If a required section is missing
        yaml.YAMLError: If config file is malformed

    Example:
        >>> config = load_config("configs/config.yaml")
        >>> print(config.sweep.num_nodes)
        100
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r") as f:
        config_dict = yaml.safe_load(f) or {}

    for section in REQUIRED_SECTIONS:
        if section not in config_dict:
            raise ValueError(f"Config missing required section: {section}")

    sweep = config_dict["sweep"]
    if int(sweep.get("num_nodes", 0)) < 2:
        raise ValueError(f"sweep.num_nodes must be >= 2, got {sweep.get('num_nodes')}")
    if float(sweep.get("min_temperature", 0.0)) >= float(sweep.get("max_temperature", 0.0)):
        raise ValueError("sweep.min_temperature must be below sweep.max_temperature")

    return Config(config_dict)


def save_config(config: Union[Config, Dict], output_path: Union[str, Path]) -> None:
    """
    Save configuration to YAML file.

    Args:
        config: Config object or dictionary to save
        output_path: Path to output YAML file
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    config_dict = config.to_dict() if isinstance(config, Config) else config

    with open(output_path, "w") as f:
        yaml.dump(config_dict, f, default_flow_style=False, sort_keys=False)


def update_config(base_config: Config, updates: Dict[str, Any]) -> Config:
    """
    Update configuration with new values.

    Args:
        base_config: Base configuration
        updates: Dictionary of updates (dot notation keys like "sweep.num_nodes")

    Returns:
        New Config object with updates applied

    Example:
        >>> updated = update_config(base_config, {"intervals.figures_of_merit": False})
    """
    import copy

    config_dict = copy.deepcopy(base_config.to_dict())

    for key, value in updates.items():
        keys = key.split(".")
        current = config_dict

        for k in keys[:-1]:
            if k not in current:
                current[k] = {}
            current = current[k]

        current[keys[-1]] = value

    return Config(config_dict)
