"""
Configuration for signature generation runs.

Settings come from, in increasing priority: built-in defaults, a YAML or
JSON config file, ``MEMSIG_*`` environment variables and command line flags.
"""

import copy
import json
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from .core.errors import ConfigurationError
from .core.loader import validate_page_size
from .grouping import STRATEGIES
from .grouping.base import validate_grouping_parameters

CONFIG_FILENAMES = [".memsig.yml", ".memsig.yaml", "memsig.yml", "memsig.yaml"]


class Config:
    """Nested configuration dictionary addressed by dot-separated keys."""

    DEFAULT_CONFIG: Dict[str, Any] = {
        "analysis": {
            "page_size": 4096,
        },
        "grouping": {
            "strategy": "similarity",
            "sigsize_threshold": 0.5,
            "max_distance": 5,
        },
        "paths": {
            "versions_dir": "versions",
        },
        "output": {
            "vsigs_dir": "vsigs",
            "comparison_dir": "comp",
            "groups_dir": "groups",
        },
        "logging": {
            "level": "WARNING",
            "file": False,
            "dir": "logs",
        },
    }

    def __init__(self, config_dict: Optional[Dict] = None, source: Optional[Path] = None):
        """Initialize with optional config dictionary."""
        self.config = self._merge_configs(self.DEFAULT_CONFIG, config_dict or {})
        self.source = source

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "Config":
        """
        Load configuration from a YAML or JSON file.

        Raises:
            ConfigurationError: if the file is missing, has an unknown suffix
                or does not parse into a mapping
        """
        path = Path(path)
        if not path.is_file():
            raise ConfigurationError(f"Config file not found: {path}", key="config", value=str(path))

        try:
            with open(path, "r") as f:
                if path.suffix in [".yaml", ".yml"]:
                    data = yaml.safe_load(f) or {}
                elif path.suffix == ".json":
                    data = json.load(f)
                else:
                    raise ConfigurationError(f"Unsupported config format: {path.suffix}",
                                             key="config", value=str(path))
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Cannot parse config file {path}: {e}",
                                     key="config", value=str(path)) from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Config file {path} must contain a mapping",
                                     key="config", value=str(path))
        return cls(data, source=path)

    @classmethod
    def find_and_load(cls, start_path: Union[str, Path]) -> "Config":
        """Find and load configuration from ``start_path`` or any parent directory."""
        current = Path(start_path).resolve()

        while True:
            for name in CONFIG_FILENAMES:
                config_path = current / name
                if config_path.is_file():
                    return cls.from_file(config_path)
            if current == current.parent:
                break
            current = current.parent

        return cls()

    def get(self, key: str, default=None):
        """Get configuration value by dot-separated key."""
        value = self.config
        for k in key.split("."):
            if isinstance(value, dict):
                value = value.get(k)
                if value is None:
                    return default
            else:
                return default
        return value

    def set(self, key: str, value):
        """Set configuration value by dot-separated key."""
        keys = key.split(".")
        config = self.config
        for k in keys[:-1]:
            config = config.setdefault(k, {})
        config[keys[-1]] = value

    def to_dict(self) -> Dict:
        return copy.deepcopy(self.config)

    def apply_environment_overrides(self) -> "Config":
        """Overwrite values from ``MEMSIG_*`` environment variables."""
        for key, value in get_environment_overrides().items():
            self.set(key, value)
        return self

    def _merge_configs(self, base: Dict, override: Dict) -> Dict:
        """Recursively merge configuration dictionaries."""
        result = copy.deepcopy(base)
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_configs(result[key], value)
            else:
                result[key] = value
        return result


ENV_MAPPINGS = {
    "MEMSIG_PAGE_SIZE": ("analysis.page_size", int),
    "MEMSIG_SIGSIZE_THRESHOLD": ("grouping.sigsize_threshold", float),
    "MEMSIG_MAX_DISTANCE": ("grouping.max_distance", int),
    "MEMSIG_STRATEGY": ("grouping.strategy", str),
}


def get_environment_overrides() -> Dict[str, Union[float, int, str]]:
    """Get configuration overrides from environment variables."""
    overrides = {}
    for env_var, (config_key, config_type) in ENV_MAPPINGS.items():
        env_value = os.getenv(env_var)
        if env_value is not None:
            try:
                overrides[config_key] = config_type(env_value)
            except ValueError as e:
                raise ConfigurationError(
                    f"Invalid environment variable {env_var}={env_value}: {e}",
                    key=config_key, value=env_value,
                ) from e
    return overrides


@dataclass
class AnalysisSettings:
    """Validated parameters for one run."""

    page_size: int = 4096
    sigsize_threshold: float = 0.5
    max_distance: int = 5
    strategy: str = "similarity"

    def __post_init__(self):
        """Validate configuration parameters."""
        validate_page_size(self.page_size)
        validate_grouping_parameters(self.sigsize_threshold, self.max_distance)
        if self.strategy not in STRATEGIES:
            raise ConfigurationError(
                f"Unknown grouping strategy {self.strategy!r}; "
                f"choose from {', '.join(sorted(STRATEGIES))}",
                key="strategy", value=self.strategy,
            )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_config(cls, config: Config, **overrides) -> "AnalysisSettings":
        """
        Build settings from a config, letting non-None ``overrides`` win.

        Args:
            config: Loaded configuration
            **overrides: Values from the command line, keyed by field name
        """
        values = {
            "page_size": config.get("analysis.page_size", 4096),
            "sigsize_threshold": config.get("grouping.sigsize_threshold", 0.5),
            "max_distance": config.get("grouping.max_distance", 5),
            "strategy": config.get("grouping.strategy", "similarity"),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
