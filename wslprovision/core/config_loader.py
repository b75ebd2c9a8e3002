"""Configuration loading for wslprovision runs"""

from dataclasses import fields
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from wslprovision.constants import CONFIG_FILENAME
from wslprovision.exceptions import ConfigurationError
from wslprovision.models.config import ProvisionConfig

# Never accepted from a file
FORBIDDEN_KEYS = {"password"}


class ConfigLoader:
    """Loads ProvisionConfig from an optional YAML file plus overrides"""

    def __init__(self, state_dir: Path):
        """
        Initialize the config loader.

        Args:
            state_dir: wslprovision state directory holding config.yml
        """
        self.state_dir = Path(state_dir)
        # Keys set by the file or overrides during the last load()
        self.explicit_keys: set[str] = set()

    @property
    def default_path(self) -> Path:
        return self.state_dir / CONFIG_FILENAME

    def load(
        self,
        config_path: Optional[Path] = None,
        overrides: Optional[Dict[str, Any]] = None,
    ) -> ProvisionConfig:
        """
        Build a configuration.

        Precedence: overrides (CLI options) > file > defaults. Overrides
        with value None are ignored.

        Args:
            config_path: Explicit YAML file; must exist if given
            overrides: Values from the command line

        Raises:
            ConfigurationError: If the file is missing, invalid or has unknown keys
        """
        values: Dict[str, Any] = {}

        if config_path is not None:
            config_path = Path(config_path).expanduser()
            if not config_path.exists():
                raise ConfigurationError(f"Config file not found: {config_path}")
            values.update(self._load_yaml(config_path))
        elif self.default_path.exists():
            values.update(self._load_yaml(self.default_path))

        for key, value in (overrides or {}).items():
            if value is not None:
                values[key] = value

        self._check_types(values)
        self.explicit_keys = set(values)
        return ProvisionConfig(**values)

    def _load_yaml(self, file_path: Path) -> Dict[str, Any]:
        """
        Load a YAML file.

        Raises:
            ConfigurationError: If YAML is invalid or not a mapping
        """
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {file_path}", context=str(e))

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Config file {file_path} must contain a mapping",
                context="Example:\ndistro: Ubuntu\nusername: alice",
            )

        forbidden = FORBIDDEN_KEYS & set(data)
        if forbidden:
            raise ConfigurationError(
                "Passwords cannot be stored in the config file",
                context=f"Remove: {', '.join(sorted(forbidden))}",
            )

        unknown = set(data) - ProvisionConfig.field_names()
        if unknown:
            raise ConfigurationError(
                f"Unknown keys in {file_path}: {', '.join(sorted(unknown))}",
                context=f"Valid keys: {', '.join(sorted(ProvisionConfig.field_names()))}",
            )
        return data

    @staticmethod
    def _check_types(values: Dict[str, Any]) -> None:
        expected = {f.name: f.type for f in fields(ProvisionConfig)}
        for key, value in values.items():
            if key not in expected:
                raise ConfigurationError(f"Unknown configuration key: {key}")
            if expected[key] is bool and not isinstance(value, bool):
                raise ConfigurationError(
                    f"'{key}' must be true or false, got {value!r}"
                )
            if expected[key] is str and not isinstance(value, str):
                # YAML reads 3.12 as a float; versions are accepted as text
                if key == "python_version" and isinstance(value, (int, float)):
                    values[key] = str(value)
                    continue
                raise ConfigurationError(f"'{key}' must be a string, got {value!r}")
