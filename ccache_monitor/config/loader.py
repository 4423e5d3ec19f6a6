"""Load the collector configuration from YAML."""

import os
import re
from pathlib import Path
from typing import Any, Union

import yaml

from .models import CollectorSystemConfig


# ${VAR} or ${VAR:-fallback}
_ENV_PLACEHOLDER = re.compile(r'\$\{(\w+)(?::-([^}]*))?\}')


class ConfigLoader:
    """Load and validate collector configuration."""

    @staticmethod
    def load_from_file(config_path: Union[str, Path]) -> CollectorSystemConfig:
        """
        Read a YAML configuration file.

        Args:
            config_path: Path to YAML configuration file

        Returns:
            CollectorSystemConfig: Validated configuration object

        Raises:
            FileNotFoundError: If config file doesn't exist
            yaml.YAMLError: If YAML parsing fails
            pydantic.ValidationError: If configuration validation fails
        """
        config_file = Path(config_path)
        if not config_file.is_file():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        return ConfigLoader.load_from_string(config_file.read_text())

    @staticmethod
    def load_from_string(text: str) -> CollectorSystemConfig:
        """
        Parse configuration from YAML text.

        An empty document yields the defaults. The top level must be a
        mapping.
        """
        raw_config = yaml.safe_load(text)
        if raw_config is None:
            raw_config = {}
        if not isinstance(raw_config, dict):
            raise ValueError(
                f"Configuration must be a mapping, got {type(raw_config).__name__}"
            )

        return CollectorSystemConfig.model_validate(ConfigLoader._expand_env(raw_config))

    @staticmethod
    def _expand_env(obj: Any) -> Any:
        """
        Replace ``${VAR}`` and ``${VAR:-fallback}`` in every string value.

        Unset variables without a fallback become empty strings. Keys are
        left untouched.
        """
        if isinstance(obj, str):
            return _ENV_PLACEHOLDER.sub(
                lambda m: os.environ.get(m.group(1), m.group(2) or ''), obj
            )
        if isinstance(obj, dict):
            return {key: ConfigLoader._expand_env(value) for key, value in obj.items()}
        if isinstance(obj, list):
            return [ConfigLoader._expand_env(item) for item in obj]
        return obj
