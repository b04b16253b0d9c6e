"""Configuration manager for loading and saving podguid config."""

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from podguid.config.schema import GlobalConfig
from podguid.utils.errors import InvalidConfigError
from podguid.utils.paths import get_config_dir

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_HEADER = """\
# podguid configuration
#
# API keys are never stored here. Pass one with --token, the
# PODIGEE_API_KEY environment variable, or enter it when prompted.
"""


class ConfigManager:
    """Manages the podguid configuration file."""

    def __init__(self, config_dir: Path | None = None) -> None:
        """Initialize the config manager.

        Args:
            config_dir: Optional custom config directory. Defaults to the platform config dir.
        """
        self.config_dir = config_dir if config_dir is not None else get_config_dir()
        self.config_file = self.config_dir / "config.yaml"

    def load_config(self) -> GlobalConfig:
        """Load and validate global configuration.

        Returns:
            Validated GlobalConfig instance

        Raises:
            InvalidConfigError: If config is invalid
        """
        if not self.config_file.exists():
            logger.debug(f"No config at {self.config_file}, writing defaults")
            config = GlobalConfig()
            self.save_config(config)
            return config

        try:
            with open(self.config_file) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise InvalidConfigError(
                f"Invalid configuration in {self.config_file}: {e}"
            ) from e

        if not isinstance(data, dict):
            raise InvalidConfigError(
                f"Invalid configuration in {self.config_file}: expected a mapping"
            )

        try:
            return GlobalConfig(**data)
        except ValidationError as e:
            raise InvalidConfigError(
                f"Invalid configuration in {self.config_file}: {e}"
            ) from e

    def save_config(self, config: GlobalConfig) -> None:
        """Save global configuration.

        Args:
            config: GlobalConfig instance to save
        """
        data = config.model_dump(mode="python")

        self.config_dir.mkdir(parents=True, exist_ok=True)

        with open(self.config_file, "w") as f:
            f.write(DEFAULT_CONFIG_HEADER)
            yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)

    def set_value(self, key: str, value: str) -> GlobalConfig:
        """Set a single configuration value from its string form.

        Args:
            key: Config field name
            value: New value as typed on the command line

        Returns:
            The updated configuration

        Raises:
            InvalidConfigError: If the key is unknown or the value does not validate
        """
        config = self.load_config()

        if key not in GlobalConfig.model_fields:
            raise InvalidConfigError(
                f"Unknown config key: {key}. "
                f"Available keys: {', '.join(GlobalConfig.model_fields)}"
            )

        data = config.model_dump()
        data[key] = None if value.lower() in ("none", "null", "") else value

        try:
            updated = GlobalConfig(**data)
        except ValidationError as e:
            raise InvalidConfigError(f"Invalid value for {key}: {value}") from e

        self.save_config(updated)
        return updated
