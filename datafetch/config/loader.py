"""
Configuration loader for datafetch.

This module handles loading configuration from configuration files and
environment variables.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from .models import GlobalConfig

logger = logging.getLogger(__name__)


class ConfigLoader:
    """Configuration loader with support for files and environment variables."""

    def __init__(self) -> None:
        """Initialize configuration loader."""
        self.config_paths = [
            Path("datafetch.yaml"),
            Path("datafetch.yml"),
            Path("datafetch.json"),
            Path.home() / ".datafetch" / "config.yaml",
            Path.home() / ".datafetch" / "config.yml",
            Path.home() / ".datafetch" / "config.json",
        ]

        # Environment variable prefix
        self.env_prefix = "DATAFETCH_"

    def load_config(
        self, config_file: Optional[Union[str, Path]] = None
    ) -> GlobalConfig:
        """
        Load configuration from all available sources.

        Values from environment variables override values from the file.

        Args:
            config_file: Specific config file to load

        Returns:
            GlobalConfig instance with merged configuration
        """
        config_data: Dict[str, Any] = {}

        file_config = self._load_from_file(config_file)
        if file_config:
            config_data.update(file_config)

        env_config = self._load_from_environment()
        if env_config:
            config_data = self._deep_merge(config_data, env_config)

        return GlobalConfig(**config_data)

    def _load_from_file(
        self, config_file: Optional[Union[str, Path]] = None
    ) -> Optional[Dict[str, Any]]:
        """Load configuration from file."""
        if config_file:
            config_path = Path(config_file)
            if config_path.exists():
                return self._parse_config_file(config_path)
            logger.warning(f"Config file {config_path} not found, using defaults")
        else:
            for config_path in self.config_paths:
                if config_path.exists():
                    return self._parse_config_file(config_path)

        return None

    def _parse_config_file(self, config_path: Path) -> Dict[str, Any]:
        """Parse configuration file based on extension."""
        suffix = config_path.suffix.lower()
        if suffix not in (".yaml", ".yml", ".json"):
            raise ValueError(f"Unsupported config file format: {config_path.suffix}")

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                if suffix == ".json":
                    return json.load(f) or {}
                return yaml.safe_load(f) or {}
        except (OSError, json.JSONDecodeError, yaml.YAMLError) as e:
            raise ValueError(f"Failed to parse config file {config_path}: {e}")

    def _load_from_environment(self) -> Dict[str, Any]:
        """Load configuration from environment variables."""
        config: Dict[str, Any] = {}

        env_mappings = {
            # Logging
            f"{self.env_prefix}LOG_LEVEL": ("logging", "level"),
            f"{self.env_prefix}LOG_FILE": ("logging", "file_path"),
            # Cache
            f"{self.env_prefix}CACHE_DIR": ("cache", "directory"),
            f"{self.env_prefix}CACHE_TTL": ("cache", "default_ttl"),
            f"{self.env_prefix}CACHE_ENABLED": ("cache", "enabled"),
            # Client
            f"{self.env_prefix}TIMEOUT": ("client", "default_timeout"),
            f"{self.env_prefix}VERIFY_SSL": ("client", "verify_ssl"),
            f"{self.env_prefix}USER_AGENT": ("client", "user_agent"),
        }

        # String-valued settings are passed through untouched
        raw_values = {
            f"{self.env_prefix}LOG_LEVEL",
            f"{self.env_prefix}LOG_FILE",
            f"{self.env_prefix}CACHE_DIR",
            f"{self.env_prefix}USER_AGENT",
        }

        for env_var, config_path in env_mappings.items():
            value = os.getenv(env_var)
            if value is not None:
                if env_var in raw_values:
                    converted_value: Any = value
                else:
                    converted_value = self._convert_env_value(value)

                current = config
                for key in config_path[:-1]:
                    current = current.setdefault(key, {})
                current[config_path[-1]] = converted_value

        return config

    def _convert_env_value(self, value: str) -> Any:
        """Convert environment variable string to appropriate type."""
        lower = value.lower()
        if lower in ("true", "yes", "on"):
            return True
        if lower in ("false", "no", "off"):
            return False

        try:
            if "." in value:
                return float(value)
            return int(value)
        except ValueError:
            pass

        return value

    def _deep_merge(
        self, base: Dict[str, Any], override: Dict[str, Any]
    ) -> Dict[str, Any]:
        """Deep merge two dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if (
                key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)
            ):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result

    def save_config(self, config: GlobalConfig, config_file: Union[str, Path]) -> None:
        """Save configuration to a JSON or YAML file."""
        config_path = Path(config_file)
        suffix = config_path.suffix.lower()
        if suffix not in (".yaml", ".yml", ".json"):
            raise ValueError(f"Unsupported config file format: {config_path.suffix}")

        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_data = config.model_dump(mode="json")

        with open(config_path, "w", encoding="utf-8") as f:
            if suffix == ".json":
                json.dump(config_data, f, indent=2)
            else:
                yaml.safe_dump(config_data, f, default_flow_style=False, indent=2)


def load_config(config_file: Optional[Union[str, Path]] = None) -> GlobalConfig:
    """Load configuration with the default loader."""
    return ConfigLoader().load_config(config_file)
