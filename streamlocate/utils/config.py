"""
Configuration management for streamlocate.

Handles loading and merging configuration from:
- Default configuration file
- User configuration file
- Environment variables
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

DEFAULT_CHUNK_SIZE = 8192

_DEFAULTS: Dict[str, Any] = {
    "stream": {"chunk_size": DEFAULT_CHUNK_SIZE},
    "logging": {"level": "INFO", "format": "json", "output": "stderr"},
}


class Config:
    """Configuration manager for streamlocate."""

    def __init__(self, config_file: Optional[str] = None):
        """
        Initialize configuration.

        Args:
            config_file: Path to a YAML configuration file merged over the defaults
        """
        self._config: Dict[str, Any] = self._deep_merge({}, _DEFAULTS)
        self._load_default_config()

        if config_file:
            self._load_config_file(config_file)

        self._apply_env_overrides()

    def _load_default_config(self) -> None:
        """Load default configuration."""
        default_config_path = Path(__file__).parent.parent.parent / "config" / "default.yaml"
        if default_config_path.exists():
            self._load_config_file(str(default_config_path))

    def _load_config_file(self, config_file: str) -> None:
        """
        Load configuration from YAML file.

        Args:
            config_file: Path to YAML configuration file

        Raises:
            ValueError: If the file does not hold a mapping
        """
        with open(config_file, "r") as f:
            file_config = yaml.safe_load(f)

        if file_config is None:
            return
        if not isinstance(file_config, dict):
            raise ValueError(f"Configuration file must contain a mapping: {config_file}")

        self._merge_config(file_config)

    def _merge_config(self, new_config: Dict[str, Any]) -> None:
        self._config = self._deep_merge(self._config, new_config)

    def _deep_merge(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            elif isinstance(value, dict):
                result[key] = self._deep_merge({}, value)
            else:
                result[key] = value
        return result

    def _apply_env_overrides(self) -> None:
        """Apply environment variable overrides."""
        if chunk_size := os.getenv("STREAMLOCATE_CHUNK_SIZE"):
            try:
                self.set("stream.chunk_size", int(chunk_size))
            except ValueError:
                raise ValueError(
                    f"STREAMLOCATE_CHUNK_SIZE must be an integer, got {chunk_size!r}"
                ) from None

        if log_level := os.getenv("LOG_LEVEL"):
            self.set("logging.level", log_level)

        if log_format := os.getenv("LOG_FORMAT"):
            self.set("logging.format", log_format)

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value using dot notation.

        Args:
            key: Configuration key in dot notation (e.g., "stream.chunk_size")
            default: Default value if key not found

        Returns:
            Configuration value
        """
        value: Any = self._config
        for k in key.split("."):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        return value

    def set(self, key: str, value: Any) -> None:
        """
        Set configuration value using dot notation.

        Args:
            key: Configuration key in dot notation
            value: Value to set
        """
        keys = key.split(".")
        config = self._config
        for k in keys[:-1]:
            if k not in config:
                config[k] = {}
            config = config[k]
        config[keys[-1]] = value

    @property
    def chunk_size(self) -> int:
        """Bytes pulled from a source per read."""
        return int(self.get("stream.chunk_size", DEFAULT_CHUNK_SIZE))

    def to_dict(self) -> Dict[str, Any]:
        return self._deep_merge({}, self._config)


# Global configuration instance
_config: Optional[Config] = None


def get_config(config_file: Optional[str] = None) -> Config:
    """
    Get global configuration instance.

    Args:
        config_file: Optional configuration file path

    Returns:
        Configuration instance
    """
    global _config
    if _config is None:
        _config = Config(config_file)
    return _config


def reset_config() -> None:
    """Reset global configuration (mainly for testing)."""
    global _config
    _config = None
