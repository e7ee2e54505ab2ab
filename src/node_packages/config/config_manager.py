"""
Configuration management system for the node packages inventory.
"""

import os
import yaml
from pathlib import Path
from typing import Dict, Any, List, Optional, Union
from dataclasses import dataclass, field
import logging

from ..error_handling import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_MANAGERS = ["npm", "pnpm", "yarn", "bun", "deno"]


@dataclass
class ScanningConfig:
    """Cache scanning configuration."""
    managers: list = field(default_factory=lambda: list(DEFAULT_MANAGERS))
    manifest_filename: str = "package.json"
    follow_symlinks: bool = False
    max_workers: Optional[int] = None
    extra_paths: dict = field(default_factory=dict)


@dataclass
class OutputConfig:
    """Output configuration for inventory rows."""
    format: str = "table"


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "WARNING"
    file: Optional[str] = None
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    max_file_size: int = 10  # MB
    backup_count: int = 5
    structured: bool = False


@dataclass
class AppConfig:
    """Complete application configuration."""
    scanning: ScanningConfig = field(default_factory=ScanningConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "scanning": dict(self.scanning.__dict__),
            "output": dict(self.output.__dict__),
            "logging": dict(self.logging.__dict__),
        }


class ConfigManager:
    """
    Manages application configuration from multiple sources.

    Configuration is loaded in the following order (later sources override earlier):
    1. Default configuration
    2. Configuration file
    3. Environment variables
    """

    VALID_FORMATS = {"table", "json", "yaml"}
    VALID_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}

    def __init__(
        self,
        config_file: Optional[Union[str, Path]] = None,
        environ: Optional[Dict[str, str]] = None
    ):
        """
        Initialize configuration manager.

        Args:
            config_file: Path to configuration file
            environ: Environment mapping (defaults to os.environ)
        """
        self.config_file = Path(config_file) if config_file else None
        self._environ = environ if environ is not None else os.environ
        self._config: Optional[AppConfig] = None
        self._env_var_mapping = self._create_env_var_mapping()

    def _create_env_var_mapping(self) -> Dict[str, str]:
        """Create mapping of environment variables to config paths."""
        return {
            # Scanning configuration
            "NODE_PACKAGES_MANAGERS": "scanning.managers",
            "NODE_PACKAGES_MANIFEST": "scanning.manifest_filename",
            "NODE_PACKAGES_FOLLOW_SYMLINKS": "scanning.follow_symlinks",
            "NODE_PACKAGES_MAX_WORKERS": "scanning.max_workers",

            # Output configuration
            "NODE_PACKAGES_OUTPUT_FORMAT": "output.format",

            # Logging configuration
            "NODE_PACKAGES_LOG_LEVEL": "logging.level",
            "NODE_PACKAGES_LOG_FILE": "logging.file",
            "NODE_PACKAGES_LOG_FORMAT": "logging.format",
        }

    def load_config(self) -> AppConfig:
        """
        Load configuration from all sources.

        Returns:
            Complete application configuration
        """
        if self._config is not None:
            return self._config

        # Start with default configuration
        config_dict = self._get_default_config()

        # Load from configuration file
        if self.config_file and self.config_file.exists():
            file_config = self._load_config_file(self.config_file)
            config_dict = self._merge_configs(config_dict, file_config)

        # Override with environment variables
        env_config = self._load_env_config()
        config_dict = self._merge_configs(config_dict, env_config)

        self._validate_config(config_dict)

        self._config = self._dict_to_config(config_dict)

        return self._config

    def _get_default_config(self) -> Dict[str, Any]:
        """Get default configuration values."""
        return AppConfig().to_dict()

    def _load_config_file(self, config_path: Path) -> Dict[str, Any]:
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to configuration file

        Returns:
            Configuration dictionary
        """
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                config = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(
                f"Failed to load config file {config_path}",
                cause=e
            ) from e

        if config is None:
            return {}
        if not isinstance(config, dict):
            raise ConfigurationError(f"Config file {config_path} must contain a mapping")

        logger.info(f"Loaded configuration from {config_path}")
        return config

    def _load_env_config(self) -> Dict[str, Any]:
        """
        Load configuration from environment variables.

        Returns:
            Configuration dictionary from environment variables
        """
        env_config = {}

        for env_var, config_path in self._env_var_mapping.items():
            value = self._environ.get(env_var)
            if value is not None:
                value = self._convert_env_value(value)
                # A single manager still needs to be a list
                if config_path == "scanning.managers" and isinstance(value, str):
                    value = [value]
                self._set_nested_value(env_config, config_path, value)

        return env_config

    def _convert_env_value(self, value: str) -> Any:
        """
        Convert environment variable string to appropriate type.

        Args:
            value: String value from environment variable

        Returns:
            Converted value
        """
        # Handle boolean values
        if value.lower() in ('true', 'yes', 'on'):
            return True
        elif value.lower() in ('false', 'no', 'off'):
            return False

        # Handle numeric values
        try:
            return int(value)
        except ValueError:
            pass

        # Handle list values (comma-separated)
        if ',' in value:
            return [item.strip() for item in value.split(',') if item.strip()]

        return value

    def _set_nested_value(self, config: Dict[str, Any], path: str, value: Any) -> None:
        """
        Set a nested configuration value using dot notation.

        Args:
            config: Configuration dictionary
            path: Dot-separated path (e.g., 'logging.level')
            value: Value to set
        """
        keys = path.split('.')
        current = config

        for key in keys[:-1]:
            if key not in current:
                current[key] = {}
            current = current[key]

        current[keys[-1]] = value

    def _merge_configs(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """
        Merge two configuration dictionaries.

        Args:
            base: Base configuration
            override: Override configuration

        Returns:
            Merged configuration
        """
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_configs(result[key], value)
            else:
                result[key] = value

        return result

    def _validate_config(self, config: Dict[str, Any]) -> None:
        """
        Validate configuration values.

        Args:
            config: Configuration dictionary

        Raises:
            ConfigurationError: If configuration is invalid
        """
        for section in ("scanning", "output", "logging"):
            if not isinstance(config.get(section, {}), dict):
                raise ConfigurationError(f"Section '{section}' must be a mapping", config_section=section)

        scanning = config.get("scanning", {})

        managers = scanning.get("managers", [])
        if not isinstance(managers, list):
            raise ConfigurationError("Managers must be a list", "scanning", "managers")
        for manager in managers:
            if str(manager).lower() not in DEFAULT_MANAGERS:
                raise ConfigurationError(
                    f"Invalid package manager: {manager}. Valid managers: {DEFAULT_MANAGERS}",
                    "scanning", "managers"
                )

        manifest = scanning.get("manifest_filename")
        if not isinstance(manifest, str) or not manifest or os.sep in manifest:
            raise ConfigurationError(
                f"Invalid manifest filename: {manifest!r}", "scanning", "manifest_filename"
            )

        max_workers = scanning.get("max_workers")
        if max_workers is not None and (not isinstance(max_workers, int) or max_workers < 1):
            raise ConfigurationError(
                f"Invalid max_workers: {max_workers!r}", "scanning", "max_workers"
            )

        extra_paths = scanning.get("extra_paths") or {}
        if not isinstance(extra_paths, dict):
            raise ConfigurationError("extra_paths must be a mapping", "scanning", "extra_paths")
        for manager, paths in extra_paths.items():
            if str(manager).lower() not in DEFAULT_MANAGERS:
                raise ConfigurationError(
                    f"Invalid package manager in extra_paths: {manager}", "scanning", "extra_paths"
                )
            if not isinstance(paths, list):
                raise ConfigurationError(
                    f"extra_paths for {manager} must be a list", "scanning", "extra_paths"
                )
            for path in paths:
                if not isinstance(path, str) or not path:
                    raise ConfigurationError(
                        f"extra_paths for {manager} must contain non-empty path strings, got {path!r}",
                        "scanning", "extra_paths"
                    )

        output_format = config.get("output", {}).get("format", "table")
        if output_format not in self.VALID_FORMATS:
            raise ConfigurationError(
                f"Invalid output format: {output_format}. Valid formats: {sorted(self.VALID_FORMATS)}",
                "output", "format"
            )

        log_level = str(config.get("logging", {}).get("level", "WARNING")).upper()
        if log_level not in self.VALID_LEVELS:
            raise ConfigurationError(
                f"Invalid log level: {log_level}. Valid levels: {sorted(self.VALID_LEVELS)}",
                "logging", "level"
            )

    def _dict_to_config(self, config_dict: Dict[str, Any]) -> AppConfig:
        """
        Convert configuration dictionary to AppConfig object.

        Args:
            config_dict: Configuration dictionary

        Returns:
            AppConfig object
        """
        try:
            scanning = ScanningConfig(**config_dict.get("scanning", {}))
            output = OutputConfig(**config_dict.get("output", {}))
            logging_config = LoggingConfig(**config_dict.get("logging", {}))
        except TypeError as e:
            raise ConfigurationError(f"Unknown configuration key: {e}", cause=e) from e

        scanning.managers = [str(m).lower() for m in scanning.managers]
        scanning.extra_paths = {
            str(manager).lower(): [str(Path(p).expanduser()) for p in paths]
            for manager, paths in (scanning.extra_paths or {}).items()
        }
        logging_config.level = str(logging_config.level).upper()

        return AppConfig(scanning=scanning, output=output, logging=logging_config)

    def get_config(self) -> AppConfig:
        """
        Get the current configuration.

        Returns:
            Application configuration
        """
        if self._config is None:
            return self.load_config()
        return self._config

    def reload_config(self) -> AppConfig:
        """
        Reload configuration from all sources.

        Returns:
            Reloaded application configuration
        """
        self._config = None
        return self.load_config()


# Global configuration manager instance
_config_manager: Optional[ConfigManager] = None


def get_config_manager(config_file: Optional[Union[str, Path]] = None) -> ConfigManager:
    """
    Get the global configuration manager instance.

    Args:
        config_file: Path to configuration file (only used on first call)

    Returns:
        ConfigManager instance
    """
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager(config_file)
    return _config_manager


def get_config() -> AppConfig:
    """
    Get the current application configuration.

    Returns:
        Application configuration
    """
    return get_config_manager().get_config()


def reset_config_manager() -> None:
    """Drop the global configuration manager so the next call reloads."""
    global _config_manager
    _config_manager = None
