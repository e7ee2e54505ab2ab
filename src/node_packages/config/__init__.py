"""
Configuration management for the node packages inventory.
"""

from .config_manager import (
    ConfigManager, AppConfig, ScanningConfig, OutputConfig, LoggingConfig,
    get_config_manager, get_config, reset_config_manager
)

__all__ = [
    "ConfigManager",
    "AppConfig",
    "ScanningConfig",
    "OutputConfig",
    "LoggingConfig",
    "get_config_manager",
    "get_config",
    "reset_config_manager"
]
