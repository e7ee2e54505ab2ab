"""
Logger configuration and setup for the node packages inventory.
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional, Dict, Any
from dataclasses import dataclass

from ..config import get_config
from .log_formatter import StructuredFormatter, ColoredFormatter


@dataclass
class LoggerConfig:
    """Configuration for logging system."""
    level: str = "WARNING"
    file_path: Optional[str] = None
    format_string: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    max_file_size: int = 10  # MB
    backup_count: int = 5
    enable_console: bool = True
    enable_structured: bool = False
    enable_colors: bool = True


class LoggingManager:
    """
    Centralized logging manager for the node packages inventory.

    Configures the root logger once with a stderr console handler and an
    optional rotating file handler.
    """

    def __init__(self):
        """Initialize the logging manager."""
        self._handlers: Dict[str, logging.Handler] = {}
        self._configured = False
        self.config: Optional[LoggerConfig] = None

    def setup_logging(self, config: Optional[LoggerConfig] = None) -> None:
        """
        Set up the logging system with the given configuration.

        Args:
            config: Logging configuration (uses app config if not provided)
        """
        if self._configured:
            return

        if config is None:
            app_config = get_config()
            config = LoggerConfig(
                level=app_config.logging.level,
                file_path=app_config.logging.file,
                format_string=app_config.logging.format,
                max_file_size=app_config.logging.max_file_size,
                backup_count=app_config.logging.backup_count,
                enable_structured=app_config.logging.structured
            )

        self.config = config

        root_logger = logging.getLogger()
        root_logger.setLevel(self._get_log_level(config.level))

        # Remove handlers we installed on a previous setup
        for handler in self._handlers.values():
            root_logger.removeHandler(handler)
        self._handlers.clear()

        if config.enable_console:
            console_handler = self._create_console_handler(config)
            root_logger.addHandler(console_handler)
            self._handlers['console'] = console_handler

        if config.file_path:
            file_handler = self._create_file_handler(config)
            root_logger.addHandler(file_handler)
            self._handlers['file'] = file_handler

        logger = logging.getLogger(__name__)
        logger.debug(f"Logging system initialized with level: {config.level}")

        self._configured = True

    def _create_console_handler(self, config: LoggerConfig) -> logging.Handler:
        """Create console handler with appropriate formatter."""
        # Stdout carries inventory rows
        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(self._get_log_level(config.level))

        if config.enable_structured:
            formatter = StructuredFormatter()
        elif config.enable_colors and sys.stderr.isatty():
            formatter = ColoredFormatter(config.format_string)
        else:
            formatter = logging.Formatter(config.format_string)

        handler.setFormatter(formatter)
        return handler

    def _create_file_handler(self, config: LoggerConfig) -> logging.Handler:
        """Create rotating file handler, creating its directory."""
        Path(config.file_path).parent.mkdir(parents=True, exist_ok=True)
        handler = logging.handlers.RotatingFileHandler(
            filename=config.file_path,
            maxBytes=config.max_file_size * 1024 * 1024,  # Convert MB to bytes
            backupCount=config.backup_count,
            encoding='utf-8'
        )
        handler.setLevel(self._get_log_level(config.level))

        if config.enable_structured:
            formatter = StructuredFormatter()
        else:
            formatter = logging.Formatter(config.format_string)

        handler.setFormatter(formatter)
        return handler

    def _get_log_level(self, level_str: str) -> int:
        """Convert string log level to logging constant."""
        level_mapping = {
            'DEBUG': logging.DEBUG,
            'INFO': logging.INFO,
            'WARNING': logging.WARNING,
            'ERROR': logging.ERROR,
            'CRITICAL': logging.CRITICAL
        }
        return level_mapping.get(level_str.upper(), logging.INFO)

    def get_log_stats(self) -> Dict[str, Any]:
        """Get logging system statistics."""
        return {
            "configured": self._configured,
            "handlers_active": sorted(self._handlers),
            "current_level": self.config.level if self.config else "Unknown"
        }

    def close_handlers(self) -> None:
        """Close all handlers and clean up resources."""
        root_logger = logging.getLogger()
        for handler in self._handlers.values():
            root_logger.removeHandler(handler)
            handler.close()

        self._handlers.clear()
        self._configured = False


# Global logging manager instance
_logging_manager = LoggingManager()


def setup_logging(config: Optional[LoggerConfig] = None) -> None:
    """
    Set up the global logging system.

    Args:
        config: Logging configuration
    """
    _logging_manager.setup_logging(config)


def get_logging_stats() -> Dict[str, Any]:
    """Get logging system statistics."""
    return _logging_manager.get_log_stats()


def close_logging() -> None:
    """Close logging system and clean up resources."""
    _logging_manager.close_handlers()
