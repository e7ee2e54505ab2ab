"""
Custom exceptions for the node packages inventory.
"""

from typing import Optional, Dict, Any


class NodePackagesError(Exception):
    """
    Base exception for all node packages inventory errors.

    This is the root exception class that all other custom exceptions
    inherit from, providing common functionality and attributes.
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None
    ):
        """
        Initialize node packages error.

        Args:
            message: Error message
            error_code: Optional error code for categorization
            context: Additional context information
            cause: Original exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.context = context or {}
        self.cause = cause

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary representation."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "context": self.context,
            "cause": str(self.cause) if self.cause else None
        }

    def __str__(self) -> str:
        """String representation of the error."""
        parts = [self.message]

        if self.error_code:
            parts.append(f"Code: {self.error_code}")

        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            parts.append(f"Context: {context_str}")

        if self.cause:
            parts.append(f"Caused by: {self.cause}")

        return " | ".join(parts)


class ManifestError(NodePackagesError):
    """
    Exception for manifest read and decode errors.

    Raised by manifest parsers; the locator turns it into a diagnostic
    and skips the file.
    """

    def __init__(
        self,
        message: str,
        file_path: Optional[str] = None,
        **kwargs
    ):
        """
        Initialize manifest error.

        Args:
            message: Error message
            file_path: Path to the manifest that caused the error
            **kwargs: Additional arguments for base class
        """
        context = kwargs.get('context', {})
        if file_path:
            context['file_path'] = file_path

        kwargs['context'] = context
        super().__init__(message, **kwargs)

        self.file_path = file_path


class TraversalError(NodePackagesError):
    """
    Exception for a directory walk that cannot start.

    Subtree errors below the root never raise; only a root that exists
    but cannot be listed does.
    """

    def __init__(
        self,
        message: str,
        root_path: Optional[str] = None,
        **kwargs
    ):
        """
        Initialize traversal error.

        Args:
            message: Error message
            root_path: Root directory of the failed walk
            **kwargs: Additional arguments for base class
        """
        context = kwargs.get('context', {})
        if root_path:
            context['root_path'] = root_path

        kwargs['context'] = context
        super().__init__(message, **kwargs)

        self.root_path = root_path


class ManagerScanError(NodePackagesError):
    """Exception for a package manager scan that failed as a whole."""

    def __init__(
        self,
        message: str,
        manager: Optional[str] = None,
        **kwargs
    ):
        context = kwargs.get('context', {})
        if manager:
            context['manager'] = manager

        kwargs['context'] = context
        super().__init__(message, **kwargs)

        self.manager = manager


class ConfigurationError(NodePackagesError):
    """
    Exception for configuration errors.

    This exception is raised when there are issues with
    configuration loading, validation, or usage.
    """

    def __init__(
        self,
        message: str,
        config_section: Optional[str] = None,
        config_key: Optional[str] = None,
        **kwargs
    ):
        """
        Initialize configuration error.

        Args:
            message: Error message
            config_section: Configuration section with error
            config_key: Specific configuration key with error
            **kwargs: Additional arguments for base class
        """
        context = kwargs.get('context', {})
        if config_section:
            context['config_section'] = config_section
        if config_key:
            context['config_key'] = config_key

        kwargs['context'] = context
        super().__init__(message, **kwargs)

        self.config_section = config_section
        self.config_key = config_key
