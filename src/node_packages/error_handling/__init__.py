"""
Error handling for the node packages inventory.
"""

from .exceptions import (
    NodePackagesError, ManifestError, TraversalError,
    ManagerScanError, ConfigurationError
)

__all__ = [
    "NodePackagesError",
    "ManifestError",
    "TraversalError",
    "ManagerScanError",
    "ConfigurationError"
]
