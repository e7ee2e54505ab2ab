"""
Cache scanning components for Node.js package managers.
"""

from .base_scanner import ManifestParser
from .manifest_parser import PackageJsonParser
from .locator import ManifestLocator, locate
from .paths import (
    PathResolver, get_home_directory,
    npm_paths, pnpm_paths, yarn_paths, bun_paths, deno_paths
)
from .managers import (
    ManagerDescriptor, DEFAULT_MANAGERS, get_manager_descriptor, select_managers
)

__all__ = [
    "ManifestParser",
    "PackageJsonParser",
    "ManifestLocator",
    "locate",
    "PathResolver",
    "get_home_directory",
    "npm_paths",
    "pnpm_paths",
    "yarn_paths",
    "bun_paths",
    "deno_paths",
    "ManagerDescriptor",
    "DEFAULT_MANAGERS",
    "get_manager_descriptor",
    "select_managers"
]
