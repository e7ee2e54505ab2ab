"""
Package record data model for packages discovered in manager caches.
"""

from dataclasses import dataclass
from typing import Union
from enum import Enum


class PackageManager(str, Enum):
    """Supported package managers."""
    NPM = "npm"
    PNPM = "pnpm"
    YARN = "yarn"
    BUN = "bun"
    DENO = "deno"

    @classmethod
    def from_label(cls, label: Union[str, "PackageManager"]) -> "PackageManager":
        """
        Resolve a manager label to its enum member.

        Args:
            label: Manager label (e.g., 'npm') or member

        Returns:
            Matching PackageManager member

        Raises:
            ValueError: If the label names no supported manager
        """
        if isinstance(label, cls):
            return label
        try:
            return cls(str(label).lower())
        except ValueError:
            valid = ", ".join(m.value for m in cls)
            raise ValueError(f"Unknown package manager: {label!r}. Valid managers: {valid}") from None

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class PackageRecord:
    """
    A package found in a manager cache.

    The manager is the label of the scanning rule that found the manifest,
    never a value read from the manifest itself.
    """

    name: str
    version: str
    manager: PackageManager
    cache_path: str

    def __post_init__(self):
        """Validate and normalize fields."""
        if not isinstance(self.name, str) or not self.name:
            raise ValueError("Package name must be a non-empty string")
        if not isinstance(self.version, str) or not self.version:
            raise ValueError("Package version must be a non-empty string")

        # Frozen dataclass, normalize through object.__setattr__
        object.__setattr__(self, "manager", PackageManager.from_label(self.manager))
        object.__setattr__(self, "cache_path", str(self.cache_path))

    @property
    def full_name(self) -> str:
        """Get the package name with version."""
        return f"{self.name}@{self.version}"

    def __str__(self) -> str:
        return f"{self.full_name} ({self.manager.value})"
