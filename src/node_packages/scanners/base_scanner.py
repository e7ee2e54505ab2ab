"""
Base classes and interfaces for manifest parsing components.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Tuple


class ManifestParser(ABC):
    """Abstract base class for package manifest parsers."""

    @property
    @abstractmethod
    def manifest_filename(self) -> str:
        """
        Get the exact file name this parser reads.

        Returns:
            Manifest file name (e.g., 'package.json')
        """
        pass

    def can_parse(self, file_path: Path) -> bool:
        """
        Check if this parser can handle the given file.

        Args:
            file_path: Path to the candidate manifest

        Returns:
            True if the file name matches exactly
        """
        return file_path.name == self.manifest_filename

    @abstractmethod
    def parse_manifest(self, content: bytes, file_path: str) -> Tuple[str, str]:
        """
        Extract the package identity from manifest content.

        Args:
            content: Raw manifest bytes
            file_path: Path the content was read from, for error context

        Returns:
            Tuple of (name, version), both non-empty

        Raises:
            ManifestError: If the content does not describe a package
        """
        pass
