"""
Parser for package.json manifests found in manager caches.
"""

import json
from typing import Tuple

from ..error_handling import ManifestError
from .base_scanner import ManifestParser

MANIFEST_DECODE_ERROR = "MANIFEST_DECODE"
MANIFEST_FIELDS_ERROR = "MANIFEST_FIELDS"


class PackageJsonParser(ManifestParser):
    """
    Reads the name and version of a package.json manifest.

    Only the `name` and `version` fields are consulted; both must be
    non-empty strings. Every other field is ignored.
    """

    def __init__(self, manifest_filename: str = "package.json"):
        self._manifest_filename = manifest_filename

    @property
    def manifest_filename(self) -> str:
        return self._manifest_filename

    def parse_manifest(self, content: bytes, file_path: str) -> Tuple[str, str]:
        try:
            data = json.loads(content)
        except (ValueError, UnicodeDecodeError, RecursionError) as e:
            # Nesting deeper than the interpreter stack is a decode failure too
            raise ManifestError(
                f"Invalid JSON in manifest: {e}",
                file_path=file_path,
                error_code=MANIFEST_DECODE_ERROR,
                cause=e
            ) from e

        if not isinstance(data, dict):
            raise ManifestError(
                f"Manifest must be a JSON object, got {type(data).__name__}",
                file_path=file_path,
                error_code=MANIFEST_DECODE_ERROR
            )

        name = data.get("name")
        version = data.get("version")

        # Wrong-typed fields are a shape error, not merely missing
        for field_name, value in (("name", name), ("version", version)):
            if value is not None and not isinstance(value, str):
                raise ManifestError(
                    f"Manifest field '{field_name}' must be a string",
                    file_path=file_path,
                    error_code=MANIFEST_DECODE_ERROR
                )

        if not name or not version:
            raise ManifestError(
                "Manifest is missing a non-empty name or version",
                file_path=file_path,
                error_code=MANIFEST_FIELDS_ERROR
            )

        return name, version
