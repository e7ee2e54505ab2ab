"""
Manifest locator that walks a cache root for package manifests.
"""

import logging
import os
import stat
from pathlib import Path
from typing import List, Optional, Set, Tuple, Union

from ..error_handling import ManifestError, TraversalError
from ..models import (
    DiagnosticKind, LocateResult, PackageManager, PackageRecord, ScanDiagnostic
)
from .base_scanner import ManifestParser
from .manifest_parser import MANIFEST_FIELDS_ERROR, PackageJsonParser

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class ManifestLocator:
    """
    Recursively finds package manifests beneath a root directory.

    A walk never raises for problems below the root: unreadable files,
    malformed manifests and unlistable subdirectories are skipped and
    reported as diagnostics on the returned LocateResult. The only failure
    is a root that exists but cannot be listed at all.
    """

    def __init__(
        self,
        manifest_filename: str = "package.json",
        follow_symlinks: bool = False,
        parser: Optional[ManifestParser] = None
    ):
        """
        Initialize the locator.

        Args:
            manifest_filename: Exact file name of manifests to read
            follow_symlinks: Whether to descend into symlinked directories
            parser: Manifest parser (defaults to a PackageJsonParser)
        """
        self.parser = parser or PackageJsonParser(manifest_filename)
        self.follow_symlinks = follow_symlinks

    def locate(self, root_path: PathLike, manager: Union[str, PackageManager]) -> LocateResult:
        """
        Walk a root directory and collect every valid manifest.

        Args:
            root_path: Directory to walk
            manager: Label attached to every record found

        Returns:
            LocateResult with records in walk order and skipped-entry diagnostics

        Raises:
            TraversalError: If the root exists but cannot be listed
            ValueError: If the manager label is unknown
        """
        manager = PackageManager.from_label(manager)
        root = os.path.abspath(os.fspath(root_path))
        result = LocateResult()

        if not os.path.exists(root):
            logger.debug(f"Cache root does not exist: {root}")
            return result

        if not os.path.isdir(root):
            if self.parser.can_parse(Path(root)):
                self._read_manifest(root, manager, result)
            return result

        root_errors: List[OSError] = []

        def on_walk_error(error: OSError) -> None:
            failed_path = error.filename or root
            if os.path.abspath(failed_path) == root:
                root_errors.append(error)
                return
            logger.debug(f"Skipping unreadable directory {failed_path}: {error}")
            result.diagnostics.append(ScanDiagnostic(
                kind=DiagnosticKind.TRAVERSAL_FAILURE,
                manager=manager,
                path=failed_path,
                message=error.strerror or str(error)
            ))

        visited: Set[Tuple[int, int]] = set()

        for dirpath, dirnames, filenames in os.walk(
            root, onerror=on_walk_error, followlinks=self.follow_symlinks
        ):
            if self.follow_symlinks:
                dirnames[:] = self._prune_visited(dirpath, dirnames, visited)
            dirnames.sort()

            for filename in sorted(filenames):
                path = os.path.join(dirpath, filename)
                if self.parser.can_parse(Path(path)):
                    self._read_manifest(path, manager, result)

        if root_errors:
            error = root_errors[0]
            raise TraversalError(
                f"Cannot walk cache root: {error.strerror or error}",
                root_path=root,
                cause=error
            ) from error

        logger.debug(
            f"Found {len(result.records)} {manager.value} manifests under {root} "
            f"({len(result.diagnostics)} skipped)"
        )
        return result

    def _prune_visited(
        self,
        dirpath: str,
        dirnames: List[str],
        visited: Set[Tuple[int, int]]
    ) -> List[str]:
        """Drop subdirectories already walked through another link."""
        if not visited:
            try:
                st = os.stat(dirpath)
                visited.add((st.st_dev, st.st_ino))
            except OSError:
                pass

        kept = []
        for name in dirnames:
            try:
                st = os.stat(os.path.join(dirpath, name))
            except OSError:
                continue
            key = (st.st_dev, st.st_ino)
            if key in visited:
                logger.debug(f"Skipping already visited directory {os.path.join(dirpath, name)}")
                continue
            visited.add(key)
            kept.append(name)
        return kept

    def _read_manifest(self, path: str, manager: PackageManager, result: LocateResult) -> None:
        """Read one manifest, appending either a record or a diagnostic."""
        try:
            # FIFOs and device nodes would block or never end
            if not stat.S_ISREG(os.stat(path).st_mode):
                logger.debug(f"Skipping manifest {path}: not a regular file")
                result.diagnostics.append(ScanDiagnostic(
                    kind=DiagnosticKind.READ_FAILURE,
                    manager=manager,
                    path=path,
                    message="Not a regular file"
                ))
                return
            with open(path, 'rb') as f:
                content = f.read()
        except OSError as e:
            logger.debug(f"Skipping unreadable manifest {path}: {e}")
            result.diagnostics.append(ScanDiagnostic(
                kind=DiagnosticKind.READ_FAILURE,
                manager=manager,
                path=path,
                message=e.strerror or str(e)
            ))
            return

        try:
            name, version = self.parser.parse_manifest(content, path)
        except ManifestError as e:
            if e.error_code == MANIFEST_FIELDS_ERROR:
                kind = DiagnosticKind.MISSING_FIELDS
            else:
                kind = DiagnosticKind.DECODE_FAILURE
            logger.debug(f"Skipping manifest {path}: {e.message}")
            result.diagnostics.append(ScanDiagnostic(
                kind=kind,
                manager=manager,
                path=path,
                message=e.message
            ))
            return

        result.records.append(PackageRecord(
            name=name,
            version=version,
            manager=manager,
            cache_path=path
        ))


def locate(root_path: PathLike, manager: Union[str, PackageManager]) -> List[PackageRecord]:
    """
    Find every valid package.json beneath a root directory.

    Args:
        root_path: Directory to walk
        manager: Label attached to every record found

    Returns:
        Records in walk order; empty if the root does not exist
    """
    return ManifestLocator().locate(root_path, manager).records
