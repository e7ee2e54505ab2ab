"""
Static descriptors for the supported package managers.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Union

from ..error_handling import ManagerScanError, TraversalError
from ..models import DiagnosticKind, LocateResult, PackageManager, ScanDiagnostic
from .locator import ManifestLocator
from .paths import (
    PathResolver, bun_paths, deno_paths, npm_paths, pnpm_paths, yarn_paths
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ManagerDescriptor:
    """
    A package manager label and the routine that scans its caches.

    The scan resolves candidate roots and walks each independently; a root
    that cannot be walked is logged and left out, the others still count.
    """

    manager: PackageManager
    resolve_paths: PathResolver

    @property
    def label(self) -> str:
        return self.manager.value

    def candidate_paths(
        self,
        home: Optional[Path],
        environ: Mapping[str, str],
        extra_paths: Sequence[Union[str, Path]] = ()
    ) -> List[Path]:
        """
        Get the candidate cache roots for this manager.

        Args:
            home: User home directory, or None if unknown
            environ: Environment mapping for manager overrides
            extra_paths: Additional configured roots, appended after the defaults

        Returns:
            Candidate roots in scan order
        """
        paths = list(self.resolve_paths(home, environ))
        paths.extend(Path(p) for p in extra_paths)
        return paths

    def scan(
        self,
        locator: ManifestLocator,
        home: Optional[Path],
        environ: Mapping[str, str],
        extra_paths: Sequence[Union[str, Path]] = ()
    ) -> LocateResult:
        """
        Scan every candidate root of this manager.

        Args:
            locator: Manifest locator to walk each root with
            home: User home directory, or None if unknown
            environ: Environment mapping for manager overrides
            extra_paths: Additional configured roots

        Returns:
            Union of all roots' records and diagnostics

        Raises:
            ManagerScanError: If the candidate roots cannot be resolved
        """
        try:
            paths = self.candidate_paths(home, environ, extra_paths)
        except Exception as e:
            raise ManagerScanError(
                f"Failed to resolve cache paths: {e}",
                manager=self.label,
                cause=e
            ) from e

        result = LocateResult()
        for path in paths:
            try:
                result.extend(locator.locate(path, self.manager))
            except TraversalError as e:
                logger.warning(
                    f"Skipping {self.label} cache root {path}: {e.message}",
                    extra={"manager": self.label, "path": str(path)}
                )
                result.diagnostics.append(ScanDiagnostic(
                    kind=DiagnosticKind.ROOT_FAILURE,
                    manager=self.manager,
                    path=str(path),
                    message=e.message
                ))

        logger.debug(f"Scanned {len(paths)} {self.label} roots, found {len(result.records)} packages")
        return result


DEFAULT_MANAGERS = (
    ManagerDescriptor(PackageManager.NPM, npm_paths),
    ManagerDescriptor(PackageManager.PNPM, pnpm_paths),
    ManagerDescriptor(PackageManager.YARN, yarn_paths),
    ManagerDescriptor(PackageManager.BUN, bun_paths),
    ManagerDescriptor(PackageManager.DENO, deno_paths),
)

_DESCRIPTORS_BY_MANAGER: Dict[PackageManager, ManagerDescriptor] = {
    descriptor.manager: descriptor for descriptor in DEFAULT_MANAGERS
}


def get_manager_descriptor(label: Union[str, PackageManager]) -> ManagerDescriptor:
    """
    Look up the descriptor for a manager label.

    Raises:
        ValueError: If the label names no supported manager
    """
    return _DESCRIPTORS_BY_MANAGER[PackageManager.from_label(label)]


def select_managers(labels: Iterable[Union[str, PackageManager]]) -> List[ManagerDescriptor]:
    """Get descriptors for the given labels, in default order, without repeats."""
    wanted = {PackageManager.from_label(label) for label in labels}
    return [d for d in DEFAULT_MANAGERS if d.manager in wanted]
