"""
Scan orchestrator that fans out across package managers and merges results.
"""

import logging
import os
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any, List, Mapping, Optional, Sequence

from .config import get_config, AppConfig
from .error_handling import ConfigurationError
from .models import DiagnosticKind, PackageRecord, ScanDiagnostic, ScanReport
from .scanners import (
    ManagerDescriptor, ManifestLocator, get_home_directory, select_managers
)

logger = logging.getLogger(__name__)

_AUTO: Any = object()


class ScanOrchestrator:
    """
    Scans every enabled package manager in parallel.

    Each manager runs as one worker that builds its batch with no shared
    state, then merges it into the aggregate under a lock exactly once.
    A manager that fails contributes nothing and is recorded as a
    diagnostic; the scan itself always returns a report.

    Every call to scan() owns its aggregate and lock, so an orchestrator
    can be used repeatedly and from several threads at once.
    """

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        managers: Optional[Sequence[ManagerDescriptor]] = None,
        locator: Optional[ManifestLocator] = None,
        home: Optional[Path] = _AUTO,
        environ: Optional[Mapping[str, str]] = None
    ):
        """
        Initialize the scan orchestrator.

        Args:
            config: Application configuration
            managers: Manager descriptors to scan (defaults to the configured managers)
            locator: Manifest locator (defaults to one built from configuration)
            home: Home directory override; None means the home directory is unknown
            environ: Environment mapping (defaults to os.environ at scan time)
        """
        self.config = config or get_config()

        if managers is None:
            try:
                managers = select_managers(self.config.scanning.managers)
            except ValueError as e:
                raise ConfigurationError(str(e), "scanning", "managers", cause=e) from e
        self.managers = tuple(managers)

        self.locator = locator or ManifestLocator(
            manifest_filename=self.config.scanning.manifest_filename,
            follow_symlinks=self.config.scanning.follow_symlinks
        )
        self._home = home
        self._environ = environ

    def scan(self) -> ScanReport:
        """
        Scan all managers and aggregate their packages.

        Returns:
            ScanReport with records from every manager that succeeded
        """
        start = time.monotonic()
        report = ScanReport()
        if not self.managers:
            logger.info("No package managers enabled")
            return report

        home = get_home_directory() if self._home is _AUTO else self._home
        environ = dict(os.environ) if self._environ is None else self._environ
        if home is None:
            logger.info("Home directory unknown, managers will report no cache roots")

        lock = threading.Lock()
        workers = len(self.managers)
        if self.config.scanning.max_workers:
            workers = min(workers, self.config.scanning.max_workers)

        logger.info(f"Scanning {len(self.managers)} package managers with {workers} workers")

        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="node-packages") as executor:
            futures = [
                executor.submit(self._scan_manager, descriptor, home, environ, report, lock)
                for descriptor in self.managers
            ]
            for future in futures:
                future.result()

        report.duration = time.monotonic() - start
        logger.info(
            f"Found {report.package_count} packages in {report.duration:.2f}s"
            + (f", failed managers: {', '.join(m.value for m in report.failed_managers)}"
               if report.failed_managers else "")
        )
        return report

    def scan_all(self) -> List[PackageRecord]:
        """
        Scan all managers and return only the records.

        Returns:
            Packages from every manager; empty when nothing was found
        """
        return self.scan().records

    def _scan_manager(
        self,
        descriptor: ManagerDescriptor,
        home: Optional[Path],
        environ: Mapping[str, str],
        report: ScanReport,
        lock: threading.Lock
    ) -> None:
        """Scan one manager, then merge its batch into the report."""
        extra_paths = self.config.scanning.extra_paths.get(descriptor.label, [])

        try:
            batch = descriptor.scan(self.locator, home, environ, extra_paths)
        except Exception as e:
            logger.warning(f"Error scanning {descriptor.label}: {e}", extra={"manager": descriptor.label})
            failure = ScanDiagnostic(
                kind=DiagnosticKind.MANAGER_FAILURE,
                manager=descriptor.manager,
                path=None,
                message=str(e)
            )
            with lock:
                report.failed_managers.append(descriptor.manager)
                report.manager_counts[descriptor.manager] = 0
                report.diagnostics.append(failure)
            return

        with lock:
            report.records.extend(batch.records)
            report.diagnostics.extend(batch.diagnostics)
            report.manager_counts[descriptor.manager] = len(batch.records)

        logger.debug(f"Merged {len(batch.records)} {descriptor.label} packages")


def scan_all() -> List[PackageRecord]:
    """
    Produce the current package inventory using the global configuration.

    Returns:
        Packages from every configured manager
    """
    return ScanOrchestrator().scan_all()
