"""
Diagnostic records collected alongside scan results.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from .package import PackageManager, PackageRecord


class DiagnosticKind(Enum):
    """Kinds of contained scan failures, smallest scope first."""
    READ_FAILURE = "read_failure"
    DECODE_FAILURE = "decode_failure"
    MISSING_FIELDS = "missing_fields"
    TRAVERSAL_FAILURE = "traversal_failure"
    ROOT_FAILURE = "root_failure"
    MANAGER_FAILURE = "manager_failure"


@dataclass(frozen=True)
class ScanDiagnostic:
    """A failure that was contained during a scan."""
    kind: DiagnosticKind
    manager: Optional[PackageManager]
    path: Optional[str]
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "manager": self.manager.value if self.manager else None,
            "path": self.path,
            "message": self.message,
        }

    def __str__(self) -> str:
        location = f" at {self.path}" if self.path else ""
        manager = f"[{self.manager.value}] " if self.manager else ""
        return f"{manager}{self.kind.value}{location}: {self.message}"


@dataclass
class LocateResult:
    """
    Result of walking one root directory.

    Records and diagnostics are kept apart so callers can merge results
    without inspecting failures.
    """
    records: List[PackageRecord] = field(default_factory=list)
    diagnostics: List[ScanDiagnostic] = field(default_factory=list)

    def extend(self, other: "LocateResult") -> None:
        """Append another result's records and diagnostics."""
        self.records.extend(other.records)
        self.diagnostics.extend(other.diagnostics)

    def __len__(self) -> int:
        return len(self.records)


@dataclass
class ScanReport:
    """Aggregate result of scanning every enabled manager."""
    records: List[PackageRecord] = field(default_factory=list)
    diagnostics: List[ScanDiagnostic] = field(default_factory=list)
    manager_counts: Dict[PackageManager, int] = field(default_factory=dict)
    failed_managers: List[PackageManager] = field(default_factory=list)
    duration: float = 0.0

    @property
    def package_count(self) -> int:
        return len(self.records)

    @property
    def has_failures(self) -> bool:
        return bool(self.failed_managers)

    def diagnostics_of(self, kind: DiagnosticKind) -> List[ScanDiagnostic]:
        """
        Get diagnostics of a single kind.

        Args:
            kind: Diagnostic kind to filter on

        Returns:
            Matching diagnostics in collection order
        """
        return [d for d in self.diagnostics if d.kind == kind]

    def get_statistics(self) -> Dict[str, Any]:
        """Summarize the scan for display."""
        return {
            "total_packages": self.package_count,
            "packages_by_manager": {m.value: c for m, c in self.manager_counts.items()},
            "failed_managers": [m.value for m in self.failed_managers],
            "diagnostics": len(self.diagnostics),
            "duration": round(self.duration, 3),
        }
