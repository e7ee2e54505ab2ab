"""
Data models for the node packages inventory.
"""

from .package import PackageManager, PackageRecord
from .diagnostics import DiagnosticKind, ScanDiagnostic, LocateResult, ScanReport

__all__ = [
    "PackageManager",
    "PackageRecord",
    "DiagnosticKind",
    "ScanDiagnostic",
    "LocateResult",
    "ScanReport"
]
