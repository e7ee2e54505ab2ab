"""
Row shaping for the node_packages query table.

The host query engine sees four text columns; every record maps to one
row keyed by column name.
"""

from typing import Dict, Iterable, List

from .models import PackageRecord

TABLE_NAME = "node_packages"

COLUMNS = ("name", "version", "manager", "cache_path")


def to_row(record: PackageRecord) -> Dict[str, str]:
    """Map a record to a row of string columns."""
    return {
        "name": record.name,
        "version": record.version,
        "manager": record.manager.value,
        "cache_path": record.cache_path,
    }


def generate_rows(records: Iterable[PackageRecord]) -> List[Dict[str, str]]:
    """
    Map records to table rows.

    Args:
        records: Package records from a scan

    Returns:
        One row per record, in input order; empty when there are no records
    """
    return [to_row(record) for record in records]
