"""
Post-processing applied once to each pool after all of its lines are read.
"""
from datetime import datetime
from typing import Optional

from ..core.entities.pool_status import PoolRecord, PoolState, ScanInfo, ScanStatus

# 100 years; reported as scan age whenever there is no real scan timestamp
SCAN_AGE_SENTINEL_HOURS = 876000

SECONDS_PER_HOUR = 60.0 * 60.0

NEVER_SCANNED = ScanInfo(kind=ScanStatus.NEVER_SCANNED)


def is_probably_new_pool(record: PoolRecord) -> bool:
    """A freshly created healthy pool prints no `status:` and no `scan:` line."""
    return (
        record.state is PoolState.ONLINE
        and record.status_description is None
        and record.scan is None
    )


def finalize_pool(record: PoolRecord) -> PoolRecord:
    """Resolve the scan field of a sealed record.

    Only a confirmed ONLINE pool without status or scan headers becomes
    NeverScanned. Every other missing scan stays None and renders as
    UnknownMissing.
    """
    if is_probably_new_pool(record):
        return record.with_scan(NEVER_SCANNED)
    return record


def scan_age_hours(scan: Optional[ScanInfo], now: datetime) -> float:
    """Hours between the scan timestamp and ``now`` (sentinel when untimed)."""
    if scan is None or scan.timestamp is None:
        return float(SCAN_AGE_SENTINEL_HOURS)
    return (now - scan.timestamp).total_seconds() / SECONDS_PER_HOUR
