"""
Pool and device records parsed from `zpool status`.

Every enumeration is closed: text that is present but unknown maps to an
explicit ``UNRECOGNIZED`` member, while a field that is absent altogether is
``None`` on the record. Enum values are the display names used in metric
HELP text.
"""
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple


class PoolState(Enum):
    """Health of a pool or of a single device (same vocabulary)."""
    UNKNOWN_MISSING = "UnknownMissing"
    UNRECOGNIZED = "Unrecognized"
    ONLINE = "Online"
    OFFLINE = "Offline"
    SPLIT = "Split"
    DEGRADED = "Degraded"
    FAULTED = "Faulted"
    SUSPENDED = "Suspended"
    REMOVED = "Removed"
    UNAVAIL = "Unavail"


class PoolStatusDescription(Enum):
    """Classification of the free-text `status:` paragraph."""
    UNRECOGNIZED = "Unrecognized"
    FEATURES_AVAILABLE = "FeaturesAvailable"
    SUFFICIENT_REPLICAS_FOR_MISSING = "SufficientReplicasForMissing"
    DEVICE_REMOVED = "DeviceRemoved"
    DATA_CORRUPTION = "DataCorruption"


class ScanStatus(Enum):
    """Last scrub/resilver activity reported on the `scan:` line."""
    UNRECOGNIZED = "Unrecognized"
    SCRUB_REPAIRED = "ScrubRepaired"
    RESILVERED = "Resilvered"
    SCRUB_IN_PROGRESS = "ScrubInProgress"
    SCRUB_CANCELED = "ScrubCanceled"
    NEVER_SCANNED = "NeverScanned"


class ErrorStatus(Enum):
    """Classification of the `errors:` line."""
    UNKNOWN_MISSING = "UnknownMissing"
    UNRECOGNIZED = "Unrecognized"
    OK = "Ok"
    DATA_ERRORS = "DataErrors"


@dataclass(frozen=True)
class ScanInfo:
    """Scan kind with the time it finished (or started, when in progress)."""
    kind: ScanStatus
    timestamp: Optional[datetime] = None


@dataclass(frozen=True)
class DeviceRecord:
    """One row of the `config:` device table."""
    depth: int
    raw_name: str
    state: PoolState
    read_errors: int
    write_errors: int
    checksum_errors: int
    label: str

    def __post_init__(self):
        if not self.label:
            raise ValueError("Device label cannot be empty")
        if min(self.read_errors, self.write_errors, self.checksum_errors) < 0:
            raise ValueError("Device error counts cannot be negative")


@dataclass(frozen=True)
class PoolRecord:
    """Sealed result for one pool; produced by the assembler, never mutated."""
    name: str
    state: Optional[PoolState] = None
    status_description: Optional[PoolStatusDescription] = None
    scan: Optional[ScanInfo] = None
    error_state: Optional[ErrorStatus] = None
    devices: Tuple[DeviceRecord, ...] = field(default_factory=tuple)

    def __post_init__(self):
        if not self.name:
            raise ValueError("Pool name cannot be empty")

    def with_scan(self, scan: Optional[ScanInfo]) -> 'PoolRecord':
        return replace(self, scan=scan)
