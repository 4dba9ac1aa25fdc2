"""
Numeric codes reported for each enumerated state.

Keep the codes stable: they are stored in Prometheus history, so entries
may be appended but existing codes never change.

Bands:
    0-9    missing / unknown
    10-29  healthy
    30-49  transitional / benign
    50+    requires attention
"""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

from ..core.entities.pool_status import (
    ErrorStatus,
    PoolState,
    PoolStatusDescription,
    ScanStatus,
)


@dataclass(frozen=True)
class ValueEntry:
    name: str
    code: int
    variant: Optional[Enum] = None


class ValueTable:
    """Ordered association of enum variants to codes.

    The first entry is the default, reported when the field is absent (None).
    """

    def __init__(self, title: str, *entries: ValueEntry):
        self.title = title
        self.entries: Tuple[ValueEntry, ...] = entries
        self._by_variant: Dict[Enum, ValueEntry] = {}

        names = [entry.name for entry in entries]
        codes = [entry.code for entry in entries]
        if len(set(names)) != len(names):
            raise ValueError(f"{title}: duplicate value names {names}")
        if len(set(codes)) != len(codes):
            raise ValueError(f"{title}: duplicate value codes {codes}")

        if not entries:
            raise ValueError(f"{title}: no entries")
        self._default = entries[0]
        for entry in entries:
            if entry.variant is not None:
                self._by_variant[entry.variant] = entry

    @property
    def default(self) -> ValueEntry:
        return self._default

    def entry_for(self, variant: Optional[Enum]) -> ValueEntry:
        if variant is None:
            return self._default
        return self._by_variant[variant]

    def code_for(self, variant: Optional[Enum]) -> int:
        return self.entry_for(variant).code

    def summarize(self) -> str:
        """``"Name = code"`` for every entry in declaration order."""
        return ", ".join(f"{entry.name} = {entry.code}" for entry in self.entries)

    def help_text(self) -> str:
        return f"{self.title}: {self.summarize()}"

    def __iter__(self):
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)


DEVICE_STATE_VALUES = ValueTable(
    "Pool state",
    ValueEntry("UnknownMissing", 0, PoolState.UNKNOWN_MISSING),
    ValueEntry("Unrecognized", 1, PoolState.UNRECOGNIZED),
    # healthy
    ValueEntry("Online", 10, PoolState.ONLINE),
    # misc
    ValueEntry("Offline", 25, PoolState.OFFLINE),
    ValueEntry("Split", 26, PoolState.SPLIT),
    # errors (increasing severity)
    ValueEntry("Degraded", 50, PoolState.DEGRADED),
    ValueEntry("Faulted", 60, PoolState.FAULTED),
    ValueEntry("Suspended", 70, PoolState.SUSPENDED),
    ValueEntry("Removed", 80, PoolState.REMOVED),
    ValueEntry("Unavail", 100, PoolState.UNAVAIL),
)

POOL_STATUS_VALUES = ValueTable(
    "Pool status description",
    ValueEntry("Normal", 0),
    ValueEntry("Unrecognized", 1, PoolStatusDescription.UNRECOGNIZED),
    # normal
    ValueEntry("FeaturesAvailable", 5, PoolStatusDescription.FEATURES_AVAILABLE),
    ValueEntry("SufficientReplicasForMissing", 10, PoolStatusDescription.SUFFICIENT_REPLICAS_FOR_MISSING),
    ValueEntry("DeviceRemoved", 20, PoolStatusDescription.DEVICE_REMOVED),
    # errors
    ValueEntry("DataCorruption", 50, PoolStatusDescription.DATA_CORRUPTION),
)

SCAN_STATUS_VALUES = ValueTable(
    "Scan status",
    ValueEntry("UnknownMissing", 0),
    ValueEntry("Unrecognized", 1, ScanStatus.UNRECOGNIZED),
    # healthy
    ValueEntry("ScrubRepaired", 10, ScanStatus.SCRUB_REPAIRED),
    ValueEntry("Resilvered", 15, ScanStatus.RESILVERED),
    # misc
    ValueEntry("ScrubInProgress", 30, ScanStatus.SCRUB_IN_PROGRESS),
    ValueEntry("ScrubCanceled", 35, ScanStatus.SCRUB_CANCELED),
    ValueEntry("NeverScanned", 40, ScanStatus.NEVER_SCANNED),
)

ERROR_STATUS_VALUES = ValueTable(
    "Error status",
    ValueEntry("UnknownMissing", 0, ErrorStatus.UNKNOWN_MISSING),
    ValueEntry("Unrecognized", 1, ErrorStatus.UNRECOGNIZED),
    # healthy
    ValueEntry("Ok", 10, ErrorStatus.OK),
    # errors
    ValueEntry("DataErrors", 50, ErrorStatus.DATA_ERRORS),
)

ALL_VALUE_TABLES = (
    DEVICE_STATE_VALUES,
    POOL_STATUS_VALUES,
    SCAN_STATUS_VALUES,
    ERROR_STATUS_VALUES,
)
