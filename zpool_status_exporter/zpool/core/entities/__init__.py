"""Core domain entities"""

from .pool_status import (
    PoolState,
    PoolStatusDescription,
    ScanStatus,
    ErrorStatus,
    ScanInfo,
    DeviceRecord,
    PoolRecord,
)

__all__ = [
    "PoolState",
    "PoolStatusDescription",
    "ScanStatus",
    "ErrorStatus",
    "ScanInfo",
    "DeviceRecord",
    "PoolRecord",
]
