"""
Parser for `zpool status` text.

Data flows one way: raw text -> classified lines -> assembled records ->
finalized records.
"""

from .assembler import parse_zpool_status, split_timestamp_override, PoolStatusAssembler
from .device_tree import ROOT_DEVICE_LABEL, DeviceTree
from .finalization import SCAN_AGE_SENTINEL_HOURS, finalize_pool, scan_age_hours

__all__ = [
    "parse_zpool_status",
    "split_timestamp_override",
    "PoolStatusAssembler",
    "ROOT_DEVICE_LABEL",
    "DeviceTree",
    "SCAN_AGE_SENTINEL_HOURS",
    "finalize_pool",
    "scan_age_hours",
]
