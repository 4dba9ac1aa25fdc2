from .formatter import PoolStatusCollector, format_metrics
from .value_tables import (
    ALL_VALUE_TABLES,
    DEVICE_STATE_VALUES,
    ERROR_STATUS_VALUES,
    POOL_STATUS_VALUES,
    SCAN_STATUS_VALUES,
    ValueEntry,
    ValueTable,
)

__all__ = [
    "PoolStatusCollector",
    "format_metrics",
    "ALL_VALUE_TABLES",
    "DEVICE_STATE_VALUES",
    "ERROR_STATUS_VALUES",
    "POOL_STATUS_VALUES",
    "SCAN_STATUS_VALUES",
    "ValueEntry",
    "ValueTable",
]
