"""
Render finalized pool records in the Prometheus text exposition format.

A fresh CollectorRegistry is built for every scrape; the records are a
snapshot of one `zpool status` run, so nothing is kept between requests.
"""
import time
from datetime import datetime, timezone
from typing import Iterable, Iterator, List, Optional

from prometheus_client import CollectorRegistry, generate_latest
from prometheus_client.core import GaugeMetricFamily, Metric

from ..core.entities.pool_status import PoolRecord
from ..parsing.finalization import scan_age_hours
from .value_tables import (
    DEVICE_STATE_VALUES,
    ERROR_STATUS_VALUES,
    POOL_STATUS_VALUES,
    SCAN_STATUS_VALUES,
)

PREFIX = "zpool_status_export"
NO_POOLS_COMMENT = "# no pools reported\n"


class PoolStatusCollector:
    """Custom collector yielding one gauge family per pool/device metric."""

    def __init__(self, pools: List[PoolRecord], now: datetime,
                 lookup_started: Optional[float] = None):
        self._pools = pools
        self._now = now
        self._lookup_started = lookup_started

    def collect(self) -> Iterator[Metric]:
        if self._pools:
            yield from self._pool_families()
            yield from self._device_families()
        if self._lookup_started is not None:
            lookup = GaugeMetricFamily(
                f"{PREFIX}_lookup", "total duration of the lookup in seconds"
            )
            lookup.add_metric([], time.perf_counter() - self._lookup_started)
            yield lookup

    def _pool_families(self) -> Iterable[Metric]:
        state = GaugeMetricFamily(
            f"{PREFIX}_pool_state", f"Pool state: {DEVICE_STATE_VALUES.summarize()}", labels=["pool"]
        )
        status = GaugeMetricFamily(
            f"{PREFIX}_pool_status_desc",
            f"Pool status description: {POOL_STATUS_VALUES.summarize()}", labels=["pool"]
        )
        scan = GaugeMetricFamily(
            f"{PREFIX}_scan_state", f"Scan status: {SCAN_STATUS_VALUES.summarize()}", labels=["pool"]
        )
        scan_age = GaugeMetricFamily(f"{PREFIX}_scan_age", "Scan age in hours", labels=["pool"])
        errors = GaugeMetricFamily(
            f"{PREFIX}_error_state", f"Error status: {ERROR_STATUS_VALUES.summarize()}", labels=["pool"]
        )

        for pool in self._pools:
            labels = [pool.name]
            state.add_metric(labels, DEVICE_STATE_VALUES.code_for(pool.state))
            status.add_metric(labels, POOL_STATUS_VALUES.code_for(pool.status_description))
            scan.add_metric(labels, SCAN_STATUS_VALUES.code_for(pool.scan.kind if pool.scan else None))
            scan_age.add_metric(labels, scan_age_hours(pool.scan, self._now))
            errors.add_metric(labels, ERROR_STATUS_VALUES.code_for(pool.error_state))

        return (state, status, scan, scan_age, errors)

    def _device_families(self) -> Iterable[Metric]:
        state = GaugeMetricFamily(
            f"{PREFIX}_dev_state", f"Device state: {DEVICE_STATE_VALUES.summarize()}",
            labels=["pool", "dev"]
        )
        read = GaugeMetricFamily(f"{PREFIX}_dev_errors_read", "Read error count", labels=["pool", "dev"])
        write = GaugeMetricFamily(f"{PREFIX}_dev_errors_write", "Write error count", labels=["pool", "dev"])
        checksum = GaugeMetricFamily(
            f"{PREFIX}_dev_errors_checksum", "Checksum error count", labels=["pool", "dev"]
        )

        for pool in self._pools:
            for device in pool.devices:
                labels = [pool.name, device.label]
                state.add_metric(labels, DEVICE_STATE_VALUES.code_for(device.state))
                read.add_metric(labels, device.read_errors)
                write.add_metric(labels, device.write_errors)
                checksum.add_metric(labels, device.checksum_errors)

        return (state, read, write, checksum)


def format_metrics(pools: List[PoolRecord], now: Optional[datetime] = None,
                   lookup_started: Optional[float] = None) -> str:
    """Render pools as exposition text.

    Args:
        pools: Finalized records from one parse
        now: Reference time for scan age (defaults to the current UTC time)
        lookup_started: time.perf_counter() value at request start; when
            given, a zpool_status_export_lookup duration gauge is appended

    Returns:
        Exposition text; starts with "# no pools reported" when pools is empty
    """
    if now is None:
        now = datetime.now(timezone.utc)

    registry = CollectorRegistry()
    registry.register(PoolStatusCollector(pools, now, lookup_started))
    body = generate_latest(registry).decode("utf-8")

    if not pools:
        return NO_POOLS_COMMENT + body
    return body
