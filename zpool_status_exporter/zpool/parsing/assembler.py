"""
Assemble `zpool status` output into finalized PoolRecords.

    pool: tank
   state: ONLINE
    scan: scrub repaired 0B in 00:00:01 with 0 errors on Sun Oct 27 15:14:51 2024
  config:

        NAME        STATE     READ WRITE CKSUM
        tank        ONLINE       0     0     0
          mirror-0  ONLINE       0     0     0
            sda     ONLINE       0     0     0

  errors: No known data errors

Unknown values and lines are logged and tolerated so that metrics keep flowing
when OpenZFS adds new messages. Errors are only raised when the device table
itself does not have the expected shape.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone as dt_timezone, tzinfo
from typing import List, Optional, Tuple

from ..core.entities.pool_status import (
    DeviceRecord,
    ErrorStatus,
    PoolRecord,
    PoolState,
    PoolStatusDescription,
    ScanInfo,
)
from ..core.exceptions.exporter_exceptions import (
    EmptyPoolNameError,
    ZfsDeviceAccessError,
    ZpoolStatusParseError,
)
from ..core.result import Result
from .device_tree import DeviceTree, parse_device_row
from .finalization import finalize_pool
from .line_classifier import ClassifiedLine, LineKind, classify_line
from .phrases import classify_errors, classify_status, lookup_pool_state
from .scan_content import parse_scan_content

logger = logging.getLogger(__name__)

NO_POOLS_TEXT = "no pools available"
ZFS_DEVICE_ACCESS_PREFIX = "/dev/zfs and /proc/self/mounts"
TEST_TIMESTAMP_PREFIX = "TEST_TIMESTAMP="


@dataclass
class _OpenPool:
    """Mutable accumulator for the pool currently being read."""
    name: str
    state: Optional[PoolState] = None
    status_description: Optional[PoolStatusDescription] = None
    scan: Optional[ScanInfo] = None
    error_state: Optional[ErrorStatus] = None
    devices: List[DeviceRecord] = field(default_factory=list)
    tree: DeviceTree = field(default_factory=DeviceTree)

    def assign(self, attribute: str, value) -> None:
        if getattr(self, attribute) is not None:
            logger.warning(f"Duplicate {attribute} for pool {self.name!r}, keeping the latest")
        setattr(self, attribute, value)

    def seal(self) -> PoolRecord:
        if self.devices and self.devices[0].raw_name != self.name:
            logger.warning(
                f"Device table root {self.devices[0].raw_name!r} does not match pool {self.name!r}"
            )
        return PoolRecord(
            name=self.name,
            state=self.state,
            status_description=self.status_description,
            scan=self.scan,
            error_state=self.error_state,
            devices=tuple(self.devices),
        )


class PoolStatusAssembler:
    """Single-use parse run; holds all scratch state for one input text."""

    def __init__(self, timezone: Optional[tzinfo] = None):
        self._timezone = timezone
        self._pools: List[PoolRecord] = []
        self._current: Optional[_OpenPool] = None
        self._open_field: Optional[str] = None
        self._field_lines: List[str] = []
        self._in_config = False
        self._table_started = False

    def parse(self, text: str) -> List[PoolRecord]:
        """Parse the whole text.

        Raises:
            ZpoolStatusParseError: on the first structural problem
        """
        for line_number, line in enumerate(text.splitlines(), start=1):
            self._feed(line, line_number)
        self._close_field()
        self._seal_current()
        return self._pools

    def _feed(self, line: str, line_number: int) -> None:
        if line.startswith(ZFS_DEVICE_ACCESS_PREFIX):
            raise ZfsDeviceAccessError(line, line_number)

        classified = classify_line(line, self._open_field, self._in_config)
        if classified.kind is LineKind.CONTINUATION:
            self._field_lines.append(classified.rest)
            return
        self._close_field()

        if classified.kind is LineKind.HEADER:
            self._end_config()
            self._handle_header(classified, line_number)
        elif classified.kind is LineKind.TABLE_HEADING:
            self._table_started = True
        elif classified.kind is LineKind.DEVICE_ROW:
            self._handle_device_row(line, line_number)
        elif classified.kind is LineKind.BLANK:
            if self._table_started:
                self._end_config()
        elif classified.rest == NO_POOLS_TEXT:
            logger.debug("zpool reports no pools")
        else:
            logger.warning(f"Ignoring unrecognized line {line_number}: {line!r}")
            if self._table_started:
                self._end_config()

    def _handle_header(self, classified: ClassifiedLine, line_number: int) -> None:
        keyword, rest = classified.keyword, classified.rest

        if keyword == "pool":
            self._seal_current()
            if not rest:
                raise EmptyPoolNameError(classified.line, line_number)
            self._current = _OpenPool(name=rest)
            return

        current = self._current
        if current is None:
            logger.warning(f"Ignoring header {keyword!r} before any pool on line {line_number}")
            return

        if keyword == "state":
            current.assign("state", lookup_pool_state(rest))
        elif keyword == "errors":
            current.assign("error_state", classify_errors(rest))
        elif keyword == "config":
            if rest:
                logger.warning(f"Unexpected text after config header: {rest!r}")
            self._in_config = True
            self._table_started = False
        else:
            # status / action / see / scan may wrap onto continuation lines
            self._open_field = keyword
            self._field_lines = [rest]

    def _handle_device_row(self, line: str, line_number: int) -> None:
        current = self._current
        row = parse_device_row(line, line_number)
        label = current.tree.push(row.depth, row.name, line, line_number)
        current.devices.append(DeviceRecord(
            depth=row.depth,
            raw_name=row.name,
            state=lookup_pool_state(row.state_token),
            read_errors=row.read_errors,
            write_errors=row.write_errors,
            checksum_errors=row.checksum_errors,
            label=label,
        ))
        self._table_started = True

    def _close_field(self) -> None:
        field_name, lines = self._open_field, self._field_lines
        self._open_field = None
        self._field_lines = []
        if field_name is None or self._current is None:
            return

        if field_name == "status":
            self._current.assign("status_description", classify_status(" ".join(lines)))
        elif field_name == "scan":
            self._current.assign("scan", parse_scan_content(lines, self._timezone))
        else:
            logger.debug(f"{field_name}: {' '.join(lines)}")

    def _end_config(self) -> None:
        self._in_config = False
        self._table_started = False

    def _seal_current(self) -> None:
        if self._current is not None:
            self._pools.append(finalize_pool(self._current.seal()))
            self._current = None


def parse_zpool_status(text: str, timezone: Optional[tzinfo] = None) -> Result[List[PoolRecord], ZpoolStatusParseError]:
    """Parse complete `zpool status` output.

    Returns either every pool (finalized, in source order) or the first
    structural error; never a partial list.
    """
    try:
        return Result.success(PoolStatusAssembler(timezone).parse(text))
    except ZpoolStatusParseError as e:
        return Result.failure(e)


def split_timestamp_override(text: str) -> Tuple[Optional[datetime], str]:
    """Strip a leading ``TEST_TIMESTAMP=<unix seconds>`` line.

    Returns:
        (override time in UTC or None, remaining text)

    Raises:
        ZpoolStatusParseError: the prefix is present but not a usable unix time
    """
    first_line, newline, remainder = text.partition("\n")
    if not first_line.startswith(TEST_TIMESTAMP_PREFIX):
        return None, text
    value = first_line[len(TEST_TIMESTAMP_PREFIX):].strip()
    try:
        return datetime.fromtimestamp(int(value), tz=dt_timezone.utc), remainder
    except (ValueError, OverflowError, OSError):
        raise ZpoolStatusParseError(
            f"invalid test timestamp {value!r}", first_line, 0,
            error_code="INVALID_TEST_TIMESTAMP"
        )
