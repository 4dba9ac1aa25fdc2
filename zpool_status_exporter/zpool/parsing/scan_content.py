"""
Parse the `scan:` field, e.g.

    scrub repaired 0B in 00:00:01 with 0 errors on Sun Oct 27 15:14:51 2024
    scrub in progress since Tue Mar  4 01:00:00 2025
"""
import logging
from datetime import datetime, tzinfo
from typing import Optional, Sequence, Tuple

from ..core.entities.pool_status import ScanInfo, ScanStatus
from .phrases import classify_scan_message

logger = logging.getLogger(__name__)

# Searched in this order; the first separator present splits message and time
TIME_SEPARATORS = (" on ", " since ")

# zpool prints ctime(3) style timestamps
TIMESTAMP_FORMAT = "%a %b %d %H:%M:%S %Y"

# Variants whose report never carries a usable completion time
UNTIMED_SCANS = frozenset({ScanStatus.SCRUB_CANCELED, ScanStatus.NEVER_SCANNED})


def split_timestamp(content: str) -> Tuple[str, Optional[str]]:
    for separator in TIME_SEPARATORS:
        message, found, timestamp = content.partition(separator)
        if found:
            return message, timestamp.strip()
    return content, None


def parse_timestamp(text: str, timezone: Optional[tzinfo] = None) -> datetime:
    """Parse a zpool timestamp; naive times are taken as local time when no zone is given.

    Raises:
        ValueError: text is not in TIMESTAMP_FORMAT
    """
    naive = datetime.strptime(text, TIMESTAMP_FORMAT)
    if timezone is None:
        return naive.astimezone()
    return naive.replace(tzinfo=timezone)


def parse_scan_content(lines: Sequence[str], timezone: Optional[tzinfo] = None) -> ScanInfo:
    """Classify a scan field; only its first line carries the status.

    Never raises: an unknown message is Unrecognized and a bad timestamp is dropped.
    """
    first_line = lines[0].strip() if lines else ""
    message, timestamp_text = split_timestamp(first_line)
    kind = classify_scan_message(message)

    if kind in UNTIMED_SCANS or timestamp_text is None:
        return ScanInfo(kind=kind)

    try:
        timestamp = parse_timestamp(timestamp_text, timezone)
    except ValueError:
        logger.warning(f"Invalid scan timestamp {timestamp_text!r} in {first_line!r}")
        return ScanInfo(kind=kind)
    return ScanInfo(kind=kind, timestamp=timestamp)
