"""
Lookup tables mapping `zpool status` wording onto the closed enumerations.

The upstream wording changes between OpenZFS releases, so each table is an
ordered sequence that can be extended with new phrasings. Free text is
compared after collapsing whitespace, which makes the tables independent of
how zpool wrapped the paragraph.

NOTE: see cmd/zpool/zpool_main.c in the OpenZFS sources for the exact messages.
"""
import logging
import re
from typing import Dict, Tuple

from ..core.entities.pool_status import (
    ErrorStatus,
    PoolState,
    PoolStatusDescription,
    ScanStatus,
)

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")


POOL_STATE_TOKENS: Dict[str, PoolState] = {
    "ONLINE": PoolState.ONLINE,
    "OFFLINE": PoolState.OFFLINE,
    "SPLIT": PoolState.SPLIT,
    "DEGRADED": PoolState.DEGRADED,
    "FAULTED": PoolState.FAULTED,
    "SUSPENDED": PoolState.SUSPENDED,
    "REMOVED": PoolState.REMOVED,
    "UNAVAIL": PoolState.UNAVAIL,
}

# Highest priority first; a text is classified by the first phrase it starts with.
# Phrases are stored whitespace-normalized.
STATUS_PHRASES: Tuple[Tuple[str, PoolStatusDescription], ...] = (
    (
        "One or more devices could not be used because the label is missing or "
        "invalid. Sufficient replicas exist for the pool to continue "
        "functioning in a degraded state",
        PoolStatusDescription.SUFFICIENT_REPLICAS_FOR_MISSING,
    ),
    (
        "One or more devices could not be opened. Sufficient replicas exist for "
        "the pool to continue functioning in a degraded state",
        PoolStatusDescription.SUFFICIENT_REPLICAS_FOR_MISSING,
    ),
    (
        "One or more devices has experienced an error resulting in data "
        "corruption. Applications may be affected",
        PoolStatusDescription.DATA_CORRUPTION,
    ),
    (
        "Some supported and requested features are not enabled on the pool. "
        "The pool can still be used, but some features are unavailable.",
        PoolStatusDescription.FEATURES_AVAILABLE,
    ),
    (
        "Some supported features are not enabled on the pool. The pool can "
        "still be used, but some features are unavailable.",
        PoolStatusDescription.FEATURES_AVAILABLE,
    ),
    (
        "One or more devices has been removed by the administrator. "
        "Sufficient replicas exist for the pool to continue functioning in a "
        "degraded state.",
        PoolStatusDescription.DEVICE_REMOVED,
    ),
)

SCAN_PREFIXES: Tuple[Tuple[str, ScanStatus], ...] = (
    ("scrub repaired", ScanStatus.SCRUB_REPAIRED),
    ("resilvered", ScanStatus.RESILVERED),
    ("scrub in progress", ScanStatus.SCRUB_IN_PROGRESS),
    ("scrub canceled", ScanStatus.SCRUB_CANCELED),
)

ERRORS_OK_TEXT = "No known data errors"
# "<count> data errors, use '-v' for a list"
ERRORS_COUNT_PREFIX = "data error"


def normalize_text(text: str) -> str:
    """Collapse every whitespace run (including wrapped line breaks) to one space."""
    return _WHITESPACE.sub(" ", text).strip()


def _unrecognized(kind: str, text: str) -> None:
    logger.warning(f"Unrecognized {kind}: {text!r}")


def lookup_pool_state(token: str) -> PoolState:
    """Exact, case-sensitive match of a state token such as ``DEGRADED``."""
    state = POOL_STATE_TOKENS.get(token)
    if state is None:
        _unrecognized("PoolState", token)
        return PoolState.UNRECOGNIZED
    return state


def classify_status(text: str) -> PoolStatusDescription:
    normalized = normalize_text(text)
    for phrase, description in STATUS_PHRASES:
        if normalized.startswith(phrase):
            return description
    _unrecognized("PoolStatusDescription", normalized)
    return PoolStatusDescription.UNRECOGNIZED


def classify_scan_message(message: str) -> ScanStatus:
    """Classify the part of a scan line before its timestamp."""
    normalized = normalize_text(message)
    for prefix, status in SCAN_PREFIXES:
        if normalized.startswith(prefix):
            return status
    _unrecognized("ScanStatus", normalized)
    return ScanStatus.UNRECOGNIZED


def classify_errors(text: str) -> ErrorStatus:
    normalized = normalize_text(text)
    if normalized == ERRORS_OK_TEXT:
        return ErrorStatus.OK
    count, _, remainder = normalized.partition(" ")
    if count and remainder.startswith(ERRORS_COUNT_PREFIX):
        return ErrorStatus.DATA_ERRORS
    _unrecognized("ErrorStatus", normalized)
    return ErrorStatus.UNRECOGNIZED

