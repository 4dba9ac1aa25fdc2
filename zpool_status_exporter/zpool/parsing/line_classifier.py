"""
Classify single lines of `zpool status` output.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional

HEADER_KEYWORDS = frozenset({
    "pool", "state", "status", "action", "see", "scan", "config", "errors",
})

# Headers whose text may wrap onto following indented lines
WRAPPING_FIELDS = frozenset({"status", "action", "see", "scan"})

TABLE_COLUMNS = ["NAME", "STATE", "READ", "WRITE", "CKSUM"]


class LineKind(Enum):
    HEADER = "header"
    CONTINUATION = "continuation"
    TABLE_HEADING = "table_heading"
    DEVICE_ROW = "device_row"
    BLANK = "blank"
    UNRECOGNIZED = "unrecognized"


@dataclass(frozen=True)
class ClassifiedLine:
    kind: LineKind
    line: str
    keyword: Optional[str] = None
    rest: str = ""


def split_header(stripped: str) -> Optional[tuple]:
    """Return (keyword, rest) when the trimmed line opens a known header."""
    parts = stripped.split(None, 1)
    token = parts[0]
    if not token.endswith(":"):
        return None
    keyword = token[:-1]
    if keyword not in HEADER_KEYWORDS:
        return None
    rest = parts[1].strip() if len(parts) > 1 else ""
    return keyword, rest


def classify_line(line: str, open_field: Optional[str] = None, in_config: bool = False) -> ClassifiedLine:
    """Classify one raw line (without its newline).

    Args:
        line: The line as printed by zpool, leading whitespace intact
        open_field: Wrapping header currently accepting continuation, if any
        in_config: Whether the line belongs to a `config:` section

    Returns:
        ClassifiedLine; never raises, unknown shapes are UNRECOGNIZED
    """
    stripped = line.strip()
    if not stripped:
        return ClassifiedLine(LineKind.BLANK, line)

    header = split_header(stripped)
    if header is not None:
        keyword, rest = header
        return ClassifiedLine(LineKind.HEADER, line, keyword=keyword, rest=rest)

    if open_field in WRAPPING_FIELDS and line[:1].isspace():
        return ClassifiedLine(LineKind.CONTINUATION, line, keyword=open_field, rest=stripped)

    if in_config and line.startswith("\t"):
        if stripped.split()[:len(TABLE_COLUMNS)] == TABLE_COLUMNS:
            return ClassifiedLine(LineKind.TABLE_HEADING, line)
        return ClassifiedLine(LineKind.DEVICE_ROW, line, rest=line[1:])

    return ClassifiedLine(LineKind.UNRECOGNIZED, line, rest=stripped)
