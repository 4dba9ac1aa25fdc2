"""
Device table rows and the slash-separated device labels built from them.

Rows look like ``\\t    sda     ONLINE       0     0     0`` where the run of
spaces after the tab encodes the nesting depth.
"""
from dataclasses import dataclass
from typing import List, Optional

from ..core.exceptions.exporter_exceptions import DeviceDepthError, DeviceRowError

# `zpool status` indents each level of the device tree by two spaces
INDENT_WIDTH = 2

# Label for the depth-0 row (the pool itself); an empty label value would read
# as "label absent" to Prometheus
ROOT_DEVICE_LABEL = "<root>"


@dataclass(frozen=True)
class DeviceRow:
    depth: int
    name: str
    state_token: str
    read_errors: int
    write_errors: int
    checksum_errors: int


def _parse_count(cell: Optional[str], column: str, name: str, line: str, line_number: int) -> int:
    if cell is None:
        raise DeviceRowError(f"expected {column} error count", line, line_number, device_name=name)
    if not (cell.isascii() and cell.isdigit()):
        raise DeviceRowError(f"invalid {column} count {cell!r}", line, line_number, device_name=name)
    return int(cell)


def parse_device_row(line: str, line_number: int) -> DeviceRow:
    """Split a device table row into its columns.

    Raises:
        DeviceRowError: The row does not have NAME STATE READ WRITE CKSUM
    """
    if not line.startswith("\t"):
        raise DeviceRowError("expected leading table whitespace", line, line_number)
    body = line[1:]
    cells_text = body.lstrip(" ")
    indent = len(body) - len(cells_text)
    depth = indent // INDENT_WIDTH

    cells = cells_text.split()
    if not cells:
        raise DeviceRowError("expected device name", line, line_number)
    name = cells[0]
    if len(cells) < 2:
        raise DeviceRowError("expected device state", line, line_number, device_name=name)

    counts = cells[2:5] + [None] * (3 - len(cells[2:5]))
    return DeviceRow(
        depth=depth,
        name=name,
        state_token=cells[1],
        read_errors=_parse_count(counts[0], "read", name, line, line_number),
        write_errors=_parse_count(counts[1], "write", name, line, line_number),
        checksum_errors=_parse_count(counts[2], "checksum", name, line, line_number),
    )


class DeviceTree:
    """Path stack for one pool's device table (the pool root is not on it)."""

    def __init__(self):
        self._path: List[str] = []
        self._last_depth: Optional[int] = None

    @property
    def last_depth(self) -> Optional[int]:
        return self._last_depth

    def push(self, depth: int, name: str, line: str = "", line_number: int = 0) -> str:
        """Record a row and return its canonical label.

        Raises:
            DeviceDepthError: depth is more than one level below the previous row
        """
        limit = 0 if self._last_depth is None else self._last_depth + 1
        if depth > limit:
            raise DeviceDepthError(line, line_number, self._last_depth, depth)
        self._last_depth = depth

        if depth == 0:
            self._path.clear()
            return ROOT_DEVICE_LABEL
        del self._path[depth - 1:]
        self._path.append(name)
        return "/".join(self._path)
