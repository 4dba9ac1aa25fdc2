from typing import Dict, Any, Optional


class ZpoolStatusException(Exception):
    """Base exception for the exporter"""

    def __init__(self, message: str, error_code: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.error_code = error_code
        self.details = details or {}


class ZpoolStatusParseError(ZpoolStatusException):
    """The `zpool status` output does not have the expected structure.

    Raised only for structural problems (the device table or a known
    diagnostic), never for unknown values, which classify as Unrecognized.
    """

    def __init__(self, reason: str, line: str, line_number: int,
                 error_code: str = "PARSE_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(
            f"{reason} on zpool-status output line {line_number}: {line!r}",
            error_code=error_code,
            details={"reason": reason, "line": line, "line_number": line_number, **(details or {})}
        )
        self.reason = reason
        self.line = line
        self.line_number = line_number


class DeviceRowError(ZpoolStatusParseError):
    """Device table row is missing columns or has a non-numeric count"""

    def __init__(self, reason: str, line: str, line_number: int, device_name: Optional[str] = None):
        if device_name is not None:
            reason = f"{reason} for device {device_name!r}"
        super().__init__(
            reason, line, line_number,
            error_code="INVALID_DEVICE_ROW",
            details={"device_name": device_name}
        )


class DeviceDepthError(ZpoolStatusParseError):
    """Device table indentation jumps more than one level"""

    def __init__(self, line: str, line_number: int, previous_depth: Optional[int], depth: int):
        if previous_depth is None:
            reason = f"first device row has depth {depth}, expected 0"
        else:
            reason = f"device depth jumps from {previous_depth} to {depth}"
        super().__init__(
            reason, line, line_number,
            error_code="INVALID_DEVICE_DEPTH",
            details={"previous_depth": previous_depth, "depth": depth}
        )


class ZfsDeviceAccessError(ZpoolStatusParseError):
    """zpool could not reach /dev/zfs (typically a sandboxed service)"""

    def __init__(self, line: str, line_number: int):
        super().__init__(
            "zpool requires access to /dev/zfs and /proc/self/mounts",
            line, line_number,
            error_code="ZFS_DEVICE_ACCESS"
        )


class EmptyPoolNameError(ZpoolStatusParseError):
    """`pool:` header without a name"""

    def __init__(self, line: str, line_number: int):
        super().__init__("empty pool name", line, line_number, error_code="EMPTY_POOL_NAME")


class CommandExecutionError(ZpoolStatusException):
    """Running `zpool status` failed"""

    def __init__(self, command: str, returncode: int, stderr: str):
        message = f"Command '{command}' failed with exit code {returncode}"
        if stderr:
            message += f": {stderr}"
        super().__init__(
            message,
            error_code="COMMAND_FAILED",
            details={"command": command, "returncode": returncode, "stderr": stderr}
        )
        self.returncode = returncode
        self.stderr = stderr


class AuthConfigError(ZpoolStatusException):
    """Basic-auth keys file cannot be used"""

    def __init__(self, path: str, reason: str):
        super().__init__(
            f"Invalid basic auth keys file '{path}': {reason}",
            error_code="AUTH_CONFIG_INVALID",
            details={"path": path, "reason": reason}
        )


class RunningAsRootError(ZpoolStatusException):
    """Refusing to serve with root privileges"""

    def __init__(self):
        super().__init__(
            "Refusing to run as root, use an unprivileged user (or --allow-root)",
            error_code="RUNNING_AS_ROOT"
        )
