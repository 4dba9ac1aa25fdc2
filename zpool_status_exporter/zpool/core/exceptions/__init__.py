from .exporter_exceptions import (
    ZpoolStatusException,
    ZpoolStatusParseError,
    DeviceRowError,
    DeviceDepthError,
    ZfsDeviceAccessError,
    EmptyPoolNameError,
    CommandExecutionError,
    AuthConfigError,
    RunningAsRootError,
)

__all__ = [
    "ZpoolStatusException",
    "ZpoolStatusParseError",
    "DeviceRowError",
    "DeviceDepthError",
    "ZfsDeviceAccessError",
    "EmptyPoolNameError",
    "CommandExecutionError",
    "AuthConfigError",
    "RunningAsRootError",
]
