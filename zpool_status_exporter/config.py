"""
Exporter Configuration Module

Loads settings from environment variables. Every variable may also be given
with the ZPOOL_EXPORTER_ prefix (e.g. ZPOOL_EXPORTER_PORT). Command line
arguments override these values.
"""

import logging
import os
from dataclasses import dataclass
from datetime import tzinfo
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)

ENV_PREFIXES = ("", "ZPOOL_EXPORTER_")
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class ServerConfig:
    """HTTP listener settings"""
    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = 8976
    basic_auth_keys_file: str = ""
    allow_root: bool = False


@dataclass
class ZpoolConfig:
    """How `zpool status` is run and interpreted"""
    zpool_command: str = "zpool"
    command_timeout: int = 30
    # IANA zone for scan timestamps; empty means the host's local time
    timezone: str = ""


class ExporterConfig:
    """
    Exporter settings loaded from environment variables.

    Invalid values are reported and replaced by defaults rather than
    preventing startup.
    """

    def __init__(self):
        self.server = ServerConfig()
        self.zpool = ZpoolConfig()

        self._load_environment_variables()
        self._validate_configuration()

    def _load_environment_variables(self):
        # ==== SERVER CONFIG ====
        self.server.log_level = self._get_string("LOG_LEVEL", self.server.log_level).upper()
        self.server.host = self._get_string("HOST", self.server.host)
        self.server.port = self._get_int("PORT", self.server.port)
        self.server.basic_auth_keys_file = self._get_string(
            "BASIC_AUTH_KEYS_FILE", self.server.basic_auth_keys_file
        )
        self.server.allow_root = self._get_bool("ALLOW_ROOT", self.server.allow_root)

        # ==== ZPOOL CONFIG ====
        self.zpool.zpool_command = self._get_string("ZPOOL_COMMAND", self.zpool.zpool_command)
        self.zpool.command_timeout = self._get_int("COMMAND_TIMEOUT", self.zpool.command_timeout)
        self.zpool.timezone = self._get_string("TIMEZONE", self.zpool.timezone)

    def _get_string(self, key: str, default: str) -> str:
        """Get string value from environment, trying each prefix"""
        for prefix in ENV_PREFIXES:
            value = os.getenv(f"{prefix}{key}")
            if value is not None:
                return value
        return default

    def _get_int(self, key: str, default: int) -> int:
        value = self._get_string(key, str(default))
        try:
            return int(value)
        except ValueError:
            logger.warning(f"Invalid integer value for {key}: {value}, using default: {default}")
            return default

    def _get_bool(self, key: str, default: bool) -> bool:
        value = self._get_string(key, str(default)).lower()
        return value in ("true", "1", "yes", "on")

    def _validate_configuration(self):
        if self.server.log_level not in VALID_LOG_LEVELS:
            logger.warning(f"Invalid log level: {self.server.log_level}, using INFO")
            self.server.log_level = "INFO"

        if not (1 <= self.server.port <= 65535):
            logger.warning(f"Invalid port: {self.server.port}, using default: 8976")
            self.server.port = 8976

        if self.zpool.command_timeout <= 0:
            logger.warning(f"Invalid command timeout: {self.zpool.command_timeout}, using default: 30")
            self.zpool.command_timeout = 30

        if self.zpool.timezone:
            try:
                ZoneInfo(self.zpool.timezone)
            except (ZoneInfoNotFoundError, ValueError):
                logger.warning(f"Unknown timezone: {self.zpool.timezone}, using local time")
                self.zpool.timezone = ""

    def apply_listen_address(self, listen_address: str):
        """Override host and port from a ``HOST:PORT`` string.

        Raises:
            ValueError: the address has no port or the port is invalid
        """
        host, separator, port = listen_address.rpartition(":")
        if not separator or not port.isdigit():
            raise ValueError(f"Invalid listen address {listen_address!r}, expected HOST:PORT")
        port_number = int(port)
        if not (1 <= port_number <= 65535):
            raise ValueError(f"Invalid port in listen address {listen_address!r}")
        self.server.host = host.strip("[]") or "0.0.0.0"
        self.server.port = port_number

    def get_summary(self) -> dict:
        """Get a summary of configuration"""
        return {
            "server": {
                "log_level": self.server.log_level,
                "host": self.server.host,
                "port": self.server.port,
                "basic_auth": bool(self.server.basic_auth_keys_file),
                "allow_root": self.server.allow_root,
            },
            "zpool": {
                "zpool_command": self.zpool.zpool_command,
                "command_timeout": self.zpool.command_timeout,
                "timezone": self.zpool.timezone or "local",
            },
        }

    @property
    def log_level(self) -> str:
        return self.server.log_level

    @property
    def host(self) -> str:
        return self.server.host

    @property
    def port(self) -> int:
        return self.server.port

    @property
    def basic_auth_keys_file(self) -> str:
        return self.server.basic_auth_keys_file

    @property
    def zpool_command(self) -> str:
        return self.zpool.zpool_command

    @property
    def command_timeout(self) -> int:
        return self.zpool.command_timeout

    @property
    def tzinfo(self) -> Optional[tzinfo]:
        return ZoneInfo(self.zpool.timezone) if self.zpool.timezone else None


_config: Optional[ExporterConfig] = None


def get_config() -> ExporterConfig:
    """Get the global configuration instance"""
    global _config
    if _config is None:
        _config = ExporterConfig()
    return _config


def reset_config():
    """Reload configuration on next access (for tests)"""
    global _config
    _config = None
