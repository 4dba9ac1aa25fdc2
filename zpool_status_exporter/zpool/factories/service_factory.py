"""
Service factory for dependency injection and service creation.
"""
import asyncio
from datetime import tzinfo
from typing import Dict, Any, Optional

from ..core.interfaces.command_executor import ICommandExecutor
from ..core.interfaces.logger_interface import ILogger
from ..infrastructure.command_executor import CommandExecutor
from ..infrastructure.logging.structured_logger import ContextLogger
from ..services.pool_status_service import PoolStatusService


class ServiceFactory:
    """Creates services sharing one executor and cached per-service loggers."""

    def __init__(self, config: Optional[Dict[str, Any]] = None,
                 executor: Optional[ICommandExecutor] = None):
        self._config = config or {}
        self._logger_instances: Dict[str, ILogger] = {}
        self._lock = asyncio.Lock()

        self._executor: ICommandExecutor = executor or CommandExecutor(
            timeout=self._config.get('command_timeout', 30),
            zpool_command=self._config.get('zpool_command', 'zpool')
        )

    @property
    def executor(self) -> ICommandExecutor:
        return self._executor

    async def create_pool_status_service(self) -> PoolStatusService:
        """Create a PoolStatusService instance with injected dependencies."""
        logger = await self._get_logger("pool_status_service")
        return PoolStatusService(
            executor=self._executor,
            logger=logger,
            timezone=self._config.get('timezone')
        )

    async def _get_logger(self, service_name: str) -> ILogger:
        async with self._lock:
            if service_name not in self._logger_instances:
                self._logger_instances[service_name] = ContextLogger(
                    name=f"zpool_status_exporter.{service_name}",
                    level=self._config.get('log_level', 'INFO'),
                    context={"service": service_name}
                )
            return self._logger_instances[service_name]


class ServiceFactoryBuilder:
    """Builder for creating ServiceFactory instances with fluent configuration."""

    def __init__(self):
        self._config: Dict[str, Any] = {}
        self._executor: Optional[ICommandExecutor] = None

    def with_command_timeout(self, timeout: int) -> 'ServiceFactoryBuilder':
        self._config['command_timeout'] = timeout
        return self

    def with_log_level(self, level: str) -> 'ServiceFactoryBuilder':
        self._config['log_level'] = level
        return self

    def with_zpool_command(self, command: str) -> 'ServiceFactoryBuilder':
        self._config['zpool_command'] = command
        return self

    def with_timezone(self, timezone: Optional[tzinfo]) -> 'ServiceFactoryBuilder':
        """Zone for scan timestamps; None means the host's local time."""
        self._config['timezone'] = timezone
        return self

    def with_executor(self, executor: ICommandExecutor) -> 'ServiceFactoryBuilder':
        self._executor = executor
        return self

    def build(self) -> ServiceFactory:
        return ServiceFactory(self._config, executor=self._executor)


def create_service_factory(config) -> ServiceFactory:
    """Create a service factory from an ExporterConfig."""
    return ServiceFactoryBuilder() \
        .with_command_timeout(config.command_timeout) \
        .with_log_level(config.log_level) \
        .with_zpool_command(config.zpool_command) \
        .with_timezone(config.tzinfo) \
        .build()
