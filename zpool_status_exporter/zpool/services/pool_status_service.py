from datetime import datetime, timezone, tzinfo
from typing import List, Optional, Tuple

from ..core.interfaces.command_executor import ICommandExecutor
from ..core.interfaces.logger_interface import ILogger
from ..core.entities.pool_status import PoolRecord
from ..core.exceptions.exporter_exceptions import (
    ZpoolStatusException,
    ZpoolStatusParseError,
    CommandExecutionError,
)
from ..core.result import Result
from ..metrics.formatter import format_metrics
from ..parsing.assembler import parse_zpool_status, split_timestamp_override


class PoolStatusService:
    """Runs `zpool status` and renders its pools as Prometheus metrics."""

    def __init__(self,
                 executor: ICommandExecutor,
                 logger: ILogger,
                 timezone: Optional[tzinfo] = None):
        self._executor = executor
        self._logger = logger
        self._timezone = timezone

    async def get_status_output(self) -> Result[str, ZpoolStatusException]:
        """Run `zpool status` and return its raw stdout."""
        result = await self._executor.execute_zpool("status")
        if not result.success:
            error = CommandExecutionError("zpool status", result.returncode, result.stderr)
            self._logger.error(str(error), {"returncode": result.returncode})
            return Result.failure(error)
        return Result.success(result.stdout)

    async def get_pools(self) -> Result[List[PoolRecord], ZpoolStatusException]:
        """Run `zpool status` and parse every pool it reports."""
        output = await self.get_status_output()
        if output.is_failure:
            return Result.failure(output.error)
        return self.parse_output(output.value).map(lambda parsed: parsed[1])

    async def get_metrics(self, lookup_started: Optional[float] = None) -> Result[str, ZpoolStatusException]:
        """Run `zpool status` and render the metrics exposition text."""
        output = await self.get_status_output()
        if output.is_failure:
            return Result.failure(output.error)
        return self.metrics_from_output(output.value, lookup_started)

    def metrics_from_output(self, output: str,
                            lookup_started: Optional[float] = None) -> Result[str, ZpoolStatusException]:
        """Render metrics from already captured `zpool status` output.

        A leading ``TEST_TIMESTAMP=<seconds>`` line fixes "now" for scan ages.
        """
        parsed = self.parse_output(output)
        if parsed.is_failure:
            return Result.failure(parsed.error)

        override, pools = parsed.value
        now = override or datetime.now(timezone.utc)
        self._logger.debug(f"Rendering metrics for {len(pools)} pool(s)")
        return Result.success(format_metrics(pools, now, lookup_started))

    def parse_output(self, output: str) -> Result[Tuple[Optional[datetime], List[PoolRecord]], ZpoolStatusException]:
        """Parse captured output into (timestamp override, pools)."""
        try:
            override, text = split_timestamp_override(output)
        except ZpoolStatusParseError as e:
            self._logger.error(f"Failed to parse zpool status: {e}", e.details)
            return Result.failure(e)

        result = parse_zpool_status(text, self._timezone)
        if result.is_failure:
            self._logger.error(f"Failed to parse zpool status: {result.error}", result.error.details)
            return Result.failure(result.error)
        return Result.success((override, result.value))
