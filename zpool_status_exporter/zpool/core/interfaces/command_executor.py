from abc import ABC, abstractmethod
from typing import Optional
from dataclasses import dataclass


@dataclass
class CommandResult:
    """Captured output of one external command"""
    returncode: int
    stdout: str
    stderr: str
    success: Optional[bool] = None

    def __post_init__(self):
        if self.success is None:
            self.success = self.returncode == 0


class ICommandExecutor(ABC):
    """Runs the zpool binary"""

    @abstractmethod
    async def execute_zpool(self, subcommand: str, *args: str) -> CommandResult:
        """Execute `zpool <subcommand> [args...]`"""
        pass
