"""Services that run `zpool status` and turn its output into metrics."""

from .pool_status_service import PoolStatusService

__all__ = ["PoolStatusService"]
