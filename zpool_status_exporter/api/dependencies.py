"""
Dependencies for API endpoints.
"""
from functools import lru_cache
from typing import Optional

from ..config import get_config
from ..zpool.factories.service_factory import ServiceFactory, create_service_factory
from ..zpool.services.pool_status_service import PoolStatusService


# Global service factory instance
_service_factory: Optional[ServiceFactory] = None


@lru_cache()
def get_service_factory() -> ServiceFactory:
    """Get the global service factory instance."""
    global _service_factory
    if _service_factory is None:
        _service_factory = create_service_factory(get_config())
    return _service_factory


async def get_pool_status_service() -> PoolStatusService:
    """Get a PoolStatusService instance."""
    return await get_service_factory().create_pool_status_service()


def configure_services(factory: ServiceFactory):
    """Replace the service factory (CLI startup and tests)."""
    global _service_factory
    _service_factory = factory
    # Clear the cache to force recreation
    get_service_factory.cache_clear()
