"""
Prometheus scrape endpoint.
"""
import logging
import time

from fastapi import APIRouter, Depends, Response
from prometheus_client import CONTENT_TYPE_LATEST

from ..auth import require_basic_auth
from ..dependencies import get_pool_status_service
from ...zpool.services.pool_status_service import PoolStatusService

logger = logging.getLogger(__name__)

ERROR_MEDIA_TYPE = "text/plain; charset=utf-8"


router = APIRouter(tags=["metrics"], dependencies=[Depends(require_basic_auth)])


@router.get("/metrics")
async def get_metrics(
    pool_status_service: PoolStatusService = Depends(get_pool_status_service)
):
    """Run `zpool status` and return the exposition text.

    Parse or command failures return 500 with a commented diagnostic, never
    an empty metrics body.
    """
    lookup_started = time.perf_counter()
    result = await pool_status_service.get_metrics(lookup_started)

    if result.is_success:
        return Response(content=result.value, media_type=CONTENT_TYPE_LATEST)

    logger.error(f"Metrics lookup failed: {result.error}")
    return Response(
        content=f"# ERROR:\n# {result.error}\n",
        status_code=500,
        media_type=ERROR_MEDIA_TYPE,
    )
