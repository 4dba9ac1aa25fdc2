"""
Middleware for API error handling and request logging.
"""
import logging
import time

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from ..zpool.core.exceptions.exporter_exceptions import ZpoolStatusException
from .models import APIError


logger = logging.getLogger(__name__)


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Turns exceptions escaping a route into JSON error responses."""

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except ZpoolStatusException as e:
            logger.error(f"Exporter error in {request.url.path}: {e}")
            return JSONResponse(
                status_code=500,
                content=APIError(
                    error=e.error_code or "EXPORTER_ERROR",
                    message=str(e),
                    details=e.details
                ).model_dump()
            )
        except Exception as e:
            logger.exception(f"Unexpected error in {request.url.path}: {e}")
            return JSONResponse(
                status_code=500,
                content=APIError(
                    error="INTERNAL_SERVER_ERROR",
                    message="An unexpected error occurred"
                ).model_dump()
            )


class LoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for logging API requests."""

    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        logger.debug(f"API Request: {request.method} {request.url.path}")

        response = await call_next(request)

        process_time = time.time() - start_time
        logger.info(
            f"{request.method} {request.url.path} -> {response.status_code} ({process_time:.4f}s)"
        )
        return response
