#!/usr/bin/env python3
"""
zpool-status-exporter service

Serves `zpool status` as Prometheus metrics on GET /metrics, optionally
behind HTTP Basic authentication.
"""

import argparse
import asyncio
import logging
import os
import sys
import time
from contextlib import asynccontextmanager
from typing import List, Optional

import uvicorn
from fastapi import FastAPI
from fastapi.responses import HTMLResponse

from . import __version__
from .api.auth import BasicAuthRules
from .api.dependencies import configure_services, get_service_factory
from .api.middleware import ErrorHandlingMiddleware, LoggingMiddleware
from .api.routers import metrics_router
from .config import ExporterConfig, get_config
from .zpool.core.exceptions.exporter_exceptions import (
    AuthConfigError,
    RunningAsRootError,
    ZpoolStatusException,
)
from .zpool.factories.service_factory import create_service_factory

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

INDEX_PAGE = """<!DOCTYPE html>
<html>
<head><title>zpool-status-exporter</title></head>
<body>
<h1>zpool-status-exporter</h1>
<p>Version {version}</p>
<p><a href="/metrics">Metrics</a></p>
</body>
</html>
"""

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifecycle - startup and shutdown events
    """
    logger.info(f"Starting zpool-status-exporter {__version__}")
    yield
    logger.info("Shutting down zpool-status-exporter")


def create_app(auth_rules: Optional[BasicAuthRules] = None) -> FastAPI:
    """Build the FastAPI application; auth_rules None disables authentication."""
    app = FastAPI(
        title="zpool-status-exporter",
        description="Prometheus metrics from zpool status",
        version=__version__,
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.auth_rules = auth_rules

    app.add_middleware(ErrorHandlingMiddleware)
    app.add_middleware(LoggingMiddleware)

    @app.get("/", response_class=HTMLResponse)
    async def root():
        """Landing page; served without authentication"""
        return INDEX_PAGE.format(version=__version__)

    app.include_router(metrics_router.router)
    return app


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="zpool-status-exporter",
        description="Export `zpool status` as Prometheus metrics",
    )
    parser.add_argument(
        "listen_address", nargs="?",
        help="HOST:PORT to listen on (default from HOST/PORT environment)",
    )
    parser.add_argument(
        "--basic-auth-keys-file", metavar="PATH",
        help="file with one user:password entry per line",
    )
    parser.add_argument(
        "--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        type=str.upper,
    )
    parser.add_argument(
        "--oneshot-test-print", action="store_true",
        help="print the metrics once to stdout and exit",
    )
    parser.add_argument(
        "--allow-root", action="store_true",
        help="allow running with effective uid 0",
    )
    parser.add_argument("--version", action="version", version=__version__)
    return parser


def check_not_root(allow_root: bool):
    """
    Raises:
        RunningAsRootError: effective uid is 0 and root was not allowed
    """
    geteuid = getattr(os, "geteuid", None)
    if geteuid is not None and geteuid() == 0 and not allow_root:
        raise RunningAsRootError()


async def render_once() -> str:
    """
    Run one metrics lookup.

    Raises:
        ZpoolStatusException: zpool failed or its output could not be parsed
    """
    service = await get_service_factory().create_pool_status_service()
    result = await service.get_metrics(time.perf_counter())
    if result.is_failure:
        raise result.error
    return result.value


def apply_arguments(config: ExporterConfig, args: argparse.Namespace):
    if args.listen_address:
        config.apply_listen_address(args.listen_address)
    if args.basic_auth_keys_file:
        config.server.basic_auth_keys_file = args.basic_auth_keys_file
    if args.log_level:
        config.server.log_level = args.log_level
    if args.allow_root:
        config.server.allow_root = True


def cli(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    config = get_config()
    try:
        apply_arguments(config, args)
    except ValueError as e:
        parser.error(str(e))

    # oneshot output goes to stdout; keep stderr quiet unless asked
    log_level = config.log_level
    if args.oneshot_test_print and not args.log_level:
        log_level = "WARNING"
    logging.basicConfig(level=getattr(logging, log_level), format=LOG_FORMAT)

    try:
        check_not_root(config.server.allow_root)
    except RunningAsRootError as e:
        logger.error(str(e))
        return 1

    configure_services(create_service_factory(config))

    if args.oneshot_test_print:
        try:
            sys.stdout.write(asyncio.run(render_once()))
        except ZpoolStatusException as e:
            print(f"# ERROR:\n# {e}", file=sys.stderr)
            return 1
        return 0

    auth_rules = None
    if config.basic_auth_keys_file:
        try:
            auth_rules = BasicAuthRules.from_file(config.basic_auth_keys_file)
        except AuthConfigError as e:
            logger.error(str(e))
            return 1

    # ensure fail-fast
    try:
        asyncio.run(render_once())
    except ZpoolStatusException as e:
        logger.error(f"Initial zpool status lookup failed: {e}")
        return 1

    logger.info(f"Configuration: {config.get_summary()}")
    uvicorn.run(
        create_app(auth_rules),
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
    )
    return 0


if __name__ == "__main__":
    sys.exit(cli())
