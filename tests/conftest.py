"""
zpool-status-exporter Test Configuration and Fixtures

This module provides common fixtures and configuration for the exporter tests.
"""

import os
from datetime import datetime, timezone
from unittest.mock import AsyncMock, Mock

import pytest
from fastapi.testclient import TestClient

from zpool_status_exporter.api.auth import BasicAuthRules
from zpool_status_exporter.api.dependencies import configure_services
from zpool_status_exporter.config import reset_config
from zpool_status_exporter.zpool.core.interfaces.command_executor import (
    CommandResult,
    ICommandExecutor,
)
from zpool_status_exporter.zpool.core.interfaces.logger_interface import ILogger
from zpool_status_exporter.zpool.factories.service_factory import ServiceFactoryBuilder
from zpool_status_exporter.zpool.services.pool_status_service import PoolStatusService

from tests.fixtures.zpool_status_samples import NOW_UNIX

ENVIRONMENT_KEYS = (
    "LOG_LEVEL", "HOST", "PORT", "BASIC_AUTH_KEYS_FILE", "ALLOW_ROOT",
    "ZPOOL_COMMAND", "COMMAND_TIMEOUT", "TIMEZONE",
)


def zpool_output(stdout: str) -> CommandResult:
    """Successful `zpool status` run printing stdout."""
    return CommandResult(returncode=0, stdout=stdout, stderr="")


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep host exporter settings out of the tests and reset cached config."""
    for key in ENVIRONMENT_KEYS:
        monkeypatch.delenv(key, raising=False)
        monkeypatch.delenv(f"ZPOOL_EXPORTER_{key}", raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def now():
    """Reference "now" two hours after the sample scrub timestamp."""
    return datetime.fromtimestamp(NOW_UNIX, tz=timezone.utc)


@pytest.fixture
def mock_executor():
    """Mock command executor; tests set execute_zpool.return_value."""
    mock = Mock(spec=ICommandExecutor)
    mock.execute_zpool = AsyncMock(return_value=zpool_output(""))
    return mock


@pytest.fixture
def mock_logger():
    """Mock ILogger recording every call."""
    return Mock(spec=ILogger)


@pytest.fixture
def pool_status_service(mock_executor, mock_logger):
    """PoolStatusService reading scan timestamps as UTC."""
    return PoolStatusService(mock_executor, mock_logger, timezone=timezone.utc)


@pytest.fixture
def service_factory(mock_executor):
    """Service factory wired to the mock executor and installed for the API."""
    factory = ServiceFactoryBuilder() \
        .with_executor(mock_executor) \
        .with_timezone(timezone.utc) \
        .with_log_level("CRITICAL") \
        .build()
    configure_services(factory)
    return factory


@pytest.fixture
def keys_file(tmp_path):
    """Basic auth keys file with two accounts."""
    path = tmp_path / "keys"
    path.write_text("prometheus:scrape-secret\nbackup:other-secret\n", encoding="utf-8")
    return path


@pytest.fixture
def test_client(service_factory):
    """Test client for the app without authentication."""
    from zpool_status_exporter.main import create_app
    with TestClient(create_app()) as client:
        yield client


@pytest.fixture
def auth_client(service_factory, keys_file):
    """Test client for the app with basic auth enabled."""
    from zpool_status_exporter.main import create_app
    rules = BasicAuthRules.from_file(str(keys_file))
    with TestClient(create_app(rules)) as client:
        yield client


@pytest.fixture
def not_root(mocker):
    """Pretend the tests run as an unprivileged user."""
    if hasattr(os, "geteuid"):
        mocker.patch("zpool_status_exporter.main.os.geteuid", return_value=1000)
