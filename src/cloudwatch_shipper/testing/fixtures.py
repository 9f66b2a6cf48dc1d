"""Pytest fixtures for shipper tests.

Register with ``pytest_plugins = ("cloudwatch_shipper.testing.fixtures",)``.
"""

from __future__ import annotations

from collections.abc import AsyncIterator

import pytest
import pytest_asyncio

from ..core.settings import CoreSettings, Settings
from ..plugins.sinks.cloudwatch import CloudWatchShipper
from .mocks import MockHost, MockLogsClient


@pytest.fixture
def logs_client() -> MockLogsClient:
    return MockLogsClient()


@pytest.fixture
def mock_host() -> MockHost:
    return MockHost()


@pytest.fixture
def quiet_settings() -> Settings:
    """Settings with metrics on and the atexit drain off."""
    return Settings(
        core=CoreSettings(enable_metrics=True, atexit_drain_enabled=False)
    )


@pytest_asyncio.fixture
async def running_shipper(
    logs_client: MockLogsClient, mock_host: MockHost, quiet_settings: Settings
) -> AsyncIterator[CloudWatchShipper]:
    """Initialized shipper with a long interval, stopped after the test."""
    shipper = CloudWatchShipper(
        {"log_group_name": "test-group", "source": "tests", "hostname": "host-1"},
        client_factory=logs_client,
        settings=quiet_settings,
        interval=60_000,
    )
    await shipper.init(mock_host)
    yield shipper
    await shipper.stop()
