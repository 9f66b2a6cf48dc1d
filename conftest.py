"""
Root pytest configuration.
"""

from __future__ import annotations

from collections.abc import Generator

import pytest

# Register shipper testing fixtures for all tests
pytest_plugins = ("cloudwatch_shipper.testing.fixtures",)


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for test categorization."""
    config.addinivalue_line(
        "markers",
        "critical: Tests that must never fail - core functionality",
    )
    config.addinivalue_line(
        "markers",
        "integration: Tests exercising timers and full lifecycles",
    )
    config.addinivalue_line(
        "markers",
        "slow: Tests that take >1 second",
    )
    config.addinivalue_line(
        "markers",
        "asyncio: Async tests",
    )
    config.addinivalue_line(
        "markers",
        "property: Property-based tests (may be slow)",
    )


@pytest.fixture(autouse=True)
def reset_diagnostics_cache() -> Generator[None, None, None]:
    """Reset the diagnostics enablement cache around each test.

    The diagnostics module caches `internal_logging_enabled` on first use;
    tests must not inherit it from one another.
    """
    import cloudwatch_shipper.core.diagnostics as diag

    diag.configure(enabled=None)
    yield
    diag.configure(enabled=None)


@pytest.fixture(autouse=True)
def isolate_shipper_environment(
    monkeypatch: pytest.MonkeyPatch,
) -> Generator[None, None, None]:
    """Drop host env vars and atexit registrations between tests."""
    from cloudwatch_shipper.core import shutdown

    monkeypatch.delenv("MOL_NODE_NAME", raising=False)
    monkeypatch.delenv("NODE_ENV", raising=False)
    yield
    shutdown._reset_for_tests()
