"""Pytest fixtures for dynudns test suite."""

import logging
import logging.handlers
import os
from collections.abc import Generator

import pytest

from dynudns.client import DYNU_API_URL, DynuClient
from dynudns.pacing import NoPacer

# Live Dynu API credentials (integration tests are skipped without them)
DYNU_HOST_NAME = os.environ.get("DYNU_HOST_NAME", "")
DYNU_APIKEY = os.environ.get("DYNU_APIKEY", "")

API_KEY = "test-api-key-0123456789"


@pytest.fixture
def api_url() -> str:
    """Return the Dynu API base URL used in mocked tests."""
    return DYNU_API_URL


@pytest.fixture
def api_key() -> str:
    """Return the fake API key used in mocked tests."""
    return API_KEY


@pytest.fixture
def dynu_client(api_key: str) -> Generator[DynuClient]:
    """Create a DynuClient for example.com that never sleeps."""
    client = DynuClient(hostname="example.com", api_key=api_key, pacer=NoPacer())
    yield client
    client.close()


@pytest.fixture(scope="session")
def dynu_host_name() -> str:
    """Return the live Dynu zone, skipping when unset."""
    if not DYNU_HOST_NAME or not DYNU_APIKEY:
        pytest.skip("DYNU_HOST_NAME and DYNU_APIKEY not set; skipping live Dynu API tests")
    return DYNU_HOST_NAME


@pytest.fixture(scope="session")
def dynu_api_key(dynu_host_name: str) -> str:
    """Return the live Dynu API key."""
    return DYNU_APIKEY


class LogCapture:
    """Helper class to capture and inspect log records."""

    def __init__(self, handler: logging.handlers.MemoryHandler) -> None:
        self._handler = handler

    @property
    def records(self) -> list[logging.LogRecord]:
        """Get all captured log records."""
        return self._handler.buffer

    def get_records(
        self, level: int | None = None, name: str | None = None
    ) -> list[logging.LogRecord]:
        """Get log records filtered by level and/or logger name.

        Args:
            level: Filter by log level (e.g., logging.INFO).
            name: Filter by logger name prefix (e.g., "dynudns.client").

        Returns:
            List of matching log records.
        """
        records = self.records
        if level is not None:
            records = [r for r in records if r.levelno == level]
        if name is not None:
            records = [r for r in records if r.name.startswith(name)]
        return records

    def get_messages(self, level: int | None = None, name: str | None = None) -> list[str]:
        """Get log messages filtered by level and/or logger name."""
        return [r.getMessage() for r in self.get_records(level, name)]

    def clear(self) -> None:
        """Clear all captured log records."""
        self._handler.buffer.clear()


@pytest.fixture
def log_capture() -> Generator[LogCapture]:
    """Capture logs from the dynudns library during a test.

    Usage:
        def test_something(log_capture):
            # do something that logs
            assert "DNS record created" in log_capture.get_messages(logging.INFO)
    """
    handler = logging.handlers.MemoryHandler(capacity=1000)
    handler.setLevel(logging.DEBUG)

    dynudns_logger = logging.getLogger("dynudns")
    original_level = dynudns_logger.level
    dynudns_logger.setLevel(logging.DEBUG)
    dynudns_logger.addHandler(handler)

    try:
        yield LogCapture(handler)
    finally:
        dynudns_logger.removeHandler(handler)
        dynudns_logger.setLevel(original_level)
        handler.close()
