# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up environment variables before any imports
# - Provides raw ASGI scope/receive/send helpers
# - Collects request logging output from caplog
# =============================================================================

import os

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

import logging

import pytest

REQUEST_LOGGER = "app.middleware.request_logging"


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def request_log(caplog):
    """
    Enable DEBUG for the logging middleware and return a getter for its messages.

    Usage:
        messages = request_log()
    """
    caplog.set_level(logging.DEBUG, logger=REQUEST_LOGGER)

    def messages() -> list[str]:
        return [r.getMessage() for r in caplog.records if r.name == REQUEST_LOGGER]

    return messages


@pytest.fixture
def make_scope():
    """Factory for minimal ASGI HTTP scopes."""

    def _make_scope(
        path: str = "/test",
        method: str = "GET",
        headers: list[tuple[bytes, bytes]] | None = None,
        query_string: bytes = b"",
        **extra,
    ) -> dict:
        scope = {
            "type": "http",
            "asgi": {"version": "3.0"},
            "http_version": "1.1",
            "method": method,
            "scheme": "http",
            "path": path,
            "raw_path": path.encode(),
            "query_string": query_string,
            "root_path": "",
            "headers": headers if headers is not None else [(b"host", b"testserver")],
            "client": ("127.0.0.1", 50000),
            "server": ("testserver", 80),
        }
        scope.update(extra)
        return scope

    return _make_scope


@pytest.fixture
def make_receive():
    """Factory for ASGI receive callables yielding the given body chunks."""

    def _make_receive(*chunks: bytes):
        messages = [
            {"type": "http.request", "body": chunk, "more_body": i < len(chunks) - 1}
            for i, chunk in enumerate(chunks or (b"",))
        ]

        async def receive():
            if messages:
                return messages.pop(0)
            return {"type": "http.disconnect"}

        return receive

    return _make_receive


@pytest.fixture
def sent_messages():
    """A list plus an ASGI send callable appending to it."""
    sent: list[dict] = []

    async def send(message):
        sent.append(message)

    return sent, send
