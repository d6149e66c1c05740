"""Shared test fixtures."""

from __future__ import annotations

import logging
from collections.abc import Iterator

import pytest

from toolbelt_mcp_server.config import ServerSettings

CREDENTIAL_VARIABLES = (
    "SERPER_API_KEY",
    "SUPABASE_URL",
    "SUPABASE_SERVICE_ROLE_KEY",
)


@pytest.fixture()
def anyio_backend() -> str:
    """Run async tests on asyncio only."""
    return "asyncio"


@pytest.fixture()
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Remove tool credentials from the environment for the test."""
    for name in CREDENTIAL_VARIABLES:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture()
def settings() -> ServerSettings:
    """Provide default server settings."""
    return ServerSettings(http_timeout=5.0)


@pytest.fixture(autouse=True)
def _detach_log_handler() -> Iterator[None]:
    """Drop the standard-error handler installed by ``configure_logging``."""
    yield
    root = logging.getLogger()
    for handler in list(root.handlers):
        if handler.get_name() == "toolbelt-mcp-stderr":
            root.removeHandler(handler)
