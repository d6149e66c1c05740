"""Shared helpers for toolbelt tools."""

from __future__ import annotations

import httpx

from toolbelt_mcp_server.config import ServerSettings

USER_AGENT = "Mozilla/5.0 (compatible; MCPBot/1.0)"
UNKNOWN_ERROR_MESSAGE = "Unknown error occurred"


def http_client(
    settings: ServerSettings, transport: httpx.AsyncBaseTransport | None = None
) -> httpx.AsyncClient:
    """Create an outbound HTTP client honoring the configured timeout."""
    return httpx.AsyncClient(
        timeout=settings.http_timeout,
        transport=transport,
        headers={"User-Agent": USER_AGENT},
    )


def error_text(error: BaseException | str) -> str:
    """Render a failure as the ``Error: ...`` text reported to the host."""
    message = str(error) or UNKNOWN_ERROR_MESSAGE
    return f"Error: {message}"
