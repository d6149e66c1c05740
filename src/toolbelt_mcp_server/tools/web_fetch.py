"""Fetch a web page and return it as markdown."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Callable

import httpx
from markdownify import ASTERISK, ATX, markdownify
from pydantic import Field, HttpUrl, PrivateAttr, model_validator

from toolbelt_mcp.tools import ToolDefinition, ToolParameters, ToolResult
from toolbelt_mcp_server.config import ServerSettings
from toolbelt_mcp_server.tools.common import error_text, http_client

logger = logging.getLogger(__name__)


class WebFetchParams(ToolParameters):
    """Parameters for the tight_web_fetch tool."""

    url: HttpUrl = Field(description="The URL to fetch and convert to markdown")
    _requested_url: str | None = PrivateAttr(default=None)

    @model_validator(mode="wrap")
    @classmethod
    def _keep_requested_url(
        cls, data: Any, handler: Callable[[Any], WebFetchParams]
    ) -> WebFetchParams:
        params = handler(data)
        if isinstance(data, Mapping) and isinstance(data.get("url"), str):
            params._requested_url = data["url"]
        return params

    @property
    def requested_url(self) -> str:
        """The URL exactly as the caller sent it, before normalisation."""
        return self._requested_url or str(self.url)


def html_to_markdown(html: str) -> str:
    """Convert HTML to markdown with ATX headings and dash bullets.

    Script and style elements are dropped by the converter.
    """
    return markdownify(
        html,
        heading_style=ATX,
        bullets="-",
        strong_em_symbol=ASTERISK,
    ).strip()


def web_fetch_tool(
    settings: ServerSettings, transport: httpx.AsyncBaseTransport | None = None
) -> ToolDefinition:
    """Create the tight_web_fetch tool definition."""

    async def handler(params: WebFetchParams) -> ToolResult:
        url = params.requested_url
        try:
            async with http_client(settings, transport) as client:
                response = await client.get(str(params.url), follow_redirects=True)
        except httpx.HTTPError as exc:
            logger.warning("Fetching %s failed: %s", url, exc)
            return ToolResult.error(error_text(exc))

        if not response.is_success:
            return ToolResult.error(
                "Failed to fetch URL: "
                f"HTTP {response.status_code} {response.reason_phrase}"
            )

        markdown = html_to_markdown(response.text)
        return ToolResult.text(f"# Fetched from: {url}\n\n{markdown}")

    return ToolDefinition(
        name="tight_web_fetch",
        description=(
            "Extract complete content from a specific URL by fetching and "
            "converting HTML to clean markdown. Use this for deep data extraction "
            "from a single source - perfect for pulling full text from "
            "documentation pages, articles, blog posts, or any web page. Returns "
            "structured markdown suitable for parsing, analysis, or reading the "
            "entire page content."
        ),
        parameters_model=WebFetchParams,
        handler=handler,
    )
