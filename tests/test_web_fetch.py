"""Tests for the markdown web fetch tool."""

from __future__ import annotations

import httpx
import pytest

from toolbelt_mcp.registry import build_registry
from toolbelt_mcp.server import MCPServer
from toolbelt_mcp_server.config import ServerSettings
from toolbelt_mcp_server.tools.web_fetch import (
    WebFetchParams,
    html_to_markdown,
    web_fetch_tool,
)

PAGE = """
<html>
  <head>
    <title>Example</title>
    <style>p { color: red; }</style>
    <script>var tracking = 1;</script>
  </head>
  <body>
    <h1>Title</h1>
    <ul><li>first</li><li>second</li></ul>
    <p><strong>bold</strong> and <em>soft</em></p>
  </body>
</html>
"""


def test_html_to_markdown_style() -> None:
    """Headings use ATX, bullets use dashes and scripts are dropped."""
    markdown = html_to_markdown(PAGE)

    assert "# Title" in markdown
    assert "- first" in markdown
    assert "- second" in markdown
    assert "**bold**" in markdown
    assert "*soft*" in markdown
    assert "tracking" not in markdown
    assert "color: red" not in markdown


@pytest.mark.anyio()
async def test_fetch_follows_redirects(settings: ServerSettings) -> None:
    """Redirects are followed and the requested URL is reported."""
    # Arrange
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/old":
            return httpx.Response(302, headers={"Location": "https://example.com/new"})
        return httpx.Response(200, html=PAGE)

    tool = web_fetch_tool(settings, transport=httpx.MockTransport(handler))

    # Act
    result = await tool.handler(WebFetchParams(url="https://example.com/old"))

    # Assert
    assert not result.is_error
    assert result.joined_text.startswith("# Fetched from: https://example.com/old\n\n")
    assert "# Title" in result.joined_text


@pytest.mark.anyio()
async def test_fetch_reports_http_status(settings: ServerSettings) -> None:
    """Non-success statuses carry the code and reason."""
    transport = httpx.MockTransport(lambda request: httpx.Response(404))
    tool = web_fetch_tool(settings, transport=transport)

    result = await tool.handler(WebFetchParams(url="https://example.com/missing"))

    assert result.is_error
    assert result.joined_text == "Failed to fetch URL: HTTP 404 Not Found"


@pytest.mark.anyio()
async def test_fetch_reports_network_errors(settings: ServerSettings) -> None:
    """Timeouts are returned as error results."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    tool = web_fetch_tool(settings, transport=httpx.MockTransport(handler))

    result = await tool.handler(WebFetchParams(url="https://example.com/slow"))

    assert result.is_error
    assert result.joined_text == "Error: timed out"


@pytest.mark.anyio()
async def test_invalid_url_is_rejected_before_fetching(
    settings: ServerSettings,
) -> None:
    """Malformed URLs fail validation and never reach the network."""
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200)

    server = MCPServer(
        build_registry(web_fetch_tool(settings, transport=httpx.MockTransport(handler)))
    )

    result = await server.call_tool("tight_web_fetch", {"url": "not a url"})

    assert result.is_error
    assert result.joined_text.startswith("Invalid arguments: url: ")
    assert requests == []


@pytest.mark.anyio()
async def test_fetch_reports_url_as_given(settings: ServerSettings) -> None:
    """The header echoes the caller's URL, not the normalised form."""
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, html="<p>home</p>")

    server = MCPServer(
        build_registry(web_fetch_tool(settings, transport=httpx.MockTransport(handler)))
    )

    result = await server.call_tool("tight_web_fetch", {"url": "https://example.com"})

    assert result.joined_text == "# Fetched from: https://example.com\n\nhome"
    assert str(requests[0].url) == "https://example.com/"
