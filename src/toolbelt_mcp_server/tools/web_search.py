"""Web search tool backed by the Serper API."""

from __future__ import annotations

import logging

import httpx
from pydantic import BaseModel, Field

from toolbelt_mcp.tools import ToolDefinition, ToolParameters, ToolResult
from toolbelt_mcp_server.config import ServerSettings, get_env_variable
from toolbelt_mcp_server.errors import UPSTREAM_ERROR, MCPError, raise_mcp_error
from toolbelt_mcp_server.tools.common import error_text, http_client

logger = logging.getLogger(__name__)

SERPER_SEARCH_URL = "https://google.serper.dev/search"


class WebSearchParams(ToolParameters):
    """Parameters for the non_code_web_search tool."""

    query: str = Field(min_length=1, description="Search query")
    num: int = Field(
        default=10,
        strict=True,
        ge=1,
        le=100,
        description="Number of results to return (1-100, default: 10)",
    )


class SearchResult(BaseModel):
    """One organic result returned by Serper."""

    title: str = ""
    link: str = ""
    snippet: str = ""
    position: int | None = None


class SearchResponse(BaseModel):
    """Subset of the Serper search response used by the tool."""

    organic: list[SearchResult] = Field(default_factory=list)


def _status_message(status_code: int) -> str:
    if status_code == 401:
        return "Invalid API key"
    if status_code == 429:
        return "API rate limit exceeded"
    if status_code >= 500:
        return "Serper API service error"
    return f"Serper API error ({status_code})"


def parse_response(response: httpx.Response) -> SearchResponse:
    """Validate a Serper response, raising :class:`MCPError` on failure."""
    if not response.is_success:
        raise_mcp_error(
            UPSTREAM_ERROR,
            _status_message(response.status_code),
            {"status": response.status_code},
        )
    try:
        return SearchResponse.model_validate(response.json())
    except ValueError as exc:
        raise MCPError(
            UPSTREAM_ERROR, "Serper API returned invalid JSON", {"reason": str(exc)}
        ) from exc


def format_results(query: str, results: list[SearchResult]) -> str:
    """Render organic results as a numbered plain-text list."""
    entries = "\n\n".join(
        f"{index}. {result.title}\n   URL: {result.link}\n   {result.snippet}"
        for index, result in enumerate(results, start=1)
    )
    return f'Found {len(results)} results for "{query}":\n\n{entries}'


def web_search_tool(
    settings: ServerSettings, transport: httpx.AsyncBaseTransport | None = None
) -> ToolDefinition:
    """Create the non_code_web_search tool definition."""

    async def handler(params: WebSearchParams) -> ToolResult:
        try:
            api_key = get_env_variable("SERPER_API_KEY", required=True)
            async with http_client(settings, transport) as client:
                response = await client.post(
                    SERPER_SEARCH_URL,
                    headers={"X-API-KEY": api_key or ""},
                    json={"q": params.query, "num": params.num},
                )
            payload = parse_response(response)
        except MCPError as error:
            logger.warning("Web search failed: %s", error.to_dict())
            return ToolResult.error(error_text(error))
        except httpx.HTTPError as exc:
            logger.warning("Serper request failed: %s", exc)
            return ToolResult.error(error_text(exc))

        if not payload.organic:
            return ToolResult.text(f'No search results found for "{params.query}"')
        return ToolResult.text(format_results(params.query, payload.organic))

    return ToolDefinition(
        name="non_code_web_search",
        description=(
            "Search the web and extract structured data (titles, URLs, snippets) "
            "from multiple search results. Use this for discovering sources, "
            "researching topics, finding documentation, or exploring options. "
            "Ideal for data extraction when you need to identify relevant URLs or "
            "gather information from across multiple web sources."
        ),
        parameters_model=WebSearchParams,
        handler=handler,
    )
