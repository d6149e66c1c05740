"""Adapters for exposing toolbelt tools via FastMCP."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from fastmcp import FastMCP
from fastmcp.tools import Tool
from fastmcp.tools import ToolResult as FastMCPToolResult
from mcp.types import TextContent
from pydantic import PrivateAttr

from toolbelt_mcp.registry import build_registry
from toolbelt_mcp.schema import describe_schema
from toolbelt_mcp.server import MCPServer
from toolbelt_mcp.tools import ToolDefinition
from toolbelt_mcp_server.config import ServerSettings, secret_filter
from toolbelt_mcp_server.tools import build_tools

SERVER_INSTRUCTIONS = (
    "Web search, web page fetching, Supabase bulk inserts and small utilities "
    "exposed over the Model Context Protocol."
)


class ToolDefinitionAdapter(Tool):
    """Expose a :class:`ToolDefinition` as a FastMCP tool.

    Calls are routed through :meth:`MCPServer.call_tool` so validation and
    error shaping stay in the dispatcher.
    """

    _server: MCPServer | None = PrivateAttr(default=None)

    def __init__(self, definition: ToolDefinition, server: MCPServer) -> None:
        """Create a FastMCP tool wrapper for the provided definition."""
        super().__init__(
            name=definition.name,
            description=definition.description,
            parameters=describe_schema(definition.parameters_model),
            tags=set(),
        )
        self._server = server

    async def run(self, arguments: dict[str, Any]) -> FastMCPToolResult:
        """Dispatch the call and translate the result for FastMCP."""
        if self._server is None:
            raise RuntimeError(f"Tool '{self.name}' is not bound to a server")
        result = await self._server.call_tool(self.name, arguments)
        return FastMCPToolResult(
            content=[
                TextContent(type="text", text=item.text) for item in result.content
            ],
            is_error=result.is_error,
        )


def to_fastmcp_tools(server: MCPServer) -> list[Tool]:
    """Convert every registered tool into a FastMCP-compatible tool."""
    return [
        ToolDefinitionAdapter(definition, server) for definition in server.registry
    ]


def build_server(
    settings: ServerSettings, tools: Sequence[ToolDefinition] | None = None
) -> MCPServer:
    """Build the dispatcher over a frozen registry of ``tools``."""
    registry = build_registry(*(build_tools(settings) if tools is None else tools))
    return MCPServer(registry, message_filter=secret_filter(settings))


def build_fastmcp_app(
    settings: ServerSettings | None = None,
    tools: Sequence[ToolDefinition] | None = None,
) -> tuple[FastMCP, MCPServer]:
    """Create a FastMCP server instance with all toolbelt tools registered."""
    settings = settings or ServerSettings()
    server = build_server(settings, tools)
    app = FastMCP(name=settings.server_name, instructions=SERVER_INSTRUCTIONS)
    for tool in to_fastmcp_tools(server):
        app.add_tool(tool)
    return app, server
