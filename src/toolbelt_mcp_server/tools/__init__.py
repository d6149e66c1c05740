"""Tool registration helpers for the toolbelt MCP server."""

from __future__ import annotations

from toolbelt_mcp.tools import ToolDefinition
from toolbelt_mcp_server.config import ServerSettings
from toolbelt_mcp_server.tools.calculator import calculator_tool
from toolbelt_mcp_server.tools.echo import echo_tool
from toolbelt_mcp_server.tools.supabase_bulk import supabase_bulk_tool
from toolbelt_mcp_server.tools.web_fetch import web_fetch_tool
from toolbelt_mcp_server.tools.web_search import web_search_tool


def build_tools(settings: ServerSettings | None = None) -> list[ToolDefinition]:
    """Instantiate all tool definitions in catalog order."""
    settings = settings or ServerSettings()
    return [
        calculator_tool(),
        echo_tool(),
        web_search_tool(settings),
        supabase_bulk_tool(),
        web_fetch_tool(settings),
    ]
