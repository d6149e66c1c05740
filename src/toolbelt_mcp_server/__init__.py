"""Model Context Protocol server exposing web, database and utility tools."""

from toolbelt_mcp_server.config import ServerSettings, get_env_variable
from toolbelt_mcp_server.errors import MCPError
from toolbelt_mcp_server.tools import build_tools

__all__ = [
    "MCPError",
    "ServerSettings",
    "build_tools",
    "get_env_variable",
]
