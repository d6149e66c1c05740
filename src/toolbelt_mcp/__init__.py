"""toolbelt_mcp package initialization."""

from toolbelt_mcp.registry import ToolRegistry, build_registry
from toolbelt_mcp.schema import (
    ArgumentValidationError,
    FieldError,
    describe_schema,
    validate_arguments,
)
from toolbelt_mcp.server import MCPServer
from toolbelt_mcp.tools import TextContent, ToolDefinition, ToolParameters, ToolResult

__all__ = [
    "ArgumentValidationError",
    "FieldError",
    "MCPServer",
    "TextContent",
    "ToolDefinition",
    "ToolParameters",
    "ToolRegistry",
    "ToolResult",
    "build_registry",
    "describe_schema",
    "validate_arguments",
]
