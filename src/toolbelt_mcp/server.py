"""Tool dispatcher for the toolbelt MCP server.

This module maps a tool-call request (a tool name plus raw arguments) onto a
validated, executed and uniformly shaped :class:`ToolResult`. The dispatcher is
free of transport details: adapters translate wire messages into
:meth:`MCPServer.call_tool` and :meth:`MCPServer.list_tools` calls.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Callable

from toolbelt_mcp.registry import ToolRegistry
from toolbelt_mcp.schema import ArgumentValidationError
from toolbelt_mcp.tools import ToolResult

logger = logging.getLogger(__name__)

UNKNOWN_ERROR_MESSAGE = "Unknown error"

MessageFilter = Callable[[str], str]


def _identity(message: str) -> str:
    return message


class MCPServer:
    """Dispatcher resolving tool calls against a frozen registry.

    Every call yields exactly one :class:`ToolResult`. Unknown tools, invalid
    arguments and handler failures are reported as error results rather than
    raised, so a misbehaving tool never terminates the process.
    """

    def __init__(
        self,
        registry: ToolRegistry,
        *,
        message_filter: MessageFilter | None = None,
    ) -> None:
        """Create a dispatcher for the provided registry.

        Args:
            registry: Registry of tools, normally already frozen.
            message_filter: Optional callable applied to every failure text
                before it is returned, e.g. to scrub secret values.

        """
        self._registry = registry
        self._message_filter = message_filter or _identity

    @property
    def registry(self) -> ToolRegistry:
        """Registry the dispatcher resolves tool names against."""
        return self._registry

    def available_tools(self) -> list[str]:
        """List the names of registered tools in registration order."""
        return self._registry.names()

    def list_tools(self) -> list[dict[str, Any]]:
        """Produce the host-facing tool catalog.

        The catalog is rebuilt on every call so it always reflects the
        registry.

        Returns:
            One ``{name, description, inputSchema}`` mapping per tool.

        """
        return [tool.metadata() for tool in self._registry.list()]

    def _failure(self, message: str) -> ToolResult:
        return ToolResult.error(self._message_filter(message))

    async def call_tool(
        self, name: str, arguments: Mapping[str, Any] | None = None
    ) -> ToolResult:
        """Execute a registered tool.

        Args:
            name: Exact name of the tool to execute.
            arguments: Raw arguments for the tool; ``None`` means no arguments.

        Returns:
            The handler's result, or an error result describing why the call
            could not be completed.

        """
        tool = self._registry.find(name)
        if tool is None:
            logger.warning("Unknown tool requested: %s", name)
            return self._failure(f"Unknown tool: {name}")

        try:
            params = tool.validate(arguments if arguments is not None else {})
        except ArgumentValidationError as error:
            logger.warning("Invalid arguments for tool '%s': %s", name, error)
            return self._failure(f"Invalid arguments: {error.summary()}")

        logger.debug("Dispatching tool '%s'", name)
        try:
            result = await tool.handler(params)
        except Exception as exc:
            logger.exception("Tool '%s' raised an unexpected error", name)
            message = str(exc) or UNKNOWN_ERROR_MESSAGE
            return self._failure(f"Error executing tool: {message}")

        if not isinstance(result, ToolResult):
            logger.error(
                "Tool '%s' returned %s instead of a ToolResult",
                name,
                type(result).__name__,
            )
            return self._failure(
                f"Error executing tool: '{name}' returned an invalid result"
            )
        if result.is_error:
            logger.info("Tool '%s' reported a failure", name)
            return result if result.content else self._failure(UNKNOWN_ERROR_MESSAGE)
        if not result.content:
            logger.error("Tool '%s' returned no content", name)
            return self._failure(f"Error executing tool: '{name}' returned no content")
        return result
