"""Ordered, build-once registry of tool definitions."""

from __future__ import annotations

from collections.abc import Iterator

from toolbelt_mcp.tools import ToolDefinition


class ToolRegistry:
    """Ordered collection of tools keyed by their exact name.

    The registry is populated once during startup and then frozen; after that
    it is only read by the dispatcher.
    """

    def __init__(self) -> None:
        """Initialize an empty, mutable registry."""
        self._tools: dict[str, ToolDefinition] = {}
        self._frozen = False

    @property
    def frozen(self) -> bool:
        """Whether the registry still accepts registrations."""
        return self._frozen

    def register(self, tool: ToolDefinition) -> None:
        """Register a tool with the registry.

        Args:
            tool: Tool definition to register.

        Raises:
            RuntimeError: If the registry has already been frozen.
            ValueError: If a tool with the same name is already registered.

        """
        if self._frozen:
            raise RuntimeError(
                f"Cannot register tool '{tool.name}': registry is frozen"
            )
        if tool.name in self._tools:
            raise ValueError(f"Tool '{tool.name}' is already registered")
        self._tools[tool.name] = tool

    def freeze(self) -> ToolRegistry:
        """Reject further registrations and return the registry."""
        self._frozen = True
        return self

    def list(self) -> list[ToolDefinition]:
        """Return registered tools in registration order."""
        return list(self._tools.values())

    def find(self, name: str) -> ToolDefinition | None:
        """Look up a tool by exact, case-sensitive name.

        Returns:
            The registered tool, or ``None`` when no tool has that name.

        """
        return self._tools.get(name)

    def names(self) -> list[str]:
        """Return registered tool names in registration order."""
        return list(self._tools)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __iter__(self) -> Iterator[ToolDefinition]:
        return iter(self.list())

    def __len__(self) -> int:
        return len(self._tools)


def build_registry(*tools: ToolDefinition) -> ToolRegistry:
    """Register every tool in order and freeze the resulting registry.

    Args:
        *tools: Tool definitions to register.

    Raises:
        ValueError: If two tools share a name.

    Returns:
        A frozen registry.

    """
    registry = ToolRegistry()
    for tool in tools:
        registry.register(tool)
    return registry.freeze()
