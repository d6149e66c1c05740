"""Tool definitions and result types for the toolbelt MCP core."""

from __future__ import annotations

from collections.abc import Awaitable, Mapping
from dataclasses import dataclass, field
from typing import Any, Callable, Literal

from pydantic import BaseModel, ConfigDict

from toolbelt_mcp.schema import describe_schema, validate_arguments


class ToolParameters(BaseModel):
    """Base parameters schema for MCP tools.

    Arguments the schema does not declare are dropped before the handler runs.
    """

    model_config = ConfigDict(extra="ignore")


@dataclass(frozen=True)
class TextContent:
    """A single text item of a tool result."""

    text: str
    type: Literal["text"] = "text"

    def to_dict(self) -> dict[str, str]:
        """Return the wire representation of the content item."""
        return {"type": self.type, "text": self.text}


@dataclass
class ToolResult:
    """Result returned by tool execution.

    Attributes:
        content: Ordered text items reported by the tool.
        is_error: Whether the result represents a handled failure.

    """

    content: list[TextContent] = field(default_factory=list)
    is_error: bool = False

    @classmethod
    def text(cls, text: str) -> ToolResult:
        """Build a successful result carrying a single text item."""
        return cls(content=[TextContent(text=text)])

    @classmethod
    def error(cls, text: str) -> ToolResult:
        """Build a soft-failure result carrying a single text item."""
        return cls(content=[TextContent(text=text)], is_error=True)

    @property
    def joined_text(self) -> str:
        """Concatenate every text item, one per line."""
        return "\n".join(item.text for item in self.content)

    def to_dict(self) -> dict[str, Any]:
        """Serialize the result to the protocol call response shape.

        Returns:
            Mapping with ``content`` and ``isError`` keys.

        """
        return {
            "content": [item.to_dict() for item in self.content],
            "isError": self.is_error,
        }


ToolHandler = Callable[[Any], Awaitable[ToolResult]]


@dataclass(frozen=True)
class ToolDefinition:
    """Description of a tool that can be registered with the server.

    Attributes:
        name: Unique name of the tool, used as the dispatch key.
        description: Human-readable description of the tool purpose.
        parameters_model: Pydantic model used to validate input parameters.
        handler: Coroutine function that executes the tool logic.
    """

    name: str
    description: str
    parameters_model: type[BaseModel]
    handler: ToolHandler

    def validate(self, parameters: Mapping[str, Any]) -> Any:
        """Validate and coerce incoming tool parameters.

        Args:
            parameters: Raw arguments provided for the tool.

        Raises:
            ArgumentValidationError: If one or more fields fail validation.

        Returns:
            The validated parameters object handed to the handler.
        """
        return validate_arguments(self.parameters_model, parameters)

    def metadata(self) -> dict[str, Any]:
        """Return a discovery-friendly description of the tool."""
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": describe_schema(self.parameters_model),
        }
