"""Echo tool with optional case transformation."""

from __future__ import annotations

from typing import Literal

from pydantic import Field

from toolbelt_mcp.tools import ToolDefinition, ToolParameters, ToolResult


class EchoParams(ToolParameters):
    """Parameters for the echo tool."""

    message: str = Field(description="The message to echo back")
    transform: Literal["uppercase", "lowercase", "none"] = Field(
        default="none", description="Optional text transformation to apply"
    )


def echo_tool() -> ToolDefinition:
    """Create the echo tool definition."""

    async def handler(params: EchoParams) -> ToolResult:
        text = params.message
        if params.transform == "uppercase":
            text = text.upper()
        elif params.transform == "lowercase":
            text = text.lower()
        return ToolResult.text(text)

    return ToolDefinition(
        name="echo",
        description=(
            "Echo a message back, optionally transforming it to uppercase or lowercase"
        ),
        parameters_model=EchoParams,
        handler=handler,
    )
