"""Tests for tool dispatch through MCPServer."""

from __future__ import annotations

import anyio
import pytest

from toolbelt_mcp.registry import build_registry
from toolbelt_mcp.server import MCPServer
from toolbelt_mcp.tools import ToolDefinition, ToolParameters, ToolResult
from toolbelt_mcp_server.config import ServerSettings, secret_filter
from toolbelt_mcp_server.tools.calculator import calculator_tool
from toolbelt_mcp_server.tools.echo import EchoParams, echo_tool
from toolbelt_mcp_server.tools.web_search import web_search_tool


class _NoParams(ToolParameters):
    """Tool without parameters."""


def _tool(name: str, handler: object) -> ToolDefinition:
    return ToolDefinition(
        name=name,
        description=f"{name} tool",
        parameters_model=_NoParams,
        handler=handler,  # type: ignore[arg-type]
    )


async def _boom(_: _NoParams) -> ToolResult:
    raise RuntimeError("boom")


async def _silent(_: _NoParams) -> ToolResult:
    raise RuntimeError()


async def _empty(_: _NoParams) -> ToolResult:
    return ToolResult()


async def _empty_error(_: _NoParams) -> ToolResult:
    return ToolResult(is_error=True)


async def _not_a_result(_: _NoParams) -> str:
    return "plain text"


def _sync_raiser(_: _NoParams) -> ToolResult:
    raise ValueError("sync failure")


@pytest.fixture()
def server(settings: ServerSettings) -> MCPServer:
    """Dispatcher over the standard tools plus misbehaving ones."""
    registry = build_registry(
        calculator_tool(),
        echo_tool(),
        web_search_tool(settings),
        _tool("boom", _boom),
        _tool("silent", _silent),
        _tool("empty", _empty),
        _tool("empty_error", _empty_error),
        _tool("not_a_result", _not_a_result),
        _tool("sync_raiser", _sync_raiser),
    )
    return MCPServer(registry)


@pytest.mark.anyio()
async def test_echo_round_trip(server: MCPServer) -> None:
    """A valid call returns the handler's content."""
    result = await server.call_tool("echo", {"message": "hi", "transform": "uppercase"})

    assert result.to_dict() == {
        "content": [{"type": "text", "text": "HI"}],
        "isError": False,
    }


@pytest.mark.anyio()
async def test_unknown_tool_is_reported(server: MCPServer) -> None:
    """Unknown tool names yield an error result naming the tool."""
    result = await server.call_tool("nope", {})

    assert result.to_dict() == {
        "content": [{"type": "text", "text": "Unknown tool: nope"}],
        "isError": True,
    }


@pytest.mark.anyio()
async def test_arithmetic_call(server: MCPServer) -> None:
    """Calculator calls render the operation and result."""
    result = await server.call_tool("calculate", {"operation": "add", "a": 2, "b": 3})

    assert not result.is_error
    assert result.joined_text == "2 add 3 = 5"


@pytest.mark.anyio()
async def test_missing_required_argument(server: MCPServer) -> None:
    """Validation failures name the missing field and skip the handler."""
    result = await server.call_tool("non_code_web_search", {})

    assert result.is_error
    assert result.joined_text.startswith("Invalid arguments: ")
    assert "query" in result.joined_text


@pytest.mark.anyio()
async def test_invalid_argument_types(server: MCPServer) -> None:
    """Every wrongly typed field is reported."""
    result = await server.call_tool(
        "calculate", {"operation": "add", "a": "two", "b": "three"}
    )

    assert result.is_error
    assert "a: " in result.joined_text
    assert "b: " in result.joined_text


@pytest.mark.anyio()
async def test_none_arguments_mean_empty(server: MCPServer) -> None:
    """Omitted arguments are validated as an empty object."""
    result = await server.call_tool("echo")

    assert result.is_error
    assert "message" in result.joined_text


@pytest.mark.anyio()
async def test_soft_error_passes_through(server: MCPServer) -> None:
    """Handler-reported failures are returned unchanged."""
    result = await server.call_tool(
        "calculate", {"operation": "divide", "a": 1, "b": 0}
    )

    assert result.to_dict() == {
        "content": [{"type": "text", "text": "Error: Cannot divide by zero"}],
        "isError": True,
    }


@pytest.mark.anyio()
async def test_handler_exception_is_contained(server: MCPServer) -> None:
    """A raising handler yields an error result and the server keeps serving."""
    # Act
    failed = await server.call_tool("boom", {})
    followup = await server.call_tool("echo", {"message": "still here"})

    # Assert
    assert failed.is_error
    assert failed.joined_text == "Error executing tool: boom"
    assert followup.joined_text == "still here"


@pytest.mark.anyio()
async def test_exception_without_message(server: MCPServer) -> None:
    """Exceptions with no message fall back to a generic text."""
    result = await server.call_tool("silent", {})

    assert result.joined_text == "Error executing tool: Unknown error"


@pytest.mark.anyio()
async def test_sync_handler_exception_is_contained(server: MCPServer) -> None:
    """Errors raised synchronously by a handler are still contained."""
    result = await server.call_tool("sync_raiser", {})

    assert result.is_error
    assert result.joined_text == "Error executing tool: sync failure"


@pytest.mark.anyio()
async def test_success_without_content_becomes_error(server: MCPServer) -> None:
    """A successful result must carry at least one content item."""
    result = await server.call_tool("empty", {})

    assert result.is_error
    assert result.joined_text == "Error executing tool: 'empty' returned no content"


@pytest.mark.anyio()
async def test_error_without_content_gets_message(server: MCPServer) -> None:
    """Error results never come back empty."""
    result = await server.call_tool("empty_error", {})

    assert result.to_dict() == {
        "content": [{"type": "text", "text": "Unknown error"}],
        "isError": True,
    }


@pytest.mark.anyio()
async def test_invalid_return_value_becomes_error(server: MCPServer) -> None:
    """Handlers that do not return a ToolResult are reported."""
    result = await server.call_tool("not_a_result", {})

    assert result.is_error
    assert "returned an invalid result" in result.joined_text


@pytest.mark.anyio()
async def test_concurrent_calls_keep_their_results(server: MCPServer) -> None:
    """Concurrent calls each receive their own result."""
    results: dict[str, str] = {}

    async def call(message: str) -> None:
        result = await server.call_tool("echo", {"message": message})
        results[message] = result.joined_text

    async with anyio.create_task_group() as group:
        for message in ("one", "two", "three"):
            group.start_soon(call, message)

    assert results == {"one": "one", "two": "two", "three": "three"}


@pytest.mark.anyio()
async def test_secret_values_are_scrubbed(
    monkeypatch: pytest.MonkeyPatch, settings: ServerSettings
) -> None:
    """Failure texts never echo configured secret values."""
    # Arrange
    monkeypatch.setenv("SERPER_API_KEY", "sk-very-secret")

    async def leaky(_: _NoParams) -> ToolResult:
        raise RuntimeError("request with key sk-very-secret was rejected")

    server = MCPServer(
        build_registry(_tool("leaky", leaky)),
        message_filter=secret_filter(settings),
    )

    # Act
    result = await server.call_tool("leaky", {})

    # Assert
    assert "sk-very-secret" not in result.joined_text
    assert result.joined_text == (
        "Error executing tool: request with key *** was rejected"
    )


def test_list_tools_is_stable(server: MCPServer) -> None:
    """Listing twice yields identical catalogs in registration order."""
    first = server.list_tools()
    second = server.list_tools()

    assert first == second
    assert [entry["name"] for entry in first] == server.available_tools()
    assert first[0]["name"] == "calculate"


def test_list_tools_describes_inputs(server: MCPServer) -> None:
    """Catalog entries carry the introspected input schema."""
    catalog = {entry["name"]: entry for entry in server.list_tools()}

    echo = catalog["echo"]
    assert echo["description"].startswith("Echo a message back")
    assert echo["inputSchema"]["required"] == ["message"]
    assert echo["inputSchema"]["properties"]["message"]["type"] == "string"
    assert catalog["boom"]["inputSchema"] == {
        "type": "object",
        "properties": {},
        "required": [],
    }


def test_echo_params_model_is_used_for_validation() -> None:
    """Tool definitions validate with their own parameters model."""
    params = echo_tool().validate({"message": "x"})

    assert isinstance(params, EchoParams)


@pytest.mark.anyio()
async def test_stray_arguments_are_ignored(server: MCPServer) -> None:
    """Arguments the tool does not declare do not fail the call."""
    result = await server.call_tool("echo", {"message": "hi", "extra": 1})

    assert result.to_dict() == {
        "content": [{"type": "text", "text": "hi"}],
        "isError": False,
    }
