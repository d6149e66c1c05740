"""Entry point for the toolbelt MCP server."""

from __future__ import annotations

import argparse
import json
import logging

import anyio
from pydantic import ValidationError

from toolbelt_mcp_server.config import ServerSettings, load_environment
from toolbelt_mcp_server.fastmcp_adapter import build_fastmcp_app
from toolbelt_mcp_server.logging_config import configure_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the server CLI."""
    parser = argparse.ArgumentParser(description="Toolbelt MCP server")
    parser.add_argument(
        "--transport",
        choices=["stdio", "http"],
        default="stdio",
        help="Transport used to serve MCP requests.",
    )
    parser.add_argument("--host", default="127.0.0.1", help="HTTP bind host.")
    parser.add_argument("--port", type=int, default=8000, help="HTTP bind port.")
    parser.add_argument("--path", default="/mcp", help="HTTP endpoint path.")
    parser.add_argument("--log-level", help="Override the configured log level.")
    parser.add_argument(
        "--catalog", action="store_true", help="Print the tool catalog and exit."
    )
    parser.add_argument("--call", metavar="TOOL", help="Call one tool and exit.")
    parser.add_argument(
        "--arguments",
        default="{}",
        help="JSON object of arguments for --call.",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Load configuration, register tools and serve or run a diagnostic."""
    parser = build_parser()
    args = parser.parse_args(argv)

    load_environment()
    try:
        settings = ServerSettings()
    except ValidationError as error:
        configure_logging()
        logger.error("Invalid server settings: %s", error)
        return 1
    configure_logging(args.log_level or settings.log_level)

    try:
        app, server = build_fastmcp_app(settings)
    except Exception:
        logger.exception("Failed to start MCP server")
        return 1
    logger.info("Registered tools: %s", ", ".join(server.available_tools()))

    if args.catalog:
        print(json.dumps({"tools": server.list_tools()}, indent=2))
        return 0

    if args.call:
        try:
            arguments = json.loads(args.arguments)
        except json.JSONDecodeError as error:
            parser.error(f"--arguments is not valid JSON: {error}")
        result = anyio.run(server.call_tool, args.call, arguments)
        print(json.dumps(result.to_dict(), indent=2))
        return 1 if result.is_error else 0

    logger.info("Starting %s over %s", settings.server_name, args.transport)
    try:
        if args.transport == "stdio":
            app.run(transport="stdio")
        else:
            app.run(transport="http", host=args.host, port=args.port, path=args.path)
    except Exception:
        logger.exception("MCP server stopped with an error")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
