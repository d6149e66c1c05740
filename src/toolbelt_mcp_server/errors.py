"""Structured errors raised by toolbelt configuration and tools."""

from __future__ import annotations

from typing import NoReturn, TypedDict

MISSING_CONFIGURATION = "MissingConfiguration"
UPSTREAM_ERROR = "UpstreamError"


class ErrorBody(TypedDict):
    """Body of a structured error payload."""

    type: str
    message: str
    details: object | None


class MCPError(Exception):
    """Failure that a tool reports back to the host as an error result.

    ``details`` is logged alongside the error and must never carry secret
    values such as API keys.
    """

    def __init__(
        self, error_type: str, message: str, details: object | None = None
    ) -> None:
        """Record the error category, host-facing message and log details."""
        super().__init__(message)
        self.error_type = error_type
        self.message = message
        self.details = details

    def to_dict(self) -> dict[str, ErrorBody]:
        """Return the structured payload written to the log."""
        return {
            "error": {
                "type": self.error_type,
                "message": self.message,
                "details": self.details,
            }
        }


def raise_mcp_error(
    error_type: str, message: str, details: object | None = None
) -> NoReturn:
    """Raise an :class:`MCPError` of the given category."""
    raise MCPError(error_type, message, details)
