"""Environment and settings handling for the toolbelt MCP server.

Configuration comes from the process environment, layered with two optional
dotenv files loaded once at startup: ``.env`` provides base values and
``.env.local`` overrides both the base file and the inherited environment.
Tools read credentials from the environment at call time through
:func:`get_env_variable`.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from functools import partial
from pathlib import Path
from typing import Callable

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from toolbelt_mcp_server.errors import MISSING_CONFIGURATION, raise_mcp_error

logger = logging.getLogger(__name__)

BASE_ENV_FILE = ".env"
OVERRIDE_ENV_FILE = ".env.local"
SECRET_PLACEHOLDER = "***"


class ServerSettings(BaseSettings):
    """Process-wide settings read from ``TOOLBELT_*`` environment variables."""

    model_config = SettingsConfigDict(env_prefix="TOOLBELT_", extra="ignore")

    server_name: str = Field(
        default="toolbelt-mcp", description="Name reported to MCP hosts."
    )
    log_level: str = Field(default="INFO", description="Standard error log level.")
    http_timeout: float = Field(
        default=30.0, gt=0, description="Timeout in seconds for outbound HTTP calls."
    )
    secret_env_keys: tuple[str, ...] = Field(
        default=("SERPER_API_KEY", "SUPABASE_SERVICE_ROLE_KEY"),
        description="Environment variables whose values never appear in errors.",
    )


def load_environment(
    base: str | os.PathLike[str] = BASE_ENV_FILE,
    override: str | os.PathLike[str] = OVERRIDE_ENV_FILE,
) -> list[Path]:
    """Load the layered dotenv files into the process environment.

    Args:
        base: Dotenv file whose values never replace variables already set.
        override: Dotenv file whose values win over everything else.

    Returns:
        The files that existed and were loaded, in load order.

    """
    loaded: list[Path] = []
    for path, override_existing in ((Path(base), False), (Path(override), True)):
        if not path.is_file():
            continue
        load_dotenv(path, override=override_existing)
        logger.debug("Loaded environment from %s", path)
        loaded.append(path)
    return loaded


def get_env_variable(key: str, required: bool = False) -> str | None:
    """Read an environment variable at call time.

    Args:
        key: Name of the environment variable.
        required: Whether an unset or empty value is an error.

    Raises:
        MCPError: If the variable is required but not set.

    Returns:
        The value, or ``None`` when an optional variable is unset.

    """
    value = os.environ.get(key)
    if required and not value:
        raise_mcp_error(
            MISSING_CONFIGURATION,
            f"{key} environment variable not set. "
            "Please add it to your .env or .env.local file.",
            {"variable": key},
        )
    return value


def scrub_secrets(text: str, keys: Iterable[str]) -> str:
    """Replace the current value of every secret variable in ``text``."""
    for key in keys:
        value = os.environ.get(key)
        if value:
            text = text.replace(value, SECRET_PLACEHOLDER)
    return text


def secret_filter(settings: ServerSettings) -> Callable[[str], str]:
    """Build a message filter scrubbing the secrets named in ``settings``."""
    return partial(scrub_secrets, keys=settings.secret_env_keys)
