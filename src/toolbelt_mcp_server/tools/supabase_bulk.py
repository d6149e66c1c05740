"""Bulk insert tools for Supabase tables."""

from __future__ import annotations

import logging
from collections.abc import Awaitable
from dataclasses import dataclass
from typing import Annotated, Any, Callable, Literal, Union

import httpx
from pydantic import Field, RootModel
from supabase import (
    AsyncClient,
    AsyncSupabaseException,
    PostgrestAPIError,
    acreate_client,
)

from toolbelt_mcp.tools import ToolDefinition, ToolParameters, ToolResult
from toolbelt_mcp_server.config import get_env_variable
from toolbelt_mcp_server.errors import MCPError
from toolbelt_mcp_server.tools.common import error_text

logger = logging.getLogger(__name__)

SupabaseClientFactory = Callable[[], Awaitable[AsyncClient]]


class InsertCommand(ToolParameters):
    """Bulk insert records into a single table."""

    command: Literal["insert"] = Field(description="Command to run")
    table: str = Field(min_length=1, description="The table name to insert into")
    records: list[dict[str, Any]] = Field(
        min_length=1, description="Array of records to insert"
    )


class JoinConfig(ToolParameters):
    """Join table receiving the resolved id pairs."""

    table: str = Field(min_length=1, description="The join table name")
    src: str = Field(min_length=1, description="Column name for source foreign key")
    dst: str = Field(
        min_length=1, description="Column name for destination foreign key"
    )


class LookupConfig(ToolParameters):
    """Table and column used to resolve values into row ids."""

    table: str = Field(min_length=1, description="The table to look up IDs from")
    column: str = Field(
        min_length=1, description="The column to match values against"
    )


class ValuePair(ToolParameters):
    """Source and destination values to link."""

    src: str = Field(description="Source value to look up")
    dst: str = Field(description="Destination value to look up")


class InsertJoinCommand(ToolParameters):
    """Insert join rows by looking up ids in two related tables."""

    command: Literal["insert_join"] = Field(description="Command to run")
    join: JoinConfig = Field(description="Join table configuration")
    src: LookupConfig = Field(description="Source table lookup configuration")
    dst: LookupConfig = Field(description="Destination table lookup configuration")
    pairs: list[ValuePair] = Field(
        min_length=1, description="Array of src/dst value pairs"
    )


BulkCommand = Annotated[
    Union[InsertCommand, InsertJoinCommand], Field(discriminator="command")
]


class SupabaseBulkParams(RootModel[BulkCommand]):
    """Parameters for supabase_bulk, selected by the ``command`` field."""


@dataclass
class BulkOutcome:
    """Outcome of a bulk command before it is rendered as a tool result."""

    success: bool
    message: str
    count: int | None = None


async def create_supabase_client() -> AsyncClient:
    """Create a service-role client from the environment."""
    url = get_env_variable("SUPABASE_URL", required=True)
    key = get_env_variable("SUPABASE_SERVICE_ROLE_KEY", required=True)
    return await acreate_client(url or "", key or "")


def _api_error_message(error: PostgrestAPIError) -> str:
    return error.message or str(error)


async def run_insert(client: AsyncClient, command: InsertCommand) -> BulkOutcome:
    """Insert every record of ``command`` into its table."""
    try:
        response = await client.table(command.table).insert(command.records).execute()
    except PostgrestAPIError as error:
        return BulkOutcome(False, f"Insert failed: {_api_error_message(error)}")

    count = len(response.data) if response.data is not None else len(command.records)
    return BulkOutcome(
        True, f'Successfully inserted {count} records into "{command.table}"', count
    )


async def _lookup_ids(
    client: AsyncClient, lookup: LookupConfig, values: list[str]
) -> dict[str, str]:
    response = (
        await client.table(lookup.table)
        .select("*")
        .in_(lookup.column, values)
        .execute()
    )
    ids: dict[str, str] = {}
    for row in response.data or []:
        if lookup.column in row and "id" in row:
            ids[str(row[lookup.column])] = str(row["id"])
    return ids


async def run_insert_join(
    client: AsyncClient, command: InsertJoinCommand
) -> BulkOutcome:
    """Resolve value pairs into ids and insert the resulting join rows."""
    src_values = list(dict.fromkeys(pair.src for pair in command.pairs))
    dst_values = list(dict.fromkeys(pair.dst for pair in command.pairs))

    try:
        src_ids = await _lookup_ids(client, command.src, src_values)
    except PostgrestAPIError as error:
        return BulkOutcome(
            False,
            f'Failed to lookup source values from "{command.src.table}": '
            f"{_api_error_message(error)}",
        )
    try:
        dst_ids = await _lookup_ids(client, command.dst, dst_values)
    except PostgrestAPIError as error:
        return BulkOutcome(
            False,
            f'Failed to lookup destination values from "{command.dst.table}": '
            f"{_api_error_message(error)}",
        )

    join_rows: list[dict[str, str]] = []
    missing: list[str] = []
    for pair in command.pairs:
        src_id = src_ids.get(pair.src)
        if src_id is None:
            missing.append(
                f'Source "{pair.src}" not found in '
                f"{command.src.table}.{command.src.column}"
            )
            continue
        dst_id = dst_ids.get(pair.dst)
        if dst_id is None:
            missing.append(
                f'Destination "{pair.dst}" not found in '
                f"{command.dst.table}.{command.dst.column}"
            )
            continue
        join_rows.append({command.join.src: src_id, command.join.dst: dst_id})

    if not join_rows:
        return BulkOutcome(
            False,
            "No valid pairs to insert. Missing lookups:\n" + "\n".join(missing),
        )

    try:
        response = await client.table(command.join.table).insert(join_rows).execute()
    except PostgrestAPIError as error:
        return BulkOutcome(
            False,
            f'Insert into join table "{command.join.table}" failed: '
            f"{_api_error_message(error)}",
        )

    count = len(response.data) if response.data is not None else len(join_rows)
    message = f'Successfully inserted {count} records into "{command.join.table}"'
    if missing:
        message += (
            f"\n\nWarning: {len(missing)} pairs skipped due to missing lookups:\n"
            + "\n".join(missing)
        )
    return BulkOutcome(True, message, count)


CommandRunner = Callable[..., Awaitable[BulkOutcome]]

_COMMAND_RUNNERS: dict[type[ToolParameters], CommandRunner] = {
    InsertCommand: run_insert,
    InsertJoinCommand: run_insert_join,
}


def supabase_bulk_tool(
    client_factory: SupabaseClientFactory = create_supabase_client,
) -> ToolDefinition:
    """Create the supabase_bulk tool definition."""

    async def handler(command: InsertCommand | InsertJoinCommand) -> ToolResult:
        try:
            client = await client_factory()
        except MCPError as error:
            logger.warning("Supabase is not configured: %s", error.to_dict())
            return ToolResult.error(error_text(error))
        except AsyncSupabaseException as exc:
            logger.warning("Could not create Supabase client: %s", exc)
            return ToolResult.error(error_text(exc))

        runner = _COMMAND_RUNNERS[type(command)]
        try:
            outcome = await runner(client, command)
        except (httpx.HTTPError, AsyncSupabaseException, PostgrestAPIError) as exc:
            logger.warning("supabase_bulk %s failed: %s", command.command, exc)
            return ToolResult.error(error_text(exc))
        if not outcome.success:
            logger.info("supabase_bulk %s failed: %s", command.command, outcome.message)
            return ToolResult.error(error_text(outcome.message))
        return ToolResult.text(outcome.message)

    return ToolDefinition(
        name="supabase_bulk",
        description=(
            "Perform bulk database operations on Supabase. Supports two commands:\n"
            "\n"
            '1. "insert" - Bulk insert records into a table\n'
            '   Required: command="insert", table (string), '
            "records (array of objects)\n"
            "\n"
            '2. "insert_join" - Insert join table records by looking up IDs from '
            "related tables\n"
            '   Required: command="insert_join", join (table config), '
            "src (lookup config), dst (lookup config), "
            "pairs (array of {src, dst} values)"
        ),
        parameters_model=SupabaseBulkParams,
        handler=handler,
    )
