"""Safe DB query helpers.

These helpers are used by the Postgres store. They never interpolate user values into SQL and
return rows as plain dictionaries ready for model validation.
"""

from __future__ import annotations

from typing import Any, LiteralString, cast

from psycopg import AsyncConnection
from psycopg.rows import dict_row


async def fetch_all(conn: AsyncConnection, sql: str, params: tuple[Any, ...] = ()) -> list[dict[str, Any]]:
    """Execute a query and return every row as a dict.

    Contract:
        - The query must be parameterized; all values are passed via `params`.
        - DB errors are not swallowed (caller decides how to handle them).
    """

    async with conn.cursor(row_factory=dict_row) as cur:
        await cur.execute(cast(LiteralString, sql), params)
        return await cur.fetchall()


async def fetch_one(conn: AsyncConnection, sql: str, params: tuple[Any, ...] = ()) -> dict[str, Any] | None:
    """Execute a query and return the first row as a dict, or `None` if there are no rows."""

    async with conn.cursor(row_factory=dict_row) as cur:
        await cur.execute(cast(LiteralString, sql), params)
        return await cur.fetchone()
