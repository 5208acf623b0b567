"""Async Postgres connection pool for the goal store.

Goal and task timestamps are `TIMESTAMPTZ` and target dates are `DATE`. Every pooled session is
pinned to UTC so both round-trip the same way regardless of the server's default timezone.
"""

from __future__ import annotations

from psycopg import AsyncConnection
from psycopg_pool import AsyncConnectionPool


async def ensure_utc(conn: AsyncConnection) -> None:
    """Pool `configure` hook: set the session timezone of a new connection to UTC."""

    async with conn.cursor() as cur:
        await cur.execute("SET TIME ZONE 'UTC'", prepare=False)
    # `SET` opens a transaction when autocommit is off; the pool only accepts idle connections.
    await conn.commit()


def create_pool(
        database_url: str | None,
        *,
        min_size: int = 1,
        max_size: int | None = None,
        timeout: float = 30.0,
) -> AsyncConnectionPool:
    """Create the closed pool used by `PostgresGoalStore`; the bot opens it at startup."""

    if not database_url:
        raise RuntimeError("DATABASE_URL is required when STORE_BACKEND=postgres")

    return AsyncConnectionPool(
        conninfo=database_url,
        min_size=min_size,
        max_size=max_size,
        timeout=timeout,
        open=False,
        configure=ensure_utc,
    )
