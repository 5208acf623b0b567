"""Application composition root.

This module wires together configuration and the goal store backend for the bot runtime.
"""

from __future__ import annotations

from dataclasses import dataclass

from psycopg_pool import AsyncConnectionPool

from src.config.settings import Settings
from src.db.pool import create_pool
from src.goals.memory import MemoryGoalStore
from src.goals.postgres import PostgresGoalStore
from src.goals.store import GoalStore


@dataclass(frozen=True)
class App:
    """Shared application dependencies for handlers."""

    settings: Settings
    store: GoalStore
    pool: AsyncConnectionPool | None = None


def create_app(settings: Settings) -> App:
    """Create the application container.

    Note:
        With the Postgres backend the returned pool is not opened. Call `await app.pool.open()` at
        startup.
    """

    if settings.store_backend == "postgres":
        pool = create_pool(settings.database_url, max_size=10)
        return App(settings=settings, store=PostgresGoalStore(pool), pool=pool)

    return App(settings=settings, store=MemoryGoalStore())
