"""Postgres-backed goal/task store.

All statements are static SQL with bound parameters; column lists are fixed in this module and no
user-provided identifier is ever interpolated.
"""

from __future__ import annotations

from collections.abc import Sequence

from psycopg import AsyncConnection
from psycopg_pool import AsyncConnectionPool

from src.db.query import fetch_all, fetch_one
from src.goals.models import Goal, NewGoal, NewTask, Task
from src.intent.schema import GoalType

_GOAL_COLUMNS = (
    "id, user_id, goal_type, title, description, timeframe, parent_goal_id, target_date, "
    "progress, completed, created_at"
)
_TASK_COLUMNS = (
    "id, user_id, title, description, priority, related_goal_id, due_date, completed, created_at"
)


async def _insert_goal(conn: AsyncConnection, user_id: int, new: NewGoal) -> Goal:
    row = await fetch_one(
        conn,
        "INSERT INTO goals (user_id, goal_type, title, description, timeframe, "
        "parent_goal_id, target_date) VALUES (%s, %s, %s, %s, %s, %s, %s) "
        f"RETURNING {_GOAL_COLUMNS}",
        (
            user_id,
            str(new.goal_type),
            new.title,
            new.description,
            None if new.timeframe is None else str(new.timeframe),
            new.parent_goal_id,
            new.target_date,
        ),
    )
    if row is None:
        raise RuntimeError("INSERT INTO goals returned no row")
    return Goal.model_validate(row)


class PostgresGoalStore:
    """`GoalStore` implementation on top of an async psycopg pool."""

    def __init__(self, pool: AsyncConnectionPool) -> None:
        self._pool = pool

    async def list_goals(self, user_id: int, goal_type: GoalType | None = None) -> list[Goal]:
        async with self._pool.connection() as conn:
            if goal_type is None:
                rows = await fetch_all(
                    conn,
                    f"SELECT {_GOAL_COLUMNS} FROM goals WHERE user_id = %s ORDER BY id",
                    (user_id,),
                )
            else:
                rows = await fetch_all(
                    conn,
                    f"SELECT {_GOAL_COLUMNS} FROM goals WHERE user_id = %s AND goal_type = %s "
                    "ORDER BY id",
                    (user_id, str(goal_type)),
                )
        return [Goal.model_validate(row) for row in rows]

    async def find_goal(self, user_id: int, title: str) -> Goal | None:
        async with self._pool.connection() as conn:
            row = await fetch_one(
                conn,
                f"SELECT {_GOAL_COLUMNS} FROM goals "
                "WHERE user_id = %s AND lower(btrim(title)) = lower(btrim(%s)) "
                "ORDER BY id DESC LIMIT 1",
                (user_id, title),
            )
        return None if row is None else Goal.model_validate(row)

    async def create_goal(self, user_id: int, new: NewGoal) -> Goal:
        async with self._pool.connection() as conn:
            goal = await _insert_goal(conn, user_id, new)
            await conn.commit()
        return goal

    async def create_goals(self, user_id: int, new: Sequence[NewGoal]) -> list[Goal]:
        async with self._pool.connection() as conn:
            async with conn.transaction():
                return [await _insert_goal(conn, user_id, item) for item in new]

    async def update_goal_progress(self, user_id: int, goal_id: int, progress: int) -> Goal | None:
        async with self._pool.connection() as conn:
            row = await fetch_one(
                conn,
                "UPDATE goals SET progress = %s, completed = %s "
                f"WHERE id = %s AND user_id = %s RETURNING {_GOAL_COLUMNS}",
                (progress, progress == 100, goal_id, user_id),
            )
            await conn.commit()
        return None if row is None else Goal.model_validate(row)

    async def list_tasks(self, user_id: int) -> list[Task]:
        async with self._pool.connection() as conn:
            rows = await fetch_all(
                conn,
                f"SELECT {_TASK_COLUMNS} FROM tasks WHERE user_id = %s ORDER BY id",
                (user_id,),
            )
        return [Task.model_validate(row) for row in rows]

    async def find_task(self, user_id: int, title: str) -> Task | None:
        async with self._pool.connection() as conn:
            row = await fetch_one(
                conn,
                f"SELECT {_TASK_COLUMNS} FROM tasks "
                "WHERE user_id = %s AND lower(btrim(title)) = lower(btrim(%s)) "
                "ORDER BY completed ASC, id DESC LIMIT 1",
                (user_id, title),
            )
        return None if row is None else Task.model_validate(row)

    async def create_task(self, user_id: int, new: NewTask) -> Task:
        async with self._pool.connection() as conn:
            row = await fetch_one(
                conn,
                "INSERT INTO tasks (user_id, title, description, priority, related_goal_id, due_date) "
                f"VALUES (%s, %s, %s, %s, %s, %s) RETURNING {_TASK_COLUMNS}",
                (
                    user_id,
                    new.title,
                    new.description,
                    str(new.priority),
                    new.related_goal_id,
                    new.due_date,
                ),
            )
            await conn.commit()
        if row is None:
            raise RuntimeError("INSERT INTO tasks returned no row")
        return Task.model_validate(row)

    async def complete_task(self, user_id: int, task_id: int) -> Task | None:
        async with self._pool.connection() as conn:
            row = await fetch_one(
                conn,
                "UPDATE tasks SET completed = TRUE "
                f"WHERE id = %s AND user_id = %s RETURNING {_TASK_COLUMNS}",
                (task_id, user_id),
            )
            await conn.commit()
        return None if row is None else Task.model_validate(row)
