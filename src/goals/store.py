"""Goal/task store interface.

Every operation is scoped by `user_id`. Lookups return `None` for unknown ids or titles (including
ids that belong to another user); backends never raise for "not found".
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from src.goals.models import Goal, NewGoal, NewTask, Task
from src.intent.schema import GoalType


class GoalStore(Protocol):
    """Persistence operations used by the command executor."""

    async def list_goals(self, user_id: int, goal_type: GoalType | None = None) -> list[Goal]:
        """List a user's goals ordered by id, optionally filtered by category."""

    async def find_goal(self, user_id: int, title: str) -> Goal | None:
        """Find the most recent goal whose title equals `title` (case-insensitive)."""

    async def create_goal(self, user_id: int, new: NewGoal) -> Goal: ...

    async def create_goals(self, user_id: int, new: Sequence[NewGoal]) -> list[Goal]:
        """Create several goals at once; either all of them are stored or none is."""

    async def update_goal_progress(self, user_id: int, goal_id: int, progress: int) -> Goal | None:
        """Set progress (0..100); a goal at 100% is marked completed."""

    async def list_tasks(self, user_id: int) -> list[Task]: ...

    async def find_task(self, user_id: int, title: str) -> Task | None:
        """Find a task by title (case-insensitive), preferring open tasks over completed ones."""

    async def create_task(self, user_id: int, new: NewTask) -> Task: ...

    async def complete_task(self, user_id: int, task_id: int) -> Task | None: ...


def same_title(left: str, right: str) -> bool:
    """Case-insensitive, whitespace-insensitive title comparison used by all backends."""

    return left.strip().casefold() == right.strip().casefold()
