"""In-process goal/task store.

Used by default and in tests. State lives for the lifetime of the process only.
"""

from __future__ import annotations

from collections.abc import Sequence
from itertools import count

from src.goals.models import Goal, NewGoal, NewTask, Task
from src.goals.store import same_title
from src.intent.schema import GoalType


class MemoryGoalStore:
    """Dictionary-backed implementation of `GoalStore`."""

    def __init__(self) -> None:
        self._goals: dict[int, Goal] = {}
        self._tasks: dict[int, Task] = {}
        self._goal_ids = count(1)
        self._task_ids = count(1)

    def _owned_goal(self, user_id: int, goal_id: int) -> Goal | None:
        goal = self._goals.get(goal_id)
        if goal is None or goal.user_id != user_id:
            return None
        return goal

    def _owned_task(self, user_id: int, task_id: int) -> Task | None:
        task = self._tasks.get(task_id)
        if task is None or task.user_id != user_id:
            return None
        return task

    async def list_goals(self, user_id: int, goal_type: GoalType | None = None) -> list[Goal]:
        return [
            g
            for _, g in sorted(self._goals.items())
            if g.user_id == user_id and (goal_type is None or g.goal_type == goal_type)
        ]

    async def find_goal(self, user_id: int, title: str) -> Goal | None:
        matches = [g for g in await self.list_goals(user_id) if same_title(g.title, title)]
        return matches[-1] if matches else None

    async def create_goal(self, user_id: int, new: NewGoal) -> Goal:
        goal = Goal(id=next(self._goal_ids), user_id=user_id, **new.model_dump())
        self._goals[goal.id] = goal
        return goal

    async def create_goals(self, user_id: int, new: Sequence[NewGoal]) -> list[Goal]:
        goals = [Goal(id=next(self._goal_ids), user_id=user_id, **item.model_dump()) for item in new]
        self._goals.update((g.id, g) for g in goals)
        return goals

    async def update_goal_progress(self, user_id: int, goal_id: int, progress: int) -> Goal | None:
        goal = self._owned_goal(user_id, goal_id)
        if goal is None:
            return None

        updated = Goal.model_validate(
            {**goal.model_dump(), "progress": progress, "completed": progress == 100}
        )
        self._goals[goal_id] = updated
        return updated

    async def list_tasks(self, user_id: int) -> list[Task]:
        return [t for _, t in sorted(self._tasks.items()) if t.user_id == user_id]

    async def find_task(self, user_id: int, title: str) -> Task | None:
        matches = [t for t in await self.list_tasks(user_id) if same_title(t.title, title)]
        if not matches:
            return None
        open_tasks = [t for t in matches if not t.completed]
        return (open_tasks or matches)[-1]

    async def create_task(self, user_id: int, new: NewTask) -> Task:
        task = Task(id=next(self._task_ids), user_id=user_id, **new.model_dump())
        self._tasks[task.id] = task
        return task

    async def complete_task(self, user_id: int, task_id: int) -> Task | None:
        task = self._owned_task(user_id, task_id)
        if task is None:
            return None

        updated = task.model_copy(update={"completed": True})
        self._tasks[task_id] = updated
        return updated
