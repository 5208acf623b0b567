"""Command executor.

Maps a `ParsedCommand` onto goal/task store operations and builds the reply shown to the user.
The reply always starts from the composer's sentence; store results are appended after it.

Store errors are not swallowed here: the transport boundary decides how to report them.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import UTC, date, datetime
from typing import Any

from pydantic import ValidationError

from src.goals.models import Goal, NewGoal, NewTask, Task, Timeframe
from src.goals.planner import plan_short_term_goals
from src.goals.store import GoalStore
from src.intent.catalog import matching_intents
from src.intent.composer import compose
from src.intent.normalize import normalize_text
from src.intent.schema import GoalType, IntentName, ParsedCommand

logger = logging.getLogger(__name__)

PROGRESS_OUT_OF_RANGE = "Progress must be between 0 and 100 percent."
EMPTY_TITLE = "I couldn't save that because the title is empty."


@dataclass(frozen=True)
class CommandOutcome:
    """Reply text plus whether the store was changed or queried on the user's behalf."""

    parsed: ParsedCommand
    reply: str
    performed: bool


@dataclass(frozen=True)
class _Context:
    parsed: ParsedCommand
    user_id: int
    store: GoalStore
    today: date

    @property
    def entities(self) -> Any:
        return self.parsed.entities

    def reply(self, *extra: str, performed: bool = True) -> CommandOutcome:
        text = compose(self.parsed)
        for part in extra:
            text += part if part.startswith("\n") else f" {part}"
        return CommandOutcome(parsed=self.parsed, reply=text, performed=performed)

    def plain(self, text: str) -> CommandOutcome:
        return CommandOutcome(parsed=self.parsed, reply=text, performed=False)


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}" if count == 1 else f"{count} {noun}s"


def _format_goal(goal: Goal) -> str:
    line = f"- {goal.title} ({goal.progress}%)"
    if goal.completed:
        line += " [done]"
    return line


def _format_task(task: Task) -> str:
    mark = "x" if task.completed else " "
    return f"[{mark}] {task.title}"


async def _show_goals(ctx: _Context) -> CommandOutcome:
    goal_type: GoalType | None = ctx.entities.goal_type
    goals = await ctx.store.list_goals(ctx.user_id, goal_type)
    if not goals:
        kind = f"{goal_type} " if goal_type else ""
        return ctx.reply(f"You don't have any {kind}goals yet.")
    return ctx.reply("\n" + "\n".join(_format_goal(g) for g in goals))


async def _show_tasks(ctx: _Context) -> CommandOutcome:
    tasks = await ctx.store.list_tasks(ctx.user_id)
    if not tasks:
        return ctx.reply("You don't have any tasks yet.")
    return ctx.reply("\n" + "\n".join(_format_task(t) for t in tasks))


async def _add_goal(ctx: _Context) -> CommandOutcome:
    title: str | None = ctx.entities.title
    if not title:
        return ctx.reply(
            'What should it be called? For example: add a long-term goal called "Learn Piano".',
            performed=False,
        )

    goal_type: GoalType = ctx.entities.goal_type or GoalType.long_term
    try:
        new = NewGoal(
            goal_type=goal_type,
            title=title,
            timeframe=Timeframe.weekly if goal_type == GoalType.short_term else None,
        )
    except ValidationError:
        return ctx.plain(EMPTY_TITLE)

    await ctx.store.create_goal(ctx.user_id, new)
    return ctx.reply("Done.")


async def _update_goal(ctx: _Context) -> CommandOutcome:
    title: str | None = ctx.entities.title
    progress: int | None = ctx.entities.progress
    if not title or progress is None:
        return ctx.reply(performed=False)
    if not 0 <= progress <= 100:
        return ctx.plain(PROGRESS_OUT_OF_RANGE)

    goal = await ctx.store.find_goal(ctx.user_id, title)
    if goal is None:
        return ctx.plain(f'I couldn\'t find a goal called "{title}".')

    updated = await ctx.store.update_goal_progress(ctx.user_id, goal.id, progress)
    if updated is None:
        return ctx.plain(f'I couldn\'t find a goal called "{title}".')
    return ctx.reply("Done.")


async def _complete_task(ctx: _Context) -> CommandOutcome:
    title: str | None = ctx.entities.task_title
    if not title:
        return ctx.reply(performed=False)

    task = await ctx.store.find_task(ctx.user_id, title)
    if task is None:
        return ctx.plain(f'I couldn\'t find a task called "{title}".')
    if task.completed:
        return ctx.plain("That task is already complete.")

    completed = await ctx.store.complete_task(ctx.user_id, task.id)
    if completed is None:
        return ctx.plain(f'I couldn\'t find a task called "{title}".')
    return ctx.reply("Done.")


async def _create_task(ctx: _Context) -> CommandOutcome:
    title: str | None = ctx.entities.task_title
    if not title:
        return ctx.reply(performed=False)

    try:
        new = NewTask(title=title)
    except ValidationError:
        return ctx.plain(EMPTY_TITLE)

    await ctx.store.create_task(ctx.user_id, new)
    return ctx.reply("Done.")


async def _goal_progress(ctx: _Context) -> CommandOutcome:
    title: str | None = ctx.entities.title
    if not title:
        return ctx.reply(performed=False)

    goal = await ctx.store.find_goal(ctx.user_id, title)
    if goal is None:
        return ctx.plain(f'I couldn\'t find a goal called "{title}".')
    if goal.completed:
        return ctx.reply("It is complete.")
    return ctx.reply(f"It is at {goal.progress}% progress.")


async def _generate_goals(ctx: _Context) -> CommandOutcome:
    if ctx.entities.goal_type == GoalType.long_term:
        return ctx.plain("I can only generate short-term goals from your long-term goals.")

    long_term = [
        g for g in await ctx.store.list_goals(ctx.user_id, GoalType.long_term) if not g.completed
    ]
    if not long_term:
        return ctx.plain("You don't have any open long-term goals yet. Add a long-term goal first.")

    planned = [new for goal in long_term for new in plan_short_term_goals(goal, today=ctx.today)]
    created = await ctx.store.create_goals(ctx.user_id, planned)

    return ctx.reply(
        f"Created {_plural(len(created), 'short-term goal')} "
        f"for {_plural(len(long_term), 'long-term goal')}."
    )


_HANDLERS: dict[IntentName, Callable[[_Context], Awaitable[CommandOutcome]]] = {
    IntentName.SHOW_GOALS: _show_goals,
    IntentName.SHOW_TASKS: _show_tasks,
    IntentName.ADD_GOAL: _add_goal,
    IntentName.UPDATE_GOAL: _update_goal,
    IntentName.COMPLETE_TASK: _complete_task,
    IntentName.CREATE_TASK: _create_task,
    IntentName.GOAL_PROGRESS: _goal_progress,
    IntentName.GENERATE_GOALS: _generate_goals,
}


async def execute_command(
        parsed: ParsedCommand,
        *,
        user_id: int,
        store: GoalStore,
        today: date | None = None,
) -> CommandOutcome:
    """Apply a parsed command for `user_id` and return the reply.

    Commands without a store action (HELP, unrecognized input) reply with the composed text only.
    """

    if isinstance(parsed.original_command, str):
        matched = matching_intents(normalize_text(parsed.original_command))
        if len(matched) > 1:
            logger.debug(
                "ambiguous command matched=%s resolved=%s",
                ",".join(matched),
                parsed.intent,
            )

    handler = None if parsed.intent is None else _HANDLERS.get(parsed.intent)
    if handler is None:
        outcome = CommandOutcome(parsed=parsed, reply=compose(parsed), performed=False)
    else:
        ctx = _Context(
            parsed=parsed,
            user_id=user_id,
            store=store,
            today=today or datetime.now(UTC).date(),
        )
        outcome = await handler(ctx)

    logger.info(
        "executed intent=%s performed=%s user_id=%s",
        parsed.intent,
        outcome.performed,
        user_id,
    )
    return outcome
