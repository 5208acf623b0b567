"""Response composer.

Turns a `ParsedCommand` into a one-sentence confirmation or a clarifying question. Pure and
deterministic: the same command always yields the same text.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from pydantic import ValidationError

from src.intent.schema import IntentName, ParsedCommand, parsed_command_from_obj

NOT_UNDERSTOOD = "I'm not sure I understand. Could you rephrase that?"
UNSUPPORTED = "I'm not sure how to help with that yet."
HELP_TEXT = (
    "I can help you manage your goals and tasks. You can say things like 'show my goals', "
    "'add a new task', 'update goal progress', or 'complete task'."
)


def _show_goals(entities: Any) -> str:
    return f"Showing your {entities.goal_type or 'all'} goals."


def _show_tasks(_entities: Any) -> str:
    return "Here are your tasks."


def _add_goal(entities: Any) -> str:
    kind = f"{entities.goal_type} goal" if entities.goal_type else "goal"
    called = f' called "{entities.title}"' if entities.title else ""
    return f"I'll help you add a new {kind}{called}."


def _update_goal(entities: Any) -> str:
    if entities.title and entities.progress is not None:
        return f'Updating goal "{entities.title}" to {entities.progress}% progress.'
    return "Which goal would you like to update?"


def _complete_task(entities: Any) -> str:
    if entities.task_title:
        return f'Marking task "{entities.task_title}" as complete.'
    return "Which task would you like to complete?"


def _create_task(entities: Any) -> str:
    if entities.task_title:
        return f'Creating new task: "{entities.task_title}".'
    return "What task would you like to create?"


def _goal_progress(entities: Any) -> str:
    if entities.title:
        return f'Checking progress for "{entities.title}".'
    return "Which goal would you like to check progress on?"


def _help(_entities: Any) -> str:
    return HELP_TEXT


def _generate_goals(entities: Any) -> str:
    return f"Generating {entities.goal_type or 'short-term'} goals based on your long-term goals."


RESPONDERS: dict[IntentName, Callable[[Any], str]] = {
    IntentName.SHOW_GOALS: _show_goals,
    IntentName.SHOW_TASKS: _show_tasks,
    IntentName.ADD_GOAL: _add_goal,
    IntentName.UPDATE_GOAL: _update_goal,
    IntentName.COMPLETE_TASK: _complete_task,
    IntentName.CREATE_TASK: _create_task,
    IntentName.GOAL_PROGRESS: _goal_progress,
    IntentName.HELP: _help,
    IntentName.GENERATE_GOALS: _generate_goals,
}


def compose(parsed: ParsedCommand | Mapping[str, Any]) -> str:
    """Compose the reply text for a parsed command.

    Plain mappings (`{"intent": ..., "entities": {...}}`) are validated first; a mapping that does
    not describe a known command gets the generic fallback sentence.
    """

    if not isinstance(parsed, ParsedCommand):
        if not isinstance(parsed, Mapping):
            return UNSUPPORTED
        if not parsed.get("intent"):
            return NOT_UNDERSTOOD
        try:
            parsed = parsed_command_from_obj(dict(parsed))
        except ValidationError:
            return UNSUPPORTED

    if parsed.intent is None:
        return NOT_UNDERSTOOD

    responder = RESPONDERS.get(parsed.intent)
    if responder is None:
        return UNSUPPORTED
    return responder(parsed.entities)
