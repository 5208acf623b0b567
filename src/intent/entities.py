"""Entity extractors.

Each extractor is a small deterministic pattern lookup that returns `None` instead of raising when
nothing is found. Patterns are case-insensitive, so callers pass the stripped utterance with its
original casing and quoted titles come back verbatim.
"""

from __future__ import annotations

import re
from collections.abc import Callable

from src.intent.schema import (
    AddGoalEntities,
    Entities,
    GoalTitleEntities,
    GoalType,
    GoalTypeEntities,
    IntentName,
    NoEntities,
    TaskEntities,
    UpdateGoalEntities,
)

_LONG_TERM_RE = re.compile(r"long[- ]term", flags=re.IGNORECASE)
_SHORT_TERM_RE = re.compile(r"short[- ]term", flags=re.IGNORECASE)
_TITLE_RE = re.compile(r"(?:called|titled|named) [\"'](.+?)[\"']", flags=re.IGNORECASE)
_TASK_TITLE_RE = re.compile(r"task [\"'](.+?)[\"']", flags=re.IGNORECASE)
_PERCENT_RE = re.compile(r"([0-9]+)\s?(%|percent)", flags=re.IGNORECASE)


def extract_goal_type(text: str) -> GoalType | None:
    """Detect a goal category; "long-term" takes precedence when both are mentioned."""

    if _LONG_TERM_RE.search(text):
        return GoalType.long_term
    if _SHORT_TERM_RE.search(text):
        return GoalType.short_term
    return None


def extract_goal_title(text: str) -> str | None:
    """Extract a quoted title introduced by "called", "titled" or "named"."""

    match = _TITLE_RE.search(text)
    if not match:
        return None
    return match.group(1)


def extract_percentage(text: str) -> int | None:
    """Extract an integer followed by "%" or "percent"."""

    match = _PERCENT_RE.search(text)
    if not match:
        return None
    return int(match.group(1), 10)


def extract_task_title(text: str) -> str | None:
    """Extract a quoted span after "task", falling back to the "called/titled/named" form."""

    match = _TASK_TITLE_RE.search(text) or _TITLE_RE.search(text)
    if not match:
        return None
    return match.group(1)


def _goal_type_entities(text: str) -> Entities:
    return GoalTypeEntities(goal_type=extract_goal_type(text))


def _add_goal_entities(text: str) -> Entities:
    return AddGoalEntities(goal_type=extract_goal_type(text), title=extract_goal_title(text))


def _update_goal_entities(text: str) -> Entities:
    return UpdateGoalEntities(title=extract_goal_title(text), progress=extract_percentage(text))


def _task_entities(text: str) -> Entities:
    return TaskEntities(task_title=extract_task_title(text))


def _goal_title_entities(text: str) -> Entities:
    return GoalTitleEntities(title=extract_goal_title(text))


_EXTRACTORS: dict[IntentName, Callable[[str], Entities]] = {
    IntentName.SHOW_GOALS: _goal_type_entities,
    IntentName.ADD_GOAL: _add_goal_entities,
    IntentName.UPDATE_GOAL: _update_goal_entities,
    IntentName.COMPLETE_TASK: _task_entities,
    IntentName.CREATE_TASK: _task_entities,
    IntentName.GOAL_PROGRESS: _goal_title_entities,
    IntentName.GENERATE_GOALS: _goal_type_entities,
}


def extract_entities(intent: IntentName | None, text: str) -> Entities:
    """Run the extraction routine owned by `intent` (empty record when it has none)."""

    if intent is None:
        return NoEntities()

    extractor = _EXTRACTORS.get(intent)
    if extractor is None:
        return NoEntities()
    return extractor(text)
