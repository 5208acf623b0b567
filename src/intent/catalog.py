"""Ordered intent rule catalog.

Rules are evaluated in declaration order and every rule is tried; when several rules match the
same utterance, the last matching rule wins. Utterances such as "add a task and complete it" match
both COMPLETE_TASK and CREATE_TASK and resolve to CREATE_TASK.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from src.intent.schema import IntentName

_GOAL_TYPE = r"(long[- ]term|short[- ]term)"


@dataclass(frozen=True)
class IntentRule:
    """A single intent trigger pattern (case-insensitive, searched anywhere in the text)."""

    intent: IntentName
    pattern: re.Pattern[str]

    def matches(self, text: str) -> bool:
        return self.pattern.search(text) is not None


def _rule(intent: IntentName, pattern: str) -> IntentRule:
    return IntentRule(intent=intent, pattern=re.compile(pattern, flags=re.IGNORECASE))


INTENT_RULES: tuple[IntentRule, ...] = (
    _rule(IntentName.SHOW_GOALS, rf"show (my|all)?\s?{_GOAL_TYPE}? goals"),
    _rule(IntentName.SHOW_TASKS, r"show (my|all)?\s?tasks"),
    _rule(IntentName.ADD_GOAL, rf"add (a|new)?\s?{_GOAL_TYPE}? goal"),
    _rule(IntentName.UPDATE_GOAL, r"update (goal|progress)"),
    _rule(IntentName.COMPLETE_TASK, r"((mark|set) (as )?complete|complete)"),
    _rule(IntentName.CREATE_TASK, r"(add|create) (a|new)?\s?task"),
    _rule(IntentName.GOAL_PROGRESS, r"progress (for|on)"),
    _rule(IntentName.HELP, r"help|what can (you|i) (do|say)"),
    _rule(IntentName.GENERATE_GOALS, r"generate (short[- ]term)? goals"),
)


def matching_intents(text: str) -> list[IntentName]:
    """Return every intent whose rule matches, in catalog order."""

    return [rule.intent for rule in INTENT_RULES if rule.matches(text)]


def classify(text: str) -> IntentName | None:
    """Resolve the intent of a normalized utterance (last matching rule wins)."""

    matched = matching_intents(text)
    if not matched:
        return None
    return matched[-1]
