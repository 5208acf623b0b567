"""Tests for the pattern-based command interpreter."""

from __future__ import annotations

import pytest

from src.intent.catalog import INTENT_RULES, classify, matching_intents
from src.intent.interpreter import interpret
from src.intent.schema import GoalType, IntentName, NoEntities


@pytest.mark.parametrize(
    ("text", "intent"),
    [
        ("show my goals", IntentName.SHOW_GOALS),
        ("Show all short term goals", IntentName.SHOW_GOALS),
        ("show all tasks", IntentName.SHOW_TASKS),
        ("show tasks", IntentName.SHOW_TASKS),
        ("add a goal", IntentName.ADD_GOAL),
        ("add new long-term goal", IntentName.ADD_GOAL),
        ("update goal", IntentName.UPDATE_GOAL),
        ("please update progress", IntentName.UPDATE_GOAL),
        ("mark as complete", IntentName.COMPLETE_TASK),
        ("complete the laundry", IntentName.COMPLETE_TASK),
        ("add task", IntentName.CREATE_TASK),
        ("create a task", IntentName.CREATE_TASK),
        ("what is my progress on reading", IntentName.GOAL_PROGRESS),
        ("help", IntentName.HELP),
        ("What can you do?", IntentName.HELP),
        ("what can i say", IntentName.HELP),
        ("generate short-term goals", IntentName.GENERATE_GOALS),
    ],
)
def test_intent_triggers(text: str, intent: IntentName) -> None:
    assert interpret(text).intent == intent


def test_catalog_declaration_order() -> None:
    assert [rule.intent for rule in INTENT_RULES] == [
        IntentName.SHOW_GOALS,
        IntentName.SHOW_TASKS,
        IntentName.ADD_GOAL,
        IntentName.UPDATE_GOAL,
        IntentName.COMPLETE_TASK,
        IntentName.CREATE_TASK,
        IntentName.GOAL_PROGRESS,
        IntentName.HELP,
        IntentName.GENERATE_GOALS,
    ]


def test_last_matching_rule_wins() -> None:
    text = "help me add a long-term goal"
    assert matching_intents(text) == [IntentName.ADD_GOAL, IntentName.HELP]
    assert classify(text) == IntentName.HELP


def test_create_task_overrides_complete_task() -> None:
    text = "add a task and mark it complete"
    assert matching_intents(text) == [IntentName.COMPLETE_TASK, IntentName.CREATE_TASK]
    assert interpret(text).intent == IntentName.CREATE_TASK


def test_goal_progress_overrides_update_goal() -> None:
    parsed = interpret("update progress on the goal called 'Run' to 50 percent")
    assert parsed.intent == IntentName.GOAL_PROGRESS
    assert parsed.entities.as_dict() == {"title": "Run"}


def test_unmatched_text_has_no_intent() -> None:
    parsed = interpret("what's the weather like")
    assert parsed.intent is None
    assert isinstance(parsed.entities, NoEntities)
    assert parsed.entities.as_dict() == {}


def test_add_goal_entities_keep_title_casing() -> None:
    parsed = interpret('add a long-term goal called "Learn Piano"')
    assert parsed.intent == IntentName.ADD_GOAL
    assert parsed.entities.as_dict() == {"goalType": "long-term", "title": "Learn Piano"}
    assert parsed.entities.goal_type == GoalType.long_term
    assert parsed.original_command == 'add a long-term goal called "Learn Piano"'


def test_update_goal_percentage_is_int() -> None:
    parsed = interpret("update goal progress to 42%")
    assert parsed.intent == IntentName.UPDATE_GOAL
    assert parsed.entities["progress"] == 42
    assert isinstance(parsed.entities["progress"], int)
    assert parsed.entities["title"] is None


def test_update_goal_with_title_and_percent_word() -> None:
    parsed = interpret("Update goal called 'Run a marathon' to 100 percent")
    assert parsed.entities.as_dict() == {"title": "Run a marathon", "progress": 100}


def test_complete_task_title() -> None:
    parsed = interpret('complete task "Buy groceries"')
    assert parsed.intent == IntentName.COMPLETE_TASK
    assert parsed.entities.as_dict() == {"taskTitle": "Buy groceries"}


def test_create_task_title_falls_back_to_called() -> None:
    parsed = interpret('create a task called "Call mom"')
    assert parsed.intent == IntentName.CREATE_TASK
    assert parsed.entities["taskTitle"] == "Call mom"


def test_show_tasks_and_help_have_empty_entities() -> None:
    assert interpret("show my tasks").entities.as_dict() == {}
    assert interpret("help").entities.as_dict() == {}


def test_show_goals_goal_type_may_be_missing() -> None:
    parsed = interpret("show my goals")
    assert parsed.entities.as_dict() == {"goalType": None}
    assert "goalType" in parsed.entities
    assert parsed.entities.get("goalType") is None


def test_generate_goals_entities() -> None:
    parsed = interpret("Generate short term goals")
    assert parsed.intent == IntentName.GENERATE_GOALS
    assert parsed.entities.goal_type == GoalType.short_term


def test_normalization_does_not_change_result() -> None:
    upper = interpret("  SHOW MY GOALS ")
    lower = interpret("show my goals")
    assert upper.intent == lower.intent
    assert upper.entities == lower.entities


@pytest.mark.parametrize("value", ["", "   ", "\n\t", None, 42, 3.5, ["show my goals"], {"a": 1}])
def test_malformed_input_yields_null_intent(value: object) -> None:
    parsed = interpret(value)
    assert parsed.intent is None
    assert parsed.entities.as_dict() == {}
    assert parsed.original_command == value


@pytest.mark.parametrize(
    "text",
    [
        "日本語のテキスト",
        "¿qué puedo hacer?",
        "update goal called \"Café\" to ٤٢%",
        "complete task \"",
        "add a goal called '",
        "x" * 10_000,
    ],
)
def test_interpret_is_total(text: str) -> None:
    parsed = interpret(text)
    assert parsed.original_command == text
    assert isinstance(parsed.entities.as_dict(), dict)


def test_as_dict_wire_shape() -> None:
    assert interpret('complete task "A"').as_dict() == {
        "intent": "COMPLETE_TASK",
        "entities": {"taskTitle": "A"},
        "originalCommand": 'complete task "A"',
    }


def test_generate_goals_is_declared_after_help() -> None:
    text = "help me generate short-term goals"
    assert matching_intents(text) == [IntentName.HELP, IntentName.GENERATE_GOALS]
    assert classify(text) == IntentName.GENERATE_GOALS


def test_non_ascii_digits_are_not_a_percentage() -> None:
    parsed = interpret('update goal called "Café" to ٤٢%')
    assert parsed.intent == IntentName.UPDATE_GOAL
    assert parsed.entities.as_dict() == {"title": "Café", "progress": None}
