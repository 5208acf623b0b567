"""Parsed command schema (Pydantic models).

This schema is the contract between the command interpreter, the response composer, and the
command executor. Each intent owns its own entity record; a `None` value means the extractor ran
but found nothing.
"""

from __future__ import annotations

from collections.abc import Iterator
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class IntentName(StrEnum):
    """Closed set of supported command intents."""

    SHOW_GOALS = "SHOW_GOALS"
    SHOW_TASKS = "SHOW_TASKS"
    ADD_GOAL = "ADD_GOAL"
    UPDATE_GOAL = "UPDATE_GOAL"
    COMPLETE_TASK = "COMPLETE_TASK"
    CREATE_TASK = "CREATE_TASK"
    GOAL_PROGRESS = "GOAL_PROGRESS"
    HELP = "HELP"
    GENERATE_GOALS = "GENERATE_GOALS"


class GoalType(StrEnum):
    """Goal categories referenced by commands."""

    long_term = "long-term"
    short_term = "short-term"


class Entities(BaseModel):
    """Base class for per-intent entity records.

    Values are reachable both by attribute (`goal_type`) and by wire name (`goalType`), so callers
    that treat the record as a mapping keep working.
    """

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    def as_dict(self) -> dict[str, Any]:
        """Return the record keyed by wire names (every key present, `None` when not found)."""

        return self.model_dump(mode="json", by_alias=True)

    def _field_name(self, key: str) -> str | None:
        for name, info in type(self).model_fields.items():
            if key in (name, info.alias):
                return name
        return None

    def get(self, key: str, default: Any = None) -> Any:
        name = self._field_name(key)
        if name is None:
            return default
        return getattr(self, name)

    def __getitem__(self, key: str) -> Any:
        name = self._field_name(key)
        if name is None:
            raise KeyError(key)
        return getattr(self, name)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self._field_name(key) is not None

    def keys(self) -> list[str]:
        """Wire names of the record, so `dict(entities)` is keyed like `as_dict()`."""

        return [info.alias or name for name, info in type(self).model_fields.items()]

    def __iter__(self) -> Iterator[str]:  # type: ignore[override]
        return iter(self.keys())

    def __len__(self) -> int:
        return len(type(self).model_fields)


class NoEntities(Entities):
    """Intents without extraction (SHOW_TASKS, HELP) and unrecognized commands."""


class GoalTypeEntities(Entities):
    """SHOW_GOALS and GENERATE_GOALS."""

    goal_type: GoalType | None = Field(default=None, alias="goalType")


class AddGoalEntities(Entities):
    goal_type: GoalType | None = Field(default=None, alias="goalType")
    title: str | None = None


class UpdateGoalEntities(Entities):
    title: str | None = None
    progress: int | None = None


class TaskEntities(Entities):
    """COMPLETE_TASK and CREATE_TASK."""

    task_title: str | None = Field(default=None, alias="taskTitle")


class GoalTitleEntities(Entities):
    """GOAL_PROGRESS."""

    title: str | None = None


ENTITY_MODELS: dict[IntentName, type[Entities]] = {
    IntentName.SHOW_GOALS: GoalTypeEntities,
    IntentName.SHOW_TASKS: NoEntities,
    IntentName.ADD_GOAL: AddGoalEntities,
    IntentName.UPDATE_GOAL: UpdateGoalEntities,
    IntentName.COMPLETE_TASK: TaskEntities,
    IntentName.CREATE_TASK: TaskEntities,
    IntentName.GOAL_PROGRESS: GoalTitleEntities,
    IntentName.HELP: NoEntities,
    IntentName.GENERATE_GOALS: GoalTypeEntities,
}


def entity_model_for(intent: IntentName | None) -> type[Entities]:
    """Return the entity record type owned by an intent."""

    if intent is None:
        return NoEntities
    return ENTITY_MODELS[intent]


class ParsedCommand(BaseModel):
    """The interpreter's output for one utterance."""

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    intent: IntentName | None = None
    entities: Entities = Field(default_factory=NoEntities)
    original_command: Any = Field(default=None, alias="originalCommand")

    @model_validator(mode="before")
    @classmethod
    def coerce_entities(cls, data: Any) -> Any:
        """Validate a plain `entities` mapping into the record type of the intent."""

        if not isinstance(data, dict):
            return data

        raw_entities = data.get("entities")
        if isinstance(raw_entities, Entities):
            return data

        intent = data.get("intent")
        if intent is not None:
            intent = IntentName(intent)

        if raw_entities is not None and not isinstance(raw_entities, dict):
            raise ValueError("entities must be a mapping")

        values = {k: v for k, v in (raw_entities or {}).items() if v is not None}
        return {**data, "entities": entity_model_for(intent).model_validate(values)}

    @model_validator(mode="after")
    def validate_entities_shape(self) -> ParsedCommand:
        """Enforce that the entity record matches the intent."""

        expected = entity_model_for(self.intent)
        if type(self.entities) is not expected:
            raise ValueError(
                f"entities for intent={self.intent} must be {expected.__name__}, "
                f"got {type(self.entities).__name__}"
            )
        return self

    def as_dict(self) -> dict[str, Any]:
        """Return the wire representation `{intent, entities, originalCommand}`."""

        return {
            "intent": None if self.intent is None else str(self.intent),
            "entities": self.entities.as_dict(),
            "originalCommand": self.original_command,
        }


def parsed_command_from_obj(obj: Any) -> ParsedCommand:
    """Validate and parse a ParsedCommand from an arbitrary decoded JSON object."""

    return ParsedCommand.model_validate(obj)
