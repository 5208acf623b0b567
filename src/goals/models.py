"""Goal and task records (Pydantic models).

These models are shared by both store backends. Database rows are validated through them, so the
same invariants hold whichever backend is configured.
"""

from __future__ import annotations

from datetime import UTC, date, datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, model_validator

from src.intent.schema import GoalType


class Timeframe(StrEnum):
    """Horizon of a short-term goal."""

    daily = "daily"
    weekly = "weekly"
    monthly = "monthly"
    quarterly = "quarterly"


class Priority(StrEnum):
    low = "low"
    medium = "medium"
    high = "high"


def _utcnow() -> datetime:
    return datetime.now(UTC)


class NewGoal(BaseModel):
    """Payload for creating a goal."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    goal_type: GoalType
    title: str = Field(min_length=1)
    description: str = ""
    timeframe: Timeframe | None = None
    parent_goal_id: int | None = None
    target_date: date | None = None

    @model_validator(mode="after")
    def validate_timeframe(self) -> NewGoal:
        """Only short-term goals carry a timeframe."""

        if self.goal_type == GoalType.long_term and self.timeframe is not None:
            raise ValueError("timeframe is only supported for short-term goals")
        return self


class Goal(NewGoal):
    """A stored goal owned by a single user."""

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    id: int
    user_id: int
    progress: int = Field(default=0, ge=0, le=100)
    completed: bool = False
    created_at: datetime = Field(default_factory=_utcnow)


class NewTask(BaseModel):
    """Payload for creating a task."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    title: str = Field(min_length=1)
    description: str = ""
    priority: Priority = Priority.medium
    related_goal_id: int | None = None
    due_date: date | None = None


class Task(NewTask):
    """A stored task owned by a single user."""

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    id: int
    user_id: int
    completed: bool = False
    created_at: datetime = Field(default_factory=_utcnow)
