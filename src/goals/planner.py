"""Template-based short-term goal planner.

Breaks a long-term goal into a daily, a weekly and a monthly short-term goal. The wording is
fixed; there is no model behind it.
"""

from __future__ import annotations

import calendar
from datetime import date, timedelta

from src.goals.models import Goal, NewGoal, Timeframe
from src.intent.schema import GoalType


def add_one_month(day: date) -> date:
    """Same day next month, clamped to the last day of a shorter month (Jan 31 -> Feb 28/29)."""

    year = day.year + day.month // 12
    month = day.month % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def plan_short_term_goals(goal: Goal, *, today: date) -> list[NewGoal]:
    """Return the short-term goals to create under `goal`."""

    if goal.goal_type != GoalType.long_term:
        raise ValueError("short-term goals can only be planned from a long-term goal")

    title = goal.title
    return [
        NewGoal(
            goal_type=GoalType.short_term,
            title=f"Daily Progress: {title}",
            description=f"Take one small step toward {title}",
            timeframe=Timeframe.daily,
            parent_goal_id=goal.id,
            target_date=today + timedelta(days=1),
        ),
        NewGoal(
            goal_type=GoalType.short_term,
            title=f"Weekly Plan: {title}",
            description=f"Make measurable progress toward {title} this week",
            timeframe=Timeframe.weekly,
            parent_goal_id=goal.id,
            target_date=today + timedelta(days=7),
        ),
        NewGoal(
            goal_type=GoalType.short_term,
            title=f"Monthly Milestone: {title}",
            description=f"Complete a significant portion of work needed for {title}",
            timeframe=Timeframe.monthly,
            parent_goal_id=goal.id,
            target_date=add_one_month(today),
        ),
    ]
