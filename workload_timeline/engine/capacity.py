"""Flexibility classification and daily intensity for single tasks."""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Dict, List, Mapping, Optional

from ..models.task import Task
from ..utils.datetime_utils import iter_days
from .schedule import WorkingTime

AT_RISK_THRESHOLD = 20
MAX_DISPLAY_INTENSITY = 1.5


class FlexibilityStatus(str, Enum):
    """Risk classification, declared from most to least urgent."""

    OVERBOOKED = "overbooked"
    AT_RISK = "at-risk"
    ON_TRACK = "on-track"
    COMPLETED = "completed"

    @property
    def priority(self) -> int:
        """Sort priority (lower = more urgent)."""
        return list(FlexibilityStatus).index(self)


@dataclass(frozen=True)
class FlexibilityScore:
    """Derived planning-quality and current-risk percentages for one task."""

    initial: int
    remaining: int
    status: FlexibilityStatus
    days_remaining: int
    hours_remaining: float


@dataclass(frozen=True)
class DayIntensity:
    """Share of a day's scheduled capacity a task needs."""

    day: date
    intensity: float

    @property
    def display_intensity(self) -> float:
        return clamp_intensity(self.intensity)


def flexibility_percent(available: float, needed: float) -> float:
    """(available / needed - 1) * 100: +100 is double the time needed, 0 is exactly enough."""
    if needed <= 0:
        return 100.0
    return (available / needed - 1) * 100


def classify(
    task: Task,
    working_time: WorkingTime,
    today: Optional[date] = None,
    effective_spent: Optional[float] = None,
) -> Optional[FlexibilityScore]:
    """Classify a task's schedule risk; None when it lacks a due date or an estimate."""
    if task.due_date is None or not task.estimated_hours:
        return None

    today = today or date.today()
    estimate = task.estimated_hours
    start = task.start_date or task.due_date
    spent = effective_spent if effective_spent is not None else task.spent_hours

    # Over budget but unfinished: trust the completion ratio over the subtraction
    if spent > estimate and task.done_ratio < 100:
        hours_remaining = estimate * (1 - task.done_ratio / 100)
    else:
        hours_remaining = max(estimate - spent, 0.0)

    initial = flexibility_percent(working_time.available_hours_between(start, task.due_date), estimate)

    days_remaining = working_time.working_days_between(today, task.due_date)
    if hours_remaining > 0:
        remaining = flexibility_percent(
            working_time.available_hours_between(today, task.due_date),
            hours_remaining,
        )
    else:
        remaining = 100.0

    if task.is_terminal:
        status = FlexibilityStatus.COMPLETED
    elif remaining < 0:
        status = FlexibilityStatus.OVERBOOKED
    elif remaining < AT_RISK_THRESHOLD:
        status = FlexibilityStatus.AT_RISK
    else:
        status = FlexibilityStatus.ON_TRACK

    return FlexibilityScore(
        initial=round(initial),
        remaining=round(remaining),
        status=status,
        days_remaining=days_remaining,
        hours_remaining=hours_remaining,
    )


def build_flexibility_cache(
    tasks: List[Task],
    working_time: WorkingTime,
    today: Optional[date] = None,
    spent_overrides: Optional[Mapping[int, float]] = None,
) -> Dict[int, Optional[FlexibilityScore]]:
    """Score every task; closed tasks get None."""
    overrides = spent_overrides or {}
    scores: Dict[int, Optional[FlexibilityScore]] = {}
    for task in tasks:
        if task.is_closed:
            scores[task.task_id] = None
            continue
        scores[task.task_id] = classify(task, working_time, today, overrides.get(task.task_id))
    return scores


def sort_by_risk(tasks: List[Task], scores: Mapping[int, Optional[FlexibilityScore]]) -> List[Task]:
    """Most urgent first; tasks without a score go last, newest first."""
    scored = [t for t in tasks if scores.get(t.task_id) is not None]
    unscored = [t for t in tasks if scores.get(t.task_id) is None]

    scored.sort(key=lambda t: (scores[t.task_id].status.priority, scores[t.task_id].remaining))
    unscored.sort(key=lambda t: -t.task_id)
    return scored + unscored


def daily_intensity(task: Task, working_time: WorkingTime) -> List[DayIntensity]:
    """Spread the estimate uniformly over the task's available hours.

    Every working day in the range gets estimate / total available hours,
    which exceeds 1 when the task cannot fit. Values are not clamped.
    """
    if task.start_date is None or task.due_date is None:
        return []

    days = list(iter_days(task.start_date, task.due_date))
    total_available = working_time.available_hours_between(task.start_date, task.due_date)
    if not total_available or not task.estimated_hours:
        return [DayIntensity(day, 0.0) for day in days]

    ratio = task.estimated_hours / total_available
    schedule = working_time.schedule
    return [
        DayIntensity(day, ratio if schedule.hours_on(day) > 0 else 0.0)
        for day in days
    ]


def clamp_intensity(value: float, limit: float = MAX_DISPLAY_INTENSITY) -> float:
    """Cap an intensity for shading and line height."""
    return min(value, limit)
