"""Aggregate workload across tasks: heatmap, daily capacity and weekly summary."""

import logging
from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Dict, List, Optional

from ..models.task import Task, summary_task_ids
from ..utils.datetime_utils import iter_days, period_key, week_end
from .schedule import WorkingTime

logger = logging.getLogger(__name__)


class WorkloadBand(str, Enum):
    """Colour band for a day's utilisation."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class CapacityStatus(str, Enum):
    AVAILABLE = "available"
    BUSY = "busy"
    OVERLOADED = "overloaded"


@dataclass
class DailyCapacity:
    """Load versus scheduled capacity for one working day."""

    day: date
    load_hours: float
    capacity_hours: float
    percentage: int
    status: CapacityStatus


@dataclass
class PeriodCapacity:
    """Capacity summed over a zoom period (week, month, ...)."""

    start: date
    end: date
    load_hours: float
    capacity_hours: float
    percentage: int
    status: CapacityStatus


@dataclass
class UrgentTask:
    task_id: int
    title: str
    days_left: int
    hours_left: float


@dataclass
class WorkloadSummary:
    """Totals for a status-line style overview."""

    total_estimated: float
    total_spent: float
    remaining: float
    available_this_week: float
    buffer: float
    top_urgent: List[UrgentTask] = field(default_factory=list)


def classify_band(utilization: float, bands: Optional[dict] = None) -> WorkloadBand:
    """Map a utilisation ratio to a band (<=0.8 low, <=1.0 medium, <=1.2 high, else critical)."""
    bands = bands or {}
    if utilization <= bands.get('low', 0.8):
        return WorkloadBand.LOW
    if utilization <= bands.get('medium', 1.0):
        return WorkloadBand.MEDIUM
    if utilization <= bands.get('high', 1.2):
        return WorkloadBand.HIGH
    return WorkloadBand.CRITICAL


def capacity_status(percentage: float) -> CapacityStatus:
    if percentage < 80:
        return CapacityStatus.AVAILABLE
    if percentage <= 100:
        return CapacityStatus.BUSY
    return CapacityStatus.OVERLOADED


class WorkloadAggregator:
    """Sums per-day intensity of every leaf task into a calendar heatmap."""

    def __init__(self, working_time: WorkingTime, config: Optional[dict] = None):
        """Initialize aggregator with working time and configuration."""
        self.working_time = working_time
        self.bands = (config or {}).get('workload', {}).get('bands', {})
        self._cache_key = None
        self._cache_value: Dict[date, float] = {}

    def invalidate(self) -> None:
        self._cache_key = None
        self._cache_value = {}

    def aggregate(self, tasks: List[Task], window_start: date, window_end: date) -> Dict[date, float]:
        """Utilisation ratio for every date in the window (0 when nothing is scheduled)."""
        summaries = summary_task_ids(tasks)
        leaves = [
            t for t in tasks
            if t.task_id not in summaries and t.start_date and t.due_date and t.estimated_hours
        ]

        key = (
            window_start,
            window_end,
            self.working_time.schedule,
            tuple((t.task_id, t.start_date, t.due_date, t.estimated_hours) for t in leaves),
        )
        if key == self._cache_key:
            return dict(self._cache_value)

        workload: "OrderedDict[date, float]" = OrderedDict(
            (day, 0.0) for day in iter_days(window_start, window_end)
        )
        schedule = self.working_time.schedule

        for task in leaves:
            total_available = self.working_time.available_hours_between(task.start_date, task.due_date)
            if not total_available:
                continue
            for day in iter_days(max(task.start_date, window_start), min(task.due_date, window_end)):
                day_hours = schedule.hours_on(day)
                if day_hours > 0:
                    allocated = task.estimated_hours * (day_hours / total_available)
                    workload[day] += allocated / day_hours

        logger.debug("Aggregated %d tasks over %d days", len(leaves), len(workload))
        self._cache_key = key
        self._cache_value = workload
        return dict(workload)

    def bands_for(self, workload: Dict[date, float]) -> Dict[date, WorkloadBand]:
        return {day: classify_band(value, self.bands) for day, value in workload.items()}


def daily_capacity(
    tasks: List[Task],
    working_time: WorkingTime,
    window_start: date,
    window_end: date,
) -> List[DailyCapacity]:
    """Hours of concurrent leaf work per working day, against the schedule."""
    summaries = summary_task_ids(tasks)
    hours_per_day: Dict[int, float] = {}
    leaves = [t for t in tasks if t.task_id not in summaries]
    for task in leaves:
        if not (task.start_date and task.due_date and task.estimated_hours):
            continue
        working_days = working_time.working_days_between(task.start_date, task.due_date)
        if working_days > 0:
            hours_per_day[task.task_id] = task.estimated_hours / working_days

    result = []
    for day in iter_days(window_start, window_end):
        capacity = working_time.schedule.hours_on(day)
        if capacity <= 0:
            continue
        load = sum(
            hours_per_day[t.task_id]
            for t in leaves
            if t.task_id in hours_per_day and t.start_date <= day <= t.due_date
        )
        percentage = load / capacity * 100
        result.append(DailyCapacity(
            day=day,
            load_hours=round(load, 2),
            capacity_hours=capacity,
            percentage=round(percentage),
            status=capacity_status(percentage),
        ))
    return result


def capacity_by_zoom(days: List[DailyCapacity], zoom: str) -> List[PeriodCapacity]:
    """Group daily capacity into week / month / quarter / year periods."""
    groups: "OrderedDict[str, List[DailyCapacity]]" = OrderedDict()
    for entry in days:
        groups.setdefault(period_key(entry.day, zoom), []).append(entry)

    periods = []
    for entries in groups.values():
        load = sum(e.load_hours for e in entries)
        capacity = sum(e.capacity_hours for e in entries)
        percentage = load / capacity * 100 if capacity > 0 else 0
        periods.append(PeriodCapacity(
            start=entries[0].day,
            end=entries[-1].day,
            load_hours=round(load, 2),
            capacity_hours=round(capacity, 2),
            percentage=round(percentage),
            status=capacity_status(percentage),
        ))
    periods.sort(key=lambda p: p.start)
    return periods


def summarize_workload(tasks: List[Task], working_time: WorkingTime, today: date) -> WorkloadSummary:
    """Remaining estimated work versus hours left this week, plus the three most urgent tasks."""
    with_estimates = [t for t in tasks if t.estimated_hours is not None]
    total_estimated = sum(t.estimated_hours for t in with_estimates)
    total_spent = sum(t.spent_hours for t in with_estimates)
    remaining = max(total_estimated - total_spent, 0.0)

    available = working_time.available_hours_between(today, week_end(today))

    # Due-date order approximates urgency; only the leading candidates need working-day counts
    candidates = sorted(
        (t for t in tasks if t.due_date and t.done_ratio != 100),
        key=lambda t: t.due_date,
    )[:6]
    urgent = sorted(
        (
            UrgentTask(
                task_id=t.task_id,
                title=t.title,
                days_left=working_time.working_days_between(today, t.due_date),
                hours_left=max((t.estimated_hours or 0.0) - t.spent_hours, 0.0),
            )
            for t in candidates
        ),
        key=lambda u: u.days_left,
    )[:3]

    return WorkloadSummary(
        total_estimated=total_estimated,
        total_spent=total_spent,
        remaining=remaining,
        available_this_week=available,
        buffer=available - remaining,
        top_urgent=urgent,
    )
