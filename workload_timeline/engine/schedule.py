"""Weekly working-hours schedule and working-time arithmetic."""

import logging
import math
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, List, Tuple

from ..utils.datetime_utils import DAY_KEYS

logger = logging.getLogger(__name__)

MAX_CACHE_ENTRIES = 4096


@dataclass(frozen=True)
class WeeklySchedule:
    """Hours available on each weekday; zero-hour days are non-working."""

    mon: float = 8.0
    tue: float = 8.0
    wed: float = 8.0
    thu: float = 8.0
    fri: float = 8.0
    sat: float = 0.0
    sun: float = 0.0

    def __post_init__(self):
        for key, hours in zip(DAY_KEYS, self.hours):
            if isinstance(hours, bool) or not isinstance(hours, (int, float)):
                raise ValueError(f"{key} hours must be a number, got {hours!r}")
            if hours < 0 or not math.isfinite(hours):
                raise ValueError(f"{key} hours must be a finite non-negative number, got {hours}")

    @property
    def hours(self) -> Tuple[float, ...]:
        """Hours per weekday, Monday first."""
        return (self.mon, self.tue, self.wed, self.thu, self.fri, self.sat, self.sun)

    @property
    def hours_per_week(self) -> float:
        return sum(self.hours)

    @property
    def working_days_per_week(self) -> int:
        return sum(1 for h in self.hours if h > 0)

    def hours_on(self, day: date) -> float:
        """Scheduled hours for a calendar date."""
        return self.hours[day.weekday()]

    def is_working_day(self, day: date) -> bool:
        return self.hours_on(day) > 0

    def to_dict(self) -> Dict[str, float]:
        return dict(zip(DAY_KEYS, self.hours))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WeeklySchedule":
        """Build from a {Mon: 8, ...} mapping; missing days count as zero."""
        unknown = set(data) - set(DAY_KEYS)
        if unknown:
            raise ValueError(f"Unknown schedule days: {sorted(unknown)}")
        return cls(*(data.get(key, 0) for key in DAY_KEYS))

    @classmethod
    def from_working_days(cls, hours_per_day: float, working_days: List[str]) -> "WeeklySchedule":
        """Build from the legacy hours-per-day plus working-day-list format."""
        return cls.from_dict({day: hours_per_day for day in working_days if day in DAY_KEYS})

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "WeeklySchedule":
        """Read the schedule from the working_hours config section."""
        hours_config = config.get('working_hours', {})
        schedule = hours_config.get('weekly_schedule')
        if schedule:
            return cls.from_dict(schedule)
        if 'hours_per_day' in hours_config or 'working_days' in hours_config:
            return cls.from_working_days(
                hours_config.get('hours_per_day', 8),
                hours_config.get('working_days', ['Mon', 'Tue', 'Wed', 'Thu', 'Fri']),
            )
        return cls()


class WorkingTime:
    """Memoized working-day and working-hour counts for one schedule.

    Counts decompose an inclusive span into whole weeks plus a 0-6 day
    remainder, so the cost does not grow with the span length.
    """

    def __init__(self, schedule: WeeklySchedule, max_entries: int = MAX_CACHE_ENTRIES):
        self._schedule = schedule
        self.max_entries = max_entries
        self._cache: Dict[tuple, float] = {}

    @property
    def schedule(self) -> WeeklySchedule:
        return self._schedule

    def set_schedule(self, schedule: WeeklySchedule) -> None:
        """Replace the schedule and drop every memoized result."""
        self._schedule = schedule
        self.clear_cache()

    def clear_cache(self) -> None:
        logger.debug("Clearing %d working-time cache entries", len(self._cache))
        self._cache.clear()

    def working_days_between(self, start: date, end: date) -> int:
        """Working days from start to end inclusive.

        When end is before start the result is -(n - 1), n being the working
        days of the reversed span, so an overdue task reports how far behind it is.
        """
        key = ('days', start, end, self._schedule)
        if key in self._cache:
            return int(self._cache[key])

        past_due = end < start
        low, high = (end, start) if past_due else (start, end)
        count = self._span_total(low, high, [1 if h > 0 else 0 for h in self._schedule.hours])
        result = -(count - 1) if past_due else count

        self._remember(key, result)
        return result

    def available_hours_between(self, start: date, end: date) -> float:
        """Scheduled hours from start to end inclusive; 0 when end is before start."""
        key = ('hours', start, end, self._schedule)
        if key in self._cache:
            return self._cache[key]

        hours = 0.0 if end < start else self._span_total(start, end, list(self._schedule.hours))

        self._remember(key, hours)
        return hours

    def _remember(self, key: tuple, value: float) -> None:
        # Spans keyed on "today" go stale daily; start over rather than grow without bound
        if len(self._cache) >= self.max_entries:
            self.clear_cache()
        self._cache[key] = value

    @staticmethod
    def _span_total(start: date, end: date, per_weekday: List[float]) -> float:
        total_days = (end - start).days + 1
        full_weeks, remainder = divmod(total_days, 7)
        total = full_weeks * sum(per_weekday)

        # Remainder days continue from start's weekday after the full weeks
        first = start.weekday()
        for offset in range(remainder):
            total += per_weekday[(first + full_weeks * 7 + offset) % 7]
        return total
