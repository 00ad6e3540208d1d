"""Row layout and date-to-pixel mapping for the timeline."""

import logging
from collections import OrderedDict
from datetime import date, timedelta
from enum import Enum
from typing import Dict, List, Optional

from ..models.scene import Bar, LaidOutRow, RowKind
from ..models.task import Task

logger = logging.getLogger(__name__)


class ZoomLevel(str, Enum):
    """Named horizontal densities."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    QUARTER = "quarter"
    YEAR = "year"

    @property
    def pixels_per_day(self) -> float:
        return ZOOM_PIXELS_PER_DAY[self]


ZOOM_PIXELS_PER_DAY = {
    ZoomLevel.DAY: 40,
    ZoomLevel.WEEK: 15,
    ZoomLevel.MONTH: 5,
    ZoomLevel.QUARTER: 2,
    ZoomLevel.YEAR: 0.8,
}


class LayoutEngine:
    """Turns a flat task list into project-grouped, parent/child nested rows."""

    def __init__(self, config: Optional[dict] = None):
        """Initialize layout with timeline configuration."""
        timeline_config = (config or {}).get('timeline', {})
        self.bar_height = timeline_config.get('bar_height', 30)
        self.bar_gap = timeline_config.get('bar_gap', 10)

    @property
    def row_height(self) -> float:
        return self.bar_height + self.bar_gap

    def layout(self, tasks: List[Task]) -> List[LaidOutRow]:
        """Group by project (largest first), then emit tasks depth-first from each root."""
        projects: "OrderedDict[int, List[Task]]" = OrderedDict()
        names: Dict[int, str] = {}
        for task in tasks:
            projects.setdefault(task.project_id, []).append(task)
            names.setdefault(task.project_id, task.project_name)

        # sorted() is stable, so equal counts keep first-seen order
        ordered = sorted(projects.items(), key=lambda item: -len(item[1]))

        rows: List[LaidOutRow] = []
        for project_id, project_tasks in ordered:
            rows.append(self._row(RowKind.PROJECT, len(rows), 0, names[project_id], project_id))
            self._emit_project(project_tasks, rows)
        return rows

    def _emit_project(self, project_tasks: List[Task], rows: List[LaidOutRow]) -> None:
        in_project = {t.task_id for t in project_tasks}
        children: Dict[int, List[Task]] = {}
        roots: List[Task] = []
        for task in project_tasks:
            # Parents outside the project cannot be drawn, so the task becomes a root
            if task.parent_id is not None and task.parent_id in in_project and task.parent_id != task.task_id:
                children.setdefault(task.parent_id, []).append(task)
            else:
                roots.append(task)

        visited = set()

        def visit(task: Task, depth: int) -> None:
            if task.task_id in visited:
                return
            visited.add(task.task_id)
            kids = children.get(task.task_id, [])
            rows.append(self._row(
                RowKind.TASK, len(rows), depth, task.title, task.project_id,
                task=task, is_summary=bool(kids),
            ))
            for child in kids:
                visit(child, depth + 1)

        for root in roots:
            visit(root, 1)

        # Parent cycles leave tasks without a root; show them flat rather than dropping them
        for task in project_tasks:
            if task.task_id not in visited:
                logger.debug("Task #%s is part of a parent cycle; laying it out as a root", task.task_id)
                visit(task, 1)

    def _row(self, kind, index, depth, label, project_id, task=None, is_summary=False) -> LaidOutRow:
        return LaidOutRow(
            kind=kind,
            index=index,
            depth=depth,
            y=index * self.row_height,
            label=label,
            project_id=project_id,
            task=task,
            is_summary=is_summary,
        )


class Timeline:
    """Linear mapping between calendar dates and horizontal pixels."""

    def __init__(self, min_date: date, max_date: date, zoom: ZoomLevel = ZoomLevel.WEEK, min_width: float = 600):
        if max_date <= min_date:
            raise ValueError("Timeline max_date must be after min_date")
        self.min_date = min_date
        self.max_date = max_date
        self.zoom = ZoomLevel(zoom)
        self.total_days = (max_date - min_date).days
        self.width = max(min_width, self.total_days * self.zoom.pixels_per_day)

    @classmethod
    def from_tasks(
        cls,
        tasks: List[Task],
        zoom: ZoomLevel = ZoomLevel.WEEK,
        padding_days: int = 7,
        min_width: float = 600,
        today: Optional[date] = None,
    ) -> "Timeline":
        """Span all task dates padded on both sides; an undated set centres on today."""
        dates = [d for t in tasks for d in (t.start_date, t.due_date) if d is not None]
        if dates:
            low, high = min(dates), max(dates)
        else:
            low = high = today or date.today()
        padding = timedelta(days=padding_days)
        return cls(low - padding, high + padding, zoom, min_width)

    @property
    def day_width(self) -> float:
        return self.width / self.total_days

    def date_to_x(self, day: date) -> float:
        return (day - self.min_date).days * self.width / self.total_days

    def x_to_date(self, x: float) -> date:
        """Date whose midnight boundary is nearest to x."""
        return self.min_date + timedelta(days=round(x / self.day_width))

    def snap_x(self, x: float) -> float:
        """Round a pixel position to the nearest whole-day boundary."""
        return round(x / self.day_width) * self.day_width

    def bar_for(self, row: LaidOutRow, bar_height: float = 30) -> Optional[Bar]:
        """Geometry for a task row; None for headers and undated tasks."""
        if row.task is None:
            return None
        span = row.task.bar_range()
        if span is None:
            return None
        start, due = span
        return Bar(
            task_id=row.task.task_id,
            row_index=row.index,
            start_x=self.date_to_x(start),
            # Cover the whole due date, not just its midnight
            end_x=self.date_to_x(due + timedelta(days=1)),
            y=row.y + bar_height / 2,
            is_summary=row.is_summary,
        )
