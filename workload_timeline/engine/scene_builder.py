"""Render pass: tasks in, renderer-agnostic scene out."""

import logging
from datetime import date
from typing import Dict, List, Optional

from ..models.scene import Bar, HeatmapCell, TimelineScene
from ..models.task import Relation, Task
from .capacity import build_flexibility_cache, clamp_intensity, daily_intensity
from .layout import LayoutEngine, Timeline, ZoomLevel
from .router import DependencyRouter, critical_path
from .schedule import WorkingTime
from .workload import WorkloadAggregator, classify_band

logger = logging.getLogger(__name__)


class SceneBuilder:
    """Runs layout, classification, routing and aggregation for one frame."""

    def __init__(self, working_time: WorkingTime, config: Optional[dict] = None):
        """Initialize builder with working time and configuration."""
        self.config = config or {}
        self.working_time = working_time
        self.timeline_config = self.config.get('timeline', {})
        self.workload_config = self.config.get('workload', {})
        self.layout_engine = LayoutEngine(self.config)
        self.router = DependencyRouter(self.config)
        self.aggregator = WorkloadAggregator(working_time, self.config)

    def timeline_for(self, tasks: List[Task], zoom=None, today: Optional[date] = None) -> Timeline:
        return Timeline.from_tasks(
            tasks,
            zoom=ZoomLevel(zoom or self.timeline_config.get('zoom', 'week')),
            padding_days=self.timeline_config.get('padding_days', 7),
            min_width=self.timeline_config.get('min_width', 600),
            today=today,
        )

    def build(self, tasks: List[Task], timeline: Timeline, today: Optional[date] = None) -> TimelineScene:
        today = today or date.today()
        bar_height = self.layout_engine.bar_height
        max_intensity = self.workload_config.get('max_display_intensity', 1.5)

        rows = self.layout_engine.layout(tasks)
        scores = build_flexibility_cache(tasks, self.working_time, today)

        bars: Dict[int, Bar] = {}
        for row in rows:
            bar = timeline.bar_for(row, bar_height)
            if bar is None:
                continue
            if not bar.is_summary:
                score = scores.get(bar.task_id)
                bar.status = score.status.value if score else None
                bar.intensities = [
                    clamp_intensity(d.intensity, max_intensity)
                    for d in daily_intensity(row.task, self.working_time)
                ]
            bars[bar.task_id] = bar

        arrows = self.router.route_all(tasks, bars)
        chain = critical_path(
            Relation(a.relation_id, a.relation_type, a.source_id, a.target_id) for a in arrows
        )

        workload = self.aggregator.aggregate(tasks, timeline.min_date, timeline.max_date)
        bands = self.workload_config.get('bands', {})
        heatmap = [
            HeatmapCell(
                day=day,
                x=timeline.date_to_x(day),
                width=timeline.day_width,
                utilization=value,
                band=classify_band(value, bands).value,
            )
            for day, value in workload.items()
        ]

        logger.debug("Built scene: %d rows, %d bars, %d arrows", len(rows), len(bars), len(arrows))
        return TimelineScene(
            zoom=timeline.zoom.value,
            min_date=timeline.min_date,
            max_date=timeline.max_date,
            width=timeline.width,
            height=len(rows) * self.layout_engine.row_height,
            today_x=timeline.date_to_x(today),
            rows=rows,
            bars=list(bars.values()),
            arrows=arrows,
            heatmap=heatmap,
            critical_path=chain,
        )
