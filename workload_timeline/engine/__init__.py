"""Timeline engine: schedule arithmetic, capacity, layout, routing and aggregation."""

from .schedule import WeeklySchedule, WorkingTime
from .capacity import FlexibilityScore, FlexibilityStatus, classify, daily_intensity, sort_by_risk
from .layout import LayoutEngine, Timeline, ZoomLevel
from .workload import WorkloadAggregator, WorkloadBand, classify_band
from .router import DependencyRouter, critical_path
from .scene_builder import SceneBuilder

__all__ = [
    'WeeklySchedule', 'WorkingTime',
    'FlexibilityScore', 'FlexibilityStatus', 'classify', 'daily_intensity', 'sort_by_risk',
    'LayoutEngine', 'Timeline', 'ZoomLevel',
    'WorkloadAggregator', 'WorkloadBand', 'classify_band',
    'DependencyRouter', 'critical_path',
    'SceneBuilder',
]
