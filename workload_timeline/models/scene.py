"""Renderer-agnostic scene description produced by a render pass."""

from dataclasses import dataclass, field, asdict
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from .task import RelationType, Task


class RowKind(str, Enum):
    PROJECT = "project"
    TASK = "task"


@dataclass
class LaidOutRow:
    """One row of the timeline: a project header or a task."""

    kind: RowKind
    index: int
    depth: int
    y: float
    label: str
    project_id: int
    task: Optional[Task] = None
    is_summary: bool = False

    @property
    def task_id(self) -> Optional[int]:
        return self.task.task_id if self.task is not None else None


@dataclass
class Bar:
    """Horizontal extent and vertical centre of a task's bar."""

    task_id: int
    row_index: int
    start_x: float
    end_x: float
    y: float
    is_summary: bool = False
    status: Optional[str] = None
    intensities: List[float] = field(default_factory=list)

    @property
    def center_x(self) -> float:
        return (self.start_x + self.end_x) / 2

    @property
    def width(self) -> float:
        return self.end_x - self.start_x


@dataclass
class ArrowPath:
    """Routed dependency arrow: polyline commands plus an arrowhead triangle."""

    relation_id: int
    relation_type: RelationType
    source_id: int
    target_id: int
    commands: List[Tuple[str, float]]
    start: Tuple[float, float]
    tip: Tuple[float, float]
    head: List[Tuple[float, float]]
    color: str = "#7f8c8d"
    dash: str = ""

    def points(self) -> List[Tuple[float, float]]:
        """Expand the H/V commands into absolute vertices."""
        x, y = self.start
        result = [(x, y)]
        for command, value in self.commands:
            if command == "H":
                x = value
            else:
                y = value
            result.append((x, y))
        return result

    def to_svg_path(self) -> str:
        parts = [f"M {self.start[0]:g} {self.start[1]:g}"]
        parts.extend(f"{command} {value:g}" for command, value in self.commands)
        return " ".join(parts)


@dataclass
class HeatmapCell:
    """Aggregate utilisation for one calendar day."""

    day: date
    x: float
    width: float
    utilization: float
    band: str


@dataclass
class TimelineScene:
    """Everything a host surface needs to draw one frame."""

    zoom: str
    min_date: date
    max_date: date
    width: float
    height: float
    today_x: float
    rows: List[LaidOutRow]
    bars: List[Bar]
    arrows: List[ArrowPath]
    heatmap: List[HeatmapCell]
    critical_path: List[int] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert scene to dictionary for JSON export."""
        return asdict(self)

    def to_human_readable(self) -> str:
        """Generate human-readable report format."""
        lines = [
            f"=== Timeline: {self.min_date} .. {self.max_date} ({self.zoom}) ===",
            f"Width: {self.width:.0f}px  Rows: {len(self.rows)}  Arrows: {len(self.arrows)}",
            "",
            "Rows:",
        ]

        bars = {bar.task_id: bar for bar in self.bars}
        for row in self.rows:
            indent = "  " * row.depth
            if row.kind == RowKind.PROJECT:
                lines.append(f"  {indent}[{row.label}]")
                continue
            bar = bars.get(row.task_id)
            marker = " (summary)" if row.is_summary else ""
            status = f" {bar.status}" if bar and bar.status else ""
            lines.append(f"  {indent}#{row.task_id} {row.label}{marker}{status}")

        lines.extend(["", "Dependencies:"])
        for arrow in self.arrows:
            lines.append(f"  #{arrow.source_id} {arrow.relation_type.value} #{arrow.target_id}")

        if self.critical_path:
            lines.extend(["", "Critical path: " + " -> ".join(f"#{i}" for i in self.critical_path)])

        busy = [cell for cell in self.heatmap if cell.utilization > 0]
        lines.extend(["", f"Workload ({len(busy)} loaded days):"])
        for cell in busy:
            lines.append(f"  {cell.day}: {cell.utilization * 100:.0f}% {cell.band}")

        lines.append("=" * 50)

        return "\n".join(lines)
