"""Data models."""

from .task import Relation, RelationType, Task
from .actions import (
    BulkDateChange,
    BulkDateChangeIntent,
    DateChange,
    DateChangeIntent,
    RelationChange,
    RelationCreateIntent,
    RelationDeleteIntent,
    RelationIdCell,
    RelationOperation,
)
from .scene import ArrowPath, Bar, HeatmapCell, LaidOutRow, RowKind, TimelineScene

__all__ = [
    'Relation', 'RelationType', 'Task',
    'BulkDateChange', 'BulkDateChangeIntent', 'DateChange', 'DateChangeIntent',
    'RelationChange', 'RelationCreateIntent', 'RelationDeleteIntent', 'RelationIdCell', 'RelationOperation',
    'ArrowPath', 'Bar', 'HeatmapCell', 'LaidOutRow', 'RowKind', 'TimelineScene',
]
