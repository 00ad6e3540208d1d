"""Task and relation data models."""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional

from ..utils.datetime_utils import parse_date


class RelationType(str, Enum):
    """Relation types as reported by the issue tracker."""

    RELATES = "relates"
    DUPLICATES = "duplicates"
    DUPLICATED = "duplicated"
    BLOCKS = "blocks"
    BLOCKED = "blocked"
    PRECEDES = "precedes"
    FOLLOWS = "follows"
    COPIED_TO = "copied_to"
    COPIED_FROM = "copied_from"

    @property
    def is_reverse(self) -> bool:
        """Auto-generated counterpart of a forward relation."""
        return self in REVERSE_TYPES

    @property
    def is_temporal(self) -> bool:
        """Whether the relation implies sequencing (end of source -> start of target)."""
        return self in TEMPORAL_TYPES


REVERSE_TYPES = frozenset({
    RelationType.BLOCKED,
    RelationType.DUPLICATED,
    RelationType.FOLLOWS,
    RelationType.COPIED_FROM,
})

TEMPORAL_TYPES = frozenset({RelationType.BLOCKS, RelationType.PRECEDES})

# Types a user may pick when drawing a link between two bars
CREATABLE_TYPES = (
    RelationType.BLOCKS,
    RelationType.PRECEDES,
    RelationType.RELATES,
    RelationType.DUPLICATES,
    RelationType.COPIED_TO,
    RelationType.FOLLOWS,
)


@dataclass
class Relation:
    """Directed relation between two tasks."""

    relation_id: int
    relation_type: RelationType
    source_id: int
    target_id: int

    @property
    def is_self(self) -> bool:
        return self.source_id == self.target_id

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Relation":
        return cls(
            relation_id=int(data["id"]),
            relation_type=RelationType(data["relation_type"]),
            source_id=int(data["issue_id"]),
            target_id=int(data["issue_to_id"]),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.relation_id,
            "relation_type": self.relation_type.value,
            "issue_id": self.source_id,
            "issue_to_id": self.target_id,
        }


@dataclass
class Task:
    """A schedulable issue with optional dates and effort estimate."""

    task_id: int
    title: str
    project_id: int
    project_name: str
    start_date: Optional[date] = None
    due_date: Optional[date] = None
    estimated_hours: Optional[float] = None
    spent_hours: float = 0.0
    done_ratio: int = 0
    parent_id: Optional[int] = None
    relations: List[Relation] = field(default_factory=list)
    closed_on: Optional[date] = None

    def __post_init__(self):
        """Validate completion ratio."""
        if not 0 <= self.done_ratio <= 100:
            raise ValueError(f"done_ratio must be within 0..100, got {self.done_ratio}")

    @property
    def is_closed(self) -> bool:
        return self.closed_on is not None

    @property
    def is_terminal(self) -> bool:
        """Fully done tasks need no further capacity."""
        return self.done_ratio == 100

    @property
    def has_dates(self) -> bool:
        return self.start_date is not None or self.due_date is not None

    def bar_range(self) -> Optional[tuple]:
        """Return (start, due) for drawing, substituting the single known date for a missing one."""
        if not self.has_dates:
            return None
        start = self.start_date or self.due_date
        due = self.due_date or self.start_date
        return start, due

    def outgoing_relations(self) -> List[Relation]:
        """Forward relations leaving this task; reverse and self relations are dropped."""
        return [
            r for r in self.relations
            if not r.relation_type.is_reverse
            and not r.is_self
            and r.source_id == self.task_id
        ]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Task":
        """Build a task from an issue-tracker style record."""
        project = data.get("project") or {}
        parent = data.get("parent") or {}
        estimated = data.get("estimated_hours")
        return cls(
            task_id=int(data["id"]),
            title=data.get("subject", ""),
            project_id=int(project.get("id", 0)),
            project_name=project.get("name", "Unknown"),
            start_date=parse_date(data.get("start_date")),
            due_date=parse_date(data.get("due_date")),
            estimated_hours=float(estimated) if estimated is not None else None,
            spent_hours=float(data.get("spent_hours") or 0.0),
            done_ratio=int(data.get("done_ratio") or 0),
            parent_id=int(parent["id"]) if parent.get("id") is not None else None,
            relations=[Relation.from_dict(r) for r in data.get("relations") or []],
            closed_on=parse_date(data.get("closed_on")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.task_id,
            "subject": self.title,
            "project": {"id": self.project_id, "name": self.project_name},
            "start_date": self.start_date.isoformat() if self.start_date else None,
            "due_date": self.due_date.isoformat() if self.due_date else None,
            "estimated_hours": self.estimated_hours,
            "spent_hours": self.spent_hours,
            "done_ratio": self.done_ratio,
            "parent": {"id": self.parent_id} if self.parent_id is not None else None,
            "relations": [r.to_dict() for r in self.relations],
            "closed_on": self.closed_on.isoformat() if self.closed_on else None,
        }


def summary_task_ids(tasks: List[Task]) -> set:
    """IDs of tasks that have at least one child in the given set.

    Only children in the parent's own project count; the layout cannot nest
    across projects, so such a parent is drawn and aggregated as a leaf.
    """
    projects = {t.task_id: t.project_id for t in tasks}
    return {
        t.parent_id for t in tasks
        if t.parent_id is not None
        and t.parent_id != t.task_id
        and projects.get(t.parent_id) == t.project_id
    }
