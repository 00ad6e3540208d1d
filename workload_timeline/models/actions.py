"""Edit intents emitted by gestures and the reversible actions recorded for undo."""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import List, Optional, Union

from .task import RelationType


class RelationOperation(str, Enum):
    CREATE = "create"
    DELETE = "delete"


class RelationIdCell:
    """Mutable holder for a relation's current server-side id.

    Every recorded action that refers to the same relation shares one cell,
    so a re-created relation's new id is written in exactly one place.
    """

    def __init__(self, relation_id: int):
        self.relation_id = relation_id

    def __repr__(self) -> str:
        return f"RelationIdCell({self.relation_id})"


@dataclass(frozen=True)
class DateChangeIntent:
    """Request to move a task's start and/or due date."""

    task_id: int
    old_start: Optional[date]
    old_due: Optional[date]
    new_start: Optional[date]
    new_due: Optional[date]


@dataclass(frozen=True)
class BulkDateChangeIntent:
    """Several date changes that undo and redo as one step."""

    changes: tuple


@dataclass(frozen=True)
class RelationCreateIntent:
    source_id: int
    target_id: int
    relation_type: RelationType


@dataclass(frozen=True)
class RelationDeleteIntent:
    relation_id: int
    source_id: int
    target_id: int
    relation_type: RelationType


EditIntent = Union[DateChangeIntent, BulkDateChangeIntent, RelationCreateIntent, RelationDeleteIntent]


@dataclass
class DateChange:
    """Accepted date edit; undo restores the old dates."""

    task_id: int
    old_start: Optional[date]
    old_due: Optional[date]
    new_start: Optional[date]
    new_due: Optional[date]

    kind = "dateChange"

    @classmethod
    def from_intent(cls, intent: DateChangeIntent) -> "DateChange":
        return cls(intent.task_id, intent.old_start, intent.old_due, intent.new_start, intent.new_due)


@dataclass
class BulkDateChange:
    changes: List[DateChange] = field(default_factory=list)

    kind = "bulkDateChange"


@dataclass
class RelationChange:
    """Accepted relation create/delete; the id lives in a shared cell."""

    operation: RelationOperation
    cell: RelationIdCell
    source_id: int
    target_id: int
    relation_type: RelationType

    kind = "relationChange"

    @property
    def relation_id(self) -> int:
        return self.cell.relation_id


EditAction = Union[DateChange, BulkDateChange, RelationChange]
