"""Pointer and keyboard gesture state machine for the timeline."""

import logging
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import Dict, Iterable, Optional, Tuple

from ..engine.layout import Timeline
from ..models.actions import DateChangeIntent, EditIntent, RelationCreateIntent
from ..models.scene import Bar
from ..models.task import CREATABLE_TYPES, RelationType, Task

logger = logging.getLogger(__name__)

LINK_HANDLE_OFFSET = 8


class GestureMode(str, Enum):
    """At most one gesture is active at a time."""

    IDLE = "idle"
    RESIZE_LEFT = "dragging-left-edge"
    RESIZE_RIGHT = "dragging-right-edge"
    MOVE = "moving"
    LINK_DRAWING = "drawing"
    LINK_PICKING = "picking-relation"
    COLUMN_RESIZE = "column-resize"


class HitKind(str, Enum):
    """Disjoint hit regions reported by the host surface."""

    LEFT_EDGE = "left-edge"
    RIGHT_EDGE = "right-edge"
    BAR = "bar"
    LINK_HANDLE = "link-handle"
    COLUMN_HANDLE = "column-handle"
    NONE = "none"


@dataclass(frozen=True)
class Hit:
    kind: HitKind
    task_id: Optional[int] = None


NO_HIT = Hit(HitKind.NONE)


@dataclass
class _Drag:
    task_id: int
    origin_x: float
    start_x: float
    end_x: float
    new_start_x: float
    new_end_x: float


class InteractionController:
    """Turns raw gestures into edit intents.

    Resizing snaps edges to whole days and keeps at least one day between
    them; releasing where the dates did not change emits nothing. Linking
    follows the pointer, highlights a candidate bar and, once released over
    one, waits for a relation type. Column resizing only changes display state.
    """

    def __init__(self, timeline: Timeline, bars: Dict[int, Bar], tasks: Iterable[Task], config: Optional[dict] = None):
        timeline_config = (config or {}).get('timeline', {})
        self.timeline = timeline
        self.bars = bars
        self.tasks = {t.task_id: t for t in tasks}
        self.label_width = timeline_config.get('label_width', 250)
        self.label_width_min = timeline_config.get('label_width_min', 150)
        self.label_width_max = timeline_config.get('label_width_max', 500)

        self.mode = GestureMode.IDLE
        self._drag: Optional[_Drag] = None
        self._link_source: Optional[int] = None
        self._link_origin: Optional[Tuple[float, float]] = None
        self._pointer: Optional[Tuple[float, float]] = None
        self.candidate_target: Optional[int] = None
        self._column_origin: Optional[Tuple[float, float]] = None

    def refresh(self, timeline: Timeline, bars: Dict[int, Bar], tasks: Iterable[Task]) -> None:
        """Adopt a new render pass; any gesture in progress is abandoned."""
        self.cancel()
        self.timeline = timeline
        self.bars = bars
        self.tasks = {t.task_id: t for t in tasks}

    @property
    def is_idle(self) -> bool:
        return self.mode == GestureMode.IDLE

    @property
    def preview(self) -> Optional[Tuple[int, float, float]]:
        """(task id, start x, end x) of the bar being dragged."""
        if self._drag is None:
            return None
        return self._drag.task_id, self._drag.new_start_x, self._drag.new_end_x

    @property
    def temp_arrow(self) -> Optional[Tuple[Tuple[float, float], Tuple[float, float]]]:
        """Straight segment from the link handle to the pointer while drawing."""
        if self.mode != GestureMode.LINK_DRAWING or self._pointer is None:
            return None
        return self._link_origin, self._pointer

    @property
    def pending_link(self) -> Optional[Tuple[int, int]]:
        if self.mode != GestureMode.LINK_PICKING:
            return None
        return self._link_source, self.candidate_target

    @property
    def relation_choices(self) -> Tuple[RelationType, ...]:
        return CREATABLE_TYPES if self.mode == GestureMode.LINK_PICKING else ()

    def pointer_down(self, hit: Hit, x: float, y: float) -> bool:
        """Start a gesture; returns False when the hit starts nothing."""
        if not self.is_idle:
            logger.debug("Ignoring pointer-down during %s", self.mode.value)
            return False

        if hit.kind == HitKind.COLUMN_HANDLE:
            self.mode = GestureMode.COLUMN_RESIZE
            self._column_origin = (x, self.label_width)
            return True

        bar = self.bars.get(hit.task_id) if hit.task_id is not None else None
        # Summary bars are derived from their children and cannot be edited
        if bar is None or bar.is_summary:
            return False

        if hit.kind in (HitKind.LEFT_EDGE, HitKind.RIGHT_EDGE, HitKind.BAR):
            self.mode = {
                HitKind.LEFT_EDGE: GestureMode.RESIZE_LEFT,
                HitKind.RIGHT_EDGE: GestureMode.RESIZE_RIGHT,
                HitKind.BAR: GestureMode.MOVE,
            }[hit.kind]
            self._drag = _Drag(bar.task_id, x, bar.start_x, bar.end_x, bar.start_x, bar.end_x)
            return True

        if hit.kind == HitKind.LINK_HANDLE:
            self.mode = GestureMode.LINK_DRAWING
            self._link_source = bar.task_id
            self._link_origin = (bar.end_x + LINK_HANDLE_OFFSET, bar.y)
            self._pointer = (x, y)
            return True

        return False

    def pointer_move(self, x: float, y: float, hit: Hit = NO_HIT) -> None:
        if self.mode in (GestureMode.RESIZE_LEFT, GestureMode.RESIZE_RIGHT, GestureMode.MOVE):
            self._update_drag(x)
        elif self.mode == GestureMode.LINK_DRAWING:
            self._pointer = (x, y)
            self._update_candidate(hit)
        elif self.mode == GestureMode.COLUMN_RESIZE:
            origin_x, origin_width = self._column_origin
            self.label_width = min(self.label_width_max, max(self.label_width_min, origin_width + x - origin_x))

    def pointer_up(self, x: float, y: float, hit: Hit = NO_HIT) -> Optional[EditIntent]:
        """Finish the gesture; returns an intent when one was produced."""
        if self.mode in (GestureMode.RESIZE_LEFT, GestureMode.RESIZE_RIGHT, GestureMode.MOVE):
            self._update_drag(x)
            intent = self._date_intent()
            self._reset()
            return intent

        if self.mode == GestureMode.LINK_DRAWING:
            self._pointer = (x, y)
            self._update_candidate(hit)
            if self.candidate_target is None:
                self._reset()
            else:
                self.mode = GestureMode.LINK_PICKING
            return None

        if self.mode == GestureMode.COLUMN_RESIZE:
            self.pointer_move(x, y)
            self._reset()
        return None

    def choose_relation_type(self, relation_type) -> Optional[RelationCreateIntent]:
        """Complete a pending link with the type the user picked."""
        if self.mode != GestureMode.LINK_PICKING:
            return None
        relation_type = RelationType(relation_type)
        if relation_type not in CREATABLE_TYPES:
            raise ValueError(f"Relation type {relation_type.value} cannot be created")
        intent = RelationCreateIntent(self._link_source, self.candidate_target, relation_type)
        self._reset()
        return intent

    def key_down(self, key: str) -> None:
        if key == "Escape":
            self.cancel()

    def cancel(self) -> None:
        """Abandon the current gesture without producing anything."""
        if not self.is_idle:
            logger.debug("Cancelled %s", self.mode.value)
        self._reset()

    def _update_drag(self, x: float) -> None:
        drag = self._drag
        timeline = self.timeline
        day = timeline.day_width
        delta = x - drag.origin_x

        if self.mode == GestureMode.RESIZE_LEFT:
            drag.new_start_x = timeline.snap_x(max(0.0, min(drag.start_x + delta, drag.end_x - day)))
        elif self.mode == GestureMode.RESIZE_RIGHT:
            drag.new_end_x = timeline.snap_x(max(drag.start_x + day, min(drag.end_x + delta, timeline.width)))
        else:
            width = drag.end_x - drag.start_x
            drag.new_start_x = timeline.snap_x(max(0.0, min(drag.start_x + delta, timeline.width - width)))
            drag.new_end_x = drag.new_start_x + width

    def _update_candidate(self, hit: Hit) -> None:
        target = hit.task_id if hit.kind != HitKind.NONE else None
        if target is not None and target != self._link_source and target in self.bars:
            self.candidate_target = target
        else:
            self.candidate_target = None

    def _date_intent(self) -> Optional[DateChangeIntent]:
        drag = self._drag
        task = self.tasks.get(drag.task_id)
        if task is None:
            return None

        moving = self.mode == GestureMode.MOVE
        new_start, new_due = task.start_date, task.due_date
        # Moving shifts only the dates a task already has
        if self.mode == GestureMode.RESIZE_LEFT or (moving and task.start_date is not None):
            new_start = self.timeline.x_to_date(drag.new_start_x)
        if self.mode == GestureMode.RESIZE_RIGHT or (moving and task.due_date is not None):
            # The bar's right edge sits at the end of the due date
            new_due = self.timeline.x_to_date(drag.new_end_x) - timedelta(days=1)

        if new_start == task.start_date and new_due == task.due_date:
            return None
        return DateChangeIntent(task.task_id, task.start_date, task.due_date, new_start, new_due)

    def _reset(self) -> None:
        self.mode = GestureMode.IDLE
        self._drag = None
        self._link_source = None
        self._link_origin = None
        self._pointer = None
        self.candidate_target = None
        self._column_origin = None
