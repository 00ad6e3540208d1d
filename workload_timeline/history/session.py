"""Ties the render pass, gestures and the edit log to the remote collaborators."""

import logging
from datetime import date
from typing import Callable, List, Optional

from ..engine.layout import Timeline, ZoomLevel
from ..engine.scene_builder import SceneBuilder
from ..engine.schedule import WeeklySchedule, WorkingTime
from ..interaction.controller import Hit, InteractionController, NO_HIT
from ..models.actions import DateChange, EditIntent
from ..models.scene import TimelineScene
from ..models.task import Task
from ..utils.errors import error_to_string
from .edit_log import EditLog, EditResult, relation_delete_intent
from .gateway import IssueSource, MutationGateway

logger = logging.getLogger(__name__)


class TimelineSession:
    """One open timeline view.

    The task list is always the last snapshot from the issue source. After a
    successful date change the local copy is patched immediately, then the
    snapshot is re-fetched because the remote side may have changed more.
    While a mutation is in flight, render requests return the previous scene.
    """

    def __init__(
        self,
        source: IssueSource,
        gateway: MutationGateway,
        config: dict,
        today: Optional[date] = None,
        error_reporter: Optional[Callable[[str], None]] = None,
    ):
        """Initialize session with collaborators and configuration."""
        self.source = source
        self.config = config
        self.today = today
        self.zoom = ZoomLevel(config.get('timeline', {}).get('zoom', 'week'))
        self.working_time = WorkingTime(WeeklySchedule.from_config(config))
        self.builder = SceneBuilder(self.working_time, config)
        self.edit_log = EditLog(gateway, error_reporter)
        self.tasks: List[Task] = []
        self.scene: Optional[TimelineScene] = None
        self.timeline: Optional[Timeline] = None
        self.controller: Optional[InteractionController] = None
        self._busy = False

    @property
    def busy(self) -> bool:
        return self._busy

    async def refresh(self) -> TimelineScene:
        """Fetch a fresh snapshot and render it."""
        try:
            self.tasks = await self.source.fetch_tasks()
        except Exception as e:
            logger.warning("Could not refresh tasks, keeping last snapshot: %s", error_to_string(e))
        return self.render()

    def render(self) -> TimelineScene:
        if self._busy and self.scene is not None:
            logger.debug("Render deferred while a mutation is in flight")
            return self.scene

        today = self.today or date.today()
        self.timeline = self.builder.timeline_for(self.tasks, self.zoom, today)
        self.scene = self.builder.build(self.tasks, self.timeline, today)

        bars = {bar.task_id: bar for bar in self.scene.bars}
        if self.controller is None:
            self.controller = InteractionController(self.timeline, bars, self.tasks, self.config)
        else:
            self.controller.refresh(self.timeline, bars, self.tasks)
        return self.scene

    def set_zoom(self, zoom) -> TimelineScene:
        self.zoom = ZoomLevel(zoom)
        return self.render()

    def update_schedule(self, schedule: WeeklySchedule) -> TimelineScene:
        """Swap the working-hours schedule; every derived cache is dropped."""
        self.working_time.set_schedule(schedule)
        self.builder.aggregator.invalidate()
        return self.render()

    async def submit(self, intent: EditIntent) -> EditResult:
        """Send an edit, then re-render from whatever the remote side now holds."""
        self._busy = True
        try:
            result = await self.edit_log.apply(intent)
            if result.committed and isinstance(result.action, DateChange):
                self._patch_dates(result.action)
        finally:
            self._busy = False

        if result.committed:
            await self.refresh()
        else:
            self.render()
        return result

    async def undo(self) -> EditResult:
        return await self._replay(self.edit_log.undo)

    async def redo(self) -> EditResult:
        return await self._replay(self.edit_log.redo)

    async def delete_relation(self, relation_id: int) -> Optional[EditResult]:
        intent = relation_delete_intent(self.tasks, relation_id)
        if intent is None:
            logger.warning("Relation %s is not in the current snapshot", relation_id)
            return None
        return await self.submit(intent)

    async def pointer_up(self, x: float, y: float, hit: Hit = NO_HIT) -> Optional[EditResult]:
        intent = self.controller.pointer_up(x, y, hit)
        if intent is None:
            return None
        return await self.submit(intent)

    async def choose_relation_type(self, relation_type) -> Optional[EditResult]:
        intent = self.controller.choose_relation_type(relation_type)
        if intent is None:
            return None
        return await self.submit(intent)

    async def _replay(self, step) -> EditResult:
        self._busy = True
        try:
            result = await step()
        finally:
            self._busy = False
        if result.committed:
            await self.refresh()
        return result

    def _patch_dates(self, change: DateChange) -> None:
        for task in self.tasks:
            if task.task_id == change.task_id:
                if change.new_start != change.old_start:
                    task.start_date = change.new_start
                if change.new_due != change.old_due:
                    task.due_date = change.new_due
                return
