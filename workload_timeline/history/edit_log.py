"""Undo/redo log of edits accepted by the remote system."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional

from ..models.actions import (
    BulkDateChange,
    BulkDateChangeIntent,
    DateChange,
    DateChangeIntent,
    EditAction,
    EditIntent,
    RelationChange,
    RelationCreateIntent,
    RelationDeleteIntent,
    RelationIdCell,
    RelationOperation,
)
from ..models.task import Task
from ..utils.errors import error_to_string, friendly_relation_error
from .gateway import MutationGateway

logger = logging.getLogger(__name__)

_INTENT_TYPES = (DateChangeIntent, BulkDateChangeIntent, RelationCreateIntent, RelationDeleteIntent)


@dataclass
class EditResult:
    """Outcome of apply/undo/redo."""

    committed: bool
    action: Optional[EditAction] = None
    error: Optional[str] = None


class EditLog:
    """Linear undo history reconciled with a remote system.

    An action is only recorded once the remote mutation succeeded. Undo and
    redo peek at the top entry and move it between stacks only after the
    compensating mutation succeeds, so a failure leaves both stacks intact.
    Re-creating a relation yields a new remote id; all actions for that
    relation share one RelationIdCell, which is rebound to the new id.
    """

    def __init__(self, gateway: MutationGateway, error_reporter: Optional[Callable[[str], None]] = None):
        self.gateway = gateway
        self.error_reporter = error_reporter
        self.undo_stack: List[EditAction] = []
        self.redo_stack: List[EditAction] = []
        self._cells: Dict[int, RelationIdCell] = {}
        self._lock = asyncio.Lock()

    @property
    def can_undo(self) -> bool:
        return bool(self.undo_stack)

    @property
    def can_redo(self) -> bool:
        return bool(self.redo_stack)

    def clear(self) -> None:
        self.undo_stack.clear()
        self.redo_stack.clear()
        self._cells.clear()

    async def apply(self, intent: EditIntent) -> EditResult:
        """Perform an edit remotely and record it when accepted."""
        if not isinstance(intent, _INTENT_TYPES):
            raise TypeError(f"Unsupported edit intent: {intent!r}")
        async with self._lock:
            try:
                action = await self._perform(intent)
            except Exception as e:
                return self._reject(_rejection_message(intent, e))

            if action is None:
                return EditResult(committed=False)

            self.undo_stack.append(action)
            self.redo_stack.clear()
            self._prune_cells()
            logger.info("Committed %s", _describe(action))
            return EditResult(committed=True, action=action)

    async def undo(self) -> EditResult:
        async with self._lock:
            if not self.undo_stack:
                return EditResult(committed=False)
            action = self.undo_stack[-1]
            try:
                await self._revert(action)
            except Exception as e:
                return self._reject(f"Failed to undo {_describe(action)}: {error_to_string(e)}")
            self.redo_stack.append(self.undo_stack.pop())
            logger.info("Undid %s", _describe(action))
            return EditResult(committed=True, action=action)

    async def redo(self) -> EditResult:
        async with self._lock:
            if not self.redo_stack:
                return EditResult(committed=False)
            action = self.redo_stack[-1]
            try:
                await self._reapply(action)
            except Exception as e:
                return self._reject(f"Failed to redo {_describe(action)}: {error_to_string(e)}")
            self.undo_stack.append(self.redo_stack.pop())
            logger.info("Redid %s", _describe(action))
            return EditResult(committed=True, action=action)

    async def _perform(self, intent: EditIntent) -> Optional[EditAction]:
        if isinstance(intent, DateChangeIntent):
            change = DateChange.from_intent(intent)
            if not await self._set_dates(change, forward=True):
                return None
            return change

        if isinstance(intent, BulkDateChangeIntent):
            changes = [DateChange.from_intent(c) for c in intent.changes]
            await self._set_all_dates(changes, forward=True)
            return BulkDateChange(changes) if changes else None

        if isinstance(intent, RelationCreateIntent):
            relation_id = await self.gateway.create_relation(
                intent.source_id, intent.target_id, intent.relation_type
            )
            return RelationChange(
                RelationOperation.CREATE,
                self._cell_for(relation_id),
                intent.source_id,
                intent.target_id,
                intent.relation_type,
            )

        if isinstance(intent, RelationDeleteIntent):
            await self.gateway.delete_relation(intent.relation_id)
            return RelationChange(
                RelationOperation.DELETE,
                self._cell_for(intent.relation_id),
                intent.source_id,
                intent.target_id,
                intent.relation_type,
            )

    async def _revert(self, action: EditAction) -> None:
        if isinstance(action, DateChange):
            await self._set_dates(action, forward=False)
        elif isinstance(action, BulkDateChange):
            await self._set_all_dates(list(reversed(action.changes)), forward=False)
        elif action.operation == RelationOperation.CREATE:
            await self.gateway.delete_relation(action.relation_id)
        else:
            await self._recreate(action)

    async def _reapply(self, action: EditAction) -> None:
        if isinstance(action, DateChange):
            await self._set_dates(action, forward=True)
        elif isinstance(action, BulkDateChange):
            await self._set_all_dates(action.changes, forward=True)
        elif action.operation == RelationOperation.CREATE:
            await self._recreate(action)
        else:
            await self.gateway.delete_relation(action.relation_id)

    async def _recreate(self, action: RelationChange) -> None:
        new_id = await self.gateway.create_relation(action.source_id, action.target_id, action.relation_type)
        self._rebind(action.cell, new_id)

    async def _set_dates(self, change: DateChange, forward: bool) -> bool:
        """Send only the dates that differ; returns False when nothing differs.

        A date that goes back to empty is sent as an explicit clear.
        """
        start = change.new_start if forward else change.old_start
        due = change.new_due if forward else change.old_due
        start_changed = change.new_start != change.old_start
        due_changed = change.new_due != change.old_due
        if not (start_changed or due_changed):
            return False
        await self.gateway.update_dates(
            change.task_id,
            start if start_changed else None,
            due if due_changed else None,
            clear_start=start_changed and start is None,
            clear_due=due_changed and due is None,
        )
        return True

    async def _set_all_dates(self, changes: Iterable[DateChange], forward: bool) -> None:
        done: List[DateChange] = []
        try:
            for change in changes:
                if await self._set_dates(change, forward):
                    done.append(change)
        except Exception:
            # Put back what already went through so the group stays all-or-nothing
            for change in reversed(done):
                try:
                    await self._set_dates(change, not forward)
                except Exception as e:
                    logger.error("Could not roll back dates of #%s: %s", change.task_id, error_to_string(e))
            raise

    def _cell_for(self, relation_id: int) -> RelationIdCell:
        cell = self._cells.get(relation_id)
        if cell is None:
            cell = RelationIdCell(relation_id)
            self._cells[relation_id] = cell
        return cell

    def _rebind(self, cell: RelationIdCell, new_id: int) -> None:
        logger.debug("Relation %s re-created as %s", cell.relation_id, new_id)
        self._cells.pop(cell.relation_id, None)
        cell.relation_id = new_id
        self._cells[new_id] = cell

    def _prune_cells(self) -> None:
        live = {
            a.cell.relation_id: a.cell
            for a in self.undo_stack + self.redo_stack
            if isinstance(a, RelationChange)
        }
        self._cells = live

    def _reject(self, message: str) -> EditResult:
        logger.warning(message)
        if self.error_reporter is not None:
            self.error_reporter(message)
        return EditResult(committed=False, error=message)


def relation_delete_intent(tasks: Iterable[Task], relation_id: int) -> Optional[RelationDeleteIntent]:
    """Look up a relation's endpoints so its deletion can later be undone."""
    for task in tasks:
        for relation in task.relations:
            if relation.relation_id == relation_id:
                return RelationDeleteIntent(
                    relation_id,
                    relation.source_id,
                    relation.target_id,
                    relation.relation_type,
                )
    return None


def _describe(action: EditAction) -> str:
    if isinstance(action, DateChange):
        return f"date change on #{action.task_id}"
    if isinstance(action, BulkDateChange):
        return f"date change on {len(action.changes)} tasks"
    return f"relation {action.operation.value} #{action.source_id} {action.relation_type.value} #{action.target_id}"


def _rejection_message(intent: EditIntent, error: Exception) -> str:
    message = error_to_string(error)
    if isinstance(intent, RelationCreateIntent):
        return f"Cannot create relation: {friendly_relation_error(message)}"
    if isinstance(intent, RelationDeleteIntent):
        return f"Failed to delete relation: {message}"
    return f"Failed to update dates: {message}"
