"""In-memory tracker used by the async tests."""

import copy
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional

from workload_timeline.history.gateway import IssueSource, MutationGateway
from workload_timeline.models.task import Relation, RelationType, Task
from workload_timeline.utils.errors import MutationError


def make_task(task_id, start=None, due=None, estimate=None, project_id=1, project_name="Alpha", **kwargs) -> Task:
    return Task(
        task_id=task_id,
        title=kwargs.pop("title", f"Task {task_id}"),
        project_id=project_id,
        project_name=project_name,
        start_date=start,
        due_date=due,
        estimated_hours=estimate,
        **kwargs,
    )


class FakeTracker(MutationGateway, IssueSource):
    """Holds tasks, hands out fresh relation ids and records every call.

    Setting `fail_with` makes every mutation raise MutationError with that
    message; `fail_task_ids` only fails date updates for those tasks.
    Creating a precedes relation pushes the target to start after the
    source, like a real tracker would.
    """

    def __init__(self, tasks: Iterable[Task] = (), first_relation_id: int = 500):
        self.tasks: Dict[int, Task] = {t.task_id: t for t in tasks}
        self.next_relation_id = first_relation_id
        self.calls: List[tuple] = []
        self.cleared: List[tuple] = []
        self.fail_with: Optional[str] = None
        self.fail_task_ids = set()
        self.fetch_fails = False

    async def fetch_tasks(self) -> List[Task]:
        if self.fetch_fails:
            raise ConnectionError("tracker unreachable")
        return copy.deepcopy(list(self.tasks.values()))

    async def update_dates(
        self,
        task_id: int,
        start: Optional[date],
        due: Optional[date],
        clear_start: bool = False,
        clear_due: bool = False,
    ) -> None:
        self.calls.append(("update_dates", task_id, start, due))
        self.cleared.append((task_id, clear_start, clear_due))
        self._maybe_fail()
        if task_id in self.fail_task_ids:
            raise MutationError(f"Task {task_id} is locked")
        task = self.tasks[task_id]
        if start is not None or clear_start:
            task.start_date = start
        if due is not None or clear_due:
            task.due_date = due

    async def create_relation(self, source_id: int, target_id: int, relation_type: RelationType) -> int:
        self.calls.append(("create_relation", source_id, target_id, RelationType(relation_type)))
        self._maybe_fail()
        relation = Relation(self.next_relation_id, RelationType(relation_type), source_id, target_id)
        self.next_relation_id += 1
        source, target = self.tasks[source_id], self.tasks[target_id]
        source.relations.append(relation)
        target.relations.append(relation)

        if relation.relation_type == RelationType.PRECEDES and source.due_date and target.start_date:
            if target.start_date <= source.due_date:
                target.start_date = source.due_date + timedelta(days=1)
        return relation.relation_id

    async def delete_relation(self, relation_id: int) -> None:
        self.calls.append(("delete_relation", relation_id))
        self._maybe_fail()
        found = False
        for task in self.tasks.values():
            before = len(task.relations)
            task.relations = [r for r in task.relations if r.relation_id != relation_id]
            found = found or len(task.relations) != before
        if not found:
            raise MutationError(f"Relation {relation_id} not found")

    def relation_ids(self) -> set:
        return {r.relation_id for t in self.tasks.values() for r in t.relations}

    def _maybe_fail(self) -> None:
        if self.fail_with is not None:
            raise MutationError(self.fail_with)
