"""Collaborator interfaces the engine consumes but does not implement."""

from abc import ABC, abstractmethod
from datetime import date
from typing import List, Optional

from ..models.task import RelationType, Task


class MutationGateway(ABC):
    """Remote writes. Implementations raise on failure (typically MutationError).

    The remote system may apply side effects beyond the requested change,
    e.g. creating a precedes relation can move the target's dates.
    """

    @abstractmethod
    async def update_dates(
        self,
        task_id: int,
        start: Optional[date],
        due: Optional[date],
        clear_start: bool = False,
        clear_due: bool = False,
    ) -> None:
        """Set the given dates; None leaves that date unchanged unless its clear flag is set."""
        pass

    @abstractmethod
    async def create_relation(self, source_id: int, target_id: int, relation_type: RelationType) -> int:
        """Create a relation and return the id the remote system assigned."""
        pass

    @abstractmethod
    async def delete_relation(self, relation_id: int) -> None:
        pass


class IssueSource(ABC):
    """Read-only snapshot of the user's tasks."""

    @abstractmethod
    async def fetch_tasks(self) -> List[Task]:
        pass
