"""Deterministic sample task generator."""

import random
from datetime import date, timedelta
from typing import List, Optional

from ..models.task import Relation, RelationType, Task

PROJECT_NAMES = ['Platform', 'Mobile App', 'Website', 'Infrastructure', 'Research']
VERBS = ['Implement', 'Review', 'Migrate', 'Document', 'Test', 'Design', 'Fix']
NOUNS = ['login flow', 'billing export', 'search index', 'API gateway', 'release notes', 'dashboard', 'sync job']


class TaskGenerator:
    """Generates reproducible task sets with projects, subtasks and relations."""

    def __init__(self, seed: int = 42, config: Optional[dict] = None):
        """Initialize generator with seed for reproducibility."""
        self.seed = seed
        self.random = random.Random(seed)
        self.config = config or {}
        self.sample_config = self.config.get('sample', {})

    def generate_tasks(
        self,
        count: Optional[int] = None,
        start_date: Optional[date] = None,
        project_count: Optional[int] = None,
        span_days: Optional[int] = None,
    ) -> List[Task]:
        """Generate tasks spread over a few projects.

        About a quarter of tasks become subtasks of an earlier task in the
        same project, and about a fifth block or precede an earlier one.
        """
        count = count or self.sample_config.get('task_count', 20)
        start_date = start_date or date.today()
        project_count = min(project_count or self.sample_config.get('project_count', 3), len(PROJECT_NAMES))
        span_days = span_days or self.sample_config.get('span_days', 45)

        tasks: List[Task] = []
        next_relation_id = 1

        for i in range(count):
            task_id = 100 + i
            project_id = self.random.randint(1, project_count)

            # Some tasks are missing dates or estimates, as they would be in a real tracker
            offset = self.random.randint(0, span_days)
            duration = self.random.randint(1, 10)
            start = start_date + timedelta(days=offset)
            due = start + timedelta(days=duration)
            roll = self.random.random()
            if roll < 0.1:
                start = None
            elif roll < 0.15:
                due = None

            estimate = None
            if self.random.random() < 0.9:
                estimate = float(self.random.choice([2, 4, 8, 12, 16, 24, 40]))
            spent = round(estimate * self.random.uniform(0, 0.8), 1) if estimate else 0.0

            siblings = [t for t in tasks if t.project_id == project_id]
            parent_id = None
            if siblings and self.random.random() < 0.25:
                parent_id = self.random.choice(siblings).task_id

            task = Task(
                task_id=task_id,
                title=f"{self.random.choice(VERBS)} {self.random.choice(NOUNS)}",
                project_id=project_id,
                project_name=PROJECT_NAMES[project_id - 1],
                start_date=start,
                due_date=due,
                estimated_hours=estimate,
                spent_hours=spent,
                done_ratio=self.random.choice([0, 0, 10, 30, 50, 80, 100]),
                parent_id=parent_id,
            )

            if tasks and self.random.random() < 0.2:
                predecessor = self.random.choice(tasks)
                relation_type = self.random.choice([RelationType.BLOCKS, RelationType.PRECEDES])
                relation = Relation(next_relation_id, relation_type, predecessor.task_id, task_id)
                next_relation_id += 1
                # Trackers report a relation on both of its issues
                predecessor.relations.append(relation)
                task.relations.append(relation)

            tasks.append(task)

        return tasks
