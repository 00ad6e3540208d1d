import unittest
from datetime import date

from workload_timeline.models.task import Relation, RelationType, Task, summary_task_ids

from tests.fakes import make_task

ISSUE = {
    "id": 42,
    "subject": "Write release notes",
    "project": {"id": 3, "name": "Website"},
    "start_date": "2024-01-08",
    "due_date": "2024-01-10",
    "estimated_hours": 6,
    "spent_hours": 1.5,
    "done_ratio": 20,
    "parent": {"id": 40},
    "relations": [
        {"id": 5, "relation_type": "blocks", "issue_id": 42, "issue_to_id": 43},
        {"id": 6, "relation_type": "blocked", "issue_id": 42, "issue_to_id": 41},
        {"id": 7, "relation_type": "precedes", "issue_id": 39, "issue_to_id": 42},
    ],
    "closed_on": None,
}


class TestTask(unittest.TestCase):
    def test_from_tracker_record(self) -> None:
        task = Task.from_dict(ISSUE)
        self.assertEqual(task.task_id, 42)
        self.assertEqual(task.project_name, "Website")
        self.assertEqual(task.start_date, date(2024, 1, 8))
        self.assertEqual(task.estimated_hours, 6.0)
        self.assertEqual(task.parent_id, 40)
        self.assertFalse(task.is_closed)
        self.assertEqual(Task.from_dict(task.to_dict()), task)

    def test_outgoing_relations_are_forward_only(self) -> None:
        task = Task.from_dict(ISSUE)
        self.assertEqual([r.relation_id for r in task.outgoing_relations()], [5])

    def test_bar_range_substitutes_missing_date(self) -> None:
        self.assertEqual(make_task(1, None, date(2024, 1, 5)).bar_range(), (date(2024, 1, 5), date(2024, 1, 5)))
        self.assertEqual(make_task(1, date(2024, 1, 2), None).bar_range(), (date(2024, 1, 2), date(2024, 1, 2)))
        self.assertIsNone(make_task(1).bar_range())

    def test_done_ratio_bounds(self) -> None:
        with self.assertRaises(ValueError):
            make_task(1, done_ratio=120)

    def test_summary_ids(self) -> None:
        tasks = [make_task(1), make_task(2, parent_id=1), make_task(3, parent_id=99)]
        self.assertEqual(summary_task_ids(tasks), {1})

    def test_cross_project_child_does_not_make_a_summary(self) -> None:
        tasks = [
            make_task(1, project_id=1),
            make_task(2, project_id=2, project_name="Beta", parent_id=1),
            make_task(3, parent_id=3),
        ]
        self.assertEqual(summary_task_ids(tasks), set())

    def test_relation_type_flags(self) -> None:
        self.assertTrue(RelationType.FOLLOWS.is_reverse)
        self.assertTrue(RelationType.PRECEDES.is_temporal)
        self.assertFalse(RelationType.RELATES.is_temporal)
        self.assertTrue(Relation(1, RelationType.RELATES, 4, 4).is_self)


if __name__ == "__main__":
    unittest.main(verbosity=2)
