import unittest

from workload_timeline.engine.router import DependencyRouter, critical_path
from workload_timeline.models.scene import Bar
from workload_timeline.models.task import Relation, RelationType

from tests.fakes import make_task


def bar(task_id, start_x, end_x, y, row_index=0):
    return Bar(task_id=task_id, row_index=row_index, start_x=start_x, end_x=end_x, y=y)


class TestDependencyRouter(unittest.TestCase):
    def setUp(self) -> None:
        self.router = DependencyRouter()

    def test_same_row_to_the_right_is_straight(self) -> None:
        arrow = self.router.route(bar(1, 0, 100, 15), bar(2, 200, 300, 15), RelationType.BLOCKS)
        self.assertEqual(arrow.start, (102, 15))
        self.assertEqual(arrow.commands, [("H", 192)])
        self.assertEqual(arrow.tip, (198, 15))
        self.assertEqual(arrow.head[0], (198, 15))

    def test_nearly_aligned_rows_use_s_curve(self) -> None:
        arrow = self.router.route(bar(1, 0, 100, 15), bar(2, 110, 200, 55), RelationType.PRECEDES)
        self.assertEqual(arrow.commands, [("H", 122), ("V", 35), ("H", 88), ("V", 55), ("H", 102)])

    def test_different_rows_to_the_right_use_elbow(self) -> None:
        arrow = self.router.route(bar(1, 0, 100, 15), bar(2, 200, 300, 55), RelationType.BLOCKS)
        self.assertEqual(arrow.commands, [("H", 150), ("V", 55), ("H", 192)])
        self.assertEqual(arrow.points(), [(102, 15), (150, 15), (150, 55), (192, 55)])
        self.assertEqual(arrow.to_svg_path(), "M 102 15 H 150 V 55 H 192")

    def test_same_row_to_the_left_detours_above(self) -> None:
        arrow = self.router.route(bar(1, 200, 300, 55), bar(2, 0, 100, 55), RelationType.RELATES)
        self.assertEqual(arrow.start, (250, 55))
        self.assertEqual(arrow.commands, [("V", 25), ("H", 38), ("V", 55), ("H", 44)])

    def test_different_rows_to_the_left_use_gap(self) -> None:
        arrow = self.router.route(bar(1, 200, 300, 15), bar(2, 0, 100, 55), RelationType.DUPLICATES)
        self.assertEqual(arrow.commands, [("V", 35), ("H", 38), ("V", 55), ("H", 44)])
        self.assertEqual(arrow.dash, "2,2")

    def test_self_link_is_not_drawn(self) -> None:
        b = bar(1, 0, 100, 15)
        self.assertIsNone(self.router.route(b, b, RelationType.BLOCKS))

    def test_route_all_skips_reverse_and_missing_tasks(self) -> None:
        forward = Relation(1, RelationType.BLOCKS, 1, 2)
        reverse = Relation(2, RelationType.BLOCKED, 1, 2)
        dangling = Relation(3, RelationType.RELATES, 1, 99)
        selfish = Relation(4, RelationType.RELATES, 1, 1)
        tasks = [
            make_task(1, relations=[forward, reverse, dangling, selfish]),
            make_task(2, relations=[forward]),
        ]
        bars = {1: bar(1, 0, 100, 15), 2: bar(2, 200, 300, 55, row_index=1)}
        arrows = self.router.route_all(tasks, bars)
        self.assertEqual([(a.relation_id, a.source_id, a.target_id) for a in arrows], [(1, 1, 2)])


class TestCriticalPath(unittest.TestCase):
    def test_longest_temporal_chain(self) -> None:
        relations = [
            Relation(1, RelationType.BLOCKS, 1, 2),
            Relation(2, RelationType.PRECEDES, 2, 3),
            Relation(3, RelationType.BLOCKS, 1, 4),
            Relation(4, RelationType.RELATES, 3, 5),
        ]
        self.assertEqual(critical_path(relations), [1, 2, 3])

    def test_cycle_terminates(self) -> None:
        relations = [Relation(1, RelationType.BLOCKS, 1, 2), Relation(2, RelationType.BLOCKS, 2, 1)]
        self.assertEqual(critical_path(relations), [1, 2])

    def test_cycle_entered_from_outside_is_not_cut_short(self) -> None:
        relations = [
            Relation(1, RelationType.BLOCKS, 2, 3),
            Relation(2, RelationType.BLOCKS, 3, 2),
            Relation(3, RelationType.PRECEDES, 4, 3),
        ]
        self.assertEqual(critical_path(relations), [4, 3, 2])

    def test_no_temporal_links(self) -> None:
        self.assertEqual(critical_path([Relation(1, RelationType.RELATES, 1, 2)]), [])


if __name__ == "__main__":
    unittest.main(verbosity=2)
