import unittest
from datetime import date

from workload_timeline.engine.layout import Timeline, ZoomLevel
from workload_timeline.interaction.controller import GestureMode, Hit, HitKind, InteractionController
from workload_timeline.models.actions import DateChangeIntent, RelationCreateIntent
from workload_timeline.models.scene import Bar
from workload_timeline.models.task import CREATABLE_TYPES, RelationType

from tests.fakes import make_task


class TestInteractionController(unittest.TestCase):
    def setUp(self) -> None:
        # 40px per day starting 2024-01-01
        self.timeline = Timeline(date(2024, 1, 1), date(2024, 1, 31), ZoomLevel.DAY, min_width=0)
        tasks = [
            make_task(1, date(2024, 1, 5), date(2024, 1, 7), 8),
            make_task(2, date(2024, 1, 10), date(2024, 1, 12), 8),
            make_task(3, date(2024, 1, 5), date(2024, 1, 12)),
        ]
        bars = {
            1: Bar(1, 1, 160, 280, 55),
            2: Bar(2, 2, 360, 480, 95),
            3: Bar(3, 3, 160, 480, 135, is_summary=True),
        }
        self.controller = InteractionController(self.timeline, bars, tasks, {})

    def test_right_edge_drag_snaps_to_whole_days(self) -> None:
        c = self.controller
        self.assertTrue(c.pointer_down(Hit(HitKind.RIGHT_EDGE, 1), 280, 55))
        self.assertEqual(c.mode, GestureMode.RESIZE_RIGHT)
        c.pointer_move(330, 55)
        self.assertEqual(c.preview, (1, 160, 320))
        intent = c.pointer_up(362, 55)
        self.assertEqual(intent, DateChangeIntent(1, date(2024, 1, 5), date(2024, 1, 7), date(2024, 1, 5), date(2024, 1, 9)))
        self.assertTrue(c.is_idle)

    def test_release_on_same_day_emits_nothing(self) -> None:
        c = self.controller
        c.pointer_down(Hit(HitKind.RIGHT_EDGE, 1), 280, 55)
        self.assertIsNone(c.pointer_up(290, 55))
        self.assertTrue(c.is_idle)

    def test_left_edge_stops_one_day_before_right_edge(self) -> None:
        c = self.controller
        c.pointer_down(Hit(HitKind.LEFT_EDGE, 1), 160, 55)
        c.pointer_move(1000, 55)
        self.assertEqual(c.preview, (1, 240, 280))
        intent = c.pointer_up(1000, 55)
        self.assertEqual(intent.new_start, date(2024, 1, 7))
        self.assertEqual(intent.new_due, date(2024, 1, 7))

    def test_move_shifts_both_dates(self) -> None:
        c = self.controller
        c.pointer_down(Hit(HitKind.BAR, 1), 200, 55)
        intent = c.pointer_up(280, 55)
        self.assertEqual((intent.new_start, intent.new_due), (date(2024, 1, 7), date(2024, 1, 9)))

    def test_summary_bars_are_not_editable(self) -> None:
        c = self.controller
        self.assertFalse(c.pointer_down(Hit(HitKind.RIGHT_EDGE, 3), 480, 135))
        self.assertFalse(c.pointer_down(Hit(HitKind.LINK_HANDLE, 3), 488, 135))
        self.assertTrue(c.is_idle)

    def test_second_pointer_down_is_ignored(self) -> None:
        c = self.controller
        c.pointer_down(Hit(HitKind.RIGHT_EDGE, 1), 280, 55)
        self.assertFalse(c.pointer_down(Hit(HitKind.LINK_HANDLE, 2), 488, 95))
        self.assertEqual(c.mode, GestureMode.RESIZE_RIGHT)

    def test_link_released_on_target_waits_for_type(self) -> None:
        c = self.controller
        c.pointer_down(Hit(HitKind.LINK_HANDLE, 1), 288, 55)
        c.pointer_move(400, 95, Hit(HitKind.BAR, 2))
        self.assertEqual(c.candidate_target, 2)
        self.assertEqual(c.temp_arrow, ((288, 55), (400, 95)))

        self.assertIsNone(c.pointer_up(400, 95, Hit(HitKind.BAR, 2)))
        self.assertEqual(c.mode, GestureMode.LINK_PICKING)
        self.assertEqual(c.pending_link, (1, 2))
        self.assertEqual(c.relation_choices, CREATABLE_TYPES)

        intent = c.choose_relation_type("blocks")
        self.assertEqual(intent, RelationCreateIntent(1, 2, RelationType.BLOCKS))
        self.assertTrue(c.is_idle)

    def test_link_released_on_empty_space_cancels(self) -> None:
        c = self.controller
        c.pointer_down(Hit(HitKind.LINK_HANDLE, 1), 288, 55)
        self.assertIsNone(c.pointer_up(700, 300))
        self.assertTrue(c.is_idle)

    def test_link_onto_itself_is_not_a_candidate(self) -> None:
        c = self.controller
        c.pointer_down(Hit(HitKind.LINK_HANDLE, 1), 288, 55)
        c.pointer_move(200, 55, Hit(HitKind.BAR, 1))
        self.assertIsNone(c.candidate_target)

    def test_escape_cancels_any_gesture(self) -> None:
        c = self.controller
        c.pointer_down(Hit(HitKind.LINK_HANDLE, 1), 288, 55)
        c.pointer_move(400, 95, Hit(HitKind.BAR, 2))
        c.key_down("Escape")
        self.assertTrue(c.is_idle)
        self.assertIsNone(c.pending_link)

        c.pointer_down(Hit(HitKind.RIGHT_EDGE, 1), 280, 55)
        c.pointer_move(400, 55)
        c.key_down("Escape")
        self.assertIsNone(c.preview)
        self.assertIsNone(c.pointer_up(400, 55))

    def test_reverse_type_cannot_be_chosen(self) -> None:
        c = self.controller
        c.pointer_down(Hit(HitKind.LINK_HANDLE, 1), 288, 55)
        c.pointer_up(400, 95, Hit(HitKind.BAR, 2))
        with self.assertRaises(ValueError):
            c.choose_relation_type(RelationType.BLOCKED)

    def test_column_resize_is_clamped_and_emits_nothing(self) -> None:
        c = self.controller
        self.assertTrue(c.pointer_down(Hit(HitKind.COLUMN_HANDLE), 250, 0))
        c.pointer_move(1000, 0)
        self.assertEqual(c.label_width, 500)
        c.pointer_move(0, 0)
        self.assertEqual(c.label_width, 150)
        self.assertIsNone(c.pointer_up(300, 0))
        self.assertEqual(c.label_width, 300)
        self.assertTrue(c.is_idle)


if __name__ == "__main__":
    unittest.main(verbosity=2)
