"""Dependency arrow routing between laid-out bars."""

import logging
from typing import Dict, Iterable, List, Optional, Tuple

from ..models.scene import ArrowPath, Bar
from ..models.task import Relation, RelationType, Task

logger = logging.getLogger(__name__)

# Colour and dash pattern per forward relation type
RELATION_STYLES = {
    RelationType.BLOCKS: {'color': '#e74c3c', 'dash': '', 'label': 'blocks'},
    RelationType.PRECEDES: {'color': '#9b59b6', 'dash': '', 'label': 'precedes'},
    RelationType.RELATES: {'color': '#7f8c8d', 'dash': '4,3', 'label': 'relates to'},
    RelationType.DUPLICATES: {'color': '#e67e22', 'dash': '2,2', 'label': 'duplicates'},
    RelationType.COPIED_TO: {'color': '#1abc9c', 'dash': '6,2', 'label': 'copied to'},
}


class DependencyRouter:
    """Heuristic planar router for relation arrows.

    Cases, checked in order: same row going right (straight), different rows
    nearly aligned (S-curve), different rows going right (elbow through the
    horizontal midpoint), same row going left (detour above the row), and
    different rows going left (through the gap between the rows).
    """

    def __init__(self, config: Optional[dict] = None):
        """Initialize router with tuning constants."""
        config = config or {}
        router_config = config.get('router', {})
        self.arrow_size = router_config.get('arrow_size', 6)
        self.same_row_tolerance = router_config.get('same_row_tolerance', 5)
        self.near_vertical_threshold = router_config.get('near_vertical_threshold', 30)
        self.jog = router_config.get('jog', 20)
        self.gap = router_config.get('gap', 12)
        self.bar_height = config.get('timeline', {}).get('bar_height', 30)

    def route(
        self,
        source: Bar,
        target: Bar,
        relation_type: RelationType,
        relation_id: int = 0,
    ) -> Optional[ArrowPath]:
        """Path from source to target; None for a bar linked to itself."""
        if source.task_id == target.task_id:
            return None

        relation_type = RelationType(relation_type)
        if relation_type.is_temporal:
            # End of source into start of target
            x1, y1 = source.end_x + 2, source.y
            x2, y2 = target.start_x - 2, target.y
        else:
            x1, y1 = source.center_x, source.y
            x2, y2 = target.center_x, target.y

        same_row = abs(y1 - y2) < self.same_row_tolerance
        going_right = x2 > x1
        nearly_vertical = abs(x2 - x1) < self.near_vertical_threshold
        stop = x2 - self.arrow_size

        if same_row and going_right:
            commands = [("H", stop)]
        elif not same_row and nearly_vertical:
            mid_y = (y1 + y2) / 2
            commands = [("H", x1 + self.jog), ("V", mid_y), ("H", x2 - self.jog), ("V", y2), ("H", stop)]
        elif going_right:
            mid_x = (x1 + x2) / 2
            commands = [("H", mid_x), ("V", y2), ("H", stop)]
        elif same_row:
            above = y1 - self.bar_height
            commands = [("V", above), ("H", x2 - self.gap), ("V", y2), ("H", stop)]
        else:
            mid_y = (y1 + y2) / 2
            commands = [("V", mid_y), ("H", x2 - self.gap), ("V", y2), ("H", stop)]

        size = self.arrow_size
        head = [(x2, y2), (x2 - size, y2 - size * 0.6), (x2 - size, y2 + size * 0.6)]
        style = RELATION_STYLES.get(relation_type, RELATION_STYLES[RelationType.RELATES])

        return ArrowPath(
            relation_id=relation_id,
            relation_type=relation_type,
            source_id=source.task_id,
            target_id=target.task_id,
            commands=commands,
            start=(x1, y1),
            tip=(x2, y2),
            head=head,
            color=style['color'],
            dash=style['dash'],
        )

    def route_all(self, tasks: Iterable[Task], bars: Dict[int, Bar]) -> List[ArrowPath]:
        """Arrows for every forward relation whose two ends are currently laid out."""
        arrows = []
        for task in tasks:
            for relation in task.outgoing_relations():
                source = bars.get(relation.source_id)
                target = bars.get(relation.target_id)
                if source is None or target is None:
                    logger.debug("Skipping relation %s: #%s or #%s not laid out",
                                 relation.relation_id, relation.source_id, relation.target_id)
                    continue
                arrow = self.route(source, target, relation.relation_type, relation.relation_id)
                if arrow is not None:
                    arrows.append(arrow)
        return arrows


def critical_path(relations: Iterable[Relation]) -> List[int]:
    """Longest chain of blocks/precedes links, as task ids in order."""
    graph: Dict[int, List[int]] = {}
    nodes: List[int] = []
    for relation in relations:
        if not relation.relation_type.is_temporal or relation.is_self:
            continue
        graph.setdefault(relation.source_id, []).append(relation.target_id)
        for node in (relation.source_id, relation.target_id):
            if node not in nodes:
                nodes.append(node)

    memo: Dict[int, List[int]] = {}

    def longest_from(node: int, visiting: frozenset) -> Tuple[List[int], bool]:
        """Longest tail after node, and whether a cycle cut it short."""
        if node in memo:
            return memo[node], False
        best: List[int] = []
        pruned = False
        for neighbor in graph.get(node, []):
            if neighbor in visiting:
                pruned = True
                continue
            tail, tail_pruned = longest_from(neighbor, visiting | {neighbor})
            pruned = pruned or tail_pruned
            if len(tail) + 1 > len(best):
                best = [neighbor] + tail
        # A cut-short tail depends on the entry path and must not be reused
        if not pruned:
            memo[node] = best
        return best, pruned

    path: List[int] = []
    for node in nodes:
        tail, _ = longest_from(node, frozenset({node}))
        candidate = [node] + tail
        if len(candidate) > len(path):
            path = candidate
    return path if len(path) > 1 else []
