"""Top-down placement of a hierarchy result on the canvas.

Ranked levels are stacked as rows, leaders on top. Each row is centred
under the widest one. Nodes no leader can reach go in one extra row at
the bottom, left-aligned, so they stay visible without implying rank.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple

from casegraph.graph.hierarchy import UNREACHABLE, HierarchyResult


class Position(NamedTuple):
    x: float
    y: float


@dataclass(frozen=True)
class LayoutOptions:
    """Canvas geometry, in canvas units."""
    node_width: float = 150
    node_height: float = 80
    level_gap: float = 180
    node_gap: float = 100
    start_x: float = 100
    start_y: float = 50

    def row_width(self, count: int) -> float:
        if count <= 0:
            return 0.0
        return count * self.node_width + (count - 1) * self.node_gap


def calculate_hierarchy_layout(
    result: HierarchyResult,
    options: LayoutOptions | None = None,
) -> dict[str, Position]:
    """Map node id → top-left position. Does not touch ``result``."""
    options = options or LayoutOptions()
    positions: dict[str, Position] = {}

    ranked = sorted(level for level in result.levels if level != UNREACHABLE)
    max_width = max((options.row_width(len(result.levels[lvl])) for lvl in ranked), default=0.0)
    row_pitch = options.node_height + options.level_gap
    column_pitch = options.node_width + options.node_gap

    for row, level in enumerate(ranked):
        members = result.levels[level]
        offset = (max_width - options.row_width(len(members))) / 2
        y = options.start_y + row * row_pitch
        for column, node_id in enumerate(members):
            positions[node_id] = Position(
                x=options.start_x + offset + column * column_pitch,
                y=y,
            )

    unreachable = result.levels.get(UNREACHABLE, [])
    y = options.start_y + len(ranked) * row_pitch
    for column, node_id in enumerate(unreachable):
        positions[node_id] = Position(x=options.start_x + column * column_pitch, y=y)

    return positions


def positions_to_dict(positions: dict[str, Position]) -> dict[str, dict[str, float]]:
    """JSON-ready ``{nodeId: {"x": ..., "y": ...}}``."""
    return {node_id: {"x": pos.x, "y": pos.y} for node_id, pos in positions.items()}
