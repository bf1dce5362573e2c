"""
Edge routers for grid layouts (ER and class diagrams).

A router only decides where an edge leaves and enters its boxes, plus optional
waypoints. Layouts take any object with a `route(source, target)` method, so a
stricter obstacle-avoiding router can replace these without touching parsers
or renderers.

- PortRouter: picks ports from the relative position of the two boxes
- CorridorRouter: additionally bends edges through the gaps between grid
  columns and rows so they do not cross other boxes
"""

from dataclasses import dataclass
from typing import Protocol

from .geometry import BOTTOM, LEFT, RIGHT, TOP, Geometry, Point, Port

# Boxes whose top-left corners are closer than this share a row/column
ALIGN_TOLERANCE = 50


@dataclass(frozen=True)
class RouteHints:
    exit: Port
    entry: Port
    waypoints: tuple[Point, ...] = ()


class Router(Protocol):
    def route(self, source: Geometry, target: Geometry) -> RouteHints:
        ...


class PortRouter:
    """
    Heuristic port selection, no waypoints.

    Same row: horizontal ports facing each other. Same column: vertical
    ports. Diagonal: leave horizontally toward the target and enter vertically,
    which gives draw.io a single-bend orthogonal path.
    """

    def __init__(self, tolerance: float = ALIGN_TOLERANCE):
        self.tolerance = tolerance

    def route(self, source: Geometry, target: Geometry) -> RouteHints:
        dx = target.x - source.x
        dy = target.y - source.y

        if abs(dy) < self.tolerance:
            if dx > 0:
                return RouteHints(RIGHT, LEFT)
            return RouteHints(LEFT, RIGHT)

        if abs(dx) < self.tolerance:
            if dy > 0:
                return RouteHints(BOTTOM, TOP)
            return RouteHints(TOP, BOTTOM)

        horizontal_exit = RIGHT if dx > 0 else LEFT
        vertical_entry = TOP if dy > 0 else BOTTOM
        return RouteHints(horizontal_exit, vertical_entry)


class CorridorRouter:
    """
    Route through the empty space of a grid layout.

    Vertical runs use the column gap next to the source box; horizontal runs
    use a lane `row_margin` pixels outside the target's row. Edges between
    neighbouring boxes in the same row are left straight.
    """

    def __init__(self, column_gap: float, row_margin: float = 20, tolerance: float = ALIGN_TOLERANCE):
        self.column_gap = column_gap
        self.row_margin = row_margin
        self.tolerance = tolerance

    def _vertical_lane(self, source: Geometry, rightwards: bool) -> float:
        if rightwards:
            return source.x + source.width + self.column_gap / 2
        return source.x - self.column_gap / 2

    def route(self, source: Geometry, target: Geometry) -> RouteHints:
        dx = target.x - source.x
        dy = target.y - source.y

        if abs(dy) < self.tolerance:
            rightwards = dx > 0
            gap = target.x - (source.x + source.width) if rightwards else source.x - (target.x + target.width)
            if gap <= self.column_gap * 1.5:
                return RouteHints(RIGHT, LEFT) if rightwards else RouteHints(LEFT, RIGHT)
            # Skip over the boxes in between using the lane above the row
            lane_y = min(source.y, target.y) - self.row_margin
            return RouteHints(
                TOP,
                TOP,
                (Point(source.center_x, lane_y), Point(target.center_x, lane_y)),
            )

        if abs(dx) < self.tolerance:
            lane_x = self._vertical_lane(source, rightwards=True)
            return RouteHints(
                RIGHT,
                RIGHT,
                (Point(lane_x, source.center_y), Point(lane_x, target.center_y)),
            )

        rightwards = dx > 0
        lane_x = self._vertical_lane(source, rightwards)
        if dy > 0:
            lane_y = target.y - self.row_margin
            entry = TOP
        else:
            lane_y = target.y + target.height + self.row_margin
            entry = BOTTOM
        return RouteHints(
            RIGHT if rightwards else LEFT,
            entry,
            (
                Point(lane_x, source.center_y),
                Point(lane_x, lane_y),
                Point(target.center_x, lane_y),
            ),
        )


def make_router(name: str, column_gap: float) -> Router:
    """Router by configuration name ("ports" or "corridor")."""
    if name == "corridor":
        return CorridorRouter(column_gap=column_gap)
    if name == "ports":
        return PortRouter()
    raise ValueError(f"Unknown router: {name}")
