"""
Layout geometry - positions and routing hints produced by the layout engines.

These are plain frozen dataclasses: the layout stage never mutates the parsed
diagram, it only produces a LayoutResult next to it.
"""

from dataclasses import dataclass, field
from typing import Iterator, Optional


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned box {x1, y1, x2, y2}, used for collision checks."""
    x1: float
    y1: float
    x2: float
    y2: float

    def expanded(self, padding: float) -> "BoundingBox":
        return BoundingBox(self.x1 - padding, self.y1 - padding, self.x2 + padding, self.y2 + padding)

    def overlaps(self, other: "BoundingBox") -> bool:
        return (
            self.x1 < other.x2 and other.x1 < self.x2
            and self.y1 < other.y2 and other.y1 < self.y2
        )


@dataclass(frozen=True)
class Geometry:
    """Top-left position and size of a vertex."""
    x: float
    y: float
    width: float
    height: float

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2

    @property
    def center_y(self) -> float:
        return self.y + self.height / 2

    @property
    def center(self) -> Point:
        return Point(self.center_x, self.center_y)

    @property
    def bounds(self) -> BoundingBox:
        return BoundingBox(self.x, self.y, self.x + self.width, self.y + self.height)

    @classmethod
    def centered(cls, cx: float, cy: float, width: float, height: float) -> "Geometry":
        return cls(cx - width / 2, cy - height / 2, width, height)


@dataclass(frozen=True)
class Port:
    """Connection point relative to a vertex (0..1 on each axis)."""
    x: float
    y: float


# Named ports used by the routers
TOP = Port(0.5, 0)
BOTTOM = Port(0.5, 1)
LEFT = Port(0, 0.5)
RIGHT = Port(1, 0.5)


def format_number(value: float) -> str:
    """Format coordinates without a trailing .0 for whole numbers."""
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.2f}".rstrip("0").rstrip(".")


@dataclass(frozen=True)
class EdgeRoute:
    """
    Routing hints for one relationship.

    `index` is the position of the relationship in the diagram's relationship
    list, so dropped relationships leave a visible gap.
    Free-floating edges (sequence messages) use source_point/target_point
    instead of source/target cells.
    """
    index: int
    source: Optional[str] = None
    target: Optional[str] = None
    exit: Optional[Port] = None
    entry: Optional[Port] = None
    waypoints: tuple[Point, ...] = ()
    label_offset: Optional[Point] = None
    source_point: Optional[Point] = None
    target_point: Optional[Point] = None

    def port_style(self) -> str:
        """exitX/exitY/entryX/entryY style fragment ("" when unset)."""
        style = ""
        if self.exit is not None:
            style += f"exitX={format_number(self.exit.x)};exitY={format_number(self.exit.y)};"
        if self.entry is not None:
            style += f"entryX={format_number(self.entry.x)};entryY={format_number(self.entry.y)};"
        return style


@dataclass
class LayoutResult:
    """
    Everything a renderer needs to place cells.

    nodes: geometry per model node id
    routes: one entry per relationship that has geometry on both ends
    annotations: secondary vertices keyed by (kind, key), e.g.
        ("lifeline", "Alice"), ("note", "0"), ("tag", "c1")
    """
    nodes: dict[str, Geometry] = field(default_factory=dict)
    routes: list[EdgeRoute] = field(default_factory=list)
    annotations: dict[tuple[str, str], Geometry] = field(default_factory=dict)
    width: float = 850
    height: float = 1100

    def annotations_of(self, kind: str) -> Iterator[tuple[str, Geometry]]:
        for (annotation_kind, key), geometry in self.annotations.items():
            if annotation_kind == kind:
                yield key, geometry
