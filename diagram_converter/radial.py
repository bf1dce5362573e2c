"""
Radial layout for mindmaps.

The root sits in the middle of the page. Its children share the full circle;
every deeper node fans its children out around the ray it arrived on, at a
fixed radius per level. Nodes that would overlap an already placed node are
pushed further out along their own ray.

Positions are computed around (0, 0) first. The page is then sized so the
farthest box keeps `margin` pixels to every edge, and everything is shifted
so the root lands at the page center.
"""

import logging
import math

from .config import DEFAULT_CONFIG, ConverterConfig
from .geometry import EdgeRoute, Geometry, LayoutResult
from .models import MindmapDiagram

logger = logging.getLogger(__name__)

MIN_CANVAS_WIDTH = 2400
MIN_CANVAS_HEIGHT = 1800
EMPTY_CANVAS = (800, 600)

LEVEL_RADII = [0, 350, 280, 220, 180]
DEFAULT_RADIUS = 150
NODE_SIZES = [(180, 90), (160, 70), (140, 55), (120, 45)]

# Half-width of the fan around the incoming ray, per level of the parent
FAN_HALF_WIDTH = {1: math.pi / 3, 2: math.pi / 4, 3: math.pi / 6}
MIN_FAN_HALF_WIDTH = math.pi / 8
MIN_SIBLING_STEP = math.pi / 12

COLLISION_PADDING = 10
PUSH_STEP = 20
MAX_PUSHES = 60


def level_radius(level: int) -> float:
    if level < len(LEVEL_RADII):
        return LEVEL_RADII[level]
    return DEFAULT_RADIUS


def node_size(level: int) -> tuple[int, int]:
    return NODE_SIZES[min(level, len(NODE_SIZES) - 1)]


def child_angles(parent_level: int, incoming: float, count: int) -> list[float]:
    """Angles for `count` children of a node at `parent_level`."""
    if count == 0:
        return []
    if parent_level == 0:
        return [2 * math.pi * i / count for i in range(count)]
    if count == 1:
        return [incoming]

    half = max(FAN_HALF_WIDTH.get(parent_level, MIN_FAN_HALF_WIDTH), MIN_FAN_HALF_WIDTH)
    half = max(half, (count - 1) * MIN_SIBLING_STEP / 2)
    step = 2 * half / (count - 1)
    return [incoming - half + i * step for i in range(count)]


def _collides(box: Geometry, placed: list[Geometry]) -> bool:
    bounds = box.bounds.expanded(COLLISION_PADDING)
    return any(bounds.overlaps(other.bounds) for other in placed)


def layout_mindmap(diagram: MindmapDiagram, config: ConverterConfig = DEFAULT_CONFIG) -> LayoutResult:
    result = LayoutResult()
    root = diagram.root
    if root is None:
        result.width, result.height = EMPTY_CANVAS
        return result

    # Centers relative to the root, plus the ray angle each node sits on
    centers: dict[int, tuple[float, float]] = {0: (0.0, 0.0)}
    angles: dict[int, float] = {0: 0.0}
    boxes: dict[int, Geometry] = {0: Geometry.centered(0, 0, *node_size(0))}
    placed = [boxes[0]]

    # Breadth-first so inner rings claim their space before outer ones
    queue = [0]
    while queue:
        parent_index = queue.pop(0)
        parent = diagram.nodes[parent_index]
        px, py = centers[parent_index]
        fan = child_angles(parent.level, angles[parent_index], len(parent.children))

        for child_index, angle in zip(parent.children, fan):
            child = diagram.nodes[child_index]
            width, height = node_size(child.level)
            radius = level_radius(child.level)
            dx, dy = math.cos(angle), math.sin(angle)
            cx, cy = px + dx * radius, py + dy * radius
            box = Geometry.centered(cx, cy, width, height)

            pushes = 0
            while _collides(box, placed) and pushes < MAX_PUSHES:
                cx += dx * PUSH_STEP
                cy += dy * PUSH_STEP
                box = Geometry.centered(cx, cy, width, height)
                pushes += 1
            if pushes == MAX_PUSHES:
                logger.debug("Mindmap node %s still overlaps after %d pushes", child.id, pushes)

            centers[child_index] = (cx, cy)
            angles[child_index] = angle
            boxes[child_index] = box
            placed.append(box)
            queue.append(child_index)

    margin = config.mindmap_margin
    extent_x = max(max(abs(b.x), abs(b.x + b.width)) for b in boxes.values())
    extent_y = max(max(abs(b.y), abs(b.y + b.height)) for b in boxes.values())
    result.width = max(MIN_CANVAS_WIDTH, 2 * (extent_x + margin))
    result.height = max(MIN_CANVAS_HEIGHT, 2 * (extent_y + margin))
    origin_x, origin_y = result.width / 2, result.height / 2

    for index, node in enumerate(diagram.nodes):
        box = boxes[index]
        result.nodes[node.id] = Geometry(box.x + origin_x, box.y + origin_y, box.width, box.height)
        if node.parent is not None:
            result.routes.append(EdgeRoute(
                index=index - 1,
                source=diagram.nodes[node.parent].id,
                target=node.id,
            ))

    return result
