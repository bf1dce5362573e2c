"""
Layout engines for the grid and lane based dialects.

Each engine reads a parsed diagram and returns a LayoutResult; the diagram
itself is never modified. Provided strategies:
- Flowchart: linear (one node per step) or layered (BFS levels)
- ER: fixed column grid
- Sequence: participant lanes and chronological rows
- Class: column grid with rows that grow to fit the tallest class
- Git graph: one column per branch, one row per commit

Mindmaps use the radial layout in radial.py.
"""

import logging
from collections import defaultdict
from typing import Optional

from .config import DEFAULT_CONFIG, ConverterConfig
from .geometry import BOTTOM, LEFT, RIGHT, TOP, EdgeRoute, Geometry, LayoutResult, Point
from .models import (
    ClassDiagram,
    ClassNode,
    Direction,
    ErDiagram,
    FlowNode,
    FlowchartDiagram,
    GitGraphDiagram,
    NodeShape,
    Note,
    SequenceDiagram,
)
from .routing import Router, make_router

logger = logging.getLogger(__name__)


def _drop(kind: str, source: str, target: str) -> None:
    logger.debug("Dropping %s %s -> %s: endpoint has no geometry", kind, source, target)


def _canvas(result: LayoutResult, min_width: float, min_height: float, margin: float = 40) -> None:
    """Grow the page so every node fits, never below the minimum size."""
    boxes = list(result.nodes.values()) + list(result.annotations.values())
    right = max((g.x + g.width for g in boxes), default=0)
    bottom = max((g.y + g.height for g in boxes), default=0)
    result.width = max(min_width, right + margin)
    result.height = max(min_height, bottom + margin)


# ============================================================================
# FLOWCHART
# ============================================================================

FLOW_START_X = 340
FLOW_START_Y = 40
FLOW_SPACING_X = 200
FLOW_SPACING_Y = 120
FLOW_NODE_WIDTH = 120
FLOW_NODE_HEIGHT = 60
# Layered strategy: level pitch along the flow, sibling pitch across it
LAYER_SPACING_MAIN = {True: 150, False: 200}
LAYER_SPACING_CROSS = {True: 200, False: 150}

FLOW_PORTS = {
    Direction.TD: (BOTTOM, TOP),
    Direction.TB: (BOTTOM, TOP),
    Direction.BT: (TOP, BOTTOM),
    Direction.LR: (RIGHT, LEFT),
    Direction.RL: (LEFT, RIGHT),
}


def flow_node_size(node: FlowNode) -> tuple[int, int]:
    """Diamonds grow with their label so the text stays inside."""
    if node.shape != NodeShape.DIAMOND:
        return FLOW_NODE_WIDTH, FLOW_NODE_HEIGHT
    length = len(node.label)
    if length <= 15:
        return 120, 80
    if length <= 30:
        return 160, 100
    return 200, 120


def bfs_levels(node_ids: list[str], edges: list[tuple[str, str]]) -> dict[str, int]:
    """
    Assign each node a level: roots (no incoming edges) are level 0 and
    children sit one level below the first parent that reaches them.
    """
    children: dict[str, list[str]] = {node_id: [] for node_id in node_ids}
    has_parent: set[str] = set()

    for source, target in edges:
        if source in children and target in children and source != target:
            children[source].append(target)
            has_parent.add(target)

    roots = [node_id for node_id in node_ids if node_id not in has_parent]
    if not roots and node_ids:
        # Pure cycle, start from the first declared node
        roots = [node_ids[0]]

    levels: dict[str, int] = {}
    queue = [(root, 0) for root in roots]
    while queue:
        node_id, level = queue.pop(0)
        if node_id in levels:
            continue
        levels[node_id] = level
        for child in children.get(node_id, []):
            queue.append((child, level + 1))

    # Nodes only reachable through a cycle that no root enters
    for node_id in node_ids:
        levels.setdefault(node_id, 0)
    return levels


def _linear_positions(diagram: FlowchartDiagram) -> dict[str, tuple[float, float]]:
    order = list(diagram.nodes)
    if diagram.direction.is_reversed:
        order.reverse()

    positions = {}
    x, y = FLOW_START_X, FLOW_START_Y
    for node_id in order:
        positions[node_id] = (x, y)
        if diagram.direction.is_vertical:
            y += FLOW_SPACING_Y
        else:
            x += FLOW_SPACING_X
    return positions


def _layered_positions(diagram: FlowchartDiagram) -> dict[str, tuple[float, float]]:
    node_ids = list(diagram.nodes)
    levels = bfs_levels(node_ids, [(e.source, e.target) for e in diagram.edges])
    deepest = max(levels.values(), default=0)
    vertical = diagram.direction.is_vertical
    main_pitch = LAYER_SPACING_MAIN[vertical]
    cross_pitch = LAYER_SPACING_CROSS[vertical]

    positions = {}
    level_counts: dict[int, int] = defaultdict(int)
    for node_id in node_ids:
        level = levels[node_id]
        index = level_counts[level]
        level_counts[level] += 1
        if diagram.direction.is_reversed:
            level = deepest - level
        if vertical:
            positions[node_id] = (FLOW_START_X + index * cross_pitch, FLOW_START_Y + level * main_pitch)
        else:
            positions[node_id] = (FLOW_START_X + level * main_pitch, FLOW_START_Y + index * cross_pitch)
    return positions


def layout_flowchart(diagram: FlowchartDiagram, config: ConverterConfig = DEFAULT_CONFIG) -> LayoutResult:
    if config.flow_layout == "layered":
        positions = _layered_positions(diagram)
    else:
        positions = _linear_positions(diagram)

    result = LayoutResult()
    for node_id, node in diagram.nodes.items():
        x, y = positions[node_id]
        width, height = flow_node_size(node)
        result.nodes[node_id] = Geometry(x, y, width, height)

    exit_port, entry_port = FLOW_PORTS[diagram.direction]
    for index, edge in enumerate(diagram.edges):
        if edge.source not in result.nodes or edge.target not in result.nodes:
            _drop("edge", edge.source, edge.target)
            continue
        result.routes.append(EdgeRoute(
            index=index,
            source=edge.source,
            target=edge.target,
            exit=exit_port,
            entry=entry_port,
        ))

    _canvas(result, 850, 1100)
    return result


# ============================================================================
# ER DIAGRAM
# ============================================================================

ER_START_X = 40
ER_START_Y = 40
ER_SPACING_X = 400
ER_SPACING_Y = 350
ER_ENTITY_WIDTH = 200
ER_HEADER_HEIGHT = 30
ER_ROW_HEIGHT = 22
ER_LABEL_OFFSET = Point(0, -25)


def _grid_routes(
    result: LayoutResult,
    relationships: list,
    router: Router,
    kind: str,
    label_offset: Optional[Point] = None,
) -> None:
    for index, rel in enumerate(relationships):
        source = result.nodes.get(rel.source)
        target = result.nodes.get(rel.target)
        if source is None or target is None:
            _drop(kind, rel.source, rel.target)
            continue
        hints = router.route(source, target)
        result.routes.append(EdgeRoute(
            index=index,
            source=rel.source,
            target=rel.target,
            exit=hints.exit,
            entry=hints.entry,
            waypoints=hints.waypoints,
            label_offset=label_offset,
        ))


def layout_er_diagram(
    diagram: ErDiagram,
    config: ConverterConfig = DEFAULT_CONFIG,
    router: Optional[Router] = None,
) -> LayoutResult:
    columns = config.er_columns
    router = router or make_router(config.er_router, column_gap=ER_SPACING_X - ER_ENTITY_WIDTH)

    result = LayoutResult()
    for i, entity in enumerate(diagram.entities.values()):
        col = i % columns
        row = i // columns
        result.nodes[entity.name] = Geometry(
            ER_START_X + col * ER_SPACING_X,
            ER_START_Y + row * ER_SPACING_Y,
            ER_ENTITY_WIDTH,
            ER_HEADER_HEIGHT + len(entity.attributes) * ER_ROW_HEIGHT,
        )

    _grid_routes(result, diagram.relationships, router, "relationship", ER_LABEL_OFFSET)
    _canvas(result, 1600, 1200)
    return result


# ============================================================================
# SEQUENCE DIAGRAM
# ============================================================================

PARTICIPANT_START_X = 80
PARTICIPANT_Y = 20
PARTICIPANT_WIDTH = 100
PARTICIPANT_HEIGHT = 50
PARTICIPANT_SPACING = 180
LIFELINE_START_Y = 80
MESSAGE_SPACING = 60
NOTE_WIDTH = 100
NOTE_HEIGHT = 40
SELF_LOOP_WIDTH = 40
SELF_LOOP_HEIGHT = 25
ACTIVATION_WIDTH = 10


def row_y(row: int) -> float:
    """Vertical position of a chronological row (messages and notes)."""
    return LIFELINE_START_Y + 30 + row * MESSAGE_SPACING


def _note_geometry(result: LayoutResult, note: Note) -> Optional[Geometry]:
    anchors = [result.nodes[p] for p in note.participants if p in result.nodes]
    if not note.participants or note.participants[0] not in result.nodes:
        return None

    first = anchors[0]
    y = row_y(note.row) - NOTE_HEIGHT / 2
    if note.position == "right of":
        return Geometry(first.x + PARTICIPANT_WIDTH + 20, y, NOTE_WIDTH, NOTE_HEIGHT)
    if note.position == "left of":
        return Geometry(max(first.x - 120, 0), y, NOTE_WIDTH, NOTE_HEIGHT)
    if len(anchors) > 1:
        left = min(a.x for a in anchors)
        right = max(a.x + a.width for a in anchors)
        return Geometry(left - 10, y, right - left + 20, NOTE_HEIGHT)
    return Geometry(first.x, y, NOTE_WIDTH, NOTE_HEIGHT)


def _activation_bars(diagram: SequenceDiagram, result: LayoutResult) -> None:
    """Pair activate/deactivate per participant (innermost first) into bars."""
    last_row = max(diagram.row_count - 1, 0)
    open_bars: dict[str, list[int]] = defaultdict(list)
    spans: list[tuple[str, int, int, int]] = []

    for activation in sorted(diagram.activations, key=lambda a: a.row):
        if activation.participant not in result.nodes:
            continue
        stack = open_bars[activation.participant]
        if activation.action == "activate":
            stack.append(activation.row)
        elif stack:
            depth = len(stack) - 1
            spans.append((activation.participant, stack.pop(), activation.row, depth))

    for participant, stack in open_bars.items():
        for depth, start in enumerate(stack):
            spans.append((participant, start, max(start, last_row), depth))

    for n, (participant, start, end, depth) in enumerate(spans):
        lane = result.nodes[participant]
        top = row_y(start) - 10
        bottom = row_y(end) + 10
        result.annotations[("activation", f"{participant}#{n}")] = Geometry(
            lane.center_x - ACTIVATION_WIDTH / 2 + depth * 5,
            top,
            ACTIVATION_WIDTH,
            bottom - top,
        )


def layout_sequence_diagram(diagram: SequenceDiagram, config: ConverterConfig = DEFAULT_CONFIG) -> LayoutResult:
    rows = diagram.row_count
    result = LayoutResult()

    for i, participant in enumerate(diagram.ordered_participants()):
        x = PARTICIPANT_START_X + i * PARTICIPANT_SPACING
        lane = Geometry(x, PARTICIPANT_Y, PARTICIPANT_WIDTH, PARTICIPANT_HEIGHT)
        result.nodes[participant.id] = lane
        result.annotations[("lifeline", participant.id)] = Geometry(
            lane.center_x - 1,
            LIFELINE_START_Y,
            2,
            LIFELINE_START_Y + rows * MESSAGE_SPACING + 100,
        )

    for index, message in enumerate(diagram.messages):
        source = result.nodes.get(message.source)
        target = result.nodes.get(message.target)
        if source is None or target is None:
            _drop("message", message.source, message.target)
            continue
        y = row_y(message.row)
        if message.source == message.target:
            loop_x = source.center_x + SELF_LOOP_WIDTH
            route = EdgeRoute(
                index=index,
                source_point=Point(source.center_x, y),
                target_point=Point(source.center_x, y + SELF_LOOP_HEIGHT),
                waypoints=(Point(loop_x, y), Point(loop_x, y + SELF_LOOP_HEIGHT)),
            )
        else:
            route = EdgeRoute(
                index=index,
                source_point=Point(source.center_x, y),
                target_point=Point(target.center_x, y),
            )
        result.routes.append(route)

    for index, note in enumerate(diagram.notes):
        geometry = _note_geometry(result, note)
        if geometry is None:
            logger.debug("Dropping note on unknown participant(s) %s", note.participants)
            continue
        result.annotations[("note", str(index))] = geometry

    _activation_bars(diagram, result)

    result.width = max(800, len(diagram.participants) * PARTICIPANT_SPACING + 100)
    result.height = LIFELINE_START_Y + rows * MESSAGE_SPACING + 200
    return result


# ============================================================================
# CLASS DIAGRAM
# ============================================================================

CLASS_START_X = 60
CLASS_START_Y = 60
CLASS_SPACING_X = 250
CLASS_MIN_ROW_SPACING = 200
CLASS_ROW_GAP = 40
CLASS_WIDTH = 180
CLASS_HEADER_HEIGHT = 30
CLASS_MEMBER_HEIGHT = 22
CLASS_SEPARATOR_HEIGHT = 8


def class_height(cls: ClassNode) -> int:
    separator = CLASS_MEMBER_HEIGHT if cls.methods else 0
    return (
        CLASS_HEADER_HEIGHT
        + len(cls.attributes) * CLASS_MEMBER_HEIGHT
        + separator
        + len(cls.methods) * CLASS_MEMBER_HEIGHT
        + 10
    )


def layout_class_diagram(
    diagram: ClassDiagram,
    config: ConverterConfig = DEFAULT_CONFIG,
    router: Optional[Router] = None,
) -> LayoutResult:
    columns = config.class_columns
    router = router or make_router(config.er_router, column_gap=CLASS_SPACING_X - CLASS_WIDTH)
    classes = list(diagram.classes.values())

    result = LayoutResult()
    y = CLASS_START_Y
    for start in range(0, len(classes), columns):
        row = classes[start:start + columns]
        tallest = 0
        for col, cls in enumerate(row):
            height = class_height(cls)
            tallest = max(tallest, height)
            result.nodes[cls.name] = Geometry(CLASS_START_X + col * CLASS_SPACING_X, y, CLASS_WIDTH, height)
        y += max(CLASS_MIN_ROW_SPACING, tallest + CLASS_ROW_GAP)

    _grid_routes(result, diagram.relationships, router, "relationship")
    _canvas(result, 850, 1100)
    return result


# ============================================================================
# GIT GRAPH
# ============================================================================

COMMIT_START_X = 100
COMMIT_START_Y = 50
BRANCH_SPACING = 100
COMMIT_SPACING = 60
COMMIT_SIZE = 30


def layout_gitgraph(diagram: GitGraphDiagram, config: ConverterConfig = DEFAULT_CONFIG) -> LayoutResult:
    """
    Commits are placed on their branch's column, in chronological rows.

    Edges: each commit links to the previous commit on its branch, or to the
    commit its branch was created from. A merge also links from the merged
    branch's head at the time of the merge.
    """
    result = LayoutResult()
    columns = {
        name: COMMIT_START_X + i * BRANCH_SPACING
        for i, name in enumerate(diagram.branches)
    }

    for name, x in columns.items():
        result.annotations[("branch", name)] = Geometry(x - 20, 10, 80, 20)

    heads: dict[str, Optional[str]] = {
        name: branch.base_commit for name, branch in diagram.branches.items()
    }
    edge_index = 0

    def link(source: Optional[str], target: str) -> None:
        nonlocal edge_index
        if source is None or source not in result.nodes:
            return
        result.routes.append(EdgeRoute(index=edge_index, source=source, target=target))
        edge_index += 1

    for i, commit in enumerate(diagram.commits):
        x = columns.get(commit.branch, COMMIT_START_X)
        y = COMMIT_START_Y + i * COMMIT_SPACING
        result.nodes[commit.id] = Geometry.centered(x, y, COMMIT_SIZE, COMMIT_SIZE)
        if commit.tag:
            result.annotations[("tag", commit.id)] = Geometry(x + COMMIT_SIZE, y - 10, 60, 20)

        link(heads.get(commit.branch), commit.id)

        if commit.merge_from is not None and commit.merge_from != commit.branch:
            if commit.merge_from in diagram.branches:
                link(heads.get(commit.merge_from), commit.id)
            else:
                _drop("merge", commit.merge_from, commit.id)

        heads[commit.branch] = commit.id

    result.width = max(600, len(diagram.branches) * BRANCH_SPACING + 200)
    result.height = max(400, len(diagram.commits) * COMMIT_SPACING + 100)
    return result
