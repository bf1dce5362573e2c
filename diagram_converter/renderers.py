"""
Cell rendering - turn a parsed diagram plus its layout into draw.io cells.

Renderers combine three inputs and add nothing of their own:
- the parsed diagram (labels, kinds)
- the LayoutResult (positions, ports, waypoints)
- a StyleSheet (style strings)
"""

from typing import Callable

from .errors import UnsupportedDiagramError
from .geometry import Geometry, LayoutResult
from .layout import CLASS_HEADER_HEIGHT, CLASS_MEMBER_HEIGHT, CLASS_SEPARATOR_HEIGHT, ER_HEADER_HEIGHT, ER_ROW_HEIGHT
from .markup import Cell, CellIdRegistry, EdgeCell, VertexCell
from .models import (
    AnyDiagram,
    ClassAttribute,
    ClassDiagram,
    ClassMethod,
    ClassNode,
    DiagramType,
    ErAttribute,
    ErDiagram,
    FlowchartDiagram,
    GitGraphDiagram,
    MindmapDiagram,
    SequenceDiagram,
)
from .styles import StyleSheet

DIAGRAM_NAMES = {
    DiagramType.FLOWCHART: "Flowchart",
    DiagramType.ER: "ER Diagram",
    DiagramType.SEQUENCE: "Sequence Diagram",
    DiagramType.CLASS: "Class Diagram",
    DiagramType.MINDMAP: "Mindmap",
    DiagramType.GITGRAPH: "Git Graph",
}


def render_flowchart(diagram: FlowchartDiagram, layout: LayoutResult, styles: StyleSheet) -> list[Cell]:
    ids = CellIdRegistry()
    cells: list[Cell] = []

    for node_id, node in diagram.nodes.items():
        cells.append(VertexCell(
            id=ids.node(node_id),
            value=node.label,
            style=styles.flow_node_style(node),
            geometry=layout.nodes[node_id],
        ))

    for route in layout.routes:
        edge = diagram.edges[route.index]
        cells.append(EdgeCell(
            id=ids.next("e"),
            value=edge.label or "",
            style=styles.flow_edge_style(edge.arrow) + route.port_style(),
            source=ids.resolve(route.source),
            target=ids.resolve(route.target),
        ))
    return cells


def er_attribute_label(attribute: ErAttribute) -> str:
    label = f"{attribute.type} {attribute.name}"
    if attribute.constraint:
        label += f" {attribute.constraint}"
    return label


def render_er_diagram(diagram: ErDiagram, layout: LayoutResult, styles: StyleSheet) -> list[Cell]:
    ids = CellIdRegistry()
    cells: list[Cell] = []

    for name, entity in diagram.entities.items():
        geometry = layout.nodes[name]
        entity_id = ids.node(name)
        cells.append(VertexCell(id=entity_id, value=name, style=styles.er_entity, geometry=geometry))
        for i, attribute in enumerate(entity.attributes):
            cells.append(VertexCell(
                id=ids.claim(f"{name}_attr{i}"),
                value=er_attribute_label(attribute),
                style=styles.er_attribute_style(attribute),
                geometry=Geometry(0, ER_HEADER_HEIGHT + i * ER_ROW_HEIGHT, geometry.width, ER_ROW_HEIGHT),
                parent=entity_id,
            ))

    for route in layout.routes:
        rel = diagram.relationships[route.index]
        cells.append(EdgeCell(
            id=ids.next("rel"),
            value=rel.label,
            style=styles.er_edge_style(rel.source_cardinality, rel.target_cardinality, rel.identifying) + route.port_style(),
            source=ids.resolve(route.source),
            target=ids.resolve(route.target),
            waypoints=route.waypoints,
            label_offset=route.label_offset,
        ))
    return cells


def render_sequence_diagram(diagram: SequenceDiagram, layout: LayoutResult, styles: StyleSheet) -> list[Cell]:
    ids = CellIdRegistry()
    cells: list[Cell] = []

    for participant in diagram.ordered_participants():
        cells.append(VertexCell(
            id=ids.node(participant.id),
            value=participant.label,
            style=styles.participant_style(participant.kind),
            geometry=layout.nodes[participant.id],
        ))
    for participant_id, geometry in layout.annotations_of("lifeline"):
        cells.append(VertexCell(id=ids.claim(f"{participant_id}_lifeline"), style=styles.lifeline, geometry=geometry))
    for _, geometry in layout.annotations_of("activation"):
        cells.append(VertexCell(id=ids.next("act"), style=styles.activation, geometry=geometry))

    for route in layout.routes:
        message = diagram.messages[route.index]
        cells.append(EdgeCell(
            id=ids.next("msg"),
            value=message.text,
            style=styles.message_style(message.type),
            source_point=route.source_point,
            target_point=route.target_point,
            waypoints=route.waypoints,
        ))

    for key, geometry in layout.annotations_of("note"):
        note = diagram.notes[int(key)]
        cells.append(VertexCell(id=ids.next("note"), value=note.text, style=styles.note, geometry=geometry))
    return cells


def class_member_label(member: ClassAttribute | ClassMethod) -> str:
    if isinstance(member, ClassMethod):
        return f"{member.visibility} {member.name}({member.params}): {member.return_type}"
    if member.type:
        return f"{member.visibility} {member.name}: {member.type}"
    return f"{member.visibility} {member.name}"


def class_title(cls: ClassNode) -> str:
    if cls.stereotype:
        return f"«{cls.stereotype}»\n{cls.name}"
    return cls.name


def render_class_diagram(diagram: ClassDiagram, layout: LayoutResult, styles: StyleSheet) -> list[Cell]:
    ids = CellIdRegistry()
    cells: list[Cell] = []

    for name, cls in diagram.classes.items():
        geometry = layout.nodes[name]
        class_id = ids.node(name)
        cells.append(VertexCell(id=class_id, value=class_title(cls), style=styles.class_box_style(cls), geometry=geometry))

        y = CLASS_HEADER_HEIGHT
        for i, attribute in enumerate(cls.attributes):
            cells.append(VertexCell(
                id=ids.claim(f"{name}_attr{i}"),
                value=class_member_label(attribute),
                style=styles.class_member,
                geometry=Geometry(0, y, geometry.width, CLASS_MEMBER_HEIGHT),
                parent=class_id,
            ))
            y += CLASS_MEMBER_HEIGHT
        if cls.methods:
            cells.append(VertexCell(
                id=ids.claim(f"{name}_sep"),
                style=styles.class_separator,
                geometry=Geometry(0, y, geometry.width, CLASS_SEPARATOR_HEIGHT),
                parent=class_id,
            ))
            y += CLASS_SEPARATOR_HEIGHT
        for i, method in enumerate(cls.methods):
            cells.append(VertexCell(
                id=ids.claim(f"{name}_method{i}"),
                value=class_member_label(method),
                style=styles.class_member,
                geometry=Geometry(0, y, geometry.width, CLASS_MEMBER_HEIGHT),
                parent=class_id,
            ))
            y += CLASS_MEMBER_HEIGHT

    for route in layout.routes:
        rel = diagram.relationships[route.index]
        cells.append(EdgeCell(
            id=ids.next("rel"),
            value=rel.label or "",
            style=styles.class_edge_style(rel) + route.port_style(),
            source=ids.resolve(route.source),
            target=ids.resolve(route.target),
            waypoints=route.waypoints,
        ))
    return cells


def render_mindmap(diagram: MindmapDiagram, layout: LayoutResult, styles: StyleSheet) -> list[Cell]:
    ids = CellIdRegistry()
    cells: list[Cell] = []

    for node in diagram.nodes:
        cells.append(VertexCell(
            id=ids.node(node.id),
            value=node.label,
            style=styles.mindmap_node_style(node),
            geometry=layout.nodes[node.id],
        ))
    for route in layout.routes:
        cells.append(EdgeCell(
            id=ids.next("conn"),
            style=styles.mindmap_connector,
            source=ids.resolve(route.source),
            target=ids.resolve(route.target),
        ))
    return cells


def render_gitgraph(diagram: GitGraphDiagram, layout: LayoutResult, styles: StyleSheet) -> list[Cell]:
    ids = CellIdRegistry()
    cells: list[Cell] = []
    commits = {commit.id: commit for commit in diagram.commits}

    for name, geometry in layout.annotations_of("branch"):
        cells.append(VertexCell(
            id=ids.claim(f"branch_{name}"),
            value=name,
            style=f"{styles.commit_label}fontStyle=1;fontColor={styles.branch_color(name)};",
            geometry=geometry,
        ))

    for commit in diagram.commits:
        cells.append(VertexCell(
            id=ids.node(commit.id),
            value=commit.tag or "",
            style=styles.commit_style(commit),
            geometry=layout.nodes[commit.id],
        ))

    for route in layout.routes:
        source, target = commits[route.source], commits[route.target]
        # Merge links take the color of the branch being merged in
        if target.merge_from is not None and source.branch == target.merge_from:
            branch = source.branch
        else:
            branch = target.branch
        cells.append(EdgeCell(
            id=ids.next("conn"),
            style=f"{styles.commit_connector}strokeColor={styles.branch_color(branch)};",
            source=ids.resolve(route.source),
            target=ids.resolve(route.target),
        ))

    for commit_id, geometry in layout.annotations_of("tag"):
        cells.append(VertexCell(
            id=ids.claim(f"tag_{commit_id}"),
            value=commits[commit_id].tag or "",
            style=f"{styles.commit_label}fillColor=#fff2cc;strokeColor=#d6b656;rounded=1;",
            geometry=geometry,
        ))
    return cells


RENDERERS: dict[DiagramType, Callable[..., list[Cell]]] = {
    DiagramType.FLOWCHART: render_flowchart,
    DiagramType.ER: render_er_diagram,
    DiagramType.SEQUENCE: render_sequence_diagram,
    DiagramType.CLASS: render_class_diagram,
    DiagramType.MINDMAP: render_mindmap,
    DiagramType.GITGRAPH: render_gitgraph,
}


def render_cells(diagram: AnyDiagram, layout: LayoutResult, styles: StyleSheet) -> list[Cell]:
    """Render any parsed diagram with the renderer for its type."""
    renderer = RENDERERS.get(diagram.diagram_type)
    if renderer is None:
        raise UnsupportedDiagramError(diagram.diagram_type.value, "rendering")
    return renderer(diagram, layout, styles)
