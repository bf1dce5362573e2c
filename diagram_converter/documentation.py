"""
Markdown documentation - describe a parsed diagram as tables.

Each dialect produces an overview, tables for its nodes and relationships,
and echoes the Mermaid source in a fenced block. Layout is never computed.
"""

import logging
from typing import Callable, Iterable, Optional

from .detection import detect_diagram_type
from .models import (
    ClassDiagram,
    DiagramType,
    ErDiagram,
    FlowchartDiagram,
    GitGraphDiagram,
    MindmapDiagram,
    MindmapNode,
    SequenceDiagram,
)
from .parsers import parse_diagram

logger = logging.getLogger(__name__)

EMPTY = "-"


def _cell(value) -> str:
    text = "" if value is None else str(getattr(value, "value", value))
    return text.replace("|", "\\|").replace("\n", " ")


def markdown_table(headers: list[str], rows: Iterable[Iterable], empty_row: bool = False) -> str:
    """
    Render a Markdown table. Pipes inside cells are escaped.

    With empty_row, a table without rows gets a single row of dashes.
    """
    lines = [
        "| " + " | ".join(headers) + " |",
        "|" + "|".join("-" * (len(h) + 2) for h in headers) + "|",
    ]
    body = ["| " + " | ".join(_cell(v) for v in row) + " |" for row in rows]
    if not body and empty_row:
        body = ["| " + " | ".join(EMPTY for _ in headers) + " |"]
    return "\n".join(lines + body)


def _source_block(text: str) -> str:
    return f"## Original Mermaid Code\n\n```mermaid\n{text}\n```\n"


def _document(title: str, overview: str, sections: list[str], text: str) -> str:
    parts = [f"# {title}", f"## Overview\n{overview}", *sections, _source_block(text)]
    return "\n\n".join(parts)


# --- Dialects ---

def _flowchart(diagram: FlowchartDiagram, text: str) -> str:
    nodes = markdown_table(
        ["ID", "Label", "Shape"],
        ((n.id, n.label, n.shape) for n in diagram.nodes.values()),
    )
    edges = markdown_table(
        ["From", "To", "Label"],
        ((e.source, e.target, e.label or EMPTY) for e in diagram.edges),
    )
    overview = (
        f"This document describes the flowchart diagram with {len(diagram.nodes)} nodes "
        f"and {len(diagram.edges)} connections.\nDirection: {diagram.direction.value}"
    )
    return _document("Flowchart Documentation", overview, [
        f"## Nodes\n\n{nodes}",
        f"## Connections\n\n{edges}",
    ], text)


def _er_diagram(diagram: ErDiagram, text: str) -> str:
    entities = []
    for entity in diagram.entities.values():
        table = markdown_table(
            ["Type", "Attribute", "Constraint"],
            ((a.type, a.name, a.constraint or EMPTY) for a in entity.attributes),
            empty_row=True,
        )
        entities.append(f"### {entity.name}\n{table}")

    relationships = markdown_table(
        ["Source", "Target", "Label", "Cardinality"],
        (
            (r.source, r.target, r.label, f"{r.source_cardinality} to {r.target_cardinality}")
            for r in diagram.relationships
        ),
    )
    overview = (
        f"This document describes the Entity-Relationship diagram with {len(diagram.entities)} "
        f"entities and {len(diagram.relationships)} relationships."
    )
    return _document("ER Diagram Documentation", overview, [
        "## Entities\n\n" + "\n\n".join(entities),
        f"## Relationships\n\n{relationships}",
    ], text)


def _sequence_diagram(diagram: SequenceDiagram, text: str) -> str:
    participants = markdown_table(
        ["ID", "Label", "Type"],
        ((p.id, p.label, p.kind) for p in diagram.ordered_participants()),
    )
    messages = markdown_table(
        ["#", "From", "To", "Message", "Type"],
        ((i, m.source, m.target, m.text, m.type) for i, m in enumerate(diagram.messages, start=1)),
    )
    sections = [f"## Participants\n\n{participants}", f"## Messages\n\n{messages}"]
    if diagram.notes:
        notes = markdown_table(
            ["Position", "Participants", "Text"],
            ((n.position, ", ".join(n.participants), n.text) for n in diagram.notes),
        )
        sections.append(f"## Notes\n\n{notes}")

    overview = (
        f"This document describes the sequence diagram with {len(diagram.participants)} "
        f"participants and {len(diagram.messages)} messages."
    )
    return _document("Sequence Diagram Documentation", overview, sections, text)


def _class_diagram(diagram: ClassDiagram, text: str) -> str:
    classes = []
    for cls in diagram.classes.values():
        heading = f"### {cls.name}"
        if cls.stereotype:
            heading += f" <<{cls.stereotype}>>"
        attributes = markdown_table(
            ["Visibility", "Name", "Type"],
            ((a.visibility, a.name, a.type or EMPTY) for a in cls.attributes),
            empty_row=True,
        )
        methods = markdown_table(
            ["Visibility", "Name", "Parameters", "Return"],
            ((m.visibility, m.name, m.params or EMPTY, m.return_type) for m in cls.methods),
            empty_row=True,
        )
        classes.append(f"{heading}\n\n**Attributes:**\n{attributes}\n\n**Methods:**\n{methods}")

    relationships = markdown_table(
        ["From", "To", "Type", "Label"],
        ((r.source, r.target, r.kind, r.label or EMPTY) for r in diagram.relationships),
    )
    overview = (
        f"This document describes the class diagram with {len(diagram.classes)} classes "
        f"and {len(diagram.relationships)} relationships."
    )
    return _document("Class Diagram Documentation", overview, [
        "## Classes\n\n" + "\n\n".join(classes),
        f"## Relationships\n\n{relationships}",
    ], text)


def mindmap_outline(diagram: MindmapDiagram) -> str:
    """Nested bullet list, two spaces of indent per level."""
    lines: list[str] = []

    def walk(node: MindmapNode, depth: int) -> None:
        lines.append(f"{'  ' * depth}- **{node.label}**")
        for child in diagram.children_of(node):
            walk(child, depth + 1)

    if diagram.root is not None:
        walk(diagram.root, 0)
    return "\n".join(lines)


def _mindmap(diagram: MindmapDiagram, text: str) -> str:
    nodes = markdown_table(
        ["ID", "Label", "Level", "Shape"],
        ((n.id, n.label, n.level, n.shape) for n in diagram.nodes),
    )
    overview = f"This document describes the mindmap with {len(diagram.nodes)} nodes."
    return _document("Mindmap Documentation", overview, [
        f"## Structure\n\n{mindmap_outline(diagram)}",
        f"## Nodes\n\n{nodes}",
    ], text)


def _gitgraph(diagram: GitGraphDiagram, text: str) -> str:
    branches = markdown_table(
        ["Name", "Parent Branch", "Commits"],
        ((b.name, b.parent_branch or EMPTY, len(b.commits)) for b in diagram.branches.values()),
    )
    commits = markdown_table(
        ["ID", "Branch", "Type", "Tag"],
        ((c.id, c.branch, c.type, c.tag or EMPTY) for c in diagram.commits),
    )
    overview = (
        f"This document describes the git graph with {len(diagram.commits)} commits "
        f"across {len(diagram.branches)} branches."
    )
    return _document("Git Graph Documentation", overview, [
        f"## Branches\n\n{branches}",
        f"## Commits\n\n{commits}",
    ], text)


GENERATORS: dict[DiagramType, Callable[..., str]] = {
    DiagramType.FLOWCHART: _flowchart,
    DiagramType.ER: _er_diagram,
    DiagramType.SEQUENCE: _sequence_diagram,
    DiagramType.CLASS: _class_diagram,
    DiagramType.MINDMAP: _mindmap,
    DiagramType.GITGRAPH: _gitgraph,
}


def generate_markdown(text: str, diagram_type: Optional[DiagramType] = None) -> str:
    """
    Generate Markdown documentation for Mermaid source.

    Args:
        text: Raw Mermaid source
        diagram_type: Dialect to use, detected from the text when omitted

    Returns:
        The Markdown document. Unknown dialects get a notice document that
        still echoes the source.
    """
    if diagram_type is None:
        diagram_type = detect_diagram_type(text)

    generator = GENERATORS.get(diagram_type)
    if generator is None:
        logger.info("No documentation generator for diagram type %s", diagram_type.value)
        return "\n\n".join([
            "# Diagram Documentation",
            f"## Notice\nMarkdown generation is not yet fully supported for diagram type: {diagram_type.value}",
            _source_block(text),
        ])

    diagram = parse_diagram(text, diagram_type)
    return generator(diagram, text)
