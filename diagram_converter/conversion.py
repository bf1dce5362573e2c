"""
Conversion pipeline - Mermaid text in, draw.io XML out.

text -> detect -> parse -> layout -> render cells -> wrap_document

Unknown or unsupported dialects do not raise; the ConversionResult carries a
notice instead of XML.
"""

import logging
from typing import Callable, Optional

from pydantic import BaseModel, Field

from .config import DEFAULT_CONFIG, ConverterConfig
from .detection import detect_diagram_type
from .errors import UnsupportedDiagramError
from .geometry import LayoutResult
from .layout import (
    layout_class_diagram,
    layout_er_diagram,
    layout_flowchart,
    layout_gitgraph,
    layout_sequence_diagram,
)
from .markup import wrap_document
from .models import AnyDiagram, DiagramType
from .parsers import parse_diagram
from .radial import layout_mindmap
from .renderers import DIAGRAM_NAMES, render_cells
from .styles import DEFAULT_STYLESHEET, StyleSheet

logger = logging.getLogger(__name__)

SUPPORTED_TYPES = [t for t in DiagramType if t != DiagramType.UNKNOWN]

# Spellings accepted for an explicit diagram type, lower-cased
TYPE_ALIASES = {
    "graph": DiagramType.FLOWCHART,
    "er": DiagramType.ER,
    "sequencediagram": DiagramType.SEQUENCE,
    "classdiagram": DiagramType.CLASS,
}

LAYOUTS: dict[DiagramType, Callable[..., LayoutResult]] = {
    DiagramType.FLOWCHART: layout_flowchart,
    DiagramType.ER: layout_er_diagram,
    DiagramType.SEQUENCE: layout_sequence_diagram,
    DiagramType.CLASS: layout_class_diagram,
    DiagramType.MINDMAP: layout_mindmap,
    DiagramType.GITGRAPH: layout_gitgraph,
}


class ConversionResult(BaseModel):
    """Outcome of one conversion."""
    diagram_type: DiagramType
    xml: Optional[str] = None
    notice: Optional[str] = None
    lines: dict[str, int] = Field(default_factory=dict)  # ParseReport summary

    @property
    def ok(self) -> bool:
        return self.xml is not None


def supported_types_text() -> str:
    return ", ".join(t.value for t in SUPPORTED_TYPES)


def resolve_diagram_type(text: str, diagram_type: Optional[str | DiagramType] = None) -> DiagramType:
    """
    Turn an explicit type name (or "auto"/None) into a DiagramType.

    Names are matched case-insensitively against the wire names and a few
    Mermaid header spellings; anything else resolves to UNKNOWN.
    """
    if isinstance(diagram_type, DiagramType):
        return diagram_type
    if diagram_type is None or diagram_type.strip().lower() in ("", "auto"):
        return detect_diagram_type(text)

    wanted = diagram_type.strip().lower()
    for candidate in DiagramType:
        if candidate.value.lower() == wanted:
            return candidate
    return TYPE_ALIASES.get(wanted, DiagramType.UNKNOWN)


def compute_layout(diagram: AnyDiagram, config: ConverterConfig = DEFAULT_CONFIG) -> LayoutResult:
    """Run the layout engine matching the diagram's dialect."""
    layout = LAYOUTS.get(diagram.diagram_type)
    if layout is None:
        raise UnsupportedDiagramError(diagram.diagram_type.value, "layout")
    return layout(diagram, config)


def convert(
    text: str,
    diagram_type: Optional[str | DiagramType] = None,
    config: Optional[ConverterConfig] = None,
    styles: Optional[StyleSheet] = None,
    diagram_id: Optional[str] = None,
    modified: Optional[str] = None,
) -> ConversionResult:
    """
    Convert Mermaid source to a draw.io document.

    Args:
        text: Raw Mermaid source
        diagram_type: Wire name of the dialect, or None/"auto" to detect
        config: Layout options (defaults when omitted)
        styles: Style tables (defaults when omitted)
        diagram_id, modified: Fixed document id/timestamp, generated when omitted

    Returns:
        ConversionResult with xml set, or with a notice for unsupported input
    """
    config = config or DEFAULT_CONFIG
    styles = styles or DEFAULT_STYLESHEET
    resolved = resolve_diagram_type(text, diagram_type)

    try:
        diagram = parse_diagram(text, resolved)
        layout = compute_layout(diagram, config)
        cells = render_cells(diagram, layout, styles)
    except UnsupportedDiagramError as e:
        logger.info("Conversion skipped: %s", e)
        label = resolved.value
        if isinstance(diagram_type, str) and diagram_type.strip().lower() not in ("", "auto"):
            label = diagram_type.strip()
        return ConversionResult(
            diagram_type=resolved,
            notice=f"Unsupported diagram type: {label}. Supported types: {supported_types_text()}",
        )

    xml = wrap_document(
        DIAGRAM_NAMES[resolved], cells, layout.width, layout.height,
        diagram_id=diagram_id, modified=modified,
    )
    lines = diagram.report.summary()
    logger.info(
        "Converted %s diagram: %d cells, %d malformed line(s)",
        resolved.value, len(cells), lines.get("malformed", 0),
    )
    return ConversionResult(diagram_type=resolved, xml=xml, lines=lines)
