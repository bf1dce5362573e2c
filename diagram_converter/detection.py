"""
Diagram type detection from the Mermaid header line.
"""

from .models import DiagramType


# Checked in order: more specific keywords first, because "graph" is a
# substring of "gitgraph".
_KEYWORDS: tuple[tuple[tuple[str, ...], DiagramType], ...] = (
    (("gitgraph",), DiagramType.GITGRAPH),
    (("erdiagram",), DiagramType.ER),
    (("sequencediagram",), DiagramType.SEQUENCE),
    (("classdiagram",), DiagramType.CLASS),
    (("mindmap",), DiagramType.MINDMAP),
    (("flowchart", "graph"), DiagramType.FLOWCHART),
)


def first_content_line(text: str) -> str:
    """Return the first non-blank, non-comment line, stripped ("" if none)."""
    for line in text.splitlines():
        stripped = line.strip()
        if stripped and not stripped.startswith("%%"):
            return stripped
    return ""


def detect_diagram_type(text: str) -> DiagramType:
    """
    Classify Mermaid source into one of the supported dialects.

    Args:
        text: Raw Mermaid source

    Returns:
        The matching DiagramType, or DiagramType.UNKNOWN
    """
    header = first_content_line(text).lower()
    if not header:
        return DiagramType.UNKNOWN

    for keywords, diagram_type in _KEYWORDS:
        if any(keyword in header for keyword in keywords):
            return diagram_type

    return DiagramType.UNKNOWN
