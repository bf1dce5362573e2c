"""
Diagram Converter - Mermaid to draw.io XML and Markdown.

This package provides the conversion pipeline (detect, parse, layout,
render, serialize) used by both the command line and the MCP tools.
"""

from .models import (
    # Enums
    DiagramType,
    NodeShape,
    Direction,
    # Diagrams
    FlowchartDiagram,
    ErDiagram,
    SequenceDiagram,
    ClassDiagram,
    MindmapDiagram,
    GitGraphDiagram,
)

from .config import ConverterConfig, load_config
from .errors import ConversionError, UnsupportedDiagramError
from .detection import detect_diagram_type
from .parsers import parse_diagram
from .conversion import ConversionResult, compute_layout, convert
from .markup import escape_xml, wrap_document
from .documentation import generate_markdown
from .validation import validate_mermaid, ValidationIssue, ValidationReport, IssueSeverity
from .analysis import summarize_diagram
from .rules import get_conversion_rules

__version__ = "0.1.0"

__all__ = [
    # Enums
    "DiagramType",
    "NodeShape",
    "Direction",
    # Diagrams
    "FlowchartDiagram",
    "ErDiagram",
    "SequenceDiagram",
    "ClassDiagram",
    "MindmapDiagram",
    "GitGraphDiagram",
    # Configuration and errors
    "ConverterConfig",
    "load_config",
    "ConversionError",
    "UnsupportedDiagramError",
    # Pipeline
    "detect_diagram_type",
    "parse_diagram",
    "compute_layout",
    "convert",
    "ConversionResult",
    "escape_xml",
    "wrap_document",
    # Documentation and validation
    "generate_markdown",
    "validate_mermaid",
    "ValidationIssue",
    "ValidationReport",
    "IssueSeverity",
    # Analysis
    "summarize_diagram",
    "get_conversion_rules",
]
