#!/usr/bin/env python3
"""
Diagram Converter MCP Server

Provides MCP tools for AI agents to convert Mermaid diagrams to draw.io XML
and Markdown, validate them, and read the conversion rules. The tools are
thin wrappers; all logic lives in the converter modules.
"""

import json
import logging
from functools import lru_cache

from mcp.server.fastmcp import FastMCP

from .analysis import summarize_diagram
from .config import ConverterConfig, load_config
from .conversion import convert, resolve_diagram_type, supported_types_text
from .documentation import generate_markdown
from .models import DiagramType
from .parsers import parse_diagram
from .rules import get_conversion_rules as rules_text
from .validation import validate_mermaid as validate_source

logger = logging.getLogger(__name__)

# Create MCP server
mcp = FastMCP("diagram-converter")


@lru_cache(maxsize=1)
def get_config() -> ConverterConfig:
    return load_config()


# ============================================================================
# CONVERSION TOOLS
# ============================================================================

@mcp.tool()
def convert_mermaid_to_drawio(mermaid_code: str, diagram_type: str = "auto") -> str:
    """
    Convert a Mermaid diagram to Draw.io XML format.

    Args:
        mermaid_code: The Mermaid diagram code to convert
        diagram_type: flowchart, erDiagram, sequence, class, mindmap, gitgraph,
            or "auto" to detect it from the first line

    Returns the XML in a fenced block with import instructions, or a notice
    listing the supported types.
    """
    result = convert(mermaid_code, diagram_type, config=get_config())
    if not result.ok:
        return result.notice
    return (
        f"Draw.io XML for {result.diagram_type.value}:\n\n"
        f"```xml\n{result.xml}\n```\n\n"
        "**To use:** Copy the XML and import it into draw.io via File → Import From → Text"
    )


@mcp.tool()
def convert_mermaid_to_markdown(mermaid_code: str) -> str:
    """
    Convert a Mermaid diagram to structured Markdown documentation.

    Args:
        mermaid_code: The Mermaid diagram code to document

    Returns Markdown with an overview, tables of nodes and relationships,
    and the original code.
    """
    return generate_markdown(mermaid_code)


# ============================================================================
# INSPECTION TOOLS
# ============================================================================

@mcp.tool()
def validate_mermaid(mermaid_code: str) -> str:
    """
    Validate Mermaid diagram syntax and check conversion compatibility.

    Args:
        mermaid_code: The Mermaid diagram code to validate

    Returns a Markdown report with issues (must fix) and suggestions.
    """
    return validate_source(mermaid_code).to_markdown()


@mcp.tool()
def summarize_mermaid(mermaid_code: str, diagram_type: str = "auto") -> str:
    """
    Get structural statistics for a Mermaid diagram.

    Returns node and edge counts, connected components, most connected
    nodes, orphan count and parse outcome counts as JSON.
    """
    resolved = resolve_diagram_type(mermaid_code, diagram_type)
    if resolved == DiagramType.UNKNOWN:
        return json.dumps({
            "status": "error",
            "error": f"Unsupported diagram type. Supported types: {supported_types_text()}",
        }, indent=2)
    result = summarize_diagram(parse_diagram(mermaid_code, resolved))
    return json.dumps(result.to_dict(), indent=2)


@mcp.tool()
def get_conversion_rules(diagram_type: str = "general") -> str:
    """
    Get the Mermaid to Draw.io conversion ruleset and best practices.

    Args:
        diagram_type: flowchart, erDiagram, sequence, class, mindmap,
            gitgraph or general
    """
    return rules_text(diagram_type)


def main():
    config = get_config()
    logging.basicConfig(level=config.log_level, format="%(levelname)s %(name)s: %(message)s")
    logging.getLogger("mcp.server").setLevel(logging.WARNING)
    logger.info("Starting diagram-converter MCP server")
    mcp.run()


if __name__ == "__main__":
    main()
