"""
Unit tests for diagram_converter/rules.py
"""

import pytest

from diagram_converter.conversion import SUPPORTED_TYPES
from diagram_converter.rules import GENERAL_RULES, RULES, get_conversion_rules


class TestGetConversionRules:
    """Rule lookup by diagram type."""

    def test_every_supported_type_has_rules(self):
        for diagram_type in SUPPORTED_TYPES:
            assert diagram_type.value in RULES

    @pytest.mark.parametrize("name, heading", [
        ("flowchart", "# Flowchart Conversion Rules"),
        ("erDiagram", "# ER Diagram Conversion Rules"),
        ("ERDIAGRAM", "# ER Diagram Conversion Rules"),
        ("sequence", "# Sequence Diagram Conversion Rules"),
        ("class", "# Class Diagram Conversion Rules"),
        ("mindmap", "# Mindmap Conversion Rules"),
        (" gitgraph ", "# Git Graph Conversion Rules"),
    ])
    def test_lookup(self, name, heading):
        assert get_conversion_rules(name).startswith(heading)

    @pytest.mark.parametrize("name", ["general", "", None, "pie"])
    def test_general_fallback(self, name):
        assert get_conversion_rules(name) == GENERAL_RULES

    def test_er_rules_describe_grid(self):
        assert "x = 40, 440, 840, 1240" in get_conversion_rules("erDiagram")
