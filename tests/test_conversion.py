"""
Unit tests for diagram_converter/conversion.py
"""

import xml.etree.ElementTree as ET
from types import SimpleNamespace

import pytest

from diagram_converter.config import ConverterConfig
from diagram_converter.conversion import (
    SUPPORTED_TYPES,
    compute_layout,
    convert,
    resolve_diagram_type,
    supported_types_text,
)
from diagram_converter.errors import UnsupportedDiagramError
from diagram_converter.models import DiagramType

# (vertices, edges) per fixture
EXPECTED_CELLS = {
    "flowchart": (5, 5),
    "erDiagram": (8, 2),
    "sequence": (8, 4),
    "class": (10, 2),
    "mindmap": (7, 6),
    "gitgraph": (9, 6),
}


def _cells(xml):
    root = ET.fromstring(xml)
    return root.find("diagram").find("mxGraphModel").find("root").findall("mxCell")


class TestConvert:
    """End-to-end conversion for every dialect."""

    @pytest.mark.parametrize("name", sorted(EXPECTED_CELLS))
    def test_well_formed_document(self, name, all_sources, fixed_document):
        result = convert(all_sources[name], **fixed_document)
        assert result.ok
        assert result.diagram_type.value == name
        cells = _cells(result.xml)
        vertices = [c for c in cells if c.get("vertex") == "1"]
        edges = [c for c in cells if c.get("edge") == "1"]
        assert (len(vertices), len(edges)) == EXPECTED_CELLS[name]

    @pytest.mark.parametrize("name", sorted(EXPECTED_CELLS))
    def test_ids_are_unique_and_references_resolve(self, name, all_sources):
        cells = _cells(convert(all_sources[name]).xml)
        ids = [c.get("id") for c in cells]
        assert len(ids) == len(set(ids))
        assert ids[:2] == ["0", "1"]
        known = set(ids)
        for cell in cells[1:]:
            assert cell.get("parent") in known
            for attr in ("source", "target"):
                if cell.get(attr) is not None:
                    assert cell.get(attr) in known

    def test_fixed_document_is_reproducible(self, flowchart_source, fixed_document):
        first = convert(flowchart_source, **fixed_document).xml
        assert first == convert(flowchart_source, **fixed_document).xml

    def test_line_summary(self, flowchart_source):
        result = convert(flowchart_source)
        assert result.lines["parsed"] == 6
        assert result.lines["malformed"] == 0

    def test_malformed_lines_do_not_stop_conversion(self):
        result = convert("flowchart TD\nA --> B\n-->\nB --> C")
        assert result.ok
        assert result.lines["malformed"] == 1
        assert len([c for c in _cells(result.xml) if c.get("edge") == "1"]) == 2

    def test_labels_are_escaped(self):
        result = convert('flowchart TD\nA["Tom & Jerry <3"] --> B')
        values = [c.get("value") for c in _cells(result.xml)]
        assert "Tom & Jerry <3" in values

    def test_explicit_type_skips_detection(self):
        result = convert("A --> B", "flowchart")
        assert result.ok
        assert result.diagram_type == DiagramType.FLOWCHART

    def test_corridor_config_adds_waypoints(self):
        source = "erDiagram\nA\nB\nC\nD\nE\nB ||--|| E : x"
        plain = convert(source)
        routed = convert(source, config=ConverterConfig(er_router="corridor"))
        assert "<Array" not in plain.xml
        assert '<Array as="points">' in routed.xml

    def test_non_identifying_relationship_is_dashed(self):
        result = convert("erDiagram\nA }o..o| B : maybe")
        [edge] = [c for c in _cells(result.xml) if c.get("edge") == "1"]
        assert "dashed=1;" in edge.get("style")


class TestUnsupported:
    """Unknown dialects produce a notice, never an exception."""

    def test_undetectable_source(self):
        result = convert("pie title Pets\n\"Dogs\" : 3")
        assert not result.ok
        assert result.diagram_type == DiagramType.UNKNOWN
        assert result.notice == (
            "Unsupported diagram type: unknown. "
            "Supported types: flowchart, erDiagram, sequence, class, mindmap, gitgraph"
        )

    def test_unknown_explicit_type_is_named(self):
        result = convert("flowchart TD\nA --> B", "timeline")
        assert result.notice.startswith("Unsupported diagram type: timeline.")

    def test_compute_layout_rejects_unknown(self):
        with pytest.raises(UnsupportedDiagramError) as excinfo:
            compute_layout(SimpleNamespace(diagram_type=DiagramType.UNKNOWN))
        assert excinfo.value.operation == "layout"


class TestResolveDiagramType:
    """Explicit names, aliases and auto-detection."""

    @pytest.mark.parametrize("name, expected", [
        ("flowchart", DiagramType.FLOWCHART),
        ("FLOWCHART", DiagramType.FLOWCHART),
        ("graph", DiagramType.FLOWCHART),
        ("erDiagram", DiagramType.ER),
        ("er", DiagramType.ER),
        ("sequenceDiagram", DiagramType.SEQUENCE),
        ("classDiagram", DiagramType.CLASS),
        (" gitGraph ", DiagramType.GITGRAPH),
        ("venn", DiagramType.UNKNOWN),
    ])
    def test_names(self, name, expected):
        assert resolve_diagram_type("", name) == expected

    @pytest.mark.parametrize("name", [None, "", "auto", "AUTO"])
    def test_auto_detects(self, name):
        assert resolve_diagram_type("mindmap\n  root", name) == DiagramType.MINDMAP

    def test_enum_passes_through(self):
        assert resolve_diagram_type("flowchart TD", DiagramType.CLASS) == DiagramType.CLASS


def test_supported_types():
    assert DiagramType.UNKNOWN not in SUPPORTED_TYPES
    assert supported_types_text() == "flowchart, erDiagram, sequence, class, mindmap, gitgraph"
