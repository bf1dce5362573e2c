"""
Unit tests for diagram_converter/markup.py
"""

import xml.etree.ElementTree as ET

from diagram_converter.geometry import Geometry, Point, format_number
from diagram_converter.markup import (
    CellIdRegistry,
    EdgeCell,
    VertexCell,
    escape_xml,
    wrap_document,
)


class TestEscapeXml:
    """Attribute-safe escaping."""

    def test_metacharacters(self):
        assert escape_xml("a & b") == "a &amp; b"
        assert escape_xml("<tag>") == "&lt;tag&gt;"
        assert escape_xml('say "hi"') == "say &quot;hi&quot;"
        assert escape_xml("it's") == "it&apos;s"

    def test_newlines(self):
        assert escape_xml("one\ntwo") == "one&#10;two"
        assert escape_xml("one\r\ntwo") == "one&#10;two"

    def test_empty(self):
        assert escape_xml("") == ""
        assert escape_xml(None) == ""

    def test_value_survives_xml_parsing(self):
        text = 'Tom & "Jerry" <3\nline two'
        cell = VertexCell(id="v", style="", geometry=Geometry(0, 0, 10, 10), value=text)
        parsed = ET.fromstring(cell.to_xml(indent=""))
        assert parsed.get("value") == text


def test_format_number():
    assert format_number(40.0) == "40"
    assert format_number(12.5) == "12.5"
    assert format_number(1 / 3) == "0.33"
    assert format_number(-25) == "-25"


class TestCells:
    """Vertex and edge serialization."""

    def test_vertex(self):
        cell = VertexCell(id="A", style="rounded=1;", geometry=Geometry(40, 60.5, 120, 60), value="Start")
        element = ET.fromstring(cell.to_xml(indent=""))
        assert element.get("vertex") == "1"
        assert element.get("parent") == "1"
        geometry = element.find("mxGeometry")
        assert (geometry.get("x"), geometry.get("y"), geometry.get("width")) == ("40", "60.5", "120")

    def test_edge_between_cells(self):
        element = ET.fromstring(EdgeCell(id="e2", style="", source="A", target="B", value="go").to_xml(indent=""))
        assert (element.get("source"), element.get("target")) == ("A", "B")
        assert element.get("edge") == "1"
        assert element.find("mxGeometry").get("relative") == "1"

    def test_free_floating_edge_with_waypoints(self):
        cell = EdgeCell(
            id="m2",
            style="",
            source_point=Point(130, 110),
            target_point=Point(130, 135),
            waypoints=(Point(170, 110), Point(170, 135)),
            label_offset=Point(0, -25),
        )
        element = ET.fromstring(cell.to_xml(indent=""))
        assert element.get("source") is None
        geometry = element.find("mxGeometry")
        roles = [p.get("as") for p in geometry.findall("mxPoint")]
        assert roles == ["sourcePoint", "targetPoint", "offset"]
        points = geometry.find("Array").findall("mxPoint")
        assert [(p.get("x"), p.get("y")) for p in points] == [("170", "110"), ("170", "135")]


class TestCellIdRegistry:
    """Unique ids per document."""

    def test_model_ids_are_kept(self):
        registry = CellIdRegistry()
        assert registry.node("A") == "A"
        assert registry.resolve("A") == "A"

    def test_reserved_ids_get_suffix(self):
        registry = CellIdRegistry()
        assert registry.node("0") == "0_2"
        assert registry.node("1") == "1_2"
        assert registry.resolve("1") == "1_2"

    def test_clashes_get_suffix(self):
        registry = CellIdRegistry()
        registry.node("A")
        assert registry.claim("A") == "A_2"
        assert registry.claim("A") == "A_3"
        assert registry.resolve("A") == "A"

    def test_generated_ids_skip_used(self):
        registry = CellIdRegistry()
        registry.node("e2")
        assert registry.next("e") == "e3"
        assert registry.next("e") == "e4"
        assert registry.next("n") == "n2"

    def test_unknown_and_none(self):
        registry = CellIdRegistry()
        assert registry.resolve("missing") is None
        assert registry.resolve(None) is None
        assert registry.claim("") == "cell"


class TestWrapDocument:
    """The <mxfile> envelope."""

    def test_envelope(self, fixed_document):
        cell = VertexCell(id="A", style="", geometry=Geometry(0, 0, 10, 10))
        xml = wrap_document("Flowchart", [cell], 900, 1200, **fixed_document)
        assert xml.startswith('<?xml version="1.0" encoding="UTF-8"?>')
        root = ET.fromstring(xml)
        assert root.tag == "mxfile"
        assert root.get("modified") == fixed_document["modified"]
        diagram = root.find("diagram")
        assert (diagram.get("name"), diagram.get("id")) == ("Flowchart", "diagram-test")
        model = diagram.find("mxGraphModel")
        assert (model.get("pageWidth"), model.get("pageHeight")) == ("900", "1200")
        ids = [c.get("id") for c in model.find("root")]
        assert ids == ["0", "1", "A"]
        assert model.find("root")[1].get("parent") == "0"

    def test_deterministic_with_fixed_ids(self, fixed_document):
        assert wrap_document("X", [], **fixed_document) == wrap_document("X", [], **fixed_document)

    def test_generated_id_and_timestamp(self):
        root = ET.fromstring(wrap_document("X", []))
        assert root.find("diagram").get("id").startswith("diagram-")
        assert root.get("modified").endswith("Z")
