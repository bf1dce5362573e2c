"""
Unit tests for diagram_converter/styles.py
"""

import dataclasses

import pytest

from diagram_converter.models import (
    ClassNode,
    ClassRelationship,
    Commit,
    CommitType,
    ErAttribute,
    FlowArrow,
    FlowNode,
    MessageType,
    MindmapNode,
    NodeShape,
    RelationKind,
)
from diagram_converter.styles import DEFAULT_STYLESHEET, default_stylesheet


@pytest.fixture
def sheet():
    return default_stylesheet()


class TestStyleSheet:
    """Immutability of the tables."""

    def test_tables_are_read_only(self, sheet):
        with pytest.raises(TypeError):
            sheet.flow_shapes[NodeShape.RECTANGLE] = "x"

    def test_sheet_is_frozen(self, sheet):
        with pytest.raises(dataclasses.FrozenInstanceError):
            sheet.flow_edge = "x"

    def test_default_instance(self):
        assert DEFAULT_STYLESHEET.flow_edge == default_stylesheet().flow_edge


class TestFlowStyles:
    """Shapes, terminals and arrow variants."""

    def test_shapes(self, sheet):
        assert sheet.flow_node_style(FlowNode(id="A", label="Check", shape=NodeShape.DIAMOND)).startswith("rhombus;")
        assert "ellipse;" in sheet.flow_node_style(FlowNode(id="A", label="Hub", shape=NodeShape.CIRCLE))
        assert "shape=process;" in sheet.flow_node_style(FlowNode(id="A", label="Call", shape=NodeShape.SUBROUTINE))

    def test_terminal_labels(self, sheet):
        assert "#d5e8d4" in sheet.flow_node_style(FlowNode(id="A", label=" Start "))
        assert "#f8cecc" in sheet.flow_node_style(FlowNode(id="A", label="END"))
        assert "#f8cecc" in sheet.flow_node_style(FlowNode(id="A", label="stop"))

    def test_arrow_variants(self, sheet):
        assert sheet.flow_edge_style(FlowArrow.ARROW) == sheet.flow_edge
        assert sheet.flow_edge_style(FlowArrow.OPEN).endswith("endArrow=none;")
        assert "dashed=1;" in sheet.flow_edge_style(FlowArrow.DOTTED)
        assert "strokeWidth=3;" in sheet.flow_edge_style(FlowArrow.THICK)


class TestErStyles:
    """Attribute emphasis and crow's foot markers."""

    def test_key_emphasis(self, sheet):
        pk = sheet.er_attribute_style(ErAttribute(type="int", name="id", constraint="PK"))
        fk = sheet.er_attribute_style(ErAttribute(type="int", name="ref", constraint="FK"))
        both = sheet.er_attribute_style(ErAttribute(type="int", name="id", constraint="PK, FK"))
        plain = sheet.er_attribute_style(ErAttribute(type="string", name="email", constraint="UK"))
        assert pk.endswith("fontStyle=4;")
        assert fk.endswith("fontStyle=2;")
        assert both.endswith("fontStyle=4;")
        assert plain == sheet.er_attribute

    def test_cardinality_markers(self, sheet):
        style = sheet.er_edge_style("||", "o{")
        assert "startArrow=ERone;" in style
        assert "endArrow=ERzeroToMany;" in style
        assert "dashed=1;" not in style

    def test_non_identifying_is_dashed(self, sheet):
        assert sheet.er_edge_style("|o", "}|", identifying=False).endswith("dashed=1;")

    def test_unknown_cardinality_falls_back(self, sheet):
        assert "startArrow=ERone;" in sheet.er_edge_style("??", "||")


class TestSequenceStyles:
    """Participants and message kinds."""

    def test_participant_kinds(self, sheet):
        assert "umlActor" in sheet.participant_style("actor")
        assert sheet.participant_style("boundary") == sheet.participant_style("participant")

    def test_message_kinds(self, sheet):
        assert "endArrow=block;" in sheet.message_style(MessageType.SYNC)
        assert "dashed=1;" in sheet.message_style(MessageType.ASYNC)
        assert "endArrow=cross;" in sheet.message_style(MessageType.LOST)
        assert "dashPattern=1 2;" in sheet.message_style(MessageType.CREATE)


class TestClassStyles:
    """Stereotype boxes and relationship heads."""

    def test_stereotype_boxes(self, sheet):
        assert "fontStyle=3;" in sheet.class_box_style(ClassNode(name="I", stereotype="interface"))
        assert "fontStyle=2;" in sheet.class_box_style(ClassNode(name="A", stereotype="abstract"))
        assert sheet.class_box_style(ClassNode(name="S", stereotype="service")) == sheet.class_boxes["class"]

    def test_inheritance_marker_at_source(self, sheet):
        rel = ClassRelationship(
            source="Animal", target="Dog", kind=RelationKind.INHERITANCE, arrow="<|--", marker_at_source=True
        )
        style = sheet.class_edge_style(rel)
        assert "startArrow=block;startFill=0;endArrow=none;" in style

    def test_composition_is_filled(self, sheet):
        rel = ClassRelationship(source="A", target="B", kind=RelationKind.COMPOSITION, arrow="--*")
        assert "endArrow=diamondThin;endFill=1;" in sheet.class_edge_style(rel)

    def test_dashed_kinds(self, sheet):
        rel = ClassRelationship(source="A", target="B", kind=RelationKind.DEPENDENCY, arrow="..>")
        assert "dashed=1;" in sheet.class_edge_style(rel)

    def test_plain_link_has_no_head(self, sheet):
        rel = ClassRelationship(source="A", target="B", kind=RelationKind.ASSOCIATION, arrow="--")
        assert "endArrow=none;" in sheet.class_edge_style(rel)


class TestMindmapAndGitStyles:
    """Level palette, shapes, branch colors."""

    def test_default_shape_by_level(self, sheet):
        assert sheet.mindmap_node_style(MindmapNode(id="n0", label="R", level=0)).startswith("ellipse;")
        assert sheet.mindmap_node_style(MindmapNode(id="n1", label="C", level=1)).startswith("rounded=1;")

    def test_deep_levels_reuse_last_palette(self, sheet):
        deep = sheet.mindmap_node_style(MindmapNode(id="n9", label="x", level=9))
        assert deep.endswith(sheet.mindmap_levels[-1])

    def test_explicit_shape(self, sheet):
        style = sheet.mindmap_node_style(MindmapNode(id="n1", label="x", shape=NodeShape.HEXAGON, level=1))
        assert style.startswith("shape=hexagon;")

    def test_commit_colors(self, sheet):
        normal = sheet.commit_style(Commit(id="c0", branch="main"))
        highlight = sheet.commit_style(Commit(id="c1", branch="develop", type=CommitType.HIGHLIGHT))
        assert "fillColor=#dae8fc;strokeColor=#6c8ebf;" in normal
        assert "fillColor=#d5e8d4;strokeColor=#82b366;" in highlight

    def test_unknown_branch_color(self, sheet):
        assert sheet.branch_color("experiment") == sheet.default_branch_color
