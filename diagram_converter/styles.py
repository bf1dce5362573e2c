"""
draw.io style tables.

A StyleSheet is immutable: every table is a read-only mapping keyed by a
model enum (or a fixed string key), built once by default_stylesheet() and
passed explicitly into rendering.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from .models import (
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

# Palette shared by every dialect
BLUE = ("#dae8fc", "#6c8ebf")
GREEN = ("#d5e8d4", "#82b366")
YELLOW = ("#fff2cc", "#d6b656")
RED = ("#f8cecc", "#b85450")
PURPLE = ("#e1d5e7", "#9673a6")


def _colors(pair: tuple[str, str]) -> str:
    return f"fillColor={pair[0]};strokeColor={pair[1]};"


def _frozen(mapping: dict) -> Mapping:
    return MappingProxyType(dict(mapping))


_SWIMLANE = (
    "swimlane;align=center;verticalAlign=top;childLayout=stackLayout;horizontal=1;"
    "horizontalStack=0;resizeParent=1;resizeParentMax=0;resizeLast=0;collapsible=0;"
    "marginBottom=0;"
)
_ROW_TEXT = (
    "text;strokeColor=none;fillColor=none;align=left;spacingLeft=4;spacingRight=4;"
    "overflow=hidden;rotatable=0;points=[[0,0.5],[1,0.5]];portConstraint=eastwest;"
)


@dataclass(frozen=True)
class RelationStyle:
    """Arrow heads for a class relationship kind."""
    marker: str
    marker_fill: int = 0
    dashed: bool = False


@dataclass(frozen=True)
class StyleSheet:
    # Flowchart
    flow_shapes: Mapping[NodeShape, str]
    flow_terminals: Mapping[str, str]
    flow_edge: str
    flow_arrows: Mapping[FlowArrow, str]
    # ER
    er_entity: str
    er_attribute: str
    er_constraints: Mapping[str, str]
    er_cardinality: Mapping[str, str]
    er_edge: str
    # Sequence
    participants: Mapping[str, str]
    lifeline: str
    messages: Mapping[MessageType, str]
    activation: str
    note: str
    # Class
    class_boxes: Mapping[str, str]
    class_member: str
    class_separator: str
    class_relations: Mapping[RelationKind, RelationStyle]
    class_edge: str
    # Mindmap
    mindmap_levels: tuple[str, ...]
    mindmap_shapes: Mapping[NodeShape, str]
    mindmap_connector: str
    # Git graph
    commit: str
    commit_fills: Mapping[CommitType, str]
    branch_colors: Mapping[str, str]
    default_branch_color: str
    commit_connector: str
    commit_label: str

    # --- Lookups ---

    def flow_node_style(self, node: FlowNode) -> str:
        """Shape style; nodes labelled start/end get terminal colors."""
        label = node.label.strip().lower()
        if label == "start":
            return self.flow_terminals["start"]
        if label in ("end", "stop"):
            return self.flow_terminals["end"]
        return self.flow_shapes.get(node.shape, self.flow_shapes[NodeShape.RECTANGLE])

    def flow_edge_style(self, arrow: FlowArrow) -> str:
        return self.flow_edge + self.flow_arrows.get(arrow, "")

    def er_attribute_style(self, attribute: ErAttribute) -> str:
        style = self.er_attribute
        constraint = (attribute.constraint or "").replace(" ", "").split(",")
        for key in ("PK", "FK"):
            if key in constraint:
                return style + self.er_constraints[key]
        return style

    def er_edge_style(self, source_cardinality: str, target_cardinality: str, identifying: bool = True) -> str:
        start = self.er_cardinality.get(source_cardinality, "ERone")
        end = self.er_cardinality.get(target_cardinality, "ERone")
        dashed = "" if identifying else "dashed=1;"
        return f"{self.er_edge}startArrow={start};startFill=0;endArrow={end};endFill=0;{dashed}"

    def participant_style(self, kind: str) -> str:
        return self.participants.get(kind, self.participants["participant"])

    def message_style(self, message_type: MessageType) -> str:
        return self.messages[message_type]

    def class_box_style(self, cls: ClassNode) -> str:
        return self.class_boxes.get(cls.stereotype or "class", self.class_boxes["class"])

    def class_edge_style(self, relationship: ClassRelationship) -> str:
        relation = self.class_relations[relationship.kind]
        marker, fill = relation.marker, relation.marker_fill
        # plain links ("--", "..") carry no head at all
        if relationship.arrow in ("--", ".."):
            marker, fill = "none", 0
        if relationship.marker_at_source:
            ends = f"startArrow={marker};startFill={fill};endArrow=none;endFill=0;"
        else:
            ends = f"startArrow=none;startFill=0;endArrow={marker};endFill={fill};"
        dashed = "dashed=1;dashPattern=8 8;" if relation.dashed else ""
        return self.class_edge + ends + dashed

    def mindmap_node_style(self, node: MindmapNode) -> str:
        level_style = self.mindmap_levels[min(node.level, len(self.mindmap_levels) - 1)]
        if node.shape == NodeShape.DEFAULT:
            prefix = "ellipse;" if node.level == 0 else "rounded=1;"
        else:
            prefix = self.mindmap_shapes.get(node.shape, "rounded=1;")
        return prefix + level_style

    def branch_color(self, branch: str) -> str:
        return self.branch_colors.get(branch, self.default_branch_color)

    def commit_style(self, commit: Commit) -> str:
        fill = self.commit_fills.get(commit.type, self.commit_fills[CommitType.NORMAL])
        return f"{self.commit}fillColor={fill};strokeColor={self.branch_color(commit.branch)};"


def default_stylesheet() -> StyleSheet:
    """The standard draw.io palette used for every conversion."""
    flow_base = "whiteSpace=wrap;html=1;"
    return StyleSheet(
        flow_shapes=_frozen({
            NodeShape.RECTANGLE: "rounded=0;" + flow_base + _colors(BLUE),
            NodeShape.ROUNDED: "rounded=1;" + flow_base + _colors(BLUE),
            NodeShape.DIAMOND: "rhombus;" + flow_base + _colors(YELLOW) + "overflow=hidden;",
            NodeShape.STADIUM: "rounded=1;arcSize=50;" + flow_base + _colors(BLUE),
            NodeShape.CIRCLE: "ellipse;" + flow_base + _colors(BLUE),
            NodeShape.SUBROUTINE: "shape=process;" + flow_base + _colors(BLUE),
        }),
        flow_terminals=_frozen({
            "start": "rounded=1;arcSize=50;" + flow_base + _colors(GREEN),
            "end": "rounded=1;arcSize=50;" + flow_base + _colors(RED),
        }),
        flow_edge=(
            "edgeStyle=orthogonalEdgeStyle;rounded=1;orthogonalLoop=1;jettySize=auto;"
            "html=1;endArrow=classic;strokeWidth=1;"
        ),
        flow_arrows=_frozen({
            FlowArrow.ARROW: "",
            FlowArrow.OPEN: "endArrow=none;",
            FlowArrow.DOTTED: "dashed=1;",
            FlowArrow.THICK: "strokeWidth=3;",
        }),
        er_entity=_SWIMLANE + "fontStyle=1;startSize=30;" + _colors(BLUE),
        er_attribute=_ROW_TEXT + "verticalAlign=middle;",
        er_constraints=_frozen({"PK": "fontStyle=4;", "FK": "fontStyle=2;"}),
        er_cardinality=_frozen({
            "||": "ERone",
            "|o": "ERzeroToOne",
            "o|": "ERzeroToOne",
            "}|": "ERoneToMany",
            "|{": "ERoneToMany",
            "}o": "ERzeroToMany",
            "o{": "ERzeroToMany",
        }),
        er_edge="edgeStyle=orthogonalEdgeStyle;rounded=0;orthogonalLoop=1;jettySize=auto;html=1;",
        participants=_frozen({
            "participant": "rounded=0;whiteSpace=wrap;html=1;" + _colors(BLUE) + "fontStyle=1;",
            "actor": (
                "shape=umlActor;verticalLabelPosition=bottom;verticalAlign=top;html=1;"
                + _colors(BLUE)
            ),
        }),
        lifeline=(
            "html=1;points=[];perimeter=orthogonalPerimeter;outlineConnect=0;"
            "targetShapes=umlLifeline;portConstraint=eastwest;dashed=1;dashPattern=8 8;"
            "strokeWidth=1;strokeColor=#666666;"
        ),
        messages=_frozen({
            MessageType.SYNC: "html=1;verticalAlign=bottom;endArrow=block;curved=0;rounded=0;",
            MessageType.ASYNC: "html=1;verticalAlign=bottom;endArrow=open;curved=0;rounded=0;dashed=1;",
            MessageType.LOST: "html=1;verticalAlign=bottom;endArrow=cross;curved=0;rounded=0;",
            MessageType.CREATE: (
                "html=1;verticalAlign=bottom;endArrow=open;curved=0;rounded=0;dashed=1;dashPattern=1 2;"
            ),
        }),
        activation="rounded=0;whiteSpace=wrap;html=1;" + _colors(PURPLE),
        note=(
            "shape=note;whiteSpace=wrap;html=1;backgroundOutline=1;darkOpacity=0.05;"
            + _colors(YELLOW)
        ),
        class_boxes=_frozen({
            "class": _SWIMLANE + "fontStyle=1;startSize=26;" + _colors(BLUE),
            "interface": _SWIMLANE + "fontStyle=3;startSize=26;" + _colors(GREEN),
            "abstract": _SWIMLANE + "fontStyle=2;startSize=26;" + _colors(PURPLE),
            "enumeration": _SWIMLANE + "fontStyle=1;startSize=26;" + _colors(YELLOW),
        }),
        class_member=_ROW_TEXT + "verticalAlign=top;",
        class_separator=(
            "line;strokeWidth=1;fillColor=none;align=left;verticalAlign=middle;spacingTop=-1;"
            "spacingLeft=3;spacingRight=3;rotatable=0;labelPosition=right;points=[];"
            "portConstraint=eastwest;strokeColor=#6c8ebf;"
        ),
        class_relations=_frozen({
            RelationKind.INHERITANCE: RelationStyle("block"),
            RelationKind.REALIZATION: RelationStyle("block", dashed=True),
            RelationKind.COMPOSITION: RelationStyle("diamondThin", marker_fill=1),
            RelationKind.AGGREGATION: RelationStyle("diamondThin"),
            RelationKind.ASSOCIATION: RelationStyle("open"),
            RelationKind.DEPENDENCY: RelationStyle("open", dashed=True),
        }),
        class_edge="edgeStyle=orthogonalEdgeStyle;rounded=0;orthogonalLoop=1;jettySize=auto;html=1;",
        mindmap_levels=(
            "whiteSpace=wrap;html=1;" + _colors(BLUE) + "fontStyle=1;fontSize=16;",
            "whiteSpace=wrap;html=1;" + _colors(GREEN) + "fontStyle=1;fontSize=14;",
            "whiteSpace=wrap;html=1;" + _colors(YELLOW) + "fontSize=12;",
            "whiteSpace=wrap;html=1;" + _colors(RED) + "fontSize=11;",
        ),
        mindmap_shapes=_frozen({
            NodeShape.CIRCLE: "ellipse;",
            NodeShape.ROUNDED: "rounded=1;",
            NodeShape.RECTANGLE: "rounded=0;",
            NodeShape.HEXAGON: "shape=hexagon;perimeter=hexagonPerimeter2;",
            NodeShape.CLOUD: "ellipse;shape=cloud;",
        }),
        mindmap_connector=(
            "edgeStyle=entityRelationEdgeStyle;curved=1;rounded=0;orthogonalLoop=1;"
            "jettySize=auto;html=1;endArrow=none;strokeWidth=2;"
        ),
        commit="ellipse;whiteSpace=wrap;html=1;aspect=fixed;",
        commit_fills=_frozen({
            CommitType.NORMAL: BLUE[0],
            CommitType.REVERSE: BLUE[0],
            CommitType.HIGHLIGHT: GREEN[0],
            CommitType.MERGE: RED[0],
        }),
        branch_colors=_frozen({
            "main": BLUE[1],
            "develop": GREEN[1],
            "feature": YELLOW[1],
            "hotfix": RED[1],
            "release": PURPLE[1],
        }),
        default_branch_color=YELLOW[1],
        commit_connector=(
            "edgeStyle=orthogonalEdgeStyle;rounded=1;orthogonalLoop=1;jettySize=auto;"
            "html=1;endArrow=none;strokeWidth=3;"
        ),
        commit_label=(
            "text;html=1;strokeColor=none;fillColor=none;align=left;verticalAlign=middle;"
            "whiteSpace=wrap;rounded=0;fontSize=10;"
        ),
    )


DEFAULT_STYLESHEET = default_stylesheet()
