"""
Canonical data models for parsed Mermaid diagrams.

These models define the in-memory schema every dialect parser produces:
- Nodes (flow nodes, ER entities, participants, classes, mindmap nodes, commits)
- Relationships connecting them (source/target naming convention)
- Per-dialect metadata (flow direction, commit branch registry)

Field Naming Convention:
- Relationships use `source` and `target`, like the diagram editor models
- Node collections are dicts keyed by id, so insertion order is preserved and
  duplicate ids are impossible
- Every diagram carries the ParseReport produced while reading it
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from .grammar import ParseReport


class DiagramType(str, Enum):
    """Supported Mermaid dialects (wire names used by the conversion tools)."""
    FLOWCHART = "flowchart"
    ER = "erDiagram"
    SEQUENCE = "sequence"
    CLASS = "class"
    MINDMAP = "mindmap"
    GITGRAPH = "gitgraph"
    UNKNOWN = "unknown"


class NodeShape(str, Enum):
    """Shapes a node can be declared with."""
    RECTANGLE = "rectangle"
    ROUNDED = "rounded"
    DIAMOND = "diamond"
    STADIUM = "stadium"
    CIRCLE = "circle"
    SUBROUTINE = "subroutine"
    # Mindmap only
    DEFAULT = "default"
    HEXAGON = "hexagon"
    CLOUD = "cloud"


class Direction(str, Enum):
    """Flowchart orientation."""
    TD = "TD"
    TB = "TB"
    BT = "BT"
    LR = "LR"
    RL = "RL"

    @property
    def is_vertical(self) -> bool:
        return self in (Direction.TD, Direction.TB, Direction.BT)

    @property
    def is_reversed(self) -> bool:
        return self in (Direction.BT, Direction.RL)


class FlowArrow(str, Enum):
    """Connector glyphs for flowchart edges."""
    ARROW = "-->"
    OPEN = "---"
    DOTTED = "-.->"
    THICK = "==>"


class MessageType(str, Enum):
    """Sequence message kinds."""
    SYNC = "sync"
    ASYNC = "async"
    LOST = "lost"
    CREATE = "create"


class RelationKind(str, Enum):
    """Class relationship kinds."""
    INHERITANCE = "inheritance"
    REALIZATION = "realization"
    COMPOSITION = "composition"
    AGGREGATION = "aggregation"
    ASSOCIATION = "association"
    DEPENDENCY = "dependency"


class CommitType(str, Enum):
    """Commit kinds in a git graph."""
    NORMAL = "NORMAL"
    REVERSE = "REVERSE"
    HIGHLIGHT = "HIGHLIGHT"
    MERGE = "MERGE"


class BaseDiagram(BaseModel):
    """Fields shared by every parsed diagram."""
    report: ParseReport = Field(default_factory=ParseReport)

    @property
    def diagram_type(self) -> DiagramType:
        raise NotImplementedError


# --- Flowchart ---

class FlowNode(BaseModel):
    """A flowchart node."""
    id: str
    label: str
    shape: NodeShape = NodeShape.RECTANGLE


class FlowEdge(BaseModel):
    """A directed flowchart edge."""
    source: str
    target: str
    label: Optional[str] = None
    arrow: FlowArrow = FlowArrow.ARROW


class FlowchartDiagram(BaseDiagram):
    direction: Direction = Direction.TD
    nodes: dict[str, FlowNode] = Field(default_factory=dict)
    edges: list[FlowEdge] = Field(default_factory=list)

    @property
    def diagram_type(self) -> DiagramType:
        return DiagramType.FLOWCHART


# --- ER diagram ---

class ErAttribute(BaseModel):
    """An entity attribute; constraint is kept verbatim (PK, FK, UK)."""
    type: str
    name: str
    constraint: Optional[str] = None
    comment: Optional[str] = None


class ErEntity(BaseModel):
    name: str
    attributes: list[ErAttribute] = Field(default_factory=list)


class ErRelationship(BaseModel):
    source: str
    target: str
    source_cardinality: str
    target_cardinality: str
    label: str = ""
    identifying: bool = True


class ErDiagram(BaseDiagram):
    entities: dict[str, ErEntity] = Field(default_factory=dict)
    relationships: list[ErRelationship] = Field(default_factory=list)

    @property
    def diagram_type(self) -> DiagramType:
        return DiagramType.ER


# --- Sequence diagram ---

class Participant(BaseModel):
    """A lane in a sequence diagram; `order` is the left-to-right position."""
    id: str
    label: str
    kind: str = "participant"  # "participant" or "actor"
    order: int = 0


class Message(BaseModel):
    source: str
    target: str
    text: str
    type: MessageType = MessageType.SYNC
    arrow: str = "->>"
    row: int = 0  # chronological row shared with notes


class Note(BaseModel):
    position: str  # "right of", "left of" or "over"
    participants: list[str]
    text: str
    row: int = 0


class Activation(BaseModel):
    action: str  # "activate" or "deactivate"
    participant: str
    row: int = 0


class SequenceDiagram(BaseDiagram):
    participants: dict[str, Participant] = Field(default_factory=dict)
    messages: list[Message] = Field(default_factory=list)
    notes: list[Note] = Field(default_factory=list)
    activations: list[Activation] = Field(default_factory=list)

    @property
    def diagram_type(self) -> DiagramType:
        return DiagramType.SEQUENCE

    @property
    def row_count(self) -> int:
        """Number of chronological rows used by messages and notes."""
        return len(self.messages) + len(self.notes)

    def ordered_participants(self) -> list[Participant]:
        return sorted(self.participants.values(), key=lambda p: p.order)


# --- Class diagram ---

class ClassAttribute(BaseModel):
    visibility: str = "+"
    name: str
    type: str = ""


class ClassMethod(BaseModel):
    visibility: str = "+"
    name: str
    params: str = ""
    return_type: str = "void"


class ClassNode(BaseModel):
    name: str
    attributes: list[ClassAttribute] = Field(default_factory=list)
    methods: list[ClassMethod] = Field(default_factory=list)
    stereotype: Optional[str] = None


class ClassRelationship(BaseModel):
    """A relationship between two classes.

    `marker_at_source` records which end the glyph decorates, e.g. the
    triangle of `Animal <|-- Dog` sits on Animal (the source).
    """
    source: str
    target: str
    kind: RelationKind = RelationKind.ASSOCIATION
    label: Optional[str] = None
    arrow: str = "-->"
    marker_at_source: bool = False


class ClassDiagram(BaseDiagram):
    classes: dict[str, ClassNode] = Field(default_factory=dict)
    relationships: list[ClassRelationship] = Field(default_factory=list)

    @property
    def diagram_type(self) -> DiagramType:
        return DiagramType.CLASS


# --- Mindmap ---

class MindmapNode(BaseModel):
    """A mindmap node stored in an arena.

    `parent` and `children` are indices into MindmapDiagram.nodes. A parent
    index is always smaller than the node's own index, so the tree is
    acyclic by construction.
    """
    id: str
    label: str
    shape: NodeShape = NodeShape.DEFAULT
    level: int = 0
    parent: Optional[int] = None
    children: list[int] = Field(default_factory=list)


class MindmapDiagram(BaseDiagram):
    nodes: list[MindmapNode] = Field(default_factory=list)

    @property
    def diagram_type(self) -> DiagramType:
        return DiagramType.MINDMAP

    @property
    def root(self) -> Optional[MindmapNode]:
        return self.nodes[0] if self.nodes else None

    def parent_of(self, node: MindmapNode) -> Optional[MindmapNode]:
        if node.parent is None:
            return None
        return self.nodes[node.parent]

    def children_of(self, node: MindmapNode) -> list[MindmapNode]:
        return [self.nodes[i] for i in node.children]


# --- Git graph ---

class Commit(BaseModel):
    id: str
    branch: str
    type: CommitType = CommitType.NORMAL
    tag: Optional[str] = None
    merge_from: Optional[str] = None


class Branch(BaseModel):
    name: str
    commits: list[str] = Field(default_factory=list)
    parent_branch: Optional[str] = None
    base_commit: Optional[str] = None  # head of parent_branch when created
    declared: bool = True  # False when created implicitly by checkout


class GitGraphDiagram(BaseDiagram):
    commits: list[Commit] = Field(default_factory=list)
    branches: dict[str, Branch] = Field(default_factory=dict)

    @property
    def diagram_type(self) -> DiagramType:
        return DiagramType.GITGRAPH


AnyDiagram = (
    FlowchartDiagram | ErDiagram | SequenceDiagram | ClassDiagram
    | MindmapDiagram | GitGraphDiagram
)
