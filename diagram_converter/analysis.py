"""
Diagram analysis - Graph analysis and summarization utilities.

Every dialect is reduced to a GraphView (labelled nodes plus directed
source -> target pairs) so the same connectivity checks serve the validator,
the CLI and the MCP tools.
"""

from dataclasses import dataclass, field

from .layout import layout_gitgraph
from .models import (
    AnyDiagram,
    ClassDiagram,
    ErDiagram,
    FlowchartDiagram,
    GitGraphDiagram,
    MindmapDiagram,
    SequenceDiagram,
)


@dataclass
class GraphView:
    """Dialect-independent view: node id -> label, and directed edges."""
    nodes: dict[str, str] = field(default_factory=dict)
    edges: list[tuple[str, str]] = field(default_factory=list)


@dataclass
class ConnectedComponent:
    """A connected component in the diagram graph."""
    node_ids: list[str] = field(default_factory=list)
    edge_count: int = 0

    @property
    def size(self) -> int:
        return len(self.node_ids)


@dataclass
class NodeConnectionInfo:
    """Connection information for a single node."""
    node_id: str
    label: str
    incoming: int = 0   # Edges pointing to this node
    outgoing: int = 0   # Edges pointing from this node

    @property
    def total(self) -> int:
        return self.incoming + self.outgoing


@dataclass
class DiagramSummary:
    """Structural summary of a parsed diagram."""
    diagram_type: str
    total_nodes: int
    total_edges: int
    connected_components: int
    most_connected_nodes: list[NodeConnectionInfo]
    orphan_count: int
    lines: dict[str, int]

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "diagram_type": self.diagram_type,
            "total_nodes": self.total_nodes,
            "total_edges": self.total_edges,
            "connected_components": self.connected_components,
            "most_connected_nodes": [
                {
                    "id": n.node_id,
                    "label": n.label,
                    "connections": n.total,
                    "incoming": n.incoming,
                    "outgoing": n.outgoing
                }
                for n in self.most_connected_nodes
            ],
            "orphan_count": self.orphan_count,
            "lines": self.lines,
        }


def graph_view(diagram: AnyDiagram) -> GraphView:
    """Reduce any parsed diagram to labelled nodes and directed edges."""
    view = GraphView()

    if isinstance(diagram, FlowchartDiagram):
        view.nodes = {node_id: node.label for node_id, node in diagram.nodes.items()}
        view.edges = [(e.source, e.target) for e in diagram.edges]
    elif isinstance(diagram, ErDiagram):
        view.nodes = {name: name for name in diagram.entities}
        view.edges = [(r.source, r.target) for r in diagram.relationships]
    elif isinstance(diagram, SequenceDiagram):
        view.nodes = {p.id: p.label for p in diagram.ordered_participants()}
        view.edges = [(m.source, m.target) for m in diagram.messages]
    elif isinstance(diagram, ClassDiagram):
        view.nodes = {name: name for name in diagram.classes}
        view.edges = [(r.source, r.target) for r in diagram.relationships]
    elif isinstance(diagram, MindmapDiagram):
        view.nodes = {node.id: node.label for node in diagram.nodes}
        view.edges = [
            (diagram.nodes[node.parent].id, node.id)
            for node in diagram.nodes
            if node.parent is not None
        ]
    elif isinstance(diagram, GitGraphDiagram):
        view.nodes = {commit.id: commit.tag or commit.id for commit in diagram.commits}
        # Commit links are implicit; the layout derives them
        view.edges = [(r.source, r.target) for r in layout_gitgraph(diagram).routes]

    return view


def find_connected_components(view: GraphView) -> list[ConnectedComponent]:
    """
    Find all connected components using BFS.

    A connected component is a set of nodes where every node is reachable
    from every other node (treating edges as undirected).
    """
    if not view.nodes:
        return []

    # Build adjacency list (undirected)
    adjacency: dict[str, set[str]] = {node_id: set() for node_id in view.nodes}
    for source, target in view.edges:
        if source in adjacency and target in adjacency:
            adjacency[source].add(target)
            adjacency[target].add(source)

    visited: set[str] = set()
    components: list[ConnectedComponent] = []

    for start_node in view.nodes:
        if start_node in visited:
            continue

        component_nodes: list[str] = []
        queue = [start_node]
        while queue:
            current = queue.pop(0)
            if current in visited:
                continue
            visited.add(current)
            component_nodes.append(current)
            for neighbor in adjacency[current]:
                if neighbor not in visited:
                    queue.append(neighbor)

        members = set(component_nodes)
        components.append(ConnectedComponent(
            node_ids=component_nodes,
            edge_count=sum(1 for s, t in view.edges if s in members and t in members),
        ))

    return components


def calculate_node_connections(view: GraphView) -> dict[str, NodeConnectionInfo]:
    """Incoming/outgoing edge counts per node."""
    connections = {
        node_id: NodeConnectionInfo(node_id=node_id, label=label)
        for node_id, label in view.nodes.items()
    }

    for source, target in view.edges:
        if source in connections:
            connections[source].outgoing += 1
        if target in connections:
            connections[target].incoming += 1

    return connections


def find_orphans(view: GraphView) -> list[str]:
    """Node ids that take part in no edge, in declaration order."""
    connected: set[str] = set()
    for source, target in view.edges:
        connected.add(source)
        connected.add(target)
    return [node_id for node_id in view.nodes if node_id not in connected]


def duplicate_edges(view: GraphView) -> list[tuple[str, str]]:
    """Every repeat of an already seen source -> target pair."""
    seen: set[tuple[str, str]] = set()
    duplicates = []
    for pair in view.edges:
        if pair in seen:
            duplicates.append(pair)
        else:
            seen.add(pair)
    return duplicates


def summarize_diagram(diagram: AnyDiagram, top_n: int = 5) -> DiagramSummary:
    """
    Generate a summary of a parsed diagram.

    Args:
        diagram: The diagram to summarize
        top_n: Number of top connected nodes to include
    """
    view = graph_view(diagram)
    connections = calculate_node_connections(view)

    sorted_by_connections = sorted(
        connections.values(),
        key=lambda x: x.total,
        reverse=True
    )
    most_connected = [n for n in sorted_by_connections[:top_n] if n.total > 0]

    return DiagramSummary(
        diagram_type=diagram.diagram_type.value,
        total_nodes=len(view.nodes),
        total_edges=len(view.edges),
        connected_components=len(find_connected_components(view)),
        most_connected_nodes=most_connected,
        orphan_count=len(find_orphans(view)),
        lines=diagram.report.summary(),
    )
