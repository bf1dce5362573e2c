"""
Unit tests for diagram_converter/analysis.py
"""

from diagram_converter.analysis import (
    GraphView,
    calculate_node_connections,
    duplicate_edges,
    find_connected_components,
    find_orphans,
    graph_view,
    summarize_diagram,
)
from diagram_converter.parsers import (
    parse_class_diagram,
    parse_er_diagram,
    parse_flowchart,
    parse_gitgraph,
    parse_mindmap,
    parse_sequence_diagram,
)


def _view():
    return GraphView(
        nodes={"A": "Start", "B": "Middle", "C": "End", "D": "Alone"},
        edges=[("A", "B"), ("B", "C"), ("A", "B")],
    )


class TestGraphHelpers:
    """Components, connection counts, orphans and duplicates."""

    def test_connected_components(self):
        components = find_connected_components(_view())
        assert [c.node_ids for c in components] == [["A", "B", "C"], ["D"]]
        assert [c.edge_count for c in components] == [3, 0]
        assert components[1].size == 1

    def test_empty_graph(self):
        assert find_connected_components(GraphView()) == []

    def test_node_connections(self):
        connections = calculate_node_connections(_view())
        assert (connections["B"].incoming, connections["B"].outgoing) == (2, 1)
        assert connections["B"].total == 3
        assert connections["D"].total == 0

    def test_orphans(self):
        assert find_orphans(_view()) == ["D"]

    def test_duplicates(self):
        assert duplicate_edges(_view()) == [("A", "B")]


class TestGraphView:
    """Every dialect reduces to nodes and directed edges."""

    def test_flowchart(self, flowchart_source):
        view = graph_view(parse_flowchart(flowchart_source))
        assert view.nodes["B"] == "Is it valid?"
        assert len(view.edges) == 5

    def test_er_diagram(self, er_source):
        view = graph_view(parse_er_diagram(er_source))
        assert list(view.nodes) == ["CUSTOMER", "ORDER", "LINE_ITEM"]
        assert view.edges == [("CUSTOMER", "ORDER"), ("ORDER", "LINE_ITEM")]

    def test_sequence_diagram(self, sequence_source):
        view = graph_view(parse_sequence_diagram(sequence_source))
        assert view.nodes == {"A": "Alice", "B": "Bob", "C": "C"}
        assert view.edges[0] == ("A", "B")

    def test_class_diagram(self, class_source):
        view = graph_view(parse_class_diagram(class_source))
        assert view.edges == [("Animal", "Dog"), ("Dog", "Tail")]

    def test_mindmap(self, mindmap_source):
        view = graph_view(parse_mindmap(mindmap_source))
        assert len(view.nodes) == 7
        assert view.edges[0] == ("node0", "node1")
        assert len(view.edges) == 6

    def test_gitgraph_links_come_from_layout(self, gitgraph_source):
        view = graph_view(parse_gitgraph(gitgraph_source))
        assert view.nodes["feat-1"] == "v1.0"
        assert view.nodes["c0"] == "c0"
        assert ("c2", "merge_3") in view.edges
        assert len(view.edges) == 6


class TestSummarizeDiagram:
    """Structural summary."""

    def test_flowchart_summary(self, flowchart_source):
        summary = summarize_diagram(parse_flowchart(flowchart_source))
        assert summary.diagram_type == "flowchart"
        assert (summary.total_nodes, summary.total_edges) == (5, 5)
        assert summary.connected_components == 1
        assert summary.orphan_count == 0
        top = summary.most_connected_nodes[0]
        assert (top.node_id, top.total) == ("B", 3)

    def test_top_n_and_orphans(self):
        summary = summarize_diagram(parse_flowchart("flowchart TD\nA --> B\nC"), top_n=1)
        assert len(summary.most_connected_nodes) == 1
        assert summary.orphan_count == 1
        assert summary.connected_components == 2

    def test_to_dict(self, er_source):
        data = summarize_diagram(parse_er_diagram(er_source)).to_dict()
        assert data["diagram_type"] == "erDiagram"
        assert data["total_nodes"] == 3
        assert data["lines"]["malformed"] == 0
        assert data["most_connected_nodes"][0] == {
            "id": "ORDER",
            "label": "ORDER",
            "connections": 2,
            "incoming": 1,
            "outgoing": 1,
        }
