"""
Unit tests for diagram_converter/documentation.py
"""

from diagram_converter.documentation import generate_markdown, markdown_table, mindmap_outline
from diagram_converter.models import DiagramType, NodeShape
from diagram_converter.parsers import parse_mindmap


class TestMarkdownTable:
    """Table rendering helper."""

    def test_basic_table(self):
        table = markdown_table(["ID", "Label"], [("A", "Start"), ("B", "End")])
        assert table.splitlines() == [
            "| ID | Label |",
            "|----|-------|",
            "| A | Start |",
            "| B | End |",
        ]

    def test_pipes_are_escaped(self):
        table = markdown_table(["Text"], [("a|b",)])
        assert table.splitlines()[-1] == "| a\\|b |"

    def test_enum_values(self):
        table = markdown_table(["Shape"], [(NodeShape.DIAMOND,)])
        assert table.splitlines()[-1] == "| diamond |"

    def test_empty_row(self):
        assert len(markdown_table(["A", "B"], []).splitlines()) == 2
        assert markdown_table(["A", "B"], [], empty_row=True).splitlines()[-1] == "| - | - |"


class TestGenerateMarkdown:
    """Per-dialect documents."""

    def test_every_document_echoes_source(self, all_sources):
        for source in all_sources.values():
            doc = generate_markdown(source)
            assert "## Original Mermaid Code" in doc
            assert f"```mermaid\n{source}" in doc

    def test_flowchart(self, flowchart_source):
        doc = generate_markdown(flowchart_source)
        assert doc.startswith("# Flowchart Documentation")
        assert "with 5 nodes and 5 connections." in doc
        assert "Direction: TD" in doc
        assert "| B | Is it valid? | diamond |" in doc
        assert "| B | C | Yes |" in doc
        assert "| C | E | - |" in doc

    def test_er_diagram(self, er_source):
        doc = generate_markdown(er_source)
        assert doc.startswith("# ER Diagram Documentation")
        assert "### CUSTOMER" in doc
        assert "| int | id | PK |" in doc
        assert "| CUSTOMER | ORDER | places | || to o{ |" not in doc
        assert "| CUSTOMER | ORDER | places | \\|\\| to o{ |" in doc
        # entity without attributes
        assert "### LINE_ITEM\n| Type | Attribute | Constraint |\n|------|-----------|------------|\n| - | - | - |" in doc

    def test_sequence_diagram(self, sequence_source):
        doc = generate_markdown(sequence_source)
        assert "with 3 participants and 4 messages." in doc
        assert "| B | Bob | actor |" in doc
        assert "| 1 | A | B | Hello Bob | sync |" in doc
        assert "| 3 | A | B | Lost | lost |" in doc
        assert "## Notes" in doc
        assert "| right of | A | Thinking |" in doc

    def test_sequence_without_notes(self):
        doc = generate_markdown("sequenceDiagram\nA->>B: hi")
        assert "## Notes" not in doc

    def test_class_diagram(self, class_source):
        doc = generate_markdown(class_source)
        assert "### Animal <<abstract>>" in doc
        assert "**Attributes:**" in doc
        assert "| + | name | String |" in doc
        assert "| + | move | int distance | bool |" in doc
        assert "| Animal | Dog | inheritance | - |" in doc
        assert "| Dog | Tail | composition | has |" in doc

    def test_mindmap(self, mindmap_source):
        doc = generate_markdown(mindmap_source)
        assert "with 7 nodes." in doc
        assert "- **Project**\n  - **Goals**\n    - **Ship v1**" in doc

    def test_gitgraph(self, gitgraph_source):
        doc = generate_markdown(gitgraph_source)
        assert "with 6 commits across 2 branches." in doc
        assert "| develop | main | 2 |" in doc
        assert "| feat-1 | main | NORMAL | v1.0 |" in doc

    def test_explicit_type(self):
        doc = generate_markdown("A --> B", DiagramType.FLOWCHART)
        assert doc.startswith("# Flowchart Documentation")

    def test_unknown_type(self):
        doc = generate_markdown("pie title Pets")
        assert doc.startswith("# Diagram Documentation")
        assert "Markdown generation is not yet fully supported for diagram type: unknown" in doc
        assert "```mermaid\npie title Pets\n```" in doc


def test_mindmap_outline():
    diagram = parse_mindmap("mindmap\nRoot\n  A\n    A1\n  B")
    assert mindmap_outline(diagram) == "- **Root**\n  - **A**\n    - **A1**\n  - **B**"
    assert mindmap_outline(parse_mindmap("mindmap")) == ""
