"""
Mermaid validation - Check diagrams for structural issues before conversion.

Findings are split in two:
- issues (ERROR): the diagram will not convert into something useful
- suggestions (WARNING/INFO): it converts, but something looks off

Validation only reads: it parses the source and never raises for bad input.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

from .analysis import GraphView, duplicate_edges, find_orphans, graph_view
from .detection import detect_diagram_type
from .models import (
    AnyDiagram,
    ClassDiagram,
    DiagramType,
    ErDiagram,
    FlowchartDiagram,
    GitGraphDiagram,
    MindmapDiagram,
    SequenceDiagram,
)
from .parsers import parse_diagram

NODE_ID_PATTERN = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")


class IssueSeverity(str, Enum):
    """Severity levels for validation issues."""
    ERROR = "error"      # Invalid state, must be fixed
    WARNING = "warning"  # Potential problem, should review
    INFO = "info"        # Informational, may be intentional


_ICONS = {
    IssueSeverity.ERROR: "❌",
    IssueSeverity.WARNING: "⚠️",
    IssueSeverity.INFO: "ℹ️",
}


class ValidationStatus(str, Enum):
    VALID = "valid"
    WARNING = "warning"
    INVALID = "invalid"


@dataclass
class ValidationIssue:
    """A single validation finding."""
    severity: IssueSeverity
    message: str
    node_id: str | None = None
    edge_id: str | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        result = {
            "type": self.severity.value,
            "message": self.message
        }
        if self.node_id:
            result["node_id"] = self.node_id
        if self.edge_id:
            result["edge_id"] = self.edge_id
        return result

    def render(self) -> str:
        return f"{_ICONS[self.severity]} {self.message}"


@dataclass
class ValidationReport:
    diagram_type: DiagramType
    issues: list[ValidationIssue] = field(default_factory=list)
    suggestions: list[ValidationIssue] = field(default_factory=list)
    counts: dict[str, int] = field(default_factory=dict)

    @property
    def status(self) -> ValidationStatus:
        if self.issues:
            return ValidationStatus.INVALID
        if self.suggestions:
            return ValidationStatus.WARNING
        return ValidationStatus.VALID

    @property
    def valid(self) -> bool:
        return not self.issues

    def issue(self, message: str, node_id: Optional[str] = None, edge_id: Optional[str] = None) -> None:
        self.issues.append(ValidationIssue(IssueSeverity.ERROR, message, node_id, edge_id))

    def suggest(
        self,
        message: str,
        node_id: Optional[str] = None,
        edge_id: Optional[str] = None,
        severity: IssueSeverity = IssueSeverity.WARNING,
    ) -> None:
        self.suggestions.append(ValidationIssue(severity, message, node_id, edge_id))

    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "valid": self.valid,
            "diagram_type": self.diagram_type.value,
            "counts": self.counts,
            "issues": [i.to_dict() for i in self.issues],
            "suggestions": [s.to_dict() for s in self.suggestions],
        }

    def to_markdown(self) -> str:
        """Human readable report, as returned by the MCP tool."""
        status = "✅ Valid" if self.valid else "❌ Issues found"
        parts = [
            f"## Validation Result: {status}",
            f"**Diagram Type:** {self.diagram_type.value}",
        ]
        if self.issues:
            parts.append("### Issues\n" + "\n".join(i.render() for i in self.issues))
        if self.suggestions:
            parts.append("### Suggestions\n" + "\n".join(s.render() for s in self.suggestions))
        if not self.issues and not self.suggestions:
            parts.append("✅ Diagram looks good and is ready for conversion!")
        return "\n\n".join(parts) + "\n"


# --- Dialect checks ---

def _self_loops_and_duplicates(report: ValidationReport, view: GraphView) -> None:
    for source, target in view.edges:
        if source == target:
            report.suggest(f"Self-referencing edge on {source}", node_id=source)
    for source, target in duplicate_edges(view):
        report.suggest(f"Duplicate edge from {source} to {target}", edge_id=f"{source}->{target}")


def _check_flowchart(diagram: FlowchartDiagram, view: GraphView, report: ValidationReport) -> None:
    if not diagram.nodes:
        report.issue("No nodes found in flowchart")
        return

    labels = {node.label.strip().lower() for node in diagram.nodes.values()}
    if "start" not in labels:
        report.suggest("Consider adding a Start node for better diagram clarity")
    if not labels & {"end", "stop"}:
        report.suggest("Consider adding an End/Stop node for better diagram clarity")

    for node_id in diagram.nodes:
        if not NODE_ID_PATTERN.match(node_id):
            report.issue(
                f'Invalid node ID: "{node_id}" - use alphanumeric with underscores only',
                node_id=node_id,
            )
    _self_loops_and_duplicates(report, view)


def _check_orphans(report: ValidationReport, view: GraphView, noun: str) -> None:
    # A diagram without any relationship is a catalogue, not a set of orphans
    if not view.edges:
        return
    for node_id in find_orphans(view):
        report.suggest(f'{noun} "{node_id}" has no relationships', node_id=node_id)


def _check_er_diagram(diagram: ErDiagram, view: GraphView, report: ValidationReport) -> None:
    if not diagram.entities:
        report.issue("No entities found in ER diagram")
        return
    _check_orphans(report, view, "Entity")


def _check_sequence_diagram(diagram: SequenceDiagram, view: GraphView, report: ValidationReport) -> None:
    if not diagram.participants:
        report.issue("No participants found in sequence diagram")
        return
    if not diagram.messages:
        report.suggest("Sequence diagram has no messages")
    for note in diagram.notes:
        unknown = [p for p in note.participants if p not in diagram.participants]
        if unknown:
            report.suggest(
                f"Note \"{note.text}\" refers to unknown participant(s): {', '.join(unknown)}; it will be dropped",
                node_id=unknown[0],
            )


def _check_class_diagram(diagram: ClassDiagram, view: GraphView, report: ValidationReport) -> None:
    if not diagram.classes:
        report.issue("No classes found in class diagram")
        return
    _check_orphans(report, view, "Class")
    _self_loops_and_duplicates(report, view)


def _check_mindmap(diagram: MindmapDiagram, view: GraphView, report: ValidationReport) -> None:
    if not diagram.nodes:
        report.issue("Mindmap has no nodes")
        return
    extra_roots = [
        o for o in diagram.report.parsed
        if o.rule == "node" and o.reason
    ]
    for outcome in extra_roots:
        report.suggest(
            f"Line {outcome.line_no}: \"{outcome.text.strip()}\" is a second top-level node and was attached to the root"
        )


def _check_gitgraph(diagram: GitGraphDiagram, view: GraphView, report: ValidationReport) -> None:
    if not diagram.commits:
        report.suggest("Git graph has no commits", severity=IssueSeverity.INFO)
    for commit in diagram.commits:
        if commit.merge_from is None:
            continue
        if commit.merge_from not in diagram.branches:
            report.issue(f'Merge from unknown branch "{commit.merge_from}"', node_id=commit.id)
        elif commit.merge_from == commit.branch:
            report.suggest(f'Branch "{commit.branch}" is merged into itself', node_id=commit.id)
    for branch in diagram.branches.values():
        if not branch.declared:
            report.suggest(f'Checkout of undeclared branch "{branch.name}"; it was created implicitly')


_CHECKS: dict[DiagramType, Callable[[AnyDiagram, GraphView, ValidationReport], None]] = {
    DiagramType.FLOWCHART: _check_flowchart,
    DiagramType.ER: _check_er_diagram,
    DiagramType.SEQUENCE: _check_sequence_diagram,
    DiagramType.CLASS: _check_class_diagram,
    DiagramType.MINDMAP: _check_mindmap,
    DiagramType.GITGRAPH: _check_gitgraph,
}


def validate_mermaid(text: str) -> ValidationReport:
    """
    Validate Mermaid source and report issues and suggestions.

    Checks for:
    - Undetectable diagram type - ERROR
    - Lines the parser did not recognize - WARNING
    - Dialect specific structure (empty diagrams, orphans, bad ids,
      self-loops, duplicate edges, dangling notes and merges)

    Args:
        text: Raw Mermaid source

    Returns:
        ValidationReport
    """
    diagram_type = detect_diagram_type(text)
    report = ValidationReport(diagram_type=diagram_type)

    if diagram_type == DiagramType.UNKNOWN:
        report.issue(
            "Could not detect diagram type. Ensure first line contains diagram "
            "declaration (flowchart, erDiagram, etc.)"
        )
        return report

    diagram = parse_diagram(text, diagram_type)
    view = graph_view(diagram)
    report.counts = {
        "nodes": len(view.nodes),
        "edges": len(view.edges),
        **diagram.report.summary(),
    }

    for outcome in diagram.report.malformed:
        report.suggest(f"Line {outcome.line_no} was not recognized and will be ignored: {outcome.text.strip()}")

    _CHECKS[diagram_type](diagram, view, report)
    return report


def validation_summary(report: ValidationReport) -> dict:
    """Counts by severity across issues and suggestions."""
    findings = report.issues + report.suggestions
    return {
        "total": len(findings),
        "errors": len([i for i in findings if i.severity == IssueSeverity.ERROR]),
        "warnings": len([i for i in findings if i.severity == IssueSeverity.WARNING]),
        "info": len([i for i in findings if i.severity == IssueSeverity.INFO]),
        "valid": report.valid,
    }
