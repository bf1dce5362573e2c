"""
Mermaid dialect parsers.

Each parser takes the full Mermaid source and returns the canonical model for
its dialect. Parsing is permissive: lines that match no rule are recorded as
malformed in the diagram's ParseReport and otherwise ignored, so a parser
never raises on bad input.

Ids referenced by a relationship but never declared are registered as
placeholder nodes, in every dialect.
"""

import logging
import re
from typing import Iterator, Optional

from .detection import detect_diagram_type
from .errors import UnsupportedDiagramError
from .grammar import (
    LineGrammar,
    LineStatus,
    ParseReport,
    TokenKind,
    FlowToken,
    iter_source_lines,
    rule,
    tokenize_flow_line,
)
from .models import (
    Activation,
    AnyDiagram,
    Branch,
    ClassAttribute,
    ClassDiagram,
    ClassMethod,
    ClassNode,
    ClassRelationship,
    Commit,
    CommitType,
    DiagramType,
    Direction,
    ErAttribute,
    ErDiagram,
    ErEntity,
    ErRelationship,
    FlowArrow,
    FlowEdge,
    FlowNode,
    FlowchartDiagram,
    GitGraphDiagram,
    Message,
    MessageType,
    MindmapDiagram,
    MindmapNode,
    NodeShape,
    Note,
    Participant,
    RelationKind,
    SequenceDiagram,
)

logger = logging.getLogger(__name__)


# --- Shared helpers ---

def _content_lines(text: str, grammar: LineGrammar, report: ParseReport) -> Iterator[tuple[int, str, str]]:
    """
    Yield (line_no, raw, stripped) for lines that need dialect parsing.

    Blank lines, comments and ignored directives are recorded as skipped here.
    """
    for line_no, raw in iter_source_lines(text):
        stripped = raw.strip()
        if not stripped:
            report.record(line_no, raw, LineStatus.SKIPPED, rule="blank")
            continue
        ignored = grammar.ignored_by(stripped)
        if ignored:
            report.record(line_no, raw, LineStatus.SKIPPED, rule=ignored)
            continue
        yield line_no, raw, stripped


def _malformed(report: ParseReport, line_no: int, raw: str, reason: str) -> None:
    logger.debug("Ignoring line %d (%s): %r", line_no, reason, raw)
    report.record(line_no, raw, LineStatus.MALFORMED, reason=reason)


def _unquote(text: str) -> str:
    text = text.strip()
    if len(text) >= 2 and text[0] == text[-1] and text[0] in "\"'":
        return text[1:-1]
    return text


def _unwrap(text: str, delimiters) -> Optional[tuple[NodeShape, str]]:
    """Match text against (open, close, shape) delimiter pairs, first match wins."""
    for opener, closer, shape in delimiters:
        if (
            text.startswith(opener)
            and text.endswith(closer)
            and len(text) >= len(opener) + len(closer)
        ):
            return shape, _unquote(text[len(opener):len(text) - len(closer)])
    return None


# ============================================================================
# FLOWCHART
# ============================================================================

FLOW_SHAPE_DELIMITERS = (
    ("([", "])", NodeShape.STADIUM),
    ("((", "))", NodeShape.CIRCLE),
    ("[[", "]]", NodeShape.SUBROUTINE),
    ("[", "]", NodeShape.RECTANGLE),
    ("(", ")", NodeShape.ROUNDED),
    ("{", "}", NodeShape.DIAMOND),
)

_DIRECTION = r"(?P<direction>TD|TB|LR|RL|BT)"

FLOWCHART_GRAMMAR = LineGrammar(
    rules=[
        rule("header", rf"^(?:flowchart|graph)\b(?:\s+{_DIRECTION})?\s*;?\s*$", re.IGNORECASE),
        rule("direction", rf"^direction\s+{_DIRECTION}\s*$", re.IGNORECASE),
    ],
    ignored=[
        rule("style", r"^(?:style|classDef|class|linkStyle|click)\b"),
        rule("subgraph", r"^(?:subgraph\b|end\s*$)"),
        rule("title", r"^(?:title|accTitle|accDescr)\b"),
    ],
)


def detect_shape(shape_text: str) -> tuple[NodeShape, Optional[str]]:
    """
    Infer a flowchart node shape from its bracket pair.

    Returns:
        (shape, label) - label is None when there is no bracketed text
    """
    if not shape_text:
        return NodeShape.RECTANGLE, None
    found = _unwrap(shape_text, FLOW_SHAPE_DELIMITERS)
    if found is None:
        return NodeShape.RECTANGLE, None
    return found


def _register_flow_node(diagram: FlowchartDiagram, token: FlowToken) -> None:
    """Add a node, or update its shape/label when re-declared with brackets."""
    shape, label = detect_shape(token.shape)
    existing = diagram.nodes.get(token.value)
    if existing is None:
        diagram.nodes[token.value] = FlowNode(
            id=token.value,
            label=label if label is not None else token.value,
            shape=shape,
        )
    elif token.shape:
        existing.shape = shape
        existing.label = label if label is not None else existing.label


def _flow_statement(diagram: FlowchartDiagram, tokens: list[FlowToken]) -> Optional[str]:
    """Apply a tokenized statement. Returns a reason string if it is malformed."""
    if tokens[0].kind != TokenKind.NODE:
        return "statement must start with a node"

    segments: list[tuple[FlowToken, str, Optional[str], FlowToken]] = []
    previous = tokens[0]
    i = 1
    while i < len(tokens):
        if tokens[i].kind != TokenKind.ARROW:
            return "expected an arrow"
        arrow = tokens[i].value
        i += 1
        label = None
        if i < len(tokens) and tokens[i].kind == TokenKind.LABEL:
            label = tokens[i].value or None
            i += 1
        if i >= len(tokens) or tokens[i].kind != TokenKind.NODE:
            return "arrow without a target node"
        segments.append((previous, arrow, label, tokens[i]))
        previous = tokens[i]
        i += 1

    if not segments:
        _register_flow_node(diagram, tokens[0])
        return None

    for source, arrow, label, target in segments:
        _register_flow_node(diagram, source)
        _register_flow_node(diagram, target)
        diagram.edges.append(FlowEdge(
            source=source.value,
            target=target.value,
            label=label,
            arrow=FlowArrow(arrow),
        ))
    return None


def parse_flowchart(text: str) -> FlowchartDiagram:
    """Parse `flowchart`/`graph` source into a FlowchartDiagram."""
    diagram = FlowchartDiagram()
    report = diagram.report

    for line_no, raw, line in _content_lines(text, FLOWCHART_GRAMMAR, report):
        matched = FLOWCHART_GRAMMAR.match(line)
        if matched:
            name, m = matched
            if m.group("direction"):
                diagram.direction = Direction(m.group("direction").upper())
            report.record(line_no, raw, LineStatus.PARSED, rule=name)
            continue

        tokens = tokenize_flow_line(line)
        if tokens is None:
            _malformed(report, line_no, raw, "unrecognized flowchart statement")
            continue

        reason = _flow_statement(diagram, tokens)
        if reason:
            _malformed(report, line_no, raw, reason)
        else:
            statement = "edge" if any(t.kind == TokenKind.ARROW for t in tokens) else "node"
            report.record(line_no, raw, LineStatus.PARSED, rule=statement)

    return diagram


# ============================================================================
# ER DIAGRAM
# ============================================================================

CARDINALITIES = ("||", "|o", "o|", "}|", "|{", "}o", "o{")
_CARD = "|".join(re.escape(c) for c in CARDINALITIES)

ER_GRAMMAR = LineGrammar(
    rules=[
        rule("header", r"^erDiagram\b", re.IGNORECASE),
        rule(
            "relationship",
            rf"^(?P<source>[\w-]+)\s+(?P<left>{_CARD})\s*(?P<line>--|\.\.)\s*(?P<right>{_CARD})"
            rf"\s+(?P<target>[\w-]+)\s*:\s*(?P<label>.+)$",
        ),
        rule("entity_empty", r"^(?P<name>[\w-]+)\s*\{\s*\}$"),
        rule("entity_start", r"^(?P<name>[\w-]+)\s*\{$"),
        rule("entity", r"^(?P<name>[\w-]+)$"),
    ],
    ignored=[
        rule("style", r"^(?:style|classDef|class|direction)\b"),
        rule("title", r"^(?:title|accTitle|accDescr)\b"),
    ],
)

ER_ATTRIBUTE_RULE = rule(
    "attribute",
    r'^(?P<type>[\w\[\]()<>,.~-]+)\s+(?P<name>[\w-]+)'
    r'(?:\s+(?P<keys>(?:PK|FK|UK)(?:\s*,\s*(?:PK|FK|UK))*))?'
    r'(?:\s+"(?P<comment>[^"]*)")?\s*$',
)


def _ensure_entity(diagram: ErDiagram, name: str) -> ErEntity:
    if name not in diagram.entities:
        diagram.entities[name] = ErEntity(name=name)
    return diagram.entities[name]


def parse_er_diagram(text: str) -> ErDiagram:
    """Parse `erDiagram` source into an ErDiagram."""
    diagram = ErDiagram()
    report = diagram.report
    current: Optional[ErEntity] = None

    for line_no, raw, line in _content_lines(text, ER_GRAMMAR, report):
        if current is not None:
            if line == "}":
                current = None
                report.record(line_no, raw, LineStatus.PARSED, rule="entity_end")
                continue
            m = ER_ATTRIBUTE_RULE.match(line)
            if m:
                current.attributes.append(ErAttribute(
                    type=m.group("type"),
                    name=m.group("name"),
                    constraint=m.group("keys"),
                    comment=m.group("comment"),
                ))
                report.record(line_no, raw, LineStatus.PARSED, rule="attribute")
            else:
                _malformed(report, line_no, raw, f"unrecognized attribute in {current.name}")
            continue

        matched = ER_GRAMMAR.match(line)
        if not matched:
            _malformed(report, line_no, raw, "unrecognized ER statement")
            continue

        name, m = matched
        if name == "relationship":
            _ensure_entity(diagram, m.group("source"))
            _ensure_entity(diagram, m.group("target"))
            diagram.relationships.append(ErRelationship(
                source=m.group("source"),
                target=m.group("target"),
                source_cardinality=m.group("left"),
                target_cardinality=m.group("right"),
                label=_unquote(m.group("label")),
                identifying=m.group("line") == "--",
            ))
        elif name == "entity_start":
            current = _ensure_entity(diagram, m.group("name"))
        elif name in ("entity", "entity_empty"):
            _ensure_entity(diagram, m.group("name"))
        report.record(line_no, raw, LineStatus.PARSED, rule=name)

    return diagram


# ============================================================================
# SEQUENCE DIAGRAM
# ============================================================================

SEQUENCE_ARROWS = ("-->>", "->>", "--x", "-x", "--)", "-)", "-->", "->")
_SEQ_ARROW = "|".join(re.escape(a) for a in SEQUENCE_ARROWS)

SEQUENCE_GRAMMAR = LineGrammar(
    rules=[
        rule("header", r"^sequenceDiagram\b", re.IGNORECASE),
        rule(
            "participant",
            r"^(?:create\s+)?(?P<kind>participant|actor)\s+(?P<id>\w+)(?:\s+as\s+(?P<alias>.+))?$",
            re.IGNORECASE,
        ),
        rule(
            "note",
            r"^note\s+(?P<position>right of|left of|over)\s+(?P<participants>[^:]+?)\s*:\s*(?P<text>.*)$",
            re.IGNORECASE,
        ),
        rule("activation", r"^(?P<action>activate|deactivate)\s+(?P<id>\w+)$", re.IGNORECASE),
        rule(
            "message",
            rf"^(?P<source>\w+)\s*(?P<arrow>{_SEQ_ARROW})\s*(?P<mark>[+-]?)\s*(?P<target>\w+)\s*:\s*(?P<text>.*)$",
        ),
    ],
    ignored=[
        rule(
            "block",
            r"^(?:loop|alt|else|opt|par|and|critical|option|break|rect|box|end)\b",
            re.IGNORECASE,
        ),
        rule("directive", r"^(?:autonumber|title|accTitle|accDescr|destroy|links?|properties|details)\b", re.IGNORECASE),
    ],
)


def message_type_for(arrow: str) -> MessageType:
    """Classify a sequence arrow: dashed arrows are async, solid cross/open heads are lost/create."""
    if arrow.startswith("--"):
        return MessageType.ASYNC
    if arrow.endswith("x"):
        return MessageType.LOST
    if arrow.endswith(")"):
        return MessageType.CREATE
    return MessageType.SYNC


def _ensure_participant(diagram: SequenceDiagram, participant_id: str) -> Participant:
    if participant_id not in diagram.participants:
        diagram.participants[participant_id] = Participant(
            id=participant_id,
            label=participant_id,
            order=len(diagram.participants),
        )
    return diagram.participants[participant_id]


def parse_sequence_diagram(text: str) -> SequenceDiagram:
    """Parse `sequenceDiagram` source into a SequenceDiagram."""
    diagram = SequenceDiagram()
    report = diagram.report
    row = 0

    for line_no, raw, line in _content_lines(text, SEQUENCE_GRAMMAR, report):
        matched = SEQUENCE_GRAMMAR.match(line)
        if not matched:
            _malformed(report, line_no, raw, "unrecognized sequence statement")
            continue

        name, m = matched
        if name == "participant":
            participant = _ensure_participant(diagram, m.group("id"))
            participant.kind = m.group("kind").lower()
            if m.group("alias"):
                participant.label = m.group("alias").strip()
        elif name == "note":
            diagram.notes.append(Note(
                position=m.group("position").lower(),
                participants=[p.strip() for p in m.group("participants").split(",") if p.strip()],
                text=m.group("text").strip(),
                row=row,
            ))
            row += 1
        elif name == "activation":
            action = m.group("action").lower()
            # activate applies from the next row, deactivate after the last one
            diagram.activations.append(Activation(
                action=action,
                participant=m.group("id"),
                row=row if action == "activate" else max(row - 1, 0),
            ))
        elif name == "message":
            source, target, arrow = m.group("source"), m.group("target"), m.group("arrow")
            _ensure_participant(diagram, source)
            _ensure_participant(diagram, target)
            diagram.messages.append(Message(
                source=source,
                target=target,
                text=m.group("text").strip(),
                type=message_type_for(arrow),
                arrow=arrow,
                row=row,
            ))
            if m.group("mark") == "+":
                diagram.activations.append(Activation(action="activate", participant=target, row=row))
            elif m.group("mark") == "-":
                diagram.activations.append(Activation(action="deactivate", participant=source, row=row))
            row += 1
        report.record(line_no, raw, LineStatus.PARSED, rule=name)

    return diagram


# ============================================================================
# CLASS DIAGRAM
# ============================================================================

# glyph -> (kind, marker drawn at the source end)
RELATION_GLYPHS: dict[str, tuple[RelationKind, bool]] = {
    "<|--": (RelationKind.INHERITANCE, True),
    "--|>": (RelationKind.INHERITANCE, False),
    "<|..": (RelationKind.REALIZATION, True),
    "..|>": (RelationKind.REALIZATION, False),
    "*--": (RelationKind.COMPOSITION, True),
    "--*": (RelationKind.COMPOSITION, False),
    "o--": (RelationKind.AGGREGATION, True),
    "--o": (RelationKind.AGGREGATION, False),
    "<--": (RelationKind.ASSOCIATION, True),
    "-->": (RelationKind.ASSOCIATION, False),
    "--": (RelationKind.ASSOCIATION, False),
    "<..": (RelationKind.DEPENDENCY, True),
    "..>": (RelationKind.DEPENDENCY, False),
    "..": (RelationKind.DEPENDENCY, False),
}
# Longest glyphs first so "<|--" is not read as "<--"
_REL = "|".join(re.escape(g) for g in sorted(RELATION_GLYPHS, key=len, reverse=True))

CLASS_GRAMMAR = LineGrammar(
    rules=[
        rule("header", r"^classDiagram(?:-v2)?\b", re.IGNORECASE),
        rule(
            "class_start",
            r"^class\s+(?P<name>\w+)(?:~[^~]+~)?(?:\[\"[^\"]*\"\])?\s*(?P<brace>\{)?\s*(?P<close>\})?$",
        ),
        rule("annotation", r"^<<(?P<stereotype>[^>]+)>>\s*(?P<name>\w+)$"),
        rule(
            "relationship",
            rf'^(?P<source>\w+)\s+(?:"[^"]*"\s+)?(?P<glyph>{_REL})\s+(?:"[^"]*"\s+)?(?P<target>\w+)'
            r"(?:\s*:\s*(?P<label>.+))?$",
        ),
        rule("member", r"^(?P<name>\w+)\s*:\s*(?P<member>.+)$"),
    ],
    ignored=[
        rule("style", r"^(?:style|classDef|cssClass|click|callback|link|direction)\b"),
        rule("namespace", r"^(?:namespace\b|\}$)"),
        rule("note", r"^note\b", re.IGNORECASE),
        rule("title", r"^(?:title|accTitle|accDescr)\b"),
    ],
)

_CLASS_BLOCK_END = rule("class_end", r"^\}$")
_CLASS_BLOCK_ANNOTATION = rule("annotation", r"^<<(?P<stereotype>[^>]+)>>$")
_METHOD_RE = re.compile(r"^(?P<name>[\w$*]+)\s*\((?P<params>[^)]*)\)\s*(?P<rest>.*)$")
_GENERIC_RE = re.compile(r"~([^~]+)~")


def _generic(type_text: str) -> str:
    """Mermaid writes generics as List~int~."""
    return _GENERIC_RE.sub(r"<\1>", type_text)


def parse_class_member(text: str) -> Optional[ClassAttribute | ClassMethod]:
    """
    Parse one class body line.

    Accepts `+name(params) : Type`, `+name(params) Type`, `+name : Type`
    and `+Type name`. Static/abstract classifiers ($, *) are dropped.
    """
    text = text.strip().rstrip(";").strip()
    visibility = "+"
    if text[:1] in ("+", "-", "#", "~"):
        visibility = text[0]
        text = text[1:].strip()
    if not text:
        return None

    m = _METHOD_RE.match(text)
    if m:
        rest = m.group("rest").strip().strip("$*").strip()
        if rest.startswith(":"):
            rest = rest[1:].strip()
        return ClassMethod(
            visibility=visibility,
            name=m.group("name").strip("$*"),
            params=_generic(m.group("params").strip()),
            return_type=_generic(rest) or "void",
        )

    if ":" in text:
        name, _, type_text = text.partition(":")
        name = name.strip().strip("$*")
        if not name:
            return None
        return ClassAttribute(visibility=visibility, name=name, type=_generic(type_text.strip()))

    parts = text.split()
    if len(parts) == 1:
        return ClassAttribute(visibility=visibility, name=parts[0].strip("$*"))
    if len(parts) == 2:
        return ClassAttribute(visibility=visibility, name=parts[1].strip("$*"), type=_generic(parts[0]))
    return None


def _ensure_class(diagram: ClassDiagram, name: str) -> ClassNode:
    if name not in diagram.classes:
        diagram.classes[name] = ClassNode(name=name)
    return diagram.classes[name]


def _add_member(cls: ClassNode, member: ClassAttribute | ClassMethod) -> None:
    if isinstance(member, ClassMethod):
        cls.methods.append(member)
    else:
        cls.attributes.append(member)


def parse_class_diagram(text: str) -> ClassDiagram:
    """Parse `classDiagram` source into a ClassDiagram."""
    diagram = ClassDiagram()
    report = diagram.report
    current: Optional[ClassNode] = None

    for line_no, raw, line in _content_lines(text, CLASS_GRAMMAR, report):
        if current is not None:
            if _CLASS_BLOCK_END.match(line):
                current = None
                report.record(line_no, raw, LineStatus.PARSED, rule="class_end")
                continue
            m = _CLASS_BLOCK_ANNOTATION.match(line)
            if m:
                current.stereotype = m.group("stereotype").strip().lower()
                report.record(line_no, raw, LineStatus.PARSED, rule="annotation")
                continue
            member = parse_class_member(line)
            if member is None:
                _malformed(report, line_no, raw, f"unrecognized member in {current.name}")
            else:
                _add_member(current, member)
                report.record(line_no, raw, LineStatus.PARSED, rule="member")
            continue

        matched = CLASS_GRAMMAR.match(line)
        if not matched:
            _malformed(report, line_no, raw, "unrecognized class statement")
            continue

        name, m = matched
        if name == "class_start":
            cls = _ensure_class(diagram, m.group("name"))
            if m.group("brace") and not m.group("close"):
                current = cls
        elif name == "annotation":
            _ensure_class(diagram, m.group("name")).stereotype = m.group("stereotype").strip().lower()
        elif name == "relationship":
            kind, marker_at_source = RELATION_GLYPHS[m.group("glyph")]
            _ensure_class(diagram, m.group("source"))
            _ensure_class(diagram, m.group("target"))
            label = m.group("label")
            diagram.relationships.append(ClassRelationship(
                source=m.group("source"),
                target=m.group("target"),
                kind=kind,
                label=label.strip() if label else None,
                arrow=m.group("glyph"),
                marker_at_source=marker_at_source,
            ))
        elif name == "member":
            member = parse_class_member(m.group("member"))
            if member is None:
                _malformed(report, line_no, raw, "unrecognized member")
                continue
            _add_member(_ensure_class(diagram, m.group("name")), member)
        report.record(line_no, raw, LineStatus.PARSED, rule=name)

    return diagram


# ============================================================================
# MINDMAP
# ============================================================================

MINDMAP_SHAPE_DELIMITERS = (
    ("((", "))", NodeShape.CIRCLE),
    ("{{", "}}", NodeShape.HEXAGON),
    ("))", "((", NodeShape.CLOUD),
    ("(", ")", NodeShape.ROUNDED),
    ("[", "]", NodeShape.RECTANGLE),
    (")", "(", NodeShape.CLOUD),
)

MINDMAP_GRAMMAR = LineGrammar(
    rules=[rule("header", r"^mindmap\s*$", re.IGNORECASE)],
    ignored=[rule("decoration", r"^(?:::icon\(|:::)")],
)

_MINDMAP_ID_PREFIX = re.compile(r"^[\w-]+(?=[(\[{)])")
INDENT_WIDTH = 2


def parse_mindmap_node_text(text: str) -> tuple[NodeShape, str]:
    """Return (shape, label) for a mindmap line, with an optional id prefix."""
    candidates = [text]
    prefix = _MINDMAP_ID_PREFIX.match(text)
    if prefix:
        candidates.insert(0, text[prefix.end():])
    for candidate in candidates:
        found = _unwrap(candidate, MINDMAP_SHAPE_DELIMITERS)
        if found and found[1]:
            return found
    return NodeShape.DEFAULT, text


def parse_mindmap(text: str) -> MindmapDiagram:
    """
    Parse `mindmap` source into an arena-backed tree.

    Indentation (tabs count as one level) defines nesting. A node's parent is
    the closest preceding node with a smaller indent; lines that dedent past
    the root attach to the root.
    """
    diagram = MindmapDiagram()
    report = diagram.report
    indents: list[int] = []
    ancestors: list[int] = []

    for line_no, raw, line in _content_lines(text, MINDMAP_GRAMMAR, report):
        if not diagram.nodes and MINDMAP_GRAMMAR.match(line):
            report.record(line_no, raw, LineStatus.PARSED, rule="header")
            continue

        expanded = raw.expandtabs(INDENT_WIDTH)
        indent = (len(expanded) - len(expanded.lstrip())) // INDENT_WIDTH
        shape, label = parse_mindmap_node_text(line)

        while ancestors and indents[ancestors[-1]] >= indent:
            ancestors.pop()

        index = len(diagram.nodes)
        reason = None
        if ancestors:
            parent: Optional[int] = ancestors[-1]
        elif diagram.nodes:
            parent = 0
            ancestors.append(0)
            reason = "second top-level node attached to the root"
        else:
            parent = None

        node = MindmapNode(
            id=f"node{index}",
            label=label,
            shape=shape,
            level=0 if parent is None else diagram.nodes[parent].level + 1,
            parent=parent,
        )
        if parent is not None:
            diagram.nodes[parent].children.append(index)
        diagram.nodes.append(node)
        indents.append(indent)
        ancestors.append(index)
        report.record(line_no, raw, LineStatus.PARSED, rule="node", reason=reason)

    return diagram


# ============================================================================
# GIT GRAPH
# ============================================================================

_BRANCH_NAME = r"(?P<name>[\w/.\-]+)"

GITGRAPH_GRAMMAR = LineGrammar(
    rules=[
        rule("header", r"^gitGraph\b", re.IGNORECASE),
        rule("commit", r"^commit\b(?P<options>.*)$", re.IGNORECASE),
        rule("branch", rf"^branch\s+{_BRANCH_NAME}(?P<options>.*)$", re.IGNORECASE),
        rule("checkout", rf"^(?:checkout|switch)\s+{_BRANCH_NAME}\s*$", re.IGNORECASE),
        rule("merge", rf"^merge\s+{_BRANCH_NAME}(?P<options>.*)$", re.IGNORECASE),
    ],
    ignored=[rule("cherry_pick", r"^cherry-pick\b", re.IGNORECASE)],
)

_OPTION_RE = re.compile(r'(?P<key>\w+)\s*:\s*(?:"(?P<quoted>[^"]*)"|(?P<bare>\S+))')
DEFAULT_BRANCH = "main"


def parse_commit_options(text: str) -> dict[str, str]:
    """Parse `id: "x" tag: "v1" type: HIGHLIGHT` in any order."""
    options = {}
    for m in _OPTION_RE.finditer(text):
        value = m.group("quoted") if m.group("quoted") is not None else m.group("bare")
        options[m.group("key").lower()] = value
    return options


def _head(diagram: GitGraphDiagram, branch: str) -> Optional[str]:
    """Most recent commit on a branch, falling back to its base commit."""
    entry = diagram.branches.get(branch)
    if entry is None:
        return None
    return entry.commits[-1] if entry.commits else entry.base_commit


def _commit_type(value: Optional[str]) -> CommitType:
    try:
        return CommitType((value or CommitType.NORMAL.value).upper())
    except ValueError:
        return CommitType.NORMAL


def parse_gitgraph(text: str) -> GitGraphDiagram:
    """Parse `gitGraph` source into a GitGraphDiagram."""
    diagram = GitGraphDiagram()
    diagram.branches[DEFAULT_BRANCH] = Branch(name=DEFAULT_BRANCH)
    report = diagram.report
    current = DEFAULT_BRANCH
    counter = 0
    used_ids: set[str] = set()

    def unique(commit_id: str) -> str:
        candidate = commit_id
        suffix = 2
        while candidate in used_ids:
            candidate = f"{commit_id}_{suffix}"
            suffix += 1
        used_ids.add(candidate)
        return candidate

    def register_branch(name: str, declared: bool) -> Branch:
        branch = Branch(
            name=name,
            parent_branch=current,
            base_commit=_head(diagram, current),
            declared=declared,
        )
        diagram.branches[name] = branch
        return branch

    for line_no, raw, line in _content_lines(text, GITGRAPH_GRAMMAR, report):
        matched = GITGRAPH_GRAMMAR.match(line)
        if not matched:
            _malformed(report, line_no, raw, "unrecognized git graph statement")
            continue

        name, m = matched
        reason = None
        if name == "commit":
            options = parse_commit_options(m.group("options"))
            if "id" in options:
                commit_id = options["id"]
            else:
                commit_id = f"c{counter}"
                counter += 1
            commit = Commit(
                id=unique(commit_id),
                branch=current,
                type=_commit_type(options.get("type")),
                tag=options.get("tag"),
            )
            diagram.commits.append(commit)
            diagram.branches[current].commits.append(commit.id)
        elif name == "branch":
            branch_name = m.group("name")
            if branch_name in diagram.branches:
                reason = "branch already exists"
            else:
                register_branch(branch_name, declared=True)
            current = branch_name
        elif name == "checkout":
            branch_name = m.group("name")
            if branch_name not in diagram.branches:
                register_branch(branch_name, declared=False)
                reason = "checkout of undeclared branch"
            current = branch_name
        elif name == "merge":
            options = parse_commit_options(m.group("options"))
            commit = Commit(
                id=unique(options.get("id") or f"merge_{counter}"),
                branch=current,
                type=CommitType.MERGE,
                tag=options.get("tag"),
                merge_from=m.group("name"),
            )
            counter += 1
            diagram.commits.append(commit)
            diagram.branches[current].commits.append(commit.id)
        report.record(line_no, raw, LineStatus.PARSED, rule=name, reason=reason)

    return diagram


PARSERS = {
    DiagramType.FLOWCHART: parse_flowchart,
    DiagramType.ER: parse_er_diagram,
    DiagramType.SEQUENCE: parse_sequence_diagram,
    DiagramType.CLASS: parse_class_diagram,
    DiagramType.MINDMAP: parse_mindmap,
    DiagramType.GITGRAPH: parse_gitgraph,
}


def parse_diagram(text: str, diagram_type: Optional[DiagramType] = None) -> AnyDiagram:
    """
    Parse Mermaid source with the parser for its dialect.

    Raises:
        UnsupportedDiagramError: the dialect is unknown
    """
    if diagram_type is None:
        diagram_type = detect_diagram_type(text)
    parser = PARSERS.get(diagram_type)
    if parser is None:
        raise UnsupportedDiagramError(diagram_type.value, "parsing")
    return parser(text)
