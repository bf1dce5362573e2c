"""
Line grammar - Explicit line matching with inspectable outcomes.

Mermaid sources are parsed line by line. Instead of silently ignoring lines
that match nothing, every line gets a LineOutcome:
- parsed: a grammar rule consumed it
- skipped: blank, comment, header or a directive we deliberately ignore
- malformed: nothing matched (still ignored, but recorded)

The flowchart dialect also has a small tokenizer, because edge statements
mix node references, arrows and labels on one line.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional

from pydantic import BaseModel, Field


class LineStatus(str, Enum):
    """What happened to a source line."""
    PARSED = "parsed"
    SKIPPED = "skipped"
    MALFORMED = "malformed"


class LineOutcome(BaseModel):
    """Outcome for a single source line (1-based line numbers)."""
    line_no: int
    text: str
    status: LineStatus
    rule: Optional[str] = None
    reason: Optional[str] = None


class ParseReport(BaseModel):
    """All line outcomes collected while parsing one diagram."""
    outcomes: list[LineOutcome] = Field(default_factory=list)

    def record(
        self,
        line_no: int,
        text: str,
        status: LineStatus,
        rule: Optional[str] = None,
        reason: Optional[str] = None,
    ) -> LineOutcome:
        outcome = LineOutcome(
            line_no=line_no, text=text, status=status, rule=rule, reason=reason
        )
        self.outcomes.append(outcome)
        return outcome

    def _with_status(self, status: LineStatus) -> list[LineOutcome]:
        return [o for o in self.outcomes if o.status == status]

    @property
    def parsed(self) -> list[LineOutcome]:
        return self._with_status(LineStatus.PARSED)

    @property
    def skipped(self) -> list[LineOutcome]:
        return self._with_status(LineStatus.SKIPPED)

    @property
    def malformed(self) -> list[LineOutcome]:
        return self._with_status(LineStatus.MALFORMED)

    def summary(self) -> dict:
        return {
            "parsed": len(self.parsed),
            "skipped": len(self.skipped),
            "malformed": len(self.malformed),
        }


@dataclass(frozen=True)
class LineRule:
    """A named regular expression matched against a stripped line."""
    name: str
    pattern: re.Pattern

    def match(self, text: str) -> Optional[re.Match]:
        return self.pattern.match(text)


def rule(name: str, pattern: str, flags: int = 0) -> LineRule:
    return LineRule(name, re.compile(pattern, flags))


COMMENT_RULE = rule("comment", r"^%%")


class LineGrammar:
    """
    Ordered set of rules for one dialect.

    `rules` are tried first to last; the first match wins. `ignored` rules
    recognize directives that are valid Mermaid but have no counterpart in the
    converter (styling, click handlers, titles...). They produce a skipped
    outcome rather than a malformed one.
    """

    def __init__(self, rules: list[LineRule], ignored: Optional[list[LineRule]] = None):
        self.rules = tuple(rules)
        self.ignored = (COMMENT_RULE,) + tuple(ignored or ())

    def match(self, text: str) -> Optional[tuple[str, re.Match]]:
        for candidate in self.rules:
            m = candidate.match(text)
            if m:
                return candidate.name, m
        return None

    def ignored_by(self, text: str) -> Optional[str]:
        for candidate in self.ignored:
            if candidate.match(text):
                return candidate.name
        return None


def iter_source_lines(text: str) -> Iterator[tuple[int, str]]:
    """Yield (line_no, raw_line) for every line of the source, 1-based."""
    for line_no, raw in enumerate(text.splitlines(), start=1):
        yield line_no, raw


# --- Flowchart tokenizer ---

class TokenKind(str, Enum):
    NODE = "node"
    ARROW = "arrow"
    LABEL = "label"


@dataclass(frozen=True)
class FlowToken:
    kind: TokenKind
    value: str           # node id, arrow glyph or label text
    shape: str = ""      # raw bracketed shape text for NODE tokens


_FLOW_TOKEN_RE = re.compile(
    r"""
    \s*(?:
        (?P<arrow>-\.->|-->|---|==>)
      | \|(?P<label>[^|]*)\|
      | (?P<id>\w+)
        (?P<shape>\(\[.*?\]\)|\(\(.*?\)\)|\[\[.*?\]\]|\[.*?\]|\(.*?\)|\{.*?\})?
    )
    """,
    re.VERBOSE,
)


def tokenize_flow_line(text: str) -> Optional[list[FlowToken]]:
    """
    Split a flowchart statement into NODE, ARROW and LABEL tokens.

    Returns None when some part of the line is not a valid token, so the
    caller can record the line as malformed.
    """
    text = text.strip().rstrip(";").rstrip()
    tokens: list[FlowToken] = []
    pos = 0
    while pos < len(text):
        m = _FLOW_TOKEN_RE.match(text, pos)
        if not m or m.end() == pos:
            return None
        if m.group("arrow"):
            tokens.append(FlowToken(TokenKind.ARROW, m.group("arrow")))
        elif m.group("label") is not None:
            tokens.append(FlowToken(TokenKind.LABEL, m.group("label").strip()))
        else:
            tokens.append(FlowToken(TokenKind.NODE, m.group("id"), m.group("shape") or ""))
        pos = m.end()
    return tokens or None
