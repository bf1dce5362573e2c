"""
Unit tests for diagram_converter/grammar.py
"""

from diagram_converter.grammar import (
    LineGrammar,
    LineStatus,
    ParseReport,
    TokenKind,
    rule,
    tokenize_flow_line,
)
from diagram_converter.parsers import parse_flowchart, parse_sequence_diagram


class TestTokenizeFlowLine:
    """Flowchart statement tokenizer."""

    def test_edge_with_shapes_and_label(self):
        tokens = tokenize_flow_line("A[Start] -->|go| B{Check}")
        assert [t.kind for t in tokens] == [TokenKind.NODE, TokenKind.ARROW, TokenKind.LABEL, TokenKind.NODE]
        assert tokens[0].value == "A" and tokens[0].shape == "[Start]"
        assert tokens[1].value == "-->"
        assert tokens[2].value == "go"
        assert tokens[3].value == "B" and tokens[3].shape == "{Check}"

    def test_all_arrow_glyphs(self):
        for arrow in ("-->", "---", "-.->", "==>"):
            tokens = tokenize_flow_line(f"A {arrow} B")
            assert tokens[1].kind == TokenKind.ARROW
            assert tokens[1].value == arrow

    def test_compound_shapes(self):
        assert tokenize_flow_line("S([Go])")[0].shape == "([Go])"
        assert tokenize_flow_line("C((Hub))")[0].shape == "((Hub))"
        assert tokenize_flow_line("P[[Call]]")[0].shape == "[[Call]]"

    def test_arrow_inside_label_is_not_an_arrow(self):
        tokens = tokenize_flow_line("A[x --> y]")
        assert len(tokens) == 1
        assert tokens[0].shape == "[x --> y]"

    def test_trailing_semicolon(self):
        assert len(tokenize_flow_line("A --> B;")) == 3

    def test_untokenizable_line_returns_none(self):
        assert tokenize_flow_line("A -> B") is None
        assert tokenize_flow_line("%%% ???") is None


class TestLineGrammar:
    """Ordered rule matching and ignored directives."""

    def test_first_rule_wins(self):
        grammar = LineGrammar(rules=[rule("a", r"^x"), rule("b", r"^xy")])
        name, _ = grammar.match("xyz")
        assert name == "a"

    def test_comments_are_always_ignored(self):
        grammar = LineGrammar(rules=[])
        assert grammar.ignored_by("%% note") == "comment"
        assert grammar.ignored_by("A --> B") is None


class TestParseReport:
    """Every line gets exactly one outcome."""

    def test_outcome_per_line(self):
        text = "flowchart TD\n\n%% comment\nA --> B\nstyle A fill:#f00\nthis is -> bad\n"
        report = parse_flowchart(text).report
        assert len(report.outcomes) == 6
        assert report.summary() == {"parsed": 2, "skipped": 3, "malformed": 1}

    def test_malformed_outcome_keeps_line_and_reason(self):
        report = parse_flowchart("flowchart TD\nthis is -> bad").report
        [bad] = report.malformed
        assert bad.line_no == 2
        assert bad.text == "this is -> bad"
        assert bad.status == LineStatus.MALFORMED
        assert bad.reason

    def test_skipped_rules_are_named(self):
        report = parse_sequence_diagram("sequenceDiagram\nautonumber\nloop Every minute\nend").report
        assert [o.rule for o in report.skipped] == ["directive", "block", "block"]

    def test_empty_report(self):
        assert ParseReport().summary() == {"parsed": 0, "skipped": 0, "malformed": 0}
