#!/usr/bin/env python3
"""Diagram converter CLI - convert, document and validate Mermaid diagrams."""

import argparse
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from .analysis import summarize_diagram
from .config import load_config
from .conversion import convert, resolve_diagram_type
from .detection import detect_diagram_type
from .documentation import generate_markdown
from .errors import ConversionError
from .models import DiagramType
from .parsers import parse_diagram
from .rules import RULES, get_conversion_rules
from .validation import validate_mermaid, validation_summary


def _json_out(data, code=0):
    print(json.dumps(data))
    sys.exit(code)


def _error(message):
    _json_out({"status": "error", "error": message}, code=1)


def _read_source(path):
    """Read Mermaid source from a file, or stdin for "-"."""
    if path == "-":
        return sys.stdin.read()
    try:
        return Path(path).read_text(encoding="utf-8")
    except OSError as e:
        _error(f"Cannot read {path}: {e.strerror or e}")


# ── Inspection ───────────────────────────────────────────────────────────────

def cmd_detect(args):
    text = _read_source(args.input)
    _json_out({"diagram_type": detect_diagram_type(text).value})


def cmd_summarize(args):
    text = _read_source(args.input)
    diagram_type = resolve_diagram_type(text, args.type)
    if diagram_type == DiagramType.UNKNOWN:
        _error("Could not detect diagram type")
    _json_out(summarize_diagram(parse_diagram(text, diagram_type)).to_dict())


def cmd_validate(args):
    report = validate_mermaid(_read_source(args.input))
    result = report.to_dict()
    result["summary"] = validation_summary(report)
    _json_out(result)


def cmd_rules(args):
    _json_out({"diagram_type": args.type, "rules": get_conversion_rules(args.type)})


# ── Conversion ───────────────────────────────────────────────────────────────

def cmd_convert(args, config):
    text = _read_source(args.input)
    result = convert(text, args.type, config=config)
    if not result.ok:
        _error(result.notice)

    output = {
        "status": "converted",
        "diagram_type": result.diagram_type.value,
        "lines": result.lines,
    }
    if args.output:
        Path(args.output).write_text(result.xml, encoding="utf-8")
        output["output"] = args.output
    else:
        output["xml"] = result.xml
    _json_out(output)


def cmd_markdown(args):
    text = _read_source(args.input)
    diagram_type = resolve_diagram_type(text, args.type)
    markdown = generate_markdown(text, diagram_type)

    output = {"status": "generated", "diagram_type": diagram_type.value}
    if args.output:
        Path(args.output).write_text(markdown, encoding="utf-8")
        output["output"] = args.output
    else:
        output["markdown"] = markdown
    _json_out(output)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Convert Mermaid diagrams to draw.io XML and Markdown")
    sub = parser.add_subparsers(dest="command", required=True)

    def with_input(p):
        p.add_argument("input", help='Mermaid file, or "-" for stdin')
        return p

    with_input(sub.add_parser("detect"))

    p = with_input(sub.add_parser("convert"))
    p.add_argument("--type", default="auto")
    p.add_argument("--output", default=None)

    p = with_input(sub.add_parser("markdown"))
    p.add_argument("--type", default="auto")
    p.add_argument("--output", default=None)

    with_input(sub.add_parser("validate"))

    p = with_input(sub.add_parser("summarize"))
    p.add_argument("--type", default="auto")

    p = sub.add_parser("rules")
    p.add_argument("--type", default="general", choices=sorted(RULES))

    args = parser.parse_args(argv)

    try:
        config = load_config()
    except ValidationError as e:
        _error(f"Invalid configuration: {e.errors()[0]['msg']}")

    logging.basicConfig(
        level=config.log_level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    cmd_map = {
        "detect": cmd_detect,
        "convert": lambda a: cmd_convert(a, config),
        "markdown": cmd_markdown,
        "validate": cmd_validate,
        "summarize": cmd_summarize,
        "rules": cmd_rules,
    }
    try:
        cmd_map[args.command](args)
    except (ConversionError, OSError) as e:
        _error(str(e))


if __name__ == "__main__":
    main()
