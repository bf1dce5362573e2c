"""
draw.io (mxGraph) XML serialization.

Cells are small dataclasses that know how to write themselves; wrap_document()
puts them into the <mxfile> envelope with the two boilerplate root cells.
"""

import uuid
from collections import defaultdict
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Union
from xml.sax.saxutils import escape

from .geometry import Geometry, Point, format_number

RESERVED_IDS = ("0", "1")
ROOT_PARENT = "1"
AGENT = "diagram-converter"
DRAWIO_VERSION = "21.0.0"

_ENTITIES = {'"': "&quot;", "'": "&apos;", "\n": "&#10;"}


def escape_xml(text: Optional[str]) -> str:
    """Escape the five XML metacharacters; newlines become &#10;."""
    if not text:
        return ""
    return escape(text.replace("\r\n", "\n"), _ENTITIES)


def _point(point: Point, role: Optional[str] = None) -> str:
    role_attr = f' as="{role}"' if role else ""
    return f'<mxPoint x="{format_number(point.x)}" y="{format_number(point.y)}"{role_attr}/>'


@dataclass
class VertexCell:
    id: str
    style: str
    geometry: Geometry
    value: str = ""
    parent: str = ROOT_PARENT

    def to_xml(self, indent: str = "        ") -> str:
        g = self.geometry
        return (
            f'{indent}<mxCell id="{escape_xml(self.id)}" value="{escape_xml(self.value)}" '
            f'style="{escape_xml(self.style)}" vertex="1" parent="{escape_xml(self.parent)}">\n'
            f'{indent}  <mxGeometry x="{format_number(g.x)}" y="{format_number(g.y)}" '
            f'width="{format_number(g.width)}" height="{format_number(g.height)}" as="geometry"/>\n'
            f"{indent}</mxCell>"
        )


@dataclass
class EdgeCell:
    """
    An edge between two cells, or a free-floating edge between two points
    (source_point/target_point) when source/target are None.
    """
    id: str
    style: str
    source: Optional[str] = None
    target: Optional[str] = None
    value: str = ""
    parent: str = ROOT_PARENT
    waypoints: tuple[Point, ...] = ()
    source_point: Optional[Point] = None
    target_point: Optional[Point] = None
    label_offset: Optional[Point] = None

    def to_xml(self, indent: str = "        ") -> str:
        attrs = f'id="{escape_xml(self.id)}" value="{escape_xml(self.value)}" style="{escape_xml(self.style)}" edge="1" parent="{escape_xml(self.parent)}"'
        if self.source is not None:
            attrs += f' source="{escape_xml(self.source)}"'
        if self.target is not None:
            attrs += f' target="{escape_xml(self.target)}"'

        inner = []
        if self.source_point is not None:
            inner.append(_point(self.source_point, "sourcePoint"))
        if self.target_point is not None:
            inner.append(_point(self.target_point, "targetPoint"))
        if self.waypoints:
            inner.append('<Array as="points">')
            inner.extend("  " + _point(p) for p in self.waypoints)
            inner.append("</Array>")
        if self.label_offset is not None:
            inner.append(_point(self.label_offset, "offset"))

        lines = [f"{indent}<mxCell {attrs}>"]
        if inner:
            lines.append(f'{indent}  <mxGeometry relative="1" as="geometry">')
            lines.extend(f"{indent}    {line}" for line in inner)
            lines.append(f"{indent}  </mxGeometry>")
        else:
            lines.append(f'{indent}  <mxGeometry relative="1" as="geometry"/>')
        lines.append(f"{indent}</mxCell>")
        return "\n".join(lines)


Cell = Union[VertexCell, EdgeCell]


class CellIdRegistry:
    """
    Hands out unique cell ids for one document.

    Model ids are used as cell ids when possible. An id that clashes with the
    reserved root cells or an id already handed out gets a numeric suffix;
    resolve() maps a model id to the cell id it was given.
    """

    def __init__(self):
        self._used: set[str] = set(RESERVED_IDS)
        self._nodes: dict[str, str] = {}
        self._counters: dict[str, int] = defaultdict(lambda: 2)

    def claim(self, wanted: str) -> str:
        wanted = wanted or "cell"
        candidate = wanted
        suffix = 2
        while candidate in self._used:
            candidate = f"{wanted}_{suffix}"
            suffix += 1
        self._used.add(candidate)
        return candidate

    def node(self, model_id: str) -> str:
        """Claim a cell id for a model node and remember the mapping."""
        cell_id = self.claim(model_id)
        self._nodes.setdefault(model_id, cell_id)
        return cell_id

    def resolve(self, model_id: Optional[str]) -> Optional[str]:
        if model_id is None:
            return None
        return self._nodes.get(model_id)

    def next(self, prefix: str) -> str:
        """Generated id such as e2, e3... (never clashing with model ids)."""
        while True:
            candidate = f"{prefix}{self._counters[prefix]}"
            self._counters[prefix] += 1
            if candidate not in self._used:
                self._used.add(candidate)
                return candidate


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def wrap_document(
    name: str,
    cells: list[Cell],
    width: float = 850,
    height: float = 1100,
    diagram_id: Optional[str] = None,
    modified: Optional[str] = None,
) -> str:
    """
    Wrap cells in a complete draw.io document.

    Args:
        name: Diagram (page) name
        cells: Vertex and edge cells, written in order
        width, height: Page size
        diagram_id: Page id, a fresh random id when omitted
        modified: ISO timestamp, now when omitted

    Returns:
        The XML document as a string
    """
    diagram_id = diagram_id or f"diagram-{uuid.uuid4().hex}"
    modified = modified or _timestamp()
    body = "\n".join(cell.to_xml() for cell in cells)
    if body:
        body += "\n"

    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f'<mxfile host="app.diagrams.net" modified="{escape_xml(modified)}" agent="{AGENT}" version="{DRAWIO_VERSION}">\n'
        f'  <diagram name="{escape_xml(name)}" id="{escape_xml(diagram_id)}">\n'
        '    <mxGraphModel dx="1000" dy="600" grid="1" gridSize="10" guides="1" tooltips="1" '
        'connect="1" arrows="1" fold="1" page="1" pageScale="1" '
        f'pageWidth="{format_number(width)}" pageHeight="{format_number(height)}" math="0" shadow="0">\n'
        "      <root>\n"
        '        <mxCell id="0"/>\n'
        '        <mxCell id="1" parent="0"/>\n'
        f"{body}"
        "      </root>\n"
        "    </mxGraphModel>\n"
        "  </diagram>\n"
        "</mxfile>"
    )
