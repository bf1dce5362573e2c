"""
Exceptions raised by the converter.

Malformed Mermaid input never raises; these are reserved for contract
violations such as handing a renderer the wrong kind of diagram.
"""


class ConversionError(ValueError):
    """Base class for converter errors."""


class UnsupportedDiagramError(ConversionError):
    """No parser, layout or generator exists for the requested diagram type."""

    def __init__(self, diagram_type: str, operation: str = "conversion"):
        self.diagram_type = diagram_type
        self.operation = operation
        super().__init__(f"Unsupported diagram type for {operation}: {diagram_type}")
