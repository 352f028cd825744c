"""
Canvas Copilot - reconciles LLM output with canvas graphs and document text
"""

from canvas_copilot.exceptions import ReconciliationError, ParseError, StructureError
from canvas_copilot.models import Graph, GraphNode, GraphEdge, TextChange, PatchResult

__version__ = "0.1.0"

__all__ = [
    'ReconciliationError',
    'ParseError',
    'StructureError',
    'Graph',
    'GraphNode',
    'GraphEdge',
    'TextChange',
    'PatchResult',
]
