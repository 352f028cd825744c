"""
Models package for canvas_copilot

Provides Pydantic models for structured data:
- Canvas graphs (nodes, edges) proposed by a model
- Sanitization and synthesis results
- Text changes and patch results
"""

from canvas_copilot.models.graph_models import (
    GraphNode,
    GraphEdge,
    Graph,
    SanitizeStats,
    SanitizeResult,
    SynthesisResult,
    NODE_KINDS,
    SIDES,
    END_MARKERS,
)
from canvas_copilot.models.patch_models import (
    TextChange,
    PatchResult,
)

__all__ = [
    'GraphNode',
    'GraphEdge',
    'Graph',
    'SanitizeStats',
    'SanitizeResult',
    'SynthesisResult',
    'NODE_KINDS',
    'SIDES',
    'END_MARKERS',
    'TextChange',
    'PatchResult',
]
