"""
Graph Validator - Turn a decoded payload into a typed Graph

Structural problems (missing arrays, missing ids, coordinates or extents)
raise StructureError so that a half-populated graph never reaches later
stages. Content-level problems (dangling edge references, unknown edge sides,
unsupported node types) are recorded as warnings and left for sanitization.
"""

import logging
import math
from typing import Any, Dict, List, Optional, Tuple

from canvas_copilot.exceptions import StructureError
from canvas_copilot.models.graph_models import (
    END_MARKERS,
    NODE_KINDS,
    SIDES,
    Graph,
    GraphEdge,
    GraphNode,
)

logger = logging.getLogger(__name__)

_OPTIONAL_NODE_TEXT_FIELDS = ("text", "label", "url", "color")
_OPTIONAL_EDGE_TEXT_FIELDS = ("label", "color")


def _is_number(value: Any) -> bool:
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        # int too large for a float
        return False


def _as_identifier(value: Any) -> Optional[str]:
    """Return a non-empty string id; models sometimes emit integer ids"""
    if isinstance(value, str):
        return value if value.strip() else None
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return None


def _optional_text(
    record: Dict[str, Any],
    field: str,
    element: str,
    index: int,
    warnings: List[str]
) -> Optional[str]:
    value = record.get(field)
    if value is None or isinstance(value, str):
        return value
    if _is_number(value):
        return str(value)
    warnings.append(f"{element.capitalize()} {index}: dropped non-text {field}")
    return None


def _validate_node(record: Any, index: int, warnings: List[str]) -> Optional[GraphNode]:
    """Validate one node record; None means the node is skipped with a warning"""
    if not isinstance(record, dict):
        raise StructureError("not an object", "node", index)

    node_id = _as_identifier(record.get("id"))
    if node_id is None:
        raise StructureError("missing id", "node", index)

    # 0 is a valid coordinate; only absence (or a non-number) is fatal
    x, y = record.get("x"), record.get("y")
    if x is None or y is None:
        raise StructureError("missing x/y coordinates", "node", index)
    if not _is_number(x) or not _is_number(y):
        raise StructureError("non-numeric x/y coordinates", "node", index)

    width, height = record.get("width"), record.get("height")
    if not width or not height:
        raise StructureError("missing width/height", "node", index)
    if not _is_number(width) or not _is_number(height) or width <= 0 or height <= 0:
        raise StructureError("width/height must be positive numbers", "node", index)

    kind = record.get("type") or record.get("kind")
    if not kind:
        kind = "text"
    elif kind not in NODE_KINDS:
        # Edges to a skipped node become dangling and are removed by sanitization
        warnings.append(f'Node {index}: skipped unsupported type {kind!r} (id "{node_id}")')
        return None

    attributes = {
        field: _optional_text(record, field, "node", index, warnings)
        for field in _OPTIONAL_NODE_TEXT_FIELDS
    }
    return GraphNode(
        id=node_id,
        x=x,
        y=y,
        width=width,
        height=height,
        kind=kind,
        **attributes
    )


def _optional_choice(
    record: Dict[str, Any],
    key: str,
    choices: Tuple[str, ...],
    index: int,
    warnings: List[str]
) -> Optional[str]:
    value = record.get(key)
    if value is None or value in choices:
        return value
    warnings.append(f"Edge {index}: dropped invalid {key} {value!r}")
    return None


def _validate_edge(record: Any, index: int, node_ids: set, warnings: List[str]) -> GraphEdge:
    if not isinstance(record, dict):
        raise StructureError("not an object", "edge", index)

    edge_id = _as_identifier(record.get("id"))
    if edge_id is None:
        raise StructureError("missing id", "edge", index)

    from_node = _as_identifier(record.get("fromNode"))
    to_node = _as_identifier(record.get("toNode"))
    if from_node is None or to_node is None:
        raise StructureError("missing fromNode/toNode", "edge", index)

    # Dangling references are kept here and removed during sanitization
    if from_node not in node_ids:
        warnings.append(f'Edge {index}: fromNode "{from_node}" not found in nodes')
    if to_node not in node_ids:
        warnings.append(f'Edge {index}: toNode "{to_node}" not found in nodes')

    return GraphEdge(
        id=edge_id,
        from_node=from_node,
        to_node=to_node,
        from_side=_optional_choice(record, "fromSide", SIDES, index, warnings),
        to_side=_optional_choice(record, "toSide", SIDES, index, warnings),
        from_end=_optional_choice(record, "fromEnd", END_MARKERS, index, warnings),
        to_end=_optional_choice(record, "toEnd", END_MARKERS, index, warnings),
        **{
            field: _optional_text(record, field, "edge", index, warnings)
            for field in _OPTIONAL_EDGE_TEXT_FIELDS
        }
    )


def validate_graph_data(data: Any) -> Tuple[Graph, List[str]]:
    """
    Validate and normalize a decoded canvas payload.

    Checks, in order: the value is an object; it has a nodes list (a
    missing edges list defaults to empty); every node has an id, numeric
    x/y and positive width/height (a missing type defaults to text, an
    unsupported type skips the node with a warning); every edge has an id
    and both endpoints.

    Args:
        data: Decoded JSON value, or an existing Graph to re-validate

    Returns:
        Tuple of (graph, warnings)

    Raises:
        StructureError: If the payload is not shaped like a graph
    """
    if isinstance(data, Graph):
        data = data.to_canvas_dict()

    if not isinstance(data, dict):
        raise StructureError("Invalid JSON: not an object")

    raw_nodes = data.get("nodes")
    if not isinstance(raw_nodes, list):
        raise StructureError("Invalid structure: missing nodes array")

    raw_edges = data.get("edges")
    if not isinstance(raw_edges, list):
        raw_edges = []

    warnings: List[str] = []
    nodes = []
    for i, record in enumerate(raw_nodes):
        node = _validate_node(record, i, warnings)
        if node is not None:
            nodes.append(node)

    node_ids = set()
    for node in nodes:
        if node.id in node_ids:
            warnings.append(f'Duplicate node id "{node.id}"')
        node_ids.add(node.id)

    edges = [_validate_edge(record, i, node_ids, warnings) for i, record in enumerate(raw_edges)]

    for warning in warnings:
        logger.warning(f"⚠️ Canvas validation: {warning}")

    return Graph(nodes=nodes, edges=edges), warnings
