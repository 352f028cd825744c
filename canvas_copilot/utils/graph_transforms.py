"""
Graph Transforms - Prepare a sanitized graph for insertion into a live canvas

- remap_coordinates: move the graph so it is centred on a target point
- regenerate_ids: replace model-chosen ids with fresh UUIDs
"""

import logging
import uuid
from typing import Dict, Tuple

from canvas_copilot.models.graph_models import Graph

logger = logging.getLogger(__name__)


def remap_coordinates(graph: Graph, anchor: Tuple[float, float]) -> Graph:
    """
    Translate every node so the graph's bounding-box centre lands on anchor.

    Args:
        graph: Graph in arbitrary model coordinates (not modified)
        anchor: Target (x, y) centre in canvas coordinates

    Returns:
        New graph; an empty graph is returned unchanged
    """
    remapped = graph.model_copy(deep=True)
    bbox = remapped.bounding_box()
    if bbox is None:
        return remapped

    min_x, min_y, max_x, max_y = bbox
    center_x = min_x + (max_x - min_x) / 2
    center_y = min_y + (max_y - min_y) / 2
    delta_x = anchor[0] - center_x
    delta_y = anchor[1] - center_y

    for node in remapped.nodes:
        node.x += delta_x
        node.y += delta_y

    logger.debug(f"Remapped {len(remapped.nodes)} nodes by ({delta_x:.1f}, {delta_y:.1f})")
    return remapped


def regenerate_ids(graph: Graph) -> Graph:
    """
    Give every node and edge a fresh UUID4 and rewrite edge endpoints.

    Model-chosen ids ("1", "node-a") are not globally unique and would
    collide with elements already on the canvas. An endpoint that does not
    resolve to a node keeps its old value.

    Returns:
        New graph with regenerated ids
    """
    regenerated = graph.model_copy(deep=True)
    id_map: Dict[str, str] = {}

    for node in regenerated.nodes:
        new_id = str(uuid.uuid4())
        id_map[node.id] = new_id
        node.id = new_id

    for edge in regenerated.edges:
        edge.id = str(uuid.uuid4())
        edge.from_node = id_map.get(edge.from_node, edge.from_node)
        edge.to_node = id_map.get(edge.to_node, edge.to_node)

    return regenerated
