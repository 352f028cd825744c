"""
Graph Sanitizer - Remove degenerate content from a model-proposed graph

Models over-produce (empty placeholder nodes, unconnected leftovers) and
under-produce (edges to nodes they never emitted).
"""

import logging

from canvas_copilot.models.graph_models import Graph, SanitizeResult, SanitizeStats

logger = logging.getLogger(__name__)


def sanitize_graph(graph: Graph, remove_orphan_nodes: bool = True) -> SanitizeResult:
    """
    Remove empty text nodes, dangling edges and (optionally) orphan nodes.

    Steps:
    1. Drop text nodes whose body is missing or whitespace-only
    2. Drop edges whose endpoints no longer resolve
    3. If remove_orphan_nodes and at least one edge survives, drop non-group
       nodes without any incident edge. When no edge survives the nodes are
       kept as an intentional disconnected list. Group nodes are always kept.

    Args:
        graph: Validated graph (not modified)
        remove_orphan_nodes: Whether to run step 3

    Returns:
        SanitizeResult with a new graph and removal counters
    """
    stats = SanitizeStats()

    nodes = []
    for node in graph.nodes:
        if node.kind == "text" and not (node.text and node.text.strip()):
            stats.removed_empty_nodes += 1
            logger.warning(f'Canvas Sanitize: Removed empty text node "{node.id}"')
            continue
        nodes.append(node)

    valid_ids = {node.id for node in nodes}
    edges = []
    for edge in graph.edges:
        from_exists = edge.from_node in valid_ids
        to_exists = edge.to_node in valid_ids
        if not (from_exists and to_exists):
            stats.removed_invalid_edges += 1
            logger.warning(
                f'Canvas Sanitize: Removed invalid edge "{edge.id}" '
                f'(fromNode: {edge.from_node} exists: {from_exists}, '
                f'toNode: {edge.to_node} exists: {to_exists})'
            )
            continue
        edges.append(edge)

    if remove_orphan_nodes and edges:
        connected = set()
        for edge in edges:
            connected.add(edge.from_node)
            connected.add(edge.to_node)

        kept = []
        for node in nodes:
            if node.kind == "group" or node.id in connected:
                kept.append(node)
                continue
            stats.removed_orphan_nodes += 1
            logger.warning(f'Canvas Sanitize: Removed orphan node "{node.id}" (text: {(node.text or "")[:30]!r})')
        nodes = kept
    elif remove_orphan_nodes and len(nodes) > 1:
        logger.info("Canvas Sanitize: No edges present, keeping all nodes as intentional structure")

    sanitized = Graph(
        nodes=[node.model_copy(deep=True) for node in nodes],
        edges=[edge.model_copy(deep=True) for edge in edges]
    )

    if stats.total_removed:
        logger.info(
            f"Canvas Sanitize: removed {stats.removed_empty_nodes} empty nodes, "
            f"{stats.removed_orphan_nodes} orphan nodes, "
            f"{stats.removed_invalid_edges} invalid edges"
        )
    return SanitizeResult(graph=sanitized, stats=stats)
