"""
Graph Selection - Grow a node selection along edges and into groups
Uses NetworkX for graph traversal
"""

import logging
from typing import Iterable, Set

import networkx as nx

from canvas_copilot.models.graph_models import Graph

logger = logging.getLogger(__name__)


def to_digraph(graph: Graph) -> nx.MultiDiGraph:
    """Build a NetworkX multigraph keyed by node id, one arc per resolvable edge"""
    digraph = nx.MultiDiGraph()
    for node in graph.nodes:
        digraph.add_node(node.id, kind=node.kind)
    for edge in graph.edges:
        if edge.from_node in digraph and edge.to_node in digraph:
            digraph.add_edge(edge.from_node, edge.to_node, key=edge.id, label=edge.label)
    return digraph


def collect_connected_node_ids(
    graph: Graph,
    start_ids: Iterable[str],
    children_only: bool = False
) -> Set[str]:
    """
    Collect every node reachable from the starting selection.

    Args:
        graph: Graph to traverse
        start_ids: Initially selected node ids (unknown ids are ignored)
        children_only: If True follow edges downstream only (from -> to);
                       otherwise follow edges in both directions

    Returns:
        Set of node ids including the starting ones that exist in the graph
    """
    digraph = to_digraph(graph)
    selected = {node_id for node_id in start_ids if node_id in digraph}

    reachable = set(selected)
    undirected = digraph.to_undirected(as_view=True)
    for node_id in selected:
        if children_only:
            reachable |= nx.descendants(digraph, node_id)
        else:
            reachable |= nx.node_connected_component(undirected, node_id)

    logger.debug(f"Selection grew from {len(selected)} to {len(reachable)} nodes")
    return reachable


def expand_group_selection(graph: Graph, selected_ids: Iterable[str]) -> Set[str]:
    """
    Add every node whose rectangle lies inside a selected group's rectangle.

    Returns:
        Set of selected ids plus the contained node ids
    """
    selected = set(selected_ids)
    expanded = set(selected)
    groups = [node for node in graph.nodes if node.id in selected and node.kind == "group"]
    for group in groups:
        for node in graph.nodes:
            if node.id != group.id and group.contains(node):
                expanded.add(node.id)
    return expanded
