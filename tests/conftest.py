"""Pytest configuration and shared fixtures."""

import pytest

from canvas_copilot.models import Graph, GraphEdge, GraphNode


def make_node(node_id: str, x: float = 0, y: float = 0, kind: str = "text", text: str = "content", **extra) -> GraphNode:
    """Build a node with sensible defaults for tests."""
    width = extra.pop("width", 200)
    height = extra.pop("height", 80)
    if kind != "text" and text == "content":
        text = None
    return GraphNode(id=node_id, x=x, y=y, width=width, height=height, kind=kind, text=text, **extra)


def make_edge(edge_id: str, from_node: str, to_node: str, **extra) -> GraphEdge:
    """Build an edge between two node ids."""
    return GraphEdge(id=edge_id, from_node=from_node, to_node=to_node, **extra)


@pytest.fixture
def canvas_payload() -> dict:
    """Decoded canvas JSON as a model would emit it."""
    return {
        "nodes": [
            {"id": "1", "type": "text", "x": 0, "y": 0, "width": 250, "height": 60, "text": "Main idea"},
            {"id": "2", "type": "text", "x": 400, "y": 0, "width": 250, "height": 60, "text": "Supporting point"},
            {"id": "3", "type": "text", "x": 400, "y": 200, "width": 250, "height": 60, "text": "Example"},
        ],
        "edges": [
            {"id": "e1", "fromNode": "1", "toNode": "2", "fromSide": "right", "toSide": "left"},
            {"id": "e2", "fromNode": "2", "toNode": "3", "label": "illustrated by"},
        ],
    }


@pytest.fixture
def chain_graph() -> Graph:
    """Three connected text nodes."""
    return Graph(
        nodes=[
            make_node("a", 0, 0, text="Alpha"),
            make_node("b", 300, 0, text="Beta"),
            make_node("c", 600, 0, text="Gamma"),
        ],
        edges=[
            make_edge("ab", "a", "b"),
            make_edge("bc", "b", "c"),
        ],
    )
