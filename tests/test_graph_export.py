"""Tests for canvas merging and prompt rendering."""

import copy

from conftest import make_edge, make_node

from canvas_copilot.models import Graph
from canvas_copilot.utils.graph_export import graph_to_markdown, graph_to_mermaid, merge_into_canvas


def _existing_canvas() -> dict:
    return {
        "nodes": [
            {"id": "keep", "type": "text", "x": 0, "y": 0, "width": 100, "height": 50, "text": "Existing"},
            {"id": "ghost", "type": "text", "x": 10, "y": 10, "width": 100, "height": 50, "text": "Thinking..."},
        ],
        "edges": [],
    }


def test_merge_replaces_placeholder_and_appends():
    """Test that the placeholder is removed and new elements are appended."""
    canvas = _existing_canvas()
    graph = Graph(
        nodes=[make_node("n1", 10.4, 20.6, text="One"), make_node("n2", 300, 0, text="Two")],
        edges=[make_edge("e1", "n1", "n2")],
    )

    merged = merge_into_canvas(canvas, graph, replace_node_id="ghost")

    assert [n["id"] for n in merged["nodes"]] == ["keep", "n1", "n2"]
    assert merged["nodes"][1] == {
        "id": "n1", "type": "text", "x": 10, "y": 21, "width": 200, "height": 80, "text": "One",
    }
    assert merged["edges"] == [
        {"id": "e1", "fromNode": "n1", "toNode": "n2", "fromSide": "right", "toSide": "left"},
    ]
    assert canvas == _existing_canvas()


def test_merge_keeps_explicit_sides_and_labels():
    """Test that edge attributes from the model are carried over."""
    graph = Graph(
        nodes=[make_node("n1"), make_node("n2", 300)],
        edges=[make_edge("e1", "n1", "n2", from_side="bottom", to_side="top", to_end="arrow", label="then")],
    )

    merged = merge_into_canvas({"nodes": [], "edges": []}, graph)

    assert merged["edges"][0] == {
        "id": "e1", "fromNode": "n1", "toNode": "n2",
        "fromSide": "bottom", "toSide": "top", "toEnd": "arrow", "label": "then",
    }


def test_merge_color_override():
    """Test that the override colour replaces node colours."""
    graph = Graph(nodes=[make_node("n1", color="1"), make_node("n2", 300)])

    merged = merge_into_canvas({}, graph, color_override="6")

    assert [n["color"] for n in merged["nodes"]] == ["6", "6"]


def test_merge_missing_placeholder_keeps_canvas():
    """Test that an unknown placeholder id leaves existing nodes alone."""
    merged = merge_into_canvas(_existing_canvas(), Graph(), replace_node_id="nope")
    assert [n["id"] for n in merged["nodes"]] == ["keep", "ghost"]


def test_to_canvas_dict_uses_wire_keys(chain_graph):
    """Test serialization with canvas keys and without empty fields."""
    data = chain_graph.to_canvas_dict()

    assert data["nodes"][0] == {"id": "a", "x": 0, "y": 0, "width": 200, "height": 80, "type": "text", "text": "Alpha"}
    assert data["edges"][0] == {"id": "ab", "fromNode": "a", "toNode": "b"}


def test_markdown_rendering():
    """Test the Markdown layout for every node kind."""
    graph = Graph(
        nodes=[
            make_node("node-alpha-1234", text="Alpha body"),
            make_node("link1", kind="link", url="https://example.com"),
            make_node("group1", kind="group"),
        ],
        edges=[make_edge("e1", "node-alpha-1234", "link1", label="cites")],
    )

    markdown = graph_to_markdown(graph)

    assert markdown.startswith("## Selected Canvas Nodes\n")
    assert "### Node: node-alp... (text)\n\nAlpha body" in markdown
    assert "[https://example.com](https://example.com)" in markdown
    assert "**Group:** (Unnamed Group)" in markdown
    assert "## Connections\n" in markdown
    assert "- node-alp... --[cites]--> link1..." in markdown


def test_markdown_without_edges_has_no_connections(chain_graph):
    """Test that the connections section is omitted for edge-less graphs."""
    chain_graph.edges = []
    assert "## Connections" not in graph_to_markdown(chain_graph)


def test_mermaid_rendering(chain_graph):
    """Test the Mermaid flowchart structure."""
    chain_graph.edges[1].label = "leads to"

    mermaid = graph_to_mermaid(chain_graph)
    lines = mermaid.split('\n')

    assert lines[0] == "```mermaid"
    assert lines[1] == "graph LR"
    assert '    a["Alpha"]' in lines
    assert '    a --> b' in lines
    assert '    b -->|"leads to"| c' in lines
    assert lines[-1] == "```"


def test_mermaid_shapes_and_sanitizing():
    """Test node shapes, label escaping and truncation."""
    graph = Graph(
        nodes=[
            make_node("t", text='Say "hi" [now] <b>{x}</b>'),
            make_node("l", kind="link", url="https://example.com"),
            make_node("g", kind="group", label="Cluster"),
            make_node("long", text="x" * 60),
        ],
    )

    lines = graph_to_mermaid(graph).split('\n')

    assert "    t[\"Say 'hi' ［now］ bx/b\"]" in lines
    assert '    l[/"https://example.com"/]' in lines
    assert '    g(("Cluster"))' in lines
    assert f'    long["{"x" * 47}..."]' in lines


def test_rendering_does_not_modify_graph(chain_graph):
    """Test that rendering is read-only."""
    before = copy.deepcopy(chain_graph)
    graph_to_markdown(chain_graph)
    graph_to_mermaid(chain_graph)
    assert chain_graph == before
