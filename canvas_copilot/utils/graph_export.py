"""
Graph Export - Hand synthesized graphs to the host and render graphs for prompts

merge_into_canvas() produces the canvas document the caller writes back;
graph_to_markdown() and graph_to_mermaid() render a selection so a model can
read it.
"""

import copy
import logging
from typing import Any, Dict, List, Optional

from canvas_copilot.models.graph_models import Graph, GraphNode

logger = logging.getLogger(__name__)

SHORT_ID_LENGTH = 8
MERMAID_LABEL_LENGTH = 50


def merge_into_canvas(
    canvas_doc: Dict[str, Any],
    graph: Graph,
    replace_node_id: Optional[str] = None,
    color_override: Optional[str] = None,
    default_from_side: str = "right",
    default_to_side: str = "left"
) -> Dict[str, Any]:
    """
    Build a new canvas document with the graph appended.

    Args:
        canvas_doc: Current canvas document ({"nodes": [...], "edges": [...]})
        graph: Synthesized graph with ids that do not collide with the canvas
        replace_node_id: Placeholder node to remove (e.g. a pending-result node)
        color_override: Colour applied to every new node instead of the model's
        default_from_side: Side used when an edge does not specify fromSide
        default_to_side: Side used when an edge does not specify toSide

    Returns:
        New canvas document; canvas_doc is not modified
    """
    merged = copy.deepcopy(canvas_doc)
    nodes: List[Dict[str, Any]] = merged.get("nodes") or []
    edges: List[Dict[str, Any]] = merged.get("edges") or []

    if replace_node_id is not None:
        before = len(nodes)
        nodes = [n for n in nodes if n.get("id") != replace_node_id]
        if len(nodes) == before:
            logger.warning(f"⚠️ Placeholder node {replace_node_id} not found in canvas")

    for node in graph.nodes:
        record = {
            "id": node.id,
            "type": node.kind,
            "x": round(node.x),
            "y": round(node.y),
            "width": round(node.width),
            "height": round(node.height),
            "text": node.text,
            "color": color_override or node.color,
            "label": node.label,
            "url": node.url,
        }
        nodes.append({k: v for k, v in record.items() if v is not None})

    for edge in graph.edges:
        record = {
            "id": edge.id,
            "fromNode": edge.from_node,
            "toNode": edge.to_node,
            "fromSide": edge.from_side or default_from_side,
            "toSide": edge.to_side or default_to_side,
            "fromEnd": edge.from_end,
            "toEnd": edge.to_end,
            "color": edge.color,
            "label": edge.label,
        }
        edges.append({k: v for k, v in record.items() if v is not None})

    merged["nodes"] = nodes
    merged["edges"] = edges
    logger.info(f"Merged {len(graph.nodes)} nodes and {len(graph.edges)} edges into canvas")
    return merged


def _short_id(node_id: str) -> str:
    return node_id[:SHORT_ID_LENGTH]


def _node_content(node: GraphNode) -> str:
    if node.kind == "link":
        return node.url or ""
    if node.kind == "group":
        return node.label or "(Unnamed Group)"
    return node.text or ""


def _truncate(content: str, max_length: int) -> str:
    single_line = content.replace('\n', ' ').strip()
    if len(single_line) <= max_length:
        return single_line
    return single_line[:max_length - 3] + '...'


def _sanitize_mermaid_label(text: str) -> str:
    # Brackets, braces and angle brackets are Mermaid shape syntax
    return (
        text.replace('"', "'")
        .replace('[', '［')
        .replace(']', '］')
        .replace('<', '').replace('>', '')
        .replace('{', '').replace('}', '')
        .strip()
    )


def graph_to_markdown(graph: Graph) -> str:
    """Render nodes and their connections as Markdown for a prompt"""
    lines = ['## Selected Canvas Nodes\n']

    for node in graph.nodes:
        lines.append(f"### Node: {_short_id(node.id)}... ({node.kind})")
        lines.append('')
        content = _node_content(node)
        if node.kind == "link":
            lines.append(f"[{content}]({content})")
        elif node.kind == "group":
            lines.append(f"**Group:** {content}")
        else:
            lines.append(content)
        lines.append('')

    if graph.edges:
        lines.append('## Connections\n')
        known = graph.node_ids()
        for edge in graph.edges:
            from_label = _short_id(edge.from_node) if edge.from_node in known else edge.from_node
            to_label = _short_id(edge.to_node) if edge.to_node in known else edge.to_node
            if edge.label:
                lines.append(f"- {from_label}... --[{edge.label}]--> {to_label}...")
            else:
                lines.append(f"- {from_label}... --> {to_label}...")
        lines.append('')

    return '\n'.join(lines)


def graph_to_mermaid(graph: Graph) -> str:
    """Render the graph as a fenced Mermaid flowchart"""
    lines = ['```mermaid', 'graph LR']

    for node in graph.nodes:
        label = _sanitize_mermaid_label(_truncate(_node_content(node), MERMAID_LABEL_LENGTH))
        short_id = _short_id(node.id)
        if node.kind == "group":
            lines.append(f'    {short_id}(("{label}"))')
        elif node.kind == "link":
            lines.append(f'    {short_id}[/"{label}"/]')
        else:
            lines.append(f'    {short_id}["{label}"]')

    for edge in graph.edges:
        from_short = _short_id(edge.from_node)
        to_short = _short_id(edge.to_node)
        if edge.label:
            lines.append(f'    {from_short} -->|"{_sanitize_mermaid_label(edge.label)}"| {to_short}')
        else:
            lines.append(f'    {from_short} --> {to_short}')

    lines.append('```')
    return '\n'.join(lines)
