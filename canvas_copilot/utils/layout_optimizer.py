"""
Layout Optimizer - Fix undersized text nodes and spread overlapping nodes

Both passes are best effort: sizes are only grown when the model's proposal
is clearly too small, and overlap resolution stops after a fixed number of
iterations even if some overlap remains.
"""

import logging
import math
from typing import List, Tuple

from canvas_copilot.models.graph_models import Graph, GraphNode

logger = logging.getLogger(__name__)

# Text size model (pixels)
CHAR_WIDTH = 12
LINE_HEIGHT = 24
PADDING = 40
MIN_WIDTH = 200
MAX_WIDTH = 500
MIN_HEIGHT = 80
MAX_HEIGHT = 400
EMPTY_TEXT_SIZE = (200, 100)
MIN_LINE_CHARS = 10

# Estimated size replaces the proposal only when it is this much larger
WIDTH_GROWTH_THRESHOLD = 1.2
HEIGHT_GROWTH_THRESHOLD = 1.3

DEFAULT_GAP = 30
DEFAULT_MAX_ITERATIONS = 50


def estimate_node_size(text: str) -> Tuple[int, int]:
    """
    Estimate (width, height) for a text node from its content.

    Width follows the longest line; height follows the number of wrapped
    lines at that width.
    """
    if not text:
        return EMPTY_TEXT_SIZE

    lines = text.split('\n')
    longest = max(max(len(line) for line in lines), MIN_LINE_CHARS)

    width = longest * CHAR_WIDTH + PADDING
    width = max(MIN_WIDTH, min(MAX_WIDTH, width))

    chars_per_line = (width - PADDING) // CHAR_WIDTH
    total_lines = sum(math.ceil(max(len(line), 1) / chars_per_line) for line in lines)

    height = total_lines * LINE_HEIGHT + PADDING
    height = max(MIN_HEIGHT, min(MAX_HEIGHT, height))

    return width, height


def nodes_overlap(a: GraphNode, b: GraphNode, gap: float = DEFAULT_GAP) -> bool:
    """Rectangles overlap when they come within gap of each other on both axes"""
    return not (
        a.x + a.width + gap < b.x
        or b.x + b.width + gap < a.x
        or a.y + a.height + gap < b.y
        or b.y + b.height + gap < a.y
    )


def find_overlapping_pairs(graph: Graph, gap: float = DEFAULT_GAP) -> List[Tuple[int, int]]:
    """Index pairs (i, j), i < j, of nodes that overlap"""
    nodes = graph.nodes
    return [
        (i, j)
        for i in range(len(nodes))
        for j in range(i + 1, len(nodes))
        if nodes_overlap(nodes[i], nodes[j], gap)
    ]


def _resize_text_nodes(graph: Graph) -> int:
    resized = 0
    for node in graph.nodes:
        if node.kind != "text" or not node.text:
            continue
        width, height = estimate_node_size(node.text)
        if width > node.width * WIDTH_GROWTH_THRESHOLD or height > node.height * HEIGHT_GROWTH_THRESHOLD:
            node.width = width
            node.height = height
            resized += 1
    return resized


def _push_apart(a: GraphNode, b: GraphNode, gap: float):
    (ax, ay), (bx, by) = a.center, b.center
    dx, dy = bx - ax, by - ay

    # Identical centres: push along the x axis
    if dx == 0 and dy == 0:
        dx, dy = 1.0, 0.0

    distance = math.hypot(dx, dy)
    push = gap / 2
    push_x = dx / distance * push
    push_y = dy / distance * push

    a.x -= push_x
    a.y -= push_y
    b.x += push_x
    b.y += push_y


def optimize_layout(
    graph: Graph,
    gap: float = DEFAULT_GAP,
    max_iterations: int = DEFAULT_MAX_ITERATIONS
) -> Graph:
    """
    Grow undersized text nodes, then spread overlapping nodes apart.

    Args:
        graph: Graph to lay out (not modified)
        gap: Minimum spacing between nodes, in pixels
        max_iterations: Upper bound on overlap-resolution passes

    Returns:
        New graph with adjusted sizes and positions
    """
    optimized = graph.model_copy(deep=True)
    if not optimized.nodes:
        return optimized

    resized = _resize_text_nodes(optimized)
    if resized:
        logger.debug(f"Resized {resized} text nodes to fit their content")

    nodes = optimized.nodes
    for iteration in range(max_iterations):
        has_overlap = False
        for i in range(len(nodes)):
            for j in range(i + 1, len(nodes)):
                if nodes_overlap(nodes[i], nodes[j], gap):
                    has_overlap = True
                    _push_apart(nodes[i], nodes[j], gap)
        if not has_overlap:
            logger.debug(f"Layout settled after {iteration} iterations")
            break
    else:
        remaining = len(find_overlapping_pairs(optimized, gap))
        if remaining:
            logger.info(f"Layout: accepting {remaining} overlapping pairs after {max_iterations} iterations")

    return optimized
