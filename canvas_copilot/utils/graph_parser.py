"""
Graph Parser - Pull a canvas JSON payload out of a model response

Handles the formats models actually produce:
- Raw JSON
- JSON wrapped in ``` or ```json code blocks
- JSON surrounded by explanatory prose
"""

import json
import logging
import re
from typing import Any

from canvas_copilot.exceptions import ParseError
from canvas_copilot.models.graph_models import Graph
from canvas_copilot.utils.graph_validator import validate_graph_data

logger = logging.getLogger(__name__)

_CODE_BLOCK = re.compile(r'```[ \t]*[\w-]*[ \t]*\n?([\s\S]*?)```')


def _locate_payload(response: str) -> str:
    """
    Prefer the first fenced block containing an object; otherwise slice from
    the first '{' to the last '}'.
    """
    text = response.strip()

    for match in _CODE_BLOCK.finditer(text):
        block = match.group(1).strip()
        if '{' in block:
            return block

    first_brace = text.find('{')
    last_brace = text.rfind('}')
    if first_brace != -1 and last_brace > first_brace:
        return text[first_brace:last_brace + 1]
    return text


def extract_graph_json(response: str) -> Any:
    """
    Decode the JSON payload of a model response.

    Args:
        response: Raw model response text

    Returns:
        Decoded JSON value (shape not yet checked)

    Raises:
        ParseError: If the located payload is not valid JSON
    """
    payload = _locate_payload(response)
    try:
        return json.loads(payload)
    except (ValueError, RecursionError) as e:
        logger.error(f"❌ JSON parse error: {e}")
        raise ParseError(f"JSON parse error: {e}", payload=payload) from e


def extract_graph(response: str) -> Graph:
    """
    Extract and validate a graph from a model response.

    Validation warnings are logged; use extract_graph_json() together with
    validate_graph_data() to receive them.

    Raises:
        ParseError: If the payload is not valid JSON
        StructureError: If the payload is not shaped like a graph
    """
    graph, _warnings = validate_graph_data(extract_graph_json(response))
    return graph
