"""
Reconciliation Service - End-to-end handling of model responses

Runs the graph synthesis pipeline (extract -> validate -> sanitize ->
regenerate ids -> remap -> layout) and the text patch pipeline (parse ->
apply) with defaults taken from settings.
"""

import logging
from typing import Optional, Tuple

from config.settings import Settings, settings as default_settings
from canvas_copilot.exceptions import ReconciliationError
from canvas_copilot.models.graph_models import SynthesisResult
from canvas_copilot.models.patch_models import PatchResult
from canvas_copilot.utils.graph_parser import extract_graph_json
from canvas_copilot.utils.graph_sanitizer import sanitize_graph
from canvas_copilot.utils.graph_transforms import regenerate_ids, remap_coordinates
from canvas_copilot.utils.graph_validator import validate_graph_data
from canvas_copilot.utils.layout_optimizer import optimize_layout
from canvas_copilot.utils.text_patcher import apply_patches, parse_patches

logger = logging.getLogger(__name__)


class ReconciliationService:
    """Service for merging model output into canvas graphs and documents"""

    def __init__(self, config: Optional[Settings] = None):
        self.config = config or default_settings

    def synthesize_graph(
        self,
        response: str,
        anchor: Tuple[float, float],
        remove_orphan_nodes: Optional[bool] = None
    ) -> SynthesisResult:
        """
        Turn a model response into a graph ready for insertion.

        Args:
            response: Raw model response containing canvas JSON
            anchor: Canvas point the new structure should be centred on
            remove_orphan_nodes: Override REMOVE_ORPHAN_NODES from settings

        Returns:
            SynthesisResult with the final graph, removal stats and warnings

        Raises:
            ParseError: If the response has no decodable JSON payload
            StructureError: If the payload is not shaped like a graph
        """
        if remove_orphan_nodes is None:
            remove_orphan_nodes = self.config.REMOVE_ORPHAN_NODES

        try:
            graph, warnings = validate_graph_data(extract_graph_json(response))
        except ReconciliationError as e:
            logger.error(f"❌ Graph synthesis failed: {e}")
            raise

        sanitized = sanitize_graph(graph, remove_orphan_nodes=remove_orphan_nodes)
        graph = regenerate_ids(sanitized.graph)
        graph = remap_coordinates(graph, anchor)
        graph = optimize_layout(
            graph,
            gap=self.config.LAYOUT_GAP,
            max_iterations=self.config.LAYOUT_MAX_ITERATIONS
        )

        logger.info(f"✅ Synthesized {len(graph.nodes)} nodes and {len(graph.edges)} edges")
        return SynthesisResult(graph=graph, stats=sanitized.stats, warnings=warnings)

    def apply_response_patches(
        self,
        document: str,
        response: str,
        min_similarity: Optional[float] = None
    ) -> PatchResult:
        """
        Parse text changes from a model response and apply them to document.

        A response without any change yields an unchanged, successful result.
        """
        if min_similarity is None:
            min_similarity = self.config.PATCH_MIN_SIMILARITY

        changes = parse_patches(response)
        if not changes:
            logger.warning("⚠️ Model response contained no text changes")
        return apply_patches(document, changes, min_similarity=min_similarity)


# Global service instance
_reconciliation_service_instance: Optional[ReconciliationService] = None


def get_reconciliation_service() -> ReconciliationService:
    """Get or create singleton reconciliation service instance"""
    global _reconciliation_service_instance
    if _reconciliation_service_instance is None:
        _reconciliation_service_instance = ReconciliationService()
    return _reconciliation_service_instance
