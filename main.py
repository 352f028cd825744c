"""
Canvas Copilot - Command Line Entry Point
Applies a saved model response to a canvas file or a document

Usage:
    canvas-copilot synthesize response.txt --x 0 --y 0 --canvas board.canvas --replace-node abc123
    canvas-copilot patch note.md response.txt --in-place
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from config.settings import settings
from canvas_copilot.exceptions import ParseError, ReconciliationError, StructureError
from canvas_copilot.services import get_reconciliation_service
from canvas_copilot.utils.graph_export import merge_into_canvas


class CleanFormatter(logging.Formatter):
    """Formatter that strips trailing newlines from log messages"""

    def format(self, record):
        message = super().format(record)
        return message.rstrip()


def configure_logging():
    formatter = CleanFormatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    # stdout carries results; logs go to stderr
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)

    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        handlers=[console_handler],
        force=True
    )


logger = logging.getLogger(__name__)


def load_canvas(path) -> dict:
    """Read a canvas document, reporting unreadable content as a reconciliation error"""
    content = Path(path).read_text(encoding="utf-8")
    try:
        canvas_doc = json.loads(content)
    except (ValueError, RecursionError) as e:
        raise ParseError(f"Invalid canvas file {path}: {e}", payload=content) from e
    if not isinstance(canvas_doc, dict):
        raise StructureError(f"Invalid canvas file {path}: not an object")
    return canvas_doc


def run_synthesize(args) -> int:
    service = get_reconciliation_service()
    response = Path(args.response_file).read_text(encoding="utf-8")

    result = service.synthesize_graph(
        response,
        anchor=(args.x, args.y),
        remove_orphan_nodes=False if args.keep_orphans else None
    )

    if args.canvas:
        canvas_doc = load_canvas(args.canvas)
        output = merge_into_canvas(
            canvas_doc,
            result.graph,
            replace_node_id=args.replace_node,
            color_override=settings.NODE_COLOR_OVERRIDE,
            default_from_side=settings.DEFAULT_FROM_SIDE,
            default_to_side=settings.DEFAULT_TO_SIDE
        )
    else:
        output = result.graph.to_canvas_dict()

    print(json.dumps(output, indent='\t', ensure_ascii=False))
    return 0


def run_patch(args) -> int:
    service = get_reconciliation_service()
    document_path = Path(args.document_file)
    document = document_path.read_text(encoding="utf-8")
    response = Path(args.response_file).read_text(encoding="utf-8")

    result = service.apply_response_patches(document, response, min_similarity=args.min_similarity)

    if args.in_place:
        document_path.write_text(result.text, encoding="utf-8")
    else:
        sys.stdout.write(result.text)

    for change in result.failed_patches:
        print(f"Unmatched: {change.original[:80]!r}", file=sys.stderr)
    return 0 if result.success else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="canvas-copilot",
        description="Merge LLM responses into canvas files and documents"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    synthesize = subparsers.add_parser("synthesize", help="Build a canvas graph from a model response")
    synthesize.add_argument("response_file", help="File containing the raw model response")
    synthesize.add_argument("--x", type=float, default=0.0, help="Target centre x")
    synthesize.add_argument("--y", type=float, default=0.0, help="Target centre y")
    synthesize.add_argument("--canvas", help="Canvas file to merge the graph into")
    synthesize.add_argument("--replace-node", help="Placeholder node id to remove from the canvas")
    synthesize.add_argument("--keep-orphans", action="store_true", help="Keep nodes without edges")
    synthesize.set_defaults(handler=run_synthesize)

    patch = subparsers.add_parser("patch", help="Apply text changes from a model response")
    patch.add_argument("document_file", help="Document to patch")
    patch.add_argument("response_file", help="File containing the raw model response")
    patch.add_argument("--min-similarity", type=float, default=None, help="Fuzzy match threshold (0.0-1.0)")
    patch.add_argument("--in-place", action="store_true", help="Write the result back to the document")
    patch.set_defaults(handler=run_patch)

    return parser


def main(argv=None) -> int:
    configure_logging()
    args = build_parser().parse_args(argv)
    try:
        return args.handler(args)
    except ReconciliationError as e:
        logger.error(f"❌ {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
