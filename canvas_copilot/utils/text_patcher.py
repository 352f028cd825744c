"""
Text Patcher - Apply model-proposed replacements to a document

Changes are independent hints, not a transaction: every change is tried
against the current (progressively patched) text, and a change that cannot
be located is reported back instead of aborting the batch.

Model responses encode changes either as JSON:

    [{"original": "old sentence", "new": "new sentence"}, ...]

or as one or more search/replace blocks:

    <<<< SEARCH
    old sentence
    ====
    new sentence
    >>>> REPLACE
"""

import json
import logging
import re
from typing import Any, Iterable, List

from pydantic import ValidationError

from canvas_copilot.models.patch_models import PatchResult, TextChange
from canvas_copilot.utils.fuzzy_matcher import DEFAULT_MIN_SIMILARITY, find_best_match

logger = logging.getLogger(__name__)

_FENCE_OPEN = re.compile(r'^```[\w-]*[ \t]*\n?')
_FENCE_CLOSE = re.compile(r'\n?```$')

_SEARCH_REPLACE_BLOCK = re.compile(
    r'<{4,}\s*SEARCH\s*\n([\s\S]*?)\n={4,}\s*\n([\s\S]*?)\n>{4,}\s*REPLACE',
    re.IGNORECASE
)


def apply_patches(
    document: str,
    changes: Iterable[TextChange],
    min_similarity: float = DEFAULT_MIN_SIMILARITY
) -> PatchResult:
    """
    Apply text changes to a document.

    Changes are processed longest-original first so that a short, generic
    change cannot land inside a region a longer change targets.

    Args:
        document: Current document body
        changes: Changes to apply, in any order
        min_similarity: Minimum similarity (0.0-1.0) for fuzzy matches

    Returns:
        PatchResult with the patched text and any changes that failed
    """
    current = document
    applied_count = 0
    failed: List[TextChange] = []

    ordered = sorted(changes, key=lambda change: len(change.original), reverse=True)

    for change in ordered:
        match = find_best_match(current, change.original, min_similarity)
        if match is None:
            failed.append(change)
            logger.debug(f"Text Patcher: failed to match patch: {change.original[:50]!r}")
            continue

        current = current[:match.start] + change.new + current[match.end:]
        applied_count += 1

    if failed:
        logger.warning(f"⚠️ Applied {applied_count}/{len(ordered)} patches, {len(failed)} could not be matched")
    else:
        logger.info(f"✅ Applied {applied_count} patches")

    return PatchResult(
        success=not failed,
        text=current,
        applied_count=applied_count,
        failed_patches=failed
    )


def _strip_code_fence(response: str) -> str:
    content = response.strip()
    content = _FENCE_OPEN.sub('', content, count=1)
    content = _FENCE_CLOSE.sub('', content, count=1)
    return content.strip()


def _changes_from_json(data: Any) -> List[TextChange]:
    """Collect {original, new} records from a decoded JSON value"""
    if isinstance(data, dict):
        data = data.get("changes", data.get("patches"))
    if not isinstance(data, list):
        return []

    changes: List[TextChange] = []
    for item in data:
        if not isinstance(item, dict) or not item.get("original") or "new" not in item:
            continue
        try:
            changes.append(TextChange(original=item["original"], new=item["new"] or ""))
        except ValidationError as e:
            logger.debug(f"Skipping malformed change record: {e}")
    return changes


def parse_patches(response: str) -> List[TextChange]:
    """
    Parse text changes out of a model response.

    JSON is tried first; when it does not yield any change, the response is
    scanned for search/replace blocks. Zero changes is a valid result.

    Args:
        response: Raw model response

    Returns:
        List of TextChange in response order
    """
    content = _strip_code_fence(response)

    try:
        changes = _changes_from_json(json.loads(content))
        if changes:
            return changes
    except (ValueError, RecursionError):
        pass  # Not JSON; fall through to block syntax

    changes = [
        TextChange(original=original.strip(), new=new.strip())
        for original, new in _SEARCH_REPLACE_BLOCK.findall(content)
    ]
    if not changes:
        logger.debug("No patches found in response")
    return changes
