"""
Fuzzy Matcher - Locate approximately quoted text in a document

Models quote the document they were given, but the quote drifts: whitespace
gets reflowed, words get transposed, punctuation changes. The matcher tries
progressively looser strategies and returns the first span it can trust:

1. Exact substring
2. Whitespace-normalized substring, mapped back to original offsets
3. Sliding window scored by normalized edit distance
"""

import logging
import math
from dataclasses import dataclass
from typing import List, Literal, Optional, Tuple

from canvas_copilot.utils.similarity import normalize_whitespace, prefix_distances

logger = logging.getLogger(__name__)

DEFAULT_MIN_SIMILARITY = 0.8

# Fuzzy windows range from 70% to 130% of the needle length
WINDOW_MIN_RATIO = 0.7
WINDOW_MAX_RATIO = 1.3


@dataclass
class MatchSpan:
    """Half-open span [start, end) of the document that matched a needle"""
    start: int
    end: int
    matched_text: str
    similarity: float
    strategy: Literal["exact", "normalized", "fuzzy"]


def _normalize_with_offsets(text: str) -> Tuple[str, List[int]]:
    """
    Normalize whitespace like normalize_whitespace() and remember, for every
    character of the result, the offset it came from in the original text.
    A collapsed whitespace run maps to the offset of its first character.
    """
    chars: List[str] = []
    offsets: List[int] = []
    run_start: Optional[int] = None
    for index, char in enumerate(text):
        if char.isspace():
            if run_start is None:
                run_start = index
            continue
        if run_start is not None and chars:
            chars.append(' ')
            offsets.append(run_start)
        run_start = None
        chars.append(char)
        offsets.append(index)
    return ''.join(chars), offsets


def _find_exact(document: str, needle: str) -> Optional[MatchSpan]:
    index = document.find(needle)
    if index == -1:
        return None
    return MatchSpan(index, index + len(needle), needle, 1.0, "exact")


def _find_normalized(document: str, needle: str) -> Optional[MatchSpan]:
    """
    Match after collapsing whitespace in both texts, then recover the
    tightest original span whose normalized form equals the normalized needle.
    """
    normalized_needle = normalize_whitespace(needle)
    if not normalized_needle:
        return None

    normalized_doc, offsets = _normalize_with_offsets(document)
    index = normalized_doc.find(normalized_needle)
    if index == -1:
        return None

    # The normalized needle never starts or ends with a space, so both
    # boundary characters map to real (non-whitespace) document characters.
    start = offsets[index]
    end = offsets[index + len(normalized_needle) - 1] + 1
    return MatchSpan(start, end, document[start:end], 1.0, "normalized")


def _find_fuzzy(document: str, needle: str, min_similarity: float) -> Optional[MatchSpan]:
    """
    Score every window of 70%-130% of the needle length at every offset up to
    len(document) - len(needle) / 2 and keep the first best window that meets
    min_similarity.

    A free-start pass first finds the offsets where any window could end
    within the maximum tolerated distance; windows that cannot end there
    cannot qualify and are never scored.
    """
    needle_len = len(needle)
    last_start = len(document) - needle_len / 2
    if last_start < 0:
        return None

    min_len = max(1, math.floor(needle_len * WINDOW_MIN_RATIO))
    max_len = math.ceil(needle_len * WINDOW_MAX_RATIO)
    max_distance = (1.0 - min_similarity) * max(max_len, needle_len)

    reachable = prefix_distances(needle, document, free_start=True)
    candidate_starts = set()
    for end, distance in enumerate(reachable):
        if distance > max_distance + 1e-9:
            continue
        for start in range(max(0, end - max_len), end - min_len + 1):
            if start <= last_start:
                candidate_starts.add(start)

    best: Optional[MatchSpan] = None
    for start in sorted(candidate_starts):
        window = document[start:start + max_len]
        distances = prefix_distances(needle, window)
        for length in range(min_len, len(window) + 1):
            score = 1.0 - distances[length] / max(length, needle_len)
            if score >= min_similarity and (best is None or score > best.similarity):
                best = MatchSpan(start, start + length, window[:length], score, "fuzzy")

    return best


def find_best_match(
    document: str,
    needle: str,
    min_similarity: float = DEFAULT_MIN_SIMILARITY
) -> Optional[MatchSpan]:
    """
    Find the span of document that best matches needle.

    Args:
        document: Current document body
        needle: Text the model claims exists in the document
        min_similarity: Minimum similarity (0.0-1.0) for a fuzzy match

    Returns:
        MatchSpan for the first strategy that succeeds, or None when nothing
        matches. An empty or whitespace-only needle never matches.
    """
    if not needle or not needle.strip():
        return None

    match = _find_exact(document, needle)
    if match:
        return match

    match = _find_normalized(document, needle)
    if match:
        logger.debug(f"Whitespace-normalized match at [{match.start}, {match.end})")
        return match

    match = _find_fuzzy(document, needle, min_similarity)
    if match:
        logger.info(
            f"🔍 Fuzzy match found: similarity={match.similarity:.2f}, "
            f"span=[{match.start}, {match.end})"
        )
        return match

    logger.debug(f"No match above {min_similarity:.2f} for: {needle[:50]!r}")
    return None
