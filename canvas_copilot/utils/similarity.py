"""
Similarity Kernel - Edit distance and whitespace normalization

Character-level Levenshtein distance and the normalized similarity score the
fuzzy matcher uses to accept approximately quoted text.
"""

from typing import List


def levenshtein_distance(a: str, b: str) -> int:
    """
    Classic single-character insert/delete/substitute distance.

    Keeps two rows of the dynamic-programming table, iterating over the
    shorter string in the inner loop.
    """
    if a == b:
        return 0
    if len(a) < len(b):
        a, b = b, a
    if not b:
        return len(a)

    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        current = [i]
        for j, char_b in enumerate(b, start=1):
            cost = 0 if char_a == char_b else 1
            current.append(min(
                previous[j] + 1,         # deletion
                current[j - 1] + 1,      # insertion
                previous[j - 1] + cost   # substitution
            ))
        previous = current
    return previous[-1]


def prefix_distances(needle: str, text: str, free_start: bool = False) -> List[int]:
    """
    Edit distance from needle to every prefix of text in a single pass.

    Args:
        needle: Pattern being compared
        text: Candidate text; result[k] scores text[:k]
        free_start: If True, the match may begin anywhere in text, so
                    result[k] is the smallest distance from needle to any
                    substring of text ending at offset k

    Returns:
        List of len(text) + 1 distances
    """
    column = list(range(len(needle) + 1))
    distances = [column[-1]]
    for j, char in enumerate(text, start=1):
        diagonal = column[0]
        column[0] = 0 if free_start else j
        for i in range(1, len(needle) + 1):
            above = column[i]
            cost = 0 if needle[i - 1] == char else 1
            column[i] = min(above + 1, column[i - 1] + 1, diagonal + cost)
            diagonal = above
        distances.append(column[-1])
    return distances


def similarity(a: str, b: str) -> float:
    """
    Normalized similarity in [0, 1]: 1 - distance / max(len(a), len(b)).

    Identical strings (including two empty strings) score 1.0; when exactly
    one string is empty the score is 0.0.
    """
    if a == b:
        return 1.0
    if not a or not b:
        return 0.0
    return 1.0 - levenshtein_distance(a, b) / max(len(a), len(b))


def normalize_whitespace(text: str) -> str:
    """Collapse whitespace runs to a single space and strip both ends"""
    return ' '.join(text.split())
