"""Vector similarity helpers used by client‑side semantic search."""

import math
from typing import List, Sequence, Tuple


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """
    Cosine similarity of two vectors.

    Returns 0.0 when either vector is empty, the lengths differ, or either
    vector has zero magnitude.
    """
    if not a or not b or len(a) != len(b):
        return 0.0

    dot = sum(x * y for x, y in zip(a, b))
    magnitude_a = math.sqrt(sum(x * x for x in a))
    magnitude_b = math.sqrt(sum(y * y for y in b))
    if magnitude_a == 0.0 or magnitude_b == 0.0:
        return 0.0
    return dot / (magnitude_a * magnitude_b)


def rank_by_similarity(
    query: Sequence[float], candidates: Sequence[Sequence[float]]
) -> List[Tuple[int, float]]:
    """(index, score) pairs sorted by descending score; ties keep input order."""
    scored = [(index, cosine_similarity(query, vector)) for index, vector in enumerate(candidates)]
    return sorted(scored, key=lambda pair: pair[1], reverse=True)
