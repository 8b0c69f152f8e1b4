"""Deduplication and ranking of scored serial number candidates."""

import re
from typing import Iterable, List, Optional

from .types import Candidate

_DEDUP_SEPARATORS = re.compile(r"[\s\-.]")


def dedup_key(candidate: Candidate) -> str:
    """Key under which equivalent candidates are merged.

    Example:
        >>> dedup_key(Candidate("ABC123456", "ABC-123-456", 0.9, "two_segment", 8, 0))
        'ABC123456'
    """
    return _DEDUP_SEPARATORS.sub("", candidate.value)


def deduplicate_and_rank(candidates: Iterable[Candidate]) -> List[Candidate]:
    """Merge equivalent candidates and order them for presentation.

    The first candidate seen for each dedup key is kept as-is (its score is
    never merged with later duplicates), so callers must pass candidates in
    pattern-priority then scan order. The survivors are sorted by confidence
    descending, then by position ascending; the sort is stable.

    Args:
        candidates: Scored candidates in insertion order

    Returns:
        Ranked list with one entry per dedup key
    """
    unique = {}
    for candidate in candidates:
        unique.setdefault(dedup_key(candidate), candidate)

    return sorted(unique.values(), key=lambda c: (-c.confidence, c.position))


def best_match(ranked: List[Candidate]) -> Optional[Candidate]:
    """First ranked candidate, or None for an empty list."""
    return ranked[0] if ranked else None
