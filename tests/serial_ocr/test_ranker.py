"""Unit tests for candidate deduplication and ranking."""

from src.serial_ocr.ranker import best_match, dedup_key, deduplicate_and_rank
from src.serial_ocr.types import Candidate


def make_candidate(original, confidence, position, priority=1, pattern="alnum_long"):
    return Candidate(
        value=original.replace("-", "").replace(".", ""),
        original=original,
        confidence=confidence,
        pattern=pattern,
        priority=priority,
        position=position,
    )


class TestDedupKey:
    """Test dedup key computation."""

    def test_strips_dashes_and_dots(self):
        """Test separators are removed from the key."""
        candidate = make_candidate("ABC-123.456", 0.9, 0)

        assert dedup_key(candidate) == "ABC123456"


class TestDeduplicateAndRank:
    """Test merging and ordering."""

    def test_equivalent_candidates_collapse(self):
        """Test dashed and undashed forms collapse into one entry."""
        dashed = make_candidate("ABC-123-456", 0.95, 0, 3, "dashed_segments")
        plain = make_candidate("ABC123456", 0.70, 20, 7, "alnum_short")

        ranked = deduplicate_and_rank([dashed, plain])

        assert ranked == [dashed]

    def test_first_inserted_wins(self):
        """Test the first candidate per key is kept, scores are not merged."""
        first = make_candidate("ABC123456", 0.60, 5, 1)
        later = make_candidate("ABC-123-456", 0.99, 0, 3)

        ranked = deduplicate_and_rank([first, later])

        assert len(ranked) == 1
        assert ranked[0] is first
        assert ranked[0].confidence == 0.60

    def test_sorted_by_confidence_then_position(self):
        """Test ordering by confidence descending, then position ascending."""
        a = make_candidate("AAAA1111", 0.80, 30)
        b = make_candidate("BBBB2222", 0.95, 40)
        c = make_candidate("CCCC3333", 0.80, 10)

        ranked = deduplicate_and_rank([a, b, c])

        assert [r.original for r in ranked] == ["BBBB2222", "CCCC3333", "AAAA1111"]

    def test_stable_for_full_ties(self):
        """Test equal confidence and position keep insertion order."""
        a = make_candidate("AAAA1111", 0.80, 10)
        b = make_candidate("BBBB2222", 0.80, 10)

        assert deduplicate_and_rank([a, b]) == [a, b]

    def test_empty(self):
        """Test empty input gives empty output and no best match."""
        ranked = deduplicate_and_rank([])

        assert ranked == []
        assert best_match(ranked) is None

    def test_best_match(self):
        """Test best match is the first ranked candidate."""
        a = make_candidate("AAAA1111", 0.50, 0)
        b = make_candidate("BBBB2222", 0.90, 9)

        assert best_match(deduplicate_and_rank([a, b])) is b
