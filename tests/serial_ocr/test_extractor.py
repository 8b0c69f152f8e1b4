"""End-to-end tests for serial number extraction from text."""

from datetime import datetime
from unittest.mock import patch

import pytest

from src.serial_ocr.config_loader import CorrectionConfig, ExtractionConfig
from src.serial_ocr.extractor import SerialNumberExtractor, extract_serial_number
from src.serial_ocr.ranker import best_match


class TestScenarios:
    """Test representative label texts."""

    def test_explicit_label(self):
        """Test a labelled serial is the best match."""
        result = extract_serial_number("Model XYZ S/N: AB12CD34EF56")

        assert result.success
        assert result.serial_number == "AB12CD34EF56"
        assert result.confidence >= 0.8
        assert result.candidates[0].pattern == "explicit_label"
        assert result.rejection_reason is None

    def test_dashes_preserved_in_serial_number(self):
        """Test the best serial keeps separators from the original match."""
        result = extract_serial_number("SERIAL NUMBER: 602-V388-18SB2008000012")

        assert result.success
        assert result.serial_number == "602-V388-18SB2008000012"
        assert result.candidates[0].value == "602V38818SB2008000012"
        assert result.candidates[0].pattern == "electronics_code"

    def test_nothing_found(self):
        """Test text without candidates gives an explicit empty result."""
        result = extract_serial_number("no serial visible")

        assert result.success is False
        assert result.serial_number is None
        assert result.confidence == 0.0
        assert result.candidates == []
        assert result.rejection_reason.constant == "NO_CANDIDATE_FOUND"
        assert result.rejection_reason.stage == "EXTRACTION"

    def test_unlabelled_mixed_serial(self):
        """Test a long mixed run is accepted without a label."""
        result = extract_serial_number("S7U5NJ0XA21213")

        assert result.success
        assert result.serial_number == "S7U5NJ0XA21213"

    def test_correction_applied_before_matching(self):
        """Test OCR confusions are fixed in unlabelled text."""
        result = extract_serial_number("REF 12345O7890")

        assert result.serial_number == "1234507890"

    def test_label_suppresses_correction(self):
        """Test labelled values are taken as printed."""
        result = extract_serial_number("S/N: 12345O7890")

        assert result.serial_number == "12345O7890"

    def test_glued_label_suppresses_correction(self):
        """Test a label merged with the preceding token still protects the value."""
        result = extract_serial_number("REF7S/N:AB1O2CD34EF")

        assert result.serial_number == "AB1O2CD34EF"
        assert result.candidates[0].pattern == "explicit_label"


class TestCandidateList:
    """Test properties of the candidate list."""

    def test_dedup_across_patterns(self):
        """Test dashed and plain forms of one value yield one entry."""
        result = extract_serial_number("ABC-123-456 ABC123456")
        values = [c.value for c in result.candidates]

        assert values.count("ABC123456") == 1
        assert len(values) == len(set(values))

    def test_sorted(self):
        """Test candidates are ordered by confidence then position."""
        result = extract_serial_number("SERIAL NUMBER: 602-V388-18SB2008000012")
        keys = [(-c.confidence, c.position) for c in result.candidates]

        assert keys == sorted(keys)
        assert len(result.candidates) == 3

    def test_all_candidates_plausible(self):
        """Test every candidate value is alphanumeric and 4-40 long."""
        result = extract_serial_number(
            "MFG 2023-11 P/N AB-12-CD-345 S/N: XK9923001 LOT 0012345678"
        )

        assert result.candidates
        for candidate in result.candidates:
            assert candidate.value.isalnum()
            assert 4 <= len(candidate.value) <= 40
            assert 0.0 <= candidate.confidence <= 1.0

    def test_max_candidates(self):
        """Test candidate list can be capped."""
        extractor = SerialNumberExtractor(
            extraction_config=ExtractionConfig(max_candidates=1)
        )

        result = extractor.extract("SERIAL NUMBER: 602-V388-18SB2008000012")

        assert len(result.candidates) == 1
        assert result.serial_number == "602-V388-18SB2008000012"

    def test_correction_disabled(self):
        """Test extraction uses raw text when correction is off."""
        extractor = SerialNumberExtractor(
            correction_config=CorrectionConfig(enabled=False)
        )

        assert extractor.extract("REF 12345O7890").serial_number == "12345O7890"

    def test_best_taken_from_ranked_list(self):
        """Test the serial number comes from the top ranked candidate."""
        with patch(
            "src.serial_ocr.extractor.best_match", wraps=best_match
        ) as mock_best:
            result = extract_serial_number("Model XYZ S/N: AB12CD34EF56")

        mock_best.assert_called_once_with(result.candidates)
        assert result.serial_number == "AB12CD34EF56"


class TestDeterminism:
    """Test reproducibility."""

    def test_identical_results(self):
        """Test repeated extraction gives identical candidates."""
        text = "MFG 2023-11 P/N AB-12-CD-345 S/N: XK9923001 LOT 0012345678"

        first = extract_serial_number(text)
        second = extract_serial_number(text)

        assert first.serial_number == second.serial_number
        assert first.confidence == second.confidence
        assert first.candidates == second.candidates

    def test_timestamp(self):
        """Test extraction time is an ISO-8601 timestamp."""
        result = extract_serial_number("S7U5NJ0XA21213")

        assert datetime.fromisoformat(result.extracted_at).tzinfo is not None


class TestErrorHandling:
    """Test failures are returned, never raised."""

    @pytest.mark.parametrize("text", [None, 42, b"S/N: AB12CD34EF56", ["x"]])
    def test_non_string_input(self, text):
        """Test non-string input gives an input failure."""
        result = extract_serial_number(text)

        assert result.success is False
        assert result.serial_number is None
        assert result.candidates == []
        assert result.rejection_reason.code == "SN-E001"
        assert result.rejection_reason.stage == "INPUT"

    @pytest.mark.parametrize("text", ["", "   \n\t"])
    def test_empty_text(self, text):
        """Test blank text gives an input failure."""
        result = extract_serial_number(text)

        assert result.success is False
        assert result.rejection_reason.constant == "EMPTY_TEXT"

    def test_internal_error_converted(self):
        """Test unexpected errors become extraction failures."""
        with patch(
            "src.serial_ocr.extractor.generate_candidates",
            side_effect=RuntimeError("pattern table broken"),
        ):
            result = extract_serial_number("S7U5NJ0XA21213")

        assert result.success is False
        assert result.rejection_reason.code == "SN-E011"
        assert result.rejection_reason.stage == "EXTRACTION"
        assert "pattern table broken" in result.rejection_reason.message
