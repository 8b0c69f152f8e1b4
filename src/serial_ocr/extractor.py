"""Serial number extraction from OCR text.

Pipeline:
    1. CORRECTION: Fix digit/letter OCR confusions in numeric context
    2. GENERATION: Run the ordered pattern table over the corrected text
    3. FILTERING: Drop matches implausible as serial numbers
    4. SCORING: Assign a confidence to each surviving match
    5. RANKING: Deduplicate and order the candidates

Extraction never raises: invalid input and internal errors are reported as
failed ExtractionResults carrying a RejectionReason.

Example:
    >>> result = extract_serial_number("Model XYZ S/N: AB12CD34EF56")
    >>> result.serial_number, result.confidence
    ('AB12CD34EF56', 1.0)
"""

import logging
from typing import List, Optional

from .config_loader import CorrectionConfig, ExtractionConfig
from .corrector import CharacterCorrector
from .patterns import generate_candidates
from .ranker import best_match, deduplicate_and_rank
from .scorer import score_candidate
from .types import Candidate, ExtractionResult, PipelineStage, RejectionReason
from .validator import clean_candidate, is_plausible_serial

logger = logging.getLogger(__name__)


def rejection(
    code: str, constant: str, message: str, stage: PipelineStage
) -> RejectionReason:
    return RejectionReason(
        code=code, constant=constant, message=message, stage=stage.value
    )


class SerialNumberExtractor:
    """Extracts a ranked list of serial number candidates from text.

    Args:
        correction_config: Character correction settings.
        extraction_config: Candidate list settings.

    Attributes:
        corrector: Character correction engine
        max_candidates: Upper bound on returned candidates (None = unbounded)
    """

    def __init__(
        self,
        correction_config: Optional[CorrectionConfig] = None,
        extraction_config: Optional[ExtractionConfig] = None,
    ):
        self.corrector = CharacterCorrector(correction_config)
        self.max_candidates = (extraction_config or ExtractionConfig()).max_candidates

    def find_candidates(self, text: str) -> List[Candidate]:
        """Correct, match, filter, score and rank candidates in text.

        Args:
            text: Raw OCR text

        Returns:
            Ranked, deduplicated candidates (possibly empty)
        """
        corrected = self.corrector.correct(text).corrected_text

        scored: List[Candidate] = []
        for raw in generate_candidates(corrected):
            if not is_plausible_serial(raw.raw_match):
                logger.debug(
                    f"Rejected implausible match '{raw.raw_match}' ({raw.pattern})"
                )
                continue
            scored.append(
                Candidate(
                    value=clean_candidate(raw.raw_match),
                    original=raw.raw_match,
                    confidence=score_candidate(raw.raw_match, raw.priority),
                    pattern=raw.pattern,
                    priority=raw.priority,
                    position=raw.position,
                )
            )

        ranked = deduplicate_and_rank(scored)
        if self.max_candidates is not None:
            ranked = ranked[: self.max_candidates]
        return ranked

    def extract(self, text: object) -> ExtractionResult:
        """Extract the best serial number from OCR text.

        Args:
            text: Raw OCR text. Non-string values yield a failed result.

        Returns:
            ExtractionResult; ``serial_number`` is the best candidate's
            original text with separators preserved.
        """
        if not isinstance(text, str):
            return ExtractionResult(
                success=False,
                serial_number=None,
                confidence=0.0,
                rejection_reason=rejection(
                    "SN-E001",
                    "INVALID_TEXT",
                    f"Expected text as str, got {type(text).__name__}",
                    PipelineStage.INPUT,
                ),
            )

        if not text.strip():
            return ExtractionResult(
                success=False,
                serial_number=None,
                confidence=0.0,
                rejection_reason=rejection(
                    "SN-E002",
                    "EMPTY_TEXT",
                    "No text provided for serial number extraction",
                    PipelineStage.INPUT,
                ),
            )

        try:
            candidates = self.find_candidates(text)
        except Exception as e:
            logger.error(f"Serial number extraction failed: {e}", exc_info=True)
            return ExtractionResult(
                success=False,
                serial_number=None,
                confidence=0.0,
                rejection_reason=rejection(
                    "SN-E011", "EXTRACTION_ERROR", str(e), PipelineStage.EXTRACTION
                ),
            )

        best = best_match(candidates)
        if best is None:
            logger.info(f"No serial number candidates in text of length {len(text)}")
            return ExtractionResult(
                success=False,
                serial_number=None,
                confidence=0.0,
                candidates=[],
                rejection_reason=rejection(
                    "SN-E010",
                    "NO_CANDIDATE_FOUND",
                    "No substring matched a plausible serial number pattern",
                    PipelineStage.EXTRACTION,
                ),
            )

        logger.info(
            f"Serial extraction: best='{best.original}' "
            f"confidence={best.confidence:.2f} candidates={len(candidates)}"
        )

        return ExtractionResult(
            success=True,
            serial_number=best.original,
            confidence=best.confidence,
            candidates=candidates,
        )


def extract_serial_number(text: object) -> ExtractionResult:
    """Extract a serial number from text with default settings."""
    return SerialNumberExtractor().extract(text)
