"""Type definitions for the serial number extraction module.

This module defines the data structures that flow through the extraction
pipeline: scored candidates, structured rejection reasons, and the final
extraction results returned to callers.
"""

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional


class PipelineStage(Enum):
    """Pipeline phase where a rejection occurred."""

    INPUT = "INPUT"
    OCR = "OCR"
    EXTRACTION = "EXTRACTION"


@dataclass
class RejectionReason:
    """Structured rejection reason with error code and context.

    Attributes:
        code: Error code (e.g., "SN-E010")
        constant: String constant for programmatic checking (e.g., "NO_CANDIDATE_FOUND")
        message: Human-readable explanation
        stage: Pipeline stage where rejection occurred ("INPUT", "OCR", "EXTRACTION")
        severity: Error severity level ("ERROR" or "WARNING")
    """

    code: str
    constant: str
    message: str
    stage: str
    severity: str = "ERROR"


@dataclass
class Candidate:
    """A scored serial number candidate.

    Attributes:
        value: Candidate with whitespace, dash and dot separators removed
        original: Candidate exactly as matched (separators preserved)
        confidence: Heuristic score in [0.0, 1.0]
        pattern: Name of the extraction pattern that produced the match
        priority: Index of that pattern in the ordered pattern table
        position: Character offset of the match in the corrected text
    """

    value: str
    original: str
    confidence: float
    pattern: str
    priority: int
    position: int


def utc_timestamp() -> str:
    """Current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


@dataclass
class ExtractionResult:
    """Result of serial number extraction from OCR text.

    Attributes:
        success: True when at least one plausible candidate was found
        serial_number: Best candidate's original text, None when nothing was found
        confidence: Best candidate's confidence, 0.0 on failure
        candidates: Deduplicated candidates ordered by confidence then position
        extracted_at: ISO-8601 UTC timestamp of the extraction
        rejection_reason: Why extraction failed, None on success
    """

    success: bool
    serial_number: Optional[str]
    confidence: float
    candidates: List[Candidate] = field(default_factory=list)
    extracted_at: str = field(default_factory=utc_timestamp)
    rejection_reason: Optional[RejectionReason] = None

    def is_pass(self) -> bool:
        """Check if a serial number was extracted.

        Returns:
            True if extraction succeeded, False otherwise.
        """
        return self.success

    @property
    def best_candidate(self) -> Optional[Candidate]:
        """First ranked candidate, or None if the list is empty."""
        return self.candidates[0] if self.candidates else None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a JSON-compatible dictionary."""
        data = asdict(self)
        data["error"] = data.pop("rejection_reason")
        return data


@dataclass
class ImageExtractionResult(ExtractionResult):
    """Extraction result for an image, including OCR metadata.

    Attributes:
        ocr_text: Raw text returned by the OCR engine
        ocr_confidence: Engine confidence for the recognized text (0.0-1.0)
        duration_ms: Total processing time in milliseconds
    """

    ocr_text: str = ""
    ocr_confidence: float = 0.0
    duration_ms: float = 0.0


@dataclass
class ImageValidation:
    """Outcome of validating an image buffer before OCR.

    Attributes:
        valid: Whether the buffer is suitable for OCR
        format: Detected image format (e.g., "png"), None if unknown
        size: Buffer size in bytes
        error: Reason the buffer was rejected, None when valid
    """

    valid: bool
    format: Optional[str] = None
    size: int = 0
    error: Optional[str] = None


@dataclass
class BatchExtractionResult:
    """Aggregate result of processing several images.

    Attributes:
        total: Number of images submitted
        successful: Number of images where a serial number was found
        failed: Number of images without a serial number
        results: Per-image results in submission order
    """

    total: int
    successful: int
    failed: int
    results: List[ImageExtractionResult]

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a JSON-compatible dictionary."""
        return {
            "total": self.total,
            "successful": self.successful,
            "failed": self.failed,
            "results": [r.to_dict() for r in self.results],
        }
