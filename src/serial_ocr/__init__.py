"""Serial number extraction from OCR text of product labels.

This module turns noisy OCR output from a photographed product label into a
best-guess serial number, a confidence score and a ranked list of
alternatives.

Core Components:
    - corrector: Contextual O/I/Z/B → 0/1/2/8 correction
    - patterns: Ordered extraction pattern table
    - validator: Candidate plausibility and image buffer checks
    - scorer: Confidence scoring
    - ranker: Deduplication and ranking
    - extractor: Text → ExtractionResult pipeline
    - processor: Image bytes → OCR → ExtractionResult
    - engine_tesseract / engine_rapidocr: OCR engine wrappers
    - preprocessing: OpenCV image enhancement

Example:
    >>> from src.serial_ocr import extract_serial_number
    >>> result = extract_serial_number("SERIAL NUMBER: 602-V388-18SB2008000012")
    >>> print(result.serial_number)
    602-V388-18SB2008000012
"""

from .config_loader import (
    Config,
    CorrectionConfig,
    ExtractionConfig,
    ImageLimitsConfig,
    LoggingConfig,
    OCREngineConfig,
    PreprocessingConfig,
    SerialOCRModuleConfig,
    get_default_config,
    load_config,
)
from .corrector import CharacterCorrector, CorrectionResult, correct_text
from .engine import OCREngineResult, RecognitionOptions, create_engine
from .engine_rapidocr import RapidOCREngine
from .engine_tesseract import TesseractEngine
from .extractor import SerialNumberExtractor, extract_serial_number
from .patterns import SERIAL_PATTERNS, RawCandidate, SerialPattern, generate_candidates
from .preprocessing import ImagePreprocessor
from .processor import SerialOCRProcessor
from .ranker import deduplicate_and_rank, dedup_key
from .scorer import score_candidate
from .types import (
    BatchExtractionResult,
    Candidate,
    ExtractionResult,
    ImageExtractionResult,
    ImageValidation,
    PipelineStage,
    RejectionReason,
)
from .validator import (
    clean_candidate,
    detect_image_format,
    is_plausible_serial,
    validate_image_for_ocr,
)

__all__ = [
    # Types
    "BatchExtractionResult",
    "Candidate",
    "ExtractionResult",
    "ImageExtractionResult",
    "ImageValidation",
    "PipelineStage",
    "RejectionReason",
    # Configuration
    "Config",
    "SerialOCRModuleConfig",
    "OCREngineConfig",
    "PreprocessingConfig",
    "ImageLimitsConfig",
    "CorrectionConfig",
    "ExtractionConfig",
    "LoggingConfig",
    "load_config",
    "get_default_config",
    # Correction
    "CharacterCorrector",
    "CorrectionResult",
    "correct_text",
    # Extraction
    "SERIAL_PATTERNS",
    "SerialPattern",
    "RawCandidate",
    "generate_candidates",
    "clean_candidate",
    "is_plausible_serial",
    "score_candidate",
    "dedup_key",
    "deduplicate_and_rank",
    "SerialNumberExtractor",
    "extract_serial_number",
    # Images and engines
    "detect_image_format",
    "validate_image_for_ocr",
    "ImagePreprocessor",
    "OCREngineResult",
    "RecognitionOptions",
    "create_engine",
    "TesseractEngine",
    "RapidOCREngine",
    "SerialOCRProcessor",
]
