"""Serial number OCR processor: image bytes to ranked serial numbers.

This module orchestrates the complete workflow:
    1. INPUT VALIDATION: Buffer type, size and image format checks
    2. PREPROCESSING: Optional contrast/sharpen/resize (never fatal)
    3. TEXT EXTRACTION: OCR engine call with per-call recognition options
    4. SERIAL EXTRACTION: Correction, pattern matching, scoring, ranking

Each stage either passes or returns a failed result tagged with the stage
that rejected it; extraction is never attempted without OCR text.

Example:
    >>> from src.serial_ocr import SerialOCRProcessor
    >>> processor = SerialOCRProcessor()
    >>> result = processor.process_image(image_bytes)
    >>> if result.is_pass():
    ...     print(f"Serial: {result.serial_number} ({result.confidence:.2f})")
"""

import logging
import time
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

from .config_loader import Config, get_default_config, load_config
from .engine import (
    OCREngineProtocol,
    OCREngineResult,
    RecognitionOptions,
    create_engine,
)
from .extractor import SerialNumberExtractor, rejection
from .preprocessing import ImagePreprocessor
from .types import (
    BatchExtractionResult,
    ExtractionResult,
    ImageExtractionResult,
    PipelineStage,
    RejectionReason,
)
from .validator import detect_image_format

logger = logging.getLogger(__name__)


class SerialOCRProcessor:
    """Main serial number processing class.

    The OCR engine is a collaborator: pass an already constructed engine to
    control its lifecycle, or let the processor build one from config.

    Args:
        config_path: Optional path to config YAML file. If None, uses default config.
        engine: Optional OCR engine. If None, built from ``config.ocr.engine``.
        preprocessor: Optional image preprocessor. If None, built from
            ``config.ocr.preprocessing`` when preprocessing is enabled.
        config: Optional already loaded configuration. Takes precedence over
            ``config_path``.

    Attributes:
        config: Full configuration object
        engine: OCR engine used for text extraction
        preprocessor: Image preprocessor, or None when disabled
        extractor: Text-to-serial extraction pipeline
        recognition_options: Options passed to the engine on every call
    """

    def __init__(
        self,
        config_path: Optional[Path] = None,
        engine: Optional[OCREngineProtocol] = None,
        preprocessor: Optional[Any] = None,
        config: Optional[Config] = None,
    ):
        if config is not None:
            self.config: Config = config
        elif config_path is None:
            self.config: Config = get_default_config()
        else:
            self.config: Config = load_config(config_path)

        ocr_config = self.config.ocr
        self.engine = engine if engine is not None else create_engine(ocr_config.engine)

        if preprocessor is not None:
            self.preprocessor = preprocessor
        elif ocr_config.preprocessing.enabled:
            self.preprocessor = ImagePreprocessor(ocr_config.preprocessing)
        else:
            self.preprocessor = None

        self.extractor = SerialNumberExtractor(
            correction_config=ocr_config.correction,
            extraction_config=ocr_config.extraction,
        )
        self.recognition_options = RecognitionOptions.from_config(ocr_config.engine)

    def extract_serial_number(self, text: object) -> ExtractionResult:
        """Extract a serial number from already recognized text."""
        return self.extractor.extract(text)

    def process_image(self, image_bytes: object) -> ImageExtractionResult:
        """Process a label image into a ranked serial number result.

        Args:
            image_bytes: Encoded image buffer (PNG, JPEG, GIF, WebP, BMP, TIFF)

        Returns:
            ImageExtractionResult with serial number, candidates and OCR metadata
        """
        start_time = time.perf_counter()

        # ═══════════════════════════════════════════════════════════════
        # STAGE 1: INPUT VALIDATION
        # ═══════════════════════════════════════════════════════════════
        input_rejection = self._validate_input(image_bytes)
        if input_rejection is not None:
            logger.warning(f"Image rejected: {input_rejection.message}")
            return self._create_rejection(input_rejection, start_time)

        # ═══════════════════════════════════════════════════════════════
        # STAGES 2-3: PREPROCESSING + TEXT EXTRACTION
        # ═══════════════════════════════════════════════════════════════
        ocr_result = self._run_ocr(bytes(image_bytes))

        if not ocr_result.success:
            return self._create_rejection(
                rejection(
                    "SN-E020",
                    "OCR_FAILED",
                    f"Failed to extract text from image: {ocr_result.error}",
                    PipelineStage.OCR,
                ),
                start_time,
                ocr_confidence=ocr_result.confidence,
            )

        if not ocr_result.text or not ocr_result.text.strip():
            return self._create_rejection(
                rejection(
                    "SN-E021",
                    "NO_TEXT_DETECTED",
                    "OCR engine did not detect any text",
                    PipelineStage.OCR,
                ),
                start_time,
                ocr_confidence=ocr_result.confidence,
            )

        # ═══════════════════════════════════════════════════════════════
        # STAGE 4: SERIAL EXTRACTION
        # ═══════════════════════════════════════════════════════════════
        serial_result = self.extractor.extract(ocr_result.text)
        duration_ms = (time.perf_counter() - start_time) * 1000

        logger.info(
            f"Serial extraction from image: success={serial_result.success}, "
            f"serial={serial_result.serial_number}, "
            f"confidence={serial_result.confidence:.2f}, "
            f"ocr_confidence={ocr_result.confidence:.2f}, "
            f"duration={duration_ms:.1f}ms"
        )

        return ImageExtractionResult(
            success=serial_result.success,
            serial_number=serial_result.serial_number,
            confidence=serial_result.confidence,
            candidates=serial_result.candidates,
            extracted_at=serial_result.extracted_at,
            rejection_reason=serial_result.rejection_reason,
            ocr_text=ocr_result.text,
            ocr_confidence=ocr_result.confidence,
            duration_ms=duration_ms,
        )

    def process_images(self, images: Iterable[object]) -> BatchExtractionResult:
        """Process several label images one after another.

        Images are processed sequentially; a failing image never stops the
        batch.

        Args:
            images: Encoded image buffers

        Returns:
            BatchExtractionResult with per-image results in input order
        """
        results = [self.process_image(image_bytes) for image_bytes in images]
        successful = sum(1 for r in results if r.success)

        logger.info(
            f"Processed {len(results)} images: "
            f"{successful} successful, {len(results) - successful} failed"
        )

        return BatchExtractionResult(
            total=len(results),
            successful=successful,
            failed=len(results) - successful,
            results=results,
        )

    def extract_text(self, image_bytes: object) -> OCREngineResult:
        """Extract raw text from an image without serial number parsing.

        Args:
            image_bytes: Encoded image buffer

        Returns:
            OCREngineResult; failures carry an error message
        """
        input_rejection = self._validate_input(image_bytes)
        if input_rejection is not None:
            return OCREngineResult.failure(input_rejection.message)
        return self._run_ocr(bytes(image_bytes))

    def _validate_input(self, image_bytes: object) -> Optional[RejectionReason]:
        """Stage 1: Check the buffer before spending an OCR call on it."""
        if not isinstance(image_bytes, (bytes, bytearray)) or len(image_bytes) == 0:
            return rejection(
                "SN-E003",
                "INVALID_IMAGE",
                "Invalid image buffer provided",
                PipelineStage.INPUT,
            )

        max_bytes = self.config.ocr.image_limits.max_bytes
        if len(image_bytes) > max_bytes:
            return rejection(
                "SN-E004",
                "IMAGE_TOO_LARGE",
                f"Image size {len(image_bytes)} exceeds maximum of {max_bytes} bytes",
                PipelineStage.INPUT,
            )

        if detect_image_format(bytes(image_bytes)) is None:
            return rejection(
                "SN-E005",
                "UNSUPPORTED_IMAGE_FORMAT",
                "Unknown or invalid image format",
                PipelineStage.INPUT,
            )

        return None

    def _run_ocr(self, image_bytes: bytes) -> OCREngineResult:
        """Stages 2-3: Preprocess (best effort) and call the OCR engine."""
        processed = image_bytes
        if self.preprocessor is not None:
            try:
                processed = self.preprocessor.preprocess(image_bytes)
            except Exception as e:
                logger.warning(f"Image preprocessing failed, using original: {e}")
                processed = image_bytes
            if not processed:
                processed = image_bytes

        try:
            return self.engine.recognize(processed, self.recognition_options)
        except Exception as e:
            logger.error(f"OCR engine call failed: {e}", exc_info=True)
            return OCREngineResult.failure(str(e))

    def _create_rejection(
        self,
        reason: RejectionReason,
        start_time: float,
        ocr_confidence: float = 0.0,
    ) -> ImageExtractionResult:
        """Create a failed ImageExtractionResult.

        Args:
            reason: Rejection reason with error details
            start_time: perf_counter value at the start of processing
            ocr_confidence: Engine confidence, if the engine produced one

        Returns:
            ImageExtractionResult with success=False and no candidates
        """
        return ImageExtractionResult(
            success=False,
            serial_number=None,
            confidence=0.0,
            candidates=[],
            rejection_reason=reason,
            ocr_text="",
            ocr_confidence=ocr_confidence,
            duration_ms=(time.perf_counter() - start_time) * 1000,
        )

    def get_status(self) -> Dict[str, Any]:
        """Get processor status.

        Returns:
            Dictionary with engine availability and recognition settings
        """
        engine_config = self.config.ocr.engine
        available = self.engine.is_available()
        return {
            "service": "ocr",
            "status": "healthy" if available else "unhealthy",
            "engine_type": engine_config.type,
            "engine_available": available,
            "language": self.recognition_options.lang,
            "page_segmentation_mode": self.recognition_options.page_segmentation_mode,
            "char_whitelist": self.recognition_options.char_whitelist,
            "preprocessing_enabled": self.preprocessor is not None,
            "correction_enabled": self.config.ocr.correction.enabled,
        }
