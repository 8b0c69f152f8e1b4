"""OCR engine interface shared by the Tesseract and RapidOCR wrappers.

Engines are external collaborators: they turn image bytes into raw text.
Recognition settings (character whitelist, page segmentation) travel with
each call as RecognitionOptions instead of living in global engine state,
and engine lifetime is owned by whoever constructs the engine.

Example:
    >>> engine = create_engine(OCREngineConfig(type="tesseract"))
    >>> result = engine.recognize(image_bytes, RecognitionOptions(page_segmentation_mode=7))
    >>> print(result.text, result.confidence)
    'S/N: AB12CD34EF56' 0.91
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Protocol

import cv2
import numpy as np

from .config_loader import OCREngineConfig

logger = logging.getLogger(__name__)


@dataclass
class OCREngineResult:
    """Result from OCR engine text extraction.

    Attributes:
        text: Extracted text (may contain spaces and newlines).
        confidence: Average confidence across recognized words (0.0-1.0).
        success: Whether the engine ran without error (True with empty text
            when nothing was readable).
        word_confidences: Per-word confidence scores.
        duration_ms: Engine time in milliseconds.
        error: Error message when extraction failed.
    """

    text: str
    confidence: float
    success: bool
    word_confidences: List[float] = field(default_factory=list)
    duration_ms: float = 0.0
    error: Optional[str] = None

    @classmethod
    def empty(cls, duration_ms: float = 0.0) -> "OCREngineResult":
        """The engine ran but found no readable text."""
        return cls(text="", confidence=0.0, success=True, duration_ms=duration_ms)

    @classmethod
    def failure(cls, error: str, duration_ms: float = 0.0) -> "OCREngineResult":
        return cls(
            text="",
            confidence=0.0,
            success=False,
            duration_ms=duration_ms,
            error=error,
        )


@dataclass
class RecognitionOptions:
    """Per-call recognition settings.

    Attributes:
        lang: Language code(s) for recognition
        page_segmentation_mode: Tesseract PSM (7 = single text line)
        ocr_engine_mode: Tesseract OEM
        char_whitelist: Only these characters are kept (None = no filter)
        char_blacklist: These characters are dropped
        preserve_interword_spaces: Keep spaces between words
    """

    lang: str = "eng"
    page_segmentation_mode: int = 7
    ocr_engine_mode: int = 1
    char_whitelist: Optional[str] = None
    char_blacklist: Optional[str] = None
    preserve_interword_spaces: bool = True

    @classmethod
    def from_config(cls, config: OCREngineConfig) -> "RecognitionOptions":
        return cls(
            lang=config.lang,
            page_segmentation_mode=config.page_segmentation_mode,
            ocr_engine_mode=config.ocr_engine_mode,
            char_whitelist=config.char_whitelist,
            char_blacklist=config.char_blacklist,
            preserve_interword_spaces=config.preserve_interword_spaces,
        )

    def filter_text(self, text: str) -> str:
        """Drop characters outside the whitelist or inside the blacklist."""
        if self.char_whitelist is not None:
            allowed = set(self.char_whitelist) | {"\n"}
            text = "".join(c for c in text if c in allowed)
        if self.char_blacklist:
            text = "".join(c for c in text if c not in self.char_blacklist)
        return text


class OCREngineProtocol(Protocol):
    """Interface expected from OCR engines."""

    def recognize(
        self, image_bytes: bytes, options: RecognitionOptions
    ) -> OCREngineResult: ...

    def is_available(self) -> bool: ...


def decode_image(image_bytes: bytes) -> Optional[np.ndarray]:
    """Decode encoded image bytes (PNG, JPEG, ...) into a BGR/gray array.

    Returns:
        Decoded image, or None if OpenCV cannot decode the buffer.
    """
    buffer = np.frombuffer(image_bytes, dtype=np.uint8)
    if buffer.size == 0:
        return None
    return cv2.imdecode(buffer, cv2.IMREAD_UNCHANGED)


def create_engine(config: OCREngineConfig) -> OCREngineProtocol:
    """Build the engine selected by ``config.type``.

    Unknown types fall back to Tesseract with a warning.
    """
    engine_type = config.type.lower()
    if engine_type == "rapidocr":
        from .engine_rapidocr import RapidOCREngine

        logger.info("Initialized with RapidOCR engine")
        return RapidOCREngine(config)

    if engine_type != "tesseract":
        logger.warning(f"Unknown engine type '{engine_type}', defaulting to Tesseract")

    from .engine_tesseract import TesseractEngine

    logger.info("Initialized with Tesseract OCR engine")
    return TesseractEngine(config)
