"""Tesseract OCR engine wrapper for serial number labels.

This module provides a high-level interface to Tesseract OCR tuned for
short, single-line serial number labels.

Example:
    >>> from src.serial_ocr import TesseractEngine, OCREngineConfig
    >>> engine = TesseractEngine(OCREngineConfig())
    >>> result = engine.recognize(image_bytes, RecognitionOptions())
    >>> print(result.text, result.confidence)
    'S/N: AB12CD34EF56' 0.85
"""

import logging
import time
from typing import Dict, List, Optional, Tuple

import numpy as np
import pytesseract

from .config_loader import OCREngineConfig
from .engine import OCREngineResult, RecognitionOptions, decode_image

logger = logging.getLogger(__name__)


class TesseractEngine:
    """Wrapper for Tesseract OCR with serial number optimizations.

    Args:
        config: OCR engine configuration.

    Attributes:
        config: Engine configuration instance.

    Example:
        >>> engine = TesseractEngine(config)
        >>> with open("label.png", "rb") as f:
        ...     result = engine.recognize(f.read(), RecognitionOptions())
        >>> if result.success:
        ...     print(f"Text: {result.text}, Confidence: {result.confidence:.2f}")
    """

    def __init__(self, config: Optional[OCREngineConfig] = None):
        self.config = config or OCREngineConfig()
        self._version: Optional[str] = None

    def is_available(self) -> bool:
        """Check if the Tesseract binary can be found.

        Returns:
            True if Tesseract reports a version.
        """
        try:
            self._version = str(pytesseract.get_tesseract_version())
            logger.info(f"Tesseract engine available: version {self._version}")
            return True
        except (pytesseract.TesseractNotFoundError, OSError) as e:
            logger.error(f"Tesseract not found or not properly configured: {e}")
            return False

    @staticmethod
    def build_config(options: RecognitionOptions) -> str:
        """Build the Tesseract command-line config string.

        NOTE: tessedit_char_whitelist is not passed to Tesseract because it
        makes the LSTM engine report confidence=0. Characters are filtered
        after recognition instead.
        """
        config = (
            f"--oem {options.ocr_engine_mode} "
            f"--psm {options.page_segmentation_mode}"
        )
        if options.preserve_interword_spaces:
            config += " -c preserve_interword_spaces=1"
        return config

    def recognize(
        self,
        image_bytes: bytes,
        options: Optional[RecognitionOptions] = None,
    ) -> OCREngineResult:
        """Extract text from an encoded label image.

        This method:
        1. Decodes the image bytes
        2. Runs Tesseract with the per-call options
        3. Reassembles words into lines in reading order
        4. Averages word confidences

        Args:
            image_bytes: Encoded image (PNG, JPEG, ...).
            options: Recognition options; defaults derived from config.

        Returns:
            OCREngineResult with extracted text and metadata.
        """
        options = options or RecognitionOptions.from_config(self.config)
        start_time = time.perf_counter()

        image = decode_image(image_bytes)
        if image is None or image.size == 0:
            logger.error("Invalid image: could not decode buffer")
            return OCREngineResult.failure("Could not decode image")

        try:
            tesseract_config = self.build_config(options)
            logger.debug(f"Running Tesseract with config: {tesseract_config}")

            data = pytesseract.image_to_data(
                image,
                lang=options.lang,
                config=tesseract_config,
                output_type=pytesseract.Output.DICT,
            )

            lines: Dict[Tuple[int, int, int], List[str]] = {}
            confidences: List[float] = []
            for i in range(len(data["text"])):
                word = options.filter_text(str(data["text"][i]).strip())
                conf = float(data["conf"][i])

                # conf < 0 marks layout rows without recognized text
                if not word or conf < 0:
                    continue

                key = (data["block_num"][i], data["par_num"][i], data["line_num"][i])
                lines.setdefault(key, []).append(word)
                confidences.append(conf / 100.0)

            duration_ms = (time.perf_counter() - start_time) * 1000

            if not confidences:
                logger.warning("Tesseract returned no valid detections")
                return OCREngineResult.empty(duration_ms)

            text = "\n".join(" ".join(words) for _, words in sorted(lines.items()))
            avg_confidence = float(np.mean(confidences))

            logger.debug(
                f"Tesseract extraction successful: text='{text}', "
                f"confidence={avg_confidence:.2f}, words={len(confidences)}"
            )

            return OCREngineResult(
                text=text,
                confidence=avg_confidence,
                success=True,
                word_confidences=confidences,
                duration_ms=duration_ms,
            )

        except Exception as e:
            logger.error(f"Tesseract extraction failed: {e}", exc_info=True)
            return OCREngineResult.failure(
                str(e), (time.perf_counter() - start_time) * 1000
            )
