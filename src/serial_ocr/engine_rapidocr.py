"""RapidOCR engine wrapper for serial number labels.

This module provides a high-level interface to RapidOCR (PaddleOCR ONNX
backend). It is the alternative to Tesseract for photographed labels with
curved, rotated or low-contrast text.

Example:
    >>> engine = RapidOCREngine(OCREngineConfig(type="rapidocr"))
    >>> result = engine.recognize(image_bytes, RecognitionOptions())
    >>> print(result.text, result.confidence)
    'S/N: AB12CD34EF56' 0.95
"""

import logging
import time
from typing import List, Optional

import numpy as np

from .config_loader import OCREngineConfig
from .engine import OCREngineResult, RecognitionOptions, decode_image

logger = logging.getLogger(__name__)


class RapidOCREngine:
    """Wrapper for RapidOCR.

    Args:
        config: OCR engine configuration.

    Attributes:
        config: Engine configuration instance.
        engine: RapidOCR engine instance (lazy-loaded).
    """

    def __init__(self, config: Optional[OCREngineConfig] = None):
        """Initialize OCR engine wrapper.

        Note:
            The actual RapidOCR engine is lazy-loaded on first use to
            avoid initialization overhead if not needed.
        """
        self.config = config or OCREngineConfig(type="rapidocr")
        self._engine: Optional[object] = None  # Lazy-loaded

        logger.info(
            f"RapidOCREngine initialized with config: "
            f"use_gpu={self.config.use_gpu}, text_score={self.config.text_score}"
        )

    @property
    def engine(self):
        """Lazy-load RapidOCR engine on first access.

        Raises:
            ImportError: If rapidocr_onnxruntime is not installed.
            RuntimeError: If engine initialization fails.
        """
        if self._engine is None:
            try:
                from rapidocr_onnxruntime import RapidOCR

                self._engine = RapidOCR(
                    use_angle_cls=self.config.use_angle_cls,
                    use_gpu=self.config.use_gpu,
                    text_score=self.config.text_score,
                    use_space_char=True,
                )
                logger.info("RapidOCR engine loaded successfully")

            except ImportError as e:
                logger.error(
                    "Failed to import rapidocr_onnxruntime. "
                    "Install with: pip install rapidocr-onnxruntime"
                )
                raise ImportError(
                    "rapidocr-onnxruntime not installed. "
                    "Run: pip install rapidocr-onnxruntime"
                ) from e

            except Exception as e:
                logger.error(f"Failed to initialize RapidOCR engine: {e}")
                raise RuntimeError(f"RapidOCR initialization failed: {e}") from e

        return self._engine

    def recognize(
        self,
        image_bytes: bytes,
        options: Optional[RecognitionOptions] = None,
    ) -> OCREngineResult:
        """Extract text from an encoded label image.

        Detected regions are ordered top-to-bottom, then left-to-right, and
        joined with spaces.

        Args:
            image_bytes: Encoded image (PNG, JPEG, ...).
            options: Recognition options; only the character filters apply.

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
            # RapidOCR returns (results_list, timing_info);
            # each result is [bbox, text, confidence]
            result = self.engine(image)
            duration_ms = (time.perf_counter() - start_time) * 1000

            if not isinstance(result, tuple) or not result or not result[0]:
                logger.warning("RapidOCR returned no text detections")
                return OCREngineResult.empty(duration_ms)

            detections = sorted(
                result[0],
                key=lambda item: (
                    min(point[1] for point in item[0]),
                    min(point[0] for point in item[0]),
                ),
            )

            texts: List[str] = []
            confidences: List[float] = []
            for _, text, conf in detections:
                filtered = options.filter_text(str(text)).strip()
                if filtered:
                    texts.append(filtered)
                    confidences.append(float(conf))

            if not texts:
                logger.warning("No valid text left after character filtering")
                return OCREngineResult.empty(duration_ms)

            aggregated_text = " ".join(texts)
            avg_confidence = float(np.mean(confidences))

            logger.debug(
                f"OCR extraction successful: text='{aggregated_text}', "
                f"confidence={avg_confidence:.2f}, regions={len(texts)}"
            )

            return OCREngineResult(
                text=aggregated_text,
                confidence=avg_confidence,
                success=True,
                word_confidences=confidences,
                duration_ms=duration_ms,
            )

        except Exception as e:
            logger.error(f"OCR extraction failed: {e}", exc_info=True)
            return OCREngineResult.failure(
                str(e), (time.perf_counter() - start_time) * 1000
            )

    def is_available(self) -> bool:
        """Check if RapidOCR engine is available.

        Returns:
            True if engine can be initialized.
        """
        try:
            _ = self.engine  # Trigger lazy loading
            return True
        except (ImportError, RuntimeError):
            return False
