"""
Pytest Configuration and Shared Fixtures

This file contains pytest configuration and fixtures that are available
to all test modules.
"""

from unittest.mock import Mock

import pytest

from src.serial_ocr.engine import OCREngineResult


@pytest.fixture
def label_image_bytes():
    """Fixture providing a PNG-encoded synthetic serial number label."""
    import cv2
    import numpy as np

    # White label with dark printed text
    image = np.ones((40, 320, 3), dtype=np.uint8) * 255
    cv2.putText(
        image,
        "S/N: AB12CD34EF56",
        (5, 28),
        cv2.FONT_HERSHEY_SIMPLEX,
        0.8,
        (20, 20, 20),
        2,
    )

    ok, encoded = cv2.imencode(".png", image)
    assert ok
    return encoded.tobytes()


@pytest.fixture
def fake_png_bytes():
    """Fixture providing bytes with a PNG signature but no decodable image."""
    return b"\x89PNG\r\n\x1a\n" + b"\x00" * 256


@pytest.fixture
def mock_engine():
    """Fixture providing an OCR engine stub that recognizes a labelled serial."""
    engine = Mock()
    engine.recognize.return_value = OCREngineResult(
        text="Model XYZ S/N: AB12CD34EF56",
        confidence=0.9,
        success=True,
        word_confidences=[0.9, 0.9, 0.9, 0.9],
        duration_ms=12.0,
    )
    engine.is_available.return_value = True
    return engine
