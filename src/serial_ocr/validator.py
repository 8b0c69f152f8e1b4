"""Plausibility checks for serial number candidates and image buffers.

Candidate checks decide whether a pattern match can be a printed device
serial number. Image checks reject buffers that are empty, oversized or not
a recognised image format before they are sent to the OCR engine.
"""

import re
from typing import Optional

from .config_loader import ImageLimitsConfig
from .types import ImageValidation

_SEPARATORS = re.compile(r"[\s\-.]")
_ALPHANUMERIC = re.compile(r"[A-Za-z0-9]+")

# Magic numbers for common image formats
_MAGIC_NUMBERS = (
    ("jpeg", b"\xff\xd8\xff"),
    ("png", b"\x89PNG"),
    ("gif", b"GIF"),
    ("webp", b"RIFF"),
    ("bmp", b"BM"),
    ("tiff", b"II*\x00"),
)


def clean_candidate(raw_match: str) -> str:
    """Remove whitespace, dash and dot separators from a candidate.

    Example:
        >>> clean_candidate("602-V388-18SB")
        '602V38818SB'
    """
    return _SEPARATORS.sub("", raw_match)


def count_digits(text: str) -> int:
    return sum(1 for c in text if "0" <= c <= "9")


def count_letters(text: str) -> int:
    return sum(1 for c in text if ("A" <= c <= "Z") or ("a" <= c <= "z"))


def is_plausible_serial(raw_match: str) -> bool:
    """Check whether a matched substring is plausible as a serial number.

    Rules, applied to the separator-stripped candidate:
    1. Must be ASCII alphanumeric, 4-40 characters long
    2. Digits only: accepted with at least 6 digits
    3. Letters only: accepted with at least 4 letters
    4. Mixed: accepted when at least 12 characters long, otherwise only if
       the minority class makes up a ratio of at least 0.08 of the majority

    Args:
        raw_match: Candidate as matched by an extraction pattern

    Returns:
        True if the candidate should be kept, False otherwise

    Example:
        >>> is_plausible_serial("123456")
        True
        >>> is_plausible_serial("12345")
        False
        >>> is_plausible_serial("ABCD")
        True
    """
    clean = clean_candidate(raw_match)

    if not _ALPHANUMERIC.fullmatch(clean):
        return False
    if len(clean) < 4 or len(clean) > 40:
        return False

    numbers = count_digits(clean)
    letters = count_letters(clean)

    if letters == 0 and numbers >= 6:
        return True
    if numbers == 0 and letters >= 4:
        return True

    if numbers > 0 and letters > 0:
        if len(clean) >= 12:
            return True
        return min(numbers, letters) / max(numbers, letters) >= 0.08

    return False


def detect_image_format(data: bytes) -> Optional[str]:
    """Detect image format from the buffer's magic number.

    Args:
        data: Raw image bytes

    Returns:
        Format name ("jpeg", "png", "gif", "webp", "bmp", "tiff") or None

    Example:
        >>> detect_image_format(b"\\x89PNG\\r\\n\\x1a\\n")
        'png'
    """
    if len(data) < 8:
        return None

    for fmt, magic in _MAGIC_NUMBERS:
        if data.startswith(magic):
            if fmt == "webp":
                # RIFF container must carry a WEBP payload
                if data[8:12] == b"WEBP":
                    return fmt
                continue
            return fmt

    return None


def validate_image_for_ocr(
    data: object,
    limits: Optional[ImageLimitsConfig] = None,
) -> ImageValidation:
    """Validate that an image buffer is suitable for OCR processing.

    Args:
        data: Candidate image buffer
        limits: Size limits; defaults to 1 KiB minimum and 10 MiB maximum

    Returns:
        ImageValidation describing the buffer
    """
    limits = limits or ImageLimitsConfig()

    if not isinstance(data, (bytes, bytearray)) or len(data) == 0:
        return ImageValidation(valid=False, error="Invalid image buffer")

    size = len(data)
    if size > limits.max_bytes:
        return ImageValidation(
            valid=False, size=size, error="Image too large for OCR processing"
        )
    if size < limits.min_bytes:
        return ImageValidation(
            valid=False, size=size, error="Image too small for OCR processing"
        )

    fmt = detect_image_format(bytes(data))
    if fmt is None:
        return ImageValidation(
            valid=False, size=size, error="Unknown or invalid image format"
        )

    return ImageValidation(valid=True, format=fmt, size=size)
