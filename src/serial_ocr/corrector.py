"""Contextual correction of systematic OCR character confusions.

Serial number interiors are dominated by digits, so the letters OCR engines
most often produce in place of digits are corrected when, and only when, they
sit in a clearly numeric context:

1. **Flanked letters**: ``O→0``, ``I→1``, ``Z→2``, ``B→8`` where the letter
   has a digit on both sides (``1O2`` → ``102``).
2. **Leading zeros**: a run of ``O`` followed by two or more digits becomes
   zeros even with no digit on the left (``OO123`` → ``00123``).

Every substitution is one character for one character, so the corrected text
has the same length as the input and match offsets stay valid.

If the text carries an explicit serial label (``S/N``, ``SN``, ``S.N``) it is
returned untouched.

Example:
    >>> corrector = CharacterCorrector()
    >>> corrector.correct("1O2").corrected_text
    '102'
    >>> corrector.correct("S/N: 1O2I3").corrected_text
    'S/N: 1O2I3'
"""

import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .config_loader import CorrectionConfig
from .patterns import EXPLICIT_LABEL

logger = logging.getLogger(__name__)

LABEL_MARKER = re.compile(EXPLICIT_LABEL)

DIGIT_CONFUSIONS = {"O": "0", "I": "1", "Z": "2", "B": "8"}

_FLANKED_LETTER = re.compile(r"(?<=\d)[OIZB](?=\d)")
_LEADING_O_RUN = re.compile(r"O+(?=\d{2})")


@dataclass
class CorrectionResult:
    """Result of character correction operation.

    Attributes:
        corrected_text: Text after applying corrections.
        correction_applied: Whether any corrections were made.
        corrections: List of (position, old_char, new_char) tuples.
        original_text: Original text before correction.
        label_detected: Whether an explicit serial label suppressed correction.
    """

    corrected_text: str
    correction_applied: bool
    corrections: List[Tuple[int, str, str]]  # (position, old_char, new_char)
    original_text: str
    label_detected: bool = False


def has_serial_label(text: str) -> bool:
    """Check whether text contains an explicit serial-number label marker."""
    return LABEL_MARKER.search(text) is not None


def _correction_pass(text: str) -> str:
    text = _LEADING_O_RUN.sub(lambda m: "0" * len(m.group()), text)
    return _FLANKED_LETTER.sub(lambda m: DIGIT_CONFUSIONS[m.group()], text)


class CharacterCorrector:
    """Corrects digit/letter OCR confusions in digit-dominated context.

    Args:
        config: Correction configuration. Defaults to enabled.
    """

    def __init__(self, config: Optional[CorrectionConfig] = None):
        self.config = config or CorrectionConfig()

    def correct(self, text: str) -> CorrectionResult:
        """Apply contextual character corrections to text.

        Passes are repeated until the text stops changing, since a correction
        can create the numeric context another rule needs. The result is
        therefore stable: correcting corrected text changes nothing.

        Args:
            text: Raw OCR text.

        Returns:
            CorrectionResult with corrected text and change log.

        Example:
            >>> result = corrector.correct("A1O2B3")
            >>> print(result.corrections)
            [(2, 'O', '0'), (4, 'B', '8')]
        """
        if not self.config.enabled:
            return CorrectionResult(
                corrected_text=text,
                correction_applied=False,
                corrections=[],
                original_text=text,
            )

        if has_serial_label(text):
            logger.debug("Serial label detected, skipping character correction")
            return CorrectionResult(
                corrected_text=text,
                correction_applied=False,
                corrections=[],
                original_text=text,
                label_detected=True,
            )

        corrected = text
        while True:
            updated = _correction_pass(corrected)
            if updated == corrected:
                break
            corrected = updated

        corrections = [
            (i, old, new)
            for i, (old, new) in enumerate(zip(text, corrected))
            if old != new
        ]

        if corrections:
            logger.debug(f"Character correction: '{text}' → '{corrected}'")

        return CorrectionResult(
            corrected_text=corrected,
            correction_applied=len(corrections) > 0,
            corrections=corrections,
            original_text=text,
        )


def correct_text(text: str) -> str:
    """Correct OCR confusions with the default configuration.

    Example:
        >>> correct_text("3I4")
        '314'
    """
    return CharacterCorrector().correct(text).corrected_text
