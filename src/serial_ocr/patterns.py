"""Ordered extraction pattern table for serial number candidates.

Patterns are tried in a fixed order; a pattern's index is its priority
(0 = most specific, most trusted) and feeds into the confidence score.

Label keywords ("S/N", "SERIAL") match in any case. Serial values themselves
only match uppercase letters and digits, as printed on manufacturer labels,
so ordinary lowercase words in the OCR text never become candidates.

The trade-off: a value the engine misreads with a lowercase letter
("AB12cD34EF56") is not captured at all. The default engine whitelist still
lets lowercase through, since dropping those characters would silently
shorten the value ("AB12D34EF56") and removing the whole word would hide
label text from the corrector. Upper-casing values before matching is not
an option either, as any prose would then yield candidates.
"""

import re
from typing import List, NamedTuple, Pattern

# "S/N", "SN" or "S.N" (any case), optional digit, optional ":" / "=" / whitespace.
# No word boundary: a label glued to the previous token ("REF7S/N:") still counts.
EXPLICIT_LABEL = r"(?i:S/N|S\.N|SN)\d?[\s:=]*"

_LABELLED_VALUE = r"([A-Z0-9][A-Z0-9\-.]{4,38}[A-Z0-9])"


class SerialPattern(NamedTuple):
    """One entry of the extraction pattern table.

    Attributes:
        name: Short identifier reported on candidates
        regex: Compiled pattern
        priority: Index in the table (lower = higher priority)
        has_label_group: Whether group 1 captures the value after a label
    """

    name: str
    regex: Pattern
    priority: int
    has_label_group: bool


class RawCandidate(NamedTuple):
    """Unfiltered, unscored pattern match."""

    raw_match: str
    priority: int
    position: int
    pattern: str


_PATTERN_SOURCES = (
    # S/N, SN or S.N label (optional trailing digit) followed by the value
    (
        "explicit_label",
        EXPLICIT_LABEL + _LABELLED_VALUE,
        True,
    ),
    ("alnum_long", r"\b[A-Z0-9]{12,40}\b", False),
    ("numeric", r"\b\d{10,20}\b", False),
    (
        "dashed_segments",
        r"\b[A-Z0-9]{2,6}-[A-Z0-9]{2,6}-[A-Z0-9]{2,6}(?:-[A-Z0-9]{1,15})?\b",
        False,
    ),
    # e.g. 602-V388-18SB2008000012
    (
        "electronics_code",
        r"\b\d{3,4}-?[A-Z]\d{3,4}-?\d{2}[A-Z]{2}\d{8,15}\b",
        False,
    ),
    ("letter_prefixed_mix", r"\b[A-Z]{1,5}\d{1,3}[A-Z0-9]{6,25}\b", False),
    ("dashed_mixed", r"\b[A-Z0-9]{2,6}(?:-[A-Z0-9]{2,20}){1,3}\b", False),
    ("alnum_short", r"\b[A-Z0-9]{8,11}\b", False),
    ("two_segment", r"\b[A-Z0-9]{3,8}[-.][A-Z0-9]{3,20}\b", False),
    ("letter_prefixed_standard", r"\b[A-Z]{1,3}\d{8,15}[A-Z0-9]{0,6}\b", False),
    (
        "serial_label",
        r"\b(?i:SERIAL)(?:\s*(?i:NUMBER|NO)\.?)?[\s:#=]*" + _LABELLED_VALUE,
        True,
    ),
)

SERIAL_PATTERNS = tuple(
    SerialPattern(name, re.compile(source), priority, has_label_group)
    for priority, (name, source, has_label_group) in enumerate(_PATTERN_SOURCES)
)


def generate_candidates(corrected_text: str) -> List[RawCandidate]:
    """Run every pattern over the text, in priority order.

    Each pattern contributes all of its non-overlapping matches in scan
    order. The returned list is therefore ordered by pattern priority, then
    by position.

    Args:
        corrected_text: Text after OCR confusion correction

    Returns:
        Raw candidates with priority, position and matched text

    Example:
        >>> [c.raw_match for c in generate_candidates("S/N: AB12CD34EF56")][:1]
        ['AB12CD34EF56']
    """
    candidates: List[RawCandidate] = []

    for pattern in SERIAL_PATTERNS:
        for match in pattern.regex.finditer(corrected_text):
            raw_match = match.group(1) if pattern.has_label_group else match.group(0)
            candidates.append(
                RawCandidate(
                    raw_match=raw_match,
                    priority=pattern.priority,
                    position=match.start(),
                    pattern=pattern.name,
                )
            )

    return candidates
