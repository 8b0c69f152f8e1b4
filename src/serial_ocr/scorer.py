"""Heuristic confidence scoring for serial number candidates.

The score is a pure function of the matched text and the priority of the
pattern that matched it. It is a ranking heuristic in [0.0, 1.0], not a
calibrated probability.

Score = 0.5 base
      + pattern priority bonus   (0.10 - 0.35)
      + cleaned length bonus     (0.00 - 0.20)
      + character diversity      (0.00 - 0.15, mixed digits/letters only)
      + dash structure           (0.00 - 0.20)
clamped to 1.0.
"""

from .validator import clean_candidate, count_digits, count_letters

BASE_SCORE = 0.5

# Pattern index -> bonus; indices not listed get DEFAULT_PRIORITY_BONUS
PRIORITY_BONUS = {
    0: 0.35,
    1: 0.30,
    2: 0.28,
    3: 0.25,
    4: 0.25,
    5: 0.22,
    6: 0.18,
    7: 0.18,
}
DEFAULT_PRIORITY_BONUS = 0.10


def priority_bonus(priority: int) -> float:
    return PRIORITY_BONUS.get(priority, DEFAULT_PRIORITY_BONUS)


def length_bonus(length: int) -> float:
    if 18 <= length <= 30:
        return 0.20
    if 12 <= length <= 17:
        return 0.18
    if 8 <= length <= 11:
        return 0.10
    if 6 <= length <= 40:
        return 0.05
    return 0.0


def diversity_bonus(clean: str) -> float:
    """Reward a mix of digits and letters.

    Long candidates with at least two letters get a flat bonus; shorter ones
    are rewarded by the minority/majority ratio of digits to letters.
    """
    numbers = count_digits(clean)
    letters = count_letters(clean)
    if numbers == 0 or letters == 0:
        return 0.0

    if len(clean) > 15 and letters >= 2:
        return 0.10

    ratio = min(numbers, letters) / max(numbers, letters)
    if ratio > 0.3:
        return 0.15
    if ratio > 0.1:
        return 0.10
    return 0.05


def structure_bonus(raw_match: str) -> float:
    # Stacks with the other bonuses; only the final clamp bounds it
    dashes = raw_match.count("-")
    if dashes >= 2:
        return 0.20
    if dashes == 1:
        return 0.10
    return 0.0


def score_candidate(raw_match: str, priority: int) -> float:
    """Score a candidate.

    Args:
        raw_match: Candidate as matched, separators included
        priority: Index of the pattern that produced the match

    Returns:
        Confidence in [0.0, 1.0]

    Example:
        >>> score_candidate("AB12CD34EF56", 0)
        1.0
    """
    clean = clean_candidate(raw_match)

    score = BASE_SCORE
    score += priority_bonus(priority)
    score += length_bonus(len(clean))
    score += diversity_bonus(clean)
    score += structure_bonus(raw_match)

    return min(score, 1.0)
