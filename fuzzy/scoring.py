"""
Approximate string scoring on top of rapidfuzz.

Scores follow the "distance" convention used throughout the index:
0.0 is an exact match, 1.0 is no match at all. A value matches a pattern when its
score is at or below the index threshold.
"""

from __future__ import annotations

from typing import Tuple

from rapidfuzz import fuzz

DEFAULT_THRESHOLD = 0.3
# Offset (in characters) at which a location penalty reaches 1.0.
DISTANCE = 100


def fuzzy_score(pattern: str, text: str, *, ignore_location: bool = True) -> float:
    """
    Score `pattern` against `text` (both expected lower-cased).

    When the pattern fits inside the text, the best aligned substring is used so a short
    query can match anywhere in a long description. A pattern longer than the text is
    compared whole-string, so extra query words count as errors.
    With `ignore_location=False` the offset of the best alignment adds a penalty.
    """
    if not pattern or not text:
        return 1.0
    if pattern == text:
        return 0.0

    if len(pattern) > len(text):
        return 1.0 - fuzz.ratio(pattern, text) / 100.0

    alignment = fuzz.partial_ratio_alignment(pattern, text)
    if alignment is None:
        return 1.0
    score = 1.0 - alignment.score / 100.0
    if not ignore_location:
        score += alignment.dest_start / DISTANCE
    return min(1.0, score)


class FuzzyMatcher:
    """Plain fuzzy pattern; the default query mode and the bare-token case of extended syntax."""

    def __init__(self, pattern: str, threshold: float = DEFAULT_THRESHOLD, ignore_location: bool = True):
        self.pattern = pattern.lower()
        self.threshold = threshold
        self.ignore_location = ignore_location

    def search_in(self, text: str) -> Tuple[bool, float]:
        score = fuzzy_score(self.pattern, text, ignore_location=self.ignore_location)
        return score <= self.threshold, score
