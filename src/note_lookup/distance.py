"""Bounded Damerau-Levenshtein distance used to order lookup suggestions."""

from __future__ import annotations

import sys
from collections.abc import Sequence

INFINITE = sys.maxsize


def damerau_levenshtein(source: Sequence[str] | str, target: Sequence[str] | str, threshold: int) -> int:
    """Return the optimal string alignment distance between *source* and *target*.

    Insertions, deletions, substitutions and swaps of two adjacent characters
    each cost one edit. Strings are compared by code point, so a character
    outside the BMP counts as a single edit unit.

    If the distance is larger than *threshold*, :data:`INFINITE` is returned
    instead. Work is bounded by the threshold: a length gap larger than it is
    rejected before any row is allocated, and the computation stops as soon as
    a whole row exceeds it.

    Examples:
        >>> damerau_levenshtein("ab", "ba", 5)
        1
        >>> damerau_levenshtein("kitten", "sitting", 2) == INFINITE
        True
    """
    assert threshold >= 0, f"threshold must be non-negative, got {threshold}"

    shorter = list(source)
    longer = list(target)
    if abs(len(shorter) - len(longer)) > threshold:
        return INFINITE

    # The shorter sequence sizes the row buffers
    if len(shorter) > len(longer):
        shorter, longer = longer, shorter

    width = len(shorter)
    current = list(range(width + 1))
    previous = [0] * (width + 1)
    two_back = [0] * (width + 1)

    for j in range(1, len(longer) + 1):
        two_back, previous, current = previous, current, two_back
        current[0] = j
        row_min = j
        target_char = longer[j - 1]

        for i in range(1, width + 1):
            cost = 0 if shorter[i - 1] == target_char else 1
            best = min(
                current[i - 1] + 1,  # deletion
                previous[i] + 1,  # insertion
                previous[i - 1] + cost,  # substitution
            )
            if (
                i > 1
                and j > 1
                and shorter[i - 2] == target_char
                and shorter[i - 1] == longer[j - 2]
            ):
                best = min(best, two_back[i - 2] + cost)

            current[i] = best
            if best < row_min:
                row_min = best

        if row_min > threshold:
            return INFINITE

    result = current[width]
    return INFINITE if result > threshold else result
