"""Greedy fuzzy subsequence scoring.

Every needle character must appear in the haystack, in order, ignoring
case. Each character takes the first occurrence after the previous match;
the matcher never backtracks to look for a better alignment, so the score
reflects that single left-to-right walk.

Scoring per matched character:
  * +2 when it sits right at the cursor (contiguous with the previous
    match, or at position 0 for the first character), +1 otherwise
  * for every character after the first, a proximity bonus of
    ``max(0, 2 - 0.1 * gap)`` where ``gap`` counts skipped characters
Finally ``0.01 * (len(haystack) - len(needle))`` is subtracted so tighter
haystacks win ties.
"""
from typing import Optional


CONTIGUOUS_SCORE = 2
SCATTERED_SCORE = 1
PROXIMITY_BONUS = 2.0
PROXIMITY_DECAY = 0.1
LENGTH_PENALTY = 0.01


def fuzzy_score(haystack: str, needle: str) -> Optional[float]:
    """Score ``needle`` against ``haystack``.

    Args:
        haystack: Text to search in
        needle: Query text

    Returns:
        The score, or None when the needle is empty or not a subsequence
    """
    if not needle or not haystack:
        return None

    hay = haystack.lower()
    query = needle.lower()

    score = 0.0
    cursor = 0
    for position, char in enumerate(query):
        index = hay.find(char, cursor)
        if index == -1:
            return None

        gap = index - cursor
        score += CONTIGUOUS_SCORE if gap == 0 else SCATTERED_SCORE
        if position > 0:
            score += max(0.0, PROXIMITY_BONUS - PROXIMITY_DECAY * gap)
        cursor = index + 1

    return score - LENGTH_PENALTY * (len(haystack) - len(needle))


class FuzzyMatcher:
    """Scoring policy used by :class:`~watched_bookmarks.search.FuzzySearchEngine`."""

    def score(self, haystack: str, needle: str) -> Optional[float]:
        return fuzzy_score(haystack, needle)
