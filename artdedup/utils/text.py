"""Title normalization and fuzzy string similarity.

Jaro-Winkler is implemented directly rather than through a fuzzy matching
library: the Winkler prefix boost is applied unconditionally here, while
library implementations only boost when the Jaro score passes 0.7.
"""

import re
from typing import Iterable

_PUNCTUATION_RE = re.compile(r"[^\w\s]")

# Winkler prefix scaling factor and maximum prefix length
WINKLER_PREFIX_SCALE = 0.1
WINKLER_MAX_PREFIX = 4


def normalize_title(title: str, stop_words: Iterable[str] = ()) -> str:
    """Normalize a title for comparison.

    Lowercases, removes punctuation, drops stop words and collapses
    whitespace.

    Args:
        title: Original title.
        stop_words: Lowercase words to drop.

    Returns:
        Normalized title, possibly empty.

    Examples:
        >>> normalize_title("The Digital Orca!", ("the",))
        'digital orca'
    """
    ignored = set(stop_words)
    title = _PUNCTUATION_RE.sub("", title.lower())
    words = [word for word in title.split() if word not in ignored]
    return " ".join(words).strip()


def jaro_similarity(s1: str, s2: str) -> float:
    """Jaro similarity between two strings (0-1).

    Characters match when equal and no further apart than
    floor(max(len1, len2) / 2) - 1 positions. Transpositions are counted
    among matched characters taken in order.
    """
    if s1 == s2:
        return 1.0
    len1, len2 = len(s1), len(s2)
    if len1 == 0 or len2 == 0:
        return 0.0

    match_window = max(0, max(len1, len2) // 2 - 1)
    s1_matches = [False] * len1
    s2_matches = [False] * len2

    matches = 0
    for i in range(len1):
        start = max(0, i - match_window)
        end = min(i + match_window + 1, len2)
        for j in range(start, end):
            if s2_matches[j] or s1[i] != s2[j]:
                continue
            s1_matches[i] = s2_matches[j] = True
            matches += 1
            break

    if matches == 0:
        return 0.0

    transpositions = 0
    k = 0
    for i in range(len1):
        if not s1_matches[i]:
            continue
        while not s2_matches[k]:
            k += 1
        if s1[i] != s2[k]:
            transpositions += 1
        k += 1

    return (
        matches / len1 + matches / len2 + (matches - transpositions / 2) / matches
    ) / 3


def common_prefix_length(s1: str, s2: str, limit: int = WINKLER_MAX_PREFIX) -> int:
    prefix = 0
    for c1, c2 in zip(s1[:limit], s2[:limit]):
        if c1 != c2:
            break
        prefix += 1
    return prefix


def jaro_winkler_similarity(s1: str, s2: str) -> float:
    """Jaro-Winkler similarity (0-1).

    Adds WINKLER_PREFIX_SCALE * prefix * (1 - jaro) where prefix is the
    length of the exact common prefix, capped at four characters.
    """
    if s1 == s2:
        return 1.0
    jaro = jaro_similarity(s1, s2)
    prefix = common_prefix_length(s1, s2)
    return min(1.0, jaro + WINKLER_PREFIX_SCALE * prefix * (1 - jaro))
