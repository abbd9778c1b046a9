"""Edit distance for fuzzy party-name matching."""

from rapidfuzz.distance import Levenshtein


def levenshtein_distance(a: str, b: str) -> int:
    """Minimum number of single-character insertions, deletions or substitutions."""
    return Levenshtein.distance(a, b)


def normalized_levenshtein_similarity(a: str, b: str) -> float:
    """Case-insensitive similarity in [0, 1]; 1.0 means identical.

    The distance is normalized by the longer name, so "smith" and "smyth"
    score 0.8.
    """
    return Levenshtein.normalized_similarity(a, b, processor=str.casefold)
