"""Sorting, filtering and display helpers for similarity results."""

import math
from typing import Iterable, List, Literal

from artdedup.models.similarity import SignalType, SimilarityResult, ThresholdBand

# Signals below these raw scores are left out of explanations
TITLE_EXPLANATION_CUTOFF = 0.5
TAGS_EXPLANATION_CUTOFF = 0.3

_BANDS_AT_OR_ABOVE = {
    "warn": {ThresholdBand.WARN, ThresholdBand.HIGH},
    "high": {ThresholdBand.HIGH},
}


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded up (10.5 -> 11)."""
    return math.floor(value + 0.5)


def sort_by_similarity(results: Iterable[SimilarityResult]) -> List[SimilarityResult]:
    """Sort results by overall score, highest first.

    The sort is stable, so equal scores keep their input order.
    """
    return sorted(results, key=lambda result: result.overall_score, reverse=True)


def filter_by_threshold(
    results: Iterable[SimilarityResult], threshold: Literal["warn", "high"]
) -> List[SimilarityResult]:
    """Keep results classified at or above a threshold band.

    Args:
        results: Results to filter.
        threshold: 'warn' keeps warn and high results, 'high' keeps only high.

    Returns:
        Matching results in input order.
    """
    bands = _BANDS_AT_OR_ABOVE.get(str(getattr(threshold, "value", threshold)))
    if bands is None:
        raise ValueError(f"threshold must be 'warn' or 'high', got {threshold!r}")
    return [result for result in results if result.threshold in bands]


def get_similarity_explanation(result: SimilarityResult) -> str:
    """Short human-readable summary of why a result scored as it did.

    Examples:
        "87% similar (10m away, similar title, matching tags)"
        "41% similar (1200m away)"
    """
    explanations: List[str] = []

    for signal in result.signals:
        if signal.type == SignalType.DISTANCE:
            distance = (signal.metadata or {}).get("distance_meters")
            if distance is not None:
                explanations.append(f"{round_half_up(distance)}m away")
        elif signal.type == SignalType.TITLE and signal.raw_score > TITLE_EXPLANATION_CUTOFF:
            explanations.append("similar title")
        elif signal.type == SignalType.TAGS and signal.raw_score > TAGS_EXPLANATION_CUTOFF:
            explanations.append("matching tags")

    score_percent = round_half_up(result.overall_score * 100)
    if explanations:
        return f"{score_percent}% similar ({', '.join(explanations)})"
    return f"{score_percent}% similar"
