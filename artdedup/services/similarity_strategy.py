"""
Similarity strategies for artwork deduplication.

Scores an incoming artwork against one stored candidate by combining:
1. Geographic distance (always computed)
2. Title fuzzy matching with Jaro-Winkler (when both sides have a title)
3. Tag overlap with Jaccard (when both sides have tags)

The composite score divides by the weights of the signals actually computed,
so a missing title or missing tags never counts as a mismatch.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence
import structlog

from artdedup.models.config import SimilarityConfig, DEFAULT_SIMILARITY_CONFIG
from artdedup.models.similarity import (
    CandidateArtwork,
    Coordinates,
    ResultMetadata,
    SignalType,
    SimilarityQuery,
    SimilarityResult,
    SimilaritySignal,
    ThresholdBand,
)
from artdedup.utils.geo import calculate_distance
from artdedup.utils.tags import jaccard_similarity, parse_candidate_tags
from artdedup.utils.text import jaro_winkler_similarity, normalize_title

logger = structlog.get_logger()


class SimilarityStrategy(ABC):
    """Interface for query to candidate similarity scoring

    Alternate strategies can be swapped into SimilarityService without
    touching its callers.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Strategy name for logging and identification"""
        pass

    @property
    @abstractmethod
    def version(self) -> str:
        """Strategy version, bumped whenever scores change"""
        pass

    @abstractmethod
    def calculate_similarity(
        self, query: SimilarityQuery, candidate: CandidateArtwork
    ) -> SimilarityResult:
        """Score one candidate against the query

        Args:
            query: Incoming artwork being checked
            candidate: Stored artwork within the search radius

        Returns:
            SimilarityResult with the composite score and its signals
        """
        pass


class DefaultSimilarityStrategy(SimilarityStrategy):
    """Weighted distance, title and tag scoring"""

    def __init__(self, config: SimilarityConfig = DEFAULT_SIMILARITY_CONFIG):
        """
        Initialize strategy.

        Args:
            config: Immutable weights, thresholds and matching parameters
        """
        self.config = config

    @property
    def name(self) -> str:
        return "default"

    @property
    def version(self) -> str:
        return "1.0.0"

    def calculate_similarity(
        self, query: SimilarityQuery, candidate: CandidateArtwork
    ) -> SimilarityResult:
        signals: List[SimilaritySignal] = [
            self._distance_signal(query.coordinates, candidate.coordinates)
        ]

        if query.title and candidate.title:
            signals.append(self._title_signal(query.title, candidate.title))

        candidate_tags = parse_candidate_tags(candidate.tags)
        if query.tags is not None and candidate_tags:
            signals.append(self._tag_signal(query.tags, candidate_tags))

        overall_score = self._overall_score(signals)
        threshold = self.classify(overall_score)

        logger.debug(
            "similarity_calculated",
            artwork_id=candidate.id,
            overall_score=round(overall_score, 4),
            threshold=threshold.value,
            signals=[signal.type.value for signal in signals],
        )

        return SimilarityResult(
            artwork_id=candidate.id,
            overall_score=overall_score,
            signals=tuple(signals),
            threshold=threshold,
            metadata=ResultMetadata(
                distance=candidate.distance_meters,
                title=candidate.title or None,
                tags=tuple(candidate_tags),
            ),
        )

    def classify(self, score: float) -> ThresholdBand:
        """Map a composite score onto its threshold band."""
        if score >= self.config.thresholds.high:
            return ThresholdBand.HIGH
        if score >= self.config.thresholds.warn:
            return ThresholdBand.WARN
        return ThresholdBand.NONE

    def distance_score(self, distance_meters: float) -> float:
        """Normalize a distance to 0-1 (closer is higher).

        Linear between the optimal distance (1.0) and the max distance (0.0).
        """
        optimal = self.config.distance.optimal_distance_meters
        maximum = self.config.distance.max_distance_meters

        if distance_meters <= optimal:
            return 1.0
        if distance_meters >= maximum:
            return 0.0
        return 1 - (distance_meters - optimal) / (maximum - optimal)

    def _distance_signal(
        self, query_coords: Coordinates, candidate_coords: Coordinates
    ) -> SimilaritySignal:
        distance = calculate_distance(query_coords, candidate_coords)
        raw_score = self.distance_score(distance)

        return SimilaritySignal(
            type=SignalType.DISTANCE,
            raw_score=raw_score,
            weighted_score=raw_score * self.config.weights.distance,
            metadata={"distance_meters": distance},
        )

    def _title_signal(self, query_title: str, candidate_title: str) -> SimilaritySignal:
        stop_words = self.config.title.stop_words
        normalized_query = normalize_title(query_title, stop_words)
        normalized_candidate = normalize_title(candidate_title, stop_words)

        # Too short to compare: still counted, but scored as no match
        min_length = self.config.title.min_title_length
        if len(normalized_query) < min_length or len(normalized_candidate) < min_length:
            return SimilaritySignal(
                type=SignalType.TITLE,
                raw_score=0.0,
                weighted_score=0.0,
                metadata={"reason": "title_too_short"},
            )

        raw_score = jaro_winkler_similarity(normalized_query, normalized_candidate)

        return SimilaritySignal(
            type=SignalType.TITLE,
            raw_score=raw_score,
            weighted_score=raw_score * self.config.weights.title,
            metadata={
                "query_normalized": normalized_query,
                "candidate_normalized": normalized_candidate,
            },
        )

    def _tag_signal(
        self, query_tags: Sequence[str], candidate_tags: Sequence[str]
    ) -> SimilaritySignal:
        if not query_tags or not candidate_tags:
            return SimilaritySignal(
                type=SignalType.TAGS,
                raw_score=0.0,
                weighted_score=0.0,
                metadata={"reason": "no_tags_to_compare"},
            )

        raw_score, intersection, union = jaccard_similarity(query_tags, candidate_tags)

        return SimilaritySignal(
            type=SignalType.TAGS,
            raw_score=raw_score,
            weighted_score=raw_score * self.config.weights.tags,
            metadata={
                "query_tags": list(query_tags),
                "candidate_tags": list(candidate_tags),
                "common_tags": sorted(intersection),
                "intersection_size": len(intersection),
                "union_size": len(union),
            },
        )

    def _overall_score(self, signals: Sequence[SimilaritySignal]) -> float:
        total_score = 0.0
        total_weight = 0.0

        for signal in signals:
            total_score += signal.weighted_score
            # Only the weights actually applied count toward the denominator
            total_weight += self.config.weights.for_signal(signal.type.value)

        return total_score / total_weight if total_weight > 0 else 0.0


def create_default_similarity_strategy(
    config: Optional[SimilarityConfig] = None,
) -> DefaultSimilarityStrategy:
    """Create the default strategy, optionally with a custom configuration."""
    return DefaultSimilarityStrategy(config or DEFAULT_SIMILARITY_CONFIG)
