"""
Artwork similarity service.

Runs a similarity strategy over the candidates returned by a spatial query
and turns the results into duplicate-detection decisions:
- Ranked similarity results for a query
- High/warn threshold matches for moderation UI
- Nearby-artwork rows enriched with similarity scores
"""

from functools import cmp_to_key
from typing import Any, List, Mapping, Optional, Sequence
import structlog

from artdedup.models.similarity import (
    CandidateArtwork,
    Coordinates,
    DuplicateCheckResult,
    EnhancedArtworkResult,
    NearbyArtwork,
    SignalSummary,
    SimilarityQuery,
    SimilarityResult,
)
from artdedup.observability.context import check_id_context, get_check_id
from artdedup.observability.metrics import (
    CANDIDATES_PER_CHECK,
    DUPLICATE_CHECKS,
    DUPLICATE_CHECK_DURATION,
    SIMILARITY_COMPARISONS,
)
from artdedup.services.similarity_results import filter_by_threshold, sort_by_similarity
from artdedup.services.similarity_strategy import (
    DefaultSimilarityStrategy,
    SimilarityStrategy,
)
from artdedup.utils.exceptions import (
    DuplicateDetectionError,
    SimilarityCalculationError,
    SimilarityError,
)

logger = structlog.get_logger()

# Scores closer than this are treated as equal when ranking nearby rows
SCORE_TIE_TOLERANCE = 0.01


class SimilarityService:
    """
    Score candidate artworks against an incoming submission.

    Stateless apart from the configured strategy, so one instance can serve
    concurrent requests.
    """

    def __init__(
        self,
        strategy: Optional[SimilarityStrategy] = None,
        include_metadata: bool = False,
        max_candidates: Optional[int] = None,
    ):
        """
        Initialize similarity service.

        Args:
            strategy: Scoring strategy (DefaultSimilarityStrategy if None)
            include_metadata: Attach per-signal details to enhanced results
            max_candidates: Score at most this many candidates per query
        """
        self.strategy = strategy or DefaultSimilarityStrategy()
        self.include_metadata = include_metadata
        self.max_candidates = max_candidates

        logger.info(
            "similarity_service_initialized",
            strategy=self.strategy.name,
            strategy_version=self.strategy.version,
            include_metadata=include_metadata,
            max_candidates=max_candidates,
        )

    def calculate_similarity_scores(
        self, query: SimilarityQuery, candidates: Sequence[CandidateArtwork]
    ) -> List[SimilarityResult]:
        """
        Score every candidate and rank the results.

        Args:
            query: Incoming artwork
            candidates: Stored artworks, nearest first

        Returns:
            Results sorted by overall score, highest first

        Raises:
            SimilarityCalculationError: If scoring fails for a candidate
        """
        if self.max_candidates is not None and len(candidates) > self.max_candidates:
            logger.warning(
                "candidates_truncated",
                received=len(candidates),
                max_candidates=self.max_candidates,
            )
            candidates = candidates[: self.max_candidates]

        results: List[SimilarityResult] = []
        for candidate in candidates:
            try:
                result = self.strategy.calculate_similarity(query, candidate)
            except Exception as e:
                logger.error(
                    "similarity_calculation_failed",
                    artwork_id=candidate.id,
                    error=str(e),
                )
                raise SimilarityCalculationError(candidate.id, e) from e

            SIMILARITY_COMPARISONS.labels(threshold=result.threshold.value).inc()
            results.append(result)

        CANDIDATES_PER_CHECK.observe(len(results))
        return sort_by_similarity(results)

    def get_high_similarity_matches(
        self, query: SimilarityQuery, candidates: Sequence[CandidateArtwork]
    ) -> List[SimilarityResult]:
        """Matches that require explicit confirmation."""
        return filter_by_threshold(
            self.calculate_similarity_scores(query, candidates), "high"
        )

    def get_warning_similarity_matches(
        self, query: SimilarityQuery, candidates: Sequence[CandidateArtwork]
    ) -> List[SimilarityResult]:
        """Matches that should show a warning (includes high matches)."""
        return filter_by_threshold(
            self.calculate_similarity_scores(query, candidates), "warn"
        )

    def check_for_duplicates(
        self, query: SimilarityQuery, candidates: Sequence[CandidateArtwork]
    ) -> DuplicateCheckResult:
        """
        Decide whether a submission would likely create a duplicate.

        Args:
            query: Incoming artwork
            candidates: Stored artworks within the search radius

        Returns:
            DuplicateCheckResult with matches per threshold and the top match

        Raises:
            DuplicateDetectionError: If any candidate could not be scored
        """
        with check_id_context(get_check_id()):
            try:
                with DUPLICATE_CHECK_DURATION.time():
                    all_results = self.calculate_similarity_scores(query, candidates)
            except SimilarityError as e:
                DUPLICATE_CHECKS.labels(outcome="failed").inc()
                raise DuplicateDetectionError(_describe_query(query), e) from e

            high_matches = filter_by_threshold(all_results, "high")
            warning_matches = filter_by_threshold(all_results, "warn")

            if high_matches:
                outcome = "high"
            elif warning_matches:
                outcome = "warn"
            else:
                outcome = "clear"
            DUPLICATE_CHECKS.labels(outcome=outcome).inc()

            logger.info(
                "duplicate_check_complete",
                candidates=len(all_results),
                high=len(high_matches),
                warn=len(warning_matches),
                outcome=outcome,
            )

            return DuplicateCheckResult(
                has_high_similarity=bool(high_matches),
                has_warning_similarity=bool(warning_matches),
                high_similarity_matches=high_matches,
                warning_similarity_matches=warning_matches,
                top_match=all_results[0] if all_results else None,
            )

    def enhance_nearby_results(
        self, query: SimilarityQuery, nearby_artworks: Sequence[NearbyArtwork]
    ) -> List[EnhancedArtworkResult]:
        """
        Attach similarity scores to nearby-artwork rows.

        Rows are ranked by similarity when scores differ meaningfully and by
        distance otherwise.

        Args:
            query: Incoming artwork
            nearby_artworks: Rows from the nearby query (distance in km)

        Returns:
            Enhanced rows, most likely duplicates first
        """
        candidates = [
            CandidateArtwork(
                id=artwork.id,
                coordinates=Coordinates(lat=artwork.lat, lon=artwork.lon),
                title=artwork.title,
                tags=artwork.tags,
                type_name=artwork.type_name,
                distance_meters=round(artwork.distance_km * 1000),
            )
            for artwork in nearby_artworks
        ]

        similarity_by_id = {
            result.artwork_id: result
            for result in self.calculate_similarity_scores(query, candidates)
        }

        enhanced: List[EnhancedArtworkResult] = []
        for artwork in nearby_artworks:
            similarity = similarity_by_id.get(artwork.id)
            row = EnhancedArtworkResult(
                id=artwork.id,
                lat=artwork.lat,
                lon=artwork.lon,
                type_name=artwork.type_name,
                distance_meters=round(artwork.distance_km * 1000),
                title=artwork.title,
                tags=artwork.tags,
                photos=artwork.photos,
            )

            if similarity is not None:
                row.similarity_score = similarity.overall_score
                row.similarity_threshold = similarity.threshold
                if self.include_metadata and similarity.signals:
                    row.similarity_signals = [
                        SignalSummary(
                            type=signal.type,
                            score=signal.raw_score,
                            metadata=signal.metadata,
                        )
                        for signal in similarity.signals
                    ]

            enhanced.append(row)

        return sorted(enhanced, key=cmp_to_key(_compare_enhanced))

    def set_strategy(self, strategy: SimilarityStrategy) -> None:
        """Swap the scoring strategy."""
        self.strategy = strategy
        logger.info(
            "similarity_strategy_changed",
            strategy=strategy.name,
            strategy_version=strategy.version,
        )

    def get_strategy_info(self) -> dict[str, str]:
        return {"name": self.strategy.name, "version": self.strategy.version}


def _compare_enhanced(a: EnhancedArtworkResult, b: EnhancedArtworkResult) -> float:
    if a.similarity_score is not None and b.similarity_score is not None:
        score_diff = b.similarity_score - a.similarity_score
        if abs(score_diff) > SCORE_TIE_TOLERANCE:
            return score_diff
    return a.distance_meters - b.distance_meters


def _describe_query(query: SimilarityQuery) -> dict[str, Any]:
    return {
        "lat": query.coordinates.lat,
        "lon": query.coordinates.lon,
        "title": query.title,
        "tag_count": len(query.tags) if query.tags else 0,
    }


def create_similarity_service(
    strategy: Optional[SimilarityStrategy] = None,
    include_metadata: bool = False,
    max_candidates: Optional[int] = None,
) -> SimilarityService:
    """Create a similarity service (default strategy unless one is given)."""
    return SimilarityService(
        strategy=strategy,
        include_metadata=include_metadata,
        max_candidates=max_candidates,
    )


def create_dev_similarity_service() -> SimilarityService:
    """Create a service that attaches signal details for debugging."""
    return SimilarityService(include_metadata=True)


def artwork_to_candidate(artwork: Mapping[str, Any]) -> CandidateArtwork:
    """
    Convert a stored artwork record into a candidate.

    Args:
        artwork: Record with id, lat, lon and optional title, tags, type_name

    Returns:
        CandidateArtwork for scoring
    """
    return CandidateArtwork(
        id=artwork["id"],
        coordinates=Coordinates(lat=artwork["lat"], lon=artwork["lon"]),
        title=artwork.get("title"),
        tags=artwork.get("tags"),
        type_name=artwork.get("type_name"),
        distance_meters=artwork.get("distance_meters"),
    )
