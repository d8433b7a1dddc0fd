"""ARTDEDUP: artwork deduplication and similarity scoring.

Usage:
    from artdedup import (
        CandidateArtwork,
        Coordinates,
        SimilarityQuery,
        SimilarityService,
    )

    service = SimilarityService()
    result = service.check_for_duplicates(query, candidates)
"""

from artdedup.models.config import (
    DEFAULT_SIMILARITY_CONFIG,
    SimilarityConfig,
    create_dev_similarity_config,
    create_prod_similarity_config,
)
from artdedup.models.similarity import (
    CandidateArtwork,
    Coordinates,
    DuplicateCheckResult,
    SignalType,
    SimilarityQuery,
    SimilarityResult,
    SimilaritySignal,
    ThresholdBand,
)
from artdedup.services.similarity_results import (
    filter_by_threshold,
    get_similarity_explanation,
    sort_by_similarity,
)
from artdedup.services.similarity_service import SimilarityService
from artdedup.services.similarity_strategy import (
    DefaultSimilarityStrategy,
    SimilarityStrategy,
)
from artdedup.utils.geo import calculate_distance

__version__ = "1.0.0"

__all__ = [
    "DEFAULT_SIMILARITY_CONFIG",
    "SimilarityConfig",
    "create_dev_similarity_config",
    "create_prod_similarity_config",
    "CandidateArtwork",
    "Coordinates",
    "DuplicateCheckResult",
    "SignalType",
    "SimilarityQuery",
    "SimilarityResult",
    "SimilaritySignal",
    "ThresholdBand",
    "filter_by_threshold",
    "get_similarity_explanation",
    "sort_by_similarity",
    "SimilarityService",
    "DefaultSimilarityStrategy",
    "SimilarityStrategy",
    "calculate_distance",
]
