"""Tests for SimilarityService"""

import math

import pytest

from artdedup.models.similarity import (
    CandidateArtwork,
    Coordinates,
    NearbyArtwork,
    SignalType,
    SimilarityQuery,
    ThresholdBand,
)
from artdedup.observability.metrics import DUPLICATE_CHECKS, SIMILARITY_COMPARISONS
from artdedup.services.similarity_service import (
    SimilarityService,
    artwork_to_candidate,
    create_dev_similarity_service,
    create_similarity_service,
)
from artdedup.services.similarity_strategy import (
    DefaultSimilarityStrategy,
    SimilarityStrategy,
)
from artdedup.utils.exceptions import (
    DuplicateDetectionError,
    SimilarityCalculationError,
)

ORIGIN = Coordinates(lat=49.2827, lon=-123.1207)
METERS_PER_DEGREE = 6371000 * math.pi / 180


def north_of(meters: float) -> Coordinates:
    return Coordinates(lat=ORIGIN.lat + meters / METERS_PER_DEGREE, lon=ORIGIN.lon)


class ExplodingStrategy(SimilarityStrategy):
    """Strategy that fails on a chosen candidate"""

    def __init__(self, failing_id: str):
        self.failing_id = failing_id
        self.delegate = DefaultSimilarityStrategy()

    @property
    def name(self) -> str:
        return "exploding"

    @property
    def version(self) -> str:
        return "0.0.1"

    def calculate_similarity(self, query, candidate):
        if candidate.id == self.failing_id:
            raise RuntimeError("boom")
        return self.delegate.calculate_similarity(query, candidate)


@pytest.fixture
def service():
    return SimilarityService()


@pytest.fixture
def query():
    return SimilarityQuery(
        coordinates=ORIGIN, title="Digital Orca", tags=["sculpture", "whale"]
    )


@pytest.fixture
def candidates():
    return [
        # Far away, same title: none
        CandidateArtwork(
            id="far-orca", coordinates=north_of(1500), title="Digital Orca"
        ),
        # Nearly identical: high
        CandidateArtwork(
            id="near-orca",
            coordinates=north_of(10),
            title="Digital Orca Sculpture",
            tags='["sculpture", "orca"]',
        ),
        # Moderately close, similar title: warn
        CandidateArtwork(
            id="mid-orca", coordinates=north_of(400), title="Digital Orca"
        ),
    ]


class TestCalculateSimilarityScores:
    def test_sorted_descending(self, service, query, candidates):
        results = service.calculate_similarity_scores(query, candidates)

        assert [r.artwork_id for r in results] == ["near-orca", "mid-orca", "far-orca"]
        scores = [r.overall_score for r in results]
        assert scores == sorted(scores, reverse=True)

    def test_empty_candidates(self, service, query):
        assert service.calculate_similarity_scores(query, []) == []

    def test_max_candidates_truncates(self, query, candidates):
        service = SimilarityService(max_candidates=1)
        results = service.calculate_similarity_scores(query, candidates)

        assert [r.artwork_id for r in results] == ["far-orca"]

    def test_strategy_failure_raises(self, query, candidates):
        service = SimilarityService(strategy=ExplodingStrategy("mid-orca"))

        with pytest.raises(SimilarityCalculationError) as exc_info:
            service.calculate_similarity_scores(query, candidates)

        assert exc_info.value.artwork_id == "mid-orca"
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    def test_counts_comparisons(self, service, query, candidates):
        before = SIMILARITY_COMPARISONS.labels(threshold="high")._value.get()

        service.calculate_similarity_scores(query, candidates)

        assert SIMILARITY_COMPARISONS.labels(threshold="high")._value.get() == before + 1


class TestThresholdMatches:
    def test_high_matches(self, service, query, candidates):
        matches = service.get_high_similarity_matches(query, candidates)
        assert [m.artwork_id for m in matches] == ["near-orca"]

    def test_warning_matches_include_high(self, service, query, candidates):
        matches = service.get_warning_similarity_matches(query, candidates)
        assert [m.artwork_id for m in matches] == ["near-orca", "mid-orca"]


class TestCheckForDuplicates:
    def test_detects_duplicate(self, service, query, candidates):
        result = service.check_for_duplicates(query, candidates)

        assert result.has_high_similarity is True
        assert result.has_warning_similarity is True
        assert [m.artwork_id for m in result.high_similarity_matches] == ["near-orca"]
        assert len(result.warning_similarity_matches) == 2
        assert result.top_match.artwork_id == "near-orca"

    def test_no_candidates(self, service, query):
        result = service.check_for_duplicates(query, [])

        assert result.has_high_similarity is False
        assert result.has_warning_similarity is False
        assert result.high_similarity_matches == []
        assert result.warning_similarity_matches == []
        assert result.top_match is None

    def test_clear_outcome(self, service, query):
        before = DUPLICATE_CHECKS.labels(outcome="clear")._value.get()
        far_only = [
            CandidateArtwork(id="far", coordinates=north_of(3000), title="Totem")
        ]

        result = service.check_for_duplicates(query, far_only)

        assert result.has_warning_similarity is False
        assert result.top_match.artwork_id == "far"
        assert result.top_match.threshold == ThresholdBand.NONE
        assert DUPLICATE_CHECKS.labels(outcome="clear")._value.get() == before + 1

    def test_failure_wrapped(self, query, candidates):
        service = SimilarityService(strategy=ExplodingStrategy("near-orca"))
        before = DUPLICATE_CHECKS.labels(outcome="failed")._value.get()

        with pytest.raises(DuplicateDetectionError) as exc_info:
            service.check_for_duplicates(query, candidates)

        assert isinstance(exc_info.value.__cause__, SimilarityCalculationError)
        assert exc_info.value.context["query"]["title"] == "Digital Orca"
        assert DUPLICATE_CHECKS.labels(outcome="failed")._value.get() == before + 1


class TestEnhanceNearbyResults:
    def test_converts_km_and_ranks(self, service, query):
        nearby = [
            NearbyArtwork(
                id="far", lat=north_of(900).lat, lon=ORIGIN.lon,
                type_name="mural", distance_km=0.9, title="Totem",
            ),
            NearbyArtwork(
                id="near", lat=north_of(10).lat, lon=ORIGIN.lon,
                type_name="sculpture", distance_km=0.0104, title="Digital Orca",
                photos=["https://example.com/orca.jpg"],
            ),
        ]

        enhanced = service.enhance_nearby_results(query, nearby)

        assert [row.id for row in enhanced] == ["near", "far"]
        assert enhanced[0].distance_meters == 10
        assert enhanced[1].distance_meters == 900
        assert enhanced[0].similarity_threshold == ThresholdBand.HIGH
        assert enhanced[0].photos == ["https://example.com/orca.jpg"]
        assert enhanced[0].similarity_signals is None

    def test_close_scores_ranked_by_distance(self, service):
        query = SimilarityQuery(coordinates=ORIGIN)
        nearby = [
            NearbyArtwork(
                id="b", lat=north_of(30).lat, lon=ORIGIN.lon,
                type_name="mural", distance_km=0.03,
            ),
            NearbyArtwork(
                id="a", lat=north_of(5).lat, lon=ORIGIN.lon,
                type_name="mural", distance_km=0.005,
            ),
        ]

        enhanced = service.enhance_nearby_results(query, nearby)

        # Both score 1.0 so distance decides
        assert [row.id for row in enhanced] == ["a", "b"]

    def test_dev_service_attaches_signals(self, query):
        service = create_dev_similarity_service()
        nearby = [
            NearbyArtwork(
                id="near", lat=ORIGIN.lat, lon=ORIGIN.lon,
                type_name="sculpture", distance_km=0.0, title="Digital Orca",
            )
        ]

        enhanced = service.enhance_nearby_results(query, nearby)

        signals = enhanced[0].similarity_signals
        assert [s.type for s in signals] == [SignalType.DISTANCE, SignalType.TITLE]
        assert signals[1].score == 1.0


class TestStrategyManagement:
    def test_default_strategy_info(self, service):
        assert service.get_strategy_info() == {"name": "default", "version": "1.0.0"}

    def test_set_strategy(self, service):
        service.set_strategy(ExplodingStrategy("x"))
        assert service.get_strategy_info() == {"name": "exploding", "version": "0.0.1"}

    def test_factory(self):
        service = create_similarity_service(max_candidates=5)
        assert service.max_candidates == 5
        assert service.include_metadata is False


def test_artwork_to_candidate():
    candidate = artwork_to_candidate(
        {
            "id": "abc",
            "lat": 49.28,
            "lon": -123.12,
            "title": "Orca",
            "tags": '["whale"]',
            "type_name": "sculpture",
        }
    )

    assert candidate.id == "abc"
    assert candidate.coordinates == Coordinates(lat=49.28, lon=-123.12)
    assert candidate.tags == '["whale"]'
    assert candidate.distance_meters is None
