"""
Bulk-import duplicate scoring.

Additive points model used by import pipelines, where records often carry
an artist but rarely a useful tag set:
- Title match: up to 0.2 points (Levenshtein similarity)
- Artist match: up to 0.2 points (best match across listed artists)
- Location: up to 0.3 points, falling to 0 at 50m
- Tags: 0.05 points per matching query tag
A record is a duplicate when its points reach the threshold (0.7 default).
"""

import json
import re
from typing import Dict, List
import structlog
from rapidfuzz.distance import Levenshtein

from artdedup.models.mass_import import (
    MassImportCandidate,
    MassImportQuery,
    MassImportSimilarityResult,
    ScoreBreakdown,
)
from artdedup.models.similarity import Coordinates
from artdedup.utils.geo import calculate_distance

logger = structlog.get_logger()

_PUNCTUATION_RE = re.compile(r"[^\w\s]")
_ARTIST_SEPARATOR_RE = re.compile(r"[&,]|\band\b", re.IGNORECASE)

DEFAULT_BASE_URL = "https://art.abluestar.com"


class MassImportSimilarityStrategy:
    """Points-based duplicate scoring for import pipelines"""

    POINTS_TITLE = 0.2
    POINTS_ARTIST = 0.2
    POINTS_LOCATION = 0.3
    POINTS_PER_TAG = 0.05
    LOCATION_RADIUS_METERS = 50.0

    name = "mass_import"
    version = "1.0.0"

    def __init__(self, base_url: str = DEFAULT_BASE_URL, threshold: float = 0.7):
        """
        Initialize strategy.

        Args:
            base_url: Site root used to link existing artworks
            threshold: Points at or above which a record is a duplicate
        """
        self.base_url = base_url.rstrip("/")
        self.threshold = threshold

    def calculate_similarity(
        self, query: MassImportQuery, candidate: MassImportCandidate
    ) -> MassImportSimilarityResult:
        breakdown = ScoreBreakdown(
            location=self.location_points(query.coordinates, candidate.coordinates)
        )

        if query.title and candidate.title:
            breakdown.title = (
                self.string_similarity(query.title, candidate.title) * self.POINTS_TITLE
            )

        if query.artist and candidate.created_by:
            breakdown.artist = (
                self.artist_similarity(query.artist, candidate.created_by)
                * self.POINTS_ARTIST
            )

        if query.tags and candidate.tags:
            breakdown.tags = self.tag_points(query.tags, candidate.tags)

        confidence = breakdown.title + breakdown.artist + breakdown.location + breakdown.tags

        logger.debug(
            "mass_import_similarity_calculated",
            artwork_id=candidate.id,
            confidence=round(confidence, 4),
            breakdown=breakdown.model_dump(),
        )

        return MassImportSimilarityResult(
            artwork_id=candidate.id,
            confidence_score=confidence,
            score_breakdown=breakdown,
            is_duplicate=confidence >= self.threshold,
            existing_artwork_id=candidate.id,
            existing_artwork_url=f"{self.base_url}/artwork/{candidate.id}",
        )

    def location_points(self, coords1: Coordinates, coords2: Coordinates) -> float:
        distance = calculate_distance(coords1, coords2)
        return max(
            0.0, self.POINTS_LOCATION * (1 - distance / self.LOCATION_RADIUS_METERS)
        )

    def string_similarity(self, value1: str, value2: str) -> float:
        """1 - normalized Levenshtein distance of normalized strings (0-1)."""
        normalized1 = normalize_string(value1)
        normalized2 = normalize_string(value2)
        if not normalized1 or not normalized2:
            return 0.0

        distance = Levenshtein.distance(normalized1, normalized2)
        return 1 - distance / max(len(normalized1), len(normalized2))

    def artist_similarity(self, artists1: str, artists2: str) -> float:
        """Best similarity between any pair of listed artists."""
        best = 0.0
        for query_artist in split_artists(artists1):
            for candidate_artist in split_artists(artists2):
                best = max(best, self.string_similarity(query_artist, candidate_artist))
        return best

    def tag_points(self, query_tags: Dict[str, str], candidate_tags_json: str) -> float:
        """Points for query tags whose label or value matches a candidate tag."""
        candidate_tags = _parse_tag_mapping(candidate_tags_json)
        if not candidate_tags:
            return 0.0

        match_count = 0
        for query_label, query_value in query_tags.items():
            for candidate_label, candidate_value in candidate_tags.items():
                if _same(query_label, candidate_label) or _same(query_value, candidate_value):
                    match_count += 1
                    break

        return match_count * self.POINTS_PER_TAG


def normalize_string(value: str) -> str:
    """Lowercase and strip punctuation and surrounding whitespace."""
    return _PUNCTUATION_RE.sub("", value.lower()).strip()


def split_artists(artists: str) -> List[str]:
    """Split an artist credit on '&', ',' and 'and'.

    Examples:
        >>> split_artists("Jane Doe & John Roe, Ann Poe")
        ['Jane Doe', 'John Roe', 'Ann Poe']
    """
    parts = (part.strip() for part in _ARTIST_SEPARATOR_RE.split(artists))
    return [part for part in parts if part]


def _same(value1: object, value2: object) -> bool:
    if not isinstance(value1, str) or not isinstance(value2, str):
        return False
    return normalize_string(value1) == normalize_string(value2)


def _parse_tag_mapping(tags_json: str) -> Dict[str, object]:
    try:
        parsed = json.loads(tags_json)
    except (ValueError, TypeError, RecursionError):
        return {}

    if isinstance(parsed, dict):
        nested = parsed.get("tags")
        if isinstance(nested, dict):
            return nested
        return parsed
    return {}


def create_mass_import_similarity_strategy(
    base_url: str = DEFAULT_BASE_URL, threshold: float = 0.7
) -> MassImportSimilarityStrategy:
    return MassImportSimilarityStrategy(base_url=base_url, threshold=threshold)
