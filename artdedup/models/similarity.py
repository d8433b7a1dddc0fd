"""Data models for artwork similarity scoring."""

from enum import Enum
from typing import Any, Dict, List, Optional, Tuple
from pydantic import BaseModel, Field, ConfigDict


class SignalType(str, Enum):
    """Comparable dimension contributing to the composite score"""

    DISTANCE = "distance"
    TITLE = "title"
    TAGS = "tags"


class ThresholdBand(str, Enum):
    """Decision band derived from the composite score"""

    NONE = "none"
    WARN = "warn"  # Show warning badge
    HIGH = "high"  # Require explicit confirmation


class Coordinates(BaseModel):
    """Geographic point in decimal degrees"""

    model_config = ConfigDict(frozen=True)

    lat: float
    lon: float


class SimilarityQuery(BaseModel):
    """Incoming record being checked for duplicates"""

    model_config = ConfigDict(frozen=True)

    coordinates: Coordinates
    title: Optional[str] = None
    tags: Optional[Tuple[str, ...]] = None
    # Informational only, radius filtering happens in the storage layer
    radius_meters: Optional[float] = Field(None, ge=0)


class CandidateArtwork(BaseModel):
    """Existing stored artwork supplied by the storage layer"""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    coordinates: Coordinates
    title: Optional[str] = None
    tags: Optional[str] = Field(
        None, description="Raw JSON: array, flat object or {'tags': {...}}"
    )
    type_name: Optional[str] = None
    distance_meters: Optional[float] = None


class SimilaritySignal(BaseModel):
    """One computed similarity dimension"""

    model_config = ConfigDict(frozen=True)

    type: SignalType
    raw_score: float = Field(..., ge=0.0, le=1.0)
    weighted_score: float = Field(..., ge=0.0)
    metadata: Optional[Dict[str, Any]] = None


class ResultMetadata(BaseModel):
    """Denormalized candidate details for display"""

    model_config = ConfigDict(frozen=True)

    distance: Optional[float] = None
    title: Optional[str] = None
    tags: Tuple[str, ...] = ()


class SimilarityResult(BaseModel):
    """Outcome of one query to candidate comparison"""

    model_config = ConfigDict(frozen=True)

    artwork_id: str
    overall_score: float = Field(..., ge=0.0, le=1.0)
    signals: Tuple[SimilaritySignal, ...] = ()
    threshold: ThresholdBand = ThresholdBand.NONE
    metadata: ResultMetadata = Field(default_factory=ResultMetadata)

    def get_signal(self, signal_type: SignalType) -> Optional[SimilaritySignal]:
        """Return the computed signal of the given type, if any."""
        for signal in self.signals:
            if signal.type == signal_type:
                return signal
        return None


class DuplicateCheckResult(BaseModel):
    """Summary of one duplicate check across all candidates"""

    has_high_similarity: bool = False
    has_warning_similarity: bool = False
    high_similarity_matches: List[SimilarityResult] = Field(default_factory=list)
    warning_similarity_matches: List[SimilarityResult] = Field(default_factory=list)
    top_match: Optional[SimilarityResult] = None


class NearbyArtwork(BaseModel):
    """Row returned by the storage layer's nearby-artwork query"""

    id: str
    lat: float
    lon: float
    type_name: str
    distance_km: float = Field(..., ge=0)
    title: Optional[str] = None
    tags: Optional[str] = None
    photos: Optional[List[str]] = None


class SignalSummary(BaseModel):
    """Compact signal view attached to enhanced results"""

    type: SignalType
    score: float
    metadata: Optional[Dict[str, Any]] = None


class EnhancedArtworkResult(BaseModel):
    """Nearby artwork row enriched with similarity information"""

    id: str
    lat: float
    lon: float
    type_name: str
    distance_meters: int
    title: Optional[str] = None
    tags: Optional[str] = None
    photos: Optional[List[str]] = None
    similarity_score: Optional[float] = None
    similarity_threshold: Optional[ThresholdBand] = None
    similarity_signals: Optional[List[SignalSummary]] = None
