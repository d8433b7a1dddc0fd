"""Data models for bulk-import duplicate scoring."""

from typing import Dict, Optional
from pydantic import BaseModel, Field, ConfigDict

from artdedup.models.similarity import Coordinates


class MassImportQuery(BaseModel):
    """Record produced by an import plugin"""

    model_config = ConfigDict(frozen=True)

    coordinates: Coordinates
    title: Optional[str] = None
    artist: Optional[str] = None
    tags: Optional[Dict[str, str]] = None


class MassImportCandidate(BaseModel):
    """Existing artwork considered during a bulk import"""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    coordinates: Coordinates
    title: Optional[str] = None
    created_by: Optional[str] = Field(None, description="Artist names as stored")
    tags: Optional[str] = Field(None, description="Raw JSON tag payload")


class ScoreBreakdown(BaseModel):
    """Points contributed by each dimension"""

    title: float = 0.0  # 0-0.2
    artist: float = 0.0  # 0-0.2
    location: float = 0.0  # 0-0.3
    tags: float = 0.0  # 0.05 per matching tag


class MassImportSimilarityResult(BaseModel):
    """Outcome of scoring one import record against one candidate"""

    artwork_id: str
    confidence_score: float = Field(..., ge=0.0)
    score_breakdown: ScoreBreakdown
    is_duplicate: bool
    existing_artwork_id: str
    existing_artwork_url: str
