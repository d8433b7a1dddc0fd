"""Similarity configuration models.

Weights and thresholds are static configuration. Invariants are enforced when
the model is built so the per-comparison scoring path never has to check them.
"""

from typing import Tuple
from pydantic import BaseModel, Field, ConfigDict, field_validator, model_validator

DEFAULT_STOP_WORDS: Tuple[str, ...] = (
    "the",
    "a",
    "an",
    "and",
    "or",
    "but",
    "in",
    "on",
    "at",
    "to",
    "for",
    "of",
    "with",
    "by",
)

# Allowed drift when checking that the weights sum to 1.0
WEIGHT_SUM_TOLERANCE = 0.001


class ThresholdConfig(BaseModel):
    """Score thresholds for duplicate detection"""

    model_config = ConfigDict(frozen=True)

    warn: float = Field(0.65, ge=0.0, le=1.0, description="Show warning badge")
    high: float = Field(
        0.80, ge=0.0, le=1.0, description="Require explicit confirmation"
    )

    @model_validator(mode="after")
    def validate_ordering(self) -> "ThresholdConfig":
        if self.high <= self.warn:
            raise ValueError(
                f"High threshold ({self.high}) must be greater than "
                f"warn threshold ({self.warn})"
            )
        return self


class WeightConfig(BaseModel):
    """Weights for the similarity signals (must sum to 1.0)"""

    model_config = ConfigDict(frozen=True)

    distance: float = Field(0.5, ge=0.0, description="Geographic proximity")
    title: float = Field(0.35, ge=0.0, description="Title fuzzy matching")
    tags: float = Field(0.15, ge=0.0, description="Tag overlap")

    @model_validator(mode="after")
    def validate_total(self) -> "WeightConfig":
        total = self.distance + self.title + self.tags
        if abs(total - 1.0) > WEIGHT_SUM_TOLERANCE:
            raise ValueError(f"Similarity weights must sum to 1.0, got {total}")
        return self

    def for_signal(self, signal_type: str) -> float:
        """Weight applied to a signal type ('distance', 'title' or 'tags')."""
        return getattr(self, signal_type)


class DistanceConfig(BaseModel):
    """Distance normalization parameters"""

    model_config = ConfigDict(frozen=True)

    optimal_distance_meters: float = Field(
        50.0, ge=0.0, description="Distance at which similarity = 1"
    )
    max_distance_meters: float = Field(
        1000.0, gt=0.0, description="Distance beyond which similarity = 0"
    )

    @model_validator(mode="after")
    def validate_range(self) -> "DistanceConfig":
        if self.optimal_distance_meters >= self.max_distance_meters:
            raise ValueError(
                f"Optimal distance ({self.optimal_distance_meters}m) must be less "
                f"than max distance ({self.max_distance_meters}m)"
            )
        return self


class TitleMatchingConfig(BaseModel):
    """Title matching parameters"""

    model_config = ConfigDict(frozen=True)

    min_title_length: int = Field(
        3, ge=1, description="Minimum normalized title length for comparison"
    )
    stop_words: Tuple[str, ...] = Field(
        DEFAULT_STOP_WORDS, description="Words ignored in comparisons"
    )

    @field_validator("stop_words")
    @classmethod
    def normalize_stop_words(cls, v: Tuple[str, ...]) -> Tuple[str, ...]:
        return tuple(word.strip().lower() for word in v if word.strip())


class SimilarityConfig(BaseModel):
    """Complete configuration for the similarity engine"""

    model_config = ConfigDict(frozen=True)

    thresholds: ThresholdConfig = Field(default_factory=ThresholdConfig)
    weights: WeightConfig = Field(default_factory=WeightConfig)
    distance: DistanceConfig = Field(default_factory=DistanceConfig)
    title: TitleMatchingConfig = Field(default_factory=TitleMatchingConfig)


DEFAULT_SIMILARITY_CONFIG = SimilarityConfig()


def create_dev_similarity_config() -> SimilarityConfig:
    """Lenient configuration for development (lower thresholds)."""
    return DEFAULT_SIMILARITY_CONFIG.model_copy(
        update={"thresholds": ThresholdConfig(warn=0.5, high=0.7)}
    )


def create_prod_similarity_config() -> SimilarityConfig:
    """Strict configuration for production (higher thresholds)."""
    return DEFAULT_SIMILARITY_CONFIG.model_copy(
        update={"thresholds": ThresholdConfig(warn=0.7, high=0.85)}
    )
