"""Exceptions for the similarity engine

This module defines the exception hierarchy used around the scoring path:
- Base exception for all similarity errors
- Configuration errors raised at startup, never per comparison
- Calculation and detection errors raised by the service layer

The scoring functions themselves do not raise for normal input shape
variation (missing titles, missing or malformed tags). These exceptions
wrap truly unexpected failures so callers get the artwork id and query
context instead of a silently wrong score.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional


class SimilarityError(Exception):
    """Base exception for all similarity errors

    Use this to catch any error raised by the engine:
    ```python
    try:
        service.check_for_duplicates(query, candidates)
    except SimilarityError as e:
        logger.error("duplicate_check_failed", **e.to_dict())
    ```
    """

    code = "SIMILARITY_ERROR"

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.context = context or {}
        self.timestamp = datetime.now(timezone.utc)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for structured logs and API responses."""
        cause = self.__cause__
        return {
            "name": type(self).__name__,
            "message": str(self),
            "code": self.code,
            "timestamp": self.timestamp.isoformat(),
            "context": self.context,
            "cause": (
                {"name": type(cause).__name__, "message": str(cause)}
                if cause is not None
                else None
            ),
        }


class SimilarityConfigurationError(SimilarityError):
    """Similarity configuration is invalid

    Raised when:
    - Weights do not sum to 1.0
    - High threshold is not above warn threshold
    - Optimal distance is not below max distance
    """

    code = "SIMILARITY_CONFIG_INVALID"


class SimilarityInputError(SimilarityError):
    """Input data for a similarity operation is invalid

    Raised by input adapters (CLI, import steps) before scoring, e.g. for
    out-of-range coordinates. The scorer assumes well-formed input.
    """

    code = "SIMILARITY_INPUT_INVALID"

    def __init__(self, field: str, value: Any, reason: str) -> None:
        super().__init__(
            f"Invalid input for {field}: {reason}",
            {"field": field, "value": value, "reason": reason},
        )


class SimilarityCalculationError(SimilarityError):
    """Similarity calculation failed for a specific artwork"""

    code = "SIMILARITY_CALCULATION_FAILED"

    def __init__(self, artwork_id: str, cause: Exception) -> None:
        super().__init__(
            f"Similarity calculation failed for artwork {artwork_id}: {cause}",
            {"artwork_id": artwork_id},
        )
        self.artwork_id = artwork_id


class DuplicateDetectionError(SimilarityError):
    """Duplicate detection failed for a whole query"""

    code = "DUPLICATE_DETECTION_FAILED"

    def __init__(self, query_info: Dict[str, Any], cause: Exception) -> None:
        super().__init__(f"Duplicate detection failed: {cause}", {"query": query_info})


def is_similarity_error(error: BaseException) -> bool:
    """Check whether an exception belongs to the similarity hierarchy."""
    return isinstance(error, SimilarityError)


def get_similarity_error_code(error: BaseException) -> str:
    """Error code for a similarity error, 'UNKNOWN_ERROR' otherwise."""
    if isinstance(error, SimilarityError):
        return error.code
    return "UNKNOWN_ERROR"
