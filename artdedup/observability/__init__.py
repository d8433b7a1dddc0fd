"""Observability for the similarity engine.

Provides:
- Check ID context management for tracing one duplicate check
- Structured logging tagged with the check ID
- Prometheus metrics for comparison outcomes and latency

Usage:
    from artdedup.observability import check_id_context, configure_logging

    configure_logging(level="INFO")
    with check_id_context() as check_id:
        service.check_for_duplicates(query, candidates)
"""

from artdedup.observability.context import (
    set_check_id,
    get_check_id,
    clear_check_id,
    check_id_context,
)
from artdedup.observability.logging import (
    configure_logging,
    add_check_id_processor,
)
from artdedup.observability.metrics import (
    SIMILARITY_COMPARISONS,
    DUPLICATE_CHECKS,
    DUPLICATE_CHECK_DURATION,
    CANDIDATES_PER_CHECK,
    get_metrics_text,
)

__all__ = [
    # Context
    "set_check_id",
    "get_check_id",
    "clear_check_id",
    "check_id_context",
    # Logging
    "configure_logging",
    "add_check_id_processor",
    # Metrics
    "SIMILARITY_COMPARISONS",
    "DUPLICATE_CHECKS",
    "DUPLICATE_CHECK_DURATION",
    "CANDIDATES_PER_CHECK",
    "get_metrics_text",
]
