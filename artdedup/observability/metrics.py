"""Prometheus metrics for duplicate detection.

Defines counters and histograms for monitoring:
- How often comparisons land in each threshold band
- Duplicate check outcomes (clear, warn, high, failed)
- Duplicate check latency

Usage:
    from artdedup.observability.metrics import SIMILARITY_COMPARISONS

    SIMILARITY_COMPARISONS.labels(threshold="warn").inc()

    with DUPLICATE_CHECK_DURATION.time():
        service.check_for_duplicates(query, candidates)

The host application exposes get_metrics_text() on its /metrics endpoint.
"""

from prometheus_client import (
    Counter,
    Histogram,
    CollectorRegistry,
    generate_latest,
    CONTENT_TYPE_LATEST,
)

# Custom registry to avoid conflicts with the host application's registry
REGISTRY = CollectorRegistry(auto_describe=True)

SIMILARITY_COMPARISONS = Counter(
    name="artdedup_similarity_comparisons_total",
    documentation="Query to candidate comparisons by threshold band",
    labelnames=["threshold"],  # none, warn, high
    registry=REGISTRY,
)

DUPLICATE_CHECKS = Counter(
    name="artdedup_duplicate_checks_total",
    documentation="Duplicate checks by outcome",
    labelnames=["outcome"],  # clear, warn, high, failed
    registry=REGISTRY,
)

# Typical checks score tens of candidates; buckets are in seconds
CHECK_BUCKETS = (0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1, float("inf"))

DUPLICATE_CHECK_DURATION = Histogram(
    name="artdedup_duplicate_check_duration_seconds",
    documentation="Time spent scoring all candidates for one query",
    buckets=CHECK_BUCKETS,
    registry=REGISTRY,
)

CANDIDATES_PER_CHECK = Histogram(
    name="artdedup_candidates_per_check",
    documentation="Number of candidates scored per duplicate check",
    buckets=(1, 5, 10, 25, 50, 100, 250, float("inf")),
    registry=REGISTRY,
)


def get_metrics_text() -> bytes:
    """Generate Prometheus metrics in text exposition format."""
    return generate_latest(REGISTRY)


def get_metrics_content_type() -> str:
    """Content-Type header value for a metrics response."""
    return CONTENT_TYPE_LATEST
