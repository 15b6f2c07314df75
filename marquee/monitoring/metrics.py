"""Prometheus metrics for the catalog refresh pipeline.

Counters are process-global and exposed through the API's
/metrics endpoint when the refresh runs in the server process.
"""

from prometheus_client import Counter, Histogram

# =============================================================================
# PIPELINE METRICS
# =============================================================================

MOVIES_PROCESSED_TOTAL = Counter(
    "marquee_movies_processed_total",
    "Listing items processed by outcome",
    ["status"],
)

ACTORS_PROCESSED_TOTAL = Counter(
    "marquee_actors_processed_total",
    "Cast members processed by outcome",
    ["status"],
)

NOTIFICATIONS_DISPATCHED_TOTAL = Counter(
    "marquee_notifications_dispatched_total",
    "Alert payloads dispatched by channel and outcome",
    ["channel", "status"],
)

REFRESH_RUNS_TOTAL = Counter(
    "marquee_refresh_runs_total",
    "Refresh runs by final status",
    ["status"],
)

REFRESH_DURATION = Histogram(
    "marquee_refresh_duration_seconds",
    "Refresh run duration in seconds",
    buckets=[1, 5, 15, 30, 60, 120, 300, 600, 1200, 1800],
)
