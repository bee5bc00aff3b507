"""Metrics for azdo-git."""

# Request latencies of external APIs are usually between 50ms and a few seconds
DEFAULT_BUCKETS_EXTERNAL_API = (
    0.05,
    0.1,
    0.25,
    0.5,
    1.0,
    2.5,
    5.0,
    10.0,
    30.0,
)
