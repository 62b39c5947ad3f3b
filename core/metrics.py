"""
Prometheus metrics for the entitlement service.

Custom metrics for business logic and performance monitoring.
"""

from prometheus_client import Counter, Histogram

# HTTP metrics
http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.0, 5.0, 10.0],
)

# License metrics
licenses_issued_total = Counter(
    "licenses_issued_total",
    "Total licenses issued to a hosted application",
    ["app_type"],
)

license_activations_total = Counter(
    "license_activations_total",
    "License activation attempts by outcome",
    ["outcome"],
)

license_save_conflicts_total = Counter(
    "license_save_conflicts_total",
    "Conditional license writes rejected for a stale version",
)

domain_secret_verifications_total = Counter(
    "domain_secret_verifications_total",
    "Site credential verifications by outcome",
    ["outcome"],
)

# Download token metrics
download_tokens_issued_total = Counter(
    "download_tokens_issued_total",
    "Total download tokens issued",
    ["app_type"],
)

download_token_verifications_total = Counter(
    "download_token_verifications_total",
    "Download token verifications by outcome",
    ["outcome"],
)

download_tokens_purged_total = Counter(
    "download_tokens_purged_total",
    "Total expired download tokens removed by the sweep",
)

# Cache metrics
license_cache_hits_total = Counter(
    "license_cache_hits_total",
    "Total license cache hits",
    ["method"],
)

license_cache_misses_total = Counter(
    "license_cache_misses_total",
    "Total license cache misses",
    ["method"],
)

# Error metrics
errors_total = Counter(
    "errors_total",
    "Total errors",
    ["error_type", "endpoint"],
)
