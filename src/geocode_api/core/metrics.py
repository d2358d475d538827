"""Prometheus metrics for outbound provider traffic and cache efficiency."""

from prometheus_client import Counter

HOST_REQUESTS_TOTAL = Counter(
    "host_request_total",
    "Total number of requests to host.",
    ["hostname"],
)

CACHE_LOOKUPS_TOTAL = Counter(
    "geocode_cache_lookups_total",
    "Total number of reverse geocode cache lookups",
    ["result"],  # HIT, MISS
)
