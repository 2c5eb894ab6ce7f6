"""
Prometheus metrics for feed polling and geometry builds.
"""

from prometheus_client import Counter, Gauge, Histogram

FEED_FETCH_TOTAL = Counter(
    "feed_fetch_total",
    "Vehicle position feed fetches by outcome",
    ["outcome"],
)

FEED_FETCH_SECONDS = Histogram(
    "feed_fetch_seconds",
    "Wall-clock duration of a single vehicle position feed fetch",
)

GEOMETRY_BUILDS_TOTAL = Counter(
    "geometry_builds_total",
    "Route geometry builds by outcome",
    ["outcome"],
)

GEOMETRY_ROUTE_DIRECTIONS = Gauge(
    "geometry_route_directions",
    "Route/direction features in the current geometry snapshot",
)
