from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST

# Search Metrics
SEARCH_REQUESTS = Counter(
    "portfolio_search_requests_total",
    "Total number of search requests",
    ["status"]
)

SEARCH_LATENCY = Histogram(
    "portfolio_search_latency_seconds",
    "Search request latency in seconds",
    buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0]
)

SUGGEST_REQUESTS = Counter(
    "portfolio_suggest_requests_total",
    "Total number of suggestion requests",
    ["status"]
)

# Cache Metrics
CACHE_HITS = Counter(
    "portfolio_cache_hits_total",
    "Total number of cache hits"
)

CACHE_MISSES = Counter(
    "portfolio_cache_misses_total",
    "Total number of cache misses"
)

CACHE_COALESCED = Counter(
    "portfolio_cache_coalesced_total",
    "Cache lookups that joined a load already in flight"
)

# Content Metrics
SOURCE_LOADS = Counter(
    "portfolio_source_loads_total",
    "Content source fetches",
    ["source", "status"]
)

RECORDS_DROPPED = Counter(
    "portfolio_records_dropped_total",
    "Records dropped by validation",
    ["source"]
)

INDEX_BUILD_TIME = Histogram(
    "portfolio_index_build_seconds",
    "Time taken to aggregate content and build the search index"
)

# Session telemetry
PIPELINE_EVENTS = Counter(
    "portfolio_search_events_total",
    "Interactive search session events",
    ["action"]
)

def get_metrics():
    """Return latest metrics in Prometheus format."""
    return generate_latest(), CONTENT_TYPE_LATEST
