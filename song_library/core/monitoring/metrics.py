"""
Business metrics collection using Prometheus.

Tracks:
- Cache hit/miss rate and cache write outcomes
- Repository operation outcomes
- Metadata lookup outcomes
"""

from prometheus_client import Counter, Info

# =============================================================================
# Cache Metrics
# =============================================================================

cache_operations_total = Counter(
    'song_cache_operations_total',
    'Total song cache operations',
    ['operation', 'result']  # operation: get, set, invalidate; result: hit, miss, error, ok
)

# =============================================================================
# Repository Metrics
# =============================================================================

repository_operations_total = Counter(
    'song_repository_operations_total',
    'Total repository operations',
    ['operation', 'status']  # status: success, failure
)

cache_recovered_songs_total = Counter(
    'song_cache_recovered_songs_total',
    'Songs written to the cache by cache recovery'
)

# =============================================================================
# Upstream Metrics
# =============================================================================

metadata_lookups_total = Counter(
    'song_metadata_lookups_total',
    'Total external metadata lookups',
    ['result']  # ok, bad_request, error
)

# =============================================================================
# Info Metrics
# =============================================================================

app_info = Info(
    'song_library_app',
    'Application version and environment info'
)


# =============================================================================
# Helper Functions
# =============================================================================

def record_cache_hit():
    """Record a cache hit."""
    cache_operations_total.labels(operation='get', result='hit').inc()


def record_cache_miss():
    """Record a cache miss."""
    cache_operations_total.labels(operation='get', result='miss').inc()


def record_cache_write(operation: str):
    """Record a successful cache set or invalidate."""
    cache_operations_total.labels(operation=operation, result='ok').inc()


def record_cache_error(operation: str):
    """Record a failed cache call."""
    cache_operations_total.labels(operation=operation, result='error').inc()


def record_operation(operation: str, success: bool):
    """Record a repository operation outcome."""
    repository_operations_total.labels(
        operation=operation, status='success' if success else 'failure'
    ).inc()


def record_metadata_lookup(result: str):
    """Record an external metadata lookup outcome."""
    metadata_lookups_total.labels(result=result).inc()


def set_app_info(version: str, environment: str, python_version: str):
    """Set application info metric."""
    app_info.info({
        'version': version,
        'environment': environment,
        'python_version': python_version
    })
