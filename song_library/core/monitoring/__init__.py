"""Monitoring and metrics collection."""

from .metrics import (
    # Helper functions
    record_cache_hit,
    record_cache_miss,
    record_cache_error,
    record_cache_write,
    record_operation,
    record_metadata_lookup,
    set_app_info,

    # Metrics
    cache_operations_total,
    repository_operations_total,
    cache_recovered_songs_total,
    metadata_lookups_total,
)

__all__ = [
    'record_cache_hit',
    'record_cache_miss',
    'record_cache_error',
    'record_cache_write',
    'record_operation',
    'record_metadata_lookup',
    'set_app_info',
    'cache_operations_total',
    'repository_operations_total',
    'cache_recovered_songs_total',
    'metadata_lookups_total',
]
