"""
Config - Application configuration.

- settings.py: Dataclass settings from environment
- factories.py: Store, cache and metadata client factories
"""

from .settings import Settings, Environment, CacheBackend, LogLevel, get_settings, reset_settings
from .factories import create_song_cache, create_song_store, create_metadata_lookup

__all__ = [
    # Settings
    "Settings",
    "Environment",
    "CacheBackend",
    "LogLevel",
    "get_settings",
    "reset_settings",
    # Factories
    "create_song_cache",
    "create_song_store",
    "create_metadata_lookup",
]
