"""
Factories - Create store, cache and metadata clients from configuration.

Uses factory pattern for dependency injection.
"""

from typing import Optional

from ..errors import ConfigurationError
from ..interfaces import MetadataLookupProtocol, SongCacheProtocol, SongStoreProtocol
from .settings import CacheBackend, Settings, get_settings


def create_song_cache(
    backend: Optional[CacheBackend] = None,
    settings: Optional[Settings] = None,
    **kwargs
) -> SongCacheProtocol:
    """
    Factory for song caches.

    Args:
        backend: Cache backend (default from settings)
        settings: Settings to read (default: get_settings())
        **kwargs: Backend-specific arguments (url, prefix)

    Returns:
        SongCacheProtocol implementation

    Example:
        cache = create_song_cache()  # Uses settings
        cache = create_song_cache(CacheBackend.REDIS, url="redis://...")
    """
    settings = settings or get_settings()
    backend = backend or settings.cache_backend

    if backend == CacheBackend.REDIS:
        from ..connectors.redis_cache import RedisSongCache
        url = kwargs.get('url', settings.redis_url)
        if not url:
            raise ConfigurationError(
                "REDIS_URL required for redis cache backend",
                data={"op": "create_song_cache", "backend": backend.value},
            )
        return RedisSongCache.from_url(url, prefix=kwargs.get('prefix', settings.cache_prefix))

    elif backend == CacheBackend.MEMORY:
        from ..connectors.inmemory_cache import InMemorySongCache
        return InMemorySongCache()

    raise ConfigurationError(f"Unknown cache backend: {backend}", data={"op": "create_song_cache"})


def create_song_store(
    url: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> SongStoreProtocol:
    """Create the SQLAlchemy store for DATABASE_URL (or ``url``)."""
    settings = settings or get_settings()
    url = url or settings.database_url
    if not url:
        raise ConfigurationError("DATABASE_URL is not set", data={"op": "create_song_store"})

    from ..connectors.sql_store import SongStore
    return SongStore.from_url(url)


def create_metadata_lookup(settings: Optional[Settings] = None) -> MetadataLookupProtocol:
    """Create the HTTP metadata client for MUSIC_INFO_URL."""
    settings = settings or get_settings()
    if not settings.music_info_url:
        raise ConfigurationError("MUSIC_INFO_URL is not set", data={"op": "create_metadata_lookup"})

    from ..connectors.music_info import MusicInfoClient
    return MusicInfoClient(settings.music_info_url, timeout=settings.music_info_timeout)
