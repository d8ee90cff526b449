"""
Connectors - Store, cache and upstream implementations.

- sql_store.py: SQLAlchemy store (PostgreSQL in production)
- redis_cache.py: Redis-based song cache (production, shared)
- inmemory_cache.py: In-memory song cache (unit tests, local runs)
- music_info.py: HTTP metadata lookup
"""

from .sql_store import SongStore, songs_table
from .redis_cache import RedisSongCache
from .inmemory_cache import InMemorySongCache
from .music_info import MusicInfoClient

__all__ = [
    "SongStore",
    "songs_table",
    "RedisSongCache",
    "InMemorySongCache",
    "MusicInfoClient",
]
