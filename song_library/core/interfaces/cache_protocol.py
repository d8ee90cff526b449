"""
Cache Protocol - Interface for song cache implementations.

Implementations:
- RedisSongCache (song_library.core.connectors.redis_cache)
- InMemorySongCache (song_library.core.connectors.inmemory_cache)
"""

from typing import Protocol, runtime_checkable

from ..models import Song, SongInfo


@runtime_checkable
class SongCacheProtocol(Protocol):
    """Protocol for song cache implementations (DI interface)."""

    async def set(self, song: Song) -> None:
        """Store song under its id, without expiry."""
        ...

    async def get(self, key: SongInfo) -> Song:
        """Get song. Raises NotFoundError on miss, DataIntegrityError on a bad payload."""
        ...

    async def invalidate(self, key: SongInfo) -> None:
        """Remove the entry; absent keys are not an error."""
        ...
