"""
Store Protocol - Interface for the durable song store.

Implementations:
- SongStore (song_library.core.connectors.sql_store)
"""

from typing import List, Protocol, runtime_checkable

from ..models import Song, SongInfo


@runtime_checkable
class SongStoreProtocol(Protocol):
    """Durable CRUD + filtered listing. Raises NotFoundError, AlreadyExistsError, BackendError."""

    async def create(self, song: Song) -> None:
        """Persist ``song``; assigns id, created_at and updated_at on it."""
        ...

    async def read(self, key: SongInfo) -> Song:
        """Exact lookup by id, or by name+group when id is unset."""
        ...

    async def update(self, key: SongInfo, new_song: Song) -> None:
        """Replace all mutable fields of the matching row; refreshes new_song.updated_at."""
        ...

    async def delete(self, key: SongInfo) -> None:
        """Remove the matching row."""
        ...

    async def read_all_with_filter(self, filter_song: Song, limit: int, offset: int) -> List[Song]:
        """Filtered listing, newest first; limit 0 returns every matching row."""
        ...
