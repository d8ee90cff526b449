"""
Song Repository - cache-coherent access to songs.

Composes the durable store and the cache behind one interface:

    create  store.create -> cache.set
    read    cache.get -> (miss) store.read -> cache.set
    update  store.update -> cache.set
    delete  store.delete -> cache.invalidate
    list    store only (the cache is keyed per song, not per query)
    recover store full scan -> cache.set for every song

The store is always written before the cache, so the cache can lag the store
but never run ahead of it. There is no cross-backend transaction: when the
store write succeeds and the cache write fails the call still raises, and a
retried create may then see AlreadyExistsError for a song that was stored.
No retries and no locking happen here; concurrent writers to one song may
leave the cache reflecting a different order than the store.

Usage:
    repo = SongRepository(store, cache)
    await repo.create(song)
    song = await repo.read(SongInfo(id=song.id))
"""

import dataclasses
from typing import List, Optional

from song_library.common.logging import StructuredLogAdapter, get_logger
from .errors import BackendError, NotFoundError
from .interfaces import SongCacheProtocol, SongStoreProtocol
from .models import Song, SongInfo
from .monitoring import cache_recovered_songs_total, record_cache_hit, record_cache_miss, record_operation


class SongRepository:
    """
    Single consistent CRUD + list view over {store, cache}.

    Holds no mutable state of its own; safe to share between request tasks.
    Errors from either side propagate unchanged, cancellation included.
    """

    def __init__(
        self,
        store: SongStoreProtocol,
        cache: SongCacheProtocol,
        logger: Optional[StructuredLogAdapter] = None,
    ):
        """
        Args:
            store: Durable store (authority for identity and timestamps)
            cache: Song cache
            logger: Logging handle; defaults to this module's structured logger
        """
        self.store = store
        self.cache = cache
        self.log = logger or get_logger(__name__)

    async def create(self, song: Song) -> None:
        """Persist ``song`` (id and timestamps are assigned on it), then cache it."""
        log = self.log.bind(op="SongRepository.create", song_name=song.name, group_name=song.group)

        log.debug("creating song in database")
        try:
            await self.store.create(song)
        except Exception:
            record_operation("create", False)
            log.error("failed to create song in database")
            raise

        log.debug("storing song in cache")
        try:
            await self.cache.set(song)
        except Exception:
            record_operation("create", False)
            log.error("song stored but cache write failed", data={"song_id": str(song.id)})
            raise

        record_operation("create", True)
        log.debug("song created and cached", data={"song_id": str(song.id)})

    async def read(self, key: SongInfo) -> Song:
        """Cache first; on a miss read the store and fill the cache before returning."""
        log = self.log.bind(op="SongRepository.read", **key.describe())

        try:
            song = await self.cache.get(key)
        except (NotFoundError, BackendError) as e:
            record_cache_miss()
            log.debug("cache miss, reading database", data={"reason": type(e).__name__})
        else:
            record_cache_hit()
            record_operation("read", True)
            log.debug("song served from cache")
            return song

        try:
            song = await self.store.read(key)
        except Exception:
            record_operation("read", False)
            log.debug("failed to read song from database")
            raise

        log.debug("filling cache after database read")
        try:
            await self.cache.set(song)
        except Exception:
            record_operation("read", False)
            log.error("failed to fill cache", data={"song_id": str(song.id)})
            raise

        record_operation("read", True)
        return song

    async def update(self, key: SongInfo, new_song: Song) -> None:
        """
        Replace the stored song with ``new_song``, then overwrite its cache entry.

        ``new_song`` must already be the full merged record. The cache entry is
        always written under the id of the row ``key`` addresses, whatever
        ``new_song.id`` says. When the store update fails the cache is left
        alone, stale entry included.
        """
        log = self.log.bind(op="SongRepository.update", song_name=new_song.name, group_name=new_song.group)

        if key.by_id:
            song_id = key.id
        else:
            log.debug("resolving song id from database")
            try:
                song_id = (await self.store.read(key)).id
            except Exception:
                record_operation("update", False)
                log.warning("failed to resolve song in database")
                raise

        if new_song.id != song_id:
            new_song = dataclasses.replace(new_song, id=song_id)

        log.debug("updating song in database")
        try:
            await self.store.update(key, new_song)
        except Exception:
            record_operation("update", False)
            log.warning("failed to update song in database")
            raise

        log.debug("updating song in cache")
        try:
            await self.cache.set(new_song)
        except Exception:
            record_operation("update", False)
            log.error("song updated but cache write failed", data={"song_id": str(new_song.id)})
            raise

        record_operation("update", True)
        log.debug("song updated in database and cache")

    async def delete(self, key: SongInfo) -> None:
        """Delete from the store, then invalidate the cache entry for the same key."""
        log = self.log.bind(op="SongRepository.delete", **key.describe())

        log.debug("deleting song from database")
        try:
            await self.store.delete(key)
        except Exception:
            record_operation("delete", False)
            log.warning("failed to delete song from database")
            raise

        log.debug("invalidating song in cache")
        try:
            await self.cache.invalidate(key)
        except Exception:
            record_operation("delete", False)
            log.error("song deleted but cache invalidation failed")
            raise

        record_operation("delete", True)
        log.debug("song deleted and cache invalidated")

    async def read_all_with_filter(self, filter_song: Song, limit: int, offset: int) -> List[Song]:
        """List songs straight from the store; the cache is not consulted."""
        log = self.log.bind(
            op="SongRepository.read_all_with_filter",
            song_name=filter_song.name,
            group_name=filter_song.group,
        )

        try:
            songs = await self.store.read_all_with_filter(filter_song, limit, offset)
        except Exception:
            record_operation("list", False)
            log.error("failed to list songs from database")
            raise

        record_operation("list", True)
        log.debug("songs listed", data={"count": len(songs), "limit": limit, "offset": offset})
        return songs

    async def cache_recovery(self) -> int:
        """
        Rebuild the cache from a full store scan.

        Overwrites existing entries. Stops at the first cache error with the
        songs written so far left in place. Returns the number of songs cached.
        """
        log = self.log.bind(op="SongRepository.cache_recovery")

        log.info("recovering cache from database")
        try:
            songs = await self.store.read_all_with_filter(Song(), 0, 0)
        except Exception:
            record_operation("cache_recovery", False)
            log.error("failed to read songs for cache recovery")
            raise

        for count, song in enumerate(songs):
            try:
                await self.cache.set(song)
            except Exception:
                record_operation("cache_recovery", False)
                log.error(
                    "cache recovery aborted",
                    data={"song_id": str(song.id), "cached": count, "total": len(songs)},
                )
                raise
            cache_recovered_songs_total.inc()

        record_operation("cache_recovery", True)
        log.info("cache recovery completed", data={"cached": len(songs)})
        return len(songs)
