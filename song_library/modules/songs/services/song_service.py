"""
SongService - Business operations on the song library.

Sits on top of SongRepository and the metadata lookup:
- add: enrich {name, group} from the metadata service, then create
- update: read current (cache-aware), merge the partial update, full replace
- get_paginated_text: split lyrics into verses

Never touches the store or the cache directly.
"""

import re
from datetime import datetime, timezone
from typing import List, Optional

from song_library.common.logging import StructuredLogAdapter, get_logger
from song_library.core.errors import (
    AlreadyExistsError,
    EmptyTextError,
    NotFoundError,
    UpstreamBadRequestError,
    UpstreamError,
)
from song_library.core.interfaces import MetadataLookupProtocol
from song_library.core.lookup import validate_lookup_key
from song_library.core.models import Song, SongInfo
from song_library.core.repository import SongRepository

# Verses are separated by one or more blank lines
VERSE_SEPARATOR = re.compile(r"\n\s*\n")


def merge_songs(updated: Song, current: Song) -> Song:
    """
    Overlay a partial update on the current record.

    Empty strings and a missing release date keep the current value.
    ``id`` and ``created_at`` always come from ``current``; ``updated_at``
    is set to now.
    """
    return Song(
        id=current.id,
        name=updated.name or current.name,
        group=updated.group or current.group,
        text=updated.text or current.text,
        link=updated.link or current.link,
        release_date=updated.release_date if updated.release_date is not None else current.release_date,
        created_at=current.created_at,
        updated_at=datetime.now(timezone.utc),
    )


def split_verses(text: str) -> List[str]:
    """Split lyrics on blank lines, dropping empty chunks."""
    normalized = text.replace("\r\n", "\n")
    return [verse.strip() for verse in VERSE_SEPARATOR.split(normalized) if verse.strip()]


class SongService:
    """
    Song library operations.

    Example:
        service = SongService(repository, MusicInfoClient("http://music-info:8080"))
        song = await service.add(SongInfo(name="Mr. Blue Sky", group="ELO"))
        verses = await service.get_paginated_text(SongInfo(id=song.id))
    """

    def __init__(
        self,
        repository: SongRepository,
        metadata_lookup: MetadataLookupProtocol,
        logger: Optional[StructuredLogAdapter] = None,
    ):
        self.repository = repository
        self.metadata_lookup = metadata_lookup
        self.log = logger or get_logger(__name__)

    async def add(self, song_info: SongInfo) -> Song:
        """
        Fetch metadata for ``song_info`` and store the enriched song.

        Nothing is written when the lookup fails.

        Returns:
            The created song with id and timestamps assigned

        Raises:
            InvalidKeyError: name or group missing
            UpstreamBadRequestError: metadata service rejected the song
            UpstreamError: metadata service unavailable or returned garbage
            AlreadyExistsError: a song with this name and group exists
        """
        log = self.log.bind(op="SongService.add", song_name=song_info.name, group_name=song_info.group)
        validate_lookup_key(SongInfo(name=song_info.name, group=song_info.group), "SongService.add")

        log.info("attempting to add a new song")
        try:
            song = await self.metadata_lookup.fetch(song_info.name, song_info.group)
        except UpstreamBadRequestError:
            log.warning("metadata service rejected the song")
            raise
        except UpstreamError:
            log.error("failed to fetch song info")
            raise
        log.debug("fetched song info successfully")

        try:
            await self.repository.create(song)
        except AlreadyExistsError:
            log.warning("song already exists")
            raise

        log.info("song successfully added", data={"song_id": str(song.id)})
        return song

    async def get(self, key: SongInfo) -> Song:
        log = self.log.bind(op="SongService.get", **key.describe())
        try:
            song = await self.repository.read(key)
        except NotFoundError:
            log.info("song not found")
            raise
        log.debug("song fetched")
        return song

    async def update(self, key: SongInfo, updated: Song) -> Song:
        """
        Apply a partial update to the song addressed by ``key``.

        Empty fields in ``updated`` keep the stored value. Returns the
        merged record as written.
        """
        log = self.log.bind(op="SongService.update", **key.describe())

        log.info("attempting to update song")
        current = await self.get(key)
        merged = merge_songs(updated, current)

        await self.repository.update(key, merged)

        log.info("song successfully updated", data={"song_name": merged.name, "group_name": merged.group})
        return merged

    async def delete(self, key: SongInfo) -> None:
        log = self.log.bind(op="SongService.delete", **key.describe())
        try:
            await self.repository.delete(key)
        except NotFoundError:
            log.info("song not found during deletion")
            raise
        log.info("song successfully deleted")

    async def get_all_with_filter(self, filter_song: Song, page: int, page_size: int) -> List[Song]:
        """
        List songs matching ``filter_song``, one page at a time.

        Pages are 1-based; ``page_size`` 0 returns every match.
        """
        page = max(page, 1)
        page_size = max(page_size, 0)
        offset = (page - 1) * page_size

        log = self.log.bind(op="SongService.get_all_with_filter", page=page, page_size=page_size)
        songs = await self.repository.read_all_with_filter(filter_song, page_size, offset)
        log.info("songs fetched", data={"count": len(songs), "offset": offset})
        return songs

    async def get_paginated_text(self, key: SongInfo) -> List[str]:
        """Return the lyrics split into verses. Raises EmptyTextError when there are none."""
        op = "SongService.get_paginated_text"
        song = await self.get(key)

        verses = split_verses(song.text)
        if not verses:
            raise EmptyTextError(f"{op}: song text is empty", data={"op": op, "song_id": str(song.id)})
        return verses

    async def recover_cache(self) -> int:
        """Rebuild the cache from the database. Returns the number of songs cached."""
        return await self.repository.cache_recovery()

