"""Tests for SongService: enrichment, merge-on-update, listing and verses."""

import asyncio
import uuid
from datetime import date, datetime, timezone
from unittest.mock import AsyncMock

import pytest

from song_library.core.errors import (
    AlreadyExistsError,
    EmptyTextError,
    InvalidKeyError,
    NotFoundError,
    UpstreamBadRequestError,
    UpstreamError,
)
from song_library.core.models import Song, SongInfo
from song_library.core.repository import SongRepository
from song_library.modules.songs.services import SongService, merge_songs, split_verses


@pytest.fixture
def repository(store, cache):
    return SongRepository(store, cache)


@pytest.fixture
def service(repository, metadata_lookup):
    return SongService(repository, metadata_lookup)


@pytest.mark.unit
class TestMergeSongs:
    """merge_songs overlays a partial update."""

    @pytest.fixture
    def current(self):
        created = datetime(2024, 1, 1, tzinfo=timezone.utc)
        return Song(
            id=uuid.uuid4(),
            name="Mr. Blue Sky",
            group="ELO",
            text="old text",
            link="https://old",
            release_date=date(1977, 10, 3),
            created_at=created,
            updated_at=created,
        )

    def test_empty_fields_keep_old_values(self, current):
        """Empty incoming fields keep what is stored.

        ЧТО ПРОВЕРЯЕМ:
            Only text changes when only text is given
        """
        merged = merge_songs(Song(text="new text"), current)

        assert merged.text == "new text"
        assert merged.name == current.name
        assert merged.group == current.group
        assert merged.link == current.link
        assert merged.release_date == current.release_date

    def test_identity_preserved_and_updated_at_refreshed(self, current):
        merged = merge_songs(Song(id=uuid.uuid4(), created_at=datetime.now(timezone.utc)), current)

        assert merged.id == current.id
        assert merged.created_at == current.created_at
        assert merged.updated_at > current.updated_at

    def test_release_date_replaced_when_given(self, current):
        merged = merge_songs(Song(release_date=date(2000, 1, 1)), current)
        assert merged.release_date == date(2000, 1, 1)


@pytest.mark.unit
class TestSplitVerses:
    """Verse pagination."""

    def test_three_verses(self):
        assert split_verses("Verse 1\n\nVerse 2\n\nVerse 3") == ["Verse 1", "Verse 2", "Verse 3"]

    def test_multiline_verses_and_extra_blank_lines(self):
        text = "Line 1\nLine 2\n\n\n  \nLine 3\r\n\r\nLine 4\n"
        assert split_verses(text) == ["Line 1\nLine 2", "Line 3", "Line 4"]

    def test_blank_text(self):
        assert split_verses("") == []
        assert split_verses("\n\n  \n") == []


@pytest.mark.integration
class TestSongServiceScenarios:
    """End-to-end over SQLite store, in-memory cache and the fake metadata service."""

    @pytest.mark.asyncio
    async def test_mr_blue_sky(self, service, metadata_lookup, blue_sky):
        """Add, get by name, delete, get again.

        ЧТО ПРОВЕРЯЕМ:
            Enriched text is stored and served; after delete the song is gone

        КАК ПРОВЕРЯЕМ:
            1. add({name: "Mr. Blue Sky", group: "ELO"})
            2. get by name+group -> same text as the metadata service returned
            3. delete, then get -> NotFoundError
        """
        created = await service.add(SongInfo(name="Mr. Blue Sky", group="ELO"))

        assert metadata_lookup.calls == [("Mr. Blue Sky", "ELO")]
        assert created.id is not None

        fetched = await service.get(SongInfo(name="Mr. Blue Sky", group="ELO"))
        assert fetched.text == blue_sky.text
        assert fetched.link == blue_sky.link
        assert fetched.release_date == date(1977, 10, 3)

        await service.delete(SongInfo(name="Mr. Blue Sky", group="ELO"))

        with pytest.raises(NotFoundError):
            await service.get(SongInfo(name="Mr. Blue Sky", group="ELO"))

    @pytest.mark.asyncio
    async def test_add_upstream_bad_request_creates_nothing(self, service, repository):
        repository.create = AsyncMock()

        with pytest.raises(UpstreamBadRequestError):
            await service.add(SongInfo(name="Unknown", group="Nobody"))

        repository.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_add_upstream_failure_creates_nothing(self, service, repository, metadata_lookup):
        metadata_lookup.fail_with = UpstreamError("FakeMetadataLookup.fetch: timeout")
        repository.create = AsyncMock()

        with pytest.raises(UpstreamError):
            await service.add(SongInfo(name="Mr. Blue Sky", group="ELO"))

        repository.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_add_requires_name_and_group(self, service, metadata_lookup):
        with pytest.raises(InvalidKeyError):
            await service.add(SongInfo(name="Mr. Blue Sky"))
        assert metadata_lookup.calls == []

    @pytest.mark.asyncio
    async def test_add_twice_raises_already_exists(self, service):
        await service.add(SongInfo(name="Mr. Blue Sky", group="ELO"))

        with pytest.raises(AlreadyExistsError):
            await service.add(SongInfo(name="Mr. Blue Sky", group="ELO"))

    @pytest.mark.asyncio
    async def test_update_merges_partial(self, service, store, cache):
        """Merge-on-update.

        ЧТО ПРОВЕРЯЕМ:
            Only the given field changes, in both the store and the cache;
            id and created_at stay, updated_at moves forward
        """
        created = await service.add(SongInfo(name="Mr. Blue Sky", group="ELO"))

        merged = await service.update(SongInfo(id=created.id), Song(link="https://new-link"))

        stored = await store.read(SongInfo(id=created.id))
        cached = await cache.get(SongInfo(id=created.id))
        for song in (merged, stored, cached):
            assert song.link == "https://new-link"
            assert song.text == created.text
            assert song.name == "Mr. Blue Sky"
            assert song.id == created.id
            assert song.created_at == created.created_at
        assert stored.updated_at > created.updated_at

    @pytest.mark.asyncio
    async def test_update_missing_raises_not_found(self, service):
        with pytest.raises(NotFoundError):
            await service.update(SongInfo(id=uuid.uuid4()), Song(text="x"))

    @pytest.mark.asyncio
    async def test_paginated_text(self, service, store):
        """Verse pagination scenario.

        ЧТО ПРОВЕРЯЕМ:
            "Verse 1\\n\\nVerse 2\\n\\nVerse 3" -> three verses;
            empty text -> EmptyTextError, not NotFoundError
        """
        song = Song(name="Verses", group="G", text="Verse 1\n\nVerse 2\n\nVerse 3")
        empty = Song(name="Instrumental", group="G", text="")
        await store.create(song)
        await store.create(empty)

        assert await service.get_paginated_text(SongInfo(id=song.id)) == ["Verse 1", "Verse 2", "Verse 3"]

        with pytest.raises(EmptyTextError):
            await service.get_paginated_text(SongInfo(id=empty.id))

    @pytest.mark.asyncio
    async def test_paginated_text_missing_song(self, service):
        with pytest.raises(NotFoundError):
            await service.get_paginated_text(SongInfo(id=uuid.uuid4()))

    @pytest.mark.asyncio
    async def test_get_all_with_filter_pages(self, service, store):
        """Filter with pagination order.

        ЧТО ПРОВЕРЯЕМ:
            page 1 and 2 of size 2 are consecutive newest-first slices;
            page_size 0 returns everything; page 0 acts as page 1
        """
        for i in range(5):
            await store.create(Song(name=f"Song {i}", group="Band"))
            await asyncio.sleep(0.002)
        await store.create(Song(name="Other", group="Someone Else"))

        page1 = await service.get_all_with_filter(Song(group="band"), 1, 2)
        page2 = await service.get_all_with_filter(Song(group="band"), 2, 2)
        everything = await service.get_all_with_filter(Song(group="band"), 1, 0)
        page0 = await service.get_all_with_filter(Song(group="band"), 0, 2)

        assert [s.name for s in page1] == ["Song 4", "Song 3"]
        assert [s.name for s in page2] == ["Song 2", "Song 1"]
        assert len(everything) == 5
        assert page0 == page1

    @pytest.mark.asyncio
    async def test_recover_cache(self, service, store, cache):
        await store.create(Song(name="A", group="G"))
        await store.create(Song(name="B", group="G"))

        assert await service.recover_cache() == 2
        assert cache.size() == 2
