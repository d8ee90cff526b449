"""
Pytest configuration for song-library tests.

Automatically adds project root to sys.path so that 'from song_library...'
imports work. Defines markers and shared fixtures.
"""
import sys
import pytest
import pytest_asyncio
from pathlib import Path
from typing import Dict, List, Tuple

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from song_library.core.connectors import InMemorySongCache, SongStore
from song_library.core.errors import UpstreamBadRequestError, UpstreamError
from song_library.core.models import Song


# =============================================================================
# Pytest Markers
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "asyncio: Async tests")
    config.addinivalue_line("markers", "integration: Integration tests (store + cache + service)")
    config.addinivalue_line("markers", "requires_redis: Requires Redis service")


# =============================================================================
# Test Doubles
# =============================================================================

class FakeMetadataLookup:
    """
    In-process metadata service.

    Answers from ``catalogue`` keyed by (name, group); unknown songs get
    UpstreamBadRequestError like the real service's 400. ``fail_with``
    forces every call to raise.
    """

    def __init__(self, catalogue: Dict[Tuple[str, str], Song] = None):
        self.catalogue = dict(catalogue or {})
        self.calls: List[Tuple[str, str]] = []
        self.fail_with: Exception = None

    async def fetch(self, name: str, group: str) -> Song:
        self.calls.append((name, group))
        if self.fail_with is not None:
            raise self.fail_with
        found = self.catalogue.get((name, group))
        if found is None:
            raise UpstreamBadRequestError(
                "FakeMetadataLookup.fetch: unknown song",
                data={"op": "FakeMetadataLookup.fetch", "song_name": name, "group_name": group},
            )
        return Song(
            name=found.name,
            group=found.group,
            text=found.text,
            link=found.link,
            release_date=found.release_date,
        )

    async def close(self) -> None:
        return None


# =============================================================================
# Shared Fixtures
# =============================================================================

@pytest.fixture
def project_root() -> Path:
    """Return project root path."""
    return PROJECT_ROOT


@pytest.fixture
def cache() -> InMemorySongCache:
    """Fresh in-memory song cache."""
    return InMemorySongCache()


@pytest_asyncio.fixture
async def store(tmp_path):
    """SQLite-backed store in a temp file, schema created, disposed after the test."""
    db_path = tmp_path / "songs.db"
    song_store = SongStore.from_url(f"sqlite+aiosqlite:///{db_path}")
    await song_store.create_schema()
    yield song_store
    await song_store.close()


@pytest.fixture
def blue_sky() -> Song:
    """Metadata service answer for Mr. Blue Sky."""
    from datetime import date
    return Song(
        name="Mr. Blue Sky",
        group="ELO",
        text="Sun is shinin' in the sky\nThere ain't a cloud in sight\n\nMr. Blue Sky, please tell us why",
        link="https://www.youtube.com/watch?v=aQUlA8Hcv4s",
        release_date=date(1977, 10, 3),
    )


@pytest.fixture
def metadata_lookup(blue_sky) -> FakeMetadataLookup:
    """Metadata service that knows Mr. Blue Sky."""
    return FakeMetadataLookup({(blue_sky.name, blue_sky.group): blue_sky})


@pytest.fixture
def make_song():
    """Factory for unsaved songs."""
    def _make(name="Song", group="Group", text="Verse 1\n\nVerse 2", link="", release_date=None):
        return Song(name=name, group=group, text=text, link=link, release_date=release_date)
    return _make
