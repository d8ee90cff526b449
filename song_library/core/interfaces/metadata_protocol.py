"""
Metadata Protocol - Interface for the external song metadata lookup.

Implementations:
- MusicInfoClient (song_library.core.connectors.music_info)
"""

from typing import Protocol, runtime_checkable

from ..models import Song


@runtime_checkable
class MetadataLookupProtocol(Protocol):
    """Enrichment source. Raises UpstreamBadRequestError on HTTP 400, UpstreamError otherwise."""

    async def fetch(self, name: str, group: str) -> Song:
        """Return an unsaved Song with text, link and release date filled in."""
        ...
