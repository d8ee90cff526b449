"""
Song schemas - Request and response bodies for the songs API.
"""

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from song_library.core.models import Song


class AddSongRequest(BaseModel):
    """Body of POST /songs."""
    name: str = Field(min_length=1)
    group: str = Field(min_length=1)


class UpdateSongRequest(BaseModel):
    """Body of PUT /songs/{id}. Omitted or empty fields keep the stored value."""
    name: str = ""
    group: str = ""
    text: str = ""
    link: str = ""
    release_date: Optional[date] = None

    def to_song(self) -> Song:
        return Song(
            name=self.name,
            group=self.group,
            text=self.text,
            link=self.link,
            release_date=self.release_date,
        )


class SongResponse(BaseModel):
    """A stored song."""
    id: str
    name: str
    group: str
    text: str = ""
    link: str = ""
    release_date: Optional[date] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_song(cls, song: Song) -> 'SongResponse':
        return cls(
            id=str(song.id),
            name=song.name,
            group=song.group,
            text=song.text,
            link=song.link,
            release_date=song.release_date,
            created_at=song.created_at,
            updated_at=song.updated_at,
        )


class PaginatedTextResponse(BaseModel):
    """Lyrics split into verses."""
    text: List[str]


class MessageResponse(BaseModel):
    message: str


class RecoveryResponse(BaseModel):
    """Result of a cache rebuild."""
    recovered: int


class ErrorResponse(BaseModel):
    error: str
    message: str
    correlation_id: Optional[str] = None
