"""
Domain models for the song library.

- Song: durable record, mirrored into the cache as JSON via to_dict()/from_dict()
- SongInfo / SongSearch: lookup key addressing one song by id or by name+group
"""

import uuid
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, Optional


@dataclass
class SongInfo:
    """
    Lookup key for a single song.

    ``id`` set means "address by id"; ``id`` None means "address by
    name+group". Both modes are allowed on one instance; callers pass a
    consistent key.
    """
    id: Optional[uuid.UUID] = None
    name: str = ""
    group: str = ""

    @property
    def by_id(self) -> bool:
        return self.id is not None

    @property
    def is_empty(self) -> bool:
        return self.id is None and not self.name and not self.group

    def describe(self) -> Dict[str, Any]:
        """Key fields for structured logs."""
        if self.by_id:
            return {"song_id": str(self.id)}
        return {"song_name": self.name, "group_name": self.group}


SongSearch = SongInfo


@dataclass
class Song:
    """A song record as stored in the database and the cache."""
    name: str = ""
    group: str = ""
    text: str = ""
    link: str = ""
    release_date: Optional[date] = None
    id: Optional[uuid.UUID] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def lookup_key(self) -> SongInfo:
        """Key addressing this song: by id once assigned, else by name+group."""
        if self.id is not None:
            return SongInfo(id=self.id)
        return SongInfo(name=self.name, group=self.group)

    def to_dict(self) -> dict:
        return {
            'id': str(self.id) if self.id else None,
            'name': self.name,
            'group': self.group,
            'text': self.text,
            'link': self.link,
            'release_date': self.release_date.isoformat() if self.release_date else None,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }

    @classmethod
    def from_dict(cls, d: dict) -> 'Song':
        """Rebuild from to_dict() output. Raises KeyError/ValueError/TypeError on bad input."""
        return cls(
            id=uuid.UUID(d['id']) if d.get('id') else None,
            name=d['name'],
            group=d['group'],
            text=d.get('text') or "",
            link=d.get('link') or "",
            release_date=date.fromisoformat(d['release_date']) if d.get('release_date') else None,
            created_at=datetime.fromisoformat(d['created_at']) if d.get('created_at') else None,
            updated_at=datetime.fromisoformat(d['updated_at']) if d.get('updated_at') else None,
        )

