"""
InMemorySongCache - In-memory song cache for unit tests and local runs.

Mirrors RedisSongCache semantics: JSON payloads keyed by id plus a
name+group alias, so serialization and integrity errors behave the same.
No persistence - data lost on restart.
"""

import json
from typing import Dict, Tuple

from ..errors import DataIntegrityError, InvalidKeyError, NotFoundError
from ..lookup import validate_lookup_key
from ..models import Song, SongInfo


class InMemorySongCache:
    """
    In-memory song cache.

    Implements SongCacheProtocol. Counts calls so tests can assert which
    path a read took.
    """

    def __init__(self):
        self._store: Dict[str, str] = {}
        self._aliases: Dict[Tuple[str, str], str] = {}
        self.calls: Dict[str, int] = {"get": 0, "set": 0, "invalidate": 0}

    async def set(self, song: Song) -> None:
        self.calls["set"] += 1
        if song.id is None:
            raise InvalidKeyError("InMemorySongCache.set: song has no id", data={"op": "InMemorySongCache.set"})
        self._store[str(song.id)] = json.dumps(song.to_dict())
        self._aliases[(song.name, song.group)] = str(song.id)

    async def get(self, key: SongInfo) -> Song:
        op = "InMemorySongCache.get"
        self.calls["get"] += 1
        validate_lookup_key(key, op)

        song_id = str(key.id) if key.by_id else self._aliases.get((key.name, key.group))
        raw = self._store.get(song_id) if song_id else None
        if raw is None:
            raise NotFoundError(f"{op}: song not found in cache", data={"op": op, **key.describe()})

        try:
            song = Song.from_dict(json.loads(raw))
        except (ValueError, KeyError, TypeError) as e:
            raise DataIntegrityError(f"{op}: cached payload is not a valid song", data={"op": op}, cause=e) from e

        if not key.by_id and (song.name != key.name or song.group != key.group):
            raise NotFoundError(f"{op}: stale alias", data={"op": op, **key.describe()})
        return song

    async def invalidate(self, key: SongInfo) -> None:
        self.calls["invalidate"] += 1
        validate_lookup_key(key, "InMemorySongCache.invalidate")

        song_id = str(key.id) if key.by_id else self._aliases.pop((key.name, key.group), None)
        if song_id is None:
            return
        raw = self._store.pop(song_id, None)
        if raw is not None:
            try:
                cached = json.loads(raw)
                self._aliases.pop((cached["name"], cached["group"]), None)
            except (ValueError, KeyError, TypeError):
                pass

    def put_raw(self, song_id: str, payload: str) -> None:
        """Store an arbitrary payload (tests for corrupt entries)."""
        self._store[song_id] = payload

    def contains(self, song_id) -> bool:
        return str(song_id) in self._store

    def clear(self) -> None:
        """Clear all cache."""
        self._store.clear()
        self._aliases.clear()

    def size(self) -> int:
        """Get number of cached songs."""
        return len(self._store)

    async def ping(self) -> bool:
        return True

    async def close(self) -> None:
        return None
