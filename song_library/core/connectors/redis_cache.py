"""
RedisSongCache - Redis-based song cache for production.

Key layout (all under a configurable prefix):
    <prefix>song:<id>                  JSON song payload, no expiry
    <prefix>alias:<name>\\x1f<group>    id of the song with that name and group

The payload lives only under the id. The alias is a pointer so name+group
lookups can be served from the cache too; it is checked against the payload
on every read, so a rename leaves at worst a dangling alias, never a wrong hit.
"""

import json
import uuid
from typing import Optional

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from song_library.common.logging import get_logger
from ..errors import BackendError, DataIntegrityError, InvalidKeyError, NotFoundError
from ..lookup import validate_lookup_key
from ..models import Song, SongInfo
from ..monitoring import record_cache_error, record_cache_write

logger = get_logger(__name__)

ALIAS_SEPARATOR = "\x1f"


class RedisSongCache:
    """
    Redis-based song cache.

    Implements SongCacheProtocol for production use.
    Requires Redis server.
    """

    def __init__(self, client: aioredis.Redis, prefix: str = "songlib:"):
        """
        Initialize Redis cache.

        Args:
            client: redis.asyncio client created with decode_responses=True
            prefix: Key prefix for namespacing
        """
        self.client = client
        self.prefix = prefix

    @classmethod
    def from_url(cls, url: str, prefix: str = "songlib:") -> 'RedisSongCache':
        """Create cache with its own connection pool (redis://host:port/db)."""
        client = aioredis.from_url(url, decode_responses=True)
        logger.info("Redis song cache initialized", data={"prefix": prefix})
        return cls(client, prefix=prefix)

    def _song_key(self, song_id: uuid.UUID) -> str:
        return f"{self.prefix}song:{song_id}"

    def _alias_key(self, name: str, group: str) -> str:
        return f"{self.prefix}alias:{name}{ALIAS_SEPARATOR}{group}"

    async def set(self, song: Song) -> None:
        op = "RedisSongCache.set"
        if song.id is None:
            raise InvalidKeyError(f"{op}: song has no id", data={"op": op, "song_name": song.name})

        try:
            payload = json.dumps(song.to_dict())
        except (TypeError, ValueError) as e:
            record_cache_error("set")
            raise BackendError(f"{op}: could not serialize song: {e}", data={"op": op}, cause=e) from e

        try:
            async with self.client.pipeline(transaction=True) as pipe:
                pipe.set(self._song_key(song.id), payload)
                pipe.set(self._alias_key(song.name, song.group), str(song.id))
                await pipe.execute()
        except (RedisError, OSError) as e:
            record_cache_error("set")
            raise BackendError(f"{op}: could not store song: {e}", data={"op": op, "song_id": str(song.id)}, cause=e) from e
        record_cache_write("set")

    async def _resolve_id(self, key: SongInfo, op: str) -> Optional[str]:
        if key.by_id:
            return str(key.id)
        return await self.client.get(self._alias_key(key.name, key.group))

    async def get(self, key: SongInfo) -> Song:
        op = "RedisSongCache.get"
        validate_lookup_key(key, op)

        try:
            song_id = await self._resolve_id(key, op)
            raw = await self.client.get(self._song_key(song_id)) if song_id else None
        except (RedisError, OSError) as e:
            record_cache_error("get")
            raise BackendError(f"{op}: could not read song: {e}", data={"op": op, **key.describe()}, cause=e) from e

        if raw is None:
            raise NotFoundError(f"{op}: song not found in cache", data={"op": op, **key.describe()})

        try:
            song = Song.from_dict(json.loads(raw))
        except (ValueError, KeyError, TypeError) as e:
            record_cache_error("get")
            raise DataIntegrityError(
                f"{op}: cached payload is not a valid song",
                data={"op": op, "cache_key": self._song_key(song_id)},
                cause=e,
            ) from e

        if not key.by_id and (song.name != key.name or song.group != key.group):
            raise NotFoundError(f"{op}: stale alias", data={"op": op, **key.describe()})
        return song

    async def invalidate(self, key: SongInfo) -> None:
        op = "RedisSongCache.invalidate"
        validate_lookup_key(key, op)

        try:
            song_id = await self._resolve_id(key, op)
            keys = []
            if song_id:
                keys.append(self._song_key(song_id))
                raw = await self.client.get(self._song_key(song_id))
                if raw is not None:
                    try:
                        cached = json.loads(raw)
                        keys.append(self._alias_key(cached["name"], cached["group"]))
                    except (ValueError, KeyError, TypeError):
                        logger.warning("dropping undecodable cache entry", data={"op": op, "song_id": song_id})
            if not key.by_id:
                keys.append(self._alias_key(key.name, key.group))
            if keys:
                await self.client.delete(*keys)
        except (RedisError, OSError) as e:
            record_cache_error("invalidate")
            raise BackendError(f"{op}: could not delete song: {e}", data={"op": op, **key.describe()}, cause=e) from e
        record_cache_write("invalidate")

    async def clear(self) -> None:
        """Delete every key under the prefix."""
        keys = [k async for k in self.client.scan_iter(match=f"{self.prefix}*")]
        if keys:
            await self.client.delete(*keys)

    async def ping(self) -> bool:
        """Check Redis connection."""
        try:
            return bool(await self.client.ping())
        except (RedisError, OSError):
            return False

    async def close(self) -> None:
        await self.client.aclose()
