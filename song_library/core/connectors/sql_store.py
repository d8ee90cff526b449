"""
SongStore - SQLAlchemy (asyncio) implementation of the durable song store.

Production runs on PostgreSQL via asyncpg; tests run on SQLite via aiosqlite.
Only duplicate-key and missing-row conditions become domain errors; every
other database failure is raised as BackendError tagged with the operation.
"""

import uuid
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import (
    Column,
    Date,
    DateTime,
    Index,
    MetaData,
    String,
    Table,
    Text,
    UniqueConstraint,
    Uuid,
    and_,
    delete,
    insert,
    select,
    text,
    update,
)
from sqlalchemy.engine import Row
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from song_library.common.logging import get_logger
from ..errors import AlreadyExistsError, BackendError, NotFoundError
from ..lookup import validate_lookup_key
from ..models import Song, SongInfo

logger = get_logger(__name__)

UNIQUE_VIOLATION = "23505"

metadata = MetaData()

songs_table = Table(
    "songs",
    metadata,
    Column("id", Uuid, primary_key=True),
    Column("name", String(255), nullable=False),
    Column("group_name", String(255), nullable=False),
    Column("text", Text, nullable=False, default=""),
    Column("link", Text, nullable=False, default=""),
    Column("release_date", Date, nullable=True),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
    UniqueConstraint("name", "group_name", name="uq_songs_name_group"),
    Index("idx_songs_name", "name"),
    Index("idx_songs_group_name", "group_name"),
    Index("idx_songs_release_date", "release_date"),
)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc_aware(value: Optional[datetime]) -> Optional[datetime]:
    """SQLite hands back naive datetimes; treat them as UTC."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _is_unique_violation(exc: IntegrityError) -> bool:
    orig = exc.orig
    for candidate in (orig, getattr(orig, "__cause__", None)):
        code = getattr(candidate, "sqlstate", None) or getattr(candidate, "pgcode", None)
        if code == UNIQUE_VIOLATION:
            return True
    return "UNIQUE constraint failed" in str(orig)


def _like_pattern(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _row_to_song(row: Row) -> Song:
    return Song(
        id=row.id,
        name=row.name,
        group=row.group_name,
        text=row.text or "",
        link=row.link or "",
        release_date=row.release_date,
        created_at=ensure_utc_aware(row.created_at),
        updated_at=ensure_utc_aware(row.updated_at),
    )


class SongStore:
    """
    Relational song store.

    Implements SongStoreProtocol. Holds only the engine; every call opens its
    own connection, so one instance is shared by all request tasks.
    """

    def __init__(self, engine: AsyncEngine):
        self.engine = engine

    @classmethod
    def from_url(cls, url: str, **engine_kwargs) -> 'SongStore':
        """Build a store with its own engine (postgresql+asyncpg://..., sqlite+aiosqlite://...)."""
        return cls(create_async_engine(url, **engine_kwargs))

    @staticmethod
    def _key_clause(key: SongInfo, op: str):
        validate_lookup_key(key, op)
        if key.by_id:
            return songs_table.c.id == key.id
        return and_(songs_table.c.name == key.name, songs_table.c.group_name == key.group)

    async def create_schema(self) -> None:
        """Create the songs table and its indexes if missing."""
        op = "SongStore.create_schema"
        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(metadata.create_all)
        except (SQLAlchemyError, OSError) as e:
            raise BackendError(f"{op}: {e}", data={"op": op}, cause=e) from e
        logger.info("songs schema ready")

    async def create(self, song: Song) -> None:
        op = "SongStore.create"

        song_id = uuid.uuid4()
        now = utcnow()

        stmt = insert(songs_table).values(
            id=song_id,
            name=song.name,
            group_name=song.group,
            text=song.text,
            link=song.link,
            release_date=song.release_date,
            created_at=now,
            updated_at=now,
        )
        try:
            async with self.engine.begin() as conn:
                await conn.execute(stmt)
        except IntegrityError as e:
            if _is_unique_violation(e):
                raise AlreadyExistsError(
                    f"{op}: song already exists",
                    data={"op": op, "song_name": song.name, "group_name": song.group},
                    cause=e,
                ) from e
            raise BackendError(f"{op}: {e}", data={"op": op}, cause=e) from e
        except (SQLAlchemyError, OSError) as e:
            raise BackendError(f"{op}: {e}", data={"op": op}, cause=e) from e

        song.id = song_id
        song.created_at = now
        song.updated_at = now

    async def read(self, key: SongInfo) -> Song:
        op = "SongStore.read"
        stmt = select(songs_table).where(self._key_clause(key, op))
        try:
            async with self.engine.connect() as conn:
                row = (await conn.execute(stmt)).first()
        except (SQLAlchemyError, OSError) as e:
            raise BackendError(f"{op}: {e}", data={"op": op, **key.describe()}, cause=e) from e

        if row is None:
            raise NotFoundError(f"{op}: song not found", data={"op": op, **key.describe()})
        return _row_to_song(row)

    async def update(self, key: SongInfo, new_song: Song) -> None:
        op = "SongStore.update"
        where = self._key_clause(key, op)

        new_song.updated_at = utcnow()

        stmt = update(songs_table).where(where).values(
            name=new_song.name,
            group_name=new_song.group,
            text=new_song.text,
            link=new_song.link,
            release_date=new_song.release_date,
            updated_at=new_song.updated_at,
        )
        try:
            async with self.engine.begin() as conn:
                result = await conn.execute(stmt)
        except IntegrityError as e:
            if _is_unique_violation(e):
                raise AlreadyExistsError(
                    f"{op}: another song already has this name and group",
                    data={"op": op, "song_name": new_song.name, "group_name": new_song.group},
                    cause=e,
                ) from e
            raise BackendError(f"{op}: {e}", data={"op": op}, cause=e) from e
        except (SQLAlchemyError, OSError) as e:
            raise BackendError(f"{op}: {e}", data={"op": op, **key.describe()}, cause=e) from e

        if result.rowcount == 0:
            raise NotFoundError(f"{op}: song not found", data={"op": op, **key.describe()})

    async def delete(self, key: SongInfo) -> None:
        op = "SongStore.delete"
        stmt = delete(songs_table).where(self._key_clause(key, op))
        try:
            async with self.engine.begin() as conn:
                result = await conn.execute(stmt)
        except (SQLAlchemyError, OSError) as e:
            raise BackendError(f"{op}: {e}", data={"op": op, **key.describe()}, cause=e) from e

        if result.rowcount == 0:
            raise NotFoundError(f"{op}: song not found", data={"op": op, **key.describe()})

    async def read_all_with_filter(self, filter_song: Song, limit: int, offset: int) -> List[Song]:
        """
        List songs matching the non-empty fields of ``filter_song``.

        name/group match as case-insensitive substrings, release_date exactly.
        Newest ``created_at`` first. ``limit == 0`` skips pagination.
        """
        op = "SongStore.read_all_with_filter"

        conditions = []
        if filter_song.name:
            conditions.append(songs_table.c.name.ilike(_like_pattern(filter_song.name), escape="\\"))
        if filter_song.group:
            conditions.append(songs_table.c.group_name.ilike(_like_pattern(filter_song.group), escape="\\"))
        if filter_song.release_date is not None:
            conditions.append(songs_table.c.release_date == filter_song.release_date)

        stmt = select(songs_table)
        if conditions:
            stmt = stmt.where(and_(*conditions))
        stmt = stmt.order_by(songs_table.c.created_at.desc())
        if limit:
            stmt = stmt.limit(limit).offset(offset)

        try:
            async with self.engine.connect() as conn:
                rows = (await conn.execute(stmt)).all()
        except (SQLAlchemyError, OSError) as e:
            raise BackendError(f"{op}: {e}", data={"op": op}, cause=e) from e

        return [_row_to_song(row) for row in rows]

    async def ping(self) -> bool:
        """Check database connection."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except (SQLAlchemyError, OSError) as e:
            logger.warning(f"Database ping failed: {e}")
            return False

    async def close(self) -> None:
        await self.engine.dispose()
