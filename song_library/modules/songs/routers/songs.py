"""
Songs router - HTTP routes for the song library.

Domain errors propagate to the handlers registered in song_library.api.errors,
which map them to status codes.
"""

import uuid
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, status

from song_library.common.logging import get_logger
from song_library.core.models import Song, SongInfo
from ..schemas import (
    AddSongRequest,
    MessageResponse,
    PaginatedTextResponse,
    RecoveryResponse,
    SongResponse,
    UpdateSongRequest,
)
from ..services import SongService

logger = get_logger(__name__)

router = APIRouter(prefix="/songs", tags=["songs"])
admin_router = APIRouter(prefix="/admin", tags=["admin"])


def get_song_service(request: Request) -> SongService:
    """SongService wired by the application lifespan."""
    return request.app.state.service


@router.post("", response_model=SongResponse, status_code=status.HTTP_201_CREATED)
async def add_song(body: AddSongRequest, service: SongService = Depends(get_song_service)):
    """Add a song; text, link and release date come from the metadata service."""
    song = await service.add(SongInfo(name=body.name, group=body.group))
    logger.info("song added", data={"song_id": str(song.id), "song_name": song.name})
    return SongResponse.from_song(song)


@router.get("", response_model=List[SongResponse])
async def list_songs(
    group: str = "",
    song: str = "",
    release_date: Optional[date] = None,
    page: int = Query(1, ge=1),
    page_size: int = Query(0, ge=0),
    service: SongService = Depends(get_song_service),
):
    """
    List songs with optional filters.

    ``group`` and ``song`` match case-insensitive substrings, ``release_date``
    (YYYY-MM-DD) matches exactly. ``page_size`` 0 returns everything.
    """
    filter_song = Song(name=song, group=group, release_date=release_date)
    songs = await service.get_all_with_filter(filter_song, page, page_size)
    return [SongResponse.from_song(s) for s in songs]


@router.get("/lookup", response_model=SongResponse)
async def lookup_song(
    name: str = Query(..., min_length=1),
    group: str = Query(..., min_length=1),
    service: SongService = Depends(get_song_service),
):
    """Get a song by name and group."""
    song = await service.get(SongInfo(name=name, group=group))
    return SongResponse.from_song(song)


@router.get("/{song_id}", response_model=SongResponse)
async def get_song(song_id: uuid.UUID, service: SongService = Depends(get_song_service)):
    song = await service.get(SongInfo(id=song_id))
    return SongResponse.from_song(song)


@router.put("/{song_id}", response_model=SongResponse)
async def update_song(
    song_id: uuid.UUID,
    body: UpdateSongRequest,
    service: SongService = Depends(get_song_service),
):
    """Partially update a song; empty fields keep their stored values."""
    song = await service.update(SongInfo(id=song_id), body.to_song())
    logger.info("song updated", data={"song_id": str(song_id)})
    return SongResponse.from_song(song)


@router.delete("/{song_id}", response_model=MessageResponse)
async def delete_song(song_id: uuid.UUID, service: SongService = Depends(get_song_service)):
    await service.delete(SongInfo(id=song_id))
    logger.info("song deleted", data={"song_id": str(song_id)})
    return MessageResponse(message="song deleted successfully")


@router.get("/{song_id}/text", response_model=PaginatedTextResponse)
async def get_song_text(song_id: uuid.UUID, service: SongService = Depends(get_song_service)):
    """Song lyrics split into verses."""
    verses = await service.get_paginated_text(SongInfo(id=song_id))
    return PaginatedTextResponse(text=verses)


@admin_router.post("/cache/recovery", response_model=RecoveryResponse)
async def recover_cache(service: SongService = Depends(get_song_service)):
    """Rebuild the cache from the database."""
    recovered = await service.recover_cache()
    return RecoveryResponse(recovered=recovered)
