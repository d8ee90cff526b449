"""Song API schemas."""

from .song import (
    AddSongRequest,
    UpdateSongRequest,
    SongResponse,
    PaginatedTextResponse,
    MessageResponse,
    RecoveryResponse,
    ErrorResponse,
)

__all__ = [
    'AddSongRequest',
    'UpdateSongRequest',
    'SongResponse',
    'PaginatedTextResponse',
    'MessageResponse',
    'RecoveryResponse',
    'ErrorResponse',
]
