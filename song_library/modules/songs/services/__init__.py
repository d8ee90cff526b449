"""Song services module."""

from .song_service import SongService, merge_songs, split_verses

__all__ = [
    'SongService',
    'merge_songs',
    'split_verses',
]
