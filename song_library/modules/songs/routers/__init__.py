"""Song API routers."""

from .songs import router, admin_router, get_song_service

__all__ = [
    'router',
    'admin_router',
    'get_song_service',
]
