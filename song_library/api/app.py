"""
FastAPI application factory.

The lifespan wires store, cache and metadata client into a SongRepository and
SongService kept on ``app.state``; routes reach the service through
``get_song_service``. Components passed to create_app() are used as given
and left open on shutdown; components built here from settings are closed.
"""

import platform
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from song_library import __version__
from song_library.common.logging import CorrelationMiddleware, get_logger
from song_library.core.config import (
    Settings,
    create_metadata_lookup,
    create_song_cache,
    create_song_store,
    get_settings,
)
from song_library.core.interfaces import MetadataLookupProtocol, SongCacheProtocol, SongStoreProtocol
from song_library.core.monitoring import set_app_info
from song_library.core.repository import SongRepository
from song_library.modules.songs.routers import admin_router, router as songs_router
from song_library.modules.songs.services import SongService
from .errors import register_exception_handlers
from .health import router as health_router

logger = get_logger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[SongStoreProtocol] = None,
    cache: Optional[SongCacheProtocol] = None,
    metadata_lookup: Optional[MetadataLookupProtocol] = None,
    service: Optional[SongService] = None,
) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Settings (default: get_settings())
        store: Song store (default: create_song_store())
        cache: Song cache (default: create_song_cache())
        metadata_lookup: Metadata client (default: create_metadata_lookup())
        service: Ready-made service; skips all wiring when given
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.settings = settings
        set_app_info(__version__, settings.env.value, platform.python_version())

        if service is not None:
            app.state.service = service
            yield
            return

        owned = []
        try:
            app.state.store = store
            if app.state.store is None:
                app.state.store = create_song_store(settings=settings)
                owned.append(app.state.store)

            app.state.cache = cache
            if app.state.cache is None:
                app.state.cache = create_song_cache(settings=settings)
                owned.append(app.state.cache)

            app.state.metadata_lookup = metadata_lookup
            if app.state.metadata_lookup is None:
                app.state.metadata_lookup = create_metadata_lookup(settings=settings)
                owned.append(app.state.metadata_lookup)

            create_schema = getattr(app.state.store, "create_schema", None)
            if create_schema is not None:
                await create_schema()

            repository = SongRepository(app.state.store, app.state.cache)
            app.state.service = SongService(repository, app.state.metadata_lookup)

            if settings.cache_recovery_on_start:
                recovered = await app.state.service.recover_cache()
                logger.info("cache recovered on startup", data={"songs": recovered})

            logger.info("song library started", data={"cache_backend": settings.cache_backend.value})
            yield
        finally:
            for component in reversed(owned):
                await component.close()
            logger.info("song library stopped")

    app = FastAPI(title="Song Library", version=__version__, lifespan=lifespan)
    app.add_middleware(CorrelationMiddleware)
    register_exception_handlers(app)

    app.include_router(songs_router)
    app.include_router(admin_router)
    app.include_router(health_router)

    return app
