"""
Custom error classes with structured logging and error propagation.

All errors include correlation context and structured data for observability.
Kinds are distinguished by class (``isinstance``), never by message text.
"""

import logging
from typing import Optional, Dict, Any

from song_library.common.logging import get_logger
from song_library.common.logging.correlation import get_correlation_id

logger = get_logger(__name__)


class SongLibraryError(Exception):
    """
    Base error class for all application errors.

    Automatically logs errors with correlation context when raised.
    Subclasses lower ``log_level`` for expected outcomes such as a miss.
    """

    log_level: int = logging.ERROR

    def __init__(
        self,
        message: str,
        data: Optional[Dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ):
        """
        Initialize error with structured context.

        Args:
            message: Human-readable error message
            data: Structured data for observability (``op`` tags the operation)
            cause: Original exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.data = data or {}
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

        self.correlation_id = get_correlation_id()

        self._log_error()

    @property
    def op(self) -> Optional[str]:
        """Operation tag the error was raised from."""
        return self.data.get("op")

    def _log_error(self):
        """Log error with structured data."""
        log_data = {
            "error_type": self.__class__.__name__,
            "correlation_id": self.correlation_id,
            **self.data,
        }

        if self.cause:
            log_data["cause"] = repr(self.cause)

        logger.log(self.log_level, self.message, extra={"structured_data": log_data})

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for serialization."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "data": self.data,
            "correlation_id": self.correlation_id,
            "cause": str(self.cause) if self.cause else None,
        }


# Domain errors
class NotFoundError(SongLibraryError):
    """No song matches the lookup key (store row or cache entry)."""
    log_level = logging.DEBUG


class AlreadyExistsError(SongLibraryError):
    """Create hit a uniqueness constraint."""
    log_level = logging.WARNING


class InvalidKeyError(SongLibraryError):
    """Lookup key has neither an id nor both name and group."""
    log_level = logging.WARNING


class EmptyTextError(SongLibraryError):
    """Song has no lyrics to paginate."""
    log_level = logging.WARNING


# Backend errors
class DataIntegrityError(SongLibraryError):
    """Cached payload could not be deserialized into a song."""
    pass


class BackendError(SongLibraryError):
    """Opaque connectivity or driver failure from the store or the cache."""
    pass


# External service errors
class UpstreamError(SongLibraryError):
    """Metadata lookup failed."""
    pass


class UpstreamBadRequestError(UpstreamError):
    """Metadata lookup rejected the request (HTTP 400), e.g. song unknown upstream."""
    log_level = logging.WARNING


# Configuration errors
class ConfigurationError(SongLibraryError):
    """Error in configuration."""
    pass
