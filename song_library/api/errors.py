"""
Exception handlers - map domain errors to HTTP responses.

NotFoundError -> 404, AlreadyExistsError -> 409, InvalidKeyError and request
validation -> 400, any other SongLibraryError -> 500.
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from song_library.common.logging import get_correlation_id, get_logger
from song_library.core.errors import (
    AlreadyExistsError,
    InvalidKeyError,
    NotFoundError,
    SongLibraryError,
)

logger = get_logger(__name__)

STATUS_BY_ERROR = (
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (AlreadyExistsError, status.HTTP_409_CONFLICT),
    (InvalidKeyError, status.HTTP_400_BAD_REQUEST),
)


def status_for(exc: SongLibraryError) -> int:
    for error_cls, code in STATUS_BY_ERROR:
        if isinstance(exc, error_cls):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def song_library_error_handler(request: Request, exc: SongLibraryError) -> JSONResponse:
    code = status_for(exc)
    if code >= 500:
        logger.error(
            "request failed",
            data={"path": request.url.path, "error_type": type(exc).__name__, "op": exc.op},
        )
        # internals stay in the logs
        body = {"error": type(exc).__name__, "message": "internal error"}
    else:
        body = {"error": type(exc).__name__, "message": exc.message}
    body["correlation_id"] = get_correlation_id() or exc.correlation_id
    return JSONResponse(status_code=code, content=body)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info("invalid request", data={"path": request.url.path, "errors": len(exc.errors())})
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": "InvalidRequest",
            "message": "invalid request",
            "details": [
                {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
                for err in exc.errors()
            ],
            "correlation_id": get_correlation_id(),
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(SongLibraryError, song_library_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
