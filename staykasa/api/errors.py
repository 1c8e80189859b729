"""Exception handlers turning engine errors into JSON responses."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from staykasa.booking.errors import BookingError, PersistenceError

logger = logging.getLogger(__name__)


def _error_response(status_code: int, detail: str, code: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"detail": detail, "code": code})


async def booking_error_handler(request: Request, exc: BookingError) -> JSONResponse:
    """Render a business rejection with its own status code and machine-readable kind."""
    if isinstance(exc, PersistenceError):
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.info("%s %s rejected: %s (%s)", request.method, request.url.path, exc.message, exc.code)
    return _error_response(exc.status_code, exc.message, exc.code)


async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Infrastructure failures get a generic 500, never a business error kind."""
    logger.exception("Database error on %s %s", request.method, request.url.path, exc_info=exc)
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        PersistenceError.default_message,
        PersistenceError.code,
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BookingError, booking_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(SQLAlchemyError, database_error_handler)  # type: ignore[arg-type]
