"""Translate domain errors into ``{"error": message}`` responses."""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..core.exceptions import NoteStreamError
from ..core.logging import get_logger
from ..core.schemas.common import ErrorResponse, format_validation_errors

logger = get_logger("errors")

# OpenAPI docs for the error bodies the handlers below produce
ERROR_RESPONSES = {code: {"model": ErrorResponse} for code in (400, 401, 403, 404, 500)}


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def domain_error_handler(request: Request, exc: NoteStreamError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(
            f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}",
            exc_info=exc.__cause__,
        )
    else:
        logger.debug(
            f"{type(exc).__name__} on {request.method} {request.url.path}",
            extra={"status_code": exc.status_code},
        )
    return error_response(exc.status_code, exc.message)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return error_response(status.HTTP_400_BAD_REQUEST, format_validation_errors(exc.errors()))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


def register_exception_handlers(app: FastAPI) -> None:
    """Install the handlers shared by every REST router."""
    app.add_exception_handler(NoteStreamError, domain_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
