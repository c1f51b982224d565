"""
FastAPI exception handlers that map service-level exceptions to HTTP responses.

How to use:
    - Call `register_exception_handlers(app)` from the app factory (see `resourcekit.main`).
    - The service layer raises resourcekit.exceptions.* (NotFoundError, InvalidArgumentError, DuplicateError, ...)
    - These handlers produce stable JSON payloads (via .to_payload()) and HTTP codes (via .http_status()).

Starlette resolves handlers along the exception's MRO, so InvalidFieldError gets its
own handler even though it is also an InvalidArgumentError.

| Exception                    | Status | Log level |
| ---------------------------- | ------ | --------- |
| NotFoundError                | 404    | INFO      |
| InvalidFieldError            | 422    | INFO      |
| InvalidArgumentError         | 400    | INFO      |
| DuplicateError               | 409    | INFO      |
| ResourceCreationFailedError  | 500    | ERROR     |
| RepositoryError              | 500    | WARNING   |
"""

from fastapi import Request
from fastapi.responses import JSONResponse
import logging
from resourcekit.exceptions.base import (
    ResourceError,
    RepositoryError,
    DuplicateError,
    InvalidArgumentError,
    InvalidFieldError,
    NotFoundError,
    ResourceCreationFailedError,
)

logger = logging.getLogger(__name__)


def _respond(exc: ResourceError) -> JSONResponse:
    return JSONResponse(status_code=exc.http_status(), content=exc.to_payload())


async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    logger.info("NotFoundError for %s %s: fields=%s", request.method, request.url.path, exc.fields)
    return _respond(exc)


async def invalid_field_handler(request: Request, exc: InvalidFieldError) -> JSONResponse:
    """
    422 Unprocessable Entity for unknown fields (criteria keys, sort property).
    Payload: {"detail": "...", "code": "invalid_field", "fields": [...]}
    """
    logger.info("InvalidFieldError for %s %s: fields=%s", request.method, request.url.path, exc.fields)
    return _respond(exc)


async def invalid_argument_handler(request: Request, exc: InvalidArgumentError) -> JSONResponse:
    """
    400 Bad Request for violated preconditions.
    Validation failures also carry "violations": [...] in the payload.
    """
    logger.info("InvalidArgumentError for %s %s: %s", request.method, request.url.path, exc.message)
    return _respond(exc)


async def duplicate_error_handler(request: Request, exc: DuplicateError) -> JSONResponse:
    """
    409 Conflict for duplicates.
    Payload: exc.to_payload() -> {"detail": "...", "code": "duplicate", "fields": [...]}
    """
    logger.info("DuplicateError for %s %s: fields=%s", request.method, request.url.path, exc.fields)
    return _respond(exc)


async def resource_creation_failed_handler(request: Request, exc: ResourceCreationFailedError) -> JSONResponse:
    logger.error("ResourceCreationFailedError for %s %s: %s", request.method, request.url.path, exc.message)
    return _respond(exc)


async def repository_error_handler(request: Request, exc: RepositoryError) -> JSONResponse:
    """
    Fallback for general repository errors -> 500 (or code-defined status).
    The message is already sanitized; DB internals never reach the client.
    """
    logger.warning("RepositoryError for %s %s: %s", request.method, request.url.path, str(exc))
    return _respond(exc)


async def resource_error_handler(request: Request, exc: ResourceError) -> JSONResponse:
    logger.warning("ResourceError for %s %s: %s", request.method, request.url.path, str(exc))
    return _respond(exc)


def register_exception_handlers(app) -> None:
    app.add_exception_handler(NotFoundError, not_found_handler)
    app.add_exception_handler(InvalidFieldError, invalid_field_handler)
    app.add_exception_handler(InvalidArgumentError, invalid_argument_handler)
    app.add_exception_handler(DuplicateError, duplicate_error_handler)
    app.add_exception_handler(ResourceCreationFailedError, resource_creation_failed_handler)
    app.add_exception_handler(RepositoryError, repository_error_handler)
    app.add_exception_handler(ResourceError, resource_error_handler)
