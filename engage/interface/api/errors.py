"""Exception handlers mapping errors to HTTP responses.

Every error body has the same shape: ``{"error": <category>, "detail": <message>}``.
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import logfire
import pydantic
from sqlalchemy.exc import InterfaceError, OperationalError
from starlette.exceptions import HTTPException as StarletteHTTPException

from engage.domain.error import (
    ConflictError,
    DomainError,
    ForbiddenError,
    NotFoundError,
    TransientError,
    ValidationError,
)

# Checked in order; subclasses must come before their bases
_DOMAIN_STATUS: list[tuple[type[DomainError], int, str]] = [
    (ValidationError, status.HTTP_400_BAD_REQUEST, "validation"),
    (NotFoundError, status.HTTP_404_NOT_FOUND, "not_found"),
    (ForbiddenError, status.HTTP_403_FORBIDDEN, "forbidden"),
    (ConflictError, status.HTTP_409_CONFLICT, "conflict"),
    (TransientError, status.HTTP_503_SERVICE_UNAVAILABLE, "transient"),
]

_HTTP_CATEGORIES = {
    status.HTTP_401_UNAUTHORIZED: "unauthenticated",
    status.HTTP_403_FORBIDDEN: "forbidden",
    status.HTTP_404_NOT_FOUND: "not_found",
    status.HTTP_405_METHOD_NOT_ALLOWED: "method_not_allowed",
}

TRANSIENT_DETAIL = "Service temporarily unavailable, please retry"


def error_response(status_code: int, error: str, detail) -> JSONResponse:
    """Build an error response body."""
    return JSONResponse(
        status_code=status_code, content={"error": error, "detail": detail}
    )


async def handle_domain_error(request: Request, exc: DomainError) -> JSONResponse:
    """Map a domain error to its category."""
    for error_type, status_code, category in _DOMAIN_STATUS:
        if isinstance(exc, error_type):
            if category == "transient":
                logfire.warn(
                    "Transient failure", path=request.url.path, error=str(exc)
                )
                return error_response(status_code, category, TRANSIENT_DETAIL)
            logfire.info(
                "Request rejected",
                path=request.url.path,
                category=category,
                detail=str(exc),
            )
            return error_response(status_code, category, str(exc))

    logfire.error("Unmapped domain error", path=request.url.path, error=str(exc))
    return error_response(status.HTTP_400_BAD_REQUEST, "validation", str(exc))


async def handle_storage_error(request: Request, exc: Exception) -> JSONResponse:
    """Storage or network outage: the caller may retry."""
    logfire.error(
        "Storage unavailable",
        path=request.url.path,
        error=str(exc),
        error_type=type(exc).__name__,
    )
    return error_response(
        status.HTTP_503_SERVICE_UNAVAILABLE, "transient", TRANSIENT_DETAIL
    )


async def handle_request_validation(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Malformed path, query or body."""
    return error_response(
        status.HTTP_400_BAD_REQUEST, "validation", jsonable_errors(exc.errors())
    )


async def handle_model_validation(
    request: Request, exc: pydantic.ValidationError
) -> JSONResponse:
    """A model rejected a value past the request boundary."""
    return error_response(
        status.HTTP_400_BAD_REQUEST,
        "validation",
        jsonable_errors(exc.errors(include_url=False)),
    )


async def handle_http_exception(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Re-shape framework HTTP errors (401, 404 on unknown routes, ...)."""
    category = _HTTP_CATEGORIES.get(exc.status_code, "http")
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": category, "detail": exc.detail},
        headers=getattr(exc, "headers", None),
    )


def jsonable_errors(errors) -> list[dict]:
    """Keep the JSON-safe parts of pydantic error entries."""
    return [
        {
            "loc": [str(part) for part in error.get("loc", ())],
            "msg": error.get("msg", ""),
            "type": error.get("type", ""),
        }
        for error in errors
    ]


def register_error_handlers(app: FastAPI) -> None:
    """Attach all exception handlers to the application."""
    app.add_exception_handler(DomainError, handle_domain_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation)
    app.add_exception_handler(pydantic.ValidationError, handle_model_validation)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    for storage_error in (OperationalError, InterfaceError, TimeoutError, OSError):
        app.add_exception_handler(storage_error, handle_storage_error)
