"""
Domain errors and their HTTP mapping.

Services raise these; the handlers registered by register_exception_handlers()
turn them into {"detail": ..., "error": ...} JSON bodies so every failure
reaches the client as a short message plus a category.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from placement_portal.core.rate_limit import API_LIMIT_MESSAGE, AUTH_LIMIT_MESSAGE

logger = logging.getLogger(__name__)


class PlacementError(Exception):
    """Base class for errors that map to a user-facing message."""

    status_code = status.HTTP_400_BAD_REQUEST
    category = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(PlacementError):
    status_code = status.HTTP_400_BAD_REQUEST
    category = "validation"


class AuthenticationError(PlacementError):
    status_code = status.HTTP_401_UNAUTHORIZED
    category = "unauthenticated"


class ForbiddenError(PlacementError):
    status_code = status.HTTP_403_FORBIDDEN
    category = "forbidden"


class EligibilityError(PlacementError):
    status_code = status.HTTP_403_FORBIDDEN
    category = "eligibility"


class NotFoundError(PlacementError):
    status_code = status.HTTP_404_NOT_FOUND
    category = "not_found"


class ConflictError(PlacementError):
    status_code = status.HTTP_409_CONFLICT
    category = "conflict"


def error_body(message: str, category: str) -> dict:
    return {"detail": message, "error": category}


def _describe_validation_error(exc: RequestValidationError) -> str:
    """Name the first offending field, e.g. "cgpa: Input should be ..."."""
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    loc = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
    field = ".".join(loc)
    msg = first.get("msg", "Invalid value")
    return f"{field}: {msg}" if field else msg


def register_exception_handlers(app: FastAPI, expose_internal_errors: bool = True) -> None:
    """Install the handlers that translate errors into JSON responses."""

    @app.exception_handler(PlacementError)
    async def placement_error_handler(request: Request, exc: PlacementError):
        headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthenticationError) else None
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(exc.message, exc.category),
            headers=headers,
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        # unknown routes, wrong methods
        category = "not_found" if exc.status_code == status.HTTP_404_NOT_FOUND else "error"
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(str(exc.detail), category),
            headers=getattr(exc, "headers", None),
        )

    # sync: SlowAPIMiddleware calls this directly without awaiting
    @app.exception_handler(RateLimitExceeded)
    def rate_limit_handler(request: Request, exc: RateLimitExceeded):
        auth = request.url.path.startswith("/api/auth")
        logger.warning("Rate limit hit on %s from %s", request.url.path, request.client.host if request.client else "-")
        return JSONResponse(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            content=error_body(AUTH_LIMIT_MESSAGE if auth else API_LIMIT_MESSAGE, "rate_limited"),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=422,
            content=error_body(_describe_validation_error(exc), "validation"),
        )

    async def internal_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        message = str(exc) if expose_internal_errors and str(exc) else "Internal server error"
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_body(message, "internal"),
        )

    app.add_exception_handler(PyMongoError, internal_error_handler)
    app.add_exception_handler(Exception, internal_error_handler)
