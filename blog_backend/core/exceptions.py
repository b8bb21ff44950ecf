"""Application error taxonomy and the FastAPI handlers that render it."""

import logging
from typing import Any
from uuid import uuid4

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base exception for errors rendered as a structured JSON body."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    title: str = "Server Error"
    default_message: str = "An unexpected error occurred."

    def __init__(self, message: str | None = None, headers: dict[str, str] | None = None):
        self.message = message or self.default_message
        self.headers = headers
        super().__init__(self.message)

    def body(self) -> dict[str, Any]:
        """JSON body returned to the caller."""
        return {"error": self.title, "message": self.message}


class ValidationError(AppError):
    """Raised when input is malformed or violates a field rule.

    Response Body:
        {
            "error": "Validation Failed",
            "message": "The given data was invalid.",
            "errors": {"email": ["The email has already been taken."]}
        }
    """

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    title = "Validation Failed"
    default_message = "The given data was invalid."

    def __init__(self, errors: dict[str, list[str]], message: str | None = None):
        super().__init__(message)
        self.errors = errors

    def body(self) -> dict[str, Any]:
        body = super().body()
        body["errors"] = self.errors
        return body


class ConflictError(ValidationError):
    """Raised when a unique field already holds the submitted value."""

    def __init__(self, field: str, message: str):
        super().__init__({field: [message]})


class AuthenticationError(AppError):
    """Raised when the bearer token is missing, invalid, expired or revoked."""

    status_code = status.HTTP_401_UNAUTHORIZED
    title = "Unauthenticated"
    default_message = "Not authenticated"

    def __init__(self, message: str | None = None):
        super().__init__(message, headers={"WWW-Authenticate": "Bearer"})


class AuthorizationError(AppError):
    """Raised when an authenticated actor is denied by the policy."""

    status_code = status.HTTP_403_FORBIDDEN
    title = "Unauthorized"
    default_message = "This action is unauthorized."


class NotFoundError(AppError):
    """Raised when a resource id does not resolve."""

    status_code = status.HTTP_404_NOT_FOUND
    title = "Not Found"
    default_message = "Resource not found"


class InternalError(AppError):
    """Raised when a collaborator fails in a way the caller cannot fix."""


def _field_name(loc: tuple[Any, ...]) -> str:
    # ("body", "title") -> "title", ("query", "from") -> "from"
    parts = [str(part) for part in loc[1:]] or [str(part) for part in loc]
    return ".".join(parts)


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if isinstance(exc, InternalError):
        return await unhandled_error_handler(request, exc)
    return JSONResponse(status_code=exc.status_code, content=exc.body(), headers=exc.headers)


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors: dict[str, list[str]] = {}
    for error in exc.errors():
        errors.setdefault(_field_name(tuple(error.get("loc", ()))), []).append(error.get("msg", "Invalid value"))
    return await app_error_handler(request, ValidationError(errors))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    correlation_id = uuid4().hex
    logger.exception(
        f"Unhandled error {correlation_id} on {request.method} {request.url.path}",
        exc_info=exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": InternalError.title,
            "message": InternalError.default_message,
            "correlation_id": correlation_id,
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the error handlers to the application."""
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)


__all__ = [
    "AppError",
    "ValidationError",
    "ConflictError",
    "AuthenticationError",
    "AuthorizationError",
    "NotFoundError",
    "InternalError",
    "register_exception_handlers",
]
