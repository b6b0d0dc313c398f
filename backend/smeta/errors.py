# backend/smeta/errors.py
"""Domain errors and their translation into JSON error responses.

Repositories and services raise these; the handlers registered in
``register_exception_handlers`` turn them into ``{"error", "message"}`` bodies.
"""
from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .utils.logging import api_logger


class SmetaError(Exception):
    """Base class for errors that map onto a specific HTTP status"""
    status_code = HTTPStatus.INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @property
    def error(self) -> str:
        return HTTPStatus(self.status_code).phrase


class ValidationError(SmetaError):
    status_code = HTTPStatus.BAD_REQUEST


class ForbiddenError(SmetaError):
    status_code = HTTPStatus.FORBIDDEN


class NotFoundError(SmetaError):
    status_code = HTTPStatus.NOT_FOUND


class ConflictError(SmetaError):
    status_code = HTTPStatus.CONFLICT


class PayloadTooLargeError(SmetaError):
    status_code = HTTPStatus.REQUEST_ENTITY_TOO_LARGE

    @property
    def error(self) -> str:
        return "Payload Too Large"


class UnsupportedMediaTypeError(SmetaError):
    status_code = HTTPStatus.UNSUPPORTED_MEDIA_TYPE


class InternalServerError(SmetaError):
    """Wraps an unexpected failure; the cause is only exposed in development"""
    status_code = HTTPStatus.INTERNAL_SERVER_ERROR


def error_body(error: str, message: str, detail: str | None = None) -> dict:
    body = {"error": error, "message": message}
    if detail is not None:
        body["detail"] = detail
    return body


def _describe_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"

    first = errors[0]
    # Drop the leading "body"/"path"/"query" marker from the location
    location = [str(part) for part in first.get("loc", ())[1:]]
    field = ".".join(location) or "request"
    return f"Invalid value for '{field}': {first.get('msg', 'invalid')}"


def register_exception_handlers(app: FastAPI) -> None:
    """Install the JSON error handlers on an application"""

    @app.exception_handler(SmetaError)
    async def handle_smeta_error(request: Request, exc: SmetaError):
        detail = None
        if isinstance(exc, InternalServerError) and app.state.settings.is_development:
            cause = exc.__cause__
            detail = str(cause) if cause is not None else None

        return JSONResponse(
            status_code=int(exc.status_code),
            content=error_body(exc.error, exc.message, detail)
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        message = _describe_validation_error(exc)
        api_logger.warning("Request validation failed", extra={
            "path": request.url.path,
            "validation_message": message
        })
        return JSONResponse(
            status_code=HTTPStatus.BAD_REQUEST,
            content=error_body(HTTPStatus.BAD_REQUEST.phrase, message)
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        api_logger.error("Unhandled error", extra={
            "path": request.url.path,
            "error": str(exc)
        }, exc_info=exc)
        detail = str(exc) if app.state.settings.is_development else None
        return JSONResponse(
            status_code=HTTPStatus.INTERNAL_SERVER_ERROR,
            content=error_body(HTTPStatus.INTERNAL_SERVER_ERROR.phrase, "Internal server error", detail)
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        status = HTTPStatus(exc.status_code)
        message = exc.detail if isinstance(exc.detail, str) else status.phrase
        if status == HTTPStatus.NOT_FOUND and message == status.phrase:
            message = "Route not found"
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(status.phrase, message),
            headers=getattr(exc, "headers", None)
        )
