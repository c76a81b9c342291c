"""
Global exception handlers.

Every failure is rendered as `{"success": false, "error": "..."}`:
- GatewayError -> its own status and message
- RequestValidationError -> 400 with the first underlying cause
- framework HTTPException -> its status; 404 becomes "Endpoint not found"
- anything else -> 500, details logged only
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from gateway.core.errors import GatewayError, UnauthorizedError

logger = logging.getLogger(__name__)


def _failure(status_code: int, message: str, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": message},
        headers=headers,
    )


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""

    @app.exception_handler(GatewayError)
    async def gateway_error_handler(request: Request, exc: GatewayError):
        headers = None
        if isinstance(exc, UnauthorizedError):
            realm = request.app.state.settings.app_name
            headers = {"WWW-Authenticate": f'Basic realm="{realm}"'}
        elif exc.http_status >= 500:
            logger.error(
                "%s on %s %s", type(exc).__name__, request.method, request.url.path,
                extra={"path": request.url.path},
            )
        return _failure(exc.http_status, exc.message, headers)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        logger.warning(
            "Validation error on %s: %s", request.url.path, errors,
            extra={"path": request.url.path},
        )
        return _failure(status.HTTP_400_BAD_REQUEST, describe_validation_errors(errors))

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            return _failure(exc.status_code, "Endpoint not found")
        return _failure(exc.status_code, str(exc.detail), getattr(exc, "headers", None))

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        logger.error(
            "Unhandled exception on %s %s: %s", request.method, request.url.path, exc,
            exc_info=True,
            extra={"path": request.url.path},
        )
        return _failure(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


def describe_validation_errors(errors) -> str:
    """Human-readable summary of the first validation error."""
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request")
    if first.get("type") == "json_invalid":
        return f"Malformed JSON body: {message}"
    return f"{location}: {message}" if location else message
