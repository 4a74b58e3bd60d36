"""Error handling middleware for the Game Saver API.

Provides unified error handling for all GameSaverError subclasses
using their built-in error_type, status_code and details attributes.
"""

from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status
from starlette.exceptions import HTTPException as StarletteHTTPException
from structlog import get_logger

from game_saver.exceptions import ErrorType, GameSaverError


logger = get_logger(__name__)


def _get_client_ip(request: Request) -> str:
    """Get client IP from request."""
    return request.client.host if request.client else "unknown"


def _build_error_response(
    status_code: int,
    error_type: str,
    message: str,
    details: dict[str, Any] | None = None,
) -> JSONResponse:
    """Build standardized error response."""
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": {"type": error_type, "message": message, "details": details or {}},
        },
    )


def setup_error_handlers(app: FastAPI) -> None:
    """Setup error handlers for the FastAPI application."""

    @app.exception_handler(GameSaverError)
    async def game_saver_error_handler(
        request: Request, exc: GameSaverError
    ) -> JSONResponse:
        """Handle all GameSaverError subclasses using their built-in attributes."""
        error_type = (
            exc.error_type.value
            if hasattr(exc.error_type, "value")
            else str(exc.error_type)
        )

        log_kwargs: dict[str, Any] = {
            "error_type": error_type,
            "error_message": str(exc),
            "status_code": exc.status_code,
            "request_method": request.method,
            "request_url": str(request.url.path),
        }
        if exc.status_code in (401, 403):
            log_kwargs["client_ip"] = _get_client_ip(request)

        if exc.status_code >= 500:
            logger.error(type(exc).__name__, **log_kwargs)
        else:
            logger.warning(type(exc).__name__, **log_kwargs)

        return _build_error_response(
            exc.status_code, error_type, exc.message, exc.details
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Report malformed request bodies as invalid arguments (400)."""
        errors = [
            {"loc": list(error.get("loc", ())), "msg": error.get("msg", "")}
            for error in exc.errors()
        ]
        logger.warning(
            "request_validation_failed",
            request_method=request.method,
            request_url=str(request.url.path),
            errors=errors,
        )
        return _build_error_response(
            status.HTTP_400_BAD_REQUEST,
            ErrorType.INVALID_ARGUMENT.value,
            "Invalid request body",
            {"errors": errors},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        """Handle FastAPI/Starlette HTTP exceptions (unknown routes, bad methods)."""
        log_kwargs = {
            "error_type": f"http_{exc.status_code}",
            "error_message": exc.detail,
            "status_code": exc.status_code,
            "request_method": request.method,
            "request_url": str(request.url.path),
        }
        if exc.status_code == 404:
            logger.debug("HTTP 404", **log_kwargs)
        else:
            logger.warning("HTTP exception", **log_kwargs)

        error_type = (
            ErrorType.NOT_FOUND.value if exc.status_code == 404 else "http_error"
        )
        return _build_error_response(exc.status_code, error_type, str(exc.detail))

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Last resort for unexpected exceptions."""
        logger.error(
            "unhandled_exception",
            error_type=type(exc).__name__,
            error_message=str(exc),
            request_method=request.method,
            request_url=str(request.url.path),
            exc_info=True,
        )
        return _build_error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            ErrorType.INTERNAL_SERVER.value,
            "Internal server error",
        )
