"""
Error Handler Middleware - Global exception handling for the API.

The exception classes in this module are also raised internally by the
services (Gemini, image generation, Supabase persistence).

Catches exceptions and returns consistent error responses.
"""

from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging
import traceback
from datetime import datetime

from app.core.config import get_settings

logger = logging.getLogger(__name__)


class AppException(Exception):
    """Base exception for application errors."""

    def __init__(
        self,
        message: str,
        error_code: str = "INTERNAL_ERROR",
        status_code: int = 500,
        details: dict = None
    ):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class GenerationError(AppException):
    """Raised when a model call fails or returns nothing usable."""

    def __init__(self, message: str, model: str = None):
        super().__init__(
            message=message,
            error_code="GENERATION_ERROR",
            status_code=502,
            details={"model": model} if model else {}
        )


class ImageGenerationError(AppException):
    """Raised when image generation fails."""

    def __init__(self, message: str, model: str = None):
        super().__init__(
            message=message,
            error_code="IMAGE_GENERATION_ERROR",
            status_code=502,
            details={"model": model} if model else {}
        )


class PersistenceError(AppException):
    """Raised when a Supabase read or write fails."""

    def __init__(self, message: str, table: str = None):
        super().__init__(
            message=message,
            error_code="PERSISTENCE_ERROR",
            status_code=500,
            details={"table": table} if table else {}
        )


class ConfigurationError(AppException):
    """Raised when a required setting is missing."""

    def __init__(self, setting: str):
        super().__init__(
            message=f"Missing configuration: {setting}",
            error_code="CONFIGURATION_ERROR",
            status_code=503,
            details={"setting": setting}
        )


def create_error_response(
    message: str,
    error_code: str = "INTERNAL_ERROR",
    status_code: int = 500,
    details: dict = None
) -> JSONResponse:
    """Create a standardized error response."""
    settings = get_settings()

    content = {
        "success": False,
        "error": message,
        "error_code": error_code,
        "timestamp": datetime.utcnow().isoformat()
    }

    # Include details in debug mode
    if details and settings.debug:
        content["details"] = details

    return JSONResponse(
        status_code=status_code,
        content=content
    )


async def app_exception_handler(
    request: Request,
    exc: AppException
) -> JSONResponse:
    """Handle application-specific exceptions."""
    logger.warning(f"{exc.error_code} on {request.url.path}: {exc.message}")
    return create_error_response(
        message=exc.message,
        error_code=exc.error_code,
        status_code=exc.status_code,
        details=exc.details
    )


async def http_exception_handler(
    request: Request,
    exc: StarletteHTTPException
) -> JSONResponse:
    """Handle HTTP exceptions."""
    return create_error_response(
        message=str(exc.detail),
        error_code="HTTP_ERROR",
        status_code=exc.status_code
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """Handle request validation errors."""
    # Format validation errors
    errors = []
    for error in exc.errors():
        loc = " -> ".join(str(l) for l in error["loc"])
        errors.append(f"{loc}: {error['msg']}")

    return create_error_response(
        message="Validation error",
        error_code="VALIDATION_ERROR",
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        details={"errors": errors}
    )


async def generic_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """Handle unexpected exceptions."""
    settings = get_settings()

    traceback_str = "".join(
        traceback.format_exception(type(exc), exc, exc.__traceback__)
    )
    logger.error(f"Unexpected error on {request.url.path}: {traceback_str}")

    details = None
    if settings.debug:
        details = {
            "exception_type": type(exc).__name__,
            "traceback": traceback_str
        }

    return create_error_response(
        message="An unexpected error occurred",
        error_code="INTERNAL_ERROR",
        status_code=500,
        details=details
    )
