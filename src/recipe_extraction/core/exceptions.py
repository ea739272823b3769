"""Custom exceptions and exception handlers.

This module provides structured exception handling with:
- The base application exception for HTTP-layer errors
- Handlers mapping pipeline errors to distinct, user-actionable responses
- Structured error response models
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import FastAPI, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from recipe_extraction.llm.exceptions import (
    LLMConfigurationError,
    LLMError,
    LLMRequestError,
)
from recipe_extraction.observability.logging import get_logger
from recipe_extraction.parsing.exceptions import (
    EmptyResponseError,
    MalformedResponseError,
    RecipeParsingError,
)


if TYPE_CHECKING:
    from fastapi import Request


logger = get_logger(__name__)

# Starlette renamed the 422 constant; the number is stable
HTTP_422_UNPROCESSABLE = 422


class ErrorDetail(BaseModel):
    """Structured error detail for validation errors."""

    code: str
    message: str
    field: str | None = None


class ErrorResponse(BaseModel):
    """Structured error response."""

    error: str
    message: str
    details: list[ErrorDetail] | None = None
    request_id: str | None = None


class AppException(Exception):
    """Base application exception.

    All HTTP-layer exceptions should inherit from this class
    for consistent error handling.
    """

    def __init__(
        self,
        status_code: int,
        error: str,
        message: str,
        details: list[ErrorDetail] | None = None,
    ) -> None:
        self.status_code = status_code
        self.error = error
        self.message = message
        self.details = details
        super().__init__(message)


class ServiceUnavailableException(AppException):
    """Service unavailable exception."""

    def __init__(self, message: str = "Service temporarily unavailable") -> None:
        super().__init__(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            error="SERVICE_UNAVAILABLE",
            message=message,
        )


def pipeline_error_status(exc: LLMError | RecipeParsingError) -> tuple[int, str]:
    """Map a pipeline error to its HTTP status and error code."""
    if isinstance(exc, LLMConfigurationError):
        return status.HTTP_503_SERVICE_UNAVAILABLE, "PROVIDER_NOT_CONFIGURED"
    if isinstance(exc, LLMRequestError):
        return status.HTTP_502_BAD_GATEWAY, "EXTRACTION_SERVICE_UNREACHABLE"
    if isinstance(exc, MalformedResponseError):
        return HTTP_422_UNPROCESSABLE, "UNREADABLE_PAGE"
    if isinstance(exc, EmptyResponseError):
        return HTTP_422_UNPROCESSABLE, "NO_RECIPE_FOUND"
    return status.HTTP_500_INTERNAL_SERVER_ERROR, "EXTRACTION_FAILED"


def _get_request_id(request: Request) -> str | None:
    """Extract request ID from request state."""
    return getattr(request.state, "request_id", None)


def setup_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers with the FastAPI application."""

    @app.exception_handler(AppException)
    async def app_exception_handler(
        request: Request,
        exc: AppException,
    ) -> ORJSONResponse:
        """Handle custom application exceptions."""
        return ORJSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(
                error=exc.error,
                message=exc.message,
                details=exc.details,
                request_id=_get_request_id(request),
            ).model_dump(),
        )

    @app.exception_handler(LLMError)
    @app.exception_handler(RecipeParsingError)
    async def pipeline_exception_handler(
        request: Request,
        exc: LLMError | RecipeParsingError,
    ) -> ORJSONResponse:
        """Handle extraction pipeline errors with their user message."""
        status_code, error = pipeline_error_status(exc)
        details = None
        if isinstance(exc, LLMRequestError) and exc.status_code is not None:
            details = [
                ErrorDetail(
                    code="UPSTREAM_STATUS",
                    message=f"Provider answered HTTP {exc.status_code}",
                )
            ]
        return ORJSONResponse(
            status_code=status_code,
            content=ErrorResponse(
                error=error,
                message=exc.user_message,
                details=details,
                request_id=_get_request_id(request),
            ).model_dump(),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request,
        exc: StarletteHTTPException,
    ) -> ORJSONResponse:
        """Handle Starlette HTTP exceptions."""
        return ORJSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(
                error="HTTP_ERROR",
                message=str(exc.detail),
                request_id=_get_request_id(request),
            ).model_dump(),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> ORJSONResponse:
        """Handle Pydantic validation errors."""
        details = [
            ErrorDetail(
                code="VALIDATION_ERROR",
                message=error["msg"],
                field=".".join(str(loc) for loc in error["loc"]),
            )
            for error in exc.errors()
        ]
        return ORJSONResponse(
            status_code=HTTP_422_UNPROCESSABLE,
            content=ErrorResponse(
                error="VALIDATION_ERROR",
                message="Request validation failed",
                details=details,
                request_id=_get_request_id(request),
            ).model_dump(),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request,
        exc: Exception,
    ) -> ORJSONResponse:
        """Handle unexpected exceptions."""
        logger.opt(exception=exc).error("Unhandled exception")

        return ORJSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ErrorResponse(
                error="INTERNAL_SERVER_ERROR",
                message="An unexpected error occurred",
                request_id=_get_request_id(request),
            ).model_dump(),
        )
