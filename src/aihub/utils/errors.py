"""Error handling utilities for consistent error responses."""

import logging
from enum import Enum
from typing import Any

from pydantic import BaseModel

from aihub.ai.errors import (
    ConfigurationError,
    FailoverExhaustedError,
    ProviderConstructionError,
    VendorAPIError,
)

logger = logging.getLogger(__name__)


class ErrorCode(str, Enum):
    """Standard error codes for API responses."""

    # Authentication errors
    AUTH_REQUIRED = "AUTH_REQUIRED"
    AUTH_INVALID = "AUTH_INVALID"

    # Request errors
    INVALID_REQUEST = "INVALID_REQUEST"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"

    # Provider errors
    RATE_LIMITED = "RATE_LIMITED"
    PROVIDER_ERROR = "PROVIDER_ERROR"

    # Server errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    TIMEOUT = "TIMEOUT"


class ErrorResponse(BaseModel):
    """HTTP error response model."""

    detail: str
    code: ErrorCode | None = None
    request_id: str | None = None


# User-friendly error messages by error code
USER_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.AUTH_REQUIRED: "Authentication required",
    ErrorCode.AUTH_INVALID: "Invalid authentication credentials",
    ErrorCode.INVALID_REQUEST: "Invalid request format",
    ErrorCode.VALIDATION_ERROR: "Request validation failed",
    ErrorCode.NOT_FOUND: "The requested resource was not found",
    ErrorCode.RATE_LIMITED: (
        "The service is experiencing high demand. Please try again in a moment."
    ),
    ErrorCode.PROVIDER_ERROR: "The AI provider returned an error. Please try again.",
    ErrorCode.INTERNAL_ERROR: "An unexpected error occurred. Our team has been notified.",
    ErrorCode.SERVICE_UNAVAILABLE: (
        "The service is temporarily unavailable. Please try again later."
    ),
    ErrorCode.TIMEOUT: "The request timed out. Please try again.",
}

# HTTP status returned for each error code
STATUS_CODES: dict[ErrorCode, int] = {
    ErrorCode.AUTH_REQUIRED: 401,
    ErrorCode.AUTH_INVALID: 401,
    ErrorCode.INVALID_REQUEST: 400,
    ErrorCode.VALIDATION_ERROR: 422,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.RATE_LIMITED: 429,
    ErrorCode.PROVIDER_ERROR: 502,
    ErrorCode.INTERNAL_ERROR: 500,
    ErrorCode.SERVICE_UNAVAILABLE: 503,
    ErrorCode.TIMEOUT: 504,
}

# Default message for unknown errors
DEFAULT_USER_MESSAGE = "An unexpected error occurred"

# Maximum length for error details
MAX_ERROR_LENGTH = 2000


def get_user_message(code: ErrorCode | None, default: str | None = None) -> str:
    """Get user-appropriate error message for an error code.

    Args:
        code: The error code.
        default: Default message if code not found.

    Returns:
        User-friendly error message.
    """
    if code is None:
        return default or DEFAULT_USER_MESSAGE

    return USER_MESSAGES.get(code, default or DEFAULT_USER_MESSAGE)


def status_for_code(code: ErrorCode) -> int:
    """Get the HTTP status code for an error code."""
    return STATUS_CODES.get(code, 500)


def truncate_error(error: str, max_length: int = MAX_ERROR_LENGTH) -> str:
    """Truncate error message if too long.

    Args:
        error: The error message.
        max_length: Maximum allowed length.

    Returns:
        Truncated error message.
    """
    if len(error) <= max_length:
        return error

    return error[: max_length - 3] + "..."


def create_error_response(
    code: ErrorCode,
    detail: str | None = None,
    request_id: str | None = None,
) -> ErrorResponse:
    """Create a standardized error response.

    Args:
        code: The error code.
        detail: Optional custom detail message.
        request_id: Optional request ID.

    Returns:
        ErrorResponse model.
    """
    message = detail if detail else get_user_message(code)
    return ErrorResponse(
        detail=truncate_error(message),
        code=code,
        request_id=request_id,
    )


def classify_exception(exc: Exception) -> ErrorCode:
    """Classify an exception to an error code.

    Args:
        exc: The exception to classify.

    Returns:
        Appropriate error code.
    """
    # Import here to avoid circular imports
    import httpx
    from pydantic import ValidationError

    # AI layer errors
    if isinstance(exc, ConfigurationError):
        return ErrorCode.SERVICE_UNAVAILABLE

    if isinstance(exc, ProviderConstructionError):
        return ErrorCode.INVALID_REQUEST

    if isinstance(exc, VendorAPIError):
        if exc.status_code == 429:
            return ErrorCode.RATE_LIMITED
        return ErrorCode.PROVIDER_ERROR

    if isinstance(exc, FailoverExhaustedError):
        return ErrorCode.PROVIDER_ERROR

    # Validation errors
    if isinstance(exc, ValidationError):
        return ErrorCode.VALIDATION_ERROR

    # HTTP errors from upstream
    if isinstance(exc, httpx.HTTPStatusError):
        status_code = exc.response.status_code
        if status_code == 401:
            return ErrorCode.AUTH_INVALID
        elif status_code == 429:
            return ErrorCode.RATE_LIMITED
        elif status_code == 404:
            return ErrorCode.NOT_FOUND
        elif status_code >= 500:
            return ErrorCode.SERVICE_UNAVAILABLE
        else:
            return ErrorCode.PROVIDER_ERROR

    # Timeout errors
    if isinstance(exc, (httpx.TimeoutException, TimeoutError)):
        return ErrorCode.TIMEOUT

    # Connection errors
    if isinstance(exc, (httpx.ConnectError, ConnectionError)):
        return ErrorCode.SERVICE_UNAVAILABLE

    # Default to internal error
    return ErrorCode.INTERNAL_ERROR


def log_error(
    exc: Exception,
    code: ErrorCode | None = None,
    request_id: str | None = None,
    **context: Any,
) -> None:
    """Log an error with context.

    Logs the full exception for debugging while creating
    user-appropriate error messages.

    Args:
        exc: The exception that occurred.
        code: Optional pre-classified error code.
        request_id: Optional request ID.
        **context: Additional context to include in log.
    """
    if code is None:
        code = classify_exception(exc)

    log_extra = {
        "error_code": code.value,
        "error_type": type(exc).__name__,
        "request_id": request_id,
        **context,
    }

    # Error level for user-facing errors, exception level for internal errors
    if code == ErrorCode.INTERNAL_ERROR:
        logger.exception("Internal error occurred", extra=log_extra)
    else:
        logger.error(f"Request error: {exc}", extra=log_extra)
