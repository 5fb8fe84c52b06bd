"""Utility functions for error classification and responses."""

from aihub.utils.errors import (
    ErrorCode,
    ErrorResponse,
    classify_exception,
    create_error_response,
    log_error,
    status_for_code,
)

__all__ = [
    "ErrorCode",
    "ErrorResponse",
    "classify_exception",
    "create_error_response",
    "log_error",
    "status_for_code",
]
