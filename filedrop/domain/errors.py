"""
Error Handling Module

Defines domain exceptions and error categories for the application.
Domain exceptions are pure and have no external dependencies.
Application exceptions carry user-facing messages for HTTP responses.
"""

import logging
from enum import Enum
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class ErrorCategory(Enum):
    """Error category enumeration for structured error handling."""

    FILE_NOT_FOUND = "file_not_found"
    STORAGE_FAILURE = "storage_failure"
    SYSTEM_ERROR = "system_error"


# User-friendly error messages with actionable guidance
ERROR_MESSAGES: Dict[ErrorCategory, Dict[str, str]] = {
    ErrorCategory.FILE_NOT_FOUND: {
        "title": "File Not Found",
        "message": "The requested file could not be found or has expired.",
        "action": "Ask the sender to upload the file again.",
    },
    ErrorCategory.STORAGE_FAILURE: {
        "title": "Storage Error",
        "message": "The file could not be read from or written to storage.",
        "action": "Please try again later.",
    },
    ErrorCategory.SYSTEM_ERROR: {
        "title": "System Error",
        "message": "An unexpected error occurred while processing your request.",
        "action": "Please try again later. If the problem persists, contact support.",
    },
}


# ============================================================================
# Domain Exceptions (Pure - No External Dependencies)
# ============================================================================

class DomainError(Exception):
    """
    Base exception for all domain errors.

    Domain exceptions can optionally wrap original errors for context.
    """

    def __init__(self, message: str, original_error: Exception = None):
        """
        Initialize domain error.

        Args:
            message: Error message
            original_error: Optional original exception that caused this error
        """
        super().__init__(message)
        self.original_error = original_error


class StorageFailureError(DomainError):
    """
    Raised when reading, writing or deleting a stored object fails.

    Wraps the underlying OSError or backend client error.
    """
    pass


class RecordNotFoundError(DomainError):
    """Raised when a file id has no corresponding stored object."""
    pass


class InvalidFileIdError(DomainError):
    """Raised when a file id is not a safe storage key."""
    pass


class UploadParseError(DomainError):
    """Raised when an incoming multipart upload cannot be parsed."""
    pass


# ============================================================================
# Application Layer Exceptions
# ============================================================================

class ApplicationError(Exception):
    """
    Base application error with category and user-friendly messaging.

    Bridges domain errors with user-facing error messages and HTTP responses.
    """

    def __init__(
        self,
        category: ErrorCategory,
        technical_message: Optional[str] = None,
    ):
        """
        Initialize application error.

        Args:
            category: Error category
            technical_message: Technical error details, logged but never returned
        """
        self.category = category
        self.technical_message = technical_message or ""

        error_info = ERROR_MESSAGES.get(
            category, ERROR_MESSAGES[ErrorCategory.SYSTEM_ERROR]
        )
        self.title = error_info["title"]
        self.message = error_info["message"]
        self.action = error_info["action"]

        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert error to dictionary for API response.

        Returns:
            Dictionary with error information
        """
        return {
            "error": self.category.value,
            "title": self.title,
            "message": self.message,
            "action": self.action,
        }


def create_error_response(
    category: ErrorCategory,
    technical_message: Optional[str] = None,
    status_code: int = 400,
) -> tuple[Dict[str, Any], int]:
    """
    Create a structured error response for API endpoints.

    Args:
        category: Error category
        technical_message: Technical error details for the log
        status_code: HTTP status code

    Returns:
        Tuple of (error_dict, status_code)
    """
    error = ApplicationError(category, technical_message)
    if error.technical_message:
        logger.info(f"{category.value} ({status_code}): {error.technical_message}")
    return error.to_dict(), status_code
