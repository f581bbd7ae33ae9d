"""
Custom exceptions for the quote of the day backend.

Services raise these internally and convert them into structured results at
their public boundary; the FastAPI handlers in ``error_handlers`` catch any
that escape.
"""

from typing import Optional, Dict, Any
from enum import Enum


class ErrorCode(str, Enum):
    """Standardized error codes for the application."""

    UNAUTHORIZED = "Unauthorized"
    NOT_FOUND = "NotFound"
    RATE_LIMIT_EXCEEDED = "RateLimitExceeded"
    GENERATION_FAILED = "GenerationFailed"
    NO_CONTENT_AVAILABLE = "NoContentAvailable"

    # HTTP layer
    VALIDATION_ERROR = "ValidationError"
    INTERNAL_SERVER_ERROR = "InternalServerError"


class QuoteServiceException(Exception):
    """Base exception for the quote backend."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.status_code = status_code


class UnauthorizedError(QuoteServiceException):
    """Raised when a session token is missing, wrong or expired."""

    def __init__(self, reason: str = "invalid_token"):
        super().__init__(
            message="Session is not valid",
            error_code=ErrorCode.UNAUTHORIZED,
            details={"reason": reason},
            status_code=401
        )


class QuoteNotFoundError(QuoteServiceException):
    """Raised when a quote id does not resolve."""

    def __init__(self, quote_id: int):
        super().__init__(
            message=f"Quote {quote_id} not found",
            error_code=ErrorCode.NOT_FOUND,
            details={"quote_id": quote_id},
            status_code=404
        )


class RateLimitExceededError(QuoteServiceException):
    """Raised when the daily AI search quota is used up."""

    def __init__(self, used: int, maximum: int):
        super().__init__(
            message=f"AI search limit of {maximum} per day reached",
            error_code=ErrorCode.RATE_LIMIT_EXCEEDED,
            details={"used": used, "max": maximum},
            status_code=429
        )


class GenerationFailedError(QuoteServiceException):
    """Raised when the generation provider fails or returns unusable output."""

    def __init__(self, message: str = "Quote generation failed", details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            error_code=ErrorCode.GENERATION_FAILED,
            details=details,
            status_code=502
        )


class NoContentAvailableError(QuoteServiceException):
    """Raised when the corpus holds nothing eligible for selection."""

    def __init__(self, language: str):
        super().__init__(
            message=f"No quotes available for language '{language}'",
            error_code=ErrorCode.NO_CONTENT_AVAILABLE,
            details={"language": language},
            status_code=404
        )


class EmailAlreadyRegisteredError(QuoteServiceException):
    """Raised when registering an email that already has an account."""

    def __init__(self, email: str):
        super().__init__(
            message="Email already registered",
            error_code=ErrorCode.VALIDATION_ERROR,
            details={"email": email},
            status_code=409
        )
