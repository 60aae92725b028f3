"""Custom exceptions for the FeedRank engine."""

from typing import Any, Dict, Optional


class FeedRankException(Exception):
    """Base exception for the FeedRank engine."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Initialize FeedRankException.

        Args:
            message: Human-readable error message.
            status_code: HTTP status code.
            error_code: Machine-readable error code.
            details: Additional error details.
        """
        self.message = message
        self.status_code = status_code
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)


class InvalidUserIdError(FeedRankException):
    """Raised when a malformed user identifier is supplied."""

    def __init__(
        self,
        message: str = "Invalid user ID provided",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Initialize InvalidUserIdError."""
        super().__init__(
            message=message,
            status_code=422,
            error_code="INVALID_USER_ID",
            details=details,
        )


class ContentNotFoundError(FeedRankException):
    """Raised when a content id is absent from the current snapshot."""

    def __init__(
        self,
        message: str = "Content not found",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Initialize ContentNotFoundError."""
        super().__init__(
            message=message,
            status_code=404,
            error_code="CONTENT_NOT_FOUND",
            details=details,
        )


class InsufficientDataError(FeedRankException):
    """Raised when there is not enough data for a meaningful result.

    Callers treat this as an empty result rather than something to retry.
    """

    def __init__(
        self,
        message: str = "Insufficient data for recommendations",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Initialize InsufficientDataError."""
        super().__init__(
            message=message,
            status_code=200,
            error_code="INSUFFICIENT_DATA",
            details=details,
        )


class CalculationFailedError(FeedRankException):
    """Raised when aggregation fails, e.g. the corpus fetch broke mid-cycle."""

    def __init__(
        self,
        message: str = "Failed to calculate recommendations",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Initialize CalculationFailedError."""
        super().__init__(
            message=message,
            status_code=503,
            error_code="CALCULATION_FAILED",
            details=details,
        )


class UnknownEngineError(FeedRankException):
    """Catch-all for unexpected engine failures."""

    def __init__(
        self,
        message: str = "An unknown error occurred",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Initialize UnknownEngineError."""
        super().__init__(
            message=message,
            status_code=500,
            error_code="UNKNOWN",
            details=details,
        )


class ValidationError(FeedRankException):
    """Raised when validation fails."""

    def __init__(
        self,
        message: str = "Validation failed",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Initialize ValidationError."""
        super().__init__(
            message=message,
            status_code=422,
            error_code="VALIDATION_ERROR",
            details=details,
        )
