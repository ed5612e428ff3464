"""Custom exception hierarchy for the IP matcher.

This module provides a standardized exception hierarchy for consistent
error handling across the matcher core and its front ends.
"""

from __future__ import annotations

from typing import Any


class IpMatcherError(Exception):
    """Base exception for all IP matcher errors.

    All custom exceptions should inherit from this class for
    consistent error handling and logging.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error message
            details: Optional additional error details
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for API responses.

        Returns:
            Dictionary representation of the error
        """
        result: dict[str, Any] = {"error": self.message}
        if self.details:
            result["details"] = self.details
        return result


class ConfigurationError(IpMatcherError):
    """Raised when configuration is missing or invalid.

    Covers unreadable or malformed seed files.
    """

    pass


class ValidationError(IpMatcherError):
    """Raised when input validation fails.

    This error indicates caller-provided data is invalid.
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the validation error.

        Args:
            message: Human-readable error message
            field: Optional field name that failed validation
            details: Optional additional error details
        """
        super().__init__(message, details)
        self.field = field

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        result = super().to_dict()
        if self.field:
            result["field"] = self.field
        return result


class InvalidAddressError(ValidationError):
    """Raised when a value is not a well-formed IPv4 dotted-quad string.

    Empty strings, non-strings, malformed text and out-of-range octets all
    end up here. Netmask arguments use the same error.
    """

    def __init__(self, value: Any, field: str = "address") -> None:
        """Initialize the invalid address error.

        Args:
            value: The rejected input
            field: Argument name the value was passed as
        """
        super().__init__(f"Invalid IPv4 address for {field}: {value!r}", field=field)
        self.value = value
