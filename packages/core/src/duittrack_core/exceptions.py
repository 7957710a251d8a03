"""Custom exceptions for DuitTrack core.

This module provides a small hierarchy of exception classes for consistent
error handling between the period engine and the service layer that calls
it. All exceptions inherit from DuitTrackError, making it easy to catch all
application-specific errors.

The period engine itself rarely raises: invalid reset-date changes are
reported by ``validate_change`` as a message, and degenerate numbers are
handled by zero-guards. Exceptions are raised at the seams where a caller
asks for a hard failure (``ensure_valid_change``, ``parse_period_id``) or
where an external store fails.

Example:
    try:
        service.change_reset_config(user_id, new_config)
    except ValidationError as e:
        show_form_error(e.field, e.message)
    except StoreError as e:
        if e.recoverable:
            # Recomputing the plan is idempotent, so a retry is safe
            service.change_reset_config(user_id, new_config)
        else:
            raise
"""

from typing import Any, Optional


class DuitTrackError(Exception):
    """Base exception for all DuitTrack errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context.
        recoverable: Whether the error is potentially recoverable.

    Example:
        >>> raise DuitTrackError("Something went wrong", details={"code": 500})
        DuitTrackError: Something went wrong
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        """Initialize DuitTrackError.

        Args:
            message: Human-readable error description.
            details: Optional dictionary with additional context about the error.
            recoverable: Whether the error is potentially recoverable through
                retry or user correction. Defaults to False.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.recoverable = recoverable

    def __str__(self) -> str:
        """Return string representation of the error."""
        return self.message

    def __repr__(self) -> str:
        """Return detailed representation of the error."""
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"details={self.details!r}, "
            f"recoverable={self.recoverable!r})"
        )


class ValidationError(DuitTrackError):
    """Error raised when user-provided configuration or identifiers are invalid.

    Attributes:
        field: The field that failed validation.
        value: The invalid value.
        constraint: The validation constraint that was violated.

    Example:
        >>> raise ValidationError(
        ...     "Reset date harus antara 1-31.",
        ...     field="reset_day",
        ...     value=42,
        ...     constraint="1 <= reset_day <= 31",
        ... )
        ValidationError: Reset date harus antara 1-31.
    """

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        constraint: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = True,
    ) -> None:
        """Initialize ValidationError.

        Args:
            message: Human-readable error description.
            field: The name of the field that failed validation.
            value: The invalid value.
            constraint: Description of the validation rule violated.
            details: Optional dictionary with additional context.
            recoverable: Whether the error can be fixed by user correction.
                Defaults to True.
        """
        super().__init__(message, details=details, recoverable=recoverable)
        self.field = field
        self.value = value
        self.constraint = constraint

        if field:
            self.details["field"] = field
        if value is not None:
            self.details["value"] = value
        if constraint:
            self.details["constraint"] = constraint


class StoreError(DuitTrackError):
    """Error raised when the budget/expense store fails.

    The period engine only produces values; reading and writing them is the
    store's job. Failures there are wrapped in this exception so callers get
    one error type regardless of the persistence backend.

    Attributes:
        operation: The store operation that failed (e.g. "save_periods").
        period_id: The period being read or written, if any.
    """

    def __init__(
        self,
        message: str,
        *,
        operation: Optional[str] = None,
        period_id: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = True,
    ) -> None:
        """Initialize StoreError.

        Args:
            message: Human-readable error description.
            operation: Name of the store operation being attempted.
            period_id: Identifier of the affected period.
            details: Optional dictionary with additional context.
            recoverable: Whether the operation can be retried. Defaults to True
                since store failures are usually transient network errors.
        """
        super().__init__(message, details=details, recoverable=recoverable)
        self.operation = operation
        self.period_id = period_id

        if operation:
            self.details["operation"] = operation
        if period_id:
            self.details["period_id"] = period_id


__all__ = [
    "DuitTrackError",
    "ValidationError",
    "StoreError",
]
