"""Custom exception hierarchy for easyquery.

All public errors inherit from EasyQueryError so callers can catch the base
class for any easyquery-specific failure.  Every error carries a
machine-readable ``code`` and a ``details`` dict.
"""
from __future__ import annotations

from typing import Any


class EasyQueryError(Exception):
    """Base exception for all easyquery errors.

    Args:
        message: Human-readable description.
        code: Machine-readable error code (e.g. ``INVALID_IDENTIFIER``).
        details: Extra context about the failing input.
    """

    def __init__(
        self,
        message: str,
        code: str = "EASYQUERY_ERROR",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.details: dict[str, Any] = details or {}

    def to_error_response(self) -> dict[str, Any]:
        """Returns a structured error response suitable for API callers."""
        return {
            "error": self.code,
            "message": str(self),
            "details": self.details,
        }


class InvalidIdentifierError(EasyQueryError):
    """Raised when a string is not a safe column or table reference."""

    def __init__(self, identifier: Any) -> None:
        super().__init__(
            f"Invalid identifier: {identifier!r}. Only alphanumeric characters, "
            "underscores, and a single dot (table.column) are allowed.",
            code="INVALID_IDENTIFIER",
            details={"identifier": identifier},
        )


class InvalidArgumentError(EasyQueryError):
    """Raised when a builder method receives a malformed argument."""

    def __init__(
        self,
        message: str,
        code: str = "INVALID_ARGUMENT",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code=code, details=details)


class InvalidConditionError(InvalidArgumentError):
    """Raised when a WHERE condition value cannot be resolved to a Condition.

    Args:
        column: The column the condition was given for, or ``None`` when a
            typed condition is rejected before it is attached to a column.
        message: Human-readable description.
    """

    def __init__(self, column: str | None, message: str) -> None:
        prefix = f"Invalid condition for column '{column}'" if column else "Invalid condition"
        super().__init__(
            f"{prefix}: {message}",
            code="INVALID_CONDITION",
            details={"column": column} if column else {},
        )


class EmptyMutationDataError(EasyQueryError):
    """Raised when an INSERT or UPDATE is built without any column data."""

    def __init__(self, action: str) -> None:
        super().__init__(
            f"{action.capitalize()} data is empty",
            code="EMPTY_MUTATION_DATA",
            details={"action": action},
        )


class UnsupportedActionError(EasyQueryError):
    """Raised when the assembler is asked for an action it does not know."""

    def __init__(self, action: Any) -> None:
        super().__init__(
            f"Unsupported build action: {action}",
            code="UNSUPPORTED_ACTION",
            details={"action": str(action)},
        )
