"""
Error types for scopectx.

Provides:
- Error categories and severities
- A base exception carrying user-facing detail
- Exceptions for ownership, read-only and released-context violations
- Log formatting helper

Setup failure is deliberately NOT an exception: an owner whose setup
cannot acquire its resource returns None and the invocation produces
no result.
"""

from enum import Enum
from typing import Optional


class ErrorSeverity(Enum):
    """Severity levels for errors."""
    LOW = "low"           # Caller can recover locally
    MEDIUM = "medium"     # Misuse of an owner or context
    HIGH = "high"         # Broken configuration
    CRITICAL = "critical" # Resource may have leaked


class ErrorCategory(Enum):
    """Categories of errors raised around a scoped call."""
    CLEANUP = "cleanup"
    OPERATION = "operation"
    OWNERSHIP = "ownership"
    CONFIGURATION = "configuration"
    UNKNOWN = "unknown"


class ScopeError(Exception):
    """Base exception for scopectx errors."""

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.UNKNOWN,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        user_message: Optional[str] = None,
        suggested_action: Optional[str] = None
    ):
        super().__init__(message)
        self.category = category
        self.severity = severity
        self.user_message = user_message or message
        self.suggested_action = suggested_action


class OwnerConsumedError(ScopeError):
    """An owner was invoked after it had already been used."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault(
            "suggested_action",
            "Create a new owner for every with_ref/with_mut_ref call."
        )
        super().__init__(
            message,
            category=ErrorCategory.OWNERSHIP,
            severity=kwargs.pop("severity", ErrorSeverity.MEDIUM),
            **kwargs
        )


class ReadOnlyContextError(ScopeError, AttributeError):
    """A with_ref operation tried to mutate its context."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("suggested_action", "Use with_mut_ref to modify the context.")
        super().__init__(
            message,
            category=ErrorCategory.OPERATION,
            severity=kwargs.pop("severity", ErrorSeverity.LOW),
            **kwargs
        )


class ContextReleasedError(ScopeError):
    """A context leaked out of its operation was used after cleanup."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault(
            "suggested_action",
            "Return plain values from the operation instead of the context."
        )
        super().__init__(
            message,
            category=ErrorCategory.CLEANUP,
            severity=kwargs.pop("severity", ErrorSeverity.MEDIUM),
            **kwargs
        )


class ConfigurationError(ScopeError):
    """Configuration-related errors."""

    def __init__(self, message: str, **kwargs):
        super().__init__(
            message,
            category=ErrorCategory.CONFIGURATION,
            severity=kwargs.pop("severity", ErrorSeverity.HIGH),
            **kwargs
        )


def format_error_for_log(error: BaseException) -> str:
    """
    Format any exception for logging.

    scopectx errors carry their category and severity; anything else is
    reported under the UNKNOWN category.
    """
    if isinstance(error, ScopeError):
        category, severity = error.category, error.severity
    else:
        category, severity = ErrorCategory.UNKNOWN, ErrorSeverity.MEDIUM

    return (
        f"[{severity.value.upper()}] {category.value}: "
        f"{type(error).__name__}: {error}"
    )
