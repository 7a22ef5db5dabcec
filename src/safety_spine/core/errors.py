"""
Structured error types for safety-spine.

Every failure the scheduler, renderers or delivery layer can produce is a
``SafetySpineError`` subclass carrying a category, a retry hint, structured
context and the chained cause. The ops layer maps these onto result codes and
the API maps those onto RFC 7807 responses, so callers see a category and the
step that failed rather than a stack trace.

Architecture:
    ::

        ┌─────────────────────────────────────────────────────────────────┐
        │                     SafetySpineError                            │
        │  (category, retryable, context, cause)                          │
        ├─────────────────────────────────────────────────────────────────┤
        │  TransientError     ValidationError      ConfigError            │
        │  (retryable=True)   (VALIDATION)         (CONFIG)               │
        │       │                  │                    │                 │
        │  DeliveryError     ScheduleValidation    MissingConfig          │
        │                                          InvalidConfig          │
        │                                                                 │
        │  NotFoundError      OrchestrationError   RenderError            │
        │  (NOT_FOUND)        (ORCHESTRATION)      (RENDER)               │
        │       │                  │                                      │
        │  ScheduleNotFound   ScheduleBusyError    StorageError           │
        │                     ReportExecutionError (STORAGE)              │
        │                     ExecutionTimeoutError                       │
        └─────────────────────────────────────────────────────────────────┘

Usage:
    from safety_spine.core.errors import DeliveryError

    try:
        transport.send(message)
    except smtplib.SMTPException as e:
        raise DeliveryError("SMTP send failed", cause=e)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard error categories for classification and routing."""

    # Infrastructure (usually transient)
    NETWORK = "NETWORK"
    STORAGE = "STORAGE"

    # Input errors (never retryable)
    VALIDATION = "VALIDATION"
    CONFIG = "CONFIG"
    NOT_FOUND = "NOT_FOUND"

    # Application errors
    ORCHESTRATION = "ORCHESTRATION"
    RENDER = "RENDER"
    DELIVERY = "DELIVERY"

    INTERNAL = "INTERNAL"
    UNKNOWN = "UNKNOWN"


@dataclass
class ErrorContext:
    """Structured metadata attached to an error.

    Attributes:
        schedule_id: Schedule the failure belongs to.
        step: Pipeline step that failed (``window``, ``query``, ``render``,
            ``deliver``, ``record``).
        run_id: Run-history row for the execution.
        metadata: Additional key-value pairs.
    """

    schedule_id: str | None = None
    step: str | None = None
    run_id: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["schedule_id", "step", "run_id"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class SafetySpineError(Exception):
    """
    Base exception for all safety-spine errors.

    Subclasses set ``default_category`` and ``default_retryable`` so raising
    code only passes what differs from the defaults.

    Examples:
        >>> error = DeliveryError("relay refused connection")
        >>> error.retryable
        True
        >>> error.with_context(schedule_id="SCH-0A1B2C3D").context.schedule_id
        'SCH-0A1B2C3D'
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL
    default_retryable: bool = False

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        retryable: bool | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.retryable = retryable if retryable is not None else self.default_retryable
        self.context = context or ErrorContext()
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> SafetySpineError:
        """Add context fields to the error and return it for chaining."""
        for key, value in kwargs.items():
            if hasattr(self.context, key) and key != "metadata":
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Serialize error for logging and API responses."""
        result: dict[str, Any] = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
            "retryable": self.retryable,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# TRANSIENT
# =============================================================================


class TransientError(SafetySpineError):
    """Temporary failure that may succeed on a later run."""

    default_category = ErrorCategory.NETWORK
    default_retryable = True


class DeliveryError(TransientError):
    """Outbound email could not be handed to the transport."""

    default_category = ErrorCategory.DELIVERY


# =============================================================================
# INPUT
# =============================================================================


class ValidationError(SafetySpineError):
    """Input failed validation. Never retryable."""

    default_category = ErrorCategory.VALIDATION
    default_retryable = False

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        value: Any = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.field = field
        self.value = value

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.field:
            result["field"] = self.field
        if self.value is not None:
            result["value"] = repr(self.value)
        return result


class ScheduleValidationError(ValidationError):
    """A schedule definition was rejected at create or update time."""


class ConfigError(SafetySpineError):
    """Invalid or missing process configuration."""

    default_category = ErrorCategory.CONFIG
    default_retryable = False


class MissingConfigError(ConfigError):
    """A required setting is not configured."""

    def __init__(self, key: str, message: str | None = None):
        self.key = key
        super().__init__(message or f"Missing required configuration: {key}")


class InvalidConfigError(ConfigError):
    """A setting has an unusable value."""

    def __init__(self, key: str, value: Any, message: str | None = None):
        self.key = key
        self.value = value
        super().__init__(message or f"Invalid configuration for {key}: {value!r}")


class NotFoundError(SafetySpineError):
    """Referenced record does not exist."""

    default_category = ErrorCategory.NOT_FOUND
    default_retryable = False


class ScheduleNotFoundError(NotFoundError):
    """Unknown schedule id."""

    def __init__(self, schedule_id: str):
        self.schedule_id = schedule_id
        super().__init__(
            f"Schedule not found: {schedule_id}",
            context=ErrorContext(schedule_id=schedule_id),
        )


# =============================================================================
# ORCHESTRATION
# =============================================================================


class OrchestrationError(SafetySpineError):
    """Scheduler and pipeline failures."""

    default_category = ErrorCategory.ORCHESTRATION
    default_retryable = False


class ScheduleBusyError(OrchestrationError):
    """A run for this schedule is already in flight."""

    def __init__(self, schedule_id: str):
        self.schedule_id = schedule_id
        super().__init__(
            f"Schedule {schedule_id} is already running",
            context=ErrorContext(schedule_id=schedule_id),
        )


class ReportExecutionError(OrchestrationError):
    """A report run failed at a named pipeline step."""

    def __init__(
        self,
        message: str,
        *,
        step: str,
        schedule_id: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        retryable = cause.retryable if isinstance(cause, SafetySpineError) else False
        super().__init__(
            message,
            retryable=retryable,
            context=ErrorContext(schedule_id=schedule_id, step=step),
            cause=cause,
        )
        self.step = step


class ExecutionTimeoutError(OrchestrationError):
    """A run exceeded its wall-clock budget."""

    default_retryable = True


class RenderError(SafetySpineError):
    """A report renderer could not produce its output."""

    default_category = ErrorCategory.RENDER
    default_retryable = False


class StorageError(SafetySpineError):
    """Database read or write failure."""

    default_category = ErrorCategory.STORAGE
    default_retryable = True


def is_retryable(error: Exception) -> bool:
    """Check whether an error is marked retryable."""
    if isinstance(error, SafetySpineError):
        return error.retryable
    return False


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "SafetySpineError",
    "TransientError",
    "DeliveryError",
    "ValidationError",
    "ScheduleValidationError",
    "ConfigError",
    "MissingConfigError",
    "InvalidConfigError",
    "NotFoundError",
    "ScheduleNotFoundError",
    "OrchestrationError",
    "ScheduleBusyError",
    "ReportExecutionError",
    "ExecutionTimeoutError",
    "RenderError",
    "StorageError",
    "is_retryable",
]
