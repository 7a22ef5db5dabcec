"""
Operation result envelope.

Every operation function returns an :class:`OperationResult` (or a
:class:`PagedResult` for lists) instead of raising. The error ``code`` is
what the API maps to an HTTP status and what the CLI prints.

Codes:
    VALIDATION_FAILED   schedule or request rejected
    NOT_FOUND           unknown schedule id
    LOCKED              a run for the schedule is already in flight
    EXECUTION_FAILED    a run could not be recorded
    INTERNAL            anything else
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, TypeVar

from safety_spine.core.errors import (
    ConfigError,
    ErrorCategory,
    NotFoundError,
    ReportExecutionError,
    SafetySpineError,
    ScheduleBusyError,
    ValidationError,
)

T = TypeVar("T")

VALIDATION_FAILED = "VALIDATION_FAILED"
NOT_FOUND = "NOT_FOUND"
LOCKED = "LOCKED"
EXECUTION_FAILED = "EXECUTION_FAILED"
INTERNAL = "INTERNAL"


@dataclass(frozen=True, slots=True)
class OperationError:
    """Structured error detail for failed operations.

    Attributes:
        code: Machine-readable code (``NOT_FOUND``, ``VALIDATION_FAILED``, …).
        message: Human-readable description of the error.
        category: Optional :class:`ErrorCategory` of the underlying error.
        details: Extra key/value context (field name, failed step, …).
        retryable: Whether the caller should retry the operation.
    """

    code: str
    message: str
    category: ErrorCategory | None = None
    details: dict[str, Any] = field(default_factory=dict)
    retryable: bool = False


def error_code_for(exc: Exception) -> str:
    """Ops error code for a raised exception."""
    if isinstance(exc, (ValidationError, ConfigError)):
        return VALIDATION_FAILED
    if isinstance(exc, NotFoundError):
        return NOT_FOUND
    if isinstance(exc, ScheduleBusyError):
        return LOCKED
    if isinstance(exc, ReportExecutionError):
        return EXECUTION_FAILED
    return INTERNAL


@dataclass
class OperationResult[T]:
    """Envelope returned by every operation function.

    Use :meth:`ok`, :meth:`fail` or :meth:`from_exception` rather than the
    constructor.
    """

    success: bool
    data: T | None = None
    error: OperationError | None = None
    warnings: list[str] = field(default_factory=list)
    elapsed_ms: float = 0.0
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def ok(
        cls,
        data: T,
        *,
        warnings: list[str] | None = None,
        elapsed_ms: float = 0.0,
        metadata: dict[str, Any] | None = None,
    ) -> OperationResult[T]:
        """Create a successful result."""
        return cls(
            success=True,
            data=data,
            warnings=warnings or [],
            elapsed_ms=elapsed_ms,
            metadata=metadata or {},
        )

    @classmethod
    def fail(
        cls,
        code: str,
        message: str,
        *,
        category: ErrorCategory | None = None,
        details: dict[str, Any] | None = None,
        retryable: bool = False,
        elapsed_ms: float = 0.0,
    ) -> OperationResult[T]:
        """Create a failed result."""
        return cls(
            success=False,
            error=OperationError(
                code=code,
                message=message,
                category=category,
                details=details or {},
                retryable=retryable,
            ),
            elapsed_ms=elapsed_ms,
        )

    @classmethod
    def from_exception(cls, exc: Exception, *, elapsed_ms: float = 0.0) -> OperationResult[T]:
        """Failed result for a raised exception; keeps field and step details."""
        details: dict[str, Any] = {}
        if isinstance(exc, ValidationError) and exc.field:
            details["field"] = exc.field
        if isinstance(exc, ReportExecutionError):
            details["step"] = exc.step
        if isinstance(exc, SafetySpineError):
            return cls.fail(
                error_code_for(exc),
                exc.message,
                category=exc.category,
                details=details,
                retryable=exc.retryable,
                elapsed_ms=elapsed_ms,
            )
        return cls.fail(INTERNAL, str(exc) or type(exc).__name__, elapsed_ms=elapsed_ms)

    def to_dict(self) -> dict[str, Any]:
        """Serialise to a plain dict (for JSON output)."""
        d: dict[str, Any] = {"success": self.success}
        if self.data is not None:
            d["data"] = self.data
        if self.error is not None:
            d["error"] = {
                "code": self.error.code,
                "message": self.error.message,
                "retryable": self.error.retryable,
            }
            if self.error.details:
                d["error"]["details"] = self.error.details
        if self.warnings:
            d["warnings"] = self.warnings
        if self.elapsed_ms:
            d["elapsed_ms"] = round(self.elapsed_ms, 2)
        if self.metadata:
            d["metadata"] = self.metadata
        return d


@dataclass
class PagedResult(OperationResult[list[T]]):
    """Paginated result for list operations; ``has_more`` is derived."""

    total: int = 0
    limit: int = 50
    offset: int = 0
    has_more: bool = False

    @classmethod
    def from_items(
        cls,
        items: list[T],
        total: int,
        *,
        limit: int = 50,
        offset: int = 0,
        elapsed_ms: float = 0.0,
    ) -> PagedResult[T]:
        return cls(
            success=True,
            data=items,
            total=total,
            limit=limit,
            offset=offset,
            has_more=(offset + limit) < total,
            elapsed_ms=elapsed_ms,
        )

    def to_dict(self) -> dict[str, Any]:
        d = super().to_dict()
        d["total"] = self.total
        d["limit"] = self.limit
        d["offset"] = self.offset
        d["has_more"] = self.has_more
        return d


class _Timer:
    """Minimal stopwatch for timing operations."""

    __slots__ = ("_start",)

    def __init__(self) -> None:
        self._start = time.perf_counter()

    @property
    def elapsed_ms(self) -> float:
        return (time.perf_counter() - self._start) * 1000


def start_timer() -> _Timer:
    """Return a lightweight timer.  Use ``timer.elapsed_ms`` when done."""
    return _Timer()
