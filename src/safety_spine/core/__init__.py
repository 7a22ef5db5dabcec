"""Core primitives: errors, logging, settings and persistence."""

from safety_spine.core.errors import (
    ErrorCategory,
    ErrorContext,
    SafetySpineError,
)
from safety_spine.core.protocols import Connection
from safety_spine.core.schema import init_schema
from safety_spine.core.sqlite_conn import SqliteConnection

__all__ = [
    "Connection",
    "ErrorCategory",
    "ErrorContext",
    "SafetySpineError",
    "SqliteConnection",
    "init_schema",
]
