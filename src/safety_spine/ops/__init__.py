"""
Operations layer: business entry points shared by the API and the CLI.

- All functions accept ``OperationContext`` as first argument
- All functions return ``OperationResult[T]`` (never raise)
- All functions are transport-agnostic (no HTTP, no CLI knowledge)

Usage::

    from safety_spine.ops import OperationContext
    from safety_spine.ops.schedules import list_schedules

    ctx = OperationContext(conn=conn, scheduler=scheduler)
    result = list_schedules(ctx)
    assert result.success
"""

from safety_spine.ops.context import OperationContext
from safety_spine.ops.result import OperationError, OperationResult, PagedResult

__all__ = [
    "OperationContext",
    "OperationError",
    "OperationResult",
    "PagedResult",
]
