"""
Shared API router utilities.

- ``_dc()``: convert a dataclass or dict to a plain dict
- ``_handle_error()``: convert a failed OperationResult to a ``problem_response``
"""

from __future__ import annotations

from dataclasses import asdict
from typing import Any

from safety_spine.api.errors import problem_response, status_for_error_code
from safety_spine.api.schemas import PageMeta


def _dc(obj: Any) -> dict[str, Any]:
    """Convert a dataclass (or dict) to a plain dict."""
    if hasattr(obj, "__dataclass_fields__"):
        return asdict(obj)
    return obj if isinstance(obj, dict) else {}


def _handle_error(result):
    """Convert a failed ``OperationResult`` into a Problem Details response.

    The error code picks the HTTP status; a rejected field or a failed step
    is reported in ``errors``.
    """
    if result.error is None:
        return problem_response(status=500, title="Operation failed")

    error = result.error
    errors = []
    if error.details.get("field"):
        errors.append({"code": error.code, "message": error.message, "field": error.details["field"]})
    elif error.details.get("step"):
        errors.append({"code": error.code, "message": error.message, "field": error.details["step"]})
    return problem_response(
        status=status_for_error_code(error.code),
        title=error.message,
        detail=error.code,
        errors=errors,
    )


def _page(result) -> PageMeta:
    return PageMeta(
        total=result.total,
        limit=result.limit,
        offset=result.offset,
        has_more=result.has_more,
    )
