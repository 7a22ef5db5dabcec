"""
Submission router: form intake and listing.

POST /submissions
GET  /submissions
"""

from __future__ import annotations

from fastapi import APIRouter, Query

from safety_spine.api.deps import OpContext
from safety_spine.api.schemas import (
    PagedResponse,
    RecordSubmissionBody,
    SubmissionSchema,
    SuccessResponse,
)
from safety_spine.api.utils import _dc, _handle_error, _page

router = APIRouter(prefix="/submissions")


@router.post("", response_model=SuccessResponse[SubmissionSchema], status_code=201)
def record_submission(ctx: OpContext, body: RecordSubmissionBody):
    """Store a form submission.

    Example:
        POST /api/v1/submissions
        {
            "form_type": "forklift-inspection",
            "location": "DAL",
            "submitted_by": "J. Ortiz",
            "payload": {"forkliftId": "FL-12", "inspection": {"brakes": "Fail"}}
        }
    """
    from safety_spine.ops.requests import RecordSubmissionRequest
    from safety_spine.ops.submissions import record_submission as _record

    result = _record(ctx, RecordSubmissionRequest(**body.model_dump()))
    if not result.success:
        return _handle_error(result)
    return SuccessResponse(
        data=SubmissionSchema(**_dc(result.data)),
        elapsed_ms=result.elapsed_ms,
        warnings=result.warnings,
    )


@router.get("", response_model=PagedResponse[SubmissionSchema])
def list_submissions(
    ctx: OpContext,
    form_type: str | None = Query(None, description="Filter by form type"),
    limit: int = Query(50, ge=1, le=1000),
    offset: int = Query(0, ge=0),
):
    """Newest-first page of submissions."""
    from safety_spine.ops.requests import ListSubmissionsRequest
    from safety_spine.ops.submissions import list_submissions as _list

    result = _list(ctx, ListSubmissionsRequest(form_type=form_type, limit=limit, offset=offset))
    if not result.success:
        return _handle_error(result)
    return PagedResponse(
        data=[SubmissionSchema(**_dc(s)) for s in result.data or []],
        page=_page(result),
        elapsed_ms=result.elapsed_ms,
        warnings=result.warnings,
    )
