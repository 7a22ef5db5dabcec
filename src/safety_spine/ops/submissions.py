"""
Submission operations.

Intake for form submissions and a newest-first listing. Submissions are
append-only; reporting reads them through the store.
"""

from __future__ import annotations

from safety_spine.core.logging import get_logger
from safety_spine.ops.context import OperationContext
from safety_spine.ops.requests import ListSubmissionsRequest, RecordSubmissionRequest
from safety_spine.ops.responses import SubmissionSummary
from safety_spine.ops.result import (
    INTERNAL,
    VALIDATION_FAILED,
    OperationResult,
    PagedResult,
    start_timer,
)
from safety_spine.submissions.models import Submission, SubmissionCreate
from safety_spine.submissions.store import SubmissionStore

logger = get_logger(__name__)


def _store(ctx: OperationContext) -> SubmissionStore:
    return SubmissionStore(ctx.conn, ctx.settings.tz)


def _summary(submission: Submission) -> SubmissionSummary:
    return SubmissionSummary(
        id=submission.id,
        form_type=submission.form_type,
        location=submission.location,
        submitted_by=submission.submitted_by,
        submitted_at=submission.submitted_at,
        payload=dict(submission.payload),
    )


def record_submission(
    ctx: OperationContext,
    request: RecordSubmissionRequest,
) -> OperationResult[SubmissionSummary]:
    """Store one form submission."""
    timer = start_timer()

    if not request.form_type:
        return OperationResult.fail(
            VALIDATION_FAILED, "form_type is required", elapsed_ms=timer.elapsed_ms
        )
    if not isinstance(request.payload, dict):
        return OperationResult.fail(
            VALIDATION_FAILED, "payload must be a JSON object", elapsed_ms=timer.elapsed_ms
        )

    try:
        submission = _store(ctx).add(
            SubmissionCreate(
                form_type=request.form_type,
                payload=dict(request.payload),
                location=request.location or None,
                submitted_by=request.submitted_by,
                submitted_at=request.submitted_at,
            )
        )
    except Exception as exc:
        logger.exception("op_failed", op="record_submission", error=str(exc))
        return OperationResult.from_exception(exc, elapsed_ms=timer.elapsed_ms)

    logger.info(
        "submission_recorded",
        submission_id=submission.id,
        form_type=submission.form_type,
        caller=ctx.caller,
    )
    return OperationResult.ok(_summary(submission), elapsed_ms=timer.elapsed_ms)


def list_submissions(
    ctx: OperationContext,
    request: ListSubmissionsRequest | None = None,
) -> PagedResult[SubmissionSummary]:
    """Newest-first page of submissions, optionally for one form type."""
    timer = start_timer()
    request = request or ListSubmissionsRequest()

    try:
        items, total = _store(ctx).list_recent(
            form_type=request.form_type,
            limit=request.limit,
            offset=request.offset,
        )
    except Exception as exc:
        logger.exception("op_failed", op="list_submissions", error=str(exc))
        return PagedResult.fail(
            INTERNAL, f"Failed to list submissions: {exc}", elapsed_ms=timer.elapsed_ms
        )

    return PagedResult.from_items(
        [_summary(s) for s in items],
        total=total,
        limit=request.limit,
        offset=request.offset,
        elapsed_ms=timer.elapsed_ms,
    )
