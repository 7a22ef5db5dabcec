"""
Schedule router: report schedule CRUD, manual runs and run history.

GET    /schedules
POST   /schedules
GET    /schedules/{schedule_id}
PUT    /schedules/{schedule_id}
DELETE /schedules/{schedule_id}
POST   /schedules/{schedule_id}/run
GET    /schedules/{schedule_id}/runs
"""

from __future__ import annotations

from fastapi import APIRouter, Path, Query

from safety_spine.api.deps import OpContext
from safety_spine.api.schemas import (
    CreateScheduleBody,
    PagedResponse,
    RunNowSchema,
    ScheduleRunSchema,
    ScheduleSchema,
    SuccessResponse,
    UpdateScheduleBody,
)
from safety_spine.api.utils import _dc, _handle_error, _page

router = APIRouter(prefix="/schedules")


@router.get("", response_model=PagedResponse[ScheduleSchema])
def list_schedules(ctx: OpContext):
    """List all report schedules, newest first.

    Example:
        GET /api/v1/schedules

        Response:
        {
            "data": [
                {
                    "id": "SCH-1A2B3C4D",
                    "name": "Dallas weekly",
                    "frequency": "weekly",
                    "day_of_week": 1,
                    "time": "07:30",
                    "registered": true,
                    ...
                }
            ],
            "page": {"total": 1, "limit": 1, "offset": 0, "has_more": false}
        }
    """
    from safety_spine.ops.schedules import list_schedules as _list

    result = _list(ctx)
    if not result.success:
        return _handle_error(result)
    return PagedResponse(
        data=[ScheduleSchema(**_dc(s)) for s in result.data or []],
        page=_page(result),
        elapsed_ms=result.elapsed_ms,
        warnings=result.warnings,
    )


@router.post("", response_model=SuccessResponse[ScheduleSchema], status_code=201)
def create_schedule(ctx: OpContext, body: CreateScheduleBody):
    """Create a schedule. Active schedules get a trigger immediately.

    Raises:
        400 VALIDATION_FAILED: Missing fields, bad ``HH:MM``, empty
            recipients, or a day outside the weekly/monthly range.
    """
    from safety_spine.ops.requests import CreateScheduleRequest
    from safety_spine.ops.schedules import create_schedule as _create

    result = _create(ctx, CreateScheduleRequest(**body.model_dump()))
    if not result.success:
        return _handle_error(result)
    return SuccessResponse(
        data=ScheduleSchema(**_dc(result.data)),
        elapsed_ms=result.elapsed_ms,
        warnings=result.warnings,
    )


@router.get("/{schedule_id}", response_model=SuccessResponse[ScheduleSchema])
def get_schedule(ctx: OpContext, schedule_id: str = Path(..., description="Schedule ID")):
    """Get one schedule.

    Raises:
        404 NOT_FOUND: Unknown schedule id.
    """
    from safety_spine.ops.requests import GetScheduleRequest
    from safety_spine.ops.schedules import get_schedule as _get

    result = _get(ctx, GetScheduleRequest(schedule_id=schedule_id))
    if not result.success:
        return _handle_error(result)
    return SuccessResponse(
        data=ScheduleSchema(**_dc(result.data)),
        elapsed_ms=result.elapsed_ms,
        warnings=result.warnings,
    )


@router.put("/{schedule_id}", response_model=SuccessResponse[ScheduleSchema])
def update_schedule(
    ctx: OpContext,
    body: UpdateScheduleBody,
    schedule_id: str = Path(..., description="Schedule ID"),
):
    """Partially update a schedule; its trigger is re-registered.

    Example:
        PUT /api/v1/schedules/SCH-1A2B3C4D
        {"is_active": false}

    Raises:
        404 NOT_FOUND: Unknown schedule id.
        400 VALIDATION_FAILED: The merged schedule is invalid.
    """
    from safety_spine.ops.requests import UpdateScheduleRequest
    from safety_spine.ops.schedules import update_schedule as _update

    result = _update(ctx, UpdateScheduleRequest(schedule_id=schedule_id, **body.model_dump()))
    if not result.success:
        return _handle_error(result)
    return SuccessResponse(
        data=ScheduleSchema(**_dc(result.data)),
        elapsed_ms=result.elapsed_ms,
        warnings=result.warnings,
    )


@router.delete("/{schedule_id}", status_code=204)
def delete_schedule(ctx: OpContext, schedule_id: str = Path(..., description="Schedule ID")):
    """Delete a schedule. A run already in flight finishes normally."""
    from safety_spine.ops.requests import DeleteScheduleRequest
    from safety_spine.ops.schedules import delete_schedule as _delete

    result = _delete(ctx, DeleteScheduleRequest(schedule_id=schedule_id))
    if not result.success:
        return _handle_error(result)
    return None


@router.post("/{schedule_id}/run", response_model=SuccessResponse[RunNowSchema])
def run_schedule_now(ctx: OpContext, schedule_id: str = Path(..., description="Schedule ID")):
    """Run a schedule now and wait for it to finish.

    A run that fails still returns 200 with ``last_run_status="failed"``
    and the failed step.

    Raises:
        404 NOT_FOUND: Unknown schedule id.
        423 LOCKED: A run for this schedule is already in flight.
    """
    from safety_spine.ops.requests import RunScheduleRequest
    from safety_spine.ops.schedules import run_schedule_now as _run

    result = _run(ctx, RunScheduleRequest(schedule_id=schedule_id))
    if not result.success:
        return _handle_error(result)
    return SuccessResponse(
        data=RunNowSchema(**_dc(result.data)),
        elapsed_ms=result.elapsed_ms,
        warnings=result.warnings,
    )


@router.get("/{schedule_id}/runs", response_model=PagedResponse[ScheduleRunSchema])
def list_schedule_runs(
    ctx: OpContext,
    schedule_id: str = Path(..., description="Schedule ID"),
    limit: int = Query(50, ge=1, le=500),
):
    """Run history for a schedule, newest first."""
    from safety_spine.ops.requests import ListScheduleRunsRequest
    from safety_spine.ops.schedules import list_schedule_runs as _runs

    result = _runs(ctx, ListScheduleRunsRequest(schedule_id=schedule_id, limit=limit))
    if not result.success:
        return _handle_error(result)
    return PagedResponse(
        data=[ScheduleRunSchema(**_dc(r)) for r in result.data or []],
        page=_page(result),
        elapsed_ms=result.elapsed_ms,
        warnings=result.warnings,
    )
