"""
Schedule operations.

CRUD for report schedules, manual runs and run history. Every write goes to
the registry first and then brings the scheduler's trigger set in line:
create registers, update re-registers (or unregisters when the schedule is
now inactive), delete unregisters before deleting.
"""

from __future__ import annotations

from safety_spine.core.errors import ScheduleNotFoundError
from safety_spine.core.logging import LogContext, get_logger
from safety_spine.ops.context import OperationContext
from safety_spine.ops.requests import (
    CreateScheduleRequest,
    DeleteScheduleRequest,
    GetScheduleRequest,
    ListScheduleRunsRequest,
    RunScheduleRequest,
    UpdateScheduleRequest,
)
from safety_spine.ops.responses import RunNowResult, ScheduleDetail, ScheduleRunSummary
from safety_spine.ops.result import (
    INTERNAL,
    NOT_FOUND,
    VALIDATION_FAILED,
    OperationResult,
    PagedResult,
    start_timer,
)
from safety_spine.scheduling.models import Schedule, ScheduleCreate, ScheduleUpdate
from safety_spine.scheduling.recurrence import next_fire_time, schedule_to_cron
from safety_spine.scheduling.repository import ScheduleRepository

logger = get_logger(__name__)


def _repo(ctx: OperationContext) -> ScheduleRepository:
    if ctx.scheduler is not None:
        return ctx.scheduler.repository
    return ScheduleRepository(ctx.conn)


def _detail(ctx: OperationContext, schedule: Schedule) -> ScheduleDetail:
    registered = ctx.scheduler.is_registered(schedule.id) if ctx.scheduler else False
    next_run = next_fire_time(schedule, ctx.settings.tz) if schedule.is_active else None
    return ScheduleDetail(
        id=schedule.id,
        name=schedule.name,
        frequency=schedule.frequency,
        day_of_week=schedule.day_of_week,
        day_of_month=schedule.day_of_month,
        time=schedule.time,
        location_filter=schedule.location_filter,
        recipients=list(schedule.recipients),
        format=schedule.format,
        is_active=schedule.is_active,
        last_run_at=schedule.last_run_at,
        last_run_status=schedule.last_run_status,
        created_at=schedule.created_at,
        updated_at=schedule.updated_at,
        cron=schedule_to_cron(schedule),
        next_run_at=next_run.isoformat() if next_run else None,
        registered=registered,
    )


def _sync_trigger(ctx: OperationContext, schedule_id: str) -> None:
    if ctx.scheduler is not None:
        ctx.scheduler.sync(schedule_id)


def _missing_id(timer) -> OperationResult:
    return OperationResult.fail(
        VALIDATION_FAILED, "schedule_id is required", elapsed_ms=timer.elapsed_ms
    )


def list_schedules(ctx: OperationContext) -> PagedResult[ScheduleDetail]:
    """List all schedules, newest first."""
    timer = start_timer()
    try:
        schedules = _repo(ctx).list_all()
        items = [_detail(ctx, s) for s in schedules]
        return PagedResult.from_items(
            items,
            total=len(items),
            limit=max(len(items), 1),
            elapsed_ms=timer.elapsed_ms,
        )
    except Exception as exc:
        logger.exception("op_failed", op="list_schedules", error=str(exc))
        return PagedResult.fail(
            INTERNAL, f"Failed to list schedules: {exc}", elapsed_ms=timer.elapsed_ms
        )


def get_schedule(
    ctx: OperationContext,
    request: GetScheduleRequest,
) -> OperationResult[ScheduleDetail]:
    """Get a schedule by ID."""
    timer = start_timer()

    if not request.schedule_id:
        return _missing_id(timer)

    try:
        schedule = _repo(ctx).get(request.schedule_id)
        if schedule is None:
            return OperationResult.fail(
                NOT_FOUND,
                f"Schedule '{request.schedule_id}' not found",
                elapsed_ms=timer.elapsed_ms,
            )
        return OperationResult.ok(_detail(ctx, schedule), elapsed_ms=timer.elapsed_ms)
    except Exception as exc:
        logger.exception("op_failed", op="get_schedule", error=str(exc))
        return OperationResult.fail(
            INTERNAL, f"Failed to get schedule: {exc}", elapsed_ms=timer.elapsed_ms
        )


def create_schedule(
    ctx: OperationContext,
    request: CreateScheduleRequest,
) -> OperationResult[ScheduleDetail]:
    """Create a schedule and register its trigger when active."""
    timer = start_timer()

    spec = ScheduleCreate(
        name=request.name,
        frequency=request.frequency,
        time=request.time,
        recipients=list(request.recipients),
        format=request.format,
        day_of_week=request.day_of_week,
        day_of_month=request.day_of_month,
        location_filter=request.location_filter or None,
        is_active=request.is_active,
    )
    try:
        schedule = _repo(ctx).create(spec)
        _sync_trigger(ctx, schedule.id)
        logger.info("schedule_created", schedule_id=schedule.id, caller=ctx.caller)
        return OperationResult.ok(_detail(ctx, schedule), elapsed_ms=timer.elapsed_ms)
    except Exception as exc:
        return _failure(exc, "create_schedule", timer)


def update_schedule(
    ctx: OperationContext,
    request: UpdateScheduleRequest,
) -> OperationResult[ScheduleDetail]:
    """Partially update a schedule and re-sync its trigger."""
    timer = start_timer()

    if not request.schedule_id:
        return _missing_id(timer)

    updates = ScheduleUpdate(
        name=request.name,
        frequency=request.frequency,
        day_of_week=request.day_of_week,
        day_of_month=request.day_of_month,
        time=request.time,
        location_filter=request.location_filter,
        clear_location_filter=request.clear_location_filter,
        recipients=list(request.recipients) if request.recipients is not None else None,
        format=request.format,
        is_active=request.is_active,
    )
    try:
        schedule = _repo(ctx).update(request.schedule_id, updates)
        if schedule is None:
            raise ScheduleNotFoundError(request.schedule_id)
        _sync_trigger(ctx, schedule.id)
        logger.info("schedule_updated", schedule_id=schedule.id, caller=ctx.caller)
        return OperationResult.ok(_detail(ctx, schedule), elapsed_ms=timer.elapsed_ms)
    except Exception as exc:
        return _failure(exc, "update_schedule", timer)


def delete_schedule(
    ctx: OperationContext,
    request: DeleteScheduleRequest,
) -> OperationResult[None]:
    """Unregister and delete a schedule. In-flight runs finish normally."""
    timer = start_timer()

    if not request.schedule_id:
        return _missing_id(timer)

    try:
        repo = _repo(ctx)
        if repo.get(request.schedule_id) is None:
            raise ScheduleNotFoundError(request.schedule_id)
        if ctx.scheduler is not None:
            ctx.scheduler.unregister(request.schedule_id)
        repo.delete(request.schedule_id)
        logger.info("schedule_deleted", schedule_id=request.schedule_id, caller=ctx.caller)
        return OperationResult.ok(None, elapsed_ms=timer.elapsed_ms)
    except Exception as exc:
        return _failure(exc, "delete_schedule", timer)


def run_schedule_now(
    ctx: OperationContext,
    request: RunScheduleRequest,
) -> OperationResult[RunNowResult]:
    """Run a schedule synchronously and return its recorded outcome.

    A run that fails inside the pipeline is still a successful *operation*:
    the result carries ``last_run_status="failed"`` and the failed step.
    """
    timer = start_timer()

    if not request.schedule_id:
        return _missing_id(timer)
    if ctx.scheduler is None:
        return OperationResult.fail(
            INTERNAL, "No scheduler available for manual runs", elapsed_ms=timer.elapsed_ms
        )

    with LogContext(schedule_id=request.schedule_id, caller=ctx.caller):
        try:
            outcome = ctx.scheduler.run_now(request.schedule_id)
        except Exception as exc:
            return _failure(exc, "run_schedule_now", timer)
        logger.info("schedule_run_finished", status=outcome.last_run_status, run_id=outcome.run_id)

    result = RunNowResult(
        schedule_id=outcome.schedule_id,
        last_run_at=outcome.last_run_at,
        last_run_status=outcome.last_run_status,
        run_id=outcome.run_id,
        failed_step=outcome.failed_step,
        error=outcome.error,
        attachments=list(outcome.attachments),
        window_start=outcome.window_start,
        window_end=outcome.window_end,
    )
    warnings = [] if outcome.succeeded else [f"Run failed at step '{outcome.failed_step}'"]
    return OperationResult.ok(result, warnings=warnings, elapsed_ms=timer.elapsed_ms)


def list_schedule_runs(
    ctx: OperationContext,
    request: ListScheduleRunsRequest,
) -> PagedResult[ScheduleRunSummary]:
    """Run history for one schedule, newest first."""
    timer = start_timer()

    if not request.schedule_id:
        return PagedResult.fail(
            VALIDATION_FAILED, "schedule_id is required", elapsed_ms=timer.elapsed_ms
        )

    try:
        repo = _repo(ctx)
        if repo.get(request.schedule_id) is None:
            raise ScheduleNotFoundError(request.schedule_id)
        runs = repo.list_runs(request.schedule_id, limit=request.limit)
        items = [
            ScheduleRunSummary(
                id=r.id,
                schedule_id=r.schedule_id,
                schedule_name=r.schedule_name,
                trigger=r.trigger,
                started_at=r.started_at,
                completed_at=r.completed_at,
                status=r.status,
                failed_step=r.failed_step,
                error=r.error,
                window_start=r.window_start,
                window_end=r.window_end,
                attachments=list(r.attachments),
            )
            for r in runs
        ]
        return PagedResult.from_items(
            items, total=len(items), limit=request.limit, elapsed_ms=timer.elapsed_ms
        )
    except Exception as exc:
        return _failure(exc, "list_schedule_runs", timer, paged=True)


def _failure(exc: Exception, op: str, timer, *, paged: bool = False) -> OperationResult:
    cls = PagedResult if paged else OperationResult
    result = cls.from_exception(exc, elapsed_ms=timer.elapsed_ms)
    if result.error and result.error.code == INTERNAL:
        logger.exception("op_failed", op=op, error=str(exc))
    else:
        logger.warning("op_rejected", op=op, code=result.error.code, error=str(exc))
    return result
