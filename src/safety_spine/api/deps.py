"""
FastAPI dependency injection.

The connection and the scheduler are process-wide and live on
``app.state`` (created in the app lifespan); the operation context is built
per request.

Usage in routers::

    from safety_spine.api.deps import OpContext

    @router.get("/things")
    def list_things(ctx: OpContext):
        ...
"""

from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import Depends, Request

from safety_spine.core.settings import SafetySpineSettings
from safety_spine.ops.context import OperationContext


def get_app_settings(request: Request) -> SafetySpineSettings:
    return request.app.state.settings


def get_operation_context(request: Request) -> OperationContext:
    """Build an :class:`OperationContext` from the current request."""
    state = request.app.state
    return OperationContext(
        conn=state.conn,
        scheduler=state.scheduler,
        settings=state.settings,
        request_id=getattr(request.state, "request_id", str(uuid.uuid4())),
        caller="api",
    )


Settings = Annotated[SafetySpineSettings, Depends(get_app_settings)]
OpContext = Annotated[OperationContext, Depends(get_operation_context)]
