"""API schemas: envelopes, problem details and domain models."""

from safety_spine.api.schemas.common import (
    ErrorDetail,
    PagedResponse,
    PageMeta,
    ProblemDetail,
    SuccessResponse,
)
from safety_spine.api.schemas.domains import (
    CreateScheduleBody,
    RecordSubmissionBody,
    RunNowSchema,
    ScheduleRunSchema,
    ScheduleSchema,
    SubmissionSchema,
    UpdateScheduleBody,
)

__all__ = [
    "CreateScheduleBody",
    "ErrorDetail",
    "PageMeta",
    "PagedResponse",
    "ProblemDetail",
    "RecordSubmissionBody",
    "RunNowSchema",
    "ScheduleRunSchema",
    "ScheduleSchema",
    "SubmissionSchema",
    "SuccessResponse",
    "UpdateScheduleBody",
]
