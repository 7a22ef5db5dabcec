"""Submission records and the submission store."""

from safety_spine.submissions.models import (
    CHECKLIST_FIELD,
    INSPECTION_FORM_TYPE,
    ChecklistResult,
    Submission,
    SubmissionCreate,
)
from safety_spine.submissions.store import SubmissionStore

__all__ = [
    "CHECKLIST_FIELD",
    "INSPECTION_FORM_TYPE",
    "ChecklistResult",
    "Submission",
    "SubmissionCreate",
    "SubmissionStore",
]
