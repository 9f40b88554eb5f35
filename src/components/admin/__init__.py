"""
Admin component - content mutations and cache invalidation.
"""

from ._impl import (
    REQUIRED_FIELDS,
    AdminContentService,
    prepare_fields,
    validate_submission,
)
from .component import run_create, run_delete, run_update
from .models import (
    CreateContentInput,
    DeleteContentInput,
    MutationOutput,
    SubmissionError,
    UpdateContentInput,
)

__all__ = [
    # Component entry points
    "run_create",
    "run_update",
    "run_delete",
    # Models
    "CreateContentInput",
    "UpdateContentInput",
    "DeleteContentInput",
    "MutationOutput",
    "SubmissionError",
    # Implementation
    "AdminContentService",
    "prepare_fields",
    "validate_submission",
    # Constants
    "REQUIRED_FIELDS",
]
