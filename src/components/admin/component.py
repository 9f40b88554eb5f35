"""
Admin component - Content CRUD.

Shell Layer - handles I/O and error conversion.
"""

from __future__ import annotations

from datetime import date

from src.domain.entities import ContentKind
from src.domain.errors import FetchError

from ._impl import AdminContentService, prepare_fields, validate_submission
from .models import (
    CreateContentInput,
    DeleteContentInput,
    MutationOutput,
    SubmissionError,
    UpdateContentInput,
)


def _failure(kind: ContentKind, error: FetchError) -> MutationOutput:
    return MutationOutput(
        kind=kind,
        success=False,
        message=error.message,
        errors=(SubmissionError(field="_api", code="api_error", message=error.message),),
    )


async def run_create(
    input_data: CreateContentInput,
    service: AdminContentService,
    today: date | None = None,
) -> MutationOutput:
    """Validate and create an item."""
    errors = validate_submission(input_data.kind, input_data.fields)
    if errors:
        return MutationOutput(kind=input_data.kind, success=False, errors=tuple(errors))

    fields = prepare_fields(input_data.kind, input_data.fields, today or date.today())
    try:
        result = await service.create(input_data.kind, fields, input_data.files or None)
    except FetchError as e:
        return _failure(input_data.kind, e)

    item_id = result.data.get("id") if result.data else None
    return MutationOutput(
        kind=input_data.kind,
        success=True,
        message=result.message,
        item_id=str(item_id) if item_id is not None else None,
    )


async def run_update(
    input_data: UpdateContentInput,
    service: AdminContentService,
    today: date | None = None,
) -> MutationOutput:
    """Validate and update an item."""
    errors = validate_submission(input_data.kind, input_data.fields)
    if errors:
        return MutationOutput(kind=input_data.kind, success=False, errors=tuple(errors))

    fields = prepare_fields(input_data.kind, input_data.fields, today or date.today())
    try:
        result = await service.update(
            input_data.kind, input_data.item_id, fields, input_data.files or None
        )
    except FetchError as e:
        return _failure(input_data.kind, e)

    return MutationOutput(
        kind=input_data.kind,
        success=True,
        message=result.message,
        item_id=input_data.item_id,
    )


async def run_delete(
    input_data: DeleteContentInput,
    service: AdminContentService,
) -> MutationOutput:
    """Delete an item."""
    try:
        result = await service.delete(input_data.kind, input_data.item_id)
    except FetchError as e:
        return _failure(input_data.kind, e)

    return MutationOutput(
        kind=input_data.kind,
        success=True,
        message=result.message,
        item_id=input_data.item_id,
    )
