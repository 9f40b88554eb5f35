"""
Admin content routes: cached list views, CRUD and news drafting.

Submissions arrive as JSON or multipart form data; uploaded files are passed
through to the content API unchanged. Access control sits in front of this
router and is not handled here.
"""

from collections import defaultdict
from typing import Any

from fastapi import APIRouter, HTTPException, Request, status
from starlette.datastructures import UploadFile as StarletteUploadFile

from src.api.deps import ContextDep, SessionDep, parse_kind
from src.api.schemas import (
    AdminListResponse,
    DraftRequest,
    DraftResponse,
    FieldErrorModel,
    MutationResponse,
    dump_items,
)
from src.components.admin import (
    CreateContentInput,
    DeleteContentInput,
    MutationOutput,
    UpdateContentInput,
    run_create,
    run_delete,
    run_update,
)
from src.components.assistant import DraftInput, run_draft
from src.components.cache import AdminListing, run_admin_list
from src.domain.errors import FetchError
from src.ports.content_api import UploadFile

router = APIRouter()


async def _read_submission(request: Request) -> tuple[dict[str, Any], dict[str, list[UploadFile]]]:
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        try:
            payload = await request.json()
        except ValueError as err:
            raise HTTPException(status_code=400, detail="Submission is not valid JSON") from err
        if not isinstance(payload, dict):
            raise HTTPException(status_code=400, detail="Submission must be a JSON object")
        return payload, {}

    form = await request.form()
    fields: dict[str, Any] = {}
    files: dict[str, list[UploadFile]] = defaultdict(list)
    for key, value in form.multi_items():
        if isinstance(value, StarletteUploadFile):
            data = await value.read()
            if value.filename:
                files[key].append(
                    (value.filename, data, value.content_type or "application/octet-stream")
                )
        else:
            fields[key] = value
    return fields, dict(files)


def _listing_response(listing: AdminListing) -> AdminListResponse:
    return AdminListResponse(
        kind=listing.kind.value,
        items=dump_items(listing.items),
        categories=list(listing.categories),
        fetched_at=listing.fetched_at,
        from_cache=listing.from_cache,
    )


def _mutation_response(result: MutationOutput) -> MutationResponse:
    response = MutationResponse(
        kind=result.kind.value,
        success=result.success,
        message=result.message,
        id=result.item_id,
        errors=[
            FieldErrorModel(field=e.field, code=e.code, message=e.message) for e in result.errors
        ],
    )
    if result.success:
        return response

    validation_failed = any(e.field != "_api" for e in result.errors)
    code = 422 if validation_failed else status.HTTP_502_BAD_GATEWAY
    raise HTTPException(status_code=code, detail=response.model_dump())


# --- Drafting ---


@router.post("/news/draft", response_model=DraftResponse)
async def draft_news(body: DraftRequest, context: ContextDep) -> DraftResponse:
    """Draft a news article from a short activity description."""
    result = await run_draft(DraftInput(brief=body.brief), context.assistant)
    if not result.success:
        code = 400 if not body.brief.strip() else 502
        raise HTTPException(status_code=code, detail=result.error)
    return DraftResponse(text=result.text)


# --- Lists ---


@router.get("/{kind}", response_model=AdminListResponse)
async def admin_list(kind: str, session: SessionDep) -> AdminListResponse:
    content_kind = parse_kind(kind)
    try:
        listing = await run_admin_list(content_kind, session.admin_cache)
    except FetchError as err:
        raise HTTPException(status_code=502, detail=str(err)) from err
    return _listing_response(listing)


@router.post("/{kind}/refresh", response_model=AdminListResponse)
async def admin_refresh(kind: str, session: SessionDep) -> AdminListResponse:
    """Drop the session snapshot and reload from the API."""
    content_kind = parse_kind(kind)
    try:
        listing = await run_admin_list(content_kind, session.admin_cache, force_refresh=True)
    except FetchError as err:
        raise HTTPException(status_code=502, detail=str(err)) from err
    return _listing_response(listing)


# --- Mutations ---


@router.post("/{kind}", response_model=MutationResponse, status_code=201)
async def create_content(kind: str, request: Request, session: SessionDep) -> MutationResponse:
    content_kind = parse_kind(kind)
    fields, files = await _read_submission(request)
    result = await run_create(
        CreateContentInput(kind=content_kind, fields=fields, files=files),
        session.admin_service,
    )
    return _mutation_response(result)


@router.put("/{kind}/{item_id}", response_model=MutationResponse)
async def update_content(
    kind: str,
    item_id: str,
    request: Request,
    session: SessionDep,
) -> MutationResponse:
    content_kind = parse_kind(kind)
    fields, files = await _read_submission(request)
    result = await run_update(
        UpdateContentInput(kind=content_kind, item_id=item_id, fields=fields, files=files),
        session.admin_service,
    )
    return _mutation_response(result)


@router.delete("/{kind}/{item_id}", response_model=MutationResponse)
async def delete_content(kind: str, item_id: str, session: SessionDep) -> MutationResponse:
    content_kind = parse_kind(kind)
    result = await run_delete(
        DeleteContentInput(kind=content_kind, item_id=item_id),
        session.admin_service,
    )
    return _mutation_response(result)
