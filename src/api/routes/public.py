"""
Public site routes: levels, home, list pages, detail pages and the chat assistant.

Every route reads the active level from the visitor session; list and detail
data come through that session's collection cache. Level configuration and
the assistant are shared by all visitors.
"""

from typing import Annotated

from fastapi import APIRouter, HTTPException, Query

from src.api.deps import ContextDep, SessionDep, parse_kind
from src.api.schemas import (
    ChatRequest,
    ChatResponse,
    DetailResponse,
    HomeResponse,
    LevelResponse,
    LevelsResponse,
    ListPageResponse,
    LoadMoreRequest,
    SelectLevelRequest,
    StatModel,
    dump_item,
    dump_items,
)
from src.app_shell.context import SiteContext
from src.app_shell.sessions import VisitorSession
from src.components.assistant import ChatInput, run_chat
from src.components.cache import (
    ALL_CATEGORY,
    ListPageInput,
    ListPageOutput,
    run_list_page,
    run_load_more,
)
from src.components.detail import DetailInput, DetailState, run_detail
from src.domain.entities import ContentKind, FacilityType
from src.domain.errors import FetchError

router = APIRouter()


def _levels_response(context: SiteContext, session: VisitorSession) -> LevelsResponse:
    store = context.levels
    selectable = set(store.selectable_levels())
    return LevelsResponse(
        active=session.active_level.current.value,
        is_universal=session.active_level.is_universal,
        loaded=store.is_loaded,
        levels=[
            LevelResponse(
                id=level.value,
                name=config.display_name,
                color=config.theme_color,
                type=config.type_label,
                selectable=level in selectable,
            )
            for level, config in store.current.items()
        ],
    )


def _list_response(output: ListPageOutput, jenjang: str, category: str) -> ListPageResponse:
    if not output.success and not output.items:
        raise HTTPException(status_code=502, detail=output.error or "Content API unavailable")
    return ListPageResponse(
        kind=output.kind.value,
        jenjang=jenjang,
        category=category,
        items=dump_items(output.items),
        categories=output.categories,
        has_more=output.has_more,
        error=output.error,
        trending=dump_items(output.trending),
    )


# --- Levels ---


@router.get("/levels", response_model=LevelsResponse)
def get_levels(context: ContextDep, session: SessionDep) -> LevelsResponse:
    """Level metadata (default until the API answers) and the active level."""
    return _levels_response(context, session)


@router.put("/levels/active", response_model=LevelsResponse)
def select_level(
    body: SelectLevelRequest, context: ContextDep, session: SessionDep
) -> LevelsResponse:
    """Change the level for this visitor only."""
    try:
        session.active_level.select(body.level)
    except ValueError as err:
        raise HTTPException(status_code=400, detail=str(err)) from err
    return _levels_response(context, session)


# --- Home ---


@router.get("/home", response_model=HomeResponse)
async def get_home(session: SessionDep) -> HomeResponse:
    level = session.active_level.current
    try:
        home = await session.cache.get_home(level)
    except FetchError as err:
        raise HTTPException(status_code=502, detail=str(err)) from err

    return HomeResponse(
        jenjang=level.value,
        news=dump_items(home.news),
        projects=dump_items(home.projects),
        journals=dump_items(home.journals),
        best_journals=dump_items(home.best_journals),
        stats=[StatModel(label=stat.label, value=stat.value) for stat in home.stats_for(level)],
        slides=[slide.model_dump(by_alias=True) for slide in home.slides],
        testimonials=[entry.model_dump(by_alias=True) for entry in home.testimonials],
        profile=home.profile.model_dump(by_alias=True) if home.profile else None,
    )


# --- Assistant ---


@router.post("/assistant/chat", response_model=ChatResponse)
async def chat(body: ChatRequest, context: ContextDep) -> ChatResponse:
    result = await run_chat(ChatInput(message=body.message), context.assistant)
    if result.error == "empty message":
        raise HTTPException(status_code=400, detail="Message is required")
    return ChatResponse(role=result.reply.role, text=result.reply.text, success=result.success)


# --- Collections ---


@router.get("/{kind}", response_model=ListPageResponse)
async def list_page(
    kind: str,
    session: SessionDep,
    category: str = ALL_CATEGORY,
    limit: Annotated[int | None, Query(ge=1)] = None,
    search: str | None = None,
    facility_type: Annotated[FacilityType | None, Query(alias="type")] = None,
) -> ListPageResponse:
    """
    List page data. Partial data from an earlier load is returned with an error.

    `search` matches title and excerpt; `type` picks the facility tab.
    """
    content_kind = parse_kind(kind)
    level = session.active_level.current
    output = await run_list_page(
        ListPageInput(
            kind=content_kind,
            jenjang=level,
            category=category,
            limit=limit,
            filter_client_side=content_kind == ContentKind.JOURNALS,
            search=search,
            facility_type=facility_type,
        ),
        session.cache,
    )
    return _list_response(output, level.value, category)


@router.post("/{kind}/more", response_model=ListPageResponse)
async def load_more(
    kind: str,
    session: SessionDep,
    body: LoadMoreRequest | None = None,
) -> ListPageResponse:
    content_kind = parse_kind(kind)
    level = session.active_level.current
    body = body or LoadMoreRequest()
    output = await run_load_more(
        content_kind,
        session.cache,
        jenjang=level,
        category=body.category,
        filter_client_side=content_kind == ContentKind.JOURNALS,
        search=body.search,
        facility_type=body.type,
    )
    return _list_response(output, level.value, body.category)


@router.get("/{kind}/{item_id}", response_model=DetailResponse)
async def detail_page(kind: str, item_id: str, session: SessionDep) -> DetailResponse:
    """Cached summary if any, confirmed against the API before answering."""
    content_kind = parse_kind(kind)
    result = await run_detail(
        DetailInput(kind=content_kind, item_id=item_id),
        session.detail_resolver,
    )
    if result.state == DetailState.NOT_FOUND or result.item is None:
        raise HTTPException(status_code=404, detail=result.error or "Content not found")

    return DetailResponse(
        kind=content_kind.value,
        id=item_id,
        state=result.state.value,
        item=dump_item(result.item),
        related=dump_items(result.related),
        is_stale=result.is_stale,
    )
