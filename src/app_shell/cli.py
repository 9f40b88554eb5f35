import argparse
import asyncio
import logging
import sys

from src.app_shell.context import ConfigurationError, SiteContext, build_context
from src.app_shell.sessions import VisitorSession
from src.components.admin import DeleteContentInput, run_delete
from src.components.assistant import ChatInput, DraftInput, run_chat, run_draft
from src.components.cache import ListPageInput, run_admin_list, run_list_page
from src.components.detail import DetailInput, run_detail
from src.components.levels import run_fetch_config
from src.domain.entities import ContentItem, ContentKind
from src.domain.errors import FetchError

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("cli")


def get_context() -> SiteContext:
    try:
        return build_context()
    except ConfigurationError as e:
        logger.error(f"Configuration invalid: {e}")
        sys.exit(1)


def _title(item: ContentItem) -> str:
    return item.title


async def handle_levels(
    ctx: SiteContext, session: VisitorSession, args: argparse.Namespace
) -> None:
    result = await run_fetch_config(ctx.levels)
    if not result.loaded:
        print(f"(defaults; {result.error})")
    for level, config in ctx.levels.current.items():
        marker = "*" if level == session.active_level.current else " "
        print(
            f"{marker} {level.value:<7} {config.display_name} "
            f"[{config.theme_color}] {config.type_label}"
        )


async def handle_list(
    ctx: SiteContext, session: VisitorSession, args: argparse.Namespace
) -> None:
    kind = ContentKind(args.kind)
    if args.level:
        session.active_level.select(args.level)

    output = await run_list_page(
        ListPageInput(
            kind=kind,
            jenjang=session.active_level.current,
            category=args.category,
            limit=args.limit,
            filter_client_side=kind == ContentKind.JOURNALS,
            search=args.search,
            facility_type=args.facility_type,
        ),
        session.cache,
    )
    if not output.success:
        logger.error(f"Failed to load {kind.value}: {output.error}")
        sys.exit(1)

    print(f"Categories: {', '.join(output.categories)}")
    for item in output.items:
        print(f" - [{item.id}] {_title(item)} ({item.jenjang.value}, {item.category or '-'})")
    if output.has_more:
        print("(more available)")
    for item in output.trending:
        print(f" * trending: [{item.id}] {_title(item)}")


async def handle_detail(
    ctx: SiteContext, session: VisitorSession, args: argparse.Namespace
) -> None:
    kind = ContentKind(args.kind)
    output = await run_detail(DetailInput(kind=kind, item_id=args.id), session.detail_resolver)
    if not output.success or output.item is None:
        logger.error(output.error or f"{kind.value} '{args.id}' not found")
        sys.exit(1)

    print(_title(output.item))
    if output.is_stale:
        print("(cached copy; the content API did not confirm it)")
    for related in output.related:
        print(f"  related: [{related.id}] {_title(related)}")


async def handle_ask(
    ctx: SiteContext, session: VisitorSession, args: argparse.Namespace
) -> None:
    output = await run_chat(ChatInput(message=args.message), ctx.assistant)
    print(output.reply.text)


async def handle_draft(
    ctx: SiteContext, session: VisitorSession, args: argparse.Namespace
) -> None:
    output = await run_draft(DraftInput(brief=args.brief), ctx.assistant)
    if not output.success:
        logger.error(f"Draft failed: {output.error}")
        sys.exit(1)
    print(output.text)


async def handle_admin_list(
    ctx: SiteContext, session: VisitorSession, args: argparse.Namespace
) -> None:
    kind = ContentKind(args.kind)
    try:
        listing = await run_admin_list(kind, session.admin_cache, force_refresh=args.refresh)
    except FetchError as e:
        logger.error(f"Failed to load admin {kind.value}: {e}")
        sys.exit(1)

    source = "session cache" if listing.from_cache else "content API"
    print(f"{len(listing.items)} {kind.value} from {source} at {listing.fetched_at.isoformat()}")
    for item in listing.items:
        print(f" - [{item.id}] {_title(item)}")


async def handle_delete(
    ctx: SiteContext, session: VisitorSession, args: argparse.Namespace
) -> None:
    kind = ContentKind(args.kind)
    output = await run_delete(DeleteContentInput(kind=kind, item_id=args.id), session.admin_service)
    if not output.success:
        logger.error(f"Delete failed: {output.message}")
        sys.exit(1)
    print(output.message or f"Deleted {kind.value} {args.id}")


HANDLERS = {
    "levels": handle_levels,
    "list": handle_list,
    "detail": handle_detail,
    "ask": handle_ask,
    "draft": handle_draft,
    "admin-list": handle_admin_list,
    "delete": handle_delete,
}


async def run_command(ctx: SiteContext, args: argparse.Namespace) -> None:
    try:
        await HANDLERS[args.command](ctx, ctx.sessions.open(), args)
    finally:
        await ctx.aclose()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="School site CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)
    kinds = [kind.value for kind in ContentKind]

    # levels
    subparsers.add_parser("levels", help="Show level configuration and the active level")

    # list
    list_parser = subparsers.add_parser("list", help="List a content collection")
    list_parser.add_argument("kind", choices=kinds)
    list_parser.add_argument("--level", help="Level to select first (e.g. SMP)")
    list_parser.add_argument("--category", default="All", help="Category filter")
    list_parser.add_argument("--limit", type=int, help="Number of items to request")
    list_parser.add_argument("--search", help="Match title or excerpt")
    list_parser.add_argument(
        "--type", dest="facility_type", choices=["Ruang", "Ekstra"], help="Facility tab"
    )

    # detail
    detail_parser = subparsers.add_parser("detail", help="Show one item")
    detail_parser.add_argument("kind", choices=kinds)
    detail_parser.add_argument("id")

    # ask
    ask_parser = subparsers.add_parser("ask", help="Ask the school assistant")
    ask_parser.add_argument("message")

    # draft
    draft_parser = subparsers.add_parser("draft", help="Draft a news article")
    draft_parser.add_argument("brief", help="Short description of the activity")

    # admin-list
    admin_parser = subparsers.add_parser("admin-list", help="Admin list view")
    admin_parser.add_argument("kind", choices=kinds)
    admin_parser.add_argument("--refresh", action="store_true", help="Ignore the session snapshot")

    # delete
    delete_parser = subparsers.add_parser("delete", help="Delete an item")
    delete_parser.add_argument("kind", choices=kinds)
    delete_parser.add_argument("id")

    return parser


def main() -> None:
    args = build_parser().parse_args()
    ctx = get_context()

    try:
        asyncio.run(run_command(ctx, args))
    except ValueError as e:
        logger.error(str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
