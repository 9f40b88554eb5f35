"""
Detail component - Single item pages.

Shell Layer - handles I/O and error conversion.
"""

from __future__ import annotations

from ._impl import DetailResolver, DetailView
from .models import DetailInput, DetailOutput


async def run_detail(input_data: DetailInput, resolver: DetailResolver) -> DetailOutput:
    """Resolve a detail page to its settled state."""
    view = DetailView(resolver, input_data.kind, input_data.item_id)
    state = await view.load()

    return DetailOutput(
        kind=input_data.kind,
        item_id=input_data.item_id,
        state=state,
        item=view.item,
        related=view.related,
        is_stale=view.is_stale,
        error=str(view.error) if view.error else None,
    )
