"""
Cache component - session-scoped collection caching.
"""

from ._admin import AdminListCache, admin_keys
from ._impl import CollectionCache, filter_items, trending
from .component import run_admin_list, run_list_page, run_load_more
from .models import (
    ALL_CATEGORY,
    AdminListing,
    BucketSnapshot,
    CacheBucket,
    HomeSnapshot,
    ListPageInput,
    ListPageOutput,
)

__all__ = [
    # Component entry points
    "run_list_page",
    "run_load_more",
    "run_admin_list",
    # Models
    "AdminListing",
    "BucketSnapshot",
    "CacheBucket",
    "HomeSnapshot",
    "ListPageInput",
    "ListPageOutput",
    # Implementation
    "AdminListCache",
    "CollectionCache",
    "admin_keys",
    "filter_items",
    "trending",
    # Constants
    "ALL_CATEGORY",
]
