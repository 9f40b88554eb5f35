"""
Detail component - cache-then-confirm resolution of single items.
"""

from ._impl import DetailResolver, DetailView, pick_related
from .component import run_detail
from .models import DetailInput, DetailOutput, DetailResolution, DetailState

__all__ = [
    # Component entry points
    "run_detail",
    # Models
    "DetailInput",
    "DetailOutput",
    "DetailResolution",
    "DetailState",
    # Implementation
    "DetailResolver",
    "DetailView",
    "pick_related",
]
