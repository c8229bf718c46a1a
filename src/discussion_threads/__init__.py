"""Discussion Threads - Rebuild reply trees and lookups from annotated discussion pages"""

from .thread_items import (
    ThreadItemRecord,
    ThreadItem,
    HeadingItem,
    CommentItem,
)
from .thread_item_set import ThreadItemSet, UnresolvedReply
from .naming import compute_name
from .thread_view_formatter import ThreadViewFormatter, ViewContext
from .cli import cli

__all__ = [
    "ThreadItemRecord",
    "ThreadItem",
    "HeadingItem",
    "CommentItem",
    "ThreadItemSet",
    "UnresolvedReply",
    "compute_name",
    "ThreadViewFormatter",
    "ViewContext",
    "cli",
]
