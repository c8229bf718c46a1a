"""Default names for thread items

Names identify an item across page revisions and cached copies of a page.
They are built from the author and signature timestamp, so two comments
signed by the same person in the same second share a name.
"""

from .thread_items import CommentItem, HeadingItem, ThreadItem


def compute_name(item: ThreadItem) -> str:
    """Compute the name of a thread item

    Comments are named ``c-<author>-<timestamp>``. Headings take the same
    suffix from their oldest reply, or are named ``h-`` when there is none.
    Spaces in author names become underscores.

    Example:
        >>> compute_name(comment)  # Alice Smith at 2023-10-20 10:00 UTC
        'c-Alice_Smith-20231020100000'
    """
    if isinstance(item, HeadingItem):
        name = "h-"
        main_comment = item.get_oldest_reply()
    elif isinstance(item, CommentItem):
        name = "c-"
        main_comment = item
    else:
        raise TypeError(f"Cannot name {type(item).__name__}")

    if main_comment is not None:
        author = (main_comment.author or "").replace(" ", "_")
        name += f"{author}-{main_comment.get_timestamp_string()}"

    return name
