"""Group thread items parsed from a discussion page

Rebuilds reply trees from annotated per-node records and indexes the items
by name and id.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Iterator, List, Mapping, Optional, Union

from .thread_items import CommentItem, HeadingItem, ThreadItem, ThreadItemRecord

logger = logging.getLogger(__name__)

NameComputer = Callable[[ThreadItem], str]
RawRecord = Union[ThreadItemRecord, Mapping[str, Any]]


@dataclass(frozen=True)
class UnresolvedReply:
    """A reply id declared by an item that matches no item in the set"""
    item_id: str
    reply_id: str


class ThreadItemSet:
    """Headings and comments from one parse of a discussion page

    Holds three views of the same items (all items, comments only, and
    headings as thread roots) plus name and id indices.

    Example:
        >>> records = [
        ...     {"type": "heading", "id": "h1", "level": 0, "replies": ["c1"]},
        ...     {"type": "comment", "id": "c1", "level": 1, "replies": []},
        ... ]
        >>> item_set = ThreadItemSet.from_annotated_records(records, compute_name)
        >>> item_set.find_comment_by_id("c1").parent.id
        'h1'
    """

    def __init__(self):
        self._thread_items: List[ThreadItem] = []
        self._comment_items: List[CommentItem] = []
        self._threads: List[HeadingItem] = []
        self._thread_items_by_name: Dict[str, List[ThreadItem]] = {}
        self._thread_items_by_id: Dict[str, ThreadItem] = {}
        self._unresolved_replies: List[UnresolvedReply] = []

    @classmethod
    def from_annotated_records(
        cls,
        records: Iterable[RawRecord],
        compute_name: NameComputer,
    ) -> "ThreadItemSet":
        """Create a ThreadItemSet from annotated per-node records

        Records may come from a cached page written by an older annotator.
        Only type, id, level and replies are relied on.

        Args:
            records: Records in document order, as ThreadItemRecord or dicts
            compute_name: Called once per item, after its links are resolved

        Returns:
            Fully linked ThreadItemSet. Reply ids that match no record are
            skipped and reported by get_unresolved_replies().

        Raises:
            pydantic.ValidationError: A dict record lacks type, id or level
        """
        result = cls()

        items: List[ThreadItem] = []
        reply_ids: List[List[str]] = []
        items_by_id: Dict[str, ThreadItem] = {}

        # Create items with basic data
        for raw in records:
            if isinstance(raw, ThreadItemRecord):
                record = raw
            else:
                record = ThreadItemRecord.model_validate(raw)
            item = ThreadItem.from_record(record)
            result.add_thread_item(item)

            # Store info for second pass
            items.append(item)
            reply_ids.append(record.replies)
            items_by_id[item.id] = item

        logger.debug(f"Created {len(items)} thread items")

        # Now that all items exist, set up replies/parent links
        for item, ids in zip(items, reply_ids):
            replies = []
            for reply_id in ids:
                target = items_by_id.get(reply_id)
                if target is None:
                    logger.warning(f"Thread item {item.id} declares unknown reply {reply_id}")
                    result._unresolved_replies.append(UnresolvedReply(item.id, reply_id))
                    continue
                target.parent = item
                replies.append(target)
            item.replies = replies

            # Names are not part of the annotation metadata
            item.name = compute_name(item)

            result.update_id_and_name_maps(item)

        logger.debug(
            f"Linked {len(result._threads)} threads, "
            f"{len(result._comment_items)} comments"
        )
        return result

    @classmethod
    def from_annotated_json(
        cls,
        payloads: Iterable[str],
        compute_name: NameComputer,
    ) -> "ThreadItemSet":
        """Create a ThreadItemSet from raw data-mw-comment JSON strings"""
        records = (ThreadItemRecord.from_json(payload) for payload in payloads)
        return cls.from_annotated_records(records, compute_name)

    def add_thread_item(self, item: ThreadItem) -> None:
        """Register an item in the flat list and in its variant's view"""
        item.position = len(self._thread_items)
        item._arena = self._thread_items
        self._thread_items.append(item)
        if isinstance(item, CommentItem):
            self._comment_items.append(item)
        elif isinstance(item, HeadingItem):
            self._threads.append(item)
        else:
            raise TypeError(f"Unsupported thread item: {type(item).__name__}")

    def update_id_and_name_maps(self, item: ThreadItem) -> None:
        """Index a named item by name and id"""
        self._thread_items_by_name.setdefault(item.name, []).append(item)

        if item.id in self._thread_items_by_id:
            logger.warning(f"Duplicate thread item id {item.id}, keeping the later item")
        self._thread_items_by_id[item.id] = item

    def is_empty(self) -> bool:
        return len(self._thread_items) == 0

    def get_thread_items(self) -> List[ThreadItem]:
        """Get all headings and comments as a flat list

        Use get_threads() for the tree structure starting at headings.

        For a discussion like this (wikitext for illustration only):

            == A ==
            B. ~~~~
            : C.
            : C. ~~~~
            :: D. ~~~~
            ::: E. ~~~~
            ::: F. ~~~~
            : G. ~~~~
            H. ~~~~
            : I. ~~~~

        the result is in document order:

            [
              HeadingItem(level=0, A),
              CommentItem(level=1, B),
              CommentItem(level=2, C),
              CommentItem(level=3, D),
              CommentItem(level=4, E),
              CommentItem(level=4, F),
              CommentItem(level=2, G),
              CommentItem(level=1, H),
              CommentItem(level=2, I),
            ]
        """
        return list(self._thread_items)

    def get_comment_items(self) -> List[CommentItem]:
        """Same as get_thread_items(), but only the comments"""
        return list(self._comment_items)

    def get_threads(self) -> List[HeadingItem]:
        """Get the headings, each the root of its reply tree

        For the discussion shown in get_thread_items(), the single heading A
        has replies [B, H]; B has [C, G]; C has [D]; D has [E, F]; H has [I].
        """
        return list(self._threads)

    def find_comments_by_name(self, name: str) -> List[ThreadItem]:
        """Find thread items by name

        Usually returns one item, but items that are indistinguishable by
        name are all returned. Use their ids to disambiguate.
        """
        return list(self._thread_items_by_name.get(name, []))

    def find_comment_by_id(self, item_id: str) -> Optional[ThreadItem]:
        """Find a thread item by id, None if not found"""
        return self._thread_items_by_id.get(item_id)

    def get_unresolved_replies(self) -> List[UnresolvedReply]:
        """Reply ids skipped during reconstruction"""
        return list(self._unresolved_replies)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-friendly summary"""
        return {
            "thread_count": len(self._threads),
            "comment_count": len(self._comment_items),
            "items": [item.to_dict() for item in self._thread_items],
            "unresolved_replies": [
                {"item_id": ref.item_id, "reply_id": ref.reply_id}
                for ref in self._unresolved_replies
            ],
        }

    def __len__(self) -> int:
        return len(self._thread_items)

    def __iter__(self) -> Iterator[ThreadItem]:
        return iter(self._thread_items)
