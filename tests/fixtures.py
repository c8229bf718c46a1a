"""Sample annotation records for thread item tests"""

from typing import Any, Dict, List

from discussion_threads import ThreadItem


def heading_record(item_id: str, replies: List[str], **extra: Any) -> Dict[str, Any]:
    """Create a heading record as emitted by the annotator"""
    record = {"type": "heading", "id": item_id, "level": 0, "replies": replies}
    record.update(extra)
    return record


def comment_record(
    item_id: str,
    level: int,
    replies: List[str],
    author: str = "Alice Smith",
    timestamp: str = "2023-10-20T10:00:00Z",
    **extra: Any
) -> Dict[str, Any]:
    """Create a comment record as emitted by the annotator"""
    record = {
        "type": "comment",
        "id": item_id,
        "level": level,
        "replies": replies,
        "author": author,
        "timestamp": timestamp,
    }
    record.update(extra)
    return record


def sample_discussion() -> List[Dict[str, Any]]:
    """One section with nested replies

    Wikitext equivalent:

        == A ==
        B. ~~~~
        : C. ~~~~
        :: D. ~~~~
        ::: E. ~~~~
        ::: F. ~~~~
        : G. ~~~~
        H. ~~~~
        : I. ~~~~
    """
    return [
        heading_record("h-A", ["c-B", "c-H"], headingLevel=2),
        comment_record("c-B", 1, ["c-C", "c-G"], author="Bob", timestamp="2023-10-20T10:00:00Z"),
        comment_record("c-C", 2, ["c-D"], author="Carol", timestamp="2023-10-20T10:05:00Z"),
        comment_record("c-D", 3, ["c-E", "c-F"], author="Dave", timestamp="2023-10-20T10:10:00Z"),
        comment_record("c-E", 4, [], author="Erin", timestamp="2023-10-20T10:15:00Z"),
        comment_record("c-F", 4, [], author="Frank", timestamp="2023-10-20T10:20:00Z"),
        comment_record("c-G", 2, [], author="Grace", timestamp="2023-10-20T10:25:00Z"),
        comment_record("c-H", 1, ["c-I"], author="Heidi", timestamp="2023-10-20T09:00:00Z"),
        comment_record("c-I", 2, [], author="Ivan", timestamp="2023-10-20T11:00:00Z"),
    ]


def two_section_discussion() -> List[Dict[str, Any]]:
    """Two sections, each with one comment and one reply"""
    return [
        heading_record("h-1", ["c-1"]),
        comment_record("c-1", 1, ["c-2"], author="Alice Smith", timestamp="2023-10-20T10:00:00Z"),
        comment_record("c-2", 2, [], author="Bob", timestamp="2023-10-20T10:30:00Z"),
        heading_record("h-2", ["c-3"]),
        comment_record("c-3", 1, ["c-4"], author="Carol", timestamp="2023-10-21T08:00:00Z"),
        comment_record("c-4", 2, [], author="Alice Smith", timestamp="2023-10-21T09:00:00Z"),
    ]


def name_by_id(item: ThreadItem) -> str:
    """Name computer that reuses the id"""
    return f"name-{item.id}"


class RecordingNamer:
    """Name computer that records each call and the links it could see"""

    def __init__(self, names=None):
        self.names = names or {}
        self.calls: List[str] = []
        self.seen_parents: Dict[str, Any] = {}
        self.seen_replies: Dict[str, List[str]] = {}

    def __call__(self, item: ThreadItem) -> str:
        self.calls.append(item.id)
        self.seen_parents[item.id] = item.parent.id if item.parent else None
        self.seen_replies[item.id] = [reply.id for reply in item.replies]
        return self.names.get(item.id, f"name-{item.id}")
