"""Thread item model: raw annotation records and the heading/comment items built from them

A discussion page is annotated upstream with one ``data-mw-comment`` JSON
payload per heading or comment. ``ThreadItemRecord`` validates one payload;
``HeadingItem`` and ``CommentItem`` are the linked objects a ThreadItemSet
owns after reconstruction.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, ClassVar, Dict, List, Literal, Optional

from pydantic import (
    BaseModel,
    Field,
    ValidationError,
    ValidationInfo,
    ValidatorFunctionWrapHandler,
    field_validator,
)

logger = logging.getLogger(__name__)


class ThreadItemRecord(BaseModel):
    """Per-node metadata emitted by the annotator

    Pages may be served from an HTTP cache holding payloads written by an
    older annotator, so only ``type``, ``id``, ``level`` and ``replies`` are
    checked strictly. Unreadable optional fields fall back to their defaults.
    """

    type: Literal["heading", "comment"]
    id: str
    level: int
    replies: List[str] = Field(default_factory=list)

    # Comment fields
    author: Optional[str] = None
    timestamp: Optional[datetime] = None

    # Heading fields
    heading_level: Optional[int] = Field(default=None, alias="headingLevel")
    placeholder_heading: bool = Field(default=False, alias="placeholderHeading")

    class Config:
        extra = "allow"  # Newer annotators may add fields
        populate_by_name = True

    @field_validator("author", "timestamp", "heading_level", "placeholder_heading", mode="wrap")
    @classmethod
    def lenient_optional_field(
        cls, v: Any, handler: ValidatorFunctionWrapHandler, info: ValidationInfo
    ) -> Any:
        try:
            return handler(v)
        except ValidationError:
            default = cls.model_fields[info.field_name].default
            logger.warning(f"Ignoring unreadable {info.field_name} {v!r} in thread item record")
            return default

    @classmethod
    def from_json(cls, payload: str) -> "ThreadItemRecord":
        """Parse a raw data-mw-comment attribute value"""
        return cls.model_validate_json(payload)


def _as_utc(value: datetime) -> datetime:
    """Treat naive timestamps as UTC so they compare with aware ones"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass(eq=False)
class ThreadItem:
    """A heading or comment on a discussion page

    ``parent`` is stored as a position in the owning set's item list rather
    than as a reference, and resolved on access. ``position`` and the arena
    are assigned when the item is registered with a ThreadItemSet.
    """

    type: ClassVar[str] = ""

    id: str
    level: int
    name: Optional[str] = None
    replies: List["ThreadItem"] = field(default_factory=list, repr=False)
    position: int = field(default=-1, repr=False)
    _arena: List["ThreadItem"] = field(default_factory=list, repr=False)
    _parent_position: Optional[int] = field(default=None, repr=False)

    @staticmethod
    def from_record(record: ThreadItemRecord) -> "ThreadItem":
        """Build the item variant matching ``record.type``"""
        if record.type == "heading":
            return HeadingItem(
                id=record.id,
                level=record.level,
                heading_level=record.heading_level,
                placeholder_heading=record.placeholder_heading,
            )
        elif record.type == "comment":
            return CommentItem(
                id=record.id,
                level=record.level,
                author=record.author,
                timestamp=record.timestamp,
            )
        raise ValueError(f"Unknown thread item type: {record.type!r}")

    @property
    def parent(self) -> Optional["ThreadItem"]:
        """Item this one replies to, or None for a thread root"""
        if self._parent_position is None:
            return None
        return self._arena[self._parent_position]

    @parent.setter
    def parent(self, item: Optional["ThreadItem"]) -> None:
        if item is None:
            self._parent_position = None
            return
        if item.position < 0 or item._arena is not self._arena:
            raise ValueError(f"Parent {item.id} is not registered in the same set as {self.id}")
        self._parent_position = item.position

    def get_heading(self) -> Optional["HeadingItem"]:
        """Walk up the parent chain to the heading that roots this thread

        Returns None when the chain ends without a heading, or loops.
        """
        seen = set()
        item: Optional[ThreadItem] = self
        while item is not None and id(item) not in seen:
            if isinstance(item, HeadingItem):
                return item
            seen.add(id(item))
            item = item.parent
        return None

    def get_thread_items_below(self) -> List["ThreadItem"]:
        """All items below this one, in pre-order"""
        result: List[ThreadItem] = []
        seen = {id(self)}
        stack = list(reversed(self.replies))
        while stack:
            item = stack.pop()
            if id(item) in seen:
                continue
            seen.add(id(item))
            result.append(item)
            stack.extend(reversed(item.replies))
        return result

    def get_authors_below(self) -> List[str]:
        """Sorted unique authors of comments at and below this item"""
        authors = set()
        for item in [self] + self.get_thread_items_below():
            if isinstance(item, CommentItem) and item.author:
                authors.add(item.author)
        return sorted(authors)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the record shape, with replies as ids"""
        return {
            "type": self.type,
            "id": self.id,
            "name": self.name,
            "level": self.level,
            "replies": [reply.id for reply in self.replies],
        }


@dataclass(eq=False)
class HeadingItem(ThreadItem):
    """Section heading; the root of one thread"""

    type: ClassVar[str] = "heading"

    heading_level: Optional[int] = None
    placeholder_heading: bool = False

    def get_oldest_reply(self) -> Optional["CommentItem"]:
        """Comment below this heading with the earliest timestamp"""
        oldest: Optional[CommentItem] = None
        for item in self.get_thread_items_below():
            if not isinstance(item, CommentItem) or item.timestamp is None:
                continue
            if oldest is None or _as_utc(item.timestamp) < _as_utc(oldest.timestamp):
                oldest = item
        return oldest

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["heading_level"] = self.heading_level
        data["placeholder_heading"] = self.placeholder_heading
        return data


@dataclass(eq=False)
class CommentItem(ThreadItem):
    """Signed comment, possibly with replies"""

    type: ClassVar[str] = "comment"

    author: Optional[str] = None
    timestamp: Optional[datetime] = None

    def get_timestamp_string(self) -> str:
        """UTC timestamp as YYYYMMDDHHMMSS, empty when unknown"""
        if self.timestamp is None:
            return ""
        return _as_utc(self.timestamp).strftime("%Y%m%d%H%M%S")

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["author"] = self.author
        data["timestamp"] = _as_utc(self.timestamp).isoformat() if self.timestamp else None
        return data
