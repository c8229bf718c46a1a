"""Test default thread item names"""

import pytest
from datetime import datetime, timedelta, timezone

from discussion_threads import (
    CommentItem,
    ThreadItem,
    ThreadItemSet,
    compute_name,
)
from tests.fixtures import comment_record, heading_record, sample_discussion


class TestCommentNames:
    """Test names of comments"""

    def test_author_and_timestamp(self):
        """Test comment name combines author and UTC timestamp"""
        comment = CommentItem(
            id="c1",
            level=1,
            author="Alice Smith",
            timestamp=datetime(2023, 10, 20, 10, 0, tzinfo=timezone.utc),
        )
        assert compute_name(comment) == "c-Alice_Smith-20231020100000"

    def test_timestamp_converted_to_utc(self):
        """Test offsets are normalized before formatting"""
        comment = CommentItem(
            id="c1",
            level=1,
            author="Bob",
            timestamp=datetime(2023, 10, 20, 12, 0, tzinfo=timezone(timedelta(hours=2))),
        )
        assert compute_name(comment) == "c-Bob-20231020100000"

    def test_missing_author_and_timestamp(self):
        """Test stale records without signature data still get a name"""
        assert compute_name(CommentItem(id="c1", level=1)) == "c--"

    def test_unknown_item_type(self):
        """Test the bare base class cannot be named"""
        with pytest.raises(TypeError):
            compute_name(ThreadItem(id="x", level=0))


class TestHeadingNames:
    """Test names of headings"""

    def test_heading_uses_oldest_reply(self):
        """Test heading name comes from its earliest linked comment"""
        item_set = ThreadItemSet.from_annotated_records(sample_discussion(), compute_name)
        heading = item_set.get_threads()[0]
        assert heading.name == "h-Heidi-20231020090000"

    def test_heading_without_comments(self):
        """Test empty section heading is named h-"""
        item_set = ThreadItemSet.from_annotated_records([heading_record("h1", [])], compute_name)
        assert item_set.get_threads()[0].name == "h-"


class TestNamesInSet:
    """Test default names used as lookup keys"""

    def test_find_by_default_name(self):
        """Test comments are found by their computed names"""
        item_set = ThreadItemSet.from_annotated_records(sample_discussion(), compute_name)
        matches = item_set.find_comments_by_name("c-Dave-20231020101000")
        assert [item.id for item in matches] == ["c-D"]

    def test_same_author_same_time_shares_name(self):
        """Test indistinguishable comments share a name and differ by id"""
        records = [
            heading_record("h1", ["c1", "c2"]),
            comment_record("c1", 1, [], author="Alice", timestamp="2023-10-20T10:00:00Z"),
            comment_record("c2", 1, [], author="Alice", timestamp="2023-10-20T10:00:00Z"),
        ]
        item_set = ThreadItemSet.from_annotated_records(records, compute_name)
        matches = item_set.find_comments_by_name("c-Alice-20231020100000")
        assert [item.id for item in matches] == ["c1", "c2"]

    def test_one_second_apart_names_differ(self):
        """Test names distinguish signatures down to the second"""
        records = [
            heading_record("h1", ["c1", "c2"]),
            comment_record("c1", 1, [], author="Alice", timestamp="2023-10-20T10:00:00Z"),
            comment_record("c2", 1, [], author="Alice", timestamp="2023-10-20T10:00:01Z"),
        ]
        item_set = ThreadItemSet.from_annotated_records(records, compute_name)

        assert [item.id for item in item_set.find_comments_by_name("c-Alice-20231020100000")] == ["c1"]
        assert [item.id for item in item_set.find_comments_by_name("c-Alice-20231020100001")] == ["c2"]
