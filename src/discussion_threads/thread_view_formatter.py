"""Format a ThreadItemSet into a readable text outline

One block per thread, replies indented under the item they answer.
"""

from dataclasses import dataclass
from typing import List, Optional

from .thread_item_set import ThreadItemSet
from .thread_items import CommentItem, HeadingItem, ThreadItem


@dataclass
class ViewContext:
    """Context information for view formatting

    Attributes:
        page_title: Title of the discussion page
        source: Optional description of where the annotations came from
    """
    page_title: str
    source: Optional[str] = None


class ThreadViewFormatter:
    """Format thread trees into an indented text view

    Example:
        >>> formatter = ThreadViewFormatter()
        >>> view = formatter.format(item_set, ViewContext(page_title="Talk:Example"))
        >>> print(view)
    """

    def __init__(self, indent: str = "  ", show_names: bool = True):
        """Initialize formatter

        Args:
            indent: Indentation added per reply depth
            show_names: Whether to include computed names next to ids
        """
        self.indent = indent
        self.show_names = show_names

    def format(self, item_set: ThreadItemSet, context: ViewContext) -> str:
        if item_set.is_empty():
            return self._format_empty_view(context)

        output_lines = []
        output_lines.extend(self._format_header(context))
        output_lines.append("")

        for heading in item_set.get_threads():
            output_lines.extend(self._format_thread(heading))
            output_lines.append("")
            output_lines.append("-" * 60)
            output_lines.append("")

        output_lines.extend(self._format_summary(item_set))

        return "\n".join(output_lines)

    def _format_header(self, context: ViewContext) -> List[str]:
        lines = []
        lines.append("=" * 80)
        lines.append(f"💬 DISCUSSION: {context.page_title}")
        if context.source:
            lines.append(f"📄 SOURCE: {context.source}")
        lines.append("=" * 80)
        return lines

    def _format_thread(self, heading: HeadingItem) -> List[str]:
        """Format a heading and every item below it"""
        lines = [self._format_item(heading)]
        seen = {id(heading)}

        # Iterative walk; malformed input may link an item twice
        stack = [(reply, 1) for reply in reversed(heading.replies)]
        while stack:
            item, depth = stack.pop()
            if id(item) in seen:
                continue
            seen.add(id(item))
            lines.append(f"{self.indent * depth}↳ {self._format_item(item)}")
            stack.extend((reply, depth + 1) for reply in reversed(item.replies))

        return lines

    def _format_item(self, item: ThreadItem) -> str:
        label = item.id
        if self.show_names and item.name:
            label = f"{item.name} ({item.id})"

        if isinstance(item, HeadingItem):
            placeholder = " [placeholder]" if item.placeholder_heading else ""
            return f"🧵 HEADING {label}{placeholder}"
        elif isinstance(item, CommentItem):
            author = item.author or "Unknown Author"
            return f"COMMENT {label} by {author}"
        return label

    def _format_summary(self, item_set: ThreadItemSet) -> List[str]:
        lines = []
        lines.append("📊 DISCUSSION SUMMARY:")
        lines.append(f"   • Threads: {len(item_set.get_threads())}")
        lines.append(f"   • Comments: {len(item_set.get_comment_items())}")

        unresolved = item_set.get_unresolved_replies()
        if unresolved:
            lines.append(f"   • Unresolved replies: {len(unresolved)}")

        return lines

    def _format_empty_view(self, context: ViewContext) -> str:
        lines = []
        lines.extend(self._format_header(context))
        lines.append("")
        lines.append("No thread items found on this page.")
        lines.append("")
        lines.append("=" * 80)
        return "\n".join(lines)
