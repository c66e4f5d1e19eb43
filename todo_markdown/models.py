"""Data models for todo-markdown."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field


@dataclass
class TodoItem:
    """A checkbox line and the items nested beneath it.

    Attributes:
        id: Identity derived from line, depth and text; only stable within a
            single parse.
        text: Display text with one wrapping layer of ``~~`` removed.
        original_text: Text after the checkbox exactly as written (trimmed).
        completed: Whether the checkbox is ticked.
        line: Zero-based line index in the source document.
        depth: Nesting level between 0 and 3.
        children: Nested items in source order.
        parent: Item this one is nested under, or None for section roots.
            Set by `add_child`; excluded from repr and equality.
    """

    id: str
    text: str
    original_text: str
    completed: bool
    line: int
    depth: int
    children: list[TodoItem] = field(default_factory=list)
    parent: TodoItem | None = field(default=None, init=False, repr=False, compare=False)

    def add_child(self, child: TodoItem) -> None:
        child.parent = self
        self.children.append(child)

    def walk(self) -> Iterator[TodoItem]:
        """Yield this item and its descendants in source order."""
        yield self
        for child in self.children:
            yield from child.walk()


@dataclass
class TodoSection:
    """Heading-delimited group of todo items.

    Attributes:
        title: Heading text without leading ``#`` markers.
        items: Top-level items (depth 0) in source order.
        line: Zero-based line index of the heading.
    """

    title: str
    items: list[TodoItem] = field(default_factory=list)
    line: int = 0

    def walk(self) -> Iterator[TodoItem]:
        for item in self.items:
            yield from item.walk()

    def count_items(self) -> int:
        return sum(1 for _ in self.walk())


def find_item_by_line(sections: list[TodoSection], line: int) -> TodoItem | None:
    """Locate the item parsed from `line`.

    Args:
        sections: Sections returned by `parse_todos`.
        line: Zero-based line index.

    Returns:
        TodoItem | None: The matching item, or None when the line holds no item.

    Examples:
        find_item_by_line(parse_todos("- [ ] Task"), 0)
    """
    for section in sections:
        for item in section.walk():
            if item.line == line:
                return item
    return None
