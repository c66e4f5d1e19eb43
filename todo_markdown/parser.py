"""Markdown todo parsing utilities."""

from __future__ import annotations

from .constants import (
    GENERAL_SECTION_TITLE,
    HEADING_MARKER,
    HEADING_PREFIX_PATTERN,
    LEADING_WHITESPACE_PATTERN,
    LINE_SEPARATOR,
    MAX_DEPTH,
    SPACES_PER_LEVEL,
    STRIKETHROUGH,
    TODO_PATTERN,
)
from .models import TodoItem, TodoSection


def is_todo_line(line: str) -> bool:
    """Check whether a line is a checkbox list item.

    Args:
        line: A single line without its trailing newline.

    Returns:
        bool: True for lines such as ``"- [ ] Task"`` or ``"  * [x] Done"``.

    Examples:
        is_todo_line("+ [X] Shipped")  # True
        is_todo_line("- [] Missing space")  # False
    """
    return TODO_PATTERN.match(line) is not None


def is_struck(text: str) -> bool:
    """Return True when `text` is fully wrapped in a non-empty ``~~`` pair."""
    return (
        len(text) > 2 * len(STRIKETHROUGH)
        and text.startswith(STRIKETHROUGH)
        and text.endswith(STRIKETHROUGH)
    )


def strip_strikethrough(text: str) -> str:
    """Remove a single wrapping layer of strikethrough.

    Emphasis markers other than ``~~`` are left untouched, as is text that is
    only partially struck.

    Args:
        text: Item text as written after the checkbox.

    Returns:
        str: Text without its outer ``~~`` pair, or `text` unchanged.

    Examples:
        strip_strikethrough("~~Done~~")  # "Done"
        strip_strikethrough("~~~~")  # "~~~~"
        strip_strikethrough("**Bold**")  # "**Bold**"
    """
    if is_struck(text):
        return text[len(STRIKETHROUGH) : -len(STRIKETHROUGH)]
    return text


def indentation_depth(line: str) -> int:
    """Compute the nesting depth of a line from its leading whitespace.

    Spaces and tabs are counted separately and combined: every two spaces and
    every tab add one level, so mixed indentation is additive.

    Args:
        line: Line whose indentation should be measured.

    Returns:
        int: Unclamped nesting depth.

    Examples:
        indentation_depth("  - [ ] a")  # 1
        indentation_depth("\\t  - [ ] a")  # 2
        indentation_depth("   - [ ] a")  # 1
    """
    indentation = LEADING_WHITESPACE_PATTERN.match(line).group(0)
    spaces = indentation.count(" ")
    tabs = indentation.count("\t")
    return spaces // SPACES_PER_LEVEL + tabs


def _parse_todo_item(line: str, line_number: int) -> TodoItem | None:
    match = TODO_PATTERN.match(line)
    if not match:
        return None

    depth = indentation_depth(line)
    if depth > MAX_DEPTH:
        # Too deep to nest; restart as a top-level item.
        depth = 0

    completed = match.group("mark").lower() == "x"
    original_text = match.group("text").strip()
    text = strip_strikethrough(original_text)

    return TodoItem(
        id=f"{line_number}-{depth}-{text}",
        text=text,
        original_text=original_text,
        completed=completed,
        line=line_number,
        depth=depth,
    )


def _find_last_item_at_depth(items: list[TodoItem], depth: int) -> TodoItem | None:
    """Find the most recently parsed item at `depth`.

    Scans `items` from the end, descending into each item's children before
    moving on to its previous sibling.
    """
    for item in reversed(items):
        if item.depth == depth:
            return item
        found = _find_last_item_at_depth(item.children, depth)
        if found is not None:
            return found
    return None


def _add_to_hierarchy(items: list[TodoItem], new_item: TodoItem) -> None:
    if new_item.depth == 0:
        items.append(new_item)
        return

    parent = _find_last_item_at_depth(items, new_item.depth - 1)
    if parent is not None:
        parent.add_child(new_item)
        return

    # No eligible parent above this line: flatten instead of dropping.
    new_item.depth = 0
    items.append(new_item)


def _has_items(items: list[TodoItem]) -> bool:
    return bool(items) or any(_has_items(item.children) for item in items)


def parse_heading(line: str) -> str | None:
    """Extract a section title from a heading line.

    Args:
        line: Line to inspect.

    Returns:
        str | None: Title without the leading ``#`` run, or None when the line
            is not a heading.

    Examples:
        parse_heading("  ## Backlog  ")  # "Backlog"
        parse_heading("#")  # ""
    """
    stripped = line.strip()
    if not stripped.startswith(HEADING_MARKER):
        return None
    return HEADING_PREFIX_PATTERN.sub("", stripped, count=1)


def parse_todos(content: str) -> list[TodoSection]:
    """Parse markdown content into sections of nested todo items.

    Headings open sections; checkbox lines become items nested by
    indentation. Items found before any heading go into a ``"General"``
    section starting at line 0. Sections without items are dropped. Every
    other line is ignored, so parsing never fails.

    Args:
        content: Markdown document using ``\\n`` line separators.

    Returns:
        list[TodoSection]: Non-empty sections in document order.

    Examples:
        parse_todos("# Work\\n- [ ] Write docs\\n  - [x] Outline")
    """
    sections: list[TodoSection] = []
    current: TodoSection | None = None

    for line_number, line in enumerate(content.split(LINE_SEPARATOR)):
        title = parse_heading(line)
        if title is not None:
            if current is not None and _has_items(current.items):
                sections.append(current)
            current = TodoSection(title=title, line=line_number)
            continue

        item = _parse_todo_item(line, line_number)
        if item is None:
            continue

        if current is None:
            current = TodoSection(title=GENERAL_SECTION_TITLE, line=0)
        _add_to_hierarchy(current.items, item)

    if current is not None and _has_items(current.items):
        sections.append(current)

    return sections
