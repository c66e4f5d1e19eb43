"""Plain-text rendering of parsed todo trees."""

from __future__ import annotations

from .models import TodoItem, TodoSection
from .styles import parse_inline_styles

INDENT = "  "


def render_item(item: TodoItem, level: int) -> str:
    """Render one item as a single line.

    Args:
        item: Item to render.
        level: Indentation level below the section heading (roots are 1).

    Returns:
        str: Line such as ``"  [x] Ship it - complete  (line 4)"``.

    Examples:
        render_item(item, 1)
    """
    checkbox = "[x]" if item.completed else "[ ]"
    label = parse_inline_styles(item.original_text).text
    status = " - complete" if item.completed else ""
    return f"{INDENT * level}{checkbox} {label}{status}  (line {item.line + 1})"


def _render_items(items: list[TodoItem], level: int) -> list[str]:
    lines = []
    for item in items:
        lines.append(render_item(item, level))
        lines.extend(_render_items(item.children, level + 1))
    return lines


def render_sections(sections: list[TodoSection]) -> list[str]:
    """Render parsed sections as an indented outline.

    Each section contributes a heading line with its recursive item count,
    followed by its items indented two spaces per nesting level. Line numbers
    are one-based so they can be passed straight back to the CLI.

    Args:
        sections: Sections returned by `parse_todos`.

    Returns:
        list[str]: Output lines without trailing newlines.

    Examples:
        render_sections(parse_todos("# Work\\n- [ ] Docs"))
        # ["Work (1 items)", "  [ ] Docs  (line 2)"]
    """
    lines: list[str] = []
    for section in sections:
        lines.append(f"{section.title} ({section.count_items()} items)")
        lines.extend(_render_items(section.items, 1))
    return lines
