"""
todo-markdown: hierarchical todo lists kept in plain markdown files.

This package can be used both as a CLI tool and as a library.

CLI Usage:
    todo-markdown show
    todo-markdown toggle 4

Library Usage:
    from pathlib import Path
    from todo_markdown import parse_todos, toggle_todo

    content = Path("todo.md").read_text()
    sections = parse_todos(content)
    item = sections[0].items[0]
    updated = toggle_todo(content, item.line)
"""

from .config import ConfigError, TodoConfig
from .exceptions import FileChangedError, TodoFileError
from .models import TodoItem, TodoSection, find_item_by_line
from .mutator import add_todo, delete_todo, reformat_strikethrough, toggle_todo
from .parser import is_todo_line, parse_todos, strip_strikethrough
from .render import render_sections
from .styles import InlineStyles, parse_inline_styles

__version__ = "0.1.0"

__all__ = [
    # Core functionality
    "parse_todos",
    "toggle_todo",
    "delete_todo",
    "add_todo",
    "reformat_strikethrough",
    # Data models
    "TodoItem",
    "TodoSection",
    "TodoConfig",
    "InlineStyles",
    # Utilities
    "find_item_by_line",
    "is_todo_line",
    "strip_strikethrough",
    "parse_inline_styles",
    "render_sections",
    # Exceptions
    "ConfigError",
    "FileChangedError",
    "TodoFileError",
    # Version
    "__version__",
]
