"""Constants used across the todo-markdown package."""

from __future__ import annotations

import re

# Markdown patterns
HEADING_MARKER = "#"
HEADING_PREFIX_PATTERN = re.compile(r"^#+\s*")
TODO_PATTERN = re.compile(r"^(?P<prefix>\s*[-*+]\s*\[(?P<mark>[xX\s])\]\s*)(?P<text>.*)$")
COMPLETED_TODO_PATTERN = re.compile(r"^(?P<prefix>\s*[-*+]\s*\[x\]\s*)(?P<text>.*)$")
STRUCK_OPEN_TODO_PATTERN = re.compile(r"^(?P<prefix>\s*[-*+]\s*\[\s\]\s*)~~(?P<text>.+)~~$")
LEADING_WHITESPACE_PATTERN = re.compile(r"^\s*")

# Checkbox literals rewritten by toggling; uppercase `[X]` is deliberately absent.
UNCHECKED_BOX = "[ ]"
CHECKED_BOX = "[x]"
STRIKETHROUGH = "~~"

LINE_SEPARATOR = "\n"
CRLF = "\r\n"
NEW_TODO_TEMPLATE = "- [ ] {text}"

# Hierarchy
MAX_DEPTH = 3
SPACES_PER_LEVEL = 2
GENERAL_SECTION_TITLE = "General"

# Files
MARKDOWN_EXTENSIONS = (".md", ".markdown")
DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024
TODO_FILE_TEMPLATE = """# Todo List

## To Do
- [ ] Add your first todo item

## In Progress

## Done
- [x] Created todo file
"""
