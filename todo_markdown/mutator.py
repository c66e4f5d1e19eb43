"""Line-addressed text mutations for markdown todo lists.

Every function takes the full document and returns the full new document.
Lines are split and rejoined on ``\\n`` only, so everything outside the
target line survives byte for byte. Out-of-range line numbers and lines that
are not todo items leave the document unchanged; nothing here raises.
"""

from __future__ import annotations

from .config import TodoConfig
from .constants import (
    CHECKED_BOX,
    COMPLETED_TODO_PATTERN,
    LINE_SEPARATOR,
    NEW_TODO_TEMPLATE,
    STRIKETHROUGH,
    STRUCK_OPEN_TODO_PATTERN,
    TODO_PATTERN,
    UNCHECKED_BOX,
)
from .parser import is_struck, strip_strikethrough


def _wrap(text: str) -> str:
    return f"{STRIKETHROUGH}{text}{STRIKETHROUGH}"


def _strip_all_strikethrough(text: str) -> str:
    while is_struck(text):
        text = strip_strikethrough(text).strip()
    return text


def _has_single_strikethrough(text: str) -> bool:
    return is_struck(text) and not is_struck(strip_strikethrough(text).strip())


def _complete_line(line: str, strike: bool) -> str:
    new_line = line.replace(UNCHECKED_BOX, CHECKED_BOX, 1)
    if not strike:
        return new_line

    match = COMPLETED_TODO_PATTERN.match(new_line)
    if not match:
        return new_line

    text = match.group("text").strip()
    if not text or is_struck(text):
        return new_line
    return f"{match.group('prefix')}{_wrap(text)}"


def _reopen_line(line: str) -> str:
    new_line = line.replace(CHECKED_BOX, UNCHECKED_BOX, 1)
    match = STRUCK_OPEN_TODO_PATTERN.match(new_line)
    if match:
        return f"{match.group('prefix')}{match.group('text')}"
    return new_line


def toggle_todo(content: str, line_number: int, config: TodoConfig | None = None) -> str:
    """Flip the checkbox on a single line.

    An open ``[ ]`` becomes ``[x]`` and, with `strike_completed_tasks`
    enabled, the item text is wrapped in ``~~`` unless it already is. A ticked
    ``[x]`` becomes ``[ ]`` and an exact ``~~...~~`` wrapper directly after
    the checkbox is removed. Only the first occurrence of the literal marker is
    replaced. Lines ticked with an uppercase ``[X]`` contain neither literal
    and are left as they are.

    Args:
        content: Full document text.
        line_number: Zero-based index of the line to toggle.
        config: Editing options. Defaults to a new `TodoConfig` when omitted.

    Returns:
        str: The updated document, or `content` unchanged when the line is out
            of range or not a todo item.

    Examples:
        toggle_todo("- [ ] Task", 0)  # "- [x] ~~Task~~"
        toggle_todo("- [x] ~~Task~~", 0)  # "- [ ] Task"
    """
    config = config or TodoConfig()
    lines = content.split(LINE_SEPARATOR)
    if not 0 <= line_number < len(lines):
        return content

    line = lines[line_number]
    if not TODO_PATTERN.match(line):
        return content

    if UNCHECKED_BOX in line:
        lines[line_number] = _complete_line(line, config.strike_completed_tasks)
    elif CHECKED_BOX in line:
        lines[line_number] = _reopen_line(line)
    else:
        return content

    return LINE_SEPARATOR.join(lines)


def delete_todo(content: str, line_number: int) -> str:
    """Remove exactly one line from the document.

    Nested items below the removed line are kept; the next parse attaches
    them wherever their indentation now fits.

    Args:
        content: Full document text.
        line_number: Zero-based index of the line to remove.

    Returns:
        str: The document without that line, or `content` when out of range.

    Examples:
        delete_todo("a\\nb\\nc", 1)  # "a\\nc"
    """
    lines = content.split(LINE_SEPARATOR)
    if not 0 <= line_number < len(lines):
        return content

    del lines[line_number]
    return LINE_SEPARATOR.join(lines)


def add_todo(content: str, text: str) -> str:
    """Append an open item as the last line of the document.

    Args:
        content: Full document text.
        text: Item text, used verbatim.

    Returns:
        str: The document with ``- [ ] <text>`` appended.

    Examples:
        add_todo("# Todo", "Call Bob")  # "# Todo\\n- [ ] Call Bob"
        add_todo("# Todo\\n", "Call Bob")  # "# Todo\\n\\n- [ ] Call Bob"
    """
    lines = content.split(LINE_SEPARATOR)
    lines.append(NEW_TODO_TEMPLATE.format(text=text))
    return LINE_SEPARATOR.join(lines)


def reformat_strikethrough(content: str, config: TodoConfig | None = None) -> str:
    """Bring every item in line with the strikethrough setting.

    Completed items get exactly one ``~~`` layer when `strike_completed_tasks`
    is enabled; every other item loses all of its wrapping layers. Lines that
    already follow the convention are left byte for byte. Applying the
    function twice gives the same result as applying it once.

    Args:
        content: Full document text.
        config: Editing options. Defaults to a new `TodoConfig` when omitted.

    Returns:
        str: The normalized document.

    Examples:
        reformat_strikethrough("- [x] Done\\n- [ ] ~~Open~~")
        # "- [x] ~~Done~~\\n- [ ] Open"
    """
    config = config or TodoConfig()
    lines = content.split(LINE_SEPARATOR)

    for index, line in enumerate(lines):
        match = TODO_PATTERN.match(line)
        if not match:
            continue

        text = match.group("text").strip()
        completed = match.group("mark").lower() == "x"

        if completed and config.strike_completed_tasks:
            if not text or _has_single_strikethrough(text):
                continue
            bare_text = _strip_all_strikethrough(text)
            new_text = _wrap(bare_text) if bare_text else bare_text
        else:
            new_text = _strip_all_strikethrough(text)

        if new_text != text:
            lines[index] = f"{match.group('prefix')}{new_text}"

    return LINE_SEPARATOR.join(lines)
