"""Inline emphasis detection for item labels."""

from __future__ import annotations

import re
from dataclasses import dataclass

# Checked in order; the first matching style wins.
_STRIKETHROUGH_PATTERN = re.compile(r"^~~(.*)~~$")
_BOLD_PATTERNS = (re.compile(r"^\*\*(.*)\*\*$"), re.compile(r"^__(.*)__$"))
_ITALIC_PATTERNS = (re.compile(r"^\*(.*)\*$"), re.compile(r"^_(.*)_$"))


@dataclass(frozen=True)
class InlineStyles:
    """Label text with its outer emphasis removed.

    Attributes:
        text: Text without the detected wrapper.
        is_strikethrough: Text was wrapped in ``~~``.
        is_bold: Text was wrapped in ``**`` or ``__``.
        is_italic: Text was wrapped in ``*`` or ``_``.
    """

    text: str
    is_strikethrough: bool = False
    is_bold: bool = False
    is_italic: bool = False


def _unwrap(text: str, patterns: tuple[re.Pattern[str], ...]) -> str:
    for pattern in patterns:
        text = pattern.sub(r"\1", text)
    return text


def parse_inline_styles(text: str) -> InlineStyles:
    """Detect the emphasis wrapping the whole text.

    Strikethrough is checked first, then bold, then italic, and only the
    first matching style is reported. Bold strips ``**`` and then ``__``
    (italic strips ``*`` and then ``_``), so ``**__text__**`` becomes ``text``
    while ``***text***`` is reported as bold with ``*text*`` left inside.

    Args:
        text: Item text as written in the document.

    Returns:
        InlineStyles: The unwrapped text and the detected style.

    Examples:
        parse_inline_styles("~~Done~~")  # InlineStyles("Done", is_strikethrough=True)
        parse_inline_styles("__Now__")  # InlineStyles("Now", is_bold=True)
        parse_inline_styles("plain")  # InlineStyles("plain")
    """
    match = _STRIKETHROUGH_PATTERN.match(text)
    if match:
        return InlineStyles(match.group(1), is_strikethrough=True)

    if any(pattern.match(text) for pattern in _BOLD_PATTERNS):
        return InlineStyles(_unwrap(text, _BOLD_PATTERNS), is_bold=True)

    if any(pattern.match(text) for pattern in _ITALIC_PATTERNS):
        return InlineStyles(_unwrap(text, _ITALIC_PATTERNS), is_italic=True)

    return InlineStyles(text)
