from __future__ import annotations

import pytest

from todo_markdown.parser import parse_todos
from todo_markdown.render import render_sections
from todo_markdown.styles import InlineStyles, parse_inline_styles


def test_render_sections_outline():
    content = "# Work\n- [ ] Write docs\n  - [x] ~~Outline~~\n\n## Home\n- [ ] **Dishes**"

    assert render_sections(parse_todos(content)) == [
        "Work (2 items)",
        "  [ ] Write docs  (line 2)",
        "    [x] Outline - complete  (line 3)",
        "Home (1 items)",
        "  [ ] Dishes  (line 6)",
    ]


def test_render_general_section():
    assert render_sections(parse_todos("- [ ] a")) == ["General (1 items)", "  [ ] a  (line 1)"]


def test_render_empty():
    assert render_sections([]) == []


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("~~Done~~", InlineStyles("Done", is_strikethrough=True)),
        ("**Bold**", InlineStyles("Bold", is_bold=True)),
        ("__Bold__", InlineStyles("Bold", is_bold=True)),
        ("*Italic*", InlineStyles("Italic", is_italic=True)),
        ("_Italic_", InlineStyles("Italic", is_italic=True)),
        ("***Both***", InlineStyles("*Both*", is_bold=True)),
        ("~~**Both**~~", InlineStyles("**Both**", is_strikethrough=True)),
        ("**__Both__**", InlineStyles("Both", is_bold=True)),
        ("__**Both**__", InlineStyles("**Both**", is_bold=True)),
        ("*_Both_*", InlineStyles("Both", is_italic=True)),
        ("plain **mixed** text", InlineStyles("plain **mixed** text")),
        ("", InlineStyles("")),
    ],
)
def test_parse_inline_styles(text: str, expected: InlineStyles):
    assert parse_inline_styles(text) == expected
