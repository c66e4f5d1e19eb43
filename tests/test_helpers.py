from __future__ import annotations

import os
import stat
from pathlib import Path

import pytest

from todo_markdown.config import TodoConfig
from todo_markdown.constants import TODO_FILE_TEMPLATE
from todo_markdown.exceptions import FileChangedError, TodoFileError
from todo_markdown.filesystem import (
    apply_mutation,
    collect_file_stat,
    contains_symlink,
    create_todo_file,
    detect_line_separator,
    enforce_file_size,
    find_todo_file,
    get_max_file_size,
    normalize_filepath,
    read_todo_file,
    write_todo_file,
)
from todo_markdown.mutator import add_todo


def test_get_max_file_size_default(monkeypatch):
    monkeypatch.delenv("TODO_MARKDOWN_MAX_FILE_SIZE", raising=False)
    assert get_max_file_size(default=123) == 123


def test_get_max_file_size_reads_environment(monkeypatch):
    monkeypatch.setenv("TODO_MARKDOWN_MAX_FILE_SIZE", "2048")
    assert get_max_file_size() == 2048


def test_get_max_file_size_rejects_non_integer(monkeypatch):
    monkeypatch.setenv("TODO_MARKDOWN_MAX_FILE_SIZE", "invalid")
    with pytest.raises(ValueError):
        get_max_file_size()


def test_get_max_file_size_rejects_non_positive(monkeypatch):
    monkeypatch.setenv("TODO_MARKDOWN_MAX_FILE_SIZE", "0")
    with pytest.raises(ValueError):
        get_max_file_size()


def test_normalize_filepath_missing_file(tmp_path: Path):
    with pytest.raises(ValueError):
        normalize_filepath(str(tmp_path / "missing.md"), tmp_path)


def test_normalize_filepath_rejects_directory(tmp_path: Path):
    folder = tmp_path / "folder.md"
    folder.mkdir()
    with pytest.raises(ValueError):
        normalize_filepath(str(folder), tmp_path)


def test_normalize_filepath_rejects_non_markdown(tmp_path: Path):
    target = tmp_path / "todo.txt"
    target.write_text("- [ ] a\n", encoding="utf-8")
    with pytest.raises(ValueError, match="not a Markdown file"):
        normalize_filepath(str(target), tmp_path)


def test_normalize_filepath_rejects_outside_base(tmp_path: Path):
    base = tmp_path / "base"
    base.mkdir()
    target = tmp_path / "todo.md"
    target.write_text("- [ ] a\n", encoding="utf-8")
    with pytest.raises(ValueError, match="outside of the working directory"):
        normalize_filepath(str(target), base)


def test_normalize_filepath_accepts_markdown(tmp_path: Path):
    target = tmp_path / "todo.md"
    target.write_text("- [ ] a\n", encoding="utf-8")

    assert normalize_filepath(str(target), tmp_path.resolve()) == target.resolve()


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="Symlink support is required")
def test_contains_symlink_detects_links(tmp_path: Path):
    source = tmp_path / "source.md"
    source.write_text("- [ ] a\n", encoding="utf-8")
    link = tmp_path / "alias.md"
    try:
        os.symlink(source, link)
    except OSError as error:  # pragma: no cover - platform dependent
        pytest.skip(f"Unable to create symlink: {error}")

    assert contains_symlink(link) is True
    with pytest.raises(ValueError, match="Symlinks"):
        normalize_filepath(str(link), tmp_path)


def test_find_todo_file_prefers_default(tmp_path: Path):
    (tmp_path / "a.todo.md").write_text("", encoding="utf-8")
    (tmp_path / "todo.md").write_text("", encoding="utf-8")

    assert find_todo_file(tmp_path) == tmp_path / "todo.md"


def test_find_todo_file_uses_patterns_in_sorted_order(tmp_path: Path):
    (tmp_path / "b.todo.md").write_text("", encoding="utf-8")
    (tmp_path / "a.todo.md").write_text("", encoding="utf-8")

    assert find_todo_file(tmp_path) == tmp_path / "a.todo.md"


def test_find_todo_file_with_custom_config(tmp_path: Path):
    (tmp_path / "plan.md").write_text("", encoding="utf-8")
    config = TodoConfig(default_file="tasks.md", file_patterns=["plan.*"])

    assert find_todo_file(tmp_path, config) == tmp_path / "plan.md"


def test_find_todo_file_returns_none(tmp_path: Path):
    (tmp_path / "notes.md").write_text("", encoding="utf-8")

    assert find_todo_file(tmp_path) is None


def test_create_todo_file_writes_template(tmp_path: Path):
    created = create_todo_file(tmp_path)

    assert created == tmp_path / "todo.md"
    assert created.read_text(encoding="utf-8") == TODO_FILE_TEMPLATE


def test_create_todo_file_refuses_to_overwrite(tmp_path: Path):
    existing = tmp_path / "todo.md"
    existing.write_text("keep me", encoding="utf-8")

    with pytest.raises(TodoFileError):
        create_todo_file(tmp_path)
    assert existing.read_text(encoding="utf-8") == "keep me"


def test_collect_file_stat_rejects_directory(tmp_path: Path):
    with pytest.raises(TodoFileError):
        collect_file_stat(tmp_path)


def test_enforce_file_size(tmp_path: Path):
    target = tmp_path / "todo.md"
    target.write_text("x" * 20, encoding="utf-8")
    stat_result = collect_file_stat(target)

    enforce_file_size(stat_result, 20, target)
    with pytest.raises(TodoFileError, match="maximum allowed size"):
        enforce_file_size(stat_result, 10, target)


def test_read_todo_file_normalizes_crlf(tmp_path: Path):
    target = tmp_path / "todo.md"
    target.write_bytes(b"- [ ] a\r\n- [x] b\r\n")

    content, _, line_separator = read_todo_file(target)

    assert content == "- [ ] a\n- [x] b\n"
    assert line_separator == "\r\n"


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("a\r\nb\nc", "\r\n"),
        ("a\nb\r\nc", "\n"),
        ("single line", "\n"),
        ("", "\n"),
        ("\r\n", "\r\n"),
    ],
)
def test_detect_line_separator(text: str, expected: str):
    assert detect_line_separator(text) == expected


def test_write_todo_file_restores_crlf(tmp_path: Path):
    target = tmp_path / "todo.md"
    target.write_bytes(b"- [ ] a\r\n")
    _, initial_stat, line_separator = read_todo_file(target)

    write_todo_file(target, "- [x] a\n- [ ] b\n", initial_stat, line_separator=line_separator)

    assert target.read_bytes() == b"- [x] a\r\n- [ ] b\r\n"


def test_apply_mutation_keeps_crlf_line_endings(tmp_path: Path):
    target = tmp_path / "todo.md"
    target.write_bytes(b"# Todo\r\n- [ ] a\r\n")
    seen: list[str] = []

    def mutate(content: str) -> str:
        seen.append(content)
        return add_todo(content, "b")

    assert apply_mutation(target, mutate) is True
    assert seen == ["# Todo\n- [ ] a\n"]
    assert target.read_bytes() == b"# Todo\r\n- [ ] a\r\n\r\n- [ ] b"


def test_read_todo_file_rejects_invalid_utf8(tmp_path: Path):
    target = tmp_path / "todo.md"
    target.write_bytes(b"- [ ] \xff\xfe\n")

    with pytest.raises(TodoFileError, match="Invalid UTF-8"):
        read_todo_file(target)


def test_write_todo_file_preserves_permissions(tmp_path: Path):
    target = tmp_path / "todo.md"
    target.write_text("- [ ] a\n", encoding="utf-8")
    os.chmod(target, 0o640)
    _, initial_stat, _ = read_todo_file(target)

    write_todo_file(target, "- [x] a\n", initial_stat)

    assert target.read_text(encoding="utf-8") == "- [x] a\n"
    assert stat.S_IMODE(target.stat().st_mode) == 0o640
    assert not [path for path in tmp_path.iterdir() if path.name != "todo.md"]


def test_write_todo_file_detects_concurrent_change(tmp_path: Path):
    target = tmp_path / "todo.md"
    target.write_text("- [ ] a\n", encoding="utf-8")
    _, initial_stat, _ = read_todo_file(target)
    target.write_text("- [ ] a\n- [ ] someone else\n", encoding="utf-8")

    with pytest.raises(FileChangedError):
        write_todo_file(target, "- [x] a\n", initial_stat)
    assert target.read_text(encoding="utf-8") == "- [ ] a\n- [ ] someone else\n"


def test_apply_mutation_writes_changes(tmp_path: Path):
    target = tmp_path / "todo.md"
    target.write_text("# Todo", encoding="utf-8")

    changed = apply_mutation(target, lambda content: add_todo(content, "New"))

    assert changed is True
    assert target.read_text(encoding="utf-8") == "# Todo\n- [ ] New"


def test_apply_mutation_skips_unchanged(tmp_path: Path):
    target = tmp_path / "todo.md"
    target.write_text("# Todo\n", encoding="utf-8")
    before = target.stat().st_mtime_ns

    changed = apply_mutation(target, lambda content: content)

    assert changed is False
    assert target.stat().st_mtime_ns == before


def test_apply_mutation_enforces_size_limit(tmp_path: Path):
    target = tmp_path / "todo.md"
    target.write_text("x" * 100, encoding="utf-8")

    with pytest.raises(TodoFileError):
        apply_mutation(target, lambda content: content, max_size=10)
