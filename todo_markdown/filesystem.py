"""Filesystem helpers for todo-markdown."""

from __future__ import annotations

import logging
import os
import stat
import tempfile
from collections.abc import Callable
from pathlib import Path
from typing import TextIO

from .config import TodoConfig
from .constants import (
    CRLF,
    DEFAULT_MAX_FILE_SIZE,
    LINE_SEPARATOR,
    MARKDOWN_EXTENSIONS,
    TODO_FILE_TEMPLATE,
)
from .exceptions import FileChangedError, TodoFileError

logger = logging.getLogger(__name__)

MAX_FILE_SIZE_ENV_VAR = "TODO_MARKDOWN_MAX_FILE_SIZE"


def get_max_file_size(default: int = DEFAULT_MAX_FILE_SIZE) -> int:
    """Resolve the maximum allowed file size.

    Args:
        default: Fallback value in bytes when the environment variable is unset.

    Returns:
        int: Maximum allowed file size in bytes.

    Raises:
        ValueError: If the environment value is not a positive integer.

    Examples:
        os.environ["TODO_MARKDOWN_MAX_FILE_SIZE"] = "204800"
        limit = get_max_file_size(default=102400)
    """
    env_value = os.environ.get(MAX_FILE_SIZE_ENV_VAR)
    if env_value is None:
        return default

    try:
        max_size = int(env_value)
    except ValueError as error:
        error_message = (
            f"Invalid value for {MAX_FILE_SIZE_ENV_VAR}: {env_value} (expected positive integer)"
        )
        raise ValueError(error_message) from error

    if max_size <= 0:
        error_message = f"{MAX_FILE_SIZE_ENV_VAR} must be a positive integer, got {max_size}."
        raise ValueError(error_message)

    return max_size


def contains_symlink(path: Path) -> bool:
    """Check whether a path or any parent directory is a symlink.

    Args:
        path: Path to inspect.

    Returns:
        bool: True when a symlink is encountered, otherwise False.
    """
    for candidate in (path, *path.parents):
        try:
            if candidate.is_symlink():
                return True
        except OSError:
            continue
    return False


def normalize_filepath(raw_path: str, base_dir: Path) -> Path:
    """Resolve and validate a todo filepath under a base directory.

    Args:
        raw_path: User-supplied path to a Markdown file (absolute or relative).
        base_dir: Working directory that constrains allowed paths.

    Returns:
        Path: Absolute path to the Markdown file.

    Raises:
        ValueError: If the path does not exist, is outside `base_dir`, uses an
            unsupported extension, or traverses a symlink.

    Examples:
        normalize_filepath("notes/todo.md", Path.cwd())
    """
    path = Path(raw_path).expanduser()

    if contains_symlink(path):
        error_message = f"Symlinks are not supported for security reasons: {path}"
        raise ValueError(error_message)

    try:
        resolved = path.resolve(strict=True)
    except FileNotFoundError as error:
        error_message = f"{path} does not exist."
        raise ValueError(error_message) from error
    except OSError as error:
        error_message = f"Error resolving {path}: {error}"
        raise ValueError(error_message) from error

    if not resolved.is_file():
        error_message = f"{resolved} is not a regular file."
        raise ValueError(error_message)

    try:
        resolved.relative_to(base_dir)
    except ValueError as error:
        error_message = f"{resolved} is outside of the working directory {base_dir}."
        raise ValueError(error_message) from error

    if resolved.suffix.lower() not in MARKDOWN_EXTENSIONS:
        error_message = f"{resolved} is not a Markdown file.\n"
        error_message += f"Supported extensions are: {', '.join(MARKDOWN_EXTENSIONS)}"
        raise ValueError(error_message)

    return resolved


def find_todo_file(directory: Path, config: TodoConfig | None = None) -> Path | None:
    """Locate the todo file for a directory.

    The configured default file wins; otherwise the first file (in sorted
    order) matching one of the discovery patterns is returned.

    Args:
        directory: Directory to search, without descending into subdirectories.
        config: Discovery settings. Defaults to a new `TodoConfig` when omitted.

    Returns:
        Path | None: The todo file, or None when nothing matches.

    Examples:
        find_todo_file(Path.cwd())
    """
    config = config or TodoConfig()

    default_path = directory / config.default_file
    if default_path.is_file():
        return default_path

    for pattern in config.file_patterns:
        matches = sorted(path for path in directory.glob(pattern) if path.is_file())
        if matches:
            logger.debug("Matched %s with pattern %r", matches[0], pattern)
            return matches[0]

    logger.debug("No todo file found in %s", directory)
    return None


def create_todo_file(directory: Path, config: TodoConfig | None = None) -> Path:
    """Write the starter todo document into `directory`.

    Args:
        directory: Directory that receives the configured default file.
        config: Settings providing the file name. Defaults to a new `TodoConfig`.

    Returns:
        Path: Path of the created file.

    Raises:
        TodoFileError: If the file already exists or cannot be written.

    Examples:
        create_todo_file(Path.cwd())
    """
    config = config or TodoConfig()
    target = directory / config.default_file

    try:
        with open(target, "x", encoding="UTF-8") as stream:
            stream.write(TODO_FILE_TEMPLATE)
    except FileExistsError as error:
        raise TodoFileError(f"{target} already exists.") from error
    except OSError as error:
        raise TodoFileError(f"Error creating {target}: {error}") from error

    logger.info("Created todo file %s", target)
    return target


def collect_file_stat(filepath: Path) -> os.stat_result:
    """Return stat information for a file while disallowing symlinks.

    Args:
        filepath: Path to the file.

    Returns:
        os.stat_result: File metadata gathered without following symlinks.

    Raises:
        TodoFileError: If the path is inaccessible, a symlink, or not a regular file.
    """
    try:
        stat_result = os.stat(filepath, follow_symlinks=False)
    except OSError as error:
        error_message = f"Error accessing {filepath}: {error}"
        raise TodoFileError(error_message) from error

    if stat.S_ISLNK(stat_result.st_mode):
        error_message = f"Symlinks are not supported: {filepath}."
        raise TodoFileError(error_message)

    if not stat.S_ISREG(stat_result.st_mode):
        error_message = f"{filepath} is not a regular file."
        raise TodoFileError(error_message)

    return stat_result


def enforce_file_size(stat_result: os.stat_result, max_size: int, filepath: Path):
    """Guard against files that exceed the configured maximum size.

    Raises:
        TodoFileError: If `stat_result.st_size` exceeds `max_size`.
    """
    if stat_result.st_size > max_size:
        error_message = f"{filepath} exceeds the maximum allowed size of {max_size} bytes."
        raise TodoFileError(error_message)


def ensure_file_unchanged(
    expected_stat: os.stat_result, current_stat: os.stat_result, filepath: Path
):
    """Detect changes between two filesystem snapshots.

    Args:
        expected_stat: Stat captured before processing.
        current_stat: Stat captured after processing.
        filepath: Path to the file being monitored.

    Raises:
        FileChangedError: If inode, device, size, or modification time differ.
    """
    fingerprint_before = (
        getattr(expected_stat, "st_ino", None),
        getattr(expected_stat, "st_dev", None),
        expected_stat.st_size,
        expected_stat.st_mtime_ns,
    )
    fingerprint_after = (
        getattr(current_stat, "st_ino", None),
        getattr(current_stat, "st_dev", None),
        current_stat.st_size,
        current_stat.st_mtime_ns,
    )

    if fingerprint_before != fingerprint_after:
        raise FileChangedError(filepath)


def safe_read(filepath: Path) -> TextIO:
    """Open a file for reading with consistent error handling.

    The file is opened without newline translation so the caller can tell
    which line ending it uses.

    Raises:
        TodoFileError: If the path is missing, inaccessible, or not a file.

    Examples:
        with safe_read(Path("todo.md")) as handle:
            content = handle.read()
    """
    try:
        return open(filepath, "r", encoding="UTF-8", newline="")
    except (
        FileNotFoundError,
        PermissionError,
        IsADirectoryError,
        NotADirectoryError,
    ) as error:
        error_message = f"Error accessing {filepath}: {error}"
        raise TodoFileError(error_message) from error


def detect_line_separator(text: str) -> str:
    """Return the line ending used by the first line break in `text`.

    Examples:
        detect_line_separator("a\\r\\nb")  # "\\r\\n"
        detect_line_separator("a")  # "\\n"
    """
    index = text.find(LINE_SEPARATOR)
    if index > 0 and text[index - 1] == "\r":
        return CRLF
    return LINE_SEPARATOR


def read_todo_file(
    filepath: Path, max_size: int = DEFAULT_MAX_FILE_SIZE
) -> tuple[str, os.stat_result, str]:
    """Read a todo file together with the metadata snapshot taken before reading.

    ``\\r\\n`` line endings are converted to ``\\n`` so the parser and the
    mutators only ever see one separator. The detected ending is returned so
    `write_todo_file` can restore it.

    Args:
        filepath: Path to the todo file.
        max_size: Maximum allowed size in bytes.

    Returns:
        tuple[str, os.stat_result, str]: Normalized content, its stat snapshot
        and the file's line separator.

    Raises:
        TodoFileError: If the file is inaccessible, too large, or not UTF-8.
    """
    initial_stat = collect_file_stat(filepath)
    enforce_file_size(initial_stat, max_size, filepath)

    try:
        with safe_read(filepath) as file:
            raw = file.read()
    except UnicodeDecodeError as error:
        raise TodoFileError(f"Invalid UTF-8 sequence in {filepath}: {error}") from error

    line_separator = detect_line_separator(raw)
    return raw.replace(CRLF, LINE_SEPARATOR), initial_stat, line_separator


def write_todo_file(
    filepath: Path,
    content: str,
    expected_stat: os.stat_result,
    warn: Callable[[str], None] | None = None,
    line_separator: str = LINE_SEPARATOR,
):
    """Atomically replace a todo file's content.

    Args:
        filepath: Path to the todo file.
        content: New document text with ``\\n`` line breaks.
        expected_stat: Stat captured when the current content was read.
        warn: Optional callback for emitting non-fatal warnings (e.g., ownership preservation).
        line_separator: Line ending written to disk in place of ``\\n``.

    Raises:
        FileChangedError: If the file changed since `expected_stat` was taken.
        TodoFileError: If the file cannot be replaced.
    """
    current_stat = collect_file_stat(filepath)
    ensure_file_unchanged(expected_stat, current_stat, filepath)

    if line_separator != LINE_SEPARATOR:
        content = content.replace(LINE_SEPARATOR, line_separator)

    permissions = stat.S_IMODE(expected_stat.st_mode)
    uid = getattr(expected_stat, "st_uid", None)
    gid = getattr(expected_stat, "st_gid", None)
    atime_ns = expected_stat.st_atime_ns

    temp_path: Path | None = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w", encoding="UTF-8", newline="", delete=False, dir=filepath.parent
        ) as tmp_file:
            temp_path = Path(tmp_file.name)
            tmp_file.write(content)

            tmp_file.flush()
            os.fsync(tmp_file.fileno())
            os.chmod(tmp_file.name, permissions)

            # Ownership needs privileges and platform support.
            if uid is not None and gid is not None and hasattr(os, "chown"):
                try:
                    os.chown(tmp_file.name, uid, gid)
                except PermissionError:
                    if warn is not None:
                        warn(
                            f"Warning: Could not preserve file ownership for {filepath.name} "
                            "(requires elevated privileges)"
                        )

        os.replace(temp_path, filepath)

        # Keep the original access time; mtime reflects this write.
        current_stat = filepath.stat()
        os.utime(filepath, ns=(atime_ns, current_stat.st_mtime_ns))
    except OSError as error:
        raise TodoFileError(f"Error writing {filepath}: {error}") from error
    finally:
        if temp_path is not None:
            try:
                temp_path.unlink(missing_ok=True)
            except OSError:
                pass

    logger.debug("Wrote %d characters to %s", len(content), filepath)


def apply_mutation(
    filepath: Path,
    mutate: Callable[[str], str],
    max_size: int = DEFAULT_MAX_FILE_SIZE,
    warn: Callable[[str], None] | None = None,
) -> bool:
    """Run one read-mutate-write cycle against a todo file.

    The write is skipped when `mutate` returns the text unchanged, and refused
    when the file was modified by someone else in the meantime. `mutate` sees
    ``\\n`` line breaks; the file keeps its original line ending.

    Args:
        filepath: Path to the todo file.
        mutate: Pure function mapping the old document to the new one.
        max_size: Maximum allowed size in bytes.
        warn: Optional callback for non-fatal warnings.

    Returns:
        bool: True when the file was rewritten.

    Raises:
        TodoFileError: If reading or writing fails, or the file changed
            concurrently.

    Examples:
        apply_mutation(Path("todo.md"), lambda text: add_todo(text, "Call Bob"))
    """
    content, initial_stat, line_separator = read_todo_file(filepath, max_size)
    updated = mutate(content)
    if updated == content:
        logger.debug("No changes for %s", filepath)
        return False

    write_todo_file(filepath, updated, initial_stat, warn=warn, line_separator=line_separator)
    return True
