"""Package-specific exception types."""

from __future__ import annotations

from pathlib import Path


class TodoFileError(IOError):
    """Base class for errors raised while accessing a todo file.

    The parsing and editing functions never raise; only the filesystem layer
    does.
    """


class FileChangedError(TodoFileError):
    """Raised when a file changed between reading and writing it.

    Args:
        filepath: Path of the file that changed.
    """

    def __init__(self, filepath: Path):
        self.filepath = filepath
        super().__init__(f"{filepath} changed during processing; refusing to overwrite.")
