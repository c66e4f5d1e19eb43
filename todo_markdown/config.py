"""Configuration loading and management."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
import tomllib

from .constants import DEFAULT_MAX_FILE_SIZE, MARKDOWN_EXTENSIONS


def _default_file_patterns() -> list[str]:
    return ["todo.md", "TODO.md", "*.todo.md"]


@dataclass
class TodoConfig:
    """Configuration for reading and editing markdown todo lists.

    Attributes:
        strike_completed_tasks: Wrap completed item text in ``~~`` when an item
            is ticked, and keep the whole document in that convention when
            reformatting.
        confirm_deletion: Ask before deleting an item. Only the CLI reads it.
        default_file: File name looked up (and created) in the working
            directory.
        file_patterns: Glob patterns used to discover a todo file when the
            default file is absent.
        max_file_size: Maximum file size in bytes that will be processed.

    Examples:
        TodoConfig(strike_completed_tasks=False, confirm_deletion=False)
    """

    # Editing behavior
    strike_completed_tasks: bool = True
    confirm_deletion: bool = True

    # Discovery
    default_file: str = "todo.md"
    file_patterns: list[str] = field(default_factory=_default_file_patterns)

    # Limits
    max_file_size: int = DEFAULT_MAX_FILE_SIZE


class ConfigError(ValueError):
    """Exception raised when configuration values are invalid.

    Examples:
        raise ConfigError("`default_file` must not be empty")
    """


def load_config(search_path: Path) -> TodoConfig:
    """Load configuration from the nearest config file.

    Walks parent directories from `search_path` to the filesystem root, reading
    the ``[tool.todo-markdown]`` table from `pyproject.toml` and the
    ``[todo-markdown]`` or ``[tool.todo-markdown]`` table from
    `.todo-markdown.toml` when present. Returns default values when no
    configuration is found. TOML files that cannot be read or decoded are
    skipped.

    Args:
        search_path: Directory used as the starting point for configuration lookup.

    Returns:
        TodoConfig: Loaded configuration with defaults applied when necessary.

    Raises:
        ConfigError: If a matching table is present but not a mapping or
            contains unsupported keys.

    Examples:
        load_config(Path("notes"))
    """
    current = search_path.resolve()

    while True:
        pyproject_config = _load_from_file(
            current / "pyproject.toml", table_paths=[("tool", "todo-markdown")]
        )
        if pyproject_config is not None:
            return pyproject_config

        dotfile_config = _load_from_file(
            current / ".todo-markdown.toml",
            table_paths=[("todo-markdown",), ("tool", "todo-markdown")],
        )
        if dotfile_config is not None:
            return dotfile_config

        parent = current.parent
        if parent == current:
            break
        current = parent

    return TodoConfig()


_MISSING = object()


def _load_from_file(config_file: Path, table_paths: list[tuple[str, ...]]) -> TodoConfig | None:
    if not config_file.exists():
        return None

    try:
        with open(config_file, "rb") as stream:
            data = tomllib.load(stream)
    except (OSError, tomllib.TOMLDecodeError):
        return None

    for table_path in table_paths:
        raw_config = _extract_table(data, table_path)
        if raw_config is _MISSING:
            continue
        return _build_config_from_raw(raw_config, config_file, table_path)

    return None


def _extract_table(data: object, table_path: tuple[str, ...]) -> object:
    current = data
    for key in table_path:
        if not isinstance(current, dict) or key not in current:
            return _MISSING
        current = current[key]
    return current


def _build_config_from_raw(
    raw_config: object, config_file: Path, table_path: tuple[str, ...]
) -> TodoConfig:
    table_display = ".".join(table_path)

    if raw_config is None:
        return TodoConfig()

    if not isinstance(raw_config, dict):
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}")

    if not raw_config:
        return TodoConfig()

    # TOML keys may be written kebab-case.
    normalized = {key.replace("-", "_"): value for key, value in raw_config.items()}
    try:
        return TodoConfig(**normalized)
    except TypeError as error:
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}") from error


def validate_config(config: TodoConfig) -> None:
    """Validate a `TodoConfig` instance.

    Args:
        config: Configuration to validate.

    Returns:
        None.

    Raises:
        ConfigError: If flags are not booleans, the default file is empty or
            not a markdown file, discovery patterns are missing, or the size
            limit is not a positive integer.

    Examples:
        validate_config(TodoConfig(default_file="tasks.md"))
    """
    _ensure_booleans(
        {
            "strike_completed_tasks": config.strike_completed_tasks,
            "confirm_deletion": config.confirm_deletion,
        }
    )

    if not isinstance(config.default_file, str) or not config.default_file:
        raise ConfigError("`default_file` must not be empty")
    if Path(config.default_file).name != config.default_file:
        raise ConfigError("`default_file` must be a file name, not a path")
    if Path(config.default_file).suffix.lower() not in MARKDOWN_EXTENSIONS:
        raise ConfigError(
            f"`default_file` must use one of: {', '.join(MARKDOWN_EXTENSIONS)}"
        )

    if not isinstance(config.file_patterns, (list, tuple)) or not config.file_patterns:
        raise ConfigError("`file_patterns` must be a non-empty list")
    for pattern in config.file_patterns:
        if not isinstance(pattern, str) or not pattern:
            raise ConfigError("`file_patterns` entries must be non-empty strings")

    if isinstance(config.max_file_size, bool) or not isinstance(config.max_file_size, int):
        raise ConfigError("`max_file_size` must be an integer")
    if config.max_file_size <= 0:
        raise ConfigError("`max_file_size` must be a positive integer")


def apply_overrides(config: TodoConfig, **overrides: object) -> TodoConfig:
    """Apply override values to a `TodoConfig`.

    Args:
        config: Base configuration to update.
        overrides: Override values keyed by configuration field name; values set to
            None are ignored.

    Returns:
        TodoConfig: New configuration with the provided overrides applied. The
        original configuration is returned when no changes are supplied.

    Raises:
        TypeError: If an override name is not defined on `TodoConfig`.

    Examples:
        updated = apply_overrides(config, strike_completed_tasks=False)
    """
    changes = {key: value for key, value in overrides.items() if value is not None}
    if not changes:
        return config
    return replace(config, **changes)


def build_config(search_path: Path, **overrides: object) -> TodoConfig:
    """Load, override, and validate configuration.

    Args:
        search_path: Directory where configuration files are resolved.
        overrides: Override values keyed by configuration attributes; None values
            are ignored.

    Returns:
        TodoConfig: Validated configuration.

    Raises:
        ConfigError: If configuration loading or validation fails.

    Examples:
        config = build_config(Path.cwd(), confirm_deletion=False)
    """
    config = load_config(search_path)
    config = apply_overrides(config, **overrides)
    validate_config(config)
    return config


def _ensure_booleans(values: dict[str, object]) -> None:
    for key, value in values.items():
        if not isinstance(value, bool):
            raise ConfigError(f"`{key}` must be a boolean")
