"""
Command-line interface for markdown todo lists.
Shows the todo tree of a markdown file and edits it one line at a time.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

import click

from .config import ConfigError, TodoConfig, apply_overrides, build_config
from .constants import LINE_SEPARATOR
from .exceptions import TodoFileError
from .filesystem import (
    apply_mutation,
    create_todo_file,
    find_todo_file,
    get_max_file_size,
    normalize_filepath,
    read_todo_file,
)
from .mutator import add_todo, delete_todo, reformat_strikethrough, toggle_todo
from .parser import is_todo_line, parse_todos
from .render import render_sections

__all__ = ["cli"]

logger = logging.getLogger(__name__)


@dataclass
class CliState:
    """Settings shared by all subcommands.

    Attributes:
        base_dir: Working directory; files outside it are rejected.
        config: Validated configuration.
        max_file_size: Effective size limit in bytes.
        raw_filepath: Value of ``--file``, if given.
    """

    base_dir: Path
    config: TodoConfig
    max_file_size: int
    raw_filepath: str | None = None

    def todo_file(self) -> Path:
        """Resolve the todo file addressed by this invocation.

        Raises:
            click.BadParameter: If ``--file`` points at an unusable path.
            click.ClickException: If no todo file can be found.
        """
        if self.raw_filepath is not None:
            try:
                return normalize_filepath(self.raw_filepath, self.base_dir)
            except ValueError as error:
                raise click.BadParameter(str(error), param_hint="--file") from error

        found = find_todo_file(self.base_dir, self.config)
        if found is None:
            raise click.ClickException(
                f"No todo file found in {self.base_dir}. "
                "Run `todo-markdown init` to create one or pass --file."
            )
        return found


def _warn(message: str) -> None:
    click.echo(message, err=True)


def _line_at(content: str, line_number: int) -> str:
    """Return the todo line at a one-based `line_number`.

    Raises:
        click.BadParameter: If the line does not exist or is not a todo item.
    """
    lines = content.split(LINE_SEPARATOR)
    index = line_number - 1
    if not 0 <= index < len(lines) or not is_todo_line(lines[index]):
        raise click.BadParameter(f"Line {line_number} is not a todo item.", param_hint="LINE")
    return lines[index]


def _run_mutation(state: CliState, mutate: Callable[[str], str]) -> tuple[Path, bool]:
    filepath = state.todo_file()
    try:
        changed = apply_mutation(filepath, mutate, state.max_file_size, warn=_warn)
    except TodoFileError as error:
        raise click.ClickException(str(error)) from error
    logger.debug("%s %s", "Updated" if changed else "Left unchanged", filepath)
    return filepath, changed


@click.group()
@click.version_option(package_name="todo-markdown")
@click.option(
    "--file",
    "-f",
    "filepath",
    type=click.Path(dir_okay=False),
    help="Todo file to use (defaults to the configured file in the working directory)",
)
@click.option("--verbose", "-v", is_flag=True, help="Log diagnostic messages to stderr")
@click.pass_context
def cli(ctx: click.Context, filepath: str | None = None, verbose: bool = False):
    """
    Manage a todo list kept in a markdown file.

    Items are checkbox list entries (``- [ ] task``) grouped under headings
    and nested by indentation. LINE arguments are the one-based line numbers
    printed by `show`.

    Raises:
        click.BadParameter: If the configuration is invalid.
        click.ClickException: If environment limits are malformed.

    Examples:
        todo-markdown show
        todo-markdown --file notes/todo.md toggle 4
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    base_dir = Path.cwd().resolve()
    try:
        config = build_config(base_dir)
    except ConfigError as error:
        raise click.BadParameter(str(error)) from error

    try:
        max_file_size = get_max_file_size(default=config.max_file_size)
    except ValueError as error:
        raise click.ClickException(str(error)) from error

    ctx.obj = CliState(
        base_dir=base_dir,
        config=config,
        max_file_size=max_file_size,
        raw_filepath=filepath,
    )


@cli.command()
@click.pass_obj
def show(state: CliState):
    """Print the todo tree of the current file."""
    filepath = state.todo_file()
    try:
        content, _, _ = read_todo_file(filepath, state.max_file_size)
    except TodoFileError as error:
        raise click.ClickException(str(error)) from error

    lines = render_sections(parse_todos(content))
    if not lines:
        click.echo("No todo items found.")
        return
    for line in lines:
        click.echo(line)


@cli.command()
@click.argument("text", nargs=-1, required=True)
@click.pass_obj
def add(state: CliState, text: tuple[str, ...]):
    """Append a new open item to the end of the file."""
    item_text = " ".join(text).strip()
    if not item_text:
        raise click.BadParameter("Todo text must not be empty.", param_hint="TEXT")

    filepath, _ = _run_mutation(state, lambda content: add_todo(content, item_text))
    click.echo(f"Added '{item_text}' to {filepath.name}")


@cli.command()
@click.argument("line", type=click.IntRange(min=1))
@click.option(
    "--strike/--no-strike",
    default=None,
    help="Override whether completed items are struck through",
)
@click.pass_obj
def toggle(state: CliState, line: int, strike: bool | None = None):
    """Tick or untick the item on LINE."""
    config = apply_overrides(state.config, strike_completed_tasks=strike)

    def mutate(content: str) -> str:
        _line_at(content, line)
        return toggle_todo(content, line - 1, config)

    filepath, changed = _run_mutation(state, mutate)
    if changed:
        click.echo(f"Toggled line {line} in {filepath.name}")
    else:
        click.echo(f"Line {line} was left unchanged (only [ ] and [x] are toggled).", err=True)


@cli.command()
@click.argument("line", type=click.IntRange(min=1))
@click.option("--yes", "-y", is_flag=True, help="Delete without asking for confirmation")
@click.pass_obj
def delete(state: CliState, line: int, yes: bool = False):
    """Remove the item on LINE. Nested items are kept."""
    filepath = state.todo_file()
    try:
        content, _, _ = read_todo_file(filepath, state.max_file_size)
    except TodoFileError as error:
        raise click.ClickException(str(error)) from error

    target = _line_at(content, line)
    if state.config.confirm_deletion and not yes:
        click.confirm(f"Delete '{target.strip()}'?", abort=True)

    def mutate(current: str) -> str:
        if _line_at(current, line) != target:
            raise click.ClickException(f"{filepath} changed before the item could be deleted.")
        return delete_todo(current, line - 1)

    _run_mutation(state, mutate)
    click.echo(f"Deleted line {line} from {filepath.name}")


@cli.command()
@click.option(
    "--strike/--no-strike",
    default=None,
    help="Override whether completed items are struck through",
)
@click.pass_obj
def reformat(state: CliState, strike: bool | None = None):
    """Apply the strikethrough convention to every item in the file."""
    config = apply_overrides(state.config, strike_completed_tasks=strike)
    filepath, changed = _run_mutation(
        state, lambda content: reformat_strikethrough(content, config)
    )
    if changed:
        click.echo(f"Reformatted {filepath.name}")
    else:
        click.echo(f"{filepath.name} is already formatted")


@cli.command()
@click.pass_obj
def init(state: CliState):
    """Create a starter todo file in the working directory."""
    try:
        filepath = create_todo_file(state.base_dir, state.config)
    except TodoFileError as error:
        raise click.ClickException(str(error)) from error
    click.echo(f"Created {filepath.name}")


if __name__ == "__main__":
    cli()
