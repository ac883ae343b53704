"""CLI interface for taskman."""

from __future__ import annotations

from typing import Any, NoReturn

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from taskman import __version__
from taskman.config import TaskmanConfig
from taskman.errors import ConfigError, InvalidDescription, StoreError
from taskman.logging_setup import setup_logging
from taskman.store import EditOutcome, TaskStore

console = Console()
err_console = Console(stderr=True)

TASK_ID = click.IntRange(min=1)


class TaskmanGroup(click.Group):
    """Command group that reports every usage error with exit status 1."""

    def make_context(
        self,
        info_name: str | None,
        args: list[str],
        parent: click.Context | None = None,
        **extra: Any,
    ) -> click.Context:
        try:
            return super().make_context(info_name, args, parent=parent, **extra)
        except click.UsageError as e:
            e.exit_code = 1
            raise

    def invoke(self, ctx: click.Context) -> Any:
        try:
            return super().invoke(ctx)
        except click.UsageError as e:
            e.exit_code = 1
            raise


def _fail(ctx: click.Context, error: Exception) -> NoReturn:
    err_console.print(f"[red]Error:[/red] {escape(str(error))}")
    ctx.exit(1)


@click.group(cls=TaskmanGroup, invoke_without_command=True)
@click.version_option(version=__version__, prog_name="taskman")
@click.option("--verbose", "-v", is_flag=True, help="Show debug output on stderr")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """taskman - a personal command-line task tracker.

    Tasks are kept in ~/.local/taskmanager/tasks.txt.

    \b
    Usage:
      taskman add <description>
      taskman list
      taskman done <task_id>
      taskman pending <task_id>
      taskman delete <task_id>
    """
    setup_logging(verbose)

    try:
        config = TaskmanConfig.from_environment()
        config.ensure_directory()
    except ConfigError as e:
        _fail(ctx, e)

    ctx.ensure_object(dict)
    ctx.obj["store"] = TaskStore(config)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        ctx.exit(1)


@main.command("add")
@click.argument("words", nargs=-1, required=True, metavar="DESCRIPTION...")
@click.pass_context
def add_command(ctx: click.Context, words: tuple[str, ...]) -> None:
    """Add a pending task.

    All words are joined with single spaces.

    Example:

        taskman add buy milk
    """
    store: TaskStore = ctx.obj["store"]
    description = " ".join(words)

    try:
        task = store.add(description)
    except InvalidDescription as e:
        raise click.BadParameter(str(e), ctx=ctx, param_hint="'DESCRIPTION...'") from e
    except StoreError as e:
        _fail(ctx, e)

    console.print(f'Task added: ID {task.id} - "{escape(task.description)}"')


@main.command("list")
@click.pass_context
def list_command(ctx: click.Context) -> None:
    """List all tasks."""
    store: TaskStore = ctx.obj["store"]

    try:
        tasks = store.list_tasks()
    except StoreError as e:
        _fail(ctx, e)

    if tasks is None:
        console.print("No tasks found. Create one using 'add' command.")
        return
    if not tasks:
        console.print("No tasks found.")
        return

    table = Table(title="Tasks", show_header=True)
    table.add_column("ID", style="cyan", justify="right")
    table.add_column("Status")
    table.add_column("Description", style="white")

    for task in tasks:
        color = "green" if task.completed else "yellow"
        table.add_row(str(task.id), f"[{color}]{task.status_label}[/{color}]", escape(task.description))

    console.print(table)


def _set_status(ctx: click.Context, task_id: int, completed: bool) -> None:
    store: TaskStore = ctx.obj["store"]

    try:
        outcome = store.set_status(task_id, completed)
    except StoreError as e:
        _fail(ctx, e)

    if outcome is EditOutcome.NO_STORE:
        console.print("No tasks found.")
    elif outcome is EditOutcome.NOT_FOUND:
        console.print(f"Task ID {task_id} not found.")
    else:
        label = "DONE" if completed else "PENDING"
        console.print(f"Task ID {task_id} marked as {label}.")


@main.command("done")
@click.argument("task_id", type=TASK_ID)
@click.pass_context
def done_command(ctx: click.Context, task_id: int) -> None:
    """Mark a task as completed."""
    _set_status(ctx, task_id, completed=True)


@main.command("pending")
@click.argument("task_id", type=TASK_ID)
@click.pass_context
def pending_command(ctx: click.Context, task_id: int) -> None:
    """Mark a task as pending again."""
    _set_status(ctx, task_id, completed=False)


@main.command("delete")
@click.argument("task_id", type=TASK_ID)
@click.pass_context
def delete_command(ctx: click.Context, task_id: int) -> None:
    """Delete a task permanently."""
    store: TaskStore = ctx.obj["store"]

    try:
        outcome = store.delete(task_id)
    except StoreError as e:
        _fail(ctx, e)

    if outcome is EditOutcome.NO_STORE:
        console.print("No tasks found.")
    elif outcome is EditOutcome.NOT_FOUND:
        console.print(f"Task ID {task_id} not found.")
    else:
        console.print(f"Task ID {task_id} deleted.")
