"""Command-line interface for task-cli.

Every invocation runs one command as a full read-modify-write cycle:
load the data file, apply the command, save, print a confirmation.

Commands:
- add, update, delete: create and edit tasks
- mark-in-progress, mark-done: change task status
- list: show tasks, optionally filtered by status
- help: show usage
"""

import json
import logging
import sys
from typing import List, NoReturn, Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from taskcli.lib import (
    TaskNotFoundError,
    add_task,
    delete_task,
    filter_tasks,
    mark_task,
    update_task,
)
from taskcli.store import StoreError, TaskStore
from taskcli.utils import (
    DATA_DIR_ENV,
    STATUSES,
    InvalidTaskIdError,
    Task,
    format_task,
    get_data_file,
    parse_task_id,
)

logger = logging.getLogger(__name__)

# Keep console instances for CLI output
console = Console()
err_console = Console(stderr=True, soft_wrap=True)

STATUS_STYLES = {
    "todo": "yellow",
    "in-progress": "cyan",
    "done": "green",
}

# Unknown options are passed through as plain arguments so that
# descriptions like "-x flag" or ids like "-1" reach our own validation.
# Surplus arguments after an id are ignored.
ARGS_SETTINGS = {"ignore_unknown_options": True, "allow_extra_args": True}


class TaskUsageError(click.UsageError):
    """Usage error that exits with status 1 instead of click's 2."""

    exit_code = 1


class TaskGroup(click.Group):
    """Command group routing verbs by exact name.

    An empty verb shows help; an unknown verb prints an error plus help
    and exits with status 1. Every click usage error, whether raised while
    parsing group options or a subcommand, exits with status 1 as well.
    """

    def make_context(self, info_name, args, parent=None, **extra):
        try:
            return super().make_context(info_name, args, parent=parent, **extra)
        except click.UsageError as e:
            e.exit_code = 1
            raise

    def invoke(self, ctx):
        try:
            return super().invoke(ctx)
        except click.UsageError as e:
            e.exit_code = 1
            raise

    def resolve_command(self, ctx, args):
        cmd_name = args[0] if args else ""
        if not ctx.resilient_parsing:
            if cmd_name == "":
                click.echo(ctx.get_help())
                ctx.exit(0)
            if self.get_command(ctx, cmd_name) is None:
                err_console.print(f"[red]Unknown command: {escape(cmd_name)}[/]")
                click.echo(ctx.get_help())
                ctx.exit(1)
        return super().resolve_command(ctx, args)


def _fail(message: str) -> NoReturn:
    """Print an error to stderr and exit with status 1."""
    err_console.print(f"[red]Error: {escape(message)}[/]")
    sys.exit(1)


def _parse_id(raw_id: Optional[str], usage: str) -> int:
    if not raw_id:
        raise TaskUsageError(f"Missing task id. Usage: {usage}")
    try:
        return parse_task_id(raw_id)
    except InvalidTaskIdError as e:
        raise TaskUsageError(f"{e}. Usage: {usage}") from e


def _save(store: TaskStore, tasks: List[Task]) -> None:
    try:
        store.save(tasks)
    except StoreError as e:
        _fail(str(e))


def _print_table(tasks: List[Task]) -> None:
    table = Table(show_header=True, header_style="bold")
    table.add_column("ID", justify="right")
    table.add_column("Name")
    table.add_column("Description")
    table.add_column("Status")
    table.add_column("Created")
    table.add_column("Updated")
    for task in tasks:
        style = STATUS_STYLES.get(task.status, "")
        table.add_row(
            str(task.id),
            escape(task.name),
            escape(task.description),
            f"[{style}]{task.status}[/]",
            task.created_at,
            task.updated_at,
        )
    console.print(table)


@click.group(cls=TaskGroup, invoke_without_command=True)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False),
    envvar=DATA_DIR_ENV,
    help=f"Directory holding task.json. Can also be set via {DATA_DIR_ENV} env var.",
)
@click.pass_context
def cli(ctx, verbose, data_dir):
    """Simple task tracker backed by a JSON file.

    \b
    Examples:
        task-cli add "Buy groceries" "Eggs, milk, bread"
        task-cli update 1 "Buy groceries and cook dinner"
        task-cli mark-in-progress 1
        task-cli mark-done 1
        task-cli list in-progress
    """
    log_level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=log_level)

    data_file = get_data_file(data_dir)
    logger.debug("Using data file %s", data_file)
    ctx.obj = TaskStore(data_file)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command("add", context_settings=ARGS_SETTINGS)
@click.argument("name", required=False)
@click.argument("description", nargs=-1)
@click.pass_obj
def add(store: TaskStore, name: Optional[str], description: tuple[str, ...]):
    """Add a new task (name required)."""
    if not name or not name.strip():
        raise TaskUsageError("Missing task name. Usage: add <name> [description...]")

    tasks = store.load()
    task = add_task(tasks, name, " ".join(description))
    _save(store, tasks)
    print(f"Task added successfully (ID: {task.id})")


@cli.command("update", context_settings=ARGS_SETTINGS)
@click.argument("task_id", required=False)
@click.argument("description", nargs=-1)
@click.pass_obj
def update(store: TaskStore, task_id: Optional[str], description: tuple[str, ...]):
    """Update a task's description."""
    usage = "update <id> <description...>"
    if not task_id or not description:
        raise TaskUsageError(f"Missing arguments. Usage: {usage}")
    tid = _parse_id(task_id, usage)

    tasks = store.load()
    try:
        update_task(tasks, tid, " ".join(description))
    except TaskNotFoundError as e:
        _fail(str(e))
    _save(store, tasks)
    print(f"Task {tid} updated")


@cli.command("delete", context_settings=ARGS_SETTINGS)
@click.argument("task_id", required=False)
@click.pass_obj
def delete(store: TaskStore, task_id: Optional[str]):
    """Delete a task."""
    tid = _parse_id(task_id, "delete <id>")

    tasks = store.load()
    try:
        delete_task(tasks, tid)
    except TaskNotFoundError as e:
        _fail(str(e))
    _save(store, tasks)
    print(f"Task {tid} deleted")


def _mark(store: TaskStore, task_id: Optional[str], status: str, verb: str) -> None:
    tid = _parse_id(task_id, f"{verb} <id>")

    tasks = store.load()
    try:
        mark_task(tasks, tid, status)
    except TaskNotFoundError as e:
        _fail(str(e))
    _save(store, tasks)
    print(f"Task {tid} marked as {status}")


@cli.command("mark-in-progress", context_settings=ARGS_SETTINGS)
@click.argument("task_id", required=False)
@click.pass_obj
def mark_in_progress(store: TaskStore, task_id: Optional[str]):
    """Mark a task as in-progress."""
    _mark(store, task_id, "in-progress", "mark-in-progress")


@cli.command("mark-done", context_settings=ARGS_SETTINGS)
@click.argument("task_id", required=False)
@click.pass_obj
def mark_done(store: TaskStore, task_id: Optional[str]):
    """Mark a task as done."""
    _mark(store, task_id, "done", "mark-done")


@cli.command("list", context_settings=ARGS_SETTINGS)
@click.argument("status", required=False)
@click.option("--json", "output_json", is_flag=True, help="Output as JSON array")
@click.option("--table", "output_table", is_flag=True, help="Output as a table")
@click.pass_obj
def list_(store: TaskStore, status: Optional[str], output_json: bool, output_table: bool):
    """List tasks (optionally filter by status: todo, in-progress, done)."""
    status = status or None
    if status is not None and status not in STATUSES:
        raise TaskUsageError(f"Invalid status filter. Usage: list [{'|'.join(STATUSES)}]")
    if output_json and output_table:
        raise TaskUsageError("--json and --table cannot be combined")

    selected = filter_tasks(store.load(), status)

    if output_json:
        print(json.dumps([t.to_dict() for t in selected], indent=2, ensure_ascii=False))
        return
    if not selected:
        print("No tasks to show.")
        return
    if output_table:
        _print_table(selected)
        return
    for task in selected:
        print(format_task(task))


@cli.command("help", context_settings=ARGS_SETTINGS)
@click.pass_context
def help_(ctx):
    """Show this help."""
    click.echo(ctx.parent.get_help())


if __name__ == "__main__":
    cli()
