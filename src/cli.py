"""Command-line interface for the task tracker.

One click command per store operation. The group callback resolves the
settings, bootstraps the data directory and hands a TaskStore to the
subcommands through the click context. Every usage error exits with 1.
"""
import logging
from dataclasses import dataclass
from typing import Tuple

import click

from config import ConfigError, Settings, ensure_data_dir
from display import render_tasks, summary
from logging_setup import setup_logging
from models import InvalidDescription
from storage import StoreError, TaskStore
from theme import Theme

logger = logging.getLogger(__name__)

USAGE_EXIT_CODE = 1
NO_TASKS = "No tasks found."
NO_TASKS_HINT = "No tasks found. Create one using 'add' command."
TASK_ID = click.IntRange(min=1)


class TaskGroup(click.Group):
    """click.Group whose usage errors (its own and its commands') exit with 1."""

    def make_context(self, info_name, args, parent=None, **extra):
        try:
            return super().make_context(info_name, args, parent=parent, **extra)
        except click.UsageError as exc:
            exc.exit_code = USAGE_EXIT_CODE
            raise

    def invoke(self, ctx):
        try:
            return super().invoke(ctx)
        except click.UsageError as exc:
            exc.exit_code = USAGE_EXIT_CODE
            raise


@dataclass
class App:
    settings: Settings
    store: TaskStore
    theme: Theme

    def echo(self, message: str = "") -> None:
        click.echo(message, color=self.theme.echo_color)


def _report_store_error(exc: StoreError) -> None:
    # recoverable: reported, command aborted, normal exit
    logger.debug("Store operation failed", exc_info=True)
    click.echo(f"Error: {exc}", err=True)


@click.group(cls=TaskGroup, invoke_without_command=True,
             context_settings={"help_option_names": ["-h", "--help"]})
@click.option("-v", "--verbose", is_flag=True, help="Log debug details to stderr.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Personal task tracker backed by ~/.local/taskmanager/tasks.txt."""
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        ctx.exit(USAGE_EXIT_CODE)
    try:
        settings = Settings.from_env()
        setup_logging(logging.DEBUG if verbose else settings.log_level)
        ensure_data_dir(settings)
    except ConfigError as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)
    logger.debug("Using task file %s", settings.tasks_file)
    ctx.obj = App(settings=settings, store=TaskStore(settings.tasks_file),
                  theme=Theme.from_settings(settings))


# Every word after "add" belongs to the description, dash-leading ones too.
@cli.command(context_settings={"ignore_unknown_options": True,
                                "allow_interspersed_args": False})
@click.argument("description", nargs=-1, required=True, type=click.UNPROCESSED)
@click.pass_obj
def add(app: App, description: Tuple[str, ...]) -> None:
    """Add a pending task (words are joined with single spaces)."""
    text = " ".join(description)
    try:
        task = app.store.add(text)
    except InvalidDescription as exc:
        raise click.UsageError(str(exc)) from exc
    except StoreError as exc:
        _report_store_error(exc)
        return
    app.echo(f'Task added: ID {app.theme.style(str(task.id), "id", bold=True)} - "{task.description}"')


@cli.command(name="list")
@click.pass_obj
def list_tasks(app: App) -> None:
    """Show every task in file order."""
    if not app.store.exists():
        app.echo(NO_TASKS_HINT)
        return
    try:
        tasks = list(app.store.list_tasks())
    except StoreError as exc:
        _report_store_error(exc)
        return
    if not tasks:
        app.echo(NO_TASKS)
        return
    app.echo()
    for line in render_tasks(tasks, app.theme):
        app.echo(line)
    app.echo(summary(tasks))


def _change_status(app: App, task_id: int, completed: bool) -> None:
    if not app.store.exists():
        app.echo(NO_TASKS)
        return
    try:
        found = app.store.set_status(task_id, completed)
    except StoreError as exc:
        _report_store_error(exc)
        return
    if not found:
        app.echo(f"Task ID {task_id} not found.")
        return
    label = "DONE" if completed else "PENDING"
    app.echo(f"Task ID {task_id} marked as {app.theme.style(label, app.theme.status_key(completed))}.")


@cli.command()
@click.argument("task_id", type=TASK_ID)
@click.pass_obj
def done(app: App, task_id: int) -> None:
    """Mark a task completed."""
    _change_status(app, task_id, True)


@cli.command()
@click.argument("task_id", type=TASK_ID)
@click.pass_obj
def pending(app: App, task_id: int) -> None:
    """Mark a task pending again."""
    _change_status(app, task_id, False)


@cli.command()
@click.argument("task_id", type=TASK_ID)
@click.pass_obj
def delete(app: App, task_id: int) -> None:
    """Remove a task."""
    if not app.store.exists():
        app.echo(NO_TASKS)
        return
    try:
        found = app.store.delete(task_id)
    except StoreError as exc:
        _report_store_error(exc)
        return
    if found:
        app.echo(f"Task ID {task_id} deleted.")
    else:
        app.echo(f"Task ID {task_id} not found.")
