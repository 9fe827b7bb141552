"""
Command Line Interface for todotm.
"""

import click
from pathlib import Path
from .version import VERSION
from .data import default_data_dir, PersistenceEngine
from .commands import run_command
from .recovery import TodoError
from .render import render
from .logs import setup_logging, get_logger

log = get_logger("cli")

# Tokens are passed through untouched, including ones that look like options
TOKENS = dict(ignore_unknown_options=True)


@click.group()
@click.version_option(version=VERSION, prog_name="todo")
@click.option('--data-dir', type=click.Path(file_okay=False, path_type=Path), envvar='TODOTM_DATA_DIR',
              default=None, help='Directory holding tasks.json and its backups')
@click.pass_context
def main(ctx, data_dir):
    """
    todo - a small task tracker that keeps its tasks in one JSON file.

    Task ids are positions in the list; removing or sorting tasks changes them.
    Every change can be undone with 'todo undo' (up to 10 steps).
    """
    data_dir = data_dir or default_data_dir()
    setup_logging(data_dir / "logs")
    ctx.obj = data_dir / PersistenceEngine.TASKS_FILE


def _run(ctx, command, args):
    try:
        outcome = run_command(command, args, path=ctx.obj)
    except TodoError as e:
        log.debug(f"'{command}' failed: {e!r}")
        click.echo(f"❌ {e}", err=True)
        ctx.exit(1)
    text = render(outcome)
    if text:
        click.echo(text)


@main.command(context_settings=TOKENS)
@click.argument('args', nargs=-1)
@click.pass_context
def add(ctx, args):
    """Add a task: todo add NAME..."""
    _run(ctx, "add", args)


@main.command(context_settings=TOKENS)
@click.argument('args', nargs=-1)
@click.pass_context
def rename(ctx, args):
    """Rename a task: todo rename ID NAME..."""
    _run(ctx, "rename", args)


@main.command(context_settings=TOKENS)
@click.argument('args', nargs=-1)
@click.pass_context
def remove(ctx, args):
    """Remove a task: todo remove ID"""
    _run(ctx, "remove", args)


@main.command(context_settings=TOKENS)
@click.argument('args', nargs=-1)
@click.pass_context
def color(ctx, args):
    """Tag a task: todo color ID red|yellow|green|blue|purple|clear"""
    _run(ctx, "color", args)


@main.command(context_settings=TOKENS)
@click.argument('args', nargs=-1)
@click.pass_context
def due(ctx, args):
    """Set a due date: todo due ID YYYY-MM-DD"""
    _run(ctx, "due", args)


@main.command(context_settings=TOKENS)
@click.argument('args', nargs=-1)
@click.pass_context
def note(ctx, args):
    """Add a line to a task's note, or 'clear' it: todo note ID TEXT..."""
    _run(ctx, "note", args)


@main.command(context_settings=TOKENS)
@click.argument('args', nargs=-1)
@click.pass_context
def sort(ctx, args):
    """Sort tasks by color, then by due date."""
    _run(ctx, "sort", args)


@main.command(name="list", context_settings=TOKENS)
@click.argument('args', nargs=-1)
@click.pass_context
def list_tasks(ctx, args):
    """List all tasks."""
    _run(ctx, "list", args)


@main.command(context_settings=TOKENS)
@click.argument('args', nargs=-1)
@click.pass_context
def show(ctx, args):
    """Show everything about one task: todo show ID"""
    _run(ctx, "show", args)


@main.command(context_settings=TOKENS)
@click.argument('args', nargs=-1)
@click.pass_context
def undo(ctx, args):
    """Undo the last change."""
    _run(ctx, "undo", args)


@main.command(context_settings=TOKENS)
@click.argument('args', nargs=-1)
@click.pass_context
def history(ctx, args):
    """List the saved states 'undo' can go back to."""
    _run(ctx, "history", args)


@main.command(context_settings=TOKENS)
@click.argument('args', nargs=-1)
@click.pass_context
def info(ctx, args):
    """Show version and license."""
    _run(ctx, "info", args)


@main.command(name="help")
@click.pass_context
def help_command(ctx):
    """Show this message."""
    click.echo(ctx.parent.get_help())


if __name__ == "__main__":
    main()
