"""Command-line interface for the todo list.

One invocation performs exactly one operation: load, apply, store.
Listings store too, so every successful run rewrites the file; any failure
skips the store.
"""
import logging
import sys
from pathlib import Path
from typing import IO, Optional, Sequence

import click

from todolist.errors import EmptyInputError, TodoError
from todolist.storage import TODO_FILE
from todolist.theme import Theme
from todolist.todos import TodoList

log = logging.getLogger(__name__)


# --- terminal control helpers ---
# ESC[3J (scrollback), ESC[H (home), ESC[2J (screen), ESC[H (home)
def _clear_screen() -> None:
    click.echo("\033[3J\033[H\033[2J\033[H", nl=False)


def get_input(args: Sequence[str], stream: IO[str]) -> str:
    """Task text from trailing arguments, else one line from ``stream``."""
    if args:
        text = ' '.join(args)
    else:
        if stream.isatty():
            click.echo("Enter task: ", nl=False, err=True)
        text = stream.readline().rstrip('\r\n')
    if not text.strip():
        raise EmptyInputError()
    return text


def _fail(action: str, exc: BaseException) -> None:
    # traceback only with -v
    exc_info = exc if log.isEnabledFor(logging.DEBUG) else None
    log.error("%s failed: %s", action, exc, exc_info=exc_info)
    click.echo(f"Error {action}: {exc}", err=True)
    sys.exit(1)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("-l", "--list", "list_all", is_flag=True, help="List all todo items.")
@click.option("--list-done", is_flag=True, help="List completed todo items.")
@click.option("--list-pending", is_flag=True, help="List pending todo items.")
@click.option("-a", "--add", is_flag=True, help="Add a new todo item (text from arguments or stdin).")
@click.option("-e", "--edit", type=int, metavar="N", help="Replace the text of todo item N.")
@click.option("-c", "--complete", type=int, metavar="N", help="Mark todo item N as completed.")
@click.option("-d", "--del", "delete", type=int, metavar="N", help="Delete todo item N.")
@click.option("--del-all", is_flag=True, help="Delete every todo item.")
@click.option("-f", "--file", "path", type=click.Path(dir_okay=False, path_type=Path),
              default=TODO_FILE, show_default=True, help="Todo file to use.")
@click.option("--color/--no-color", default=None, help="Force colors on or off.")
@click.option("--no-clear", is_flag=True, help="Do not clear the screen before listing.")
@click.option("-v", "--verbose", is_flag=True, help="Log debug output to stderr.")
@click.argument("text", nargs=-1)
def main(list_all: bool, list_done: bool, list_pending: bool, add: bool,
         edit: Optional[int], complete: Optional[int], delete: Optional[int],
         del_all: bool, path: Path, color: Optional[bool], no_clear: bool,
         verbose: bool, text: Sequence[str]) -> None:
    """Manage a todo list stored in a JSON file."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
        force=True,
    )

    requested = [name for name, on in (
        ("list", list_all),
        ("list-done", list_done),
        ("list-pending", list_pending),
        ("add", add),
        ("edit", edit is not None),
        ("complete", complete is not None),
        ("del", delete is not None),
        ("del-all", del_all),
    ) if on]
    if len(requested) > 1:
        raise click.UsageError(f"only one operation per run, got: {', '.join(requested)}")
    if not requested:
        click.echo("Invalid command")
        return
    if text and requested[0] not in ("add", "edit"):
        raise click.UsageError(f"{requested[0]} takes no text, got: {' '.join(text)}")

    try:
        todos = TodoList.load(path)
    except (TodoError, OSError) as exc:
        _fail("loading todo items", exc)

    op = requested[0]
    if op.startswith("list"):
        view = {"list": "all", "list-done": "done", "list-pending": "pending"}[op]
        stdout = click.get_text_stream("stdout")
        theme = Theme.from_env(stream=stdout, force=color)
        if not no_clear and stdout.isatty():
            _clear_screen()
        click.echo(todos.report(view=view, theme=theme), color=theme.enabled)
        message = None
    else:
        message = _apply(todos, op, text, edit, complete, delete)

    try:
        todos.store(path)
    except (TodoError, OSError) as exc:
        _fail("storing todo items", exc)
    if message:
        click.echo(message)


def _apply(todos: TodoList, op: str, text: Sequence[str], edit: Optional[int],
           complete: Optional[int], delete: Optional[int]) -> str:
    """Run one mutating operation and return the confirmation line."""
    try:
        if op == "add":
            task = todos.add(get_input(text, click.get_text_stream("stdin")))
            message = f'Added task {len(todos)}: {task.task}'
        elif op == "edit":
            todos.check_index(edit)
            new_text = get_input(text, click.get_text_stream("stdin"))
            todos.edit(edit, new_text)
            message = f'Task {edit} updated.'
        elif op == "complete":
            todos.complete(complete)
            message = f'Task {complete} completed.'
        elif op == "del":
            task = todos.delete(delete)
            message = f'Task {delete} removed: {task.task}'
        else:
            removed = todos.delete_all()
            message = f'Removed {removed} task(s).'
    except TodoError as exc:
        _fail(f"running {op}", exc)
    return message


if __name__ == '__main__':  # pragma: no cover
    main()
