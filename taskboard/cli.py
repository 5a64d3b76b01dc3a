"""Command-line dashboard for taskboard.

This module provides the CLI interface for the task dashboard using argparse.
It supports the following commands:
- list: List tasks, filtered by category and search text
- stats: Show task counts and completion progress
- add: Create a new task
- edit: Change fields of a task
- done / undo: Mark a task as completed or pending
- delete: Delete a task
"""

import argparse
import logging
import sys
from datetime import datetime
from typing import List, Optional, Tuple

from taskboard.config import Settings, load_settings
from taskboard.logging_setup import setup_logging
from taskboard.models import Category, Status, TaskPatch, is_overdue, parse_timestamp
from taskboard.query import query, stats
from taskboard.sample_data import sample_tasks
from taskboard.storage import JsonStorage, Storage
from taskboard.store import TaskNotFoundError, TaskStore

logger = logging.getLogger(__name__)

MUTATING_COMMANDS = {"add", "edit", "done", "undo", "delete"}

# English abbreviations regardless of LC_TIME
MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def format_date(value: datetime) -> str:
    """Format a timestamp for display, e.g. "Jul 15, 2024"."""
    return f"{MONTHS[value.month - 1]} {value.day}, {value.year}"


def _timestamp(value: str) -> datetime:
    try:
        return parse_timestamp(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid ISO 8601 date: {value!r}") from None


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog="taskboard",
        description="Task dashboard: list, search and track tasks"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # List command
    list_parser = subparsers.add_parser("list", help="List tasks")
    list_parser.add_argument(
        "--category",
        choices=[c.value for c in Category],
        default=Category.ALL.value,
        help="Filter tasks by category (default: all)"
    )
    list_parser.add_argument(
        "--search",
        default="",
        help="Only show tasks whose title or description contains this text"
    )

    subparsers.add_parser("stats", help="Show task statistics")

    # Add command
    add_parser = subparsers.add_parser("add", help="Add a new task")
    add_parser.add_argument("title", help="Task title")
    add_parser.add_argument("--due", type=_timestamp, required=True, help="Due date (ISO 8601)")
    add_parser.add_argument("--description", default="", help="Task description")

    # Edit command
    edit_parser = subparsers.add_parser("edit", help="Edit a task")
    edit_parser.add_argument("id", help="Task ID")
    edit_parser.add_argument("--title", help="New title")
    edit_parser.add_argument("--description", help="New description")
    edit_parser.add_argument("--due", type=_timestamp, help="New due date (ISO 8601)")
    edit_parser.add_argument(
        "--status",
        choices=[s.value for s in Status],
        help="New status"
    )

    done_parser = subparsers.add_parser("done", help="Mark a task as completed")
    done_parser.add_argument("id", help="Task ID")

    undo_parser = subparsers.add_parser("undo", help="Mark a task as pending again")
    undo_parser.add_argument("id", help="Task ID")

    delete_parser = subparsers.add_parser("delete", help="Delete a task")
    delete_parser.add_argument("id", help="Task ID")

    return parser


def _not_found(task_id: str) -> int:
    print(f"Error: Task #{task_id} not found.", file=sys.stderr)
    return 1


def cmd_list(args: argparse.Namespace, store: TaskStore) -> int:
    """Handle the 'list' command.

    Args:
        args: Parsed command-line arguments
        store: TaskStore instance

    Returns:
        Exit code (0 for success)
    """
    now = store.now()
    tasks = query(store, args.category, args.search, now=now)

    if not tasks:
        print("No tasks found.")
        return 0

    for task in tasks:
        status_icon = "✓" if task.status == Status.COMPLETED else " "
        line = (
            f"[{status_icon}] #{task.id} {task.title} "
            f"({task.status.value}) due {format_date(task.due_date)}"
        )
        if is_overdue(task, now):
            line += " OVERDUE"
        print(line)
        if task.description:
            print(f"      {task.description}")

    return 0


def cmd_stats(args: argparse.Namespace, store: TaskStore) -> int:
    """Handle the 'stats' command."""
    result = stats(store)
    print(f"Total:     {result.total}")
    print(f"Completed: {result.completed}")
    print(f"Pending:   {result.pending}")
    print(f"Overdue:   {result.overdue}")
    print(f"Progress:  {result.progress}%")
    return 0


def cmd_add(args: argparse.Namespace, store: TaskStore) -> int:
    """Handle the 'add' command.

    Returns:
        Exit code (0 for success, 1 for an invalid title)
    """
    try:
        task = store.insert(title=args.title, due_date=args.due, description=args.description)
    except ValueError as exc:
        print(f"Error: {exc}.", file=sys.stderr)
        return 1
    print(f"Task added: #{task.id} {task.title} (due {format_date(task.due_date)})")
    return 0


def cmd_edit(args: argparse.Namespace, store: TaskStore) -> int:
    """Handle the 'edit' command.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    patch = TaskPatch(
        title=args.title,
        description=args.description,
        status=Status(args.status) if args.status else None,
        due_date=args.due,
    )
    if patch.is_empty():
        print("Error: Nothing to update.", file=sys.stderr)
        return 1

    try:
        task = store.merge(args.id, patch)
    except TaskNotFoundError:
        return _not_found(args.id)
    except ValueError as exc:
        print(f"Error: {exc}.", file=sys.stderr)
        return 1

    print(f"Task #{task.id} updated: {task.title}")
    return 0


def cmd_done(args: argparse.Namespace, store: TaskStore) -> int:
    """Handle the 'done' command.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    try:
        task = store.complete(args.id)
    except TaskNotFoundError:
        return _not_found(args.id)

    print(f"Task #{task.id} marked as completed: {task.title}")
    return 0


def cmd_undo(args: argparse.Namespace, store: TaskStore) -> int:
    """Handle the 'undo' command.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    try:
        task = store.reopen(args.id)
    except TaskNotFoundError:
        return _not_found(args.id)

    print(f"Task #{task.id} marked as pending: {task.title}")
    return 0


def cmd_delete(args: argparse.Namespace, store: TaskStore) -> int:
    """Handle the 'delete' command.

    Deleting an unknown task is not an error.
    """
    if store.get(args.id) is None:
        print(f"Task #{args.id} not found, nothing deleted.")
        return 0

    store.remove(args.id)
    print(f"Task #{args.id} deleted.")
    return 0


def open_store(settings: Settings) -> Tuple[Optional[Storage], TaskStore]:
    """Build the store the CLI works on.

    With a snapshot path configured, tasks are loaded from it (or seeded when
    the file does not exist yet) and the storage is returned so changes can be
    saved. Without one, the store lives in memory only.
    """
    seed = sample_tasks() if settings.sample_data else []

    if settings.db_path is None:
        return None, TaskStore(seed)

    storage = JsonStorage(settings.db_path)
    if storage.exists():
        return storage, TaskStore(storage.load().values())
    return storage, TaskStore(seed)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI.

    Args:
        argv: Command-line arguments. If None, uses sys.argv[1:]

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    settings = load_settings()
    setup_logging(settings.log_level)

    try:
        storage, store = open_store(settings)
    except ValueError as exc:
        print(f"Error: Cannot read {settings.db_path}: {exc}", file=sys.stderr)
        return 1

    # Dispatch to command handlers
    commands = {
        "list": cmd_list,
        "stats": cmd_stats,
        "add": cmd_add,
        "edit": cmd_edit,
        "done": cmd_done,
        "undo": cmd_undo,
        "delete": cmd_delete,
    }

    handler = commands.get(args.command)
    if handler is None:
        print(f"Error: Unknown command '{args.command}'", file=sys.stderr)
        return 1

    before = store.list()
    result = handler(args, store)

    if result == 0 and args.command in MUTATING_COMMANDS and store.list() != before:
        if storage is None:
            logger.info("No TASKBOARD_DB_PATH set; change kept in memory only")
        else:
            storage.save({task.id: task for task in store.list()})

    return result


if __name__ == "__main__":
    sys.exit(main())
