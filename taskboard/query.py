"""Query and statistics engine.

Read-only derivations over a TaskStore snapshot:
- query: filter tasks by free-text search, then by category
- stats: store-wide counts and completion progress

The filter_tasks/compute_stats helpers work on any iterable of tasks, so
they can be used without a store.
"""

from datetime import datetime
from typing import Iterable, List, Optional, Union

from taskboard.models import Category, Status, Task, TaskStats, ensure_aware, is_overdue
from taskboard.store import TaskStore


def matches_search(task: Task, search_text: str) -> bool:
    """Case-insensitive substring match against title or description.

    An empty search text matches every task.
    """
    if not search_text:
        return True
    needle = search_text.lower()
    return needle in task.title.lower() or needle in task.description.lower()


def matches_category(task: Task, category: Category, now: datetime) -> bool:
    if category == Category.ALL:
        return True
    if category == Category.OVERDUE:
        return is_overdue(task, now)
    return task.status.value == category.value


def filter_tasks(
    tasks: Iterable[Task],
    category: Union[Category, str],
    search_text: str,
    now: datetime,
) -> List[Task]:
    """Filter tasks by search text first, then by category.

    Args:
        tasks: Tasks to filter; their order is preserved
        category: Category or its string value
        search_text: Possibly empty search text
        now: Instant used to decide overdue-ness

    Returns:
        The matching tasks

    Raises:
        InvalidCategoryError: If category names no known category
    """
    category = Category.parse(category)
    now = ensure_aware(now)
    matched = [task for task in tasks if matches_search(task, search_text)]
    return [task for task in matched if matches_category(task, category, now)]


def completion_percentage(completed: int, total: int) -> int:
    """Percentage of completed tasks rounded to the nearest integer, halves up.

    Returns 0 when total is 0.
    """
    if total <= 0:
        return 0
    return (completed * 200 + total) // (total * 2)


def compute_stats(tasks: Iterable[Task], now: datetime) -> TaskStats:
    """Count tasks by status and overdue-ness."""
    now = ensure_aware(now)
    total = completed = pending = overdue = 0
    for task in tasks:
        total += 1
        if task.status == Status.COMPLETED:
            completed += 1
        else:
            pending += 1
        if is_overdue(task, now):
            overdue += 1

    return TaskStats(
        total=total,
        completed=completed,
        pending=pending,
        overdue=overdue,
        progress=completion_percentage(completed, total),
    )


def query(
    store: TaskStore,
    category: Union[Category, str] = Category.ALL,
    search_text: str = "",
    now: Optional[datetime] = None,
) -> List[Task]:
    """Return the store's tasks matching a category and search text.

    Args:
        store: Store to read from; it is not modified
        category: Category or its string value (default: ALL)
        search_text: Case-insensitive text matched against title or description
        now: Instant for the overdue check. If None, uses the store clock.

    Returns:
        Matching tasks in store order

    Raises:
        InvalidCategoryError: If category names no known category
    """
    if now is None:
        now = store.now()
    return filter_tasks(store.list(), category, search_text, now)


def stats(store: TaskStore, now: Optional[datetime] = None) -> TaskStats:
    """Compute statistics over every task in the store, ignoring any filter.

    Args:
        store: Store to read from; it is not modified
        now: Instant for the overdue check. If None, uses the store clock.
    """
    if now is None:
        now = store.now()
    return compute_stats(store.list(), now)
