"""In-memory task store.

This module provides the TaskStore class that owns a collection of Task
records for the lifetime of the object. It handles task creation, retrieval,
partial updates and deletion. Nothing here touches disk; see
taskboard.storage for the JSON snapshot used by the CLI.
"""

import dataclasses
import logging
import uuid
from datetime import datetime
from typing import Callable, Iterable, Iterator, List, Optional

from taskboard.models import Status, Task, TaskPatch, check_title, ensure_aware, utc_now

logger = logging.getLogger(__name__)


class TaskNotFoundError(LookupError):
    """Raised when an update targets a task identifier the store does not hold."""

    def __init__(self, task_id: str):
        super().__init__(f"Task with ID {task_id} does not exist")
        self.task_id = task_id


class TaskStore:
    """Owning collection of tasks.

    Tasks are kept in insertion order. Records are immutable, so an update
    replaces the stored record with a new one.

    Attributes:
        clock: Callable returning the current time, used for created_at and
               as the default "now" of the query engine
    """

    def __init__(
        self,
        tasks: Optional[Iterable[Task]] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """Initialize TaskStore with optional initial records.

        Args:
            tasks: Initial tasks, kept in the given order. Naive timestamps
                   are stored as UTC.
            clock: Time source. If None, uses the current UTC time.

        Raises:
            ValueError: If two initial tasks share an identifier
        """
        self.clock = clock or utc_now
        self._tasks: List[Task] = []
        seen = set()
        for task in tasks or ():
            if task.id in seen:
                raise ValueError(f"Duplicate task ID {task.id}")
            seen.add(task.id)
            self._tasks.append(
                dataclasses.replace(
                    task,
                    created_at=ensure_aware(task.created_at),
                    due_date=ensure_aware(task.due_date),
                )
            )

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self) -> Iterator[Task]:
        return iter(list(self._tasks))

    def now(self) -> datetime:
        """Return the store clock's current time as an aware datetime."""
        return ensure_aware(self.clock())

    def list(self) -> List[Task]:
        """Get all tasks, unfiltered, in insertion order.

        Returns:
            A new list; changing it does not change the store
        """
        return list(self._tasks)

    def get(self, task_id: str) -> Optional[Task]:
        """Get a specific task by ID.

        Returns:
            Task if found, None otherwise
        """
        index = self._index_of(task_id)
        return None if index is None else self._tasks[index]

    def insert(
        self,
        title: str,
        due_date: datetime,
        description: str = "",
        status: Status = Status.PENDING,
    ) -> Task:
        """Create a new task.

        Args:
            title: Task title, must not be blank
            due_date: When the task is due
            description: Optional free-text description
            status: Initial status (default: PENDING)

        Returns:
            The stored Task with its assigned ID and creation time

        Raises:
            ValueError: If the title is blank
        """
        task = Task(
            id=uuid.uuid4().hex,
            title=check_title(title),
            description=description,
            status=status,
            created_at=self.now(),
            due_date=ensure_aware(due_date),
        )
        self._tasks.append(task)
        logger.debug("Inserted task id=%s title=%r", task.id, task.title)
        return task

    def merge(self, task_id: str, patch: TaskPatch) -> Task:
        """Apply a partial update to a stored task.

        Args:
            task_id: ID of the task to update
            patch: Fields to change; None fields are left as they are

        Returns:
            The updated Task

        Raises:
            TaskNotFoundError: If no task has this ID
            ValueError: If the patch sets a blank title
        """
        index = self._index_of(task_id)
        if index is None:
            logger.info("Cannot update task id=%s: not found", task_id)
            raise TaskNotFoundError(task_id)

        changes = patch.changes()
        if "title" in changes:
            check_title(changes["title"])
        if "due_date" in changes:
            changes["due_date"] = ensure_aware(changes["due_date"])

        task = dataclasses.replace(self._tasks[index], **changes)
        self._tasks[index] = task
        logger.debug("Updated task id=%s fields=%s", task_id, sorted(changes))
        return task

    def remove(self, task_id: str) -> None:
        """Delete a task by ID. Unknown IDs are ignored."""
        index = self._index_of(task_id)
        if index is None:
            logger.debug("Remove of unknown task id=%s ignored", task_id)
            return
        del self._tasks[index]
        logger.debug("Removed task id=%s", task_id)

    def complete(self, task_id: str) -> Task:
        """Mark a task as completed.

        Raises:
            TaskNotFoundError: If no task has this ID
        """
        return self.merge(task_id, TaskPatch(status=Status.COMPLETED))

    def reopen(self, task_id: str) -> Task:
        """Mark a task as pending again.

        Raises:
            TaskNotFoundError: If no task has this ID
        """
        return self.merge(task_id, TaskPatch(status=Status.PENDING))

    def _index_of(self, task_id: str) -> Optional[int]:
        for index, task in enumerate(self._tasks):
            if task.id == task_id:
                return index
        return None
