"""Snapshot storage for taskboard.

This module provides an abstract storage interface and a JSON file
implementation used by the CLI to keep a store's tasks between runs. The
JsonStorage implementation uses fcntl-based file locking around reads and
writes.
"""

import fcntl
import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Union

from taskboard.models import Status, Task, check_title, parse_timestamp

logger = logging.getLogger(__name__)


class Storage(ABC):
    """Abstract base class for task snapshot storage."""

    @abstractmethod
    def save(self, tasks: Dict[str, Task]) -> None:
        """Save tasks to storage.

        Args:
            tasks: Dictionary mapping task IDs to Task objects, in store order
        """

    @abstractmethod
    def load(self) -> Dict[str, Task]:
        """Load tasks from storage.

        Returns:
            Dictionary mapping task IDs to Task objects, in saved order
        """

    @abstractmethod
    def exists(self) -> bool:
        """Return True if a snapshot has been saved."""


def task_to_dict(task: Task) -> dict:
    return {
        "id": task.id,
        "title": task.title,
        "description": task.description,
        "status": task.status.value,
        "created_at": task.created_at.isoformat(),
        "due_date": task.due_date.isoformat(),
    }


def task_from_dict(data: dict) -> Task:
    """Build a Task from its JSON form.

    Raises:
        KeyError: If a required field is missing
        ValueError: If the title, description, status or a timestamp is invalid
    """
    description = data.get("description") or ""
    if not isinstance(description, str):
        raise ValueError(f"Task description must be a string, got {description!r}")
    return Task(
        id=str(data["id"]),
        title=check_title(data["title"]),
        description=description,
        status=Status(data["status"]),
        created_at=parse_timestamp(data["created_at"]),
        due_date=parse_timestamp(data["due_date"]),
    )


class JsonStorage(Storage):
    """JSON file-based snapshot storage with file locking.

    Attributes:
        file_path: Path to the JSON snapshot file
    """

    def __init__(self, file_path: Union[str, Path]):
        self.file_path = Path(file_path)

    def exists(self) -> bool:
        return self.file_path.exists()

    def save(self, tasks: Dict[str, Task]) -> None:
        """Save tasks to the JSON file with an exclusive lock."""
        self.file_path.parent.mkdir(parents=True, exist_ok=True)

        serializable_tasks = {task_id: task_to_dict(task) for task_id, task in tasks.items()}

        with open(self.file_path, "w", encoding="utf-8") as f:
            fcntl.flock(f.fileno(), fcntl.LOCK_EX)
            try:
                json.dump(serializable_tasks, f, indent=2, ensure_ascii=False)
            finally:
                fcntl.flock(f.fileno(), fcntl.LOCK_UN)

        logger.debug("Saved %d tasks to %s", len(tasks), self.file_path)

    def load(self) -> Dict[str, Task]:
        """Load tasks from the JSON file with a shared lock.

        Returns:
            Tasks keyed by ID. Empty if the file doesn't exist or is empty.

        Raises:
            ValueError: If the file holds invalid JSON or an invalid task
        """
        if not self.file_path.exists():
            return {}

        with open(self.file_path, "r", encoding="utf-8") as f:
            fcntl.flock(f.fileno(), fcntl.LOCK_SH)
            try:
                content = f.read().strip()
            finally:
                fcntl.flock(f.fileno(), fcntl.LOCK_UN)

        if not content:
            return {}

        data = json.loads(content)
        try:
            tasks = {}
            for task_data in data.values():
                task = task_from_dict(task_data)
                tasks[task.id] = task
        except (AttributeError, KeyError, TypeError) as exc:
            raise ValueError(f"Malformed task snapshot {self.file_path}: {exc!r}") from exc

        logger.debug("Loaded %d tasks from %s", len(tasks), self.file_path)
        return tasks
