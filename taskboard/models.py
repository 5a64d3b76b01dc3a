"""Core models for taskboard.

This module defines the core data structures for the task dashboard:
- Task: An immutable record representing a single task
- TaskPatch: A typed partial update applied to a stored task
- TaskStats: Store-wide aggregate counts and completion progress
- Status: Enum for the stored task status
- Category: Enum for the dashboard filter categories
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Union


class Status(Enum):
    """Stored task status."""

    PENDING = "pending"
    COMPLETED = "completed"


class InvalidCategoryError(ValueError):
    """Raised when a filter category value is not recognised."""


class Category(Enum):
    """Dashboard filter categories.

    OVERDUE is derived from status and due date, it is never stored on a task.
    """

    ALL = "all"
    PENDING = "pending"
    COMPLETED = "completed"
    OVERDUE = "overdue"

    @classmethod
    def parse(cls, value: Union["Category", str]) -> "Category":
        """Convert a category or its string value into a Category.

        Args:
            value: Category member or string such as "overdue" (case-insensitive)

        Returns:
            The matching Category

        Raises:
            InvalidCategoryError: If the value names no known category
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            choices = ", ".join(c.value for c in cls)
            raise InvalidCategoryError(
                f"Unknown category {value!r} (expected one of: {choices})"
            ) from None


@dataclass(frozen=True)
class Task:
    """Task record as held by a TaskStore.

    Attributes:
        id: Opaque unique identifier, assigned by the store
        title: Display title
        description: Free text, may be empty
        status: Stored status (PENDING or COMPLETED)
        created_at: Timestamp when the task was created
        due_date: Timestamp the task is due
    """

    id: str
    title: str
    description: str
    status: Status
    created_at: datetime
    due_date: datetime


@dataclass(frozen=True)
class TaskPatch:
    """Partial update for a stored task.

    Fields left as None are not changed. A patch has no id or created_at
    field, both are fixed when the task is inserted.
    """

    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[Status] = None
    due_date: Optional[datetime] = None

    def changes(self) -> dict:
        """Return the fields this patch sets, keyed by Task attribute name."""
        fields = {
            "title": self.title,
            "description": self.description,
            "status": self.status,
            "due_date": self.due_date,
        }
        return {name: value for name, value in fields.items() if value is not None}

    def is_empty(self) -> bool:
        return not self.changes()


@dataclass(frozen=True)
class TaskStats:
    """Aggregate counts over every task in a store."""

    total: int
    completed: int
    pending: int
    overdue: int
    progress: int


def is_overdue(task: Task, now: datetime) -> bool:
    """Return True if the task is pending and its due date is strictly before now.

    Naive datetimes on either side are read as UTC.
    """
    return task.status == Status.PENDING and ensure_aware(task.due_date) < ensure_aware(now)


def check_title(title: str) -> str:
    """Return the title unchanged.

    Raises:
        ValueError: If the title is not a string or is blank
    """
    if not isinstance(title, str) or not title.strip():
        raise ValueError("Task title cannot be empty")
    return title


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def ensure_aware(value: datetime) -> datetime:
    """Attach UTC to a naive datetime; aware datetimes are returned unchanged."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO 8601 timestamp into an aware datetime.

    Accepts a trailing "Z" and treats values without an offset as UTC.

    Raises:
        ValueError: If the value is not a valid ISO 8601 timestamp
    """
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    return ensure_aware(datetime.fromisoformat(text))
