"""Demo tasks used to seed a fresh dashboard."""

from typing import List

from taskboard.models import Status, Task, parse_timestamp


def sample_tasks() -> List[Task]:
    """Return a new list with the four demo tasks."""
    return [
        Task(
            id="1",
            title="Complete project proposal",
            description=(
                "Write and review the Q2 project proposal document. Include timeline, "
                "budget, and resource allocation details."
            ),
            status=Status.PENDING,
            created_at=parse_timestamp("2023-06-15T10:00:00Z"),
            due_date=parse_timestamp("2024-07-15T23:59:59Z"),
        ),
        Task(
            id="2",
            title="Update website design",
            description=(
                "Redesign the homepage layout with improved user experience and "
                "modern design elements."
            ),
            status=Status.COMPLETED,
            created_at=parse_timestamp("2023-06-10T09:00:00Z"),
            due_date=parse_timestamp("2024-07-10T23:59:59Z"),
        ),
        Task(
            id="3",
            title="Client presentation",
            description=(
                "Prepare and deliver presentation to the new client about our "
                "services and capabilities."
            ),
            status=Status.PENDING,
            created_at=parse_timestamp("2023-06-01T14:00:00Z"),
            due_date=parse_timestamp("2024-07-08T17:00:00Z"),
        ),
        Task(
            id="4",
            title="Weekly team meeting",
            description="Conduct regular team meeting to discuss progress and blockers.",
            status=Status.COMPLETED,
            created_at=parse_timestamp("2023-06-05T11:00:00Z"),
            due_date=parse_timestamp("2024-07-05T15:00:00Z"),
        ),
    ]
