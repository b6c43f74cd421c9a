"""Core business logic for task-cli.

This module contains the command transforms that sit between
the CLI layer (cli.py) and the storage/utility modules.

Architecture:
- cli.py: Click commands, output formatting, exit codes
- lib.py: Pure transforms over the in-memory task list
- store.py: Loading and saving the JSON data file
- utils.py: Task dataclass, constants, helpers

Every function here mutates or reads the list it is given and never
touches the filesystem; the caller loads before and saves after.
"""

import logging
from typing import List, Optional

from taskcli.store import next_id
from taskcli.utils import STATUSES, Task, now_iso

logger = logging.getLogger(__name__)


class TaskNotFoundError(LookupError):
    """Raised when no stored task matches the requested id."""

    def __init__(self, task_id: int):
        super().__init__(f"Task {task_id} not found")
        self.task_id = task_id


def find_task(tasks: List[Task], task_id: int) -> Task:
    """Return the task with the given id.

    Raises:
        TaskNotFoundError: If no task has that id
    """
    for task in tasks:
        if task.id == task_id:
            return task
    raise TaskNotFoundError(task_id)


def add_task(tasks: List[Task], name: str, description: str = "") -> Task:
    """Append a new todo task with a fresh id and return it."""
    if not name.strip():
        raise ValueError("Task name must not be empty")
    now = now_iso()
    task = Task(
        id=next_id(tasks),
        name=name,
        description=description,
        status="todo",
        created_at=now,
        updated_at=now,
    )
    tasks.append(task)
    logger.debug("Added task %d", task.id)
    return task


def update_task(tasks: List[Task], task_id: int, description: str) -> Task:
    """Replace a task's description. Name and created_at are left alone."""
    task = find_task(tasks, task_id)
    task.description = description
    task.touch(now_iso())
    logger.debug("Updated description of task %d", task_id)
    return task


def delete_task(tasks: List[Task], task_id: int) -> Task:
    """Remove a task from the list and return it."""
    task = find_task(tasks, task_id)
    tasks.remove(task)
    logger.debug("Deleted task %d", task_id)
    return task


def mark_task(tasks: List[Task], task_id: int, status: str) -> Task:
    """Set a task's status.

    Marking a task with the status it already has still refreshes
    updated_at.
    """
    if status not in STATUSES:
        raise ValueError(f"Invalid status: {status}. Valid values: {', '.join(STATUSES)}")
    task = find_task(tasks, task_id)
    task.status = status  # type: ignore[assignment]
    task.touch(now_iso())
    logger.debug("Marked task %d as %s", task_id, status)
    return task


def filter_tasks(tasks: List[Task], status: Optional[str] = None) -> List[Task]:
    """Return tasks in stored order, optionally only those with a status."""
    if status is None:
        return list(tasks)
    if status not in STATUSES:
        raise ValueError(f"Invalid status: {status}. Valid values: {', '.join(STATUSES)}")
    return [t for t in tasks if t.status == status]
