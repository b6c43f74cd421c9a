"""JSON file persistence for tasks.

The whole collection lives in a single pretty-printed JSON array and is
read and rewritten in full on every invocation:

[
  {
    "id": 1,
    "name": "Buy milk",
    "description": "",
    "status": "todo",
    "createdAt": "2024-05-01T10:00:00.000Z",
    "updatedAt": "2024-05-01T10:00:00.000Z"
  }
]

No locking is done: two invocations racing on the same file may lose
an update (last writer wins).
"""

import contextlib
import json
import logging
from pathlib import Path
from typing import List

from taskcli.utils import Task

logger = logging.getLogger(__name__)


class StoreError(OSError):
    """Raised when the data file cannot be written."""


def next_id(tasks: List[Task]) -> int:
    """Next free id: max of the existing positive ids plus one, or 1."""
    ids = [t.id for t in tasks if isinstance(t.id, int) and t.id > 0]
    return max(ids) + 1 if ids else 1


class TaskStore:
    """Loads and saves the task collection from/to a JSON file."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> List[Task]:
        """Load all tasks from disk.

        Missing or empty file -> empty list. A file that cannot be read or
        parsed as a JSON array is reported with a warning and treated as
        empty; the next save overwrites it. Invalid or duplicate records
        are dropped individually.
        """
        logger.debug("Loading tasks from %s", self.path)
        if not self.path.exists():
            return []
        try:
            raw = self.path.read_text(encoding="utf-8")
            if not raw.strip():
                return []
            data = json.loads(raw)
        except (OSError, ValueError) as e:
            logger.warning("Could not read tasks file %s, starting empty: %s", self.path, e)
            return []

        if not isinstance(data, list):
            logger.warning(
                "Tasks file %s does not contain a JSON array, starting empty", self.path
            )
            return []

        tasks: List[Task] = []
        seen: set[int] = set()
        for index, record in enumerate(data):
            try:
                task = Task.from_dict(record)
            except ValueError as e:
                logger.warning("Skipping invalid task record #%d: %s", index, e)
                continue
            if task.id in seen:
                logger.warning("Skipping duplicate task id %d", task.id)
                continue
            seen.add(task.id)
            tasks.append(task)

        logger.debug("Loaded %d tasks", len(tasks))
        return tasks

    def save(self, tasks: List[Task]) -> None:
        """Write all tasks to disk, replacing the previous contents.

        Writes to a temporary file first and renames it into place.

        Raises:
            StoreError: If the file could not be written
        """
        payload = json.dumps([t.to_dict() for t in tasks], indent=2, ensure_ascii=False)
        temp_path = self.path.with_suffix(".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            temp_path.write_text(payload, encoding="utf-8")
            temp_path.replace(self.path)
        except OSError as e:
            with contextlib.suppress(OSError):
                temp_path.unlink(missing_ok=True)
            raise StoreError(f"Could not write tasks file {self.path}: {e}") from e
        logger.debug("Saved %d tasks to %s", len(tasks), self.path)
