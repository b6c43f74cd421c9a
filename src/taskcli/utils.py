"""Utility functions and data structures for task-cli.

Pure helpers with no I/O beyond environment lookup: the Task record,
status constants, timestamp/id parsing and output formatting.
"""

import logging
import os
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional

# =============================================================================
# Constants
# =============================================================================

TaskStatus = Literal["todo", "in-progress", "done"]

STATUSES: List[str] = ["todo", "in-progress", "done"]

DATA_DIR_ENV = "DATA_DIR"
DATA_FILE_NAME = "task.json"

logger = logging.getLogger(__name__)


def now_iso() -> str:
    """Current UTC time as ISO 8601 with milliseconds and a Z suffix."""
    stamp = datetime.now(timezone.utc).isoformat(timespec="milliseconds")
    return stamp.replace("+00:00", "Z")


def parse_timestamp(value: str) -> datetime:
    """Parse a stored timestamp, accepting the trailing Z form."""
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def _precedes(stamp: str, reference: str) -> bool:
    """True if stamp is strictly earlier than reference.

    Stamps that cannot be parsed or compared (e.g. one without a timezone)
    are treated as not earlier.
    """
    try:
        return parse_timestamp(stamp) < parse_timestamp(reference)
    except (ValueError, TypeError) as e:
        logger.debug("Cannot compare timestamps %r and %r: %s", stamp, reference, e)
        return False


# =============================================================================
# Data Classes
# =============================================================================


class InvalidTaskIdError(ValueError):
    """Raised when an id argument is not a positive base-10 integer."""


@dataclass
class Task:
    """A single tracked task.

    Attributes:
        id: Positive integer, unique within the data file
        name: Non-empty name, fixed at creation
        description: Free text, replaced by update
        status: One of todo, in-progress, done
        created_at: ISO timestamp set once at creation
        updated_at: ISO timestamp refreshed on every mutation
    """

    id: int
    name: str
    description: str = ""
    status: TaskStatus = "todo"
    created_at: str = ""
    updated_at: str = ""

    def __post_init__(self):
        if not isinstance(self.id, int) or isinstance(self.id, bool) or self.id < 1:
            raise ValueError(f"Invalid task id: {self.id!r}")
        if not isinstance(self.name, str) or not self.name.strip():
            raise ValueError("Task name must be a non-empty string")
        if self.status not in STATUSES:
            raise ValueError(f"Invalid status: {self.status!r}")
        if not isinstance(self.created_at, str) or not isinstance(self.updated_at, str):
            raise ValueError("Task timestamps must be strings")
        if not self.created_at:
            self.created_at = self.updated_at or now_iso()
        if not self.updated_at:
            self.updated_at = self.created_at
        elif _precedes(self.updated_at, self.created_at):
            self.updated_at = self.created_at

    def touch(self, now: Optional[str] = None) -> None:
        """Refresh updated_at, never moving it before created_at."""
        stamp = now or now_iso()
        if _precedes(stamp, self.created_at):
            stamp = self.created_at
        self.updated_at = stamp

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the persisted JSON layout (camelCase timestamps)."""
        data = asdict(self)
        return {
            "id": data["id"],
            "name": data["name"],
            "description": data["description"],
            "status": data["status"],
            "createdAt": data["created_at"],
            "updatedAt": data["updated_at"],
        }

    @classmethod
    def from_dict(cls, data: Any) -> "Task":
        """Create a Task from a stored record.

        Numeric-string ids ("3") are accepted and converted to int.

        Raises:
            ValueError: If the record is not a valid task
        """
        if not isinstance(data, dict):
            raise ValueError(f"Task record must be an object, got {type(data).__name__}")
        raw_id = data.get("id")
        if isinstance(raw_id, str):
            raw_id = parse_task_id(raw_id)
        elif isinstance(raw_id, float) and raw_id.is_integer():
            raw_id = int(raw_id)
        description = data.get("description") or ""
        return cls(
            id=raw_id,  # type: ignore[arg-type]
            name=data.get("name"),  # type: ignore[arg-type]
            description=str(description),
            status=data.get("status", "todo"),
            created_at=data.get("createdAt") or "",
            updated_at=data.get("updatedAt") or "",
        )


# =============================================================================
# Basic Utility Functions
# =============================================================================


def parse_task_id(value: str) -> int:
    """Parse a task id argument.

    Only plain base-10 integers are accepted; "12abc" or "1.5" are rejected
    instead of being truncated.

    Raises:
        InvalidTaskIdError: If value is not a positive integer
    """
    text = value.strip()
    if not (text.isascii() and text.isdigit()):
        raise InvalidTaskIdError(f"Invalid task id: {value!r}")
    task_id = int(text)
    if task_id < 1:
        raise InvalidTaskIdError(f"Invalid task id: {value!r}")
    return task_id


def format_task(task: Task) -> str:
    """Format a task as a single list line.

    The description segment is left out entirely when empty.
    """
    desc = f" — {task.description}" if task.description else ""
    return (
        f"[{task.id}] {task.name}{desc} | {task.status}"
        f" | created: {task.created_at} | updated: {task.updated_at}"
    )


def get_data_dir(override: Optional[str] = None) -> Path:
    """Resolve the directory holding the data file.

    Priority: explicit override, then the DATA_DIR environment variable,
    then the package's own directory.
    """
    if override:
        return Path(override)
    if env_dir := os.environ.get(DATA_DIR_ENV):
        return Path(env_dir)
    return Path(__file__).parent


def get_data_file(override: Optional[str] = None) -> Path:
    """Path to task.json inside the resolved data directory."""
    return get_data_dir(override) / DATA_FILE_NAME
