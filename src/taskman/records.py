"""Task records and their one-line text encoding.

Each task occupies one line of the task file::

    <id>,<status>,<description>

``id`` is a positive integer without leading zeros, ``status`` is ``0`` (pending) or ``1``
(completed) and ``description`` is the rest of the line, commas included.
Lines that do not have this shape are malformed: they are never
reinterpreted, and the store copies them through unchanged.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from taskman.errors import InvalidDescription

PENDING = 0
COMPLETED = 1

_RECORD_RE = re.compile(r"([1-9][0-9]*),([01]),([^\n]+)\n?", re.ASCII)
_ID_PREFIX_RE = re.compile(r"([0-9]+),", re.ASCII)


@dataclass
class Task:
    """A single task."""

    id: int
    description: str
    completed: bool = False

    @property
    def status_label(self) -> str:
        """Human-readable status."""
        return "DONE" if self.completed else "PENDING"


def encode_task(task: Task) -> str:
    """Encode a task as a newline-terminated record."""
    status = COMPLETED if task.completed else PENDING
    return f"{task.id},{status},{task.description}\n"


def decode_task(line: str) -> Task | None:
    """Decode a record, returning None for malformed lines."""
    match = _RECORD_RE.fullmatch(line)
    if match is None:
        return None

    return Task(
        id=int(match.group(1)),
        description=match.group(3),
        completed=int(match.group(2)) == COMPLETED,
    )


def decode_id(line: str) -> int | None:
    """Parse only the leading ``<id>,`` of a line.

    Used for id assignment, so ids on otherwise malformed lines are
    still never handed out again.
    """
    match = _ID_PREFIX_RE.match(line)
    if match is None:
        return None
    return int(match.group(1))


def validate_description(description: str, max_length: int) -> str:
    """Check that a description fits in a single record.

    Args:
        description: The text to store.
        max_length: Longest accepted description, in characters.

    Returns:
        The description, unchanged.

    Raises:
        InvalidDescription: If the text is empty, spans lines or is too long.
    """
    if not description.strip():
        raise InvalidDescription("Task description cannot be empty.")
    if "\n" in description or "\r" in description:
        raise InvalidDescription("Task description cannot contain line breaks.")
    if len(description) > max_length:
        raise InvalidDescription(
            f"Task description is {len(description)} characters long (maximum {max_length})."
        )
    return description
