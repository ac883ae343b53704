"""Task file storage.

The task file is the only source of truth. New tasks are appended; any
change to an existing record rewrites the whole file through a scratch
file in the same directory, which then replaces the original in a single
rename. Lines are handled as bytes so that malformed lines, whatever
their encoding, are copied through exactly as read.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Iterator
from enum import Enum
from pathlib import Path

from taskman.config import TaskmanConfig
from taskman.errors import StoreError
from taskman.records import Task, decode_id, decode_task, encode_task, validate_description

logger = logging.getLogger(__name__)


class EditOutcome(Enum):
    """Result of editing an existing task."""

    UPDATED = "updated"
    DELETED = "deleted"
    NOT_FOUND = "not found"
    NO_STORE = "no task file"


def _decode_line(raw: bytes) -> Task | None:
    try:
        line = raw.decode("utf-8")
    except UnicodeDecodeError:
        return None
    return decode_task(line)


class TaskStore:
    """Reads and edits the task file described by a TaskmanConfig."""

    def __init__(self, config: TaskmanConfig) -> None:
        self.config = config

    @property
    def path(self) -> Path:
        return self.config.task_file

    def exists(self) -> bool:
        """Whether the task file exists."""
        return self.path.exists()

    def _read_lines(self) -> Iterator[bytes]:
        try:
            with open(self.path, "rb") as f:
                yield from f
        except OSError as e:
            raise StoreError(f"Cannot read task file: {e.strerror or e}") from e

    # -------------------- reads --------------------

    def next_id(self) -> int:
        """Return the id for the next new task (highest existing id + 1)."""
        if not self.exists():
            return 1

        max_id = 0
        for raw in self._read_lines():
            task_id = decode_id(raw.decode("utf-8", errors="replace"))
            if task_id is not None and task_id > max_id:
                max_id = task_id
        return max_id + 1

    def list_tasks(self) -> list[Task] | None:
        """Return every decodable task in file order.

        Returns:
            None if the task file does not exist, otherwise the tasks
            (possibly none). Malformed lines are skipped.

        Raises:
            StoreError: If the task file exists but cannot be read.
        """
        if not self.exists():
            return None

        tasks = []
        skipped = 0
        for raw in self._read_lines():
            task = _decode_line(raw)
            if task is None:
                skipped += 1
                continue
            tasks.append(task)

        if skipped:
            logger.debug("Skipped %d malformed line(s) in %s", skipped, self.path)
        return tasks

    # -------------------- writes --------------------

    def add(self, description: str) -> Task:
        """Append a new pending task and return it.

        Raises:
            InvalidDescription: If the description cannot be stored.
            StoreError: If the task file cannot be written.
        """
        validate_description(description, self.config.max_description_length)
        task = Task(id=self.next_id(), description=description)

        data = encode_task(task).encode("utf-8")
        if self._missing_final_newline():
            # Keep the new record off the end of an unterminated last line
            data = b"\n" + data

        try:
            with open(self.path, "ab") as f:
                f.write(data)
        except OSError as e:
            raise StoreError(f"Cannot open task file for writing: {e.strerror or e}") from e

        logger.debug("Appended task %d to %s", task.id, self.path)
        return task

    def set_status(self, task_id: int, completed: bool) -> EditOutcome:
        """Mark a task completed or pending.

        The file is rewritten even when no task matches.

        Raises:
            StoreError: If the rewrite fails; the task file is left as it was.
        """

        def _mark(task: Task) -> bytes:
            task.completed = completed
            return encode_task(task).encode("utf-8")

        found = self._rewrite(task_id, _mark)
        if found is None:
            return EditOutcome.NO_STORE
        return EditOutcome.UPDATED if found else EditOutcome.NOT_FOUND

    def delete(self, task_id: int) -> EditOutcome:
        """Remove a task permanently.

        Raises:
            StoreError: If the rewrite fails; the task file is left as it was.
        """
        found = self._rewrite(task_id, lambda task: None)
        if found is None:
            return EditOutcome.NO_STORE
        return EditOutcome.DELETED if found else EditOutcome.NOT_FOUND

    def _missing_final_newline(self) -> bool:
        try:
            with open(self.path, "rb") as f:
                f.seek(0, os.SEEK_END)
                if f.tell() == 0:
                    return False
                f.seek(-1, os.SEEK_END)
                return f.read(1) != b"\n"
        except FileNotFoundError:
            return False
        except OSError as e:
            raise StoreError(f"Cannot read task file: {e.strerror or e}") from e

    def _rewrite(self, task_id: int, replace: Callable[[Task], bytes | None]) -> bool | None:
        """Copy the task file through the scratch file, editing matching tasks.

        Every record whose id equals ``task_id`` is passed to ``replace``;
        its return value is written in place of the line, or nothing when it
        returns None. All other lines are copied unchanged, including a last
        line without a newline.

        Returns:
            None if the task file does not exist, else whether a task matched.
        """
        temp_path = self.config.temp_file

        try:
            source = open(self.path, "rb")
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StoreError(f"Cannot read task file: {e.strerror or e}") from e

        found = False
        with source:
            try:
                target = open(temp_path, "wb")
            except OSError as e:
                raise StoreError(f"Cannot create temporary file: {e.strerror or e}") from e

            try:
                with target:
                    for raw in source:
                        task = _decode_line(raw)
                        if task is None or task.id != task_id:
                            target.write(raw)
                            continue

                        found = True
                        replacement = replace(task)
                        if replacement is not None:
                            target.write(replacement)
            except OSError as e:
                temp_path.unlink(missing_ok=True)
                raise StoreError(f"Cannot rewrite task file: {e.strerror or e}") from e

        try:
            os.replace(temp_path, self.path)
        except OSError as e:
            temp_path.unlink(missing_ok=True)
            raise StoreError(f"Cannot replace task file: {e.strerror or e}") from e

        logger.debug("Rewrote %s (task %d %s)", self.path, task_id, "found" if found else "not found")
        return found
