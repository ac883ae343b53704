"""Configuration and storage paths for taskman."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel, Field

from taskman.errors import ConfigError

logger = logging.getLogger(__name__)

# Storage layout, relative to the user's home directory
TASK_DIR_SUFFIX = Path(".local") / "taskmanager"
TASK_FILENAME = "tasks.txt"
TEMP_FILENAME = "temp_tasks.txt"

# Longest description accepted by `add`
MAX_DESCRIPTION_LENGTH = 255

DIRECTORY_MODE = 0o700


class TaskmanConfig(BaseModel):
    """Resolved storage configuration, built once at startup."""

    home: Path
    max_description_length: int = Field(default=MAX_DESCRIPTION_LENGTH, gt=0)

    @property
    def directory(self) -> Path:
        """Directory holding the task file."""
        return self.home / TASK_DIR_SUFFIX

    @property
    def task_file(self) -> Path:
        """The single file holding every task record."""
        return self.directory / TASK_FILENAME

    @property
    def temp_file(self) -> Path:
        """Scratch file used while rewriting the task file."""
        return self.directory / TEMP_FILENAME

    @classmethod
    def from_environment(cls, environ: Mapping[str, str] | None = None) -> TaskmanConfig:
        """Build the configuration from the ``HOME`` environment variable.

        Raises:
            ConfigError: If ``HOME`` is unset or empty.
        """
        if environ is None:
            environ = os.environ

        home = environ.get("HOME")
        if not home:
            raise ConfigError("HOME environment variable not set. Cannot determine task file path.")

        return cls(home=Path(home))

    def ensure_directory(self) -> Path:
        """Create the storage directory with owner-only permissions.

        An existing directory is left alone, including one created by a
        concurrent invocation between the check and the create.

        Raises:
            ConfigError: If the directory cannot be created.
        """
        directory = self.directory
        if directory.is_dir():
            return directory

        try:
            directory.mkdir(mode=DIRECTORY_MODE, parents=True, exist_ok=True)
        except OSError as e:
            raise ConfigError(f"Cannot create task directory {directory}: {e.strerror or e}") from e

        logger.debug("Created task directory %s", directory)
        return directory
