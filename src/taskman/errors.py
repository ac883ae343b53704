"""Exceptions raised by taskman."""

from __future__ import annotations


class TaskmanError(Exception):
    """Base class for taskman errors."""


class ConfigError(TaskmanError):
    """The storage location could not be resolved or created."""


class StoreError(TaskmanError):
    """The task file could not be rewritten."""


class InvalidDescription(TaskmanError, ValueError):
    """A task description cannot be stored as a single record."""
