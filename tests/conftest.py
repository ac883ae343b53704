"""Shared fixtures for taskman tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from taskman.config import TaskmanConfig
from taskman.store import TaskStore


@pytest.fixture
def home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point HOME at a temporary directory."""
    home_dir = tmp_path / "home"
    home_dir.mkdir()
    monkeypatch.setenv("HOME", str(home_dir))
    return home_dir


@pytest.fixture
def config(home: Path) -> TaskmanConfig:
    """Configuration rooted at the temporary home, with its directory created."""
    config = TaskmanConfig(home=home)
    config.ensure_directory()
    return config


@pytest.fixture
def store(config: TaskmanConfig) -> TaskStore:
    """A store over an (initially absent) task file."""
    return TaskStore(config)


@pytest.fixture
def task_file(config: TaskmanConfig) -> Path:
    """Path of the task file."""
    return config.task_file


@pytest.fixture
def sample_task_file(task_file: Path) -> Path:
    """A task file with two tasks and a malformed line between them."""
    task_file.write_bytes(b"1,0,buy milk\nnot a task\n2,1,pay rent\n")
    return task_file
