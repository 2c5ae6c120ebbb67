# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from task_cli.core.state import AppState
from task_cli.tasks.task_store import TaskStore

from .fakes import ScriptedPrompts


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the bootstrap.

    We intentionally use a SimpleNamespace rather than reading the real
    environment, to keep unit tests isolated and deterministic.
    """
    data_dir = tmp_path / "data"
    return SimpleNamespace(
        app_name="task-cli",
        log_level="WARNING",
        data_dir=data_dir,
        tasks_path=data_dir / "tasks.json",
        backup_path=data_dir / "tasks.backup.json",
        log_dir=tmp_path / "logs",
        clear_screen=False,
        headless=True,
    )


@pytest.fixture()
def store(settings: SimpleNamespace) -> TaskStore:
    """A real TaskStore on a temporary file: file handling is part of what we test."""
    return TaskStore(settings.tasks_path, settings.backup_path)


@pytest.fixture()
def prompts() -> ScriptedPrompts:
    return ScriptedPrompts()


@pytest.fixture()
def state(settings: SimpleNamespace, store: TaskStore, prompts: ScriptedPrompts) -> AppState:
    return AppState(settings=settings, store=store, prompts=prompts)
