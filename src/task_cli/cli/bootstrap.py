# src/task_cli/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures the local data directory exists,
- wires the concrete store and prompt engine into AppState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.state import AppState
from ..tasks.task_store import TaskStore
from ..ui.engine import PromptEngine

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.tasks_path.parent.mkdir(parents=True, exist_ok=True)
    settings.backup_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None, prompts=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    if prompts is None:
        prompts = PromptEngine(
            interactive=False if settings.headless else None,
            clear_screen=settings.clear_screen,
        )
    logger.debug("Prompt engine interactive=%s", prompts.interactive)

    return AppState(
        settings=settings,
        store=TaskStore(settings.tasks_path, settings.backup_path),
        prompts=prompts,
    )
