# src/task_cli/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from .ports import Prompter, TaskRepo


@dataclass
class AppState:
    # Settings object (real Settings or a test namespace with the same attributes).
    settings: object

    store: TaskRepo
    prompts: Prompter
