# src/task_cli/errors.py

"""Exceptions raised by the task store and surfaced by the menu loop."""

from __future__ import annotations


class TaskCliError(Exception):
    """Base class for errors the application loop knows how to report."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class TaskValidationError(TaskCliError, ValueError):
    """Bad input for a store operation (empty title, unknown priority, bad date...)."""


class TaskStorageError(TaskCliError):
    """The task file could not be written."""

    def __init__(self, message: str, path: object | None = None) -> None:
        super().__init__(message)
        self.path = path
