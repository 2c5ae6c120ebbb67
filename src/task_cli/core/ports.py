# src/task_cli/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the application loop.

The loop depends on Protocols instead of concrete implementations, so tests
can swap in scripted prompts or an in-memory store.
"""

from collections.abc import Iterable, Sequence
from typing import Any, Protocol

from ..tasks.task_models import Priority, Task, TaskStats
from ..ui.prompts import MultiSelectResult, SelectResult


class TaskRepo(Protocol):
    def get_all(self) -> list[Task]: ...

    def get_by_id(self, task_id: str) -> Task | None: ...

    def add(
        self,
        *,
        title: str,
        description: str = "",
        priority: Priority | str = Priority.MEDIUM,
        category: str = "General",
        due_date: str | None = None,
        tags: list[str] | None = None,
    ) -> Task: ...

    def update(self, task_id: str, **fields: Any) -> Task | None: ...

    def delete(self, task_id: str) -> bool: ...

    def toggle_complete(self, task_id: str) -> Task | None: ...

    def clear_completed(self) -> int: ...

    def search(self, query: str) -> list[Task]: ...

    def filter(
        self,
        *,
        status: str | None = None,
        priority: Priority | str | None = None,
        category: str | None = None,
    ) -> list[Task]: ...

    def sort(self, tasks: Iterable[Task], key: str, reverse: bool = False) -> list[Task]: ...

    def get_stats(self) -> TaskStats: ...


class Prompter(Protocol):
    """What the loop needs from the prompt engine."""

    interactive: bool

    async def select(self, options: Sequence[str], title: str) -> SelectResult: ...

    async def multi_select(self, options: Sequence[str], title: str) -> MultiSelectResult: ...

    async def confirm(self, message: str, options: Sequence[str] = ("Yes", "Cancel")) -> SelectResult: ...

    async def wait_for_key(self, message: str = "Press any key to continue...") -> None: ...

    async def ask(self, message: str) -> str: ...

    def clear(self) -> None: ...

    def write(self, lines: Iterable[str] | str) -> None: ...
