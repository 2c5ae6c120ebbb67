# src/task_cli/tasks/task_store.py

from __future__ import annotations

import json
import locale
import logging
import math
import os
import shutil
import uuid
from collections.abc import Callable, Iterable
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, TypeVar

from ..errors import TaskStorageError, TaskValidationError
from .task_models import (
    DEFAULT_CATEGORY,
    Priority,
    Task,
    TaskStats,
    normalize_due_date,
    parse_due_date,
    parse_timestamp,
    utc_now_iso,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

SORT_KEYS: tuple[str, ...] = ("priority", "due", "date", "title")
STATUS_FILTERS: tuple[str, ...] = ("pending", "completed")

# Fields `update()` may replace. Everything else is fixed at creation.
EDITABLE_FIELDS: frozenset[str] = frozenset(
    {"title", "description", "priority", "category", "due_date", "completed"}
)

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


class TaskStore:
    """
    JSON file task store.

    Every operation reloads the whole list from disk, mutates it and writes it
    back (see `with_tasks`). Nothing is cached between calls, so the file is
    the only source of truth.

    Writes:
    - the previous primary file is copied to the backup path first
    - the new content goes to a temp sibling and is moved over the primary

    No locking: one process at a time.
    """

    def __init__(self, path: str | Path = "tasks.json", backup_path: str | Path | None = None) -> None:
        self._path = Path(path)
        if backup_path is None:
            backup_path = self._path.with_name(f"{self._path.stem}.backup{self._path.suffix}")
        self._backup_path = Path(backup_path)

        self._path.parent.mkdir(parents=True, exist_ok=True)
        if not self._path.exists():
            self.save_all([])
        logger.info("TaskStore ready path=%s total=%s", self._path, len(self.load_all()))

    @property
    def path(self) -> Path:
        return self._path

    @property
    def backup_path(self) -> Path:
        return self._backup_path

    # ---- low-level helpers ----

    def load_all(self) -> list[Task]:
        """Read the task file. Missing or unreadable data reads as an empty list."""
        try:
            raw = json.loads(self._path.read_text("utf-8"))
        except FileNotFoundError:
            logger.warning("Task file %s is missing; starting empty.", self._path)
            return []
        except (OSError, ValueError):
            logger.warning("Task file %s is unreadable; treating it as empty.", self._path, exc_info=True)
            return []

        if not isinstance(raw, list):
            logger.warning("Task file %s does not hold a list; treating it as empty.", self._path)
            return []

        tasks: list[Task] = []
        for i, item in enumerate(raw):
            if not isinstance(item, dict) or not item.get("id"):
                logger.warning("Skipping malformed task record #%d in %s", i, self._path)
                continue
            tasks.append(Task.from_dict(item))
        return tasks

    def save_all(self, tasks: Iterable[Task]) -> None:
        payload = json.dumps([t.to_dict() for t in tasks], ensure_ascii=False, indent=2)
        tmp = self._path.with_name(self._path.name + ".tmp")
        try:
            if self._path.exists():
                shutil.copyfile(self._path, self._backup_path)
            tmp.write_text(payload, "utf-8")
            os.replace(tmp, self._path)
        except OSError as e:
            logger.error("Failed to write task file %s: %s", self._path, e)
            raise TaskStorageError(f"Could not save tasks to {self._path}: {e.strerror or e}", self._path) from e

    def with_tasks(self, fn: Callable[[list[Task]], T]) -> T:
        """
        Reload -> fn(tasks) -> save.

        `fn` mutates the list in place and returns the operation's result.
        The file is rewritten only when the collection actually changed.
        """
        tasks = self.load_all()
        before = [t.to_dict() for t in tasks]
        result = fn(tasks)
        if [t.to_dict() for t in tasks] != before:
            self.save_all(tasks)
        return result

    @staticmethod
    def _find(tasks: list[Task], task_id: str) -> Task | None:
        for task in tasks:
            if task.id == task_id:
                return task
        return None

    # ---- public API ----

    def get_all(self) -> list[Task]:
        return self.load_all()

    def get_by_id(self, task_id: str) -> Task | None:
        return self._find(self.load_all(), task_id)

    def add(
        self,
        *,
        title: str,
        description: str = "",
        priority: Priority | str = Priority.MEDIUM,
        category: str = DEFAULT_CATEGORY,
        due_date: str | None = None,
        tags: list[str] | None = None,
    ) -> Task:
        if not title or not title.strip():
            raise TaskValidationError("Title is required")

        task = Task(
            id=str(uuid.uuid4()),
            title=title.strip(),
            description=description or "",
            priority=Priority.parse(priority or Priority.MEDIUM),
            category=(category or "").strip() or DEFAULT_CATEGORY,
            due_date=normalize_due_date(due_date),
            completed=False,
            completed_at=None,
            created_at=utc_now_iso(),
            tags=list(tags or []),
        )

        def _append(tasks: list[Task]) -> None:
            tasks.append(task)

        self.with_tasks(_append)
        logger.debug("Task added id=%s priority=%s category=%s", task.id, task.priority, task.category)
        return task

    def update(self, task_id: str, **fields: Any) -> Task | None:
        """Replace the supplied fields; fields not given are kept as they are."""
        unknown = set(fields) - EDITABLE_FIELDS
        if unknown:
            raise TaskValidationError(f"Cannot update field(s): {', '.join(sorted(unknown))}")

        changes = dict(fields)
        if "priority" in changes:
            changes["priority"] = Priority.parse(changes["priority"])
        if "due_date" in changes:
            changes["due_date"] = normalize_due_date(changes["due_date"])

        def _apply(tasks: list[Task]) -> Task | None:
            task = self._find(tasks, task_id)
            if task is None:
                return None
            for name, value in changes.items():
                if name == "completed":
                    task.set_completed(bool(value))
                else:
                    setattr(task, name, value)
            return task

        updated = self.with_tasks(_apply)
        if updated is None:
            logger.debug("Update skipped, task not found id=%s", task_id)
        else:
            logger.debug("Task updated id=%s fields=%s", task_id, sorted(changes))
        return updated

    def delete(self, task_id: str) -> bool:
        def _remove(tasks: list[Task]) -> bool:
            n = len(tasks)
            tasks[:] = [t for t in tasks if t.id != task_id]
            return len(tasks) < n

        removed = self.with_tasks(_remove)
        logger.debug("Task delete id=%s removed=%s", task_id, removed)
        return removed

    def toggle_complete(self, task_id: str) -> Task | None:
        def _toggle(tasks: list[Task]) -> Task | None:
            task = self._find(tasks, task_id)
            if task is not None:
                task.set_completed(not task.completed)
            return task

        task = self.with_tasks(_toggle)
        if task is not None:
            logger.debug("Task toggled id=%s completed=%s", task_id, task.completed)
        return task

    def clear_completed(self) -> int:
        def _clear(tasks: list[Task]) -> int:
            n = len(tasks)
            tasks[:] = [t for t in tasks if not t.completed]
            return n - len(tasks)

        removed = self.with_tasks(_clear)
        logger.debug("Cleared %d completed task(s)", removed)
        return removed

    def search(self, query: str) -> list[Task]:
        """Case-insensitive substring match on title, description, category and tags."""
        needle = query.lower()
        return [
            t
            for t in self.load_all()
            if needle in t.title.lower()
            or needle in t.description.lower()
            or needle in t.category.lower()
            or any(needle in tag.lower() for tag in t.tags)
        ]

    def filter(
        self,
        *,
        status: str | None = None,
        priority: Priority | str | None = None,
        category: str | None = None,
    ) -> list[Task]:
        if status is not None and status not in STATUS_FILTERS:
            raise TaskValidationError(f"Unknown status filter {status!r} (expected pending or completed)")
        wanted_priority = Priority.parse(priority) if priority is not None else None
        wanted_category = category.lower() if category is not None else None

        out: list[Task] = []
        for t in self.load_all():
            if status == "pending" and t.completed:
                continue
            if status == "completed" and not t.completed:
                continue
            if wanted_priority is not None and t.priority != wanted_priority:
                continue
            if wanted_category is not None and t.category.lower() != wanted_category:
                continue
            out.append(t)
        return out

    @staticmethod
    def sort(tasks: Iterable[Task], key: str, reverse: bool = False) -> list[Task]:
        """
        Stable sort over a copy of `tasks`.

        - priority: urgent, high, medium, low
        - due: ascending due date; undated tasks always come last
        - date: ascending creation time
        - title: locale collation, case-insensitive
        """
        items = list(tasks)

        if key == "priority":
            items.sort(key=lambda t: t.priority.rank)
        elif key == "due":
            dated = [t for t in items if parse_due_date(t.due_date) is not None]
            undated = [t for t in items if parse_due_date(t.due_date) is None]
            dated.sort(key=lambda t: parse_due_date(t.due_date))  # type: ignore[arg-type, return-value]
            if reverse:
                dated.reverse()
                undated.reverse()
            return dated + undated
        elif key == "date":
            items.sort(key=lambda t: parse_timestamp(t.created_at) or _EPOCH)
        elif key == "title":
            items.sort(key=lambda t: locale.strxfrm(t.title.casefold()))
        else:
            raise TaskValidationError(f"Unknown sort key {key!r} (expected one of: {', '.join(SORT_KEYS)})")

        if reverse:
            items.reverse()
        return items

    def get_stats(self) -> TaskStats:
        tasks = self.load_all()
        total = len(tasks)
        completed = sum(1 for t in tasks if t.completed)

        by_priority = {p: 0 for p in Priority}
        categories: dict[str, int] = {}
        for t in tasks:
            by_priority[t.priority] += 1
            categories[t.category] = categories.get(t.category, 0) + 1

        # Half-up rounding (50.5 -> 51), not Python's banker's rounding.
        rate = math.floor(completed * 100 / total + 0.5) if total else 0

        return TaskStats(
            total=total,
            completed=completed,
            pending=total - completed,
            completion_rate=rate,
            by_priority=by_priority,
            categories=categories,
        )
